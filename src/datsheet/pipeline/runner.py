from __future__ import annotations

import logging
from typing import List, Optional

from ..config import ConvertConfig
from ..domain.model import Workbook
from ..io_backends.base import BackendOptions
from ..io_backends.router import make_backend
from ..issues import Issue, IssueLog

log = logging.getLogger("datsheet.run")

Issues = List[Issue]


def run_conversion(
        in_kind: str,
        in_path: str,
        out_kind: str,
        out_path: str,
        config: Optional[ConvertConfig] = None,
) -> Issues:
    """
    Minimal orchestrator:
      - read the whole data set from the input backend into a Workbook
      - write it with the output backend
      - return the recoverable issues recorded on the way

    Fatal errors (DatSheetError) propagate to the caller.
    """
    options = BackendOptions(config=config or ConvertConfig(), issues=IssueLog(logging.getLogger("datsheet")))
    loader = make_backend(in_kind)
    saver = make_backend(out_kind)

    workbook: Workbook = loader.read_multi(in_path, options)
    saver.write_multi(workbook, out_path, options)

    log.info("%s -> %s: %d sheet(s), %d warning(s)", in_path, out_path, len(workbook.sheets), len(options.issues))
    return list(options.issues)


def run_export(root_dir: str, workbook: str, config: Optional[ConvertConfig] = None) -> Issues:
    """Directory tree of object files -> xlsx workbook."""
    return run_conversion("dat", root_dir, "xlsx", workbook, config)


def run_import(workbook: str, out_dir: str, config: Optional[ConvertConfig] = None) -> Issues:
    """xlsx workbook -> object files below ``out_dir``."""
    return run_conversion("xlsx", workbook, "dat", out_dir, config)
