from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from ..config import ConvertConfig
from ..domain.model import Workbook
from ..issues import IssueLog


@dataclass
class BackendOptions:
    """
    Settings shared by all backends of one run.

    - config: layout settings (extension, sheet name characters, separator)
    - issues: collector for recoverable problems; backends record into it
              instead of raising
    - extra:  escape hatch for backend-specific flags
    """
    config: ConvertConfig = field(default_factory=ConvertConfig)
    issues: IssueLog = field(default_factory=lambda: IssueLog(logging.getLogger("datsheet")))
    extra: Dict[str, Any] = field(default_factory=dict)


class BackendBase:
    """
    A representation of the whole data set: reads it into a Workbook and
    writes a Workbook out again.
    """

    def read_multi(self, path: str, options: BackendOptions | None = None) -> Workbook:
        raise NotImplementedError

    def write_multi(self, workbook: Workbook, path: str, options: BackendOptions | None = None) -> None:
        raise NotImplementedError
