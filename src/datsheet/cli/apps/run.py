from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from datsheet import __version__
from datsheet.cli.logging_utils import setup_logging
from datsheet.cli.runtime import run_cli
from datsheet.config import load_config
from datsheet.pipeline import run_export, run_import

log = logging.getLogger("datsheet.run")

VERSION_TEXT = (
    f"datSheet {__version__}\n"
    "Converts trees of .dat object files to xlsx workbooks and back.\n"
    "Built on charset-normalizer <https://github.com/jawah/charset_normalizer> and PyYAML <https://pyyaml.org>."
)


# ---------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------
def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="datsheet",
        usage="%(prog)s [options] <workbook>...\n       %(prog)s -i [options] <dir> <workbook>",
        description="Unpack xlsx workbooks into .dat object files, or pack a directory tree of .dat files "
                    "into one workbook (one sheet per directory, one row per object).",
        epilog="supported file types: XLSX",
    )
    p.add_argument("paths", nargs="*", metavar="path", help="workbook(s) to unpack; with -i: <dir> <workbook>")
    p.add_argument("-i", "--import", dest="pack", action="store_true",
                   help="Create a workbook from one directory tree")
    p.add_argument("-o", "--output", default=".",
                   help="Directory the object files are unpacked into (default: current directory)")
    p.add_argument("--config", help="YAML config (extension, join_char, root_sheet, separator, application)")

    # logging options
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (repeatable)")
    p.add_argument("--debug", action="store_true", help="Show full tracebacks on errors")
    p.add_argument("-V", "--version", action="version", version=VERSION_TEXT)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.paths:
        parser.error("NFN:No file specified!")
    if args.pack and len(args.paths) != 2:
        parser.error("NFN:--import needs exactly <dir> <workbook>")

    setup_logging(args.verbose)
    config = load_config(args.config)

    issues = []
    if args.pack:
        root_dir, workbook = args.paths
        issues += run_export(root_dir, workbook, config)
    else:
        out_dir = Path(args.output)
        for workbook in args.paths:
            issues += run_import(workbook, str(out_dir), config)

    if issues:
        print(f"Finished with {len(issues)} warning(s).")
    else:
        print("Finished without errors.")
    return 0


def cli() -> None:
    run_cli(main)


if __name__ == "__main__":
    cli()
