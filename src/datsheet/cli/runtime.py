from __future__ import annotations
import sys
import traceback
from typing import Optional, Protocol

from ..errors import DatSheetError


class MainFunc(Protocol):
    def __call__(self, argv: Optional[list[str]] = None) -> int: ...


def run_cli(main_func: MainFunc) -> None:
    """
    Lightweight CLI wrapper for consistent process exit & error UX.

    - Calls main_func(argv) and exits with its return code.
    - Fatal conversion errors print 'Error: <CODE>:<message>' and exit 1.
    - Shows full tracebacks only if '--debug' present OR verbosity >= 2 ('-vv').
    """
    argv = sys.argv[1:]
    debug = "--debug" in argv
    # cheap peek at -v / -vv; main() parses them properly
    verbosity = sum(len(a) - 1 for a in argv if a.startswith("-v") and set(a[1:]) == {"v"})

    try:
        code = main_func(argv)
    except SystemExit:
        # honor explicit sys.exit / argparse usage errors
        raise
    except Exception as e:
        if debug or verbosity >= 2:
            traceback.print_exc()
        elif isinstance(e, DatSheetError):
            print(f"Error: {e}", file=sys.stderr)
        else:
            print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        raise SystemExit(1)
    else:
        raise SystemExit(code)
