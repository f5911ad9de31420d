from __future__ import annotations
import logging

FORMAT = "%(levelname)s  %(name)s:%(message)s"


def setup_logging(verbosity: int) -> None:
    """
    - 0  -> WARNING (recoverable issues only)
    - 1  -> INFO    (plus one line per sheet)
    - 2+ -> DEBUG   (plus every file and row)
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=FORMAT)
    logging.getLogger("datsheet").setLevel(level)
