from __future__ import annotations

from typing import Dict, Type

from .base import BackendBase
from .dat_backend import DatBackend
from .xlsx_backend import ExcelBackend


# Registry of available backends keyed by "kind"
_BACKENDS: Dict[str, Type[BackendBase]] = {
    "dat": DatBackend,
    "xlsx": ExcelBackend,
}


def make_backend(kind: str) -> BackendBase:
    """
    Factory returning an instance of the requested backend.

    Parameters
    ----------
    kind : str
        Short identifier used in config/CLI ('dat' or 'xlsx').

    Returns
    -------
    BackendBase
        Fresh instance of the backend.

    Raises
    ------
    KeyError
        If `kind` is unknown.
    """
    k = (kind or "").strip().lower()
    cls = _BACKENDS.get(k)
    if cls is None:
        available = ", ".join(sorted(_BACKENDS))
        raise KeyError(f"Unknown backend kind '{kind}'. Available: {available}")
    return cls()
