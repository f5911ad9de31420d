from .base import BackendBase, BackendOptions
from .dat_backend import DatBackend, DatWriter
from .xlsx_backend import ExcelBackend
from .router import make_backend

__all__ = ["BackendBase", "BackendOptions", "DatBackend", "DatWriter", "ExcelBackend", "make_backend"]
