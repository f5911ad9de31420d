from .runner import run_conversion, run_export, run_import

__all__ = ["run_conversion", "run_export", "run_import"]
