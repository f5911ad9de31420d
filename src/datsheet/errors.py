from __future__ import annotations


class DatSheetError(Exception):
    """
    Fatal error that aborts the whole run.

    Every subclass carries a short machine-readable code which is printed in
    front of the message, e.g. ``ZIP:No such file: pak.xlsx``.
    """

    code = "ERR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code}:{super().__str__()}"


class ContainerError(DatSheetError):
    """The workbook archive cannot be opened, created or read."""

    code = "ZIP"


class MarkupError(DatSheetError):
    """A structural entry of the workbook is not valid XML."""

    code = "XML"


class RelationshipError(DatSheetError):
    """A relationship needed to locate a workbook part is missing."""

    code = "REL"


class TreeError(DatSheetError):
    """The directory tree cannot be read."""

    code = "URD"


class ConfigError(DatSheetError):
    code = "CFG"


class EncodingError(ValueError):
    """Raw bytes could not be decoded to text. Recoverable, scoped to one file."""
