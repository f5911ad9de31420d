from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from ..issues import IssueLog
from .columns import FILENAME, NAME, ColumnSet, cell_ref
from .model import BOOLEAN, INLINE_STRING, NUMBER, SHARED_STRING, Cell, Row, Sheet
from .objects import DatObject, Parameter
from .strings import SharedStringPool

log = logging.getLogger("datsheet.import")


@dataclass
class ExpandedRow:
    """One data row turned back into an object, with the file it belongs to."""
    row: int
    filename: str
    obj: DatObject


class RowExpander:
    """
    Rebuilds objects from the rows of one sheet.

    Row 1 names the parameter of every column. In each data row the
    ``filename`` column decides the output file; without it the ``name``
    column does. Rows that resolve to no file at all are reported and
    dropped.
    """

    def __init__(self, sheet: Sheet, strings: SharedStringPool, issues: IssueLog) -> None:
        self.sheet = sheet
        self.strings = strings
        self.issues = issues
        self.keys: Dict[int, str] = self._header_keys()

    def _where(self, row: int, col: Optional[int] = None) -> str:
        if col is None:
            return f"{self.sheet.name}({row})"
        return f"{self.sheet.name}({cell_ref(col, row)})"

    def _header_keys(self) -> Dict[int, str]:
        header = self.sheet.header()
        keys: Dict[int, str] = {}
        if header is None:
            return keys
        for col, cell in header.ordered():
            value = self.resolve(cell, header.number, col)
            if value:
                keys[col] = ColumnSet.fold(value.strip())
        return keys

    def resolve(self, cell: Cell, row: int, col: int) -> Optional[str]:
        """
        Value of ``cell`` as text, or None if its declared type cannot be
        mapped to a parameter value (a warning is recorded).
        """
        if cell.type in ("", NUMBER):
            return cell.raw
        if cell.type == SHARED_STRING:
            try:
                return self.strings.resolve(int(cell.raw))
            except (ValueError, IndexError):
                self.issues.warn("SST0", self._where(row, col), f"Shared string index {cell.raw!r} does not exist.")
                return None
        if cell.type == BOOLEAN:
            return "true" if cell.raw.strip() not in ("", "0") else "false"
        if cell.type == INLINE_STRING:
            return cell.raw
        self.issues.warn(
            f"DATAT{cell.type}", self._where(row, col),
            f"Data type at {self._where(row, col)} is not of expected type! "
            "Expected types: Number, Boolean, String, InlineString",
        )
        return None

    def _single_line(self, value: str, key: str, row: int, col: int) -> str:
        """A parameter is one line of text; anything after a line break is dropped."""
        if "\n" not in value and "\r" not in value:
            return value
        first = value.replace("\r", "\n").split("\n", 1)[0].strip()
        self.issues.warn(
            "ML0", self._where(row, col),
            f"Value of '{key}' spans several lines; only the first line {first!r} was kept.",
        )
        return first

    def expand(self, row: Row) -> Optional[ExpandedRow]:
        """
        Turn one data row into an object. The ``filename`` column wins over
        ``name`` as output file; rows without either, and rows with nothing
        but a filename, are reported and dropped.
        """
        explicit: Optional[str] = None
        obj = DatObject()
        for col, cell in row.ordered():
            key = self.keys.get(col)
            if not key:
                continue
            value = self.resolve(cell, row.number, col)
            if value is None:
                continue
            value = self._single_line(value.strip(), key, row.number, col)
            if not value:
                continue
            if key == FILENAME:
                if explicit is not None:
                    self.issues.warn("OV0", self._where(row.number, col), f"Parameter '{key}' overwritten.")
                explicit = value
                continue
            if obj.set(Parameter.of(key, value)) is not None:
                self.issues.warn("OV0", self._where(row.number, col), f"Parameter '{key}' overwritten.")
        log.debug("%s: row %d has %d parameter(s)", self.sheet.name, row.number, len(obj))

        filename = explicit or obj.get(NAME)
        if not filename:
            self.issues.warn(
                "FDATOUT1", self._where(row.number),
                f"Object at row {row.number} does not contain a 'name'! No dat file was generated.",
            )
            return None
        if not len(obj):
            self.issues.warn(
                "FDATOUT6", self._where(row.number),
                f"Object at row {row.number} has no parameters besides its filename. Row was skipped.",
            )
            return None
        return ExpandedRow(row.number, filename, obj)

    def __iter__(self) -> Iterator[ExpandedRow]:
        for row in self.sheet.data_rows():
            expanded = self.expand(row)
            if expanded is not None:
                yield expanded
