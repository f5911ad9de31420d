from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from ..encoding import decode_text
from ..errors import EncodingError
from ..issues import IssueLog
from .columns import FILENAME, NAME, ColumnSet
from .model import FIRST_DATA_ROW, HEADER_ROW, Cell, Row, Sheet
from .objects import DatObject, ParamKind, parse_objects
from .strings import SharedStringPool

log = logging.getLogger("datsheet.export")

Decoder = Callable[[bytes], str]


class SheetBuilder:
    """
    Lays out the objects of one directory as a sheet.

    Every object becomes one row (from row 2 on), every distinct key one
    column in first-seen order after the reserved ``name`` and ``filename``
    columns. Strings are interned into the workbook-wide pool as they are
    placed; the header row is only synthesized in build(), once all keys
    are known.
    """

    def __init__(
            self,
            name: str,
            strings: SharedStringPool,
            issues: IssueLog,
            decoder: Decoder = decode_text,
    ) -> None:
        self.name = name
        self.strings = strings
        self.issues = issues
        self.columns = ColumnSet()
        self.rows: List[Row] = []
        self._next_row = FIRST_DATA_ROW
        self._decode = decoder

    def add_file(self, path: Path) -> int:
        """Parse one object file and add its objects; returns the number of rows added."""
        try:
            raw = path.read_bytes()
        except OSError as exc:
            self.issues.warn("FR0", str(path), f"File could not be read ({exc.strerror}). File was skipped.")
            return 0
        try:
            text = self._decode(raw)
        except EncodingError as exc:
            self.issues.warn(
                "UE0", str(path),
                f"An error occurred while trying to detect file encoding ({exc}). File was skipped. "
                "Saving it under a Unicode encoding will most likely fix this.",
            )
            return 0

        result = parse_objects(text, source=str(path))
        self.issues.extend(result.issues)
        added = 0
        for obj in result.objects:
            if self.add_object(obj, filename=path.stem) is not None:
                added += 1
        log.debug("%s: %d object(s) from %s", self.name, added, path)
        return added

    def add_object(self, obj: DatObject, filename: Optional[str] = None) -> Optional[Row]:
        """
        Place ``obj`` in the next row. ``filename`` (the source file stem) is
        recorded in the filename column when the object's name would not
        lead back to it.
        """
        if not len(obj):
            return None
        row = Row(self._next_row)
        for param in obj:
            col = self.columns.assign(param.key)
            row.cells[col] = self._cell(param.kind, param.value)
        if filename and FILENAME not in obj and obj.get(NAME) != filename:
            row.cells[self.columns.index_of(FILENAME)] = self._cell(ParamKind.STRING, filename)
        self.rows.append(row)
        self._next_row += 1
        return row

    def _cell(self, kind: ParamKind, value: str) -> Cell:
        if kind is ParamKind.NUMBER:
            return Cell.number(value)
        return Cell.shared(self.strings.intern(value))

    def build(self) -> Sheet:
        header = Row(HEADER_ROW)
        for col, key in self.columns:
            header.cells[col] = Cell.shared(self.strings.intern(key))
        return Sheet(self.name, self.columns.keys, [header] + list(self.rows))
