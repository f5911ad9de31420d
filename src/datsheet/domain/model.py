from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .strings import SharedStringPool

HEADER_ROW = 1
FIRST_DATA_ROW = 2

# declared cell types as stored in the worksheet ("t" attribute)
NUMBER = "n"
SHARED_STRING = "s"
BOOLEAN = "b"
INLINE_STRING = "inlineStr"


@dataclass(frozen=True)
class Cell:
    """
    One cell as it sits in the worksheet: the declared type and the literal
    text. For shared strings ``raw`` is the pool index as text.
    """
    type: str
    raw: str

    @classmethod
    def number(cls, value: str) -> "Cell":
        return cls(NUMBER, value)

    @classmethod
    def shared(cls, index: int) -> "Cell":
        return cls(SHARED_STRING, str(index))


@dataclass
class Row:
    number: int
    cells: Dict[int, Cell] = field(default_factory=dict)

    def ordered(self) -> Iterator[tuple[int, Cell]]:
        """Cells in column order."""
        for col in sorted(self.cells):
            yield col, self.cells[col]


@dataclass
class Sheet:
    name: str
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    def header(self) -> Optional[Row]:
        for row in self.rows:
            if row.number == HEADER_ROW:
                return row
        return None

    def data_rows(self) -> Iterator[Row]:
        for row in self.rows:
            if row.number > HEADER_ROW:
                yield row


@dataclass
class Workbook:
    sheets: List[Sheet] = field(default_factory=list)
    strings: SharedStringPool = field(default_factory=SharedStringPool)
    title: str = ""

    def sheet(self, name: str) -> Sheet:
        for s in self.sheets:
            if s.name == name:
                return s
        raise KeyError(name)

    @property
    def sheet_names(self) -> List[str]:
        return [s.name for s in self.sheets]
