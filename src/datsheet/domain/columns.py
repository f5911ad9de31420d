from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List, Tuple

NAME = "name"
FILENAME = "filename"
RESERVED_COLUMNS: Tuple[str, ...] = (NAME, FILENAME)

_CELL_REF = re.compile(r"^([A-Za-z]+)([0-9]+)$")


# ---- Letter addresses -------------------------------------------------------


def column_letter(index: int) -> str:
    """
    Zero-based column index -> spreadsheet letters.

    Bijective base 26 (no zero digit): 0 -> A, 25 -> Z, 26 -> AA,
    701 -> ZZ, 702 -> AAA.
    """
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    letters = []
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def column_index(letters: str) -> int:
    """Inverse of column_letter; case-insensitive."""
    if not letters or not letters.isascii() or not letters.isalpha():
        raise ValueError(f"invalid column letters {letters!r}")
    n = 0
    for ch in letters.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def cell_ref(column: int, row: int) -> str:
    """(27, 12) -> 'AB12'"""
    return f"{column_letter(column)}{row}"


def split_cell_ref(ref: str) -> Tuple[int, int]:
    """'AB12' -> (27, 12)"""
    m = _CELL_REF.match(ref or "")
    if not m:
        raise ValueError(f"invalid cell reference {ref!r}")
    return column_index(m.group(1)), int(m.group(2))


# ---- Key -> column assignment -------------------------------------------------


class ColumnSet:
    """
    Parameter keys of one sheet in first-seen order.

    Keys are lowercased before lookup so ``Name`` and ``name`` share a column,
    except comment markers which are kept literally. ``name`` and
    ``filename`` always occupy columns 0 and 1.
    """

    def __init__(self, seed: Iterable[str] = RESERVED_COLUMNS) -> None:
        self._keys: List[str] = []
        self._index: Dict[str, int] = {}
        for key in seed:
            self.assign(key)

    @staticmethod
    def fold(key: str) -> str:
        return key if key.startswith("#") else key.lower()

    def assign(self, key: str) -> int:
        folded = self.fold(key)
        idx = self._index.get(folded)
        if idx is None:
            idx = len(self._keys)
            self._keys.append(folded)
            self._index[folded] = idx
        return idx

    def index_of(self, key: str) -> int:
        return self._index[self.fold(key)]

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.fold(key) in self._index

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        return iter(enumerate(self._keys))

    def __len__(self) -> int:
        return len(self._keys)
