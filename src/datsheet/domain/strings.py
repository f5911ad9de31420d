from __future__ import annotations

from typing import Dict, Iterable, Iterator, List


class SharedStringPool:
    """
    Deduplicated, append-only table of strings referenced by index.

    Indices are assigned in first-seen order and never change, so cells can
    store the index as soon as a value is interned.
    """

    def __init__(self) -> None:
        self._strings: List[str] = []
        self._index: Dict[str, int] = {}

    @classmethod
    def from_strings(cls, strings: Iterable[str]) -> "SharedStringPool":
        """
        Pool as read from a workbook. Foreign workbooks may hold the same
        string twice; the first index wins for lookups, all stay resolvable.
        """
        pool = cls()
        for s in strings:
            pool._index.setdefault(s, len(pool._strings))
            pool._strings.append(s)
        return pool

    def intern(self, value: str) -> int:
        idx = self._index.get(value)
        if idx is None:
            idx = len(self._strings)
            self._strings.append(value)
            self._index[value] = idx
        return idx

    def resolve(self, index: int) -> str:
        if index < 0:
            raise IndexError(f"shared string index {index} out of range")
        return self._strings[index]

    def __contains__(self, value: object) -> bool:
        return value in self._index

    def __len__(self) -> int:
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)
