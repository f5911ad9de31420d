"""
Text form of object description files.

A file holds one or more objects separated by lines starting with ``-``::

    # a bus
    obj=vehicle
    Name=bus
    speed=80
    ---
    obj=vehicle
    name=truck

Keys are merged case-insensitively, values made only of digits are numbers,
and ``#`` lines are comments.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from ..issues import Issue

COMMENT = "#"
SEPARATOR = "---"


class ParamKind(enum.Enum):
    NUMBER = "n"
    STRING = "s"
    COMMENT = "c"


def classify(key: str, value: str) -> ParamKind:
    if key.startswith(COMMENT):
        return ParamKind.COMMENT
    if value.isascii() and value.isdigit():
        return ParamKind.NUMBER
    return ParamKind.STRING


@dataclass(frozen=True)
class Parameter:
    key: str
    value: str
    kind: ParamKind

    @classmethod
    def of(cls, key: str, value: str) -> "Parameter":
        return cls(key, value, classify(key, value))

    @property
    def is_comment(self) -> bool:
        return self.kind is ParamKind.COMMENT


class DatObject:
    """Ordered parameters of one object; a key occurs at most once."""

    def __init__(self, params: Iterable[Parameter] = ()) -> None:
        self._params: Dict[str, Parameter] = {}
        for p in params:
            self.set(p)

    def set(self, param: Parameter) -> Optional[Parameter]:
        """
        Add ``param``. An existing parameter with the same key is replaced in
        place and returned.
        """
        previous = self._params.get(param.key)
        self._params[param.key] = param
        return previous

    def get(self, key: str) -> Optional[str]:
        p = self._params.get(key)
        return p.value if p is not None else None

    def pairs(self) -> Dict[str, str]:
        return {k: p.value for k, p in self._params.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params.values())

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DatObject):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"DatObject({list(self._params.values())!r})"


@dataclass
class ParseResult:
    objects: List[DatObject] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)


# ---- Parse ------------------------------------------------------------------


def parse_objects(text: str, source: str = "<text>") -> ParseResult:
    """
    Split decoded text into objects. Never raises: malformed lines are
    skipped and reported in ``ParseResult.issues``.
    """
    result = ParseResult()
    current = DatObject()

    def _close() -> None:
        nonlocal current
        if len(current):
            result.objects.append(current)
        current = DatObject()

    for lineno, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        where = f"{source}:{lineno}"
        raw_key, _, raw_value = line.partition("=")
        key = raw_key.strip(" \t")

        if key.startswith("-"):
            _close()
            continue

        if line.startswith("\r") or not key:
            result.issues.append(
                Issue("SL0", where, f"Line has no parameter name and was skipped: {line.strip()!r}")
            )
            continue

        if key.startswith(COMMENT):
            # whole line, so '=' inside the comment survives
            value = line.strip()[len(COMMENT):].strip()
            key = COMMENT
        else:
            value = raw_value.strip()
            key = key.lower()

        if not value:
            result.issues.append(
                Issue("NV0", where, f"Value is empty, line was ignored: {line.strip()!r}")
            )
            continue

        if current.set(Parameter.of(key, value)) is not None:
            result.issues.append(Issue("OV0", where, f"Parameter '{key}' overwritten."))

    _close()
    return result


# ---- Render -----------------------------------------------------------------


def render_param(param: Parameter) -> str:
    if param.key.startswith(COMMENT):
        return f"{param.key} {param.value}"
    return f"{param.key}={param.value}"


def render_object(obj: Iterable[Parameter]) -> str:
    """One line per parameter, each terminated by a newline."""
    return "".join(render_param(p) + "\n" for p in obj)


def render_objects(objects: Iterable[Iterable[Parameter]], separator: str = SEPARATOR) -> str:
    return f"{separator}\n".join(render_object(o) for o in objects)
