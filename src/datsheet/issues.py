from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Issue:
    """
    A recoverable problem: the affected line, object, file or row was skipped
    (or overwritten) and the run went on.

    - code:    stable machine-readable prefix (e.g. ``OV0``, ``FDATOUT1``)
    - source:  file path or ``sheet(row)`` the issue belongs to
    - message: human-readable explanation
    """
    code: str
    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}:{self.source}: {self.message}"


class IssueLog:
    """
    Collects issues of one run and logs each one as a warning when it is
    recorded, so scripts can grep the diagnostic stream for the code.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or logging.getLogger("datsheet")
        self._issues: List[Issue] = []

    def warn(self, code: str, source: str, message: str) -> Issue:
        return self.add(Issue(code, source, message))

    def add(self, issue: Issue) -> Issue:
        self._issues.append(issue)
        self._log.warning("%s", issue)
        return issue

    def extend(self, issues: Iterable[Issue]) -> None:
        for issue in issues:
            self.add(issue)

    def codes(self) -> List[str]:
        return [i.code for i in self._issues]

    def __iter__(self) -> Iterator[Issue]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)
