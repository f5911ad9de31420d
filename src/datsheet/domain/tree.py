from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterator, List, Optional, Tuple

from ..config import ConvertConfig
from ..errors import TreeError
from ..issues import IssueLog

log = logging.getLogger("datsheet.export")

# longest sheet name spreadsheet applications accept
MAX_SHEET_NAME = 31


@dataclass(frozen=True)
class SheetSource:
    """A directory that becomes one sheet, with its object files in order."""
    name: str
    directory: Path
    files: Tuple[Path, ...]


class TreeMapper:
    """
    Directory <-> sheet name mapping.

    ``vehicles/road`` becomes ``vehicles;road``; the root directory itself is
    the placeholder sheet ``;``.
    """

    def __init__(self, config: Optional[ConvertConfig] = None) -> None:
        self.config = config or ConvertConfig()

    # -- names ---------------------------------------------------------------

    def sheet_name(self, relative: PurePath) -> str:
        parts = [p for p in relative.parts if p not in ("", ".")]
        if not parts:
            return self.config.root_sheet
        for p in parts:
            if self.config.join_char in p:
                raise ValueError(f"'{p}' contains the reserved character '{self.config.join_char}'")
        return self.config.join_char.join(parts)

    def directory(self, sheet_name: str, root: Path) -> Path:
        """
        Inverse of sheet_name, below ``root``.

        Raises
        ------
        ValueError
            If the name has empty, '.' or '..' segments.
        """
        if sheet_name == self.config.root_sheet:
            return root
        parts = sheet_name.split(self.config.join_char)
        bad = [p for p in parts if p in ("", ".", "..") or "/" in p or "\\" in p]
        if bad:
            raise ValueError(f"sheet name '{sheet_name}' does not map to a directory below the output root")
        return root.joinpath(*parts)

    # -- traversal -----------------------------------------------------------

    def _list(self, directory: Path) -> Tuple[List[Path], List[Path]]:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise TreeError(f"{exc.strerror or exc}: {directory}") from exc
        dirs = [p for p in entries if p.is_dir()]
        files = [p for p in entries if p.is_file() and p.suffix == self.config.extension]
        return dirs, files

    def walk(self, root: Path, issues: Optional[IssueLog] = None) -> Iterator[SheetSource]:
        """
        Pre-order walk below ``root``. Only directories that directly hold
        object files yield a SheetSource; the others are still descended into.
        """
        if not root.is_dir():
            raise TreeError(f"Not a directory: {root}")
        issues = issues if issues is not None else IssueLog(log)
        yield from self._walk(root, root, issues)

    def _walk(self, root: Path, directory: Path, issues: IssueLog) -> Iterator[SheetSource]:
        dirs, files = self._list(directory)
        if files:
            rel = directory.relative_to(root)
            try:
                name = self.sheet_name(rel)
            except ValueError as exc:
                issues.warn("SN1", str(directory), f"{exc}. Directory was skipped.")
            else:
                if len(name) > MAX_SHEET_NAME:
                    issues.warn(
                        "SN0", str(directory),
                        f"Sheet name '{name}' is longer than {MAX_SHEET_NAME} characters; "
                        "some spreadsheet applications will rename it.",
                    )
                log.debug("sheet %s <- %s (%d files)", name, directory, len(files))
                yield SheetSource(name, directory, tuple(files))
        for sub in dirs:
            yield from self._walk(root, sub, issues)
