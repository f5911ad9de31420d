from __future__ import annotations

import logging
from pathlib import Path, PureWindowsPath
from typing import IO, Optional, Set

from ..config import ConvertConfig
from ..domain.model import Workbook
from ..domain.objects import render_object
from ..domain.row_expander import RowExpander
from ..domain.sheet_builder import SheetBuilder
from ..domain.tree import TreeMapper
from ..errors import TreeError
from ..issues import IssueLog
from .base import BackendBase, BackendOptions

log = logging.getLogger("datsheet.dat")


class DatWriter:
    """
    Writes the objects of one sheet into object files.

    States: idle, or writing one file. An object for the file being written
    is appended after a separator line; an object for any other file closes
    the current one and starts (truncates) the new one. close() returns to
    idle.
    """

    def __init__(self, directory: Path, config: ConvertConfig, issues: IssueLog, source: str = "") -> None:
        self.directory = directory
        self.config = config
        self.issues = issues
        self.source = source or str(directory)
        self.current: Optional[str] = None
        self._handle: Optional[IO[str]] = None
        self._written: Set[str] = set()

    def path_for(self, filename: str) -> Path:
        return self.directory / f"{filename}{self.config.extension}"

    @staticmethod
    def is_safe(filename: str) -> bool:
        """A filename must name a file directly inside the sheet directory."""
        if filename in (".", "..") or "/" in filename or "\\" in filename:
            return False
        return not PureWindowsPath(filename).drive

    def write(self, filename: str, text: str, row: Optional[int] = None) -> bool:
        """Write one rendered object; returns False if it could not be written."""
        where = f"{self.source}({row})" if row is not None else self.source
        if not self.is_safe(filename):
            self.issues.warn(
                "FDATOUT5", where,
                f"Object name '{filename}' is not a plain file name (path separators, drive or '.'/'..'). "
                "No dat file was generated.",
            )
            return False
        if self._handle is not None and filename == self.current:
            return self._put(f"{self.config.separator}\n{text}", filename, where)

        self.close()
        if filename in self._written:
            self.issues.warn(
                "FDATOUT4", where,
                f"File {filename}{self.config.extension} was already written from an earlier row "
                "and is overwritten. Keep rows of one file next to each other.",
            )
        path = self.path_for(filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(path, "w", encoding="utf-8", newline="\n")
        except OSError as exc:
            self.issues.warn("FDATOUT2", where, f"Could not create file for writing for object {filename}! ({exc.strerror})")
            return False
        self.current = filename
        self._written.add(filename)
        log.debug("writing %s", path)
        return self._put(text, filename, where)

    def _put(self, text: str, filename: str, where: str) -> bool:
        if self._handle is None:
            return False
        try:
            self._handle.write(text)
        except OSError as exc:
            self.issues.warn(
                "FDATOUT3", where,
                f"An error happened when writing on file for object {filename}! File may be corrupt. ({exc.strerror})",
            )
            self.close()
            return False
        return True

    def close(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            try:
                handle.close()
            except OSError as exc:
                self.issues.warn(
                    "FDATOUT3", self.source,
                    f"An error happened when closing file for object {self.current}! File may be corrupt. ({exc.strerror})",
                )
        self.current = None

    def __enter__(self) -> "DatWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DatBackend(BackendBase):
    """
    Backend for a directory tree of object files, one sheet per directory
    that holds object files.
    """

    def read_multi(self, path: str, options: BackendOptions | None = None) -> Workbook:
        opts = options or BackendOptions()
        root = Path(path)
        mapper = TreeMapper(opts.config)
        workbook = Workbook(title=root.resolve().name)

        for source in mapper.walk(root, opts.issues):
            builder = SheetBuilder(source.name, workbook.strings, opts.issues)
            for f in source.files:
                builder.add_file(f)
            workbook.sheets.append(builder.build())
            log.info("sheet %s: %d object(s) from %d file(s)", source.name, len(builder.rows), len(source.files))

        if not workbook.sheets:
            raise TreeError(f"No *{opts.config.extension} files found below {root}")
        return workbook

    def write_multi(self, workbook: Workbook, path: str, options: BackendOptions | None = None) -> None:
        opts = options or BackendOptions()
        root = Path(path)
        mapper = TreeMapper(opts.config)

        for sheet in workbook.sheets:
            try:
                directory = mapper.directory(sheet.name, root)
            except ValueError as exc:
                opts.issues.warn("SN2", sheet.name, f"{exc}. Sheet was skipped.")
                continue
            written = 0
            with DatWriter(directory, opts.config, opts.issues, source=sheet.name) as writer:
                for expanded in RowExpander(sheet, workbook.strings, opts.issues):
                    if writer.write(expanded.filename, render_object(expanded.obj), row=expanded.row):
                        written += 1
            log.info("sheet %s: %d object(s) written to %s", sheet.name, written, directory)
