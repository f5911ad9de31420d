from __future__ import annotations

import logging
import posixpath
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from .. import __version__
from ..domain.model import Workbook
from ..domain.strings import SharedStringPool
from ..errors import ContainerError, MarkupError, RelationshipError
from . import ooxml
from .base import BackendBase, BackendOptions

log = logging.getLogger("datsheet.xlsx")


# ------------------------------
# Internal: archive access
# ------------------------------

def _read_xml(archive: zipfile.ZipFile, name: str) -> ET.Element:
    """Parse one entry of the archive; any failure here is fatal."""
    try:
        data = archive.read(name)
    except KeyError as exc:
        raise ContainerError(f"Entry not found: {name}") from exc
    except (OSError, zipfile.BadZipFile) as exc:
        raise ContainerError(f"{exc}: {name}") from exc
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise MarkupError(f"{exc}: {name}") from exc


def _rels_path(part: str) -> str:
    """xl/workbook.xml -> xl/_rels/workbook.xml.rels"""
    folder, base = posixpath.split(part)
    return posixpath.join(folder, "_rels", base + ".rels")


def _resolve_target(folder: str, target: str) -> str:
    if target.startswith("/"):
        return target.lstrip("/")
    return posixpath.normpath(posixpath.join(folder, target))


# ------------------------------
# ExcelBackend
# ------------------------------

class ExcelBackend(BackendBase):
    """
    XLSX adapter writing and reading the package parts directly.

    Public API:
    - write_multi(workbook, path, options)
    - read_multi(path, options)
    """

    def __init__(self, now: Optional[datetime] = None) -> None:
        self._now = now

    def write_multi(self, workbook: Workbook, path: str, options: BackendOptions | None = None) -> None:
        """
        Write every sheet plus the shared string table and the fixed package
        parts. The first sheet is the one selected when the file is opened.
        """
        opts = options or BackendOptions()
        out = Path(path)
        names = workbook.sheet_names
        title = workbook.title or out.stem

        parts = [
            ("[Content_Types].xml", ooxml.content_types(len(names))),
            ("_rels/.rels", ooxml.root_rels()),
            ("docProps/app.xml", ooxml.app_props(names, opts.config.application, __version__)),
            ("docProps/core.xml", ooxml.core_props(title, self._now)),
            ("xl/workbook.xml", ooxml.workbook_xml(names)),
            ("xl/_rels/workbook.xml.rels", ooxml.workbook_rels(len(names))),
        ]
        for i, sheet in enumerate(workbook.sheets, start=1):
            parts.append((ooxml.worksheet_part(i), ooxml.worksheet_xml(sheet, selected=(i == 1))))
        parts.append(("xl/sharedStrings.xml", ooxml.shared_strings_xml(list(workbook.strings))))

        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for name, data in parts:
                    archive.writestr(name, data)
        except OSError as exc:
            raise ContainerError(f"{exc.strerror or exc}: {out}") from exc
        log.info("Wrote %d sheet(s), %d shared string(s) to %s", len(names), len(workbook.strings), out)

    def read_multi(self, path: str, options: BackendOptions | None = None) -> Workbook:
        """
        Read all sheets by following the package relationships:
        root rels -> workbook -> workbook rels -> worksheets and shared strings.
        """
        p = Path(path)
        try:
            archive = zipfile.ZipFile(p, "r")
        except (OSError, zipfile.BadZipFile) as exc:
            raise ContainerError(f"{getattr(exc, 'strerror', None) or exc}: {p}") from exc

        with archive:
            root_rels = ooxml.parse_relationships(_read_xml(archive, "_rels/.rels"))
            office = ooxml.find_relationship(root_rels, rtype=ooxml.REL_OFFICE_DOCUMENT)
            if office is None:
                raise RelationshipError(f"No officeDocument relationship in {p}")
            workbook_part = _resolve_target("", office["target"])
            folder = posixpath.dirname(workbook_part)

            sheet_refs = ooxml.parse_workbook_sheets(_read_xml(archive, workbook_part))
            rels = ooxml.parse_relationships(_read_xml(archive, _rels_path(workbook_part)))

            strings_rel = ooxml.find_relationship(rels, rtype=ooxml.REL_SHARED_STRINGS)
            if strings_rel is not None:
                strings = ooxml.parse_shared_strings(
                    _read_xml(archive, _resolve_target(folder, strings_rel["target"]))
                )
            else:
                strings = []

            workbook = Workbook(strings=SharedStringPool.from_strings(strings), title=p.stem)
            for name, rid in sheet_refs:
                rel = ooxml.find_relationship(rels, rid=rid)
                if rel is None:
                    raise RelationshipError(f"Sheet '{name}' refers to unknown relationship '{rid}'")
                part = _resolve_target(folder, rel["target"])
                try:
                    sheet = ooxml.parse_worksheet(name, _read_xml(archive, part))
                except ValueError as exc:
                    raise MarkupError(f"{exc}: {part}") from exc
                workbook.sheets.append(sheet)
                log.debug("read sheet %s from %s (%d rows)", name, part, len(sheet.rows))
        return workbook
