"""
Building and reading the XML parts of an xlsx package with ElementTree.

Only the parts this tool writes are covered: content types, package and
workbook relationships, document properties, workbook, worksheets and the
shared string table.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from xml.etree import ElementTree as ET

from ..domain.columns import cell_ref, column_letter, split_cell_ref
from ..domain.model import HEADER_ROW, INLINE_STRING, Cell, Row, Sheet

NS_MAIN = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
NS_REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_PKG_REL = "http://schemas.openxmlformats.org/package/2006/relationships"
NS_CT = "http://schemas.openxmlformats.org/package/2006/content-types"

REL_OFFICE_DOCUMENT = f"{NS_REL}/officeDocument"
REL_WORKSHEET = f"{NS_REL}/worksheet"
REL_SHARED_STRINGS = f"{NS_REL}/sharedStrings"
REL_CORE_PROPS = f"{NS_PKG_REL}/metadata/core-properties"
REL_EXT_PROPS = f"{NS_REL}/extended-properties"

CT_WORKBOOK = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"
CT_WORKSHEET = "application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml"
CT_SHARED_STRINGS = "application/vnd.openxmlformats-officedocument.spreadsheetml.sharedStrings+xml"
CT_CORE_PROPS = "application/vnd.openxmlformats-package.core-properties+xml"
CT_EXT_PROPS = "application/vnd.openxmlformats-officedocument.extended-properties+xml"

_NS = {"m": NS_MAIN, "r": NS_PKG_REL}
_DECLARATION = b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

# characters XML 1.0 cannot carry
_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def serialize(root: ET.Element) -> bytes:
    """Compact XML with a standalone UTF-8 declaration."""
    return _DECLARATION + ET.tostring(root, encoding="unicode").encode("utf-8")


def _text(parent: ET.Element, tag: str, text: str, attrib: Optional[Dict[str, str]] = None) -> ET.Element:
    el = ET.SubElement(parent, tag, attrib or {})
    el.text = _ILLEGAL.sub("", text)
    return el


# ---- Package parts ----------------------------------------------------------


def worksheet_part(index: int) -> str:
    """Entry name of the n-th (1-based) worksheet."""
    return f"xl/worksheets/sheet{index}.xml"


def content_types(sheet_count: int) -> bytes:
    root = ET.Element("Types", {"xmlns": NS_CT})
    ET.SubElement(root, "Default", {
        "Extension": "rels", "ContentType": "application/vnd.openxmlformats-package.relationships+xml",
    })
    ET.SubElement(root, "Default", {"Extension": "xml", "ContentType": "application/xml"})
    overrides: List[Tuple[str, str]] = [
        ("/xl/workbook.xml", CT_WORKBOOK),
        ("/xl/sharedStrings.xml", CT_SHARED_STRINGS),
        ("/docProps/core.xml", CT_CORE_PROPS),
        ("/docProps/app.xml", CT_EXT_PROPS),
    ]
    overrides += [(f"/{worksheet_part(i)}", CT_WORKSHEET) for i in range(1, sheet_count + 1)]
    for part, ctype in overrides:
        ET.SubElement(root, "Override", {"PartName": part, "ContentType": ctype})
    return serialize(root)


def _relationships(rels: Iterable[Tuple[str, str, str]]) -> bytes:
    root = ET.Element("Relationships", {"xmlns": NS_PKG_REL})
    for rid, rtype, target in rels:
        ET.SubElement(root, "Relationship", {"Id": rid, "Type": rtype, "Target": target})
    return serialize(root)


def root_rels() -> bytes:
    return _relationships([
        ("rId3", REL_EXT_PROPS, "docProps/app.xml"),
        ("rId2", REL_CORE_PROPS, "docProps/core.xml"),
        ("rId1", REL_OFFICE_DOCUMENT, "xl/workbook.xml"),
    ])


def workbook_rels(sheet_count: int) -> bytes:
    """Worksheets are rId1..n, the shared strings follow as rId(n+1)."""
    rels = [(f"rId{i}", REL_WORKSHEET, f"worksheets/sheet{i}.xml") for i in range(1, sheet_count + 1)]
    rels.append((f"rId{sheet_count + 1}", REL_SHARED_STRINGS, "sharedStrings.xml"))
    return _relationships(rels)


def workbook_xml(sheet_names: Sequence[str]) -> bytes:
    root = ET.Element("workbook", {"xmlns": NS_MAIN, "xmlns:r": NS_REL})
    sheets = ET.SubElement(root, "sheets")
    for i, name in enumerate(sheet_names, start=1):
        ET.SubElement(sheets, "sheet", {"name": name, "sheetId": str(i), "r:id": f"rId{i}"})
    return serialize(root)


def app_props(sheet_names: Sequence[str], application: str, version: str) -> bytes:
    root = ET.Element("Properties", {
        "xmlns": "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties",
        "xmlns:vt": "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes",
    })
    _text(root, "Application", application)
    _text(root, "DocSecurity", "0")
    _text(root, "ScaleCrop", "false")
    pairs = ET.SubElement(ET.SubElement(root, "HeadingPairs"), "vt:vector", {"size": "2", "baseType": "variant"})
    _text(ET.SubElement(pairs, "vt:variant"), "vt:lpstr", "Worksheets")
    _text(ET.SubElement(pairs, "vt:variant"), "vt:i4", str(len(sheet_names)))
    titles = ET.SubElement(
        ET.SubElement(root, "TitlesOfParts"), "vt:vector",
        {"size": str(len(sheet_names)), "baseType": "lpstr"},
    )
    for name in sheet_names:
        _text(titles, "vt:lpstr", name)
    _text(root, "LinksUpToDate", "false")
    _text(root, "SharedDoc", "false")
    _text(root, "HyperlinksChanged", "false")
    _text(root, "AppVersion", version)
    return serialize(root)


def core_props(title: str, now: Optional[datetime] = None) -> bytes:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H:%M:%SZ")
    root = ET.Element("cp:coreProperties", {
        "xmlns:cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
        "xmlns:dc": "http://purl.org/dc/elements/1.1/",
        "xmlns:dcterms": "http://purl.org/dc/terms/",
        "xmlns:dcmitype": "http://purl.org/dc/dcmitype/",
        "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
    })
    _text(root, "dc:title", title)
    _text(root, "dc:creator", f"{title} team")
    _text(root, "cp:lastModifiedBy", f"{title} team")
    _text(root, "dcterms:created", stamp, {"xsi:type": "dcterms:W3CDTF"})
    _text(root, "dcterms:modified", stamp, {"xsi:type": "dcterms:W3CDTF"})
    return serialize(root)


def shared_strings_xml(strings: Sequence[str], count: Optional[int] = None) -> bytes:
    root = ET.Element("sst", {
        "xmlns": NS_MAIN,
        "count": str(len(strings) if count is None else count),
        "uniqueCount": str(len(strings)),
    })
    for s in strings:
        attrib = {"xml:space": "preserve"} if s != s.strip() else None
        _text(ET.SubElement(root, "si"), "t", s, attrib)
    return serialize(root)


def worksheet_xml(sheet: Sheet, selected: bool = False) -> bytes:
    """
    Rows and cells in ascending order. The header row and the name column
    are frozen so they stay visible while scrolling.
    """
    root = ET.Element("worksheet", {
        "xmlns": NS_MAIN,
        "xmlns:r": NS_REL,
        "xmlns:mc": "http://schemas.openxmlformats.org/markup-compatibility/2006",
        "mc:Ignorable": "x14ac",
        "xmlns:x14ac": "http://schemas.microsoft.com/office/spreadsheetml/2009/9/ac",
    })
    last_row = max((r.number for r in sheet.rows), default=HEADER_ROW)
    last_col = max((c for r in sheet.rows for c in r.cells), default=0)
    ET.SubElement(root, "dimension", {"ref": f"A1:{column_letter(last_col)}{last_row}"})

    view_attrs = {"tabSelected": "1", "workbookViewId": "0"} if selected else {"workbookViewId": "0"}
    view = ET.SubElement(ET.SubElement(root, "sheetViews"), "sheetView", view_attrs)
    ET.SubElement(view, "pane", {
        "xSplit": "1", "ySplit": "1", "topLeftCell": "B2", "activePane": "bottomRight", "state": "frozen",
    })
    ET.SubElement(view, "selection", {"pane": "topRight", "activeCell": "B1", "sqref": "B1"})
    ET.SubElement(view, "selection", {"pane": "bottomLeft", "activeCell": "A2", "sqref": "A2"})
    ET.SubElement(view, "selection", {"pane": "bottomRight"})
    ET.SubElement(root, "sheetFormatPr", {"defaultRowHeight": "15"})

    data = ET.SubElement(root, "sheetData")
    for row in sorted(sheet.rows, key=lambda r: r.number):
        row_el = ET.SubElement(data, "row", {"r": str(row.number)})
        for col, cell in row.ordered():
            c = ET.SubElement(row_el, "c", {"r": cell_ref(col, row.number), "t": cell.type})
            if cell.type == INLINE_STRING:
                _text(ET.SubElement(c, "is"), "t", cell.raw)
            else:
                _text(c, "v", cell.raw)
    return serialize(root)


# ---- Reading ----------------------------------------------------------------


def parse_relationships(root: ET.Element) -> List[Dict[str, str]]:
    return [
        {"id": rel.get("Id", ""), "type": rel.get("Type", ""), "target": rel.get("Target", "")}
        for rel in root.findall("r:Relationship", _NS)
    ]


def find_relationship(rels: Iterable[Dict[str, str]], *, rid: str | None = None,
                      rtype: str | None = None) -> Optional[Dict[str, str]]:
    for rel in rels:
        if rid is not None and rel["id"] == rid:
            return rel
        if rtype is not None and rel["type"] == rtype:
            return rel
    return None


def parse_workbook_sheets(root: ET.Element) -> List[Tuple[str, str]]:
    """(sheet name, relationship id) in workbook order."""
    out: List[Tuple[str, str]] = []
    for sheet in root.findall("m:sheets/m:sheet", _NS):
        out.append((sheet.get("name", ""), sheet.get(f"{{{NS_REL}}}id", "")))
    return out


def _joined_text(nodes: Iterable[ET.Element]) -> str:
    return "".join(node.text or "" for node in nodes)


def parse_shared_strings(root: ET.Element) -> List[str]:
    """Plain items and rich-text runs; phonetic hints are left out."""
    strings: List[str] = []
    for si in root.findall("m:si", _NS):
        strings.append(_joined_text(si.findall("m:t", _NS) + si.findall("m:r/m:t", _NS)))
    return strings


def parse_worksheet(name: str, root: ET.Element) -> Sheet:
    """
    Rows of a worksheet as Cells with their declared type. Cells without a
    value (formatting only) are left out; missing ``r`` attributes continue
    from the previous row or cell.
    """
    sheet = Sheet(name)
    row_number = 0
    for row_el in root.findall("m:sheetData/m:row", _NS):
        row_number = int(row_el.get("r") or row_number + 1)
        row = Row(row_number)
        col = -1
        for c in row_el.findall("m:c", _NS):
            ref = c.get("r")
            col = split_cell_ref(ref)[0] if ref else col + 1
            ctype = c.get("t", "n")
            if ctype == INLINE_STRING:
                raw = _joined_text(c.findall("m:is/m:t", _NS) + c.findall("m:is/m:r/m:t", _NS))
            else:
                v = c.find("m:v", _NS)
                if v is None or v.text is None:
                    continue
                raw = v.text
            row.cells[col] = Cell(ctype, raw)
        sheet.rows.append(row)
    return sheet
