"""Test fixtures and helpers for building Open XML packages in memory.

Packages are assembled part by part with zipfile so every test controls
exactly which parts and relationships exist.

Example usage:
    from tests.fixtures import build_package, spreadsheet_parts

    data = build_package(spreadsheet_parts())
"""

import io
import struct
import zipfile
from collections.abc import Mapping

REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
DOC_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

OFFICE_DOCUMENT = f"{DOC_REL_NS}/officeDocument"
WORKSHEET = f"{DOC_REL_NS}/worksheet"

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

SHEET_NAMES = ("cats", "dogs", "birds")


def relationships_xml(rels: list[tuple[str, str, str]]) -> str:
    """Render a relationships part from (id, type, target) triples."""
    items = "".join(
        f'<Relationship Id="{rid}" Type="{rtype}" Target="{target}"/>'
        for rid, rtype, target in rels
    )
    return f'{XML_DECL}<Relationships xmlns="{REL_NS}">{items}</Relationships>'


def workbook_xml(sheets: list[tuple[str, int, str]]) -> str:
    """Render a workbook part from (name, sheetId, relationship id) triples."""
    items = "".join(
        f'<sheet name="{name}" sheetId="{sheet_id}" r:id="{rid}"/>'
        for name, sheet_id, rid in sheets
    )
    return (
        f'{XML_DECL}<workbook xmlns="{MAIN_NS}" xmlns:r="{DOC_REL_NS}">'
        f"<bookViews><workbookView/></bookViews>"
        f"<sheets>{items}</sheets>"
        f"</workbook>"
    )


def worksheet_xml(rows: list[list[str]], shared: bool = False) -> str:
    """Render a worksheet part with one cell per value."""
    columns = "ABCDEFGHIJ"
    type_attr = ' t="s"' if shared else ""
    row_items = []
    for r, values in enumerate(rows, start=1):
        cells = "".join(
            f'<c r="{columns[c]}{r}"{type_attr}><v>{value}</v></c>'
            for c, value in enumerate(values)
        )
        row_items.append(f'<row r="{r}">{cells}</row>')
    return (
        f'{XML_DECL}<worksheet xmlns="{MAIN_NS}">'
        f'<dimension ref="A1"/>'
        f"<sheetData>{''.join(row_items)}</sheetData>"
        f"</worksheet>"
    )


SHEET_ROWS: dict[str, list[list[str]]] = {
    "cats": [["0", "1"], ["2", "3"]],
    "dogs": [["4", "5", "6"], ["7", "42"], ["8", "3.5"]],
    "birds": [["9"]],
}


def spreadsheet_parts() -> dict[str, str]:
    """Parts of a valid three-sheet spreadsheet package.

    Workbook relationships are listed in a different order than the sheets
    so the join cannot rely on position.
    """
    parts = {
        "[Content_Types].xml": f"{XML_DECL}<Types/>",
        "_rels/.rels": relationships_xml(
            [
                ("rId3", f"{DOC_REL_NS}/extended-properties", "docProps/app.xml"),
                ("rId2", f"{REL_NS}/metadata/core-properties", "docProps/core.xml"),
                ("rId1", OFFICE_DOCUMENT, "xl/workbook.xml"),
            ]
        ),
        "xl/workbook.xml": workbook_xml(
            [(name, idx, f"rId{idx}") for idx, name in enumerate(SHEET_NAMES, 1)]
        ),
        "xl/_rels/workbook.xml.rels": relationships_xml(
            [
                ("rId4", f"{DOC_REL_NS}/styles", "styles.xml"),
                ("rId3", WORKSHEET, "worksheets/sheet3.xml"),
                ("rId2", WORKSHEET, "worksheets/sheet2.xml"),
                ("rId1", WORKSHEET, "worksheets/sheet1.xml"),
            ]
        ),
        "xl/styles.xml": f'{XML_DECL}<styleSheet xmlns="{MAIN_NS}"/>',
    }
    for idx, name in enumerate(SHEET_NAMES, 1):
        parts[f"xl/worksheets/sheet{idx}.xml"] = worksheet_xml(
            SHEET_ROWS[name], shared=name == "cats"
        )
    return parts


def word_parts() -> dict[str, str]:
    """Parts of a minimal word-processing package."""
    return {
        "[Content_Types].xml": f"{XML_DECL}<Types/>",
        "_rels/.rels": relationships_xml(
            [("rId1", OFFICE_DOCUMENT, "word/document.xml")]
        ),
        "word/document.xml": (
            f"{XML_DECL}<w:document xmlns:w="
            f'"http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
            f"<w:body/></w:document>"
        ),
    }


def build_package(
    parts: Mapping[str, str | bytes], compression: int = zipfile.ZIP_DEFLATED
) -> bytes:
    """Zip the given parts into package bytes, in mapping order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        for name, content in parts.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def truncated_package(last_part: str, declared_size: int = 500_000) -> bytes:
    """Build a stored package whose last entry claims more data than it has.

    ``last_part`` is written last and its central directory sizes are
    overwritten with ``declared_size``.
    """
    parts = dict(spreadsheet_parts())
    parts[last_part] = parts.pop(last_part)
    data = bytearray(build_package(parts, compression=zipfile.ZIP_STORED))
    # compressed and uncompressed sizes sit at offsets 20 and 24 of the header
    header = data.rfind(b"PK\x01\x02")
    struct.pack_into("<II", data, header + 20, declared_size, declared_size)
    return bytes(data)
