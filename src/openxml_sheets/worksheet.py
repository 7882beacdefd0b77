"""Worksheet part content: rows of raw cell values."""

from __future__ import annotations

from pydantic import BaseModel, Field

from openxml_sheets.markup import ChildBinding, ElementSchema, decode_part


class Cell(BaseModel):
    """A single cell.

    ``value`` is the raw content of the ``<v>`` element. For shared strings
    (``data_type == "s"``) it is an index into the shared string table.
    """

    value: str = ""
    reference: str | None = None
    data_type: str | None = None


class Row(BaseModel):
    """A row of cells in document order."""

    index: str | None = None
    cells: list[Cell] = Field(default_factory=list)


class SheetData(BaseModel):
    """The ``sheetData`` element of a worksheet."""

    rows: list[Row] = Field(default_factory=list)


class Worksheet(BaseModel):
    """Decoded worksheet part."""

    sheet_data: SheetData = Field(default_factory=SheetData)

    @property
    def rows(self) -> list[Row]:
        return self.sheet_data.rows

    def values(self) -> list[list[str]]:
        """Return raw cell values row by row."""
        return [[cell.value for cell in row.cells] for row in self.sheet_data.rows]


CELL_SCHEMA = ElementSchema(
    tag="c",
    attributes={"r": "reference", "t": "data_type"},
    children=(ChildBinding("v", "value"),),
)

ROW_SCHEMA = ElementSchema(
    tag="row",
    attributes={"r": "index"},
    children=(ChildBinding("c", "cells", CELL_SCHEMA, repeated=True),),
)

SHEET_DATA_SCHEMA = ElementSchema(
    tag="sheetData",
    children=(ChildBinding("row", "rows", ROW_SCHEMA, repeated=True),),
)

WORKSHEET_SCHEMA = ElementSchema(
    tag="worksheet",
    children=(ChildBinding("sheetData", "sheet_data", SHEET_DATA_SCHEMA),),
)


def parse_worksheet(data: bytes, part_name: str | None = None) -> Worksheet:
    """Decode a worksheet part.

    Raises:
        DecodeError: If the markup is malformed or not a worksheet.
    """
    return decode_part(data, WORKSHEET_SCHEMA, Worksheet, part_name=part_name)
