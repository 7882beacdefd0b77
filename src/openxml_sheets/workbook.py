"""Workbook part: the ordered list of declared sheets."""

from __future__ import annotations

from pydantic import BaseModel, Field

from openxml_sheets.markup import ChildBinding, ElementSchema, decode_part


class Sheet(BaseModel):
    """A sheet as declared in the workbook part.

    ``target`` stays empty until the sheet is joined against the workbook
    relationships.
    """

    name: str = Field(..., description="Sheet name as shown to users")
    sheet_id: int = Field(..., description="Numeric sheet id")
    relation_id: str = Field(..., description="Id of the workbook relationship")
    state: str = Field(default="visible", description="visible, hidden or veryHidden")
    target: str = Field(default="", description="Resolved target of the relationship")


class Workbook(BaseModel):
    """Decoded workbook part."""

    sheets: list[Sheet] = Field(default_factory=list)


SHEET_SCHEMA = ElementSchema(
    tag="sheet",
    attributes={
        "name": "name",
        "sheetId": "sheet_id",
        "id": "relation_id",
        "state": "state",
    },
)

WORKBOOK_SCHEMA = ElementSchema(
    tag="workbook",
    children=(ChildBinding("sheets/sheet", "sheets", SHEET_SCHEMA, repeated=True),),
)


def parse_workbook(data: bytes, part_name: str | None = None) -> Workbook:
    """Decode a workbook part, keeping sheets in document order.

    Raises:
        DecodeError: If the markup is malformed or a sheet is incomplete.
    """
    return decode_part(data, WORKBOOK_SCHEMA, Workbook, part_name=part_name)
