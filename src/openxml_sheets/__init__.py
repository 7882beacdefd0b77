"""openxml-sheets - read sheet names and raw cell values from .xlsx packages."""

from openxml_sheets.openxml import OpenXML, PackageState
from openxml_sheets.relationships import Relationship, Relationships
from openxml_sheets.utils.exceptions import (
    ArchiveError,
    DecodeError,
    ErrorCode,
    FormatError,
    NotFoundError,
    NotSpreadsheetError,
    OpenXMLError,
    PackageClosedError,
    PartNotFoundError,
    PartTooLargeError,
    RelationshipNotFoundError,
    SheetNotFoundError,
)
from openxml_sheets.workbook import Sheet, Workbook
from openxml_sheets.worksheet import Cell, Row, SheetData, Worksheet

__all__ = [
    "OpenXML",
    "PackageState",
    # Models
    "Cell",
    "Relationship",
    "Relationships",
    "Row",
    "Sheet",
    "SheetData",
    "Workbook",
    "Worksheet",
    # Errors
    "ArchiveError",
    "DecodeError",
    "ErrorCode",
    "FormatError",
    "NotFoundError",
    "NotSpreadsheetError",
    "OpenXMLError",
    "PackageClosedError",
    "PartNotFoundError",
    "PartTooLargeError",
    "RelationshipNotFoundError",
    "SheetNotFoundError",
]
__version__ = "0.1.0"
