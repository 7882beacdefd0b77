"""Utilities package for openxml-sheets.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

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
from openxml_sheets.utils.logging import (
    LogContext,
    StructuredLogger,
    configure_logging,
    get_logger,
    timed_operation,
)

__all__ = [
    # Exceptions
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
    # Logging
    "LogContext",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "timed_operation",
]
