"""Centralized exception classes for openxml-sheets.

This module provides a hierarchy of custom exceptions with error codes
and structured error details for consistent error handling throughout
the package reader.

Exception Hierarchy:
    OpenXMLError (base)
    ├── ArchiveError
    │   ├── PackageClosedError
    │   └── PartTooLargeError
    ├── FormatError
    │   ├── NotSpreadsheetError
    │   ├── PartNotFoundError
    │   └── RelationshipNotFoundError
    ├── DecodeError
    └── NotFoundError
        └── SheetNotFoundError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used by the package reader.

    Error codes are grouped by category:
    - E1xxx: Archive (I/O) errors
    - E2xxx: Package format errors
    - E3xxx: Markup decoding errors
    - E4xxx: Lookup errors
    - E9xxx: Internal/unexpected errors
    """

    # Archive errors (E1xxx)
    ARCHIVE_OPEN_FAILED = "E1001"
    ARCHIVE_READ_FAILED = "E1002"
    PACKAGE_CLOSED = "E1003"
    PART_TOO_LARGE = "E1004"

    # Format errors (E2xxx)
    NOT_SPREADSHEET = "E2001"
    PART_NOT_FOUND = "E2002"
    RELATIONSHIP_NOT_FOUND = "E2003"

    # Decode errors (E3xxx)
    DECODE_FAILED = "E3001"

    # Lookup errors (E4xxx)
    SHEET_NOT_FOUND = "E4001"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class OpenXMLError(Exception):
    """Base exception for all openxml-sheets errors.

    All custom exceptions in the package should inherit from this class.
    It provides:
    - Unique error codes for programmatic handling
    - Structured error details for logging and debugging

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# Archive Errors (E1xxx)
# =============================================================================


class ArchiveError(OpenXMLError):
    """Raised when the underlying archive cannot be opened or read."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.ARCHIVE_OPEN_FAILED,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path to the problematic archive, if any.
            details: Additional details.
        """
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class PackageClosedError(ArchiveError):
    """Raised when an operation is attempted on a closed package."""

    def __init__(
        self,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message="Package is closed",
            error_code=ErrorCode.PACKAGE_CLOSED,
            file_path=file_path,
            details=details,
        )


class PartTooLargeError(ArchiveError):
    """Raised when a part exceeds the maximum allowed uncompressed size."""

    def __init__(
        self,
        part_name: str,
        part_size: int,
        max_size: int,
        file_path: str | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            part_name: Name of the part inside the archive.
            part_size: Declared uncompressed size in bytes.
            max_size: Maximum allowed size in bytes.
            file_path: Optional archive path.
        """
        details = {
            "part": part_name,
            "part_size_bytes": part_size,
            "max_size_bytes": max_size,
        }
        message = (
            f"Part '{part_name}' size ({part_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.PART_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.part_name = part_name
        self.part_size = part_size
        self.max_size = max_size


# =============================================================================
# Format Errors (E2xxx)
# =============================================================================


class FormatError(OpenXMLError):
    """Base class for package structure errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.NOT_SPREADSHEET,
        part_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if part_name:
            details["part"] = part_name
        super().__init__(message, error_code, details)
        self.part_name = part_name


class NotSpreadsheetError(FormatError):
    """Raised when a package is not a spreadsheet document."""

    def __init__(
        self,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(
            message="Not a spreadsheet document",
            error_code=ErrorCode.NOT_SPREADSHEET,
            details=details,
        )
        self.file_path = file_path


class PartNotFoundError(FormatError):
    """Raised when an expected part is missing from the package."""

    def __init__(
        self,
        part_name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"Part '{part_name}' not available",
            error_code=ErrorCode.PART_NOT_FOUND,
            part_name=part_name,
            details=details,
        )


class RelationshipNotFoundError(FormatError):
    """Raised when a sheet's relationship cannot be resolved to a part."""

    def __init__(
        self,
        sheet_name: str,
        relation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["sheet"] = sheet_name
        if relation_id:
            details["relation_id"] = relation_id
        super().__init__(
            message=f"Relationship not available for sheet '{sheet_name}'",
            error_code=ErrorCode.RELATIONSHIP_NOT_FOUND,
            details=details,
        )
        self.sheet_name = sheet_name
        self.relation_id = relation_id


# =============================================================================
# Decode Errors (E3xxx)
# =============================================================================


class DecodeError(OpenXMLError):
    """Raised when a part's content does not match the expected markup."""

    def __init__(
        self,
        message: str,
        part_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if part_name:
            details["part"] = part_name
        super().__init__(message, ErrorCode.DECODE_FAILED, details)
        self.part_name = part_name


# =============================================================================
# Lookup Errors (E4xxx)
# =============================================================================


class NotFoundError(OpenXMLError):
    """Base class for lookups that yield nothing."""


class SheetNotFoundError(NotFoundError):
    """Raised when no sheet with the requested name is declared."""

    def __init__(
        self,
        sheet_name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["sheet"] = sheet_name
        super().__init__(
            message=f"Sheet '{sheet_name}' not available",
            error_code=ErrorCode.SHEET_NOT_FOUND,
            details=details,
        )
        self.sheet_name = sheet_name
