"""Spreadsheet package reader.

OpenXML opens an Open XML spreadsheet package (``.xlsx``), checks that it
really is a spreadsheet document, and resolves sheet names to worksheet
parts through the package relationships:

    sheet name -> relationship id (xl/workbook.xml)
               -> target path (xl/_rels/workbook.xml.rels)
               -> worksheet part

Nothing is cached: every call to sheets() or worksheet() reads and decodes
the parts again.
"""

from __future__ import annotations

import os
import posixpath
from enum import Enum
from types import TracebackType

from openxml_sheets.archive import Archive, BorrowedArchive, ByteSource, OwnedArchive
from openxml_sheets.relationships import Relationships, parse_relationships
from openxml_sheets.utils.exceptions import (
    DecodeError,
    NotSpreadsheetError,
    OpenXMLError,
    PackageClosedError,
    RelationshipNotFoundError,
    SheetNotFoundError,
)
from openxml_sheets.utils.logging import LogContext, get_logger, timed_operation
from openxml_sheets.workbook import Sheet, parse_workbook
from openxml_sheets.worksheet import Worksheet, parse_worksheet

logger = get_logger(__name__)

ROOT_RELS_PATH = "_rels/.rels"
WORKBOOK_PATH = "xl/workbook.xml"
WORKBOOK_RELS_PATH = "xl/_rels/workbook.xml.rels"
WORKBOOK_ROOT = "xl"
OFFICE_DOCUMENT_ID = "rId1"


class PackageState(str, Enum):
    """Lifecycle state of an OpenXML instance."""

    OPEN = "open"
    CLOSED = "closed"


class OpenXML:
    """Read-only view of an Open XML spreadsheet package.

    Use as a context manager, or call close() when done:

        with OpenXML("book.xlsx") as ox:
            for sheet in ox.sheets():
                print(sheet.name, sheet.target)
            rows = ox.worksheet("dogs").values()

    Instances are not safe for concurrent use; open one per thread.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Open the package at ``path``.

        Raises:
            ArchiveError: If the file cannot be opened as a zip archive.
            NotSpreadsheetError: If the package is not a spreadsheet document.
        """
        self._init(OwnedArchive.open(path))

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> OpenXML:
        """Open the package at ``path``. Same as ``OpenXML(path)``."""
        return cls(path)

    @classmethod
    def from_reader(cls, source: ByteSource, size: int) -> OpenXML:
        """Open a package from an in-memory or caller-held source.

        The source is borrowed: close() never closes it, and the caller
        stays responsible for it.

        Args:
            source: Bytes-like object or seekable binary file object.
            size: Size of the zip data in bytes.

        Raises:
            ArchiveError: If the source cannot be read as a zip archive.
            NotSpreadsheetError: If the package is not a spreadsheet document.
        """
        ox = cls.__new__(cls)
        ox._init(BorrowedArchive.from_source(source, size))
        return ox

    def _init(self, archive: Archive) -> None:
        self._archive = archive
        self._state = PackageState.OPEN
        self.filename = archive.file_path
        try:
            self._verify()
        except Exception:
            self._archive.close()
            self._state = PackageState.CLOSED
            raise
        logger.info(
            "Opened spreadsheet package",
            package=self._label,
            owned=archive.owns_resource,
        )

    @property
    def _label(self) -> str:
        return self.filename or "<reader>"

    @property
    def state(self) -> PackageState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is PackageState.CLOSED

    def close(self) -> None:
        """Release the package.

        Closes the file when the package was opened from a path. For a
        borrowed source nothing is released. Calling close() again is a
        no-op. If closing fails the package stays open, so close() can be
        retried.

        Raises:
            OSError: If closing the underlying file fails.
        """
        if self._state is PackageState.CLOSED:
            return
        self._archive.close()
        self._state = PackageState.CLOSED

    def must_close(self) -> None:
        """Close the package, treating any failure as fatal.

        Meant for tests and teardown code where a close failure is a bug.
        """
        try:
            self.close()
        except OSError as exc:
            raise AssertionError(f"openxml: closing '{self._label}' ({exc})") from exc

    def __enter__(self) -> OpenXML:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<OpenXML {self._label!r} {self._state.value}>"

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def sheets(self) -> list[Sheet]:
        """Return the declared sheets in workbook order with resolved targets.

        A sheet whose relationship cannot be resolved keeps an empty target;
        worksheet() reports it when that sheet is requested.

        Raises:
            PartNotFoundError: If the workbook or its relationships are missing.
            DecodeError: If either part is malformed.
        """
        self._ensure_open()
        with LogContext(package=self._label), timed_operation(
            logger, "sheets"
        ) as metrics:
            workbook = parse_workbook(self._read(WORKBOOK_PATH), WORKBOOK_PATH)
            rels = self._relationships(WORKBOOK_RELS_PATH)
            metrics.parts_read = 2

            sheets = []
            for sheet in workbook.sheets:
                rel = rels.get(sheet.relation_id)
                if rel is None:
                    logger.warning(
                        "Unresolved sheet relationship",
                        sheet=sheet.name,
                        relation_id=sheet.relation_id,
                    )
                    sheets.append(sheet)
                    continue
                sheets.append(sheet.model_copy(update={"target": rel.target}))
            return sheets

    def sheet_names(self) -> list[str]:
        """Return sheet names in workbook order."""
        return [sheet.name for sheet in self.sheets()]

    def worksheet(self, name: str) -> Worksheet:
        """Decode the worksheet with the given (case-sensitive) name.

        Raises:
            SheetNotFoundError: If no sheet has that name.
            RelationshipNotFoundError: If the sheet's relationship is unresolved.
            PartNotFoundError: If the resolved worksheet part is missing.
            DecodeError: If the worksheet markup is malformed.
        """
        sheet = self._find_sheet(name)
        if not sheet.target:
            raise RelationshipNotFoundError(name, sheet.relation_id)

        part_name = self._part_path(sheet.target)
        with LogContext(package=self._label, sheet=name), timed_operation(
            logger, "worksheet"
        ) as metrics:
            data = self._read(part_name)
            metrics.parts_read = 1
            metrics.bytes_read = len(data)
            try:
                worksheet = parse_worksheet(data, part_name)
            except DecodeError as exc:
                raise DecodeError(
                    f"Parsing worksheet '{name}': {exc.message}",
                    part_name=part_name,
                    details={**exc.details, "sheet": name},
                ) from exc
            metrics.rows_decoded = len(worksheet.rows)
            return worksheet

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _ensure_open(self) -> None:
        if self._state is PackageState.CLOSED:
            raise PackageClosedError(self.filename)

    def _read(self, part_name: str) -> bytes:
        self._ensure_open()
        return self._archive.read(part_name)

    def _relationships(self, part_name: str) -> Relationships:
        return parse_relationships(self._read(part_name), part_name)

    def _verify(self) -> None:
        """Check the package relationships point at a spreadsheet workbook."""
        try:
            rels = self._relationships(ROOT_RELS_PATH)
        except OpenXMLError as exc:
            raise NotSpreadsheetError(
                self.filename, details={"reason": exc.message}
            ) from exc

        rel = rels.get(OFFICE_DOCUMENT_ID)
        if rel is None or rel.target != WORKBOOK_PATH:
            raise NotSpreadsheetError(
                self.filename,
                details={
                    "part": ROOT_RELS_PATH,
                    "target": rel.target if rel else None,
                },
            )

    def _find_sheet(self, name: str) -> Sheet:
        for sheet in self.sheets():
            if sheet.name == name:
                return sheet
        raise SheetNotFoundError(name)

    @staticmethod
    def _part_path(target: str) -> str:
        """Resolve a workbook relationship target to a part name."""
        if target.startswith("/"):
            return posixpath.normpath(target).lstrip("/")
        return posixpath.normpath(posixpath.join(WORKBOOK_ROOT, target))
