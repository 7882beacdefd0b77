"""Tests for archive access and resource ownership."""

import io
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from openxml_sheets.archive import (
    BorrowedArchive,
    OwnedArchive,
    SectionReader,
    ZipArchive,
)
from openxml_sheets.config import settings
from openxml_sheets.utils.exceptions import (
    ArchiveError,
    ErrorCode,
    PartNotFoundError,
    PartTooLargeError,
)
from tests.fixtures import build_package, truncated_package


class TestSectionReader:
    """Tests for the bounded source view."""

    def test_reads_only_declared_size(self) -> None:
        reader = SectionReader(io.BytesIO(b"0123456789"), 4)
        assert reader.read() == b"0123"
        assert reader.read() == b""

    def test_seek_relative_to_end(self) -> None:
        reader = SectionReader(io.BytesIO(b"0123456789"), 6)
        assert reader.seek(-2, io.SEEK_END) == 4
        assert reader.read(10) == b"45"

    def test_negative_seek_rejected(self) -> None:
        reader = SectionReader(io.BytesIO(b"abc"), 3)
        with pytest.raises(OSError):
            reader.seek(-1)

    def test_close_does_not_close_source(self) -> None:
        source = io.BytesIO(b"abc")
        reader = SectionReader(source, 3)
        reader.close()
        assert not source.closed


class TestOwnedArchive:
    """Tests for archives opened from a path."""

    def test_open_and_read(self, spreadsheet_path: Path) -> None:
        archive = OwnedArchive.open(spreadsheet_path)
        try:
            assert archive.owns_resource is True
            assert "xl/workbook.xml" in archive.names()
            assert archive.read("xl/workbook.xml").startswith(b"<?xml")
        finally:
            archive.close()

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.xlsx"
        with pytest.raises(ArchiveError) as exc_info:
            OwnedArchive.open(missing)
        assert exc_info.value.error_code == ErrorCode.ARCHIVE_OPEN_FAILED
        assert exc_info.value.details["file_path"] == str(missing)

    def test_not_a_zip_file(self, tmp_path: Path) -> None:
        path = tmp_path / "plain.xlsx"
        path.write_text("just text")
        with pytest.raises(ArchiveError):
            OwnedArchive.open(path)

    def test_missing_part(self, spreadsheet_path: Path) -> None:
        archive = OwnedArchive.open(spreadsheet_path)
        try:
            with pytest.raises(PartNotFoundError) as exc_info:
                archive.read("xl/nothing.xml")
            assert exc_info.value.part_name == "xl/nothing.xml"
        finally:
            archive.close()

    def test_part_lookup_is_exact(self, spreadsheet_path: Path) -> None:
        archive = OwnedArchive.open(spreadsheet_path)
        try:
            with pytest.raises(PartNotFoundError):
                archive.read("/xl/workbook.xml")
            with pytest.raises(PartNotFoundError):
                archive.read("XL/workbook.xml")
        finally:
            archive.close()

    def test_close_twice(self, spreadsheet_path: Path) -> None:
        archive = OwnedArchive.open(spreadsheet_path)
        archive.close()
        archive.close()


class TestBorrowedArchive:
    """Tests for archives over caller-held sources."""

    def test_from_bytes(self, spreadsheet_bytes: bytes) -> None:
        archive = BorrowedArchive.from_source(spreadsheet_bytes, len(spreadsheet_bytes))
        assert archive.owns_resource is False
        assert archive.file_path is None
        assert "_rels/.rels" in archive.names()

    def test_from_file_object_is_not_closed(self, spreadsheet_path: Path) -> None:
        with spreadsheet_path.open("rb") as fp:
            size = spreadsheet_path.stat().st_size
            archive = BorrowedArchive.from_source(fp, size)
            archive.read("xl/workbook.xml")
            archive.close()
            assert not fp.closed
            archive.read("xl/workbook.xml")

    def test_size_is_honoured(self, spreadsheet_bytes: bytes) -> None:
        padded = spreadsheet_bytes + b"\x00" * 64
        archive = BorrowedArchive.from_source(padded, len(spreadsheet_bytes))
        assert "xl/workbook.xml" in archive.names()

    def test_truncated_size(self, spreadsheet_bytes: bytes) -> None:
        with pytest.raises(ArchiveError):
            BorrowedArchive.from_source(spreadsheet_bytes, len(spreadsheet_bytes) // 2)

    def test_size_larger_than_source(self, spreadsheet_bytes: bytes) -> None:
        with pytest.raises(ArchiveError) as exc_info:
            BorrowedArchive.from_source(spreadsheet_bytes, len(spreadsheet_bytes) + 1)
        assert exc_info.value.details["available"] == len(spreadsheet_bytes)

    def test_negative_size(self, spreadsheet_bytes: bytes) -> None:
        with pytest.raises(ArchiveError):
            BorrowedArchive.from_source(spreadsheet_bytes, -1)

    def test_not_zip_data(self) -> None:
        with pytest.raises(ArchiveError):
            BorrowedArchive.from_source(b"not a zip", 9)


class TestPartSizeLimit:
    """Tests for the configured part size limit."""

    def test_oversized_part_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "max_part_size_mb", 1)
        data = build_package({"big.xml": b"<a>" + b" " * (1024 * 1024) + b"</a>"})
        archive = BorrowedArchive.from_source(data, len(data))

        with pytest.raises(PartTooLargeError) as exc_info:
            archive.read("big.xml")

        assert exc_info.value.error_code == ErrorCode.PART_TOO_LARGE
        assert exc_info.value.max_size == 1024 * 1024

    def test_part_within_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "max_part_size_mb", 1)
        data = build_package({"small.xml": b"<a/>"})
        archive = BorrowedArchive.from_source(data, len(data))
        assert archive.read("small.xml") == b"<a/>"


class TestCorruptEntries:
    """Tests for entries whose data cannot be read back."""

    def test_entry_shorter_than_declared(self) -> None:
        data = truncated_package("xl/worksheets/sheet2.xml")
        archive = BorrowedArchive.from_source(data, len(data))

        with pytest.raises(ArchiveError) as exc_info:
            archive.read("xl/worksheets/sheet2.xml")

        assert exc_info.value.error_code == ErrorCode.ARCHIVE_READ_FAILED
        assert exc_info.value.details["part"] == "xl/worksheets/sheet2.xml"
        assert archive.read("xl/workbook.xml").startswith(b"<?xml")

    def test_unexpected_end_of_data(self, spreadsheet_bytes: bytes) -> None:
        archive = BorrowedArchive.from_source(spreadsheet_bytes, len(spreadsheet_bytes))

        with patch.object(zipfile.ZipExtFile, "read", side_effect=EOFError):
            with pytest.raises(ArchiveError) as exc_info:
                archive.read("xl/workbook.xml")

        assert exc_info.value.error_code == ErrorCode.ARCHIVE_READ_FAILED
        assert isinstance(exc_info.value.__cause__, EOFError)


class TestZipArchiveBase:
    """Tests for the shared archive base."""

    def test_cannot_instantiate_base(self, spreadsheet_bytes: bytes) -> None:
        zip_file = zipfile.ZipFile(io.BytesIO(spreadsheet_bytes))
        try:
            with pytest.raises(TypeError):
                ZipArchive(zip_file)  # type: ignore[abstract]
        finally:
            zip_file.close()
