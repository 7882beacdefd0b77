"""ZIP archive access for package parts.

A package is read either from a file the reader opens itself, or from a
source the caller already holds. The two cases are separate types:

- OwnedArchive opens the file and must close it.
- BorrowedArchive reads a caller's source through a SectionReader bounded
  to the declared size and never closes anything.
"""

from __future__ import annotations

import abc
import io
import os
import zipfile
import zlib
from typing import BinaryIO, TypeAlias

from openxml_sheets.config import settings
from openxml_sheets.utils.exceptions import (
    ArchiveError,
    ErrorCode,
    PartNotFoundError,
    PartTooLargeError,
)
from openxml_sheets.utils.logging import get_logger

logger = get_logger(__name__)

ByteSource: TypeAlias = bytes | bytearray | memoryview | BinaryIO

_READ_ERRORS = (
    OSError,
    EOFError,
    zipfile.BadZipFile,
    zlib.error,
    NotImplementedError,
    RuntimeError,
)


class SectionReader(io.RawIOBase):
    """Read-only, seekable view of the first ``size`` bytes of a source.

    The source is shared with the caller: closing the view does not close
    the source.
    """

    def __init__(self, source: BinaryIO, size: int) -> None:
        super().__init__()
        self._source = source
        self._size = size
        self._pos = 0

    @property
    def size(self) -> int:
        return self._size

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._pos

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = self._size + offset
        else:
            raise ValueError(f"Invalid whence: {whence}")
        if pos < 0:
            raise OSError(f"Negative seek position {pos}")
        self._pos = pos
        return pos

    def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
        remaining = self._size - self._pos
        if remaining <= 0:
            return 0
        view = memoryview(buffer).cast("B")
        self._source.seek(self._pos)
        data = self._source.read(min(len(view), remaining))
        n = len(data)
        view[:n] = data
        self._pos += n
        return n


class ZipArchive(abc.ABC):
    """Named-entry lookup over an open zip file."""

    def __init__(self, zip_file: zipfile.ZipFile, file_path: str | None = None) -> None:
        self._zip = zip_file
        self.file_path = file_path

    @property
    @abc.abstractmethod
    def owns_resource(self) -> bool:
        """Whether close() releases the underlying file."""

    def names(self) -> list[str]:
        """List entry names in archive order."""
        return self._zip.namelist()

    def read(self, name: str) -> bytes:
        """Read an entry by its exact name.

        Raises:
            PartNotFoundError: If no entry has that name.
            PartTooLargeError: If the entry exceeds the configured size limit.
            ArchiveError: If the entry cannot be read or decompressed.
        """
        try:
            info = self._zip.getinfo(name)
        except KeyError as exc:
            raise PartNotFoundError(name) from exc

        max_size = settings.max_part_size_bytes
        if info.file_size > max_size:
            raise PartTooLargeError(name, info.file_size, max_size, self.file_path)

        try:
            with self._zip.open(info) as fp:
                data = fp.read(max_size + 1)
        except _READ_ERRORS as exc:
            raise ArchiveError(
                f"Failed to read part '{name}': {exc}",
                error_code=ErrorCode.ARCHIVE_READ_FAILED,
                file_path=self.file_path,
                details={"part": name},
            ) from exc

        if len(data) > max_size:
            raise PartTooLargeError(name, len(data), max_size, self.file_path)

        logger.debug("Read part", part=name, size=len(data))
        return data

    @abc.abstractmethod
    def close(self) -> None:
        """Release whatever this archive owns."""


class OwnedArchive(ZipArchive):
    """Archive opened from a filesystem path; closing releases the file."""

    @property
    def owns_resource(self) -> bool:
        return True

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> OwnedArchive:
        """Open the zip file at ``path``.

        Raises:
            ArchiveError: If the file cannot be opened as a zip archive.
        """
        file_path = os.fspath(path)
        try:
            zip_file = zipfile.ZipFile(file_path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveError(
                f"Failed to open file '{file_path}': {exc}",
                file_path=file_path,
            ) from exc
        return cls(zip_file, file_path=file_path)

    def close(self) -> None:
        # ZipFile.close is idempotent
        self._zip.close()


class BorrowedArchive(ZipArchive):
    """Archive over a caller-held source; closing is a no-op."""

    @property
    def owns_resource(self) -> bool:
        return False

    @classmethod
    def from_source(cls, source: ByteSource, size: int) -> BorrowedArchive:
        """Open a zip archive over the first ``size`` bytes of ``source``.

        Args:
            source: Bytes-like object or seekable binary file object.
            size: Total size of the zip data in bytes.

        Raises:
            ArchiveError: If the size is invalid or the data is not a zip archive.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            stream: BinaryIO = io.BytesIO(source)
        else:
            stream = source

        if size < 0:
            raise ArchiveError(
                f"Invalid archive size: {size}",
                details={"size": size},
            )

        try:
            available = stream.seek(0, io.SEEK_END)
        except (OSError, AttributeError, ValueError) as exc:
            raise ArchiveError(f"Source is not seekable: {exc}") from exc
        if size > available:
            raise ArchiveError(
                f"Declared size ({size} bytes) exceeds source size ({available} bytes)",
                details={"size": size, "available": available},
            )

        try:
            zip_file = zipfile.ZipFile(SectionReader(stream, size))
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveError(f"Failed to open zip data: {exc}") from exc
        return cls(zip_file)

    def close(self) -> None:
        return None


Archive: TypeAlias = OwnedArchive | BorrowedArchive
