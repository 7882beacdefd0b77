from __future__ import annotations

from pathlib import Path

import pytest

from tests.fixtures import build_package, spreadsheet_parts, word_parts


@pytest.fixture
def spreadsheet_bytes() -> bytes:
    """A valid package with sheets cats, dogs and birds."""
    return build_package(spreadsheet_parts())


@pytest.fixture
def spreadsheet_path(tmp_path: Path, spreadsheet_bytes: bytes) -> Path:
    path = tmp_path / "testsheets.xlsx"
    path.write_bytes(spreadsheet_bytes)
    return path


@pytest.fixture
def word_bytes() -> bytes:
    return build_package(word_parts())


@pytest.fixture
def word_path(tmp_path: Path, word_bytes: bytes) -> Path:
    path = tmp_path / "word.docx"
    path.write_bytes(word_bytes)
    return path


@pytest.fixture
def make_package(tmp_path: Path):
    """Write a package built from modified spreadsheet parts to disk."""

    def _make(
        overrides: dict[str, str | bytes | None], name: str = "custom.xlsx"
    ) -> Path:
        parts: dict[str, str | bytes] = dict(spreadsheet_parts())
        for part, content in overrides.items():
            if content is None:
                parts.pop(part, None)
            else:
                parts[part] = content
        path = tmp_path / name
        path.write_bytes(build_package(parts))
        return path

    return _make
