from pathlib import Path

import pytest

from memo.engine.model import StoreFile


@pytest.fixture
def store(tmp_path: Path) -> StoreFile:
    s = StoreFile.at(str(tmp_path / ".memo"))
    Path(s.path).touch()
    return s


@pytest.fixture
def write_store(store: StoreFile):
    """Replace the store content with the given lines (newline-terminated)."""

    def write(*lines: str) -> StoreFile:
        Path(store.path).write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return store

    return write
