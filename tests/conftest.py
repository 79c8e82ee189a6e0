"""Shared fixtures: an in-memory tag reader and a small source tree builder."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from music_organize.models import RawTags, TagReadError


class FakeTagReader:
    """Serve tags by file name; names without an entry fail to read."""

    def __init__(self, tags_by_name: Mapping[str, RawTags]) -> None:
        self.tags_by_name = dict(tags_by_name)
        self.calls: list[Path] = []

    def read(self, path: Path) -> RawTags:
        self.calls.append(path)
        try:
            return self.tags_by_name[path.name]
        except KeyError:
            raise TagReadError(f"{path}: unrecognized audio format") from None


@pytest.fixture
def make_source(tmp_path: Path) -> Callable[[dict[str, bytes]], Path]:
    """Create files (relative path -> content) under ``tmp_path / 'source'``."""

    def _make(files: dict[str, bytes]) -> Path:
        root = tmp_path / "source"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            _ = path.write_bytes(content)
        return root

    return _make


def snapshot(root: Path) -> dict[str, bytes]:
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, bytes]]:
    return snapshot


@pytest.fixture
def fake_reader() -> Callable[[Mapping[str, RawTags]], FakeTagReader]:
    return FakeTagReader
