from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol


WalkErrorHandler = Callable[[OSError], None]


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool:
        ...

    def create_directory(self, path: Path) -> None:
        ...

    def copy_bytes(self, source: Path, destination: Path) -> int:
        ...

    def enumerate_files(
        self,
        root: Path,
        recursive: bool = True,
        on_error: Optional[WalkErrorHandler] = None,
    ) -> Iterator[Path]:
        ...


class LocalFileSystem:
    """Filesystem access backed by os/shutil."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def create_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def copy_bytes(self, source: Path, destination: Path) -> int:
        shutil.copy2(source, destination)
        return destination.stat().st_size

    def enumerate_files(
        self,
        root: Path,
        recursive: bool = True,
        on_error: Optional[WalkErrorHandler] = None,
    ) -> Iterator[Path]:
        # Sorted so that discovery order is stable between runs.
        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            base = Path(dirpath)
            for name in sorted(filenames):
                yield base / name
            if not recursive:
                dirnames.clear()
