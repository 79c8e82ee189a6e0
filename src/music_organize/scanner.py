from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from .filesystem import FileSystem, LocalFileSystem
from .metadata import DEFAULT_EXTENSIONS, TagReader, is_audio_file, normalize
from .models import Analyzed, FileAnalysis, ScanResult, TagReadError, Unreadable


logger = logging.getLogger(__name__)


def enumerate_candidates(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude: Optional[Path] = None,
    filesystem: Optional[FileSystem] = None,
) -> ScanResult:
    """List supported audio files under ``root`` in discovery order.

    Files below ``exclude`` are left out when it lies strictly inside ``root``
    (a destination nested in the source tree). Walk errors become warnings.
    """
    filesystem = filesystem or LocalFileSystem()
    extensions = tuple(extensions)
    candidates: list[Path] = []
    warnings: list[str] = []

    def _on_walk_error(err: OSError) -> None:
        target = getattr(err, "filename", None) or str(root)
        warnings.append(f"walk error: {target}: {err.strerror or str(err)}")
        logger.warning("walk error: %s: %s", target, err.strerror or str(err))

    if exclude is not None and (exclude == root or root not in exclude.parents):
        exclude = None

    for path in filesystem.enumerate_files(root, recursive=True, on_error=_on_walk_error):
        if exclude is not None and (path == exclude or exclude in path.parents):
            continue
        if is_audio_file(path, extensions):
            candidates.append(path)

    return ScanResult(candidates=candidates, warnings=warnings)


def analyze_file(path: Path, reader: TagReader) -> FileAnalysis:
    try:
        tags = reader.read(path)
    except (TagReadError, OSError) as exc:
        return Unreadable(path=path, reason=str(exc))
    return Analyzed(path=path, record=normalize(path, tags))


def analyze_files(
    candidates: list[Path],
    reader: TagReader,
    progress_callback: Callable[[int, int], None] | None = None,
) -> list[FileAnalysis]:
    results: list[FileAnalysis] = []
    total = len(candidates)
    if progress_callback:
        progress_callback(0, total)

    for idx, path in enumerate(candidates, start=1):
        try:
            result = analyze_file(path, reader)
            if isinstance(result, Unreadable):
                logger.warning("metadata unreadable: %s: %s", path, result.reason)
            else:
                logger.debug("[scan] %s", path)
            results.append(result)
        finally:
            if progress_callback:
                progress_callback(idx, total)

    return results
