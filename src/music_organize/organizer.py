from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import AbstractSet, Optional

from .discs import effective_disc
from .filesystem import FileSystem, LocalFileSystem
from .metadata import UNKNOWN_ALBUM, UNKNOWN_ARTIST
from .models import CopyStatus, PlacementResult, TrackRecord


logger = logging.getLogger(__name__)

INVALID_CHARS = re.compile(r"[<>:\"/\\|?*\x00-\x1F]")


def sanitize_name(value: Optional[str], fallback: str = "") -> str:
    """Make ``value`` safe as a single path component.

    Invalid characters become ``_`` and surrounding spaces and dots are
    trimmed. Returns ``fallback`` when nothing usable is left.
    """
    if value is None:
        return fallback
    value = INVALID_CHARS.sub("_", value).strip(" .")
    return value if value.strip() else fallback


def track_file_name(record: TrackRecord) -> str:
    title = sanitize_name(record.title)
    if not title:
        return record.source_path.name
    if record.track_number > 0:
        return f"{record.track_number:02d} - {title}{record.extension}"
    return f"{title}{record.extension}"


def build_path(destination_root: Path, record: TrackRecord, is_multi_disc: bool) -> Path:
    """Compute where ``record`` belongs under ``destination_root``.

    Pure: the result depends only on the arguments, never on what exists on
    disk. Collisions are resolved later by :func:`place`.
    """
    directory = (
        destination_root
        / sanitize_name(record.artist, UNKNOWN_ARTIST)
        / sanitize_name(record.album, UNKNOWN_ALBUM)
    )
    if is_multi_disc:
        directory = directory / f"Disc {effective_disc(record):02d}"
    return directory / track_file_name(record)


def non_colliding_path(
    path: Path,
    filesystem: FileSystem,
    reserved: AbstractSet[Path] = frozenset(),
) -> Path:
    def _taken(candidate: Path) -> bool:
        return candidate in reserved or filesystem.exists(candidate)

    if not _taken(path):
        return path
    stem = path.stem
    suffix = path.suffix
    parent = path.parent
    counter = 1
    while True:
        candidate = parent / f"{stem} ({counter}){suffix}"
        if not _taken(candidate):
            return candidate
        counter += 1


def place(
    source: Path,
    desired_destination: Path,
    dry_run: bool = True,
    filesystem: Optional[FileSystem] = None,
    reserved: Optional[set[Path]] = None,
) -> PlacementResult:
    """Copy ``source`` to ``desired_destination`` without overwriting anything.

    An existing destination gets a `` (n)`` counter before its extension. In
    dry-run mode the final destination is still resolved against the real
    filesystem but nothing is created or copied. ``reserved`` holds the
    destinations already handed out in this run; the chosen one is added to
    it, so a dry run reports the same names a live run would create. Copy
    errors are returned as a failed result; a partial file may remain at the
    destination.
    """
    filesystem = filesystem or LocalFileSystem()
    taken = reserved if reserved is not None else set()

    if dry_run:
        final_target = non_colliding_path(desired_destination, filesystem, taken)
        taken.add(final_target)
        return PlacementResult(destination=final_target, status=CopyStatus.WOULD_COPY)

    final_target = desired_destination
    try:
        filesystem.create_directory(desired_destination.parent)
        final_target = non_colliding_path(desired_destination, filesystem, taken)
        if final_target != desired_destination:
            logger.debug("destination exists, using %s", final_target)
        taken.add(final_target)
        copied = filesystem.copy_bytes(source, final_target)
    except OSError as exc:
        return PlacementResult(
            destination=final_target,
            status=CopyStatus.FAILED,
            detail=exc.strerror or str(exc),
        )

    return PlacementResult(destination=final_target, status=CopyStatus.SUCCESS, bytes_copied=copied)
