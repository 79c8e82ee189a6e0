from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class MusicOrganizeError(Exception):
    """Base class for errors raised by music_organize."""


class DependencyUnavailable(MusicOrganizeError):
    """The tag reading library cannot be loaded; nothing can be organized."""


class TagReadError(MusicOrganizeError):
    """Tags could not be read from a single file."""


class ConfigError(MusicOrganizeError):
    """The configuration file is missing, malformed or holds invalid values."""


@dataclass(frozen=True)
class RawTags:
    album_artist: Union[str, int, None] = None
    performer: Union[str, int, None] = None
    album: Union[str, int, None] = None
    title: Union[str, int, None] = None
    track: Union[str, int, None] = None
    disc: Union[str, int, None] = None
    disc_count: Union[str, int, None] = None


@dataclass(frozen=True)
class TrackRecord:
    source_path: Path
    artist: Optional[str]
    album: Optional[str]
    title: Optional[str]
    track_number: int
    disc_number: int
    disc_count: int
    album_key: str
    extension: str


@dataclass(frozen=True)
class Analyzed:
    path: Path
    record: TrackRecord


@dataclass(frozen=True)
class Unreadable:
    path: Path
    reason: str


FileAnalysis = Union[Analyzed, Unreadable]


@dataclass
class ScanResult:
    candidates: list[Path]
    warnings: list[str]


class CopyStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    WOULD_COPY = "would-copy"


@dataclass(frozen=True)
class PlacementResult:
    destination: Path
    status: CopyStatus
    detail: str = ""
    bytes_copied: int = 0


@dataclass(frozen=True)
class OperationRecord:
    source: Path
    destination: Optional[Path]
    status: CopyStatus
    detail: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class RunStatistics:
    files_scanned: int = 0
    metadata_read: int = 0
    multi_disc_albums: int = 0
    copied: int = 0
    failed: int = 0
    skipped: int = 0
    would_copy: int = 0
    bytes_copied: int = 0
    finalized: bool = False

    def record(self, status: CopyStatus, bytes_copied: int = 0) -> None:
        if self.finalized:
            raise RuntimeError("run statistics are already finalized")
        if status is CopyStatus.SUCCESS:
            self.copied += 1
            self.bytes_copied += bytes_copied
        elif status is CopyStatus.FAILED:
            self.failed += 1
        elif status is CopyStatus.SKIPPED:
            self.skipped += 1
        else:
            self.would_copy += 1

    def finalize(self) -> None:
        self.finalized = True


@dataclass
class PipelineResult:
    statistics: RunStatistics
    operations: list[OperationRecord]
    multi_disc_albums: frozenset[str]
