from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from .discs import classify
from .filesystem import FileSystem, LocalFileSystem
from .metadata import DEFAULT_EXTENSIONS, TagReader
from .metrics import summarize
from .models import Analyzed, CopyStatus, PipelineResult, RunStatistics, TrackRecord
from .organizer import build_path, place
from .reporting import Reporter
from .scanner import analyze_files, enumerate_candidates


logger = logging.getLogger(__name__)

ProgressFactory = Callable[[str], Callable[[int, int], None]]


class PipelineState(Enum):
    CREATED = "created"
    SCANNING = "scanning"
    ANALYZING = "analyzing"
    CLASSIFYING = "classifying"
    ORGANIZING = "organizing"
    SUMMARIZING = "summarizing"
    DONE = "done"


_ORDER = list(PipelineState)


class OrganizerPipeline:
    """One organizing run from ``source_root`` into ``destination_root``.

    Pass 1 (scan, analyze, classify) must see every file before Pass 2
    (organize) starts, since whether an album is multi-disc depends on all
    of its tracks. An instance runs exactly once.
    """

    def __init__(
        self,
        source_root: Path,
        destination_root: Path,
        tag_reader: TagReader,
        dry_run: bool = False,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        filesystem: Optional[FileSystem] = None,
        reporter: Optional[Reporter] = None,
        progress: Optional[ProgressFactory] = None,
    ) -> None:
        self.source_root = source_root
        self.destination_root = destination_root
        self.tag_reader = tag_reader
        self.dry_run = dry_run
        self.extensions = tuple(extensions)
        self.filesystem = filesystem or LocalFileSystem()
        self.reporter = reporter or Reporter()
        self.progress = progress
        self.state = PipelineState.CREATED
        self.statistics = RunStatistics()

    def _advance(self, state: PipelineState) -> None:
        if _ORDER.index(state) != _ORDER.index(self.state) + 1:
            raise RuntimeError(f"invalid pipeline transition {self.state.value} -> {state.value}")
        self.state = state
        logger.debug("pipeline state: %s", state.value)

    def _progress(self, stage: str) -> Optional[Callable[[int, int], None]]:
        return self.progress(stage) if self.progress else None

    def run(self) -> PipelineResult:
        if self.state is not PipelineState.CREATED:
            raise RuntimeError("pipeline has already run; create a new instance")

        self._advance(PipelineState.SCANNING)
        self.reporter.event("info", "scanning: %s", self.source_root)
        scan = enumerate_candidates(
            self.source_root,
            self.extensions,
            exclude=self.destination_root,
            filesystem=self.filesystem,
        )
        self.statistics.files_scanned = len(scan.candidates)

        self._advance(PipelineState.ANALYZING)
        records = self._analyze(scan.candidates)

        self._advance(PipelineState.CLASSIFYING)
        multi_disc = classify(records)
        self.statistics.multi_disc_albums = len(multi_disc)

        self._advance(PipelineState.ORGANIZING)
        self._organize(records, multi_disc)

        self._advance(PipelineState.SUMMARIZING)
        self.statistics.finalize()
        self.reporter.event("info", "summary for %s", self.destination_root)
        for label, value in summarize(self.statistics, dry_run=self.dry_run):
            self.reporter.event("info", "[done] %s: %s", label, value)

        self._advance(PipelineState.DONE)
        return PipelineResult(
            statistics=self.statistics,
            operations=list(self.reporter.operations),
            multi_disc_albums=multi_disc,
        )

    def _analyze(self, candidates: list[Path]) -> list[TrackRecord]:
        records: list[TrackRecord] = []
        for result in analyze_files(candidates, self.tag_reader, self._progress("analyze")):
            if isinstance(result, Analyzed):
                records.append(result.record)
                self.statistics.metadata_read += 1
            else:
                self.statistics.record(CopyStatus.SKIPPED)
                self.reporter.operation(
                    result.path,
                    None,
                    CopyStatus.SKIPPED,
                    f"metadata unreadable: {result.reason}",
                )
        return records

    def _organize(self, records: list[TrackRecord], multi_disc: frozenset[str]) -> None:
        reserved: set[Path] = set()
        report = self._progress("organize")
        total = len(records)
        if report:
            report(0, total)

        for idx, record in enumerate(records, start=1):
            desired = build_path(self.destination_root, record, record.album_key in multi_disc)
            result = place(
                record.source_path,
                desired,
                dry_run=self.dry_run,
                filesystem=self.filesystem,
                reserved=reserved,
            )
            self.statistics.record(result.status, result.bytes_copied)
            self.reporter.operation(record.source_path, result.destination, result.status, result.detail)
            if report:
                report(idx, total)
