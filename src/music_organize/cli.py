from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional

from .config import load_settings
from .exporters import export_operations_csv
from .metadata import load_tag_reader
from .models import ConfigError, DependencyUnavailable
from .pipeline import OrganizerPipeline
from .reporting import Reporter, setup_logging


EXIT_OK = 0
EXIT_DEPENDENCY_UNAVAILABLE = 2


def _make_progress_printer(stage: str) -> Callable[[int, int], None]:
    stream = sys.stderr
    is_tty = stream.isatty()
    last_percent = -1

    def _report(current: int, total: int) -> None:
        nonlocal last_percent
        percent = 100 if total <= 0 else int((current / total) * 100)
        percent = max(0, min(100, percent))

        if is_tty:
            if percent == last_percent and current < total:
                return
            end = "\n" if current >= total else ""
            print(f"\r[{stage}] {percent:3d}% ({current}/{total})", end=end, file=stream, flush=True)
            last_percent = percent
            return

        should_print = (
            last_percent < 0
            or current >= total
            or percent >= last_percent + 10
        )
        if should_print:
            print(f"[{stage}] {percent:3d}% ({current}/{total})", file=stream)
            last_percent = percent

    return _report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-organize",
        description="Copy audio files into an Artist/Album[/Disc NN] layout built from their tags.",
    )
    parser.add_argument("source", type=Path, help="Directory to read audio files from")
    parser.add_argument("destination", type=Path, help="Root of the organized library")
    parser.add_argument(
        "--log-path",
        type=Path,
        default=None,
        help="Also write the run log to this file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report where every file would go without creating or copying anything",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML file with a [music_organize] table (extensions, log_path)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a CSV of every file operation to this path",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not print per-stage progress",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug events on the console",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    source: Path = args.source.expanduser().resolve()
    destination: Path = args.destination.expanduser().resolve()

    if not source.exists() or not source.is_dir():
        raise SystemExit(f"Source directory does not exist or is not a directory: {source}")

    try:
        settings = load_settings(args.config.expanduser() if args.config else None)
    except ConfigError as exc:
        raise SystemExit(str(exc))

    logger = setup_logging(args.log_path or settings.log_path, verbose=args.verbose)

    try:
        tag_reader = load_tag_reader()
    except DependencyUnavailable as exc:
        logger.error("%s", exc)
        return EXIT_DEPENDENCY_UNAVAILABLE

    logger.info("destination root: %s", destination)
    if args.dry_run:
        logger.info("dry-run mode enabled: nothing will be created or copied")

    pipeline = OrganizerPipeline(
        source,
        destination,
        tag_reader,
        dry_run=args.dry_run,
        extensions=settings.extensions,
        reporter=Reporter(logger),
        progress=None if args.no_progress else _make_progress_printer,
    )
    result = pipeline.run()

    if args.report:
        report_path = args.report.expanduser().resolve()
        export_operations_csv(report_path, result.operations)
        logger.info("operations report written: %s", report_path)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
