"""Logging setup and the run's reporting sink.

Events are plain ``logging`` records on the ``music_organize`` logger: a
Rich console handler always, a file handler when a log path is given. A
``SUCCESS`` level between INFO and WARNING marks completed copies.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .models import CopyStatus, OperationRecord


LOGGER_NAME = "music_organize"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

EVENT_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": SUCCESS,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

STATUS_LEVELS = {
    CopyStatus.SUCCESS: SUCCESS,
    CopyStatus.WOULD_COPY: logging.INFO,
    CopyStatus.SKIPPED: logging.WARNING,
    CopyStatus.FAILED: logging.ERROR,
}


def setup_logging(
    log_path: Optional[Path] = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    console_handler = RichHandler(
        console=console or Console(stderr=True, soft_wrap=True),
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(console_handler)

    if log_path is not None:
        resolved = Path(log_path).expanduser().resolve()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(resolved, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


class Reporter:
    """Collects operation records and emits every event through logging."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.operations: list[OperationRecord] = []

    def event(self, level: str, message: str, *args: object) -> None:
        self.logger.log(EVENT_LEVELS[level], message, *args)

    def operation(
        self,
        source: Path,
        destination: Optional[Path],
        status: CopyStatus,
        detail: str = "",
    ) -> OperationRecord:
        record = OperationRecord(source=source, destination=destination, status=status, detail=detail)
        self.operations.append(record)

        target = destination if destination is not None else "-"
        if detail:
            self.logger.log(STATUS_LEVELS[status], "[%s] %s -> %s (%s)", status.value, source, target, detail)
        else:
            self.logger.log(STATUS_LEVELS[status], "[%s] %s -> %s", status.value, source, target)
        return record
