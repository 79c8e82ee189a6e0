from __future__ import annotations

from .models import RunStatistics


def summarize(statistics: RunStatistics, dry_run: bool = False) -> list[tuple[str, str]]:
    lines = [
        ("files scanned", str(statistics.files_scanned)),
        ("metadata read", str(statistics.metadata_read)),
        ("multi-disc albums", str(statistics.multi_disc_albums)),
    ]
    if dry_run:
        lines.append(("would copy", str(statistics.would_copy)))
    else:
        lines.append(("copied", str(statistics.copied)))
        lines.append(("copied size", human_size(statistics.bytes_copied)))
    lines.append(("failed", str(statistics.failed)))
    lines.append(("skipped", str(statistics.skipped)))
    return lines


def human_size(num_bytes: int) -> str:
    return f"{bytes_to_mb(num_bytes):.2f} MB"


def bytes_to_mb(num_bytes: int) -> float:
    return num_bytes / (1024 * 1024)
