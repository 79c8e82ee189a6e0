from __future__ import annotations

import csv
from pathlib import Path

from .models import OperationRecord


OPERATION_COLUMNS = [
    "timestamp",
    "source",
    "destination",
    "status",
    "detail",
]


def export_operations_csv(path: Path, operations: list[OperationRecord]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=OPERATION_COLUMNS)
        writer.writeheader()
        for op in operations:
            writer.writerow(
                {
                    "timestamp": op.timestamp.isoformat(timespec="seconds"),
                    "source": str(op.source),
                    "destination": str(op.destination) if op.destination is not None else "",
                    "status": op.status.value,
                    "detail": op.detail,
                }
            )
