from __future__ import annotations

import csv
from pathlib import Path

from music_organize.exporters import OPERATION_COLUMNS, export_operations_csv
from music_organize.models import CopyStatus, OperationRecord


def test_export_operations_csv(tmp_path: Path) -> None:
    operations = [
        OperationRecord(Path("/in/a.mp3"), Path("/out/A/B/01 - T.mp3"), CopyStatus.SUCCESS),
        OperationRecord(Path("/in/bad.mp3"), None, CopyStatus.SKIPPED, "metadata unreadable: bad"),
    ]
    target = tmp_path / "reports" / "ops.csv"

    export_operations_csv(target, operations)

    with target.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0]) == OPERATION_COLUMNS
    assert rows[0]["destination"] == str(Path("/out/A/B/01 - T.mp3"))
    assert rows[0]["status"] == "success"
    assert rows[1]["destination"] == ""
    assert rows[1]["status"] == "skipped"
    assert rows[1]["detail"] == "metadata unreadable: bad"
