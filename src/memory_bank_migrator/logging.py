from __future__ import annotations

import csv
import json
import logging
import time
from dataclasses import asdict, dataclass, field
from io import StringIO
from pathlib import Path
from threading import Lock
from typing import Any

from rich.logging import RichHandler

from .utils import atomic_write

SUMMARY_HEADER = [
    "run_id",
    "timestamp",
    "total",
    "successes",
    "failures",
    "skipped",
    "backup_path",
]


@dataclass(slots=True)
class StageTimings:
    read_ms: float = 0.0
    convert_ms: float = 0.0
    validate_ms: float = 0.0
    write_ms: float = 0.0


@dataclass(slots=True)
class RunLogEntry:
    run_id: str
    source: str
    status: str
    document_type: str | None
    error: str | None
    output_path: str | None
    timings: StageTimings
    size_bytes: int

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["timings"] = asdict(self.timings)
        return payload


class RunLogger:
    """Appends one JSON line per visited file to a run log."""

    def __init__(self, log_file: Path | None) -> None:
        self._log_file = log_file
        self._lock = Lock()

    @property
    def log_file(self) -> Path | None:
        return self._log_file

    def append(self, entry: RunLogEntry) -> None:
        if self._log_file is None:
            return
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._lock:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            with self._log_file.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")


@dataclass(slots=True)
class RunSummary:
    run_id: str
    timestamp: float = field(default_factory=time.time)
    total: int = 0
    successes: int = 0
    failures: int = 0
    skipped: int = 0
    backup_path: str = ""

    def as_row(self) -> list[str]:
        return [
            self.run_id,
            time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(self.timestamp)),
            str(self.total),
            str(self.successes),
            str(self.failures),
            str(self.skipped),
            self.backup_path,
        ]


def write_summary_csv(path: Path, header: list[str], rows: list[list[str]]) -> None:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    atomic_write(path, buffer.getvalue())


def append_summary_row(path: Path, summary: RunSummary) -> None:
    header = SUMMARY_HEADER
    rows: list[list[str]] = []
    if path.exists():
        with path.open("r", encoding="utf-8", newline="") as handle:
            existing = list(csv.reader(handle))
        if existing:
            header = existing[0]
            rows = existing[1:]
    rows.append(summary.as_row())
    write_summary_csv(path, header, rows)


def configure_logging(level: str | int = "INFO") -> None:
    logging.basicConfig(
        level=level.upper() if isinstance(level, str) else level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


__all__ = [
    "RunLogEntry",
    "RunLogger",
    "RunSummary",
    "StageTimings",
    "append_summary_row",
    "configure_logging",
    "write_summary_csv",
]
