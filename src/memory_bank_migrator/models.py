"""Result and option models for migration runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class MigrationOptions:
    """Switches for a single migration run."""

    create_backup: bool = True
    overwrite_existing: bool = False
    validate_json: bool = True
    delete_originals: bool = False
    parallelism: int | None = None


@dataclass(slots=True)
class MigrationFailure:
    path: Path
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"path": str(self.path), "error": self.error}


@dataclass(slots=True)
class MigrationStats:
    """Counters for one run; every visited file lands in exactly one of them."""

    success_count: int = 0
    failure_count: int = 0
    skipped_count: int = 0
    failures: list[MigrationFailure] = field(default_factory=list)
    backup_path: Path | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count + self.skipped_count

    def record_failure(self, path: Path, error: str) -> None:
        self.failure_count += 1
        self.failures.append(MigrationFailure(path=path, error=error))

    def to_dict(self) -> dict[str, Any]:
        return {
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "skippedCount": self.skipped_count,
            "failures": [failure.to_dict() for failure in self.failures],
            "backupPath": str(self.backup_path) if self.backup_path else None,
            "warnings": list(self.warnings),
        }


@dataclass(slots=True)
class MigrationResult:
    success: bool
    stats: MigrationStats
    error: str | None = None
    run_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "stats": self.stats.to_dict(),
            "runId": self.run_id,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class ValidationResult:
    success: bool
    errors: list[str] = field(default_factory=list)


__all__ = [
    "MigrationOptions",
    "MigrationFailure",
    "MigrationStats",
    "MigrationResult",
    "ValidationResult",
]
