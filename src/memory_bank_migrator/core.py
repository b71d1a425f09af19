from __future__ import annotations

import concurrent.futures
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal, Sequence

from .backup import BackupError, MigrationBackup
from .config import AppConfig
from .converters import ConverterRegistry
from .detection import classify_document
from .documents import DocumentPath
from .logging import RunLogEntry, RunLogger, RunSummary, StageTimings, append_summary_row
from .models import MigrationOptions, MigrationResult, MigrationStats
from .utils import (
    atomic_write,
    elapsed_ms,
    generate_run_id,
    iter_markdown_files,
    json_path_for,
)
from .validation import SchemaValidationError, SchemaValidator

logger = logging.getLogger(__name__)

FileStatus = Literal["success", "failure", "skipped"]


class MigrationError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class _FileOutcome:
    status: FileStatus
    source: Path
    document_type: str | None = None
    output_path: Path | None = None
    error: str | None = None
    warning: str | None = None
    timings: StageTimings = field(default_factory=StageTimings)
    size_bytes: int = 0


@dataclass(slots=True)
class _RunContext:
    run_id: str
    directory: Path
    options: MigrationOptions
    logger: RunLogger


class MarkdownMigrator:
    """Converts a tree of legacy Markdown memory bank documents to JSON.

    Only a failed backup (or an unreadable root directory) aborts a run; every
    other problem is recorded against the file that caused it.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        backup: MigrationBackup | None = None,
        validator: SchemaValidator | None = None,
        registry: ConverterRegistry | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._backup = backup or MigrationBackup(self._config.runtime.backup_dir)
        self._validator = validator or SchemaValidator()
        self._registry = registry or ConverterRegistry()

    @property
    def registry(self) -> ConverterRegistry:
        return self._registry

    @property
    def backup(self) -> MigrationBackup:
        return self._backup

    def migrate_directory(
        self, directory: Path, options: MigrationOptions | None = None
    ) -> MigrationResult:
        directory = Path(directory)
        opts = options or self._config.default_options()
        run_id = generate_run_id()
        stats = MigrationStats()
        context = _RunContext(
            run_id=run_id,
            directory=directory,
            options=opts,
            logger=self._run_logger(run_id),
        )

        try:
            if opts.create_backup:
                logger.info("Creating backup of directory: %s", directory)
                stats.backup_path = self._backup.create_backup(directory)
                logger.info("Backup created at: %s", stats.backup_path)
            files = self.find_markdown_files(directory)
        except (BackupError, MigrationError, OSError) as exc:
            logger.error("Fatal error during migration: %s", exc)
            self._write_summary(context, stats)
            return MigrationResult(
                success=False,
                stats=stats,
                error=f"Migration failed: {exc}",
                run_id=run_id,
            )

        logger.info("Found %d Markdown files to process", len(files))
        for outcome in self._process_files(files, context):
            self._merge(stats, outcome)
            self._record(context, outcome)

        logger.info(
            "Migration complete. Success: %d, Failed: %d, Skipped: %d",
            stats.success_count,
            stats.failure_count,
            stats.skipped_count,
        )
        self._write_summary(context, stats)
        return MigrationResult(success=stats.failure_count == 0, stats=stats, run_id=run_id)

    def migrate_file(
        self,
        file_path: Path,
        json_path: Path | None = None,
        options: MigrationOptions | None = None,
        *,
        document_path: DocumentPath | None = None,
    ) -> bool:
        """Convert one Markdown file; failures are logged and reported as ``False``."""

        file_path = Path(file_path)
        opts = options or self._config.default_options()
        target = Path(json_path) if json_path is not None else json_path_for(file_path)
        outcome = self._migrate_file(file_path, target, opts.validate_json, document_path)
        return outcome.status == "success"

    def rollback(self, result: MigrationResult, directory: Path) -> bool:
        if result.stats.backup_path is None:
            logger.error("No backup recorded for this run; nothing to roll back")
            return False
        return self._backup.restore_from_backup(result.stats.backup_path, Path(directory))

    def find_markdown_files(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            raise MigrationError("NOT_FOUND", f"Directory does not exist: {directory}")
        return list(iter_markdown_files(directory))

    def _process_files(
        self, files: Sequence[Path], context: _RunContext
    ) -> Iterator[_FileOutcome]:
        parallelism = max(1, context.options.parallelism or self._config.runtime.parallelism)
        if parallelism == 1 or len(files) < 2:
            for path in files:
                yield self._process_candidate(path, context)
            return

        # workers only convert and write; stats are merged by the caller
        with concurrent.futures.ThreadPoolExecutor(max_workers=parallelism) as executor:
            futures = [executor.submit(self._process_candidate, path, context) for path in files]
            for future in futures:
                yield future.result()

    def _process_candidate(self, path: Path, context: _RunContext) -> _FileOutcome:
        logger.debug("Processing file: %s", path)
        try:
            document_path = DocumentPath.from_relative(path.relative_to(context.directory))
            if not document_path.is_markdown:
                logger.debug("Skipping non-markdown file: %s", path)
                return _FileOutcome(status="skipped", source=path)

            json_path = json_path_for(path)
            if json_path.exists() and not context.options.overwrite_existing:
                logger.debug("Skipping already migrated file: %s", path)
                return _FileOutcome(status="skipped", source=path, output_path=json_path)

            outcome = self._migrate_file(
                path, json_path, context.options.validate_json, document_path
            )
            if outcome.status == "success" and context.options.delete_originals:
                try:
                    path.unlink()
                    logger.debug("Deleted original file: %s", path)
                except OSError as exc:
                    logger.warning("Could not delete original file %s: %s", path, exc)
                    outcome.warning = f"Failed to delete original {path}: {exc}"
            return outcome
        except Exception as exc:
            logger.error("Error migrating file %s: %s", path, exc)
            return _FileOutcome(status="failure", source=path, error=str(exc) or type(exc).__name__)

    def _migrate_file(
        self,
        file_path: Path,
        json_path: Path,
        validate_json: bool,
        document_path: DocumentPath | None,
    ) -> _FileOutcome:
        outcome = _FileOutcome(status="failure", source=file_path, output_path=json_path)
        try:
            start = time.perf_counter()
            markdown = file_path.read_text(encoding="utf-8")
            outcome.size_bytes = file_path.stat().st_size
            outcome.timings.read_ms = elapsed_ms(start)

            document_path = document_path or DocumentPath.create(file_path.name)
            document_type = classify_document(document_path.filename, markdown)
            outcome.document_type = document_type.value

            start = time.perf_counter()
            converter = self._registry.get_converter(document_type)
            document = converter.convert(markdown, document_path)
            outcome.timings.convert_ms = elapsed_ms(start)

            if validate_json:
                start = time.perf_counter()
                validation = self._validator.validate_json(
                    document.to_dict(), document.document_type
                )
                outcome.timings.validate_ms = elapsed_ms(start)
                if not validation.success:
                    raise SchemaValidationError(validation.errors)

            start = time.perf_counter()
            atomic_write(json_path, document.to_json(pretty=True))
            outcome.timings.write_ms = elapsed_ms(start)
        except Exception as exc:
            logger.error("Failed to migrate file %s: %s", file_path, exc)
            outcome.error = str(exc) or type(exc).__name__
            return outcome

        logger.debug("Successfully converted %s to %s", file_path, json_path)
        outcome.status = "success"
        return outcome

    def _merge(self, stats: MigrationStats, outcome: _FileOutcome) -> None:
        if outcome.status == "success":
            stats.success_count += 1
        elif outcome.status == "skipped":
            stats.skipped_count += 1
        else:
            stats.record_failure(
                outcome.source, outcome.error or "Migration failed without throwing an error"
            )
        if outcome.warning:
            stats.warnings.append(outcome.warning)

    def _run_logger(self, run_id: str) -> RunLogger:
        log_dir = self._config.runtime.log_dir
        return RunLogger(log_dir / f"{run_id}.jsonl" if log_dir is not None else None)

    def _record(self, context: _RunContext, outcome: _FileOutcome) -> None:
        entry = RunLogEntry(
            run_id=context.run_id,
            source=str(outcome.source),
            status=outcome.status,
            document_type=outcome.document_type,
            error=outcome.error,
            output_path=str(outcome.output_path) if outcome.output_path else None,
            timings=outcome.timings,
            size_bytes=outcome.size_bytes,
        )
        try:
            context.logger.append(entry)
        except OSError as exc:
            logger.warning("Could not append to run log %s: %s", context.logger.log_file, exc)

    def _write_summary(self, context: _RunContext, stats: MigrationStats) -> None:
        log_dir = self._config.runtime.log_dir
        if log_dir is None:
            return
        summary = RunSummary(
            run_id=context.run_id,
            total=stats.total,
            successes=stats.success_count,
            failures=stats.failure_count,
            skipped=stats.skipped_count,
            backup_path=str(stats.backup_path) if stats.backup_path else "",
        )
        try:
            append_summary_row(log_dir / self._config.runtime.summary_csv, summary)
        except OSError as exc:
            logger.warning("Could not write run summary: %s", exc)


__all__ = ["MarkdownMigrator", "MigrationError"]
