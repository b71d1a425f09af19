"""Markdown-to-JSON migration for memory bank documents."""

from .backup import BackupError, MigrationBackup
from .config import AppConfig, load_config
from .converters import ConverterRegistry
from .core import MarkdownMigrator, MigrationError
from .detection import classify_document
from .documents import DocumentPath, DocumentType, StructuredDocument
from .models import MigrationOptions, MigrationResult, MigrationStats, ValidationResult
from .validation import SchemaValidationError, SchemaValidator

__all__ = [
    "AppConfig",
    "load_config",
    "BackupError",
    "MigrationBackup",
    "ConverterRegistry",
    "MarkdownMigrator",
    "MigrationError",
    "classify_document",
    "DocumentPath",
    "DocumentType",
    "StructuredDocument",
    "MigrationOptions",
    "MigrationResult",
    "MigrationStats",
    "ValidationResult",
    "SchemaValidationError",
    "SchemaValidator",
]
