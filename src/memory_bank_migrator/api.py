from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from .config import AppConfig, load_config
from .core import MarkdownMigrator
from .models import MigrationOptions
from .settings import get_settings
from .validation import SchemaValidator


class MigrateRequest(BaseModel):
    directory: str
    create_backup: bool | None = None
    overwrite_existing: bool | None = None
    validate_json: bool | None = None
    delete_originals: bool | None = None
    parallelism: int | None = Field(default=None, ge=1)

    def to_options(self, config: AppConfig) -> MigrationOptions:
        options = config.default_options()
        for name in ("create_backup", "overwrite_existing", "validate_json", "delete_originals", "parallelism"):
            value = getattr(self, name)
            if value is not None:
                setattr(options, name, value)
        return options


class MigrateFileRequest(BaseModel):
    file: str
    json_path: str | None = None
    validate_json: bool = True


class RestoreRequest(BaseModel):
    backup_path: str
    target_dir: str


class ValidateRequest(BaseModel):
    document: dict[str, Any]
    document_type: str | None = None


def _prepare_config(config_path: Path | None) -> AppConfig:
    settings = get_settings()
    config = load_config(config_path or settings.config_path)
    if settings.enable_local_api is not None:
        config.runtime.enable_local_api = settings.enable_local_api
    return config


def create_app(
    config_path: Path | None = None,
    *,
    require_enabled: bool = True,
    config: AppConfig | None = None,
) -> FastAPI:
    config = config or _prepare_config(config_path)
    if require_enabled and not config.runtime.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via config.runtime.enable_local_api")
    migrator = MarkdownMigrator(config)
    validator = SchemaValidator()
    app = FastAPI(title="Memory Bank Migrator", version="0.1.0")
    app.state.config = config
    app.state.migrator = migrator

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/migrate")
    def migrate(request: MigrateRequest) -> dict[str, Any]:
        result = migrator.migrate_directory(Path(request.directory), request.to_options(config))
        return result.to_dict()

    @app.post("/migrate/file")
    def migrate_file(request: MigrateFileRequest) -> dict[str, Any]:
        options = config.default_options()
        options.validate_json = request.validate_json
        json_path = Path(request.json_path) if request.json_path else None
        success = migrator.migrate_file(Path(request.file), json_path, options)
        return {"success": success, "file": request.file}

    @app.post("/restore")
    def restore(request: RestoreRequest) -> dict[str, Any]:
        success = migrator.backup.restore_from_backup(
            Path(request.backup_path), Path(request.target_dir)
        )
        return {"success": success}

    @app.post("/validate")
    def validate(request: ValidateRequest) -> dict[str, Any]:
        document_type = request.document_type
        if document_type is None:
            metadata = request.document.get("metadata")
            document_type = (
                str(metadata.get("documentType", "generic")) if isinstance(metadata, dict) else "generic"
            )
        result = validator.validate_json(request.document, document_type)
        return {"success": result.success, "errors": result.errors}

    return app


__all__ = ["create_app", "MigrateRequest", "RestoreRequest", "ValidateRequest"]
