from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .constants import DEFAULT_CONFIG_PATH
from .models import MigrationOptions


@dataclass(slots=True)
class MigrationDefaults:
    create_backup: bool = True
    overwrite_existing: bool = False
    validate_json: bool = True
    delete_originals: bool = False

    def to_options(self, parallelism: int | None = None) -> MigrationOptions:
        return MigrationOptions(
            create_backup=self.create_backup,
            overwrite_existing=self.overwrite_existing,
            validate_json=self.validate_json,
            delete_originals=self.delete_originals,
            parallelism=parallelism,
        )


@dataclass(slots=True)
class RuntimeConfig:
    backup_dir: Path | None = None
    log_dir: Path | None = None
    summary_csv: str = "summary.csv"
    parallelism: int = 1
    enable_local_api: bool = False


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(slots=True)
class AppConfig:
    migration: MigrationDefaults = field(default_factory=MigrationDefaults)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    api: APIConfig = field(default_factory=APIConfig)

    def default_options(self) -> MigrationOptions:
        return self.migration.to_options(self.runtime.parallelism)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _optional_path(value: object | None) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value))


def _build_migration(data: Mapping[str, object] | None) -> MigrationDefaults:
    if not data:
        return MigrationDefaults()
    return MigrationDefaults(
        create_backup=bool(data.get("create_backup", True)),
        overwrite_existing=bool(data.get("overwrite_existing", False)),
        validate_json=bool(data.get("validate_json", True)),
        delete_originals=bool(data.get("delete_originals", False)),
    )


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        backup_dir=_optional_path(data.get("backup_dir")),
        log_dir=_optional_path(data.get("log_dir")),
        summary_csv=str(data.get("summary_csv", "summary.csv")),
        parallelism=max(1, int(data.get("parallelism", 1))),
        enable_local_api=bool(data.get("enable_local_api", False)),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8000)))


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name)
    return value if isinstance(value, Mapping) else None


def load_config(path: Path | None = None) -> AppConfig:
    path = path or DEFAULT_CONFIG_PATH
    raw = _read_toml(path)
    return AppConfig(
        migration=_build_migration(_section(raw, "migration")),
        runtime=_build_runtime(_section(raw, "runtime")),
        api=_build_api(_section(raw, "api")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "migration": {
            "create_backup": config.migration.create_backup,
            "overwrite_existing": config.migration.overwrite_existing,
            "validate_json": config.migration.validate_json,
            "delete_originals": config.migration.delete_originals,
        },
        "runtime": {
            "backup_dir": str(config.runtime.backup_dir) if config.runtime.backup_dir else None,
            "log_dir": str(config.runtime.log_dir) if config.runtime.log_dir else None,
            "summary_csv": config.runtime.summary_csv,
            "parallelism": config.runtime.parallelism,
            "enable_local_api": config.runtime.enable_local_api,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
        },
    }
    return json.dumps(payload, indent=2)


__all__ = [
    "AppConfig",
    "APIConfig",
    "MigrationDefaults",
    "RuntimeConfig",
    "dump_config",
    "load_config",
]
