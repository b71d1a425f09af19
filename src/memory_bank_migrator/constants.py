from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_PATH = Path("config.toml")
ENV_PREFIX = "MBM_"

MARKDOWN_SUFFIX = ".md"
JSON_SUFFIX = ".json"
BACKUP_PREFIX = ".backup_"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "MARKDOWN_SUFFIX",
    "JSON_SUFFIX",
    "BACKUP_PREFIX",
]
