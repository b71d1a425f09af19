"""Snapshots of a memory bank directory taken before migration, and their restore."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .constants import BACKUP_PREFIX
from .utils import filesystem_timestamp, is_within

logger = logging.getLogger(__name__)


class BackupError(RuntimeError):
    """Raised when a backup cannot be created; callers must not mutate the source."""


class MigrationBackup:
    """Creates whole-tree backups and restores them.

    ``create_backup`` raises on failure while ``restore_from_backup`` reports
    failure through its return value, so a failed restore leaves the caller free
    to try another recovery path.
    """

    def __init__(self, backup_root: Path | None = None) -> None:
        self._backup_root = backup_root

    def backup_path_for(self, directory: Path) -> Path:
        directory = Path(directory).resolve()
        name = f"{BACKUP_PREFIX}{directory.name}_{filesystem_timestamp()}"
        root = self._backup_root if self._backup_root is not None else directory.parent
        return root / name

    def create_backup(self, directory: Path) -> Path:
        directory = Path(directory)
        try:
            if not directory.is_dir():
                raise FileNotFoundError(f"Directory does not exist: {directory}")
            backup_dir = self.backup_path_for(directory)
            if is_within(backup_dir, directory):
                raise ValueError(f"Backup location {backup_dir} is inside {directory}")
            backup_dir.mkdir(parents=True, exist_ok=True)
            self._copy_directory(directory, backup_dir)
        except (OSError, ValueError) as exc:
            logger.error("Failed to create backup: %s", exc)
            raise BackupError(f"Failed to create backup: {exc}") from exc

        logger.info("Created backup at: %s", backup_dir)
        return backup_dir

    def restore_from_backup(self, backup_path: Path, target_dir: Path) -> bool:
        backup_path = Path(backup_path)
        target_dir = Path(target_dir)
        logger.info("Restoring from backup: %s to %s", backup_path, target_dir)
        if not backup_path.is_dir():
            logger.error("Failed to restore from backup: %s is not a directory", backup_path)
            return False
        if is_within(backup_path, target_dir):
            logger.error("Failed to restore from backup: %s lies inside %s", backup_path, target_dir)
            return False
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            self._delete_directory_contents(target_dir)
            self._copy_directory(backup_path, target_dir)
        except OSError as exc:
            logger.error("Failed to restore from backup: %s", exc)
            return False

        logger.info("Successfully restored from backup")
        return True

    def _copy_directory(self, source: Path, destination: Path) -> None:
        shutil.copytree(source, destination, dirs_exist_ok=True)

    def _delete_directory_contents(self, directory: Path) -> None:
        for entry in directory.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()


__all__ = ["BackupError", "MigrationBackup"]
