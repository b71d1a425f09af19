from __future__ import annotations

import hashlib
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .constants import JSON_SUFFIX, MARKDOWN_SUFFIX


ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2024-05-01T10:20:30.123Z``."""

    dt = (dt or utc_now()).astimezone(timezone.utc)
    return dt.strftime(ISO_FORMAT)[:-4] + "Z"


def filesystem_timestamp(dt: datetime | None = None) -> str:
    return iso_timestamp(dt).replace(":", "-").replace(".", "-")


def generate_run_id(prefix: str = "migration") -> str:
    epoch_ms = int(time.time() * 1000)
    random_bits = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
    return f"{prefix}-{epoch_ms}-{random_bits}"


def _umask_file_mode() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


# os.umask is process-wide, so it is read once at import
FILE_MODE = _umask_file_mode()


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile("w", delete=False, dir=path.parent, encoding=encoding)
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def iter_markdown_files(directory: Path) -> Iterator[Path]:
    for file_path in sorted(directory.rglob("*")):
        if file_path.is_file() and file_path.name.endswith(MARKDOWN_SUFFIX):
            yield file_path


def json_path_for(markdown_path: Path) -> Path:
    if not markdown_path.name.endswith(MARKDOWN_SUFFIX):
        return markdown_path
    return markdown_path.with_name(markdown_path.name[: -len(MARKDOWN_SUFFIX)] + JSON_SUFFIX)


def is_within(path: Path, parent: Path) -> bool:
    try:
        path.resolve().relative_to(parent.resolve())
    except ValueError:
        return False
    return True


def elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
