import os
import stat
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

from memory_bank_migrator.utils import (
    FILE_MODE,
    atomic_write,
    filesystem_timestamp,
    generate_run_id,
    iso_timestamp,
    iter_markdown_files,
    json_path_for,
)


def test_iso_timestamp_has_millisecond_precision() -> None:
    moment = datetime(2024, 5, 1, 10, 20, 30, 123456, tzinfo=timezone.utc)
    assert iso_timestamp(moment) == "2024-05-01T10:20:30.123Z"
    assert filesystem_timestamp(moment) == "2024-05-01T10-20-30-123Z"


def test_generate_run_id_unique() -> None:
    first = generate_run_id("test")
    second = generate_run_id("test")
    assert first != second
    assert first.startswith("test-")
    assert generate_run_id().startswith("migration-")


def test_json_path_for() -> None:
    assert json_path_for(Path("bank/notes.md")) == Path("bank/notes.json")
    assert json_path_for(Path("bank/archive.v1.md")) == Path("bank/archive.v1.json")
    assert json_path_for(Path("bank/readme.txt")) == Path("bank/readme.txt")


def test_iter_markdown_files_is_recursive_and_sorted(tmp_path: Path) -> None:
    (tmp_path / "b").mkdir()
    for name in ("b/z.md", "a.md", "b/a.md", "c.txt", "d.markdown"):
        (tmp_path / name).write_text("x", encoding="utf-8")
    (tmp_path / "folder.md").mkdir()

    found = [path.relative_to(tmp_path).as_posix() for path in iter_markdown_files(tmp_path)]
    assert found == ["a.md", "b/a.md", "b/z.md"]


def test_atomic_write_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "out" / "doc.json"
    atomic_write(target, "{}\n")
    atomic_write(target, '{"a": "日本語"}\n')
    assert target.read_text(encoding="utf-8") == '{"a": "日本語"}\n'
    assert [path.name for path in target.parent.iterdir()] == ["doc.json"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_atomic_write_follows_umask(tmp_path: Path) -> None:
    mask = os.umask(0)
    os.umask(mask)
    target = tmp_path / "doc.json"
    atomic_write(target, "{}\n")
    assert FILE_MODE == 0o666 & ~mask
    assert stat.S_IMODE(target.stat().st_mode) == FILE_MODE


def test_atomic_write_removes_temp_file_on_failure(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "doc.json"

    def fail(src, dst):
        raise OSError("read-only filesystem")

    monkeypatch.setattr(os, "replace", fail)
    with pytest.raises(OSError):
        atomic_write(target, "{}\n")
    assert list(tmp_path.iterdir()) == []
