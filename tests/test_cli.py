import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from memory_bank_migrator.cli import app
from memory_bank_migrator.settings import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("MBM_CONFIG_PATH", "MBM_ENABLE_LOCAL_API", "MBM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _bank(tmp_path: Path) -> Path:
    bank = tmp_path / "docs"
    bank.mkdir()
    (bank / "progress.md").write_text("# Progress\n\n## Current Status\nBeta\n", encoding="utf-8")
    return bank


def test_migrate_directory(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    result = runner.invoke(app, ["migrate", str(bank), "--no-backup"])
    assert result.exit_code == 0, result.output
    assert "Migration completed successfully!" in result.output
    assert (bank / "progress.json").exists()


def test_migrate_reports_failures(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    (bank / "broken.md").write_bytes(b"\xff\xfe")
    result = runner.invoke(app, ["migrate", str(bank), "--no-backup"])
    assert result.exit_code == 1
    assert "Migration completed with errors!" in result.output


def test_migrate_single_file(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    result = runner.invoke(app, ["migrate", "--file", str(bank / "progress.md")])
    assert result.exit_code == 0, result.output
    assert (bank / "progress.json").exists()


def test_validate_command(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    runner.invoke(app, ["migrate", str(bank), "--no-backup"])
    json_file = bank / "progress.json"

    result = runner.invoke(app, ["validate", str(json_file)])
    assert result.exit_code == 0, result.output
    assert "Valid progress document" in result.output

    payload = json.loads(json_file.read_text(encoding="utf-8"))
    payload["content"] = {}
    json_file.write_text(json.dumps(payload), encoding="utf-8")
    result = runner.invoke(app, ["validate", str(json_file)])
    assert result.exit_code == 1
    assert "Content cannot be empty" in result.output


def test_classify_command(tmp_path: Path) -> None:
    note = tmp_path / "notes.md"
    note.write_text("# Active Context\n", encoding="utf-8")
    result = runner.invoke(app, ["classify", str(note)])
    assert result.exit_code == 0
    assert result.output.strip() == "active_context"


def test_restore_command(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    result = runner.invoke(app, ["migrate", str(bank), "--delete-originals"])
    assert result.exit_code == 0, result.output
    backup_dir = next(tmp_path.glob(".backup_docs_*"))
    assert not (bank / "progress.md").exists()

    result = runner.invoke(app, ["restore", str(backup_dir), str(bank)])
    assert result.exit_code == 0, result.output
    assert (bank / "progress.md").exists()
    assert not (bank / "progress.json").exists()

    result = runner.invoke(app, ["restore", str(tmp_path / "missing"), str(bank)])
    assert result.exit_code == 1


def test_serve_refuses_when_api_disabled() -> None:
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 1
    assert "Local API is disabled" in result.output


def test_serve_runs_uvicorn(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "config.toml").write_text(
        '[runtime]\nenable_local_api = true\n\n[api]\nport = 9123\n', encoding="utf-8"
    )
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda api, host, port: calls.append((host, port)))

    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 0, result.output
    assert calls == [("127.0.0.1", 9123)]


def test_migrate_uses_config_defaults(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    config = tmp_path / "custom.toml"
    config.write_text("[migration]\ncreate_backup = false\ndelete_originals = true\n", encoding="utf-8")

    result = runner.invoke(app, ["migrate", str(bank), "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert "Create backup: No" in result.output
    assert not list(tmp_path.glob(".backup_docs_*"))
    assert not (bank / "progress.md").exists()


def test_migrate_flags_override_config(tmp_path: Path) -> None:
    bank = _bank(tmp_path)
    config = tmp_path / "custom.toml"
    config.write_text("[migration]\ncreate_backup = false\ndelete_originals = true\n", encoding="utf-8")

    result = runner.invoke(
        app, ["migrate", str(bank), "--config", str(config), "--backup", "--keep-originals"]
    )
    assert result.exit_code == 0, result.output
    assert len(list(tmp_path.glob(".backup_docs_*"))) == 1
    assert (bank / "progress.md").exists()
