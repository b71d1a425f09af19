from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..api import create_app
from ..backup import MigrationBackup
from ..config import AppConfig, load_config
from ..core import MarkdownMigrator
from ..detection import classify_document
from ..logging import configure_logging
from ..models import MigrationOptions, MigrationResult, MigrationStats
from ..settings import get_settings
from ..validation import SchemaValidator

console = Console()

app = typer.Typer(help="Migrate memory bank Markdown documents to JSON")


def _load_config(path: Path | None) -> AppConfig:
    return load_config(path or get_settings().config_path)


def _setup_logging(verbose: bool) -> None:
    configure_logging("DEBUG" if verbose else get_settings().log_level)


def _yes_no(value: bool) -> str:
    return "[green]Yes[/green]" if value else "[red]No[/red]"


def _resolve_options(config: AppConfig, **overrides: bool | int | None) -> MigrationOptions:
    options = config.default_options()
    for name, value in overrides.items():
        if value is not None:
            setattr(options, name, value)
    return options


def _print_result(result: MigrationResult) -> None:
    if result.success:
        console.print("[bold green]Migration completed successfully![/bold green]")
    else:
        console.print("[bold red]Migration completed with errors![/bold red]")
    if result.error:
        console.print(f"[red]{escape(result.error)}[/red]")

    stats = result.stats
    table = Table(title="Migration summary")
    table.add_column("Successful", style="green")
    table.add_column("Failed", style="red")
    table.add_column("Skipped", style="blue")
    table.add_row(str(stats.success_count), str(stats.failure_count), str(stats.skipped_count))
    console.print(table)

    if stats.backup_path:
        console.print(f"Backup created at: [cyan]{stats.backup_path}[/cyan]")
    for warning in stats.warnings:
        console.print(f"[yellow]Warning[/yellow]: {warning}")
    if stats.failures:
        failures = Table(title="Failures")
        failures.add_column("#")
        failures.add_column("Path", style="cyan")
        failures.add_column("Error", style="red")
        for index, failure in enumerate(stats.failures, start=1):
            failures.add_row(str(index), escape(str(failure.path)), escape(failure.error))
        console.print(failures)


@app.command()
def migrate(
    directory: Path = typer.Argument(Path("./docs"), help="Directory containing Markdown files"),
    file: Path | None = typer.Option(None, "--file", "-f", help="Migrate a single Markdown file"),
    backup: bool | None = typer.Option(
        None, "--backup/--no-backup", help="Create a backup before migrating [default: from config]"
    ),
    overwrite: bool | None = typer.Option(
        None, "--overwrite/--no-overwrite", help="Overwrite existing JSON files [default: from config]"
    ),
    validate: bool | None = typer.Option(
        None, "--validate/--no-validate", help="Validate generated JSON [default: from config]"
    ),
    delete_originals: bool | None = typer.Option(
        None,
        "--delete-originals/--keep-originals",
        help="Delete Markdown files after successful migration [default: from config]",
    ),
    parallel: int | None = typer.Option(None, "--parallel", min=1, help="Parallel workers"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", help="Output verbose logs"),
) -> None:
    _setup_logging(verbose)
    cfg = _load_config(config)
    migrator = MarkdownMigrator(cfg)
    options = _resolve_options(
        cfg,
        create_backup=backup,
        overwrite_existing=overwrite,
        validate_json=validate,
        delete_originals=delete_originals,
        parallelism=parallel,
    )

    console.print("[yellow]Migration settings:[/yellow]")
    console.print(f"Directory: [cyan]{directory}[/cyan]")
    if file:
        console.print(f"File: [cyan]{file}[/cyan]")
    console.print(f"Create backup: {_yes_no(options.create_backup)}")
    console.print(f"Overwrite existing: {_yes_no(options.overwrite_existing)}")
    console.print(f"Validate JSON: {_yes_no(options.validate_json)}")
    console.print(f"Delete originals: {_yes_no(options.delete_originals)}")
    if options.delete_originals:
        console.print("[bold yellow]Original Markdown files will be deleted after migration![/bold yellow]")

    if file:
        success = migrator.migrate_file(file, options=options)
        stats = MigrationStats(success_count=1 if success else 0)
        if not success:
            stats.record_failure(file, "Migration failed")
        result = MigrationResult(success=success, stats=stats)
    else:
        result = migrator.migrate_directory(directory, options)

    _print_result(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def restore(
    backup_path: Path = typer.Argument(..., help="Backup directory created by a migration"),
    target: Path = typer.Argument(..., help="Directory to restore into"),
    verbose: bool = typer.Option(False, "--verbose", help="Output verbose logs"),
) -> None:
    _setup_logging(verbose)
    if not MigrationBackup().restore_from_backup(backup_path, target):
        console.print(f"[red]Restore failed[/red]: {backup_path} -> {target}")
        raise typer.Exit(1)
    console.print(f"[green]Restored[/green] {target} from {backup_path}")


@app.command()
def validate(
    json_file: Path = typer.Argument(..., help="JSON document to validate"),
    document_type: str | None = typer.Option(None, "--type", help="Override the document type"),
) -> None:
    try:
        payload = json.loads(json_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot read {json_file}[/red]: {exc}")
        raise typer.Exit(1) from exc

    if document_type is None:
        metadata = payload.get("metadata") if isinstance(payload, dict) else None
        document_type = str(metadata.get("documentType", "generic")) if isinstance(metadata, dict) else "generic"

    result = SchemaValidator().validate_json(payload, document_type)
    if not result.success:
        console.print(f"[red]Invalid {document_type} document[/red]: {json_file}")
        for error in result.errors:
            console.print(f"  - {escape(error)}")
        raise typer.Exit(1)
    console.print(f"[green]Valid {document_type} document[/green]: {json_file}")


@app.command()
def classify(file: Path = typer.Argument(..., help="Markdown file to classify")) -> None:
    try:
        content = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Cannot read {file}[/red]: {exc}")
        raise typer.Exit(1) from exc
    console.print(classify_document(file.name, content).value)


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", help="Output verbose logs"),
) -> None:
    _setup_logging(verbose)
    cfg = _load_config(config)
    settings = get_settings()
    if settings.enable_local_api is not None:
        cfg.runtime.enable_local_api = settings.enable_local_api
    try:
        api = create_app(config=cfg)
    except RuntimeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc

    import uvicorn

    console.print(f"Serving on [cyan]http://{cfg.api.host}:{cfg.api.port}[/cyan]")
    uvicorn.run(api, host=cfg.api.host, port=cfg.api.port)


if __name__ == "__main__":
    app()
