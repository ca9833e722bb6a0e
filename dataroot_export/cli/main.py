"""
Command line interface for the export engine.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import typer

from dataroot_export.config import Settings, load_settings
from dataroot_export.errors import DatarootExportError
from dataroot_export.models import TimestampFormat
from dataroot_export.services.export import ExportService
from dataroot_export.services.logging import configure_logging, stop_logging

app = typer.Typer(
    name="dataroot-export",
    help="Deliver files and row data into a dataroot export target",
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    exists=False,
    help="Optional YAML settings override.",
)
DATAROOT_OPTION = typer.Option(
    None,
    "--dataroot",
    help="Writable root directory the export path is resolved against.",
)
PATH_OPTION = typer.Option(
    None,
    "--path",
    "-p",
    help="Destination directory relative to the dataroot.",
)
FILE_NAME_OPTION = typer.Option(
    None,
    "--file-name",
    "-f",
    help="File name for single-file and row exports.",
)
OVERWRITE_OPTION = typer.Option(
    None,
    "--overwrite/--no-overwrite",
    help="Overwrite destination files that already exist.",
)
CREATE_OPTION = typer.Option(
    None,
    "--create/--no-create",
    help="Create the destination directory when it is missing.",
)
TIMESTAMP_OPTION = typer.Option(
    None,
    "--timestamp/--no-timestamp",
    help="Append the current time to exported file names.",
)
DELIMITER_OPTION = typer.Option(
    None,
    "--delimiter",
    help="String placed between the file name and the timestamp.",
)
DATE_FORMAT_OPTION = typer.Option(
    None,
    "--date-format",
    help="Timestamp pattern (see the 'formats' command).",
)
BACKUP_OPTION = typer.Option(
    None,
    "--backup/--no-backup",
    help="Back up existing files before they are overwritten.",
)


def _load_settings(
    config_path: Optional[Path],
    dataroot: Optional[Path] = None,
    **target_options: Any,
) -> Settings:
    """Merge YAML settings with the command line overrides."""
    overrides: Dict[str, Any] = {}
    if dataroot is not None:
        overrides["dataroot"] = dataroot
    target = {key: value for key, value in target_options.items() if value is not None}
    if target:
        overrides["target"] = target
    try:
        return load_settings(config_path, overrides=overrides or None)
    except (DatarootExportError, FileNotFoundError) as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2)


@contextmanager
def _logging(settings: Settings) -> Iterator[None]:
    configure_logging(
        log_to_file=settings.log_to_file,
        log_file=settings.resolved_log_file(),
        log_to_console=settings.log_to_console,
        level=settings.log_level,
    )
    try:
        yield
    finally:
        stop_logging()


@app.command()
def check(
    config_path: Optional[Path] = CONFIG_OPTION,
    dataroot: Optional[Path] = DATAROOT_OPTION,
    path: Optional[str] = PATH_OPTION,
    create: Optional[bool] = CREATE_OPTION,
) -> None:
    """Check that the export destination exists and is writable."""

    settings = _load_settings(config_path, dataroot, base_path=path, create_if_missing=create)
    with _logging(settings):
        service = ExportService(settings)
        available = service.availability.ensure_available(settings.target)
    destination = service.resolver.resolve(settings.target)
    if not available:
        typer.echo(f"Destination {destination} is not available.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Destination {destination} is available.")


@app.command()
def deliver(
    files: List[Path] = typer.Argument(
        ...,
        help="Source files to deliver into the export target.",
    ),
    config_path: Optional[Path] = CONFIG_OPTION,
    dataroot: Optional[Path] = DATAROOT_OPTION,
    path: Optional[str] = PATH_OPTION,
    file_name: Optional[str] = FILE_NAME_OPTION,
    overwrite: Optional[bool] = OVERWRITE_OPTION,
    create: Optional[bool] = CREATE_OPTION,
    timestamp: Optional[bool] = TIMESTAMP_OPTION,
    delimiter: Optional[str] = DELIMITER_OPTION,
    date_format: Optional[TimestampFormat] = DATE_FORMAT_OPTION,
    backup: Optional[bool] = BACKUP_OPTION,
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the batch result as JSON.",
    ),
) -> None:
    """Copy source files into the export target."""

    settings = _load_settings(
        config_path,
        dataroot,
        base_path=path,
        file_name=file_name,
        overwrite=overwrite,
        create_if_missing=create,
        append_timestamp=timestamp,
        timestamp_delimiter=delimiter,
        timestamp_format=date_format,
        backup_before_overwrite=backup,
    )
    with _logging(settings):
        service = ExportService(settings)
        try:
            result = service.export_files([source.expanduser().resolve() for source in files])
        except DatarootExportError as exc:
            typer.echo(f"Export failed: {exc}", err=True)
            raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo(
            "Delivery complete: "
            f"{result.copied}/{len(result)} files copied "
            f"({result.skipped} skipped, {result.failed} failed)."
        )
    if not result.success:
        raise typer.Exit(code=1)


@app.command("write-rows")
def write_rows(
    rows_path: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        help="Path to a JSON list of row objects.",
    ),
    config_path: Optional[Path] = CONFIG_OPTION,
    dataroot: Optional[Path] = DATAROOT_OPTION,
    path: Optional[str] = PATH_OPTION,
    file_name: Optional[str] = FILE_NAME_OPTION,
    overwrite: Optional[bool] = OVERWRITE_OPTION,
    create: Optional[bool] = CREATE_OPTION,
    timestamp: Optional[bool] = TIMESTAMP_OPTION,
    delimiter: Optional[str] = DELIMITER_OPTION,
    date_format: Optional[TimestampFormat] = DATE_FORMAT_OPTION,
    backup: Optional[bool] = BACKUP_OPTION,
) -> None:
    """Serialize JSON rows into a comma-delimited export file."""

    try:
        payload = json.loads(rows_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Invalid JSON in {rows_path}: {exc}")
    rows = _load_rows(payload)
    settings = _load_settings(
        config_path,
        dataroot,
        base_path=path,
        file_name=file_name,
        overwrite=overwrite,
        create_if_missing=create,
        append_timestamp=timestamp,
        timestamp_delimiter=delimiter,
        timestamp_format=date_format,
        backup_before_overwrite=backup,
    )
    with _logging(settings):
        service = ExportService(settings)
        try:
            written = service.write_rows(rows)
        except DatarootExportError as exc:
            typer.echo(f"Export failed: {exc}", err=True)
            raise typer.Exit(code=1)
    if written is None:
        target = service.resolver.target_path(settings.target, settings.target.file_name)
        typer.echo(f"Skipped {target}: file exists.")
        return
    typer.echo(f"Wrote {len(rows)} rows to {written}")


@app.command()
def formats() -> None:
    """List the available timestamp formats with a preview of the current time."""

    now = datetime.now()
    for fmt, preview in TimestampFormat.previews(now).items():
        typer.echo(f"{fmt.value:8} {preview}")


def main() -> None:
    """Main entry point for CLI."""
    app()


def _load_rows(payload: Any) -> List[Dict[str, Any]]:
    """Accept either a list of row objects or a mapping with a ``rows`` key."""
    if isinstance(payload, dict) and "rows" in payload:
        payload = payload["rows"]
    if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
        raise typer.BadParameter("Expected a JSON list of row objects.")
    return payload


if __name__ == "__main__":
    main()
