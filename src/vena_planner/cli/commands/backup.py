"""Backup commands: export and import a user's history as JSON."""

from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...io.serializers import ValidationError
from .. import views
from ..app import ConfigPathOption, HistoryPathOption, UserOption, app, get_config, get_store


@app.command("export")
def export_data(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Backup file (default: vena_backup_<date>.json)"),
    ] = None,
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
    config_path: ConfigPathOption = None,
) -> None:
    """
    Export history and engine settings to a JSON backup.
    """
    store = get_store(history_path, user)
    cfg = get_config(config_path)

    if output is None:
        output = Path(f"vena_backup_{datetime.now():%Y-%m-%d}.json")

    try:
        written = store.export_backup(output, config=asdict(cfg))
    except (ValidationError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Exported {user}'s history to {written}")


@app.command("import")
def import_data(
    backup: Annotated[
        Path,
        typer.Argument(help="Backup file written by 'export'"),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
) -> None:
    """
    Replace a user's history with the contents of a backup.
    """
    store = get_store(history_path, user)

    if not backup.exists():
        views.print_error(f"Backup not found: {backup}")
        raise typer.Exit(1)

    if store.exists() and not force and not views.confirm_action(
        f"Replace {user}'s current history with {backup}?"
    ):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        count = store.import_backup(backup)
    except (ValidationError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Imported {count} session(s) for {user}.")
