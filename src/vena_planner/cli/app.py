"""Shared Typer app object, shared option types, and store/config utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import EngineConfig
from ..core.engine.config_loader import load_engine_config
from ..core.models import LIFTS, Lift
from ..io.history_store import HistoryStore, get_default_history_path
from . import views

UserOption = Annotated[
    str,
    typer.Option("--user", "-u", help="Lifter whose history is used"),
]

LiftOption = Annotated[
    str,
    typer.Option("--lift", "-l", help="Lift: squat (default) or bench"),
]

HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]

ConfigPathOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="YAML config overriding the bundled defaults"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="vena-planner",
    help="Heavy-single and volume-wave planner for squat and bench.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine decisions to stderr"),
    ] = False,
) -> None:
    """
    Squat/bench periodization planner.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_store(history_path: Path | None, user: str = "default") -> HistoryStore:
    """Get history store from path or default location for the given user."""
    if history_path is None:
        history_path = get_default_history_path(user)
    return HistoryStore(history_path, user=user)


def get_config(config_path: Path | None) -> EngineConfig:
    """Load engine config, exiting with an error message if it is invalid."""
    try:
        return load_engine_config(config_path)
    except ValueError as e:
        views.print_error(f"Invalid config: {e}")
        raise typer.Exit(1)


def check_lift(lift: str) -> Lift:
    """Validate the --lift option."""
    if lift not in LIFTS:
        views.print_error(f"Lift must be one of: {', '.join(LIFTS)}")
        raise typer.Exit(1)
    return lift  # type: ignore[return-value]
