"""Planning commands: today, status, plot."""

import json
from datetime import date as date_cls
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.autopilot import evaluate_system_status, resolve_pivot
from ...core.config import AUTOPILOT_WINDOW, DEFAULT_DAYS_SINCE_LAST
from ...core.gates import next_session_adjustment
from ...core.metrics import days_since_last
from ...core.models import Readiness
from ...core.predictor import advisory_target
from ...core.suggestion import suggest_next_heavy
from ...core.wave import next_volume_target, wave_progress
from ...io.serializers import ValidationError
from .. import views
from ..app import (
    ConfigPathOption,
    HistoryPathOption,
    JsonOption,
    LiftOption,
    UserOption,
    app,
    check_lift,
    get_config,
    get_store,
)


@app.command()
def today(
    pivot: Annotated[
        bool,
        typer.Option("--pivot", help="Request the pivot (deload) protocol"),
    ] = False,
    sleep: Annotated[
        int,
        typer.Option("--sleep", help="Sleep score 1-5 (5 = great)"),
    ] = 3,
    stress: Annotated[
        int,
        typer.Option("--stress", help="Stress score 1-5 (1 = calm)"),
    ] = 3,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Plan date (YYYY-MM-DD, default: today)"),
    ] = None,
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
    config_path: ConfigPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show today's heavy single, wave target and system status.
    """
    lift_id = check_lift(lift)
    cfg = get_config(config_path)
    store = get_store(history_path, user)

    try:
        plan_date = datetime.strptime(date, "%Y-%m-%d").date() if date else date_cls.today()
    except ValueError:
        views.print_error(f"Invalid date: {date}. Expected YYYY-MM-DD")
        raise typer.Exit(1)

    try:
        history = store.load_history(lift_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    status = evaluate_system_status(history)
    pivot_active = resolve_pivot(status, pivot)

    suggestion = suggest_next_heavy(history, pivot_active)
    volume = next_volume_target(history, pivot_active, lift_id, cfg)
    progress = wave_progress(volume)
    adjustment = next_session_adjustment(plan_date.weekday(), history)

    gap = days_since_last(history, plan_date)
    advisory = advisory_target(
        None,
        cfg.training_max(lift_id),
        Readiness(sleep_score=sleep, stress_score=stress),
        gap if gap is not None else DEFAULT_DAYS_SINCE_LAST,
    )

    if json_out:
        print(json.dumps({
            "status": status.status,
            "pivot_active": pivot_active,
            "heavy": (
                {"target": suggestion.target, "rationale": suggestion.rationale}
                if suggestion else None
            ),
            "volume": {
                "weight": volume.weight,
                "reps": volume.reps,
                "note": volume.note,
                "is_pause": volume.is_pause,
            },
            "adjustment": {
                "message": adjustment.message,
                "load_modifier": adjustment.load_modifier,
                "variation": adjustment.variation,
            },
            "advisory": {"weight": advisory.weight, "source": advisory.source},
        }, indent=2))
        return

    views.console.print(f"[bold]{plan_date:%A} session[/bold] ({lift_id}, {user})")
    views.print_system_status(status)
    views.print_heavy_plan(suggestion, lift_id, pivot_active)
    views.print_volume_plan(volume, progress, lift_id)
    views.print_adjustment(adjustment)
    views.print_advisory(advisory)


@app.command()
def status(
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the autopilot status for a lift.
    """
    lift_id = check_lift(lift)
    store = get_store(history_path, user)

    try:
        history = store.load_history(lift_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    result = evaluate_system_status(history)

    if json_out:
        print(json.dumps({
            "status": result.status,
            "force_pivot": result.force_pivot,
            "bad_count": result.bad_count,
            "fail_count": result.fail_count,
        }, indent=2))
        return

    views.print_system_status(result)
    views.console.print(
        f"Last {min(len(history), AUTOPILOT_WINDOW)} sessions: "
        f"{result.bad_count} bad/overshoot, {result.fail_count} failed waves"
    )


@app.command()
def plot(
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help="Weeks of wave tonnage to show"),
    ] = 4,
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
) -> None:
    """
    Show top-single progress and weekly wave tonnage.
    """
    lift_id = check_lift(lift)
    store = get_store(history_path, user)

    try:
        history = store.load_history(lift_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_top_single_plot(history, lift_id)
    views.console.print()
    views.print_tonnage_chart(history, weeks)
