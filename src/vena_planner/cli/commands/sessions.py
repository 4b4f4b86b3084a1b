"""Session commands: log-heavy, log-volume, show-history, clear-history."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.autopilot import evaluate_system_status, resolve_pivot
from ...core.commit import HeavySessionInput, NoPendingHeavySession, attach_volume_result, commit_heavy_session
from ...core.config import WAVE_SETS
from ...core.metrics import format_weight
from ...core.models import Readiness
from ...io.serializers import ValidationError, record_to_dict
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


def _yes_no(value: str, name: str) -> bool:
    """Parse a yes/no option value."""
    v = value.strip().lower()
    if v in ("y", "yes", "true", "1"):
        return True
    if v in ("n", "no", "false", "0"):
        return False
    views.print_error(f"{name} must be yes or no, got {value!r}")
    raise typer.Exit(1)


@app.command("log-heavy")
def log_heavy(
    top_single: Annotated[
        float,
        typer.Option("--single", "-s", help="Top single weight (lb)"),
    ],
    rpe: Annotated[
        Optional[float],
        typer.Option("--rpe", "-r", help="RPE of the top single (1-10)"),
    ] = None,
    quality: Annotated[
        Optional[str],
        typer.Option("--quality", "-q", help="Movement quality: good | bad"),
    ] = None,
    overshoot: Annotated[
        str,
        typer.Option("--overshoot", help="Exceeded the planned intensity: yes | no"),
    ] = "no",
    backdown_fail: Annotated[
        str,
        typer.Option("--backdown-fail", help="Failed the back-off sets: yes | no"),
    ] = "no",
    prev_vol: Annotated[
        Optional[float],
        typer.Option("--prev-vol", help="Weight used on the last wave (lb)"),
    ] = None,
    sleep: Annotated[
        int,
        typer.Option("--sleep", help="Sleep score 1-5 (5 = great)"),
    ] = 3,
    stress: Annotated[
        int,
        typer.Option("--stress", help="Stress score 1-5 (1 = calm)"),
    ] = 3,
    pivot: Annotated[
        bool,
        typer.Option("--pivot", help="Run today under the pivot (deload) protocol"),
    ] = False,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Session date (YYYY-MM-DD, default: today)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Session notes"),
    ] = None,
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
    config_path: ConfigPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a heavy day: top single plus back-off outcome.

    Runs the logic gates against existing history before saving, and
    prints the next wave target.

      vena-planner log-heavy --lift squat --single 455 --rpe 8 --quality good
    """
    lift_id = check_lift(lift)
    cfg = get_config(config_path)
    store = get_store(history_path, user)

    if date is None:
        date = datetime.now().strftime("%Y-%m-%d")

    if quality is not None and quality not in ("good", "bad"):
        views.print_error("Quality must be good or bad")
        raise typer.Exit(1)

    try:
        history = store.load_history(lift_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    status = evaluate_system_status(history)
    pivot_active = resolve_pivot(status, pivot)

    try:
        entry = HeavySessionInput(
            date=date,
            lift=lift_id,
            top_single=top_single,
            top_rpe=rpe,
            top_quality=quality,  # type: ignore[arg-type]
            overshoot=_yes_no(overshoot, "--overshoot"),
            backdown_failed=_yes_no(backdown_fail, "--backdown-fail"),
            previous_volume=prev_vol,
            readiness=Readiness(sleep_score=sleep, stress_score=stress),
            notes=notes,
        )
        result = commit_heavy_session(history, entry, pivot_active, cfg)
    except ValueError as e:
        views.print_error(f"Invalid session data: {e}")
        raise typer.Exit(1)

    store.append_session(result.record)

    if json_out:
        print(json.dumps({
            "record": record_to_dict(result.record),
            "replaced": result.replaced is not None,
            "gates": result.gates.messages,
            "next_volume": {
                "weight": result.next_volume.weight,
                "reps": result.next_volume.reps,
                "note": result.next_volume.note,
                "is_pause": result.next_volume.is_pause,
            },
        }, indent=2))
        return

    if result.replaced is not None:
        kept = " (volume result kept)" if result.replaced.has_volume_result else ""
        views.print_warning(f"Replaced the {lift_id} heavy day logged on {date}{kept}")

    views.print_gate_report(result.gates)
    views.print_success(
        f"Logged for {user}! Next Wave Target: {format_weight(result.next_volume.weight)} "
        f"for {WAVE_SETS}x{result.next_volume.reps}"
    )


@app.command("log-volume")
def log_volume(
    weight: Annotated[
        float,
        typer.Option("--weight", "-w", help="Weight used on the wave sets (lb)"),
    ],
    failed: Annotated[
        str,
        typer.Option("--failed", help="Missed any prescribed rep: yes | no"),
    ] = "no",
    rpe: Annotated[
        Optional[float],
        typer.Option("--rpe", "-r", help="RPE of the wave sets"),
    ] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", help="Reps per set (default: the prescribed rung)"),
    ] = None,
    pivot: Annotated[
        bool,
        typer.Option("--pivot", help="The wave ran under the pivot protocol"),
    ] = False,
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
    config_path: ConfigPathOption = None,
) -> None:
    """
    Log a volume day by attaching it to the pending heavy session.
    """
    lift_id = check_lift(lift)
    cfg = get_config(config_path)
    store = get_store(history_path, user)

    if weight <= 0:
        views.print_error("Weight must be positive")
        raise typer.Exit(1)

    try:
        history = store.load_history(lift_id)
        pivot_active = resolve_pivot(evaluate_system_status(history), pivot)
        updated = attach_volume_result(
            history,
            lift_id,
            weight=weight,
            failed=_yes_no(failed, "--failed"),
            pivot_active=pivot_active,
            rpe=rpe,
            reps=reps,
            config=cfg,
        )
    except (NoPendingHeavySession, ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.replace_session(updated)
    views.print_success(
        f"Wave Logged for {user}! {format_weight(weight)} x {WAVE_SETS}x{updated.volume_reps}"
    )


@app.command("show-history")
def show_history(
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display a lift's training history.
    """
    lift_id = check_lift(lift)
    store = get_store(history_path, user)

    try:
        records = store.load_history(lift_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([record_to_dict(r) for r in records], indent=2))
        return

    views.print_history(records, lift_id)


@app.command("clear-history")
def clear_history(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    lift: LiftOption = "squat",
    user: UserOption = "default",
    history_path: HistoryPathOption = None,
) -> None:
    """
    Delete every session for one lift.
    """
    lift_id = check_lift(lift)
    store = get_store(history_path, user)

    if not force and not views.confirm_action(f"Clear {lift_id} data for {user}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        removed = store.clear_lift(lift_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Removed {removed} {lift_id} session(s) for {user}.")
