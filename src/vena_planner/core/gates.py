"""
Logic gates: advisory checks run when a heavy session is committed.

Three independent checks, each pure and order-insensitive:
- Sandbagging: easy top single but the paired volume work failed
- Fatigue: top single declined across three consecutive same-kind sessions
- Axial load: heavy squat session exceeded the spinal-load capacity

Gates never raise. Too little history is simply "not triggered".
Their outcomes are stored on the record for audit and are never
re-evaluated for past sessions.
"""

import logging
from datetime import datetime

from .config import (
    AXIAL_ADJUSTMENT_FACTOR,
    AXIAL_RPE_LIMIT,
    DEFAULT_AXIAL_CAPACITY,
    PIVOT_ADJUSTMENT_FACTOR,
    SANDBAGGING_RPE_MAX,
)
from .metrics import backdown_weight, estimated_axial_load, sessions_of_kind
from .models import GateReport, GateResult, SessionAdjustment, SessionRecord

logger = logging.getLogger(__name__)

NOT_TRIGGERED = GateResult(triggered=False)

TUESDAY = 1
SATURDAY = 5


def check_sandbagging(top_rpe: float | None, volume_success: bool) -> GateResult:
    """
    Gate A: easy top single paired with failed volume work.

    Triggers when the single was rated RPE 7.5 or lower while the paired
    Volume day was not completed; the single is being undershot relative
    to true capacity. An unrated single never triggers.

    Args:
        top_rpe: RPE of today's top single
        volume_success: Whether the paired Volume day was completed

    Returns:
        GateResult with action ``increase_volume_intensity`` when triggered
    """
    if top_rpe is not None and top_rpe <= SANDBAGGING_RPE_MAX and not volume_success:
        return GateResult(
            triggered=True,
            message="Focus Mismatch Detected: Easy top single but failed back-off.",
            action="increase_volume_intensity",
        )
    return NOT_TRIGGERED


def check_fatigue(current: SessionRecord, history: list[SessionRecord]) -> GateResult:
    """
    Gate B: regression in top strength over three sessions.

    Compares the current top single with the two most recent earlier
    sessions of the same kind and triggers on a strict decline
    (current < last1 < last2). Heavy days only.

    Args:
        current: Session being committed
        history: Existing records (may or may not include ``current``)

    Returns:
        GateResult with action ``activate_pivot`` when triggered
    """
    if not current.kind.is_heavy:
        return NOT_TRIGGERED

    previous = [r for r in sessions_of_kind(history, current.kind) if r.id != current.id]
    previous.sort(key=lambda r: r.date, reverse=True)

    if len(previous) < 2:
        return NOT_TRIGGERED

    current_top = current.top_single
    last1_top = previous[0].top_single
    last2_top = previous[1].top_single
    if current_top is None or last1_top is None or last2_top is None:
        return NOT_TRIGGERED

    if current_top < last1_top < last2_top:
        return GateResult(
            triggered=True,
            message="Fatigue accumulation detected. Performance regression over 3 sessions.",
            action="activate_pivot",
        )
    return NOT_TRIGGERED


def check_axial_load(
    session: SessionRecord,
    pivot_active: bool,
    capacity: float = DEFAULT_AXIAL_CAPACITY,
) -> GateResult:
    """
    Gate C: spinal loading from a heavy squat session.

    Load = top single + 3x3 back-offs at 82% (75% under pivot). Triggers
    when load exceeds ``capacity`` or the single was rated above RPE 9.
    """
    if session.kind.day_type != "heavy" or session.kind.lift != "squat":
        return NOT_TRIGGERED
    if session.top_single is None:
        return NOT_TRIGGERED

    backdown = backdown_weight(session.top_single, pivot_active)
    load = estimated_axial_load(session.top_single, backdown)
    rpe = session.top_rpe

    if load > capacity or (rpe is not None and rpe > AXIAL_RPE_LIMIT):
        return GateResult(
            triggered=True,
            message="High Systemic Fatigue. Saturday session should be adjusted.",
            action="reduce_saturday_load",
        )
    return NOT_TRIGGERED


def evaluate_gates(
    session: SessionRecord,
    history: list[SessionRecord],
    pivot_active: bool,
    capacity: float = DEFAULT_AXIAL_CAPACITY,
    volume_success: bool = True,
) -> GateReport:
    """
    Run all three gates for a session about to be saved.

    Args:
        session: The session being committed
        history: Existing records for the lift
        pivot_active: Pivot state the session ran under
        capacity: Per-user axial-load capacity
        volume_success: Outcome of the paired Volume day

    Returns:
        GateReport with one GateResult per gate
    """
    report = GateReport(
        sandbagging=check_sandbagging(session.top_rpe, volume_success),
        fatigue=check_fatigue(session, history),
        axial_load=check_axial_load(session, pivot_active, capacity),
    )
    if report.flags:
        logger.info("Gates triggered for %s %s: %s", session.kind.tag, session.date, sorted(report.flags))
    return report


def next_session_adjustment(day_of_week: int, history: list[SessionRecord]) -> SessionAdjustment:
    """
    Adjust the upcoming session from the flags stored on the last record.

    A fatigue flag requests a pivot block. A high axial load on a Tuesday
    heavy squat reduces the following Saturday.

    Args:
        day_of_week: Upcoming session weekday (Monday=0 ... Sunday=6)
        history: Date-ordered records

    Returns:
        SessionAdjustment (standard plan if nothing applies)
    """
    if not history:
        return SessionAdjustment()

    last = history[-1]
    if "fatigue" in last.gate_flags:
        return SessionAdjustment(
            message="Pivot Block Active: Deload Requested.",
            load_modifier=PIVOT_ADJUSTMENT_FACTOR,
            variation="pivot",
        )

    last_weekday = datetime.strptime(last.date, "%Y-%m-%d").weekday()
    if (
        last_weekday == TUESDAY
        and day_of_week == SATURDAY
        and last.kind.is_heavy
        and last.kind.lift == "squat"
        and "axial_overload" in last.gate_flags
    ):
        return SessionAdjustment(
            message="High Axial Fatigue from Tuesday. Reducing load.",
            load_modifier=AXIAL_ADJUSTMENT_FACTOR,
            variation="pause_squat",
        )

    return SessionAdjustment()
