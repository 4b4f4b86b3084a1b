"""
Shared calculations over session history.

Rounding, back-off and axial-load estimates, and the history filters
that every decision module uses.
"""

import math
from datetime import date, datetime

from .config import (
    BACKDOWN_FACTOR,
    BACKDOWN_REPS,
    BACKDOWN_SETS,
    PIVOT_BACKDOWN_FACTOR,
    ROUND_INCREMENT,
)
from .models import Lift, SessionKind, SessionRecord


def round5(x: float) -> float:
    """
    Round a weight to the nearest 5 (halves round up).

    round5(round5(x)) == round5(x) for every x.

    Args:
        x: Raw weight

    Returns:
        Weight rounded to a multiple of ROUND_INCREMENT
    """
    return math.floor(x / ROUND_INCREMENT + 0.5) * ROUND_INCREMENT


def backdown_weight(top_single: float, pivot_active: bool) -> float:
    """Back-off set weight: 82% of the single, or 75% under pivot."""
    factor = PIVOT_BACKDOWN_FACTOR if pivot_active else BACKDOWN_FACTOR
    return round5(top_single * factor)


def estimated_axial_load(top_single: float, backdown: float) -> float:
    """
    Estimated spinal loading for a heavy session.

    One top single plus BACKDOWN_SETS x BACKDOWN_REPS back-off reps.
    """
    return top_single * 1 + backdown * BACKDOWN_SETS * BACKDOWN_REPS


def sort_history(history: list[SessionRecord]) -> list[SessionRecord]:
    """Return history ordered by date (stable for equal dates)."""
    return sorted(history, key=lambda r: r.date)


def sessions_for_lift(history: list[SessionRecord], lift: Lift) -> list[SessionRecord]:
    """All records for one lift, in input order."""
    return [r for r in history if r.kind.lift == lift]


def sessions_of_kind(history: list[SessionRecord], kind: SessionKind) -> list[SessionRecord]:
    """All records matching both day type and lift."""
    return [r for r in history if r.kind == kind]


def recent_window(history: list[SessionRecord], n: int) -> list[SessionRecord]:
    """Last n records (fewer if history is shorter)."""
    if n <= 0:
        return []
    return history[-n:]


def latest_volume_record(history: list[SessionRecord]) -> SessionRecord | None:
    """
    Most recent non-pivot record with a recorded volume weight.

    Pivot work never counts (a pivot heavy day, or a wave logged under
    pivot): the wave resumes from the last real rung.
    """
    for record in reversed(history):
        if record.volume_weight and not record.volume_under_pivot:
            return record
    return None


def top_single_series(history: list[SessionRecord]) -> list[tuple[datetime, float]]:
    """(date, top_single) points for records with a top single."""
    return [
        (datetime.strptime(r.date, "%Y-%m-%d"), r.top_single)
        for r in history
        if r.top_single
    ]


def days_since_last(history: list[SessionRecord], today: date) -> int | None:
    """
    Whole days between the latest record and ``today``.

    Returns:
        Absolute day gap, or None if history is empty
    """
    if not history:
        return None
    last = datetime.strptime(history[-1].date, "%Y-%m-%d").date()
    return abs((today - last).days)


def format_weight(weight: float) -> str:
    """Render a weight without a trailing .0 (``450``, ``422.5``)."""
    return f"{weight:g}"
