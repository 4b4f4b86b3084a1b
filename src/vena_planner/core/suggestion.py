"""
Heavy-day suggestion: the next top-single target.

Looks only at the latest record and applies the intensity rules in strict
priority order. A pivot scales the result down by 15%.
"""

import logging

from .config import (
    BACKDOWN_FAIL_FACTOR,
    HEAVY_INCREMENT,
    HOLD_RPE,
    OVERSHOOT_FACTOR,
    OVERSHOOT_RPE,
    PIVOT_LOAD_FACTOR,
    PROGRESS_RPE_MAX,
)
from .metrics import format_weight, round5
from .models import HeavySuggestion, SessionRecord

logger = logging.getLogger(__name__)


def _base_target(last: SessionRecord, top: float) -> tuple[float, str]:
    """Apply the intensity rules to the latest record; returns (target, reason)."""
    rpe = last.top_rpe

    if last.backdown_failed:
        return round5(top * BACKDOWN_FAIL_FACTOR), "Backdown Fail"

    if last.overshoot or (rpe is not None and rpe >= OVERSHOOT_RPE):
        return round5(top * OVERSHOOT_FACTOR), "Overshoot Correction"

    if rpe is not None and rpe >= HOLD_RPE:
        return top, "Hold RPE 8"

    # An unrated single never counts as clean
    if last.top_quality == "good" and rpe is not None and rpe <= PROGRESS_RPE_MAX:
        return top + HEAVY_INCREMENT, "Clean RPE 8"

    return top, "Maintenance"


def suggest_next_heavy(
    history: list[SessionRecord],
    pivot_active: bool,
) -> HeavySuggestion | None:
    """
    Propose the next heavy-day top single.

    Args:
        history: Date-ordered records for one lift
        pivot_active: Whether today runs under the pivot (deload) protocol

    Returns:
        HeavySuggestion, or None if history is empty or the latest record
        has no top single
    """
    if not history:
        return None

    last = history[-1]
    if not last.top_single:
        return None

    base, reason = _base_target(last, last.top_single)
    logger.debug(
        "Heavy suggestion from %s: top=%s rule=%r base=%s pivot=%s",
        last.date, last.top_single, reason, base, pivot_active,
    )

    if pivot_active:
        pivot_target = round5(base * PIVOT_LOAD_FACTOR)
        return HeavySuggestion(
            target=pivot_target,
            rationale=(
                f"{reason}. Base {format_weight(base)}. "
                f"Pivot (-15%): Try {format_weight(pivot_target)}"
            ),
            base_target=base,
            pivot_applied=True,
        )

    return HeavySuggestion(
        target=base,
        rationale=f"{reason}. Try {format_weight(base)}",
        base_target=base,
    )
