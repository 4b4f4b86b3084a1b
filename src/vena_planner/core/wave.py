"""
Volume-day wave: the next 3-set target on the 4/5/6 rep ladder.

The wave state is never stored. It is re-derived on every call from the
most recent non-pivot record carrying a volume result:

    4 reps ok  -> same weight, 5 reps
    5 reps ok  -> same weight, 6 reps
    6 reps ok  -> +5 lb, back to 4 reps
    missed     -> repeat weight and reps

Pivot sessions are skipped by that lookup, so running any number of pivot
days leaves the wave exactly where it was.
"""

import logging

from .config import (
    PIVOT_LOAD_FACTOR,
    PIVOT_REPS,
    WAVE_INCREMENT,
    WAVE_RUNGS,
    EngineConfig,
)
from .metrics import latest_volume_record, round5
from .models import Lift, SessionRecord, VolumeTarget, WaveProgress

logger = logging.getLogger(__name__)

NOTE_WAVE_START = "Wave Start"
NOTE_PIVOT = "Pivot: Light Technical Work"
NOTE_RETRY = "Missed Reps. Retry same weight/reps."

_LOW_RUNG, _MID_RUNG, _TOP_RUNG = WAVE_RUNGS

# Success transitions: previous rung -> (weight increment, next rung, note)
_STEP_UP: dict[int, tuple[float, int, str]] = {
    _LOW_RUNG: (0.0, _MID_RUNG, "Step Up: Add Volume (3x5)"),
    _MID_RUNG: (0.0, _TOP_RUNG, "Step Up: Peak Volume (3x6)"),
    _TOP_RUNG: (WAVE_INCREMENT, _LOW_RUNG, "Wave Complete! +5lbs, Reset to 3x4"),
}


def _rung(reps: int | None) -> int:
    """Clamp stored reps onto the ladder (missing or short -> 4, long -> 6)."""
    if reps is None:
        return _LOW_RUNG
    return min(max(reps, _LOW_RUNG), _TOP_RUNG)


def next_volume_target(
    history: list[SessionRecord],
    pivot_active: bool,
    lift: Lift,
    config: EngineConfig | None = None,
) -> VolumeTarget:
    """
    Compute today's Volume-day target.

    Args:
        history: Date-ordered records for ``lift``
        pivot_active: Whether today runs under the pivot (deload) protocol
        lift: Lift the history belongs to (selects the start weight)
        config: Per-user engine configuration (defaults if None)

    Returns:
        VolumeTarget with weight a multiple of 5 and reps in {3, 4, 5, 6}
    """
    cfg = config or EngineConfig()
    last_vol = latest_volume_record(history)

    if pivot_active:
        reference = last_vol.volume_weight if last_vol else cfg.volume_default(lift)
        weight = round5(reference * PIVOT_LOAD_FACTOR)
        logger.debug("Pivot wave target for %s: ref=%s -> %s", lift, reference, weight)
        return VolumeTarget(weight=weight, reps=PIVOT_REPS, note=NOTE_PIVOT, is_pause=True)

    if last_vol is None:
        return VolumeTarget(
            weight=round5(cfg.volume_default(lift)),
            reps=_LOW_RUNG,
            note=NOTE_WAVE_START,
        )

    prev_weight = last_vol.volume_weight
    prev_reps = _rung(last_vol.volume_reps)

    if last_vol.volume_failed:
        target = VolumeTarget(weight=round5(prev_weight), reps=prev_reps, note=NOTE_RETRY)
    else:
        increment, reps, note = _STEP_UP[prev_reps]
        target = VolumeTarget(weight=round5(prev_weight + increment), reps=reps, note=note)

    logger.debug(
        "Wave target for %s from %s (%sx%s failed=%s): %sx%s",
        lift, last_vol.date, prev_weight, prev_reps, last_vol.volume_failed,
        target.weight, target.reps,
    )
    return target


def wave_progress(target: VolumeTarget) -> WaveProgress:
    """
    Map a target onto the three wave steps for display.

    Rung 4 is step 1, rung 5 step 2, rung 6 step 3; earlier steps count as
    completed. A pivot target sits on step 1 with nothing completed.
    """
    if target.is_pause:
        return WaveProgress(active_step=1, completed_steps=(), label="Pivot: Technical Work")

    step = WAVE_RUNGS.index(_rung(target.reps)) + 1
    labels = {
        1: "Step 1: Base Volume (3x4)",
        2: "Step 2: Add Volume (3x5)",
        3: "Step 3: Peak Volume (3x6)",
    }
    return WaveProgress(
        active_step=step,
        completed_steps=tuple(range(1, step)),
        label=labels[step],
    )
