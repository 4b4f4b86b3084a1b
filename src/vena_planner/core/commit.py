"""
Session commits: building the record for a heavy day and attaching the
Volume-day result to it later.

Both operations read an immutable history snapshot and return exactly one
new record; writing it is the History Provider's job. Callers serialize
commits per (user, lift).
"""

import logging
from dataclasses import dataclass, field, replace

from .config import EngineConfig
from .gates import evaluate_gates
from .metrics import sessions_for_lift
from .models import (
    GateReport,
    Lift,
    Quality,
    Readiness,
    SessionKind,
    SessionRecord,
    VolumeTarget,
)
from .wave import next_volume_target

logger = logging.getLogger(__name__)


class NoPendingHeavySession(Exception):
    """Raised when a volume result has no unresolved heavy session to attach to."""

    pass


@dataclass(frozen=True)
class HeavySessionInput:
    """What the lifter reports after a heavy day."""

    date: str
    lift: Lift
    top_single: float
    top_rpe: float | None = None
    top_quality: Quality | None = None
    overshoot: bool = False
    backdown_failed: bool = False
    previous_volume: float | None = None
    readiness: Readiness = field(default_factory=Readiness)
    notes: str | None = None


@dataclass(frozen=True)
class CommitResult:
    """A heavy-day record ready to persist, with what was derived for it."""

    record: SessionRecord
    gates: GateReport
    next_volume: VolumeTarget
    replaced: SessionRecord | None = None


def _paired_volume_success(history: list[SessionRecord]) -> bool:
    """
    Outcome of the Volume day paired with the session being committed.

    The pairing is the most recent same-lift record: its volume result is
    the wave that precedes today's single. No recorded result counts as
    success.
    """
    if not history:
        return True
    last = history[-1]
    if not last.has_volume_result:
        return True
    return not last.volume_failed


def commit_heavy_session(
    history: list[SessionRecord],
    entry: HeavySessionInput,
    pivot_active: bool,
    config: EngineConfig | None = None,
) -> CommitResult:
    """
    Build the record for a heavy day, with gate flags and the wave target.

    Args:
        history: Date-ordered records (any lift; filtered to ``entry.lift``)
        entry: Reported heavy-day results
        pivot_active: Pivot state the session ran under
        config: Per-user engine configuration

    Returns:
        CommitResult holding the new record. When a heavy day for the same
        lift and date already exists, the new record takes over its id and
        any attached volume result, and ``replaced`` holds the old record.
    """
    cfg = config or EngineConfig()
    kind = SessionKind.heavy(entry.lift)
    lift_history = sessions_for_lift(history, entry.lift)

    replaced = next(
        (r for r in lift_history if r.kind == kind and r.date == entry.date),
        None,
    )
    # Wave and gates only see sessions before this one
    prior = [r for r in lift_history if r.date < entry.date]

    next_volume = next_volume_target(prior, pivot_active, entry.lift, cfg)

    record = SessionRecord(
        kind=kind,
        date=entry.date,
        top_single=entry.top_single,
        top_rpe=entry.top_rpe,
        top_quality=entry.top_quality,
        overshoot=entry.overshoot,
        backdown_failed=entry.backdown_failed,
        previous_volume=entry.previous_volume,
        volume_target=next_volume.weight,
        is_pivot=pivot_active,
        readiness=entry.readiness,
        notes=entry.notes,
    )

    gates = evaluate_gates(
        record,
        prior,
        pivot_active,
        capacity=cfg.axial_capacity,
        volume_success=_paired_volume_success(prior),
    )

    record = replace(record, gate_flags=gates.flags)

    if replaced is not None:
        record = replace(
            record,
            id=replaced.id,
            volume_weight=replaced.volume_weight,
            volume_reps=replaced.volume_reps,
            volume_failed=replaced.volume_failed,
            volume_rpe=replaced.volume_rpe,
            volume_is_pivot=replaced.volume_is_pivot,
        )
        logger.info("Re-logging heavy %s %s over session %s", entry.lift, entry.date, replaced.id)

    logger.debug("Committed heavy %s %s: flags=%s", entry.lift, entry.date, sorted(gates.flags))
    return CommitResult(record=record, gates=gates, next_volume=next_volume, replaced=replaced)


def attach_volume_result(
    history: list[SessionRecord],
    lift: Lift,
    weight: float,
    failed: bool,
    pivot_active: bool,
    rpe: float | None = None,
    reps: int | None = None,
    config: EngineConfig | None = None,
) -> SessionRecord:
    """
    Attach a Volume-day result to the pending heavy record for ``lift``.

    The pending record is the most recent one for the lift; it must not
    already carry a volume result. Reps default to the rung the wave
    calculator prescribes for that record. A wave run under pivot (either
    the heavy day or today) is marked as pivot work so it never becomes
    the wave's reference rung.

    Args:
        history: Date-ordered records (any lift)
        lift: Lift the result belongs to
        weight: Weight used on the volume sets
        failed: Whether any prescribed rep was missed
        pivot_active: Current pivot toggle
        rpe: Optional RPE of the volume work
        reps: Reps per set actually prescribed (derived if None)
        config: Per-user engine configuration

    Returns:
        The updated record (same id)

    Raises:
        NoPendingHeavySession: If there is no record awaiting a volume result
    """
    lift_history = sessions_for_lift(history, lift)
    if not lift_history:
        raise NoPendingHeavySession(f"No {lift} heavy session logged yet; log the heavy day first.")

    pending = lift_history[-1]
    if pending.has_volume_result:
        raise NoPendingHeavySession(
            f"Latest {lift} session ({pending.date}) already has a volume result."
        )

    pivot = pending.is_pivot or pivot_active
    if reps is None:
        reps = next_volume_target(lift_history, pivot, lift, config).reps

    updated = pending.with_volume_result(
        weight=weight, reps=reps, failed=failed, rpe=rpe, is_pivot=pivot
    )
    logger.debug(
        "Attached volume %sx%s failed=%s pivot=%s to %s", weight, reps, failed, pivot, pending.id
    )
    return updated
