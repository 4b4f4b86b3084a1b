"""
Autopilot: tri-state system status from the recent history window.

The status is a derived view. It is recomputed from history on every scan
and never persisted.
"""

import logging

from .config import AUTOPILOT_WINDOW, LOCK_THRESHOLD
from .metrics import recent_window
from .models import SessionRecord, SystemStatus

logger = logging.getLogger(__name__)


def _is_bad(record: SessionRecord) -> bool:
    return record.top_quality == "bad" or record.overshoot or record.backdown_failed


def evaluate_system_status(
    history: list[SessionRecord],
    window: int = AUTOPILOT_WINDOW,
) -> SystemStatus:
    """
    Aggregate recent session outcomes into NOMINAL / CAUTION / PROTOCOL-LOCK.

    bad  = bad quality, overshoot, or failed back-offs
    fail = failed volume day

    Two or more of either locks the system into a pivot; any single one is
    a caution.

    Args:
        history: Date-ordered records for one lift
        window: Number of most recent records to inspect

    Returns:
        SystemStatus
    """
    recent = recent_window(history, window)
    bad_count = sum(1 for r in recent if _is_bad(r))
    fail_count = sum(1 for r in recent if r.volume_failed)

    if bad_count >= LOCK_THRESHOLD or fail_count >= LOCK_THRESHOLD:
        status = SystemStatus(
            status="PROTOCOL-LOCK",
            force_pivot=True,
            bad_count=bad_count,
            fail_count=fail_count,
            message="PROTOCOL LOCK: PIVOT ENGAGED",
        )
    elif bad_count > 0 or fail_count > 0:
        status = SystemStatus(
            status="CAUTION",
            force_pivot=False,
            bad_count=bad_count,
            fail_count=fail_count,
            message="SYSTEM CAUTION: RECENT OVERSHOOT DETECTED",
        )
    else:
        status = SystemStatus(
            status="NOMINAL",
            force_pivot=False,
            bad_count=bad_count,
            fail_count=fail_count,
            message="SYSTEM NOMINAL: READY TO TRAIN",
        )

    logger.debug(
        "Autopilot over %d sessions: bad=%d fail=%d -> %s",
        len(recent), bad_count, fail_count, status.status,
    )
    return status


def resolve_pivot(status: SystemStatus, requested: bool) -> bool:
    """Pivot state for today: a lock overrides the manual toggle."""
    if status.force_pivot:
        return True
    return requested
