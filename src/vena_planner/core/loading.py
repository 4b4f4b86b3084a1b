"""
Bar loading helpers: plates per side and warmup ladders.

Weights are in pounds on a 45 lb bar.
"""

from .metrics import format_weight, round5
from .models import Lift

BAR_WEIGHT = 45.0
PLATES: tuple[float, ...] = (45, 35, 25, 10, 5, 2.5)

SQUAT_MILESTONES: tuple[int, ...] = (135, 185, 225, 275, 315, 365, 405, 455, 495, 545, 585)
BENCH_MILESTONES: tuple[int, ...] = (135, 185, 225, 275, 315, 365, 405)

WARMUP_TOP_GAP = 35  # Last milestone must be at least this far below the target
BRIDGE_MIN_GAP = 50
BRIDGE_FRACTION = 0.6
BRIDGE_TOP_GAP = 15


def plate_loading(weight: float, bar: float = BAR_WEIGHT) -> str:
    """
    Plates to load on each side, largest first.

    Args:
        weight: Total bar weight
        bar: Empty bar weight

    Returns:
        e.g. ``"45 + 45 + 10"``, or ``"Bar"`` when nothing needs loading
    """
    if not weight or weight < bar:
        return "Bar"

    per_side = (weight - bar) / 2
    plates: list[float] = []
    for plate in PLATES:
        while per_side >= plate:
            plates.append(plate)
            per_side -= plate

    return " + ".join(format_weight(p) for p in plates) if plates else "Bar"


def warmup_ladder(target: float, lift: Lift) -> list[str]:
    """
    Warmup jumps leading to ``target``.

    Starts with the empty bar, climbs the plate milestones that stay at
    least 35 lb under the target, adds one bridge set when the last jump
    would be more than 50 lb, and ends with the top set.

    Returns:
        Steps such as ``["Bar", "135", "225", "Top"]``; empty below bar weight
    """
    if not target or target < BAR_WEIGHT:
        return []

    milestones = BENCH_MILESTONES if lift == "bench" else SQUAT_MILESTONES
    steps = ["Bar"]
    climbed = [m for m in milestones if m <= target - WARMUP_TOP_GAP]
    steps.extend(str(m) for m in climbed)

    last = float(climbed[-1]) if climbed else BAR_WEIGHT
    gap = target - last
    if gap > BRIDGE_MIN_GAP:
        bridge = round5(last + gap * BRIDGE_FRACTION)
        if bridge < target - BRIDGE_TOP_GAP:
            steps.append(format_weight(bridge))

    steps.append("Top")
    return steps
