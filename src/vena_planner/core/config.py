"""
Configuration constants for the periodization engine.

All adjustable factors are centralized here for easy tuning. Per-user
values (axial capacity, wave start weights, training maxes) live in
EngineConfig and are loaded from YAML by engine/config_loader.py.
"""

from dataclasses import dataclass, field
from typing import Final

# =============================================================================
# ROUNDING
# =============================================================================

ROUND_INCREMENT: Final[float] = 5.0  # All engine weights are multiples of this

# =============================================================================
# HEAVY DAY
# =============================================================================

BACKDOWN_FACTOR: Final[float] = 0.82  # Back-off sets as fraction of the top single
PIVOT_BACKDOWN_FACTOR: Final[float] = 0.75  # Back-off fraction under pivot
BACKDOWN_SETS: Final[int] = 3
BACKDOWN_REPS: Final[int] = 3

BACKDOWN_FAIL_FACTOR: Final[float] = 0.90  # Next single after failed back-offs
OVERSHOOT_FACTOR: Final[float] = 0.92  # Next single after an overshoot
OVERSHOOT_RPE: Final[float] = 9.5  # RPE treated as an overshoot
HOLD_RPE: Final[float] = 9.0  # RPE at which the single is held
PROGRESS_RPE_MAX: Final[float] = 8.0  # Clean single at or below this progresses
HEAVY_INCREMENT: Final[float] = 5.0

# =============================================================================
# PIVOT (DELOAD)
# =============================================================================

PIVOT_LOAD_FACTOR: Final[float] = 0.85  # -15% on both heavy and volume days
PIVOT_REPS: Final[int] = 3

# =============================================================================
# VOLUME WAVE
# =============================================================================

WAVE_RUNGS: Final[tuple[int, ...]] = (4, 5, 6)
WAVE_INCREMENT: Final[float] = 5.0  # Added after completing the top rung
WAVE_SETS: Final[int] = 3

# =============================================================================
# LOGIC GATES
# =============================================================================

SANDBAGGING_RPE_MAX: Final[float] = 7.5
AXIAL_RPE_LIMIT: Final[float] = 9.0  # Strictly above triggers
DEFAULT_AXIAL_CAPACITY: Final[float] = 9000.0
PIVOT_ADJUSTMENT_FACTOR: Final[float] = 0.85  # Next session after a fatigue flag
AXIAL_ADJUSTMENT_FACTOR: Final[float] = 0.95  # Saturday after a high axial Tuesday

# =============================================================================
# AUTOPILOT
# =============================================================================

AUTOPILOT_WINDOW: Final[int] = 5  # Most recent sessions inspected
LOCK_THRESHOLD: Final[int] = 2  # bad or failed sessions that force a pivot

# =============================================================================
# PREDICTOR
# =============================================================================

READINESS_NEUTRAL: Final[int] = 3
READINESS_SCALE: Final[float] = 5.0
READINESS_STEP: Final[float] = 0.01  # 1% per point away from neutral
DAYS_CAP: Final[int] = 14
PREDICTION_SCALE: Final[float] = 1000.0  # Model targets are weight / 1000
DEFAULT_DAYS_SINCE_LAST: Final[int] = 7

# =============================================================================
# PER-USER DEFAULTS
# =============================================================================

DEFAULT_VOLUME_START: Final[dict[str, float]] = {
    "squat": 365.0,
    "bench": 225.0,
}

DEFAULT_TRAINING_MAXES: Final[dict[str, float]] = {
    "squat": 500.0,
    "bench": 315.0,
}


@dataclass(frozen=True)
class EngineConfig:
    """
    Per-user scalars the engine takes as parameters.

    volume_defaults: wave start weight per lift when no volume history exists
    training_maxes: baseline used by the heuristic readiness prediction
    """

    axial_capacity: float = DEFAULT_AXIAL_CAPACITY
    volume_defaults: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_VOLUME_START)
    )
    training_maxes: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_TRAINING_MAXES)
    )

    def __post_init__(self) -> None:
        if self.axial_capacity <= 0:
            raise ValueError("axial_capacity must be positive")
        for lift, weight in self.volume_defaults.items():
            if weight <= 0:
                raise ValueError(f"volume_defaults[{lift!r}] must be positive")

    def volume_default(self, lift: str) -> float:
        """Wave start weight for ``lift``, falling back to the built-in default."""
        return float(self.volume_defaults.get(lift, DEFAULT_VOLUME_START[lift]))

    def training_max(self, lift: str) -> float:
        return float(self.training_maxes.get(lift, DEFAULT_TRAINING_MAXES[lift]))
