"""
Data models for vena-planner.

All core dataclasses representing logged sessions and the derived
decisions (suggestions, wave targets, gate outcomes, system status).
Session records are frozen; the one permitted late change (attaching the
Volume-day result) produces a new record via ``with_volume_result``.
"""

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal

Lift = Literal["squat", "bench"]
DayType = Literal["heavy", "volume"]
Quality = Literal["good", "bad"]
GateFlag = Literal["sandbagging", "fatigue", "axial_overload"]
StatusLevel = Literal["NOMINAL", "CAUTION", "PROTOCOL-LOCK"]

LIFTS: tuple[str, ...] = ("squat", "bench")
DAY_TYPES: tuple[str, ...] = ("heavy", "volume")
GATE_FLAGS: tuple[str, ...] = ("sandbagging", "fatigue", "axial_overload")


def validate_iso_date(date_str: str) -> None:
    """Raise ValueError unless date_str is a real YYYY-MM-DD date."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass(frozen=True)
class SessionKind:
    """
    Which day of the program a record belongs to.

    Records are filtered and compared on these two fields; ``tag`` is only
    for display and storage.
    """

    day_type: DayType
    lift: Lift

    def __post_init__(self) -> None:
        if self.day_type not in DAY_TYPES:
            raise ValueError(f"Invalid day_type: {self.day_type!r}")
        if self.lift not in LIFTS:
            raise ValueError(f"Invalid lift: {self.lift!r}")

    @property
    def is_heavy(self) -> bool:
        return self.day_type == "heavy"

    @property
    def tag(self) -> str:
        """e.g. ``heavy_squat``."""
        return f"{self.day_type}_{self.lift}"

    @classmethod
    def heavy(cls, lift: Lift) -> "SessionKind":
        return cls(day_type="heavy", lift=lift)


@dataclass(frozen=True)
class Readiness:
    """
    Self-reported readiness scores.

    Both scores are nominally 1-5 (sleep: 5 = great, stress: 1 = calm).
    Out-of-range values are kept as entered; bounding them is the caller's job.
    """

    sleep_score: int = 3
    stress_score: int = 3


@dataclass(frozen=True)
class SessionRecord:
    """
    One logged training entry for a lift.

    Created when the Heavy day is committed. The Volume-day result for the
    same wave entry is attached later (once) via ``with_volume_result``.
    """

    kind: SessionKind
    date: str  # ISO format: YYYY-MM-DD
    top_single: float | None = None
    top_rpe: float | None = None
    top_quality: Quality | None = None
    overshoot: bool = False
    backdown_failed: bool = False
    volume_weight: float | None = None
    volume_reps: int | None = None
    volume_failed: bool = False
    volume_rpe: float | None = None
    volume_is_pivot: bool = False  # wave ran under pivot, regardless of the heavy day
    volume_target: float | None = None  # wave weight prescribed at commit time
    previous_volume: float | None = None  # last wave weight as entered by the lifter
    is_pivot: bool = False
    readiness: Readiness = field(default_factory=Readiness)
    gate_flags: frozenset[GateFlag] = frozenset()
    notes: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        """Validate record data."""
        validate_iso_date(self.date)

        if self.top_single is not None and self.top_single <= 0:
            raise ValueError("top_single must be positive")

        if self.top_rpe is not None and not 1.0 <= self.top_rpe <= 10.0:
            raise ValueError(f"top_rpe must be within 1-10, got {self.top_rpe}")

        if self.top_quality is not None and self.top_quality not in ("good", "bad"):
            raise ValueError(f"Invalid top_quality: {self.top_quality!r}")

        if self.volume_weight is not None and self.volume_weight <= 0:
            raise ValueError("volume_weight must be positive")

        if self.volume_reps is not None and self.volume_reps <= 0:
            raise ValueError("volume_reps must be positive")

        unknown = set(self.gate_flags) - set(GATE_FLAGS)
        if unknown:
            raise ValueError(f"Unknown gate flags: {sorted(unknown)}")

    @property
    def lift(self) -> Lift:
        return self.kind.lift

    @property
    def has_volume_result(self) -> bool:
        return self.volume_weight is not None

    @property
    def volume_under_pivot(self) -> bool:
        """True when the attached wave was pivot work (never a real rung)."""
        return self.is_pivot or self.volume_is_pivot

    def with_volume_result(
        self,
        weight: float,
        reps: int,
        failed: bool,
        rpe: float | None = None,
        is_pivot: bool = False,
    ) -> "SessionRecord":
        """
        Return a copy of this record with the Volume-day result attached.

        Raises:
            ValueError: If a volume result is already attached
        """
        if self.has_volume_result:
            raise ValueError(f"Session {self.id} already has a volume result")
        return replace(
            self,
            volume_weight=weight,
            volume_reps=reps,
            volume_failed=failed,
            volume_rpe=rpe,
            volume_is_pivot=is_pivot,
        )


@dataclass(frozen=True)
class HeavySuggestion:
    """Next top-single target with a short human-readable rationale."""

    target: float
    rationale: str
    base_target: float
    pivot_applied: bool = False


@dataclass(frozen=True)
class VolumeTarget:
    """Next Volume-day prescription: 3 sets of ``reps`` at ``weight``."""

    weight: float
    reps: int
    note: str
    is_pause: bool = False


@dataclass(frozen=True)
class WaveProgress:
    """Position within the 4/5/6 rep wave, for display."""

    active_step: int
    completed_steps: tuple[int, ...]
    label: str


@dataclass(frozen=True)
class GateResult:
    """Outcome of one logic gate."""

    triggered: bool
    message: str = ""
    action: str | None = None


@dataclass(frozen=True)
class GateReport:
    """Outcomes of all three gates for one session."""

    sandbagging: GateResult
    fatigue: GateResult
    axial_load: GateResult

    @property
    def flags(self) -> frozenset[GateFlag]:
        """Triggered gates as stored in ``SessionRecord.gate_flags``."""
        names: list[GateFlag] = []
        if self.sandbagging.triggered:
            names.append("sandbagging")
        if self.fatigue.triggered:
            names.append("fatigue")
        if self.axial_load.triggered:
            names.append("axial_overload")
        return frozenset(names)

    @property
    def messages(self) -> list[str]:
        return [
            g.message
            for g in (self.sandbagging, self.fatigue, self.axial_load)
            if g.triggered
        ]


@dataclass(frozen=True)
class SystemStatus:
    """Autopilot verdict over the recent history window."""

    status: StatusLevel
    force_pivot: bool
    bad_count: int
    fail_count: int
    message: str


@dataclass(frozen=True)
class SessionAdjustment:
    """Load modifier for the upcoming session derived from stored gate flags."""

    message: str = "Standard Plan"
    load_modifier: float = 1.0
    variation: str = "standard"
