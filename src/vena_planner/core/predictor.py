"""
Advisory readiness prediction.

The decision core never depends on this module. It defines the boundary
to an external regression-style estimator (any object with a ``predict``
method) plus the heuristic used when no estimator is available or the
estimator has nothing to say.

Feature normalization (all roughly 0-1, higher = better condition):
    sleep  -> sleep / 5
    stress -> (6 - stress) / 5     (inverted to match sleep's polarity)
    days   -> min(days, 14) / 14
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol

from .config import (
    DAYS_CAP,
    PREDICTION_SCALE,
    READINESS_NEUTRAL,
    READINESS_SCALE,
    READINESS_STEP,
)
from .metrics import round5, sort_history
from .models import Readiness, SessionRecord

logger = logging.getLogger(__name__)

Features = tuple[float, float, float]


class Predictor(Protocol):
    """External estimator: normalized features -> weight / 1000, or None."""

    def predict(self, features: Features) -> float | None: ...


@dataclass(frozen=True)
class AdvisoryTarget:
    weight: float
    source: Literal["model", "heuristic"]


def normalize_inputs(sleep: float, stress: float, days_since_last: float) -> Features:
    """
    Normalize raw readiness inputs for the estimator.

    Out-of-range scores are not clamped; the formulas stay well-defined.
    """
    norm_sleep = sleep / READINESS_SCALE
    norm_stress = (READINESS_SCALE + 1 - stress) / READINESS_SCALE
    norm_days = min(days_since_last, DAYS_CAP) / DAYS_CAP
    return norm_sleep, norm_stress, norm_days


def heuristic_predict(current_max: float, sleep: float, stress: float) -> float:
    """
    Readiness-adjusted max without a model.

    Sleep and stress each move the baseline 1% per point away from the
    neutral score of 3 (good sleep / low stress raise it).

    Args:
        current_max: Baseline (training max) for the lift
        sleep: Sleep score (5 = great)
        stress: Stress score (1 = calm)

    Returns:
        Predicted weight rounded to 5
    """
    sleep_mod = 1 + (sleep - READINESS_NEUTRAL) * READINESS_STEP
    stress_mod = 1 + (READINESS_NEUTRAL - stress) * READINESS_STEP
    return round5(current_max * sleep_mod * stress_mod)


def advisory_target(
    predictor: Predictor | None,
    current_max: float,
    readiness: Readiness,
    days_since_last: int,
) -> AdvisoryTarget:
    """
    Today's advisory top-single estimate.

    Uses the estimator when one is given and returns a value, otherwise
    falls back to ``heuristic_predict``.
    """
    if predictor is not None:
        features = normalize_inputs(readiness.sleep_score, readiness.stress_score, days_since_last)
        value = predictor.predict(features)
        if value is not None:
            return AdvisoryTarget(weight=round5(value * PREDICTION_SCALE), source="model")
        logger.debug("Predictor returned no value; using heuristic")

    return AdvisoryTarget(
        weight=heuristic_predict(current_max, readiness.sleep_score, readiness.stress_score),
        source="heuristic",
    )


def training_rows(history: list[SessionRecord]) -> list[tuple[Features, float]]:
    """
    Rows an external trainer would fit: (features, top_single / 1000).

    Only heavy records with a top single are used; the day gap is measured
    from the previous record of any kind.
    """
    ordered = sort_history(history)
    rows: list[tuple[Features, float]] = []

    for prev, current in zip(ordered, ordered[1:]):
        if not current.kind.is_heavy or not current.top_single:
            continue
        gap = abs(
            (
                datetime.strptime(current.date, "%Y-%m-%d")
                - datetime.strptime(prev.date, "%Y-%m-%d")
            ).days
        )
        features = normalize_inputs(
            current.readiness.sleep_score or READINESS_NEUTRAL,
            current.readiness.stress_score or READINESS_NEUTRAL,
            gap,
        )
        rows.append((features, current.top_single / PREDICTION_SCALE))

    return rows
