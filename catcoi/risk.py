"""Шкала риска для итогового COI, %."""
from __future__ import annotations
import math
from typing import NamedTuple

# (нижняя граница включительно, уровень, описание)
RISK_BANDS = (
    (25.0, "very-high", "Very high inbreeding degree"),
    (10.0, "high", "High inbreeding degree"),
    (5.0, "moderate", "High line-breeding"),
    (-math.inf, "low", "Recommended level"),
)


class RiskAssessment(NamedTuple):
    level: str
    description: str


def classify(coi_percent: float) -> RiskAssessment:
    if not math.isfinite(coi_percent):
        raise ValueError(f"COI must be a finite number, got {coi_percent!r}")
    for lower, level, description in RISK_BANDS:
        if coi_percent >= lower:
            return RiskAssessment(level, description)
    raise AssertionError("unreachable")
