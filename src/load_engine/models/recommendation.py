"""Load recommendation output: the next working weight and how it was reached."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoadRecommendation:
    """Recommended working weight for one exercise/rep/RIR target.

    All weights are multiples of the plate increment and never negative.
    """

    exercise_id: str
    weight: float
    estimated_one_rep_max: float
    fatigue_discount: float
    conservative_weight: float
    aggressive_weight: float
    explanation: str = ""
