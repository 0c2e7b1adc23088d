"""Working-weight math: RIR-adjusted 1RM estimate, fatigue discount, plate rounding.

Reference:
    Epley (1985). Poundage Chart. Boyd Epley Workout.
    Zourdos et al. (2016). Novel resistance training-specific RPE scale
        measuring repetitions in reserve. J Strength Cond Res 30(1):267-275.
"""

from __future__ import annotations

import math

from load_engine.models.enums import (
    EPLEY_DIVISOR,
    FATIGUE_DISCOUNT_DIVISOR,
    FATIGUE_DISCOUNT_FLOOR,
    PLATE_INCREMENT,
)


def estimate_one_rep_max(weight: float, reps: int, rir: int) -> float:
    """Estimate 1RM from a set, counting reps in reserve as reps performed.

    ``1RM = weight * (1 + (reps + rir) / 30)``
    """
    return weight * (1.0 + (reps + rir) / EPLEY_DIVISOR)


def weight_for_target(one_rep_max: float, target_reps: int, target_rir: int) -> float:
    """Inverse of estimate_one_rep_max: the load for a rep/RIR target."""
    return one_rep_max / (1.0 + (target_reps + target_rir) / EPLEY_DIVISOR)


def fatigue_discount(
    current_fatigue: float,
    baseline_fatigue: float,
    divisor: float = FATIGUE_DISCOUNT_DIVISOR,
    floor: float = FATIGUE_DISCOUNT_FLOOR,
) -> float:
    """Multiplier in ``[floor, 1.0]`` that shrinks with fatigue above baseline.

    Args:
        current_fatigue: Current fatigue on the 0-100 scale.
        baseline_fatigue: The user's resting fatigue floor.
        divisor: Excess-fatigue points that would remove 100% of the load.
        floor: Smallest discount ever applied.

    Returns:
        ``clamp(1 - (current - baseline) / divisor, floor, 1.0)``.
    """
    raw = 1.0 - (current_fatigue - baseline_fatigue) / divisor
    return min(1.0, max(floor, raw))


def round_to_increment(value: float, increment: float = PLATE_INCREMENT) -> float:
    """Round half-up to the nearest multiple of *increment*, clamped at 0.

    Python's round() is banker's rounding, so the half-up rule is applied
    explicitly.
    """
    if increment <= 0:
        raise ValueError(f"increment must be positive, got {increment}")
    steps = math.floor(value / increment + 0.5)
    return max(0, steps) * increment
