"""Fatigue accumulation, recovery and workout intensity derivation.

The model is a bounded linear accumulator: workouts add an intensity factor,
rest days subtract ``recovery_rate`` points per day, and the value is clamped
to ``[baseline, 100]``.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from load_engine.models.enums import (
    DEFAULT_RIR,
    INTENSITY_PER_SET,
    MAX_FATIGUE,
    RIR_CEILING,
)
from load_engine.models.workout_log import CompletedSet


def accumulate_fatigue(
    current: float, intensity_factor: float, ceiling: float = MAX_FATIGUE
) -> float:
    """Add a workout's intensity to current fatigue, capped at *ceiling*.

    Args:
        current: Fatigue before the workout.
        intensity_factor: Non-negative points contributed by the workout.
        ceiling: Upper bound of the fatigue scale.

    Returns:
        ``min(ceiling, current + intensity_factor)``.

    Raises:
        ValueError: If intensity_factor is negative.
    """
    if intensity_factor < 0:
        raise ValueError(f"intensity_factor must be >= 0, got {intensity_factor}")
    return min(ceiling, current + intensity_factor)


def recover_fatigue(
    current: float, baseline: float, recovery_rate: float, days_rested: float
) -> float:
    """Decay fatigue linearly over rested days, never below *baseline*.

    Raises:
        ValueError: If days_rested is negative.
    """
    if days_rested < 0:
        raise ValueError(f"days_rested must be >= 0, got {days_rested}")
    return max(baseline, current - recovery_rate * days_rested)


def set_intensity(
    rir: int | None,
    intensity_per_set: float = INTENSITY_PER_SET,
    rir_ceiling: int = RIR_CEILING,
    default_rir: int = DEFAULT_RIR,
) -> float:
    """Fatigue points contributed by a single set.

    A set taken to failure (RIR 0) counts double a set with ``rir_ceiling``
    or more reps left.
    """
    effective = default_rir if rir is None else rir
    proximity = (rir_ceiling - min(max(effective, 0), rir_ceiling)) / rir_ceiling
    return intensity_per_set * (1.0 + proximity)


def workout_intensity(
    sets: Iterable[CompletedSet],
    intensity_per_set: float = INTENSITY_PER_SET,
    rir_ceiling: int = RIR_CEILING,
    default_rir: int = DEFAULT_RIR,
) -> float:
    """Total intensity factor for a workout: volume weighted by RIR proximity.

    Returns:
        Non-negative intensity factor; 0.0 for an empty workout.
    """
    rirs = np.array(
        [default_rir if s.rir is None else s.rir for s in sets], dtype=float
    )
    if rirs.size == 0:
        return 0.0
    proximity = (rir_ceiling - np.clip(rirs, 0, rir_ceiling)) / rir_ceiling
    return float(np.sum(intensity_per_set * (1.0 + proximity)))
