"""Volume landmarks (MEV/MAV/MRV), weekly progression history and volume advice."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from load_engine.exceptions import ValidationError
from load_engine.models.enums import (
    MAX_FATIGUE,
    AdaptationResponse,
    VolumeAdjustment,
    VolumeStatus,
    VolumeTrend,
)


@dataclass(frozen=True)
class VolumeLandmark:
    """Weekly set landmarks for one (user, muscle group).

    Invariant: ``0 <= mev <= mav <= mrv`` and ``current_volume >= 0``.
    """

    user_id: str
    muscle_group: str
    mev: float
    mav: float
    mrv: float
    current_volume: float = 0.0  # sets per week

    def __post_init__(self) -> None:
        if not self.user_id or not self.muscle_group:
            raise ValidationError("VolumeLandmark needs a user_id and a muscle_group")
        values = (self.mev, self.mav, self.mrv, self.current_volume)
        if not all(math.isfinite(v) for v in values):
            raise ValidationError(f"Landmark values must be finite, got {values}")
        if not 0 <= self.mev <= self.mav <= self.mrv:
            raise ValidationError(
                f"Landmarks for {self.muscle_group} must satisfy 0 <= mev <= mav <= mrv, "
                f"got mev={self.mev}, mav={self.mav}, mrv={self.mrv}"
            )
        if self.current_volume < 0:
            raise ValidationError(
                f"current_volume must be >= 0, got {self.current_volume}"
            )


@dataclass(frozen=True)
class VolumeClassification:
    """Status of a muscle group's weekly volume plus a human-readable nudge.

    ``set_delta`` is the number of weekly sets to add (below MEV) or remove
    (above MAV/MRV) to reach the next-better status; 0 when already optimal.
    """

    muscle_group: str
    status: VolumeStatus
    recommendation: str
    current_volume: float
    set_delta: float = 0.0


@dataclass(frozen=True)
class VolumeSummary:
    """One dashboard row: landmarks and their classification."""

    muscle_group: str
    mev: float
    mav: float
    mrv: float
    current_volume: float
    status: VolumeStatus
    recommendation: str
    set_delta: float = 0.0


@dataclass(frozen=True)
class VolumeTargets:
    """Goal-specific weekly set range for a muscle group."""

    minimum: float
    optimal: float
    maximum: float


@dataclass(frozen=True)
class VolumeProgression:
    """One recorded training week for a muscle group.

    ``week_start`` is the Monday of the week; ``fatigue_level`` uses the
    0-100 fatigue scale.
    """

    user_id: str
    muscle_group: str
    week_start: date
    sets_performed: float
    target_sets: float
    fatigue_level: float
    adaptation_response: AdaptationResponse
    notes: str = ""

    def __post_init__(self) -> None:
        if not self.user_id or not self.muscle_group:
            raise ValidationError("VolumeProgression needs a user_id and a muscle_group")
        if self.week_start.weekday() != 0:
            raise ValidationError(f"week_start must be a Monday, got {self.week_start}")
        if not (math.isfinite(self.sets_performed) and self.sets_performed >= 0):
            raise ValidationError(f"sets_performed must be >= 0, got {self.sets_performed}")
        if not (math.isfinite(self.target_sets) and self.target_sets > 0):
            raise ValidationError(f"target_sets must be > 0, got {self.target_sets}")
        if not 0 <= self.fatigue_level <= MAX_FATIGUE:
            raise ValidationError(
                f"fatigue_level must be within [0, {MAX_FATIGUE:g}], got {self.fatigue_level}"
            )


@dataclass(frozen=True)
class VolumeRecommendation:
    """Next weekly set count for a muscle group and how sure the engine is of it."""

    muscle_group: str
    current_volume: float
    recommended_volume: float
    adjustment: VolumeAdjustment
    reasoning: str
    confidence: float  # 0-1
    timeline_weeks: int
    trend: VolumeTrend = VolumeTrend.STABLE
