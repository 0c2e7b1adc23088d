"""Completed sets and the workout logs that own them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from load_engine.exceptions import ValidationError


@dataclass(frozen=True)
class CompletedSet:
    """One logged working set. Immutable once logged."""

    exercise_id: str
    reps: int
    weight: float  # kg
    timestamp: datetime
    rir: int | None = None  # reps in reserve, None if not recorded

    def __post_init__(self) -> None:
        if not self.exercise_id:
            raise ValidationError("exercise_id must be non-empty")
        if self.reps < 0:
            raise ValidationError(f"reps must be >= 0, got {self.reps}")
        if self.weight < 0:
            raise ValidationError(f"weight must be >= 0, got {self.weight}")
        if self.rir is not None and self.rir < 0:
            raise ValidationError(f"rir must be >= 0, got {self.rir}")


@dataclass(frozen=True)
class WorkoutLog:
    """A finished training session."""

    id: str
    user_id: str
    date: date
    duration_minutes: float
    completed_sets: tuple[CompletedSet, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.id or not self.user_id:
            raise ValidationError("WorkoutLog needs an id and a user_id")
        if self.duration_minutes < 0:
            raise ValidationError(
                f"duration_minutes must be >= 0, got {self.duration_minutes}"
            )

    @property
    def total_sets(self) -> int:
        return len(self.completed_sets)

    def sets_for(self, exercise_id: str) -> tuple[CompletedSet, ...]:
        return tuple(s for s in self.completed_sets if s.exercise_id == exercise_id)
