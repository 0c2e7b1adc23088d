"""Exercise catalog: exercise id → primary and secondary muscle groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from load_engine.exceptions import ValidationError

# The muscle group taxonomy, in display order.
MUSCLE_GROUPS: tuple[str, ...] = (
    "chest",
    "back",
    "shoulders",
    "quadriceps",
    "hamstrings",
    "glutes",
    "biceps",
    "triceps",
    "calves",
    "abs",
)


@dataclass(frozen=True)
class ExerciseMuscles:
    """Muscle groups an exercise trains."""

    primary: tuple[str, ...]
    secondary: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.primary:
            raise ValidationError("An exercise needs at least one primary muscle group")
        unknown = set(self.primary + self.secondary) - set(MUSCLE_GROUPS)
        if unknown:
            raise ValidationError(f"Unknown muscle groups: {sorted(unknown)}")

    @property
    def all_groups(self) -> tuple[str, ...]:
        """Primary then secondary groups, without duplicates."""
        seen: dict[str, None] = dict.fromkeys(self.primary + self.secondary)
        return tuple(seen)


DEFAULT_EXERCISES: dict[str, ExerciseMuscles] = {
    "bench-press": ExerciseMuscles(("chest",), ("shoulders", "triceps")),
    "incline-dumbbell-press": ExerciseMuscles(("chest",), ("shoulders", "triceps")),
    "dips": ExerciseMuscles(("chest", "triceps"), ("shoulders",)),
    "overhead-press": ExerciseMuscles(("shoulders",), ("triceps",)),
    "lateral-raise": ExerciseMuscles(("shoulders",)),
    "squat": ExerciseMuscles(("quadriceps",), ("glutes", "hamstrings")),
    "lunge": ExerciseMuscles(("quadriceps",), ("glutes",)),
    "leg-press": ExerciseMuscles(("quadriceps",), ("glutes",)),
    "deadlift": ExerciseMuscles(("back", "hamstrings"), ("glutes",)),
    "romanian-deadlift": ExerciseMuscles(("hamstrings",), ("glutes", "back")),
    "hip-thrust": ExerciseMuscles(("glutes",), ("hamstrings",)),
    "leg-curl": ExerciseMuscles(("hamstrings",)),
    "barbell-row": ExerciseMuscles(("back",), ("biceps",)),
    "pull-up": ExerciseMuscles(("back",), ("biceps",)),
    "lat-pulldown": ExerciseMuscles(("back",), ("biceps",)),
    "bicep-curl": ExerciseMuscles(("biceps",)),
    "triceps-pushdown": ExerciseMuscles(("triceps",)),
    "calf-raise": ExerciseMuscles(("calves",)),
    "plank": ExerciseMuscles(("abs",)),
    "hanging-leg-raise": ExerciseMuscles(("abs",)),
}


class ExerciseCatalog:
    """Read-mostly lookup of exercise muscle mappings.

    Unknown exercise ids resolve to None rather than raising, so callers can
    treat them as contributing nothing.
    """

    def __init__(self, exercises: Mapping[str, ExerciseMuscles] | None = None) -> None:
        self._exercises: dict[str, ExerciseMuscles] = dict(
            DEFAULT_EXERCISES if exercises is None else exercises
        )

    def register(self, exercise_id: str, muscles: ExerciseMuscles) -> None:
        if not exercise_id:
            raise ValidationError("exercise_id must be non-empty")
        self._exercises[exercise_id] = muscles

    def lookup(self, exercise_id: str) -> ExerciseMuscles | None:
        return self._exercises.get(exercise_id)

    def primary_group(self, exercise_id: str) -> str | None:
        muscles = self._exercises.get(exercise_id)
        return muscles.primary[0] if muscles else None

    def targets(self, exercise_id: str, muscle_group: str) -> bool:
        """True if the exercise trains *muscle_group* as primary or secondary."""
        muscles = self._exercises.get(exercise_id)
        return muscles is not None and muscle_group in muscles.all_groups

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._exercises

    @property
    def exercise_ids(self) -> list[str]:
        return list(self._exercises)
