"""Periodized plan models: macrocycle ⊃ mesocycle ⊃ microcycle, plus routines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from load_engine.exceptions import ValidationError
from load_engine.models.deload import DeloadRecommendation, DeloadScheduleConfig
from load_engine.models.enums import (
    DeloadType,
    MesocyclePhase,
    PeriodizationType,
    TrainingGoal,
    TrainingLevel,
)


@dataclass(frozen=True)
class Microcycle:
    """One training week. Dates are inclusive."""

    id: str
    mesocycle_id: str
    week_number: int  # 1-indexed within the macrocycle
    start_date: date
    end_date: date
    is_deload: bool = False
    volume_multiplier: float = 1.0
    target_rir: int = 2

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Mesocycle:
    """A block of weeks sharing one training phase."""

    id: str
    macrocycle_id: str
    phase: MesocyclePhase
    start_date: date
    end_date: date
    micro_cycles: tuple[Microcycle, ...] = field(default_factory=tuple)
    includes_deload: bool = False
    deload_strategy: DeloadType | None = None

    def __post_init__(self) -> None:
        previous_end: date | None = None
        for micro in self.micro_cycles:
            if previous_end is not None and micro.start_date != previous_end + timedelta(days=1):
                raise ValidationError(
                    f"Microcycles in mesocycle {self.id} must be contiguous and non-overlapping"
                )
            previous_end = micro.end_date

    @property
    def duration_weeks(self) -> int:
        return len(self.micro_cycles)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Macrocycle:
    """A whole periodized plan.

    Invariant: the mesocycle week counts sum to ``duration_weeks`` and the
    mesocycles tile the plan without gaps, starting on ``start_date``.
    """

    id: str
    user_id: str
    name: str
    duration_weeks: int
    meso_cycles: tuple[Mesocycle, ...]
    primary_goal: TrainingGoal
    training_level: TrainingLevel
    periodization_type: PeriodizationType
    frequency: int  # sessions per week
    start_date: date
    end_date: date
    deload_schedule: DeloadScheduleConfig
    is_active: bool = False

    def __post_init__(self) -> None:
        total = sum(meso.duration_weeks for meso in self.meso_cycles)
        if total != self.duration_weeks:
            raise ValidationError(
                f"Mesocycles cover {total} weeks but the macrocycle lasts {self.duration_weeks}"
            )
        if self.meso_cycles and self.meso_cycles[0].start_date != self.start_date:
            raise ValidationError(
                f"First mesocycle starts {self.meso_cycles[0].start_date}, "
                f"plan starts {self.start_date}"
            )
        for previous, current in zip(self.meso_cycles, self.meso_cycles[1:]):
            if current.start_date != previous.end_date + timedelta(days=1):
                raise ValidationError(
                    f"Mesocycle {current.id} starts {current.start_date}, expected "
                    f"{previous.end_date + timedelta(days=1)}"
                )

    @property
    def deload_mesocycles(self) -> tuple[Mesocycle, ...]:
        return tuple(meso for meso in self.meso_cycles if meso.includes_deload)

    def mesocycle_on(self, day: date) -> Mesocycle | None:
        for meso in self.meso_cycles:
            if meso.contains(day):
                return meso
        return None


@dataclass(frozen=True)
class RoutineExercise:
    exercise_id: str
    sets: int
    reps: int
    target_rir: int


@dataclass(frozen=True)
class RoutineDay:
    name: str
    muscle_groups: tuple[str, ...]
    exercises: tuple[RoutineExercise, ...]


@dataclass(frozen=True)
class WorkoutRoutine:
    """Concrete weekly routine generated for one mesocycle."""

    id: str
    user_id: str
    mesocycle_id: str
    name: str
    phase: MesocyclePhase
    days: tuple[RoutineDay, ...]


@dataclass(frozen=True)
class PlanOptions:
    periodization_type: PeriodizationType | None = None  # None → level/goal default
    include_deloads: bool = True
    deload_frequency: int | None = None  # loading weeks between deloads; None → level default
    replace_active: bool = True


@dataclass(frozen=True)
class PlanParams:
    """Arguments of a plan-creation request."""

    name: str
    goal: TrainingGoal
    level: TrainingLevel
    frequency: int
    duration_months: int
    start_date: date
    options: PlanOptions = field(default_factory=PlanOptions)


@dataclass(frozen=True)
class PlanResult:
    macrocycle: Macrocycle
    routines: tuple[WorkoutRoutine, ...]


@dataclass(frozen=True)
class ActivePlanView:
    """Where a user currently is inside their active plan; all None without one."""

    macrocycle: Macrocycle | None = None
    current_mesocycle: Mesocycle | None = None
    current_microcycle: Microcycle | None = None
    current_routine: WorkoutRoutine | None = None
    deload_recommendation: DeloadRecommendation | None = None
