"""Routine templates: training splits and per-phase set/rep prescriptions.

A routine is generated for every mesocycle from three keys: training level
(which split), goal (rep range bias) and phase (sets, reps, RIR). Fewer than
four sessions a week always use the full-body split. Deload routines cut
what their mesocycle's deload strategy names in DELOAD_REDUCTIONS.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from load_engine.models.enums import (
    DELOAD_MIN_SETS,
    DELOAD_REDUCTIONS,
    DELOAD_TARGET_RIR,
    DeloadType,
    MesocyclePhase,
    TrainingGoal,
    TrainingLevel,
)
from load_engine.models.plan import Mesocycle, RoutineDay, RoutineExercise, WorkoutRoutine


@dataclass(frozen=True)
class DayTemplate:
    """One training day: its name, target muscle groups and exercise ids."""

    name: str
    muscle_groups: tuple[str, ...]
    exercise_ids: tuple[str, ...]


@dataclass(frozen=True)
class PhasePrescription:
    sets: int
    reps: int
    target_rir: int


_FULL_BODY: tuple[DayTemplate, ...] = (
    DayTemplate(
        "Full Body A",
        ("quadriceps", "chest", "back"),
        ("squat", "bench-press", "barbell-row"),
    ),
    DayTemplate(
        "Full Body B",
        ("hamstrings", "shoulders", "back", "triceps"),
        ("deadlift", "overhead-press", "pull-up", "dips"),
    ),
    DayTemplate(
        "Full Body C",
        ("quadriceps", "hamstrings", "chest", "biceps"),
        ("lunge", "romanian-deadlift", "incline-dumbbell-press", "bicep-curl"),
    ),
)

_UPPER = DayTemplate(
    "Upper",
    ("chest", "back", "shoulders", "biceps", "triceps"),
    ("bench-press", "barbell-row", "overhead-press", "bicep-curl", "triceps-pushdown"),
)
_LOWER = DayTemplate(
    "Lower",
    ("quadriceps", "hamstrings", "glutes", "calves"),
    ("squat", "romanian-deadlift", "hip-thrust", "calf-raise"),
)
_PUSH = DayTemplate(
    "Push",
    ("chest", "shoulders", "triceps"),
    ("bench-press", "overhead-press", "incline-dumbbell-press", "lateral-raise", "dips"),
)
_PULL = DayTemplate(
    "Pull",
    ("back", "biceps"),
    ("deadlift", "pull-up", "barbell-row", "bicep-curl"),
)
_LEGS = DayTemplate(
    "Legs",
    ("quadriceps", "hamstrings", "glutes", "calves", "abs"),
    ("squat", "leg-press", "leg-curl", "calf-raise", "hanging-leg-raise"),
)

SPLITS: dict[TrainingLevel, tuple[DayTemplate, ...]] = {
    TrainingLevel.BEGINNER: _FULL_BODY,
    TrainingLevel.INTERMEDIATE: (_UPPER, _LOWER, _PUSH, _PULL),
    TrainingLevel.ADVANCED: (_PUSH, _PULL, _LEGS, _UPPER, _LOWER),
}

FULL_BODY_MAX_FREQUENCY = 3

PHASE_PRESCRIPTIONS: dict[MesocyclePhase, PhasePrescription] = {
    MesocyclePhase.FOUNDATION: PhasePrescription(sets=3, reps=12, target_rir=3),
    MesocyclePhase.VOLUME: PhasePrescription(sets=4, reps=10, target_rir=2),
    MesocyclePhase.INTENSITY: PhasePrescription(sets=4, reps=6, target_rir=1),
    MesocyclePhase.STRENGTH: PhasePrescription(sets=5, reps=5, target_rir=1),
    MesocyclePhase.PEAKING: PhasePrescription(sets=3, reps=3, target_rir=0),
    MesocyclePhase.METABOLIC: PhasePrescription(sets=3, reps=15, target_rir=1),
    MesocyclePhase.MAINTENANCE: PhasePrescription(sets=3, reps=8, target_rir=2),
}

# Reps added to the phase prescription, never below MIN_REPS
_GOAL_REP_OFFSET: dict[TrainingGoal, int] = {
    TrainingGoal.STRENGTH: -2,
    TrainingGoal.POWER: -2,
    TrainingGoal.ENDURANCE: 4,
    TrainingGoal.WEIGHT_LOSS: 2,
}
MIN_REPS = 1

_LEVEL_SET_OFFSET: dict[TrainingLevel, int] = {
    TrainingLevel.BEGINNER: -1,
    TrainingLevel.INTERMEDIATE: 0,
    TrainingLevel.ADVANCED: 1,
}


def select_split(level: TrainingLevel, frequency: int) -> tuple[DayTemplate, ...]:
    """Day templates for one week, cycling the level's split to *frequency* days."""
    days = _FULL_BODY if frequency <= FULL_BODY_MAX_FREQUENCY else SPLITS[level]
    return tuple(days[i % len(days)] for i in range(frequency))


def deload_frequency(frequency: int, strategy: DeloadType) -> int:
    """Sessions kept in a deload week after the strategy's frequency cut, rounded half up."""
    _, _, frequency_cut = DELOAD_REDUCTIONS[strategy]
    return max(1, int(frequency * (100 - frequency_cut) / 100 + 0.5))


def prescription_for(
    phase: MesocyclePhase,
    level: TrainingLevel,
    goal: TrainingGoal,
    reference_phase: MesocyclePhase | None = None,
    strategy: DeloadType | None = None,
) -> PhasePrescription:
    """Sets, reps and RIR for a (level, goal, phase) key.

    Deload weeks start from the preceding loading phase's prescription.
    With a strategy, sets shrink by its volume cut (at least one set) and
    an intensity cut leaves DELOAD_TARGET_RIR in reserve. Without one, a set
    is dropped (never below DELOAD_MIN_SETS) and DELOAD_TARGET_RIR applies.
    """
    if phase == MesocyclePhase.DELOAD:
        base = prescription_for(reference_phase or MesocyclePhase.VOLUME, level, goal)
        if strategy is None:
            return PhasePrescription(
                sets=max(DELOAD_MIN_SETS, base.sets - 1),
                reps=base.reps,
                target_rir=DELOAD_TARGET_RIR,
            )
        volume_cut, intensity_cut, _ = DELOAD_REDUCTIONS[strategy]
        return PhasePrescription(
            sets=max(1, math.ceil(base.sets * (100 - volume_cut) / 100)),
            reps=base.reps,
            target_rir=DELOAD_TARGET_RIR if intensity_cut else base.target_rir,
        )
    base = PHASE_PRESCRIPTIONS[phase]
    return PhasePrescription(
        sets=max(DELOAD_MIN_SETS, base.sets + _LEVEL_SET_OFFSET[level]),
        reps=max(MIN_REPS, base.reps + _GOAL_REP_OFFSET.get(goal, 0)),
        target_rir=base.target_rir,
    )


def build_routine(
    routine_id: str,
    user_id: str,
    mesocycle: Mesocycle,
    level: TrainingLevel,
    goal: TrainingGoal,
    frequency: int,
    reference_phase: MesocyclePhase | None = None,
) -> WorkoutRoutine:
    """Concrete routine for a mesocycle, back-referencing it by id."""
    strategy = mesocycle.deload_strategy if mesocycle.phase == MesocyclePhase.DELOAD else None
    prescription = prescription_for(mesocycle.phase, level, goal, reference_phase, strategy)
    if strategy is not None:
        frequency = deload_frequency(frequency, strategy)
    days = tuple(
        RoutineDay(
            name=template.name,
            muscle_groups=template.muscle_groups,
            exercises=tuple(
                RoutineExercise(
                    exercise_id=exercise_id,
                    sets=prescription.sets,
                    reps=prescription.reps,
                    target_rir=prescription.target_rir,
                )
                for exercise_id in template.exercise_ids
            ),
        )
        for template in select_split(level, frequency)
    )
    return WorkoutRoutine(
        id=routine_id,
        user_id=user_id,
        mesocycle_id=mesocycle.id,
        name=f"{mesocycle.phase.name.replace('_', ' ').title()} - {len(days)} days/week",
        phase=mesocycle.phase,
        days=days,
    )
