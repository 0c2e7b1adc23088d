"""JSON serialization for engine records and whole in-memory stores.

Enums are written as lower-case names, dates and datetimes as ISO 8601.
All functions are pure (no file or network I/O).
"""

from __future__ import annotations

import json
from datetime import date, datetime
from enum import IntEnum
from typing import Any, TypeVar

from load_engine.exceptions import ValidationError
from load_engine.models.deload import DeloadRecord, DeloadScheduleConfig
from load_engine.models.enums import (
    AdaptationResponse,
    DeloadType,
    MesocyclePhase,
    PeriodizationType,
    ScheduleTiming,
    TrainingGoal,
    TrainingLevel,
)
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.plan import (
    Macrocycle,
    Mesocycle,
    Microcycle,
    RoutineDay,
    RoutineExercise,
    WorkoutRoutine,
)
from load_engine.models.volume import VolumeLandmark, VolumeProgression
from load_engine.models.workout_log import CompletedSet, WorkoutLog
from load_engine.repositories.memory import InMemoryStore

SNAPSHOT_VERSION = 1

_E = TypeVar("_E", bound=IntEnum)


def _name(member: IntEnum) -> str:
    return member.name.lower()


def _member(enum_cls: type[_E], value: str) -> _E:
    try:
        return enum_cls[value.upper()]
    except KeyError as exc:
        raise ValidationError(f"Unknown {enum_cls.__name__} value {value!r}") from exc


# ---------------------------------------------------------------------------
# Fatigue, logs, landmarks, progressions, deloads
# ---------------------------------------------------------------------------


def fatigue_to_dict(state: UserFatigueState) -> dict[str, Any]:
    return {
        "user_id": state.user_id,
        "current_fatigue": state.current_fatigue,
        "baseline_fatigue": state.baseline_fatigue,
        "recovery_rate": state.recovery_rate,
        "last_updated": state.last_updated.isoformat(),
    }


def fatigue_from_dict(data: dict[str, Any]) -> UserFatigueState:
    return UserFatigueState(
        user_id=data["user_id"],
        current_fatigue=float(data["current_fatigue"]),
        baseline_fatigue=float(data["baseline_fatigue"]),
        recovery_rate=float(data["recovery_rate"]),
        last_updated=datetime.fromisoformat(data["last_updated"]),
    )


def workout_log_to_dict(log: WorkoutLog) -> dict[str, Any]:
    return {
        "id": log.id,
        "user_id": log.user_id,
        "date": log.date.isoformat(),
        "duration_minutes": log.duration_minutes,
        "completed_sets": [
            {
                "exercise_id": s.exercise_id,
                "reps": s.reps,
                "weight": s.weight,
                "rir": s.rir,
                "timestamp": s.timestamp.isoformat(),
            }
            for s in log.completed_sets
        ],
    }


def workout_log_from_dict(data: dict[str, Any]) -> WorkoutLog:
    return WorkoutLog(
        id=data["id"],
        user_id=data["user_id"],
        date=date.fromisoformat(data["date"]),
        duration_minutes=float(data.get("duration_minutes", 0.0)),
        completed_sets=tuple(
            CompletedSet(
                exercise_id=s["exercise_id"],
                reps=int(s["reps"]),
                weight=float(s["weight"]),
                rir=None if s.get("rir") is None else int(s["rir"]),
                timestamp=datetime.fromisoformat(s["timestamp"]),
            )
            for s in data.get("completed_sets", [])
        ),
    )


def landmark_to_dict(landmark: VolumeLandmark) -> dict[str, Any]:
    return {
        "user_id": landmark.user_id,
        "muscle_group": landmark.muscle_group,
        "mev": landmark.mev,
        "mav": landmark.mav,
        "mrv": landmark.mrv,
        "current_volume": landmark.current_volume,
    }


def landmark_from_dict(data: dict[str, Any]) -> VolumeLandmark:
    return VolumeLandmark(
        user_id=data["user_id"],
        muscle_group=data["muscle_group"],
        mev=float(data["mev"]),
        mav=float(data["mav"]),
        mrv=float(data["mrv"]),
        current_volume=float(data.get("current_volume", 0.0)),
    )


def progression_to_dict(progression: VolumeProgression) -> dict[str, Any]:
    return {
        "user_id": progression.user_id,
        "muscle_group": progression.muscle_group,
        "week_start": progression.week_start.isoformat(),
        "sets_performed": progression.sets_performed,
        "target_sets": progression.target_sets,
        "fatigue_level": progression.fatigue_level,
        "adaptation_response": _name(progression.adaptation_response),
        "notes": progression.notes,
    }


def progression_from_dict(data: dict[str, Any]) -> VolumeProgression:
    return VolumeProgression(
        user_id=data["user_id"],
        muscle_group=data["muscle_group"],
        week_start=date.fromisoformat(data["week_start"]),
        sets_performed=float(data["sets_performed"]),
        target_sets=float(data["target_sets"]),
        fatigue_level=float(data["fatigue_level"]),
        adaptation_response=_member(AdaptationResponse, data["adaptation_response"]),
        notes=data.get("notes", ""),
    )


def deload_record_to_dict(record: DeloadRecord) -> dict[str, Any]:
    return {
        "user_id": record.user_id,
        "start_date": record.start_date.isoformat(),
        "end_date": record.end_date.isoformat(),
        "type": _name(record.type),
    }


def deload_record_from_dict(data: dict[str, Any]) -> DeloadRecord:
    return DeloadRecord(
        user_id=data["user_id"],
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        type=_member(DeloadType, data.get("type", "volume")),
    )


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


def _schedule_to_dict(schedule: DeloadScheduleConfig) -> dict[str, Any]:
    return {
        "frequency": schedule.frequency,
        "strategy": _name(schedule.strategy),
        "timing": _name(schedule.timing),
        "auto_regulated": schedule.auto_regulated,
        "fatigue_threshold": schedule.fatigue_threshold,
        "min_weeks_between_deloads": schedule.min_weeks_between_deloads,
        "performance_threshold": schedule.performance_threshold,
    }


def _schedule_from_dict(data: dict[str, Any]) -> DeloadScheduleConfig:
    return DeloadScheduleConfig(
        frequency=int(data["frequency"]),
        strategy=_member(DeloadType, data["strategy"]),
        timing=_member(ScheduleTiming, data["timing"]),
        auto_regulated=bool(data["auto_regulated"]),
        fatigue_threshold=float(data["fatigue_threshold"]),
        min_weeks_between_deloads=int(data["min_weeks_between_deloads"]),
        performance_threshold=float(
            data.get("performance_threshold", DeloadScheduleConfig.performance_threshold)
        ),
    )


def _microcycle_to_dict(micro: Microcycle) -> dict[str, Any]:
    return {
        "id": micro.id,
        "week_number": micro.week_number,
        "start_date": micro.start_date.isoformat(),
        "end_date": micro.end_date.isoformat(),
        "is_deload": micro.is_deload,
        "volume_multiplier": micro.volume_multiplier,
        "target_rir": micro.target_rir,
    }


def _mesocycle_to_dict(meso: Mesocycle) -> dict[str, Any]:
    return {
        "id": meso.id,
        "phase": _name(meso.phase),
        "start_date": meso.start_date.isoformat(),
        "end_date": meso.end_date.isoformat(),
        "includes_deload": meso.includes_deload,
        "deload_strategy": _name(meso.deload_strategy) if meso.deload_strategy else None,
        "micro_cycles": [_microcycle_to_dict(m) for m in meso.micro_cycles],
    }


def macrocycle_to_dict(macrocycle: Macrocycle) -> dict[str, Any]:
    """Nested dict of a plan: macrocycle → mesocycles → microcycles."""
    return {
        "id": macrocycle.id,
        "user_id": macrocycle.user_id,
        "name": macrocycle.name,
        "duration_weeks": macrocycle.duration_weeks,
        "primary_goal": _name(macrocycle.primary_goal),
        "training_level": _name(macrocycle.training_level),
        "periodization_type": _name(macrocycle.periodization_type),
        "frequency": macrocycle.frequency,
        "start_date": macrocycle.start_date.isoformat(),
        "end_date": macrocycle.end_date.isoformat(),
        "is_active": macrocycle.is_active,
        "deload_schedule": _schedule_to_dict(macrocycle.deload_schedule),
        "meso_cycles": [_mesocycle_to_dict(m) for m in macrocycle.meso_cycles],
    }


def macrocycle_from_dict(data: dict[str, Any]) -> Macrocycle:
    meso_cycles = []
    for meso in data["meso_cycles"]:
        micro_cycles = tuple(
            Microcycle(
                id=micro["id"],
                mesocycle_id=meso["id"],
                week_number=int(micro["week_number"]),
                start_date=date.fromisoformat(micro["start_date"]),
                end_date=date.fromisoformat(micro["end_date"]),
                is_deload=bool(micro["is_deload"]),
                volume_multiplier=float(micro["volume_multiplier"]),
                target_rir=int(micro["target_rir"]),
            )
            for micro in meso["micro_cycles"]
        )
        strategy = meso.get("deload_strategy")
        meso_cycles.append(
            Mesocycle(
                id=meso["id"],
                macrocycle_id=data["id"],
                phase=_member(MesocyclePhase, meso["phase"]),
                start_date=date.fromisoformat(meso["start_date"]),
                end_date=date.fromisoformat(meso["end_date"]),
                micro_cycles=micro_cycles,
                includes_deload=bool(meso["includes_deload"]),
                deload_strategy=_member(DeloadType, strategy) if strategy else None,
            )
        )
    return Macrocycle(
        id=data["id"],
        user_id=data["user_id"],
        name=data["name"],
        duration_weeks=int(data["duration_weeks"]),
        meso_cycles=tuple(meso_cycles),
        primary_goal=_member(TrainingGoal, data["primary_goal"]),
        training_level=_member(TrainingLevel, data["training_level"]),
        periodization_type=_member(PeriodizationType, data["periodization_type"]),
        frequency=int(data["frequency"]),
        start_date=date.fromisoformat(data["start_date"]),
        end_date=date.fromisoformat(data["end_date"]),
        deload_schedule=_schedule_from_dict(data["deload_schedule"]),
        is_active=bool(data["is_active"]),
    )


def routine_to_dict(routine: WorkoutRoutine) -> dict[str, Any]:
    return {
        "id": routine.id,
        "user_id": routine.user_id,
        "mesocycle_id": routine.mesocycle_id,
        "name": routine.name,
        "phase": _name(routine.phase),
        "days": [
            {
                "name": day.name,
                "muscle_groups": list(day.muscle_groups),
                "exercises": [
                    {
                        "exercise_id": ex.exercise_id,
                        "sets": ex.sets,
                        "reps": ex.reps,
                        "target_rir": ex.target_rir,
                    }
                    for ex in day.exercises
                ],
            }
            for day in routine.days
        ],
    }


def routine_from_dict(data: dict[str, Any]) -> WorkoutRoutine:
    return WorkoutRoutine(
        id=data["id"],
        user_id=data["user_id"],
        mesocycle_id=data["mesocycle_id"],
        name=data["name"],
        phase=_member(MesocyclePhase, data["phase"]),
        days=tuple(
            RoutineDay(
                name=day["name"],
                muscle_groups=tuple(day["muscle_groups"]),
                exercises=tuple(
                    RoutineExercise(
                        exercise_id=ex["exercise_id"],
                        sets=int(ex["sets"]),
                        reps=int(ex["reps"]),
                        target_rir=int(ex["target_rir"]),
                    )
                    for ex in day["exercises"]
                ),
            )
            for day in data["days"]
        ),
    )


# ---------------------------------------------------------------------------
# Whole-store snapshots
# ---------------------------------------------------------------------------


def store_to_dict(store: InMemoryStore) -> dict[str, Any]:
    """Everything held by an InMemoryStore as plain JSON-compatible data."""
    macrocycles = [
        m for user_id in _plan_users(store) for m in store.plans.list_for_user(user_id)
    ]
    routines = [
        r for user_id in _plan_users(store) for r in store.plans.list_routines(user_id)
    ]
    return {
        "version": SNAPSHOT_VERSION,
        "fatigue": [fatigue_to_dict(s) for s in store.fatigue.all()],
        "workout_logs": [
            workout_log_to_dict(log)
            for user_id in store.logs.user_ids()
            for log in store.logs.list_logs(user_id)
        ],
        "landmarks": [landmark_to_dict(lm) for lm in store.landmarks.all()],
        "volume_progressions": [progression_to_dict(p) for p in store.progressions.all()],
        "deloads": [deload_record_to_dict(r) for r in store.deloads.all()],
        "macrocycles": [macrocycle_to_dict(m) for m in macrocycles],
        "routines": [routine_to_dict(r) for r in routines],
    }


def store_from_dict(data: dict[str, Any]) -> InMemoryStore:
    """Rebuild an InMemoryStore; every record is re-validated on the way in.

    Raises:
        ValidationError: On an unsupported snapshot version or an invalid record.
    """
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValidationError(f"Unsupported snapshot version {version}")
    store = InMemoryStore()
    for item in data.get("fatigue", []):
        store.fatigue.save(fatigue_from_dict(item))
    for item in data.get("workout_logs", []):
        store.logs.add(workout_log_from_dict(item))
    for item in data.get("landmarks", []):
        store.landmarks.save(landmark_from_dict(item))
    for item in data.get("volume_progressions", []):
        store.progressions.add(progression_from_dict(item))
    for item in data.get("deloads", []):
        store.deloads.add(deload_record_from_dict(item))
    for item in data.get("macrocycles", []):
        store.plans.save_macrocycle(macrocycle_from_dict(item))
    store.plans.save_routines([routine_from_dict(item) for item in data.get("routines", [])])
    return store


def store_to_json_string(store: InMemoryStore, indent: int = 2) -> str:
    return json.dumps(store_to_dict(store), indent=indent)


def store_from_json_string(text: str) -> InMemoryStore:
    return store_from_dict(json.loads(text))


def _plan_users(store: InMemoryStore) -> list[str]:
    return sorted(store.plans.user_ids())
