"""Thread-safe in-memory repositories, used by default and in tests."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass, field
from datetime import date

from load_engine.exceptions import NotFoundError, ValidationError
from load_engine.models.deload import DeloadRecord
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.plan import Macrocycle, WorkoutRoutine
from load_engine.models.volume import VolumeLandmark, VolumeProgression
from load_engine.models.workout_log import CompletedSet, WorkoutLog
from load_engine.repositories.base import (
    DeloadHistoryRepository,
    FatigueRepository,
    LandmarkRepository,
    PlanRepository,
    VolumeProgressionRepository,
    WorkoutLogRepository,
)


class InMemoryFatigueRepository(FatigueRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._states: dict[str, UserFatigueState] = {}

    def get(self, user_id: str) -> UserFatigueState | None:
        with self._lock:
            return self._states.get(user_id)

    def save(self, state: UserFatigueState) -> None:
        with self._lock:
            self._states[state.user_id] = state

    def all(self) -> list[UserFatigueState]:
        with self._lock:
            return list(self._states.values())


class InMemoryWorkoutLogRepository(WorkoutLogRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._logs: dict[str, list[WorkoutLog]] = {}

    def add(self, log: WorkoutLog) -> None:
        with self._lock:
            logs = self._logs.setdefault(log.user_id, [])
            if any(existing.id == log.id for existing in logs):
                raise ValidationError(f"Workout log {log.id} already recorded")
            logs.append(log)
            logs.sort(key=lambda entry: entry.date)

    def remove(self, user_id: str, log_id: str) -> None:
        with self._lock:
            logs = self._logs.get(user_id, [])
            logs[:] = [log for log in logs if log.id != log_id]

    def list_logs(
        self, user_id: str, start: date | None = None, end: date | None = None
    ) -> list[WorkoutLog]:
        with self._lock:
            return [
                log
                for log in self._logs.get(user_id, [])
                if (start is None or log.date >= start) and (end is None or log.date <= end)
            ]

    def latest_set(self, user_id: str, exercise_id: str) -> CompletedSet | None:
        with self._lock:
            candidates = [
                s
                for log in self._logs.get(user_id, [])
                for s in log.completed_sets
                if s.exercise_id == exercise_id
            ]
        if not candidates:
            return None
        return max(candidates, key=lambda s: s.timestamp)

    def user_ids(self) -> list[str]:
        with self._lock:
            return list(self._logs)


class InMemoryLandmarkRepository(LandmarkRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._landmarks: dict[tuple[str, str], VolumeLandmark] = {}

    def get(self, user_id: str, muscle_group: str) -> VolumeLandmark | None:
        with self._lock:
            return self._landmarks.get((user_id, muscle_group))

    def list_for_user(self, user_id: str) -> list[VolumeLandmark]:
        with self._lock:
            return [lm for (uid, _), lm in self._landmarks.items() if uid == user_id]

    def save(self, landmark: VolumeLandmark) -> None:
        with self._lock:
            self._landmarks[(landmark.user_id, landmark.muscle_group)] = landmark

    def all(self) -> list[VolumeLandmark]:
        with self._lock:
            return list(self._landmarks.values())


class InMemoryVolumeProgressionRepository(VolumeProgressionRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._weeks: dict[tuple[str, str, date], VolumeProgression] = {}

    def add(self, progression: VolumeProgression) -> None:
        key = (progression.user_id, progression.muscle_group, progression.week_start)
        with self._lock:
            self._weeks[key] = progression

    def list_for_user(
        self, user_id: str, since: date | None = None
    ) -> list[VolumeProgression]:
        with self._lock:
            weeks = [
                p
                for (uid, _, start), p in self._weeks.items()
                if uid == user_id and (since is None or start >= since)
            ]
        return sorted(weeks, key=lambda p: p.week_start)

    def all(self) -> list[VolumeProgression]:
        with self._lock:
            return list(self._weeks.values())


class InMemoryPlanRepository(PlanRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._macrocycles: dict[str, Macrocycle] = {}
        self._routines: dict[str, WorkoutRoutine] = {}  # keyed by mesocycle id

    def save_macrocycle(self, macrocycle: Macrocycle) -> None:
        with self._lock:
            self._macrocycles[macrocycle.id] = macrocycle

    def get_macrocycle(self, macrocycle_id: str) -> Macrocycle | None:
        with self._lock:
            return self._macrocycles.get(macrocycle_id)

    def delete_macrocycle(self, macrocycle_id: str) -> None:
        with self._lock:
            macrocycle = self._macrocycles.pop(macrocycle_id, None)
            if macrocycle is None:
                return
            for meso in macrocycle.meso_cycles:
                self._routines.pop(meso.id, None)

    def list_for_user(self, user_id: str) -> list[Macrocycle]:
        with self._lock:
            return [m for m in self._macrocycles.values() if m.user_id == user_id]

    def get_active(self, user_id: str) -> Macrocycle | None:
        with self._lock:
            for macrocycle in self._macrocycles.values():
                if macrocycle.user_id == user_id and macrocycle.is_active:
                    return macrocycle
            return None

    def activate(self, user_id: str, macrocycle_id: str) -> Macrocycle:
        with self._lock:
            target = self._macrocycles.get(macrocycle_id)
            if target is None or target.user_id != user_id:
                raise NotFoundError(f"Macrocycle {macrocycle_id} not found for user {user_id}")
            for mid, macrocycle in list(self._macrocycles.items()):
                if macrocycle.user_id == user_id:
                    self._macrocycles[mid] = dataclasses.replace(
                        macrocycle, is_active=(mid == macrocycle_id)
                    )
            return self._macrocycles[macrocycle_id]

    def save_routines(self, routines: list[WorkoutRoutine]) -> None:
        with self._lock:
            for routine in routines:
                self._routines[routine.mesocycle_id] = routine

    def routine_for_mesocycle(self, mesocycle_id: str) -> WorkoutRoutine | None:
        with self._lock:
            return self._routines.get(mesocycle_id)

    def list_routines(self, user_id: str) -> list[WorkoutRoutine]:
        with self._lock:
            return [r for r in self._routines.values() if r.user_id == user_id]

    def user_ids(self) -> list[str]:
        with self._lock:
            return list({m.user_id for m in self._macrocycles.values()})


class InMemoryDeloadHistoryRepository(DeloadHistoryRepository):
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, list[DeloadRecord]] = {}

    def add(self, record: DeloadRecord) -> None:
        with self._lock:
            self._records.setdefault(record.user_id, []).append(record)

    def latest(self, user_id: str) -> DeloadRecord | None:
        with self._lock:
            records = self._records.get(user_id, [])
            return max(records, key=lambda r: r.end_date) if records else None

    def list_for_user(self, user_id: str) -> list[DeloadRecord]:
        with self._lock:
            return list(self._records.get(user_id, []))

    def all(self) -> list[DeloadRecord]:
        with self._lock:
            return [r for records in self._records.values() for r in records]


@dataclass
class InMemoryStore:
    """The full set of in-memory repositories, handy for wiring and snapshots."""

    fatigue: InMemoryFatigueRepository = field(default_factory=InMemoryFatigueRepository)
    logs: InMemoryWorkoutLogRepository = field(default_factory=InMemoryWorkoutLogRepository)
    landmarks: InMemoryLandmarkRepository = field(default_factory=InMemoryLandmarkRepository)
    progressions: InMemoryVolumeProgressionRepository = field(
        default_factory=InMemoryVolumeProgressionRepository
    )
    plans: InMemoryPlanRepository = field(default_factory=InMemoryPlanRepository)
    deloads: InMemoryDeloadHistoryRepository = field(
        default_factory=InMemoryDeloadHistoryRepository
    )
