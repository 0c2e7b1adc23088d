"""Repository ports the engine is constructed with.

Implementations raise StorageError when the backing store is unavailable;
they never return partially written data.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from load_engine.models.deload import DeloadRecord
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.plan import Macrocycle, WorkoutRoutine
from load_engine.models.volume import VolumeLandmark, VolumeProgression
from load_engine.models.workout_log import CompletedSet, WorkoutLog


class FatigueRepository(ABC):
    @abstractmethod
    def get(self, user_id: str) -> UserFatigueState | None: ...

    @abstractmethod
    def save(self, state: UserFatigueState) -> None: ...


class WorkoutLogRepository(ABC):
    @abstractmethod
    def add(self, log: WorkoutLog) -> None: ...

    @abstractmethod
    def remove(self, user_id: str, log_id: str) -> None:
        """Delete a stored log; an unknown id is a no-op."""
        ...

    @abstractmethod
    def list_logs(
        self, user_id: str, start: date | None = None, end: date | None = None
    ) -> list[WorkoutLog]:
        """Logs for a user with ``start <= log.date <= end``, oldest first."""
        ...

    @abstractmethod
    def latest_set(self, user_id: str, exercise_id: str) -> CompletedSet | None:
        """Most recently performed set of an exercise, by timestamp."""
        ...


class LandmarkRepository(ABC):
    @abstractmethod
    def get(self, user_id: str, muscle_group: str) -> VolumeLandmark | None: ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[VolumeLandmark]: ...

    @abstractmethod
    def save(self, landmark: VolumeLandmark) -> None: ...


class VolumeProgressionRepository(ABC):
    @abstractmethod
    def add(self, progression: VolumeProgression) -> None:
        """Store a week, replacing any earlier entry for the same (user, group, week)."""
        ...

    @abstractmethod
    def list_for_user(
        self, user_id: str, since: date | None = None
    ) -> list[VolumeProgression]:
        """Weeks starting on or after *since*, oldest first."""
        ...


class PlanRepository(ABC):
    @abstractmethod
    def save_macrocycle(self, macrocycle: Macrocycle) -> None: ...

    @abstractmethod
    def get_macrocycle(self, macrocycle_id: str) -> Macrocycle | None: ...

    @abstractmethod
    def delete_macrocycle(self, macrocycle_id: str) -> None:
        """Remove a macrocycle and every routine that references its mesocycles."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Macrocycle]: ...

    @abstractmethod
    def get_active(self, user_id: str) -> Macrocycle | None: ...

    @abstractmethod
    def activate(self, user_id: str, macrocycle_id: str) -> Macrocycle:
        """Atomically mark one macrocycle active and every other one inactive.

        Raises:
            NotFoundError: If the macrocycle does not exist for the user.
        """
        ...

    @abstractmethod
    def save_routines(self, routines: list[WorkoutRoutine]) -> None:
        """Persist all routines or none of them."""
        ...

    @abstractmethod
    def routine_for_mesocycle(self, mesocycle_id: str) -> WorkoutRoutine | None: ...

    @abstractmethod
    def list_routines(self, user_id: str) -> list[WorkoutRoutine]: ...


class DeloadHistoryRepository(ABC):
    @abstractmethod
    def add(self, record: DeloadRecord) -> None: ...

    @abstractmethod
    def latest(self, user_id: str) -> DeloadRecord | None:
        """The deload with the latest end date, if any."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[DeloadRecord]: ...
