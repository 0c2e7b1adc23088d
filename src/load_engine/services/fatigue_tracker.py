"""FatigueTracker: owns per-user fatigue state.

Mutations are read-modify-write cycles, serialised per user. Different users
never contend for the same lock.
"""

from __future__ import annotations

import logging
import math
import threading
import weakref
from datetime import datetime, timezone
from typing import Callable

from load_engine.config import EngineConfig
from load_engine.exceptions import StorageError, ValidationError
from load_engine.math.fatigue import accumulate_fatigue, recover_fatigue, workout_intensity
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.workout_log import WorkoutLog
from load_engine.repositories.base import FatigueRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FatigueTracker:
    """Reads and mutates UserFatigueState through a FatigueRepository.

    Reads degrade to a default state when nothing is stored or the store is
    unavailable. The default is not persisted until the first mutation.
    """

    def __init__(
        self,
        repository: FatigueRepository,
        config: EngineConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repository = repository
        self._config = config or EngineConfig()
        self._clock = clock
        # Per-user locks live only while some caller holds them
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()
        self._started = clock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_fatigue(self, user_id: str) -> UserFatigueState:
        """Return the stored state, or the default for a user with none stored."""
        _require_user(user_id)
        try:
            stored = self._repository.get(user_id)
        except StorageError as exc:
            logger.warning("Fatigue read failed for %s, using defaults: %s", user_id, exc)
            return self._default_state(user_id)
        return stored if stored is not None else self._default_state(user_id)

    def default_state(self, user_id: str) -> UserFatigueState:
        """A fresh default state stamped with the current time."""
        _require_user(user_id)
        return self._defaults_at(user_id, self._clock())

    def intensity_for_workout(self, log: WorkoutLog) -> float:
        """Intensity factor of a workout: set count weighted by RIR proximity."""
        return workout_intensity(
            log.completed_sets,
            intensity_per_set=self._config.intensity_per_set,
            rir_ceiling=self._config.rir_ceiling,
            default_rir=self._config.default_rir,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def apply_workout(self, user_id: str, intensity_factor: float) -> UserFatigueState:
        """Raise fatigue by *intensity_factor*, capped at the fatigue ceiling.

        Raises:
            ValidationError: If intensity_factor is negative or not finite.
            StorageError: If the state cannot be read or written.
        """
        _require_user(user_id)
        if not math.isfinite(intensity_factor) or intensity_factor < 0:
            raise ValidationError(
                f"intensity_factor must be a finite value >= 0, got {intensity_factor}"
            )
        with self._lock_for(user_id):
            state = self._load_for_update(user_id)
            updated = UserFatigueState(
                user_id=user_id,
                current_fatigue=accumulate_fatigue(
                    state.current_fatigue, intensity_factor, self._config.max_fatigue
                ),
                baseline_fatigue=state.baseline_fatigue,
                recovery_rate=state.recovery_rate,
                last_updated=self._clock(),
            )
            self._persist(updated)
        logger.info(
            "Workout fatigue for %s: %.1f -> %.1f (+%.2f)",
            user_id,
            state.current_fatigue,
            updated.current_fatigue,
            intensity_factor,
        )
        return updated

    def apply_rest(self, user_id: str, days_rested: float) -> UserFatigueState:
        """Decay fatigue by ``recovery_rate * days_rested``, never below baseline.

        Replays compound: callers must deliver each elapsed interval at most once.

        Raises:
            ValidationError: If days_rested is negative or not finite.
            StorageError: If the state cannot be read or written.
        """
        _require_user(user_id)
        if not math.isfinite(days_rested) or days_rested < 0:
            raise ValidationError(f"days_rested must be a finite value >= 0, got {days_rested}")
        with self._lock_for(user_id):
            state = self._load_for_update(user_id)
            updated = UserFatigueState(
                user_id=user_id,
                current_fatigue=recover_fatigue(
                    state.current_fatigue,
                    state.baseline_fatigue,
                    state.recovery_rate,
                    days_rested,
                ),
                baseline_fatigue=state.baseline_fatigue,
                recovery_rate=state.recovery_rate,
                last_updated=self._clock(),
            )
            self._persist(updated)
        logger.info(
            "Rest recovery for %s: %.1f -> %.1f over %s day(s)",
            user_id,
            state.current_fatigue,
            updated.current_fatigue,
            days_rested,
        )
        return updated

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    def _default_state(self, user_id: str) -> UserFatigueState:
        # Stamped with the tracker start so repeated reads compare equal
        return self._defaults_at(user_id, self._started)

    def _defaults_at(self, user_id: str, stamp: datetime) -> UserFatigueState:
        return UserFatigueState(
            user_id=user_id,
            current_fatigue=self._config.default_current_fatigue,
            baseline_fatigue=self._config.default_baseline_fatigue,
            recovery_rate=self._config.default_recovery_rate,
            last_updated=stamp,
        )

    def _load_for_update(self, user_id: str) -> UserFatigueState:
        # A failed read must not be mistaken for a new user on the write path.
        stored = self._repository.get(user_id)
        return stored if stored is not None else self.default_state(user_id)

    def _persist(self, state: UserFatigueState) -> None:
        try:
            self._repository.save(state)
        except StorageError:
            logger.error("Failed to persist fatigue for %s", state.user_id)
            raise


def _require_user(user_id: str) -> None:
    if not user_id:
        raise ValidationError("user_id must be non-empty")
