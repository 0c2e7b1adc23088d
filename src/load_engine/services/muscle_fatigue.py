"""MuscleGroupFatigueAnalyzer: recency-weighted fatigue per muscle group."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable

from load_engine.catalog import MUSCLE_GROUPS, ExerciseCatalog
from load_engine.config import EngineConfig
from load_engine.math.recency import muscle_group_fatigue
from load_engine.models.workout_log import WorkoutLog

logger = logging.getLogger(__name__)


class MuscleGroupFatigueAnalyzer:
    """Maps completed sets onto the muscle taxonomy. A pure view over logs."""

    def __init__(
        self,
        catalog: ExerciseCatalog | None = None,
        config: EngineConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._catalog = catalog or ExerciseCatalog()
        self._config = config or EngineConfig()
        self._today = today

    def analyze(
        self,
        user_id: str,
        logs: Iterable[WorkoutLog],
        as_of: date | None = None,
    ) -> dict[str, float]:
        """Score every muscle group in the taxonomy; untouched groups score 0.

        Logs belonging to other users are ignored. Sets of unknown exercises
        contribute nothing.
        """
        reference = as_of or self._today()
        own_logs = [log for log in logs if log.user_id == user_id]
        skipped = len({
            s.exercise_id
            for log in own_logs
            for s in log.completed_sets
            if s.exercise_id not in self._catalog
        })
        if skipped:
            logger.debug("Ignoring %d unknown exercise(s) for %s", skipped, user_id)
        return muscle_group_fatigue(
            own_logs,
            self._catalog,
            as_of=reference,
            groups=MUSCLE_GROUPS,
            secondary_weight=self._config.secondary_muscle_weight,
        )
