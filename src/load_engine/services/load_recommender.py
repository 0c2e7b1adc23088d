"""LoadRecommender: next working weight from the last set and current fatigue."""

from __future__ import annotations

import logging

from load_engine.catalog import ExerciseCatalog
from load_engine.config import EngineConfig
from load_engine.exceptions import StorageError, ValidationError
from load_engine.math.load import (
    estimate_one_rep_max,
    fatigue_discount,
    round_to_increment,
    weight_for_target,
)
from load_engine.models.context import TrainingLoadContext
from load_engine.models.enums import PHASE_LOAD_ADJUSTMENT, MesocyclePhase
from load_engine.models.recommendation import LoadRecommendation
from load_engine.repositories.base import WorkoutLogRepository
from load_engine.services.fatigue_tracker import FatigueTracker

logger = logging.getLogger(__name__)


class LoadRecommender:
    """Proposes working weights. Never raises for missing history."""

    def __init__(
        self,
        logs: WorkoutLogRepository,
        fatigue_tracker: FatigueTracker,
        catalog: ExerciseCatalog | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._logs = logs
        self._fatigue = fatigue_tracker
        self._catalog = catalog or ExerciseCatalog()
        self._config = config or EngineConfig()

    def recommend(
        self,
        user_id: str,
        exercise_id: str,
        target_reps: int,
        target_rir: int,
        context: TrainingLoadContext | None = None,
        phase: MesocyclePhase | None = None,
    ) -> float | None:
        """Recommended weight, a non-negative multiple of the plate increment.

        Returns:
            The weight, or None when the user has never performed the exercise.

        Raises:
            ValidationError: If target_reps <= 0 or target_rir < 0.
        """
        detail = self.recommend_detailed(
            user_id, exercise_id, target_reps, target_rir, context=context, phase=phase
        )
        return None if detail is None else detail.weight

    def recommend_detailed(
        self,
        user_id: str,
        exercise_id: str,
        target_reps: int,
        target_rir: int,
        context: TrainingLoadContext | None = None,
        phase: MesocyclePhase | None = None,
    ) -> LoadRecommendation | None:
        """Like recommend(), with the estimate, discount and alternatives exposed.

        Args:
            user_id: Lifter.
            exercise_id: Exercise to load.
            target_reps: Reps to perform, > 0.
            target_rir: Reps to leave in reserve, >= 0.
            context: Shared per-request snapshot; fatigue is read fresh if omitted.
            phase: Mesocycle phase; strength/peaking nudge up, volume/deload down.
        """
        if not user_id or not exercise_id:
            raise ValidationError("user_id and exercise_id must be non-empty")
        if target_reps <= 0:
            raise ValidationError(f"target_reps must be > 0, got {target_reps}")
        if target_rir < 0:
            raise ValidationError(f"target_rir must be >= 0, got {target_rir}")

        try:
            last_set = self._logs.latest_set(user_id, exercise_id)
        except StorageError as exc:
            logger.warning("History unavailable for %s/%s: %s", user_id, exercise_id, exc)
            return None
        if last_set is None:
            return None

        rir = self._config.default_rir if last_set.rir is None else last_set.rir
        one_rm = estimate_one_rep_max(last_set.weight, last_set.reps, rir)

        fatigue = context.fatigue if context is not None else self._fatigue.get_fatigue(user_id)
        discount = fatigue_discount(
            fatigue.current_fatigue,
            fatigue.baseline_fatigue,
            divisor=self._config.fatigue_discount_divisor,
            floor=self._config.discount_floor,
        )
        notes = [f"e1RM {one_rm:.1f} from {last_set.weight:g}x{last_set.reps} @ RIR {rir}"]
        notes.append(f"fatigue {fatigue.current_fatigue:.0f} -> discount {discount:.3f}")

        primary = self._catalog.primary_group(exercise_id)
        if context is not None and context.is_overreached(primary):
            discount *= self._config.overreached_group_discount
            notes.append(f"{primary} exceeds MRV")

        raw = weight_for_target(one_rm, target_reps, target_rir) * discount
        if phase is not None and phase in PHASE_LOAD_ADJUSTMENT:
            raw *= PHASE_LOAD_ADJUSTMENT[phase]
            notes.append(f"{phase.name.lower()} phase x{PHASE_LOAD_ADJUSTMENT[phase]}")

        increment = self._config.plate_increment
        spread = self._config.alternative_spread
        weight = round_to_increment(raw, increment)
        return LoadRecommendation(
            exercise_id=exercise_id,
            weight=weight,
            estimated_one_rep_max=one_rm,
            fatigue_discount=discount,
            conservative_weight=round_to_increment(raw * (1 - spread), increment),
            aggressive_weight=round_to_increment(raw * (1 + spread), increment),
            explanation="; ".join(notes),
        )
