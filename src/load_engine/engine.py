"""TrainingLoadEngine: the facade exposing every engine operation."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, Iterable

from load_engine.catalog import ExerciseCatalog
from load_engine.config import EngineConfig
from load_engine.exceptions import StorageError
from load_engine.models.context import TrainingLoadContext
from load_engine.models.deload import DeloadRecommendation, DeloadRecord, DeloadScheduleConfig
from load_engine.models.enums import (
    PROGRESSION_HISTORY_WEEKS,
    DeloadType,
    MesocyclePhase,
    TrainingGoal,
    TrainingLevel,
)
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.plan import ActivePlanView, PlanParams, PlanResult
from load_engine.models.recommendation import LoadRecommendation
from load_engine.models.volume import (
    VolumeLandmark,
    VolumeProgression,
    VolumeRecommendation,
    VolumeSummary,
)
from load_engine.models.workout_log import WorkoutLog
from load_engine.registry import RuleRegistry
from load_engine.repositories.base import (
    DeloadHistoryRepository,
    FatigueRepository,
    LandmarkRepository,
    PlanRepository,
    VolumeProgressionRepository,
    WorkoutLogRepository,
)
from load_engine.repositories.memory import InMemoryStore
from load_engine.services.context import build_context
from load_engine.services.deload_advisor import DeloadAdvisor
from load_engine.services.fatigue_tracker import FatigueTracker
from load_engine.services.load_recommender import LoadRecommender
from load_engine.services.muscle_fatigue import MuscleGroupFatigueAnalyzer
from load_engine.services.periodization_planner import PeriodizationPlanner
from load_engine.services.volume_tracker import VolumeLandmarkTracker

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrainingLoadEngine:
    """Wires the services to their repositories and exposes the public operations.

    Usage:
        engine = TrainingLoadEngine()
        engine.record_workout(log)
        weight = engine.recommend_load("u1", "bench-press", target_reps=6, target_rir=1)
        plan = engine.create_periodized_plan("u1", params)

    Any repository left out is replaced by an in-memory one.
    """

    def __init__(
        self,
        fatigue_repo: FatigueRepository | None = None,
        log_repo: WorkoutLogRepository | None = None,
        landmark_repo: LandmarkRepository | None = None,
        plan_repo: PlanRepository | None = None,
        deload_repo: DeloadHistoryRepository | None = None,
        progression_repo: VolumeProgressionRepository | None = None,
        catalog: ExerciseCatalog | None = None,
        config: EngineConfig | None = None,
        registry: RuleRegistry | None = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        defaults = InMemoryStore()
        self.config = config or EngineConfig()
        self.catalog = catalog or ExerciseCatalog()
        self._clock = clock
        self.logs = log_repo or defaults.logs
        self.plans = plan_repo or defaults.plans

        self.fatigue = FatigueTracker(fatigue_repo or defaults.fatigue, self.config, clock=clock)
        self.muscle_fatigue = MuscleGroupFatigueAnalyzer(self.catalog, self.config, today=self.today)
        self.volume = VolumeLandmarkTracker(
            landmark_repo or defaults.landmarks,
            self.logs,
            self.catalog,
            self.config,
            today=self.today,
            progressions=progression_repo or defaults.progressions,
        )
        self.loads = LoadRecommender(self.logs, self.fatigue, self.catalog, self.config)
        planner_kwargs = {"id_factory": id_factory} if id_factory is not None else {}
        self.planner = PeriodizationPlanner(self.plans, today=self.today, **planner_kwargs)
        self.deloads = DeloadAdvisor(
            self.fatigue,
            self.volume,
            deload_repo or defaults.deloads,
            plans=self.plans,
            registry=registry,
            today=self.today,
            logs=self.logs,
        )

    @classmethod
    def from_store(cls, store: InMemoryStore, **kwargs) -> TrainingLoadEngine:
        """Engine backed by every repository of an InMemoryStore."""
        return cls(
            fatigue_repo=store.fatigue,
            log_repo=store.logs,
            landmark_repo=store.landmarks,
            plan_repo=store.plans,
            deload_repo=store.deloads,
            progression_repo=store.progressions,
            **kwargs,
        )

    def today(self) -> date:
        return self._clock().date()

    # ------------------------------------------------------------------
    # Fatigue
    # ------------------------------------------------------------------

    def get_user_fatigue(self, user_id: str) -> UserFatigueState:
        return self.fatigue.get_fatigue(user_id)

    def apply_workout_fatigue(self, user_id: str, intensity: float) -> UserFatigueState:
        return self.fatigue.apply_workout(user_id, intensity)

    def apply_rest_fatigue(self, user_id: str, days: float) -> UserFatigueState:
        return self.fatigue.apply_rest(user_id, days)

    # ------------------------------------------------------------------
    # Loads and volume
    # ------------------------------------------------------------------

    def recommend_load(
        self,
        user_id: str,
        exercise_id: str,
        target_reps: int,
        target_rir: int,
        phase: MesocyclePhase | None = None,
    ) -> float | None:
        """Next working weight, or None without history for the exercise."""
        context = self.build_context(user_id)
        return self.loads.recommend(
            user_id, exercise_id, target_reps, target_rir, context=context, phase=phase
        )

    def recommend_load_detailed(
        self,
        user_id: str,
        exercise_id: str,
        target_reps: int,
        target_rir: int,
        phase: MesocyclePhase | None = None,
    ) -> LoadRecommendation | None:
        context = self.build_context(user_id)
        return self.loads.recommend_detailed(
            user_id, exercise_id, target_reps, target_rir, context=context, phase=phase
        )

    def analyze_muscle_group_fatigue(
        self, user_id: str, logs: Iterable[WorkoutLog], as_of: date | None = None
    ) -> dict[str, float]:
        return self.muscle_fatigue.analyze(user_id, logs, as_of=as_of)

    def get_volume_summary(self, user_id: str) -> list[VolumeSummary]:
        return self.volume.summarize_all(user_id)

    def initialize_landmarks(
        self, user_id: str, training_level: TrainingLevel
    ) -> list[VolumeLandmark]:
        return self.volume.initialize_from_template(user_id, training_level)

    def record_volume_progression(
        self,
        user_id: str,
        muscle_group: str,
        sets_performed: float,
        target_sets: float,
        fatigue_level: float | None = None,
        notes: str = "",
        week_of: date | None = None,
    ) -> VolumeProgression:
        """Record a training week for a muscle group.

        Without an explicit fatigue_level the user's current fatigue is used.
        """
        if fatigue_level is None:
            fatigue_level = self.fatigue.get_fatigue(user_id).current_fatigue
        return self.volume.record_volume_progression(
            user_id, muscle_group, sets_performed, target_sets, fatigue_level,
            notes=notes, week_of=week_of,
        )

    def get_volume_recommendations(
        self, user_id: str, history_weeks: int = PROGRESSION_HISTORY_WEEKS
    ) -> list[VolumeRecommendation]:
        """Next weekly sets per muscle group from landmarks and recorded weeks."""
        return self.volume.volume_recommendations(user_id, history_weeks=history_weeks)

    def record_workout(self, log: WorkoutLog) -> UserFatigueState:
        """Store a finished workout, then update fatigue and weekly volume.

        The fatigue increase is derived from the log's sets and RIR. A failed
        fatigue write removes the log again, so the same log can be retried.
        Weekly volume is recomputed from stored logs; a failed refresh is
        logged and left to the next refresh.

        Raises:
            ValidationError: If the log id is already recorded.
            StorageError: If the log or the fatigue state cannot be written.
        """
        self.logs.add(log)
        intensity = self.fatigue.intensity_for_workout(log)
        try:
            state = self.fatigue.apply_workout(log.user_id, intensity)
        except StorageError:
            logger.warning("Fatigue update failed for workout %s; removing the log", log.id)
            self.logs.remove(log.user_id, log.id)
            raise
        try:
            self.volume.refresh_all(log.user_id, as_of=max(log.date, self.today()))
        except StorageError as exc:
            logger.warning("Volume refresh after workout %s failed: %s", log.id, exc)
        logger.info(
            "Recorded workout %s for %s: %d sets, intensity %.2f",
            log.id, log.user_id, log.total_sets, intensity,
        )
        return state

    # ------------------------------------------------------------------
    # Plans and deloads
    # ------------------------------------------------------------------

    def create_periodized_plan(self, user_id: str, params: PlanParams) -> PlanResult:
        return self.planner.create_plan(
            user_id,
            params.name,
            params.goal,
            params.level,
            params.frequency,
            params.duration_months,
            params.start_date,
            params.options,
        )

    def get_active_plan(self, user_id: str, as_of: date | None = None) -> ActivePlanView:
        """Current position in the active plan plus a fresh deload recommendation."""
        day = as_of or self.today()
        view = self.planner.get_active_plan(user_id, as_of=day)
        if view.macrocycle is None:
            return view
        plan = view.macrocycle
        recommendation = self.deloads.analyze_and_recommend(
            user_id,
            plan.training_level,
            plan.primary_goal,
            schedule_config=plan.deload_schedule,
            as_of=day,
            context=self.build_context(user_id, day),
        )
        return ActivePlanView(
            macrocycle=plan,
            current_mesocycle=view.current_mesocycle,
            current_microcycle=view.current_microcycle,
            current_routine=view.current_routine,
            deload_recommendation=recommendation,
        )

    def recommend_deload(
        self,
        user_id: str,
        level: TrainingLevel,
        goal: TrainingGoal,
        schedule_config: DeloadScheduleConfig | None = None,
        as_of: date | None = None,
    ) -> DeloadRecommendation:
        day = as_of or self.today()
        return self.deloads.analyze_and_recommend(
            user_id,
            level,
            goal,
            schedule_config=schedule_config,
            as_of=day,
            context=self.build_context(user_id, day),
        )

    def record_deload(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        deload_type: DeloadType = DeloadType.VOLUME,
    ) -> DeloadRecord:
        return self.deloads.record_deload(user_id, start_date, end_date, deload_type)

    def build_context(self, user_id: str, as_of: date | None = None) -> TrainingLoadContext:
        """Snapshot fatigue and volume status once for a request."""
        return build_context(user_id, self.fatigue, self.volume, as_of or self.today())
