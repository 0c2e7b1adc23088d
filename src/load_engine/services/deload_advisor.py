"""DeloadAdvisor: whether, when and how a user should deload.

Calendar signals (scheduled interval) trigger under every schedule.
Readiness signals (fatigue threshold, volume overreach, performance decline)
trigger only auto-regulated schedules; planned schedules still record them
in the rule trace. Every outcome carries reason codes so callers never need
to re-derive it.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from load_engine.exceptions import StorageError
from load_engine.math.performance import performance_decline
from load_engine.models.context import TrainingLoadContext
from load_engine.models.decision_trace import RuleResult, RuleStatus
from load_engine.models.deload import (
    DeloadInputs,
    DeloadRecommendation,
    DeloadRecord,
    DeloadScheduleConfig,
    DeloadSignal,
)
from load_engine.models.enums import (
    DELOAD_DURATION_DAYS,
    DELOAD_REDUCTIONS,
    PERFORMANCE_LOG_WINDOW,
    DeloadTiming,
    DeloadType,
    DeloadUrgency,
    ReasonCode,
    TrainingGoal,
    TrainingLevel,
    VolumeStatus,
)
from load_engine.registry import RuleRegistry
from load_engine.repositories.base import (
    DeloadHistoryRepository,
    PlanRepository,
    WorkoutLogRepository,
)
from load_engine.services.context import build_context
from load_engine.services.fatigue_tracker import FatigueTracker
from load_engine.services.volume_tracker import VolumeLandmarkTracker

logger = logging.getLogger(__name__)


class DeloadAdvisor:
    """Evaluates deload rules and turns their signals into a recommendation.

    Usage:
        advisor = DeloadAdvisor(fatigue, volume, history, plans, logs=logs)
        rec = advisor.analyze_and_recommend("u1", TrainingLevel.INTERMEDIATE,
                                            TrainingGoal.HYPERTROPHY)
    """

    def __init__(
        self,
        fatigue_tracker: FatigueTracker,
        volume_tracker: VolumeLandmarkTracker,
        history: DeloadHistoryRepository,
        plans: PlanRepository | None = None,
        registry: RuleRegistry | None = None,
        today: Callable[[], date] = date.today,
        logs: WorkoutLogRepository | None = None,
    ) -> None:
        self._fatigue = fatigue_tracker
        self._volume = volume_tracker
        self._history = history
        self._plans = plans
        self._logs = logs
        self.registry = registry or RuleRegistry()
        self._today = today

        # Auto-discover rules if using default registry
        if registry is None:
            self.registry.discover_rules()

    def analyze_and_recommend(
        self,
        user_id: str,
        training_level: TrainingLevel,
        goal: TrainingGoal,
        schedule_config: DeloadScheduleConfig | None = None,
        as_of: date | None = None,
        context: TrainingLoadContext | None = None,
    ) -> DeloadRecommendation:
        """Recommend a deload (or not). Never raises for missing data.

        Args:
            user_id: Lifter.
            training_level: Selects default schedule settings.
            goal: Selects the default deload strategy.
            schedule_config: Explicit schedule; level/goal defaults if omitted.
            as_of: Evaluation day; defaults to the context's day or today.
            context: Shared per-request snapshot; built fresh if omitted.
        """
        day = as_of or (context.as_of if context is not None else self._today())
        schedule = schedule_config or DeloadScheduleConfig.for_level(training_level, goal)
        if context is None:
            context = build_context(user_id, self._fatigue, self._volume, day)

        weeks_since, has_deloaded = self._weeks_since_last_deload(user_id, day)
        inputs = DeloadInputs(
            context=context,
            schedule=schedule,
            weeks_since_last_deload=weeks_since,
            performance_decline=self._performance_decline(user_id, day),
        )
        signals, rule_results = self._evaluate_rules(inputs)

        triggering = [s for s in signals if schedule.auto_regulated or not s.auto_regulated]
        info: list[ReasonCode] = []
        if not has_deloaded:
            info.append(ReasonCode.NO_DELOAD_HISTORY)
        if not context.volume_statuses:
            info.append(ReasonCode.NO_VOLUME_DATA)
        elif context.groups_at_or_above(VolumeStatus.EXCEEDING_MRV):
            info.append(ReasonCode.MUSCLE_GROUPS_EXCEEDING_MRV)

        urgency = max((s.urgency for s in triggering), default=DeloadUrgency.NONE)
        if (
            triggering
            and has_deloaded
            and weeks_since is not None
            and weeks_since < schedule.min_weeks_between_deloads
            and urgency < DeloadUrgency.CRITICAL
        ):
            logger.info(
                "Suppressing deload for %s: last one %d week(s) ago (minimum %d)",
                user_id, weeks_since, schedule.min_weeks_between_deloads,
            )
            triggering = []
            urgency = DeloadUrgency.NONE
            info.append(ReasonCode.RECENT_DELOAD)

        if not triggering:
            return self._no_deload(schedule, weeks_since, info, rule_results)

        codes: list[ReasonCode] = []
        for signal in triggering:
            codes.extend(c for c in signal.reason_codes if c not in codes)
        codes.extend(c for c in info if c not in codes)

        auto_rules = {s.rule_id for s in triggering if s.auto_regulated}
        deload_type = DeloadType.COMBINED if len(auto_rules) > 1 else schedule.strategy
        immediate = any(s.auto_regulated and s.urgency >= DeloadUrgency.HIGH for s in triggering)
        volume_cut, intensity_cut, frequency_cut = DELOAD_REDUCTIONS[deload_type]
        recommendation = DeloadRecommendation(
            should_deload=True,
            type=deload_type,
            timing=DeloadTiming.IMMEDIATE if immediate else DeloadTiming.NEXT_WEEK,
            reason_codes=tuple(codes),
            urgency=urgency,
            duration_days=DELOAD_DURATION_DAYS[urgency],
            weeks_since_last_deload=weeks_since,
            rule_results=rule_results,
            volume_reduction=volume_cut,
            intensity_reduction=intensity_cut,
            frequency_reduction=frequency_cut,
            target_muscle_groups=tuple(context.groups_at_or_above(VolumeStatus.APPROACHING_MRV)),
        )
        logger.info(
            "Deload recommended for %s: %s, %s, urgency %s (%s)",
            user_id,
            recommendation.type.name.lower(),
            recommendation.timing.name.lower(),
            recommendation.urgency.name.lower(),
            ", ".join(recommendation.codes),
        )
        return recommendation

    def record_deload(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        deload_type: DeloadType = DeloadType.VOLUME,
    ) -> DeloadRecord:
        """Persist a deload the user has acted on.

        Raises:
            ValidationError: If end_date precedes start_date.
            StorageError: If the write fails.
        """
        record = DeloadRecord(user_id=user_id, start_date=start_date, end_date=end_date, type=deload_type)
        self._history.add(record)
        return record

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _evaluate_rules(
        self, inputs: DeloadInputs
    ) -> tuple[list[DeloadSignal], tuple[RuleResult, ...]]:
        signals: list[DeloadSignal] = []
        results: list[RuleResult] = []
        for rule in self.registry.get_all_rules():
            if not rule.has_required_data(inputs):
                results.append(
                    RuleResult(
                        rule_id=rule.rule_id,
                        status=RuleStatus.NOT_APPLICABLE,
                        explanation=f"Missing required data: {rule.required_data}",
                    )
                )
                continue
            signal = rule.evaluate(inputs)
            if signal is None:
                results.append(
                    RuleResult(
                        rule_id=rule.rule_id,
                        status=RuleStatus.SKIPPED,
                        explanation="Rule returned no signal.",
                    )
                )
                continue
            signals.append(signal)
            results.append(
                RuleResult(
                    rule_id=rule.rule_id,
                    status=RuleStatus.FIRED,
                    reason_codes=signal.reason_codes,
                    explanation=signal.explanation,
                )
            )
        return signals, tuple(results)

    def _performance_decline(self, user_id: str, day: date) -> float | None:
        if self._logs is None:
            return None
        try:
            logs = self._logs.list_logs(user_id, end=day)
        except StorageError as exc:
            logger.warning("Workout logs unavailable for %s: %s", user_id, exc)
            return None
        return performance_decline(logs[-PERFORMANCE_LOG_WINDOW:])

    def _weeks_since_last_deload(self, user_id: str, day: date) -> tuple[int | None, bool]:
        """Whole weeks since the last deload ended, and whether one ever happened.

        Falls back to the active plan's start when the user has never
        deloaded; returns (None, False) without either.
        """
        deload_ends: list[date] = []
        try:
            record = self._history.latest(user_id)
        except StorageError as exc:
            logger.warning("Deload history unavailable for %s: %s", user_id, exc)
            record = None
        if record is not None and record.start_date <= day:
            deload_ends.append(min(record.end_date, day))

        plan = None
        if self._plans is not None:
            try:
                plan = self._plans.get_active(user_id)
            except StorageError as exc:
                logger.warning("Active plan unavailable for %s: %s", user_id, exc)
        if plan is not None:
            deload_ends.extend(
                min(meso.end_date, day)
                for meso in plan.deload_mesocycles
                if meso.start_date <= day
            )

        if deload_ends:
            return (day - max(deload_ends)).days // 7, True
        if plan is not None and plan.start_date <= day:
            return (day - plan.start_date).days // 7, False
        return None, False

    @staticmethod
    def _no_deload(
        schedule: DeloadScheduleConfig,
        weeks_since: int | None,
        info: list[ReasonCode],
        rule_results: tuple[RuleResult, ...],
    ) -> DeloadRecommendation:
        codes = list(info)
        timing = DeloadTiming.NOT_NEEDED
        if weeks_since is not None and weeks_since == schedule.frequency - 1:
            timing = DeloadTiming.UPCOMING
            codes.insert(0, ReasonCode.SCHEDULED_DELOAD_APPROACHING)
        codes.insert(0, ReasonCode.WITHIN_TOLERANCE)
        return DeloadRecommendation(
            should_deload=False,
            type=schedule.strategy,
            timing=timing,
            reason_codes=tuple(codes),
            urgency=DeloadUrgency.NONE,
            duration_days=0,
            weeks_since_last_deload=weeks_since,
            rule_results=rule_results,
        )

