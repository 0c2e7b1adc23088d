"""Tests for DeloadAdvisor: triggers, timing, guards and reason codes."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Callable
from unittest.mock import MagicMock

import pytest

from load_engine.exceptions import StorageError, ValidationError
from load_engine.models.decision_trace import RuleStatus
from load_engine.models.deload import DeloadRecommendation, DeloadScheduleConfig
from load_engine.models.enums import (
    DeloadTiming,
    DeloadType,
    DeloadUrgency,
    ReasonCode,
    TrainingGoal,
    TrainingLevel,
)
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.plan import PlanOptions
from load_engine.models.volume import VolumeLandmark
from load_engine.models.workout_log import WorkoutLog
from load_engine.repositories.base import DeloadHistoryRepository, WorkoutLogRepository
from load_engine.repositories.memory import InMemoryStore
from load_engine.services.deload_advisor import DeloadAdvisor
from load_engine.services.fatigue_tracker import FatigueTracker
from load_engine.services.periodization_planner import PeriodizationPlanner
from load_engine.services.volume_tracker import VolumeLandmarkTracker

TODAY = date(2026, 3, 2)
NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)

INTERMEDIATE = TrainingLevel.INTERMEDIATE
HYPERTROPHY = TrainingGoal.HYPERTROPHY


class TestDeloadAdvisor:
    @pytest.fixture(autouse=True)
    def _setup(self, id_factory: Callable[[], str]) -> None:
        self.store = InMemoryStore()
        self.fatigue = FatigueTracker(self.store.fatigue, clock=lambda: NOW)
        self.volume = VolumeLandmarkTracker(
            self.store.landmarks, self.store.logs, today=lambda: TODAY
        )
        self.advisor = DeloadAdvisor(
            self.fatigue,
            self.volume,
            self.store.deloads,
            plans=self.store.plans,
            today=lambda: TODAY,
            logs=self.store.logs,
        )
        self.planner = PeriodizationPlanner(
            self.store.plans, id_factory=id_factory, today=lambda: TODAY
        )

    def _set_fatigue(self, value: float) -> None:
        self.store.fatigue.save(UserFatigueState("u1", value, 20.0, 5.0, NOW))

    def _deload_ended(self, days_ago: int) -> None:
        end = TODAY - timedelta(days=days_ago)
        self.advisor.record_deload("u1", end - timedelta(days=6), end)

    def _recommend(self, level: TrainingLevel = INTERMEDIATE, **kwargs) -> DeloadRecommendation:
        return self.advisor.analyze_and_recommend("u1", level, HYPERTROPHY, **kwargs)

    # -- no deload ------------------------------------------------------

    def test_new_user_within_tolerance(self) -> None:
        rec = self._recommend()
        assert rec.should_deload is False
        assert rec.timing == DeloadTiming.NOT_NEEDED
        assert rec.reason_codes[0] == ReasonCode.WITHIN_TOLERANCE
        assert ReasonCode.NO_DELOAD_HISTORY in rec.reason_codes
        assert ReasonCode.NO_VOLUME_DATA in rec.reason_codes
        assert rec.weeks_since_last_deload is None
        assert rec.duration_days == 0
        assert rec.volume_reduction == 0
        assert rec.target_muscle_groups == ()

    def test_trace_covers_all_rules(self) -> None:
        rec = self._recommend()
        statuses = {r.rule_id: r.status for r in rec.rule_results}
        assert statuses == {
            "fatigue_threshold": RuleStatus.SKIPPED,
            "volume_overreach": RuleStatus.NOT_APPLICABLE,
            "performance_decline": RuleStatus.NOT_APPLICABLE,
            "scheduled_interval": RuleStatus.NOT_APPLICABLE,
        }

    # -- auto-regulated triggers ----------------------------------------

    def test_fatigue_above_threshold(self) -> None:
        self._set_fatigue(85.0)
        rec = self._recommend()
        assert rec.should_deload is True
        assert rec.reason_codes[0] == ReasonCode.FATIGUE_ABOVE_THRESHOLD
        assert rec.urgency == DeloadUrgency.MODERATE
        assert rec.timing == DeloadTiming.NEXT_WEEK
        assert rec.type == DeloadType.VOLUME
        assert rec.duration_days == 4

    def test_critical_fatigue_is_immediate(self) -> None:
        self._set_fatigue(92.0)
        rec = self._recommend()
        assert rec.urgency == DeloadUrgency.CRITICAL
        assert rec.timing == DeloadTiming.IMMEDIATE
        assert rec.duration_days == 7

    def test_fatigue_and_volume_combined(self) -> None:
        self._set_fatigue(88.0)
        for group, volume in (("chest", 20), ("back", 23), ("biceps", 10)):
            self.store.landmarks.save(
                VolumeLandmark("u1", group, 8, 16, 22, current_volume=volume)
            )
        rec = self._recommend()
        assert rec.type == DeloadType.COMBINED
        assert rec.timing == DeloadTiming.IMMEDIATE
        assert ReasonCode.VOLUME_MAJORITY_NEAR_MRV in rec.reason_codes
        assert ReasonCode.MUSCLE_GROUPS_EXCEEDING_MRV in rec.reason_codes

    def test_volume_alone_triggers(self) -> None:
        for group in ("chest", "back"):
            self.store.landmarks.save(VolumeLandmark("u1", group, 8, 16, 22, current_volume=18))
        rec = self._recommend()
        assert rec.should_deload is True
        assert rec.reason_codes[0] == ReasonCode.VOLUME_MAJORITY_NEAR_MRV
        assert rec.type == DeloadType.VOLUME
        assert (rec.volume_reduction, rec.intensity_reduction, rec.frequency_reduction) == (
            50,
            0,
            0,
        )
        assert set(rec.target_muscle_groups) == {"chest", "back"}

    def test_combined_prescription(self) -> None:
        self._set_fatigue(88.0)
        for group, volume in (("chest", 20), ("back", 23), ("biceps", 10)):
            self.store.landmarks.save(
                VolumeLandmark("u1", group, 8, 16, 22, current_volume=volume)
            )
        rec = self._recommend()
        assert (rec.volume_reduction, rec.intensity_reduction, rec.frequency_reduction) == (
            70,
            50,
            30,
        )
        assert set(rec.target_muscle_groups) == {"chest", "back"}

    # -- performance decline ---------------------------------------------

    def _sessions(self, make_log: Callable[..., WorkoutLog], *weights: float) -> None:
        for days_ago, weight in zip(range(2 * (len(weights) - 1), -1, -2), weights):
            self.store.logs.add(make_log(day=TODAY - timedelta(days=days_ago), weight=weight))

    def test_performance_decline_triggers(self, make_log: Callable[..., WorkoutLog]) -> None:
        self._sessions(make_log, 100.0, 88.0)
        rec = self._recommend()
        assert rec.should_deload is True
        assert rec.reason_codes[0] == ReasonCode.PERFORMANCE_DECLINE
        assert rec.urgency == DeloadUrgency.MODERATE
        assert rec.timing == DeloadTiming.NEXT_WEEK

    def test_steep_decline_is_immediate(self, make_log: Callable[..., WorkoutLog]) -> None:
        self._sessions(make_log, 100.0, 100.0, 82.5)
        rec = self._recommend()
        assert rec.urgency == DeloadUrgency.HIGH
        assert rec.timing == DeloadTiming.IMMEDIATE

    def test_small_decline_within_tolerance(self, make_log: Callable[..., WorkoutLog]) -> None:
        self._sessions(make_log, 100.0, 95.0)
        rec = self._recommend()
        assert rec.should_deload is False
        statuses = {r.rule_id: r.status for r in rec.rule_results}
        assert statuses["performance_decline"] == RuleStatus.SKIPPED

    def test_only_recent_logs_considered(self, make_log: Callable[..., WorkoutLog]) -> None:
        self._sessions(make_log, 100.0, 70.0, *([70.0] * 10))
        assert self._recommend().should_deload is False

    def test_decline_and_fatigue_combine(self, make_log: Callable[..., WorkoutLog]) -> None:
        self._set_fatigue(85.0)
        self._sessions(make_log, 100.0, 88.0)
        rec = self._recommend()
        assert rec.type == DeloadType.COMBINED
        assert rec.reason_codes[:2] == (
            ReasonCode.FATIGUE_ABOVE_THRESHOLD,
            ReasonCode.PERFORMANCE_DECLINE,
        )

    def test_log_failure_degrades(self) -> None:
        logs = MagicMock(spec=WorkoutLogRepository)
        logs.list_logs.side_effect = StorageError("down", operation="list_logs")
        advisor = DeloadAdvisor(
            self.fatigue, self.volume, self.store.deloads, today=lambda: TODAY, logs=logs
        )
        rec = advisor.analyze_and_recommend("u1", INTERMEDIATE, HYPERTROPHY)
        statuses = {r.rule_id: r.status for r in rec.rule_results}
        assert statuses["performance_decline"] == RuleStatus.NOT_APPLICABLE

    # -- planned schedules ----------------------------------------------

    def test_planned_schedule_ignores_readiness(self) -> None:
        self._set_fatigue(95.0)
        rec = self._recommend(level=TrainingLevel.BEGINNER)
        assert rec.should_deload is False
        fired = [r.rule_id for r in rec.rule_results if r.status == RuleStatus.FIRED]
        assert fired == ["fatigue_threshold"]

    def test_planned_interval_reached(self) -> None:
        self._deload_ended(days_ago=56)
        rec = self._recommend(level=TrainingLevel.BEGINNER)
        assert rec.should_deload is True
        assert rec.reason_codes == (ReasonCode.SCHEDULED_INTERVAL_REACHED, ReasonCode.NO_VOLUME_DATA)
        assert rec.urgency == DeloadUrgency.LOW
        assert rec.timing == DeloadTiming.NEXT_WEEK
        assert rec.weeks_since_last_deload == 8

    def test_planned_deload_upcoming(self) -> None:
        self._deload_ended(days_ago=49)
        rec = self._recommend(level=TrainingLevel.BEGINNER)
        assert rec.should_deload is False
        assert rec.timing == DeloadTiming.UPCOMING
        assert rec.reason_codes[:2] == (
            ReasonCode.WITHIN_TOLERANCE,
            ReasonCode.SCHEDULED_DELOAD_APPROACHING,
        )

    def test_explicit_schedule(self) -> None:
        self._deload_ended(days_ago=21)
        schedule = DeloadScheduleConfig(frequency=3, strategy=DeloadType.FREQUENCY)
        rec = self._recommend(schedule_config=schedule)
        assert rec.should_deload is True
        assert rec.type == DeloadType.FREQUENCY

    def test_interval_triggers_auto_regulated_schedule(self) -> None:
        self._deload_ended(days_ago=42)
        rec = self._recommend()
        assert rec.should_deload is True
        assert rec.reason_codes[0] == ReasonCode.SCHEDULED_INTERVAL_REACHED
        assert rec.weeks_since_last_deload == 6
        assert rec.type == DeloadType.VOLUME
        assert rec.timing == DeloadTiming.NEXT_WEEK

    def test_overdue_plan_without_deloads_triggers(self) -> None:
        result = self.planner.create_plan(
            "u1", "Block", HYPERTROPHY, INTERMEDIATE, 4, 6, TODAY - timedelta(weeks=20),
            PlanOptions(include_deloads=False),
        )
        schedule = result.macrocycle.deload_schedule
        assert schedule.auto_regulated is True
        rec = self._recommend(schedule_config=schedule)
        assert rec.should_deload is True
        assert rec.weeks_since_last_deload == 20
        assert rec.urgency == DeloadUrgency.MODERATE
        assert ReasonCode.SCHEDULED_INTERVAL_REACHED in rec.reason_codes

    # -- guards -----------------------------------------------------------

    def test_recent_deload_suppresses(self) -> None:
        self._deload_ended(days_ago=14)
        self._set_fatigue(80.0)
        rec = self._recommend()
        assert rec.should_deload is False
        assert ReasonCode.RECENT_DELOAD in rec.reason_codes
        assert ReasonCode.NO_DELOAD_HISTORY not in rec.reason_codes

    def test_critical_overrides_recent_deload(self) -> None:
        self._deload_ended(days_ago=14)
        self._set_fatigue(95.0)
        assert self._recommend().should_deload is True

    def test_history_failure_degrades(self) -> None:
        history = MagicMock(spec=DeloadHistoryRepository)
        history.latest.side_effect = StorageError("down")
        advisor = DeloadAdvisor(self.fatigue, self.volume, history, today=lambda: TODAY)
        rec = advisor.analyze_and_recommend("u1", INTERMEDIATE, HYPERTROPHY)
        assert ReasonCode.NO_DELOAD_HISTORY in rec.reason_codes

    # -- active plan -----------------------------------------------------

    def _plan(self, start: date) -> DeloadScheduleConfig:
        result = self.planner.create_plan(
            "u1", "Block", HYPERTROPHY, INTERMEDIATE, 4, 3, start,
            PlanOptions(deload_frequency=4),
        )
        return result.macrocycle.deload_schedule

    def test_weeks_counted_from_plan_start(self) -> None:
        schedule = self._plan(TODAY - timedelta(days=21))
        rec = self._recommend(schedule_config=schedule)
        assert rec.weeks_since_last_deload == 3
        assert rec.timing == DeloadTiming.UPCOMING
        assert ReasonCode.NO_DELOAD_HISTORY in rec.reason_codes

    def test_planned_deload_week_counts_as_deload(self) -> None:
        schedule = self._plan(TODAY - timedelta(days=42))
        rec = self._recommend(schedule_config=schedule)
        assert rec.weeks_since_last_deload == 1
        assert ReasonCode.NO_DELOAD_HISTORY not in rec.reason_codes

    # -- recording ---------------------------------------------------------

    def test_record_deload(self) -> None:
        record = self.advisor.record_deload(
            "u1", TODAY, TODAY + timedelta(days=6), DeloadType.INTENSITY
        )
        assert self.store.deloads.latest("u1") == record

    def test_record_invalid_range(self) -> None:
        with pytest.raises(ValidationError):
            self.advisor.record_deload("u1", TODAY, TODAY - timedelta(days=1))
