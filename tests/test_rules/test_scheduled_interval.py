"""Tests for ScheduledIntervalRule: SCHEDULE tier calendar trigger."""

from __future__ import annotations

from datetime import date, datetime, timezone

from load_engine.models.context import TrainingLoadContext
from load_engine.models.deload import DeloadInputs, DeloadScheduleConfig
from load_engine.models.enums import DeloadUrgency, Priority, ReasonCode
from load_engine.models.fatigue import UserFatigueState
from load_engine.rules.scheduled_interval import ScheduledIntervalRule


class TestScheduledIntervalRule:
    def setup_method(self) -> None:
        self.rule = ScheduledIntervalRule()

    def _inputs(self, weeks: int | None, frequency: int = 6) -> DeloadInputs:
        state = UserFatigueState(
            "u1", 30.0, 20.0, 5.0, datetime(2026, 3, 2, tzinfo=timezone.utc)
        )
        return DeloadInputs(
            context=TrainingLoadContext("u1", date(2026, 3, 2), state),
            schedule=DeloadScheduleConfig(frequency=frequency),
            weeks_since_last_deload=weeks,
        )

    def test_is_schedule_priority(self) -> None:
        assert self.rule.priority == Priority.SCHEDULE

    def test_not_applicable_without_history(self) -> None:
        assert not self.rule.has_required_data(self._inputs(None))

    def test_zero_weeks_is_data(self) -> None:
        assert self.rule.has_required_data(self._inputs(0))

    def test_silent_before_due(self) -> None:
        assert self.rule.evaluate(self._inputs(5)) is None

    def test_fires_when_due(self) -> None:
        signal = self.rule.evaluate(self._inputs(6))
        assert signal is not None
        assert signal.urgency == DeloadUrgency.LOW
        assert signal.reason_codes == (ReasonCode.SCHEDULED_INTERVAL_REACHED,)
        assert signal.auto_regulated is False

    def test_overdue_escalates(self) -> None:
        signal = self.rule.evaluate(self._inputs(8))
        assert signal is not None
        assert signal.urgency == DeloadUrgency.MODERATE
