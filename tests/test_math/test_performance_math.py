"""Tests for session-over-session performance decline."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

import pytest

from load_engine.math.performance import performance_decline
from load_engine.models.workout_log import WorkoutLog

TODAY = date(2026, 3, 2)


def _days_ago(days: int) -> date:
    return TODAY - timedelta(days=days)


class TestPerformanceDecline:
    def test_no_logs(self) -> None:
        assert performance_decline([]) is None

    def test_single_session(self, make_log: Callable[..., WorkoutLog]) -> None:
        assert performance_decline([make_log()]) is None

    def test_drop_between_sessions(self, make_log: Callable[..., WorkoutLog]) -> None:
        logs = [
            make_log(day=_days_ago(2), weight=100.0),
            make_log(day=TODAY, weight=90.0),
        ]
        assert performance_decline(logs) == pytest.approx(10.0)

    def test_reps_count_toward_load(self, make_log: Callable[..., WorkoutLog]) -> None:
        logs = [
            make_log(day=_days_ago(2), weight=100.0, reps=10),
            make_log(day=TODAY, weight=100.0, reps=8),
        ]
        assert performance_decline(logs) == pytest.approx(20.0)

    def test_improvement_is_zero(self, make_log: Callable[..., WorkoutLog]) -> None:
        logs = [
            make_log(day=_days_ago(2), weight=80.0),
            make_log(day=TODAY, weight=85.0),
        ]
        assert performance_decline(logs) == 0.0

    def test_averaged_across_exercises(self, make_log: Callable[..., WorkoutLog]) -> None:
        logs = [
            make_log(day=_days_ago(3), exercises={"bench-press": 3}, weight=100.0),
            make_log(day=_days_ago(3), exercises={"squat": 3}, weight=150.0),
            make_log(day=TODAY, exercises={"bench-press": 3}, weight=90.0),
            make_log(day=TODAY, exercises={"squat": 3}, weight=120.0),
        ]
        assert performance_decline(logs) == pytest.approx(15.0)

    def test_only_latest_two_sessions_compared(
        self, make_log: Callable[..., WorkoutLog]
    ) -> None:
        logs = [
            make_log(day=_days_ago(4), weight=100.0),
            make_log(day=_days_ago(2), weight=80.0),
            make_log(day=TODAY, weight=90.0),
        ]
        assert performance_decline(logs) == 0.0

    def test_input_order_irrelevant(self, make_log: Callable[..., WorkoutLog]) -> None:
        older = make_log(day=_days_ago(2), weight=100.0)
        recent = make_log(day=TODAY, weight=75.0)
        assert performance_decline([recent, older]) == pytest.approx(25.0)

    def test_unloaded_exercises_ignored(self, make_log: Callable[..., WorkoutLog]) -> None:
        logs = [
            make_log(day=_days_ago(2), exercises={"pull-up": 3}, weight=0.0),
            make_log(day=TODAY, exercises={"pull-up": 3}, weight=0.0),
        ]
        assert performance_decline(logs) is None
