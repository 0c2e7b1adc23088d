"""Tests for recency-weighted muscle group aggregation."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

import pytest

from load_engine.catalog import MUSCLE_GROUPS, ExerciseCatalog
from load_engine.math.recency import muscle_group_fatigue, recency_weight, weekly_sets_by_group
from load_engine.models.workout_log import WorkoutLog

TODAY = date(2026, 3, 2)


class TestRecencyWeight:
    def test_today_full_weight(self) -> None:
        assert recency_weight(0) == 1.0

    def test_decays_with_age(self) -> None:
        assert recency_weight(1) == 0.5
        assert recency_weight(3) == 0.25

    def test_future_counts_as_today(self) -> None:
        assert recency_weight(-2) == 1.0


class TestMuscleGroupFatigue:
    def setup_method(self) -> None:
        self.catalog = ExerciseCatalog()

    def test_covers_full_taxonomy(self, make_log: Callable[..., WorkoutLog]) -> None:
        scores = muscle_group_fatigue([make_log()], self.catalog, TODAY, MUSCLE_GROUPS)
        assert list(scores) == list(MUSCLE_GROUPS)
        assert scores["quadriceps"] == 0.0

    def test_secondary_groups_weighted(self, make_log: Callable[..., WorkoutLog]) -> None:
        log = make_log(exercises={"bench-press": 1})
        scores = muscle_group_fatigue([log], self.catalog, TODAY, MUSCLE_GROUPS)
        assert scores["chest"] == pytest.approx(1.0)
        assert scores["shoulders"] == pytest.approx(0.5)
        assert scores["triceps"] == pytest.approx(0.5)

    def test_recent_beats_older(self, make_log: Callable[..., WorkoutLog]) -> None:
        logs = [
            make_log(exercises={"squat": 3}),
            make_log(day=TODAY - timedelta(days=4), exercises={"barbell-row": 3}),
        ]
        scores = muscle_group_fatigue(logs, self.catalog, TODAY, MUSCLE_GROUPS)
        assert scores["quadriceps"] > scores["back"]

    def test_unknown_exercise_contributes_nothing(
        self, make_log: Callable[..., WorkoutLog]
    ) -> None:
        log = make_log(exercises={"underwater-basket-weaving": 5})
        scores = muscle_group_fatigue([log], self.catalog, TODAY, MUSCLE_GROUPS)
        assert all(value == 0.0 for value in scores.values())

    def test_no_logs(self) -> None:
        scores = muscle_group_fatigue([], self.catalog, TODAY, MUSCLE_GROUPS)
        assert scores == {group: 0.0 for group in MUSCLE_GROUPS}


class TestWeeklySetsByGroup:
    def setup_method(self) -> None:
        self.catalog = ExerciseCatalog()

    def test_counts_primary_and_secondary(self, make_log: Callable[..., WorkoutLog]) -> None:
        volumes = weekly_sets_by_group([make_log()], self.catalog, MUSCLE_GROUPS)
        assert volumes["chest"] == 3.0
        assert volumes["triceps"] == 3.0
        assert volumes["back"] == 0.0

    def test_averages_over_window(self, make_log: Callable[..., WorkoutLog]) -> None:
        volumes = weekly_sets_by_group([make_log()], self.catalog, MUSCLE_GROUPS, window_weeks=2)
        assert volumes["chest"] == 1.5

    def test_invalid_window(self) -> None:
        with pytest.raises(ValueError):
            weekly_sets_by_group([], self.catalog, MUSCLE_GROUPS, window_weeks=0)
