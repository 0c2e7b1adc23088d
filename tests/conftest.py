"""Shared test fixtures: a fixed clock, in-memory stores, workout log factories."""

from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Callable

import pytest

from load_engine.engine import TrainingLoadEngine
from load_engine.models.fatigue import UserFatigueState
from load_engine.models.workout_log import CompletedSet, WorkoutLog
from load_engine.repositories.memory import InMemoryStore

# Monday
NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def engine(
    store: InMemoryStore,
    fixed_clock: Callable[[], datetime],
    id_factory: Callable[[], str],
) -> TrainingLoadEngine:
    return TrainingLoadEngine.from_store(store, clock=fixed_clock, id_factory=id_factory)


@pytest.fixture
def make_set() -> Callable[..., CompletedSet]:
    def _make(
        exercise_id: str = "bench-press",
        reps: int = 8,
        weight: float = 80.0,
        rir: int | None = 2,
        day: date = TODAY,
    ) -> CompletedSet:
        return CompletedSet(
            exercise_id=exercise_id,
            reps=reps,
            weight=weight,
            timestamp=datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)
            + timedelta(hours=18),
            rir=rir,
        )

    return _make


@pytest.fixture
def make_log(make_set: Callable[..., CompletedSet]) -> Callable[..., WorkoutLog]:
    counter = itertools.count(1)

    def _make(
        user_id: str = "u1",
        day: date = TODAY,
        exercises: dict[str, int] | None = None,
        weight: float = 80.0,
        reps: int = 8,
        rir: int | None = 2,
    ) -> WorkoutLog:
        """A log with ``exercises[exercise_id]`` identical sets per exercise."""
        exercises = exercises if exercises is not None else {"bench-press": 3}
        sets = tuple(
            make_set(exercise_id, reps=reps, weight=weight, rir=rir, day=day)
            for exercise_id, count in exercises.items()
            for _ in range(count)
        )
        return WorkoutLog(
            id=f"log-{next(counter)}",
            user_id=user_id,
            date=day,
            duration_minutes=60.0,
            completed_sets=sets,
        )

    return _make


@pytest.fixture
def tired_state() -> UserFatigueState:
    """Fatigue 40 over a baseline of 20."""
    return UserFatigueState(
        user_id="u1",
        current_fatigue=40.0,
        baseline_fatigue=20.0,
        recovery_rate=5.0,
        last_updated=NOW,
    )
