"""Tests for macrocycle/mesocycle/microcycle invariants."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from load_engine.exceptions import ValidationError
from load_engine.models.deload import DeloadScheduleConfig
from load_engine.models.enums import (
    MesocyclePhase,
    PeriodizationType,
    TrainingGoal,
    TrainingLevel,
)
from load_engine.models.plan import Macrocycle, Mesocycle, Microcycle

START = date(2026, 3, 2)


def _micro(week: int, meso_id: str = "m1") -> Microcycle:
    start = START + timedelta(weeks=week - 1)
    return Microcycle(
        id=f"w{week}",
        mesocycle_id=meso_id,
        week_number=week,
        start_date=start,
        end_date=start + timedelta(days=6),
    )


def _meso(meso_id: str, weeks: list[int], phase: MesocyclePhase = MesocyclePhase.VOLUME) -> Mesocycle:
    micros = tuple(_micro(w, meso_id) for w in weeks)
    return Mesocycle(
        id=meso_id,
        macrocycle_id="plan",
        phase=phase,
        start_date=micros[0].start_date,
        end_date=micros[-1].end_date,
        micro_cycles=micros,
        includes_deload=phase == MesocyclePhase.DELOAD,
    )


def _macro(mesos: tuple[Mesocycle, ...], weeks: int) -> Macrocycle:
    return Macrocycle(
        id="plan",
        user_id="u1",
        name="Spring block",
        duration_weeks=weeks,
        meso_cycles=mesos,
        primary_goal=TrainingGoal.HYPERTROPHY,
        training_level=TrainingLevel.INTERMEDIATE,
        periodization_type=PeriodizationType.UNDULATING,
        frequency=4,
        start_date=START,
        end_date=START + timedelta(weeks=weeks, days=-1),
        deload_schedule=DeloadScheduleConfig(frequency=4),
    )


class TestMesocycle:
    def test_duration_counts_microcycles(self) -> None:
        assert _meso("m1", [1, 2, 3]).duration_weeks == 3

    def test_gap_between_microcycles_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _meso("m1", [1, 3])

    def test_contains(self) -> None:
        meso = _meso("m1", [1, 2])
        assert meso.contains(START + timedelta(days=13))
        assert not meso.contains(START + timedelta(days=14))


class TestMacrocycle:
    def test_week_sum_must_match(self) -> None:
        with pytest.raises(ValidationError):
            _macro((_meso("m1", [1, 2, 3]),), weeks=4)

    def test_gap_between_mesocycles_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _macro((_meso("m1", [1, 2]), _meso("m2", [4, 5])), weeks=4)

    def test_overlapping_mesocycles_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _macro((_meso("m1", [1, 2]), _meso("m2", [2, 3])), weeks=4)

    def test_first_mesocycle_must_start_with_plan(self) -> None:
        with pytest.raises(ValidationError):
            _macro((_meso("m1", [2, 3, 4, 5]),), weeks=4)

    def test_deload_mesocycles(self) -> None:
        plan = _macro(
            (
                _meso("m1", [1, 2, 3]),
                _meso("m2", [4], MesocyclePhase.DELOAD),
            ),
            weeks=4,
        )
        assert [m.id for m in plan.deload_mesocycles] == ["m2"]

    def test_mesocycle_on(self) -> None:
        plan = _macro((_meso("m1", [1, 2]), _meso("m2", [3, 4])), weeks=4)
        assert plan.mesocycle_on(START + timedelta(days=15)).id == "m2"
        assert plan.mesocycle_on(START - timedelta(days=1)) is None
