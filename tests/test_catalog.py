"""Tests for the exercise catalog."""

from __future__ import annotations

import pytest

from load_engine.catalog import MUSCLE_GROUPS, ExerciseCatalog, ExerciseMuscles
from load_engine.exceptions import ValidationError


class TestExerciseCatalog:
    def test_default_mappings_use_taxonomy(self) -> None:
        catalog = ExerciseCatalog()
        for exercise_id in catalog.exercise_ids:
            assert set(catalog.lookup(exercise_id).all_groups) <= set(MUSCLE_GROUPS)

    def test_primary_group(self) -> None:
        assert ExerciseCatalog().primary_group("squat") == "quadriceps"

    def test_unknown_exercise(self) -> None:
        catalog = ExerciseCatalog()
        assert catalog.lookup("zumba") is None
        assert catalog.primary_group("zumba") is None
        assert "zumba" not in catalog

    def test_targets_secondary(self) -> None:
        assert ExerciseCatalog().targets("bench-press", "triceps")

    def test_register(self) -> None:
        catalog = ExerciseCatalog({})
        catalog.register("face-pull", ExerciseMuscles(("shoulders",), ("back",)))
        assert catalog.exercise_ids == ["face-pull"]

    def test_all_groups_deduplicated(self) -> None:
        muscles = ExerciseMuscles(("chest",), ("chest", "triceps"))
        assert muscles.all_groups == ("chest", "triceps")

    def test_unknown_group_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExerciseMuscles(("forearms",))

    def test_primary_required(self) -> None:
        with pytest.raises(ValidationError):
            ExerciseMuscles(())
