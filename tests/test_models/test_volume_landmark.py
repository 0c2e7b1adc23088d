"""Tests for VolumeLandmark ordering invariants and VolumeProgression validation."""

from __future__ import annotations

from datetime import date

import pytest

from load_engine.exceptions import ValidationError
from load_engine.models.enums import AdaptationResponse
from load_engine.models.volume import VolumeLandmark, VolumeProgression


class TestVolumeLandmark:
    def test_valid(self) -> None:
        landmark = VolumeLandmark("u1", "chest", mev=8, mav=16, mrv=22, current_volume=10)
        assert landmark.current_volume == 10

    def test_equal_landmarks_allowed(self) -> None:
        VolumeLandmark("u1", "chest", mev=10, mav=10, mrv=10)

    def test_mev_above_mav_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VolumeLandmark("u1", "chest", mev=18, mav=16, mrv=22)

    def test_mav_above_mrv_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VolumeLandmark("u1", "chest", mev=8, mav=24, mrv=22)

    def test_negative_mev_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VolumeLandmark("u1", "chest", mev=-1, mav=16, mrv=22)

    def test_negative_volume_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VolumeLandmark("u1", "chest", mev=8, mav=16, mrv=22, current_volume=-2)

    def test_missing_group_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VolumeLandmark("u1", "", mev=8, mav=16, mrv=22)


class TestVolumeProgression:
    def _week(self, **overrides: object) -> VolumeProgression:
        fields = {
            "user_id": "u1",
            "muscle_group": "chest",
            "week_start": date(2026, 3, 2),
            "sets_performed": 12.0,
            "target_sets": 12.0,
            "fatigue_level": 50.0,
            "adaptation_response": AdaptationResponse.POSITIVE,
        }
        fields.update(overrides)
        return VolumeProgression(**fields)

    def test_valid(self) -> None:
        assert self._week().notes == ""

    def test_week_must_start_monday(self) -> None:
        with pytest.raises(ValidationError):
            self._week(week_start=date(2026, 3, 4))

    def test_negative_sets_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._week(sets_performed=-1.0)

    def test_zero_target_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._week(target_sets=0.0)

    def test_fatigue_above_scale_rejected(self) -> None:
        with pytest.raises(ValidationError):
            self._week(fatigue_level=101.0)
