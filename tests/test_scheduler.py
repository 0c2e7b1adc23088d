"""Tests for the nightly scheduler job."""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from load_engine.models.fatigue import UserFatigueState
from load_engine.repositories.memory import InMemoryStore
from load_engine.serialization import store_from_json_string, store_to_json_string
from scheduler import nightly

NIGHT = date(2026, 3, 5)


@pytest.fixture
def paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    roster = tmp_path / "roster.json"
    snapshot = tmp_path / "data" / "snapshot.json"
    monkeypatch.setattr(nightly, "ROSTER_PATH", roster)
    monkeypatch.setattr(nightly, "SNAPSHOT_PATH", snapshot)
    return roster, snapshot


def _write_roster(path: Path, entries: list[dict]) -> None:
    path.write_text(json.dumps(entries))


def _write_snapshot(path: Path, store: InMemoryStore) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(store_to_json_string(store))


def _read_snapshot(path: Path) -> InMemoryStore:
    return store_from_json_string(path.read_text())


class TestNightlyJob:
    def test_missing_roster_skips_run(self, paths: tuple[Path, Path]) -> None:
        _, snapshot = paths
        nightly.nightly_job(today=NIGHT)
        assert not snapshot.exists()

    def test_empty_store_writes_snapshot(self, paths: tuple[Path, Path]) -> None:
        roster, snapshot = paths
        _write_roster(roster, [{"user_id": "u1", "training_level": "beginner"}])
        nightly.nightly_job(today=NIGHT)
        store = _read_snapshot(snapshot)
        assert len(store.landmarks.list_for_user("u1")) == 10
        assert store.fatigue.get("u1") is None

    def test_rest_applied_once_per_night(self, paths: tuple[Path, Path]) -> None:
        roster, snapshot = paths
        _write_roster(roster, [{"user_id": "u1"}])
        seeded = InMemoryStore()
        seeded.fatigue.save(
            UserFatigueState("u1", 60.0, 20.0, 5.0, datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc))
        )
        _write_snapshot(snapshot, seeded)

        nightly.nightly_job(today=NIGHT)
        assert _read_snapshot(snapshot).fatigue.get("u1").current_fatigue == 45.0

        nightly.nightly_job(today=NIGHT)
        assert _read_snapshot(snapshot).fatigue.get("u1").current_fatigue == 45.0

    def test_bad_entry_logged_and_skipped(
        self, paths: tuple[Path, Path], caplog: pytest.LogCaptureFixture
    ) -> None:
        roster, snapshot = paths
        _write_roster(
            roster,
            [{"user_id": "u2", "training_level": "elite"}, {"user_id": "u1"}],
        )
        with caplog.at_level(logging.INFO, logger="scheduler.nightly"):
            nightly.nightly_job(today=NIGHT)
        assert "Nightly update failed for u2" in caplog.text
        assert "1/2 users updated" in caplog.text
        assert len(_read_snapshot(snapshot).landmarks.list_for_user("u1")) == 10


class TestMain:
    def test_once_runs_job(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[tuple] = []
        monkeypatch.setattr(nightly, "nightly_job", lambda: calls.append(()))
        monkeypatch.setattr(sys, "argv", ["nightly", "--once"])
        nightly.main()
        assert calls == [()]

    def test_mode_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "argv", ["nightly"])
        with pytest.raises(SystemExit):
            nightly.main()
