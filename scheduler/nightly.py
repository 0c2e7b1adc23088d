"""Nightly scheduler: recovers fatigue, refreshes volume and checks deloads.

Usage:
    python -m scheduler.nightly --once      # single run (for cron)
    python -m scheduler.nightly --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date, datetime, time, timezone

from load_engine.engine import TrainingLoadEngine
from load_engine.exceptions import EngineError
from load_engine.models.enums import TrainingGoal, TrainingLevel
from load_engine.repositories.memory import InMemoryStore
from load_engine.serialization import store_from_json_string, store_to_json_string

from scheduler.config import (
    NIGHTLY_HOUR,
    NIGHTLY_MINUTE,
    ROSTER_PATH,
    SNAPSHOT_PATH,
    VOLUME_WINDOW_WEEKS,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _load_roster() -> list[dict]:
    """Load the list of {user_id, training_level, goal} entries from disk."""
    with open(ROSTER_PATH) as f:
        return json.load(f)


def _load_store() -> InMemoryStore:
    try:
        with open(SNAPSHOT_PATH) as f:
            return store_from_json_string(f.read())
    except FileNotFoundError:
        logger.warning("No snapshot at %s, starting from an empty store", SNAPSHOT_PATH)
        return InMemoryStore()


def _save_store(store: InMemoryStore) -> None:
    SNAPSHOT_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(SNAPSHOT_PATH, "w") as f:
        f.write(store_to_json_string(store))


def _rest_days(engine: TrainingLoadEngine, store: InMemoryStore, user_id: str, today: date) -> int:
    """Whole days since the user last trained or last had rest applied."""
    state = store.fatigue.get(user_id)
    if state is None:
        return 0
    since = state.last_updated.date()
    logs = engine.logs.list_logs(user_id, end=today)
    if logs:
        since = max(since, logs[-1].date)
    return max(0, (today - since).days)


def _process_user(
    engine: TrainingLoadEngine, store: InMemoryStore, entry: dict, today: date
) -> None:
    user_id = entry["user_id"]
    level = TrainingLevel[entry.get("training_level", "intermediate").upper()]
    goal = TrainingGoal[entry.get("goal", "hypertrophy").upper()]

    days = _rest_days(engine, store, user_id, today)
    if days:
        state = engine.apply_rest_fatigue(user_id, days)
        logger.info("%s rested %d day(s), fatigue now %.1f", user_id, days, state.current_fatigue)

    engine.volume.refresh_all(user_id, window_weeks=VOLUME_WINDOW_WEEKS, as_of=today)

    view = engine.get_active_plan(user_id, as_of=today)
    recommendation = view.deload_recommendation or engine.recommend_deload(
        user_id, level, goal, as_of=today
    )
    logger.info(
        "%s: deload=%s timing=%s codes=%s",
        user_id,
        recommendation.should_deload,
        recommendation.timing.name.lower(),
        ",".join(recommendation.codes),
    )


def nightly_job(today: date | None = None) -> None:
    """Execute one nightly cycle over every user in the roster."""
    logger.info("Starting nightly job")
    today = today or date.today()

    try:
        roster = _load_roster()
    except FileNotFoundError:
        logger.error("Roster not found at %s", ROSTER_PATH)
        return

    store = _load_store()
    engine = TrainingLoadEngine.from_store(
        store, clock=lambda: datetime.combine(today, time(), tzinfo=timezone.utc)
    )

    processed = 0
    for entry in roster:
        try:
            _process_user(engine, store, entry, today)
            processed += 1
        except (EngineError, KeyError) as exc:
            logger.error("Nightly update failed for %s: %s", entry.get("user_id"), exc)

    _save_store(store)
    logger.info("Nightly job complete: %d/%d users updated", processed, len(roster))


def main() -> None:
    parser = argparse.ArgumentParser(description="Training load engine nightly scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    args = parser.parse_args()

    if args.once:
        nightly_job()
    else:
        from apscheduler.schedulers.blocking import BlockingScheduler

        scheduler = BlockingScheduler()
        scheduler.add_job(
            nightly_job,
            "cron",
            hour=NIGHTLY_HOUR,
            minute=NIGHTLY_MINUTE,
            id="nightly_job",
        )
        logger.info(
            "Scheduler started, nightly job at %02d:%02d",
            NIGHTLY_HOUR,
            NIGHTLY_MINUTE,
        )
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
