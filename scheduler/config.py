"""Environment-variable-based configuration for the nightly scheduler."""

from __future__ import annotations

import os
from pathlib import Path

SNAPSHOT_PATH: Path = Path(
    os.environ.get("LOAD_ENGINE_SNAPSHOT", "data/load_engine_snapshot.json")
).expanduser()
ROSTER_PATH: Path = Path(os.environ.get("LOAD_ENGINE_ROSTER", "data/roster.json")).expanduser()
NIGHTLY_HOUR: int = int(os.environ.get("SCHEDULER_HOUR", "3"))
NIGHTLY_MINUTE: int = int(os.environ.get("SCHEDULER_MINUTE", "0"))
VOLUME_WINDOW_WEEKS: int = int(os.environ.get("SCHEDULER_VOLUME_WINDOW_WEEKS", "1"))
