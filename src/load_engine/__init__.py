"""Training load, volume landmark and periodization engine."""

from load_engine.config import EngineConfig
from load_engine.engine import TrainingLoadEngine
from load_engine.exceptions import (
    ConflictError,
    EngineError,
    NotFoundError,
    StorageError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "EngineConfig",
    "EngineError",
    "NotFoundError",
    "StorageError",
    "TrainingLoadEngine",
    "ValidationError",
]
