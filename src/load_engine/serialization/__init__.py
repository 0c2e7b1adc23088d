"""Serialization module: JSON snapshots of engine state."""

from load_engine.serialization.json_snapshot import (
    macrocycle_to_dict,
    store_from_json_string,
    store_to_json_string,
)

__all__ = ["macrocycle_to_dict", "store_from_json_string", "store_to_json_string"]
