"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_result,
    deserialize_result,
    load_history_json,
    save_history_json,
)

__all__ = [
    "serialize_result",
    "deserialize_result",
    "load_history_json",
    "save_history_json",
]
