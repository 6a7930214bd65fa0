"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_session_result,
    validate_history,
    ValidationError,
    HISTORY_SCHEMA_VERSION,
)

__all__ = [
    "validate_session_result",
    "validate_history",
    "ValidationError",
    "HISTORY_SCHEMA_VERSION",
]
