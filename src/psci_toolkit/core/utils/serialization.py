"""
Serialization Utilities

To/from JSON helpers for session results and history files.

- ``serialize_*`` / ``deserialize_*`` convert single records
- ``load_history_json`` / ``save_history_json`` handle a whole history file
- Records are validated before they become models
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from ..models.results import SessionResult
from ..schemas.validator import (
    HISTORY_SCHEMA_VERSION,
    ValidationError,
    validate_history,
    validate_session_result,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Result Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_result(result: SessionResult) -> dict[str, Any]:
    """
    Serialize a SessionResult to a dictionary.

    The output can be written to JSON and will pass schema validation.
    """
    return result.to_dict()


def deserialize_result(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> SessionResult:
    """
    Deserialize a SessionResult from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate before parsing
        strict: Also run full jsonschema validation

    Returns:
        SessionResult instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If the timestamp cannot be parsed
    """
    if validate:
        validate_session_result(data, strict=strict)
    return SessionResult.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# History Files
# ─────────────────────────────────────────────────────────────────────────────

def load_history_json(
    path: Path,
    *,
    validate: bool = True,
    strict: bool = False,
) -> list[SessionResult]:
    """
    Load a result history from a JSON file.

    A missing file is an empty history (first run).

    Args:
        path: Path to the history file
        validate: Whether to validate the file and each record
        strict: Also run full jsonschema validation

    Returns:
        Results in stored (chronological) order

    Raises:
        ValidationError: If the file or any record is invalid
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"History file not found, starting empty: {path}")
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"History file is not valid JSON: {e}",
            path=str(path),
            errors=[str(e)],
        )

    if validate:
        validate_history(data, strict=strict)

    results = []
    for i, record in enumerate(data.get("results", [])):
        try:
            results.append(deserialize_result(record, validate=False))
        except (KeyError, ValueError) as e:
            raise ValidationError(
                f"Error parsing result {i}: {e}",
                path=f"results[{i}]",
                errors=[str(e)],
            )

    logger.debug(f"Loaded {len(results)} results from {path}")
    return results


def save_history_json(results: Iterable[SessionResult], path: Path) -> None:
    """
    Save a result history to a JSON file.

    Args:
        results: Results in chronological order
        path: Output path for the history file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "schema_version": HISTORY_SCHEMA_VERSION,
        "results": [serialize_result(r) for r in results],
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
