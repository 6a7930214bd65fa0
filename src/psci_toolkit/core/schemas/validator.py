"""
Schema Validation Utilities

Validates stored session results and history files.

Basic checks (required fields, ranges, known exercise ids) always run and
fail fast with a precise path. With ``strict=True`` the data is also checked
against the bundled JSON Schema using ``jsonschema``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


HISTORY_SCHEMA_VERSION = 1

RESULT_FIELDS = ("exercise_id", "level", "score", "stars", "timestamp")

_SCHEMA_DIR = Path(__file__).parent
_schema_cache: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Return the parsed <name>.schema.json bundled next to this module."""
    cached = _schema_cache.get(name)
    if cached is None:
        schema_file = _SCHEMA_DIR / f"{name}.schema.json"
        if not schema_file.is_file():
            raise FileNotFoundError(f"No bundled schema named {name!r} ({schema_file})")
        cached = json.loads(schema_file.read_text(encoding="utf-8"))
        _schema_cache[name] = cached
    return cached


class ValidationError(Exception):
    """A stored record or history file is malformed; ``path`` locates the bad field."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = list(errors) if errors else []


def _check_schema(data: Any, schema_name: str, prefix: str = "") -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path)
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=f"{prefix}{location}" if prefix else location,
            errors=[e.message],
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require(data: dict[str, Any], fields: tuple[str, ...], path: str = "") -> None:
    absent = [name for name in fields if name not in data]
    if absent:
        raise ValidationError(
            f"Record is missing {', '.join(absent)}",
            path=path,
            errors=[f"Missing field: {name}" for name in absent],
        )


def validate_session_result(
    data: dict[str, Any],
    *,
    strict: bool = False,
    path: str = "",
) -> None:
    """
    Validate one stored session result.

    Args:
        data: Result dictionary to validate
        strict: If True, also validate against session_result.schema.json
        path: Location prefix used in error paths (e.g. "results[3]")

    Raises:
        ValidationError: If data is invalid
    """
    prefix = f"{path}." if path else ""

    if not isinstance(data, dict):
        raise ValidationError("Session result must be an object", path=path)

    _require(data, RESULT_FIELDS, path)

    exercise_id = data["exercise_id"]
    if not (isinstance(exercise_id, str) and exercise_id):
        raise ValidationError(
            f"Invalid exercise_id: {exercise_id!r}",
            path=f"{prefix}exercise_id",
        )

    level = data["level"]
    if not _is_int(level) or level < 1:
        raise ValidationError(
            f"Invalid level: {level!r} (must be a positive integer)",
            path=f"{prefix}level",
        )

    score = data["score"]
    if not _is_int(score) or not 0 <= score <= 100:
        raise ValidationError(
            f"Invalid score: {score!r} (must be 0-100)",
            path=f"{prefix}score",
        )

    stars = data["stars"]
    if not _is_int(stars) or not 0 <= stars <= 3:
        raise ValidationError(
            f"Invalid stars: {stars!r} (must be 0-3)",
            path=f"{prefix}stars",
        )

    if not isinstance(data["timestamp"], str):
        raise ValidationError(
            "timestamp must be an ISO 8601 string",
            path=f"{prefix}timestamp",
        )

    if strict:
        _check_schema(data, "session_result", prefix)


def validate_history(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate a history file payload.

    Args:
        data: Parsed JSON object with ``schema_version`` and ``results``
        strict: If True, use jsonschema for the envelope and every record

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("History file must contain a JSON object")
    _require(data, ("schema_version", "results"))

    version = data["schema_version"]
    if version != HISTORY_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported history schema version: {version} (expected {HISTORY_SCHEMA_VERSION})",
            path="schema_version",
        )

    results = data["results"]
    if not isinstance(results, list):
        raise ValidationError("results must be a list", path="results")

    if strict:
        _check_schema(data, "history")

    for i, record in enumerate(results):
        validate_session_result(record, strict=strict, path=f"results[{i}]")
