"""
Module: engine.config

Purpose:
    Configuration dataclass for the session engine. Immutable configuration
    with validation on construction, optionally loaded from a JSON file.

Key Classes:
    - EngineConfig: Retry budget, timer intervals and background settings

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - engine.session: Retry budget and timer intervals
    - engine.dispatch: Worker count
    - engine.reporting: Summary timeout and history limit
    - cli: Loaded from --config
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine configuration (immutable).

    Attributes:
        generator_retries: Attempts per trial before the session fails
        countdown_interval_ms: Countdown timer period
        frame_interval_ms: Reaction frame timer period (~60 fps)
        summary_timeout_s: How long a report request may wait for the summarizer
        report_history_limit: Results included in the summarizer prompt
        dispatcher_workers: Background thread pool size

    Example:
        >>> config = EngineConfig(generator_retries=5)
        >>> config.frame_interval_ms
        16
    """

    generator_retries: int = 3
    countdown_interval_ms: int = 1000
    frame_interval_ms: int = 16
    summary_timeout_s: float = 30.0
    report_history_limit: int = 15
    dispatcher_workers: int = 2

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.generator_retries < 1:
            raise ValueError(f"generator_retries must be at least 1: {self.generator_retries}")
        if self.countdown_interval_ms <= 0:
            raise ValueError(f"countdown_interval_ms must be positive: {self.countdown_interval_ms}")
        if self.frame_interval_ms <= 0:
            raise ValueError(f"frame_interval_ms must be positive: {self.frame_interval_ms}")
        if self.summary_timeout_s <= 0:
            raise ValueError(f"summary_timeout_s must be positive: {self.summary_timeout_s}")
        if self.report_history_limit < 1:
            raise ValueError(f"report_history_limit must be at least 1: {self.report_history_limit}")
        if self.dispatcher_workers < 1:
            raise ValueError(f"dispatcher_workers must be at least 1: {self.dispatcher_workers}")

    @classmethod
    def from_dict(cls, data: dict) -> EngineConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown engine config keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: Path) -> EngineConfig:
        """
        Load configuration from a JSON object file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: On invalid JSON, unknown keys or invalid values
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid engine config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Engine config must be a JSON object: {path}")
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = EngineConfig()
