"""
dimcalc.config
==============

Rendering and CLI settings loaded from TOML.

Settings live either in a dedicated file (top-level keys)::

    max_digits = 4
    scientific_notation = true

or in ``pyproject.toml`` under ``[tool.dimcalc]``. Without an explicit path,
``dimcalc.toml`` in the working directory is used when present.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "dimcalc.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    max_digits: int = 3
    scientific_notation: bool = False
    poll_interval: float = 0.5
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if isinstance(self.max_digits, bool) or not isinstance(self.max_digits, int) or self.max_digits < 0:
            raise ValueError(f"max_digits must be a non-negative integer, got {self.max_digits!r}")
        if not isinstance(self.scientific_notation, bool):
            raise ValueError("scientific_notation must be a boolean")
        if isinstance(self.poll_interval, bool) or not isinstance(self.poll_interval, (int, float)) or self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be a positive number, got {self.poll_interval!r}")
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")
        return cls(**data)

    def merged(self, **overrides: Any) -> "Settings":
        """Copy with every override that is not ``None`` applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from ``path`` (or ``./dimcalc.toml``), defaults otherwise."""
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        if not candidate.is_file():
            return Settings()
        path = candidate

    path = Path(path)
    with open(path, "rb") as f:
        data = tomllib.load(f)

    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("dimcalc", {})

    settings = Settings.from_mapping(data)
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings


__all__ = ["Settings", "load_settings", "DEFAULT_CONFIG_NAME"]
