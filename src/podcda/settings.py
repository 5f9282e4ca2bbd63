"""Process-wide defaults for the converter, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .timeline import DEFAULT_WORDS_PER_MINUTE

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _normalise_string(value: str | None, *, default: str) -> str:
    if value is None:
        return default

    trimmed = value.strip()
    return trimmed or default


def _parse_positive_float(value: str | None, *, name: str, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a positive number.") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return parsed


def _parse_positive_int(value: str | None, *, name: str, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a positive integer.") from exc
    if parsed < 1:
        raise ValueError(f"{name} must be greater than zero.")
    return parsed


@dataclass(frozen=True)
class ConverterSettings:
    """Tuning knobs that are not part of any manifest.

    Empty environment variables are treated as if they were unset.
    """

    words_per_minute: float = DEFAULT_WORDS_PER_MINUTE
    max_layout_passes: int = 5
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConverterSettings":
        """Return settings populated from ``environ``.

        Args:
            environ: Optional mapping of environment variables. When omitted,
                :data:`os.environ` is used.
        """

        source = environ if environ is not None else os.environ

        words_per_minute = _parse_positive_float(
            source.get("PODCDA_WORDS_PER_MINUTE"),
            name="PODCDA_WORDS_PER_MINUTE",
            default=DEFAULT_WORDS_PER_MINUTE,
        )
        max_layout_passes = _parse_positive_int(
            source.get("PODCDA_MAX_LAYOUT_PASSES"),
            name="PODCDA_MAX_LAYOUT_PASSES",
            default=5,
        )
        log_level = _normalise_string(
            source.get("PODCDA_LOG_LEVEL"), default="WARNING"
        ).upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(
                "PODCDA_LOG_LEVEL must be one of: " + ", ".join(_LOG_LEVELS) + "."
            )

        return cls(
            words_per_minute=words_per_minute,
            max_layout_passes=max_layout_passes,
            log_level=log_level,
        )


__all__ = ["ConverterSettings"]
