"""Playback offsets of tracks laid out contiguously in their final order."""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from .models import Track

DEFAULT_WORDS_PER_MINUTE = 150.0


def estimate_speech_seconds(
    text: str, *, words_per_minute: float = DEFAULT_WORDS_PER_MINUTE
) -> float:
    """Estimate how long ``text`` takes to speak.

    Non-empty text always lasts at least one second.
    """

    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be greater than zero")

    word_count = len(text.split())
    if word_count == 0:
        return 0.0
    return max(1.0, word_count * 60.0 / words_per_minute)


def format_timestamp(seconds: float) -> str:
    """Render an offset as ``M:SS`` or ``H:MM:SS``."""

    if seconds < 0:
        raise ValueError("timestamps cannot be negative")

    total = int(math.floor(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


@dataclass(frozen=True)
class Timeline:
    """Start offsets and durations for every track, keyed by identifier."""

    order: tuple[str, ...]
    starts: Mapping[str, float]
    durations: Mapping[str, float]
    lead_in: float = 0.0

    @classmethod
    def from_durations(
        cls,
        tracks: Sequence[Track],
        durations: Mapping[str, float],
        *,
        lead_in: float = 0.0,
    ) -> "Timeline":
        """Lay ``tracks`` out back to back after ``lead_in`` seconds."""

        if lead_in < 0:
            raise ValueError("lead_in cannot be negative")

        starts: dict[str, float] = {}
        lengths: dict[str, float] = {}
        cursor = lead_in
        for track in tracks:
            if track.id not in durations:
                raise ValueError(f"No duration provided for track '{track.id}'")
            length = float(durations[track.id])
            if length < 0:
                raise ValueError(f"Track '{track.id}' has a negative duration")
            starts[track.id] = cursor
            lengths[track.id] = length
            cursor += length

        order = tuple(track.id for track in tracks)
        return cls(
            order=order,
            starts=MappingProxyType(starts),
            durations=MappingProxyType(lengths),
            lead_in=lead_in,
        )

    @property
    def total_duration(self) -> float:
        return self.lead_in + sum(self.durations.values())

    def index(self, track_id: str) -> int:
        """Return the position of ``track_id`` in the final order."""

        try:
            return self.order.index(track_id)
        except ValueError as exc:
            raise KeyError(track_id) from exc

    def start(self, track_id: str) -> float:
        return self.starts[track_id]

    def duration(self, track_id: str) -> float:
        return self.durations[track_id]

    def end(self, track_id: str) -> float:
        return self.starts[track_id] + self.durations[track_id]


__all__ = [
    "DEFAULT_WORDS_PER_MINUTE",
    "Timeline",
    "estimate_speech_seconds",
    "format_timestamp",
]
