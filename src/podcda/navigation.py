"""Spoken option text appended to each track's narration."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Sequence

from .models import REDIRECT_TYPE_SKIP, REDIRECT_TYPE_TIMESTAMP, TextOverrides, Track
from .timeline import Timeline, format_timestamp


def seconds_suffix(count: int, overrides: TextOverrides) -> str:
    """Return the singular suffix for exactly one second, plural otherwise."""

    if count == 1:
        return overrides.options_seconds_suffix_singular
    return overrides.options_seconds_suffix_plural


def join_option_labels(labels: Sequence[str], overrides: TextOverrides) -> str:
    """Join labels as an enumeration, e.g. ``a, b, or c``."""

    parts: list[str] = []
    last_index = len(labels) - 1
    for index, label in enumerate(labels):
        if index > 0:
            if index == last_index:
                parts.append(overrides.last_options_item_separator)
            else:
                parts.append(overrides.options_item_separator)
        parts.append(label)
    return "".join(parts)


def skip_distance(source: str, destination: str, timeline: Timeline) -> tuple[bool, int]:
    """Return ``(forward, seconds)`` to travel from the end of ``source``.

    Options are heard at the end of the source track. Forward distances round
    down and backward distances round up so the listener lands at or just
    before the destination's first word.
    """

    forward = timeline.index(destination) > timeline.index(source)
    source_end = timeline.end(source)
    destination_start = timeline.start(destination)
    if forward:
        seconds = math.floor(round(destination_start - source_end, 6))
    else:
        seconds = math.ceil(round(source_end - destination_start, 6))
    return forward, max(0, seconds)


def render_option_redirect(
    source: Track,
    label: str,
    destination: str,
    *,
    redirect_type: str,
    overrides: TextOverrides,
    timeline: Timeline,
) -> str:
    """Render the instruction explaining how to reach one option."""

    text = overrides.options_seconds_prefix + label
    if redirect_type == REDIRECT_TYPE_TIMESTAMP:
        timestamp = format_timestamp(timeline.start(destination))
        return (
            text
            + overrides.options_timestamp_go_to
            + timestamp
            + overrides.options_timestamp_go_to_suffix
        )
    if redirect_type == REDIRECT_TYPE_SKIP:
        forward, seconds = skip_distance(source.id, destination, timeline)
        if forward:
            text += overrides.options_seconds_forward_prefix
        else:
            text += overrides.options_seconds_backward_prefix
        return text + str(seconds) + seconds_suffix(seconds, overrides)
    raise ValueError(f"Unknown redirect type '{redirect_type}'.")


def render_track_script(
    track: Track,
    *,
    redirect_type: str,
    overrides: TextOverrides,
    timeline: Timeline,
) -> str:
    """Return the full spoken text for ``track``.

    Terminal tracks are rendered as their narration alone.
    """

    if track.is_terminal:
        return track.speech

    labels = list(track.options)
    text = track.speech
    text += overrides.speech_options_separator
    text += overrides.options_prefix
    text += join_option_labels(labels, overrides)
    text += overrides.options_terminator
    for label, destination in track.iter_options():
        text += render_option_redirect(
            track,
            label,
            destination,
            redirect_type=redirect_type,
            overrides=overrides,
            timeline=timeline,
        )
    if overrides.request_to_pause:
        text += overrides.request_to_pause
    return text


def render_scripts(
    tracks: Iterable[Track],
    *,
    redirect_type: str,
    overrides: TextOverrides,
    timeline: Timeline,
) -> Mapping[str, str]:
    """Render every track, keyed by identifier in the order given."""

    return {
        track.id: render_track_script(
            track,
            redirect_type=redirect_type,
            overrides=overrides,
            timeline=timeline,
        )
        for track in tracks
    }


__all__ = [
    "join_option_labels",
    "render_option_redirect",
    "render_scripts",
    "render_track_script",
    "seconds_suffix",
    "skip_distance",
]
