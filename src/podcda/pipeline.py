"""End-to-end conversion: validate, order, lay out and script an adventure."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Protocol

from .loader import (
    ManifestLoadError,
    load_adventure_manifest,
    load_conversion_manifest,
    load_preamble,
    resolve_related_paths,
)
from .models import AdventureManifest, ConversionManifest, Preamble, Track
from .navigation import render_scripts
from .settings import ConverterSettings
from .sorter import order_tracks
from .timeline import Timeline, estimate_speech_seconds
from .validation import (
    check_adventure_manifest,
    check_conversion_manifest,
    check_preamble,
    validate_all,
)

logger = logging.getLogger(__name__)

PREAMBLE_JOB_ID = "_preamble"
POST_SPEECH_JOB_ID = "_post_speech"


class ConversionError(RuntimeError):
    """Raised when a conversion stage rejects its input."""

    def __init__(self, stage: str, reason: str) -> None:
        super().__init__(f"{stage}: {reason}" if stage else reason)
        self.stage = stage
        self.reason = reason


class SpeechSynthesizer(Protocol):
    """Turns text into an audio file; implemented outside this package."""

    def synthesize(self, job_id: str, text: str) -> Path:
        """Render ``text`` and return the path of the produced audio file."""


@dataclass(frozen=True)
class ConversionPlan:
    """Ordered tracks and their spoken scripts, ready for audio assembly."""

    adventure: AdventureManifest
    conversion: ConversionManifest
    preamble: Preamble
    tracks: tuple[Track, ...]
    scripts: Mapping[str, str]
    timeline: Timeline
    unreachable: tuple[str, ...] = ()
    sorted: bool = False

    @property
    def track_ids(self) -> tuple[str, ...]:
        return tuple(track.id for track in self.tracks)

    def script_for(self, track_id: str) -> str:
        return self.scripts[track_id]

    def iter_speech_jobs(self) -> Iterator[tuple[str, str]]:
        """Yield ``(job_id, text)`` pairs in playback order.

        The preamble speech is skipped when a standalone audio file replaces
        it rather than being merged with it.
        """

        preamble = self.preamble
        if preamble.speaks_speech:
            yield PREAMBLE_JOB_ID, preamble.speech
        for track in self.tracks:
            yield track.id, self.scripts[track.id]
        yield POST_SPEECH_JOB_ID, preamble.post_speech


def synthesize_plan(
    plan: ConversionPlan, synthesizer: SpeechSynthesizer
) -> list[tuple[str, Path]]:
    """Hand every speech job of ``plan`` to ``synthesizer`` in order."""

    rendered: list[tuple[str, Path]] = []
    for job_id, text in plan.iter_speech_jobs():
        logger.debug("Synthesizing speech for %s", job_id)
        rendered.append((job_id, synthesizer.synthesize(job_id, text)))
    return rendered


def _estimate_durations(
    texts: Mapping[str, str], *, words_per_minute: float
) -> dict[str, float]:
    return {
        track_id: estimate_speech_seconds(text, words_per_minute=words_per_minute)
        for track_id, text in texts.items()
    }


def _lead_in(
    preamble: Preamble, *, preamble_duration: float | None, words_per_minute: float
) -> float:
    delay = preamble.resolved_starting_speech_delay
    if preamble_duration is not None:
        return preamble_duration + delay
    if not preamble.speaks_speech:
        logger.warning(
            "No duration given for preamble audio '%s'; timestamps leave it out.",
            preamble.audio_file,
        )
        return delay
    spoken = estimate_speech_seconds(preamble.speech, words_per_minute=words_per_minute)
    return spoken + delay


def convert_adventure(
    adventure: AdventureManifest,
    conversion: ConversionManifest,
    preamble: Preamble,
    *,
    base_dir: str | Path,
    settings: ConverterSettings | None = None,
    preamble_duration: float | None = None,
) -> ConversionPlan:
    """Validate the manifests and build the conversion plan.

    Option phrasing changes how long each track takes to speak, which in turn
    moves every later timestamp. Scripts are therefore re-rendered against
    freshly estimated durations until they stop changing or
    ``settings.max_layout_passes`` is exhausted.

    Args:
        adventure: The parsed adventure manifest.
        conversion: The parsed conversion settings.
        preamble: The parsed preamble manifest.
        base_dir: Directory that relative manifest paths are resolved against.
        settings: Optional runtime settings; defaults are used when omitted.
        preamble_duration: Known length of the preamble audio in seconds.
            When omitted it is estimated from the preamble speech, or left
            out when a standalone audio file replaces that speech.

    Raises:
        ConversionError: If any manifest fails validation.
    """

    settings = settings or ConverterSettings()
    result = validate_all(conversion, preamble, adventure, base_dir=base_dir)
    if not result:
        raise ConversionError(result.stage, result.reason)

    beginning = adventure.meta.beginning
    order = order_tracks(
        adventure.tracks,
        beginning=beginning,
        scheme=conversion.sorter,
        last_end=conversion.last_end,
    )
    tracks = order.tracks
    unreachable = order.unreachable
    reordered = tracks != tuple(adventure.tracks)
    if unreachable:
        logger.warning(
            "%d track(s) cannot be reached from '%s': %s",
            len(unreachable),
            beginning,
            ", ".join(unreachable),
        )

    lead_in = _lead_in(
        preamble,
        preamble_duration=preamble_duration,
        words_per_minute=settings.words_per_minute,
    )
    durations = _estimate_durations(
        {track.id: track.speech for track in tracks},
        words_per_minute=settings.words_per_minute,
    )

    for layout_pass in range(1, settings.max_layout_passes + 1):
        timeline = Timeline.from_durations(tracks, durations, lead_in=lead_in)
        scripts = render_scripts(
            tracks,
            redirect_type=conversion.redirect_type,
            overrides=conversion.overrides,
            timeline=timeline,
        )
        rendered_durations = _estimate_durations(
            scripts, words_per_minute=settings.words_per_minute
        )
        if rendered_durations == durations:
            logger.debug("Track layout settled after %d pass(es)", layout_pass)
            break
        durations = rendered_durations
    else:
        logger.warning(
            "Track layout did not settle after %d pass(es); timings may drift.",
            settings.max_layout_passes,
        )

    return ConversionPlan(
        adventure=adventure,
        conversion=conversion,
        preamble=preamble,
        tracks=tracks,
        scripts=MappingProxyType(dict(scripts)),
        timeline=timeline,
        unreachable=unreachable,
        sorted=reordered,
    )


def load_and_convert(
    conversion_path: str | Path,
    *,
    settings: ConverterSettings | None = None,
    preamble_duration: float | None = None,
) -> ConversionPlan:
    """Load the manifests referenced by ``conversion_path`` and convert them.

    Manifests are loaded and checked one at a time so the first problem is
    reported against the stage that caused it.

    Raises:
        ConversionError: If a manifest cannot be loaded or is invalid.
    """

    conversion_path = Path(conversion_path)
    base_dir = conversion_path.parent

    try:
        conversion = load_conversion_manifest(conversion_path)
    except ManifestLoadError as exc:
        raise ConversionError("Error loading conversion manifest", str(exc)) from exc
    result = check_conversion_manifest(conversion, base_dir)
    if not result:
        raise ConversionError("Invalid conversion manifest", result.reason)

    adventure_path, preamble_path = resolve_related_paths(conversion, conversion_path)

    try:
        preamble = load_preamble(preamble_path)
    except ManifestLoadError as exc:
        raise ConversionError("Error loading preamble manifest", str(exc)) from exc
    result = check_preamble(preamble, base_dir)
    if not result:
        raise ConversionError("Invalid preamble manifest", result.reason)

    try:
        adventure = load_adventure_manifest(adventure_path)
    except ManifestLoadError as exc:
        raise ConversionError("Error loading adventure manifest", str(exc)) from exc
    result = check_adventure_manifest(adventure)
    if not result:
        raise ConversionError("Invalid adventure manifest", result.reason)

    return convert_adventure(
        adventure,
        conversion,
        preamble,
        base_dir=base_dir,
        settings=settings,
        preamble_duration=preamble_duration,
    )


__all__ = [
    "ConversionError",
    "ConversionPlan",
    "POST_SPEECH_JOB_ID",
    "PREAMBLE_JOB_ID",
    "SpeechSynthesizer",
    "convert_adventure",
    "load_and_convert",
    "synthesize_plan",
]
