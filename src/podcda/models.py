"""Typed representations of the conversion, preamble and adventure manifests."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

SUPPORTED_MANIFEST_VERSION = 1

REDIRECT_TYPE_TIMESTAMP = "timestamp"
REDIRECT_TYPE_SKIP = "skip"
REDIRECT_TYPES = (REDIRECT_TYPE_TIMESTAMP, REDIRECT_TYPE_SKIP)

SORTER_TYPE_NONE = "none"
SORTER_TYPE_SHORTEST_SKIP = "shortest_skip"
SORTER_TYPES = (SORTER_TYPE_NONE, SORTER_TYPE_SHORTEST_SKIP)

DEFAULT_STARTING_SPEECH_DELAY = 5.0


def _field(default: Any, *names: str) -> Any:
    """Return a pydantic field accepting each of ``names`` as an input key."""

    return Field(default=default, validation_alias=AliasChoices(*names))


class _ManifestModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class TextOverrides(_ManifestModel):
    """Phrase fragments stitched together when narrating a track's options.

    Every field has an English default so partial override sets only replace
    the phrases they mention.
    """

    options_prefix: str = _field("You can ", "options_prefix", "Options_prefix")
    options_item_separator: str = _field(
        ", ", "options_item_separator", "Options_item_separator"
    )
    last_options_item_separator: str = _field(
        ", or ", "last_options_item_separator", "Last_options_item_separator"
    )
    speech_options_separator: str = _field(
        " ... ... ... ", "speech_options_separator", "Speech_options_separator"
    )
    options_terminator: str = _field(". ", "options_terminator", "Options_terminator")
    options_seconds_prefix: str = _field(
        "To ", "options_seconds_prefix", "Options_seconds_prefix"
    )
    options_seconds_forward_prefix: str = _field(
        ", skip forward ",
        "options_seconds_forward_prefix",
        "Options_seconds_forward_prefix",
    )
    options_seconds_backward_prefix: str = _field(
        ", skip backward ",
        "options_seconds_backward_prefix",
        "Options_seconds_backward_prefix",
    )
    options_timestamp_go_to: str = _field(
        ", go to timestamp ", "options_timestamp_go_to", "Options_timestamp_go_to"
    )
    options_timestamp_go_to_suffix: str = _field(
        ". ", "options_timestamp_go_to_suffix", "Options_timestamp_go_to_suffix"
    )
    options_seconds_suffix_plural: str = _field(
        " seconds. ",
        "options_seconds_suffix_plural",
        "Options_seconds_suffix_plural",
    )
    options_seconds_suffix_singular: str = _field(
        " second. ",
        "options_seconds_suffix_singular",
        "Options_seconds_suffix_singular",
    )
    request_to_pause: str = _field(
        "Please pause and make your decision now. ",
        "request_to_pause",
        "Request_to_pause",
    )


class ConversionManifest(_ManifestModel):
    """Settings describing how an adventure should be converted."""

    version: int = _field(0, "version", "Version")
    path: str = _field("", "path", "Path")
    output_path: str = _field("", "output_path", "OutputPath", "outputPath")
    preamble: str = _field("", "preamble", "Preamble")
    overrides: TextOverrides = _field(TextOverrides(), "overrides", "Overrides")
    redirect_type: str = _field("", "redirect_type", "RedirectType", "redirectType")
    sorter: str = _field("", "sorter", "Sorter")
    last_end: str | None = _field(None, "last_end", "LastEnd", "lastEnd")

    @property
    def sorting_enabled(self) -> bool:
        """Return ``True`` when tracks are physically reordered."""

        return self.sorter == SORTER_TYPE_SHORTEST_SKIP


class Preamble(_ManifestModel):
    """Introductory and closing material played around the adventure."""

    version: int = _field(0, "version", "Version")
    uses_file: bool = _field(False, "uses_file", "Uses_file")
    audio_file: str = _field("", "audio_file", "Audio_file")
    merge: bool = _field(False, "merge", "Merge")
    audio_file_volume: float = _field(1.0, "audio_file_volume", "Audio_file_volume")
    speech: str = _field("", "speech", "Speech")
    post_speech: str = _field("", "post_speech", "Post_speech")
    starting_speech_delay: float | None = _field(
        None, "starting_speech_delay", "Starting_speech_delay"
    )

    @property
    def resolved_starting_speech_delay(self) -> float:
        """Return the delay before the game starts, applying the default."""

        if self.starting_speech_delay is None:
            return DEFAULT_STARTING_SPEECH_DELAY
        return self.starting_speech_delay

    @property
    def speaks_speech(self) -> bool:
        """Whether the preamble speech is synthesized.

        A standalone audio file that is not merged replaces the speech.
        """

        return not self.uses_file or self.merge


class Track(_ManifestModel):
    """A single narrated unit of the adventure."""

    id: str = _field("", "id", "ID")
    speech: str = _field("", "speech", "original_speech", "OriginalSpeech")
    title: str = _field("", "title", "Title")
    options: dict[str, str] = _field({}, "options", "Options")
    end: bool = _field(False, "end", "End")

    @model_validator(mode="before")
    @classmethod
    def _apply_no_append(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        payload = dict(data)
        no_append = payload.pop("no_append", None) or payload.pop("NoAppend", None)
        if payload.get("options") is None and payload.get("Options") is None:
            payload.pop("Options", None)
            payload["options"] = {}
        if no_append:
            payload.pop("End", None)
            payload["end"] = True
        return payload

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` when the track offers no choices."""

        return not self.options

    def iter_options(self) -> Iterator[tuple[str, str]]:
        """Yield ``(label, destination)`` pairs in declaration order."""

        return iter(self.options.items())


class AdventureMeta(_ManifestModel):
    """Descriptive information about the adventure."""

    name: str = _field("", "name", "Name")
    author: str = _field("", "author", "Author")
    beginning: str = _field("", "beginning", "Beginning")
    version: float | None = _field(None, "version", "Version")


class AdventureManifest(_ManifestModel):
    """The branching adventure compiled into tracks and options."""

    version: int = _field(0, "version", "Version")
    meta: AdventureMeta = _field(AdventureMeta(), "meta", "Meta")
    tracks: tuple[Track, ...] = _field((), "tracks", "Tracks")

    def track_index(self) -> Mapping[str, Track]:
        """Return a read-only mapping of track identifiers to tracks."""

        return MappingProxyType({track.id: track for track in self.tracks})


__all__ = [
    "AdventureManifest",
    "AdventureMeta",
    "ConversionManifest",
    "DEFAULT_STARTING_SPEECH_DELAY",
    "Preamble",
    "REDIRECT_TYPES",
    "REDIRECT_TYPE_SKIP",
    "REDIRECT_TYPE_TIMESTAMP",
    "SORTER_TYPES",
    "SORTER_TYPE_NONE",
    "SORTER_TYPE_SHORTEST_SKIP",
    "SUPPORTED_MANIFEST_VERSION",
    "TextOverrides",
    "Track",
]
