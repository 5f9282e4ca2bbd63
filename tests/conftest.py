"""Test configuration for the adventure converter."""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from collections.abc import Mapping, Sequence
from typing import Any, Callable

import pytest

from podcda.models import AdventureManifest, ConversionManifest, Preamble, Track


def _track_payload(
    track_id: str,
    options: Mapping[str, str] | None = None,
    *,
    end: bool | None = None,
) -> dict[str, Any]:
    options = dict(options or {})
    return {
        "id": track_id,
        "speech": f"You are in room {track_id}.",
        "title": f"Room {track_id}",
        "options": options,
        "end": (not options) if end is None else end,
    }


def _adventure_payload(
    tracks: Sequence[Mapping[str, Any]] | None = None,
    *,
    beginning: str = "A",
) -> dict[str, Any]:
    if tracks is None:
        tracks = [
            _track_payload("A", {"go left": "B", "go right": "C"}),
            _track_payload("B"),
            _track_payload("C"),
        ]
    return {
        "version": 1,
        "meta": {
            "name": "The Forking Path",
            "author": "Test Author",
            "beginning": beginning,
            "version": 1.3,
        },
        "tracks": list(tracks),
    }


def _preamble_payload(**updates: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "version": 1,
        "uses_file": False,
        "merge": False,
        "speech": "Welcome to the forking path.",
        "post_speech": "Thanks for listening.",
    }
    payload.update(updates)
    return payload


def _conversion_payload(**updates: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "version": 1,
        "path": "adventure.json",
        "output_path": "out/adventure.mp3",
        "preamble": "preamble.json",
        "redirect_type": "skip",
        "sorter": "shortest_skip",
    }
    payload.update(updates)
    return payload


@pytest.fixture()
def make_track() -> Callable[..., Track]:
    """Factory fixture building validated :class:`Track` models."""

    def _factory(
        track_id: str,
        options: Mapping[str, str] | None = None,
        *,
        end: bool | None = None,
    ) -> Track:
        return Track.model_validate(_track_payload(track_id, options, end=end))

    return _factory


@pytest.fixture()
def track_payload() -> Callable[..., dict[str, Any]]:
    return _track_payload


@pytest.fixture()
def adventure_payload() -> Callable[..., dict[str, Any]]:
    return _adventure_payload


@pytest.fixture()
def sample_adventure() -> AdventureManifest:
    return AdventureManifest.model_validate(_adventure_payload())


@pytest.fixture()
def sample_preamble() -> Preamble:
    return Preamble.model_validate(_preamble_payload())


@pytest.fixture()
def sample_conversion() -> ConversionManifest:
    return ConversionManifest.model_validate(_conversion_payload())


@pytest.fixture()
def write_manifests(tmp_path: Path) -> Callable[..., Path]:
    """Write the three manifests to ``tmp_path`` and return the conversion path.

    Keyword arguments replace whole payloads; ``conversion_updates`` and
    ``preamble_updates`` tweak individual fields of the defaults.
    """

    def _factory(
        *,
        adventure: Mapping[str, Any] | None = None,
        conversion_updates: Mapping[str, Any] | None = None,
        preamble_updates: Mapping[str, Any] | None = None,
    ) -> Path:
        adventure_data = dict(adventure) if adventure is not None else _adventure_payload()
        (tmp_path / "adventure.json").write_text(
            json.dumps(adventure_data), encoding="utf-8"
        )
        (tmp_path / "preamble.json").write_text(
            json.dumps(_preamble_payload(**dict(preamble_updates or {}))),
            encoding="utf-8",
        )
        conversion_path = tmp_path / "conversion.json"
        conversion_path.write_text(
            json.dumps(_conversion_payload(**dict(conversion_updates or {}))),
            encoding="utf-8",
        )
        return conversion_path

    return _factory


__all__ = [
    "adventure_payload",
    "make_track",
    "sample_adventure",
    "sample_conversion",
    "sample_preamble",
    "track_payload",
    "write_manifests",
]
