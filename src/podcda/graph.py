"""Directed, weighted view over the adventure's tracks and options."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .models import Track


class TrackGraphError(ValueError):
    """Raised when the tracks cannot be turned into a consistent graph."""


@dataclass(frozen=True)
class OptionEdge:
    """A listener choice leading from one track to another."""

    source: str
    label: str
    destination: str
    weight: int
    order: int

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.destination


def move_track_to_front(tracks: Sequence[Track], track_id: str) -> tuple[Track, ...]:
    """Return ``tracks`` with ``track_id`` spliced into position 0.

    The relative order of the remaining tracks is preserved.

    Raises:
        TrackGraphError: If no track with ``track_id`` exists.
    """

    for index, track in enumerate(tracks):
        if track.id == track_id:
            if index == 0:
                return tuple(tracks)
            return (track, *tracks[:index], *tracks[index + 1 :])
    raise TrackGraphError(f"Track '{track_id}' not found in tracks.")


class TrackGraph:
    """Tracks as vertices, options as edges weighted by positional distance.

    Edge weights are the absolute difference between the input positions of
    the source and destination tracks. They only steer traversal order and do
    not describe real playback distance once tracks are reordered.
    """

    def __init__(self, tracks: Iterable[Track]) -> None:
        self._tracks: tuple[Track, ...] = tuple(tracks)
        self._positions: dict[str, int] = {}
        for position, track in enumerate(self._tracks):
            if track.id in self._positions:
                raise TrackGraphError(f"Duplicate track '{track.id}' in graph.")
            self._positions[track.id] = position

        self._edges: dict[str, tuple[OptionEdge, ...]] = {}
        for track in self._tracks:
            source_position = self._positions[track.id]
            edges: list[OptionEdge] = []
            for order, (label, destination) in enumerate(track.iter_options()):
                destination_position = self._positions.get(destination)
                if destination_position is None:
                    raise TrackGraphError(
                        f"Option '{label}' at track '{track.id}' targets unknown "
                        f"track '{destination}'."
                    )
                edges.append(
                    OptionEdge(
                        source=track.id,
                        label=label,
                        destination=destination,
                        weight=abs(destination_position - source_position),
                        order=order,
                    )
                )
            self._edges[track.id] = tuple(edges)

    @property
    def tracks(self) -> tuple[Track, ...]:
        """Return the tracks in the order the graph was built from."""

        return self._tracks

    @property
    def vertices(self) -> tuple[str, ...]:
        return tuple(track.id for track in self._tracks)

    @property
    def edges(self) -> tuple[OptionEdge, ...]:
        return tuple(edge for track in self._tracks for edge in self._edges[track.id])

    @property
    def positions(self) -> Mapping[str, int]:
        return MappingProxyType(self._positions)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._positions

    def __len__(self) -> int:
        return len(self._tracks)

    def track(self, track_id: str) -> Track:
        """Return the track registered under ``track_id``."""

        try:
            return self._tracks[self._positions[track_id]]
        except KeyError as exc:
            raise TrackGraphError(f"Track '{track_id}' is not part of the graph.") from exc

    def position_of(self, track_id: str) -> int:
        try:
            return self._positions[track_id]
        except KeyError as exc:
            raise TrackGraphError(f"Track '{track_id}' is not part of the graph.") from exc

    def edges_from(self, track_id: str) -> tuple[OptionEdge, ...]:
        """Return the outgoing edges of ``track_id`` in declaration order."""

        if track_id not in self._edges:
            raise TrackGraphError(f"Track '{track_id}' is not part of the graph.")
        return self._edges[track_id]

    def neighbours(self, track_id: str) -> tuple[str, ...]:
        """Return distinct destinations, nearest first.

        Equal weights keep the order in which the options were declared.
        """

        ordered = sorted(self.edges_from(track_id), key=lambda edge: (edge.weight, edge.order))
        seen: set[str] = set()
        destinations: list[str] = []
        for edge in ordered:
            if edge.destination in seen:
                continue
            seen.add(edge.destination)
            destinations.append(edge.destination)
        return tuple(destinations)


def build_track_graph(tracks: Sequence[Track], beginning: str) -> TrackGraph:
    """Build the traversal graph with ``beginning`` placed at position 0."""

    return TrackGraph(move_track_to_front(tracks, beginning))


__all__ = [
    "OptionEdge",
    "TrackGraph",
    "TrackGraphError",
    "build_track_graph",
    "move_track_to_front",
]
