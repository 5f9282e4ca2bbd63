"""Physical ordering of tracks inside the linear audio file."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Mapping, Sequence

from .graph import TrackGraph, TrackGraphError, build_track_graph
from .models import SORTER_TYPE_NONE, SORTER_TYPE_SHORTEST_SKIP, SORTER_TYPES, Track

logger = logging.getLogger(__name__)


def breadth_first_order(graph: TrackGraph, beginning: str) -> tuple[str, ...]:
    """Return the identifiers reachable from ``beginning`` in visiting order."""

    if beginning not in graph:
        raise TrackGraphError(f"Beginning track '{beginning}' is not part of the graph.")

    visited: set[str] = {beginning}
    order: list[str] = []
    frontier: deque[str] = deque([beginning])

    while frontier:
        current = frontier.popleft()
        order.append(current)
        for destination in graph.neighbours(current):
            if destination in visited:
                continue
            visited.add(destination)
            frontier.append(destination)

    return tuple(order)


def compute_hop_counts(graph: TrackGraph, beginning: str) -> Mapping[str, int]:
    """Return the number of choices needed to reach each reachable track."""

    if beginning not in graph:
        raise TrackGraphError(f"Beginning track '{beginning}' is not part of the graph.")

    hops: dict[str, int] = {beginning: 0}
    frontier: deque[str] = deque([beginning])
    while frontier:
        current = frontier.popleft()
        for destination in graph.neighbours(current):
            if destination not in hops:
                hops[destination] = hops[current] + 1
                frontier.append(destination)
    return hops


@dataclass(frozen=True)
class TrackOrder:
    """Final track order plus the tracks the beginning cannot reach."""

    tracks: tuple[Track, ...]
    unreachable: tuple[str, ...] = ()


def _shortest_skip_order(
    graph: TrackGraph,
    reachable: Sequence[str],
    unreachable: Sequence[str],
    *,
    beginning: str,
    last_end: str | None,
) -> tuple[Track, ...]:
    result = [graph.track(track_id) for track_id in (*reachable, *unreachable)]
    if last_end is not None and last_end != beginning:
        if last_end in graph:
            pinned = graph.track(last_end)
            result.remove(pinned)
            result.append(pinned)
        else:
            logger.warning("Last end track '%s' does not exist; ignoring it.", last_end)
    return tuple(result)


def order_tracks(
    tracks: Sequence[Track],
    *,
    beginning: str,
    scheme: str,
    last_end: str | None = None,
) -> TrackOrder:
    """Order ``tracks`` and report which of them ``beginning`` cannot reach.

    ``none`` keeps the author's order. ``shortest_skip`` lays tracks out in
    breadth-first order from ``beginning`` so that choices reachable in fewer
    hops sit closer to the start; unreachable tracks follow in their original
    order and ``last_end`` is moved to the final slot. When the tracks do not
    form a valid graph the original order is kept and nothing is reported as
    unreachable.

    Raises:
        ValueError: If ``scheme`` is not a known sorter.
    """

    original = tuple(tracks)
    if scheme not in SORTER_TYPES:
        raise ValueError(f"Unknown sorter scheme '{scheme}'.")

    try:
        graph = build_track_graph(original, beginning)
        reachable = breadth_first_order(graph, beginning)
    except TrackGraphError as exc:
        if scheme == SORTER_TYPE_SHORTEST_SKIP:
            logger.warning("Error sorting tracks, keeping the original order: %s", exc)
        else:
            logger.warning("Could not compute reachability: %s", exc)
        return TrackOrder(original)

    visited = set(reachable)
    unreachable = tuple(track.id for track in original if track.id not in visited)
    if scheme == SORTER_TYPE_NONE:
        return TrackOrder(original, unreachable)

    ordered = _shortest_skip_order(
        graph, reachable, unreachable, beginning=beginning, last_end=last_end
    )
    return TrackOrder(ordered, unreachable)


def sort_tracks(
    tracks: Sequence[Track],
    *,
    beginning: str,
    scheme: str,
    last_end: str | None = None,
) -> tuple[Track, ...]:
    """Return the final physical order of ``tracks``; see :func:`order_tracks`."""

    if scheme == SORTER_TYPE_NONE:
        return tuple(tracks)
    return order_tracks(
        tracks, beginning=beginning, scheme=scheme, last_end=last_end
    ).tracks


__all__ = [
    "TrackOrder",
    "breadth_first_order",
    "compute_hop_counts",
    "order_tracks",
    "sort_tracks",
]


