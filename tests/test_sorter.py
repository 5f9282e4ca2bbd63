"""Tests for the track sorter."""

from __future__ import annotations

import logging
from collections import Counter

import pytest

from podcda.graph import build_track_graph
from podcda.sorter import breadth_first_order, compute_hop_counts, order_tracks, sort_tracks


def _ids(tracks) -> list[str]:
    return [track.id for track in tracks]


@pytest.fixture()
def fork(make_track):
    return [
        make_track("A", {"left": "B", "right": "C"}),
        make_track("B"),
        make_track("C"),
    ]


def test_none_scheme_is_identity(make_track) -> None:
    tracks = [
        make_track("C"),
        make_track("A", {"go": "C", "back": "B"}),
        make_track("B", {"loop": "B"}),
    ]

    result = sort_tracks(tracks, beginning="A", scheme="none", last_end="C")

    assert _ids(result) == ["C", "A", "B"]


def test_shortest_skip_fork_keeps_declared_order(fork) -> None:
    result = sort_tracks(fork, beginning="A", scheme="shortest_skip")

    assert _ids(result) == ["A", "B", "C"]


def test_shortest_skip_places_beginning_first(make_track) -> None:
    tracks = [
        make_track("B"),
        make_track("C"),
        make_track("A", {"left": "B", "right": "C"}),
    ]

    result = sort_tracks(tracks, beginning="A", scheme="shortest_skip")

    assert _ids(result)[0] == "A"
    assert _ids(result) == ["A", "B", "C"]


def test_equal_weights_follow_declaration_order(make_track) -> None:
    def build(options):
        return [
            make_track("A", {"go": "C"}),
            make_track("B"),
            make_track("C", options),
            make_track("D"),
        ]

    down_first = sort_tracks(
        build({"down": "D", "up": "B"}), beginning="A", scheme="shortest_skip"
    )
    up_first = sort_tracks(
        build({"up": "B", "down": "D"}), beginning="A", scheme="shortest_skip"
    )

    assert _ids(down_first) == ["A", "C", "D", "B"]
    assert _ids(up_first) == ["A", "C", "B", "D"]


def test_unreachable_tracks_and_self_loops_are_kept(make_track) -> None:
    tracks = [
        make_track("A", {"stay": "A", "go": "C"}),
        make_track("B"),
        make_track("C", {"back": "A", "next": "D"}),
        make_track("D"),
        make_track("E", {"x": "B"}),
    ]

    result = sort_tracks(tracks, beginning="A", scheme="shortest_skip")

    assert _ids(result) == ["A", "C", "D", "B", "E"]
    assert Counter(_ids(result)) == Counter(_ids(tracks))


def test_breadth_first_hop_counts_never_decrease(make_track) -> None:
    tracks = [
        make_track("H", {"a": "F", "b": "B"}),
        make_track("A"),
        make_track("B", {"a": "C", "b": "G"}),
        make_track("C", {"a": "A", "b": "H"}),
        make_track("D", {"a": "E"}),
        make_track("E"),
        make_track("F", {"a": "D"}),
        make_track("G", {"a": "A"}),
    ]

    result = sort_tracks(tracks, beginning="H", scheme="shortest_skip")
    hops = compute_hop_counts(build_track_graph(tracks, "H"), "H")

    assert _ids(result)[0] == "H"
    assert sorted(_ids(result)) == sorted(_ids(tracks))
    sequence = [hops[track_id] for track_id in _ids(result)]
    assert sequence == sorted(sequence)
    assert hops["H"] == 0
    assert hops["A"] == 3


def test_breadth_first_order_visits_each_vertex_once(make_track) -> None:
    tracks = [
        make_track("A", {"x": "B", "y": "B", "z": "A"}),
        make_track("B", {"back": "A"}),
    ]

    assert breadth_first_order(build_track_graph(tracks, "A"), "A") == ("A", "B")


def test_last_end_is_pinned_to_final_slot(make_track) -> None:
    tracks = [
        make_track("A", {"l": "B", "r": "C"}),
        make_track("B", {"x": "D"}),
        make_track("C"),
        make_track("D"),
    ]

    result = sort_tracks(tracks, beginning="A", scheme="shortest_skip", last_end="C")

    assert _ids(result) == ["A", "B", "D", "C"]


def test_last_end_cannot_displace_beginning(fork) -> None:
    result = sort_tracks(fork, beginning="A", scheme="shortest_skip", last_end="A")

    assert _ids(result) == ["A", "B", "C"]


def test_unknown_last_end_is_ignored(fork, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="podcda.sorter"):
        result = sort_tracks(
            fork, beginning="A", scheme="shortest_skip", last_end="missing"
        )

    assert _ids(result) == ["A", "B", "C"]
    assert "missing" in caplog.text


def test_sorting_failure_falls_back_to_original_order(make_track, caplog) -> None:
    tracks = [
        make_track("B"),
        make_track("A", {"go": "ghost", "ok": "B"}),
    ]

    with caplog.at_level(logging.WARNING, logger="podcda.sorter"):
        result = sort_tracks(tracks, beginning="A", scheme="shortest_skip")

    assert _ids(result) == ["B", "A"]
    assert "Error sorting tracks" in caplog.text


def test_missing_beginning_falls_back_to_original_order(fork, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="podcda.sorter"):
        result = sort_tracks(fork, beginning="Z", scheme="shortest_skip")

    assert result == tuple(fork)
    assert caplog.records


def test_unknown_scheme_is_rejected(fork) -> None:
    with pytest.raises(ValueError):
        sort_tracks(fork, beginning="A", scheme="alphabetical")


def test_order_tracks_reports_unreachable_tracks(make_track) -> None:
    tracks = [
        make_track("A", {"go": "C"}),
        make_track("B"),
        make_track("C"),
        make_track("D", {"x": "A"}),
    ]

    result = order_tracks(tracks, beginning="A", scheme="shortest_skip")

    assert _ids(result.tracks) == ["A", "C", "B", "D"]
    assert result.unreachable == ("B", "D")


def test_order_tracks_without_sorting_still_reports_reachability(make_track) -> None:
    tracks = [make_track("B"), make_track("A", {"go": "C"}), make_track("C")]

    result = order_tracks(tracks, beginning="A", scheme="none")

    assert _ids(result.tracks) == ["B", "A", "C"]
    assert result.unreachable == ("B",)


def test_order_tracks_on_broken_graph_reports_nothing(make_track, caplog) -> None:
    tracks = [make_track("A", {"go": "ghost"})]

    with caplog.at_level(logging.WARNING, logger="podcda.sorter"):
        result = order_tracks(tracks, beginning="A", scheme="none")

    assert _ids(result.tracks) == ["A"]
    assert result.unreachable == ()
    assert "Could not compute reachability" in caplog.text
