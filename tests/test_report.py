"""Tests for plan reporting helpers."""

from __future__ import annotations

import json

from podcda.pipeline import load_and_convert
from podcda.report import format_plan_report, plan_to_payload


def test_format_plan_report_lists_tracks_in_order(write_manifests) -> None:
    plan = load_and_convert(write_manifests())

    report = format_plan_report(plan)

    assert report.startswith("Conversion Plan\n===============")
    assert "Game: The Forking Path by Test Author" in report
    assert "Redirect type: skip" in report
    assert "Sorter: shortest_skip (original order kept)" in report
    assert "  1. 0:" in report
    assert "A - Room A" in report
    assert "C - Room C [end]" in report
    assert report.index("A - Room A") < report.index("B - Room B") < report.index("C - Room C")
    assert report.endswith("All tracks are reachable from the beginning track.")


def test_format_plan_report_lists_unreachable_tracks(
    write_manifests, adventure_payload, track_payload
) -> None:
    adventure = adventure_payload(
        [
            track_payload("A", {"go": "B"}),
            track_payload("B"),
            track_payload("Z", {"nowhere": "B"}),
        ]
    )

    report = format_plan_report(load_and_convert(write_manifests(adventure=adventure)))

    assert "Unreachable tracks detected:\n- Z" in report


def test_plan_payload_is_json_serialisable(write_manifests) -> None:
    plan = load_and_convert(write_manifests())

    payload = json.loads(json.dumps(plan_to_payload(plan)))

    assert [track["id"] for track in payload["tracks"]] == ["A", "B", "C"]
    assert payload["tracks"][0]["script"] == plan.script_for("A")
    assert payload["tracks"][0]["options"] == {"go left": "B", "go right": "C"}
    assert payload["game"]["name"] == "The Forking Path"
    assert payload["redirect_type"] == "skip"
    assert payload["speech_jobs"][0]["id"] == "_preamble"
    assert payload["unreachable"] == []
