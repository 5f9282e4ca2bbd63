"""Human and machine readable summaries of a conversion plan."""

from __future__ import annotations

from typing import Any, Dict

from .pipeline import ConversionPlan
from .timeline import format_timestamp


def format_plan_report(plan: ConversionPlan) -> str:
    """Return a human-friendly report describing the converted adventure."""

    meta = plan.adventure.meta
    conversion = plan.conversion
    lines = [
        "Conversion Plan",
        "===============",
        f"Game: {meta.name} by {meta.author}",
        f"Redirect type: {conversion.redirect_type}",
        (
            f"Sorter: {conversion.sorter}"
            + (" (tracks reordered)" if plan.sorted else " (original order kept)")
        ),
        f"Output: {conversion.output_path}",
        f"Total length: {format_timestamp(plan.timeline.total_duration)}",
        "Track order:",
    ]

    for position, track in enumerate(plan.tracks, start=1):
        start = format_timestamp(plan.timeline.start(track.id))
        marker = " [end]" if track.end else ""
        lines.append(f"{position:>3}. {start} {track.id} - {track.title}{marker}")

    if plan.unreachable:
        lines.append("Unreachable tracks detected:")
        lines.extend(f"- {track_id}" for track_id in plan.unreachable)
    else:
        lines.append("All tracks are reachable from the beginning track.")

    return "\n".join(lines)


def plan_to_payload(plan: ConversionPlan) -> Dict[str, Any]:
    """Return a JSON-serialisable representation of ``plan``."""

    timeline = plan.timeline
    return {
        "game": plan.adventure.meta.model_dump(),
        "output_path": plan.conversion.output_path,
        "redirect_type": plan.conversion.redirect_type,
        "sorter": plan.conversion.sorter,
        "sorted": plan.sorted,
        "lead_in": timeline.lead_in,
        "total_duration": timeline.total_duration,
        "preamble": plan.preamble.model_dump(),
        "tracks": [
            {
                "id": track.id,
                "title": track.title,
                "end": track.end,
                "start": timeline.start(track.id),
                "duration": timeline.duration(track.id),
                "options": dict(track.options),
                "script": plan.scripts[track.id],
            }
            for track in plan.tracks
        ],
        "unreachable": list(plan.unreachable),
        "speech_jobs": [
            {"id": job_id, "text": text} for job_id, text in plan.iter_speech_jobs()
        ],
    }


__all__ = ["format_plan_report", "plan_to_payload"]
