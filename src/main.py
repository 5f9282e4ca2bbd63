"""Command-line entry point for the adventure-to-audio converter."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from podcda import (
    ConversionError,
    ConverterSettings,
    format_plan_report,
    load_and_convert,
    plan_to_payload,
)

BANNER = "PodCDA: Create a single audio file from a CDAdventure manifest"


def _non_negative_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: '{value}'") from exc
    if seconds < 0:
        raise argparse.ArgumentTypeError("seconds cannot be negative")
    return seconds


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Order the tracks of a branching audio adventure and script the "
            "spoken navigation cues for each of them."
        )
    )
    parser.add_argument(
        "conversion_manifest",
        type=Path,
        help=(
            "Path to the conversion manifest. The adventure and preamble "
            "manifests it names are resolved relative to its directory."
        ),
    )
    parser.add_argument(
        "--plan-output",
        type=Path,
        help="Write the ordered tracks and their scripts to this JSON file.",
    )
    parser.add_argument(
        "--preamble-duration",
        type=_non_negative_seconds,
        metavar="SECONDS",
        help=(
            "Length of the preamble audio. Defaults to an estimate of the "
            "preamble speech."
        ),
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"),
        help="Logging verbosity. Defaults to PODCDA_LOG_LEVEL or WARNING.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress the banner and the plan report.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Convert the adventure described by the conversion manifest."""

    args = _parse_args(argv)
    try:
        settings = ConverterSettings.from_env()
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.quiet:
        print(BANNER)

    try:
        plan = load_and_convert(
            args.conversion_manifest,
            settings=settings,
            preamble_duration=args.preamble_duration,
        )
    except ConversionError as exc:
        print(f"Error: {exc}")
        return 1

    if args.plan_output is not None:
        args.plan_output.parent.mkdir(parents=True, exist_ok=True)
        with args.plan_output.open("w", encoding="utf-8") as handle:
            json.dump(plan_to_payload(plan), handle, indent=2)
            handle.write("\n")

    if not args.quiet:
        print()
        print(format_plan_report(plan))
        if args.plan_output is not None:
            print()
            print(f"Plan written to '{args.plan_output}'.")
    return 0


def run() -> None:
    """Console script wrapper around :func:`main`."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - convenience CLI
    run()
