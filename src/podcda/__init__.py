"""Convert branching audio adventures into a single linear narration plan."""

from .graph import OptionEdge, TrackGraph, TrackGraphError, build_track_graph
from .loader import (
    ManifestLoadError,
    load_adventure_manifest,
    load_conversion_manifest,
    load_preamble,
)
from .models import (
    AdventureManifest,
    AdventureMeta,
    ConversionManifest,
    Preamble,
    TextOverrides,
    Track,
)
from .navigation import render_scripts, render_track_script
from .pipeline import (
    ConversionError,
    ConversionPlan,
    SpeechSynthesizer,
    convert_adventure,
    load_and_convert,
    synthesize_plan,
)
from .report import format_plan_report, plan_to_payload
from .settings import ConverterSettings
from .sorter import TrackOrder, order_tracks, sort_tracks
from .timeline import Timeline
from .validation import ValidationResult

__all__ = [
    "AdventureManifest",
    "AdventureMeta",
    "ConversionError",
    "ConversionManifest",
    "ConversionPlan",
    "ConverterSettings",
    "ManifestLoadError",
    "OptionEdge",
    "Preamble",
    "SpeechSynthesizer",
    "TextOverrides",
    "Timeline",
    "Track",
    "TrackGraph",
    "TrackGraphError",
    "TrackOrder",
    "ValidationResult",
    "build_track_graph",
    "convert_adventure",
    "format_plan_report",
    "load_adventure_manifest",
    "load_and_convert",
    "load_conversion_manifest",
    "load_preamble",
    "order_tracks",
    "plan_to_payload",
    "render_scripts",
    "render_track_script",
    "sort_tracks",
    "synthesize_plan",
]
