"""Structural and referential checks applied before any graph work begins."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .models import (
    REDIRECT_TYPES,
    SORTER_TYPES,
    SUPPORTED_MANIFEST_VERSION,
    AdventureManifest,
    ConversionManifest,
    Preamble,
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation pass.

    ``reason`` describes the first failure encountered and is empty when the
    checked value is valid.
    """

    ok: bool
    reason: str = ""
    stage: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str) -> "ValidationResult":
        return cls(ok=False, reason=reason)

    @property
    def message(self) -> str:
        """Return the reason prefixed with its stage, when one is known."""

        if self.stage:
            return f"{self.stage}: {self.reason}"
        return self.reason

    def with_stage(self, stage: str) -> "ValidationResult":
        """Attach the name of the stage that produced a failure."""

        if self.ok:
            return self
        return ValidationResult(ok=False, reason=self.reason, stage=stage)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_openable(path: Path, *, missing: str, unreadable: str) -> ValidationResult:
    try:
        with path.open("rb"):
            pass
    except FileNotFoundError:
        return ValidationResult.failed(missing)
    except OSError:
        return ValidationResult.failed(unreadable)
    return ValidationResult.passed()


def check_conversion_manifest(
    manifest: ConversionManifest, base_dir: str | Path
) -> ValidationResult:
    """Validate conversion settings.

    Args:
        manifest: The parsed conversion settings.
        base_dir: Directory containing the conversion manifest. Relative
            paths in ``manifest`` are resolved against it.
    """

    root = Path(base_dir)
    if manifest.version != SUPPORTED_MANIFEST_VERSION:
        return ValidationResult.failed("Invalid manifest version")
    if _is_blank(manifest.path):
        return ValidationResult.failed("Invalid manifest path")

    result = _check_openable(
        root / manifest.path,
        missing="Manifest file does not exist",
        unreadable="Error opening manifest file",
    )
    if not result:
        return result

    if _is_blank(manifest.output_path):
        return ValidationResult.failed("Invalid output path")
    if _is_blank(manifest.preamble):
        return ValidationResult.failed("Invalid preamble path")

    result = _check_openable(
        root / manifest.preamble,
        missing="Preamble file does not exist",
        unreadable="Error opening preamble file",
    )
    if not result:
        return result

    if manifest.redirect_type not in REDIRECT_TYPES:
        return ValidationResult.failed("Invalid redirect type")
    if manifest.sorter not in SORTER_TYPES:
        return ValidationResult.failed("Invalid sorter type")
    if manifest.last_end is not None and _is_blank(manifest.last_end):
        return ValidationResult.failed("Invalid last end track")

    return ValidationResult.passed()


def check_preamble(preamble: Preamble, base_dir: str | Path) -> ValidationResult:
    """Validate a preamble manifest without modifying it."""

    if preamble.version != SUPPORTED_MANIFEST_VERSION:
        return ValidationResult.failed("Invalid preamble version")

    if preamble.uses_file:
        if _is_blank(preamble.audio_file):
            return ValidationResult.failed("Invalid audio file path")
        result = _check_openable(
            Path(base_dir) / preamble.audio_file,
            missing="Audio file does not exist",
            unreadable="Error opening audio file",
        )
        if not result:
            return result

    if preamble.merge and not preamble.uses_file:
        return ValidationResult.failed(
            "Preamble wants to merge but does not use a separate audio file"
        )
    if _is_blank(preamble.speech):
        return ValidationResult.failed("Invalid speech")
    if _is_blank(preamble.post_speech):
        return ValidationResult.failed("Invalid post speech")
    if preamble.resolved_starting_speech_delay < 0:
        return ValidationResult.failed("Invalid starting speech delay")

    return ValidationResult.passed()


def check_adventure_manifest(manifest: AdventureManifest) -> ValidationResult:
    """Validate the adventure's metadata, tracks and option targets."""

    if manifest.version != SUPPORTED_MANIFEST_VERSION:
        return ValidationResult.failed("Invalid manifest version")

    meta = manifest.meta
    if _is_blank(meta.name):
        return ValidationResult.failed("Invalid game name")
    if _is_blank(meta.author):
        return ValidationResult.failed("Invalid game author")
    if _is_blank(meta.beginning):
        return ValidationResult.failed("Invalid beginning track")

    beginning_matches = sum(1 for track in manifest.tracks if track.id == meta.beginning)
    if beginning_matches == 0:
        return ValidationResult.failed("Beginning track not found")

    seen_ids: set[str] = set()
    for index, track in enumerate(manifest.tracks):
        if _is_blank(track.id):
            return ValidationResult.failed(f"Invalid track ID at index {index}")
        if track.id in seen_ids:
            return ValidationResult.failed(f"Duplicate track ID {track.id}")
        seen_ids.add(track.id)
        if _is_blank(track.speech):
            return ValidationResult.failed(f"Invalid track speech at track {track.id}")
        if _is_blank(track.title):
            return ValidationResult.failed(f"Invalid track title at track {track.id}")
        if track.is_terminal and not track.end:
            return ValidationResult.failed(f"Invalid track options at track {track.id}")
        for label in track.options:
            if _is_blank(label):
                return ValidationResult.failed(f"Invalid option ID at track {track.id}")

    for track in manifest.tracks:
        for label, destination in track.iter_options():
            if destination not in seen_ids:
                return ValidationResult.failed(
                    f"Option '{label}' at track {track.id} points to unknown track "
                    f"{destination}"
                )

    return ValidationResult.passed()


def validate_all(
    conversion: ConversionManifest,
    preamble: Preamble,
    adventure: AdventureManifest,
    *,
    base_dir: str | Path,
) -> ValidationResult:
    """Run every check in pipeline order and report the first failure."""

    result = check_conversion_manifest(conversion, base_dir).with_stage(
        "Invalid conversion manifest"
    )
    if not result:
        return result

    result = check_preamble(preamble, base_dir).with_stage("Invalid preamble manifest")
    if not result:
        return result

    return check_adventure_manifest(adventure).with_stage("Invalid adventure manifest")


__all__ = [
    "ValidationResult",
    "check_adventure_manifest",
    "check_conversion_manifest",
    "check_preamble",
    "validate_all",
]
