"""Read manifest files from disk and parse them into models."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .models import AdventureManifest, ConversionManifest, Preamble

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class ManifestLoadError(ValueError):
    """Raised when a manifest file is missing, unreadable or malformed."""


def _read_json_object(path: Path, *, label: str) -> Mapping[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_data = json.load(handle)
    except FileNotFoundError as exc:
        raise ManifestLoadError(f"{label} '{path}' does not exist.") from exc
    except json.JSONDecodeError as exc:
        raise ManifestLoadError(
            f"{label} '{path}' could not be parsed: {exc.msg} "
            f"(line {exc.lineno}, column {exc.colno})."
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestLoadError(f"{label} '{path}' could not be read: {exc}") from exc

    if not isinstance(raw_data, Mapping):
        raise ManifestLoadError(f"{label} '{path}' must contain an object at the top level.")

    return raw_data


def _parse(model: Type[_ModelT], payload: Mapping[str, Any], *, label: str) -> _ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ManifestLoadError(f"{label} has an invalid structure: {problems}") from exc


def load_conversion_manifest_from_mapping(payload: Mapping[str, Any]) -> ConversionManifest:
    """Parse conversion settings that were already decoded from JSON."""

    return _parse(ConversionManifest, payload, label="Conversion manifest")


def load_preamble_from_mapping(payload: Mapping[str, Any]) -> Preamble:
    """Parse a preamble definition that was already decoded from JSON."""

    return _parse(Preamble, payload, label="Preamble manifest")


def load_adventure_manifest_from_mapping(payload: Mapping[str, Any]) -> AdventureManifest:
    """Parse an adventure definition that was already decoded from JSON."""

    return _parse(AdventureManifest, payload, label="Adventure manifest")


def load_conversion_manifest(path: str | Path) -> ConversionManifest:
    """Load conversion settings from a JSON file on disk."""

    data = _read_json_object(Path(path), label="Conversion manifest")
    return load_conversion_manifest_from_mapping(data)


def load_preamble(path: str | Path) -> Preamble:
    """Load a preamble manifest from a JSON file on disk."""

    data = _read_json_object(Path(path), label="Preamble manifest")
    return load_preamble_from_mapping(data)


def load_adventure_manifest(path: str | Path) -> AdventureManifest:
    """Load an adventure manifest from a JSON file on disk."""

    data = _read_json_object(Path(path), label="Adventure manifest")
    return load_adventure_manifest_from_mapping(data)


def resolve_related_paths(
    conversion: ConversionManifest, conversion_path: str | Path
) -> tuple[Path, Path]:
    """Return the adventure and preamble paths for ``conversion``.

    Both paths are interpreted relative to the directory holding the
    conversion manifest.
    """

    base_dir = Path(conversion_path).parent
    return base_dir / conversion.path, base_dir / conversion.preamble


__all__ = [
    "ManifestLoadError",
    "load_adventure_manifest",
    "load_adventure_manifest_from_mapping",
    "load_conversion_manifest",
    "load_conversion_manifest_from_mapping",
    "load_preamble",
    "load_preamble_from_mapping",
    "resolve_related_paths",
]
