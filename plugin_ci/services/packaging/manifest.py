"""
Reading and writing ``plugin.json``.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from ...core.exceptions import ManifestError
from ...core.models.manifest import PluginManifest

MANIFEST_FILENAME = "plugin.json"


def load_manifest(path: Path) -> PluginManifest:
    """
    Load and validate a plugin manifest.

    Raises:
        ManifestError: If the file is missing, not JSON, or not a valid manifest
    """
    if not path.is_file():
        raise ManifestError("Plugin manifest not found", manifest_path=str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestError("Plugin manifest is unreadable", manifest_path=str(path), cause=e) from e
    try:
        return PluginManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(
            f"Plugin manifest is invalid: {e.error_count()} error(s)",
            manifest_path=str(path),
            cause=e,
        ) from e


def save_manifest(path: Path, manifest: PluginManifest) -> None:
    """Write a manifest back as indented JSON."""
    path.write_text(json.dumps(manifest.to_json_dict(), indent=2) + "\n", encoding="utf-8")
