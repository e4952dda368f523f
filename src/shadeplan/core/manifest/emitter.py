"""Bundle manifest serialization.

Turns a ``BundleManifest`` into a plain dict / JSON document consumed by
the packaging step and checked into build output for review.

Determinism guarantee: ``emit()`` and ``to_json()`` are pure. Coordinates
are sorted by group, then artifact, then version; relocation entries by
coordinate then original name; rules by source prefix with sorted
exceptions; JSON keys are sorted. No timestamp or other run-dependent
value is written, so identical manifests always produce byte-identical
JSON and can be diffed across builds or used as test snapshots.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shadeplan import _MANIFEST_FORMAT
from shadeplan.core.coordinate import Coordinate
from shadeplan.core.resolver.models import BundleManifest

MANIFEST_VERSION: str = "1.0"


def coordinate_to_dict(coordinate: Coordinate) -> dict[str, str]:
    return {
        "group": coordinate.group,
        "artifact": coordinate.artifact,
        "version": coordinate.version,
    }


def emit(manifest: BundleManifest) -> dict[str, Any]:
    """Serialize a manifest to a deterministic dict.

    Args:
        manifest: The resolver output for one target.

    Returns:
        A dictionary suitable for JSON serialization.
    """
    embed: list[dict[str, Any]] = []
    for coordinate in sorted(manifest.embed):
        entry: dict[str, Any] = coordinate_to_dict(coordinate)
        parent = manifest.via.get(coordinate)
        if parent is not None:
            entry["via"] = parent.notation
        embed.append(entry)

    excluded: list[dict[str, Any]] = []
    for coordinate in sorted(manifest.excluded):
        entry = coordinate_to_dict(coordinate)
        reason = manifest.exclusion_reasons.get(coordinate)
        if reason is not None:
            entry["reason"] = reason.value
        excluded.append(entry)

    relocate = [
        {
            "coordinate": e.coordinate.notation,
            "original": e.original,
            "rewritten": e.rewritten,
        }
        for e in sorted(manifest.relocate)
    ]

    return {
        "format": _MANIFEST_FORMAT,
        "manifest_version": MANIFEST_VERSION,
        "target": manifest.target,
        "embed": embed,
        "excluded": excluded,
        "external": [coordinate_to_dict(c) for c in sorted(manifest.external)],
        "relocate": relocate,
        "rules": [r.to_dict() for r in sorted(manifest.rules, key=lambda r: r.source_prefix)],
        "summary": {
            "embedded": len(manifest.embed),
            "excluded": len(manifest.excluded),
            "external": len(manifest.external),
            "relocated": len(manifest.relocate),
        },
    }


def to_json(manifest: BundleManifest, indent: int = 2) -> str:
    """Serialize to a deterministic JSON string (trailing newline included)."""
    return json.dumps(emit(manifest), indent=indent, sort_keys=True) + "\n"


def write(manifest: BundleManifest, path: Path) -> None:
    """Write the manifest JSON to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(manifest), encoding="utf-8")
