"""Manifest operations --- deserialization and diffing.

- **Deserialization:** ``load`` (dict), ``from_json``, ``read`` (disk)
  rebuild a ``BundleManifest`` from the output of ``emit``.
- **Diffing:** ``diff`` compares two manifests of the same target, for
  reviewing what a dependency bump changed in the shipped bundle.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shadeplan import _MANIFEST_FORMAT
from shadeplan.core.coordinate import Coordinate
from shadeplan.core.relocation import RelocationRule
from shadeplan.core.resolver.models import (
    BundleManifest,
    ExclusionReason,
    RelocationEntry,
)
from shadeplan.exceptions import ManifestError


def _coordinate(entry: Any, section: str) -> Coordinate:
    if isinstance(entry, str):
        try:
            return Coordinate.parse(entry)
        except ValueError as exc:
            raise ManifestError(f"{section}: {exc}") from exc
    if not isinstance(entry, dict):
        raise ManifestError(f"{section}: expected an object, got {entry!r}")
    try:
        return Coordinate(entry["group"], entry["artifact"], entry.get("version", ""))
    except KeyError as exc:
        raise ManifestError(f"{section}: entry missing field {exc.args[0]!r}") from exc


def load(data: dict[str, Any]) -> BundleManifest:
    """Rebuild a manifest from a dict produced by ``emit``.

    Raises:
        ManifestError: If the format marker is wrong or an entry is
            malformed.
    """
    if not isinstance(data, dict) or data.get("format") != _MANIFEST_FORMAT:
        raise ManifestError("not a shadeplan bundle manifest")

    target = data.get("target", "")
    embed: set[Coordinate] = set()
    via: dict[Coordinate, Coordinate] = {}
    for entry in data.get("embed", []):
        coordinate = _coordinate(entry, "embed")
        embed.add(coordinate)
        if isinstance(entry, dict) and entry.get("via"):
            via[coordinate] = _coordinate(entry["via"], "embed.via")

    excluded: set[Coordinate] = set()
    reasons: dict[Coordinate, ExclusionReason] = {}
    for entry in data.get("excluded", []):
        coordinate = _coordinate(entry, "excluded")
        excluded.add(coordinate)
        reason = entry.get("reason") if isinstance(entry, dict) else None
        if reason is not None:
            try:
                reasons[coordinate] = ExclusionReason(reason)
            except ValueError as exc:
                raise ManifestError(f"excluded: unknown reason {reason!r}") from exc

    external = {_coordinate(e, "external") for e in data.get("external", [])}

    relocate: list[RelocationEntry] = []
    for entry in data.get("relocate", []):
        try:
            relocate.append(RelocationEntry(
                _coordinate(entry["coordinate"], "relocate"),
                entry["original"],
                entry["rewritten"],
            ))
        except (KeyError, TypeError) as exc:
            raise ManifestError(f"relocate: malformed entry {entry!r}") from exc

    rules: list[RelocationRule] = []
    for entry in data.get("rules", []):
        try:
            rules.append(RelocationRule(
                entry["source"],
                entry["destination"],
                frozenset(entry.get("exceptions", [])),
            ))
        except (KeyError, TypeError, AttributeError) as exc:
            raise ManifestError(f"rules: malformed entry {entry!r}") from exc

    return BundleManifest(
        target=target,
        embed=frozenset(embed),
        excluded=frozenset(excluded),
        relocate=tuple(relocate),
        external=frozenset(external),
        exclusion_reasons=reasons,
        via=via,
        rules=tuple(rules),
    )


def from_json(json_str: str) -> BundleManifest:
    """Deserialize from a JSON string.

    Raises:
        ManifestError: If the string is not valid JSON or not a manifest.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"invalid JSON: {exc}") from exc
    return load(data)


def read(path: Path) -> BundleManifest:
    """Read a manifest from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        ManifestError: If the content is not a valid manifest.
    """
    return from_json(path.read_text(encoding="utf-8"))


def _section_diff(
    old: frozenset[Coordinate], new: frozenset[Coordinate]
) -> dict[str, list[Any]]:
    added = set(new - old)
    removed = set(old - new)
    old_versions: dict[tuple[str, str], list[Coordinate]] = {}
    new_versions: dict[tuple[str, str], list[Coordinate]] = {}
    for coordinate in old:
        old_versions.setdefault(coordinate.module, []).append(coordinate)
    for coordinate in new:
        new_versions.setdefault(coordinate.module, []).append(coordinate)

    # A version bump is a module with exactly one version on each side.
    changed: list[dict[str, str]] = []
    for module in sorted({c.module for c in added} & {c.module for c in removed}):
        before = old_versions[module]
        after = new_versions[module]
        if len(before) != 1 or len(after) != 1:
            continue
        changed.append({
            "module": f"{module[0]}:{module[1]}",
            "old": before[0].version,
            "new": after[0].version,
        })
        added.discard(after[0])
        removed.discard(before[0])

    return {
        "added": [c.notation for c in sorted(added)],
        "removed": [c.notation for c in sorted(removed)],
        "changed": changed,
    }


def _rules_diff(
    old: tuple[RelocationRule, ...], new: tuple[RelocationRule, ...]
) -> dict[str, list[Any]]:
    old_by_source = {r.source_prefix: r for r in old}
    new_by_source = {r.source_prefix: r for r in new}
    return {
        "added": [
            new_by_source[s].to_dict()
            for s in sorted(new_by_source.keys() - old_by_source.keys())
        ],
        "removed": [
            old_by_source[s].to_dict()
            for s in sorted(old_by_source.keys() - new_by_source.keys())
        ],
        "changed": [
            {
                "source": s,
                "old": old_by_source[s].to_dict(),
                "new": new_by_source[s].to_dict(),
            }
            for s in sorted(old_by_source.keys() & new_by_source.keys())
            if old_by_source[s] != new_by_source[s]
        ],
    }


def diff(old: BundleManifest, new: BundleManifest) -> dict[str, Any]:
    """Compare two manifests and return differences.

    Coordinates are compared as full ``group:artifact:version`` values. A
    module present in exactly one version on each side is reported under
    ``changed``; when either side holds several versions of a module, the
    differing versions are listed under ``added``/``removed``. Relocation
    rules are compared by source prefix.

    Args:
        old: The previous manifest.
        new: The manifest to compare against (typically the newer one).

    Returns:
        Dict with keys 'embed', 'excluded', 'external', 'rules' (each
        holding 'added', 'removed', 'changed'), 'relocate' (with 'added',
        'removed' name pairs) and 'identical'.
    """
    old_pairs = {(e.original, e.rewritten) for e in old.relocate}
    new_pairs = {(e.original, e.rewritten) for e in new.relocate}

    result: dict[str, Any] = {
        "embed": _section_diff(old.embed, new.embed),
        "excluded": _section_diff(old.excluded, new.excluded),
        "external": _section_diff(old.external, new.external),
        "relocate": {
            "added": [list(p) for p in sorted(new_pairs - old_pairs)],
            "removed": [list(p) for p in sorted(old_pairs - new_pairs)],
        },
        "rules": _rules_diff(old.rules, new.rules),
    }
    result["identical"] = not any(
        section[key]
        for section in result.values()
        for key in section
    )
    return result
