"""Tests for manifest deserialization and diffing."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.relocation import RelocationRule
from shadeplan.core.manifest import diff, emit, from_json, load, read, to_json
from shadeplan.core.profile import TargetProfile
from shadeplan.core.resolver import BundleManifest, ExclusionReason, resolve
from shadeplan.exceptions import ManifestError
from tests.helpers import NAMESPACE, dep


def _manifest(buffer_version: str = "4.1.66", with_yaml: bool = True) -> BundleManifest:
    profile = TargetProfile("velocity", NAMESPACE, include_transitive=True)
    profile.provided("io.netty", "netty-handler")
    profile.relocate("org.yaml")
    graph = [
        dep("io.netty:netty-handler:4.1.66"),
        dep(f"io.netty:netty-buffer:{buffer_version}", direct=False,
            via="io.netty:netty-handler:4.1.66"),
    ]
    if with_yaml:
        graph.append(dep("org.yaml:snakeyaml:2.0", packages=("org.yaml.snakeyaml",)))
    return resolve(profile, graph)


class TestLoad:
    """Rebuilding a manifest from emitted data."""

    def test_load_restores_manifest(self) -> None:
        original = _manifest()
        assert load(emit(original)) == original

    def test_from_json_and_read(self, tmp_path: Path) -> None:
        original = _manifest()
        path = tmp_path / "m.json"
        path.write_text(to_json(original), encoding="utf-8")
        assert from_json(to_json(original)) == original
        assert read(path) == original

    def test_reasons_restored(self) -> None:
        restored = load(emit(_manifest()))
        handler = Coordinate("io.netty", "netty-handler", "4.1.66")
        assert restored.exclusion_reasons[handler] is ExclusionReason.PROVIDED

    def test_wrong_format_rejected(self) -> None:
        with pytest.raises(ManifestError):
            load({"format": "something-else"})

    def test_invalid_json_rejected(self) -> None:
        with pytest.raises(ManifestError):
            from_json("{not json")

    def test_missing_field_rejected(self) -> None:
        data = emit(_manifest())
        del data["embed"][0]["artifact"]
        with pytest.raises(ManifestError, match="artifact"):
            load(data)

    def test_unknown_reason_rejected(self) -> None:
        data = emit(_manifest())
        data["excluded"][0]["reason"] = "because"
        with pytest.raises(ManifestError):
            load(data)


class TestDiff:
    """Comparing two manifests."""

    def test_identical(self) -> None:
        result = diff(_manifest(), _manifest())
        assert result["identical"] is True

    def test_version_change_reported_as_changed(self) -> None:
        result = diff(_manifest(), _manifest(buffer_version="4.1.100"))
        assert result["identical"] is False
        assert result["embed"]["changed"] == [
            {"module": "io.netty:netty-buffer", "old": "4.1.66", "new": "4.1.100"},
        ]
        assert result["embed"]["added"] == []
        assert result["embed"]["removed"] == []

    def test_removed_dependency_and_relocation(self) -> None:
        result = diff(_manifest(), _manifest(with_yaml=False))
        assert result["embed"]["removed"] == ["org.yaml:snakeyaml:2.0"]
        assert result["relocate"]["removed"] == [[
            "org.yaml.snakeyaml", "org.geysermc.geyser.shaded.org.yaml.snakeyaml",
        ]]

    def test_diff_is_json_serializable(self) -> None:
        json.dumps(diff(_manifest(), _manifest(with_yaml=False)))


def _embedding(*notations: str) -> BundleManifest:
    return BundleManifest(
        target="velocity",
        embed=frozenset(Coordinate.parse(n) for n in notations),
    )


def _with_rules(*rules: RelocationRule) -> BundleManifest:
    return BundleManifest(target="velocity", rules=rules)


class TestDiffMultipleVersions:
    """Modules embedded in several versions are compared per coordinate."""

    def test_dropping_one_of_two_versions(self) -> None:
        result = diff(_embedding("a:b:1", "a:b:2"), _embedding("a:b:2"))
        assert result["identical"] is False
        assert result["embed"] == {"added": [], "removed": ["a:b:1"], "changed": []}

    def test_adding_a_second_version(self) -> None:
        result = diff(_embedding("a:b:1"), _embedding("a:b:1", "a:b:2"))
        assert result["embed"] == {"added": ["a:b:2"], "removed": [], "changed": []}

    def test_swapping_versions_of_a_multi_version_module(self) -> None:
        """With two versions on one side nothing is paired as a bump."""
        result = diff(_embedding("a:b:1", "a:b:2"), _embedding("a:b:3"))
        assert result["embed"] == {
            "added": ["a:b:3"],
            "removed": ["a:b:1", "a:b:2"],
            "changed": [],
        }

    def test_single_version_bump_still_changed(self) -> None:
        result = diff(_embedding("a:b:1", "c:d:1"), _embedding("a:b:2", "c:d:1"))
        assert result["embed"] == {
            "added": [],
            "removed": [],
            "changed": [{"module": "a:b", "old": "1", "new": "2"}],
        }


class TestDiffRules:
    """Relocation rules are part of the comparison."""

    def test_destination_change(self) -> None:
        result = diff(
            _with_rules(RelocationRule("io.netty", "x.io.netty")),
            _with_rules(RelocationRule("io.netty", "y.io.netty")),
        )
        assert result["identical"] is False
        assert result["rules"]["changed"] == [{
            "source": "io.netty",
            "old": {"source": "io.netty", "destination": "x.io.netty", "exceptions": []},
            "new": {"source": "io.netty", "destination": "y.io.netty", "exceptions": []},
        }]

    def test_exception_change(self) -> None:
        result = diff(
            _with_rules(RelocationRule("net.kyori", "x.net.kyori")),
            _with_rules(RelocationRule("net.kyori", "x.net.kyori", frozenset({"net.kyori.a"}))),
        )
        assert result["identical"] is False
        assert len(result["rules"]["changed"]) == 1

    def test_added_and_removed_rules(self) -> None:
        result = diff(
            _with_rules(RelocationRule("io.netty", "x.io.netty")),
            _with_rules(RelocationRule("org.yaml", "x.org.yaml")),
        )
        assert [r["source"] for r in result["rules"]["added"]] == ["org.yaml"]
        assert [r["source"] for r in result["rules"]["removed"]] == ["io.netty"]

    def test_same_rules_identical(self) -> None:
        rule = RelocationRule("io.netty", "x.io.netty", frozenset({"io.netty.a"}))
        assert diff(_with_rules(rule), _with_rules(rule))["identical"] is True
