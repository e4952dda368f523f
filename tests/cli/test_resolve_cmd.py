"""Tests for ``shadeplan resolve`` command.

Verifies:
    - Manifests are written per target into the output directory.
    - ``--target`` restricts resolution and rejects unknown names.
    - JSON output carries one manifest per target.
    - Exit codes 0 / 1 / 2.
"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from shadeplan.cli.main import cli
from shadeplan.core.manifest import read


class TestResolveSuccess:
    """Tests for descriptors whose targets all resolve."""

    def test_writes_manifests(self, runner: CliRunner, descriptor_file: Path) -> None:
        """Each target gets ``<target>.bundle.json`` in the output directory."""
        out = descriptor_file.parent / "out"
        result = runner.invoke(cli, ["resolve", str(descriptor_file), "-o", str(out)])
        assert result.exit_code == 0
        assert (out / "velocity.bundle.json").exists()
        assert (out / "fabric.bundle.json").exists()
        assert read(out / "fabric.bundle.json").target == "fabric"

    def test_default_output_dir(self, runner: CliRunner, descriptor_file: Path) -> None:
        result = runner.invoke(cli, ["resolve", str(descriptor_file)])
        assert result.exit_code == 0
        assert (descriptor_file.parent / "bundles" / "velocity.bundle.json").exists()

    def test_text_output_mentions_targets(
        self, runner: CliRunner, descriptor_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(descriptor_file)])
        assert "velocity" in result.output
        assert "Manifest written to" in result.output

    def test_json_output(self, runner: CliRunner, descriptor_file: Path) -> None:
        """JSON output maps target name to its emitted manifest."""
        result = runner.invoke(
            cli, ["resolve", str(descriptor_file), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert set(data) == {"velocity", "fabric"}
        assert data["fabric"]["summary"]["external"] == 1

    def test_select_one_target(self, runner: CliRunner, descriptor_file: Path) -> None:
        out = descriptor_file.parent / "out"
        result = runner.invoke(
            cli, ["resolve", str(descriptor_file), "-t", "fabric", "-o", str(out)]
        )
        assert result.exit_code == 0
        assert (out / "fabric.bundle.json").exists()
        assert not (out / "velocity.bundle.json").exists()

    def test_parallel_jobs_same_manifests(
        self, runner: CliRunner, descriptor_file: Path
    ) -> None:
        """Resolving on a thread pool writes byte-identical manifests."""
        seq = descriptor_file.parent / "seq"
        par = descriptor_file.parent / "par"
        runner.invoke(cli, ["resolve", str(descriptor_file), "-o", str(seq)])
        result = runner.invoke(
            cli, ["resolve", str(descriptor_file), "-o", str(par), "-j", "4"]
        )
        assert result.exit_code == 0
        for name in ("velocity.bundle.json", "fabric.bundle.json"):
            assert (seq / name).read_text() == (par / name).read_text()


class TestResolveDetail:
    """Selecting targets adds a per-dependency view."""

    def test_selected_target_shows_decisions(
        self, runner: CliRunner, descriptor_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(descriptor_file), "-t", "velocity"])
        assert result.exit_code == 0
        assert "Bundle Manifest" in result.output
        assert "Relocations" in result.output

    def test_no_detail_without_selection(
        self, runner: CliRunner, descriptor_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(descriptor_file)])
        assert "Bundle Manifest" not in result.output


class TestResolveFailures:
    """Tests for exit codes 1 and 2."""

    def test_invalid_target_exits_1(
        self, runner: CliRunner, partly_invalid_descriptor: Path
    ) -> None:
        """A broken target fails alone; the valid one is still written."""
        result = runner.invoke(cli, ["resolve", str(partly_invalid_descriptor)])
        assert result.exit_code == 1
        bundles = partly_invalid_descriptor.parent / "bundles"
        assert (bundles / "velocity.bundle.json").exists()
        assert not (bundles / "spigot.bundle.json").exists()
        assert "FAILED" in result.output

    def test_malformed_descriptor_exits_2(
        self, runner: CliRunner, malformed_descriptor: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(malformed_descriptor)])
        assert result.exit_code == 2
        assert "Error" in result.output

    def test_unknown_target_exits_2(
        self, runner: CliRunner, descriptor_file: Path
    ) -> None:
        result = runner.invoke(cli, ["resolve", str(descriptor_file), "-t", "paper"])
        assert result.exit_code == 2
        assert "paper" in result.output

    def test_missing_descriptor(self, runner: CliRunner, tmp_path: Path) -> None:
        """Click rejects a path that does not exist."""
        result = runner.invoke(cli, ["resolve", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2


class TestResolveVerbosity:
    """Logging flags on the command group."""

    def test_verbose_logs_inclusions(
        self, runner: CliRunner, descriptor_file: Path
    ) -> None:
        result = runner.invoke(cli, ["-vv", "resolve", str(descriptor_file)])
        assert result.exit_code == 0
        assert "Including dependency via bundle" in result.output
