"""Shared fixtures for CLI tests.

Provides a Click runner and descriptors with broken targets or a broken
document for exercising the exit codes.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def partly_invalid_descriptor(tmp_path: Path) -> Path:
    """A descriptor where ``spigot`` declares a non-nested exception."""
    path = tmp_path / "targets.yaml"
    path.write_text(
        "namespace: org.example\n"
        "targets:\n"
        "  velocity:\n"
        "    dependencies: ['org.yaml:snakeyaml:2.0']\n"
        "  spigot:\n"
        "    relocate:\n"
        "      - {prefix: net.kyori, except: [org.slf4j]}\n"
    )
    return path


@pytest.fixture
def malformed_descriptor(tmp_path: Path) -> Path:
    """A descriptor with no targets at all."""
    path = tmp_path / "empty.yaml"
    path.write_text("namespace: org.example\n")
    return path
