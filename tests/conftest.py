"""Shared fixtures for shadeplan tests."""

from __future__ import annotations

import pathlib

import pytest

from shadeplan.core.profile import TargetProfile
from tests.helpers import NAMESPACE, SAMPLE_DESCRIPTOR


@pytest.fixture
def profile() -> TargetProfile:
    """A fresh target profile that bundles transitive dependencies."""
    return TargetProfile("velocity", NAMESPACE, include_transitive=True)


@pytest.fixture
def descriptor_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the sample two-target descriptor to a temporary directory."""
    path = tmp_path / "targets.yaml"
    path.write_text(SAMPLE_DESCRIPTOR)
    return path
