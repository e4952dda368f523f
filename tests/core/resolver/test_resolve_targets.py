"""Tests for resolving many targets with target-scoped failures."""

from __future__ import annotations

import pytest

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.profile import TargetProfile
from shadeplan.core.resolver import TargetJob, resolve_job, resolve_targets
from shadeplan.exceptions import PhaseViolation, UnresolvedCoordinate
from tests.helpers import NAMESPACE, dep


def _job(name: str, *notations: str, provided: tuple[str, ...] = ()) -> TargetJob:
    profile = TargetProfile(name, NAMESPACE)
    for notation in provided:
        profile.registry.register_notation(notation)
    return TargetJob(profile=profile, graph=[dep(n) for n in notations])


class TestResolveTargets:
    """Outcomes per target, errors isolated."""

    def test_each_target_gets_outcome(self) -> None:
        outcomes = resolve_targets([
            _job("spigot", "a:b:1"),
            _job("velocity", "a:b:1", provided=("a:b",)),
        ])
        assert list(outcomes) == ["spigot", "velocity"]
        assert outcomes["spigot"].manifest.embed == {Coordinate("a", "b", "1")}
        assert outcomes["velocity"].manifest.excluded == {Coordinate("a", "b", "1")}

    def test_failing_target_does_not_stop_others(self) -> None:
        outcomes = resolve_targets([
            _job("broken", ":b:1"),
            _job("fine", "a:b:1"),
        ])
        assert not outcomes["broken"].ok
        assert isinstance(outcomes["broken"].error, UnresolvedCoordinate)
        assert outcomes["broken"].manifest is None
        assert outcomes["fine"].ok
        assert outcomes["fine"].manifest.embed == {Coordinate("a", "b", "1")}

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(ValueError, match="spigot"):
            resolve_targets([_job("spigot"), _job("spigot")])

    def test_thread_pool_matches_sequential(self) -> None:
        def jobs() -> list[TargetJob]:
            return [
                _job(f"t{i}", "a:b:1", "c:d:2", provided=(("a:b",) if i % 2 else ()))
                for i in range(8)
            ]

        sequential = resolve_targets(jobs())
        pooled = resolve_targets(jobs(), max_workers=4)
        assert {n: o.manifest for n, o in sequential.items()} == {
            n: o.manifest for n, o in pooled.items()
        }

    def test_resolve_job_captures_phase_violation(self) -> None:
        job = _job("spigot", "a:b:1")
        assert resolve_job(job).ok
        outcome = resolve_job(job)
        assert isinstance(outcome.error, PhaseViolation)
