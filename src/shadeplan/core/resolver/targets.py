"""Resolving many targets with target-scoped failures.

Each ``TargetJob`` bundles a profile with its graph and already-shaded
set. ``resolve_targets`` resolves every job and reports one
``TargetOutcome`` per target: either a manifest or the ``ShadePlanError``
that aborted that target. A failing target never prevents the others
from resolving; whether to abort the whole build is the caller's call.

Profiles share no state, so jobs may run on a thread pool. The outcome
is the same as sequential resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.profile import TargetProfile
from shadeplan.core.resolver.models import BundleManifest, ResolvedDependency
from shadeplan.core.resolver.resolver import BundleResolver
from shadeplan.exceptions import ShadePlanError

logger = logging.getLogger(__name__)


@dataclass
class TargetJob:
    """Everything needed to resolve one target."""

    profile: TargetProfile
    graph: list[ResolvedDependency] = field(default_factory=list)
    already_shaded: set[Coordinate] = field(default_factory=set)

    @property
    def name(self) -> str:
        return self.profile.name


@dataclass(frozen=True)
class TargetOutcome:
    """Result of resolving one target.

    Exactly one of ``manifest`` and ``error`` is set.
    """

    target: str
    manifest: BundleManifest | None = None
    error: ShadePlanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_job(job: TargetJob, resolver: BundleResolver | None = None) -> TargetOutcome:
    """Resolve one job, capturing a target-scoped ``ShadePlanError``."""
    resolver = resolver or BundleResolver()
    try:
        manifest = resolver.resolve(job.profile, job.graph, job.already_shaded)
    except ShadePlanError as exc:
        logger.error("Target %s failed: %s", job.name, exc)
        return TargetOutcome(target=job.name, error=exc)
    return TargetOutcome(target=job.name, manifest=manifest)


def resolve_targets(
    jobs: Iterable[TargetJob],
    max_workers: int | None = None,
) -> dict[str, TargetOutcome]:
    """Resolve every job and return outcomes keyed by target name.

    Args:
        jobs: Jobs to resolve. Target names must be unique.
        max_workers: Thread pool size. None or 1 resolves sequentially.

    Returns:
        Mapping of target name to ``TargetOutcome``, in job order.

    Raises:
        ValueError: If two jobs share a target name.
    """
    job_list = list(jobs)
    names = [job.name for job in job_list]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate target names: {', '.join(duplicates)}")

    resolver = BundleResolver()
    if max_workers is None or max_workers <= 1:
        outcomes = [resolve_job(job, resolver) for job in job_list]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(lambda j: resolve_job(j, resolver), job_list))

    return {outcome.target: outcome for outcome in outcomes}
