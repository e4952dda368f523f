"""Bundle Resolver: per-target embed/exclude/relocate decisions.

Submodules:
    models    -- ResolvedDependency, BundleManifest, RelocationEntry, ExclusionReason
    resolver  -- BundleResolver and the resolve() shortcut
    targets   -- TargetJob, TargetOutcome, resolve_targets() for many targets
"""

from shadeplan.core.resolver.models import (
    BundleManifest,
    ExclusionReason,
    RelocationEntry,
    ResolvedDependency,
)
from shadeplan.core.resolver.resolver import BundleResolver, resolve
from shadeplan.core.resolver.targets import (
    TargetJob,
    TargetOutcome,
    resolve_job,
    resolve_targets,
)

__all__ = [
    "BundleManifest",
    "BundleResolver",
    "ExclusionReason",
    "RelocationEntry",
    "ResolvedDependency",
    "TargetJob",
    "TargetOutcome",
    "resolve",
    "resolve_job",
    "resolve_targets",
]
