"""Target profiles: one deployment target and its configuration.

A ``TargetProfile`` owns the ``ProvidedRegistry`` and ``RelocationPlan`` of a
single target. Profiles share no state, so any number of them can be built
and resolved independently and in any order.

Lifecycle
---------
1. **CONFIGURING**: ``provided``/``relocate`` calls populate the profile.
2. **RESOLVED**: entered by ``mark_resolved`` when the bundle resolver
   consumes the profile. Registry and plan are sealed; further mutation,
   or a second resolve, raises ``PhaseViolation``.
"""

from __future__ import annotations

from enum import Enum

from shadeplan.core.coordinate import ExclusionPattern
from shadeplan.core.registry import ProvidedRegistry
from shadeplan.core.relocation import NamespaceMode, RelocationPlan, RelocationRule
from shadeplan.exceptions import PhaseViolation


class Phase(Enum):
    """Lifecycle phase of a target profile."""

    CONFIGURING = "configuring"
    RESOLVED = "resolved"


class TargetProfile:
    """A deployment target with its host-provided and relocation settings.

    Attributes:
        name: Target identifier (e.g., "velocity", "fabric").
        namespace: Base package for relocated code
            (e.g., "org.geysermc.geyser").
        include_transitive: Whether surviving transitive dependencies are
            bundled. When False only direct dependencies are embedded and
            transitives are left to the host's own dependency resolution.
        registry: The target's ``ProvidedRegistry``.
        plan: The target's ``RelocationPlan``.
    """

    def __init__(
        self,
        name: str,
        namespace: str,
        include_transitive: bool = False,
    ) -> None:
        if not name:
            raise ValueError("Target name must not be empty")
        self.name = name
        self.namespace = namespace
        self.include_transitive = include_transitive
        self.registry = ProvidedRegistry(name)
        self.plan = RelocationPlan(name, namespace)
        self._phase = Phase.CONFIGURING

    # -- Declarations -------------------------------------------------------

    def provided(
        self,
        group: str,
        artifact: str,
        version: str = "",
        mask: int | None = None,
    ) -> ExclusionPattern:
        """Declare a dependency the host already provides."""
        self._require_configuring("provided")
        return self.registry.register(group, artifact, version, mask)

    def relocate(
        self, prefix: str, mode: NamespaceMode = NamespaceMode.SHARED
    ) -> RelocationRule:
        """Declare a package prefix to relocate."""
        self._require_configuring("relocate")
        return self.plan.relocate(prefix, mode)

    def relocate_with_exception(
        self,
        prefix: str,
        exception: str,
        mode: NamespaceMode = NamespaceMode.SHARED,
    ) -> RelocationRule:
        """Declare a package prefix to relocate, keeping *exception* in place."""
        self._require_configuring("relocate")
        return self.plan.relocate_with_exception(prefix, exception, mode)

    # -- Phase --------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    def mark_resolved(self) -> None:
        """Transition to RESOLVED and seal registry and plan.

        Raises:
            PhaseViolation: If the profile was already resolved.
        """
        if self._phase is Phase.RESOLVED:
            raise PhaseViolation("target has already been resolved", target=self.name)
        self._phase = Phase.RESOLVED
        self.registry.seal()
        self.plan.seal()

    def _require_configuring(self, operation: str) -> None:
        if self._phase is not Phase.CONFIGURING:
            raise PhaseViolation(
                f"{operation}() called after resolve", target=self.name
            )

    def __repr__(self) -> str:
        return (
            f"TargetProfile({self.name!r}, namespace={self.namespace!r}, "
            f"include_transitive={self.include_transitive})"
        )
