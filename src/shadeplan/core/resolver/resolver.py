"""Bundle resolution: decide what one target embeds, excludes and relocates.

Algorithm
---------
Given a target profile, the resolved dependency graph and the set of
coordinates already shaded into the main artifact:

1. Every dependency must have a group and an artifact, otherwise
   ``UnresolvedCoordinate`` aborts the target.
2. A dependency is **excluded** if the target's Provided Registry matches
   it, or its ``(group, artifact)`` is already shaded. Shaded modules must
   not be included a second time as a nested bundle.
3. Surviving direct dependencies are **embedded**.
4. Surviving transitive dependencies are embedded only if the target has
   transitive inclusion enabled; otherwise they are left **external**.
5. Every package listed by an embedded dependency is run through the
   target's relocation rules; each name that changes is recorded.

A coordinate listed both as direct and as transitive is treated as direct.
Exclusion always takes precedence over embedding.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.profile import TargetProfile
from shadeplan.core.relocation import apply
from shadeplan.core.resolver.models import (
    BundleManifest,
    ExclusionReason,
    RelocationEntry,
    ResolvedDependency,
)
from shadeplan.exceptions import UnresolvedCoordinate

logger = logging.getLogger(__name__)


class _Node:
    """Dependencies of the graph collapsed by coordinate."""

    __slots__ = ("coordinate", "is_direct", "transitive_of", "packages")

    def __init__(self, coordinate: Coordinate) -> None:
        self.coordinate = coordinate
        self.is_direct = False
        self.transitive_of: Coordinate | None = None
        self.packages: set[str] = set()


def _collapse(graph: Iterable[ResolvedDependency], target: str) -> list[_Node]:
    nodes: dict[Coordinate, _Node] = {}
    ordered = sorted(
        graph, key=lambda d: (d.coordinate, not d.is_direct, d.transitive_of or Coordinate("", ""))
    )
    for dep in ordered:
        coordinate = dep.coordinate
        if not coordinate.is_resolvable:
            raise UnresolvedCoordinate(
                f"dependency {coordinate.notation!r} has no group or artifact",
                target=target,
            )
        node = nodes.get(coordinate)
        if node is None:
            node = nodes[coordinate] = _Node(coordinate)
        if dep.is_direct:
            node.is_direct = True
        elif node.transitive_of is None:
            node.transitive_of = dep.transitive_of
        node.packages.update(dep.packages)
    return [nodes[c] for c in sorted(nodes)]


class BundleResolver:
    """Computes the ``BundleManifest`` of a target.

    The resolver itself is stateless; all per-target state lives in the
    ``TargetProfile``. Resolving a profile ends its configuration phase,
    so each profile can be resolved exactly once.
    """

    def resolve(
        self,
        target: TargetProfile,
        graph: Iterable[ResolvedDependency],
        already_shaded: Iterable[Coordinate] = (),
    ) -> BundleManifest:
        """Resolve one target.

        Args:
            target: The configured target profile.
            graph: The resolved dependency graph for the target.
            already_shaded: Coordinates merged into the main artifact by a
                separate shading declaration. Compared by
                ``(group, artifact)`` only.

        Returns:
            The immutable ``BundleManifest`` for the target.

        Raises:
            PhaseViolation: If the target was already resolved.
            UnresolvedCoordinate: If a dependency has no group or artifact.
            InvalidRelocationException: If a relocation rule has an
                exception outside its source prefix.
        """
        target.mark_resolved()
        target.plan.validate()

        nodes = _collapse(graph, target.name)
        shaded_modules = {c.module for c in already_shaded}
        rules = target.plan.rules

        embed: set[Coordinate] = set()
        excluded: set[Coordinate] = set()
        external: set[Coordinate] = set()
        reasons: dict[Coordinate, ExclusionReason] = {}
        via: dict[Coordinate, Coordinate] = {}
        relocations: list[RelocationEntry] = []

        for node in nodes:
            coordinate = node.coordinate

            if target.registry.is_provided(coordinate):
                excluded.add(coordinate)
                reasons[coordinate] = ExclusionReason.PROVIDED
                logger.debug("Not including %s for %s (provided)", coordinate, target.name)
                continue
            if coordinate.module in shaded_modules:
                excluded.add(coordinate)
                reasons[coordinate] = ExclusionReason.SHADED
                logger.debug("Not including %s for %s (shaded)", coordinate, target.name)
                continue

            if not node.is_direct:
                if node.transitive_of is None:
                    logger.warning(
                        "%s: transitive dependency %s has no parent",
                        target.name, coordinate,
                    )
                if not target.include_transitive:
                    external.add(coordinate)
                    continue
                if node.transitive_of is not None:
                    via[coordinate] = node.transitive_of

            embed.add(coordinate)
            logger.info("Including dependency via bundle for %s: %s", target.name, coordinate)

            for name in sorted(node.packages):
                rewritten = apply(name, rules)
                if rewritten != name:
                    relocations.append(RelocationEntry(coordinate, name, rewritten))

        return BundleManifest(
            target=target.name,
            embed=frozenset(embed),
            excluded=frozenset(excluded),
            relocate=tuple(relocations),
            external=frozenset(external),
            exclusion_reasons=reasons,
            via=via,
            rules=tuple(rules),
        )


def resolve(
    target: TargetProfile,
    graph: Iterable[ResolvedDependency],
    already_shaded: Iterable[Coordinate] = (),
) -> BundleManifest:
    """Shortcut for ``BundleResolver().resolve(...)``."""
    return BundleResolver().resolve(target, graph, already_shaded)
