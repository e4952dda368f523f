"""Resolver input and output data types.

Inputs:
    ``ResolvedDependency`` -- one node of the externally resolved graph.

Outputs:
    ``BundleManifest`` -- the immutable per-target decision: what to embed,
    what to relocate and what to exclude.
    ``RelocationEntry`` -- one rewritten name inside an embedded artifact.
    ``ExclusionReason`` -- why a dependency was excluded.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.relocation import RelocationRule


@dataclass(frozen=True)
class ResolvedDependency:
    """A dependency from the resolved graph supplied by the build driver.

    Attributes:
        coordinate: The resolved artifact.
        is_direct: True for dependencies declared by the target itself.
        transitive_of: The dependency that pulled this one in, for
            transitive entries.
        packages: Package prefixes or fully-qualified class names contained
            in the artifact. Relocation is evaluated against these.
    """

    coordinate: Coordinate
    is_direct: bool = True
    transitive_of: Coordinate | None = None
    packages: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.packages, tuple):
            object.__setattr__(self, "packages", tuple(self.packages))


class ExclusionReason(Enum):
    """Why a dependency was left out of the bundle."""

    PROVIDED = "provided"
    SHADED = "shaded"


@dataclass(frozen=True, order=True)
class RelocationEntry:
    """A name inside an embedded artifact that relocation rewrote.

    Attributes:
        coordinate: The embedded artifact containing the name.
        original: Name before relocation.
        rewritten: Name after relocation.
    """

    coordinate: Coordinate
    original: str
    rewritten: str


def _frozen_mapping(data: Mapping | None) -> Mapping:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class BundleManifest:
    """The resolver's decision for one target.

    Attributes:
        target: Target name.
        embed: Dependencies bundled into the artifact.
        excluded: Dependencies left out because the host provides them or
            they were already shaded into the main artifact.
        relocate: Rewrites applied to names inside embedded artifacts.
        external: Transitive dependencies neither embedded nor excluded,
            left to the host's own dependency resolution.
        exclusion_reasons: Reason per excluded coordinate.
        via: Parent dependency per embedded transitive coordinate.
        rules: The target's relocation rules, sorted by source prefix.
    """

    target: str
    embed: frozenset[Coordinate] = field(default_factory=frozenset)
    excluded: frozenset[Coordinate] = field(default_factory=frozenset)
    relocate: tuple[RelocationEntry, ...] = ()
    external: frozenset[Coordinate] = field(default_factory=frozenset)
    exclusion_reasons: Mapping[Coordinate, ExclusionReason] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    via: Mapping[Coordinate, Coordinate] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    rules: tuple[RelocationRule, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "embed", frozenset(self.embed))
        object.__setattr__(self, "excluded", frozenset(self.excluded))
        object.__setattr__(self, "external", frozenset(self.external))
        object.__setattr__(self, "relocate", tuple(sorted(self.relocate)))
        object.__setattr__(
            self, "rules", tuple(sorted(self.rules, key=lambda r: r.source_prefix))
        )
        object.__setattr__(
            self, "exclusion_reasons", _frozen_mapping(self.exclusion_reasons)
        )
        object.__setattr__(self, "via", _frozen_mapping(self.via))

    def relocations_for(self, coordinate: Coordinate) -> list[RelocationEntry]:
        """Return the relocation entries of one embedded coordinate."""
        return [e for e in self.relocate if e.coordinate == coordinate]

    def rewrite_of(self, name: str) -> str | None:
        """Return the rewritten form of *name*, or None if it was not relocated."""
        for entry in self.relocate:
            if entry.original == name:
                return entry.rewritten
        return None
