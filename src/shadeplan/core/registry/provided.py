"""Per-target registry of host-provided dependency patterns.

The registry records which dependencies the host runtime of one target
already supplies. It is populated during the configuration phase and
consulted once when the target is resolved.

Storage follows the serialized form used by build scripts: each pattern is
keyed by its ``group:artifact:version`` string with inactive fields blanked,
so registering an identical pattern twice leaves the registry unchanged.

The registry is additive only. There is no removal operation, and once the
owning target has been resolved the registry is sealed: further
registrations raise ``PhaseViolation``.
"""

from __future__ import annotations

import logging

from shadeplan.core.coordinate import (
    ALL_FIELDS,
    Coordinate,
    ExclusionPattern,
    matches,
)
from shadeplan.exceptions import PhaseViolation

logger = logging.getLogger(__name__)


class ProvidedRegistry:
    """Set of exclusion patterns for a single target.

    Example::

        registry = ProvidedRegistry("velocity")
        registry.register("io.netty", "netty-handler")
        registry.register("com.google.code.gson", ".*")
        registry.is_provided(Coordinate("io.netty", "netty-handler", "4.1.66"))  # True

    Attributes:
        target: Name of the owning target, used in error messages.
    """

    def __init__(self, target: str) -> None:
        self.target = target
        self._patterns: dict[str, ExclusionPattern] = {}
        self._sealed = False

    # -- Configuration phase ------------------------------------------------

    def register(
        self,
        group: str,
        artifact: str,
        version: str = "",
        mask: int | None = None,
    ) -> ExclusionPattern:
        """Mark dependencies matching the given fields as host-provided.

        Args:
            group: Group text; may contain the ``.*`` wildcard token.
            artifact: Artifact text; may contain ``.*``.
            version: Version text; empty means any version.
            mask: Three-bit activity mask (group=0b100, artifact=0b010,
                version=0b001). None activates every supplied field.

        Returns:
            The stored ``ExclusionPattern`` (the existing one if an
            equivalent pattern was registered before).

        Raises:
            PhaseViolation: If the owning target has already been resolved.
            ValueError: If *mask* is outside 0..0b111.
        """
        pattern = ExclusionPattern(
            group, artifact, version, ALL_FIELDS if mask is None else mask
        )
        return self.add(pattern)

    def register_notation(self, notation: str, mask: int | None = None) -> ExclusionPattern:
        """Register a pattern written as ``group:artifact[:version]``."""
        coordinate = Coordinate.parse(notation)
        return self.register(
            coordinate.group, coordinate.artifact, coordinate.version, mask
        )

    def add(self, pattern: ExclusionPattern) -> ExclusionPattern:
        """Add a pre-built pattern. Idempotent on the pattern key."""
        if self._sealed:
            raise PhaseViolation(
                f"cannot register provided pattern {pattern.key!r} after resolve",
                target=self.target,
            )
        existing = self._patterns.get(pattern.key)
        if existing is not None:
            return existing
        self._patterns[pattern.key] = pattern
        logger.debug("%s: provided %s", self.target, pattern.key)
        return pattern

    def seal(self) -> None:
        """End the configuration phase. Called by the owning profile."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        """True once the owning target has been resolved."""
        return self._sealed

    # -- Queries ------------------------------------------------------------

    def is_provided(self, coordinate: Coordinate) -> bool:
        """Return True if ANY registered pattern matches *coordinate*."""
        return any(matches(coordinate, p) for p in self._patterns.values())

    def matching(self, coordinate: Coordinate) -> list[ExclusionPattern]:
        """Return every registered pattern matching *coordinate*, sorted by key."""
        return [
            self._patterns[key]
            for key in sorted(self._patterns)
            if matches(coordinate, self._patterns[key])
        ]

    @property
    def patterns(self) -> list[ExclusionPattern]:
        """Return all registered patterns sorted by key."""
        return [self._patterns[key] for key in sorted(self._patterns)]

    @property
    def keys(self) -> list[str]:
        """Return the sorted serialized pattern keys."""
        return sorted(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, ExclusionPattern):
            key = key.key
        return key in self._patterns

    def __repr__(self) -> str:
        return f"ProvidedRegistry({self.target!r}, patterns={len(self)})"
