"""Relocation rule data types.

A ``RelocationRule`` rewrites a package prefix to a new namespace. Names
that start with one of the rule's exceptions keep their original package
even though they also start with the source prefix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NamespaceMode(Enum):
    """How a relocation destination is namespaced.

    - **SHARED**: ``<namespace>.shaded.<prefix>``; identical on every
      target, for code shared between all bundles.
    - **TARGET**: ``<namespace>.platform.<target>.shaded.<prefix>``; unique
      per target, for bundles that can be loaded side by side on one host.
    """

    SHARED = "shared"
    TARGET = "target"


def destination_for(
    prefix: str, namespace: str, target: str, mode: NamespaceMode
) -> str:
    """Compute the relocated prefix for *prefix* under the given mode."""
    if mode is NamespaceMode.TARGET:
        return f"{namespace}.platform.{target}.shaded.{prefix}"
    return f"{namespace}.shaded.{prefix}"


@dataclass(frozen=True)
class RelocationRule:
    """A package-prefix rewrite with sub-prefix exceptions.

    Attributes:
        source_prefix: Prefix of fully-qualified names to relocate
            (e.g., "net.kyori").
        destination_prefix: Replacement prefix (e.g.,
            "org.geysermc.shaded.net.kyori").
        exceptions: Prefixes nested under ``source_prefix`` that are left
            in place.
    """

    source_prefix: str
    destination_prefix: str
    exceptions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.exceptions, frozenset):
            object.__setattr__(self, "exceptions", frozenset(self.exceptions))

    @property
    def invalid_exceptions(self) -> list[str]:
        """Exceptions that are not nested under the source prefix, sorted."""
        return sorted(
            e for e in self.exceptions if not e.startswith(self.source_prefix)
        )

    def with_exceptions(self, extra: frozenset[str] | set[str]) -> RelocationRule:
        """Return a copy with *extra* added to the exceptions."""
        return RelocationRule(
            self.source_prefix,
            self.destination_prefix,
            self.exceptions | frozenset(extra),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "source": self.source_prefix,
            "destination": self.destination_prefix,
            "exceptions": sorted(self.exceptions),
        }
