"""Coordinates and exclusion patterns over (group, artifact, version) triples.

A ``Coordinate`` identifies one resolved artifact. An ``ExclusionPattern``
is a coordinate whose fields are individually switched on or off by a
three-bit mask:

    group    = 0b100
    artifact = 0b010
    version  = 0b001

Each pattern field is in one of three states (``FieldState``):

- **INACTIVE**: the mask bit is cleared, or the text is empty. Never
  compared; always matches.
- **WILDCARD**: the text contains the reserved ``.*`` token. ``.*`` on its
  own matches anything; mixed with literal text (``io.netty.*``) it acts
  as a glob over the whole field.
- **EXACT**: any other text. Compared by string equality.

Empty text is treated as inactive whatever the bit says, so a pattern
built by blanking fields behaves the same as one built by clearing bits.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


GROUP_BIT: int = 0b100
ARTIFACT_BIT: int = 0b010
VERSION_BIT: int = 0b001

ALL_FIELDS: int = GROUP_BIT | ARTIFACT_BIT | VERSION_BIT
MODULE_ONLY: int = GROUP_BIT | ARTIFACT_BIT

WILDCARD_TOKEN: str = ".*"


class FieldState(Enum):
    """Activity state of a single pattern field."""

    INACTIVE = "inactive"
    EXACT = "exact"
    WILDCARD = "wildcard"


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class Coordinate:
    """A (group, artifact, version) triple identifying one artifact.

    Any field may be empty, meaning "unspecified". Instances order by
    group, then artifact, then version, which is the order every emitted
    manifest uses.

    Attributes:
        group: Maven-style group id (e.g., "io.netty").
        artifact: Artifact id (e.g., "netty-handler").
        version: Resolved version string, or "" when not known.
    """

    group: str
    artifact: str
    version: str = ""

    @classmethod
    def parse(cls, notation: str) -> Coordinate:
        """Parse ``group:artifact[:version]`` notation.

        Args:
            notation: Dependency notation as written in build scripts.

        Returns:
            The parsed ``Coordinate``.

        Raises:
            ValueError: If the notation does not have two or three parts.
        """
        parts = notation.strip().split(":")
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid coordinate notation: {notation!r}")
        return cls(*(p.strip() for p in parts))

    @property
    def module(self) -> tuple[str, str]:
        """Return the version-less ``(group, artifact)`` pair."""
        return (self.group, self.artifact)

    @property
    def is_resolvable(self) -> bool:
        """True if both group and artifact are present."""
        return bool(self.group) and bool(self.artifact)

    @property
    def notation(self) -> str:
        """Render as ``group:artifact[:version]``."""
        if self.version:
            return f"{self.group}:{self.artifact}:{self.version}"
        return f"{self.group}:{self.artifact}"

    def __str__(self) -> str:
        return self.notation


# ---------------------------------------------------------------------------
# ExclusionPattern
# ---------------------------------------------------------------------------


def _field_state(text: str, active: bool) -> FieldState:
    if not active or not text:
        return FieldState.INACTIVE
    if WILDCARD_TOKEN in text:
        return FieldState.WILDCARD
    return FieldState.EXACT


def _compile_glob(text: str) -> re.Pattern[str]:
    """Compile a field containing ``.*`` tokens; all other text is literal."""
    parts = [re.escape(p) for p in text.split(WILDCARD_TOKEN)]
    return re.compile(".*".join(parts), re.DOTALL)


@dataclass(frozen=True)
class ExclusionPattern:
    """A coordinate pattern with per-field activity bits.

    Attributes:
        group: Group text (exact value, wildcard expression or "").
        artifact: Artifact text.
        version: Version text.
        mask: Three-bit activity mask; defaults to all fields active.
    """

    group: str
    artifact: str
    version: str = ""
    mask: int = ALL_FIELDS
    _globs: dict[str, re.Pattern[str]] = field(
        default_factory=dict, init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= ALL_FIELDS:
            raise ValueError(f"Exclusion mask out of range: {self.mask!r}")
        for name, text in self._fields():
            if self.state(name) is FieldState.WILDCARD:
                self._globs[name] = _compile_glob(text)

    def _fields(self) -> tuple[tuple[str, str], ...]:
        return (
            ("group", self.group),
            ("artifact", self.artifact),
            ("version", self.version),
        )

    def state(self, name: str) -> FieldState:
        """Return the ``FieldState`` of the named field."""
        bit = {"group": GROUP_BIT, "artifact": ARTIFACT_BIT, "version": VERSION_BIT}[name]
        return _field_state(getattr(self, name), bool(self.mask & bit))

    def glob(self, name: str) -> re.Pattern[str] | None:
        """Return the compiled glob for a WILDCARD field, else None."""
        return self._globs.get(name)

    @property
    def key(self) -> str:
        """Serialized ``group:artifact:version`` with inactive fields blanked.

        Two patterns with the same key match exactly the same coordinates.
        """
        blanked = [
            text if self.state(name) is not FieldState.INACTIVE else ""
            for name, text in self._fields()
        ]
        return ":".join(blanked)

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate, mask: int = ALL_FIELDS) -> ExclusionPattern:
        """Build a pattern from a coordinate and an activity mask."""
        return cls(coordinate.group, coordinate.artifact, coordinate.version, mask)

    def __str__(self) -> str:
        return self.key
