"""Coordinate matching against exclusion patterns.

A coordinate matches a pattern iff every *active* field of the pattern
accepts the corresponding coordinate field:

- INACTIVE fields (cleared bit or empty text) accept anything.
- WILDCARD fields accept any text their glob fully matches.
- EXACT fields accept only an identical string.
"""

from __future__ import annotations

from shadeplan.core.coordinate.models import Coordinate, ExclusionPattern, FieldState


def field_matches(pattern: ExclusionPattern, name: str, value: str) -> bool:
    """Check a single coordinate field against the named pattern field."""
    state = pattern.state(name)
    if state is FieldState.INACTIVE:
        return True
    if state is FieldState.WILDCARD:
        glob = pattern.glob(name)
        return glob is not None and glob.fullmatch(value) is not None
    return getattr(pattern, name) == value


def matches(coordinate: Coordinate, pattern: ExclusionPattern) -> bool:
    """Return True if *coordinate* is covered by *pattern*.

    Args:
        coordinate: The resolved artifact to test.
        pattern: The exclusion pattern.

    Returns:
        True when every active field of the pattern accepts the
        coordinate's value for that field.
    """
    return (
        field_matches(pattern, "group", coordinate.group)
        and field_matches(pattern, "artifact", coordinate.artifact)
        and field_matches(pattern, "version", coordinate.version)
    )
