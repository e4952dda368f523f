"""Coordinates, exclusion patterns and the coordinate matcher.

Submodules:
    models   -- Coordinate, ExclusionPattern, FieldState and mask bits
    matcher  -- matches() and field_matches()
"""

from shadeplan.core.coordinate.models import (
    ALL_FIELDS,
    ARTIFACT_BIT,
    GROUP_BIT,
    MODULE_ONLY,
    VERSION_BIT,
    WILDCARD_TOKEN,
    Coordinate,
    ExclusionPattern,
    FieldState,
)
from shadeplan.core.coordinate.matcher import field_matches, matches

__all__ = [
    "ALL_FIELDS",
    "ARTIFACT_BIT",
    "GROUP_BIT",
    "MODULE_ONLY",
    "VERSION_BIT",
    "WILDCARD_TOKEN",
    "Coordinate",
    "ExclusionPattern",
    "FieldState",
    "field_matches",
    "matches",
]
