"""Relocation Planner: package-prefix rewrites with exceptions.

Submodules:
    models   -- RelocationRule, NamespaceMode, destination_for
    planner  -- RelocationPlan, apply, select_rule, validate_rule
"""

from shadeplan.core.relocation.models import (
    NamespaceMode,
    RelocationRule,
    destination_for,
)
from shadeplan.core.relocation.planner import (
    RelocationPlan,
    apply,
    select_rule,
    validate_rule,
)

__all__ = [
    "NamespaceMode",
    "RelocationPlan",
    "RelocationRule",
    "apply",
    "destination_for",
    "select_rule",
    "validate_rule",
]
