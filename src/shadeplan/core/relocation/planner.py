"""Relocation planning and application.

``RelocationPlan`` collects the relocation rules of one target during the
configuration phase. ``apply`` rewrites a fully-qualified name under a list
of rules.

Rule selection
--------------
Several rules may have a source prefix matching the same name (``a.b`` and
``a.b.c`` both match ``a.b.c.D``). The rule with the **longest** source
prefix wins, independent of declaration order. When the winning rule has
an exception that is a prefix of the name, the name is returned unchanged;
there is no fallback to a shorter rule.

A plan never accepts a rule whose destination and a source prefix of the
plan (its own or another rule's) are prefixes of one another, so a
rewritten name is never rewritten again and ``apply`` is idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shadeplan.core.relocation.models import (
    NamespaceMode,
    RelocationRule,
    destination_for,
)
from shadeplan.exceptions import InvalidRelocationException, PhaseViolation

logger = logging.getLogger(__name__)


def select_rule(fqcn: str, rules: Iterable[RelocationRule]) -> RelocationRule | None:
    """Return the matching rule with the longest source prefix, or None."""
    best: RelocationRule | None = None
    for rule in rules:
        if not fqcn.startswith(rule.source_prefix):
            continue
        if best is None or len(rule.source_prefix) > len(best.source_prefix):
            best = rule
    return best


def apply(fqcn: str, rules: Iterable[RelocationRule]) -> str:
    """Relocate a fully-qualified name.

    Args:
        fqcn: Fully-qualified class or package name.
        rules: Relocation rules of the target.

    Returns:
        The rewritten name, or *fqcn* unchanged when no rule matches or an
        exception of the selected rule covers it.
    """
    rule = select_rule(fqcn, rules)
    if rule is None:
        return fqcn
    if any(fqcn.startswith(exc) for exc in rule.exceptions):
        return fqcn
    return rule.destination_prefix + fqcn[len(rule.source_prefix):]


def validate_rule(rule: RelocationRule, target: str | None = None) -> None:
    """Raise ``InvalidRelocationException`` if any exception is not nested."""
    bad = rule.invalid_exceptions
    if bad:
        raise InvalidRelocationException(
            f"relocation exception(s) {', '.join(repr(b) for b in bad)} "
            f"not nested under source prefix {rule.source_prefix!r}",
            target=target,
        )


class RelocationPlan:
    """Relocation rules declared for one target.

    Rules are keyed by source prefix. Declaring the same prefix again with
    the same destination merges the exceptions into the existing rule.

    Example::

        plan = RelocationPlan("velocity", "org.geysermc.geyser")
        plan.relocate("io.netty", NamespaceMode.TARGET)
        plan.relocate_with_exception("net.kyori", "net.kyori.adventure.text.logger")
        apply("net.kyori.adventure.Bar", plan.rules)
        # 'org.geysermc.geyser.shaded.net.kyori.adventure.Bar'
    """

    def __init__(self, target: str, namespace: str) -> None:
        self.target = target
        self.namespace = namespace
        self._rules: dict[str, RelocationRule] = {}
        self._sealed = False

    # -- Configuration phase ------------------------------------------------

    def relocate(
        self, prefix: str, mode: NamespaceMode = NamespaceMode.SHARED
    ) -> RelocationRule:
        """Relocate *prefix* into the target's shaded namespace."""
        destination = destination_for(prefix, self.namespace, self.target, mode)
        return self.add_rule(RelocationRule(prefix, destination))

    def relocate_with_exception(
        self,
        prefix: str,
        exception: str,
        mode: NamespaceMode = NamespaceMode.SHARED,
    ) -> RelocationRule:
        """Relocate *prefix* except names starting with *exception*.

        Raises:
            InvalidRelocationException: If *exception* does not start with
                *prefix*.
        """
        destination = destination_for(prefix, self.namespace, self.target, mode)
        return self.add_rule(
            RelocationRule(prefix, destination, frozenset({exception}))
        )

    def add_rule(self, rule: RelocationRule) -> RelocationRule:
        """Add a rule with an explicit destination.

        Returns:
            The stored rule (merged with an earlier rule for the same
            source prefix, if any).

        Raises:
            PhaseViolation: If the target has already been resolved.
            InvalidRelocationException: If an exception is not nested under
                the source prefix, or the prefix was already relocated to a
                different destination, or the destination overlaps a
                source prefix of the plan.
        """
        if self._sealed:
            raise PhaseViolation(
                f"cannot relocate {rule.source_prefix!r} after resolve",
                target=self.target,
            )
        if not rule.source_prefix:
            raise InvalidRelocationException(
                "relocation source prefix must not be empty", target=self.target
            )
        validate_rule(rule, self.target)
        self._check_reentry(rule)

        existing = self._rules.get(rule.source_prefix)
        if existing is not None:
            if existing.destination_prefix != rule.destination_prefix:
                raise InvalidRelocationException(
                    f"{rule.source_prefix!r} already relocated to "
                    f"{existing.destination_prefix!r}, "
                    f"cannot relocate to {rule.destination_prefix!r}",
                    target=self.target,
                )
            rule = existing.with_exceptions(rule.exceptions)

        self._rules[rule.source_prefix] = rule
        logger.debug(
            "%s: relocate %s -> %s", self.target,
            rule.source_prefix, rule.destination_prefix,
        )
        return rule

    def _check_reentry(self, rule: RelocationRule) -> None:
        others = [r for p, r in self._rules.items() if p != rule.source_prefix]
        pairs = [(rule.destination_prefix, rule.source_prefix)]
        for other in others:
            pairs.append((rule.destination_prefix, other.source_prefix))
            pairs.append((other.destination_prefix, rule.source_prefix))
        for destination, source in pairs:
            if destination.startswith(source) or source.startswith(destination):
                raise InvalidRelocationException(
                    f"destination {destination!r} overlaps source prefix {source!r}; "
                    "relocated names would be relocated again",
                    target=self.target,
                )

    def seal(self) -> None:
        """End the configuration phase. Called by the owning profile."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    # -- Queries ------------------------------------------------------------

    @property
    def rules(self) -> list[RelocationRule]:
        """Return the plan's rules sorted by source prefix."""
        return [self._rules[p] for p in sorted(self._rules)]

    def validate(self) -> None:
        """Re-check every rule; raises ``InvalidRelocationException``."""
        for rule in self.rules:
            validate_rule(rule, self.target)

    def apply(self, fqcn: str) -> str:
        """Relocate *fqcn* under this plan's rules."""
        return apply(fqcn, self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RelocationPlan({self.target!r}, rules={len(self)})"
