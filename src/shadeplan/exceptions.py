"""shadeplan exception hierarchy.

All public exceptions inherit from ShadePlanError, giving callers a single
base class to catch when they want to handle any shadeplan-specific failure
without swallowing unrelated errors.

Errors raised while configuring or resolving a target carry that target's
name so a build driver can decide whether to abort the whole build or skip
only the offending target.
"""

from __future__ import annotations


class ShadePlanError(Exception):
    """Base exception for all shadeplan errors."""

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        if target:
            message = f"[{target}] {message}"
        super().__init__(message)


class ConfigurationError(ShadePlanError):
    """Raised when a target's declared configuration is invalid.

    Covers dependencies without a resolvable module, malformed relocation
    rules, and unreadable build descriptors. Fatal for the affected target
    only; other targets are unaffected.
    """


class UnresolvedCoordinate(ConfigurationError):
    """Raised when a dependency enters the graph without group or artifact."""


class InvalidRelocationException(ConfigurationError):
    """Raised for relocation rules that cannot be applied consistently.

    Covers exception prefixes that are not nested under their rule's
    source prefix, and one source prefix declared with two different
    destinations.
    """


class DescriptorError(ConfigurationError):
    """Raised when a YAML build descriptor is malformed.

    Covers YAML syntax errors, unknown keys, wrong value types and
    coordinate notations that cannot be parsed.
    """


class PhaseViolation(ShadePlanError):
    """Raised when a target is mutated or resolved after resolution.

    A target profile is configured first and resolved exactly once. Any
    ``provided``/``relocate`` call, or a second ``resolve``, after that
    point is rejected immediately.
    """


class ManifestError(ShadePlanError):
    """Raised when a serialized bundle manifest cannot be read back.

    Covers invalid JSON, unknown manifest formats and entries with
    missing coordinate fields.
    """
