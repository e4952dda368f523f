"""Provided Registry: per-target host-provided dependency patterns."""

from shadeplan.core.registry.provided import ProvidedRegistry

__all__ = ["ProvidedRegistry"]
