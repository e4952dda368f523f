"""Build descriptor loading (YAML)."""

from shadeplan.config.loader import (
    Descriptor,
    load_descriptor,
    load_descriptor_data,
    parse_mask,
    parse_mode,
)

__all__ = [
    "Descriptor",
    "load_descriptor",
    "load_descriptor_data",
    "parse_mask",
    "parse_mode",
]
