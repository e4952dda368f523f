"""Manifest Emitter: stable serialization of bundle manifests.

Submodules:
    emitter     -- emit(), to_json(), write()
    operations  -- load(), from_json(), read(), diff()
"""

from shadeplan.core.manifest.emitter import (
    MANIFEST_VERSION,
    coordinate_to_dict,
    emit,
    to_json,
    write,
)
from shadeplan.core.manifest.operations import diff, from_json, load, read

__all__ = [
    "MANIFEST_VERSION",
    "coordinate_to_dict",
    "diff",
    "emit",
    "from_json",
    "load",
    "read",
    "to_json",
    "write",
]
