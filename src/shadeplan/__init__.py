"""shadeplan: Dependency provisioning and relocation planning for multi-target bundles."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Format identifier written into every emitted bundle manifest.
_MANIFEST_FORMAT = "shadeplan-bundle"
