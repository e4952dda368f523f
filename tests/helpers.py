"""Shared test helpers: graph builders and a sample build descriptor."""

from __future__ import annotations

import textwrap

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.resolver import ResolvedDependency

NAMESPACE = "org.geysermc.geyser"

SAMPLE_DESCRIPTOR = textwrap.dedent("""\
    namespace: org.geysermc.geyser
    targets:
      velocity:
        include_transitive: true
        provided:
          - io.netty:netty-handler
          - {group: com.google.code.gson, artifact: ".*"}
        relocate:
          - {prefix: net.kyori, except: [net.kyori.adventure.text.logger]}
          - {prefix: org.yaml, mode: target}
        shaded:
          - org.geysermc.geyser:core
        dependencies:
          - {coordinate: "io.netty:netty-handler:4.1.66", packages: [io.netty.handler]}
          - {coordinate: "io.netty:netty-buffer:4.1.66", direct: false,
             via: "io.netty:netty-handler:4.1.66", packages: [io.netty.buffer]}
          - {coordinate: "net.kyori:adventure-api:4.14.0",
             packages: [net.kyori.adventure.Bar, net.kyori.adventure.text.logger.Foo]}
          - {coordinate: "org.yaml:snakeyaml:2.0", packages: [org.yaml.snakeyaml]}
          - "com.google.code.gson:gson:2.10"
          - "org.geysermc.geyser:core:2.2.0"
      fabric:
        provided:
          - "net.fabricmc:.*"
        dependencies:
          - "net.fabricmc:fabric-loader:0.15.0"
          - "org.cloudburstmc:protocol:3.0"
          - {coordinate: "org.cloudburstmc:nbt:3.0", direct: false,
             via: "org.cloudburstmc:protocol:3.0"}
""")


def dep(
    notation: str,
    direct: bool = True,
    via: str | None = None,
    packages: tuple[str, ...] = (),
) -> ResolvedDependency:
    """Convenience factory for ResolvedDependency instances."""
    return ResolvedDependency(
        coordinate=Coordinate.parse(notation),
        is_direct=direct,
        transitive_of=Coordinate.parse(via) if via else None,
        packages=packages,
    )
