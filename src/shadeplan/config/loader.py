"""YAML build descriptor loading.

A build descriptor declares, per target, the host-provided dependencies,
relocation rules, already-shaded modules and the resolved dependency graph.
It is the file-based form of the calls a build driver makes against
``TargetProfile``::

    namespace: org.geysermc.geyser
    targets:
      velocity:
        include_transitive: false
        provided:
          - io.netty:netty-handler
          - {group: com.google.code.gson, artifact: gson, version: "2.8.0", mask: 0b110}
        relocate:
          - net.kyori
          - {prefix: io.netty, mode: target}
          - {prefix: net.kyori, except: [net.kyori.adventure.text.logger]}
        shaded:
          - org.geysermc.geyser:core
        dependencies:
          - io.netty:netty-codec:4.1.66
          - {coordinate: io.netty:netty-buffer:4.1.66, direct: false,
             via: io.netty:netty-codec:4.1.66, packages: [io.netty.buffer]}

Structural problems with the file as a whole (bad YAML, no ``targets``)
raise ``DescriptorError``. Problems inside one target's section are
collected per target in ``Descriptor.errors`` so the remaining targets can
still be resolved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from shadeplan.core.coordinate import Coordinate
from shadeplan.core.profile import TargetProfile
from shadeplan.core.relocation import NamespaceMode, RelocationRule
from shadeplan.core.resolver import ResolvedDependency, TargetJob
from shadeplan.exceptions import ConfigurationError, DescriptorError, ShadePlanError

logger = logging.getLogger(__name__)

_TOP_LEVEL_KEYS = frozenset({"namespace", "targets"})
_TARGET_KEYS = frozenset({
    "namespace", "include_transitive", "provided", "relocate", "shaded", "dependencies",
})
_PROVIDED_KEYS = frozenset({"group", "artifact", "version", "mask"})
_RELOCATE_KEYS = frozenset({"prefix", "mode", "except", "destination"})
_DEPENDENCY_KEYS = frozenset({"coordinate", "direct", "via", "packages"})


@dataclass
class Descriptor:
    """A loaded build descriptor.

    Attributes:
        namespace: Default base namespace for relocations.
        jobs: One ``TargetJob`` per valid target, in descriptor order.
        errors: Configuration errors per invalid target.
        source: Path the descriptor was read from, if any.
        target_names: All target names, valid or not, in descriptor order.
    """

    namespace: str
    jobs: list[TargetJob] = field(default_factory=list)
    errors: dict[str, ShadePlanError] = field(default_factory=dict)
    source: Path | None = None
    target_names: list[str] = field(default_factory=list)

    def job(self, name: str) -> TargetJob | None:
        for job in self.jobs:
            if job.name == name:
                return job
        return None


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _check_keys(entry: dict[str, Any], allowed: frozenset[str], where: str, target: str) -> None:
    unknown = sorted(set(entry) - allowed)
    if unknown:
        raise DescriptorError(
            f"{where}: unknown key(s) {', '.join(unknown)}", target=target
        )


def _as_list(value: Any, where: str, target: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DescriptorError(f"{where}: expected a list", target=target)
    return value


def _str(value: Any, where: str, target: str) -> str:
    if value is None:
        return ""
    # YAML turns unquoted 2.10 into 2.1 and 010 into 8.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        raise DescriptorError(
            f"{where}: {value!r} was read as a number, quote it as a string",
            target=target,
        )
    if not isinstance(value, str):
        raise DescriptorError(f"{where}: expected a string, got {value!r}", target=target)
    return value


def _parse_coordinate(value: Any, where: str, target: str) -> Coordinate:
    if not isinstance(value, str):
        raise DescriptorError(f"{where}: expected 'group:artifact[:version]'", target=target)
    try:
        return Coordinate.parse(value)
    except ValueError as exc:
        raise DescriptorError(f"{where}: {exc}", target=target) from exc


def parse_mask(value: Any, where: str = "mask", target: str | None = None) -> int | None:
    """Parse a mask given as int, ``"0b110"`` or ``"6"``."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise DescriptorError(f"{where}: invalid mask {value!r}", target=target)
    if isinstance(value, int):
        mask = value
    elif isinstance(value, str):
        try:
            mask = int(value.strip(), 0)
        except ValueError as exc:
            raise DescriptorError(f"{where}: invalid mask {value!r}", target=target) from exc
    else:
        raise DescriptorError(f"{where}: invalid mask {value!r}", target=target)
    if not 0 <= mask <= 0b111:
        raise DescriptorError(f"{where}: mask out of range {value!r}", target=target)
    return mask


def parse_mode(value: Any, where: str = "mode", target: str | None = None) -> NamespaceMode:
    if value is None:
        return NamespaceMode.SHARED
    try:
        return NamespaceMode(str(value).lower())
    except ValueError as exc:
        choices = ", ".join(m.value for m in NamespaceMode)
        raise DescriptorError(
            f"{where}: unknown mode {value!r} (expected one of: {choices})", target=target
        ) from exc


# ---------------------------------------------------------------------------
# Section loaders
# ---------------------------------------------------------------------------


def _load_provided(profile: TargetProfile, entries: list[Any]) -> None:
    for i, entry in enumerate(entries):
        where = f"provided[{i}]"
        if isinstance(entry, str):
            coordinate = _parse_coordinate(entry, where, profile.name)
            profile.provided(coordinate.group, coordinate.artifact, coordinate.version)
            continue
        if not isinstance(entry, dict):
            raise DescriptorError(f"{where}: expected a string or mapping", target=profile.name)
        _check_keys(entry, _PROVIDED_KEYS, where, profile.name)
        profile.provided(
            _str(entry.get("group"), f"{where}.group", profile.name),
            _str(entry.get("artifact"), f"{where}.artifact", profile.name),
            _str(entry.get("version"), f"{where}.version", profile.name),
            parse_mask(entry.get("mask"), f"{where}.mask", profile.name),
        )


def _load_relocate(profile: TargetProfile, entries: list[Any]) -> None:
    for i, entry in enumerate(entries):
        where = f"relocate[{i}]"
        if isinstance(entry, str):
            profile.relocate(entry)
            continue
        if not isinstance(entry, dict):
            raise DescriptorError(f"{where}: expected a string or mapping", target=profile.name)
        _check_keys(entry, _RELOCATE_KEYS, where, profile.name)
        prefix = _str(entry.get("prefix"), f"{where}.prefix", profile.name)
        if not prefix:
            raise DescriptorError(f"{where}: 'prefix' is required", target=profile.name)
        exceptions = [
            _str(e, f"{where}.except", profile.name)
            for e in _as_list(entry.get("except"), f"{where}.except", profile.name)
        ]
        if "destination" in entry:
            if "mode" in entry:
                raise DescriptorError(
                    f"{where}: 'destination' and 'mode' are mutually exclusive",
                    target=profile.name,
                )
            destination = _str(entry["destination"], f"{where}.destination", profile.name)
            profile.plan.add_rule(RelocationRule(prefix, destination, frozenset(exceptions)))
            continue
        mode = parse_mode(entry.get("mode"), f"{where}.mode", profile.name)
        if not exceptions:
            profile.relocate(prefix, mode)
        for exception in exceptions:
            profile.relocate_with_exception(prefix, exception, mode)


def _load_dependencies(target: str, entries: list[Any]) -> list[ResolvedDependency]:
    graph: list[ResolvedDependency] = []
    for i, entry in enumerate(entries):
        where = f"dependencies[{i}]"
        if isinstance(entry, str):
            graph.append(ResolvedDependency(_parse_coordinate(entry, where, target)))
            continue
        if not isinstance(entry, dict):
            raise DescriptorError(f"{where}: expected a string or mapping", target=target)
        _check_keys(entry, _DEPENDENCY_KEYS, where, target)
        coordinate = _parse_coordinate(entry.get("coordinate"), f"{where}.coordinate", target)
        direct = entry.get("direct", True)
        if not isinstance(direct, bool):
            raise DescriptorError(f"{where}.direct: expected true or false", target=target)
        via = entry.get("via")
        parent = _parse_coordinate(via, f"{where}.via", target) if via is not None else None
        packages = tuple(
            _str(p, f"{where}.packages", target)
            for p in _as_list(entry.get("packages"), f"{where}.packages", target)
        )
        graph.append(ResolvedDependency(coordinate, direct, parent, packages))
    return graph


def _load_target(name: str, section: Any, namespace: str) -> TargetJob:
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise DescriptorError("target section must be a mapping", target=name)
    _check_keys(section, _TARGET_KEYS, "target", name)

    include_transitive = section.get("include_transitive", False)
    if not isinstance(include_transitive, bool):
        raise DescriptorError("include_transitive: expected true or false", target=name)
    target_namespace = _str(section.get("namespace"), "namespace", name) or namespace
    if not target_namespace:
        raise DescriptorError("no namespace declared", target=name)

    profile = TargetProfile(name, target_namespace, include_transitive)
    _load_provided(profile, _as_list(section.get("provided"), "provided", name))
    _load_relocate(profile, _as_list(section.get("relocate"), "relocate", name))

    shaded = {
        _parse_coordinate(s, f"shaded[{i}]", name)
        for i, s in enumerate(_as_list(section.get("shaded"), "shaded", name))
    }
    graph = _load_dependencies(name, _as_list(section.get("dependencies"), "dependencies", name))
    return TargetJob(profile=profile, graph=graph, already_shaded=shaded)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def load_descriptor_data(data: Any, source: Path | None = None) -> Descriptor:
    """Build a ``Descriptor`` from parsed YAML data.

    Raises:
        DescriptorError: If the document as a whole is malformed.
    """
    if not isinstance(data, dict):
        raise DescriptorError("descriptor must be a mapping")
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise DescriptorError(f"unknown top-level key(s) {', '.join(unknown)}")
    targets = data.get("targets")
    if not isinstance(targets, dict) or not targets:
        raise DescriptorError("'targets' must be a non-empty mapping")

    namespace = data.get("namespace") or ""
    if not isinstance(namespace, str):
        raise DescriptorError("'namespace' must be a string")

    for name in targets:
        if not isinstance(name, str) or not name:
            raise DescriptorError(f"target names must be non-empty strings, got {name!r}")

    descriptor = Descriptor(namespace=namespace, source=source)
    for name, section in targets.items():
        descriptor.target_names.append(name)
        try:
            descriptor.jobs.append(_load_target(name, section, namespace))
        except ConfigurationError as exc:
            logger.error("Invalid configuration for %s: %s", name, exc)
            descriptor.errors[name] = exc
    return descriptor


def load_descriptor(path: Path) -> Descriptor:
    """Read and load a YAML build descriptor from disk.

    Raises:
        DescriptorError: If the file cannot be read or parsed, or is
            structurally malformed.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptorError(f"cannot read {path}: {exc}") from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise DescriptorError(f"invalid YAML in {path}: {exc}") from exc
    logger.debug("Loaded descriptor %s", path)
    return load_descriptor_data(data, source=path)
