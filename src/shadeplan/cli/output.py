"""Rich output formatting helpers for the shadeplan CLI.

Provides consistent terminal output for resolution summaries, manifest
details, descriptor checks, relocation previews and manifest diffs.

Status Color Mapping:
    embedded = green, excluded = yellow, external = cyan, failed = bold red
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shadeplan.core.resolver import BundleManifest, TargetOutcome

console = Console()


def print_outcomes(outcomes: dict[str, TargetOutcome]) -> None:
    """Print a summary table with one row per resolved target.

    Args:
        outcomes: Resolution outcomes keyed by target name.
    """
    if not outcomes:
        console.print("[dim]No targets resolved.[/dim]")
        return

    table = Table(title="Bundle Resolution", show_header=True, header_style="bold")
    table.add_column("Target", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Embedded", justify="right", style="green")
    table.add_column("Excluded", justify="right", style="yellow")
    table.add_column("External", justify="right", style="cyan")
    table.add_column("Relocated", justify="right")

    for name, outcome in outcomes.items():
        manifest = outcome.manifest
        if manifest is None:
            table.add_row(name, Text("FAILED", style="bold red"), "-", "-", "-", "-")
            continue
        table.add_row(
            name,
            Text("OK", style="bold green"),
            str(len(manifest.embed)),
            str(len(manifest.excluded)),
            str(len(manifest.external)),
            str(len(manifest.relocate)),
        )

    console.print(table)
    _print_errors(outcomes)


def _print_errors(outcomes: dict[str, TargetOutcome]) -> None:
    for outcome in outcomes.values():
        if outcome.error is not None:
            console.print(f"  [red]- {outcome.error}[/red]")


def print_manifest_detail(manifest: BundleManifest) -> None:
    """Print the full decision for one target.

    Args:
        manifest: The target's bundle manifest.
    """
    console.print(Panel(Text(manifest.target, style="bold"), title="Bundle Manifest"))

    table = Table(show_header=True)
    table.add_column("Dependency", style="bold")
    table.add_column("Decision", justify="center")
    table.add_column("Detail", style="dim")
    for coordinate in sorted(manifest.embed):
        parent = manifest.via.get(coordinate)
        table.add_row(
            coordinate.notation,
            Text("embed", style="green"),
            f"via {parent.notation}" if parent else "direct",
        )
    for coordinate in sorted(manifest.excluded):
        reason = manifest.exclusion_reasons.get(coordinate)
        table.add_row(
            coordinate.notation,
            Text("exclude", style="yellow"),
            reason.value if reason else "",
        )
    for coordinate in sorted(manifest.external):
        table.add_row(coordinate.notation, Text("external", style="cyan"), "")
    console.print(table)

    if manifest.relocate:
        reloc = Table(title="Relocations", show_header=True)
        reloc.add_column("Original")
        reloc.add_column("Rewritten")
        for entry in manifest.relocate:
            reloc.add_row(entry.original, entry.rewritten)
        console.print(reloc)


def print_check_results(
    target_names: list[str], errors: dict[str, Any]
) -> None:
    """Print descriptor validation results per target."""
    table = Table(title="Descriptor Check", show_header=True, header_style="bold")
    table.add_column("Target", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Problem")
    for name in target_names:
        error = errors.get(name)
        if error is None:
            table.add_row(name, Text("VALID", style="bold green"), "")
        else:
            table.add_row(name, Text("INVALID", style="bold red"), str(error))
    console.print(table)


def print_relocations(target: str, rewrites: list[tuple[str, str]]) -> None:
    """Print name -> rewritten name pairs for one target."""
    table = Table(title=f"Relocation preview: {target}", show_header=True)
    table.add_column("Name", style="bold")
    table.add_column("Relocated to")
    for name, rewritten in rewrites:
        if rewritten == name:
            table.add_row(name, Text("(unchanged)", style="dim"))
        else:
            table.add_row(name, rewritten)
    console.print(table)


def print_diff(result: dict[str, Any]) -> None:
    """Print a manifest diff produced by ``shadeplan.core.manifest.diff``."""
    if result.get("identical"):
        console.print("[green]Manifests are identical.[/green]")
        return
    for section in ("embed", "excluded", "external"):
        changes = result[section]
        for notation in changes["added"]:
            console.print(f"  [green]+ {section}: {notation}[/green]")
        for notation in changes["removed"]:
            console.print(f"  [red]- {section}: {notation}[/red]")
        for change in changes["changed"]:
            console.print(
                f"  [yellow]~ {section}: {change['module']} "
                f"{change['old']} -> {change['new']}[/yellow]"
            )
    for original, rewritten in result["relocate"]["added"]:
        console.print(f"  [green]+ relocate: {original} -> {rewritten}[/green]")
    for original, rewritten in result["relocate"]["removed"]:
        console.print(f"  [red]- relocate: {original} -> {rewritten}[/red]")
    rules = result["rules"]
    for rule in rules["added"]:
        console.print(f"  [green]+ rule: {rule['source']} -> {rule['destination']}[/green]")
    for rule in rules["removed"]:
        console.print(f"  [red]- rule: {rule['source']} -> {rule['destination']}[/red]")
    for change in rules["changed"]:
        console.print(
            f"  [yellow]~ rule: {change['source']} "
            f"{_rule_text(change['old'])} -> {_rule_text(change['new'])}[/yellow]"
        )


def _rule_text(rule: dict[str, Any]) -> str:
    exceptions = rule["exceptions"]
    if not exceptions:
        return rule["destination"]
    return f"{rule['destination']} (except {', '.join(exceptions)})"
