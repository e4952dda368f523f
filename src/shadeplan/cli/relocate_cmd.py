"""``shadeplan relocate <descriptor> <target> <name>...`` — Preview relocation.

Shows how the relocation rules of one target rewrite the given package or
class names.

Exit Codes:
    0 — Rewrites displayed.
    1 — The target's configuration is invalid.
    2 — Descriptor malformed or unknown target.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from shadeplan.config import load_descriptor
from shadeplan.exceptions import DescriptorError


@click.command("relocate")
@click.argument("descriptor", type=click.Path(exists=True, dir_okay=False))
@click.argument("target")
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def relocate_command(
    descriptor: str, target: str, names: tuple[str, ...], output_format: str
) -> None:
    """Show how TARGET's relocation rules rewrite NAMES."""
    try:
        loaded = load_descriptor(Path(descriptor))
    except DescriptorError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    if target in loaded.errors:
        click.echo(f"Error: {loaded.errors[target]}")
        sys.exit(1)
    job = loaded.job(target)
    if job is None:
        click.echo(f"Error: unknown target: {target}")
        sys.exit(2)

    rewrites = [(name, job.profile.plan.apply(name)) for name in names]
    if output_format == "json":
        click.echo(json.dumps(dict(rewrites), indent=2))
    else:
        from shadeplan.cli.output import print_relocations
        print_relocations(target, rewrites)
    sys.exit(0)
