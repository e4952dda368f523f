"""``shadeplan check <descriptor>`` — Validate a build descriptor.

Loads the descriptor and reports configuration errors per target without
resolving anything or writing files.

Exit Codes:
    0 — Every target is valid.
    1 — At least one target has an invalid configuration.
    2 — Descriptor malformed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from shadeplan.config import load_descriptor
from shadeplan.exceptions import DescriptorError


@click.command("check")
@click.argument("descriptor", type=click.Path(exists=True, dir_okay=False))
def check_command(descriptor: str) -> None:
    """Validate the targets declared in DESCRIPTOR.

    Exit code 0 if valid, 1 if any target is invalid, 2 if malformed.
    """
    try:
        loaded = load_descriptor(Path(descriptor))
    except DescriptorError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    from shadeplan.cli.output import print_check_results
    print_check_results(loaded.target_names, loaded.errors)
    sys.exit(1 if loaded.errors else 0)
