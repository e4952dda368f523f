"""``shadeplan diff <old> <new>`` — Compare two bundle manifests.

Exit Codes:
    0 — Manifests are identical.
    1 — Manifests differ.
    2 — A manifest could not be read.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from shadeplan.core.manifest import diff, read
from shadeplan.exceptions import ManifestError


@click.command("diff")
@click.argument("old", type=click.Path(exists=True, dir_okay=False))
@click.argument("new", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the raw diff as JSON.")
def diff_command(old: str, new: str, as_json: bool) -> None:
    """Compare bundle manifests OLD and NEW.

    Exit code 0 if identical, 1 if they differ, 2 if unreadable.
    """
    try:
        old_manifest = read(Path(old))
        new_manifest = read(Path(new))
    except ManifestError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    result = diff(old_manifest, new_manifest)
    if as_json:
        click.echo(json.dumps(result, indent=2, sort_keys=True))
    else:
        from shadeplan.cli.output import print_diff
        print_diff(result)
    sys.exit(0 if result["identical"] else 1)
