"""``shadeplan resolve <descriptor>`` — Resolve bundle manifests per target.

Loads a YAML build descriptor, resolves every (or every selected) target
and writes one ``<target>.bundle.json`` manifest per successful target.

Exit Codes:
    0 — Every selected target resolved.
    1 — At least one target failed (invalid configuration or resolution).
    2 — Descriptor malformed or unknown target selected.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from shadeplan.config import load_descriptor
from shadeplan.core.manifest import emit, write
from shadeplan.core.resolver import TargetOutcome, resolve_targets
from shadeplan.exceptions import DescriptorError


def _outcomes_to_json(outcomes: dict[str, TargetOutcome]) -> dict:
    return {
        name: (
            emit(outcome.manifest)
            if outcome.manifest is not None
            else {"error": str(outcome.error)}
        )
        for name, outcome in outcomes.items()
    }


@click.command("resolve")
@click.argument("descriptor", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for manifests (default: <descriptor dir>/bundles).",
)
@click.option(
    "--target", "-t", "selected",
    multiple=True,
    help="Resolve only this target and show its decisions (repeatable).",
)
@click.option(
    "--jobs", "-j",
    type=click.IntRange(min=1),
    default=1,
    help="Resolve targets on this many threads (default: 1).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def resolve_command(
    descriptor: str,
    output: str | None,
    selected: tuple[str, ...],
    jobs: int,
    output_format: str,
) -> None:
    """Resolve bundle manifests for the targets in DESCRIPTOR.

    Exit code 0 on success, 1 if any target failed, 2 if the descriptor
    is malformed.
    """
    path = Path(descriptor)
    try:
        loaded = load_descriptor(path)
    except DescriptorError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    unknown = [name for name in selected if name not in loaded.target_names]
    if unknown:
        click.echo(f"Error: unknown target(s): {', '.join(unknown)}")
        sys.exit(2)

    wanted = set(selected) if selected else set(loaded.target_names)
    job_list = [job for job in loaded.jobs if job.name in wanted]
    outcomes = resolve_targets(job_list, max_workers=jobs)

    # Targets that failed while loading keep their descriptor position.
    ordered: dict[str, TargetOutcome] = {}
    for name in loaded.target_names:
        if name not in wanted:
            continue
        if name in loaded.errors:
            ordered[name] = TargetOutcome(target=name, error=loaded.errors[name])
        else:
            ordered[name] = outcomes[name]

    out_dir = Path(output) if output else path.parent / "bundles"
    written: list[Path] = []
    for name, outcome in ordered.items():
        if outcome.manifest is not None:
            out_path = out_dir / f"{name}.bundle.json"
            write(outcome.manifest, out_path)
            written.append(out_path)

    if output_format == "json":
        click.echo(json.dumps(_outcomes_to_json(ordered), indent=2, sort_keys=True))
    else:
        from shadeplan.cli.output import print_manifest_detail, print_outcomes
        print_outcomes(ordered)
        # Explicitly selected targets also get the per-dependency decisions.
        if selected:
            for outcome in ordered.values():
                if outcome.manifest is not None:
                    print_manifest_detail(outcome.manifest)
        for out_path in written:
            click.echo(f"Manifest written to: {out_path}")

    sys.exit(0 if all(o.ok for o in ordered.values()) else 1)
