"""shadeplan CLI — Dependency provisioning and relocation for multi-target bundles.

Entry point for the ``shadeplan`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve   — Resolve bundle manifests for every target in a descriptor.
    check     — Validate a build descriptor without resolving.
    relocate  — Preview how a target's relocation rules rewrite names.
    diff      — Compare two bundle manifests.

Usage::

    shadeplan resolve build/targets.yaml
    shadeplan resolve build/targets.yaml -t velocity -o out/bundles
    shadeplan -v check build/targets.yaml
    shadeplan relocate build/targets.yaml velocity net.kyori.adventure.Bar
    shadeplan diff old/velocity.bundle.json new/velocity.bundle.json
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from shadeplan import __version__
from shadeplan.cli.check_cmd import check_command
from shadeplan.cli.diff_cmd import diff_command
from shadeplan.cli.relocate_cmd import relocate_command
from shadeplan.cli.resolve_cmd import resolve_command

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbosity: int) -> None:
    """Route log records to stderr through Rich at the given verbosity."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbosity, logging.DEBUG),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug).")
def cli(verbose: int) -> None:
    """shadeplan: Decide what each deployment target bundles.

    Resolve which dependencies a target embeds, which it leaves to the
    host, and how embedded packages are relocated.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(check_command)
cli.add_command(relocate_command)
cli.add_command(diff_command)
