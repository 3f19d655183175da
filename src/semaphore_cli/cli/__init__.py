"""
Semaphore CLI: the command line for Semaphore groups.

The main Click group is defined here and every command module
registers its commands on it.

Entry point: semaphore_cli.cli:main
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .. import SEMAPHORE_HOME, __version__
from ..config import load_config


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-v", "--version", prog_name="semaphore", help="Show Semaphore CLI version.")
@click.option("--verbose", is_flag=True, help="Log data-source activity.")
@click.option(
    "--home", default=SEMAPHORE_HOME, type=click.Path(),
    help="Directory holding config.yaml (default: ~/.semaphore).",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, home: str):
    """Semaphore: create projects and inspect groups.

    Group commands ask the Semaphore subgraph first and fall back to
    the contract when the subgraph cannot answer.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    if ctx.obj.get("config") is None:
        ctx.obj["config"] = load_config(Path(home))


# ---------------------------------------------------------------------------
# Register all commands from modular files
# ---------------------------------------------------------------------------

from .create import register_create_commands
from .groups import register_group_commands

register_create_commands(main)
register_group_commands(main)
