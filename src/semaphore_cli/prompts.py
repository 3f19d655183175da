"""Interactive prompts for arguments the user left out."""

from __future__ import annotations

from typing import Sequence

import click

DEFAULT_PROJECT_NAME = "my-app"


def ask_project_name(default: str = DEFAULT_PROJECT_NAME) -> str:
    """Ask for the directory name of a new project."""
    return click.prompt("What is your project name?", default=default).strip()


def ask_network(networks: Sequence[str]) -> str:
    """Ask the user to pick one of the supported networks."""
    return click.prompt(
        "Select one of the supported networks",
        type=click.Choice(list(networks)),
        default=networks[0],
    )


def ask_group_id(group_ids: Sequence[str]) -> str:
    """Ask the user to pick one of the network's existing groups."""
    return click.prompt(
        "Select one of the following existing group ids",
        type=click.Choice([str(g) for g in group_ids]),
        default=str(group_ids[0]),
    )
