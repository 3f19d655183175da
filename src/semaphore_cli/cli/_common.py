"""Shared utilities for all CLI command modules.

Provides the Rich console instance, the one-line status printers,
and the argument-resolution helpers every group command uses.
"""

from __future__ import annotations

import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from ..config import CliConfig
from ..lookup import GroupLookupService
from ..networks import SUPPORTED_NETWORKS, is_supported

console = Console()


def error_line(message: str) -> None:
    console.print(f"\n [bold red]✖[/] error: {escape(message)}\n")


def info_line(message: str) -> None:
    console.print(f"\n [bold blue]ℹ[/] info: {escape(message)}\n")


def success_line(message: str) -> None:
    console.print(f"\n [bold green]✔[/] {escape(message)}\n")


def warning_line(message: str) -> None:
    console.print(f"\n [bold yellow]⚠[/] {escape(message)}\n")


def get_config(ctx: click.Context) -> CliConfig:
    """Configuration loaded by the root command."""
    obj = ctx.find_root().obj or {}
    return obj.get("config") or CliConfig()


def get_service(ctx: click.Context) -> GroupLookupService:
    """The lookup service for this invocation, built once from config."""
    obj = ctx.find_root().ensure_object(dict)
    if obj.get("service") is None:
        obj["service"] = GroupLookupService.from_config(get_config(ctx))
    return obj["service"]


def resolve_network(network: Optional[str]) -> str:
    """Prompt for a missing network and reject unsupported ones.

    Exits with status 1 before any query is made if the network is not
    on the allow-list.
    """
    from ..prompts import ask_network

    if not network:
        network = ask_network(SUPPORTED_NETWORKS)

    if not is_supported(network):
        error_line(f"the network '{network}' is not supported")
        sys.exit(1)
    return network


def fetch_group_ids(service: GroupLookupService, network: str) -> list[str]:
    """List a network's group ids, exiting with a message if there are none."""
    with console.status("Fetching groups"):
        result = service.list_group_ids(network)

    if not result.found:
        error_line("unexpected error while fetching groups")
        sys.exit(1)

    if not result.group_ids:
        info_line("there are no groups in this network")
        sys.exit(0)

    return result.group_ids


def resolve_group_id(service: GroupLookupService, network: str, group_id: Optional[str]) -> str:
    """Prompt for a missing group id from the network's existing groups."""
    from ..prompts import ask_group_id

    if group_id:
        return group_id
    return ask_group_id(fetch_group_ids(service, network))
