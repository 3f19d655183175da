"""Group commands: get-groups, get-group, get-members, get-proofs."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

import click
from rich.markup import escape

from ..models import GroupFields, GroupRecord, LookupRequest, LookupResult
from ._common import (
    console,
    error_line,
    fetch_group_ids,
    get_service,
    info_line,
    resolve_group_id,
    resolve_network,
)

logger = logging.getLogger("semaphore_cli.cli.groups")

NETWORK_HELP = "Supported Ethereum network."
GROUP_ID_HELP = "Identifier of the group."


def _lookup(ctx: click.Context, network: Optional[str], group_id: Optional[str],
            fields: GroupFields, spinner: str) -> GroupRecord:
    """Resolve arguments, run the lookup and exit if the group is missing."""
    network = resolve_network(network)
    service = get_service(ctx)
    group_id = resolve_group_id(service, network, group_id)

    request = LookupRequest(network=network, group_id=group_id, fields=fields)
    with console.status(spinner.format(group_id=group_id)):
        result: LookupResult = service.lookup(request)

    if not result.found:
        for attempt in result.attempts:
            logger.debug("%s: %s %s", attempt.source, attempt.outcome.value, attempt.detail)
        error_line("the group does not exist")
        sys.exit(1)

    return result.record


def render_group(group: GroupRecord) -> str:
    tree = group.merkle_tree
    admin = escape(group.admin) if group.admin else "[dim]unknown[/]"
    return (
        f" [bold]Id[/]: {escape(group.id)}\n"
        f" [bold]Admin[/]: {admin}\n"
        f" [bold]Merkle tree[/]:\n"
        f"   Root: {tree.root}\n"
        f"   Depth: {tree.depth}\n"
        f"   Zero value: {tree.zero_value}\n"
        f"   Number of leaves: {tree.number_of_leaves}"
    )


def render_members(members: list[str]) -> str:
    lines = [f"   {i}. {member}" for i, member in enumerate(members)]
    return "[bold]Members[/]: \n" + "\n".join(lines)


def render_proofs(group: GroupRecord) -> str:
    entries = [
        f"  - signal: {p.signal} \n"
        f"    merkleTreeRoot: {p.merkle_tree_root} \n"
        f"    externalNullifier: {p.external_nullifier} \n"
        f"    nullifierHash: {p.nullifier_hash}"
        for p in group.verified_proofs or []
    ]
    return "[bold]Proofs[/]: \n" + "\n".join(entries)


def register_group_commands(main: click.Group) -> None:
    """Register the group query commands."""

    @main.command("get-groups")
    @click.option("-n", "--network", default=None, help=NETWORK_HELP)
    @click.option("--json-out", is_flag=True, help="Output as JSON.")
    @click.pass_context
    def get_groups(ctx, network, json_out):
        """Get the list of groups from a supported network (e.g. sepolia or arbitrum)."""
        network = resolve_network(network)
        group_ids = fetch_group_ids(get_service(ctx), network)

        if json_out:
            click.echo(json.dumps(group_ids, indent=2))
            return

        content = "\n".join(f" - {group_id}" for group_id in group_ids)
        console.print(f"\n{content}\n", soft_wrap=True)

    @main.command("get-group")
    @click.argument("group_id", required=False, metavar="[GROUP-ID]")
    @click.option("-n", "--network", default=None, help=NETWORK_HELP)
    @click.option("--json-out", is_flag=True, help="Output as JSON.")
    @click.pass_context
    def get_group(ctx, group_id, network, json_out):
        """Get the data of a group from a supported network (e.g. sepolia or arbitrum)."""
        group = _lookup(ctx, network, group_id, GroupFields(admin=True), "Fetching group {group_id}")

        if json_out:
            click.echo(json.dumps(group.to_wire(), indent=2))
            return

        console.print(f"\n{render_group(group)}\n", soft_wrap=True)

    @main.command("get-members")
    @click.argument("group_id", required=False, metavar="[GROUP-ID]")
    @click.option("-n", "--network", default=None, help=NETWORK_HELP)
    @click.option("--json-out", is_flag=True, help="Output as JSON.")
    @click.pass_context
    def get_members(ctx, group_id, network, json_out):
        """Get the members of a group from a supported network (e.g. sepolia or arbitrum)."""
        group = _lookup(
            ctx, network, group_id, GroupFields(members=True), "Fetching members of group {group_id}",
        )
        members = group.members or []

        if json_out:
            click.echo(json.dumps(members, indent=2))
            return

        if not members:
            info_line("there are no members in this group")
            return

        console.print(f"\n{render_members(members)}\n", soft_wrap=True)

    @main.command("get-proofs")
    @click.argument("group_id", required=False, metavar="[GROUP-ID]")
    @click.option("-n", "--network", default=None, help=NETWORK_HELP)
    @click.option("--json-out", is_flag=True, help="Output as JSON.")
    @click.pass_context
    def get_proofs(ctx, group_id, network, json_out):
        """Get the proofs of a group from a supported network (e.g. sepolia or arbitrum)."""
        group = _lookup(
            ctx, network, group_id, GroupFields(verified_proofs=True), "Fetching proofs of group {group_id}",
        )
        proofs = group.verified_proofs or []

        if json_out:
            click.echo(json.dumps([p.model_dump(by_alias=True) for p in proofs], indent=2))
            return

        if not proofs:
            info_line("there are no proofs in this group")
            return

        console.print(f"\n{render_proofs(group)}\n", soft_wrap=True)
