"""
Direct Semaphore contract queries over JSON-RPC.

The contract stores only the current root and leaf count, so most of a
group has to be rebuilt from its event history: creation parameters
from GroupCreated, the admin from GroupAdminUpdated, members by
replaying the membership events in log order, and proofs from
ProofVerified.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import requests
from eth_abi.exceptions import EncodingError
from web3 import Web3
from web3.exceptions import Web3Exception

from ..errors import DataSourceError, GroupNotFoundError
from ..models import GroupRecord, MerkleTree, VerifiedProof
from .abi import SEMAPHORE_ABI
from .base import ChainDataSource

logger = logging.getLogger("semaphore_cli.sources.chain")

MEMBERSHIP_EVENTS = ("MemberAdded", "MembersAdded", "MemberUpdated", "MemberRemoved")
UINT256_MAX = 2**256 - 1


def _parse_group_id(group_id: str) -> int:
    """Group ids are uint256 on chain; anything else cannot exist there."""
    try:
        value = int(str(group_id), 10)
    except ValueError:
        raise GroupNotFoundError(str(group_id), source="chain") from None
    if value < 0 or value > UINT256_MAX:
        raise GroupNotFoundError(str(group_id), source="chain")
    return value


def _log_order(event: Any) -> tuple[int, int]:
    return (int(event["blockNumber"]), int(event["logIndex"]))


class ChainSource(ChainDataSource):
    """Read group data straight from a Semaphore contract.

    Args:
        rpc_url: JSON-RPC endpoint.
        contract_address: Semaphore contract address.
        start_block: Deployment block; event scans start here.
        timeout: Per-request timeout in seconds.
        contract: Prebuilt web3 contract (skips provider setup).
    """

    name = "chain"

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        start_block: int = 0,
        timeout: float = 30.0,
        contract: Optional[Any] = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._address = contract_address
        self._start_block = start_block
        self._timeout = timeout
        self._contract = contract

    @property
    def contract(self) -> Any:
        """The web3 contract, built on first use."""
        if self._contract is None:
            w3 = Web3(Web3.HTTPProvider(self._rpc_url, request_kwargs={"timeout": self._timeout}))
            self._contract = w3.eth.contract(
                address=Web3.to_checksum_address(self._address), abi=SEMAPHORE_ABI,
            )
            logger.debug("Connected to Semaphore at %s via %s", self._address, self._rpc_url)
        return self._contract

    @contextmanager
    def _rpc_errors(self, operation: str) -> Iterator[None]:
        """Turn web3 and transport failures into DataSourceError."""
        try:
            yield
        except (
            Web3Exception, EncodingError, requests.RequestException,
            KeyError, TypeError, ValueError, OSError,
        ) as exc:
            raise DataSourceError(
                f"Chain query {operation} failed: {exc}", {"rpc": self._rpc_url},
            ) from exc

    def _logs(self, event_name: str, group_id: Optional[int] = None) -> list[Any]:
        """Fetch an event's logs since deployment, in log order."""
        event = getattr(self.contract.events, event_name)
        kwargs: dict[str, Any] = {"from_block": self._start_block}
        if group_id is not None:
            kwargs["argument_filters"] = {"groupId": group_id}
        return sorted(event.get_logs(**kwargs), key=_log_order)

    def _created_event(self, group_id: int) -> Any:
        created = self._logs("GroupCreated", group_id)
        if not created:
            raise GroupNotFoundError(str(group_id), source=self.name)
        return created[0]

    def get_group_ids(self) -> list[str]:
        with self._rpc_errors("get_group_ids"):
            events = self._logs("GroupCreated")
            return [str(e["args"]["groupId"]) for e in events]

    def get_group(self, group_id: str) -> GroupRecord:
        gid = _parse_group_id(group_id)
        with self._rpc_errors("get_group"):
            created = self._created_event(gid)
            root = self.contract.functions.getMerkleTreeRoot(gid).call()
            leaves = self.contract.functions.getNumberOfMerkleTreeLeaves(gid).call()

            args = created["args"]
            return GroupRecord(
                id=str(gid),
                merkle_tree=MerkleTree(
                    root=str(root),
                    depth=int(args["merkleTreeDepth"]),
                    zero_value=str(args["zeroValue"]),
                    number_of_leaves=int(leaves),
                ),
            )

    def get_group_admin(self, group_id: str) -> str:
        gid = _parse_group_id(group_id)
        with self._rpc_errors("get_group_admin"):
            updates = self._logs("GroupAdminUpdated", gid)
            if not updates:
                raise GroupNotFoundError(str(gid), source=self.name)
            return str(updates[-1]["args"]["newAdmin"])

    def get_group_members(self, group_id: str) -> list[str]:
        """Rebuild the member list by replaying membership events.

        Removed members keep their slot and read as the group's zero
        value, so the result is as long as the tree has leaves.
        """
        gid = _parse_group_id(group_id)
        with self._rpc_errors("get_group_members"):
            zero_value = str(self._created_event(gid)["args"]["zeroValue"])
            events = []
            for name in MEMBERSHIP_EVENTS:
                events.extend((name, e) for e in self._logs(name, gid))
            return replay_members(events, zero_value)

    def get_group_verified_proofs(self, group_id: str) -> list[VerifiedProof]:
        gid = _parse_group_id(group_id)
        with self._rpc_errors("get_group_verified_proofs"):
            self._created_event(gid)
            return [
                VerifiedProof(
                    signal=str(e["args"]["signal"]),
                    merkle_tree_root=str(e["args"]["merkleTreeRoot"]),
                    external_nullifier=str(e["args"]["externalNullifier"]),
                    nullifier_hash=str(e["args"]["nullifierHash"]),
                )
                for e in self._logs("ProofVerified", gid)
            ]


def replay_members(events: list[tuple[str, Any]], zero_value: str) -> list[str]:
    """Apply (event name, log) pairs in log order and return the leaves.

    Args:
        events: Membership logs tagged with their event name, any order.
        zero_value: Value a removed member's leaf is reset to.

    Returns:
        Identity commitments ordered by leaf index.
    """
    slots: dict[int, str] = {}
    for name, event in sorted(events, key=lambda item: _log_order(item[1])):
        args = event["args"]
        if name == "MemberAdded":
            slots[int(args["index"])] = str(args["identityCommitment"])
        elif name == "MembersAdded":
            start = int(args["startIndex"])
            for offset, commitment in enumerate(args["identityCommitments"]):
                slots[start + offset] = str(commitment)
        elif name == "MemberUpdated":
            slots[int(args["index"])] = str(args["newIdentityCommitment"])
        elif name == "MemberRemoved":
            slots[int(args["index"])] = zero_value
    return [slots[index] for index in sorted(slots)]
