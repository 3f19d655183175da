"""Shared test fixtures for semaphore_cli."""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest

from semaphore_cli.lookup import GroupLookupService
from semaphore_cli.models import GroupRecord, MerkleTree, VerifiedProof
from semaphore_cli.sources.base import ChainDataSource, IndexedDataSource


def make_group(
    group_id: str = "42",
    members: Optional[list[str]] = None,
    admin: Optional[str] = None,
    proofs: Optional[list[VerifiedProof]] = None,
    leaves: Optional[int] = None,
) -> GroupRecord:
    """Build a GroupRecord whose leaf count matches its members."""
    if leaves is None:
        leaves = len(members) if members is not None else 0
    return GroupRecord(
        id=group_id,
        admin=admin,
        merkle_tree=MerkleTree(root="111", depth=20, zero_value="0", number_of_leaves=leaves),
        members=members,
        verified_proofs=proofs,
    )


def make_proof(signal: str = "1") -> VerifiedProof:
    return VerifiedProof(
        signal=signal,
        merkle_tree_root="111",
        external_nullifier="222",
        nullifier_hash="333",
    )


@pytest.fixture
def tmp_home(tmp_path: Path) -> Path:
    """Temporary semaphore home directory."""
    home = tmp_path / ".semaphore"
    home.mkdir()
    return home


@pytest.fixture
def indexed() -> MagicMock:
    """Indexed source double. Configure get_group / get_group_ids per test."""
    source = MagicMock(spec=IndexedDataSource)
    source.name = "subgraph"
    return source


@pytest.fixture
def chain() -> MagicMock:
    """Chain source double. Configure the getters per test."""
    source = MagicMock(spec=ChainDataSource)
    source.name = "chain"
    return source


@pytest.fixture
def chain_factory(chain: MagicMock) -> MagicMock:
    return MagicMock(return_value=chain)


@pytest.fixture
def service(indexed: MagicMock, chain_factory: MagicMock) -> GroupLookupService:
    """GroupLookupService wired to the two doubles."""
    return GroupLookupService(MagicMock(return_value=indexed), chain_factory)
