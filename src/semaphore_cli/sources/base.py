"""Abstract interfaces the lookup service talks to."""

from __future__ import annotations

from ..models import GroupRecord, VerifiedProof


class IndexedDataSource:
    """Abstract base for pre-indexed group data (e.g. a subgraph).

    Implementations raise ``GroupNotFoundError`` for a confirmed missing
    group and ``DataSourceError`` for transport or schema failures.
    """

    name = "indexed"

    def get_group_ids(self) -> list[str]:
        """List the ids of every group on the network."""
        raise NotImplementedError

    def get_group(
        self,
        group_id: str,
        members: bool = False,
        verified_proofs: bool = False,
    ) -> GroupRecord:
        """Fetch a group, optionally with its members and verified proofs.

        Args:
            group_id: Group identifier.
            members: Include the ordered member list.
            verified_proofs: Include the verified proofs.

        Returns:
            The group record, admin included when the index knows it.
        """
        raise NotImplementedError


class ChainDataSource:
    """Abstract base for direct contract queries.

    The chain exposes one query per field, so callers compose a full
    record from ``get_group`` plus the auxiliary getters.
    """

    name = "chain"

    def get_group_ids(self) -> list[str]:
        raise NotImplementedError

    def get_group(self, group_id: str) -> GroupRecord:
        """Fetch the base record: id and merkle tree only."""
        raise NotImplementedError

    def get_group_admin(self, group_id: str) -> str:
        raise NotImplementedError

    def get_group_members(self, group_id: str) -> list[str]:
        raise NotImplementedError

    def get_group_verified_proofs(self, group_id: str) -> list[VerifiedProof]:
        raise NotImplementedError
