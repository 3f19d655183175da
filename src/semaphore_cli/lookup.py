"""
Group lookup with subgraph-first, contract-second fallback.

The subgraph is cheap and preferred; the contract is authoritative but
needs one round trip per field. Tiers run strictly in order and the
contract is never touched when the subgraph answers. Each tier reports
a tagged outcome so callers (and tests) can tell "confirmed missing"
from "could not ask"; only the presentation layer collapses the two.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .config import CliConfig
from .errors import DataSourceError, GroupNotFoundError
from .models import (
    GroupIdsResult,
    GroupRecord,
    LookupRequest,
    LookupResult,
    Outcome,
    TierOutcome,
)
from .networks import ensure_supported
from .sources.base import ChainDataSource, IndexedDataSource
from .sources.chain import ChainSource
from .sources.subgraph import SubgraphSource

logger = logging.getLogger("semaphore_cli.lookup")

IndexedFactory = Callable[[str], IndexedDataSource]
ChainFactory = Callable[[str], ChainDataSource]


def _check_consistent(record: GroupRecord) -> GroupRecord:
    if not record.leaves_match_members:
        raise DataSourceError(
            f"Group {record.id} reports {record.merkle_tree.number_of_leaves} leaves "
            f"but {len(record.members or [])} members",
        )
    return record


def _failed(source: str, exc: Exception) -> TierOutcome:
    outcome = Outcome.NOT_FOUND if isinstance(exc, GroupNotFoundError) else Outcome.SOURCE_UNAVAILABLE
    return TierOutcome(source=source, outcome=outcome, detail=str(exc))


def _combine(attempts: list[TierOutcome]) -> Outcome:
    """Overall outcome once every tier has failed."""
    if any(a.outcome == Outcome.NOT_FOUND for a in attempts):
        return Outcome.NOT_FOUND
    return Outcome.SOURCE_UNAVAILABLE


class GroupLookupService:
    """Stateless two-tier group lookup.

    Args:
        indexed_factory: Builds the indexed source for a network.
        chain_factory: Builds the chain source for a network. Only called
            when the indexed tier fails.
    """

    def __init__(self, indexed_factory: IndexedFactory, chain_factory: ChainFactory) -> None:
        self._indexed_factory = indexed_factory
        self._chain_factory = chain_factory

    @classmethod
    def from_config(cls, config: Optional[CliConfig] = None) -> "GroupLookupService":
        """Wire the subgraph and contract sources from configuration."""
        config = config or CliConfig()

        def indexed(network: str) -> IndexedDataSource:
            deployment = config.deployment_for(network)
            return SubgraphSource(deployment.subgraph_url, timeout=config.request_timeout)

        def chain(network: str) -> ChainDataSource:
            deployment = config.deployment_for(network)
            return ChainSource(
                deployment.rpc_url,
                deployment.contract_address,
                start_block=deployment.start_block,
                timeout=config.request_timeout,
            )

        return cls(indexed, chain)

    def lookup(self, request: LookupRequest) -> LookupResult:
        """Look a group up, falling back from the index to the chain.

        Args:
            request: Validated network, group id and requested fields.

        Returns:
            LookupResult with ``outcome == OK`` and a complete record, or
            a failure outcome with no record at all.
        """
        attempts = [self._from_index(request)]
        if attempts[0].outcome == Outcome.OK:
            return LookupResult(
                request=request, outcome=Outcome.OK, record=attempts[0].record, attempts=attempts,
            )

        logger.info(
            "Subgraph could not serve group %s on %s (%s); querying the contract",
            request.group_id, request.network, attempts[0].detail,
        )
        attempts.append(self._from_chain(request))
        if attempts[1].outcome == Outcome.OK:
            return LookupResult(
                request=request, outcome=Outcome.OK, record=attempts[1].record, attempts=attempts,
            )

        logger.info(
            "Contract could not serve group %s on %s (%s)",
            request.group_id, request.network, attempts[1].detail,
        )
        return LookupResult(request=request, outcome=_combine(attempts), attempts=attempts)

    def _from_index(self, request: LookupRequest) -> TierOutcome:
        source = self._indexed_factory(request.network)
        try:
            record = source.get_group(
                request.group_id,
                members=request.fields.members,
                verified_proofs=request.fields.verified_proofs,
            )
            _check_consistent(record)
        except (GroupNotFoundError, DataSourceError) as exc:
            return _failed(source.name, exc)
        return TierOutcome(source=source.name, outcome=Outcome.OK, record=record)

    def _from_chain(self, request: LookupRequest) -> TierOutcome:
        """Assemble a record field by field. All calls must succeed."""
        source = self._chain_factory(request.network)
        group_id = request.group_id
        fields = request.fields
        try:
            record = source.get_group(group_id)
            if fields.admin:
                record.admin = source.get_group_admin(group_id)
            if fields.members:
                record.members = source.get_group_members(group_id)
            if fields.verified_proofs:
                record.verified_proofs = source.get_group_verified_proofs(group_id)
            _check_consistent(record)
        except (GroupNotFoundError, DataSourceError) as exc:
            return _failed(source.name, exc)
        return TierOutcome(source=source.name, outcome=Outcome.OK, record=record)

    def list_group_ids(self, network: str) -> GroupIdsResult:
        """List every group id on a network with the same two tiers."""
        ensure_supported(network)
        attempts: list[TierOutcome] = []

        for factory in (self._indexed_factory, self._chain_factory):
            source = factory(network)
            try:
                group_ids = source.get_group_ids()
            except (GroupNotFoundError, DataSourceError) as exc:
                logger.info("%s could not list groups on %s (%s)", source.name, network, exc)
                attempts.append(_failed(source.name, exc))
                continue
            attempts.append(TierOutcome(source=source.name, outcome=Outcome.OK))
            return GroupIdsResult(
                network=network, outcome=Outcome.OK, group_ids=group_ids, attempts=attempts,
            )

        return GroupIdsResult(network=network, outcome=Outcome.SOURCE_UNAVAILABLE, attempts=attempts)
