"""
Semaphore subgraph client, the indexed data source.

Speaks GraphQL over plain HTTP POST. The subgraph can lag behind the
chain or be missing for a network entirely; every such failure surfaces
as DataSourceError so the lookup service can fall back to the contract.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from ..errors import DataSourceError, GroupNotFoundError
from ..models import GroupRecord
from .base import IndexedDataSource

logger = logging.getLogger("semaphore_cli.sources.subgraph")

GROUP_IDS_QUERY = "{ groups { id } }"

_MEMBERS_SELECTION = "members(orderBy: index) { identityCommitment }"
_PROOFS_SELECTION = (
    "verifiedProofs(orderBy: timestamp) "
    "{ signal merkleTreeRoot externalNullifier nullifierHash }"
)


def build_group_query(group_id: str, members: bool = False, verified_proofs: bool = False) -> str:
    """Build the GraphQL query for one group.

    Args:
        group_id: Group identifier; quoted and escaped into the query.
        members: Select the member commitments, ordered by leaf index.
        verified_proofs: Select the verified proofs, oldest first.

    Returns:
        The query string.
    """
    selections = [
        "id",
        "admin",
        "merkleTree { root depth zeroValue numberOfLeaves }",
    ]
    if members:
        selections.append(_MEMBERS_SELECTION)
    if verified_proofs:
        selections.append(_PROOFS_SELECTION)

    return "{ groups(where: { id: %s }) { %s } }" % (json.dumps(str(group_id)), " ".join(selections))


class SubgraphSource(IndexedDataSource):
    """Query the Semaphore subgraph of one network.

    Args:
        url: GraphQL endpoint.
        timeout: Per-request timeout in seconds.
        session: Optional requests session (tests inject a fake one).
    """

    name = "subgraph"

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    def _query(self, query: str) -> dict[str, Any]:
        """POST a GraphQL query and return its ``data`` object.

        Raises:
            DataSourceError: On transport failure, HTTP error status,
                non-JSON bodies, or GraphQL errors.
        """
        logger.debug("POST %s: %s", self._url, query)
        try:
            resp = self._session.post(self._url, json={"query": query}, timeout=self._timeout)
        except requests.RequestException as exc:
            raise DataSourceError(f"Subgraph request failed: {exc}", {"url": self._url}) from exc

        if resp.status_code >= 400:
            raise DataSourceError(
                f"Subgraph returned {resp.status_code}",
                {"url": self._url, "body": resp.text[:200]},
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise DataSourceError("Subgraph returned a non-JSON body", {"url": self._url}) from exc

        if not isinstance(body, dict):
            raise DataSourceError("Subgraph returned an unexpected body", {"url": self._url})

        if body.get("errors"):
            if not isinstance(body["errors"], list):
                raise DataSourceError(f"Subgraph query failed: {body['errors']}", {"url": self._url})
            messages = "; ".join(str(e.get("message", e)) for e in body["errors"] if isinstance(e, dict))
            raise DataSourceError(f"Subgraph query failed: {messages or body['errors']}", {"url": self._url})

        data = body.get("data")
        if not isinstance(data, dict):
            raise DataSourceError("Subgraph response has no data", {"url": self._url})
        return data

    def get_group_ids(self) -> list[str]:
        data = self._query(GROUP_IDS_QUERY)
        groups = data.get("groups")
        if not isinstance(groups, list):
            raise DataSourceError("Subgraph response has no groups list", {"url": self._url})
        try:
            return [str(g["id"]) for g in groups]
        except (KeyError, TypeError) as exc:
            raise DataSourceError(f"Malformed group entry: {exc}", {"url": self._url}) from exc

    def get_group(
        self,
        group_id: str,
        members: bool = False,
        verified_proofs: bool = False,
    ) -> GroupRecord:
        data = self._query(build_group_query(group_id, members, verified_proofs))
        groups = data.get("groups")
        if not isinstance(groups, list):
            raise DataSourceError("Subgraph response has no groups list", {"url": self._url})
        if not groups:
            raise GroupNotFoundError(group_id, source=self.name)

        if not isinstance(groups[0], dict):
            raise DataSourceError(f"Malformed group {group_id}", {"url": self._url})

        raw = dict(groups[0])
        if members:
            try:
                raw["members"] = [str(m["identityCommitment"]) for m in raw.get("members") or []]
            except (KeyError, TypeError) as exc:
                raise DataSourceError(f"Malformed member entry: {exc}", {"url": self._url}) from exc
        else:
            raw.pop("members", None)
        if verified_proofs:
            raw["verifiedProofs"] = raw.get("verifiedProofs") or []
        else:
            raw.pop("verifiedProofs", None)

        try:
            group = GroupRecord.model_validate(raw)
        except ValidationError as exc:
            raise DataSourceError(f"Malformed group {group_id}: {exc}", {"url": self._url}) from exc

        logger.debug(
            "Subgraph returned group %s (%d leaves)", group.id, group.merkle_tree.number_of_leaves,
        )
        return group
