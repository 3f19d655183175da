"""Tests for the subgraph data source. HTTP is mocked throughout."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from semaphore_cli.errors import DataSourceError, GroupNotFoundError
from semaphore_cli.sources.subgraph import SubgraphSource, build_group_query

URL = "https://example.test/subgraph"


def _response(body=None, status: int = 200, json_error: bool = False) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = "body"
    if json_error:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = body
    return resp


def _source(resp: MagicMock) -> tuple[SubgraphSource, MagicMock]:
    session = MagicMock()
    session.post.return_value = resp
    return SubgraphSource(URL, timeout=5, session=session), session


GROUP = {
    "id": "42",
    "admin": "0xadmin",
    "merkleTree": {"root": "123", "depth": 20, "zeroValue": "0", "numberOfLeaves": 2},
}


class TestBuildGroupQuery:
    """GraphQL query construction."""

    def test_base_selection(self):
        query = build_group_query("42")
        assert 'id: "42"' in query
        assert "merkleTree { root depth zeroValue numberOfLeaves }" in query
        assert "members" not in query
        assert "verifiedProofs" not in query

    def test_members_selection(self):
        assert "members(orderBy: index) { identityCommitment }" in build_group_query("1", members=True)

    def test_proofs_selection(self):
        query = build_group_query("1", verified_proofs=True)
        assert "verifiedProofs" in query
        assert "nullifierHash" in query

    def test_group_id_is_escaped(self):
        query = build_group_query('1"} ) { x')
        assert '"1\\"} ) { x"' in query


class TestGetGroup:
    """SubgraphSource.get_group."""

    def test_parses_group(self):
        source, session = _source(_response({"data": {"groups": [GROUP]}}))
        group = source.get_group("42")
        assert group.id == "42"
        assert group.admin == "0xadmin"
        assert group.merkle_tree.number_of_leaves == 2
        assert group.members is None
        assert group.verified_proofs is None
        assert session.post.call_args.kwargs["timeout"] == 5

    def test_parses_members_in_order(self):
        body = {"data": {"groups": [dict(GROUP, members=[
            {"identityCommitment": "7"}, {"identityCommitment": "8"},
        ])]}}
        source, _ = _source(_response(body))
        group = source.get_group("42", members=True)
        assert group.members == ["7", "8"]

    def test_parses_proofs(self):
        proof = {"signal": "1", "merkleTreeRoot": "2", "externalNullifier": "3", "nullifierHash": "4"}
        body = {"data": {"groups": [dict(GROUP, verifiedProofs=[proof])]}}
        source, _ = _source(_response(body))
        group = source.get_group("42", verified_proofs=True)
        assert group.verified_proofs[0].external_nullifier == "3"

    def test_numeric_strings_coerced(self):
        tree = {"root": "123", "depth": "20", "zeroValue": "0", "numberOfLeaves": "0"}
        source, _ = _source(_response({"data": {"groups": [dict(GROUP, merkleTree=tree)]}}))
        assert source.get_group("42").merkle_tree.depth == 20

    def test_missing_members_means_empty(self):
        source, _ = _source(_response({"data": {"groups": [dict(GROUP, members=None)]}}))
        assert source.get_group("42", members=True).members == []

    def test_empty_groups_is_not_found(self):
        source, _ = _source(_response({"data": {"groups": []}}))
        with pytest.raises(GroupNotFoundError):
            source.get_group("999")

    def test_malformed_group(self):
        source, _ = _source(_response({"data": {"groups": [{"id": "42"}]}}))
        with pytest.raises(DataSourceError):
            source.get_group("42")


class TestTransportErrors:
    """Every transport or schema problem is a DataSourceError."""

    def test_connection_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        source = SubgraphSource(URL, session=session)
        with pytest.raises(DataSourceError, match="refused"):
            source.get_group("42")

    def test_http_error_status(self):
        source, _ = _source(_response(status=502))
        with pytest.raises(DataSourceError, match="502"):
            source.get_group("42")

    def test_non_json_body(self):
        source, _ = _source(_response(json_error=True))
        with pytest.raises(DataSourceError):
            source.get_group("42")

    def test_graphql_errors(self):
        source, _ = _source(_response({"errors": [{"message": "indexing error"}]}))
        with pytest.raises(DataSourceError, match="indexing error"):
            source.get_group("42")

    def test_graphql_errors_not_a_list(self):
        source, _ = _source(_response({"errors": 5}))
        with pytest.raises(DataSourceError, match="5"):
            source.get_group("42")

    def test_missing_data(self):
        source, _ = _source(_response({"data": None}))
        with pytest.raises(DataSourceError):
            source.get_group_ids()


class TestGetGroupIds:
    """SubgraphSource.get_group_ids."""

    def test_lists_ids(self):
        source, _ = _source(_response({"data": {"groups": [{"id": "1"}, {"id": "2"}]}}))
        assert source.get_group_ids() == ["1", "2"]

    def test_empty(self):
        source, _ = _source(_response({"data": {"groups": []}}))
        assert source.get_group_ids() == []

    def test_malformed_entry(self):
        source, _ = _source(_response({"data": {"groups": [{"name": "x"}]}}))
        with pytest.raises(DataSourceError):
            source.get_group_ids()
