"""
Pydantic models for Semaphore groups and lookup results.

Field names are snake_case in Python and camelCase on the wire (the
subgraph schema). Both spellings are accepted when validating.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .networks import ensure_supported


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MerkleTree(_WireModel):
    """Commitment to a group's membership."""

    root: str
    depth: int
    zero_value: str = Field(alias="zeroValue")
    number_of_leaves: int = Field(alias="numberOfLeaves")


class VerifiedProof(_WireModel):
    """A signal that was verified against one of the group's roots."""

    signal: str
    merkle_tree_root: str = Field(alias="merkleTreeRoot")
    external_nullifier: str = Field(alias="externalNullifier")
    nullifier_hash: str = Field(alias="nullifierHash")


class GroupRecord(_WireModel):
    """A Semaphore group as reported by one data source.

    ``members`` and ``verified_proofs`` stay ``None`` unless they were
    requested; an empty list means the group really has none.
    """

    id: str
    admin: Optional[str] = None
    merkle_tree: MerkleTree = Field(alias="merkleTree")
    members: Optional[list[str]] = None
    verified_proofs: Optional[list[VerifiedProof]] = Field(default=None, alias="verifiedProofs")

    @property
    def leaves_match_members(self) -> bool:
        """False only when members are loaded and disagree with the tree."""
        if self.members is None:
            return True
        return self.merkle_tree.number_of_leaves == len(self.members)

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, dropping fields that were not loaded."""
        return self.model_dump(by_alias=True, exclude_none=True)


class GroupFields(BaseModel):
    """Auxiliary fields a lookup should include."""

    members: bool = False
    verified_proofs: bool = False
    admin: bool = False


class LookupRequest(BaseModel):
    """A fully resolved group lookup, built after prompting is done."""

    network: str
    group_id: str
    fields: GroupFields = Field(default_factory=GroupFields)

    @field_validator("network")
    @classmethod
    def _network_supported(cls, value: str) -> str:
        return ensure_supported(value)


class Outcome(str, Enum):
    """Tagged result of a data-source tier or a whole lookup."""

    OK = "ok"
    SOURCE_UNAVAILABLE = "source_unavailable"
    NOT_FOUND = "not_found"


class TierOutcome(BaseModel):
    """What one data source said about a lookup."""

    source: str
    outcome: Outcome
    record: Optional[GroupRecord] = None
    detail: str = ""


class LookupResult(BaseModel):
    """Final result of a group lookup, with every tier that was tried."""

    request: LookupRequest
    outcome: Outcome
    record: Optional[GroupRecord] = None
    attempts: list[TierOutcome] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.outcome == Outcome.OK


class GroupIdsResult(BaseModel):
    """Group ids of a network, or the reason they could not be listed."""

    network: str
    outcome: Outcome
    group_ids: list[str] = Field(default_factory=list)
    attempts: list[TierOutcome] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.outcome == Outcome.OK
