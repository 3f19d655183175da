"""The slice of the Semaphore v3 contract ABI this CLI reads."""

from __future__ import annotations


def _event(name: str, *inputs: tuple[str, str, bool]) -> dict:
    return {
        "anonymous": False,
        "name": name,
        "type": "event",
        "inputs": [
            {"indexed": indexed, "internalType": typ, "name": arg, "type": typ}
            for arg, typ, indexed in inputs
        ],
    }


def _view(name: str, *inputs: tuple[str, str], returns: str = "uint256") -> dict:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"internalType": typ, "name": arg, "type": typ} for arg, typ in inputs],
        "outputs": [{"internalType": returns, "name": "", "type": returns}],
    }


SEMAPHORE_ABI: list[dict] = [
    _event(
        "GroupCreated",
        ("groupId", "uint256", True),
        ("merkleTreeDepth", "uint256", False),
        ("zeroValue", "uint256", False),
    ),
    _event(
        "GroupAdminUpdated",
        ("groupId", "uint256", True),
        ("oldAdmin", "address", True),
        ("newAdmin", "address", True),
    ),
    _event(
        "MemberAdded",
        ("groupId", "uint256", True),
        ("index", "uint256", False),
        ("identityCommitment", "uint256", False),
        ("merkleTreeRoot", "uint256", False),
    ),
    _event(
        "MembersAdded",
        ("groupId", "uint256", True),
        ("startIndex", "uint256", False),
        ("identityCommitments", "uint256[]", False),
        ("merkleTreeRoot", "uint256", False),
    ),
    _event(
        "MemberUpdated",
        ("groupId", "uint256", True),
        ("index", "uint256", False),
        ("identityCommitment", "uint256", False),
        ("newIdentityCommitment", "uint256", False),
        ("merkleTreeRoot", "uint256", False),
    ),
    _event(
        "MemberRemoved",
        ("groupId", "uint256", True),
        ("index", "uint256", False),
        ("identityCommitment", "uint256", False),
        ("merkleTreeRoot", "uint256", False),
    ),
    _event(
        "ProofVerified",
        ("groupId", "uint256", True),
        ("merkleTreeRoot", "uint256", True),
        ("nullifierHash", "uint256", False),
        ("externalNullifier", "uint256", True),
        ("signal", "uint256", False),
    ),
    _view("getMerkleTreeRoot", ("groupId", "uint256")),
    _view("getMerkleTreeDepth", ("groupId", "uint256")),
    _view("getNumberOfMerkleTreeLeaves", ("groupId", "uint256")),
]
