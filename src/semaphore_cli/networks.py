"""
Supported networks and their Semaphore deployments.

The allow-list is fixed: anything not named here is rejected before a
single query leaves the machine. Endpoints and contract coordinates are
defaults; config.yaml and SEMAPHORE_RPC_<NETWORK> can override them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .errors import UnsupportedNetworkError

SUPPORTED_NETWORKS: tuple[str, ...] = (
    "sepolia",
    "goerli",
    "mumbai",
    "optimism-goerli",
    "arbitrum",
    "arbitrum-goerli",
)

SUBGRAPH_URL_TEMPLATE = "https://api.studio.thegraph.com/query/14377/semaphore-{network}/v3.6.1"

SEMAPHORE_V3_ADDRESS = "0x3889927F0B5Eb1a02C6E2C20b39a1Bd4EAd76131"


class NetworkDeployment(BaseModel):
    """Where Semaphore lives on one network.

    Attributes:
        name: Network name from the allow-list.
        subgraph_url: GraphQL endpoint of the indexed subgraph.
        rpc_url: JSON-RPC endpoint used for direct contract queries.
        contract_address: Address of the Semaphore contract.
        start_block: Block the contract was deployed at; event scans start here.
    """

    name: str
    subgraph_url: str
    rpc_url: str
    contract_address: str
    start_block: int = 0


DEFAULT_DEPLOYMENTS: dict[str, NetworkDeployment] = {
    "sepolia": NetworkDeployment(
        name="sepolia",
        subgraph_url=SUBGRAPH_URL_TEMPLATE.format(network="sepolia"),
        rpc_url="https://ethereum-sepolia-rpc.publicnode.com",
        contract_address=SEMAPHORE_V3_ADDRESS,
        start_block=3231111,
    ),
    "goerli": NetworkDeployment(
        name="goerli",
        subgraph_url=SUBGRAPH_URL_TEMPLATE.format(network="goerli"),
        rpc_url="https://ethereum-goerli-rpc.publicnode.com",
        contract_address=SEMAPHORE_V3_ADDRESS,
        start_block=8777695,
    ),
    "mumbai": NetworkDeployment(
        name="mumbai",
        subgraph_url=SUBGRAPH_URL_TEMPLATE.format(network="mumbai"),
        rpc_url="https://polygon-mumbai-bor-rpc.publicnode.com",
        contract_address=SEMAPHORE_V3_ADDRESS,
        start_block=33995010,
    ),
    "optimism-goerli": NetworkDeployment(
        name="optimism-goerli",
        subgraph_url=SUBGRAPH_URL_TEMPLATE.format(network="optimism-goerli"),
        rpc_url="https://optimism-goerli-rpc.publicnode.com",
        contract_address=SEMAPHORE_V3_ADDRESS,
        start_block=7632846,
    ),
    "arbitrum": NetworkDeployment(
        name="arbitrum",
        subgraph_url=SUBGRAPH_URL_TEMPLATE.format(network="arbitrum"),
        rpc_url="https://arbitrum-one-rpc.publicnode.com",
        contract_address="0xc60E0Ee1a2770d5F619858C641f14FC4a6401520",
        start_block=77278430,
    ),
    "arbitrum-goerli": NetworkDeployment(
        name="arbitrum-goerli",
        subgraph_url=SUBGRAPH_URL_TEMPLATE.format(network="arbitrum-goerli"),
        rpc_url="https://arbitrum-goerli-rpc.publicnode.com",
        contract_address=SEMAPHORE_V3_ADDRESS,
        start_block=15174410,
    ),
}


def is_supported(network: Optional[str]) -> bool:
    """Whether a network name is on the allow-list."""
    return network in SUPPORTED_NETWORKS


def ensure_supported(network: str) -> str:
    """Return the network unchanged, or raise if it is not allowed.

    Raises:
        UnsupportedNetworkError: If the name is not on the allow-list.
    """
    if not is_supported(network):
        raise UnsupportedNetworkError(network)
    return network
