"""
CLI configuration loaded from ~/.semaphore/config.yaml.

Every field has a default, so the file is optional. A broken file is
logged and ignored rather than stopping the command.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from . import SEMAPHORE_HOME
from .networks import DEFAULT_DEPLOYMENTS, NetworkDeployment, ensure_supported

logger = logging.getLogger("semaphore_cli.config")

CONFIG_FILENAME = "config.yaml"
RPC_ENV_PREFIX = "SEMAPHORE_RPC_"


class NetworkOverride(BaseModel):
    """Per-network endpoint overrides. Unset fields keep the defaults."""

    subgraph_url: Optional[str] = None
    rpc_url: Optional[str] = None
    contract_address: Optional[str] = None
    start_block: Optional[int] = None


class CliConfig(BaseModel):
    """Semaphore CLI configuration."""

    request_timeout: float = 30.0
    check_updates: bool = True
    template_package: str = "@semaphore-protocol/cli-template-hardhat"
    template_version: str = "latest"
    npm_registry: str = "https://registry.npmjs.org"
    networks: dict[str, NetworkOverride] = Field(default_factory=dict)

    def deployment_for(self, network: str) -> NetworkDeployment:
        """Resolve the effective deployment of a supported network.

        Precedence: SEMAPHORE_RPC_<NETWORK> env var (rpc_url only),
        then config.yaml overrides, then built-in defaults.

        Raises:
            UnsupportedNetworkError: If the network is not on the allow-list.
        """
        ensure_supported(network)
        base = DEFAULT_DEPLOYMENTS[network]
        override = self.networks.get(network)
        updates = override.model_dump(exclude_none=True) if override else {}

        env_key = RPC_ENV_PREFIX + network.upper().replace("-", "_")
        env_rpc = os.environ.get(env_key)
        if env_rpc:
            updates["rpc_url"] = env_rpc

        return base.model_copy(update=updates)


def config_path(home: Optional[Path] = None) -> Path:
    """Location of the config file under the CLI home directory."""
    return (home or Path(SEMAPHORE_HOME)).expanduser() / CONFIG_FILENAME


def load_config(home: Optional[Path] = None) -> CliConfig:
    """Load configuration from disk.

    Args:
        home: Override the CLI home directory. Defaults to ~/.semaphore/.

    Returns:
        CliConfig loaded from config.yaml, or defaults.
    """
    path = config_path(home)
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            return CliConfig(**data)
        except (yaml.YAMLError, ValueError, TypeError) as exc:
            logger.warning("Failed to load config %s: %s; using defaults", path, exc)
    return CliConfig()
