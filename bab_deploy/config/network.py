"""
Network configuration for the BAB token harness.

Contains RPC endpoints and block explorer endpoints for every network the
project is configured for, plus the per-network credential lookup used by the
verification driver.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from eth_account import Account

from bab_deploy.errors import ConfigurationError


# =============================================================================
# NETWORK PROFILES
# =============================================================================

ETHERSCAN_V2_API_URL = "https://api.etherscan.io/v2/api"

NETWORKS: dict[str, dict[str, Any]] = {
    "hardhat": {
        "chain_id": 31337,
        "name": "Hardhat Network",
        "rpc_url": "http://127.0.0.1:8545",
        "rpc_url_env": "HARDHAT_RPC_URL",
        "private_key_env": None,  # Local accounts are provided by the node
        "explorer": None,
        "allow_unlimited_contract_size": True,
        "block_gas_limit": 139453126,
    },
    "sepolia": {
        "chain_id": 11155111,
        "name": "Sepolia",
        "rpc_url": "https://ethereum-sepolia-rpc.publicnode.com",
        "rpc_url_env": "SEPOLIA_RPC_URL",
        "private_key_env": "PRIVATE_KEY_SEPOLIA",
        "explorer": {
            "name": "Etherscan Sepolia",
            "url": "https://sepolia.etherscan.io",
            "api_url": ETHERSCAN_V2_API_URL,
        },
    },
    "bsc": {
        "chain_id": 56,
        "name": "BNB Smart Chain",
        "rpc_url": "https://bsc-dataseed1.binance.org/",
        "rpc_url_env": "BSC_RPC_URL",
        "private_key_env": "PRIVATE_KEY_BSC",
        "explorer": {
            "name": "BscScan",
            "url": "https://bscscan.com",
            "api_url": ETHERSCAN_V2_API_URL,
        },
    },
    "bscTest": {
        "chain_id": 97,
        "name": "BNB Smart Chain Testnet",
        "rpc_url": "https://data-seed-prebsc-1-s1.binance.org:8545/",
        "rpc_url_env": "BSC_TESTNET_RPC_URL",
        "private_key_env": "PRIVATE_KEY_BSC_TESTNET",
        "explorer": {
            "name": "BscScan Testnet",
            "url": "https://testnet.bscscan.com",
            "api_url": ETHERSCAN_V2_API_URL,
        },
    },
}

# Explorer API key env vars, in lookup order
API_KEY_ENV_VARS = ("API_KEY", "ETHERSCAN_API_KEY")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_network_config(network: str) -> dict[str, Any]:
    """Get the static profile for a network.

    Raises:
        ConfigurationError: If the network is not configured.
    """
    if network not in NETWORKS:
        raise ConfigurationError(
            f"Unsupported network: {network}. Supported: {list(NETWORKS.keys())}"
        )
    return NETWORKS[network]


def get_rpc_url(network: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Get the RPC URL for a network, honouring its env override."""
    env = os.environ if env is None else env
    config = get_network_config(network)
    override = (env.get(config["rpc_url_env"]) or "").strip()
    return override or config["rpc_url"]


def get_explorer_url(network: str) -> Optional[str]:
    """Get the block explorer URL for a network (None for local networks)."""
    explorer = get_network_config(network)["explorer"]
    return explorer["url"] if explorer else None


def get_explorer_api_url(network: str) -> Optional[str]:
    explorer = get_network_config(network)["explorer"]
    return explorer["api_url"] if explorer else None


def get_api_key(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    env = os.environ if env is None else env
    for name in API_KEY_ENV_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


# =============================================================================
# RESOLVED SETTINGS
# =============================================================================

@dataclass(frozen=True)
class NetworkSettings:
    """Credentials and endpoints resolved for one network."""
    name: str
    chain_id: int
    rpc_url: str
    explorer_api_url: Optional[str]
    explorer_url: Optional[str]
    api_key: Optional[str]
    private_key: Optional[str] = None

    @property
    def has_explorer(self) -> bool:
        return bool(self.explorer_api_url)

    @property
    def deployer_address(self) -> Optional[str]:
        if not self.private_key:
            return None
        return Account.from_key(self.private_key).address

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"NetworkSettings(name={self.name!r}, chain_id={self.chain_id}, "
            f"rpc_url={self.rpc_url!r}, explorer_api_url={self.explorer_api_url!r})"
        )


def load_network_settings(network: str, env: Optional[Mapping[str, str]] = None) -> NetworkSettings:
    """Resolve the settings for ``network`` from the environment.

    Every live network needs its own signing key, exactly like the Hardhat
    config it mirrors. Everything is checked here so that a bad setup fails
    before any RPC or explorer request is made.

    Args:
        network: Network name, one of ``NETWORKS``.
        env: Mapping to read variables from (defaults to ``os.environ``).

    Raises:
        ConfigurationError: On an unknown network, an empty RPC URL, or a
            missing or malformed signing key.
    """
    env = os.environ if env is None else env
    config = get_network_config(network)

    rpc_url = get_rpc_url(network, env)
    if not rpc_url:
        raise ConfigurationError(f"No RPC URL configured for network {network}")

    private_key = None
    key_env = config["private_key_env"]
    if key_env:
        private_key = (env.get(key_env) or "").strip()
        if not private_key:
            raise ConfigurationError(f"{key_env} is not set (required for network {network})")
        try:
            Account.from_key(private_key)
        except Exception as e:
            raise ConfigurationError(f"{key_env} is not a valid private key: {e}") from e

    return NetworkSettings(
        name=network,
        chain_id=config["chain_id"],
        rpc_url=rpc_url,
        explorer_api_url=get_explorer_api_url(network),
        explorer_url=get_explorer_url(network),
        api_key=get_api_key(env),
        private_key=private_key,
    )
