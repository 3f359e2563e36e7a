"""
Configuration package for the BAB deployment harness.

Static data consumed by the verification workflow: network profiles,
compiler settings and contract identifiers.
"""

from bab_deploy.config.network import (
    ETHERSCAN_V2_API_URL,
    NETWORKS,
    NetworkSettings,
    get_network_config,
    get_rpc_url,
    get_explorer_url,
    get_explorer_api_url,
    get_api_key,
    load_network_settings,
)

from bab_deploy.config.compiler import (
    SOLC_VERSION,
    SOLIDITY_SETTINGS,
    solidity_settings,
)

from bab_deploy.config.contracts import (
    CONTRACT_VARIANTS,
    CONSTRUCTOR_TYPES,
    ZERO_ADDRESS,
    get_contract_identifier,
    split_identifier,
)

__all__ = [
    # Network
    'ETHERSCAN_V2_API_URL',
    'NETWORKS',
    'NetworkSettings',
    'get_network_config',
    'get_rpc_url',
    'get_explorer_url',
    'get_explorer_api_url',
    'get_api_key',
    'load_network_settings',

    # Compiler
    'SOLC_VERSION',
    'SOLIDITY_SETTINGS',
    'solidity_settings',

    # Contracts
    'CONTRACT_VARIANTS',
    'CONSTRUCTOR_TYPES',
    'ZERO_ADDRESS',
    'get_contract_identifier',
    'split_identifier',
]
