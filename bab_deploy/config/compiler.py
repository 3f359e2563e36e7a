"""
Solidity compiler configuration.

Mirrors the project's Hardhat ``solidity`` block. These settings must match
the ones the tokens were deployed with, otherwise verification cannot
reproduce the deployed bytecode.
"""

import copy
from typing import Any

SOLC_VERSION: str = "0.8.30"
VIA_IR: bool = True
OPTIMIZER_ENABLED: bool = True
OPTIMIZER_RUNS: int = 200

# Standard JSON "settings" block
SOLIDITY_SETTINGS: dict[str, Any] = {
    "viaIR": VIA_IR,
    "optimizer": {
        "enabled": OPTIMIZER_ENABLED,
        "runs": OPTIMIZER_RUNS,
    },
    "outputSelection": {
        "*": {
            "*": [
                "abi",
                "evm.bytecode",
                "evm.deployedBytecode",
                "evm.methodIdentifiers",
                "metadata",
            ],
            "": ["ast"],
        }
    },
}

# Import roots tried after the project root for non-relative imports
LIBRARY_DIRS: tuple[str, ...] = ("node_modules",)

CONTRACTS_DIR = "contracts"
ARTIFACTS_DIR = "artifacts"


def solidity_settings() -> dict[str, Any]:
    """Return a copy of ``SOLIDITY_SETTINGS`` safe to mutate."""
    return copy.deepcopy(SOLIDITY_SETTINGS)
