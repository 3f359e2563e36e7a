"""
Contract identifiers for the deployed BAB tokens.

Both variants are compiled from a ``BAB.sol`` declaring contract ``BAB``; only
the source module differs, so verification must name the fully qualified
identifier.
"""

# Variant name -> fully qualified "<source path>:<contract name>"
CONTRACT_VARIANTS: dict[str, str] = {
    "BAB": "contracts/BAB/BAB.sol:BAB",
    "BABUSD1": "contracts/BABUSD1/BAB.sol:BAB",
}

# constructor(string name, string symbol, string tokenURI,
#             address factory, address creator, address validator)
CONSTRUCTOR_TYPES: list[str] = ["string", "string", "string", "address", "address", "address"]
CONSTRUCTOR_FIELDS: list[str] = ["name", "symbol", "tokenURI", "factory", "creator", "validator"]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def get_contract_identifier(variant: str) -> str:
    """Get the fully qualified identifier for a variant.

    Raises:
        KeyError: If the variant is unknown.
    """
    return CONTRACT_VARIANTS[variant]


def split_identifier(identifier: str) -> tuple[str, str]:
    """Split ``"path/File.sol:Name"`` into ``("path/File.sol", "Name")``."""
    source, _, name = identifier.rpartition(":")
    if not source or not name:
        raise ValueError(f"Invalid contract identifier: {identifier}")
    return source, name
