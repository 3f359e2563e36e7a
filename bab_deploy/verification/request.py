"""
Verification request for a deployed BAB token.

A request carries everything the explorer needs besides the compiled source:
the deployed address, which variant to match against, and the constructor
arguments used at deployment time.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from eth_abi import encode
from eth_utils import is_address, to_checksum_address

from bab_deploy.config.contracts import (
    CONSTRUCTOR_TYPES,
    CONTRACT_VARIANTS,
    ZERO_ADDRESS,
)
from bab_deploy.errors import RequestError

__all__ = [
    "ConstructorArguments",
    "VerificationRequest",
    "encode_constructor_args",
    "load_deployment_record",
]


def _checked_address(value: Optional[str], label: str) -> str:
    v = (value or "").strip()
    if not v:
        raise RequestError(f"{label} is required")
    if not is_address(v):
        raise RequestError(f"{label} is not a valid address: {value!r}")
    if v.lower() == ZERO_ADDRESS:
        raise RequestError(f"{label} must not be the zero address")
    return to_checksum_address(v)


@dataclass(frozen=True)
class ConstructorArguments:
    """Arguments passed to ``BAB``'s constructor, in declaration order."""
    name: str
    symbol: str
    token_uri: str
    factory: str
    creator: str
    validator: str

    def as_list(self) -> list[str]:
        return [self.name, self.symbol, self.token_uri, self.factory, self.creator, self.validator]

    def validated(self) -> "ConstructorArguments":
        for label, value in (("name", self.name), ("symbol", self.symbol), ("tokenURI", self.token_uri)):
            if not value:
                raise RequestError(f"Constructor argument {label} must not be empty")
        return ConstructorArguments(
            name=self.name,
            symbol=self.symbol,
            token_uri=self.token_uri,
            factory=_checked_address(self.factory, "factory address"),
            creator=_checked_address(self.creator, "creator address"),
            validator=_checked_address(self.validator, "validator address"),
        )


def encode_constructor_args(args: ConstructorArguments) -> str:
    """ABI-encode constructor arguments as hex without the 0x prefix."""
    return encode(CONSTRUCTOR_TYPES, args.as_list()).hex()


@dataclass(frozen=True)
class VerificationRequest:
    contract_address: str
    variant: str
    constructor_arguments: ConstructorArguments

    @property
    def contract_identifier(self) -> str:
        if not self.variant:
            raise RequestError(f"Contract variant is required, one of {list(CONTRACT_VARIANTS)}")
        try:
            return CONTRACT_VARIANTS[self.variant]
        except KeyError:
            raise RequestError(
                f"Unknown contract variant: {self.variant}. Supported: {list(CONTRACT_VARIANTS)}"
            ) from None

    def validated(self) -> "VerificationRequest":
        """Return a copy with checksummed addresses.

        Raises:
            RequestError: On an unknown variant, an empty string argument, or a
                malformed or zero address.
        """
        # Resolve the identifier first so an unknown variant is reported before field errors
        self.contract_identifier
        return VerificationRequest(
            contract_address=_checked_address(self.contract_address, "contract address"),
            variant=self.variant,
            constructor_arguments=self.constructor_arguments.validated(),
        )

    def encoded_constructor_args(self) -> str:
        return encode_constructor_args(self.constructor_arguments)

    @classmethod
    def from_values(
        cls,
        address: Optional[str],
        variant: Optional[str],
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        token_uri: Optional[str] = None,
        factory: Optional[str] = None,
        creator: Optional[str] = None,
        validator: Optional[str] = None,
        record: Optional[dict[str, Any]] = None,
    ) -> "VerificationRequest":
        """Build a request from explicit values, falling back to a deployment record.

        Explicit values win over the record. Nothing is validated here, call
        :meth:`validated` before use.
        """
        record = record or {}

        def pick(value, key):
            if value is not None:
                return value
            stored = record.get(key)
            return "" if stored is None else str(stored)

        return cls(
            contract_address=address or "",
            variant=variant or record.get("variant") or "",
            constructor_arguments=ConstructorArguments(
                name=pick(name, "name"),
                symbol=pick(symbol, "symbol"),
                token_uri=pick(token_uri, "tokenURI"),
                factory=pick(factory, "factory"),
                creator=pick(creator, "creator"),
                validator=pick(validator, "validator"),
            ),
        )


def load_deployment_record(path: Path, address: str) -> dict[str, Any]:
    """Load the deployment record for ``address`` from a JSON file keyed by address.

    Example file::

        {
          "0xAbC...": {
            "variant": "BAB",
            "name": "BAB Token",
            "symbol": "BAB",
            "tokenURI": "ipfs://...",
            "factory": "0x...",
            "creator": "0x...",
            "validator": "0x..."
          }
        }

    Raises:
        RequestError: If the file is missing, unreadable, or has no entry for the address.
    """
    path = Path(path)
    try:
        with open(path) as f:
            records = json.load(f)
    except FileNotFoundError:
        raise RequestError(f"Deployment record file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise RequestError(f"Deployment record file {path} is not valid JSON: {e}") from e

    if not isinstance(records, dict):
        raise RequestError(f"Deployment record file {path} must map addresses to records")

    wanted = (address or "").strip().lower()
    for key, record in records.items():
        if key.strip().lower() == wanted:
            if not isinstance(record, dict):
                raise RequestError(f"Deployment record for {address} in {path} is not an object")
            return record
    raise RequestError(f"No deployment record for {address} in {path}")
