"""
Verification driver for deployed BAB tokens.

Submits one deployed contract to the network's block explorer and reports the
outcome. Nothing is retried and nothing is stored: a run is a single
request/response exchange whose errors propagate to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from web3 import Web3

from bab_deploy.config.contracts import CONSTRUCTOR_TYPES
from bab_deploy.config.network import NetworkSettings
from bab_deploy.errors import AddressNotFound, AlreadyVerified, BytecodeMismatch, ConfigurationError, RequestError
from bab_deploy.helpers.build_info import ArtifactLoader, BuildInfo, constructor_types
from bab_deploy.helpers.bytecode import runtime_code_matches
from bab_deploy.helpers.explorer_api import ExplorerClient
from bab_deploy.helpers.web3_setup import get_deployed_code, get_web3_instance
from bab_deploy.verification.request import VerificationRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Confirmation forwarded to the operator."""
    address: str
    contract: str
    network: str
    message: str
    already_verified: bool = False
    guid: Optional[str] = None
    explorer_url: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        lines = [
            f"Contract:  {self.contract}",
            f"Address:   {self.address}",
            f"Network:   {self.network}",
            f"Status:    {self.message}",
        ]
        if self.guid:
            lines.append(f"GUID:      {self.guid}")
        if self.explorer_url:
            lines.append(f"View:      {self.explorer_url}")
        return "\n".join(lines)


class VerificationDriver:
    """Verifies one deployed contract against its compiled source.

    Args:
        settings: Resolved network settings. Checked here, before any request.
        explorer: Explorer API client (built from ``settings`` when omitted).
        w3: Web3 instance for ``eth_getCode`` (built from ``settings`` when omitted).
        artifacts: Build artifact loader (Hardhat artifacts under the cwd when omitted).
        local_check: Compare runtime bytecode locally before submitting.

    Raises:
        ConfigurationError: If the network has no block explorer or no API key.
    """

    def __init__(
        self,
        settings: NetworkSettings,
        explorer: Optional[ExplorerClient] = None,
        w3: Optional[Web3] = None,
        artifacts: Optional[ArtifactLoader] = None,
        local_check: bool = False,
    ):
        if not settings.has_explorer:
            raise ConfigurationError(f"Network {settings.name} has no block explorer to verify against")
        if not settings.api_key:
            raise ConfigurationError("API_KEY is not set (block explorer API key)")

        self.settings = settings
        self.explorer = explorer or ExplorerClient(
            settings.explorer_api_url, settings.api_key, settings.chain_id
        )
        self.w3 = w3 or get_web3_instance(settings.rpc_url)
        self.artifacts = artifacts or ArtifactLoader(Path.cwd())
        self.local_check = local_check

    def load_build(self, request: VerificationRequest) -> BuildInfo:
        build = self.artifacts.load(request.contract_identifier)
        declared = constructor_types(build.abi)
        if declared is not None and declared != CONSTRUCTOR_TYPES:
            raise RequestError(
                f"{build.identifier} constructor takes ({', '.join(declared)}), "
                f"expected ({', '.join(CONSTRUCTOR_TYPES)})"
            )
        return build

    def _code_url(self, address: str) -> Optional[str]:
        if not self.settings.explorer_url:
            return None
        return f"{self.settings.explorer_url}/address/{address}#code"

    def _already_verified(self, request: VerificationRequest, message: str) -> VerificationResult:
        logger.info(f"{request.contract_address} is already verified")
        return VerificationResult(
            address=request.contract_address,
            contract=request.contract_identifier,
            network=self.settings.name,
            message=message,
            already_verified=True,
            explorer_url=self._code_url(request.contract_address),
        )

    def verify(self, request: VerificationRequest) -> VerificationResult:
        """Verify ``request`` on the configured network.

        Raises:
            RequestError: Invalid address or constructor arguments.
            ConfigurationError: No build artifacts for the contract.
            AddressNotFound: No code at the address.
            BytecodeMismatch: Source and arguments do not reproduce the deployed code.
            ServiceUnavailable: RPC node or explorer unreachable.
            RemoteVerificationError: Any other rejection by the explorer.
        """
        request = request.validated()
        identifier = request.contract_identifier
        address = request.contract_address
        logger.info(f"Verifying {identifier} at {address} on {self.settings.name}")

        build = self.load_build(request)
        constructor_args = request.encoded_constructor_args()
        logger.debug(f"Constructor args: {constructor_args}")

        code = get_deployed_code(self.w3, address)
        if not code:
            raise AddressNotFound(f"No contract code at {address} on {self.settings.name}")

        if self.local_check:
            if not runtime_code_matches(code, build.deployed_bytecode, build.immutable_references):
                raise BytecodeMismatch(
                    f"Runtime bytecode at {address} does not match the compiled {identifier}"
                )
            logger.info("Local bytecode check passed")

        if self.explorer.is_verified(address):
            return self._already_verified(request, "Already Verified")

        try:
            guid = self.explorer.submit(
                address=address,
                standard_input=build.input,
                contract_name=identifier,
                compiler_version=build.solc_long_version,
                constructor_args=constructor_args,
            )
            message = self.explorer.wait_for_result(guid)
        except AlreadyVerified as e:
            return self._already_verified(request, str(e))

        logger.info(f"{identifier} at {address} verified")
        return VerificationResult(
            address=address,
            contract=identifier,
            network=self.settings.name,
            message=message,
            guid=guid,
            explorer_url=self._code_url(address),
        )
