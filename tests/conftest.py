"""
Shared fixtures: a fake block explorer, a fake RPC node and a Hardhat
artifacts tree holding both token variants.
"""
import itertools
import json
import logging
from types import SimpleNamespace

import pytest

from bab_deploy.config.network import ETHERSCAN_V2_API_URL, NetworkSettings
from bab_deploy.errors import AlreadyVerified, BytecodeMismatch
from bab_deploy.verification.request import (
    ConstructorArguments,
    VerificationRequest,
    encode_constructor_args,
)

TOKEN_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
OTHER_TOKEN_ADDRESS = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
EMPTY_ADDRESS = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
FACTORY = "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb"
CREATOR = "0x52908400098527886E0F7030069857D2E4169EE7"
VALIDATOR = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"

BAB_ID = "contracts/BAB/BAB.sol:BAB"
BABUSD1_ID = "contracts/BABUSD1/BAB.sol:BAB"

SOLC_LONG_VERSION = "0.8.30+commit.73712a01"

CONSTRUCTOR_ABI = {
    "type": "constructor",
    "stateMutability": "nonpayable",
    "inputs": [
        {"name": "name_", "type": "string", "internalType": "string"},
        {"name": "symbol_", "type": "string", "internalType": "string"},
        {"name": "tokenURI_", "type": "string", "internalType": "string"},
        {"name": "factory_", "type": "address", "internalType": "address"},
        {"name": "creator_", "type": "address", "internalType": "address"},
        {"name": "validator_", "type": "address", "internalType": "address"},
    ],
}

# Runtime code body shared by the fixtures; metadata is appended per variant
RUNTIME_BODY = bytes.fromhex("6080604052348015600e575f5ffd5b50")


def with_metadata(body: bytes, marker: int) -> bytes:
    metadata = (
        bytes.fromhex("a2646970667358221220")
        + bytes([marker]) * 32
        + bytes.fromhex("64736f6c634300081e")
    )
    return body + metadata + len(metadata).to_bytes(2, "big")


BAB_RUNTIME = with_metadata(RUNTIME_BODY, 0x11)
BABUSD1_RUNTIME = with_metadata(RUNTIME_BODY + b"\x00", 0x22)


def make_args(**overrides) -> ConstructorArguments:
    values = dict(
        name="BAB Token",
        symbol="BAB",
        token_uri="ipfs://bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
        factory=FACTORY,
        creator=CREATOR,
        validator=VALIDATOR,
    )
    values.update(overrides)
    return ConstructorArguments(**values)


def make_request(address=TOKEN_ADDRESS, variant="BAB", **overrides) -> VerificationRequest:
    return VerificationRequest(
        contract_address=address,
        variant=variant,
        constructor_arguments=make_args(**overrides),
    )


@pytest.fixture(autouse=True)
def reset_loggers():
    yield
    for name in ("verify_bab", "bab_deploy"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


# -----------------------------------------------------------------------------
# Fake explorer / RPC
# -----------------------------------------------------------------------------

class FakeExplorer:
    """In-memory block explorer.

    ``deployments`` maps a lowercase address to the identifier and encoded
    constructor arguments it was deployed with; a submission verifies only
    when both match.
    """

    def __init__(self, deployments=None):
        self.deployments = dict(deployments or {})
        self.verified = set()
        self.submissions = []
        self.calls = []
        self._pending = {}
        self._guids = itertools.count(1)

    def is_verified(self, address):
        self.calls.append(("is_verified", address))
        return address.lower() in self.verified

    def submit(self, address, standard_input, contract_name, compiler_version, constructor_args):
        self.calls.append(("submit", address))
        self.submissions.append({
            "address": address,
            "contract_name": contract_name,
            "compiler_version": compiler_version,
            "constructor_args": constructor_args,
            "sources": sorted(standard_input["sources"]),
        })
        if address.lower() in self.verified:
            raise AlreadyVerified("Contract source code already verified")
        guid = f"guid-{next(self._guids)}"
        self._pending[guid] = (address.lower(), contract_name, constructor_args)
        return guid

    def wait_for_result(self, guid):
        self.calls.append(("wait_for_result", guid))
        address, contract_name, constructor_args = self._pending.pop(guid)
        if self.deployments.get(address) != (contract_name, constructor_args):
            raise BytecodeMismatch("Fail - Unable to verify")
        self.verified.add(address)
        return "Pass - Verified"


class FakeEth:
    def __init__(self, codes):
        self.codes = {k.lower(): v for k, v in codes.items()}
        self.calls = []

    def get_code(self, address):
        self.calls.append(address)
        return self.codes.get(address.lower(), b"")


@pytest.fixture
def deployed_args_hex():
    return encode_constructor_args(make_args())


@pytest.fixture
def fake_explorer(deployed_args_hex):
    return FakeExplorer({
        TOKEN_ADDRESS.lower(): (BAB_ID, deployed_args_hex),
        OTHER_TOKEN_ADDRESS.lower(): (BABUSD1_ID, deployed_args_hex),
    })


@pytest.fixture
def fake_w3():
    return SimpleNamespace(eth=FakeEth({
        TOKEN_ADDRESS: BAB_RUNTIME,
        OTHER_TOKEN_ADDRESS: BABUSD1_RUNTIME,
    }))


@pytest.fixture
def settings():
    return NetworkSettings(
        name="bscTest",
        chain_id=97,
        rpc_url="http://127.0.0.1:8545",
        explorer_api_url=ETHERSCAN_V2_API_URL,
        explorer_url="https://testnet.bscscan.com",
        api_key="TESTKEY",
    )


# -----------------------------------------------------------------------------
# Hardhat project
# -----------------------------------------------------------------------------

def _contract_output(runtime: bytes) -> dict:
    return {
        "abi": [CONSTRUCTOR_ABI],
        "evm": {
            "bytecode": {"object": "6080"},
            "deployedBytecode": {"object": runtime.hex(), "immutableReferences": {}},
        },
    }


def build_info_document(sources: dict, contracts: dict) -> dict:
    return {
        "_format": "hh-sol-build-info-1",
        "id": "0f4c6e",
        "solcVersion": "0.8.30",
        "solcLongVersion": SOLC_LONG_VERSION,
        "input": {
            "language": "Solidity",
            "sources": sources,
            "settings": {"viaIR": True, "optimizer": {"enabled": True, "runs": 200}},
        },
        "output": {"contracts": contracts},
    }


@pytest.fixture
def hardhat_project(tmp_path):
    """Project root with a single build-info holding both variants.

    Only BAB has a ``.dbg.json`` pointer, so BABUSD1 is found by scanning
    ``artifacts/build-info``.
    """
    sources = {
        "contracts/BAB/BAB.sol": {"content": "contract BAB {}"},
        "contracts/BABUSD1/BAB.sol": {"content": "contract BAB { uint8 x; }"},
    }
    contracts = {
        "contracts/BAB/BAB.sol": {"BAB": _contract_output(BAB_RUNTIME)},
        "contracts/BABUSD1/BAB.sol": {"BAB": _contract_output(BABUSD1_RUNTIME)},
    }
    build_info_dir = tmp_path / "artifacts" / "build-info"
    build_info_dir.mkdir(parents=True)
    (build_info_dir / "0f4c6e.json").write_text(json.dumps(build_info_document(sources, contracts)))

    dbg_dir = tmp_path / "artifacts" / "contracts" / "BAB" / "BAB.sol"
    dbg_dir.mkdir(parents=True)
    (dbg_dir / "BAB.dbg.json").write_text(json.dumps({
        "_format": "hh-sol-dbg-1",
        "buildInfo": "../../../build-info/0f4c6e.json",
    }))
    return tmp_path
