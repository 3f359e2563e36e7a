"""
Command line entry point: verify a deployed BAB or BABUSD1 token on the
network's block explorer. Installed as ``bab-verify`` and run from a
checkout as ``python -m scripts verify_bab``.

Usage:
    bab-verify --network bsc --variant BAB --address 0x... \\
        --name "BAB Token" --symbol BAB --token-uri ipfs://... \\
        --factory 0x... --creator 0x... --validator 0x...

    # Constructor arguments from a deployment record keyed by address
    bab-verify --network bscTest --address 0x... --record deployments/bscTest.json

    # Print the encoded request without touching the network
    bab-verify --network bsc --variant BABUSD1 --address 0x... ... --dry-run

    # JSON document on stdout, log lines on stderr
    bab-verify --network bsc --variant BAB --address 0x... ... --json

Environment (read from .env when present):
    API_KEY                   Block explorer API key (ETHERSCAN_API_KEY also accepted)
    PRIVATE_KEY_SEPOLIA       Signing key for sepolia
    PRIVATE_KEY_BSC           Signing key for bsc
    PRIVATE_KEY_BSC_TESTNET   Signing key for bscTest
    <NETWORK>_RPC_URL         Optional RPC endpoint override
"""
import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from bab_deploy.config.contracts import CONTRACT_VARIANTS
from bab_deploy.config.logging_config import get_script_logger, log_verification
from bab_deploy.config.network import NETWORKS, load_network_settings
from bab_deploy.errors import VerificationError
from bab_deploy.helpers.build_info import ArtifactLoader
from bab_deploy.verification import (
    VerificationDriver,
    VerificationRequest,
    load_deployment_record,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Verify a deployed BAB token on the block explorer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--network", required=True, choices=list(NETWORKS), help="Network profile to verify on")
    parser.add_argument("--variant", choices=list(CONTRACT_VARIANTS), help="Contract variant that was deployed")
    parser.add_argument("--address", required=True, help="Deployed token address")

    ctor = parser.add_argument_group("constructor arguments (override --record)")
    ctor.add_argument("--name", help="Token name")
    ctor.add_argument("--symbol", help="Token symbol")
    ctor.add_argument("--token-uri", dest="token_uri", help="Token URI")
    ctor.add_argument("--factory", help="Factory address")
    ctor.add_argument("--creator", help="Creator address")
    ctor.add_argument("--validator", help="Validator address")

    parser.add_argument("--record", type=Path, help="Deployment record JSON keyed by address")
    parser.add_argument("--project-root", type=Path, default=Path("."), help="Hardhat project root (default: .)")
    parser.add_argument("--compile", action="store_true", help="Compile with solc when Hardhat artifacts are missing")
    parser.add_argument("--local-check", action="store_true", help="Compare runtime bytecode locally before submitting")
    parser.add_argument("--dry-run", action="store_true", help="Validate and print the request without any network call")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--env-file", default=".env", help="Path to .env file (default: .env)")
    parser.add_argument("--log-dir", type=Path, help="Directory for log files (default: ./logs)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.env_file and Path(args.env_file).exists():
        load_dotenv(args.env_file)

    logger = get_script_logger(
        "verify_bab",
        debug=args.debug,
        log_dir=args.log_dir,
        stream=sys.stderr if args.json else None,
    )

    try:
        record = load_deployment_record(args.record, args.address) if args.record else None
        request = VerificationRequest.from_values(
            address=args.address,
            variant=args.variant,
            name=args.name,
            symbol=args.symbol,
            token_uri=args.token_uri,
            factory=args.factory,
            creator=args.creator,
            validator=args.validator,
            record=record,
        ).validated()

        if args.dry_run:
            summary = {
                "contract": request.contract_identifier,
                "address": request.contract_address,
                "network": args.network,
                "constructor_args": request.encoded_constructor_args(),
            }
            if args.json:
                print(json.dumps(summary, indent=2))
            else:
                print(f"Contract:          {summary['contract']}")
                print(f"Address:           {summary['address']}")
                print(f"Network:           {summary['network']}")
                print(f"Constructor args:  {summary['constructor_args']}")
            logger.info("Dry run, nothing submitted")
            return 0

        settings = load_network_settings(args.network)
        logger.info(f"Network: {settings.name} (chain {settings.chain_id})")
        if settings.deployer_address:
            logger.info(f"Deployer account: {settings.deployer_address}")

        driver = VerificationDriver(
            settings,
            artifacts=ArtifactLoader(args.project_root, compile_missing=args.compile),
            local_check=args.local_check,
        )
        result = driver.verify(request)
    except VerificationError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    log_verification(logger, result)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result)
    return 0

