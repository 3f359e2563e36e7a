"""
Build artifact helper - locates the compiler input and output for a contract.

Public API
----------
BuildInfo
    Standard JSON input, long compiler version, ABI and runtime bytecode of
    one compiled contract.
read_hardhat_build_info(project_root, identifier)
    Read a contract's build from Hardhat's ``artifacts/`` tree.
ArtifactLoader(project_root, compile_missing=False)
    Hardhat first, optionally falling back to compiling with solc.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from bab_deploy.config.compiler import ARTIFACTS_DIR
from bab_deploy.config.contracts import split_identifier
from bab_deploy.errors import ConfigurationError

__all__ = ["BuildInfo", "ArtifactLoader", "read_hardhat_build_info", "constructor_types"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildInfo:
    source_name: str
    contract_name: str
    solc_long_version: str
    input: dict[str, Any]
    abi: list[dict[str, Any]]
    deployed_bytecode: str
    immutable_references: dict[str, list[dict[str, int]]] = field(default_factory=dict)

    @property
    def identifier(self) -> str:
        return f"{self.source_name}:{self.contract_name}"


def constructor_types(abi: list[dict[str, Any]]) -> Optional[list[str]]:
    """Return the constructor input types declared in ``abi`` (None if absent)."""
    for entry in abi or []:
        if entry.get("type") == "constructor":
            return [str(i.get("type")) for i in entry.get("inputs", [])]
    return None


def build_info_from_compiler_output(
    source_name: str,
    contract_name: str,
    solc_long_version: str,
    standard_input: dict[str, Any],
    output: dict[str, Any],
) -> Optional[BuildInfo]:
    """Extract one contract from a standard JSON compiler output (None if it is not there)."""
    contract = output.get("contracts", {}).get(source_name, {}).get(contract_name)
    if not contract:
        return None
    deployed = contract.get("evm", {}).get("deployedBytecode", {})
    return BuildInfo(
        source_name=source_name,
        contract_name=contract_name,
        solc_long_version=solc_long_version,
        input=standard_input,
        abi=contract.get("abi", []),
        deployed_bytecode=deployed.get("object", ""),
        immutable_references=deployed.get("immutableReferences", {}) or {},
    )


def _load_build_info_file(path: Path, source_name: str, contract_name: str) -> Optional[BuildInfo]:
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Skipping unreadable build info {path}: {e}")
        return None

    version = data.get("solcLongVersion") or data.get("solcVersion")
    if not version or "input" not in data or "output" not in data:
        return None
    return build_info_from_compiler_output(source_name, contract_name, version, data["input"], data["output"])


def read_hardhat_build_info(project_root: Path, identifier: str) -> Optional[BuildInfo]:
    """Read a contract's build info from Hardhat's artifacts directory.

    The ``<Name>.dbg.json`` file next to the contract artifact names the
    build-info file that produced it. When it is missing, every file in
    ``artifacts/build-info`` is searched, newest first.
    """
    source_name, contract_name = split_identifier(identifier)
    artifacts = Path(project_root) / ARTIFACTS_DIR

    dbg_file = artifacts / source_name / f"{contract_name}.dbg.json"
    if dbg_file.exists():
        try:
            with open(dbg_file) as f:
                build_info_ref = json.load(f).get("buildInfo")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable {dbg_file}: {e}")
            build_info_ref = None
        if build_info_ref:
            info = _load_build_info_file((dbg_file.parent / build_info_ref).resolve(), source_name, contract_name)
            if info is not None:
                logger.debug(f"Build info for {identifier} from {dbg_file}")
                return info

    build_info_dir = artifacts / "build-info"
    if not build_info_dir.is_dir():
        return None
    candidates = sorted(build_info_dir.glob("*.json"), key=lambda p: p.stat().st_mtime, reverse=True)
    for path in candidates:
        info = _load_build_info_file(path, source_name, contract_name)
        if info is not None:
            logger.debug(f"Build info for {identifier} from {path.name}")
            return info
    return None


class ArtifactLoader:
    """Resolves the build of a contract identifier for verification."""

    def __init__(self, project_root: Path, compile_missing: bool = False):
        self.project_root = Path(project_root)
        self.compile_missing = compile_missing

    def load(self, identifier: str) -> BuildInfo:
        info = read_hardhat_build_info(self.project_root, identifier)
        if info is not None:
            return info

        if not self.compile_missing:
            raise ConfigurationError(
                f"No build artifacts for {identifier} under {self.project_root / ARTIFACTS_DIR}. "
                "Run `npx hardhat compile` or pass --compile."
            )

        # Imported lazily: solcx is only needed without Hardhat artifacts
        from bab_deploy.helpers.solc_compiler import compile_build_info

        logger.info(f"No Hardhat artifacts for {identifier}, compiling with solc")
        return compile_build_info(self.project_root, identifier)
