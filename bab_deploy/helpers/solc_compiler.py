"""
Compile a contract with solc when no Hardhat artifacts are available.

Source units are named the way Hardhat names them (project-relative paths and
bare library paths such as ``@openzeppelin/contracts/...``), so the resulting
standard JSON input verifies the same way a Hardhat build does.
"""
from __future__ import annotations

import logging
import posixpath
import re
from pathlib import Path
from typing import Any

from solcx import (
    compile_standard,
    get_installed_solc_versions,
    get_solc_version,
    install_solc,
    set_solc_version,
)
from solcx.exceptions import SolcError

from bab_deploy.config.compiler import LIBRARY_DIRS, SOLC_VERSION, solidity_settings
from bab_deploy.config.contracts import split_identifier
from bab_deploy.errors import ConfigurationError
from bab_deploy.helpers.build_info import BuildInfo, build_info_from_compiler_output

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
# import "a.sol"; import "a.sol" as A; import {X} from "a.sol"; import * as A from "a.sol";
_IMPORT_RE = re.compile(r"""^\s*import\s+(?:[^;"']*?\bfrom\s+)?["']([^"']+)["'][^;]*;""", re.MULTILINE)


def find_imports(source: str) -> list[str]:
    """Return the import paths of a Solidity source, in order of appearance."""
    return _IMPORT_RE.findall(_COMMENT_RE.sub("", source))


def resolve_import(importer: str, path: str) -> str:
    """Turn an import path into a source unit name.

    Relative imports are resolved against the importing unit; anything else
    already is a source unit name.
    """
    if path.startswith("./") or path.startswith("../"):
        return posixpath.normpath(posixpath.join(posixpath.dirname(importer), path))
    return path


def _read_unit(project_root: Path, unit: str) -> str:
    for base in (project_root, *(project_root / d for d in LIBRARY_DIRS)):
        candidate = base / unit
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8")
    raise ConfigurationError(
        f"Cannot resolve Solidity source {unit} (looked in {project_root} and {', '.join(LIBRARY_DIRS)})"
    )


def collect_sources(project_root: Path, entry: str) -> dict[str, dict[str, str]]:
    """Collect ``entry`` and everything it imports, transitively."""
    project_root = Path(project_root)
    sources: dict[str, dict[str, str]] = {}
    pending = [entry]
    while pending:
        unit = pending.pop()
        if unit in sources:
            continue
        content = _read_unit(project_root, unit)
        sources[unit] = {"content": content}
        for path in find_imports(content):
            dependency = resolve_import(unit, path)
            if dependency not in sources:
                pending.append(dependency)
    return dict(sorted(sources.items()))


def build_standard_input(sources: dict[str, dict[str, str]]) -> dict[str, Any]:
    return {
        "language": "Solidity",
        "sources": sources,
        "settings": solidity_settings(),
    }


def ensure_solc(version: str) -> str:
    """Install solc ``version`` if needed and return its long version (with commit hash)."""
    installed = {str(v) for v in get_installed_solc_versions()}
    if version not in installed:
        logger.info(f"Installing solc {version}")
        install_solc(version)
    set_solc_version(version, silent=True)
    return str(get_solc_version(with_commit_hash=True))


def compile_build_info(project_root: Path, identifier: str, solc_version: str = SOLC_VERSION) -> BuildInfo:
    """Compile the source of ``identifier`` with the project's compiler settings.

    Raises:
        ConfigurationError: If a source cannot be found, solc fails, or the
            contract is missing from the output.
    """
    source_name, contract_name = split_identifier(identifier)
    sources = collect_sources(project_root, source_name)
    standard_input = build_standard_input(sources)
    logger.info(f"Compiling {identifier} ({len(sources)} source units) with solc {solc_version}")

    long_version = ensure_solc(solc_version)
    try:
        output = compile_standard(standard_input, solc_version=solc_version)
    except SolcError as e:
        raise ConfigurationError(f"solc failed to compile {identifier}: {e}") from e

    info = build_info_from_compiler_output(source_name, contract_name, long_version, standard_input, output)
    if info is None:
        raise ConfigurationError(f"solc output has no contract {contract_name} in {source_name}")
    return info
