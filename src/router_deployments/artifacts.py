"""Build directory layout, compiled artifact loading and constructor binding."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from eth_utils import to_checksum_address
from web3 import Web3
from web3.exceptions import Web3Exception

from .exceptions import ArtifactNotFoundError, DefectiveArtifactError
from .types import ContractArtifact

logger = logging.getLogger(__name__)

# Unlinked library placeholders are 40 characters: __$<34 hex>$__ or __LibName padded with _
_UNLINKED_LIBRARY = re.compile(r"__[\w$:./]{36}__")


def get_build_paths(build_root: Optional[Union[Path, str]] = None) -> Tuple[Path, Path]:
    """
    Locate the artifact directory and deployment records of a build tree.

    Args:
        build_root: Build directory; the current directory's build/ when None

    Returns:
        Tuple of (contracts_dir, records_path)
    """
    root = Path.cwd() / "build" if build_root is None else Path(build_root).absolute()
    return root / "contracts", root / "deployments.json"


def load_artifact(
    contract_name: str,
    contracts_dir: Union[Path, str],
    compiler_version: Optional[str] = None,
) -> ContractArtifact:
    """
    Load a truffle-style build artifact.

    Args:
        contract_name: Contract name, also the artifact file stem
        contracts_dir: Directory holding <Name>.json artifacts
        compiler_version: Expected solc version; a mismatch is logged

    Returns:
        ContractArtifact

    Raises:
        ArtifactNotFoundError: If the artifact file does not exist
        DefectiveArtifactError: If the artifact is malformed, has no bytecode
                                or has unlinked libraries
    """
    path = Path(contracts_dir) / f"{contract_name}.json"
    if not path.exists():
        raise ArtifactNotFoundError(
            f"Artifact for {contract_name} not found at {path}. Compile the contracts first."
        )

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DefectiveArtifactError(f"Artifact {path} is not valid JSON: {e}") from e

    if "abi" not in data:
        raise DefectiveArtifactError(f"Artifact {path} has no ABI")

    bytecode = data.get("bytecode") or ""
    if bytecode in ("", "0x"):
        raise DefectiveArtifactError(
            f"Artifact {path} has no bytecode (abstract contract or interface?)"
        )
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode

    placeholders = sorted(set(_UNLINKED_LIBRARY.findall(bytecode)))
    if placeholders:
        raise DefectiveArtifactError(
            f"Artifact {path} has unlinked libraries: {', '.join(placeholders)}"
        )

    # Truffle records e.g. "0.6.6+commit.6c089d02.Emscripten.clang"
    artifact_compiler = (data.get("compiler") or {}).get("version")
    if compiler_version and artifact_compiler:
        if artifact_compiler.split("+")[0] != compiler_version:
            logger.warning(
                "%s was compiled with solc %s, expected %s",
                contract_name,
                artifact_compiler,
                compiler_version,
            )

    return ContractArtifact(
        contract_name=data.get("contractName", contract_name),
        abi=data["abi"],
        bytecode=bytecode,
        compiler_version=artifact_compiler,
        source_path=data.get("sourcePath"),
    )


def constructor_inputs(abi: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Constructor inputs from an ABI; empty when there is no constructor."""
    for item in abi:
        if item.get("type") == "constructor":
            return list(item.get("inputs", []))
    return []


def constructor_args(artifact: ContractArtifact, args: Sequence[Any]) -> List[Any]:
    """
    Check constructor arguments against the ABI and checksum address values.

    Raises:
        DefectiveArtifactError: If the argument count or an address is wrong
    """
    inputs = constructor_inputs(artifact.abi)
    if len(inputs) != len(args):
        raise DefectiveArtifactError(
            f"{artifact.contract_name} constructor takes {len(inputs)} argument(s), "
            f"got {len(args)}"
        )

    values = []
    for item, value in zip(inputs, args):
        # web3 rejects mixed-case addresses whose EIP-55 checksum does not verify
        if item["type"] == "address" and isinstance(value, str):
            try:
                value = to_checksum_address(value)
            except ValueError as e:
                raise DefectiveArtifactError(
                    f"Invalid address for {artifact.contract_name} argument "
                    f"'{item.get('name', '')}': {value}"
                ) from e
        values.append(value)
    return values


def deployment_constructor(w3: Web3, artifact: ContractArtifact, args: Sequence[Any]):
    """
    Bind an artifact's constructor to its arguments.

    Returns:
        web3 ContractConstructor ready for estimate_gas and build_transaction

    Raises:
        DefectiveArtifactError: If args do not match the constructor signature
    """
    values = constructor_args(artifact, args)
    contract = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
    try:
        return contract.constructor(*values)
    except (Web3Exception, TypeError, ValueError) as e:
        raise DefectiveArtifactError(
            f"Cannot encode constructor arguments for {artifact.contract_name}: {e}"
        ) from e
