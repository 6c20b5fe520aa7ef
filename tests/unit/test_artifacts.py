"""Unit tests for build paths, artifact loading and constructor binding."""

import json
import logging
from pathlib import Path

import pytest
from web3 import Web3

from router_deployments.artifacts import (
    constructor_args,
    constructor_inputs,
    deployment_constructor,
    get_build_paths,
    load_artifact,
)
from router_deployments.exceptions import ArtifactNotFoundError, DefectiveArtifactError
from router_deployments.types import ContractArtifact

FACTORY = "0x4207CD6E113E364220EC08e2Ff446973437859fd"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


def write_artifact(directory: Path, name: str, **overrides) -> Path:
    data = {
        "contractName": name,
        "abi": [],
        "bytecode": "0x6080604052",
        "compiler": {"version": "0.6.6+commit.6c089d02.Emscripten.clang"},
    }
    data.update(overrides)
    path = directory / f"{name}.json"
    path.write_text(json.dumps(data))
    return path


class TestLoadArtifact:
    """Test the load_artifact function."""

    def test_loads_router_artifact(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)

        assert artifact.contract_name == "UniswapV2Router02"
        assert artifact.bytecode.startswith("0x60")
        assert artifact.compiler_version.startswith("0.6.6")
        assert artifact.source_path == "contracts/UniswapV2Router02.sol"
        assert len(constructor_inputs(artifact.abi)) == 2

    def test_missing_artifact(self, tmp_path: Path):
        with pytest.raises(ArtifactNotFoundError, match="UniswapV2Router02"):
            load_artifact("UniswapV2Router02", tmp_path)

    def test_missing_artifact_catchable_as_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_artifact("UniswapV2Router02", tmp_path)

    def test_invalid_json(self, tmp_path: Path):
        (tmp_path / "Broken.json").write_text("{ nope")

        with pytest.raises(DefectiveArtifactError):
            load_artifact("Broken", tmp_path)

    def test_missing_abi(self, tmp_path: Path):
        (tmp_path / "NoAbi.json").write_text(json.dumps({"bytecode": "0x60"}))

        with pytest.raises(DefectiveArtifactError, match="ABI"):
            load_artifact("NoAbi", tmp_path)

    @pytest.mark.parametrize("bytecode", ["", "0x", None])
    def test_empty_bytecode(self, tmp_path: Path, bytecode):
        """Test that interfaces and abstract contracts are rejected."""
        write_artifact(tmp_path, "IUniswapV2Router02", bytecode=bytecode)

        with pytest.raises(DefectiveArtifactError, match="no bytecode"):
            load_artifact("IUniswapV2Router02", tmp_path)

    def test_adds_hex_prefix(self, tmp_path: Path):
        write_artifact(tmp_path, "Plain", bytecode="6080604052")

        assert load_artifact("Plain", tmp_path).bytecode == "0x6080604052"

    def test_unlinked_library_placeholder(self, tmp_path: Path):
        placeholder = "__$" + "a1" * 17 + "$__"
        write_artifact(tmp_path, "Linked", bytecode="0x6080" + placeholder + "6040")

        with pytest.raises(DefectiveArtifactError, match="unlinked"):
            load_artifact("Linked", tmp_path)

    def test_legacy_library_placeholder(self, tmp_path: Path):
        placeholder = "__UniswapV2Library".ljust(40, "_")
        write_artifact(tmp_path, "Linked", bytecode="0x6080" + placeholder + "6040")

        with pytest.raises(DefectiveArtifactError, match="unlinked"):
            load_artifact("Linked", tmp_path)

    def test_compiler_mismatch_is_logged(self, tmp_path: Path, caplog):
        write_artifact(tmp_path, "Old", compiler={"version": "0.5.16+commit.9c3226ce"})

        with caplog.at_level(logging.WARNING, logger="router_deployments.artifacts"):
            artifact = load_artifact("Old", tmp_path, compiler_version="0.6.6")

        assert artifact.compiler_version == "0.5.16+commit.9c3226ce"
        assert "expected 0.6.6" in caplog.text

    def test_matching_compiler_not_logged(self, tmp_path: Path, caplog):
        write_artifact(tmp_path, "Current")

        with caplog.at_level(logging.WARNING, logger="router_deployments.artifacts"):
            load_artifact("Current", tmp_path, compiler_version="0.6.6")

        assert caplog.text == ""


class TestConstructorInputs:
    """Test the constructor_inputs function."""

    def test_no_constructor(self):
        assert constructor_inputs([{"type": "function", "name": "WETH"}]) == []

    def test_constructor_without_inputs(self):
        assert constructor_inputs([{"type": "constructor"}]) == []


class TestConstructorArgs:
    """Test the constructor_args function."""

    def test_checksums_addresses(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)

        assert constructor_args(artifact, [FACTORY.lower(), WETH.lower()]) == [FACTORY, WETH]

    def test_argument_count_mismatch(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)

        with pytest.raises(DefectiveArtifactError, match="takes 2 argument"):
            constructor_args(artifact, [FACTORY])

    def test_malformed_address(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)

        with pytest.raises(DefectiveArtifactError, match="_WETH"):
            constructor_args(artifact, [FACTORY, "0x1234"])


class TestDeploymentConstructor:
    """Test the deployment_constructor function."""

    TX = {"nonce": 0, "gas": 5_500_000, "gasPrice": 1, "chainId": 1}

    def test_creation_data_appends_encoded_addresses(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)

        tx = deployment_constructor(Web3(), artifact, [FACTORY, WETH]).build_transaction(
            dict(self.TX)
        )

        expected = (
            artifact.bytecode
            + "0" * 24
            + FACTORY[2:].lower()
            + "0" * 24
            + WETH[2:].lower()
        )
        assert tx["data"].lower() == expected.lower()
        assert "to" not in tx

    def test_address_case_does_not_change_data(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)
        upper = "0x" + FACTORY[2:].upper()

        first = deployment_constructor(Web3(), artifact, [upper, WETH])
        second = deployment_constructor(Web3(), artifact, [FACTORY.lower(), WETH])

        assert (
            first.build_transaction(dict(self.TX))["data"]
            == second.build_transaction(dict(self.TX))["data"]
        )

    def test_unencodable_argument(self, contracts_dir: Path):
        artifact = load_artifact("UniswapV2Router02", contracts_dir)

        with pytest.raises(DefectiveArtifactError):
            deployment_constructor(Web3(), artifact, [FACTORY, None])

    def test_no_constructor_uses_bytecode(self):
        artifact = ContractArtifact(contract_name="Migrations", abi=[], bytecode="0x6080")

        tx = deployment_constructor(Web3(), artifact, []).build_transaction(dict(self.TX))

        assert tx["data"] == "0x6080"


class TestGetBuildPaths:
    """Test the get_build_paths function."""

    def test_defaults_to_build_in_working_directory(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        contracts_dir, records_path = get_build_paths()

        assert contracts_dir == tmp_path / "build" / "contracts"
        assert records_path == tmp_path / "build" / "deployments.json"

    def test_custom_build_root(self, tmp_path: Path):
        custom_root = tmp_path / "custom_build"
        contracts_dir, records_path = get_build_paths(build_root=custom_root)

        assert contracts_dir == custom_root / "contracts"
        assert records_path == custom_root / "deployments.json"

    def test_relative_custom_root_converted_to_absolute(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        contracts_dir, records_path = get_build_paths(build_root="relative_build")

        assert contracts_dir.is_absolute()
        assert records_path.is_absolute()
        assert contracts_dir == tmp_path / "relative_build" / "contracts"
