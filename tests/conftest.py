"""Shared pytest fixtures for router-deployments tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
import responses

# Well-known development mnemonic; account 0 is below
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

RPC_URL = "http://test-rpc.example.com"

ROUTER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def mnemonic() -> str:
    return TEST_MNEMONIC


@pytest.fixture
def deployer_account() -> str:
    return TEST_ACCOUNT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def contracts_dir(fixtures_dir: Path) -> Path:
    """Directory with the sample router artifact."""
    return fixtures_dir / "build" / "contracts"


@pytest.fixture
def router_artifact_json(contracts_dir: Path) -> Dict[str, Any]:
    with open(contracts_dir / "UniswapV2Router02.json") as f:
        return json.load(f)


@pytest.fixture
def temp_build_dir(tmp_path: Path, router_artifact_json: Dict[str, Any]) -> Path:
    """Create a temporary build directory holding the router artifact."""
    build_dir = tmp_path / "build"
    (build_dir / "contracts").mkdir(parents=True)
    with open(build_dir / "contracts" / "UniswapV2Router02.json", "w") as f:
        json.dump(router_artifact_json, f, indent=2)
    return build_dir


class FakeNode:
    """Scripted JSON-RPC node served through `responses`."""

    def __init__(self, chain_id: int = 1, start_block: int = 100, mined_block: int = 101):
        self.url = RPC_URL
        self.tx_hash = TX_HASH
        self.contract_address = ROUTER_ADDRESS
        self.calls: List[Dict[str, Any]] = []
        self.block = start_block
        self.handlers: Dict[str, Callable[[list], Any]] = {
            "eth_chainId": lambda params: hex(chain_id),
            "eth_blockNumber": self._next_block,
            "eth_getTransactionCount": lambda params: "0x7",
            "eth_gasPrice": lambda params: hex(20 * 10**9),
            "eth_estimateGas": lambda params: hex(4_000_000),
            "eth_sendRawTransaction": lambda params: TX_HASH,
            "eth_getTransactionReceipt": lambda params: {
                "transactionHash": TX_HASH,
                "blockNumber": hex(mined_block),
                "contractAddress": ROUTER_ADDRESS.lower(),
                "gasUsed": hex(3_900_000),
                "status": "0x1",
            },
        }
        self.errors: Dict[str, Dict[str, Any]] = {}

    def _next_block(self, params: list) -> str:
        current = self.block
        self.block += 1
        return hex(current)

    def methods(self) -> List[str]:
        return [call["method"] for call in self.calls]

    def params(self, method: str) -> List[list]:
        return [call["params"] for call in self.calls if call["method"] == method]

    def callback(self, request):
        body = json.loads(request.body)
        self.calls.append(body)
        method = body["method"]
        if method in self.errors:
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]}
        elif method not in self.handlers:
            error = {"code": -32601, "message": f"the method {method} does not exist"}
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": error}
        else:
            payload = {
                "jsonrpc": "2.0",
                "id": body["id"],
                "result": self.handlers[method](body["params"]),
            }
        return (200, {}, json.dumps(payload))


@pytest.fixture
def fake_node():
    """Fake mainnet node; tweak handlers/errors before use."""
    node = FakeNode()
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add_callback(
            responses.POST,
            RPC_URL,
            callback=node.callback,
            content_type="application/json",
        )
        yield node
