"""Data types and dataclasses for router-deployments library."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import UnknownNetworkError


@dataclass(frozen=True)
class CompilerPin:
    """Solidity compiler version the build toolchain must use."""

    version: str  # e.g., "0.6.6"


@dataclass(frozen=True)
class Found:
    """Successful registry lookup."""

    network: str
    address: str

    ok = True

    def unwrap(self) -> str:
        return self.address


@dataclass(frozen=True)
class UnknownNetwork:
    """Registry lookup for a network without an entry."""

    network: str

    ok = False

    def unwrap(self) -> str:
        raise UnknownNetworkError(self.network)


LookupResult = Union[Found, UnknownNetwork]


@dataclass(frozen=True)
class DeploymentRequest:
    """A single contract deployment: artifact plus constructor arguments."""

    artifact_name: str  # e.g., "UniswapV2Router02"
    factory_address: str
    token_address: str
    network: str

    @property
    def constructor_args(self) -> Tuple[str, str]:
        return (self.factory_address, self.token_address)


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract as produced by the build toolchain."""

    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str  # 0x-prefixed creation code
    compiler_version: Optional[str] = None
    source_path: Optional[str] = None


@dataclass
class DeploymentReceipt:
    """Information about a confirmed deployment."""

    # Required fields
    contract_name: str
    address: str  # Checksummed address
    transaction_hash: str
    block: int  # Block the creation transaction was mined in
    network: str
    network_id: int
    deployer: str
    url: str  # Block explorer URL

    # Optional fields
    constructor_args: List[Any] = field(default_factory=list)
    gas_used: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
