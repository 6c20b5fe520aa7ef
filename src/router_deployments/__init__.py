"""
router-deployments: deployment harness for the router contract
"""

from importlib.metadata import PackageNotFoundError, version

from .config import EnvironmentConfig, NetworkProfile, Secrets
from .deployer import Deployer
from .exceptions import (
    ArtifactNotFoundError,
    ChainIdMismatchError,
    ConfigurationError,
    ConfirmationTimeoutError,
    DefectiveArtifactError,
    DeploymentError,
    MissingSecretError,
    RpcError,
    TransactionRevertedError,
    UnknownNetworkError,
)
from .migrations import MIGRATIONS, MigrationRunner, build_deployment_request, deploy_router
from .registry import NetworkRegistry
from .types import (
    CompilerPin,
    ContractArtifact,
    DeploymentReceipt,
    DeploymentRequest,
    Found,
    UnknownNetwork,
)

try:
    __version__ = version("router-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "NetworkRegistry",
    "EnvironmentConfig",
    "NetworkProfile",
    "Secrets",
    "Deployer",
    "MIGRATIONS",
    "MigrationRunner",
    "build_deployment_request",
    "deploy_router",
    "CompilerPin",
    "ContractArtifact",
    "DeploymentReceipt",
    "DeploymentRequest",
    "Found",
    "UnknownNetwork",
    "DeploymentError",
    "UnknownNetworkError",
    "ConfigurationError",
    "MissingSecretError",
    "ArtifactNotFoundError",
    "DefectiveArtifactError",
    "RpcError",
    "ChainIdMismatchError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
]
