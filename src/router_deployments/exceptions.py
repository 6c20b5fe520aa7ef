"""Custom exception classes for router-deployments library."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class UnknownNetworkError(DeploymentError, ValueError):
    """Raised when a network name has no registry entry or profile."""

    def __init__(self, network: str, message: str = ""):
        self.network = network
        super().__init__(message or f"Unknown network '{network}'")


class ConfigurationError(DeploymentError, ValueError):
    """Raised when a configuration file is missing or malformed."""

    pass


class MissingSecretError(DeploymentError, ValueError):
    """Raised when a required secret is not set in the environment."""

    pass


class ArtifactNotFoundError(DeploymentError, FileNotFoundError):
    """Raised when a compiled contract artifact is not found."""

    pass


class DefectiveArtifactError(DeploymentError, ValueError):
    """Raised when an artifact cannot be deployed as-is."""

    pass


class RpcError(DeploymentError, RuntimeError):
    """Raised when a JSON-RPC request fails."""

    def __init__(self, message: str, code=None):
        self.code = code
        super().__init__(message)


class ChainIdMismatchError(DeploymentError, ValueError):
    """Raised when the node reports a different chain than the profile expects."""

    pass


class TransactionRevertedError(DeploymentError, RuntimeError):
    """Raised when a deployment transaction is mined with a failed status."""

    pass


class ConfirmationTimeoutError(DeploymentError, TimeoutError):
    """Raised when a transaction is not confirmed within the block timeout."""

    pass
