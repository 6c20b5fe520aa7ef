"""Network profiles, compiler pin and secrets for router-deployments library."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import yaml
from eth_utils import is_hex_address

from .constants import (
    API_KEY_ENV,
    COMPILER_VERSION,
    INFURA_URL_TEMPLATE,
    MNEMONIC_ENV,
    NETWORK_CONFIG,
)
from .exceptions import ConfigurationError, MissingSecretError, UnknownNetworkError
from .provider import WalletProvider
from .registry import NetworkRegistry
from .types import CompilerPin


@dataclass(frozen=True)
class Secrets:
    """Credential material injected at run time."""

    api_key: str = field(repr=False)
    mnemonic: str = field(repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Secrets":
        """
        Read secrets from environment variables.

        Raises:
            MissingSecretError: If $INFURA_API_KEY or $DEPLOYER_MNEMONIC is unset
        """
        if environ is None:
            environ = os.environ

        values = {}
        for attr, name in (("api_key", API_KEY_ENV), ("mnemonic", MNEMONIC_ENV)):
            value = environ.get(name, "").strip()
            if not value:
                raise MissingSecretError(f"Secret not provided: set ${name}")
            values[attr] = value
        return cls(**values)


@dataclass(frozen=True)
class NetworkProfile:
    """Connection and confirmation parameters for one network."""

    name: str
    network_id: int
    gas: int  # Gas ceiling for deployment transactions
    confirmations: int  # Blocks to wait after the receipt
    timeout_blocks: int  # Blocks to wait before giving up
    skip_dry_run: bool
    chain_name: str = ""
    block_explorer_url: str = ""
    rpc_url_template: str = INFURA_URL_TEMPLATE
    weth_address: str = ""  # Overrides the built-in token address when set

    def rpc_url(self, api_key: str) -> str:
        return self.rpc_url_template.format(network=self.name, api_key=api_key)

    def explorer_url(self, address: str) -> str:
        if not self.block_explorer_url:
            return ""
        return f"{self.block_explorer_url}/address/{address}"

    def provider(self, secrets: Secrets, **kwargs: Any) -> Callable[[], WalletProvider]:
        """
        Recipe for this network's connection handle.

        Args:
            secrets: Mnemonic and API key
            **kwargs: Passed through to WalletProvider

        Returns:
            Zero-argument factory building a WalletProvider
        """
        url = self.rpc_url(secrets.api_key)
        return lambda: WalletProvider(secrets.mnemonic, url, **kwargs)


# Keys accepted per network in a configuration file
PROFILE_KEYS = {
    "network_id": int,
    "gas": int,
    "confirmations": int,
    "timeout_blocks": int,
    "skip_dry_run": bool,
    "chain_name": str,
    "block_explorer_url": str,
    "rpc_url_template": str,
    "weth_address": str,
}

SUPPORTED_KEYS = {"compiler_version", "networks"}


def _build_profile(name: str, values: Mapping[str, Any]) -> NetworkProfile:
    missing = {"network_id", "gas", "confirmations", "timeout_blocks", "skip_dry_run"} - set(values)
    if missing:
        raise ConfigurationError(
            f"Network '{name}' is missing required keys: {', '.join(sorted(missing))}"
        )
    return NetworkProfile(name=name, **values)


def _check_profile_values(name: str, values: Mapping[str, Any]) -> None:
    unknown = sorted(set(values) - set(PROFILE_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown keys for network '{name}': {', '.join(unknown)}")

    for key, value in values.items():
        expected = PROFILE_KEYS[key]
        # bool is an int subclass; reject it where a number is expected
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigurationError(
                f"Network '{name}' key '{key}' must be {expected.__name__}, got {value!r}"
            )
        if expected is int and value < 0:
            raise ConfigurationError(f"Network '{name}' key '{key}' must not be negative")
        if key == "weth_address" and not is_hex_address(value):
            raise ConfigurationError(
                f"Network '{name}' key 'weth_address' is not a 20-byte hex address: {value!r}"
            )


@dataclass(frozen=True)
class EnvironmentConfig:
    """All network profiles plus the compiler pin."""

    profiles: Mapping[str, NetworkProfile]
    compiler: CompilerPin

    def __post_init__(self):
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))

    @classmethod
    def default(cls) -> "EnvironmentConfig":
        profiles = {name: _build_profile(name, values) for name, values in NETWORK_CONFIG.items()}
        return cls(profiles=profiles, compiler=CompilerPin(COMPILER_VERSION))

    @classmethod
    def from_file(cls, config_path: Union[Path, str, None]) -> "EnvironmentConfig":
        """
        Load the default configuration with overrides from a YAML file.

        The file may set `compiler_version` and a `networks` mapping. Entries
        for known networks override individual profile keys; entries for new
        networks must provide every required key.

        Args:
            config_path: Path to YAML file; None returns the defaults

        Raises:
            ConfigurationError: If the file is missing, malformed or has unknown keys
        """
        config = cls.default()
        if not config_path:
            return config

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return config
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - SUPPORTED_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        return config.with_overrides(
            networks=parsed.get("networks") or {},
            compiler_version=parsed.get("compiler_version"),
        )

    def with_overrides(
        self,
        networks: Mapping[str, Mapping[str, Any]],
        compiler_version: Optional[str] = None,
    ) -> "EnvironmentConfig":
        """Return a new configuration with profile and compiler overrides applied."""
        if not isinstance(networks, Mapping):
            raise ConfigurationError("'networks' must be a mapping of network name to settings")

        profiles: Dict[str, NetworkProfile] = dict(self.profiles)
        for name, values in networks.items():
            if not isinstance(values, Mapping):
                raise ConfigurationError(f"Settings for network '{name}' must be a mapping")
            _check_profile_values(name, values)
            if name in profiles:
                profiles[name] = replace(profiles[name], **values)
            else:
                profiles[name] = _build_profile(name, values)

        compiler = self.compiler
        if compiler_version is not None:
            if not isinstance(compiler_version, str) or not compiler_version:
                raise ConfigurationError("'compiler_version' must be a non-empty string")
            compiler = CompilerPin(compiler_version)

        return EnvironmentConfig(profiles=profiles, compiler=compiler)

    def profile(self, network: str) -> NetworkProfile:
        """
        Get a network's profile.

        Raises:
            UnknownNetworkError: If no profile exists for the network
        """
        if network not in self.profiles:
            raise UnknownNetworkError(
                network,
                f"No network profile for '{network}'. "
                f"Known networks: {', '.join(self.networks())}",
            )
        return self.profiles[network]

    def networks(self) -> List[str]:
        return list(self.profiles.keys())

    def registry(self) -> NetworkRegistry:
        """
        Token address registry for these profiles.

        Built-in addresses, with each profile's `weth_address` added or
        taking precedence, so networks defined in a config file can be
        migrated.
        """
        addresses = dict(NetworkRegistry.default().as_mapping())
        for name, profile in self.profiles.items():
            if profile.weth_address:
                addresses[name] = profile.weth_address
        return NetworkRegistry(addresses)
