"""Network name to wrapped native token address registry."""

from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional

from eth_utils import is_hex_address

from .constants import WETH_ADDRESSES
from .exceptions import ConfigurationError, UnknownNetworkError
from .types import Found, LookupResult, UnknownNetwork


class NetworkRegistry:
    """Immutable mapping from network name to its WETH contract address."""

    def __init__(self, addresses: Mapping[str, str]):
        """
        Build a registry from a network -> address mapping.

        Args:
            addresses: Mapping of network name to 0x-prefixed 20-byte hex address

        Raises:
            ConfigurationError: If any address is not a 20-byte hex string
        """
        for network, address in addresses.items():
            if not isinstance(address, str) or not is_hex_address(address):
                raise ConfigurationError(
                    f"Invalid token address for network '{network}': {address!r}"
                )
        self._addresses = MappingProxyType(dict(addresses))

    @classmethod
    def default(cls) -> "NetworkRegistry":
        return cls(WETH_ADDRESSES)

    def lookup(self, network: str) -> LookupResult:
        """
        Resolve a network's token address without raising.

        Args:
            network: Network name (e.g., "mainnet")

        Returns:
            Found with the address, or UnknownNetwork if there is no entry
        """
        address: Optional[str] = self._addresses.get(network)
        if address is None:
            return UnknownNetwork(network)
        return Found(network, address)

    def token_address(self, network: str) -> str:
        """
        Resolve a network's token address.

        Raises:
            UnknownNetworkError: If the network has no entry
        """
        if network not in self._addresses:
            raise UnknownNetworkError(
                network,
                f"No token address registered for network '{network}'. "
                f"Known networks: {', '.join(self.networks())}",
            )
        return self._addresses[network]

    def networks(self) -> List[str]:
        return list(self._addresses.keys())

    def as_mapping(self) -> Mapping[str, str]:
        return self._addresses

    def __contains__(self, network: object) -> bool:
        return network in self._addresses

    def __iter__(self) -> Iterator[str]:
        return iter(self._addresses)

    def __len__(self) -> int:
        return len(self._addresses)
