"""HD wallet provider: derived signing accounts bound to one node connection."""

import logging
from typing import Any, Dict, List

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import ValidationError, to_checksum_address, to_hex

from .constants import DERIVATION_PATH, MNEMONIC_ENV
from .exceptions import ConfigurationError, DeploymentError
from .rpc import connect

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()


class WalletProvider:
    """Connection handle pairing a web3 connection with mnemonic-derived accounts."""

    def __init__(
        self,
        mnemonic: str,
        rpc_url: str,
        num_addresses: int = 1,
        address_index: int = 0,
        timeout: float = 30,
    ):
        """
        Derive signing accounts and open the node connection.

        Args:
            mnemonic: BIP-39 secret phrase
            rpc_url: Node endpoint URL
            num_addresses: Number of consecutive accounts to derive
            address_index: Index of the first derived account
            timeout: RPC request timeout in seconds

        Raises:
            ConfigurationError: If the mnemonic is not a valid BIP-39 phrase
        """
        if num_addresses < 1:
            raise ValueError("num_addresses must be at least 1")

        self._accounts: Dict[str, LocalAccount] = {}
        for index in range(address_index, address_index + num_addresses):
            try:
                account = Account.from_mnemonic(
                    mnemonic, account_path=DERIVATION_PATH.format(index=index)
                )
            except (ValidationError, ValueError) as e:
                # The phrase itself must not end up in the message
                raise ConfigurationError(
                    f"${MNEMONIC_ENV} is not a valid BIP-39 mnemonic"
                ) from e
            self._accounts[account.address] = account

        self.rpc_url = rpc_url
        self.w3 = connect(rpc_url, timeout=timeout)
        logger.debug("Derived %d account(s) for %s", len(self._accounts), rpc_url)

    @property
    def accounts(self) -> List[str]:
        return list(self._accounts.keys())

    def sign_transaction(self, tx: Dict[str, Any], sender: str) -> tuple[str, str]:
        """
        Sign a transaction with one of the derived accounts.

        Args:
            tx: Transaction fields (nonce, gas, gasPrice, data, chainId, ...)
            sender: Address of the signing account

        Returns:
            Tuple of (raw_transaction_hex, transaction_hash_hex)

        Raises:
            DeploymentError: If sender is not one of the derived accounts
        """
        account = self._accounts.get(to_checksum_address(sender))
        if account is None:
            raise DeploymentError(f"Account {sender} is not managed by this provider")

        signed = account.sign_transaction(tx)
        return to_hex(signed.raw_transaction), to_hex(signed.hash)
