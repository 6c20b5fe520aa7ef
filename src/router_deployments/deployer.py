"""Contract deployment: simulate, sign, submit and wait for confirmations."""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from eth_utils import to_checksum_address, to_hex
from web3.exceptions import TransactionNotFound

from .artifacts import deployment_constructor, load_artifact
from .config import NetworkProfile
from .constants import DEFAULT_POLL_INTERVAL
from .exceptions import (
    ChainIdMismatchError,
    ConfirmationTimeoutError,
    DeploymentError,
    RpcError,
    TransactionRevertedError,
)
from .provider import WalletProvider
from .records import DeploymentRecords
from .rpc import rpc_errors
from .types import DeploymentReceipt

logger = logging.getLogger(__name__)


class Deployer:
    """Deploys compiled contracts to the network described by a profile."""

    def __init__(
        self,
        profile: NetworkProfile,
        provider: WalletProvider,
        contracts_dir: Union[Path, str],
        compiler_version: Optional[str] = None,
        records: Optional[DeploymentRecords] = None,
        from_address: Optional[str] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.profile = profile
        self.provider = provider
        self.contracts_dir = Path(contracts_dir)
        self.compiler_version = compiler_version
        self.records = records
        self.from_address = from_address or provider.accounts[0]
        self.poll_interval = poll_interval
        self._sleep = sleep
        self._chain_checked = False

    @property
    def w3(self):
        return self.provider.w3

    def check_chain(self) -> None:
        """
        Verify the node serves the chain the profile expects.

        Raises:
            ChainIdMismatchError: If eth_chainId differs from network_id
        """
        if self._chain_checked:
            return
        with rpc_errors("eth_chainId"):
            chain_id = self.w3.eth.chain_id
        if chain_id != self.profile.network_id:
            raise ChainIdMismatchError(
                f"Node for network '{self.profile.name}' reports chain id {chain_id}, "
                f"expected {self.profile.network_id}"
            )
        self._chain_checked = True

    def deploy(self, contract_name: str, *args: Any) -> DeploymentReceipt:
        """
        Deploy a contract with the given constructor arguments.

        Args:
            contract_name: Artifact name (e.g., "UniswapV2Router02")
            *args: Constructor arguments in ABI order

        Returns:
            DeploymentReceipt for the confirmed deployment

        Raises:
            ArtifactNotFoundError: If the artifact is missing
            DefectiveArtifactError: If the artifact cannot be deployed with args
            ChainIdMismatchError: If the node serves another chain
            DeploymentError: If the dry run fails or exceeds the gas ceiling
            TransactionRevertedError: If the creation transaction reverts
            ConfirmationTimeoutError: If it is not mined within timeout_blocks
            RpcError: On node communication failure
        """
        artifact = load_artifact(contract_name, self.contracts_dir, self.compiler_version)
        constructor = deployment_constructor(self.w3, artifact, args)

        logger.info("Deploying %s to %s", contract_name, self.profile.name)
        logger.debug("Constructor arguments: %s", list(args))

        self.check_chain()

        if not self.profile.skip_dry_run:
            self.dry_run(contract_name, constructor)

        with rpc_errors("eth_getTransactionCount"):
            nonce = self.w3.eth.get_transaction_count(self.from_address, "pending")
        with rpc_errors("eth_gasPrice"):
            gas_price = self.w3.eth.gas_price

        tx = constructor.build_transaction(
            {
                "nonce": nonce,
                "gas": self.profile.gas,
                "gasPrice": gas_price,
                "value": 0,
                "chainId": self.profile.network_id,
            }
        )
        raw_tx, tx_hash = self.provider.sign_transaction(tx, self.from_address)

        with rpc_errors("eth_sendRawTransaction"):
            submitted_hash = to_hex(self.w3.eth.send_raw_transaction(raw_tx))
        if submitted_hash.lower() != tx_hash.lower():
            logger.warning("Node returned hash %s, expected %s", submitted_hash, tx_hash)
        logger.info("  transaction hash: %s", tx_hash)

        receipt = self.wait_for_confirmations(tx_hash)

        address = to_checksum_address(receipt["contractAddress"])
        result = DeploymentReceipt(
            contract_name=contract_name,
            address=address,
            transaction_hash=tx_hash,
            block=receipt["blockNumber"],
            network=self.profile.name,
            network_id=self.profile.network_id,
            deployer=self.from_address,
            url=self.profile.explorer_url(address),
            constructor_args=list(args),
            gas_used=receipt.get("gasUsed"),
        )
        logger.info("  %s deployed at %s (block %d)", contract_name, address, result.block)

        if self.records is not None:
            self.records.record_deployment(result)

        return result

    def dry_run(self, contract_name: str, constructor) -> int:
        """
        Simulate the creation transaction against the node.

        Args:
            contract_name: Name used in messages
            constructor: web3 contract constructor bound to its arguments

        Returns:
            Estimated gas

        Raises:
            DeploymentError: If the simulation fails or exceeds the gas ceiling
        """
        try:
            with rpc_errors("eth_estimateGas"):
                estimate = constructor.estimate_gas(
                    {"from": self.from_address, "gas": self.profile.gas}
                )
        except RpcError as e:
            raise DeploymentError(f"Dry run of {contract_name} failed: {e}") from e

        if estimate > self.profile.gas:
            raise DeploymentError(
                f"{contract_name} needs {estimate} gas, above the {self.profile.gas} ceiling "
                f"for network '{self.profile.name}'"
            )
        logger.info("  dry run ok, estimated gas %d", estimate)
        return estimate

    def _receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        with rpc_errors("eth_getTransactionReceipt"):
            try:
                return self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                return None

    def _block_number(self) -> int:
        with rpc_errors("eth_blockNumber"):
            return self.w3.eth.block_number

    def wait_for_confirmations(self, tx_hash: str) -> Dict[str, Any]:
        """
        Poll until the transaction has the profile's number of confirmations.

        Raises:
            TransactionRevertedError: If the receipt has status 0
            ConfirmationTimeoutError: If no receipt appears within timeout_blocks
        """
        start_block = self._block_number()
        while True:
            current = self._block_number()
            receipt = self._receipt(tx_hash)

            if receipt is not None and receipt.get("blockNumber") is not None:
                if receipt.get("status") == 0:
                    raise TransactionRevertedError(
                        f"Transaction {tx_hash} reverted in block {receipt['blockNumber']}"
                    )
                confirmations = current - receipt["blockNumber"]
                if confirmations >= self.profile.confirmations:
                    return receipt
                logger.debug(
                    "%s: %d/%d confirmations", tx_hash, confirmations, self.profile.confirmations
                )
            elif current - start_block >= self.profile.timeout_blocks:
                raise ConfirmationTimeoutError(
                    f"Transaction {tx_hash} was not mined within "
                    f"{self.profile.timeout_blocks} blocks"
                )

            self._sleep(self.poll_interval)
