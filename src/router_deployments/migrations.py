"""Migration driver: the router deployment and the runner that sequences migrations."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Sequence

from .constants import FACTORY_ADDRESS, ROUTER_CONTRACT
from .records import DeploymentRecords
from .registry import NetworkRegistry
from .types import DeploymentRequest

logger = logging.getLogger(__name__)


class SupportsDeploy(Protocol):
    def deploy(self, contract_name: str, *args: Any) -> Any: ...


def build_deployment_request(
    network: str,
    registry: NetworkRegistry,
    factory_address: str = FACTORY_ADDRESS,
) -> DeploymentRequest:
    """
    Build the router deployment request for a network.

    Raises:
        UnknownNetworkError: If the registry has no token address for the network
    """
    return DeploymentRequest(
        artifact_name=ROUTER_CONTRACT,
        factory_address=factory_address,
        token_address=registry.token_address(network),
        network=network,
    )


def deploy_router(
    deployer: SupportsDeploy,
    network: str,
    accounts: Sequence[str],
    registry: Optional[NetworkRegistry] = None,
    factory_address: str = FACTORY_ADDRESS,
) -> None:
    """
    Deploy the router with (factory, WETH) constructor arguments.

    Args:
        deployer: Object whose deploy(name, *args) submits the deployment
        network: Active network name
        accounts: Available signer accounts
        registry: WETH registry (defaults to the built-in table)
        factory_address: Factory the router is bound to
    """
    if registry is None:
        registry = NetworkRegistry.default()

    request = build_deployment_request(network, registry, factory_address)
    logger.debug("Router deployment on %s from %s", network, accounts[0] if accounts else None)
    deployer.deploy(request.artifact_name, *request.constructor_args)


@dataclass(frozen=True)
class Migration:
    """A numbered migration step."""

    number: int
    name: str
    func: Callable[..., None]


# Migration 1 (the bookkeeping contract) is replaced by DeploymentRecords
MIGRATIONS: List[Migration] = [
    Migration(2, "deploy_router", deploy_router),
]


class MigrationRunner:
    """Runs pending migrations for a network and records progress."""

    def __init__(
        self,
        records: DeploymentRecords,
        registry: Optional[NetworkRegistry] = None,
        migrations: Optional[Sequence[Migration]] = None,
    ):
        self.records = records
        self.registry = NetworkRegistry.default() if registry is None else registry
        self.migrations = sorted(
            MIGRATIONS if migrations is None else migrations, key=lambda m: m.number
        )

    def pending(self, network: str, reset: bool = False) -> List[Migration]:
        if reset:
            return list(self.migrations)
        last = self.records.last_completed_migration(network)
        return [m for m in self.migrations if m.number > last]

    def run(
        self,
        deployer: SupportsDeploy,
        network: str,
        accounts: Sequence[str],
        reset: bool = False,
    ) -> List[Migration]:
        """
        Run pending migrations in order.

        Args:
            deployer: Deployer for the active network
            network: Active network name
            accounts: Available signer accounts
            reset: Run every migration from the start

        Returns:
            Migrations that were run
        """
        to_run = self.pending(network, reset)
        if reset:
            self.records.reset(network)

        if not to_run:
            logger.info("Network '%s' is up to date", network)
            return []

        for migration in to_run:
            logger.info("Running migration %d_%s", migration.number, migration.name)
            migration.func(deployer, network, accounts, registry=self.registry)
            self.records.set_completed(network, migration.number)

        return to_run
