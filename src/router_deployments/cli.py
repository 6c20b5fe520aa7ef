import logging

import click
from rich.logging import RichHandler

from .artifacts import get_build_paths
from .config import EnvironmentConfig, Secrets
from .deployer import Deployer
from .exceptions import DeploymentError
from .migrations import MigrationRunner
from .records import DeploymentRecords

logger = logging.getLogger("router_deployments")


def _configure_logging(verbose, log_file):
    logging.basicConfig(
        level="INFO",
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    # Repeated invocations in one process replace the previous log file
    for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)


def _load_config(config_path):
    try:
        return EnvironmentConfig.from_file(config_path)
    except DeploymentError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def main():
    """Deploy the router contract to public Ethereum networks."""


@main.command()
@click.option("--network", required=True, help="Network to deploy to (see `networks`)")
@click.option("--reset", is_flag=True, help="Run all migrations from the beginning.")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML file overriding network profiles.",
)
@click.option(
    "--build-dir",
    required=False,
    type=click.Path(),
    help="Build directory holding contracts/ artifacts (default: ./build).",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def migrate(network, reset, config, build_dir, verbose, log_file):
    """Run pending migrations against NETWORK."""
    _configure_logging(verbose, log_file)
    env = _load_config(config)

    try:
        profile = env.profile(network)
        secrets = Secrets.from_env()
        provider = profile.provider(secrets)()

        contracts_dir, records_path = get_build_paths(build_dir)
        records = DeploymentRecords(records_path)
        deployer = Deployer(
            profile,
            provider,
            contracts_dir,
            compiler_version=env.compiler.version,
            records=records,
        )

        logger.info(
            "Using network '%s' (network id %d) from %s",
            network,
            profile.network_id,
            deployer.from_address,
        )
        ran = MigrationRunner(records, env.registry()).run(
            deployer, network, provider.accounts, reset=reset
        )
    except DeploymentError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"{len(ran)} migration(s) run on {network}")


@main.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML file overriding network profiles.",
)
def networks(config):
    """List configured networks."""
    env = _load_config(config)
    click.echo(f"solc {env.compiler.version}")
    for name in env.networks():
        p = env.profile(name)
        click.echo(
            f"{name}: network_id={p.network_id} gas={p.gas} "
            f"confirmations={p.confirmations} timeout_blocks={p.timeout_blocks} "
            f"skip_dry_run={str(p.skip_dry_run).lower()}"
        )


@main.command()
@click.argument("network")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML file overriding network profiles.",
)
def lookup(network, config):
    """Print the WETH address registered for NETWORK."""
    try:
        registry = _load_config(config).registry()
    except DeploymentError as exc:
        raise click.ClickException(str(exc)) from exc
    result = registry.lookup(network)
    if not result.ok:
        raise click.ClickException(f"Unknown network '{network}'")
    click.echo(result.address)


if __name__ == "__main__":
    main()
