from pathlib import Path

import click
from loguru import logger

from deployconf.networks import LocalNetwork, UnknownNetworkError, get_configuration
from deployconf.worker import Deployer

logger.add(
    "log/main.log",
    format="{time} | {level} | {message}",
    level="DEBUG",
)


@click.group()
def cli():
    """Deploy Solidity contracts to the configured networks."""


@cli.command()
def networks():
    """List configured networks without connecting to them."""
    for name, network in get_configuration().networks.items():
        kind = "local" if isinstance(network, LocalNetwork) else "remote"
        click.echo(f"{name}\tid={network.network_id}\t{kind}")


@cli.command()
@click.option("--network", "network_name", default="development", show_default=True)
@click.argument("contract", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def deploy(network_name: str, contract: Path):
    """Compile CONTRACT and deploy it to the selected network."""
    logger.info("Start.")
    try:
        deployer = Deployer(network_name)
    except UnknownNetworkError as e:
        raise click.BadParameter(str(e), param_hint="--network")

    deployer.check_network_id()
    bytecode, abi = deployer.compile_contract_file(contract)
    address = deployer.deploy_contract(bytecode, abi)

    path = deployer.save_contract_artifact(
        contract.stem,
        {"abi": abi, "bytecode": bytecode, "address": address, "network": network_name},
    )
    logger.success(f"{contract.stem} deployed at {address}, artifact: {path}")
    click.echo(address)
