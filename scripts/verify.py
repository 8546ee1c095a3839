from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option

from lzdeploy.chains import load_chain_registry
from lzdeploy.constants import OMNIGRAPH_PARAMS_FILEPATH, SUPPORTED_CONTRACTS
from lzdeploy.deploy import ArgumentMismatch, check_arguments
from lzdeploy.deployer import get_contract_container
from lzdeploy.networks import check_etherscan_plugin, current_network, verify_contracts
from lzdeploy.params import ConstructorParameters
from lzdeploy.types import ChecksumAddress


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--contract-name",
    "-c",
    help="Contract to verify",
    type=click.Choice(SUPPORTED_CONTRACTS),
    required=True,
)
@click.option(
    "--params-filepath",
    "-f",
    help="Constructor parameters YAML",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=OMNIGRAPH_PARAMS_FILEPATH,
)
@click.argument("address", type=ChecksumAddress())
@click.argument("arguments", nargs=-1)
def cli(network, contract_name, params_filepath, address, arguments):
    """Verify a deployed contract; ARGUMENTS must match its resolved constructor arguments."""
    check_etherscan_plugin()
    registry = load_chain_registry()
    parameters = ConstructorParameters.from_yaml(filepath=params_filepath, registry=registry)
    try:
        check_arguments(
            contract_name=contract_name,
            network=current_network(),
            parameters=parameters,
            arguments=arguments,
        )
    except ArgumentMismatch as e:
        raise click.BadParameter(str(e), param_hint="ARGUMENTS")

    contract_instance = get_contract_container(contract_name).at(address)
    verify_contracts([contract_instance])


if __name__ == "__main__":
    cli()
