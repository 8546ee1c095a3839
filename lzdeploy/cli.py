from pathlib import Path
from typing import Optional

import click

from lzdeploy.chains import ChainRegistry, NetworkIdentity, load_chain_registry
from lzdeploy.constants import OMNIGRAPH_PARAMS_FILEPATH
from lzdeploy.params import ConstructorParameters, UnsupportedNetwork
from lzdeploy.utils import format_arguments

chains_filepath_option = click.option(
    "--chains-filepath",
    help="Chain table YAML; defaults to $LZDEPLOY_CHAINS_FILEPATH or the packaged table",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)


def _load_registry(chains_filepath: Optional[Path]) -> ChainRegistry:
    try:
        return load_chain_registry(filepath=chains_filepath)
    except ChainRegistry.Invalid as e:
        raise click.ClickException(str(e))


@click.group()
def cli():
    """LayerZero chain registry and constructor argument resolution."""


@cli.command()
@chains_filepath_option
def chains(chains_filepath):
    """List the chains of the registry."""
    registry = _load_registry(chains_filepath)
    for entry in registry:
        click.secho(f"{entry.name}", fg="green")
        click.secho(f"    Chain ID:           {entry.chain_id}", fg="cyan")
        click.secho(f"    LayerZero Chain ID: {entry.lz_chain_id}", fg="cyan")
        click.secho(f"    LayerZero Endpoint: {entry.lz_endpoint}", fg="cyan")


@cli.command()
@click.option(
    "--contract-name",
    "-c",
    help="Contract to resolve constructor arguments for",
    type=click.STRING,
    required=True,
)
@click.option(
    "--network",
    "-n",
    help="Network name or alias, e.g. fuji or avalanche:fuji",
    type=click.STRING,
    required=True,
)
@click.option(
    "--chain-id",
    help="Chain ID of the network; must match the network name when given",
    type=int,
    required=False,
)
@click.option(
    "--params-filepath",
    "-f",
    help="Constructor parameters YAML",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=OMNIGRAPH_PARAMS_FILEPATH,
    show_default=True,
)
@chains_filepath_option
def resolve(contract_name, network, chain_id, params_filepath, chains_filepath):
    """Print the constructor arguments of a contract for a network."""
    registry = _load_registry(chains_filepath)
    try:
        parameters = ConstructorParameters.from_yaml(filepath=params_filepath, registry=registry)
        resolver = parameters.resolver(contract_name)
        if chain_id is None:
            arguments = resolver.resolve(network)
        else:
            arguments = resolver.resolve_network(NetworkIdentity(name=network, chain_id=chain_id))
    except (ConstructorParameters.Invalid, ChainRegistry.Mismatch, UnsupportedNetwork) as e:
        raise click.ClickException(str(e))

    click.echo(format_arguments(arguments))


if __name__ == "__main__":
    cli()
