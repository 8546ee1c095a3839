from collections import OrderedDict

import click

from lzdeploy.chains import ChainEntry


def _confirm(question: str) -> None:
    """Exits with status -1 unless the operator confirms."""
    if not click.confirm(question, default=True):
        click.echo("Aborting deployment!")
        raise SystemExit(-1)


def _continue() -> None:
    _confirm("Continue?")


def _confirm_resolution(
    resolved_params: OrderedDict, contract_name: str, chain: ChainEntry
) -> None:
    """
    Shows the LayerZero settings of the target chain and the resolved
    constructor parameters, then asks the operator to confirm the deployment.
    """
    click.echo(
        f"\n{contract_name} on {chain.name} "
        f"(chain ID {chain.chain_id}, LayerZero chain ID {chain.lz_chain_id})"
    )
    click.echo(f"\tLayerZero endpoint: {chain.lz_endpoint}")
    if not resolved_params:
        click.echo("\t(i) No constructor parameters")
    for name, resolved_value in resolved_params.items():
        click.echo(f"\t{name}={resolved_value}")
    _confirm(f"Deploy {contract_name} on {chain.name}?")
