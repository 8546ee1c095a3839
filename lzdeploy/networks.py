import os
from typing import List

from ape import networks
from ape.contracts import ContractInstance

from lzdeploy.chains import NetworkIdentity
from lzdeploy.constants import EXPLORER_API_KEY_ENVVARS, LOCAL_NETWORKS


def is_local_network() -> bool:
    return networks.provider.network.name in LOCAL_NETWORKS


def current_network() -> NetworkIdentity:
    """Returns the identity of the connected network, e.g. 'avalanche:fuji' / 43113."""
    network = networks.provider.network
    return NetworkIdentity(
        name=f"{network.ecosystem.name}:{network.name}",
        chain_id=networks.provider.chain_id,
    )


def check_etherscan_plugin() -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the appropriate API key environment variable is set.
    """
    if is_local_network():
        # unnecessary for local deployment
        return
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")
    ecosystem_name = networks.provider.network.ecosystem.name
    explorer_envvar = EXPLORER_API_KEY_ENVVARS.get(ecosystem_name)
    if explorer_envvar and not os.environ.get(explorer_envvar):
        raise ValueError(f"{explorer_envvar} is not set.")


def check_plugins(verify: bool) -> None:
    print("Checking plugins...")
    if verify:
        check_etherscan_plugin()


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name}...")
        explorer.publish_contract(instance.address)
