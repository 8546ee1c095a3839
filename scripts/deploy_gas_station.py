#!/usr/bin/python3

from ape import project

from lzdeploy.constants import GAS_STATION, OMNIGRAPH_PARAMS_FILEPATH
from lzdeploy.deployer import Deployer
from lzdeploy.networks import is_local_network


def main():
    """
    Deploys the GasStation contract, constructed with the LayerZero endpoint
    of the connected network.

    ape run deploy_gas_station --network avalanche:fuji
    """
    deployer = Deployer.from_yaml(
        filepath=OMNIGRAPH_PARAMS_FILEPATH,
        contract_names=[GAS_STATION],
        verify=not is_local_network(),
    )
    deployer.deploy(project.GasStation)
