#!/usr/bin/python3

from ape import project

from lzdeploy.constants import OMNI_GRAPH, OMNIGRAPH_PARAMS_FILEPATH
from lzdeploy.deployer import Deployer
from lzdeploy.networks import is_local_network


def main():
    """
    Deploys the OmniGraph contract with the minimum gas to transfer, the
    LayerZero endpoint and the destination id range of the connected network.
    Only fuji and mumbai are supported.

    ape run deploy_omnigraph --network avalanche:fuji
    ape run deploy_omnigraph --network polygon:mumbai
    """
    deployer = Deployer.from_yaml(
        filepath=OMNIGRAPH_PARAMS_FILEPATH,
        contract_names=[OMNI_GRAPH],
        verify=not is_local_network(),
    )
    deployer.deploy(project.OmniGraph)
