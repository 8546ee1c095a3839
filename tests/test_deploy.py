import pytest

from lzdeploy.chains import ChainRegistry, NetworkIdentity
from lzdeploy.constants import GAS_STATION, OMNI_GRAPH
from lzdeploy.deploy import (
    ArgumentMismatch,
    DeploymentFailure,
    DeploymentResult,
    check_arguments,
    deploy_contract,
)
from lzdeploy.params import UnsupportedNetwork
from lzdeploy.utils import format_arguments, verification_command
from tests.conftest import FUJI_ENDPOINT

DEPLOYED_ADDRESS = "0x1234567890AbcdEF1234567890aBcdef12345678"

FUJI = NetworkIdentity(name="avalanche:fuji", chain_id=43113)


class FakeDeploy:
    def __init__(self, address=DEPLOYED_ADDRESS, error=None):
        self.address = address
        self.error = error
        self.calls = list()

    def __call__(self, contract_name, arguments):
        self.calls.append((contract_name, arguments))
        if self.error:
            raise self.error
        return self.address


def test_deploy_omnigraph(parameters):
    deploy = FakeDeploy()
    result = deploy_contract(OMNI_GRAPH, network=FUJI, parameters=parameters, deploy=deploy)

    assert deploy.calls == [(OMNI_GRAPH, (150000, FUJI_ENDPOINT, 1, 99))]
    assert result == DeploymentResult(
        contract_name=OMNI_GRAPH,
        network=FUJI,
        address=DEPLOYED_ADDRESS,
        arguments=(150000, FUJI_ENDPOINT, 1, 99),
    )
    assert result.verification_command == (
        f"ape run verify --network avalanche:fuji --contract-name OmniGraph "
        f"{DEPLOYED_ADDRESS} 150000 {FUJI_ENDPOINT} 1 99"
    )


def test_deploy_gas_station(parameters, registry):
    optimism = registry.find_by_chain_id(10)
    network = NetworkIdentity(name="optimism:mainnet", chain_id=10)
    deploy = FakeDeploy()
    result = deploy_contract(GAS_STATION, network=network, parameters=parameters, deploy=deploy)

    assert deploy.calls == [(GAS_STATION, (optimism.lz_endpoint,))]
    assert result.verification_command.endswith(f"{DEPLOYED_ADDRESS} {optimism.lz_endpoint}")


@pytest.mark.parametrize(
    "network",
    [
        NetworkIdentity(name="ethereum:local", chain_id=31337),
        NetworkIdentity(name="hardhat", chain_id=31337),
        NetworkIdentity(name="ethereum:goerli", chain_id=5),
        NetworkIdentity(name="avalanche:fuji", chain_id=None),
    ],
)
def test_unsupported_network_never_deploys(parameters, network):
    deploy = FakeDeploy()
    with pytest.raises(UnsupportedNetwork):
        deploy_contract(OMNI_GRAPH, network=network, parameters=parameters, deploy=deploy)
    assert deploy.calls == []


def test_mismatched_network_never_deploys(parameters):
    deploy = FakeDeploy()
    network = NetworkIdentity(name="polygon:mumbai", chain_id=43113)
    with pytest.raises(ChainRegistry.Mismatch):
        deploy_contract(GAS_STATION, network=network, parameters=parameters, deploy=deploy)
    assert deploy.calls == []


def test_deployment_errors_propagate_unchanged(parameters):
    error = RuntimeError("execution reverted")
    deploy = FakeDeploy(error=error)
    with pytest.raises(RuntimeError) as exc_info:
        deploy_contract(OMNI_GRAPH, network=FUJI, parameters=parameters, deploy=deploy)
    assert exc_info.value is error
    assert len(deploy.calls) == 1


@pytest.mark.parametrize("address", [None, ""])
def test_deployment_without_address(parameters, address):
    deploy = FakeDeploy(address=address)
    with pytest.raises(DeploymentFailure, match="returned no address"):
        deploy_contract(OMNI_GRAPH, network=FUJI, parameters=parameters, deploy=deploy)
    assert len(deploy.calls) == 1


def test_verification_command_formatting():
    assert format_arguments((150000, FUJI_ENDPOINT, 1, 99)) == f"150000 {FUJI_ENDPOINT} 1 99"
    assert format_arguments(()) == ""
    assert (
        verification_command("polygon:mumbai", "Ping", DEPLOYED_ADDRESS, arguments=())
        == f"ape run verify --network polygon:mumbai --contract-name Ping {DEPLOYED_ADDRESS}"
    )


def test_check_arguments(parameters):
    expected = (150000, FUJI_ENDPOINT, 1, 99)
    arguments = ("150000", FUJI_ENDPOINT, "1", "99")
    assert check_arguments(OMNI_GRAPH, FUJI, parameters, arguments=arguments) == expected
    assert check_arguments(OMNI_GRAPH, FUJI, parameters, arguments=()) == expected


@pytest.mark.parametrize(
    "arguments",
    [
        ("150000", FUJI_ENDPOINT, "100", "199"),
        ("150000", FUJI_ENDPOINT, "1"),
        (FUJI_ENDPOINT,),
    ],
)
def test_check_arguments_rejects_different_arguments(parameters, arguments):
    with pytest.raises(ArgumentMismatch, match=f"expected '150000 {FUJI_ENDPOINT} 1 99'"):
        check_arguments(OMNI_GRAPH, FUJI, parameters, arguments=arguments)


def test_check_arguments_unsupported_network(parameters):
    goerli = NetworkIdentity(name="ethereum:goerli", chain_id=5)
    with pytest.raises(UnsupportedNetwork):
        check_arguments(OMNI_GRAPH, goerli, parameters, arguments=())
