from typing import Any, Callable, NamedTuple, Sequence, Tuple

from lzdeploy.chains import NetworkIdentity
from lzdeploy.params import ConstructorParameters
from lzdeploy.utils import format_arguments, verification_command

DeployFunction = Callable[[str, Sequence[Any]], str]


class DeploymentFailure(RuntimeError):
    """Raised when the deployment primitive completes without a contract address"""


class ArgumentMismatch(ValueError):
    """Raised when given constructor arguments differ from the resolved ones"""


class DeploymentResult(NamedTuple):
    contract_name: str
    network: NetworkIdentity
    address: str
    arguments: Tuple[Any, ...]

    @property
    def verification_command(self) -> str:
        return verification_command(
            network=self.network.name,
            contract_name=self.contract_name,
            address=self.address,
            arguments=self.arguments,
        )


def deploy_contract(
    contract_name: str,
    network: NetworkIdentity,
    parameters: ConstructorParameters,
    deploy: DeployFunction,
) -> DeploymentResult:
    """
    Resolves the constructor arguments of a contract for the given network
    and deploys it exactly once.

    Resolution errors are raised before `deploy` is called; errors raised
    by `deploy` itself are not caught.
    """
    resolver = parameters.resolver(contract_name)
    arguments = resolver.resolve_network(network)

    address = deploy(contract_name, arguments)
    if not address:
        raise DeploymentFailure(f"{contract_name} deployment on {network.name} returned no address")

    return DeploymentResult(
        contract_name=contract_name,
        network=network,
        address=address,
        arguments=arguments,
    )


def check_arguments(
    contract_name: str,
    network: NetworkIdentity,
    parameters: ConstructorParameters,
    arguments: Sequence[str],
) -> Tuple[Any, ...]:
    """
    Compares command line constructor arguments with the ones resolved for
    the network and returns the resolved arguments. No arguments always match.
    """
    expected = parameters.resolver(contract_name).resolve_network(network)
    if arguments and list(arguments) != [str(argument) for argument in expected]:
        raise ArgumentMismatch(
            f"expected '{format_arguments(expected)}' for {contract_name} on {network.name}"
        )
    return expected
