from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ape import networks, project
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance
from web3.auto import w3

from lzdeploy.chains import ChainEntry, NetworkIdentity, load_chain_registry
from lzdeploy.confirm import _confirm_resolution, _continue
from lzdeploy.deploy import deploy_contract
from lzdeploy.networks import check_plugins, current_network
from lzdeploy.params import ConstructorParameters


def get_contract_container(contract: str) -> ContractContainer:
    try:
        return getattr(project, contract)
    except AttributeError:
        raise ValueError(f"No contract found with name '{contract}'.")


def _validate_constructor_abi_inputs(
    contract_name: str,
    abi_inputs: List[Any],
    resolved_parameters: OrderedDict,
) -> None:
    """Validates the constructor parameters against the constructor ABI."""
    if len(resolved_parameters) != len(abi_inputs):
        raise ConstructorParameters.Invalid(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(resolved_parameters)}."
        )

    codex = enumerate(zip(abi_inputs, resolved_parameters.items()), start=0)
    for position, (abi_input, resolved_input) in codex:
        name, value = resolved_input
        if abi_input.name != name:
            raise ConstructorParameters.Invalid(
                f"{contract_name} constructor parameter '{name}' at position {position} does not "
                f"match the expected ABI name '{abi_input.name}'."
            )
        if not w3.is_encodable(abi_input.type, value):
            raise ConstructorParameters.Invalid(
                f"Constructor param name '{name}' at position {position} has a value '{value}' "
                f"whose type does not match expected ABI type '{abi_input.type}'"
            )


class Deployer:
    """
    Represents an ape account plus the constructor parameters of a set of
    LayerZero contracts, plus validated/annotated deployment on the connected network.
    """

    def __init__(
        self,
        parameters: ConstructorParameters,
        verify: bool,
        contract_names: Optional[Sequence[str]] = None,
        network: Optional[NetworkIdentity] = None,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        self.parameters = parameters
        self.contract_names = list(contract_names or parameters.contract_names)
        self.network = network or current_network()
        self.chain = self._check_network()
        self.verify = verify
        self.deployments: Dict[str, ContractInstance] = dict()

        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

        check_plugins(verify=verify)
        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(
        cls, filepath: Path, chains_filepath: Optional[Path] = None, **kwargs
    ) -> "Deployer":
        registry = load_chain_registry(filepath=chains_filepath)
        parameters = ConstructorParameters.from_yaml(filepath=filepath, registry=registry)
        return cls(parameters=parameters, **kwargs)

    def _check_network(self) -> ChainEntry:
        """Fails before any prompt if a contract cannot be deployed on the network."""
        chain = None
        for contract_name in self.contract_names:
            chain = self.parameters.resolver(contract_name).network_chain(self.network)
        return chain

    def get_account(self) -> AccountAPI:
        """Returns the deployer account."""
        return self._account

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        result = deploy_contract(
            contract_name=contract_name,
            network=self.network,
            parameters=self.parameters,
            deploy=self._deploy_contract,
        )
        print(f"{contract_name} deployed on {self.network.name} to {result.address}")
        print(f"To verify contract run: {result.verification_command}")
        return self.deployments[contract_name]

    def _deploy_contract(self, contract_name: str, arguments: Sequence[Any]) -> str:
        container = get_contract_container(contract_name)
        resolver = self.parameters.resolver(contract_name)
        resolved_params = OrderedDict(zip(resolver.parameters, arguments))
        _validate_constructor_abi_inputs(
            contract_name=contract_name,
            abi_inputs=container.constructor.abi.inputs,
            resolved_parameters=resolved_params,
        )
        if not self._autosign:
            chain = resolver.network_chain(self.network)
            _confirm_resolution(resolved_params, contract_name, chain)

        instance = self._account.deploy(container, *arguments, publish=self.verify)
        self.deployments[contract_name] = instance
        return instance.address

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Verify: {self.verify}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {self.network.name}",
            f"Chain ID: {self.network.chain_id}",
            f"LayerZero Chain ID: {self.chain.lz_chain_id}",
            f"LayerZero Endpoint: {self.chain.lz_endpoint}",
            f"Contracts: {', '.join(self.contract_names)}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
