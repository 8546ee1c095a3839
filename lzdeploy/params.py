import copy
import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, Tuple

from lzdeploy.chains import ChainEntry, ChainRegistry, NetworkIdentity
from lzdeploy.constants import CHAIN_VARIABLE_PREFIX, VARIABLE_PREFIX
from lzdeploy.utils import _load_yaml

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"
CONTRACT_CONSTANTS_KEY = "constants"
CONTRACT_NETWORKS_KEY = "networks"
CONTRACT_DISJOINT_RANGES_KEY = "disjoint_ranges"


class UnsupportedNetwork(LookupError):
    """Raised when a contract has no constructor arguments for a network"""


class VariableContext:
    def __init__(
        self,
        contract_name: str,
        constants: typing.Dict[str, Any] = None,
        network_constants: typing.Dict[ChainEntry, typing.Dict[str, Any]] = None,
    ):
        self.contract_name = contract_name
        self.constants = constants or dict()
        self.network_constants = network_constants or dict()


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = VARIABLE_PREFIX

    @abstractmethod
    def resolve(self, chain: ChainEntry, constants: typing.Dict[str, Any]) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        defined_for_contract = constant_name in context.constants
        defined_for_networks = bool(context.network_constants) and all(
            constant_name in values for values in context.network_constants.values()
        )
        if not (defined_for_contract or defined_for_networks):
            raise ConstructorParameters.Invalid(
                f"Constant '{constant_name}' not defined for every {context.contract_name} network."
            )
        self.constant_name = constant_name

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self, chain: ChainEntry, constants: typing.Dict[str, Any]) -> Any:
        return copy.deepcopy(constants[self.constant_name])


class ChainField(Variable):
    """A field of the chain registry entry for the network being deployed to."""

    EXCLUDED_FIELDS = ("aliases",)

    def __init__(self, variable: str, context: VariableContext):
        field = variable[len(CHAIN_VARIABLE_PREFIX) :]
        if field not in ChainEntry._fields or field in self.EXCLUDED_FIELDS:
            raise ConstructorParameters.Invalid(
                f"Unknown chain field '{field}' in {context.contract_name} constructor parameters."
            )
        self.field = field

    @classmethod
    def is_chain_field(cls, value: str) -> bool:
        return value.startswith(CHAIN_VARIABLE_PREFIX)

    def resolve(self, chain: ChainEntry, constants: typing.Dict[str, Any]) -> Any:
        return getattr(chain, self.field)


def _resolve_param(value: Any, chain: ChainEntry, constants: typing.Dict[str, Any]) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v, chain, constants) for v in value]

    if isinstance(value, Variable):
        return value.resolve(chain, constants)

    return copy.deepcopy(value)  # literally a value


def _resolve_params(
    parameters: OrderedDict, chain: ChainEntry, constants: typing.Dict[str, Any]
) -> OrderedDict:
    resolved_parameters = OrderedDict()
    for name, value in parameters.items():
        resolved_parameters[name] = _resolve_param(value, chain, constants)

    return resolved_parameters


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if ChainField.is_chain_field(variable):
        return ChainField(variable, context)
    elif Constant.is_constant(variable):
        return Constant(variable, context)
    raise ConstructorParameters.Invalid(
        f"Variable ${variable} is not resolvable for {context.contract_name}."
    )


def _process_raw_value(value: Any, variable_context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, variable_context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, variable_context)

    return value


def _process_raw_values(values: typing.Dict, variable_context: VariableContext) -> OrderedDict:
    processed_parameters = OrderedDict()
    for name, value in values.items():
        processed_parameters[name] = _process_raw_value(value, variable_context)

    return processed_parameters


def _validate_disjoint_ranges(
    contract_name: str,
    range_keys: List[str],
    constants: typing.Dict[str, Any],
    network_constants: typing.Dict[ChainEntry, typing.Dict[str, Any]],
) -> None:
    """Checks that each network's [min, max] range is ordered and overlaps no other network's."""
    if not isinstance(range_keys, list) or len(range_keys) != 2:
        raise ConstructorParameters.Invalid(
            f"{contract_name} '{CONTRACT_DISJOINT_RANGES_KEY}' must name exactly two constants."
        )
    min_key, max_key = range_keys

    ranges = list()
    for chain, values in network_constants.items():
        merged = {**constants, **values}
        try:
            low, high = merged[min_key], merged[max_key]
        except KeyError:
            raise ConstructorParameters.Invalid(
                f"{contract_name} range {min_key}..{max_key} not defined for {chain.name}."
            )
        if low > high:
            raise ConstructorParameters.Invalid(
                f"{contract_name} range for {chain.name} is empty: "
                f"{min_key}={low} > {max_key}={high}."
            )
        ranges.append((low, high, chain.name))

    ranges.sort()
    for (_, high, name), (next_low, _, next_name) in zip(ranges, ranges[1:]):
        if next_low <= high:
            raise ConstructorParameters.Invalid(
                f"{contract_name} ranges for {name} and {next_name} overlap."
            )


class ArgumentResolver:
    """Resolves the ordered constructor arguments of a single contract for a network."""

    def __init__(
        self,
        contract_name: str,
        parameters: OrderedDict,
        network_constants: "OrderedDict[ChainEntry, typing.Dict[str, Any]]",
        registry: ChainRegistry,
        constants: typing.Dict[str, Any] = None,
    ):
        self.contract_name = contract_name
        self.parameters = parameters
        self.network_constants = network_constants
        self.registry = registry
        self.constants = constants or dict()

    @property
    def supported_networks(self) -> List[ChainEntry]:
        return list(self.network_constants)

    def _supported_chain(self, chain: ChainEntry) -> ChainEntry:
        if chain not in self.network_constants:
            raise UnsupportedNetwork(
                f"{self.contract_name} cannot be deployed on {chain.name}; supported networks are "
                f"{', '.join(c.name for c in self.supported_networks)}."
            )
        return chain

    def chain_for(self, network_name: str) -> ChainEntry:
        """Returns the registry entry of a supported network."""
        try:
            chain = self.registry.find_by_name(network_name)
        except ChainRegistry.NotFound as e:
            raise UnsupportedNetwork(
                f"Invalid network '{network_name}'. Probably unsupported network passed"
            ) from e
        return self._supported_chain(chain)

    def _resolve_chain(self, chain: ChainEntry) -> OrderedDict:
        constants = {**self.constants, **self.network_constants[chain]}
        return _resolve_params(self.parameters, chain, constants)

    def resolve_params(self, network_name: str) -> OrderedDict:
        """Resolves the named constructor parameters for a network."""
        return self._resolve_chain(self.chain_for(network_name))

    def resolve(self, network_name: str) -> Tuple[Any, ...]:
        """Resolves the ordered constructor arguments for a network."""
        return tuple(self.resolve_params(network_name).values())

    def network_chain(self, network: NetworkIdentity) -> ChainEntry:
        """Returns the registry entry of a supported network identity."""
        if not network.chain_id:
            raise UnsupportedNetwork(f"Invalid network {network.name}, missing chainId")
        try:
            chain = self.registry.find(name=network.name, chain_id=network.chain_id)
        except ChainRegistry.NotFound as e:
            raise UnsupportedNetwork(
                f"Network {network.name} (chain ID {network.chain_id}) missing LayerZero settings"
            ) from e
        return self._supported_chain(chain)

    def resolve_network_params(self, network: NetworkIdentity) -> OrderedDict:
        return self._resolve_chain(self.network_chain(network))

    def resolve_network(self, network: NetworkIdentity) -> Tuple[Any, ...]:
        """
        Resolves the ordered constructor arguments for a network identity.
        The network name and chain id must both identify the same registry entry.
        """
        return tuple(self.resolve_network_params(network).values())


class ConstructorParameters:
    """Represents the constructor parameters for a set of contracts."""

    class Invalid(ValueError):
        """Raised when the constructor parameters are invalid"""

    def __init__(self, resolvers: "OrderedDict[str, ArgumentResolver]"):
        self.resolvers = resolvers

    @classmethod
    def from_yaml(cls, filepath: Path, registry: ChainRegistry) -> "ConstructorParameters":
        config = _load_yaml(filepath)
        return cls.from_config(config=config, registry=registry)

    @classmethod
    def from_config(cls, config: typing.Dict, registry: ChainRegistry) -> "ConstructorParameters":
        """Loads the constructor parameters from a parsed YAML config."""
        contracts = (config or dict()).get("contracts")
        if not contracts:
            raise cls.Invalid("Constructor parameters file missing 'contracts' field.")

        resolvers = OrderedDict()
        for contract_info in contracts:
            if not isinstance(contract_info, dict) or len(contract_info) != 1:
                raise cls.Invalid("Malformed constructor parameters YAML.")

            contract_name = list(contract_info.keys())[0]  # only one entry
            contract_data = contract_info[contract_name] or dict()
            if contract_name in resolvers:
                raise cls.Invalid(f"Duplicate constructor parameters for {contract_name}.")
            resolvers[contract_name] = cls._process_contract(contract_name, contract_data, registry)

        return cls(resolvers=resolvers)

    @classmethod
    def _process_contract(
        cls, contract_name: str, contract_data: typing.Dict, registry: ChainRegistry
    ) -> ArgumentResolver:
        constants = contract_data.get(CONTRACT_CONSTANTS_KEY) or dict()
        network_constants = cls._process_networks(
            contract_name, contract_data.get(CONTRACT_NETWORKS_KEY), registry
        )

        range_keys = contract_data.get(CONTRACT_DISJOINT_RANGES_KEY)
        if range_keys is not None:
            _validate_disjoint_ranges(contract_name, range_keys, constants, network_constants)

        parameter_values = _process_raw_values(
            contract_data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict(),
            VariableContext(
                contract_name=contract_name,
                constants=constants,
                network_constants=network_constants,
            ),
        )
        return ArgumentResolver(
            contract_name=contract_name,
            parameters=parameter_values,
            network_constants=network_constants,
            registry=registry,
            constants=constants,
        )

    @classmethod
    def _process_networks(
        cls, contract_name: str, networks: Any, registry: ChainRegistry
    ) -> "OrderedDict[ChainEntry, typing.Dict[str, Any]]":
        if not networks:
            raise cls.Invalid(f"{contract_name} does not declare any supported networks.")
        if isinstance(networks, list):
            networks = OrderedDict((name, None) for name in networks)

        network_constants = OrderedDict()
        for network_name, values in networks.items():
            try:
                chain = registry.find_by_name(network_name)
            except ChainRegistry.NotFound:
                raise cls.Invalid(
                    f"{contract_name} network '{network_name}' is not in the chain registry."
                )
            if chain in network_constants:
                raise cls.Invalid(f"{contract_name} lists {chain.name} more than once.")
            network_constants[chain] = dict(values or {})
        return network_constants

    @property
    def contract_names(self) -> List[str]:
        return list(self.resolvers)

    def resolver(self, contract_name: str) -> ArgumentResolver:
        try:
            return self.resolvers[contract_name]
        except KeyError:
            raise self.Invalid(f"No constructor parameters for contract {contract_name}.")

    def resolve(self, contract_name: str, network_name: str) -> Tuple[Any, ...]:
        """Resolves the constructor arguments of a single contract for a network."""
        return self.resolver(contract_name).resolve(network_name)
