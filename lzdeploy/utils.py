from pathlib import Path
from typing import Any, Sequence

import yaml


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def format_arguments(arguments: Sequence[Any]) -> str:
    """Formats constructor arguments the way they are passed on the command line."""
    return " ".join(str(argument) for argument in arguments)


def verification_command(
    network: str, contract_name: str, address: str, arguments: Sequence[Any]
) -> str:
    """Returns the command that verifies a deployed contract with its constructor arguments."""
    command = f"ape run verify --network {network} --contract-name {contract_name} {address}"
    if arguments:
        command = f"{command} {format_arguments(arguments)}"
    return command
