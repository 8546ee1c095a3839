import pytest
import yaml

from lzdeploy.chains import ChainEntry, ChainRegistry, load_chain_registry
from lzdeploy.constants import CHAINS_FILEPATH, OMNIGRAPH_PARAMS_FILEPATH
from lzdeploy.params import ConstructorParameters

# Common constants
FUJI_ENDPOINT = "0x93f54D755A063cE7bB9e6Ac47Eccc8e33411d706"
MUMBAI_ENDPOINT = "0xf69186dfBa60DdB133E91E9A4B5673624293d8F8"

TEST_ENDPOINT_1 = "0x" + "11" * 20
TEST_ENDPOINT_2 = "0x" + "22" * 20
TEST_ENDPOINT_3 = "0x" + "33" * 20


# Utility functions
def omnigraph_config(networks=None, constructor=None, constants=None, **extra):
    contract_data = {
        "constants": {"MIN_GAS_TO_TRANSFER": 150000} if constants is None else constants,
        "networks": networks
        or {
            "fuji": {"MIN_DESTINATION_ID": 1, "MAX_DESTINATION_ID": 99},
            "mumbai": {"MIN_DESTINATION_ID": 100, "MAX_DESTINATION_ID": 199},
        },
        "constructor": constructor
        or {
            "_minGasToTransfer": "$MIN_GAS_TO_TRANSFER",
            "_lzEndpoint": "$chain:lz_endpoint",
            "_minDestinationId": "$MIN_DESTINATION_ID",
            "_maxDestinationId": "$MAX_DESTINATION_ID",
        },
    }
    contract_data.update(extra)
    return {"contracts": [{"OmniGraph": contract_data}]}


def write_yaml(filepath, data):
    with open(filepath, "w") as file:
        yaml.safe_dump(data, file, sort_keys=False)
    return filepath


# Fixtures
@pytest.fixture(autouse=True)
def packaged_chains(monkeypatch):
    monkeypatch.delenv("LZDEPLOY_CHAINS_FILEPATH", raising=False)


@pytest.fixture(scope="session")
def registry():
    return load_chain_registry(filepath=CHAINS_FILEPATH)


@pytest.fixture(scope="session")
def parameters(registry):
    return ConstructorParameters.from_yaml(filepath=OMNIGRAPH_PARAMS_FILEPATH, registry=registry)


@pytest.fixture
def test_chains():
    return [
        ChainEntry(
            name="Fuji",
            chain_id=43113,
            lz_chain_id=10106,
            lz_endpoint=TEST_ENDPOINT_1,
            aliases=("avalanche:fuji",),
        ),
        ChainEntry(
            name="Mumbai",
            chain_id=80001,
            lz_chain_id=10109,
            lz_endpoint=TEST_ENDPOINT_2,
            aliases=("polygon:mumbai",),
        ),
        ChainEntry(name="Goerli", chain_id=5, lz_chain_id=10121, lz_endpoint=TEST_ENDPOINT_3),
    ]


@pytest.fixture
def test_registry(test_chains):
    return ChainRegistry(entries=test_chains)


@pytest.fixture
def chains_filepath(tmp_path, test_chains):
    data = {
        "chains": [
            {
                "name": chain.name,
                "chain_id": chain.chain_id,
                "lz_chain_id": chain.lz_chain_id,
                "lz_endpoint": chain.lz_endpoint,
                "aliases": list(chain.aliases),
            }
            for chain in test_chains
        ]
    }
    return write_yaml(tmp_path / "chains.yml", data)
