from pathlib import Path

import lzdeploy

#
# Filesystem
#

DEPLOYMENT_DIR = Path(lzdeploy.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
CHAINS_FILEPATH = DEPLOYMENT_DIR / "chains.yml"
OMNIGRAPH_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "omnigraph.yml"

#
# Environment
#

CHAINS_FILEPATH_ENVVAR = "LZDEPLOY_CHAINS_FILEPATH"

#
# Contracts
#

GAS_STATION = "GasStation"
OMNI_GRAPH = "OmniGraph"

SUPPORTED_CONTRACTS = [GAS_STATION, OMNI_GRAPH]

#
# Constructor parameter variables
#

VARIABLE_PREFIX = "$"
CHAIN_VARIABLE_PREFIX = "chain:"

#
# Networks
#

LOCAL_NETWORKS = ["local"]

ZERO_ADDRESS = "0x" + "0" * 40

# Block explorer API keys required for contract verification, per ape ecosystem
EXPLORER_API_KEY_ENVVARS = {
    "ethereum": "ETHERSCAN_API_KEY",
    "arbitrum": "ARBISCAN_API_KEY",
    "optimism": "OPTIMISTIC_ETHERSCAN_API_KEY",
    "polygon": "POLYGONSCAN_API_KEY",
}
