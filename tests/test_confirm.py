from collections import OrderedDict

import pytest
from click.testing import CliRunner

from lzdeploy.confirm import _confirm_resolution, _continue
from lzdeploy.constants import GAS_STATION, OMNI_GRAPH
from tests.conftest import FUJI_ENDPOINT


def answer(text):
    return CliRunner().isolation(input=text)


def test_confirm_resolution_shows_layerzero_settings(parameters, registry):
    fuji = registry.find_by_name("fuji")
    resolved = parameters.resolver(OMNI_GRAPH).resolve_params("fuji")
    with answer("y\n") as streams:
        _confirm_resolution(resolved, OMNI_GRAPH, fuji)
        output = streams[0].getvalue().decode()

    assert "OmniGraph on Fuji (chain ID 43113, LayerZero chain ID 10106)" in output
    assert f"LayerZero endpoint: {FUJI_ENDPOINT}" in output
    assert "_minGasToTransfer=150000" in output
    assert "_maxDestinationId=99" in output
    assert "Deploy OmniGraph on Fuji?" in output


def test_confirm_resolution_without_parameters(registry):
    goerli = registry.find_by_name("goerli")
    with answer("\n") as streams:
        _confirm_resolution(OrderedDict(), "Ping", goerli)
        output = streams[0].getvalue().decode()
    assert "No constructor parameters" in output


@pytest.mark.parametrize("text", ["n\n", "no\n"])
def test_declined_deployment_exits(registry, text):
    fuji = registry.find_by_name("fuji")
    resolved = OrderedDict([("_lzEndpoint", fuji.lz_endpoint)])
    with answer(text) as streams:
        with pytest.raises(SystemExit) as exc_info:
            _confirm_resolution(resolved, GAS_STATION, fuji)
        output = streams[0].getvalue().decode()
    assert exc_info.value.code == -1
    assert "Aborting deployment!" in output


def test_continue():
    with answer("y\n"):
        _continue()
    with answer("n\n"):
        with pytest.raises(SystemExit):
            _continue()
