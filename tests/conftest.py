import logging
import random

import pytest
from pytest import FixtureRequest

from blockscope.decoding import parse_abi
from tests.resources.abi import ERC20_ABI_JSON, ERC721_ABI_JSON


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address() -> str:
        return "0x" + random.randbytes(20).hex()

    return _generate_random_address


@pytest.fixture(name="erc20_abi")
def fixture_erc20_abi():
    return parse_abi(ERC20_ABI_JSON)


@pytest.fixture(name="erc721_abi")
def fixture_erc721_abi():
    return parse_abi(ERC721_ABI_JSON)


@pytest.fixture(name="abi_store_path")
def fixture_abi_store_path(tmp_path):
    return str(tmp_path / "abis" / "contract-abis.json")


@pytest.fixture(scope="function")
def debug_logger(request: FixtureRequest, caplog):
    logger = logging.getLogger("blockscope")
    caplog.set_level(logging.DEBUG, logger="blockscope")

    logger.info("-" * 100)
    logger.info(f"\t\tInitializing New Run for Test: {request.function.__name__}")
    logger.info("-" * 100)

    return logger
