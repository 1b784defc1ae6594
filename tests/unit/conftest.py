import logging
from pathlib import Path
from typing import Any, Generator

import orjson
import pytest

from hyperliquid_native.api import HyperliquidApiClient
from hyperliquid_native.types import OrderAction, OrderEntry, TimeInForce
from tests.mock_executors import MockHttpExecutor, MockOutputNotExhausted

DATA_DIR = Path(__file__).parent.joinpath("data")

log = logging.getLogger(__name__)

# well-known key/address pair from the web3 documentation
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

TEST_NONCE = 1700000000000


@pytest.fixture
def mock_http_client() -> Generator[
    tuple[HyperliquidApiClient, MockHttpExecutor], None, None
]:
    mock_http = MockHttpExecutor()
    client = HyperliquidApiClient(
        private_key=TEST_PRIVATE_KEY,
        # replace real network requests with our mock
        executor=mock_http,
    )

    yield (client, mock_http)

    if len(mock_http.staged_outputs) > 0:
        raise MockOutputNotExhausted(mock_http.staged_outputs)


@pytest.fixture
def btc_order_action() -> OrderAction:
    return OrderAction.of(
        OrderEntry(
            asset=0,
            is_buy=True,
            price="30000",
            size="0.1",
            reduce_only=False,
            time_in_force=TimeInForce.Gtc,
        )
    )


def load_json(name: str, case: int | None = None) -> dict[str, Any]:
    case_part = f"{case}." if case else ""
    path = DATA_DIR / f"{name}.{case_part}json"
    with open(path, "rb") as fh:
        return orjson.loads(fh.read())
