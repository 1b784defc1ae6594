import pytest

from hyperliquid_native.api import HyperliquidApiClient
from hyperliquid_native.env_setup import setup_environment
from hyperliquid_native.errors import ValidationError
from hyperliquid_native.helpers import MAINNET_API_URL, TESTNET_API_URL
from tests.mock_executors import MockHttpExecutor
from tests.unit.conftest import TEST_ADDRESS, TEST_PRIVATE_KEY

ENV_VARS = [
    "ENVIRONMENT",
    *(
        f"HYPERLIQUID_{name}_{env}"
        for name in ("API_ENDPOINT", "PRIVATE_KEY", "VAULT_ADDRESS")
        for env in ("MAINNET", "TESTNET")
    ),
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's own .env out of the tests
    monkeypatch.chdir(tmp_path)


def test_defaults_to_mainnet(tmp_path):
    config = setup_environment(tmp_path / "missing.env")
    assert config.environment == "mainnet"
    assert not config.is_testnet
    assert config.api_url == MAINNET_API_URL
    assert config.private_key is None
    assert config.vault_address is None


def test_reads_testnet_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("ENVIRONMENT", "Testnet")
    monkeypatch.setenv("HYPERLIQUID_PRIVATE_KEY_TESTNET", TEST_PRIVATE_KEY)
    monkeypatch.setenv("HYPERLIQUID_VAULT_ADDRESS_TESTNET", "0x" + "cd" * 20)
    # mainnet values are ignored in the testnet environment
    monkeypatch.setenv("HYPERLIQUID_PRIVATE_KEY_MAINNET", "garbage")

    config = setup_environment(tmp_path / "missing.env")

    assert config.is_testnet
    assert config.api_url == TESTNET_API_URL
    assert config.private_key == TEST_PRIVATE_KEY
    assert config.vault_address == "0x" + "cd" * 20


def test_loads_dotenv_file(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "ENVIRONMENT=mainnet\n"
        "HYPERLIQUID_API_ENDPOINT_MAINNET=http://localhost:3001\n"
        f"HYPERLIQUID_PRIVATE_KEY_MAINNET={TEST_PRIVATE_KEY}\n"
    )
    for name in ENV_VARS:
        # load_dotenv writes straight into os.environ
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    config = setup_environment(env_file)

    assert config.api_url == "http://localhost:3001"
    assert config.private_key == TEST_PRIVATE_KEY


@pytest.mark.parametrize(
    "name, value",
    [
        ("ENVIRONMENT", "devnet"),
        ("HYPERLIQUID_PRIVATE_KEY_MAINNET", "0x1234"),
        ("HYPERLIQUID_VAULT_ADDRESS_MAINNET", "0xabc"),
    ],
)
def test_invalid_values_rejected(monkeypatch, tmp_path, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        setup_environment(tmp_path / "missing.env")


def test_client_from_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "testnet")
    monkeypatch.setenv("HYPERLIQUID_PRIVATE_KEY_TESTNET", TEST_PRIVATE_KEY)
    monkeypatch.setenv("HYPERLIQUID_VAULT_ADDRESS_TESTNET", "0x" + "EF" * 20)

    client = HyperliquidApiClient.from_env(executor=MockHttpExecutor())

    assert client.is_testnet
    assert client.address == TEST_ADDRESS
    assert client.vault_address == "0x" + "ef" * 20
