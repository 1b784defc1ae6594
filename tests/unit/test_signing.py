"""Tests for action hashing, signing and signer recovery."""

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak

from hyperliquid_native.encoding import encode
from hyperliquid_native.errors import EncodingError, InvalidKeyError
from hyperliquid_native.signing import (
    AGENT_TYPES,
    EXCHANGE_DOMAIN,
    action_hash,
    action_preimage,
    construct_phantom_agent,
    is_valid_private_key,
    parse_private_key,
    private_key_to_address,
    recover_address,
    recover_l1_action_signer,
    sign_digest,
    sign_l1_action,
)
from hyperliquid_native.typed_data import hash_typed_data
from hyperliquid_native.types import (
    CancelAction,
    CancelEntry,
    OrderAction,
    OrderEntry,
    Signature,
    TimeInForce,
)
from tests.unit.conftest import TEST_ADDRESS, TEST_NONCE, TEST_PRIVATE_KEY, load_json

VAULT = "0x" + "ab" * 20


def reference_agent_signature(connection_id: bytes, is_testnet: bool):
    """Sign the Agent message with eth-account as an independent reference."""
    signable = encode_typed_data(
        full_message={
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                    {"name": "verifyingContract", "type": "address"},
                ],
                "Agent": [
                    {"name": "source", "type": "string"},
                    {"name": "connectionId", "type": "bytes32"},
                ],
            },
            "primaryType": "Agent",
            "domain": dict(EXCHANGE_DOMAIN),
            "message": {
                "source": "b" if is_testnet else "a",
                "connectionId": connection_id,
            },
        }
    )
    digest = keccak(b"\x19" + signable.version + signable.header + signable.body)
    signed = Account.sign_message(signable, private_key=TEST_PRIVATE_KEY)
    return digest, signed


# ============================================================================
# KEYS
# ============================================================================


@pytest.mark.parametrize(
    "private_key, address",
    [
        ("0x" + "00" * 31 + "01", "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"),
        (TEST_PRIVATE_KEY, TEST_ADDRESS),
        (TEST_PRIVATE_KEY[2:], TEST_ADDRESS),
        (bytes.fromhex(TEST_PRIVATE_KEY[2:]), TEST_ADDRESS),
    ],
)
def test_private_key_to_address(private_key, address):
    assert private_key_to_address(private_key) == address


@pytest.mark.parametrize(
    "private_key",
    [
        "0x1234",
        "0x" + "zz" * 32,
        "0x" + "00" * 32,
        "0x" + "ff" * 32,
        b"\x01" * 31,
        12345,
    ],
)
def test_invalid_private_keys(private_key):
    assert not is_valid_private_key(private_key)
    with pytest.raises(InvalidKeyError):
        parse_private_key(private_key)


# ============================================================================
# ACTION HASH
# ============================================================================


def test_preimage_layout_without_vault_or_expiry(btc_order_action):
    preimage = action_preimage(btc_order_action, TEST_NONCE)
    assert preimage == (
        encode(btc_order_action.to_wire())
        + bytes.fromhex("0000018bcfe56800")
        + b"\x00"
    )


def test_preimage_layout_with_vault_and_expiry(btc_order_action):
    expires_after = TEST_NONCE + 60_000
    preimage = action_preimage(btc_order_action, TEST_NONCE, VAULT, expires_after)
    assert preimage == (
        encode(btc_order_action.to_wire())
        + TEST_NONCE.to_bytes(8, "big")
        + b"\x01"
        + bytes.fromhex("ab" * 20)
        + b"\x00"
        + expires_after.to_bytes(8, "big")
    )


def test_preimage_expiry_without_vault(btc_order_action):
    preimage = action_preimage(btc_order_action, TEST_NONCE, expires_after=5)
    assert preimage.endswith(
        TEST_NONCE.to_bytes(8, "big") + b"\x00" + b"\x00" + (5).to_bytes(8, "big")
    )


def test_action_hash_is_keccak_of_preimage(btc_order_action):
    assert action_hash(btc_order_action, TEST_NONCE) == keccak(
        action_preimage(btc_order_action, TEST_NONCE)
    )


def test_action_hash_sensitivity(btc_order_action):
    base = action_hash(btc_order_action, TEST_NONCE)
    assert action_hash(btc_order_action, TEST_NONCE + 1) != base
    assert action_hash(btc_order_action, TEST_NONCE, VAULT) != base
    assert action_hash(btc_order_action, TEST_NONCE, expires_after=0) != base
    with_builder = OrderAction(orders=btc_order_action.orders, builder="0x" + "12" * 20)
    assert action_hash(with_builder, TEST_NONCE) != base


def test_action_hash_changes_when_orders_reordered():
    first = OrderEntry(asset=0, is_buy=True, price="30000", size="0.1")
    second = OrderEntry(asset=1, is_buy=False, price="2000", size="1")
    assert action_hash(OrderAction.of(first, second), TEST_NONCE) != action_hash(
        OrderAction.of(second, first), TEST_NONCE
    )


def test_action_hash_independent_of_construction_path(btc_order_action):
    from_floats = OrderAction.of(
        OrderEntry(
            asset=0,
            is_buy=True,
            price=30000.0,  # type: ignore[arg-type]
            size=0.1,  # type: ignore[arg-type]
            time_in_force="Gtc",  # type: ignore[arg-type]
        )
    )
    raw_wire = {
        "type": "order",
        "orders": [
            {
                "a": 0,
                "b": True,
                "p": "30000",
                "s": "0.1",
                "r": False,
                "t": {"limit": {"tif": "Gtc"}},
            }
        ],
        "grouping": "na",
    }
    expected = action_hash(btc_order_action, TEST_NONCE)
    assert action_hash(from_floats, TEST_NONCE) == expected
    assert action_hash(raw_wire, TEST_NONCE) == expected


@pytest.mark.parametrize(
    "kwargs",
    [
        {"nonce": -1},
        {"nonce": 2**64},
        {"nonce": TEST_NONCE, "vault_address": "0x1234"},
        {"nonce": TEST_NONCE, "expires_after": -5},
    ],
)
def test_action_hash_rejects_bad_inputs(btc_order_action, kwargs):
    with pytest.raises(EncodingError):
        action_hash(btc_order_action, **kwargs)


# ============================================================================
# SIGNING
# ============================================================================


def test_sign_digest_matches_recorded_eip712_signature():
    mail = load_json("eip712.mail")
    digest = bytes.fromhex(mail["expected"]["digest"][2:])
    cow_key = keccak(b"cow")

    signature = sign_digest(cow_key, digest)

    assert (
        private_key_to_address(cow_key).lower()
        == mail["expected"]["signerAddress"].lower()
    )
    assert signature == Signature(**mail["expected"]["signature"])


@pytest.fixture
def btc_order_vector():
    return load_json("agent.btc_order")


def test_recorded_preimage(btc_order_action, btc_order_vector):
    expected = btc_order_vector["expected"]["preimage"]
    assert btc_order_action.to_wire() == btc_order_vector["action"]
    assert "0x" + action_preimage(btc_order_action, TEST_NONCE).hex() == expected
    assert action_hash(btc_order_action, TEST_NONCE) == keccak(
        bytes.fromhex(expected[2:])
    )


def test_recorded_mainnet_signature(btc_order_action, btc_order_vector):
    expected = Signature(**btc_order_vector["expected"]["mainnet"]["signature"])

    signature = sign_l1_action(
        btc_order_vector["privateKey"], btc_order_action, btc_order_vector["nonce"]
    )

    assert signature == expected
    assert private_key_to_address(btc_order_vector["privateKey"]) == (
        btc_order_vector["signerAddress"]
    )
    # the raw wire mapping signs identically to the typed action
    assert sign_l1_action(
        TEST_PRIVATE_KEY, btc_order_vector["action"], TEST_NONCE
    ) == expected


@pytest.mark.parametrize("is_testnet", [False, True])
def test_agent_digest_matches_reference(btc_order_action, is_testnet):
    connection_id = action_hash(btc_order_action, TEST_NONCE)
    expected_digest, _ = reference_agent_signature(connection_id, is_testnet)

    digest = hash_typed_data(
        EXCHANGE_DOMAIN,
        AGENT_TYPES,
        "Agent",
        construct_phantom_agent(connection_id, is_testnet),
    )

    assert digest == expected_digest


@pytest.mark.parametrize("is_testnet", [False, True])
def test_end_to_end_signature_matches_reference(btc_order_action, is_testnet):
    connection_id = action_hash(btc_order_action, TEST_NONCE)
    _, reference = reference_agent_signature(connection_id, is_testnet)

    signature = sign_l1_action(
        TEST_PRIVATE_KEY, btc_order_action, TEST_NONCE, is_testnet=is_testnet
    )

    assert signature.r == f"0x{reference.r:064x}"
    assert signature.s == f"0x{reference.s:064x}"
    assert signature.v == reference.v
    assert len(signature.r) == len(signature.s) == 66
    assert signature.v in (27, 28)


def test_signature_is_deterministic(btc_order_action):
    first = sign_l1_action(TEST_PRIVATE_KEY, btc_order_action, TEST_NONCE)
    second = sign_l1_action(TEST_PRIVATE_KEY, btc_order_action, TEST_NONCE)
    assert first == second


def test_network_changes_signature(btc_order_action):
    mainnet = sign_l1_action(TEST_PRIVATE_KEY, btc_order_action, TEST_NONCE)
    testnet = sign_l1_action(
        TEST_PRIVATE_KEY, btc_order_action, TEST_NONCE, is_testnet=True
    )
    assert mainnet != testnet


@pytest.mark.parametrize("is_testnet", [False, True])
def test_signature_recovers_signer(btc_order_action, is_testnet):
    signature = sign_l1_action(
        TEST_PRIVATE_KEY,
        btc_order_action,
        TEST_NONCE,
        is_testnet=is_testnet,
        vault_address=VAULT,
        expires_after=TEST_NONCE + 1,
    )
    recovered = recover_l1_action_signer(
        btc_order_action,
        TEST_NONCE,
        signature,
        is_testnet=is_testnet,
        vault_address=VAULT,
        expires_after=TEST_NONCE + 1,
    )
    assert recovered == TEST_ADDRESS


def test_recovery_with_other_nonce_yields_other_address(btc_order_action):
    signature = sign_l1_action(TEST_PRIVATE_KEY, btc_order_action, TEST_NONCE)
    assert (
        recover_l1_action_signer(btc_order_action, TEST_NONCE + 1, signature)
        != TEST_ADDRESS
    )


def test_cancel_action_signature_recovers_signer():
    action = CancelAction.of(CancelEntry(asset=3, order_id=91490942))
    signature = sign_l1_action(TEST_PRIVATE_KEY, action, TEST_NONCE)
    assert recover_l1_action_signer(action, TEST_NONCE, signature) == TEST_ADDRESS


def test_recover_address_from_digest():
    digest = keccak(b"digest")
    signature = sign_digest(TEST_PRIVATE_KEY, digest)
    assert recover_address(digest, signature) == TEST_ADDRESS


def test_sign_with_invalid_key_produces_nothing(btc_order_action):
    with pytest.raises(InvalidKeyError):
        sign_l1_action("0xdeadbeef", btc_order_action, TEST_NONCE)


def test_all_time_in_force_values_sign():
    for tif in TimeInForce:
        action = OrderAction.of(
            OrderEntry(asset=0, is_buy=False, price="1", size="1", time_in_force=tif)
        )
        signature = sign_l1_action(TEST_PRIVATE_KEY, action, TEST_NONCE)
        assert recover_l1_action_signer(action, TEST_NONCE, signature) == TEST_ADDRESS
