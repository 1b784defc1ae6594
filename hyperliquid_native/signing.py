"""Action hashing and signing for exchange requests.

An action is authenticated in two steps:

1. ``action_hash`` serializes the action with the byte encoder and appends the
   nonce, the vault marker/address and the optional expiry, then hashes the
   whole preimage with Keccak-256.
2. ``sign_l1_action`` places that hash as ``connectionId`` in an ``Agent``
   message, hashes it as typed data under the fixed exchange domain and signs
   the digest with secp256k1.

Signing is deterministic (RFC6979 nonce derivation), so identical inputs
always produce the same signature.
"""

import logging
from types import MappingProxyType
from typing import Any

import eth_keys.datatypes
from eth_keys.exceptions import BadSignature, ValidationError as EthKeysValidationError
from eth_utils import keccak

from hyperliquid_native.encoding import encode
from hyperliquid_native.errors import EncodingError, InvalidKeyError
from hyperliquid_native.typed_data import TypedDataField, hash_typed_data
from hyperliquid_native.types import (
    UINT64_MAX,
    ActionInput,
    Nonce,
    Signature,
    action_to_wire,
)

log = logging.getLogger(__name__)

# ============================================================================
# CONSTANTS
# ============================================================================

SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

EXCHANGE_DOMAIN: MappingProxyType[str, Any] = MappingProxyType(
    {
        "name": "Exchange",
        "version": "1",
        "chainId": 1337,
        "verifyingContract": ZERO_ADDRESS,
    }
)

AGENT_TYPES: MappingProxyType[str, tuple[TypedDataField, ...]] = MappingProxyType(
    {
        "Agent": (
            TypedDataField("source", "string"),
            TypedDataField("connectionId", "bytes32"),
        ),
    }
)

MAINNET_SOURCE = "a"
TESTNET_SOURCE = "b"

PrivateKeyInput = str | bytes | eth_keys.datatypes.PrivateKey


# ============================================================================
# KEYS AND ADDRESSES
# ============================================================================


def parse_private_key(private_key: PrivateKeyInput) -> eth_keys.datatypes.PrivateKey:
    """Parse a hex string (with or without 0x) or 32 raw bytes into a private key.

    Raises:
        InvalidKeyError: If the key is malformed or outside ``[1, n)``.

    """
    if isinstance(private_key, eth_keys.datatypes.PrivateKey):
        return private_key

    if isinstance(private_key, str):
        text = private_key[2:] if private_key[:2] in ("0x", "0X") else private_key
        try:
            key_bytes = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidKeyError("Invalid private key: not a hex string") from e
    elif isinstance(private_key, (bytes, bytearray)):
        key_bytes = bytes(private_key)
    else:
        raise InvalidKeyError(
            f"Unexpected type for private_key {type(private_key).__name__}"
        )

    if len(key_bytes) != 32:
        raise InvalidKeyError(
            f"Invalid private key: expected 32 bytes, got {len(key_bytes)}"
        )
    if not 0 < int.from_bytes(key_bytes, "big") < SECP256K1_N:
        raise InvalidKeyError("Invalid private key: outside the secp256k1 range")

    try:
        return eth_keys.datatypes.PrivateKey(key_bytes)
    except EthKeysValidationError as e:
        raise InvalidKeyError(f"Invalid private key: {e}") from e


def is_valid_private_key(private_key: Any) -> bool:
    try:
        parse_private_key(private_key)
    except InvalidKeyError:
        return False
    return True


def private_key_to_address(private_key: PrivateKeyInput) -> str:
    """Derive the EIP-55 checksummed address controlled by a private key."""
    return parse_private_key(private_key).public_key.to_checksum_address()


def address_to_bytes(address: str | bytes) -> bytes:
    """Convert a 0x-prefixed hex address (or 20 raw bytes) into 20 bytes."""
    if isinstance(address, (bytes, bytearray)):
        raw = bytes(address)
    else:
        text = address[2:] if address[:2] in ("0x", "0X") else address
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise EncodingError(f"Invalid address {address!r}") from e
    if len(raw) != 20:
        raise EncodingError(f"Address must be 20 bytes, got {len(raw)}")
    return raw


def _uint64_bytes(value: int, name: str) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= UINT64_MAX:
        raise EncodingError(f"{name} {value} does not fit in an unsigned 64-bit integer")
    return value.to_bytes(8, "big")


# ============================================================================
# ACTION HASH
# ============================================================================


def action_preimage(
    action: ActionInput,
    nonce: Nonce,
    vault_address: str | bytes | None = None,
    expires_after: int | None = None,
) -> bytes:
    """Build the exact byte string hashed by ``action_hash``.

    Layout: ``encode(action) || nonce(8, BE) || vault marker(1) || [vault(20)]
    || [0x00 || expires_after(8, BE)]``. The expiry part is absent entirely
    when no expiry is given.
    """
    data = bytearray(encode(action_to_wire(action)))
    data += _uint64_bytes(nonce, "nonce")
    if vault_address is None:
        data += b"\x00"
    else:
        data += b"\x01"
        data += address_to_bytes(vault_address)
    if expires_after is not None:
        data += b"\x00"
        data += _uint64_bytes(expires_after, "expires_after")
    return bytes(data)


def action_hash(
    action: ActionInput,
    nonce: Nonce,
    vault_address: str | bytes | None = None,
    expires_after: int | None = None,
) -> bytes:
    """Keccak-256 of the action preimage; becomes the Agent ``connectionId``."""
    return keccak(action_preimage(action, nonce, vault_address, expires_after))


# ============================================================================
# SIGNING
# ============================================================================


def construct_phantom_agent(connection_id: bytes, is_testnet: bool) -> dict[str, Any]:
    """Build the Agent message that wraps an action hash."""
    return {
        "source": TESTNET_SOURCE if is_testnet else MAINNET_SOURCE,
        "connectionId": "0x" + connection_id.hex(),
    }


def sign_digest(private_key: PrivateKeyInput, digest: bytes) -> Signature:
    """Sign a 32-byte digest and return ``r``/``s`` hex strings and ``v`` = recovery id + 27."""
    key = parse_private_key(private_key)
    signed = key.sign_msg_hash(digest)
    return Signature(
        r=f"0x{signed.r:064x}",
        s=f"0x{signed.s:064x}",
        v=signed.v + 27,
    )


def sign_l1_action(
    private_key: PrivateKeyInput,
    action: ActionInput,
    nonce: Nonce,
    is_testnet: bool = False,
    vault_address: str | bytes | None = None,
    expires_after: int | None = None,
) -> Signature:
    """Sign an exchange action.

    Args:
        private_key: Signing key (hex string with or without 0x, or 32 bytes).
        action: A typed action or an already-ordered wire mapping.
        nonce: Caller-supplied uint64, unique per key per request.
        is_testnet: Selects the Agent ``source`` ("b" on testnet, "a" on mainnet).
        vault_address: Optional vault/sub-account the action is made for.
        expires_after: Optional uint64 expiry timestamp in milliseconds.

    Returns:
        The signature. Nothing is returned if any step fails.

    Raises:
        InvalidKeyError: If the private key is malformed.
        EncodingError: If the action, nonce, vault address or expiry cannot be encoded.

    """
    key = parse_private_key(private_key)
    connection_id = action_hash(action, nonce, vault_address, expires_after)
    digest = hash_typed_data(
        EXCHANGE_DOMAIN,
        AGENT_TYPES,
        "Agent",
        construct_phantom_agent(connection_id, is_testnet),
    )
    signature = sign_digest(key, digest)
    log.debug(
        "Signed action nonce=%d connectionId=0x%s testnet=%s",
        nonce,
        connection_id.hex(),
        is_testnet,
    )
    return signature


def recover_address(digest: bytes, signature: Signature) -> str:
    """Recover the checksummed address that produced ``signature`` over ``digest``.

    Raises:
        EncodingError: If the signature components are malformed.

    """
    try:
        eth_signature = eth_keys.datatypes.Signature(vrs=signature.to_vrs())
        public_key = eth_signature.recover_public_key_from_msg_hash(digest)
    except (BadSignature, EthKeysValidationError, ValueError) as e:
        raise EncodingError(f"Cannot recover signer from {signature}") from e
    return public_key.to_checksum_address()


def recover_l1_action_signer(
    action: ActionInput,
    nonce: Nonce,
    signature: Signature,
    is_testnet: bool = False,
    vault_address: str | bytes | None = None,
    expires_after: int | None = None,
) -> str:
    """Recover the address that signed an action, as the exchange verifies it."""
    connection_id = action_hash(action, nonce, vault_address, expires_after)
    digest = hash_typed_data(
        EXCHANGE_DOMAIN,
        AGENT_TYPES,
        "Agent",
        construct_phantom_agent(connection_id, is_testnet),
    )
    return recover_address(digest, signature)
