"""Helper utilities for the Hyperliquid native signer.

This module contains host constants, JSON serialization for request and
response bodies, nonce generation and pretty-printing of results.
"""

import logging
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from functools import lru_cache
from time import time_ns
from typing import Any

import orjson
from prettyprinter import cpprint

from hyperliquid_native.errors import DeserializationError, SerializationError
from hyperliquid_native.types import JsonValue

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

MAINNET_API_URL: str = "https://api.hyperliquid.xyz"
TESTNET_API_URL: str = "https://api.hyperliquid-testnet.xyz"

EXCHANGE_PATH: str = "/exchange"
INFO_PATH: str = "/info"


def default_api_url(is_testnet: bool) -> str:
    return TESTNET_API_URL if is_testnet else MAINNET_API_URL


@lru_cache(maxsize=1)
def get_client_name() -> str:
    """Get the client identification string sent as User-Agent."""
    import hyperliquid_native

    return f"HyperliquidNative/{hyperliquid_native.__version__}"


# ============================================================================
# SERIALIZATION / DESERIALIZATION
# ============================================================================


def decimal_as_str(obj: object) -> str:
    """Serialize Decimal objects to JSON strings.

    Converts Decimal to string to preserve precision in JSON serialization.
    """
    if isinstance(obj, Decimal):
        return str(obj)

    raise TypeError


def serialize_request(request: JsonValue) -> bytes:
    """Serialize a request object to JSON bytes, preserving key order.

    Raises:
        SerializationError: If serialization fails

    """
    try:
        return orjson.dumps(request, default=decimal_as_str)
    except Exception as e:
        raise SerializationError(f"Failed to serialize {request=}") from e


def deserialize_response(response_body: bytes, url: str) -> JsonValue:
    """Deserialize a JSON response body.

    Raises:
        DeserializationError: If deserialization fails

    """
    try:
        return orjson.loads(response_body)
    except Exception as e:
        raise DeserializationError(
            f"Failed to parse JSON response from {url}: {e}"
        ) from e


# ============================================================================
# TIME UTILITIES
# ============================================================================


def current_nonce() -> int:
    """Return the current Unix time in milliseconds.

    Note: uniqueness per signing key is the caller's responsibility. Two calls
    within the same millisecond return the same value.
    """
    return time_ns() // 1_000_000


def print_data(response: Any) -> None:
    """Pretty-print response data, handling dataclasses specially.

    Dataclass instances are converted to dictionaries before printing
    for better formatting.

    Args:
        response: Data to print

    """
    if is_dataclass(response) and not isinstance(response, type):
        cpprint(asdict(response))
    else:
        cpprint(response)
