"""Local signing and request assembly for the Hyperliquid exchange."""

from hyperliquid_native.api import (
    HyperliquidApiClient,
    build_exchange_request,
    raise_response_errors,
)
from hyperliquid_native.encoding import encode
from hyperliquid_native.signing import (
    AGENT_TYPES,
    EXCHANGE_DOMAIN,
    action_hash,
    private_key_to_address,
    recover_address,
    recover_l1_action_signer,
    sign_l1_action,
)
from hyperliquid_native.typed_data import TypedDataField, hash_typed_data
from hyperliquid_native.types import (
    CancelAction,
    CancelEntry,
    OrderAction,
    OrderEntry,
    OrderGrouping,
    Signature,
    TimeInForce,
)

__version__ = "0.1.0"

__all__ = [
    "AGENT_TYPES",
    "EXCHANGE_DOMAIN",
    "CancelAction",
    "CancelEntry",
    "HyperliquidApiClient",
    "OrderAction",
    "OrderEntry",
    "OrderGrouping",
    "Signature",
    "TimeInForce",
    "TypedDataField",
    "action_hash",
    "build_exchange_request",
    "encode",
    "hash_typed_data",
    "private_key_to_address",
    "raise_response_errors",
    "recover_address",
    "recover_l1_action_signer",
    "sign_l1_action",
]
