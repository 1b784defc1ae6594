"""HTTP API client for the Hyperliquid exchange.

This module provides request assembly for signed actions, HTTP status error
mapping, and the HyperliquidApiClient class which performs a single
hash -> sign -> send round trip per call.
"""

import logging
from collections.abc import Iterable
from typing import Any

import eth_keys.datatypes

from hyperliquid_native.env_setup import setup_environment
from hyperliquid_native.errors import (
    BadGateway,
    BadRequest,
    DeserializationError,
    Forbidden,
    GatewayTimeout,
    HttpError,
    InternalServerError,
    NotFound,
    RateLimited,
    ServiceUnavailable,
    Unauthorized,
    ValidationError,
)
from hyperliquid_native.executors import DEFAULT_HTTP_EXECUTOR, HttpExecutor
from hyperliquid_native.executors.interface import HttpResponse
from hyperliquid_native.helpers import (
    EXCHANGE_PATH,
    INFO_PATH,
    current_nonce,
    default_api_url,
    deserialize_response,
)
from hyperliquid_native.signing import (
    PrivateKeyInput,
    address_to_bytes,
    parse_private_key,
    sign_l1_action,
)
from hyperliquid_native.types import (
    ActionInput,
    AssetIndex,
    CancelAction,
    CancelEntry,
    JsonObject,
    JsonValue,
    Nonce,
    NumericInput,
    OrderAction,
    OrderEntry,
    OrderGrouping,
    OrderId,
    Signature,
    TimeInForce,
    action_to_wire,
)

log = logging.getLogger(__name__)


def raise_response_errors(response: HttpResponse) -> None:
    """Check HTTP response status and raise appropriate errors.

    Every non-2XX status raises an HttpError subclass carrying the status code
    and the raw body text. 2XX responses pass through untouched.

    Raises:
        BadRequest: For 400 status codes
        Unauthorized: For 401 status codes
        Forbidden: For 403 status codes
        NotFound: For 404 status codes
        RateLimited: For 429 status codes
        HttpError: For other 4XX and unexpected status codes
        InternalServerError: For 500 and other 5XX status codes
        BadGateway: For 502 status codes
        ServiceUnavailable: For 503 status codes
        GatewayTimeout: For 504 status codes

    """
    status = response.status

    if 200 <= status < 300:
        return

    body = response.text
    detail = body if body else "<no error message>"

    if status == 400:
        raise BadRequest(status, body, f"Bad request: {detail}")

    if status == 401:
        raise Unauthorized(status, body, f"Unauthorized: {detail}")

    if status == 403:
        raise Forbidden(status, body, f"Forbidden: {detail}")

    if status == 404:
        raise NotFound(status, body, f"Not found: {detail}")

    if status == 429:
        raise RateLimited(status, body, f"Rate limit exceeded: {detail}")

    if 400 <= status < 500:
        raise HttpError(status, body, f"Client error ({status}): {detail}")

    if status == 500:
        raise InternalServerError(status, body, f"Internal server error: {detail}")

    if status == 502:
        raise BadGateway(status, body, f"Bad gateway: {detail}")

    if status == 503:
        raise ServiceUnavailable(status, body, f"Service unavailable: {detail}")

    if status == 504:
        raise GatewayTimeout(status, body, f"Gateway timeout: {detail}")

    if 500 <= status < 600:
        raise InternalServerError(status, body, f"Server error ({status}): {detail}")

    # 1xx/3xx should not reach an API client
    raise HttpError(status, body, f"Unexpected status code ({status}): {detail}")


def build_exchange_request(
    action: ActionInput,
    signature: Signature,
    nonce: Nonce,
    vault_address: str | None = None,
    expires_after: int | None = None,
) -> JsonObject:
    """Assemble the JSON body for the ``/exchange`` endpoint.

    The action is rendered with the same key order that was hashed. The
    ``vaultAddress`` and ``expiresAfter`` keys are only present when they were
    part of the signed preimage.
    """
    request: JsonObject = {
        "action": action_to_wire(action),
        "signature": signature.to_json(),
        "nonce": nonce,
    }
    if vault_address is not None:
        request["vaultAddress"] = vault_address
    if expires_after is not None:
        request["expiresAfter"] = expires_after
    return request


class HyperliquidApiClient:
    """Hyperliquid exchange client that signs actions locally.

    Examples:
        .. code-block:: python

            from hyperliquid_native import HyperliquidApiClient, TimeInForce

            client = HyperliquidApiClient(private_key="0x...", is_testnet=True)
            result = client.place_order(
                asset=0,
                is_buy=True,
                price="30000",
                size="0.1",
                time_in_force=TimeInForce.Gtc,
            )
            print(result)

    """

    _private_key: eth_keys.datatypes.PrivateKey | None = None

    _vault_address: str | None = None

    _asset_indices: dict[str, AssetIndex] | None = None

    _http_executor: HttpExecutor

    def __init__(
        self,
        private_key: PrivateKeyInput | None = None,
        is_testnet: bool = False,
        api_url: str | None = None,
        vault_address: str | None = None,
        executor: HttpExecutor | None = None,
    ):
        """Initialize the client.

        Args:
            private_key: Signing key (hex string with or without 0x, or 32 bytes).
                Optional here, required before any signed call.
            is_testnet: Sign for testnet and default to the testnet host.
            api_url: Base URL override for the API.
            vault_address: Optional vault/sub-account to trade on behalf of.
            executor: Custom HTTP executor (optional, uses default if not provided)

        """
        self._is_testnet = is_testnet
        if private_key is not None:
            self.set_private_key(private_key)
        self.set_vault_address(vault_address)

        self._http_executor = (
            executor
            if executor is not None
            else DEFAULT_HTTP_EXECUTOR(api_url=api_url or default_api_url(is_testnet))
        )

    @classmethod
    def from_env(cls, executor: HttpExecutor | None = None) -> "HyperliquidApiClient":
        """Build a client from environment variables (see env_setup.setup_environment)."""
        config = setup_environment()
        return cls(
            private_key=config.private_key,
            is_testnet=config.is_testnet,
            api_url=config.api_url,
            vault_address=config.vault_address,
            executor=executor,
        )

    @property
    def is_testnet(self) -> bool:
        return self._is_testnet

    @property
    def vault_address(self) -> str | None:
        return self._vault_address

    @property
    def address(self) -> str:
        """Get the checksummed address of the signing key.

        Raises:
            ValidationError: If the private key has not been set

        """
        return self.private_key.public_key.to_checksum_address()

    @property
    def private_key(self) -> eth_keys.datatypes.PrivateKey:
        if self._private_key is None:
            raise ValidationError("private_key has not been set")
        return self._private_key

    def set_private_key(self, private_key: PrivateKeyInput) -> None:
        """Set the private key used for signing.

        Raises:
            InvalidKeyError: If the key is malformed

        """
        self._private_key = parse_private_key(private_key)

    def set_vault_address(self, vault_address: str | None) -> None:
        """Set the vault/sub-account address, or None to trade for the signer."""
        if vault_address is None:
            self._vault_address = None
            return
        self._vault_address = "0x" + address_to_bytes(vault_address).hex()

    # ------------------------------------------------------------------------
    # Signed actions
    # ------------------------------------------------------------------------

    def sign_action(
        self,
        action: ActionInput,
        nonce: Nonce,
        expires_after: int | None = None,
    ) -> Signature:
        """Sign an action with this client's key, network and vault."""
        return sign_l1_action(
            self.private_key,
            action,
            nonce,
            is_testnet=self._is_testnet,
            vault_address=self._vault_address,
            expires_after=expires_after,
        )

    def execute_action(
        self,
        action: ActionInput,
        nonce: Nonce | None = None,
        expires_after: int | None = None,
    ) -> JsonValue:
        """Sign an action and POST it to ``/exchange``.

        Args:
            action: The action to sign and send.
            nonce: Nonce to sign with (defaults to the current time in ms).
            expires_after: Optional expiry timestamp in milliseconds.

        Returns:
            The decoded 2XX response body, unmodified.

        Raises:
            HttpError: If the exchange answers with a non-2XX status.
            TransportError: If the request could not be delivered.

        """
        if nonce is None:
            nonce = current_nonce()

        signature = self.sign_action(action, nonce, expires_after)
        request = build_exchange_request(
            action, signature, nonce, self._vault_address, expires_after
        )

        log.debug("Sending action nonce=%d to %s", nonce, EXCHANGE_PATH)
        response = self._http_executor.post_json(EXCHANGE_PATH, request)
        raise_response_errors(response)
        return deserialize_response(response.body, EXCHANGE_PATH)

    def place_order(
        self,
        asset: AssetIndex,
        is_buy: bool,
        price: NumericInput,
        size: NumericInput,
        reduce_only: bool = False,
        time_in_force: TimeInForce = TimeInForce.Ioc,
        client_order_id: str | None = None,
        *,
        nonce: Nonce | None = None,
        expires_after: int | None = None,
    ) -> JsonValue:
        """Place a single limit order.

        Args:
            asset: Asset index (see get_asset_index)
            is_buy: True to buy, False to sell
            price: Limit price
            size: Order size
            reduce_only: Only reduce an existing position
            time_in_force: Ioc (default), Gtc or Alo
            client_order_id: Optional client order id
            nonce: Nonce to sign with (defaults to the current time in ms)
            expires_after: Optional expiry timestamp in milliseconds

        Returns:
            The exchange response body.

        """
        order = OrderEntry(
            asset=asset,
            is_buy=is_buy,
            price=price,  # type: ignore[arg-type]
            size=size,  # type: ignore[arg-type]
            reduce_only=reduce_only,
            time_in_force=time_in_force,
            client_order_id=client_order_id,
        )
        return self.place_orders([order], nonce=nonce, expires_after=expires_after)

    def place_orders(
        self,
        orders: Iterable[OrderEntry],
        grouping: OrderGrouping = OrderGrouping.NA,
        builder: str | None = None,
        *,
        nonce: Nonce | None = None,
        expires_after: int | None = None,
    ) -> JsonValue:
        """Place a batch of orders under one signature."""
        action = OrderAction(orders=tuple(orders), grouping=grouping, builder=builder)
        if not action.orders:
            raise ValidationError("At least one order is required")
        return self.execute_action(action, nonce, expires_after)

    def cancel_order(
        self,
        asset: AssetIndex,
        order_id: OrderId,
        *,
        nonce: Nonce | None = None,
        expires_after: int | None = None,
    ) -> JsonValue:
        """Cancel one resting order by exchange order id."""
        return self.cancel_orders(
            [CancelEntry(asset=asset, order_id=order_id)],
            nonce=nonce,
            expires_after=expires_after,
        )

    def cancel_orders(
        self,
        cancels: Iterable[CancelEntry],
        *,
        nonce: Nonce | None = None,
        expires_after: int | None = None,
    ) -> JsonValue:
        """Cancel a batch of orders under one signature."""
        action = CancelAction(cancels=tuple(cancels))
        if not action.cancels:
            raise ValidationError("At least one cancel is required")
        return self.execute_action(action, nonce, expires_after)

    # ------------------------------------------------------------------------
    # Market metadata
    # ------------------------------------------------------------------------

    def get_meta(self) -> JsonObject:
        """Fetch perpetuals metadata (the asset universe) from ``/info``."""
        response = self._http_executor.post_json(INFO_PATH, {"type": "meta"})
        raise_response_errors(response)
        meta = deserialize_response(response.body, INFO_PATH)
        if not isinstance(meta, dict) or not isinstance(meta.get("universe"), list):
            raise DeserializationError(f"Unexpected meta response: {meta!r}")
        return meta

    def get_asset_index(self, symbol: str) -> AssetIndex:
        """Map a symbol such as ``"BTC"`` to its asset index.

        The universe is fetched once and cached on the client.

        Raises:
            ValidationError: If the symbol is not listed

        """
        if self._asset_indices is None:
            self._asset_indices = _asset_indices(self.get_meta())
        try:
            return self._asset_indices[symbol]
        except KeyError:
            raise ValidationError(f"Unknown symbol {symbol!r}") from None


def _asset_indices(meta: JsonObject) -> dict[str, AssetIndex]:
    universe: Any = meta["universe"]
    try:
        return {entry["name"]: index for index, entry in enumerate(universe)}
    except (TypeError, KeyError) as e:
        raise DeserializationError(f"Malformed universe entry in {meta!r}") from e
