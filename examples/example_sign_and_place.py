"""
Sign and Place Orders Example

This example demonstrates local signing with the Hyperliquid native signer:

Offline:
- Build an order action and compute its action hash
- Sign it and recover the signer address from the signature
- Print the exact JSON body that would be sent to /exchange

Online (testnet recommended):
- Resolve an asset index from exchange metadata
- Place a resting limit order
- Cancel it again by order id

Environment Variables Required:
- ENVIRONMENT: mainnet or testnet (defaults to mainnet)
- HYPERLIQUID_PRIVATE_KEY_<ENV>: Your private key for signing
- HYPERLIQUID_API_ENDPOINT_<ENV>: Optional API endpoint override
- HYPERLIQUID_VAULT_ADDRESS_<ENV>: Optional vault address to trade for
"""

from hyperliquid_native import (
    HyperliquidApiClient,
    OrderAction,
    OrderEntry,
    TimeInForce,
    action_hash,
    build_exchange_request,
    recover_l1_action_signer,
)
from hyperliquid_native.helpers import current_nonce, print_data, serialize_request


def example_sign_and_place() -> None:
    """Sign an order offline, then place and cancel it on the configured network."""

    print("=" * 70)
    print("Hyperliquid Native Signing Example")
    print("=" * 70)

    print("\n[Setup] Loading credentials from environment...")
    client = HyperliquidApiClient.from_env()
    print(f"[Setup] Signer:  {client.address}")
    print(f"[Setup] Testnet: {client.is_testnet}")
    print(f"[Setup] Vault:   {client.vault_address}\n")

    # ==================================================================
    # PART 1: OFFLINE SIGNING
    # ==================================================================
    print("=" * 70)
    print("PART 1: OFFLINE SIGNING")
    print("=" * 70)

    asset = client.get_asset_index("BTC")
    action = OrderAction.of(
        OrderEntry(
            asset=asset,
            is_buy=True,
            price="10000",  # far below market so the order rests
            size="0.001",
            time_in_force=TimeInForce.Alo,
        )
    )
    nonce = current_nonce()

    connection_id = action_hash(action, nonce, client.vault_address)
    print(f"\n[1.1] Action hash: 0x{connection_id.hex()}")

    signature = client.sign_action(action, nonce)
    print("[1.2] Signature:")
    print_data(signature)

    recovered = recover_l1_action_signer(
        action,
        nonce,
        signature,
        is_testnet=client.is_testnet,
        vault_address=client.vault_address,
    )
    print(f"[1.3] Recovered signer: {recovered}")

    request = build_exchange_request(action, signature, nonce, client.vault_address)
    print(f"[1.4] Request body: {serialize_request(request).decode()}")

    # ==================================================================
    # PART 2: PLACE AND CANCEL
    # ==================================================================
    print("\n" + "=" * 70)
    print("PART 2: PLACE AND CANCEL")
    print("=" * 70)

    print("\n[2.1] Placing resting order...")
    result = client.place_order(
        asset=asset,
        is_buy=True,
        price="10000",
        size="0.001",
        time_in_force=TimeInForce.Alo,
    )
    print_data(result)

    statuses = result.get("response", {}).get("data", {}).get("statuses", [])
    resting = [s["resting"]["oid"] for s in statuses if "resting" in s]
    for order_id in resting:
        print(f"\n[2.2] Cancelling order {order_id}...")
        print_data(client.cancel_order(asset, order_id))

    print("\n" + "=" * 70)
    print("EXAMPLE COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    example_sign_and_place()
