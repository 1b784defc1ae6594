"""Type definitions for the Hyperliquid native signer.

This module contains type aliases, enums, and dataclasses describing exchange
actions. Every action renders to a "wire" mapping whose key order is the exact
order the exchange hashes, so the same object always produces the same bytes.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Self, TypeAlias, TypeVar

from hyperliquid_native.errors import ValidationError

# ============================================================================
# TYPE ALIASES
# ============================================================================

Nonce: TypeAlias = int
OrderId: TypeAlias = int
AssetIndex: TypeAlias = int

# JSON type hierarchy
JsonObject: TypeAlias = dict[str, "JsonValue"]
JsonArray: TypeAlias = list["JsonValue"]
JsonValue: TypeAlias = None | bool | int | float | str | JsonObject | JsonArray
Json: TypeAlias = JsonObject

NumericInput: TypeAlias = Decimal | str | float | int

UINT64_MAX = 2**64 - 1


# ============================================================================
# NUMERIC CONVERSION UTILITIES
# ============================================================================

DECIMAL_PATTERN = re.compile(r"^\d+(\.\d+)?$")


def canonical_decimal_string(n: NumericInput) -> str:
    """Convert a numeric input to the exchange's canonical decimal string.

    The result has no exponent, no trailing fractional zeros and no trailing
    decimal point, e.g. ``"30000.0" -> "30000"`` and ``"0.10" -> "0.1"``.
    Conversion is exact: floats go through their shortest ``str()`` form and
    never through binary arithmetic.

    Raises:
        ValidationError: If the input is negative, non-finite or malformed.

    """
    if isinstance(n, bool):
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")
    if isinstance(n, str):
        if not DECIMAL_PATTERN.match(n):
            raise ValidationError(f"Invalid numeric input {n}")
        value = Decimal(n)
    elif isinstance(n, (int, float)):
        try:
            value = Decimal(str(n))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid numeric input {n}") from e
    elif isinstance(n, Decimal):
        value = n
    else:
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")

    if not value.is_finite() or value < 0:
        raise ValidationError(f"Invalid numeric input {n}")

    if value == 0:
        return "0"
    # format(..., "f") is exact; normalize() would round to the context precision
    rendered = format(value, "f")
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return rendered


def _validate_asset(asset: int) -> None:
    if isinstance(asset, bool) or not isinstance(asset, int) or asset < 0:
        raise ValidationError(f"Invalid {asset=}, expected a non-negative integer")


# ============================================================================
# CORE ENUMS
# ============================================================================


class TimeInForce(Enum):
    """Limit order time in force."""

    Ioc = "Ioc"  # immediate or cancel
    Gtc = "Gtc"  # good till cancel
    Alo = "Alo"  # add liquidity only


class OrderGrouping(Enum):
    """Order batch grouping."""

    NA = "na"
    NORMAL_TPSL = "normalTpsl"
    POSITION_TPSL = "positionTpsl"


E = TypeVar("E", bound=Enum)


def _as_enum(enum_type: type[E], value: E | str) -> E:
    try:
        return enum_type(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {enum_type.__name__} {value!r}") from e


# ============================================================================
# ACTION ENTRIES
# ============================================================================


@dataclass(frozen=True)
class OrderEntry:
    """A single limit order inside an order batch."""

    asset: AssetIndex
    is_buy: bool
    price: str
    size: str
    reduce_only: bool = False
    time_in_force: TimeInForce = TimeInForce.Ioc
    client_order_id: str | None = None

    def __post_init__(self) -> None:
        _validate_asset(self.asset)
        if not isinstance(self.is_buy, bool):
            raise ValidationError(f"Invalid is_buy={self.is_buy!r}, expected bool")
        if not isinstance(self.reduce_only, bool):
            raise ValidationError(
                f"Invalid reduce_only={self.reduce_only!r}, expected bool"
            )
        if self.client_order_id is not None and not isinstance(
            self.client_order_id, str
        ):
            raise ValidationError(
                f"Invalid client_order_id={self.client_order_id!r}, expected str"
            )
        # frozen dataclass, so normalize through object.__setattr__
        object.__setattr__(self, "price", canonical_decimal_string(self.price))
        object.__setattr__(self, "size", canonical_decimal_string(self.size))
        object.__setattr__(
            self, "time_in_force", _as_enum(TimeInForce, self.time_in_force)
        )

    def to_wire(self) -> JsonObject:
        """Render the entry with the exchange's field order."""
        wire: JsonObject = {
            "a": self.asset,
            "b": self.is_buy,
            "p": self.price,
            "s": self.size,
            "r": self.reduce_only,
            "t": {"limit": {"tif": self.time_in_force.value}},
        }
        if self.client_order_id is not None:
            wire["c"] = self.client_order_id
        return wire


@dataclass(frozen=True)
class CancelEntry:
    """Cancellation of one resting order by exchange order id."""

    asset: AssetIndex
    order_id: OrderId

    def __post_init__(self) -> None:
        _validate_asset(self.asset)
        if (
            isinstance(self.order_id, bool)
            or not isinstance(self.order_id, int)
            or not 0 <= self.order_id <= UINT64_MAX
        ):
            raise ValidationError(f"Invalid order_id={self.order_id!r}")

    def to_wire(self) -> JsonObject:
        return {"a": self.asset, "o": self.order_id}


# ============================================================================
# ACTIONS
# ============================================================================


@dataclass(frozen=True)
class OrderAction:
    """Batch of orders placed atomically under one signature."""

    orders: tuple[OrderEntry, ...]
    grouping: OrderGrouping = OrderGrouping.NA
    builder: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "orders", tuple(self.orders))
        object.__setattr__(self, "grouping", _as_enum(OrderGrouping, self.grouping))
        for order in self.orders:
            if not isinstance(order, OrderEntry):
                raise ValidationError(f"Expected OrderEntry, got {type(order)}")
        if self.builder is not None and not isinstance(self.builder, str):
            raise ValidationError(f"Invalid builder={self.builder!r}, expected str")

    @classmethod
    def of(
        cls,
        *orders: OrderEntry,
        grouping: OrderGrouping = OrderGrouping.NA,
        builder: str | None = None,
    ) -> Self:
        return cls(orders=orders, grouping=grouping, builder=builder)

    def to_wire(self) -> JsonObject:
        wire: JsonObject = {
            "type": "order",
            "orders": [order.to_wire() for order in self.orders],
            "grouping": self.grouping.value,
        }
        if self.builder is not None:
            wire["builder"] = self.builder
        return wire


@dataclass(frozen=True)
class CancelAction:
    """Batch of cancellations signed together."""

    cancels: tuple[CancelEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cancels", tuple(self.cancels))
        for cancel in self.cancels:
            if not isinstance(cancel, CancelEntry):
                raise ValidationError(f"Expected CancelEntry, got {type(cancel)}")

    @classmethod
    def of(cls, *cancels: CancelEntry) -> Self:
        return cls(cancels=cancels)

    def to_wire(self) -> JsonObject:
        return {
            "type": "cancel",
            "cancels": [cancel.to_wire() for cancel in self.cancels],
        }


Action: TypeAlias = OrderAction | CancelAction
ActionInput: TypeAlias = Action | JsonObject


def action_to_wire(action: ActionInput) -> JsonObject:
    """Return the wire mapping for a typed action, or a raw mapping unchanged."""
    if isinstance(action, (OrderAction, CancelAction)):
        return action.to_wire()
    if isinstance(action, dict):
        return action
    raise ValidationError(f"Unsupported action type {type(action)}")


def cancel_entries(pairs: Iterable[tuple[AssetIndex, OrderId]]) -> tuple[CancelEntry, ...]:
    """Build cancel entries from ``(asset, order_id)`` pairs."""
    return tuple(CancelEntry(asset=asset, order_id=oid) for asset, oid in pairs)


# ============================================================================
# SIGNATURE
# ============================================================================


@dataclass(frozen=True)
class Signature:
    """ECDSA signature over the typed-data digest of an action.

    ``r`` and ``s`` are 0x-prefixed 64-digit big-endian hex strings and ``v``
    is the recovery id plus 27.
    """

    r: str
    s: str
    v: int

    def to_json(self) -> JsonObject:
        return {"r": self.r, "s": self.s, "v": self.v}

    def to_vrs(self) -> tuple[int, int, int]:
        """Return ``(recovery_id, r, s)`` as integers."""
        return self.v - 27, int(self.r, 16), int(self.s, 16)
