"""Deterministic byte encoder for exchange actions.

Implements the MessagePack subset the exchange hashes: nil, bool, int, float64,
str, array and map. Each value uses the shortest standard prefix for its range,
and mappings are written in insertion order, so structurally equal inputs
always produce identical bytes.
"""

import math
import struct
from collections.abc import Mapping, Sequence
from typing import Any

from hyperliquid_native.errors import EncodingError

INT64_MIN = -(2**63)
UINT64_MAX = 2**64 - 1

NIL = b"\xc0"
FALSE = b"\xc2"
TRUE = b"\xc3"
FLOAT64 = 0xCB


def encode(value: Any) -> bytes:
    """Encode a value into MessagePack bytes.

    Args:
        value: None, bool, int, float, str, a list/tuple, or a str-keyed mapping
            (nested arbitrarily). Mappings are encoded in iteration order.

    Returns:
        The encoded bytes.

    Raises:
        EncodingError: If the value (or anything nested in it) has an
            unsupported shape.

    """
    out = bytearray()
    _encode_into(out, value)
    return bytes(out)


def _encode_into(out: bytearray, value: Any) -> None:
    if value is None:
        out += NIL
    elif value is True:
        out += TRUE
    elif value is False:
        out += FALSE
    elif isinstance(value, int):
        out += encode_int(value)
    elif isinstance(value, float):
        out += encode_float(value)
    elif isinstance(value, str):
        out += encode_str(value)
    elif isinstance(value, Mapping):
        _encode_map(out, value)
    elif isinstance(value, Sequence) and not isinstance(
        value, (bytes, bytearray, memoryview)
    ):
        _encode_array(out, value)
    else:
        raise EncodingError(f"Unsupported type: {type(value).__name__}")


def encode_int(value: int) -> bytes:
    """Encode an integer with the shortest fixint/uint/int format."""
    if value >= 0:
        if value < 0x80:
            return struct.pack(">B", value)
        if value < 0x100:
            return struct.pack(">BB", 0xCC, value)
        if value < 0x10000:
            return struct.pack(">BH", 0xCD, value)
        if value < 0x100000000:
            return struct.pack(">BI", 0xCE, value)
        if value <= UINT64_MAX:
            return struct.pack(">BQ", 0xCF, value)
        raise EncodingError(f"Integer {value} exceeds the unsigned 64-bit range")

    if value >= -32:
        return struct.pack(">b", value)
    if value >= -0x80:
        return struct.pack(">Bb", 0xD0, value)
    if value >= -0x8000:
        return struct.pack(">Bh", 0xD1, value)
    if value >= -0x80000000:
        return struct.pack(">Bi", 0xD2, value)
    if value >= INT64_MIN:
        return struct.pack(">Bq", 0xD3, value)
    raise EncodingError(f"Integer {value} exceeds the signed 64-bit range")


def encode_float(value: float) -> bytes:
    """Encode a float; integer-valued floats use the integer family."""
    if math.isfinite(value) and value.is_integer():
        as_int = int(value)
        if INT64_MIN <= as_int <= UINT64_MAX:
            return encode_int(as_int)
    return struct.pack(">Bd", FLOAT64, value)


def encode_str(value: str) -> bytes:
    try:
        data = value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"String is not valid UTF-8: {value!r}") from e

    length = len(data)
    if length < 32:
        header = struct.pack(">B", 0xA0 | length)
    elif length < 0x100:
        header = struct.pack(">BB", 0xD9, length)
    elif length < 0x10000:
        header = struct.pack(">BH", 0xDA, length)
    elif length < 0x100000000:
        header = struct.pack(">BI", 0xDB, length)
    else:
        raise EncodingError(f"String of {length} bytes is too long")
    return header + data


def _container_header(
    length: int, fix_base: int, tag16: int, tag32: int, kind: str
) -> bytes:
    if length < 16:
        return struct.pack(">B", fix_base | length)
    if length < 0x10000:
        return struct.pack(">BH", tag16, length)
    if length < 0x100000000:
        return struct.pack(">BI", tag32, length)
    raise EncodingError(f"{kind} with {length} entries is too long")


def _encode_array(out: bytearray, items: Sequence[Any]) -> None:
    out += _container_header(len(items), 0x90, 0xDC, 0xDD, "Array")
    for item in items:
        _encode_into(out, item)


def _encode_map(out: bytearray, mapping: Mapping[Any, Any]) -> None:
    out += _container_header(len(mapping), 0x80, 0xDE, 0xDF, "Map")
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise EncodingError(
                f"Map keys must be str, got {type(key).__name__} ({key!r})"
            )
        out += encode_str(key)
        _encode_into(out, item)
