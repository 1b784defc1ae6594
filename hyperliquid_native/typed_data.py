"""Typed structured data hashing (EIP-712).

Hashes a message under a named domain so a signature over it cannot be
replayed in another context::

    keccak256(0x1901 || hashStruct("EIP712Domain", domain) || hashStruct(primaryType, message))

Types are supplied as a dictionary mapping each struct name to its ordered
fields. Field order is significant and is always the declared order.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, NamedTuple, TypeAlias

from eth_utils import keccak

from hyperliquid_native.errors import (
    EncodingError,
    IntegerRangeError,
    LengthMismatchError,
    MissingTypeError,
    UnsupportedTypeError,
)

log = logging.getLogger(__name__)


class TypedDataField(NamedTuple):
    """One declared field of a struct type."""

    name: str
    type: str


FieldInput: TypeAlias = TypedDataField | Mapping[str, str]
TypeDefinitions: TypeAlias = Mapping[str, Sequence[FieldInput]]

DOMAIN_TYPE_NAME = "EIP712Domain"

# Canonical order of the optional domain fields
DOMAIN_FIELDS: tuple[TypedDataField, ...] = (
    TypedDataField("name", "string"),
    TypedDataField("version", "string"),
    TypedDataField("chainId", "uint256"),
    TypedDataField("verifyingContract", "address"),
    TypedDataField("salt", "bytes32"),
)

ARRAY_PATTERN = re.compile(r"^(.*)\[(\d*)\]$")
ARRAY_SUFFIX_PATTERN = re.compile(r"\[\d*\]")
INTEGER_PATTERN = re.compile(r"^(u?)int(\d*)$")
FIXED_BYTES_PATTERN = re.compile(r"^bytes(\d+)$")
STRUCT_NAME_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9_]*$")

ZERO_WORD = bytes(32)


# ============================================================================
# TYPE DICTIONARY HANDLING
# ============================================================================


def _as_field(field: FieldInput) -> TypedDataField:
    if isinstance(field, TypedDataField):
        return field
    try:
        return TypedDataField(name=field["name"], type=field["type"])
    except (KeyError, TypeError) as e:
        raise EncodingError(f"Malformed field definition {field!r}") from e


def normalize_types(types: TypeDefinitions) -> dict[str, tuple[TypedDataField, ...]]:
    """Return a copy of ``types`` with every field as a TypedDataField."""
    return {name: tuple(_as_field(f) for f in fields) for name, fields in types.items()}


def domain_fields(domain: Mapping[str, Any]) -> tuple[TypedDataField, ...]:
    """Derive the EIP712Domain fields from the keys present in ``domain``."""
    return tuple(f for f in DOMAIN_FIELDS if f.name in domain)


def resolve_type_alias(type_name: str) -> str:
    if type_name == "uint":
        return "uint256"
    if type_name == "int":
        return "int256"
    return type_name


def base_type(type_name: str) -> str:
    """Strip every array suffix, e.g. ``Person[][2]`` -> ``Person``."""
    return ARRAY_SUFFIX_PATTERN.sub("", type_name)


def find_type_dependencies(
    primary_type: str,
    types: TypeDefinitions,
    found: set[str] | None = None,
) -> set[str]:
    """Collect ``primary_type`` and every struct type it references transitively.

    The ``found`` set doubles as the visited set, so self-referencing and
    mutually recursive types terminate.
    """
    if found is None:
        found = set()
    if primary_type in found or primary_type not in types:
        return found

    found.add(primary_type)
    for field in types[primary_type]:
        dependency = base_type(_as_field(field).type)
        if dependency in types:
            find_type_dependencies(dependency, types, found)
    return found


def encode_type(primary_type: str, types: TypeDefinitions) -> str:
    """Render ``primary_type`` followed by its dependencies sorted by name.

    Example: ``Mail(Person from,Person to,string contents)Person(string name,address wallet)``
    """
    if primary_type not in types:
        raise MissingTypeError(primary_type)

    dependencies = find_type_dependencies(primary_type, types) - {primary_type}
    rendered = []
    for type_name in [primary_type, *sorted(dependencies)]:
        fields = ",".join(
            f"{resolve_type_alias(f.type)} {f.name}"
            for f in map(_as_field, types[type_name])
        )
        rendered.append(f"{type_name}({fields})")
    return "".join(rendered)


def type_hash(primary_type: str, types: TypeDefinitions) -> bytes:
    return keccak(encode_type(primary_type, types).encode("utf-8"))


# ============================================================================
# STRUCT AND FIELD ENCODING
# ============================================================================


def hash_struct(
    primary_type: str, data: Mapping[str, Any], types: TypeDefinitions
) -> bytes:
    """Hash one struct value: keccak256(typeHash || encodeField(f) for each field)."""
    fields = types.get(primary_type)
    if fields is None:
        raise MissingTypeError(primary_type)
    if not isinstance(data, Mapping):
        raise EncodingError(
            f"Expected a mapping for struct {primary_type}, got {type(data).__name__}"
        )

    encoded = [type_hash(primary_type, types)]
    for field in map(_as_field, fields):
        encoded.append(encode_field(field.type, data.get(field.name), types))
    return keccak(b"".join(encoded))


def encode_field(type_name: str, value: Any, types: TypeDefinitions) -> bytes:
    """Encode a single field value into exactly 32 bytes.

    Raises:
        UnsupportedTypeError: The type string is neither atomic nor declared.
        MissingTypeError: The type names a struct absent from ``types``.
        LengthMismatchError: A fixed-size array or bytesN value has the wrong length.
        IntegerRangeError: Invalid integer width, or a value outside it.
        EncodingError: The value does not fit the declared type.

    """
    array_match = ARRAY_PATTERN.match(type_name)
    if array_match:
        element_type, length = array_match.groups()
        if not element_type:
            raise UnsupportedTypeError(type_name, f"Invalid array type: '{type_name}'")
        # checked up front so an empty array cannot hide an undeclared type
        _check_declared(base_type(element_type), types)
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise EncodingError(
                f"Expected array for {type_name}. Received: {type(value).__name__}"
            )
        if length and len(value) != int(length):
            raise LengthMismatchError(type_name, int(length), len(value))
        return keccak(b"".join(encode_field(element_type, v, types) for v in value))

    if type_name in types:
        if value is None:
            return ZERO_WORD
        return hash_struct(type_name, value, types)

    if value is None:
        raise EncodingError(f"Missing value for field of type '{type_name}'")

    if type_name == "string":
        if not isinstance(value, str):
            raise EncodingError(f"Expected str for string, got {type(value).__name__}")
        return keccak(value.encode("utf-8"))

    if type_name == "bytes":
        return keccak(to_bytes(value, type_name))

    if type_name == "address":
        address = to_bytes(value, type_name)
        if len(address) != 20:
            raise LengthMismatchError(type_name, 20, len(address))
        return address.rjust(32, b"\x00")

    if type_name == "bool":
        if not isinstance(value, bool):
            raise EncodingError(f"Expected bool, got {type(value).__name__}")
        return ZERO_WORD[:31] + (b"\x01" if value else b"\x00")

    integer_match = INTEGER_PATTERN.match(type_name)
    if integer_match:
        unsigned, bits_text = integer_match.groups()
        return _encode_integer(type_name, value, not unsigned, int(bits_text or 256))

    bytes_match = FIXED_BYTES_PATTERN.match(type_name)
    if bytes_match:
        size = int(bytes_match.group(1))
        if not 1 <= size <= 32:
            raise UnsupportedTypeError(
                type_name, f"bytesN size must be 1-32. Received: {size}"
            )
        data = to_bytes(value, type_name)
        if len(data) != size:
            raise LengthMismatchError(type_name, size, len(data))
        return data.ljust(32, b"\x00")

    if STRUCT_NAME_PATTERN.match(base_type(type_name)):
        raise MissingTypeError(type_name)
    raise UnsupportedTypeError(type_name)


def is_atomic_type(type_name: str) -> bool:
    """True for the built-in field types (string, bytes, address, bool, intN, bytesN)."""
    return (
        type_name in ("string", "bytes", "address", "bool")
        or INTEGER_PATTERN.match(type_name) is not None
        or FIXED_BYTES_PATTERN.match(type_name) is not None
    )


def _check_declared(type_name: str, types: TypeDefinitions) -> None:
    if type_name in types or is_atomic_type(type_name):
        return
    if STRUCT_NAME_PATTERN.match(type_name):
        raise MissingTypeError(type_name)
    raise UnsupportedTypeError(type_name)


def _encode_integer(type_name: str, value: Any, signed: bool, bits: int) -> bytes:
    if bits < 8 or bits > 256 or bits % 8 != 0:
        raise IntegerRangeError(
            f"Invalid {'int' if signed else 'uint'} size: {bits}. "
            "Must be 8-256 in steps of 8"
        )

    number = to_int(value, type_name)
    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2**bits - 1
    if not low <= number <= high:
        raise IntegerRangeError(f"Value {number} out of range for {type_name}")

    # two's complement over the full 256-bit word
    return (number % 2**256).to_bytes(32, "big")


def to_bytes(value: Any, type_name: str) -> bytes:
    """Accept raw bytes or a hex string with or without the 0x prefix."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        text = value[2:] if value[:2] in ("0x", "0X") else value
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise EncodingError(f"Invalid hex for {type_name}: {value!r}") from e
    raise EncodingError(
        f"Expected bytes or hex string for {type_name}, got {type(value).__name__}"
    )


def to_int(value: Any, type_name: str) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"Expected integer for {type_name}, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            if value[:2] in ("0x", "0X"):
                return int(value, 16)
            return int(value, 10)
        except ValueError as e:
            raise EncodingError(f"Invalid integer for {type_name}: {value!r}") from e
    raise EncodingError(
        f"Expected integer for {type_name}, got {type(value).__name__}"
    )


# ============================================================================
# TYPED DATA DIGEST
# ============================================================================


def hash_typed_data(
    domain: Mapping[str, Any],
    types: TypeDefinitions,
    primary_type: str,
    message: Mapping[str, Any],
) -> bytes:
    """Compute the 32-byte digest that is signed for a typed message.

    Args:
        domain: Domain values (name, version, chainId, verifyingContract, salt).
        types: Struct definitions. An ``EIP712Domain`` entry is derived from the
            domain keys when absent.
        primary_type: Name of the message's struct type.
        message: The message values.

    Returns:
        The 32-byte digest.

    """
    all_types = normalize_types(types)
    if DOMAIN_TYPE_NAME not in all_types:
        all_types[DOMAIN_TYPE_NAME] = domain_fields(domain)

    parts = [b"\x19\x01", hash_struct(DOMAIN_TYPE_NAME, domain, all_types)]
    if primary_type != DOMAIN_TYPE_NAME:
        parts.append(hash_struct(primary_type, message, all_types))

    digest = keccak(b"".join(parts))
    log.debug("Typed data digest for %s: 0x%s", primary_type, digest.hex())
    return digest
