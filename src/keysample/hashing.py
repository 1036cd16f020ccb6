"""Pinned field hashes and the combined record hash.

Every hash here reproduces the JVM value hash existing sampled datasets were
keyed with, so decisions stay identical across pipeline versions.
Python's built-in ``hash()`` is salted per process for strings and must never
be used for sampling keys.
"""
import math
import struct
from typing import Any, Iterable

import numpy as np

from keysample.errors import UnsupportedFieldError

PRIME_NUMBER = 31
NULL_HASH = 0

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

BOOLEAN_TRUE_HASH = 1231
BOOLEAN_FALSE_HASH = 1237

_TUPLE_HASH_START = 17
_CANONICAL_NAN_BITS = 0x7FF8000000000000


def to_int32(value: int) -> int:
    """Truncate an arbitrary int to a signed 32-bit value (two's complement)."""
    return ((value + 2**31) & 0xFFFFFFFF) - 2**31


def java_string_hash(text: str) -> int:
    """Polynomial 31-hash over the UTF-16 code units of ``text``."""
    h = 0
    data = text.encode("utf-16-be", "surrogatepass")
    for (unit,) in struct.iter_unpack(">H", data):
        h = (h * PRIME_NUMBER + unit) & 0xFFFFFFFF
    return to_int32(h)


def long_hash(value: int) -> int:
    """Hash of a 64-bit integer: high word XOR low word."""
    bits = value & 0xFFFFFFFFFFFFFFFF
    return to_int32(bits ^ (bits >> 32))


def int_hash(value: int) -> int:
    if INT32_MIN <= value <= INT32_MAX:
        return value
    if INT64_MIN <= value <= INT64_MAX:
        return long_hash(value)
    raise UnsupportedFieldError(f"integer field {value} does not fit in 64 bits")


def double_hash(value: float) -> int:
    """Hash of an IEEE-754 double, NaN collapsed to the canonical bit pattern."""
    if math.isnan(value):
        bits = _CANONICAL_NAN_BITS
    else:
        (bits,) = struct.unpack(">q", struct.pack(">d", value))
    return long_hash(bits)


def bytes_hash(data: bytes) -> int:
    h = 1
    for b in data:
        # bytes are signed on the JVM side
        h = (h * PRIME_NUMBER + (b - 256 if b > 127 else b)) & 0xFFFFFFFF
    return to_int32(h)


def tuple_hash(fields: Iterable[Any]) -> int:
    """Hash of a nested tuple; null members are skipped."""
    h = _TUPLE_HASH_START
    for field in fields:
        if field is not None:
            h = (h * PRIME_NUMBER + field_hash(field)) & 0xFFFFFFFF
    return to_int32(h)


def map_hash(mapping: dict) -> int:
    total = 0
    for key, value in mapping.items():
        total += field_hash(key) ^ field_hash(value)
    return to_int32(total)


def field_hash(value: Any) -> int:
    """Return the pinned 32-bit hash of a single field value.

    ``None`` hashes to the ``NULL_HASH`` sentinel so records with missing
    fields still get a decision.
    """
    if value is None:
        return NULL_HASH
    # bool is a subclass of int, test it first
    if isinstance(value, (bool, np.bool_)):
        return BOOLEAN_TRUE_HASH if value else BOOLEAN_FALSE_HASH
    if isinstance(value, str):
        return java_string_hash(value)
    if isinstance(value, (int, np.integer)):
        return int_hash(int(value))
    if isinstance(value, (float, np.floating)):
        return double_hash(float(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes_hash(bytes(value))
    if isinstance(value, (tuple, list)):
        return tuple_hash(value)
    if isinstance(value, dict):
        return map_hash(value)
    raise UnsupportedFieldError(
        f"no pinned hash for field of type {type(value).__name__}"
    )


def combined_hash(fields: Iterable[Any]) -> int:
    """Fold field hashes into one int32: ``h = h * 31 + field_hash(f)`` from 0.

    Order matters; an empty record hashes to 0.
    """
    h = 0
    for field in fields:
        h = to_int32(h * PRIME_NUMBER + field_hash(field))
    return h
