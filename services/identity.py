"""Deterministic identifiers for simulated devices and readings."""

from __future__ import annotations

import hashlib

# Widest varint a signed 64-bit integer can need.
MAX_VARINT_LEN = 10

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def encode_varint(seed: int) -> bytes:
    """Zig-zag encode ``seed`` as a varint, zero-padded to ``MAX_VARINT_LEN`` bytes."""

    if not _INT64_MIN <= seed <= _INT64_MAX:
        raise ValueError(f"Seed {seed} does not fit in a signed 64-bit integer.")

    value = (seed << 1) ^ (seed >> 63)
    buffer = bytearray(MAX_VARINT_LEN)
    position = 0
    while value >= 0x80:
        buffer[position] = (value & 0x7F) | 0x80
        value >>= 7
        position += 1
    buffer[position] = value
    return bytes(buffer)


def hash_seed(seed: int) -> str:
    """Return the lowercase SHA-256 hex digest of the encoded seed.

    Equal seeds always produce equal identifiers. Distinct seeds collide only
    if SHA-256 does.
    """

    return hashlib.sha256(encode_varint(seed)).hexdigest()
