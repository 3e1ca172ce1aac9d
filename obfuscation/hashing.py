"""
Deterministic hash primitives used to pick substitute values.

- hash_index / hash_octet: 32-bit FNV-1a, fast and order-sensitive
- hash_hex: SHA-256, for stable random-looking hex tokens

Every function is pure: output depends only on the arguments, never on call
order, so substitutes are reproducible across runs.
"""

from __future__ import annotations

import hashlib

FNV32_OFFSET_BASIS = 0x811C9DC5
FNV32_PRIME = 0x01000193


def fnv1a32(data: bytes) -> int:
    h = FNV32_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV32_PRIME) & 0xFFFFFFFF
    return h


def hash_index(value: str, bound: int) -> int:
    """
    Map value to a stable index in [0, bound). A non-positive bound yields 0.
    """
    if bound <= 0:
        return 0
    return fnv1a32(value.encode("utf-8")) % bound


def hash_octet(value: str, position: int) -> int:
    """
    Stable pseudo-random octet (0-255); differs per position for the same value.
    """
    return fnv1a32(f"{value}:{position}".encode("utf-8")) % 256


def hash_hex(value: str, length: int) -> str:
    """
    SHA-256 hex digest of value truncated to length characters.

    The full 64-character digest is returned when length is non-positive or
    not shorter than the digest.
    """
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()
    if 0 < length < len(digest):
        return digest[:length]
    return digest


def sha256_bytes(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()
