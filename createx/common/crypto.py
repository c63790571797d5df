"""
Hashing utilities for address derivation.

- keccak256 hashing
- 32-byte word packing used by salt guards and event topics
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak_mod


def keccak256(data: bytes) -> bytes:
    """Compute Keccak-256 hash (NOT SHA3-256)."""
    h = _keccak_mod.new(digest_bits=256)
    h.update(data)
    return h.digest()


def address_to_word(address: bytes) -> bytes:
    """Left-pad a 20-byte address to a 32-byte word."""
    if len(address) != 20:
        raise ValueError(f"Address must be 20 bytes, got {len(address)}")
    return address.rjust(32, b"\x00")


def uint_to_word(value: int) -> bytes:
    """Encode an unsigned integer as a 32-byte big-endian word."""
    if value < 0:
        raise ValueError("Cannot encode negative integer as uint256")
    return value.to_bytes(32, "big")
