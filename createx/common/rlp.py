"""
RLP (Recursive Length Prefix) encoding.

Only the encoding half of RLP is needed here: CREATE addresses are derived
from keccak256(rlp([sender, nonce])), so the encoder must follow the
canonical rules exactly:

- a single byte in [0x00, 0x7f] is its own encoding
- integers are big-endian with no leading zeros; 0 is the empty string (0x80)
- strings and lists of up to 55 payload bytes get a one-byte length prefix
"""

from __future__ import annotations

from typing import Union

RLPItem = Union[bytes, int, list["RLPItem"]]

SHORT_STRING_OFFSET = 0x80
LONG_STRING_OFFSET = 0xB7
SHORT_LIST_OFFSET = 0xC0
LONG_LIST_OFFSET = 0xF7
SHORT_PAYLOAD_MAX = 55


def encode(item: RLPItem) -> bytes:
    """Encode bytes, non-negative ints, or (nested) lists of them."""
    if isinstance(item, bool):
        raise TypeError("Refusing to RLP-encode bool; pass an int")
    if isinstance(item, int):
        return _encode_bytes(encode_uint(item))
    if isinstance(item, (bytes, bytearray, memoryview)):
        return _encode_bytes(bytes(item))
    if isinstance(item, (list, tuple)):
        return _encode_list(item)
    raise TypeError(f"Cannot RLP-encode type {type(item).__name__}")


def encode_uint(value: int) -> bytes:
    """Big-endian bytes of `value` with no leading zeros (0 -> b'')."""
    if value < 0:
        raise ValueError("RLP cannot encode negative integers")
    if value == 0:
        return b""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def _encode_bytes(data: bytes) -> bytes:
    if len(data) == 1 and data[0] < SHORT_STRING_OFFSET:
        return data
    return _length_prefix(len(data), SHORT_STRING_OFFSET, LONG_STRING_OFFSET) + data


def _encode_list(items: list | tuple) -> bytes:
    payload = b"".join(encode(item) for item in items)
    return _length_prefix(len(payload), SHORT_LIST_OFFSET, LONG_LIST_OFFSET) + payload


def _length_prefix(length: int, short_offset: int, long_offset: int) -> bytes:
    if length <= SHORT_PAYLOAD_MAX:
        return bytes([short_offset + length])
    len_bytes = encode_uint(length)
    return bytes([long_offset + len(len_bytes)]) + len_bytes
