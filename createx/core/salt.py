"""
Salt guards.

A packed 32-byte salt carries its own access policy:

    | prefix (20) | identifier (10) | guard (1) | mode (1) |
      bytes 0-19    bytes 20-29       byte 30     byte 31

mode RAW      - the salt is used as-is, guard byte included; anyone can
                target any address.
mode STRICT   - the prefix must be the zero address or the caller,
                then the guard transform applies.
mode GUARDED  - no prefix check; the guard transform applies.

The guard transform binds the salt to the caller and/or the chain so nobody
else (or no other chain) can claim the same address:

    NONE              salt
    CALLER            keccak256(caller ++ salt)
    CHAIN             keccak256(chain_id ++ salt)
    CALLER_AND_CHAIN  keccak256(caller ++ chain_id ++ salt)

Each of caller and chain_id is hashed as a full 32-byte word.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from createx.common.crypto import address_to_word, keccak256, uint_to_word
from createx.common.errors import InvalidSalt
from createx.common.types import ZERO_ADDRESS, Guard, Mode, require_address, require_salt

SALT_PREFIX_LEN = 20
SALT_IDENTIFIER_OFFSET = 20
SALT_IDENTIFIER_LEN = 10
SALT_GUARD_OFFSET = 30
SALT_MODE_OFFSET = 31


@dataclass(frozen=True)
class SaltParams:
    prefix: bytes
    identifier: bytes
    guard: Optional[Guard]  # None only for a RAW salt with an unknown guard byte
    mode: Mode

    @property
    def has_zero_prefix(self) -> bool:
        return self.prefix == ZERO_ADDRESS


def decode_salt_mode(salt: bytes) -> Mode:
    require_salt(salt)
    try:
        return Mode(salt[SALT_MODE_OFFSET])
    except ValueError:
        raise InvalidSalt(salt, reason=f"unknown mode byte 0x{salt[SALT_MODE_OFFSET]:02x}") from None


def decode_salt(salt: bytes) -> SaltParams:
    """Split a packed salt into its fields.

    Raises InvalidSalt if the mode byte is not a known value, or if the
    guard byte is not a known value and the mode applies the guard. RAW
    never reads its guard byte, so any value decodes there.
    """
    mode = decode_salt_mode(salt)
    try:
        guard = Guard(salt[SALT_GUARD_OFFSET])
    except ValueError:
        if mode != Mode.RAW:
            raise InvalidSalt(
                salt, reason=f"unknown guard byte 0x{salt[SALT_GUARD_OFFSET]:02x}"
            ) from None
        guard = None
    return SaltParams(
        prefix=salt[:SALT_PREFIX_LEN],
        identifier=salt[SALT_IDENTIFIER_OFFSET:SALT_GUARD_OFFSET],
        guard=guard,
        mode=mode,
    )


def encode_salt(
    prefix: bytes = ZERO_ADDRESS,
    identifier: bytes = b"",
    guard: Guard = Guard.NONE,
    mode: Mode = Mode.RAW,
) -> bytes:
    """Pack salt fields; a short identifier is left-padded with zeros."""
    require_address(prefix, "Salt prefix")
    if len(identifier) > SALT_IDENTIFIER_LEN:
        raise ValueError(
            f"Salt identifier must be at most {SALT_IDENTIFIER_LEN} bytes, got {len(identifier)}"
        )
    salt = bytearray(32)
    salt[:SALT_PREFIX_LEN] = prefix
    salt[SALT_IDENTIFIER_OFFSET:SALT_GUARD_OFFSET] = identifier.rjust(SALT_IDENTIFIER_LEN, b"\x00")
    salt[SALT_GUARD_OFFSET] = Guard(guard)
    salt[SALT_MODE_OFFSET] = Mode(mode)
    return bytes(salt)


def apply_guard(guard: Guard, salt: bytes, caller: bytes, chain_id: int) -> bytes:
    if guard == Guard.NONE:
        return salt
    if guard == Guard.CALLER:
        return keccak256(address_to_word(caller) + salt)
    if guard == Guard.CHAIN:
        return keccak256(uint_to_word(chain_id) + salt)
    if guard == Guard.CALLER_AND_CHAIN:
        return keccak256(address_to_word(caller) + uint_to_word(chain_id) + salt)
    raise InvalidSalt(salt, caller, reason=f"unknown guard {guard!r}")


def process_salt(salt: bytes, caller: bytes, chain_id: int) -> bytes:
    """Turn a raw packed salt into the salt handed to CREATE2/CREATE3.

    Pure: the result depends only on the arguments.
    """
    require_address(caller, "Caller")
    if decode_salt_mode(salt) == Mode.RAW:
        return bytes(salt)

    params = decode_salt(salt)
    if params.mode == Mode.STRICT and not (params.has_zero_prefix or params.prefix == caller):
        raise InvalidSalt(
            salt, caller,
            reason=f"prefix 0x{params.prefix.hex()} is neither zero nor caller 0x{caller.hex()}",
        )

    return apply_guard(params.guard, bytes(salt), caller, chain_id)


class SaltGuard:
    """process_salt bound to one chain."""

    def __init__(self, chain_id: int) -> None:
        self.chain_id = chain_id

    def process(self, salt: bytes, caller: bytes) -> bytes:
        return process_salt(salt, caller, self.chain_id)

    def __repr__(self) -> str:
        return f"SaltGuard(chain_id={self.chain_id})"
