"""
Core factory types: discriminants, log records and byte-size constants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ADDRESS_SIZE = 20
HASH_SIZE = 32
SALT_SIZE = 32

ZERO_ADDRESS = b"\x00" * ADDRESS_SIZE
ZERO_HASH = b"\x00" * HASH_SIZE

# EIP-2681: nonces are capped at 2**64 - 1, which is itself not usable.
MAX_NONCE = 2**64 - 1


# ---------------------------------------------------------------------------
# Discriminants
# ---------------------------------------------------------------------------

class CreationType(IntEnum):
    CREATE = 0
    CREATE2 = 1
    CREATE3 = 2
    CLONE = 3
    CLONE_DETERMINISTIC = 4

    @property
    def is_salted(self) -> bool:
        return self not in (CreationType.CREATE, CreationType.CLONE)


class Mode(IntEnum):
    """How the packed salt is treated before use (salt byte 31)."""
    RAW = 0
    STRICT = 1
    GUARDED = 2


class Guard(IntEnum):
    """What the processed salt is bound to (salt byte 30)."""
    NONE = 0
    CALLER = 1
    CHAIN = 2
    CALLER_AND_CHAIN = 3


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------

@dataclass
class Log:
    address: bytes = field(default_factory=lambda: ZERO_ADDRESS)
    topics: list[bytes] = field(default_factory=list)
    data: bytes = b""


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def require_address(value: bytes, name: str = "address") -> bytes:
    if len(value) != ADDRESS_SIZE:
        raise ValueError(f"{name} must be {ADDRESS_SIZE} bytes, got {len(value)}")
    return bytes(value)


def require_hash(value: bytes, name: str = "hash") -> bytes:
    if len(value) != HASH_SIZE:
        raise ValueError(f"{name} must be {HASH_SIZE} bytes, got {len(value)}")
    return bytes(value)


def require_salt(value: bytes) -> bytes:
    if len(value) != SALT_SIZE:
        raise ValueError(f"Salt must be {SALT_SIZE} bytes, got {len(value)}")
    return bytes(value)
