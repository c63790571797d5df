"""Test fixtures for the factory tests."""

from .addresses import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    CHARLIE_ADDRESS,
    FACTORY_ADDRESS,
    ZERO_ADDRESS,
    TEST_ADDRESSES,
)
from .contracts import (
    DOUBLE_INIT_CODE,
    DOUBLE_RUNTIME,
    STORAGE_ECHO_INIT_CODE,
    STORAGE_ECHO_RUNTIME,
    TEST_CONTRACTS,
    make_init_code,
)

__all__ = [
    # Addresses
    "ALICE_ADDRESS",
    "BOB_ADDRESS",
    "CHARLIE_ADDRESS",
    "FACTORY_ADDRESS",
    "ZERO_ADDRESS",
    "TEST_ADDRESSES",
    # Contracts
    "DOUBLE_INIT_CODE",
    "DOUBLE_RUNTIME",
    "STORAGE_ECHO_INIT_CODE",
    "STORAGE_ECHO_RUNTIME",
    "TEST_CONTRACTS",
    "make_init_code",
]
