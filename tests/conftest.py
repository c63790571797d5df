"""Pytest configuration and shared fixtures for all tests."""

import pytest
from eth_utils import to_wei

from createx.common.config import FactoryConfig
from createx.core.factory import CreateXFactory
from createx.ledger.memory_ledger import InMemoryLedger

from tests.fixtures.addresses import (
    ALICE_ADDRESS,
    BOB_ADDRESS,
    CHARLIE_ADDRESS,
    FACTORY_ADDRESS,
    ZERO_ADDRESS,
)
from tests.fixtures.contracts import STORAGE_ECHO_RUNTIME

DEFAULT_CHAIN_ID = 1

# Where the clone tests keep their implementation contract
IMPLEMENTATION_ADDRESS = bytes.fromhex("00" * 19 + "aa")


# =============================================================================
# Addresses
# =============================================================================

@pytest.fixture
def alice_address():
    """Alice's address derived from private key 0x01...01."""
    return ALICE_ADDRESS


@pytest.fixture
def bob_address():
    """Bob's address."""
    return BOB_ADDRESS


@pytest.fixture
def charlie_address():
    """Charlie's address."""
    return CHARLIE_ADDRESS


@pytest.fixture
def factory_address():
    """Canonical factory address."""
    return FACTORY_ADDRESS


@pytest.fixture
def zero_address():
    """Zero address (0x00...00)."""
    return ZERO_ADDRESS


# =============================================================================
# Ledger Fixtures
# =============================================================================

@pytest.fixture
def ledger():
    """Empty in-memory ledger on chain 1."""
    return InMemoryLedger(chain_id=DEFAULT_CHAIN_ID)


@pytest.fixture
def funded_ledger():
    """Ledger where the factory holds 10 ETH and the clone implementation exists."""
    state = {
        FACTORY_ADDRESS: {"balance": to_wei(10, "ether"), "nonce": 1},
        ALICE_ADDRESS: {"balance": to_wei(100, "ether")},
        IMPLEMENTATION_ADDRESS: {"nonce": 1, "code": STORAGE_ECHO_RUNTIME},
    }
    return InMemoryLedger.from_state(state, chain_id=DEFAULT_CHAIN_ID)


@pytest.fixture
def implementation_address():
    """Address of a deployed storage-echo implementation in funded_ledger."""
    return IMPLEMENTATION_ADDRESS


# =============================================================================
# Factory Fixtures
# =============================================================================

@pytest.fixture
def factory(funded_ledger):
    """Factory bound to funded_ledger at the canonical address."""
    return CreateXFactory(funded_ledger)


@pytest.fixture
def factory_on_chain():
    """Factory fixture to create factories on a custom chain."""
    def _factory_on_chain(chain_id, state=None):
        ledger = InMemoryLedger.from_state(state or {}, chain_id=chain_id)
        return CreateXFactory(ledger, FactoryConfig(chain_id=chain_id))
    return _factory_on_chain
