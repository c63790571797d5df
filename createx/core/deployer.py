"""
Deployer: executes one creation strategy as an atomic unit.

Every public method runs

    Preconditions -> Execute -> Verify -> Success | Revert

inside a single ledger snapshot. Any failure rolls the snapshot back
(including a CREATE3 relay that was already deployed) and re-raises, so a
caller never observes half-applied state or a zero address.

Salts handed to the Deployer are already processed by the salt guard.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from createx.common.errors import (
    ContractCreationFailed,
    InsufficientBalance,
    InvalidImplementation,
    InvalidNonce,
    ProxyCreationFailed,
)
from createx.common.types import ADDRESS_SIZE, MAX_NONCE, ZERO_ADDRESS, require_address, require_salt
from createx.core.bytecode import build_clone_init_code, relay_init_code
from createx.core.derive import compute_create3_address
from createx.core.events import ContractCreation, Create3ProxyCreation, FactoryEvent
from createx.ledger.base import Ledger

logger = logging.getLogger(__name__)


class Deployer:
    def __init__(self, ledger: Ledger, factory_address: bytes) -> None:
        self.ledger = ledger
        self.factory_address = require_address(factory_address, "Factory address")

    # -- Strategies --

    def create(self, init_code: bytes, value: int = 0, caller: bytes = ZERO_ADDRESS) -> bytes:
        with self._transaction("CREATE"):
            self._check_preconditions(value)
            instance = self.ledger.create(self.factory_address, init_code, value)
            self._verify(instance)
            self._emit(ContractCreation(instance, caller))
        return instance

    def create2(
        self,
        init_code: bytes,
        salt: bytes,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        require_salt(salt)
        with self._transaction("CREATE2"):
            self._check_preconditions(value)
            instance = self.ledger.create(self.factory_address, init_code, value, salt)
            self._verify(instance)
            self._emit(ContractCreation(instance, caller, salt))
        return instance

    def create3(
        self,
        init_code: bytes,
        salt: bytes,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        """Two-phase creation whose address ignores `init_code`.

        Phase 1 CREATE2s the relay at `salt`. Phase 2 calls the relay with
        `init_code` as calldata; the relay CREATEs it at its own nonce 1.
        """
        require_salt(salt)
        with self._transaction("CREATE3"):
            self._check_preconditions(value)

            proxy = self.ledger.create(self.factory_address, relay_init_code(), 0, salt)
            if proxy == ZERO_ADDRESS:
                logger.debug("CREATE3 relay already taken for salt 0x%s", salt.hex())
                raise ProxyCreationFailed(salt)
            logger.debug("CREATE3 relay deployed at 0x%s", proxy.hex())
            self._emit(Create3ProxyCreation(proxy, salt))

            instance = compute_create3_address(self.factory_address, salt)
            success, _ = self.ledger.call(self.factory_address, proxy, init_code, value)
            if not success:
                raise ContractCreationFailed(instance, "relay call failed")
            self._verify(instance)
            self._emit(ContractCreation(instance, caller, salt))
        return instance

    def clone(self, implementation: bytes, value: int = 0, caller: bytes = ZERO_ADDRESS) -> bytes:
        with self._transaction("CLONE"):
            self._check_preconditions(value)
            init_code = self._clone_init_code(implementation)
            instance = self.ledger.create(self.factory_address, init_code, value)
            self._verify(instance)
            self._emit(ContractCreation(instance, caller))
        return instance

    def clone_deterministic(
        self,
        implementation: bytes,
        salt: bytes,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        require_salt(salt)
        with self._transaction("CLONE_DETERMINISTIC"):
            self._check_preconditions(value)
            init_code = self._clone_init_code(implementation)
            instance = self.ledger.create(self.factory_address, init_code, value, salt)
            self._verify(instance)
            self._emit(ContractCreation(instance, caller, salt))
        return instance

    # -- Phases --

    @contextmanager
    def _transaction(self, label: str) -> Iterator[None]:
        snap = self.ledger.snapshot()
        try:
            yield
        except Exception as e:
            self.ledger.rollback(snap)
            logger.debug("%s reverted: %s", label, e)
            raise
        self.ledger.commit(snap)

    def _check_preconditions(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Value must be non-negative, got {value}")
        balance = self.ledger.get_balance(self.factory_address)
        if balance < value:
            raise InsufficientBalance(balance, value)
        # EIP-2681: every creation advances the factory nonce
        nonce = self.ledger.get_nonce(self.factory_address)
        if nonce >= MAX_NONCE:
            raise InvalidNonce(nonce)

    def _clone_init_code(self, implementation: bytes) -> bytes:
        if (
            len(implementation) != ADDRESS_SIZE
            or implementation == ZERO_ADDRESS
            or self.ledger.get_code_size(implementation) == 0
        ):
            raise InvalidImplementation(bytes(implementation))
        return build_clone_init_code(implementation)

    def _verify(self, instance: bytes) -> None:
        if instance == ZERO_ADDRESS:
            raise ContractCreationFailed(instance, "creation returned the zero address")
        if self.ledger.get_code_size(instance) == 0:
            raise ContractCreationFailed(instance, "no code at new address")

    def _emit(self, event: FactoryEvent) -> None:
        if isinstance(event, ContractCreation):
            logger.info("Created contract 0x%s for 0x%s", event.new_contract.hex(), event.deployer.hex())
        log = event.to_log(self.factory_address)
        self.ledger.add_log(log.address, log.topics, log.data)
