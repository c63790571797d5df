"""
World-state interface the factory deploys through.

Account nonces, code, balances and the creation primitive belong to the
surrounding chain, not to the factory. The factory only talks to them
through this narrow interface, so derivation and salt logic stay testable
without a live chain. InMemoryLedger is the reference implementation;
subclass Ledger to connect another backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class Ledger(ABC):
    """Interface between the factory and world state."""

    chain_id: int = 1

    # -- Reads --

    @abstractmethod
    def get_nonce(self, address: bytes) -> int:
        ...

    @abstractmethod
    def get_balance(self, address: bytes) -> int:
        ...

    @abstractmethod
    def get_code(self, address: bytes) -> bytes:
        """Runtime code at `address`, or b"" for an account without code."""
        ...

    def get_code_size(self, address: bytes) -> int:
        return len(self.get_code(address))

    # -- Execution --

    @abstractmethod
    def create(
        self,
        creator: bytes,
        init_code: bytes,
        value: int = 0,
        salt: Optional[bytes] = None,
    ) -> bytes:
        """Run init code on behalf of `creator`.

        Uses CREATE when `salt` is None and CREATE2 otherwise. Returns the
        new address, or the zero address if creation failed (init code
        reverted, address collision, insufficient balance, nonce limit).
        Never raises for those conditions.
        """
        ...

    @abstractmethod
    def call(
        self,
        caller: bytes,
        to: bytes,
        data: bytes = b"",
        value: int = 0,
    ) -> tuple[bool, bytes]:
        """Message-call `to` from `caller`. Returns (success, return_data)."""
        ...

    @abstractmethod
    def add_log(self, address: bytes, topics: list[bytes], data: bytes) -> None:
        ...

    # -- Atomicity --

    @abstractmethod
    def snapshot(self) -> int:
        """Open a nested snapshot and return its id."""
        ...

    @abstractmethod
    def rollback(self, snap_id: int) -> None:
        ...

    @abstractmethod
    def commit(self, snap_id: int) -> None:
        ...
