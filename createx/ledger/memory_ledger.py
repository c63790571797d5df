"""
In-memory ledger backed by the factory interpreter.

Keeps accounts in plain dicts, runs init code and runtime code through
createx.vm, and supports nested snapshots so a whole deployment can be
rolled back as one unit.
"""

from __future__ import annotations

import logging
from typing import Optional

from createx.common.crypto import keccak256
from createx.common.types import MAX_NONCE, ZERO_ADDRESS, Log
from createx.core.derive import compute_create2_address, compute_create_address
from createx.ledger.base import Ledger
from createx.vm.call_frame import MAX_CALL_DEPTH, CallFrame
from createx.vm.interpreter import run_bytecode

logger = logging.getLogger(__name__)

MAX_CODE_SIZE = 24576  # EIP-170
EOF_PREFIX = 0xEF      # EIP-3541


class InMemoryLedger(Ledger):
    def __init__(self, chain_id: int = 1) -> None:
        self.chain_id = chain_id

        self._balances: dict[bytes, int] = {}
        self._nonces: dict[bytes, int] = {}
        self._code: dict[bytes, bytes] = {}
        self._storage: dict[tuple[bytes, int], int] = {}

        self.logs: list[Log] = []

        self._snapshots: list[dict] = []

    @classmethod
    def from_state(cls, state: dict, chain_id: int = 1) -> InMemoryLedger:
        """Build a ledger from a genesis-style mapping.

        `state` maps 20-byte addresses to dicts with optional "balance",
        "nonce", "code" and "storage" entries.
        """
        ledger = cls(chain_id=chain_id)
        for address, account in state.items():
            if "balance" in account:
                ledger.set_balance(address, account["balance"])
            if "nonce" in account:
                ledger.set_nonce(address, account["nonce"])
            if account.get("code"):
                ledger.set_code(address, account["code"])
            for slot, value in account.get("storage", {}).items():
                ledger.set_storage(address, slot, value)
        return ledger

    # -- State accessors --

    def get_balance(self, address: bytes) -> int:
        return self._balances.get(address, 0)

    def set_balance(self, address: bytes, balance: int) -> None:
        self._balances[address] = balance

    def add_balance(self, address: bytes, amount: int) -> None:
        self.set_balance(address, self.get_balance(address) + amount)

    def sub_balance(self, address: bytes, amount: int) -> None:
        self.set_balance(address, self.get_balance(address) - amount)

    def get_nonce(self, address: bytes) -> int:
        return self._nonces.get(address, 0)

    def set_nonce(self, address: bytes, nonce: int) -> None:
        self._nonces[address] = nonce

    def increment_nonce(self, address: bytes) -> None:
        self._nonces[address] = self.get_nonce(address) + 1

    def get_code(self, address: bytes) -> bytes:
        return self._code.get(address, b"")

    def set_code(self, address: bytes, code: bytes) -> None:
        self._code[address] = code

    def get_storage(self, address: bytes, key: int) -> int:
        return self._storage.get((address, key), 0)

    def set_storage(self, address: bytes, key: int, value: int) -> None:
        self._storage[(address, key)] = value

    def account_exists(self, address: bytes) -> bool:
        return (
            address in self._balances
            or address in self._nonces
            or address in self._code
        )

    def add_log(self, address: bytes, topics: list[bytes], data: bytes) -> None:
        self.logs.append(Log(address=address, topics=list(topics), data=data))

    # -- Snapshots --

    def snapshot(self) -> int:
        self._snapshots.append({
            "balances": dict(self._balances),
            "nonces": dict(self._nonces),
            "code": dict(self._code),
            "storage": dict(self._storage),
            "logs_count": len(self.logs),
        })
        return len(self._snapshots) - 1

    def rollback(self, snap_id: int) -> None:
        snap = self._snapshots[snap_id]
        self._balances = snap["balances"]
        self._nonces = snap["nonces"]
        self._code = snap["code"]
        self._storage = snap["storage"]
        self.logs = self.logs[: snap["logs_count"]]
        self._snapshots = self._snapshots[:snap_id]

    def commit(self, snap_id: int) -> None:
        self._snapshots = self._snapshots[:snap_id]

    # -- Top-level entry points --

    def create(
        self,
        creator: bytes,
        init_code: bytes,
        value: int = 0,
        salt: Optional[bytes] = None,
    ) -> bytes:
        frame = CallFrame(caller=creator, address=creator, code_address=creator, origin=creator)
        return self.do_create(frame, value, init_code, salt)

    def call(
        self,
        caller: bytes,
        to: bytes,
        data: bytes = b"",
        value: int = 0,
    ) -> tuple[bool, bytes]:
        frame = CallFrame(caller=caller, address=caller, code_address=caller, origin=caller)
        return self.do_call(frame, to, to, value, data, False)

    # -- Frame-level operations (also used by CREATE/CALL opcodes) --

    def do_create(
        self,
        frame: CallFrame,
        value: int,
        init_code: bytes,
        salt: Optional[bytes],
    ) -> bytes:
        """CREATE when salt is None, CREATE2 otherwise.

        Returns the new address or ZERO_ADDRESS on failure. On failure the
        creator's nonce still advances unless the failure happened before
        the nonce was read (depth, balance or nonce limit).
        """
        sender = frame.address

        if frame.depth >= MAX_CALL_DEPTH:
            return ZERO_ADDRESS
        if self.get_balance(sender) < value:
            return ZERO_ADDRESS

        nonce = self.get_nonce(sender)
        if nonce >= MAX_NONCE:  # EIP-2681
            return ZERO_ADDRESS

        if salt is None:
            addr = compute_create_address(sender, nonce)
        else:
            addr = compute_create2_address(sender, keccak256(init_code), salt)

        self.increment_nonce(sender)

        # EIP-684: never create over an account with code or a nonce
        if self.get_code(addr) or self.get_nonce(addr) != 0:
            logger.debug("Creation collision at 0x%s", addr.hex())
            frame.return_data = b""
            return ZERO_ADDRESS

        snap = self.snapshot()

        if value > 0:
            self.sub_balance(sender, value)
            self.add_balance(addr, value)
        self.set_nonce(addr, 1)

        new_frame = CallFrame(
            caller=sender,
            address=addr,
            code_address=addr,
            origin=frame.origin,
            code=init_code,
            value=value,
            depth=frame.depth + 1,
        )
        success, return_data = run_bytecode(new_frame, self)

        if success and len(return_data) <= MAX_CODE_SIZE and return_data[:1] != bytes([EOF_PREFIX]):
            self.set_code(addr, return_data)
            self.commit(snap)
            frame.return_data = b""
            return addr

        self.rollback(snap)
        frame.return_data = b"" if success else return_data
        return ZERO_ADDRESS

    def do_call(
        self,
        parent: CallFrame,
        to: bytes,
        code_addr: bytes,
        value: int,
        calldata: bytes,
        is_static: bool,
    ) -> tuple[bool, bytes]:
        if parent.depth >= MAX_CALL_DEPTH:
            return False, b""
        if value > 0 and self.get_balance(parent.address) < value:
            return False, b""

        snap = self.snapshot()

        if value > 0:
            self.sub_balance(parent.address, value)
            self.add_balance(to, value)

        code = self.get_code(code_addr)
        if not code:
            self.commit(snap)
            return True, b""

        new_frame = CallFrame(
            caller=parent.address,
            address=to,
            code_address=code_addr,
            origin=parent.origin,
            code=code,
            value=value,
            calldata=calldata,
            depth=parent.depth + 1,
            is_static=is_static,
        )
        success, return_data = run_bytecode(new_frame, self)

        if success:
            self.commit(snap)
        else:
            self.rollback(snap)
        return success, return_data

    def do_delegatecall(
        self,
        parent: CallFrame,
        code_addr: bytes,
        calldata: bytes,
    ) -> tuple[bool, bytes]:
        """Run code_addr's code in the parent's storage, caller and value context."""
        if parent.depth >= MAX_CALL_DEPTH:
            return False, b""

        code = self.get_code(code_addr)
        if not code:
            return True, b""

        snap = self.snapshot()
        new_frame = CallFrame(
            caller=parent.caller,
            address=parent.address,
            code_address=code_addr,
            origin=parent.origin,
            code=code,
            value=parent.value,
            calldata=calldata,
            depth=parent.depth + 1,
            is_static=parent.is_static,
        )
        success, return_data = run_bytecode(new_frame, self)

        if success:
            self.commit(snap)
        else:
            self.rollback(snap)
        return success, return_data
