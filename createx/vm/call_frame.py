"""
EVM Call Frame: one execution context.

Each CALL / CREATE / DELEGATECALL / STATICCALL runs in a fresh frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from createx.common.types import ZERO_ADDRESS
from createx.vm.memory import Memory, Stack

MAX_CALL_DEPTH = 1024

# Nominal gas reported by the GAS opcode. Gas is not metered; the step
# budget below is what bounds execution.
NOMINAL_GAS = 30_000_000
MAX_STEPS = 100_000


@dataclass
class CallFrame:
    caller: bytes = ZERO_ADDRESS
    address: bytes = ZERO_ADDRESS       # storage / balance context
    code_address: bytes = ZERO_ADDRESS  # where `code` came from
    origin: bytes = ZERO_ADDRESS

    code: bytes = b""
    pc: int = 0
    steps: int = 0

    value: int = 0
    calldata: bytes = b""
    depth: int = 0
    is_static: bool = False

    stack: Stack = field(default_factory=Stack)
    memory: Memory = field(default_factory=Memory)

    # Output of the most recent sub-call or failed sub-create
    return_data: bytes = b""

    _valid_jumpdests: Optional[set[int]] = field(default=None, repr=False)

    @property
    def valid_jumpdests(self) -> set[int]:
        if self._valid_jumpdests is None:
            self._valid_jumpdests = compute_valid_jumpdests(self.code)
        return self._valid_jumpdests


def compute_valid_jumpdests(code: bytes) -> set[int]:
    """JUMPDEST positions that are not inside PUSH immediates."""
    valid = set()
    i = 0
    while i < len(code):
        op = code[i]
        if op == 0x5B:
            valid.add(i)
        if 0x60 <= op <= 0x7F:
            i += op - 0x5F
        i += 1
    return valid
