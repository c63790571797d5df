"""
Fetch-decode-execute loop.

run_bytecode() executes one frame to completion and reports
(success, output). Every halting condition, normal or exceptional, is turned
into that pair here; EvmError never escapes to the ledger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from createx.vm.call_frame import MAX_STEPS, CallFrame
from createx.vm.memory import (
    EvmError,
    InvalidOpcode,
    ReturnData,
    Revert,
    StepLimitExceeded,
    StopExecution,
)
from createx.vm.opcodes import OPCODE_TABLE

if TYPE_CHECKING:
    from createx.ledger.memory_ledger import InMemoryLedger


def run_bytecode(frame: CallFrame, env: InMemoryLedger) -> tuple[bool, bytes]:
    """Execute `frame.code` against `env`.

    Returns (success, return_data). Return data is only meaningful on
    RETURN (success) or REVERT (failure).
    """
    try:
        while frame.pc < len(frame.code):
            opcode = frame.code[frame.pc]
            handler = OPCODE_TABLE.get(opcode)
            if handler is None:
                raise InvalidOpcode(f"Unknown opcode: 0x{opcode:02x}")
            frame.steps += 1
            if frame.steps > MAX_STEPS:
                raise StepLimitExceeded(f"Exceeded {MAX_STEPS} steps")
            handler(frame, env)

        # Fell off the end of code: implicit STOP
        return True, b""

    except StopExecution:
        return True, b""

    except ReturnData as ret:
        return True, ret.data

    except Revert as rev:
        return False, rev.data

    except EvmError:
        return False, b""
