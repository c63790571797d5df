"""Compact EVM interpreter used by the in-memory ledger."""

from createx.vm.call_frame import CallFrame
from createx.vm.interpreter import run_bytecode
from createx.vm.opcodes import Op

__all__ = ["CallFrame", "Op", "run_bytecode"]
