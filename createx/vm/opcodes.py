"""
Opcode handlers for the factory interpreter.

The instruction set covers what factory-deployed code needs: constructors
that copy and return runtime code, the CREATE3 relay, EIP-1167 proxies and
ordinary storage/arithmetic/call logic. Block-context, signed-arithmetic and
self-destruct opcodes are not implemented and halt the frame as invalid.

Each handler takes a CallFrame and the executing ledger and advances
frame.pc itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from createx.common.crypto import keccak256
from createx.vm.call_frame import NOMINAL_GAS
from createx.vm.memory import (
    UINT256_CEIL,
    UINT256_MAX,
    EvmError,
    InvalidJumpDest,
    InvalidOpcode,
    ReturnData,
    Revert,
    StopExecution,
    WriteProtection,
)

if TYPE_CHECKING:
    from createx.ledger.memory_ledger import InMemoryLedger
    from createx.vm.call_frame import CallFrame


# fmt: off
class Op:
    STOP            = 0x00
    ADD             = 0x01
    MUL             = 0x02
    SUB             = 0x03
    DIV             = 0x04
    MOD             = 0x06
    EXP             = 0x0A
    LT              = 0x10
    GT              = 0x11
    EQ              = 0x14
    ISZERO          = 0x15
    AND             = 0x16
    OR              = 0x17
    XOR             = 0x18
    NOT             = 0x19
    BYTE            = 0x1A
    SHL             = 0x1B
    SHR             = 0x1C
    KECCAK256       = 0x20
    ADDRESS         = 0x30
    BALANCE         = 0x31
    ORIGIN          = 0x32
    CALLER          = 0x33
    CALLVALUE       = 0x34
    CALLDATALOAD    = 0x35
    CALLDATASIZE    = 0x36
    CALLDATACOPY    = 0x37
    CODESIZE        = 0x38
    CODECOPY        = 0x39
    EXTCODESIZE     = 0x3B
    RETURNDATASIZE  = 0x3D
    RETURNDATACOPY  = 0x3E
    EXTCODEHASH     = 0x3F
    CHAINID         = 0x46
    SELFBALANCE     = 0x47
    POP             = 0x50
    MLOAD           = 0x51
    MSTORE          = 0x52
    MSTORE8         = 0x53
    SLOAD           = 0x54
    SSTORE          = 0x55
    JUMP            = 0x56
    JUMPI           = 0x57
    PC              = 0x58
    MSIZE           = 0x59
    GAS             = 0x5A
    JUMPDEST        = 0x5B
    PUSH0           = 0x5F
    PUSH1           = 0x60
    PUSH20          = 0x73
    PUSH32          = 0x7F
    DUP1            = 0x80
    SWAP1           = 0x90
    LOG0            = 0xA0
    CREATE          = 0xF0
    CALL            = 0xF1
    RETURN          = 0xF3
    DELEGATECALL    = 0xF4
    CREATE2         = 0xF5
    STATICCALL      = 0xFA
    REVERT          = 0xFD
    INVALID         = 0xFE
# fmt: on


Handler = Callable[["CallFrame", "InMemoryLedger"], None]


def _addr(value: int) -> bytes:
    return (value & ((1 << 160) - 1)).to_bytes(20, "big")


def _padded_slice(data: bytes, offset: int, size: int) -> bytes:
    chunk = data[offset : offset + size] if offset < len(data) else b""
    return chunk.ljust(size, b"\x00")


# ---------------------------------------------------------------------------
# Arithmetic, comparison, bitwise
# ---------------------------------------------------------------------------

def _binary(fn: Callable[[int, int], int]) -> Handler:
    def op(frame, env):
        a, b = frame.stack.pop(), frame.stack.pop()
        frame.stack.push(fn(a, b))
        frame.pc += 1
    return op


def _byte(i: int, x: int) -> int:
    return (x >> (8 * (31 - i))) & 0xFF if i < 32 else 0


def op_iszero(frame, env):
    frame.stack.push(1 if frame.stack.pop() == 0 else 0)
    frame.pc += 1


def op_not(frame, env):
    frame.stack.push(UINT256_MAX ^ frame.stack.pop())
    frame.pc += 1


def op_keccak256(frame, env):
    offset, size = frame.stack.pop(), frame.stack.pop()
    frame.stack.push(int.from_bytes(keccak256(frame.memory.load(offset, size)), "big"))
    frame.pc += 1


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

def op_address(frame, env):
    frame.stack.push(int.from_bytes(frame.address, "big"))
    frame.pc += 1


def op_balance(frame, env):
    frame.stack.push(env.get_balance(_addr(frame.stack.pop())))
    frame.pc += 1


def op_origin(frame, env):
    frame.stack.push(int.from_bytes(frame.origin, "big"))
    frame.pc += 1


def op_caller(frame, env):
    frame.stack.push(int.from_bytes(frame.caller, "big"))
    frame.pc += 1


def op_callvalue(frame, env):
    frame.stack.push(frame.value)
    frame.pc += 1


def op_calldataload(frame, env):
    offset = frame.stack.pop()
    frame.stack.push(int.from_bytes(_padded_slice(frame.calldata, offset, 32), "big"))
    frame.pc += 1


def op_calldatasize(frame, env):
    frame.stack.push(len(frame.calldata))
    frame.pc += 1


def op_calldatacopy(frame, env):
    dest, offset, size = frame.stack.pop_many(3)
    frame.memory.store(dest, _padded_slice(frame.calldata, offset, size))
    frame.pc += 1


def op_codesize(frame, env):
    frame.stack.push(len(frame.code))
    frame.pc += 1


def op_codecopy(frame, env):
    dest, offset, size = frame.stack.pop_many(3)
    frame.memory.store(dest, _padded_slice(frame.code, offset, size))
    frame.pc += 1


def op_extcodesize(frame, env):
    frame.stack.push(env.get_code_size(_addr(frame.stack.pop())))
    frame.pc += 1


def op_extcodehash(frame, env):
    addr = _addr(frame.stack.pop())
    if env.account_exists(addr):
        frame.stack.push(int.from_bytes(keccak256(env.get_code(addr)), "big"))
    else:
        frame.stack.push(0)
    frame.pc += 1


def op_returndatasize(frame, env):
    frame.stack.push(len(frame.return_data))
    frame.pc += 1


def op_returndatacopy(frame, env):
    dest, offset, size = frame.stack.pop_many(3)
    if offset + size > len(frame.return_data):
        raise EvmError("RETURNDATACOPY out of bounds")
    frame.memory.store(dest, frame.return_data[offset : offset + size])
    frame.pc += 1


def op_chainid(frame, env):
    frame.stack.push(env.chain_id)
    frame.pc += 1


def op_selfbalance(frame, env):
    frame.stack.push(env.get_balance(frame.address))
    frame.pc += 1


# ---------------------------------------------------------------------------
# Stack, memory, storage, flow
# ---------------------------------------------------------------------------

def op_stop(frame, env):
    raise StopExecution()


def op_pop(frame, env):
    frame.stack.pop()
    frame.pc += 1


def op_mload(frame, env):
    frame.stack.push(frame.memory.load_word(frame.stack.pop()))
    frame.pc += 1


def op_mstore(frame, env):
    offset, value = frame.stack.pop(), frame.stack.pop()
    frame.memory.store_word(offset, value)
    frame.pc += 1


def op_mstore8(frame, env):
    offset, value = frame.stack.pop(), frame.stack.pop()
    frame.memory.store_byte(offset, value)
    frame.pc += 1


def op_sload(frame, env):
    frame.stack.push(env.get_storage(frame.address, frame.stack.pop()))
    frame.pc += 1


def op_sstore(frame, env):
    if frame.is_static:
        raise WriteProtection("SSTORE in static call")
    key, value = frame.stack.pop(), frame.stack.pop()
    env.set_storage(frame.address, key, value)
    frame.pc += 1


def op_jump(frame, env):
    dest = frame.stack.pop()
    if dest not in frame.valid_jumpdests:
        raise InvalidJumpDest(f"Invalid JUMP destination: {dest}")
    frame.pc = dest


def op_jumpi(frame, env):
    dest, cond = frame.stack.pop(), frame.stack.pop()
    if cond == 0:
        frame.pc += 1
        return
    if dest not in frame.valid_jumpdests:
        raise InvalidJumpDest(f"Invalid JUMPI destination: {dest}")
    frame.pc = dest


def op_pc(frame, env):
    frame.stack.push(frame.pc)
    frame.pc += 1


def op_msize(frame, env):
    frame.stack.push(frame.memory.size)
    frame.pc += 1


def op_gas(frame, env):
    frame.stack.push(NOMINAL_GAS)
    frame.pc += 1


def op_jumpdest(frame, env):
    frame.pc += 1


def op_push0(frame, env):
    frame.stack.push(0)
    frame.pc += 1


def _make_push(n: int) -> Handler:
    def op_push(frame, env):
        data = frame.code[frame.pc + 1 : frame.pc + 1 + n]
        frame.stack.push(int.from_bytes(data.ljust(n, b"\x00"), "big"))
        frame.pc += 1 + n
    return op_push


def _make_dup(n: int) -> Handler:
    def op_dup(frame, env):
        frame.stack.dup(n)
        frame.pc += 1
    return op_dup


def _make_swap(n: int) -> Handler:
    def op_swap(frame, env):
        frame.stack.swap(n)
        frame.pc += 1
    return op_swap


def _make_log(topic_count: int) -> Handler:
    def op_log(frame, env):
        if frame.is_static:
            raise WriteProtection(f"LOG{topic_count} in static call")
        offset, size = frame.stack.pop(), frame.stack.pop()
        topics = [frame.stack.pop().to_bytes(32, "big") for _ in range(topic_count)]
        env.add_log(frame.address, topics, frame.memory.load(offset, size))
        frame.pc += 1
    return op_log


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

def op_create(frame, env):
    if frame.is_static:
        raise WriteProtection("CREATE in static call")
    value, offset, size = frame.stack.pop_many(3)
    init_code = frame.memory.load(offset, size)
    created = env.do_create(frame, value, init_code, None)
    frame.stack.push(int.from_bytes(created, "big"))
    frame.pc += 1


def op_create2(frame, env):
    if frame.is_static:
        raise WriteProtection("CREATE2 in static call")
    value, offset, size, salt = frame.stack.pop_many(4)
    init_code = frame.memory.load(offset, size)
    created = env.do_create(frame, value, init_code, salt.to_bytes(32, "big"))
    frame.stack.push(int.from_bytes(created, "big"))
    frame.pc += 1


def _finish_call(frame, success: bool, return_data: bytes, ret_offset: int, ret_size: int) -> None:
    frame.return_data = return_data
    frame.memory.store(ret_offset, return_data[:ret_size])
    frame.stack.push(1 if success else 0)
    frame.pc += 1


def op_call(frame, env):
    _gas, to, value, args_offset, args_size, ret_offset, ret_size = frame.stack.pop_many(7)
    if frame.is_static and value > 0:
        raise WriteProtection("CALL with value in static context")
    calldata = frame.memory.load(args_offset, args_size)
    addr = _addr(to)
    success, return_data = env.do_call(frame, addr, addr, value, calldata, frame.is_static)
    _finish_call(frame, success, return_data, ret_offset, ret_size)


def op_delegatecall(frame, env):
    _gas, to, args_offset, args_size, ret_offset, ret_size = frame.stack.pop_many(6)
    calldata = frame.memory.load(args_offset, args_size)
    success, return_data = env.do_delegatecall(frame, _addr(to), calldata)
    _finish_call(frame, success, return_data, ret_offset, ret_size)


def op_staticcall(frame, env):
    _gas, to, args_offset, args_size, ret_offset, ret_size = frame.stack.pop_many(6)
    calldata = frame.memory.load(args_offset, args_size)
    addr = _addr(to)
    success, return_data = env.do_call(frame, addr, addr, 0, calldata, True)
    _finish_call(frame, success, return_data, ret_offset, ret_size)


def op_return(frame, env):
    offset, size = frame.stack.pop(), frame.stack.pop()
    raise ReturnData(frame.memory.load(offset, size))


def op_revert(frame, env):
    offset, size = frame.stack.pop(), frame.stack.pop()
    raise Revert(frame.memory.load(offset, size))


def op_invalid(frame, env):
    raise InvalidOpcode("INVALID opcode (0xFE)")


# ---------------------------------------------------------------------------
# Opcode table
# ---------------------------------------------------------------------------

OPCODE_TABLE: dict[int, Handler] = {}


def _register() -> None:
    t = OPCODE_TABLE

    t[Op.STOP] = op_stop
    t[Op.ADD] = _binary(lambda a, b: (a + b) % UINT256_CEIL)
    t[Op.MUL] = _binary(lambda a, b: (a * b) % UINT256_CEIL)
    t[Op.SUB] = _binary(lambda a, b: (a - b) % UINT256_CEIL)
    t[Op.DIV] = _binary(lambda a, b: a // b if b else 0)
    t[Op.MOD] = _binary(lambda a, b: a % b if b else 0)
    t[Op.EXP] = _binary(lambda a, b: pow(a, b, UINT256_CEIL))

    t[Op.LT] = _binary(lambda a, b: 1 if a < b else 0)
    t[Op.GT] = _binary(lambda a, b: 1 if a > b else 0)
    t[Op.EQ] = _binary(lambda a, b: 1 if a == b else 0)
    t[Op.ISZERO] = op_iszero
    t[Op.AND] = _binary(lambda a, b: a & b)
    t[Op.OR] = _binary(lambda a, b: a | b)
    t[Op.XOR] = _binary(lambda a, b: a ^ b)
    t[Op.NOT] = op_not
    t[Op.BYTE] = _binary(_byte)
    t[Op.SHL] = _binary(lambda shift, x: (x << shift) & UINT256_MAX if shift < 256 else 0)
    t[Op.SHR] = _binary(lambda shift, x: x >> shift if shift < 256 else 0)

    t[Op.KECCAK256] = op_keccak256

    t[Op.ADDRESS] = op_address
    t[Op.BALANCE] = op_balance
    t[Op.ORIGIN] = op_origin
    t[Op.CALLER] = op_caller
    t[Op.CALLVALUE] = op_callvalue
    t[Op.CALLDATALOAD] = op_calldataload
    t[Op.CALLDATASIZE] = op_calldatasize
    t[Op.CALLDATACOPY] = op_calldatacopy
    t[Op.CODESIZE] = op_codesize
    t[Op.CODECOPY] = op_codecopy
    t[Op.EXTCODESIZE] = op_extcodesize
    t[Op.RETURNDATASIZE] = op_returndatasize
    t[Op.RETURNDATACOPY] = op_returndatacopy
    t[Op.EXTCODEHASH] = op_extcodehash
    t[Op.CHAINID] = op_chainid
    t[Op.SELFBALANCE] = op_selfbalance

    t[Op.POP] = op_pop
    t[Op.MLOAD] = op_mload
    t[Op.MSTORE] = op_mstore
    t[Op.MSTORE8] = op_mstore8
    t[Op.SLOAD] = op_sload
    t[Op.SSTORE] = op_sstore
    t[Op.JUMP] = op_jump
    t[Op.JUMPI] = op_jumpi
    t[Op.PC] = op_pc
    t[Op.MSIZE] = op_msize
    t[Op.GAS] = op_gas
    t[Op.JUMPDEST] = op_jumpdest

    t[Op.PUSH0] = op_push0
    for i in range(1, 33):
        t[Op.PUSH1 + i - 1] = _make_push(i)
    for i in range(1, 17):
        t[Op.DUP1 + i - 1] = _make_dup(i)
    for i in range(1, 17):
        t[Op.SWAP1 + i - 1] = _make_swap(i)
    for i in range(5):
        t[Op.LOG0 + i] = _make_log(i)

    t[Op.CREATE] = op_create
    t[Op.CALL] = op_call
    t[Op.RETURN] = op_return
    t[Op.DELEGATECALL] = op_delegatecall
    t[Op.CREATE2] = op_create2
    t[Op.STATICCALL] = op_staticcall
    t[Op.REVERT] = op_revert
    t[Op.INVALID] = op_invalid


_register()
