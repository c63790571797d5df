"""
EVM Stack and Memory, plus the exceptions that end a frame.

Stack: 1024-depth, 256-bit (uint256) values.
Memory: byte-addressable, grows in 32-byte words.
"""

from __future__ import annotations

UINT256_MAX = (1 << 256) - 1
UINT256_CEIL = 1 << 256

MAX_STACK_DEPTH = 1024

# Bounds memory growth; the interpreter does not meter gas, so an
# unbounded MSTORE offset would otherwise allocate without limit.
MAX_MEMORY_SIZE = 1 << 24


class EvmError(Exception):
    """Base class for anything that halts a frame."""
    pass


class StackOverflow(EvmError):
    pass


class StackUnderflow(EvmError):
    pass


class InvalidJumpDest(EvmError):
    pass


class InvalidOpcode(EvmError):
    pass


class WriteProtection(EvmError):
    pass


class StepLimitExceeded(EvmError):
    pass


class MemoryLimitExceeded(EvmError):
    pass


class ReturnData(EvmError):
    """RETURN: normal halt carrying output."""
    def __init__(self, data: bytes = b""):
        self.data = data
        super().__init__()


class Revert(EvmError):
    """REVERT: failed halt carrying output."""
    def __init__(self, data: bytes = b""):
        self.data = data
        super().__init__()


class StopExecution(EvmError):
    """STOP: normal halt without output."""
    pass


class Stack:
    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: list[int] = []

    def push(self, value: int) -> None:
        if len(self._data) >= MAX_STACK_DEPTH:
            raise StackOverflow("Stack overflow (max 1024)")
        self._data.append(value & UINT256_MAX)

    def pop(self) -> int:
        if not self._data:
            raise StackUnderflow("Stack underflow")
        return self._data.pop()

    def pop_many(self, n: int) -> list[int]:
        """Pop n items, top of stack first."""
        if n > len(self._data):
            raise StackUnderflow(f"Stack underflow: need {n}, have {len(self._data)}")
        items = self._data[-n:][::-1]
        del self._data[-n:]
        return items

    def swap(self, depth: int) -> None:
        """SWAPn: exchange top with the item n below it."""
        if depth >= len(self._data):
            raise StackUnderflow(f"Stack underflow: swap({depth})")
        self._data[-1], self._data[-(depth + 1)] = self._data[-(depth + 1)], self._data[-1]

    def dup(self, depth: int) -> None:
        """DUPn: push a copy of the n-th item (1 = top)."""
        if depth > len(self._data):
            raise StackUnderflow(f"Stack underflow: dup({depth})")
        self.push(self._data[-depth])

    def __len__(self) -> int:
        return len(self._data)


class Memory:
    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data = bytearray()

    def _expand(self, offset: int, size: int) -> None:
        if size == 0:
            return
        end = offset + size
        if end > MAX_MEMORY_SIZE:
            raise MemoryLimitExceeded(f"Memory access up to {end} exceeds limit")
        if end > len(self._data):
            new_size = ((end + 31) // 32) * 32
            self._data.extend(bytes(new_size - len(self._data)))

    def load(self, offset: int, size: int) -> bytes:
        if size == 0:
            return b""
        self._expand(offset, size)
        return bytes(self._data[offset : offset + size])

    def load_word(self, offset: int) -> int:
        return int.from_bytes(self.load(offset, 32), "big")

    def store(self, offset: int, data: bytes) -> None:
        if not data:
            return
        self._expand(offset, len(data))
        self._data[offset : offset + len(data)] = data

    def store_word(self, offset: int, value: int) -> None:
        self.store(offset, (value & UINT256_MAX).to_bytes(32, "big"))

    def store_byte(self, offset: int, value: int) -> None:
        self._expand(offset, 1)
        self._data[offset] = value & 0xFF

    @property
    def size(self) -> int:
        return len(self._data)
