"""Test contract bytecodes.

Minimal hand-assembled contracts, small enough to follow opcode by opcode.
"""


def make_init_code(runtime: bytes, constructor: bytes = b"") -> bytes:
    """Init code that runs `constructor`, then copies `runtime` out of itself and returns it.

    PUSH1 len PUSH1 offset PUSH1 0 CODECOPY PUSH1 len PUSH1 0 RETURN
    """
    n = len(runtime)
    assert n <= 0xFF
    offset = len(constructor) + 12
    assert offset <= 0xFF
    copier = bytes([0x60, n, 0x60, offset, 0x60, 0x00, 0x39, 0x60, n, 0x60, 0x00, 0xF3])
    return constructor + copier + runtime


# Returns calldata[0:32] * 2
# PUSH1 0 CALLDATALOAD PUSH1 2 MUL PUSH1 0 MSTORE PUSH1 32 PUSH1 0 RETURN
DOUBLE_RUNTIME = bytes.fromhex("60003560020260005260206000f3")
DOUBLE_INIT_CODE = make_init_code(DOUBLE_RUNTIME)

# Stores calldata[0:32] at slot 0, then returns slot 0
# PUSH1 0 CALLDATALOAD PUSH1 0 SSTORE PUSH1 0 SLOAD PUSH1 0 MSTORE PUSH1 32 PUSH1 0 RETURN
STORAGE_ECHO_RUNTIME = bytes.fromhex("600035600055600054600052" "60206000f3")
STORAGE_ECHO_INIT_CODE = make_init_code(STORAGE_ECHO_RUNTIME)

# Returns slot 0
# PUSH1 0 SLOAD PUSH1 0 MSTORE PUSH1 32 PUSH1 0 RETURN
READ_SLOT0_RUNTIME = bytes.fromhex("60005460005260206000f3")

# Constructor: CALLER PUSH1 0 SSTORE (records who deployed it)
RECORD_CALLER_CONSTRUCTOR = bytes.fromhex("33600055")
RECORD_CALLER_INIT_CODE = make_init_code(READ_SLOT0_RUNTIME, RECORD_CALLER_CONSTRUCTOR)

# Always reverts with the word 0x2a
# PUSH1 42 PUSH1 0 MSTORE PUSH1 32 PUSH1 0 REVERT
REVERT_RUNTIME = bytes.fromhex("602a60005260206000fd")

# Init code that returns no runtime code: PUSH1 0 PUSH1 0 RETURN
EMPTY_RUNTIME_INIT_CODE = bytes.fromhex("60006000f3")

# Init code that reverts: PUSH1 0 DUP1 REVERT
REVERT_INIT_CODE = bytes.fromhex("600080fd")

# Runtime starting with 0xEF is rejected (EIP-3541)
EOF_INIT_CODE = make_init_code(bytes.fromhex("ef00"))

TEST_CONTRACTS = {
    "double": DOUBLE_INIT_CODE,
    "storage_echo": STORAGE_ECHO_INIT_CODE,
    "record_caller": RECORD_CALLER_INIT_CODE,
    "empty_runtime": EMPTY_RUNTIME_INIT_CODE,
    "revert": REVERT_INIT_CODE,
    "eof": EOF_INIT_CODE,
}
