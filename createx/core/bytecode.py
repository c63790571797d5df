"""
Proxy bytecode templates.

Two fixed-shape programs are assembled here and nowhere else, so the
deployment path and the address-prediction path always hash the same bytes:

CREATE3 relay (16 bytes of init code, no parameter):
    init:    PUSH8 <runtime> RETURNDATASIZE MSTORE PUSH1 8 PUSH1 24 RETURN
    runtime: CALLDATASIZE RETURNDATASIZE RETURNDATASIZE CALLDATACOPY
             CALLDATASIZE RETURNDATASIZE CALLVALUE CREATE
    The runtime copies its calldata to memory and CREATEs it, forwarding
    CALLVALUE. It runs exactly once, so the child always lands at the
    relay's nonce 1.

EIP-1167 minimal proxy (55 bytes of init code):
    | creation prefix (10) | runtime prefix (10) | implementation (20) | runtime suffix (15) |
    The runtime (last 45 bytes) DELEGATECALLs the implementation with the
    full calldata and bubbles up return data or revert data unchanged.

Reference: https://eips.ethereum.org/EIPS/eip-1167
"""

from __future__ import annotations

from typing import Optional

from createx.common.crypto import keccak256
from createx.common.types import ADDRESS_SIZE, require_address


# ---------------------------------------------------------------------------
# CREATE3 relay
# ---------------------------------------------------------------------------

RELAY_INIT_CODE = bytes.fromhex("67363d3d37363d34f03d5260086018f3")
RELAY_TEMPLATE_LEN = 16
RELAY_RUNTIME_OFFSET = 1  # runtime is the PUSH8 immediate
RELAY_RUNTIME_LEN = 8
RELAY_RUNTIME_CODE = RELAY_INIT_CODE[RELAY_RUNTIME_OFFSET : RELAY_RUNTIME_OFFSET + RELAY_RUNTIME_LEN]
RELAY_INIT_CODE_HASH = keccak256(RELAY_INIT_CODE)


def relay_init_code() -> bytes:
    """Init code of the CREATE3 relay."""
    return RELAY_INIT_CODE


# ---------------------------------------------------------------------------
# EIP-1167 minimal proxy
# ---------------------------------------------------------------------------

PROXY_CREATION_PREFIX = bytes.fromhex("3d602d80600a3d3981f3")
PROXY_RUNTIME_PREFIX = bytes.fromhex("363d3d373d3d3d363d73")
PROXY_RUNTIME_SUFFIX = bytes.fromhex("5af43d82803e903d91602b57fd5bf3")

PROXY_CREATION_PREFIX_LEN = len(PROXY_CREATION_PREFIX)     # 10
PROXY_IMPL_OFFSET = len(PROXY_RUNTIME_PREFIX)              # 10, within runtime
PROXY_RUNTIME_SUFFIX_OFFSET = PROXY_IMPL_OFFSET + ADDRESS_SIZE
PROXY_RUNTIME_LEN = PROXY_RUNTIME_SUFFIX_OFFSET + len(PROXY_RUNTIME_SUFFIX)  # 45
PROXY_INIT_CODE_LEN = PROXY_CREATION_PREFIX_LEN + PROXY_RUNTIME_LEN          # 55


def build_clone_runtime_code(implementation: bytes) -> bytes:
    """Runtime code of a minimal proxy delegating to `implementation`."""
    require_address(implementation, "Implementation")
    code = bytearray(PROXY_RUNTIME_LEN)
    code[:PROXY_IMPL_OFFSET] = PROXY_RUNTIME_PREFIX
    code[PROXY_IMPL_OFFSET:PROXY_RUNTIME_SUFFIX_OFFSET] = implementation
    code[PROXY_RUNTIME_SUFFIX_OFFSET:] = PROXY_RUNTIME_SUFFIX
    return bytes(code)


def build_clone_init_code(implementation: bytes) -> bytes:
    """Init code that deploys a minimal proxy for `implementation`."""
    code = bytearray(PROXY_INIT_CODE_LEN)
    code[:PROXY_CREATION_PREFIX_LEN] = PROXY_CREATION_PREFIX
    code[PROXY_CREATION_PREFIX_LEN:] = build_clone_runtime_code(implementation)
    return bytes(code)


def clone_init_code_hash(implementation: bytes) -> bytes:
    return keccak256(build_clone_init_code(implementation))


def extract_clone_implementation(runtime_code: bytes) -> Optional[bytes]:
    """Return the implementation a deployed minimal proxy delegates to.

    Returns None if `runtime_code` is not exactly an EIP-1167 proxy.
    """
    if len(runtime_code) != PROXY_RUNTIME_LEN:
        return None
    if runtime_code[:PROXY_IMPL_OFFSET] != PROXY_RUNTIME_PREFIX:
        return None
    if runtime_code[PROXY_RUNTIME_SUFFIX_OFFSET:] != PROXY_RUNTIME_SUFFIX:
        return None
    return bytes(runtime_code[PROXY_IMPL_OFFSET:PROXY_RUNTIME_SUFFIX_OFFSET])
