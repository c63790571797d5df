"""Contract address derivation for every creation strategy.

CREATE (nonce-based):
    address = keccak256(rlp([sender, nonce]))[12:]

CREATE2 (EIP-1014):
    address = keccak256(0xff ++ sender ++ salt ++ keccak256(init_code))[12:]

CREATE3:
    proxy   = CREATE2(sender, salt, keccak256(relay_init_code))
    address = CREATE(proxy, nonce=1)

Clone (EIP-1167, deterministic):
    address = CREATE2(sender, salt, keccak256(minimal_proxy(implementation)))

Every function here is pure: the nonce is always passed in, never read from
chain state.

Reference: https://eips.ethereum.org/EIPS/eip-1014
"""

from __future__ import annotations

from createx.common import rlp
from createx.common.crypto import keccak256
from createx.common.errors import InvalidNonce
from createx.common.types import MAX_NONCE, require_address, require_hash, require_salt
from createx.core.bytecode import RELAY_INIT_CODE_HASH, clone_init_code_hash

CREATE2_PREFIX = b"\xff"

# A freshly deployed contract starts at nonce 1 (EIP-161), so the relay's
# one and only CREATE uses nonce 1.
RELAY_CHILD_NONCE = 1


def compute_create_address(deployer: bytes, nonce: int) -> bytes:
    """
    Compute CREATE (nonce-based) contract address.

    The contract address is the last 20 bytes of:
        keccak256(rlp([deployer, nonce]))

    Args:
        deployer: 20-byte deployer address
        nonce: Deployer's nonce at creation time

    Returns:
        20-byte contract address

    Raises:
        InvalidNonce: If nonce is negative or >= 2**64 - 1 (EIP-2681)
        ValueError: If deployer is not 20 bytes

    Example:
        >>> deployer = bytes.fromhex("6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0")
        >>> compute_create_address(deployer, 0).hex()
        'cd234a471b72ba2f1ccf0a70fcaba648a5eecd8d'
    """
    require_address(deployer, "Deployer")
    if nonce < 0 or nonce >= MAX_NONCE:
        raise InvalidNonce(nonce)
    return keccak256(rlp.encode([deployer, nonce]))[12:]


def compute_create2_address(
    deployer: bytes,
    init_code_hash: bytes,
    salt: bytes,
) -> bytes:
    """
    Compute CREATE2 address from a pre-computed init code hash.

    Args:
        deployer: 20-byte deployer address
        init_code_hash: 32-byte keccak256 hash of init_code
        salt: 32-byte salt, exactly as passed to the CREATE2 opcode

    Returns:
        20-byte predicted contract address

    Raises:
        ValueError: If lengths are incorrect

    Note:
        - The salt must be the processed salt. Salt guards hash the raw salt
          before it reaches the opcode, so deriving from a raw guarded salt
          predicts the wrong address.
    """
    require_address(deployer, "Deployer")
    require_hash(init_code_hash, "Init code hash")
    require_salt(salt)
    return keccak256(CREATE2_PREFIX + deployer + salt + init_code_hash)[12:]


def compute_create2_address_for_code(
    deployer: bytes,
    init_code: bytes,
    salt: bytes,
) -> bytes:
    """
    Compute CREATE2 address from the init code itself.

    Example:
        >>> deployer = bytes(20)
        >>> compute_create2_address_for_code(deployer, b"\\x00", bytes(32)).hex()
        '4d1a2e2bb4f88f0250f26ffff098b0b30b26bf38'
    """
    return compute_create2_address(deployer, keccak256(init_code), salt)


def compute_create3_proxy_address(deployer: bytes, salt: bytes) -> bytes:
    """Address of the CREATE3 relay for (deployer, salt)."""
    return compute_create2_address(deployer, RELAY_INIT_CODE_HASH, salt)


def compute_create3_address(deployer: bytes, salt: bytes) -> bytes:
    """
    Compute CREATE3 contract address.

    The result depends only on the deployer and the salt; the init code that
    will eventually be deployed plays no part, so the same (deployer, salt)
    yields the same address on every chain the deployer exists on.

    Args:
        deployer: 20-byte deployer (factory) address
        salt: 32-byte processed salt

    Returns:
        20-byte predicted contract address
    """
    proxy = compute_create3_proxy_address(deployer, salt)
    return compute_create_address(proxy, RELAY_CHILD_NONCE)


def compute_clone_deterministic_address(
    deployer: bytes,
    implementation: bytes,
    salt: bytes,
) -> bytes:
    """Compute the CREATE2 address of an EIP-1167 clone of `implementation`."""
    return compute_create2_address(deployer, clone_init_code_hash(implementation), salt)
