"""
createx: deterministic contract factory engine.

Predicts and performs contract deployments through CREATE, CREATE2, CREATE3
and EIP-1167 clones, with salts that can be bound to a caller and/or chain.
"""

from createx.common.config import FactoryConfig
from createx.common.errors import (
    ContractCreationFailed,
    FactoryError,
    InsufficientBalance,
    InvalidCreationType,
    InvalidImplementation,
    InvalidNonce,
    InvalidSalt,
    ProxyCreationFailed,
)
from createx.common.types import CreationType, Guard, Mode
from createx.core.derive import (
    compute_clone_deterministic_address,
    compute_create2_address,
    compute_create3_address,
    compute_create_address,
)
from createx.core.factory import CreateXFactory
from createx.core.salt import SaltGuard, decode_salt, encode_salt, process_salt
from createx.ledger.memory_ledger import InMemoryLedger

__version__ = "0.1.0"

__all__ = [
    "CreateXFactory",
    "FactoryConfig",
    "InMemoryLedger",
    "SaltGuard",
    "CreationType",
    "Mode",
    "Guard",
    "compute_create_address",
    "compute_create2_address",
    "compute_create3_address",
    "compute_clone_deterministic_address",
    "decode_salt",
    "encode_salt",
    "process_salt",
    "FactoryError",
    "InsufficientBalance",
    "ContractCreationFailed",
    "ProxyCreationFailed",
    "InvalidImplementation",
    "InvalidNonce",
    "InvalidSalt",
    "InvalidCreationType",
]
