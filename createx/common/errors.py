"""
Factory error taxonomy.

Every failure kind a deployment or prediction can hit has its own exception
class. All of them derive from FactoryError so callers can catch the whole
family, and each keeps the offending values as attributes.
"""

from __future__ import annotations

from typing import Optional


class FactoryError(Exception):
    """Base class for deployment and prediction failures."""
    pass


class InsufficientBalance(FactoryError):
    def __init__(self, balance: int, value: int):
        self.balance = balance
        self.value = value
        super().__init__(f"Insufficient balance: have {balance}, need {value}")


class ContractCreationFailed(FactoryError):
    def __init__(self, address: bytes, reason: str = ""):
        self.address = address
        self.reason = reason
        msg = f"Contract creation failed at 0x{address.hex()}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ProxyCreationFailed(FactoryError):
    def __init__(self, salt: bytes):
        self.salt = salt
        super().__init__(f"CREATE3 proxy creation failed for salt 0x{salt.hex()}")


class InvalidImplementation(FactoryError):
    def __init__(self, implementation: bytes):
        self.implementation = implementation
        super().__init__(f"Invalid clone implementation 0x{implementation.hex()}")


class InvalidNonce(FactoryError):
    def __init__(self, nonce: int):
        self.nonce = nonce
        super().__init__(f"Invalid nonce {nonce}: must be in [0, 2**64 - 2]")


class InvalidSalt(FactoryError):
    def __init__(self, salt: bytes, caller: Optional[bytes] = None, reason: str = ""):
        self.salt = salt
        self.caller = caller
        self.reason = reason
        msg = f"Invalid salt 0x{salt.hex()}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidCreationType(FactoryError):
    def __init__(self, creation_type: object):
        self.creation_type = creation_type
        super().__init__(f"Invalid creation type: {creation_type!r}")
