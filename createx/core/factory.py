"""
Factory facade.

Ties the salt guard, the address deriver and the deployer together behind
the two public surfaces:

- deploy(creation_type, ...) plus one deploy_* method per strategy
- predict(creation_type, ...) plus one compute_* method per strategy

Raw salts go through the salt guard first; deploy and predict therefore
agree on the processed salt for the same (salt, caller).
"""

from __future__ import annotations

import logging
from typing import Optional

from createx.common.config import FactoryConfig
from createx.common.errors import InvalidCreationType
from createx.common.types import (
    ADDRESS_SIZE,
    HASH_SIZE,
    ZERO_ADDRESS,
    ZERO_HASH,
    CreationType,
    require_address,
)
from createx.core import derive
from createx.core.deployer import Deployer
from createx.core.salt import SaltGuard
from createx.ledger.base import Ledger

logger = logging.getLogger(__name__)


def parse_creation_type(creation_type: object) -> CreationType:
    if isinstance(creation_type, bool):
        raise InvalidCreationType(creation_type)
    try:
        return CreationType(creation_type)
    except (ValueError, TypeError):
        raise InvalidCreationType(creation_type) from None


class CreateXFactory:
    def __init__(self, ledger: Ledger, config: Optional[FactoryConfig] = None) -> None:
        self.ledger = ledger
        self.config = config or FactoryConfig(chain_id=ledger.chain_id)
        if self.config.chain_id != ledger.chain_id:
            logger.warning(
                "Config chain id %d differs from ledger chain id %d; salts are guarded with %d",
                self.config.chain_id, ledger.chain_id, self.config.chain_id,
            )
        self.address = self.config.factory_address
        self.salt_guard = SaltGuard(self.config.chain_id)
        self.deployer = Deployer(ledger, self.address)

    def process_salt(self, salt: bytes, caller: bytes) -> bytes:
        return self.salt_guard.process(salt, caller)

    # -- Deployment --

    def deploy(
        self,
        creation_type: object,
        init_code: bytes,
        salt: Optional[bytes] = None,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        """Deploy with any strategy.

        For CLONE / CLONE_DETERMINISTIC, `init_code` is the 20-byte
        implementation address. `salt` is ignored for CREATE and CLONE and
        defaults to 32 zero bytes for the salted strategies.
        """
        kind = parse_creation_type(creation_type)
        if kind.is_salted and salt is None:
            salt = ZERO_HASH

        if kind == CreationType.CREATE:
            return self.deploy_create(init_code, value, caller)
        if kind == CreationType.CREATE2:
            return self.deploy_create2(init_code, salt, value, caller)
        if kind == CreationType.CREATE3:
            return self.deploy_create3(init_code, salt, value, caller)
        if kind == CreationType.CLONE:
            return self.deploy_clone(init_code, value, caller)
        return self.deploy_clone_deterministic(init_code, salt, value, caller)

    def deploy_create(self, init_code: bytes, value: int = 0, caller: bytes = ZERO_ADDRESS) -> bytes:
        return self.deployer.create(init_code, value, caller)

    def deploy_create2(
        self,
        init_code: bytes,
        salt: bytes,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        guarded = self.process_salt(salt, caller)
        return self.deployer.create2(init_code, guarded, value, caller)

    def deploy_create3(
        self,
        init_code: bytes,
        salt: bytes,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        guarded = self.process_salt(salt, caller)
        return self.deployer.create3(init_code, guarded, value, caller)

    def deploy_clone(self, implementation: bytes, value: int = 0, caller: bytes = ZERO_ADDRESS) -> bytes:
        return self.deployer.clone(implementation, value, caller)

    def deploy_clone_deterministic(
        self,
        implementation: bytes,
        salt: bytes,
        value: int = 0,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        guarded = self.process_salt(salt, caller)
        return self.deployer.clone_deterministic(implementation, guarded, value, caller)

    # -- Prediction --

    def predict(
        self,
        creation_type: object,
        code_identity: Optional[bytes] = None,
        salt: Optional[bytes] = None,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        """Predict the address the matching deploy() call would produce now.

        `code_identity` is the init code hash for CREATE2, the 20-byte
        implementation (or the clone init code hash) for CLONE_DETERMINISTIC,
        and unused otherwise. CREATE and CLONE read the factory's current
        nonce from the ledger.
        """
        kind = parse_creation_type(creation_type)
        if kind.is_salted and salt is None:
            salt = ZERO_HASH

        if kind in (CreationType.CREATE, CreationType.CLONE):
            return self.compute_create_address()
        if kind == CreationType.CREATE3:
            return self.compute_create3_address(salt, caller)
        if code_identity is None:
            raise ValueError(f"{kind.name} prediction needs a code identity")
        if kind == CreationType.CREATE2:
            return self.compute_create2_address(code_identity, salt, caller)
        if len(code_identity) == ADDRESS_SIZE:
            return self.compute_clone_deterministic_address(code_identity, salt, caller)
        if len(code_identity) == HASH_SIZE:
            return self.compute_create2_address(code_identity, salt, caller)
        raise ValueError(
            f"Clone code identity must be a 20-byte implementation or 32-byte hash, "
            f"got {len(code_identity)} bytes"
        )

    def compute_create_address(self, nonce: Optional[int] = None) -> bytes:
        if nonce is None:
            nonce = self.ledger.get_nonce(self.address)
        return derive.compute_create_address(self.address, nonce)

    def compute_create2_address(
        self,
        init_code_hash: bytes,
        salt: bytes,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        return derive.compute_create2_address(
            self.address, init_code_hash, self.process_salt(salt, caller)
        )

    def compute_create3_address(self, salt: bytes, caller: bytes = ZERO_ADDRESS) -> bytes:
        return derive.compute_create3_address(self.address, self.process_salt(salt, caller))

    def compute_clone_deterministic_address(
        self,
        implementation: bytes,
        salt: bytes,
        caller: bytes = ZERO_ADDRESS,
    ) -> bytes:
        require_address(implementation, "Implementation")
        return derive.compute_clone_deterministic_address(
            self.address, implementation, self.process_salt(salt, caller)
        )
