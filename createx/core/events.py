"""
Creation events.

Emitted as ledger logs from the factory address, so they are rolled back
together with the deployment that produced them. Every field is indexed;
topic order is fixed as (instance, deployer[, salt]).

    ContractCreation(address indexed newContract, address indexed deployer)
    ContractCreation(address indexed newContract, address indexed deployer, bytes32 indexed salt)
    Create3ProxyContractCreation(address indexed proxy, bytes32 indexed salt)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from createx.common.crypto import address_to_word, keccak256
from createx.common.types import Log

CONTRACT_CREATION_TOPIC = keccak256(b"ContractCreation(address,address)")
SALTED_CONTRACT_CREATION_TOPIC = keccak256(b"ContractCreation(address,address,bytes32)")
CREATE3_PROXY_CREATION_TOPIC = keccak256(b"Create3ProxyContractCreation(address,bytes32)")


@dataclass(frozen=True)
class ContractCreation:
    new_contract: bytes
    deployer: bytes
    salt: Optional[bytes] = None

    def to_log(self, emitter: bytes) -> Log:
        topics = [address_to_word(self.new_contract), address_to_word(self.deployer)]
        if self.salt is None:
            return Log(address=emitter, topics=[CONTRACT_CREATION_TOPIC] + topics)
        return Log(address=emitter, topics=[SALTED_CONTRACT_CREATION_TOPIC] + topics + [self.salt])


@dataclass(frozen=True)
class Create3ProxyCreation:
    proxy: bytes
    salt: bytes

    def to_log(self, emitter: bytes) -> Log:
        return Log(
            address=emitter,
            topics=[CREATE3_PROXY_CREATION_TOPIC, address_to_word(self.proxy), self.salt],
        )


FactoryEvent = Union[ContractCreation, Create3ProxyCreation]


def decode_event(log: Log) -> Optional[FactoryEvent]:
    """Inverse of to_log(); None for logs that are not factory events."""
    if not log.topics:
        return None
    sig, args = log.topics[0], log.topics[1:]
    if sig == CONTRACT_CREATION_TOPIC and len(args) == 2:
        return ContractCreation(new_contract=args[0][12:], deployer=args[1][12:])
    if sig == SALTED_CONTRACT_CREATION_TOPIC and len(args) == 3:
        return ContractCreation(new_contract=args[0][12:], deployer=args[1][12:], salt=args[2])
    if sig == CREATE3_PROXY_CREATION_TOPIC and len(args) == 2:
        return Create3ProxyCreation(proxy=args[0][12:], salt=args[1])
    return None
