"""
Factory configuration.

Holds the chain the factory is bound to and the factory's own address.
The chain id feeds the Chain / CallerAndChain salt guards; the factory
address is the deployer used in every address derivation.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from eth_utils import is_hex_address, to_canonical_address, to_checksum_address


# Canonical CreateX deployment, identical on every supported chain.
DEFAULT_FACTORY_ADDRESS = to_canonical_address("0xba5Ed099633D3B313e4D5F7bdc1305d3c28ba5Ed")

DEFAULT_CHAIN_ID = 1

ENV_CHAIN_ID = "CREATEX_CHAIN_ID"
ENV_FACTORY_ADDRESS = "CREATEX_FACTORY_ADDRESS"


# ---------------------------------------------------------------------------
# Well-known networks
# ---------------------------------------------------------------------------

NETWORK_CHAIN_IDS: dict[str, int] = {
    "ethereum": 1,
    "sepolia": 11155111,
    "optimism": 10,
    "optimism-sepolia": 11155420,
    "bnb": 56,
    "bnb-testnet": 97,
    "unichain": 130,
    "unichain-sepolia": 1301,
    "polygon": 137,
    "polygon-amoy": 80002,
    "fantom": 250,
    "fantom-testnet": 4002,
    "base": 8453,
    "base-sepolia": 84532,
    "arbitrum": 42161,
    "arbitrum-sepolia": 421614,
    "avalanche": 43114,
    "avalanche-fuji": 43113,
    "linea": 59144,
    "linea-sepolia": 59141,
}


@dataclass
class FactoryConfig:
    chain_id: int = DEFAULT_CHAIN_ID
    network_name: str = "ethereum"
    factory_address: bytes = DEFAULT_FACTORY_ADDRESS
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.chain_id < 0:
            raise ValueError(f"Chain id must be non-negative, got {self.chain_id}")
        if len(self.factory_address) != 20:
            raise ValueError(
                f"Factory address must be 20 bytes, got {len(self.factory_address)}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> FactoryConfig:
        """Build a config from a JSON-style dict.

        Accepts either `chain_id` or a `network` name from NETWORK_CHAIN_IDS;
        an explicit `chain_id` wins when both are given.
        """
        network = data.get("network")
        if network is not None:
            base = config_for_network(network)
        else:
            base = cls()

        chain_id = data.get("chain_id", data.get("chainId"))
        if chain_id is not None:
            base.chain_id = _parse_int(chain_id)
            if network is None:
                base.network_name = _network_for_chain_id(base.chain_id)

        factory = data.get("factory_address", data.get("factoryAddress"))
        if factory is not None:
            base.factory_address = parse_address(factory)

        if "log_level" in data:
            base.log_level = str(data["log_level"]).upper()

        base.__post_init__()
        return base

    def with_env_overrides(self, environ: Optional[dict] = None) -> FactoryConfig:
        env = os.environ if environ is None else environ
        data: dict = {
            "chain_id": self.chain_id,
            "factory_address": self.factory_address,
            "log_level": self.log_level,
        }
        if env.get(ENV_CHAIN_ID):
            data["chain_id"] = env[ENV_CHAIN_ID]
        if env.get(ENV_FACTORY_ADDRESS):
            data["factory_address"] = env[ENV_FACTORY_ADDRESS]
        config = FactoryConfig.from_dict(data)
        if config.chain_id == self.chain_id:
            config.network_name = self.network_name
        return config

    def to_dict(self) -> dict:
        return {
            "chain_id": self.chain_id,
            "network": self.network_name,
            "factory_address": to_checksum_address(self.factory_address),
            "log_level": self.log_level,
        }


def config_for_network(name: str) -> FactoryConfig:
    key = name.lower()
    if key == "mainnet":
        key = "ethereum"
    if key not in NETWORK_CHAIN_IDS:
        raise ValueError(f"Unknown network: {name}")
    return FactoryConfig(chain_id=NETWORK_CHAIN_IDS[key], network_name=key)


def load_config(path: Union[str, Path]) -> FactoryConfig:
    """Load a FactoryConfig from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return FactoryConfig.from_dict(data)


def parse_address(value: Union[str, bytes]) -> bytes:
    """Accept a hex string (checksummed or not) or raw 20 bytes."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(value)}")
        return bytes(value)
    if not is_hex_address(value):
        raise ValueError(f"Not a valid hex address: {value}")
    return to_canonical_address(value)


def _parse_int(value: Union[str, int]) -> int:
    if isinstance(value, int):
        return value
    value = value.strip()
    if value.lower().startswith("0x"):
        return int(value, 16)
    return int(value)


def _network_for_chain_id(chain_id: int) -> str:
    for name, cid in NETWORK_CHAIN_IDS.items():
        if cid == chain_id:
            return name
    return f"chain-{chain_id}"
