"""
createx command line.

Offline helpers around the factory's address math:
  predict     predicted address for any creation strategy
  salt        decode a packed salt and show the processed salt
  build-salt  pack prefix / identifier / guard / mode into a salt
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from eth_utils import decode_hex, to_checksum_address

from createx.common.config import (
    NETWORK_CHAIN_IDS,
    FactoryConfig,
    config_for_network,
    load_config,
    parse_address,
)
from createx.common.crypto import keccak256
from createx.common.errors import FactoryError
from createx.common.types import ZERO_ADDRESS, CreationType, Guard, Mode, require_salt
from createx.core import derive
from createx.core.bytecode import clone_init_code_hash
from createx.core.salt import SALT_GUARD_OFFSET, decode_salt, encode_salt, process_salt

logger = logging.getLogger("createx")

CREATION_TYPE_NAMES = {
    "create": CreationType.CREATE,
    "create2": CreationType.CREATE2,
    "create3": CreationType.CREATE3,
    "clone": CreationType.CLONE,
    "clone-deterministic": CreationType.CLONE_DETERMINISTIC,
}


def _hex_bytes(value: str) -> bytes:
    try:
        return decode_hex(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid hex: {value}") from e


def _address(value: str) -> bytes:
    try:
        return parse_address(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _enum_arg(enum_cls):
    def parse(value: str):
        try:
            if value.isdigit():
                return enum_cls(int(value))
            return enum_cls[value.upper().replace("-", "_")]
        except (KeyError, ValueError):
            names = ", ".join(m.name.lower() for m in enum_cls)
            raise argparse.ArgumentTypeError(f"Expected one of: {names}") from None
    return parse


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _add_chain_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON config file (chain_id / network / factory_address)",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--network",
        choices=sorted(NETWORK_CHAIN_IDS),
        default=None,
        help="Well-known network name (sets the chain id)",
    )
    group.add_argument(
        "--chain-id",
        type=int,
        default=None,
        help="Chain id used by the Chain / CallerAndChain salt guards",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="createx",
        description="Predict contract addresses and inspect CreateX salts",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    predict = sub.add_parser("predict", help="Predict a deployment address")
    predict.add_argument(
        "--type",
        dest="creation_type",
        choices=sorted(CREATION_TYPE_NAMES),
        required=True,
        help="Creation strategy",
    )
    predict.add_argument(
        "--deployer",
        type=_address,
        default=None,
        help="Deploying (factory) address (default: from config)",
    )
    predict.add_argument("--nonce", type=int, default=None, help="Deployer nonce (create / clone)")
    predict.add_argument("--salt", type=_hex_bytes, default=None, help="32-byte packed salt")
    predict.add_argument(
        "--caller",
        type=_address,
        default=ZERO_ADDRESS,
        help="Account calling the factory (salt guard input)",
    )
    predict.add_argument(
        "--raw-salt",
        action="store_true",
        help="Use --salt as-is instead of running it through the salt guard",
    )
    code = predict.add_mutually_exclusive_group()
    code.add_argument("--init-code", type=_hex_bytes, default=None, help="Init code (create2)")
    code.add_argument("--init-code-hash", type=_hex_bytes, default=None, help="keccak256 of init code")
    code.add_argument("--implementation", type=_address, default=None, help="Clone implementation")
    _add_chain_args(predict)

    salt = sub.add_parser("salt", help="Decode a packed salt")
    salt.add_argument("--salt", type=_hex_bytes, required=True, help="32-byte packed salt")
    salt.add_argument("--caller", type=_address, default=ZERO_ADDRESS, help="Calling account")
    _add_chain_args(salt)

    build = sub.add_parser("build-salt", help="Pack salt fields into a 32-byte salt")
    build.add_argument("--prefix", type=_address, default=ZERO_ADDRESS, help="20-byte prefix")
    build.add_argument("--identifier", type=_hex_bytes, default=b"", help="Up to 10 bytes")
    build.add_argument("--guard", type=_enum_arg(Guard), default=Guard.NONE, help="Guard level")
    build.add_argument("--mode", type=_enum_arg(Mode), default=Mode.RAW, help="Salt mode")

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def resolve_config(args: argparse.Namespace) -> FactoryConfig:
    if getattr(args, "config", None):
        config = load_config(args.config)
        logger.info("Loaded config from %s", args.config)
    else:
        config = FactoryConfig()
    config = config.with_env_overrides()
    if getattr(args, "network", None):
        network = config_for_network(args.network)
        config.chain_id = network.chain_id
        config.network_name = network.network_name
    elif getattr(args, "chain_id", None) is not None:
        config.chain_id = args.chain_id
    return config


def _processed_salt(args: argparse.Namespace, config: FactoryConfig) -> bytes:
    if args.salt is None:
        raise ValueError(f"--salt is required for {args.creation_type}")
    salt = require_salt(args.salt)
    if args.raw_salt:
        return salt
    return process_salt(salt, args.caller, config.chain_id)


def cmd_predict(args: argparse.Namespace) -> dict:
    config = resolve_config(args)
    deployer = args.deployer or config.factory_address
    kind = CREATION_TYPE_NAMES[args.creation_type]
    result: dict = {"type": args.creation_type, "deployer": to_checksum_address(deployer)}

    if kind in (CreationType.CREATE, CreationType.CLONE):
        if args.nonce is None:
            raise ValueError(f"--nonce is required for {args.creation_type}")
        address = derive.compute_create_address(deployer, args.nonce)
        result["nonce"] = args.nonce
    else:
        salt = _processed_salt(args, config)
        result["chain_id"] = config.chain_id
        result["processed_salt"] = "0x" + salt.hex()
        if kind == CreationType.CREATE3:
            address = derive.compute_create3_address(deployer, salt)
            result["proxy"] = to_checksum_address(derive.compute_create3_proxy_address(deployer, salt))
        elif kind == CreationType.CREATE2:
            if args.init_code is not None:
                init_code_hash = keccak256(args.init_code)
            elif args.init_code_hash is not None:
                init_code_hash = args.init_code_hash
            else:
                raise ValueError("create2 needs --init-code or --init-code-hash")
            address = derive.compute_create2_address(deployer, init_code_hash, salt)
        else:
            if args.implementation is None:
                raise ValueError("clone-deterministic needs --implementation")
            address = derive.compute_clone_deterministic_address(deployer, args.implementation, salt)
            result["init_code_hash"] = "0x" + clone_init_code_hash(args.implementation).hex()

    result["address"] = to_checksum_address(address)
    return result


def cmd_salt(args: argparse.Namespace) -> dict:
    config = resolve_config(args)
    params = decode_salt(args.salt)
    return {
        "prefix": to_checksum_address(params.prefix),
        "identifier": "0x" + params.identifier.hex(),
        "guard": params.guard.name.lower() if params.guard is not None else f"0x{args.salt[SALT_GUARD_OFFSET]:02x}",
        "mode": params.mode.name.lower(),
        "chain_id": config.chain_id,
        "processed_salt": "0x" + process_salt(args.salt, args.caller, config.chain_id).hex(),
    }


def cmd_build_salt(args: argparse.Namespace) -> dict:
    salt = encode_salt(args.prefix, args.identifier, args.guard, args.mode)
    return {"salt": "0x" + salt.hex()}


COMMANDS = {
    "predict": cmd_predict,
    "salt": cmd_salt,
    "build-salt": cmd_build_salt,
}


def _print_result(result: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result, indent=2))
        return
    for key, value in result.items():
        print(f"{key}: {value}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        result = COMMANDS[args.command](args)
    except (FactoryError, ValueError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    _print_result(result, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
