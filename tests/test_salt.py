"""Tests for packed salts and salt guards."""

import pytest
from eth_utils import keccak

from createx.common.errors import InvalidSalt
from createx.common.types import Guard, Mode
from createx.core.salt import (
    SALT_GUARD_OFFSET,
    SALT_MODE_OFFSET,
    SaltGuard,
    decode_salt,
    encode_salt,
    process_salt,
)
from tests.fixtures.addresses import ALICE_ADDRESS, BOB_ADDRESS, ZERO_ADDRESS

IDENTIFIER = bytes.fromhex("0102030405060708090a")


def word(value: int) -> bytes:
    return value.to_bytes(32, "big")


class TestSaltLayout:
    def test_encode_layout(self):
        salt = encode_salt(ALICE_ADDRESS, IDENTIFIER, Guard.CALLER_AND_CHAIN, Mode.STRICT)
        assert len(salt) == 32
        assert salt[:20] == ALICE_ADDRESS
        assert salt[20:30] == IDENTIFIER
        assert salt[SALT_GUARD_OFFSET] == 3
        assert salt[SALT_MODE_OFFSET] == 1

    def test_short_identifier_left_padded(self):
        salt = encode_salt(identifier=b"\x2a")
        assert salt[20:30] == bytes(9) + b"\x2a"

    def test_identifier_too_long(self):
        with pytest.raises(ValueError):
            encode_salt(identifier=bytes(11))

    def test_decode(self):
        salt = encode_salt(BOB_ADDRESS, IDENTIFIER, Guard.CHAIN, Mode.GUARDED)
        params = decode_salt(salt)
        assert params.prefix == BOB_ADDRESS
        assert params.identifier == IDENTIFIER
        assert params.guard == Guard.CHAIN
        assert params.mode == Mode.GUARDED
        assert not params.has_zero_prefix

    def test_unknown_mode_rejected(self):
        salt = bytes(31) + b"\x03"
        with pytest.raises(InvalidSalt):
            decode_salt(salt)

    def test_unknown_guard_rejected(self):
        salt = bytes(30) + b"\x04" + bytes([Mode.GUARDED])
        with pytest.raises(InvalidSalt):
            decode_salt(salt)

    def test_raw_tolerates_unknown_guard(self):
        params = decode_salt(bytes(30) + b"\xff\x00")
        assert params.mode == Mode.RAW
        assert params.guard is None

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            decode_salt(bytes(31))


class TestProcessSalt:
    def test_raw_returns_input(self):
        """Test RAW mode passes the salt through unchanged, whatever the guard byte."""
        salt = encode_salt(BOB_ADDRESS, IDENTIFIER, Guard.CALLER, Mode.RAW)
        assert process_salt(salt, ALICE_ADDRESS, 1) == salt

    def test_raw_ignores_unknown_guard_byte(self):
        salt = bytes(30) + b"\x07\x00"
        assert process_salt(salt, ZERO_ADDRESS, 1) == salt

    def test_strict_unknown_guard_rejected(self):
        salt = encode_salt(ALICE_ADDRESS, IDENTIFIER, Guard.NONE, Mode.STRICT)
        salt = salt[:SALT_GUARD_OFFSET] + b"\x09" + salt[SALT_MODE_OFFSET:]
        with pytest.raises(InvalidSalt):
            process_salt(salt, ALICE_ADDRESS, 1)

    def test_deterministic(self):
        """Test same inputs give the same output."""
        salt = encode_salt(ALICE_ADDRESS, IDENTIFIER, Guard.CALLER_AND_CHAIN, Mode.STRICT)
        assert process_salt(salt, ALICE_ADDRESS, 10) == process_salt(salt, ALICE_ADDRESS, 10)

    def test_guard_none(self):
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.NONE, mode=Mode.GUARDED)
        assert process_salt(salt, ALICE_ADDRESS, 1) == salt

    def test_guard_caller(self):
        """Test CALLER guard hashes the caller as a 32-byte word."""
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.CALLER, mode=Mode.GUARDED)
        expected = keccak(bytes(12) + ALICE_ADDRESS + salt)
        assert process_salt(salt, ALICE_ADDRESS, 1) == expected

    def test_guard_chain(self):
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.CHAIN, mode=Mode.GUARDED)
        expected = keccak(word(8453) + salt)
        assert process_salt(salt, ALICE_ADDRESS, 8453) == expected

    def test_guard_caller_and_chain(self):
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.CALLER_AND_CHAIN, mode=Mode.GUARDED)
        expected = keccak(bytes(12) + ALICE_ADDRESS + word(10) + salt)
        assert process_salt(salt, ALICE_ADDRESS, 10) == expected

    def test_caller_guard_binds_caller(self):
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.CALLER, mode=Mode.GUARDED)
        assert process_salt(salt, ALICE_ADDRESS, 1) != process_salt(salt, BOB_ADDRESS, 1)

    def test_chain_guard_binds_chain(self):
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.CHAIN, mode=Mode.GUARDED)
        assert process_salt(salt, ALICE_ADDRESS, 1) != process_salt(salt, ALICE_ADDRESS, 10)

    def test_strict_accepts_caller_prefix(self):
        salt = encode_salt(ALICE_ADDRESS, IDENTIFIER, Guard.CALLER, Mode.STRICT)
        expected = keccak(bytes(12) + ALICE_ADDRESS + salt)
        assert process_salt(salt, ALICE_ADDRESS, 1) == expected

    def test_strict_accepts_zero_prefix(self):
        salt = encode_salt(ZERO_ADDRESS, IDENTIFIER, Guard.NONE, Mode.STRICT)
        assert process_salt(salt, BOB_ADDRESS, 1) == salt

    def test_strict_rejects_other_prefix(self):
        """Test STRICT mode rejects a prefix that is neither zero nor the caller."""
        salt = encode_salt(BOB_ADDRESS, IDENTIFIER, Guard.CALLER, Mode.STRICT)
        with pytest.raises(InvalidSalt) as exc_info:
            process_salt(salt, ALICE_ADDRESS, 1)
        assert exc_info.value.caller == ALICE_ADDRESS
        assert exc_info.value.salt == salt

    def test_guarded_ignores_prefix(self):
        salt = encode_salt(BOB_ADDRESS, IDENTIFIER, Guard.NONE, Mode.GUARDED)
        assert process_salt(salt, ALICE_ADDRESS, 1) == salt

    def test_bad_caller_length(self):
        with pytest.raises(ValueError):
            process_salt(bytes(32), b"\x01" * 32, 1)


class TestSaltGuard:
    def test_binds_chain_id(self):
        salt = encode_salt(identifier=IDENTIFIER, guard=Guard.CHAIN, mode=Mode.GUARDED)
        guard = SaltGuard(chain_id=137)
        assert guard.process(salt, ALICE_ADDRESS) == process_salt(salt, ALICE_ADDRESS, 137)

    def test_repr(self):
        assert repr(SaltGuard(5)) == "SaltGuard(chain_id=5)"
