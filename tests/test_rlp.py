"""Tests for the RLP encoder used by CREATE address derivation."""

import pytest
import rlp as pyrlp

from createx.common.rlp import encode, encode_uint


class TestEncodeBytes:
    def test_empty_string(self):
        assert encode(b"") == b"\x80"

    def test_single_low_byte_is_itself(self):
        assert encode(b"\x00") == b"\x00"
        assert encode(b"\x7f") == b"\x7f"

    def test_single_high_byte_gets_prefix(self):
        assert encode(b"\x80") == b"\x81\x80"

    def test_short_string(self):
        assert encode(b"dog") == b"\x83dog"

    def test_55_byte_string_uses_short_form(self):
        data = b"a" * 55
        assert encode(data) == bytes([0x80 + 55]) + data

    def test_56_byte_string_uses_long_form(self):
        data = b"a" * 56
        assert encode(data) == b"\xb8\x38" + data

    def test_address(self):
        addr = bytes(range(20))
        assert encode(addr) == b"\x94" + addr


class TestEncodeInt:
    def test_zero_is_empty_string(self):
        assert encode(0) == b"\x80"

    def test_small_ints(self):
        assert encode(1) == b"\x01"
        assert encode(127) == b"\x7f"
        assert encode(128) == b"\x81\x80"

    def test_multibyte_int(self):
        assert encode(1024) == b"\x82\x04\x00"

    def test_encode_uint_no_leading_zeros(self):
        assert encode_uint(0) == b""
        assert encode_uint(0x0100) == b"\x01\x00"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            encode(-1)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            encode(True)

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode("dog")


class TestEncodeList:
    def test_empty_list(self):
        assert encode([]) == b"\xc0"

    def test_string_list(self):
        assert encode([b"cat", b"dog"]) == b"\xc8\x83cat\x83dog"

    def test_nested(self):
        # [ [], [[]], [ [], [[]] ] ]
        assert encode([[], [[]], [[], [[]]]]) == bytes.fromhex("c7c0c1c0c3c0c1c0")

    def test_long_list(self):
        encoded = encode([b"a" * 60])
        # payload = 0xb8 0x3c + 60 bytes = 62 bytes
        assert encoded[:2] == b"\xf8\x3e"
        assert len(encoded) == 64


class TestPyrlpCompatibility:
    """Cross-check the CREATE preimage against pyrlp."""

    @pytest.mark.parametrize("nonce", [0, 1, 127, 128, 255, 256, 0xFFFF, 2**32, 2**64 - 2])
    def test_sender_nonce_pair(self, nonce):
        sender = bytes.fromhex("6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0")
        assert encode([sender, nonce]) == pyrlp.encode([sender, nonce])

    def test_long_payload(self):
        items = [b"x" * 40, b"y" * 40, 2**200]
        assert encode(items) == pyrlp.encode(items)
