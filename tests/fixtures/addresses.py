"""Standard test addresses.

All addresses are 20 bytes (canonical form, not checksummed).
"""

from eth_keys import keys

from createx.common.config import DEFAULT_FACTORY_ADDRESS

# Private key 0x01...01 -> Address
ALICE_PRIVATE_KEY = bytes.fromhex("01" * 32)
ALICE_ADDRESS = keys.PrivateKey(ALICE_PRIVATE_KEY).public_key.to_canonical_address()

# Private key 0x02...02 -> Address
BOB_PRIVATE_KEY = bytes.fromhex("02" * 32)
BOB_ADDRESS = keys.PrivateKey(BOB_PRIVATE_KEY).public_key.to_canonical_address()

# Private key 0x03...03 -> Address
CHARLIE_PRIVATE_KEY = bytes.fromhex("03" * 32)
CHARLIE_ADDRESS = keys.PrivateKey(CHARLIE_PRIVATE_KEY).public_key.to_canonical_address()

# Canonical CreateX deployment
FACTORY_ADDRESS = DEFAULT_FACTORY_ADDRESS

ZERO_ADDRESS = bytes.fromhex("00" * 20)

# Address derivation vectors from EIP-1014 and the yellow paper examples
DEADBEEF_ADDRESS = bytes.fromhex("deadbeef" + "00" * 16)
CREATE_VECTOR_SENDER = bytes.fromhex("6ac7ea33f8831ea9dcc53393aaa88b25a785dbf0")

TEST_ADDRESS_1 = bytes.fromhex("00" * 19 + "01")
TEST_ADDRESS_2 = bytes.fromhex("00" * 19 + "02")

TEST_ADDRESSES = {
    "alice": ALICE_ADDRESS,
    "bob": BOB_ADDRESS,
    "charlie": CHARLIE_ADDRESS,
    "factory": FACTORY_ADDRESS,
    "zero": ZERO_ADDRESS,
    "test1": TEST_ADDRESS_1,
    "test2": TEST_ADDRESS_2,
}
