import hashlib

import pytest

from merkle_whitelist.membership import hashing
from merkle_whitelist.membership.exceptions import ConfigurationError, InvalidHashError

ADDRESS = "0x5B38Da6a701c568545dCfcB03FcB875f56beddC4"


class TestHashFunctions:
    """Test the registered hash functions"""

    def test_keccak256_empty_vector(self):
        """keccak256('') matches the Ethereum constant"""
        assert hashing.keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak256_is_not_sha3(self):
        """Ethereum keccak256 uses the original padding, not SHA3-256"""
        assert hashing.keccak256(b"abc") != hashlib.sha3_256(b"abc").digest()

    def test_sha256_vector(self):
        assert hashing.sha256(b"abc").hex() == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_get_hash_function_by_name(self):
        assert hashing.get_hash_function("sha256") is hashing.sha256
        assert hashing.get_hash_function("KECCAK256") is hashing.keccak256

    def test_get_hash_function_unknown(self):
        with pytest.raises(ConfigurationError, match="Invalid hash function"):
            hashing.get_hash_function("md5")


class TestIdentityEncoding:
    """Test identity -> leaf preimage encoding"""

    def test_hex_address_decoded_to_raw_bytes(self):
        raw = hashing.identity_bytes(ADDRESS)
        assert len(raw) == 20
        assert raw == bytes.fromhex(ADDRESS[2:])

    def test_hex_is_case_insensitive(self):
        assert hashing.identity_bytes(ADDRESS) == hashing.identity_bytes(ADDRESS.lower())
        assert hashing.hash_leaf(ADDRESS) == hashing.hash_leaf(ADDRESS.upper().replace("0X", "0x"))

    def test_plain_string_utf8(self):
        assert hashing.identity_bytes("alice") == b"alice"
        assert hashing.identity_bytes("zoë") == "zoë".encode("utf-8")

    def test_odd_length_hex_is_left_padded(self):
        assert hashing.identity_bytes("0xabc") == b"\x0a\xbc"
        assert hashing.identity_bytes("0x1") == b"\x01"

    def test_non_hex_prefixed_is_text(self):
        assert hashing.identity_bytes("0xzz") == b"0xzz"

    @pytest.mark.parametrize(
        "value", ["0x61  62", "0x6162 ", " 0x6162", "0x61\t62", "0x61\n62"]
    )
    def test_hex_with_whitespace_is_text(self, value):
        assert hashing.identity_bytes(value) == value.encode("utf-8")

    def test_whitespace_does_not_alias_hex_leaf(self):
        assert hashing.hash_leaf("0x61  62") != hashing.hash_leaf("0x6162")
        assert hashing.hash_leaf("0x61  62") != hashing.hash_leaf("ab")

    def test_uppercase_prefix_is_text(self):
        assert hashing.identity_bytes("0X6162") == b"0X6162"

    def test_bytes_pass_through(self):
        assert hashing.identity_bytes(b"\x00\x01") == b"\x00\x01"
        assert hashing.identity_bytes(bytearray(b"\x02")) == b"\x02"

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            hashing.identity_bytes(42)


class TestLeafAndNode:
    """Test leaf and node hashing"""

    def test_hash_leaf_matches_keccak(self):
        assert hashing.hash_leaf(ADDRESS, "keccak256") == hashing.keccak256(
            bytes.fromhex(ADDRESS[2:])
        )

    def test_hash_leaf_matches_sha256(self):
        assert hashing.hash_leaf("alice", "sha256") == hashlib.sha256(b"alice").digest()

    def test_hash_node_concatenates(self):
        left = b"\x00" * 32
        right = b"\xff" * 32
        assert hashing.hash_node(left, right, "sha256") == hashlib.sha256(left + right).digest()

    def test_hash_node_order_matters(self):
        left = b"\x00" * 32
        right = b"\xff" * 32
        assert hashing.hash_node(left, right) != hashing.hash_node(right, left)


class TestHexHelpers:
    def test_to_hex(self):
        assert hashing.to_hex(b"\xab" * 32) == "0x" + "ab" * 32

    def test_from_hex_accepts_prefix_and_bare(self):
        value = b"\x01" * 32
        assert hashing.from_hex("0x" + value.hex()) == value
        assert hashing.from_hex(value.hex()) == value
        assert hashing.from_hex("0X" + value.hex().upper()) == value

    def test_from_hex_wrong_length(self):
        with pytest.raises(InvalidHashError, match="32 bytes"):
            hashing.from_hex("0x1234")

    def test_from_hex_not_hex(self):
        with pytest.raises(InvalidHashError, match="not valid hex"):
            hashing.from_hex("0x" + "zz" * 32)

    def test_from_hex_rejects_whitespace(self):
        digits = "01" * 32
        with pytest.raises(InvalidHashError, match="not valid hex"):
            hashing.from_hex("0x" + digits[:10] + " " + digits[10:])
        with pytest.raises(InvalidHashError, match="not valid hex"):
            hashing.from_hex("0x" + digits + " ")

    def test_require_hash32(self):
        with pytest.raises(InvalidHashError):
            hashing.require_hash32(b"\x00" * 31)
        with pytest.raises(InvalidHashError):
            hashing.require_hash32("00" * 32)
