"""Tests for Position, OddLevelPolicy and the MembershipProof artifact"""

import cbor2
import pytest

from merkle_whitelist.membership import build_tree, generate_proof, verify_proof
from merkle_whitelist.membership.config import MAX_PROOF_SIZE_BYTES, PROOF_VERSION
from merkle_whitelist.membership.exceptions import (
    ConfigurationError,
    InvalidPositionError,
    LengthMismatchError,
    SerializationError,
)
from merkle_whitelist.membership.types import MembershipProof, OddLevelPolicy, Position


@pytest.fixture
def proof():
    tree = build_tree(["A", "B", "C", "D", "E"])
    return generate_proof(tree, "C")


class TestPosition:
    def test_wire_values(self):
        assert Position.LEFT.value == 0
        assert Position.RIGHT.value == 1

    def test_not_an_int(self):
        assert Position.RIGHT != 1

    @pytest.mark.parametrize(
        "value, expected",
        [(0, Position.LEFT), (1, Position.RIGHT), (Position.LEFT, Position.LEFT)],
    )
    def test_coerce(self, value, expected):
        assert Position.coerce(value) is expected

    @pytest.mark.parametrize(
        "value", [2, False, "middle", "left", "RIGHT", "1", 1.0, None]
    )
    def test_coerce_rejects(self, value):
        with pytest.raises(InvalidPositionError):
            Position.coerce(value)


class TestOddLevelPolicy:
    def test_coerce(self):
        assert OddLevelPolicy.coerce(None) is OddLevelPolicy.CARRY
        assert OddLevelPolicy.coerce("DUPLICATE") is OddLevelPolicy.DUPLICATE

    def test_coerce_rejects(self):
        with pytest.raises(ConfigurationError):
            OddLevelPolicy.coerce("promote")


class TestMembershipProofValue:
    def test_iterates_as_steps(self, proof):
        steps = list(proof)
        assert steps == list(zip(proof.siblings, proof.positions))

    def test_length_mismatch(self, proof):
        with pytest.raises(LengthMismatchError):
            MembershipProof(
                leaf=proof.leaf,
                siblings=proof.siblings,
                positions=proof.positions[:-1],
                hash_name=proof.hash_name,
            )

    def test_positions_are_coerced(self, proof):
        rebuilt = MembershipProof(
            leaf=proof.leaf,
            siblings=list(proof.siblings),
            positions=proof.wire_positions,
            hash_name=proof.hash_name,
        )
        assert rebuilt == proof

    def test_to_dict_shape(self, proof):
        data = proof.to_dict()
        assert data["version"] == PROOF_VERSION
        assert data["hash"] == "keccak256"
        assert data["leaf"] == "0x" + proof.leaf.hex()
        assert data["proof"] == ["0x" + s.hex() for s in proof.siblings]
        assert data["positions"] == [p.value for p in proof.positions]


class TestDictRoundTrip:
    def test_from_dict(self, proof):
        restored = MembershipProof.from_dict(proof.to_dict())
        assert restored == proof

    def test_from_dict_bad_version(self, proof):
        data = proof.to_dict()
        data["version"] = 99
        with pytest.raises(SerializationError, match="Unsupported proof version"):
            MembershipProof.from_dict(data)

    def test_from_dict_bad_hex(self, proof):
        data = proof.to_dict()
        data["proof"][0] = "0x1234"
        with pytest.raises(SerializationError, match="Malformed proof"):
            MembershipProof.from_dict(data)

    @pytest.mark.parametrize("hash_value", [None, "", 256])
    def test_from_dict_requires_hash(self, proof, monkeypatch, hash_value):
        monkeypatch.setenv("MERKLE_WHITELIST_HASH", "sha256")
        data = proof.to_dict()
        if hash_value is None:
            del data["hash"]
        else:
            data["hash"] = hash_value
        with pytest.raises(SerializationError, match="hash must be"):
            MembershipProof.from_dict(data)

    def test_from_dict_bad_position(self, proof):
        data = proof.to_dict()
        data["positions"][0] = 7
        with pytest.raises(SerializationError):
            MembershipProof.from_dict(data)


class TestCborArtifact:
    def test_serialize_is_versioned_map(self, proof):
        decoded = cbor2.loads(proof.serialize())
        assert decoded["v"] == PROOF_VERSION
        assert decoded["leaf"] == proof.leaf
        assert decoded["positions"] == proof.wire_positions

    def test_deserialized_proof_verifies(self):
        tree = build_tree(["A", "B", "C", "D", "E"], hash_name="sha256")
        original = generate_proof(tree, "E")
        restored = MembershipProof.deserialize(original.serialize())
        assert restored == original
        assert verify_proof(tree.root, restored) is True

    def test_rejects_garbage(self):
        with pytest.raises(SerializationError):
            MembershipProof.deserialize(b"\xff\xff\xff")

    def test_rejects_non_map(self):
        with pytest.raises(SerializationError, match="CBOR map"):
            MembershipProof.deserialize(cbor2.dumps([1, 2, 3]))

    def test_rejects_oversized(self):
        with pytest.raises(SerializationError, match="exceeds"):
            MembershipProof.deserialize(b"\x00" * (MAX_PROOF_SIZE_BYTES + 1))

    def test_rejects_short_sibling(self, proof):
        decoded = cbor2.loads(proof.serialize())
        decoded["siblings"][0] = b"\x00" * 8
        with pytest.raises(SerializationError, match="Malformed proof"):
            MembershipProof.deserialize(cbor2.dumps(decoded))

    def test_rejects_unknown_hash(self, proof):
        decoded = cbor2.loads(proof.serialize())
        decoded["hash"] = "md5"
        with pytest.raises(SerializationError):
            MembershipProof.deserialize(cbor2.dumps(decoded))

    def test_rejects_missing_hash(self, proof):
        decoded = cbor2.loads(proof.serialize())
        del decoded["hash"]
        with pytest.raises(SerializationError, match="hash must be"):
            MembershipProof.deserialize(cbor2.dumps(decoded))

    def test_rejects_missing_positions(self, proof):
        decoded = cbor2.loads(proof.serialize())
        del decoded["positions"]
        with pytest.raises(SerializationError, match="arrays"):
            MembershipProof.deserialize(cbor2.dumps(decoded))
