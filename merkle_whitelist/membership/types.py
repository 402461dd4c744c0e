"""
Data model for the whitelist membership scheme.

This module provides:
1. Position - which side of the concatenation a sibling occupies
2. OddLevelPolicy - how an unpaired last node is promoted
3. MerkleTree - immutable, level-indexed hash tree
4. MembershipProof - sibling path with CBOR serialization

Trees are stored as levels of index-addressable tuples; parent, child and
sibling are found by index arithmetic, never by pointers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import cbor2

from .config import DEFAULT_ODD_POLICY, MAX_PROOF_SIZE_BYTES, MAX_TREE_DEPTH, PROOF_VERSION
from .exceptions import (
    ConfigurationError,
    InvalidHashError,
    InvalidPositionError,
    LengthMismatchError,
    SerializationError,
    WhitelistError,
)
from .feature_flags import get_hash_name
from .hashing import from_hex, require_hash32, to_hex

# ============================================================================
# ENUMS
# ============================================================================


class Position(Enum):
    """
    Side of the concatenation a sibling occupies when recombining.

    - LEFT: sibling was concatenated first, H(sibling || computed)
    - RIGHT: sibling was concatenated second, H(computed || sibling)

    Values are the wire encoding used by on-chain verifiers (right = 1).
    """

    LEFT = 0
    RIGHT = 1

    @classmethod
    def coerce(cls, value: Union["Position", int]) -> "Position":
        """
        Accept a Position or its wire integer (0 = LEFT, 1 = RIGHT).

        Raises:
            InvalidPositionError: For anything else (including bools)
        """
        if isinstance(value, Position):
            return value
        if isinstance(value, bool):
            raise InvalidPositionError(f"Invalid position: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidPositionError(f"Invalid position: {value!r}") from None
        raise InvalidPositionError(f"Invalid position: {value!r}")


class OddLevelPolicy(Enum):
    """How the last node of an odd-sized level reaches the next level."""

    CARRY = "carry"
    DUPLICATE = "duplicate"

    @classmethod
    def coerce(cls, value: Union["OddLevelPolicy", str, None]) -> "OddLevelPolicy":
        if value is None:
            value = DEFAULT_ODD_POLICY
        if isinstance(value, OddLevelPolicy):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"Invalid odd-level policy: {value!r}. Valid options: {valid}"
            ) from None


# ============================================================================
# MERKLE TREE
# ============================================================================


@dataclass(frozen=True)
class MerkleTree:
    """
    Complete hash tree over an ordered membership list.

    Attributes:
        levels: levels[0] are the leaves, levels[-1] == (root,)
        hash_name: Hash function used for every node
        odd_policy: Policy applied to odd-sized levels

    Example:
        >>> tree = build_tree(["alice", "bob", "carol"])
        >>> tree.depth
        2
        >>> tree.sibling(0, 0) == tree.levels[0][1]
        True
    """

    levels: Tuple[Tuple[bytes, ...], ...]
    hash_name: str
    odd_policy: OddLevelPolicy
    _leaf_index: Dict[bytes, int] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        if not self.levels or len(self.levels[-1]) != 1:
            raise InvalidHashError("Tree must end in a single root node")
        if len(self.levels) - 1 > MAX_TREE_DEPTH:
            raise ConfigurationError(f"Tree depth exceeds {MAX_TREE_DEPTH}")
        index: Dict[bytes, int] = {}
        for i, leaf in enumerate(self.levels[0]):
            index.setdefault(leaf, i)
        object.__setattr__(self, "_leaf_index", index)

    @property
    def root(self) -> bytes:
        return self.levels[-1][0]

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        return self.levels[0]

    @property
    def leaf_count(self) -> int:
        return len(self.levels[0])

    @property
    def depth(self) -> int:
        """Number of combination steps from the leaves to the root."""
        return len(self.levels) - 1

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    def index_of(self, leaf: bytes) -> Optional[int]:
        """Position of the first occurrence of leaf, or None."""
        return self._leaf_index.get(bytes(leaf))

    def sibling(self, level: int, index: int) -> Optional[bytes]:
        """
        Sibling of node (level, index), or None when it is unpaired.

        Under DUPLICATE the unpaired node is its own sibling.
        """
        nodes = self.levels[level]
        sibling_index = index ^ 1
        if sibling_index < len(nodes):
            return nodes[sibling_index]
        if self.odd_policy is OddLevelPolicy.DUPLICATE:
            return nodes[index]
        return None


# ============================================================================
# MEMBERSHIP PROOF
# ============================================================================


@dataclass(frozen=True)
class MembershipProof:
    """
    Sibling path from a leaf to the root, leaf-to-root order.

    ``siblings`` and ``positions`` are the two sequences an on-chain
    verifier takes; ``leaf`` and ``hash_name`` travel with them so an
    artifact is self-describing.

    Serialization:
        - Primary: CBOR with version field (serialize/deserialize)
        - Hex dict: to_dict()/from_dict() for JSON
    """

    leaf: bytes
    siblings: Tuple[bytes, ...]
    positions: Tuple[Position, ...]
    hash_name: str = field(default_factory=get_hash_name)

    def __post_init__(self) -> None:
        if len(self.siblings) != len(self.positions):
            raise LengthMismatchError(
                f"{len(self.siblings)} siblings but {len(self.positions)} positions"
            )
        if len(self.siblings) > MAX_TREE_DEPTH:
            raise SerializationError(f"Proof longer than {MAX_TREE_DEPTH} steps")
        object.__setattr__(self, "leaf", require_hash32(self.leaf, "leaf"))
        object.__setattr__(
            self,
            "siblings",
            tuple(require_hash32(s, f"siblings[{i}]") for i, s in enumerate(self.siblings)),
        )
        object.__setattr__(
            self, "positions", tuple(Position.coerce(p) for p in self.positions)
        )
        object.__setattr__(self, "hash_name", get_hash_name(self.hash_name))

    def __len__(self) -> int:
        return len(self.siblings)

    def __iter__(self) -> Iterator[Tuple[bytes, Position]]:
        return iter(zip(self.siblings, self.positions))

    @property
    def wire_positions(self) -> List[int]:
        """Positions as 0 (LEFT) / 1 (RIGHT)."""
        return [p.value for p in self.positions]

    @property
    def hex_siblings(self) -> List[str]:
        return [to_hex(s) for s in self.siblings]

    # ========================================================================
    # DICT / JSON FORM
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Hex form, shaped like the arguments of an on-chain verifier call.

        Example:
            >>> proof.to_dict()["positions"]
            [1, 1]
        """
        return {
            "version": PROOF_VERSION,
            "hash": self.hash_name,
            "leaf": to_hex(self.leaf),
            "proof": self.hex_siblings,
            "positions": self.wire_positions,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MembershipProof":
        if not isinstance(data, dict):
            raise SerializationError("Proof must be a mapping")
        _check_version(data.get("version"))
        siblings = data.get("proof")
        positions = data.get("positions")
        if not isinstance(siblings, list) or not isinstance(positions, list):
            raise SerializationError("proof and positions must be lists")
        leaf = data.get("leaf")
        if not isinstance(leaf, str):
            raise SerializationError("leaf must be a hex string")
        hash_name = data.get("hash")
        if not isinstance(hash_name, str) or not hash_name.strip():
            raise SerializationError("hash must be a non-empty string")
        try:
            return cls(
                leaf=from_hex(leaf, "leaf"),
                siblings=tuple(from_hex(s, "proof") for s in siblings),
                positions=tuple(positions),
                hash_name=hash_name,
            )
        except (WhitelistError, TypeError) as exc:
            raise SerializationError(f"Malformed proof: {exc}") from exc

    # ========================================================================
    # CBOR FORM
    # ========================================================================

    def serialize(self) -> bytes:
        """
        Encode as a CBOR map.

        Format: {"v": version, "hash": str, "leaf": bytes,
                 "siblings": [bytes], "positions": [int]}
        """
        data = {
            "v": PROOF_VERSION,
            "hash": self.hash_name,
            "leaf": self.leaf,
            "siblings": list(self.siblings),
            "positions": self.wire_positions,
        }
        return cbor2.dumps(data)

    @classmethod
    def deserialize(cls, data: bytes) -> "MembershipProof":
        """
        Decode and validate a CBOR proof artifact.

        Raises:
            SerializationError: Oversized, undecodable or malformed input
        """
        if len(data) > MAX_PROOF_SIZE_BYTES:
            raise SerializationError(
                f"Proof artifact exceeds {MAX_PROOF_SIZE_BYTES} bytes"
            )
        try:
            decoded = cbor2.loads(data)
        except (cbor2.CBORDecodeError, ValueError) as exc:
            raise SerializationError(f"Invalid CBOR proof: {exc}") from exc

        if not isinstance(decoded, dict):
            raise SerializationError("Proof must be a CBOR map")
        _check_version(decoded.get("v"))

        siblings = decoded.get("siblings")
        positions = decoded.get("positions")
        if not isinstance(siblings, list) or not isinstance(positions, list):
            raise SerializationError("siblings and positions must be arrays")
        hash_name = decoded.get("hash")
        if not isinstance(hash_name, str) or not hash_name.strip():
            raise SerializationError("hash must be a non-empty string")

        try:
            return cls(
                leaf=decoded.get("leaf"),
                siblings=tuple(siblings),
                positions=tuple(positions),
                hash_name=hash_name,
            )
        except WhitelistError as exc:
            raise SerializationError(f"Malformed proof: {exc}") from exc


def _check_version(version: Any) -> None:
    if version != PROOF_VERSION:
        raise SerializationError(
            f"Unsupported proof version {version!r}, expected {PROOF_VERSION}"
        )
