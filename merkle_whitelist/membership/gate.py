"""
Membership gate: binds a published root to a caller-derived leaf.

The gate is the caller-facing check consumed by privileged operations.
It derives the leaf from the caller's own identity, so a caller cannot
submit an arbitrary leaf that happens to sit in the tree.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .exceptions import MembershipDeniedError
from .feature_flags import get_hash_name
from .hashing import Identity, hash_leaf, require_hash32, to_hex
from .verifier import PositionLike, verify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MembershipGate:
    """
    Holds the published root, set exactly once at construction.

    Attributes:
        root: 32-byte Merkle root of the membership list
        hash_name: Hash function the root was built with

    Example:
        >>> gate = MembershipGate(tree.root, hash_name=tree.hash_name)
        >>> gate.verify_membership(caller, proof.siblings, proof.positions)
        True
    """

    root: bytes
    hash_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", require_hash32(self.root, "root"))
        object.__setattr__(self, "hash_name", get_hash_name(self.hash_name))

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    def verify_membership(
        self,
        caller: Identity,
        proof: Sequence[bytes],
        positions: Sequence[PositionLike],
    ) -> bool:
        """
        Check that ``caller`` is a member.

        Args:
            caller: Authenticated identity of the caller (e.g. the session's
                wallet address), never a client-supplied leaf
            proof: Sibling hashes, leaf-to-root order
            positions: Side of each sibling

        Returns:
            True if the caller's leaf and proof reproduce the stored root

        Raises:
            LengthMismatchError: If len(proof) != len(positions)
        """
        leaf = hash_leaf(caller, self.hash_name)
        result = verify(self.root, leaf, proof, positions, hash_name=self.hash_name)
        logger.debug(
            "Membership check for leaf %s against root %s: %s",
            to_hex(leaf),
            self.hex_root,
            result,
        )
        return result

    def require_membership(
        self,
        caller: Identity,
        proof: Sequence[bytes],
        positions: Sequence[PositionLike],
    ) -> None:
        """
        Precondition form of verify_membership for privileged operations.

        Raises:
            MembershipDeniedError: If the caller is not proven a member
            LengthMismatchError: If len(proof) != len(positions)
        """
        if not self.verify_membership(caller, proof, positions):
            raise MembershipDeniedError("Caller is not on the whitelist")
