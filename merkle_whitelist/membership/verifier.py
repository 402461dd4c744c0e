"""
Stateless proof verification.

verify() recombines a leaf with its sibling path and compares the result
to the stored root. It has no side effects and holds no state, so
concurrent calls need no locking. A proof that does not reproduce the
root is a normal False result, never an exception.
"""

from typing import Optional, Sequence, Union

from .exceptions import LengthMismatchError
from .hashing import get_hash_function, require_hash32
from .types import MembershipProof, Position

PositionLike = Union[Position, int]


def compute_root(
    leaf: bytes,
    proof: Sequence[bytes],
    positions: Sequence[PositionLike],
    *,
    hash_name: Optional[str] = None,
) -> bytes:
    """
    Recombine a leaf with its sibling path.

    For each step: RIGHT -> H(computed || sibling),
    LEFT -> H(sibling || computed).

    Raises:
        LengthMismatchError: Before any hashing, if lengths differ
        InvalidPositionError: If a position is not LEFT/RIGHT
        InvalidHashError: If leaf or a sibling is not 32 bytes
    """
    if len(proof) != len(positions):
        raise LengthMismatchError(
            f"proof has {len(proof)} elements but positions has {len(positions)}"
        )
    sides = [Position.coerce(p) for p in positions]
    computed = require_hash32(leaf, "leaf")
    digest = get_hash_function(hash_name)

    for i, (sibling, side) in enumerate(zip(proof, sides)):
        sibling = require_hash32(sibling, f"proof[{i}]")
        if side is Position.RIGHT:
            computed = digest(computed + sibling)
        else:
            computed = digest(sibling + computed)
    return computed


def verify(
    root: bytes,
    leaf: bytes,
    proof: Sequence[bytes],
    positions: Sequence[PositionLike],
    *,
    hash_name: Optional[str] = None,
) -> bool:
    """
    Check that leaf and proof reproduce root.

    Args:
        root: Published 32-byte root
        leaf: 32-byte leaf, H(identity)
        proof: Sibling hashes, leaf-to-root order
        positions: Side of each sibling (Position, or 0 = LEFT / 1 = RIGHT)
        hash_name: Hash function the root was built with

    Returns:
        True if the recomputed root equals root, False otherwise

    Raises:
        LengthMismatchError: If len(proof) != len(positions)

    Example:
        >>> verify(tree.root, leaf, proof.siblings, proof.positions)
        True
    """
    root = require_hash32(root, "root")
    computed = compute_root(leaf, proof, positions, hash_name=hash_name)
    return computed == root


def verify_proof(root: bytes, proof: MembershipProof) -> bool:
    """Verify a MembershipProof artifact using the hash it records."""
    return verify(
        root, proof.leaf, proof.siblings, proof.positions, hash_name=proof.hash_name
    )
