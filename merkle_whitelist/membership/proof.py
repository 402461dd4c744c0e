"""
Proof generation: the sibling path from one leaf to the root.

Runs off-line, on demand, per claimant. The position recorded for each
sibling mirrors the concatenation order used by build_tree exactly.
"""

import logging
from typing import Dict, Iterable, List

from .exceptions import UnknownIdentityError
from .hashing import Identity, hash_leaf, to_hex
from .types import MembershipProof, MerkleTree, Position

logger = logging.getLogger(__name__)


def generate_proof_for_index(tree: MerkleTree, index: int) -> MembershipProof:
    """
    Build the proof for the leaf at ``index``.

    Args:
        tree: Tree returned by build_tree()
        index: Position of the identity in the original list

    Returns:
        MembershipProof whose length is the leaf's depth. Under the carry
        policy a leaf on an unbalanced edge has a shorter path.

    Raises:
        UnknownIdentityError: If index is out of range
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError("index must be an int")
    if not 0 <= index < tree.leaf_count:
        raise UnknownIdentityError(
            f"Leaf index {index} out of range for {tree.leaf_count} members"
        )

    siblings: List[bytes] = []
    positions: List[Position] = []
    i = index
    for level in range(tree.depth):
        sibling = tree.sibling(level, i)
        if sibling is not None:
            siblings.append(sibling)
            # Even index: we were concatenated first, sibling second
            positions.append(Position.RIGHT if i % 2 == 0 else Position.LEFT)
        i //= 2

    return MembershipProof(
        leaf=tree.leaves[index],
        siblings=tuple(siblings),
        positions=tuple(positions),
        hash_name=tree.hash_name,
    )


def generate_proof(tree: MerkleTree, identity: Identity) -> MembershipProof:
    """
    Build the proof for an identity.

    The identity is hashed with the tree's own hash function and located
    among the leaves. If it appears more than once, the first occurrence
    is used.

    Raises:
        UnknownIdentityError: If the identity is not a member

    Example:
        >>> tree = build_tree(["A", "B", "C", "D"])
        >>> proof = generate_proof(tree, "A")
        >>> [p.name for p in proof.positions]
        ['RIGHT', 'RIGHT']
    """
    leaf = hash_leaf(identity, tree.hash_name)
    index = tree.index_of(leaf)
    if index is None:
        raise UnknownIdentityError(f"Identity is not in the membership list: {identity!r}")
    logger.debug("Generating proof for leaf %s at index %d", to_hex(leaf), index)
    return generate_proof_for_index(tree, index)


def generate_all_proofs(
    tree: MerkleTree, identities: Iterable[Identity]
) -> Dict[Identity, MembershipProof]:
    """
    Build proofs for every identity, e.g. to publish a proof bundle.

    Raises:
        UnknownIdentityError: If any identity is not a member
    """
    proofs = {identity: generate_proof(tree, identity) for identity in identities}
    logger.info("Generated %d proofs against root %s", len(proofs), tree.hex_root)
    return proofs
