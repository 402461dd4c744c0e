"""
Merkle tree construction over an ordered membership list.

Runs once, off-line, over the full list. The resulting root is published
and never updated; any change to the list means building a new tree.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .exceptions import EmptySetError
from .feature_flags import get_hash_name
from .hashing import Identity, get_hash_function, identity_bytes, require_hash32
from .types import MerkleTree, OddLevelPolicy

logger = logging.getLogger(__name__)


def _next_level(
    nodes: Sequence[bytes], digest, odd_policy: OddLevelPolicy
) -> Tuple[bytes, ...]:
    parents: List[bytes] = []
    for i in range(0, len(nodes), 2):
        left = nodes[i]
        if i + 1 < len(nodes):
            right = nodes[i + 1]
        elif odd_policy is OddLevelPolicy.DUPLICATE:
            right = left
        else:
            # Carry the unpaired node up unchanged
            parents.append(left)
            continue
        parents.append(digest(left + right))
    return tuple(parents)


def build_tree_from_leaves(
    leaves: Iterable[bytes],
    *,
    hash_name: Optional[str] = None,
    odd_policy: Union[OddLevelPolicy, str, None] = None,
) -> MerkleTree:
    """
    Build a Merkle tree over precomputed 32-byte leaves.

    Args:
        leaves: Leaf hashes in membership-list order
        hash_name: Hash function for internal nodes (default: configured)
        odd_policy: "carry" (default) or "duplicate"

    Returns:
        Immutable MerkleTree with every level retained

    Raises:
        EmptySetError: If there are no leaves
        InvalidHashError: If a leaf is not 32 bytes

    Algorithm:
        - Combine nodes 2i and 2i+1 into H(node[2i] || node[2i+1])
        - Odd-sized level: carry or duplicate the last node per policy
        - Repeat until one node remains
    """
    level0 = tuple(require_hash32(leaf, f"leaves[{i}]") for i, leaf in enumerate(leaves))
    if not level0:
        raise EmptySetError("Cannot build tree with zero leaves")

    name = get_hash_name(hash_name)
    policy = OddLevelPolicy.coerce(odd_policy)
    digest = get_hash_function(name)

    levels = [level0]
    while len(levels[-1]) > 1:
        levels.append(_next_level(levels[-1], digest, policy))

    tree = MerkleTree(levels=tuple(levels), hash_name=name, odd_policy=policy)
    logger.debug(
        "Built %s tree: %d leaves, depth %d, policy %s, root %s",
        name,
        tree.leaf_count,
        tree.depth,
        policy.value,
        tree.hex_root,
    )
    return tree


def build_tree(
    identities: Iterable[Identity],
    *,
    hash_name: Optional[str] = None,
    odd_policy: Union[OddLevelPolicy, str, None] = None,
) -> MerkleTree:
    """
    Build a Merkle tree over an ordered list of identities.

    Each identity is hashed to its leaf, H(identity), first.

    Raises:
        EmptySetError: If the list is empty

    Example:
        >>> tree = build_tree(["0x5B38Da6a701c568545dCfcB03FcB875f56beddC4"])
        >>> tree.root == tree.leaves[0]
        True
    """
    name = get_hash_name(hash_name)
    digest = get_hash_function(name)
    leaves = [digest(identity_bytes(identity)) for identity in identities]
    if not leaves:
        raise EmptySetError("Cannot build tree for an empty membership list")
    return build_tree_from_leaves(leaves, hash_name=name, odd_policy=odd_policy)
