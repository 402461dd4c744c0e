"""Public API for the whitelist membership scheme.

Off-line: build_tree() over the member list, publish tree.root, and hand
each member generate_proof(tree, member).
On-line: verify() or MembershipGate.verify_membership() against the root.
"""

from .exceptions import (
    ConfigurationError,
    EmptySetError,
    InvalidHashError,
    InvalidPositionError,
    LengthMismatchError,
    MembershipDeniedError,
    SerializationError,
    UnknownIdentityError,
    WhitelistError,
)
from .feature_flags import get_hash_name, set_hash_name
from .gate import MembershipGate
from .hashing import from_hex, hash_leaf, hash_node, identity_bytes, to_hex
from .members import load_members, parse_members
from .proof import generate_all_proofs, generate_proof, generate_proof_for_index
from .tree import build_tree, build_tree_from_leaves
from .types import MembershipProof, MerkleTree, OddLevelPolicy, Position
from .verifier import compute_root, verify, verify_proof

__all__ = [
    "build_tree",
    "build_tree_from_leaves",
    "generate_proof",
    "generate_proof_for_index",
    "generate_all_proofs",
    "verify",
    "verify_proof",
    "compute_root",
    "MembershipGate",
    "MerkleTree",
    "MembershipProof",
    "OddLevelPolicy",
    "Position",
    "hash_leaf",
    "hash_node",
    "identity_bytes",
    "to_hex",
    "from_hex",
    "load_members",
    "parse_members",
    "get_hash_name",
    "set_hash_name",
    "WhitelistError",
    "EmptySetError",
    "UnknownIdentityError",
    "LengthMismatchError",
    "InvalidHashError",
    "InvalidPositionError",
    "SerializationError",
    "ConfigurationError",
    "MembershipDeniedError",
]
