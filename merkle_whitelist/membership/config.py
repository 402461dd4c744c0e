"""
Configuration for the whitelist membership scheme.

A root is only meaningful together with the hash function and odd-level
policy it was built with. Changing either invalidates every proof issued
against an existing root.
"""

# ============================================================================
# HASH FUNCTIONS
# ============================================================================

# keccak256 matches Solidity's keccak256(abi.encodePacked(...)), so roots
# built here can be stored in an on-chain verifier unchanged.
SUPPORTED_HASHES = ("keccak256", "sha256")
DEFAULT_HASH = "keccak256"
HASH_OUTPUT_BYTES = 32
HASH_OUTPUT_BITS = HASH_OUTPUT_BYTES * 8

# Environment override for the hash function
HASH_ENV_VAR = "MERKLE_WHITELIST_HASH"

# ============================================================================
# TREE SHAPE
# ============================================================================

# "carry": an unpaired last node is promoted to the next level unchanged.
# "duplicate": an unpaired last node is hashed with itself.
SUPPORTED_ODD_POLICIES = ("carry", "duplicate")
DEFAULT_ODD_POLICY = "carry"

# 2**64 members is far beyond any list this tool will see
MAX_TREE_DEPTH = 64

# ============================================================================
# PROOF SERIALIZATION
# ============================================================================

SERIALIZATION_FORMAT = "CBOR"
PROOF_VERSION = 1  # Increment for breaking changes

# Leaf + MAX_TREE_DEPTH siblings + positions + framing
MAX_PROOF_SIZE_BYTES = 4 * 1024

# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert DEFAULT_HASH in SUPPORTED_HASHES, "Default hash is not supported"
    assert HASH_OUTPUT_BYTES == 32, "Hash output must be 32 bytes"
    assert DEFAULT_ODD_POLICY in SUPPORTED_ODD_POLICIES, "Invalid odd policy"
    assert SERIALIZATION_FORMAT == "CBOR", "Only CBOR artifacts are supported"
    assert PROOF_VERSION >= 1, "Proof version must be positive"
    assert (
        MAX_PROOF_SIZE_BYTES > (MAX_TREE_DEPTH + 1) * (HASH_OUTPUT_BYTES + 4)
    ), "Proof size limit cannot hold a maximum-depth proof"

    return True


# Auto-validate on import
validate_config()
