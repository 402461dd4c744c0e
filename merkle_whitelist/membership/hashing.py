"""
Hash function H and identity encoding.

H is used both to derive leaves from identities and to combine two nodes.
No domain separation is applied: leaf = H(identity) and
node = H(left || right), which is what an on-chain keccak256 verifier
recomputes.
"""

import hashlib
import re
from typing import Callable, Dict, Optional, Union

from Crypto.Hash import keccak

from .config import HASH_OUTPUT_BYTES
from .exceptions import ConfigurationError, InvalidHashError
from .feature_flags import get_hash_name

Identity = Union[str, bytes]
HashFunction = Callable[[bytes], bytes]


def keccak256(data: bytes) -> bytes:
    """Ethereum keccak256 (original Keccak padding, not SHA3-256)."""
    return keccak.new(digest_bits=256, data=data).digest()


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


HASH_FUNCTIONS: Dict[str, HashFunction] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hash_function(hash_name: Optional[str] = None) -> HashFunction:
    """
    Resolve a hash function by name.

    Args:
        hash_name: "keccak256" or "sha256"; None uses the configured default

    Returns:
        Callable mapping bytes to a 32-byte digest

    Raises:
        ConfigurationError: If the name is not registered
    """
    name = get_hash_name(hash_name)
    try:
        return HASH_FUNCTIONS[name]
    except KeyError:
        raise ConfigurationError(f"No hash function registered for {name!r}") from None


_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def _is_hex_string(value: str) -> bool:
    return value.startswith("0x") and _HEX_DIGITS.fullmatch(value[2:]) is not None


def identity_bytes(identity: Identity) -> bytes:
    """
    Encode an identity as the preimage of its leaf.

    Strings matching 0x[0-9a-fA-F]* (addresses, public keys) are decoded
    to raw bytes so that "0xAbC..." and "0xabc..." produce the same leaf,
    and so that an address hashes exactly like abi.encodePacked(address).
    An odd digit count is left-padded with one zero ("0xabc" -> 0x0abc).
    Anything else, including hex with whitespace, is UTF-8 encoded;
    bytes pass through.

    Example:
        >>> identity_bytes("0x00ff")
        b'\\x00\\xff'
        >>> identity_bytes("alice")
        b'alice'
    """
    if isinstance(identity, (bytes, bytearray)):
        return bytes(identity)
    if not isinstance(identity, str):
        raise TypeError(f"identity must be str or bytes, got {type(identity).__name__}")
    if _is_hex_string(identity):
        digits = identity[2:]
        if len(digits) % 2:
            digits = "0" + digits
        return bytes.fromhex(digits)
    return identity.encode("utf-8")


def hash_leaf(identity: Identity, hash_name: Optional[str] = None) -> bytes:
    """
    Derive the leaf for an identity: H(identity_bytes(identity)).

    Returns:
        32-byte digest
    """
    return get_hash_function(hash_name)(identity_bytes(identity))


def hash_node(left: bytes, right: bytes, hash_name: Optional[str] = None) -> bytes:
    """
    Combine two nodes: H(left || right).

    Note:
        Fixed left||right ordering (no sorting). Swapping the arguments
        yields a different node.
    """
    return get_hash_function(hash_name)(left + right)


def require_hash32(value: bytes, field: str = "hash") -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise InvalidHashError(f"{field} must be bytes, got {type(value).__name__}")
    if len(value) != HASH_OUTPUT_BYTES:
        raise InvalidHashError(
            f"{field} must be {HASH_OUTPUT_BYTES} bytes, got {len(value)}"
        )
    return bytes(value)


def to_hex(value: bytes) -> str:
    """Render a hash as 0x-prefixed lower-case hex."""
    return "0x" + bytes(value).hex()


def from_hex(value: str, field: str = "hash") -> bytes:
    """
    Parse a 0x-prefixed (or bare) hex string into a 32-byte hash.

    Raises:
        InvalidHashError: If the string is not 64 hex digits
    """
    if not isinstance(value, str):
        raise InvalidHashError(f"{field} must be a hex string")
    digits = value[2:] if value[:2].lower() == "0x" else value
    if len(digits) % 2 or _HEX_DIGITS.fullmatch(digits) is None:
        raise InvalidHashError(f"{field} is not valid hex: {value!r}")
    return require_hash32(bytes.fromhex(digits), field)
