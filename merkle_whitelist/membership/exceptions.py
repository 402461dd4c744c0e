"""
Custom exceptions for the whitelist membership scheme.

A failed verification is NOT an exception: verify() returns False for a
proof that does not reproduce the root. These exceptions cover malformed
input and misuse only.
"""


class WhitelistError(Exception):
    """Base exception for whitelist membership errors."""

    pass


class EmptySetError(WhitelistError, ValueError):
    """Tree construction attempted on an empty membership list."""

    pass


class UnknownIdentityError(WhitelistError, LookupError):
    """Proof requested for an identity that is not in the membership list."""

    pass


class LengthMismatchError(WhitelistError, ValueError):
    """Proof siblings and positions have different lengths."""

    pass


class InvalidHashError(WhitelistError, ValueError):
    """A hash value is not a 32-byte digest."""

    pass


class InvalidPositionError(WhitelistError, ValueError):
    """A position is neither LEFT nor RIGHT."""

    pass


class SerializationError(WhitelistError):
    """Malformed or oversized proof artifact or member list."""

    pass


class ConfigurationError(WhitelistError):
    """Unknown hash function or odd-level policy."""

    pass


class MembershipDeniedError(WhitelistError):
    """Caller failed a membership precondition."""

    pass
