"""
Hash function selection for tree construction and verification.

Precedence: explicit ``prefer`` argument, then the in-memory override,
then the MERKLE_WHITELIST_HASH environment variable, then the default.
"""

from __future__ import annotations

import os
from typing import Final

from .config import DEFAULT_HASH, HASH_ENV_VAR, SUPPORTED_HASHES
from .exceptions import ConfigurationError

_VALID_HASHES: Final[tuple[str, ...]] = SUPPORTED_HASHES
_DEFAULT_HASH: Final[str] = DEFAULT_HASH
_ENV_VAR_NAME: Final[str] = HASH_ENV_VAR

_hash_override: str | None = None


def _format_valid_options() -> str:
    return ", ".join(_VALID_HASHES)


def _normalize_hash(value: str | None) -> str | None:
    if value is None:
        return None

    if not isinstance(value, str):
        raise ConfigurationError(
            f"Invalid hash function: {value!r}. Valid options: {_format_valid_options()}"
        )

    value = value.strip().lower()
    if value == "":
        return None

    if value not in _VALID_HASHES:
        raise ConfigurationError(
            f"Invalid hash function: {value!r}. Valid options: {_format_valid_options()}"
        )

    return value


def get_hash_name(prefer: str | None = None) -> str:
    """
    Resolve the hash function name in precedence order.

    Args:
        prefer: Optional hash name chosen by the caller.

    Returns:
        Hash function name.

    Raises:
        ConfigurationError: If a provided hash name is invalid.
    """
    preferred = _normalize_hash(prefer)
    if preferred is not None:
        return preferred

    if _hash_override is not None:
        return _hash_override

    env_hash = _normalize_hash(os.getenv(_ENV_VAR_NAME))
    if env_hash is not None:
        return env_hash

    return _DEFAULT_HASH


def set_hash_name(value: str | None) -> None:
    """
    Set in-memory hash override (None or "" clears it).

    Raises:
        ConfigurationError: If the value is invalid.
    """
    global _hash_override
    _hash_override = _normalize_hash(value)
