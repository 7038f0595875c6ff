"""
Hashing Utilities
Basic SHA-256 and hex helpers for Merkle commitments.

This module provides:
- SHA-256 hashing for raw bytes
- Hex encoding/decoding for the external 64-char lowercase form

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Hashes are raw bytes internally; hex is only the interop form
- Hex decoding is strict: no 0x prefix, no uppercase, no whitespace
"""
from __future__ import annotations

import hashlib
import re

# SHA-256 digest size in bytes
HASH_LENGTH: int = 32

_HEX_HASH_RE = re.compile(r"[0-9a-f]{64}")


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(first: bytes, second: bytes) -> bytes:
    """Hash the concatenation of two byte sequences: sha256(first + second)."""
    return sha256(first + second)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hex string without prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        'deadbeef'
    """
    return data.hex()


def is_hash_hex(value: object) -> bool:
    """Check whether a value is a 64-char lowercase hex string."""
    return isinstance(value, str) and _HEX_HASH_RE.fullmatch(value) is not None


def from_hex(hex_string: str) -> bytes:
    """
    Convert a 64-char lowercase hex string to a 32-byte hash.

    Args:
        hex_string: Hex string as produced by to_hex()

    Returns:
        Decoded 32 bytes

    Raises:
        ValueError: If the string is not exactly 64 lowercase hex characters

    Example:
        >>> len(from_hex("00" * 32))
        32
    """
    if not is_hash_hex(hex_string):
        preview = hex_string[:10] if isinstance(hex_string, str) else type(hex_string).__name__
        raise ValueError(
            f"Expected {HASH_LENGTH * 2} lowercase hex characters, got: {preview}..."
        )
    return bytes.fromhex(hex_string)


__all__ = [
    "HASH_LENGTH",
    "sha256",
    "hash_concat",
    "to_hex",
    "is_hash_hex",
    "from_hex",
]
