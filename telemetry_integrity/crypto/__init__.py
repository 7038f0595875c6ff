"""
Core cryptographic utilities.
"""
from .hashing import (
    HASH_LENGTH,
    sha256,
    hash_concat,
    to_hex,
    is_hash_hex,
    from_hex,
)

__all__ = [
    "HASH_LENGTH",
    "sha256",
    "hash_concat",
    "to_hex",
    "is_hash_hex",
    "from_hex",
]
