"""
Schemas & Canonicalization
File: versioning.py

Purpose: Centralize the leaf-encoding version constant.
This file must stay tiny and import nothing from other schema files
except the error taxonomy, to avoid circular dependencies.

Any change to the canonical leaf payload (field order, separators,
timestamp or number formatting) changes every root ever computed,
so it must ship as a new version rather than an edit of "v1".
"""

from typing import Literal

from .errors import CanonicalizationError

LeafEncodingVersion = Literal["v1"]

# Current canonical leaf encoding
LEAF_ENCODING_VERSION: LeafEncodingVersion = "v1"

SUPPORTED_LEAF_ENCODING_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedEncodingVersionError(CanonicalizationError):
    """Raised when an unsupported leaf encoding version is requested."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_LEAF_ENCODING_VERSIONS
        super().__init__(
            f"Unsupported leaf encoding version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}",
            details={"version": version, "supported": sorted(self.supported)},
        )


def assert_supported_encoding_version(version: str) -> None:
    """
    Validate that the given leaf encoding version is supported.

    Args:
        version: The encoding version string to validate.

    Raises:
        UnsupportedEncodingVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_LEAF_ENCODING_VERSIONS:
        raise UnsupportedEncodingVersionError(version)


def is_compatible_encoding_version(version: str) -> bool:
    """Check if an encoding version is compatible without raising."""
    return version in SUPPORTED_LEAF_ENCODING_VERSIONS
