"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

from .versioning import (
    LEAF_ENCODING_VERSION,
    SUPPORTED_LEAF_ENCODING_VERSIONS,
    LeafEncodingVersion,
    UnsupportedEncodingVersionError,
    assert_supported_encoding_version,
    is_compatible_encoding_version,
)

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_scalar,
    dumps_canonical_fields,
    ensure_utc,
    format_datetime_canonical,
    format_number_canonical,
)

from .errors import (
    CanonicalizationError,
    ConfigurationError,
    EmptyInputError,
    ErrorCodes,
    IndexOutOfRangeError,
    IntegrityError,
    IntegrityException,
    MalformedProofError,
)

from .telemetry import TelemetrySegment

from .commitments import (
    HexHash,
    ProofRecord,
    TreeStats,
    TreeSummary,
)

__all__ = [
    # Versioning
    "LEAF_ENCODING_VERSION",
    "SUPPORTED_LEAF_ENCODING_VERSIONS",
    "LeafEncodingVersion",
    "UnsupportedEncodingVersionError",
    "assert_supported_encoding_version",
    "is_compatible_encoding_version",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_scalar",
    "dumps_canonical_fields",
    "ensure_utc",
    "format_datetime_canonical",
    "format_number_canonical",
    # Errors
    "CanonicalizationError",
    "ConfigurationError",
    "EmptyInputError",
    "ErrorCodes",
    "IndexOutOfRangeError",
    "IntegrityError",
    "IntegrityException",
    "MalformedProofError",
    # Models
    "TelemetrySegment",
    "HexHash",
    "ProofRecord",
    "TreeStats",
    "TreeSummary",
]
