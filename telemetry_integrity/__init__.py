"""
Telemetry Integrity

Merkle-tree digests over vehicle telemetry segments and inclusion proofs
that a segment belongs to a published digest.
"""

from telemetry_integrity.merkle import (
    InclusionProof,
    Leaf,
    MerkleIntegrityEngine,
    MerkleTree,
)
from telemetry_integrity.schemas import (
    EmptyInputError,
    IndexOutOfRangeError,
    MalformedProofError,
    TelemetrySegment,
)

__version__ = "0.1.0"

__all__ = [
    "EmptyInputError",
    "InclusionProof",
    "IndexOutOfRangeError",
    "Leaf",
    "MalformedProofError",
    "MerkleIntegrityEngine",
    "MerkleTree",
    "TelemetrySegment",
]
