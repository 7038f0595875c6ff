"""
Leaf Encoder
Turns a telemetry segment into its canonical payload and leaf hash.

Canonical Leaf Rules (encoding "v1", Hard Contract):
1. Payload is a compact JSON object with keys in this fixed order:
   index, startTime, endTime, distance, rawDataReference
2. Timestamps: ISO-8601 UTC, millisecond precision, Z suffix
3. Distance: ECMAScript-style shortest number text
4. rawDataReference: string or null
5. Leaf hash: sha256(payload.encode("utf-8"))

Changing any of these rules changes every historical root.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from telemetry_integrity.crypto.hashing import sha256, to_hex
from telemetry_integrity.schemas.canonical import dumps_canonical_fields
from telemetry_integrity.schemas.errors import CanonicalizationError
from telemetry_integrity.schemas.telemetry import TelemetrySegment
from telemetry_integrity.schemas.versioning import (
    LEAF_ENCODING_VERSION,
    LeafEncodingVersion,
    assert_supported_encoding_version,
)

# Fixed payload field order
LEAF_FIELD_ORDER: tuple[str, ...] = (
    "index",
    "startTime",
    "endTime",
    "distance",
    "rawDataReference",
)


@dataclass(frozen=True)
class Leaf:
    """
    A hashed telemetry segment.

    Attributes:
        index: Position of the segment in the build input
        hash: SHA-256 of the canonical payload (32 bytes)
        canonical_payload: The exact UTF-8 bytes that were hashed
    """
    index: int
    hash: bytes
    canonical_payload: bytes

    @property
    def hash_hex(self) -> str:
        return to_hex(self.hash)


def canonical_payload(segment: TelemetrySegment, index: int) -> bytes:
    """Build the canonical UTF-8 payload for a segment at an index."""
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise CanonicalizationError(
            f"Leaf index must be a non-negative integer, got {index!r}",
            details={"path": "index"},
        )

    values = (
        index,
        segment.start_time,
        segment.end_time,
        segment.distance,
        segment.raw_data_reference,
    )
    return dumps_canonical_fields(list(zip(LEAF_FIELD_ORDER, values))).encode("utf-8")


class LeafEncoder:
    """
    Encodes segments into leaves.

    Stateless apart from the pinned encoding version; one instance can be
    shared freely.

    Example:
        >>> leaf = LeafEncoder().encode(segment, 0)
        >>> len(leaf.hash)
        32
    """

    def __init__(self, version: LeafEncodingVersion = LEAF_ENCODING_VERSION) -> None:
        assert_supported_encoding_version(version)
        self.version = version

    def encode(self, segment: TelemetrySegment, index: int) -> Leaf:
        """
        Encode one segment.

        Args:
            segment: The segment to encode
            index: Its position in the build input

        Returns:
            Leaf with index, hash and canonical payload

        Raises:
            CanonicalizationError: If a field cannot be canonically rendered
        """
        payload = canonical_payload(segment, index)
        return Leaf(index=index, hash=sha256(payload), canonical_payload=payload)

    def encode_many(self, segments: Iterable[TelemetrySegment]) -> list[Leaf]:
        """Encode segments in order, using each position as its index."""
        return [self.encode(segment, i) for i, segment in enumerate(segments)]


def encode_leaf(segment: TelemetrySegment, index: int) -> Leaf:
    """Encode one segment with the current encoding version."""
    return LeafEncoder().encode(segment, index)


__all__ = [
    "LEAF_FIELD_ORDER",
    "Leaf",
    "LeafEncoder",
    "canonical_payload",
    "encode_leaf",
]
