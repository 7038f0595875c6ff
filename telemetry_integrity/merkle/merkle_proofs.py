"""
Merkle Proofs
Inclusion-proof generation from a built tree and stateless verification.

This module provides:
- InclusionProof: sibling path plus the leaf index/count context
- build_inclusion_proof: O(depth) proof from the tree's level cache
- verify_inclusion: recompute the root from a leaf and its proof
- verify_segment: encode a segment, then verify it
- ProofEngine: class-based interface over the functions above

Verification returns False on a root mismatch; it only raises
MalformedProofError when the inputs are not hash-shaped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from collections.abc import Sequence
from typing import Any, Union

from pydantic import ValidationError

from telemetry_integrity.crypto.hashing import HASH_LENGTH, from_hex, is_hash_hex, to_hex
from telemetry_integrity.merkle.leaf_encoder import LeafEncoder
from telemetry_integrity.merkle.merkle_tree import MerkleTree, combine, compute_tree_depth
from telemetry_integrity.schemas.commitments import ProofRecord
from telemetry_integrity.schemas.errors import IndexOutOfRangeError, MalformedProofError
from telemetry_integrity.schemas.telemetry import TelemetrySegment

logger = logging.getLogger(__name__)

HashLike = Union[str, bytes]


@dataclass(frozen=True)
class InclusionProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf_index: 0-based index of the leaf at build time
        leaf_count: Number of leaves in the tree at build time
        siblings: Sibling hashes from the leaf level up to, excluding, the root
    """
    leaf_index: int
    leaf_count: int
    siblings: tuple[bytes, ...]

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.leaf_count < 1:
            raise MalformedProofError(f"Leaf count must be positive, got {self.leaf_count}")
        if not 0 <= self.leaf_index < self.leaf_count:
            raise MalformedProofError(
                f"Leaf index {self.leaf_index} out of range for {self.leaf_count} leaves"
            )
        for i, sibling in enumerate(self.siblings):
            if not isinstance(sibling, bytes) or len(sibling) != HASH_LENGTH:
                raise MalformedProofError(
                    f"Sibling at position {i} must be {HASH_LENGTH} bytes",
                    position=i,
                )

    @property
    def sibling_hexes(self) -> list[str]:
        return [to_hex(s) for s in self.siblings]

    def to_record(self) -> ProofRecord:
        """Convert to the hex wire record."""
        return ProofRecord(
            leaf_index=self.leaf_index,
            leaf_count=self.leaf_count,
            siblings=self.sibling_hexes,
        )

    @classmethod
    def from_record(cls, record: ProofRecord | dict[str, Any]) -> "InclusionProof":
        """
        Parse a wire record (or its dict form) into a proof.

        Raises:
            MalformedProofError: If the record is missing fields or holds
                non-hash-shaped siblings
        """
        if record is None:
            raise MalformedProofError("Proof record is missing")
        if not isinstance(record, ProofRecord):
            try:
                record = ProofRecord.model_validate(record)
            except ValidationError as e:
                raise MalformedProofError(
                    f"Invalid proof record: {e.error_count()} validation error(s)",
                    details={"errors": e.errors(include_url=False, include_input=False)},
                ) from e
        return cls(
            leaf_index=record.leaf_index,
            leaf_count=record.leaf_count,
            siblings=tuple(from_hex(s) for s in record.siblings),
        )


def _coerce_hash(value: Any, label: str, position: int | None = None) -> bytes:
    """Accept 32 raw bytes or 64-char lowercase hex; anything else is malformed."""
    if isinstance(value, bytes) and len(value) == HASH_LENGTH:
        return value
    if is_hash_hex(value):
        return from_hex(value)
    raise MalformedProofError(
        f"{label} is not a {HASH_LENGTH}-byte hash or {HASH_LENGTH * 2}-char lowercase hex string",
        position=position,
        details={"type": type(value).__name__},
    )


def _coerce_siblings(proof: Any) -> tuple[bytes, ...]:
    if proof is None:
        raise MalformedProofError("Proof is missing")
    if isinstance(proof, (str, bytes)) or not isinstance(proof, Sequence):
        raise MalformedProofError(
            "Proof must be a sequence of hashes",
            details={"type": type(proof).__name__},
        )
    return tuple(
        _coerce_hash(entry, f"Proof entry {i}", position=i)
        for i, entry in enumerate(proof)
    )


def build_inclusion_proof(tree: MerkleTree, leaf_index: int) -> InclusionProof:
    """
    Generate an inclusion proof for the leaf at the given index.

    Algorithm:
    1. Start at the target leaf index on levels[0]
    2. At each level below the root:
       - Sibling is index ^ 1, or the node itself when it is the
         unpaired last node of an odd level
       - Move up: index = index // 2
    3. Stop below the root

    Args:
        tree: A built MerkleTree
        leaf_index: 0-based index of the leaf to prove

    Returns:
        InclusionProof with siblings ordered bottom-up

    Raises:
        IndexOutOfRangeError: If leaf_index is not in [0, leaf_count)
    """
    if isinstance(leaf_index, bool) or not isinstance(leaf_index, int):
        raise TypeError(f"Leaf index must be an int, got {type(leaf_index).__name__}")
    if leaf_index < 0 or leaf_index >= tree.leaf_count:
        raise IndexOutOfRangeError(leaf_index, tree.leaf_count)

    siblings: list[bytes] = []
    index = leaf_index
    for level in tree.levels[:-1]:
        sibling_index = index ^ 1
        if sibling_index >= len(level):
            sibling_index = index
        siblings.append(level[sibling_index])
        index //= 2

    return InclusionProof(
        leaf_index=leaf_index,
        leaf_count=tree.leaf_count,
        siblings=tuple(siblings),
    )


def verify_inclusion(
    leaf_hash: HashLike,
    proof: InclusionProof | ProofRecord | Sequence[HashLike],
    expected_root: HashLike,
    *,
    strict_length: bool = True,
) -> bool:
    """
    Verify a leaf is included under a root.

    Needs no tree: the leaf hash, the proof and the root are enough.

    Args:
        leaf_hash: Leaf hash (hex or 32 bytes)
        proof: InclusionProof, ProofRecord, or a plain sibling sequence
        expected_root: Claimed Merkle root (hex or 32 bytes)
        strict_length: When the proof carries a leaf count, require its
            sibling count to match the depth of such a tree

    Returns:
        True if the recomputed root equals expected_root, False otherwise

    Raises:
        MalformedProofError: If any input is absent or not hash-shaped
    """
    current = _coerce_hash(leaf_hash, "Leaf hash")
    root = _coerce_hash(expected_root, "Expected root")

    if isinstance(proof, ProofRecord):
        proof = InclusionProof.from_record(proof)

    if isinstance(proof, InclusionProof):
        siblings = proof.siblings
        expected_length = compute_tree_depth(proof.leaf_count)
        if strict_length and len(siblings) != expected_length:
            raise MalformedProofError(
                f"Proof has {len(siblings)} siblings, a tree of "
                f"{proof.leaf_count} leaves needs {expected_length}",
                details={"leaf_count": proof.leaf_count, "siblings": len(siblings)},
            )
    else:
        siblings = _coerce_siblings(proof)

    for sibling in siblings:
        current = combine(current, sibling)

    return current == root


def verify_segment(
    segment: TelemetrySegment,
    leaf_index: int,
    proof: InclusionProof | ProofRecord | Sequence[HashLike],
    expected_root: HashLike,
    *,
    encoder: LeafEncoder | None = None,
    strict_length: bool = True,
) -> bool:
    """
    Encode a segment at its build index and verify it against a root.

    A tampered field changes the leaf hash, so the result is False.
    """
    leaf = (encoder or LeafEncoder()).encode(segment, leaf_index)
    return verify_inclusion(leaf.hash, proof, expected_root, strict_length=strict_length)


class ProofEngine:
    """
    Class-based interface for proof generation and verification.

    Example:
        >>> proof = ProofEngine.prove(tree, 1)
        >>> ProofEngine.verify(tree.leaf_hashes[1], proof, tree.root_hash)
        True
    """

    @staticmethod
    def prove(tree: MerkleTree, leaf_index: int) -> InclusionProof:
        """Generate a proof; see build_inclusion_proof()."""
        proof = build_inclusion_proof(tree, leaf_index)
        logger.debug(
            "Generated inclusion proof: leaf=%d/%d, %d siblings",
            leaf_index, tree.leaf_count, len(proof.siblings),
        )
        return proof

    @staticmethod
    def verify(
        leaf_hash: HashLike,
        proof: InclusionProof | ProofRecord | Sequence[HashLike],
        expected_root: HashLike,
        *,
        strict_length: bool = True,
    ) -> bool:
        """Verify a proof; see verify_inclusion()."""
        ok = verify_inclusion(leaf_hash, proof, expected_root, strict_length=strict_length)
        if not ok:
            logger.debug("Inclusion proof did not reproduce the expected root")
        return ok

    @staticmethod
    def verify_segment(
        segment: TelemetrySegment,
        leaf_index: int,
        proof: InclusionProof | ProofRecord | Sequence[HashLike],
        expected_root: HashLike,
        *,
        strict_length: bool = True,
    ) -> bool:
        """Verify a segment; see verify_segment()."""
        return verify_segment(
            segment, leaf_index, proof, expected_root, strict_length=strict_length
        )


__all__ = [
    "HashLike",
    "InclusionProof",
    "ProofEngine",
    "build_inclusion_proof",
    "verify_inclusion",
    "verify_segment",
]
