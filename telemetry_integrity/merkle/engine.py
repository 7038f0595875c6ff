"""
Merkle Integrity Engine
Single entry point composing LeafEncoder -> TreeBuilder -> ProofEngine.

The engine holds configuration only; every call is pure and the only
value threaded between build() and prove() is the immutable MerkleTree.
"""
from __future__ import annotations

import logging
from typing import Sequence

from telemetry_integrity.config.runtime import IntegrityConfig, get_default_config
from telemetry_integrity.merkle.leaf_encoder import Leaf, LeafEncoder
from telemetry_integrity.merkle.merkle_proofs import HashLike, InclusionProof, ProofEngine
from telemetry_integrity.merkle.merkle_tree import MerkleTree, TreeBuilder
from telemetry_integrity.schemas.commitments import ProofRecord, TreeSummary
from telemetry_integrity.schemas.telemetry import TelemetrySegment

logger = logging.getLogger(__name__)


class MerkleIntegrityEngine:
    """
    Tamper-evident digests over telemetry segments.

    Example:
        >>> engine = MerkleIntegrityEngine()
        >>> tree = engine.build(segments)
        >>> proof = engine.prove(tree, 2)
        >>> engine.verify(tree.leaves[2].hash_hex, proof, tree.root_hex)
        True
    """

    def __init__(self, config: IntegrityConfig | None = None) -> None:
        self.config = config or get_default_config()
        self.encoder = LeafEncoder()
        self.builder = TreeBuilder(self.encoder, log_hash_prefix=self.config.log_hash_prefix)

    def encode(self, segment: TelemetrySegment, index: int) -> Leaf:
        return self.encoder.encode(segment, index)

    def build(self, segments: Sequence[TelemetrySegment]) -> MerkleTree:
        """
        Build a tree over segments.

        Raises:
            EmptyInputError: If segments is empty
        """
        return self.builder.build(segments)

    def summarize(self, segments: Sequence[TelemetrySegment]) -> TreeSummary:
        """Build a tree and return only its {rootHash, leafCount, depth} record."""
        return self.build(segments).to_summary()

    def prove(self, tree: MerkleTree, leaf_index: int) -> InclusionProof:
        """
        Raises:
            IndexOutOfRangeError: If leaf_index >= tree.leaf_count
        """
        return ProofEngine.prove(tree, leaf_index)

    def verify(
        self,
        leaf_hash: HashLike,
        proof: InclusionProof | ProofRecord | Sequence[HashLike],
        expected_root: HashLike,
    ) -> bool:
        """
        Check a leaf hash against a root. A mismatch returns False.

        Raises:
            MalformedProofError: If an input is not hash-shaped
        """
        ok = ProofEngine.verify(
            leaf_hash, proof, expected_root,
            strict_length=self.config.strict_proof_length,
        )
        if not ok:
            root_text = expected_root if isinstance(expected_root, str) else expected_root.hex()
            logger.debug(
                "Inclusion check failed against root %s",
                root_text[:self.config.log_hash_prefix],
            )
        return ok

    def verify_segment(
        self,
        segment: TelemetrySegment,
        leaf_index: int,
        proof: InclusionProof | ProofRecord | Sequence[HashLike],
        expected_root: HashLike,
    ) -> bool:
        """Encode a segment at its build index and verify it."""
        leaf = self.encode(segment, leaf_index)
        return self.verify(leaf.hash, proof, expected_root)


__all__ = ["MerkleIntegrityEngine"]
