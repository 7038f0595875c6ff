"""
Merkle Tree and Inclusion Proofs
Deterministic telemetry digests + proof generation/verification.

This module provides:
- LeafEncoder / Leaf: canonical segment encoding and leaf hashing
- TreeBuilder / MerkleTree: bottom-up folding with a full level cache
- ProofEngine / InclusionProof: proof generation and verification
- MerkleIntegrityEngine: the composed pipeline

Canonical Commitment Rules:
1. Leaf hashing: sha256 of the fixed-order canonical payload
2. Parent hashing: sha256(min(a, b) + max(a, b))
3. Padding: Duplicate last node if odd number at any level
4. Empty input: EmptyInputError
5. Single leaf: root = leaf, depth = 0

Usage:
    from telemetry_integrity.merkle import MerkleIntegrityEngine

    engine = MerkleIntegrityEngine()
    tree = engine.build(segments)
    proof = engine.prove(tree, index=2)
    assert engine.verify(tree.leaves[2].hash_hex, proof, tree.root_hex)
"""
from .leaf_encoder import (
    LEAF_FIELD_ORDER,
    Leaf,
    LeafEncoder,
    canonical_payload,
    encode_leaf,
)

from .merkle_tree import (
    LevelCache,
    MerkleTree,
    TreeBuilder,
    combine,
    fold_level,
    build_levels,
    build_from_leaf_hashes,
    build_merkle_tree,
    compute_tree_depth,
)

from .merkle_proofs import (
    HashLike,
    InclusionProof,
    ProofEngine,
    build_inclusion_proof,
    verify_inclusion,
    verify_segment,
)

from .engine import MerkleIntegrityEngine


__all__ = [
    # Leaves
    "LEAF_FIELD_ORDER",
    "Leaf",
    "LeafEncoder",
    "canonical_payload",
    "encode_leaf",
    # Tree
    "LevelCache",
    "MerkleTree",
    "TreeBuilder",
    "combine",
    "fold_level",
    "build_levels",
    "build_from_leaf_hashes",
    "build_merkle_tree",
    "compute_tree_depth",
    # Proofs
    "HashLike",
    "InclusionProof",
    "ProofEngine",
    "build_inclusion_proof",
    "verify_inclusion",
    "verify_segment",
    # Engine
    "MerkleIntegrityEngine",
]
