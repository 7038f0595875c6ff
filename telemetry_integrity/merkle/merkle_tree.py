"""
Merkle Tree Builder
Deterministic tree construction over telemetry segments.

This module provides:
- combine(): the parent-hash rule
- MerkleTree: immutable result owning the full level cache
- build_merkle_tree / build_from_leaf_hashes: bottom-up folding
- compute_tree_depth: depth for a leaf count without building

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: see leaf_encoder (sha256 of the canonical payload)
2. Parent hashing: parent = sha256(min(a, b) + max(a, b)) on raw bytes,
   so combine(a, b) == combine(b, a)
3. Padding rule: an odd level pairs its last node with itself
4. Empty input: rejected with EmptyInputError
5. Single leaf: root = leaf, depth = 0

Determinism Notes:
- Leaf order is the input order; this module never sorts leaves
- The tree keeps every level, so proofs never re-derive hashes
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from telemetry_integrity.crypto.hashing import HASH_LENGTH, hash_concat, to_hex
from telemetry_integrity.merkle.leaf_encoder import Leaf, LeafEncoder
from telemetry_integrity.schemas.commitments import TreeStats, TreeSummary
from telemetry_integrity.schemas.errors import EmptyInputError
from telemetry_integrity.schemas.telemetry import TelemetrySegment

logger = logging.getLogger(__name__)

# levels[0] is the leaf row, levels[-1] == (root,)
LevelCache = tuple[tuple[bytes, ...], ...]


def combine(a: bytes, b: bytes) -> bytes:
    """
    Compute the parent hash of two sibling hashes.

    The pair is ordered by byte value before concatenation, which makes
    the rule commutative. A proof therefore binds a leaf to a path of
    hashes but not to a left/right position within each pair.

    Args:
        a: One child hash
        b: The other child hash

    Returns:
        Parent hash (32 bytes)
    """
    if a <= b:
        return hash_concat(a, b)
    return hash_concat(b, a)


def fold_level(level: Sequence[bytes]) -> tuple[bytes, ...]:
    """
    Fold one level into the next.

    Example: [a, b, c] -> [combine(a, b), combine(c, c)]
    """
    parents: list[bytes] = []
    for i in range(0, len(level), 2):
        left = level[i]
        # Duplicate last node if odd
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(combine(left, right))
    return tuple(parents)


def build_levels(leaf_hashes: Sequence[bytes]) -> LevelCache:
    """Fold leaf hashes until a single root remains, keeping every level."""
    if len(leaf_hashes) == 0:
        raise EmptyInputError()

    levels: list[tuple[bytes, ...]] = [tuple(leaf_hashes)]
    while len(levels[-1]) > 1:
        levels.append(fold_level(levels[-1]))
    return tuple(levels)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of folding steps for a leaf count.

    Equals ceil(log2(n)) for n > 1 and 0 for a single leaf.

    Raises:
        EmptyInputError: If num_leaves is less than 1
    """
    if num_leaves < 1:
        raise EmptyInputError(
            f"A Merkle tree needs at least one leaf, got {num_leaves}",
            details={"leaf_count": num_leaves},
        )
    return (num_leaves - 1).bit_length()


@dataclass(frozen=True)
class MerkleTree:
    """
    An immutable Merkle tree.

    Owns the level cache needed to answer proof queries for its lifetime.
    There is no mutation API; safe to share read-only between threads.

    Attributes:
        levels: Hash rows from leaves (levels[0]) up to the root
        leaves: Encoded leaves, empty when built from bare leaf hashes
    """
    levels: LevelCache
    leaves: tuple[Leaf, ...] = field(default=())

    @property
    def root_hash(self) -> bytes:
        return self.levels[-1][0]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root_hash)

    @property
    def leaf_count(self) -> int:
        return len(self.levels[0])

    @property
    def depth(self) -> int:
        return len(self.levels) - 1

    @property
    def leaf_hashes(self) -> tuple[bytes, ...]:
        return self.levels[0]

    def to_summary(self) -> TreeSummary:
        """The {rootHash, leafCount, depth} record for anchoring."""
        return TreeSummary(
            root_hash=self.root_hex,
            leaf_count=self.leaf_count,
            depth=self.depth,
        )

    def stats(self) -> TreeStats:
        """Shape statistics; total_nodes counts every cached hash."""
        return TreeStats(
            leaf_count=self.leaf_count,
            depth=self.depth,
            root_hash=self.root_hex,
            total_nodes=sum(len(level) for level in self.levels),
        )


def build_from_leaf_hashes(leaf_hashes: Sequence[bytes]) -> MerkleTree:
    """
    Build a tree over pre-computed 32-byte leaf hashes.

    Raises:
        EmptyInputError: If leaf_hashes is empty
        ValueError: If any hash is not 32 bytes
    """
    for i, leaf_hash in enumerate(leaf_hashes):
        if not isinstance(leaf_hash, bytes) or len(leaf_hash) != HASH_LENGTH:
            raise ValueError(f"Leaf hash at index {i} must be {HASH_LENGTH} bytes")
    return MerkleTree(levels=build_levels(leaf_hashes))


def build_merkle_tree(
    segments: Sequence[TelemetrySegment],
    encoder: LeafEncoder | None = None,
) -> MerkleTree:
    """
    Build a Merkle tree from telemetry segments.

    Algorithm:
    1. Reject empty input
    2. Encode each segment with its input position as index
    3. Fold levels pairwise, duplicating the last node of odd levels
    4. Stop when one hash remains

    Args:
        segments: Non-empty ordered sequence of segments
        encoder: Leaf encoder to use (defaults to the current version)

    Returns:
        MerkleTree owning its level cache

    Raises:
        EmptyInputError: If segments is empty
        CanonicalizationError: If a segment cannot be encoded
    """
    if len(segments) == 0:
        raise EmptyInputError()

    encoder = encoder or LeafEncoder()
    leaves = tuple(encoder.encode_many(segments))
    return MerkleTree(
        levels=build_levels([leaf.hash for leaf in leaves]),
        leaves=leaves,
    )


class TreeBuilder:
    """
    Builds trees from segments and logs each build.

    Example:
        >>> tree = TreeBuilder().build(segments)
        >>> tree.leaf_count == len(segments)
        True
    """

    def __init__(self, encoder: LeafEncoder | None = None, log_hash_prefix: int = 16) -> None:
        self.encoder = encoder or LeafEncoder()
        self.log_hash_prefix = log_hash_prefix

    def build(self, segments: Sequence[TelemetrySegment]) -> MerkleTree:
        """Build a tree; see build_merkle_tree()."""
        tree = build_merkle_tree(segments, self.encoder)
        logger.info(
            "Built Merkle tree: %d leaves, depth=%d, root=%s",
            tree.leaf_count, tree.depth, tree.root_hex[:self.log_hash_prefix],
        )
        return tree

    def build_from_leaf_hashes(self, leaf_hashes: Sequence[bytes]) -> MerkleTree:
        """Build a tree over pre-computed leaf hashes; see build_from_leaf_hashes()."""
        tree = build_from_leaf_hashes(leaf_hashes)
        logger.info(
            "Built Merkle tree from leaf hashes: %d leaves, depth=%d, root=%s",
            tree.leaf_count, tree.depth, tree.root_hex[:self.log_hash_prefix],
        )
        return tree


__all__ = [
    "LevelCache",
    "MerkleTree",
    "TreeBuilder",
    "combine",
    "fold_level",
    "build_levels",
    "build_from_leaf_hashes",
    "build_merkle_tree",
    "compute_tree_depth",
]
