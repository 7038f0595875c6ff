"""
Integrity Engine Tests
Tests for telemetry_integrity/merkle/engine.py

End-to-end behaviour of the composed LeafEncoder -> TreeBuilder ->
ProofEngine pipeline, as an anchoring job and an auditor would use it.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from telemetry_integrity import (
    EmptyInputError,
    IndexOutOfRangeError,
    MalformedProofError,
    MerkleIntegrityEngine,
)
from telemetry_integrity.config.runtime import IntegrityConfig
from fixtures import make_segments


class TestBuildAndSummarize:

    def test_single_leaf_identity(self, engine, segment):
        tree = engine.build([segment])

        assert tree.root_hash == engine.encode(segment, 0).hash
        assert tree.depth == 0

    def test_summary_shape(self, engine, sample_segments):
        summary = engine.summarize(sample_segments)

        data = summary.model_dump(by_alias=True)
        assert set(data) == {"rootHash", "leafCount", "depth"}
        assert data["leafCount"] == 3
        assert data["depth"] == 2
        assert len(data["rootHash"]) == 64

    def test_empty_build_raises(self, engine):
        with pytest.raises(EmptyInputError):
            engine.build([])

    def test_build_logs_root_prefix(self, sample_segments, caplog):
        engine = MerkleIntegrityEngine(IntegrityConfig(log_hash_prefix=10))

        with caplog.at_level("INFO"):
            tree = engine.build(sample_segments)

        assert tree.root_hex[:10] in caplog.text
        assert tree.root_hex[:11] not in caplog.text


class TestProveAndVerify:

    def test_auditor_flow_with_hex_only(self, engine, sample_segments):
        """An auditor holds only hex values from the wire."""
        tree = engine.build(sample_segments)
        record = engine.prove(tree, 2).to_record().model_dump(by_alias=True)
        root_hex = engine.summarize(sample_segments).root_hash
        leaf_hex = engine.encode(sample_segments[2], 2).hash_hex

        assert engine.verify(leaf_hex, record["siblings"], root_hex) is True

    def test_verify_segment(self, engine, sample_segments):
        tree = engine.build(sample_segments)
        proof = engine.prove(tree, 1)

        assert engine.verify_segment(sample_segments[1], 1, proof, tree.root_hex)

    def test_tampered_segment_returns_false(self, engine, sample_segments, caplog):
        tree = engine.build(sample_segments)
        proof = engine.prove(tree, 1)
        forged = sample_segments[1].model_copy(update={"distance": 999.0})

        with caplog.at_level("DEBUG", logger="telemetry_integrity"):
            assert engine.verify_segment(forged, 1, proof, tree.root_hex) is False

        assert "Inclusion check failed" in caplog.text

    def test_failed_check_not_logged_at_info(self, engine, sample_segments, caplog):
        tree = engine.build(sample_segments)
        proof = engine.prove(tree, 0)

        with caplog.at_level("INFO", logger="telemetry_integrity"):
            assert engine.verify(tree.leaf_hashes[1], proof, tree.root_hash) is False

        assert "Inclusion check failed" not in caplog.text

    def test_prove_out_of_range(self, engine, sample_segments):
        tree = engine.build(sample_segments)

        with pytest.raises(IndexOutOfRangeError):
            engine.prove(tree, tree.leaf_count)

    def test_malformed_proof(self, engine, sample_segments):
        tree = engine.build(sample_segments)

        with pytest.raises(MalformedProofError):
            engine.verify(tree.leaves[0].hash_hex, ["wrong", "proof", "hashes"], tree.root_hex)

    def test_strict_length_follows_config(self, sample_segments):
        lenient = MerkleIntegrityEngine(IntegrityConfig(strict_proof_length=False))
        strict = MerkleIntegrityEngine(IntegrityConfig(strict_proof_length=True))
        tree = strict.build(sample_segments)
        proof = strict.prove(tree, 0)
        short = type(proof)(leaf_index=0, leaf_count=3, siblings=proof.siblings[:1])

        assert lenient.verify(tree.leaf_hashes[0], short, tree.root_hash) is False
        with pytest.raises(MalformedProofError):
            strict.verify(tree.leaf_hashes[0], short, tree.root_hash)

    def test_default_config_used(self, clean_env):
        engine = MerkleIntegrityEngine()

        assert engine.config == IntegrityConfig()


class TestConcurrentUse:
    """A built tree is shared read-only across threads."""

    def test_parallel_proofs(self, engine):
        segments = make_segments(33)
        tree = engine.build(segments)

        def check(i: int) -> bool:
            proof = engine.prove(tree, i)
            return engine.verify(tree.leaf_hashes[i], proof, tree.root_hash)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(check, range(len(segments))))

        assert all(results)

    def test_parallel_builds_agree(self, engine):
        segments = make_segments(20)

        with ThreadPoolExecutor(max_workers=4) as pool:
            roots = list(pool.map(lambda _: engine.build(segments).root_hash, range(8)))

        assert len(set(roots)) == 1
