"""
Test fixtures package for telemetry integrity tests.

Usage:
    from fixtures import make_segment, make_segments

    def test_something():
        tree = build_merkle_tree(make_segments(5))
"""

from .common import (
    BASE_TIME,
    make_segment,
    make_segments,
    make_sample_segments,
)

__all__ = [
    "BASE_TIME",
    "make_segment",
    "make_segments",
    "make_sample_segments",
]
