"""
Common test fixtures shared by all modules.

Provides factory functions for telemetry segments and the small
trees used across the Merkle tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from telemetry_integrity.schemas.telemetry import TelemetrySegment


BASE_TIME = datetime(2025, 1, 1, 8, 0, 0, tzinfo=timezone.utc)


def make_segment(
    start_time: datetime = BASE_TIME,
    duration_minutes: int = 30,
    distance: float = 15.5,
    raw_data_reference: Optional[str] = "QmTest1",
) -> TelemetrySegment:
    """
    Create a TelemetrySegment for testing.

    Args:
        start_time: Segment start
        duration_minutes: Minutes until the segment ends
        distance: Distance covered
        raw_data_reference: Off-tree raw data pointer (None allowed)

    Returns:
        A frozen TelemetrySegment
    """
    return TelemetrySegment(
        start_time=start_time,
        end_time=start_time + timedelta(minutes=duration_minutes),
        distance=distance,
        raw_data_reference=raw_data_reference,
    )


def make_segments(count: int) -> list[TelemetrySegment]:
    """Create `count` distinct hourly segments."""
    return [
        make_segment(
            start_time=BASE_TIME + timedelta(hours=i),
            duration_minutes=20 + i,
            distance=10.0 + i * 1.25,
            raw_data_reference=f"QmTest{i}",
        )
        for i in range(count)
    ]


def make_sample_segments() -> list[TelemetrySegment]:
    """Three segments on one day; the last one is unpaired at the leaf level."""
    return [
        make_segment(
            start_time=datetime(2025, 1, 1, 8, 0, 0, tzinfo=timezone.utc),
            duration_minutes=30,
            distance=15.5,
            raw_data_reference="QmTest1",
        ),
        make_segment(
            start_time=datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc),
            duration_minutes=45,
            distance=25.2,
            raw_data_reference="QmTest2",
        ),
        make_segment(
            start_time=datetime(2025, 1, 1, 10, 30, 0, tzinfo=timezone.utc),
            duration_minutes=30,
            distance=12.8,
            raw_data_reference="QmTest3",
        ),
    ]
