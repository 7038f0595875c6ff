"""
Schemas & Canonicalization
File: telemetry.py

Purpose: Input record supplied by the telemetry-ingestion collaborator.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .canonical import ensure_utc


class TelemetrySegment(BaseModel):
    """
    A time-bounded slice of a vehicle's mileage.

    The engine never mutates a segment; the model is frozen so a segment
    can be shared between threads and reused across builds.

    Accepts both snake_case names and the camelCase names used on the
    wire by the ingestion service (including the legacy ``rawDataCID``).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    start_time: datetime = Field(
        ...,
        alias="startTime",
        description="When the segment started (naive values are treated as UTC)",
    )
    end_time: datetime = Field(
        ...,
        alias="endTime",
        description="When the segment ended (naive values are treated as UTC)",
    )
    distance: float = Field(
        ...,
        allow_inf_nan=False,
        description="Distance covered during the segment",
    )
    raw_data_reference: str | None = Field(
        default=None,
        validation_alias=AliasChoices("raw_data_reference", "rawDataReference", "rawDataCID"),
        serialization_alias="rawDataReference",
        description="Opaque pointer to the off-tree raw data (e.g. a content identifier)",
    )

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)
