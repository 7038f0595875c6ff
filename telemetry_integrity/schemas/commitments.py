"""
Schemas & Canonicalization
File: commitments.py

Purpose: Wire records handed to the anchoring and auditing collaborators.
All hashes are 64-character lowercase hex without a 0x prefix.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

HEX_HASH_PATTERN = r"^[0-9a-f]{64}$"

HexHash = Annotated[str, Field(pattern=HEX_HASH_PATTERN)]


class TreeSummary(BaseModel):
    """The value an anchoring collaborator persists or publishes."""

    model_config = ConfigDict(
        extra="forbid", frozen=True, populate_by_name=True, serialize_by_alias=True
    )

    root_hash: HexHash = Field(..., alias="rootHash", description="Merkle root")
    leaf_count: int = Field(..., alias="leafCount", ge=1, description="Number of segments")
    depth: int = Field(..., ge=0, description="Number of folding steps")


class TreeStats(BaseModel):
    """Shape statistics for a built tree."""

    model_config = ConfigDict(
        extra="forbid", frozen=True, populate_by_name=True, serialize_by_alias=True
    )

    leaf_count: int = Field(..., alias="leafCount", ge=1)
    depth: int = Field(..., ge=0)
    root_hash: HexHash = Field(..., alias="rootHash")
    total_nodes: int = Field(
        ...,
        alias="totalNodes",
        ge=1,
        description="Hashes held in the level cache, leaves and root included",
    )


class ProofRecord(BaseModel):
    """
    Transportable inclusion proof.

    Carries the leaf index and leaf count from build time so a verifier
    without the live tree can replay the duplicate-last-node rule.
    """

    model_config = ConfigDict(
        extra="forbid", frozen=True, populate_by_name=True, serialize_by_alias=True
    )

    leaf_index: int = Field(..., alias="leafIndex", ge=0)
    leaf_count: int = Field(..., alias="leafCount", ge=1)
    siblings: list[HexHash] = Field(
        default_factory=list,
        description="Sibling hashes from the leaf level up to, excluding, the root",
    )

    @model_validator(mode="after")
    def _index_within_count(self) -> "ProofRecord":
        if self.leaf_index >= self.leaf_count:
            raise ValueError(
                f"leafIndex {self.leaf_index} must be less than leafCount {self.leaf_count}"
            )
        return self
