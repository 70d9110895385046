# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Piece Data Models
Pydantic models for one detected puzzle piece and one scored pair.
Both are frozen: a run builds them once and never mutates them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EdgeType(str, Enum):
    BORDER = "border"
    INTERIOR = "interior"


class EdgeFeature(str, Enum):
    FLAT = "flat"    # straight side
    TAB = "tab"      # outward protrusion
    HOLE = "hole"    # inward indentation


class MatchType(str, Enum):
    COLOR_SIMILARITY = "color_similarity"
    EDGE_COMPATIBILITY = "edge_compatibility"
    SHAPE_SIMILARITY = "shape_similarity"
    COMBINED = "combined"


class PuzzlePiece(BaseModel):
    """
    A single piece detected in one analysis run.

    Edge slots are in image-axis terms (top/right/bottom/left of the
    bounding box), not piece-relative: rotation is estimated, never
    corrected.

    Equality is identity plus raw content: piece_id, puzzle_id and a
    byte-wise comparison of image_data. Derived features never take part.
    """
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    piece_id: int = Field(..., ge=0, description="Extraction index within the run")
    puzzle_id: str = Field(..., description="Analysis run grouping id")
    # PNG-encoded bounding-box crop of the source image
    image_data: bytes = Field(..., repr=False)

    center_x: float
    center_y: float
    width: float = Field(..., ge=0.0)
    height: float = Field(..., ge=0.0)
    rotation: float = Field(..., gt=-90.0, le=90.0, description="Principal axis, degrees")

    edge_type: EdgeType
    top_edge: EdgeFeature
    right_edge: EdgeFeature
    bottom_edge: EdgeFeature
    left_edge: EdgeFeature

    dominant_color_r: int = Field(..., ge=0, le=255)
    dominant_color_g: int = Field(..., ge=0, le=255)
    dominant_color_b: int = Field(..., ge=0, le=255)

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def edges(self) -> tuple[EdgeFeature, EdgeFeature, EdgeFeature, EdgeFeature]:
        """The four edge slots in fixed order: top, right, bottom, left."""
        return (self.top_edge, self.right_edge, self.bottom_edge, self.left_edge)

    @property
    def dominant_color(self) -> tuple[int, int, int]:
        return (self.dominant_color_r, self.dominant_color_g, self.dominant_color_b)

    def content_key(self) -> tuple[str, bytes]:
        """Secondary key for deduplicating identical crops within a puzzle."""
        return (self.puzzle_id, self.image_data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzlePiece):
            return NotImplemented
        return (
            self.piece_id == other.piece_id
            and self.puzzle_id == other.puzzle_id
            and self.image_data == other.image_data
        )

    def __hash__(self) -> int:
        return hash((self.piece_id, self.puzzle_id, self.image_data))


class PieceMatch(BaseModel):
    """
    A scored, unordered pair of pieces from the same run.
    Component scores are kept alongside the combined confidence.
    """
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64")

    piece1: PuzzlePiece
    piece2: PuzzlePiece
    confidence: float = Field(..., ge=0.0, le=100.0)
    match_type: MatchType = MatchType.COMBINED

    color_score: float = Field(0.0, ge=0.0, le=100.0)
    edge_score: float = Field(0.0, ge=0.0, le=100.0)
    shape_score: float = Field(0.0, ge=0.0, le=100.0)

    def to_summary(self) -> dict:
        """Compact form for API responses: piece ids instead of full records."""
        return {
            "piece1_id": self.piece1.piece_id,
            "piece2_id": self.piece2.piece_id,
            "confidence": round(self.confidence, 2),
            "match_type": self.match_type.value,
            "color_score": round(self.color_score, 2),
            "edge_score": round(self.edge_score, 2),
            "shape_score": round(self.shape_score, 2),
        }


def piece_summary(piece: PuzzlePiece) -> dict:
    """Serialise a piece without its image bytes."""
    data = piece.model_dump(mode="json", exclude={"image_data"})
    data["image_bytes"] = len(piece.image_data)
    return data
