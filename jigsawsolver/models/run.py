# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Analysis Run Models
Tracks the lifecycle of one photo analysis from submission to a
terminal state. Used by the RunStore, the AnalysisService and the
status endpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from jigsawsolver.models.piece import PieceMatch, PuzzlePiece, piece_summary


class AnalysisStatus(str, Enum):
    """Outcome of a completed pipeline call."""
    SUCCESS = "success"
    NO_PIECES = "no_pieces"


class RunStatus(str, Enum):
    QUEUED = "queued"
    ANALYZING = "analyzing"
    SUCCESS = "success"
    NO_PIECES = "no_pieces"
    FAILED = "failed"
    CANCELLED = "cancelled"
    # A newer submission started after this one; its result was discarded
    SUPERSEDED = "superseded"


TERMINAL_STATUSES: frozenset[RunStatus] = frozenset({
    RunStatus.SUCCESS,
    RunStatus.NO_PIECES,
    RunStatus.FAILED,
    RunStatus.CANCELLED,
    RunStatus.SUPERSEDED,
})

NO_PIECES_MESSAGE = "No puzzle pieces found"


class AnalysisResult(BaseModel):
    """Pieces and ranked matches produced by one pipeline call."""
    model_config = ConfigDict(frozen=True)

    puzzle_id: str
    status: AnalysisStatus
    pieces: tuple[PuzzlePiece, ...] = ()
    matches: tuple[PieceMatch, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.status == AnalysisStatus.NO_PIECES


class AnalysisRun(BaseModel):
    """Full run state record stored in the RunStore."""
    run_id: str
    puzzle_id: str
    # Monotonic submission counter; only the newest generation may publish
    generation: int = Field(0, ge=0)
    status: RunStatus = RunStatus.QUEUED
    error: Optional[str] = None
    result: Optional[AnalysisResult] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_status_response(self, top_n: int = 10) -> dict:
        """Serialise to the shape returned by GET /runs/{run_id}."""
        resp = {
            "run_id": self.run_id,
            "puzzle_id": self.puzzle_id,
            "generation": self.generation,
            "status": self.status.value,
            "error": self.error,
        }
        if self.result is not None:
            resp["piece_count"] = len(self.result.pieces)
            resp["match_count"] = len(self.result.matches)
            resp["pieces"] = [piece_summary(p) for p in self.result.pieces]
            resp["top_matches"] = [
                m.to_summary() for m in self.result.matches[:top_n]
            ]
        return resp


# ─── API Request/Response Schemas ────────────────────────────────────────────

class AnalyzeResponse(BaseModel):
    """Response body for POST /analyze."""
    run_id: str
    puzzle_id: str
    status: RunStatus = RunStatus.QUEUED
    message: str = "Analysis queued. Poll /runs/{run_id} for progress."
