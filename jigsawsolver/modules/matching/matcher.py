# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Pairwise Matcher
Scores every unordered pair of pieces from one run and returns the
pairs above the confidence threshold, best first.

  1. For each i < j: color / edge / shape scores (scoring.py)
  2. Combined confidence = 0.3·color + 0.5·edge + 0.2·shape
  3. Keep pairs with confidence ≥ min_confidence
  4. Stable sort by descending confidence; ties keep discovery
     order (i ascending, then j ascending)

Pure function of its inputs; O(n²) in the piece count.
"""

from __future__ import annotations

from collections.abc import Sequence

from jigsawsolver.config import get_settings
from jigsawsolver.models.piece import MatchType, PieceMatch, PuzzlePiece
from jigsawsolver.modules.matching.scoring import (
    color_score,
    combine_scores,
    edge_score,
    shape_score,
)
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


def score_pair(piece1: PuzzlePiece, piece2: PuzzlePiece) -> PieceMatch:
    """Unfiltered combined score for one pair."""
    color = color_score(piece1, piece2)
    edge = edge_score(piece1, piece2)
    shape = shape_score(piece1, piece2)

    return PieceMatch(
        piece1=piece1,
        piece2=piece2,
        confidence=combine_scores(color, edge, shape),
        match_type=MatchType.COMBINED,
        color_score=max(0.0, min(100.0, color)),
        edge_score=edge,
        shape_score=shape,
    )


def find_matches(
    pieces: Sequence[PuzzlePiece],
    min_confidence: float | None = None,
) -> list[PieceMatch]:
    """
    Rank all unordered piece pairs by combined confidence.

    Args:
        pieces:         Pieces from a single run
        min_confidence: Inclusive cutoff on 0–100. Defaults to config MIN_CONFIDENCE.

    Returns:
        PieceMatch list sorted by descending confidence. Empty for
        fewer than two pieces.
    """
    if min_confidence is None:
        min_confidence = get_settings().min_confidence

    matches: list[PieceMatch] = []
    n = len(pieces)
    for i in range(n):
        for j in range(i + 1, n):
            match = score_pair(pieces[i], pieces[j])
            if match.confidence >= min_confidence:
                matches.append(match)

    matches.sort(key=lambda m: m.confidence, reverse=True)

    log.info(
        "matching_complete",
        n_pieces=n,
        pairs_scored=n * (n - 1) // 2,
        kept=len(matches),
        min_confidence=min_confidence,
        best=round(matches[0].confidence, 2) if matches else None,
    )
    return matches


def top_matches(matches: Sequence[PieceMatch], n: int | None = None) -> list[PieceMatch]:
    """Display prefix of an already ranked match list."""
    if n is None:
        n = get_settings().display_top_n
    return list(matches[:max(0, n)])
