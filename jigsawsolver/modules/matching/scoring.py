# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Pair Scoring
The three component signals for a pair of pieces, each on a 0–100 scale,
and their fixed-weight combination.

  color  — Euclidean distance between dominant colors
  edge   — share of the 16 (slot, slot) pairings that could interlock
  shape  — bounding-box size and rotation agreement
"""

from __future__ import annotations

import math

from jigsawsolver.models.piece import EdgeFeature, PuzzlePiece

COLOR_WEIGHT = 0.3
EDGE_WEIGHT = 0.5
SHAPE_WEIGHT = 0.2

_MAX_COLOR_DISTANCE = math.sqrt(3 * 255 ** 2)

_DIMENSION_WEIGHT = 0.6
_ROTATION_WEIGHT = 0.4

_COMPATIBLE_EDGES: frozenset[tuple[EdgeFeature, EdgeFeature]] = frozenset({
    (EdgeFeature.TAB, EdgeFeature.HOLE),
    (EdgeFeature.HOLE, EdgeFeature.TAB),
    (EdgeFeature.FLAT, EdgeFeature.FLAT),
})


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def color_similarity(
    color1: tuple[int, int, int],
    color2: tuple[int, int, int],
) -> float:
    """
    100 for identical colors, 0 for black vs white.
    Scaled by the largest possible RGB distance, sqrt(3·255²).
    """
    dr = color1[0] - color2[0]
    dg = color1[1] - color2[1]
    db = color1[2] - color2[2]
    distance = math.sqrt(dr * dr + dg * dg + db * db)
    return (1.0 - distance / _MAX_COLOR_DISTANCE) * 100.0


def edges_compatible(edge1: EdgeFeature, edge2: EdgeFeature) -> bool:
    """TAB fits HOLE (either way round); FLAT sits next to FLAT."""
    return (edge1, edge2) in _COMPATIBLE_EDGES


def color_score(piece1: PuzzlePiece, piece2: PuzzlePiece) -> float:
    return color_similarity(piece1.dominant_color, piece2.dominant_color)


def edge_score(piece1: PuzzlePiece, piece2: PuzzlePiece) -> float:
    """
    Percentage of compatible pairings over all 16 slot combinations.
    Every combination is checked because which sides actually touch
    after rotation is unknown.
    """
    checks = 0
    compatible = 0
    for e1 in piece1.edges:
        for e2 in piece2.edges:
            checks += 1
            if edges_compatible(e1, e2):
                compatible += 1
    return (compatible / checks) * 100.0 if checks else 0.0


def _relative_diff(a: float, b: float) -> float:
    """|a − b| / max(a, b); a zero denominator counts as maximally different."""
    denom = max(a, b)
    if denom <= 0:
        return 1.0
    return abs(a - b) / denom


def shape_score(piece1: PuzzlePiece, piece2: PuzzlePiece) -> float:
    width_diff = _relative_diff(piece1.width, piece2.width)
    height_diff = _relative_diff(piece1.height, piece2.height)
    rotation_diff = abs(piece1.rotation - piece2.rotation) / 180.0

    dimension = 1.0 - (width_diff + height_diff) / 2.0
    rotation = 1.0 - rotation_diff

    return _clamp(
        (dimension * _DIMENSION_WEIGHT + rotation * _ROTATION_WEIGHT) * 100.0
    )


def combine_scores(color: float, edge: float, shape: float) -> float:
    """Weighted 0.3 / 0.5 / 0.2 blend, clamped into [0, 100]."""
    return _clamp(
        color * COLOR_WEIGHT + edge * EDGE_WEIGHT + shape * SHAPE_WEIGHT
    )
