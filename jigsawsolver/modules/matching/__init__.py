# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Matching Module
Public API for pairwise piece scoring.
"""

from jigsawsolver.modules.matching.matcher import (
    find_matches,
    score_pair,
    top_matches,
)
from jigsawsolver.modules.matching.scoring import (
    color_score,
    color_similarity,
    combine_scores,
    edge_score,
    edges_compatible,
    shape_score,
)

__all__ = [
    # Scoring
    "color_similarity",
    "edges_compatible",
    "color_score",
    "edge_score",
    "shape_score",
    "combine_scores",
    # Matcher
    "score_pair",
    "find_matches",
    "top_matches",
]
