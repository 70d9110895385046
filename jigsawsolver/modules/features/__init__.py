# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Feature Extraction Module
Public API for per-contour piece analysis.
"""

from jigsawsolver.modules.features.color import dominant_color
from jigsawsolver.modules.features.edge_classifier import (
    Side,
    classify_edges,
    classify_side,
)
from jigsawsolver.modules.features.geometry import (
    bounding_rect,
    centroid,
    classify_border,
    orientation_deg,
)
from jigsawsolver.modules.features.piece_analyzer import (
    analyze_contour,
    analyze_contours,
)

__all__ = [
    # Geometry
    "bounding_rect",
    "centroid",
    "orientation_deg",
    "classify_border",
    # Edge shape
    "Side",
    "classify_side",
    "classify_edges",
    # Color
    "dominant_color",
    # Orchestrator
    "analyze_contour",
    "analyze_contours",
]
