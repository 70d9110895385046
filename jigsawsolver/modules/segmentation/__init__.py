# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Segmentation Module
Public API for the contour extraction stage.
"""

from jigsawsolver.modules.segmentation.contour_extractor import (
    extract_contours,
    filter_by_area,
)

__all__ = [
    "extract_contours",
    "filter_by_area",
]
