# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Contour Extractor
Finds outermost closed boundaries in the binary mask and drops the
ones too small to be a piece.

Only external contours are kept (RETR_EXTERNAL) — holes and printed
detail inside a piece never become pieces of their own. Points are
stored with CHAIN_APPROX_SIMPLE; the exact point count carries no
meaning downstream. Returned order follows OpenCV and is not significant.
"""

from __future__ import annotations

import cv2
import numpy as np

from jigsawsolver.config import get_settings
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


def filter_by_area(
    contours: list[np.ndarray],
    min_area: float,
) -> list[np.ndarray]:
    """Keep contours whose enclosed area is strictly greater than min_area."""
    return [c for c in contours if cv2.contourArea(c) > min_area]


def extract_contours(
    mask: np.ndarray,
    min_area: float | None = None,
) -> list[np.ndarray]:
    """
    Find external contours in a binary mask and filter by area.

    Args:
        mask:     uint8 binary mask from preprocess()
        min_area: Noise cutoff in px². Defaults to config MIN_CONTOUR_AREA.

    Returns:
        List of OpenCV contours, each (N, 1, 2) int32.
    """
    if min_area is None:
        min_area = get_settings().min_contour_area

    contours, _ = cv2.findContours(
        mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE
    )
    kept = filter_by_area(list(contours), min_area)

    log.info(
        "contours_extracted",
        total=len(contours),
        kept=len(kept),
        min_area=min_area,
    )
    return kept
