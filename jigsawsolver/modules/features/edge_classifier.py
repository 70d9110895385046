# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Edge Shape Classifier
Labels each side of a piece FLAT, TAB or HOLE from its contour points.

Per side:
  1. Bucket the contour points lying in the outer quarter of the
     bounding box on that side (corner points may land in two buckets)
  2. Empty bucket → FLAT
  3. Variance of the perpendicular coordinate < 10 → FLAT
  4. Any point more than 5 px past the bucket mean in the outward
     direction → TAB, otherwise HOLE

Sides are image-axis sides of the bounding box. The piece's estimated
rotation is not corrected for before bucketing.
"""

from __future__ import annotations

from enum import IntEnum

import numpy as np

from jigsawsolver.models.piece import EdgeFeature

# Outer-quarter split of the bounding box
_NEAR_FRACTION = 0.25
_FAR_FRACTION = 0.75

# Perpendicular-coordinate variance below this means a straight side
_FLAT_VARIANCE_THRESHOLD = 10.0

# Outward excursion past the side mean needed to call a protrusion
_TAB_DEVIATION_PX = 5.0


class Side(IntEnum):
    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


def side_points(
    points: np.ndarray,
    bbox: tuple[int, int, int, int],
    side: Side,
) -> np.ndarray:
    """Contour points (M, 2) belonging to one side's bucket."""
    x, y, w, h = bbox
    xs = points[:, 0]
    ys = points[:, 1]

    if side == Side.TOP:
        keep = ys < y + h * _NEAR_FRACTION
    elif side == Side.RIGHT:
        keep = xs > x + w * _FAR_FRACTION
    elif side == Side.BOTTOM:
        keep = ys > y + h * _FAR_FRACTION
    else:
        keep = xs < x + w * _NEAR_FRACTION
    return points[keep]


def classify_side(
    points: np.ndarray,
    bbox: tuple[int, int, int, int],
    side: Side,
) -> EdgeFeature:
    """Classify one side of the contour. points is (N, 2) float."""
    pts = side_points(points, bbox, side)
    if len(pts) == 0:
        return EdgeFeature.FLAT

    # Perpendicular coordinate: y for horizontal sides, x for vertical ones
    axis = 1 if side in (Side.TOP, Side.BOTTOM) else 0
    coords = pts[:, axis]
    mean = float(coords.mean())
    variance = float(np.mean((coords - mean) ** 2))

    if variance < _FLAT_VARIANCE_THRESHOLD:
        return EdgeFeature.FLAT

    if side == Side.TOP:
        protrudes = bool(np.any(coords < mean - _TAB_DEVIATION_PX))
    elif side == Side.RIGHT:
        protrudes = bool(np.any(coords > mean + _TAB_DEVIATION_PX))
    elif side == Side.BOTTOM:
        protrudes = bool(np.any(coords > mean + _TAB_DEVIATION_PX))
    else:
        protrudes = bool(np.any(coords < mean - _TAB_DEVIATION_PX))

    return EdgeFeature.TAB if protrudes else EdgeFeature.HOLE


def classify_edges(
    contour: np.ndarray,
    bbox: tuple[int, int, int, int],
) -> list[EdgeFeature]:
    """
    Classify all four sides.

    Args:
        contour: OpenCV contour (N, 1, 2) int32
        bbox:    (x, y, w, h) bounding rectangle of the contour

    Returns:
        [top, right, bottom, left]
    """
    points = contour.reshape(-1, 2).astype(np.float64)
    return [classify_side(points, bbox, side) for side in Side]
