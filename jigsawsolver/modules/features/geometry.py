# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Piece Geometry
Bounding box, centroid, principal-axis orientation and border
classification for a single contour.
"""

from __future__ import annotations

import math

import cv2
import numpy as np

from jigsawsolver.models.piece import EdgeType

BBox = tuple[int, int, int, int]


def bounding_rect(contour: np.ndarray) -> BBox:
    """(x, y, w, h) of the upright bounding rectangle."""
    x, y, w, h = cv2.boundingRect(contour)
    return int(x), int(y), int(w), int(h)


def centroid(moments: dict) -> tuple[float, float] | None:
    """
    Centre of mass (m10/m00, m01/m00).
    Returns None for a zero-area (degenerate) region.
    """
    m00 = moments["m00"]
    if m00 == 0:
        return None
    return moments["m10"] / m00, moments["m01"] / m00


def orientation_deg(moments: dict) -> float:
    """
    Principal-axis angle of the region's second-order central moments:
    0.5 · atan2(2·mu11, mu20 − mu02), in degrees within (-90, 90].
    """
    angle = math.degrees(
        0.5 * math.atan2(2.0 * moments["mu11"], moments["mu20"] - moments["mu02"])
    )
    # atan2(-0.0, negative) yields -π; the same axis is +90°
    if angle <= -90.0:
        angle += 180.0
    return angle


def classify_border(
    bbox: BBox,
    image_shape: tuple[int, ...],
    margin: int = 10,
) -> EdgeType:
    """
    BORDER when the bounding box comes within `margin` px of any image
    edge, else INTERIOR. Stands in for tray-edge detection.
    """
    x, y, w, h = bbox
    ih, iw = image_shape[:2]

    near_left = x < margin
    near_top = y < margin
    near_right = (x + w) > (iw - margin)
    near_bottom = (y + h) > (ih - margin)

    if near_left or near_top or near_right or near_bottom:
        return EdgeType.BORDER
    return EdgeType.INTERIOR
