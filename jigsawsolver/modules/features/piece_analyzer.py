# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Piece Analyzer
Converts surviving contours into PuzzlePiece records.

For each contour:
  1. Re-check the area cutoff (skip, not an error)
  2. Bounding rectangle → crop from the ORIGINAL color image → PNG
  3. Moments → centroid (skip on zero m00) + principal-axis rotation
  4. Border / interior from bounding-box proximity to the image edges
  5. FLAT / TAB / HOLE for each of the four sides
  6. Mean color of the crop

Contours carry no data dependency on each other, so analysis may
fan out across a thread pool; results keep extraction order.
"""

from __future__ import annotations

import traceback
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import cv2
import numpy as np

from jigsawsolver.config import get_settings
from jigsawsolver.models.piece import EdgeType, PuzzlePiece
from jigsawsolver.modules.features.color import dominant_color
from jigsawsolver.modules.features.edge_classifier import classify_edges
from jigsawsolver.modules.features.geometry import (
    bounding_rect,
    centroid,
    classify_border,
    orientation_deg,
)
from jigsawsolver.utils.image_utils import bgr_to_png_bytes, crop_rect
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


def analyze_contour(
    contour: np.ndarray,
    image: np.ndarray,
    puzzle_id: str,
    index: int,
    min_area: float | None = None,
    border_margin: int | None = None,
) -> Optional[PuzzlePiece]:
    """
    Build a PuzzlePiece from one contour.

    Args:
        contour:       OpenCV contour (N, 1, 2) int32
        image:         Original BGR image the mask was derived from
        puzzle_id:     Run grouping id
        index:         Extraction index, becomes piece_id
        min_area:      Area cutoff. Defaults to config MIN_CONTOUR_AREA.
        border_margin: Border proximity in px. Defaults to config BORDER_MARGIN_PX.

    Returns:
        PuzzlePiece, or None if the contour is too small or degenerate.
    """
    settings = get_settings()
    if min_area is None:
        min_area = settings.min_contour_area
    if border_margin is None:
        border_margin = settings.border_margin_px

    area = cv2.contourArea(contour)
    if area < min_area:
        log.debug("piece_skipped", index=index, reason="area", area=area)
        return None

    bbox = bounding_rect(contour)
    x, y, w, h = bbox
    if w == 0 or h == 0:
        log.debug("piece_skipped", index=index, reason="zero_bbox", bbox=bbox)
        return None

    moments = cv2.moments(contour)
    center = centroid(moments)
    if center is None:
        log.debug("piece_skipped", index=index, reason="zero_moment")
        return None

    roi = crop_rect(image, x, y, w, h)
    if roi.size == 0:
        log.debug("piece_skipped", index=index, reason="empty_roi", bbox=bbox)
        return None

    top, right, bottom, left = classify_edges(contour, bbox)
    r, g, b = dominant_color(roi)

    return PuzzlePiece(
        piece_id=index,
        puzzle_id=puzzle_id,
        image_data=bgr_to_png_bytes(roi),
        center_x=float(center[0]),
        center_y=float(center[1]),
        width=float(w),
        height=float(h),
        rotation=orientation_deg(moments),
        edge_type=classify_border(bbox, image.shape, margin=border_margin),
        top_edge=top,
        right_edge=right,
        bottom_edge=bottom,
        left_edge=left,
        dominant_color_r=r,
        dominant_color_g=g,
        dominant_color_b=b,
    )


def _analyze_safely(
    contour: np.ndarray,
    image: np.ndarray,
    puzzle_id: str,
    index: int,
) -> Optional[PuzzlePiece]:
    try:
        return analyze_contour(contour, image, puzzle_id, index)
    except Exception as e:
        # Skip this contour; the run continues
        log.warning(
            "piece_analysis_failed",
            index=index,
            exc_type=type(e).__name__,
            error=str(e),
            traceback=traceback.format_exc(),
        )
        return None


def analyze_contours(
    contours: list[np.ndarray],
    image: np.ndarray,
    puzzle_id: str,
    workers: int | None = None,
) -> list[PuzzlePiece]:
    """
    Analyze every contour, skipping the ones that yield no piece.

    Args:
        contours:  Output of extract_contours()
        image:     Original BGR image
        puzzle_id: Run grouping id
        workers:   Thread count. Defaults to config FEATURE_WORKERS; 1 = sequential.

    Returns:
        Pieces in contour order. piece_id is the contour index, so ids
        may have gaps where contours were skipped.
    """
    if workers is None:
        workers = get_settings().feature_workers

    if workers > 1 and len(contours) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(
                lambda item: _analyze_safely(item[1], image, puzzle_id, item[0]),
                enumerate(contours),
            ))
    else:
        results = [
            _analyze_safely(c, image, puzzle_id, idx)
            for idx, c in enumerate(contours)
        ]

    pieces = [p for p in results if p is not None]

    log.info(
        "feature_extraction_complete",
        contours=len(contours),
        pieces=len(pieces),
        skipped=len(contours) - len(pieces),
        border=sum(1 for p in pieces if p.edge_type == EdgeType.BORDER),
        workers=workers,
    )
    return pieces
