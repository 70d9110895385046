# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Pipeline Orchestrator
Wires the four core stages for one analysis run:

  1. Preprocessing       (image → binary mask)
  2. Contour extraction  (mask → boundaries)
  3. Feature extraction  (boundary + ORIGINAL image → PuzzlePiece)
  4. Matching            (pieces → ranked PieceMatch list)

Synchronous and self-contained: no shared state between runs, no
persistence. The AnalysisService runs this on a background worker.
The mask is released as soon as contours exist, so a run never holds
more than the source image and one mask.
"""

from __future__ import annotations

import uuid
from typing import Optional

import numpy as np

from jigsawsolver.models.piece import PuzzlePiece
from jigsawsolver.models.run import AnalysisResult, AnalysisStatus
from jigsawsolver.modules.features.piece_analyzer import analyze_contours
from jigsawsolver.modules.matching.matcher import find_matches
from jigsawsolver.modules.preprocessing.thresholder import preprocess
from jigsawsolver.modules.preprocessing.validator import validate_image_array
from jigsawsolver.modules.segmentation.contour_extractor import extract_contours
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


def new_puzzle_id() -> str:
    return str(uuid.uuid4())


def extract_pieces(
    image: np.ndarray,
    puzzle_id: str,
) -> list[PuzzlePiece]:
    """Stages 1–3: detect pieces in image. Returns [] when none survive."""
    validate_image_array(image, label="source image")

    log.info("stage_start", stage="preprocessing")
    mask = preprocess(image)
    log.info("stage_complete", stage="preprocessing")

    log.info("stage_start", stage="contour_extraction")
    contours = extract_contours(mask)
    del mask
    log.info("stage_complete", stage="contour_extraction", contours=len(contours))

    log.info("stage_start", stage="feature_extraction")
    pieces = analyze_contours(contours, image, puzzle_id)
    log.info("stage_complete", stage="feature_extraction", pieces=len(pieces))

    return pieces


def process_puzzle_image(
    image: np.ndarray,
    puzzle_id: Optional[str] = None,
    min_confidence: Optional[float] = None,
) -> AnalysisResult:
    """
    Run the full core pipeline on one decoded image.

    Args:
        image:          BGR uint8 array (already decoded)
        puzzle_id:      Run grouping id; a fresh uuid4 when omitted
        min_confidence: Matching cutoff. Defaults to config MIN_CONFIDENCE.

    Returns:
        AnalysisResult. status is NO_PIECES (not an exception) when no
        contour survives filtering.

    Raises:
        ImageValidationError: If image is not a valid pixel buffer.
    """
    if puzzle_id is None:
        puzzle_id = new_puzzle_id()

    pieces = extract_pieces(image, puzzle_id)

    if not pieces:
        log.info("no_pieces_found", puzzle_id=puzzle_id)
        return AnalysisResult(puzzle_id=puzzle_id, status=AnalysisStatus.NO_PIECES)

    log.info("stage_start", stage="matching")
    matches = find_matches(pieces, min_confidence=min_confidence)
    log.info("stage_complete", stage="matching", matches=len(matches))

    return AnalysisResult(
        puzzle_id=puzzle_id,
        status=AnalysisStatus.SUCCESS,
        pieces=tuple(pieces),
        matches=tuple(matches),
    )
