# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — POST /analyze
Accepts one uploaded photo, decodes it and hands it to the
AnalysisService. Returns immediately with the run id.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Form, UploadFile, status

from jigsawsolver.api.middleware.error_handler import ImageValidationError
from jigsawsolver.dependencies import AnalysisServiceDep
from jigsawsolver.models.run import AnalyzeResponse
from jigsawsolver.modules.preprocessing.validator import validate_image_bytes
from jigsawsolver.utils.logger import get_logger

router = APIRouter(tags=["analyze"])
log = get_logger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp"}


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a photo for piece detection and matching",
    description=(
        "Upload a photo of loose puzzle pieces. Any run still in flight is "
        "superseded. Poll GET /runs/{run_id} for the outcome."
    ),
)
async def submit_analysis(
    image: UploadFile,
    service: AnalysisServiceDep,
    puzzle_id: Optional[str] = Form(None),
) -> AnalyzeResponse:
    if image.content_type not in ALLOWED_CONTENT_TYPES:
        raise ImageValidationError(
            f"Unsupported file type '{image.content_type}'. "
            f"Allowed: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}"
        )

    data = await image.read()
    img = validate_image_bytes(data, label=image.filename or "image")
    del data

    handle = service.submit(img, puzzle_id=puzzle_id or None)
    log.info("analysis_enqueued", run_id=handle.run_id, puzzle_id=handle.puzzle_id)

    return AnalyzeResponse(run_id=handle.run_id, puzzle_id=handle.puzzle_id)
