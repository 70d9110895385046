# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — /runs
Status polling and cancellation for analysis runs.
"""

from __future__ import annotations

from fastapi import APIRouter

from jigsawsolver.api.middleware.error_handler import RunNotFoundError
from jigsawsolver.config import get_settings
from jigsawsolver.dependencies import AnalysisServiceDep
from jigsawsolver.utils.logger import get_logger

router = APIRouter(tags=["runs"])
log = get_logger(__name__)


@router.get(
    "/runs/latest",
    summary="Newest run",
    description="Status of the most recently submitted run.",
)
async def get_latest_run(service: AnalysisServiceDep) -> dict:
    run = service.latest()
    if run is None:
        raise RunNotFoundError("latest")
    return run.to_status_response(top_n=get_settings().display_top_n)


@router.get(
    "/runs/{run_id}",
    summary="Poll run status",
    description=(
        "Returns the run status. Once status is 'success' the response "
        "carries piece summaries and the top-ranked matches; 'no_pieces' "
        "means the photo yielded no detectable piece."
    ),
)
async def get_run(run_id: str, service: AnalysisServiceDep) -> dict:
    run = service.store.get_run(run_id)
    if run is None:
        raise RunNotFoundError(run_id)

    log.debug("run_polled", run_id=run_id, status=run.status.value)
    return run.to_status_response(top_n=get_settings().display_top_n)


@router.delete(
    "/runs/{run_id}",
    summary="Cancel a run",
)
async def cancel_run(run_id: str, service: AnalysisServiceDep) -> dict:
    cancelled = service.cancel(run_id)
    return {"run_id": run_id, "cancelled": cancelled}
