# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — FastAPI Dependencies
Singleton providers for the RunStore, the PieceRepository and the
AnalysisService. Instantiated once by the lifespan handler in main.py;
route handlers receive them through Depends().
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from jigsawsolver.core.analysis_service import AnalysisService
from jigsawsolver.core.piece_repository import InMemoryPieceRepository, PieceRepository
from jigsawsolver.core.run_store import InMemoryRunStore, RunStore
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)

_run_store: RunStore | None = None
_repository: PieceRepository | None = None
_service: AnalysisService | None = None

def init_services() -> None:
    """
    Build the store, repository and service singletons.
    Called once during application lifespan startup.
    """
    global _run_store, _repository, _service

    log.info("init_services", store="memory")
    _run_store = InMemoryRunStore()
    _repository = InMemoryPieceRepository()
    _service = AnalysisService(_run_store, _repository)

def shutdown_services() -> None:
    global _service
    if _service is not None:
        _service.shutdown(wait=False)
        _service = None

def get_analysis_service() -> AnalysisService:
    if _service is None:
        raise RuntimeError(
            "AnalysisService has not been initialised. "
            "Ensure init_services() is called during app lifespan startup."
        )
    return _service

def get_piece_repository() -> PieceRepository:
    if _repository is None:
        raise RuntimeError(
            "PieceRepository has not been initialised. "
            "Ensure init_services() is called during app lifespan startup."
        )
    return _repository

# Annotated type aliases for clean route signatures
AnalysisServiceDep = Annotated[AnalysisService, Depends(get_analysis_service)]
PieceRepositoryDep = Annotated[PieceRepository, Depends(get_piece_repository)]
