# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — FastAPI Application Entry Point
Creates the app, registers lifespan events, routers and global
error handlers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from jigsawsolver import __version__
from jigsawsolver.api.middleware.error_handler import register_error_handlers
from jigsawsolver.api.routes import analyze, puzzles, runs
from jigsawsolver.config import get_settings
from jigsawsolver.dependencies import init_services, shutdown_services
from jigsawsolver.utils.logger import configure_logging, get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: configure logging, build the run store, repository and
    analysis worker. Shutdown: stop the worker.
    """
    configure_logging()
    settings = get_settings()

    log.info(
        "jigsawsolver_startup",
        version=__version__,
        min_contour_area=settings.min_contour_area,
        min_confidence=settings.min_confidence,
        feature_workers=settings.feature_workers,
    )

    init_services()
    log.info("jigsawsolver_ready")
    yield

    shutdown_services()
    log.info("jigsawsolver_shutdown")


def create_app() -> FastAPI:
    app = FastAPI(
        title="JigsawSolver",
        summary="Finds the pieces in a photo and ranks which ones interlock.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    app.include_router(analyze.router)
    app.include_router(runs.router)
    app.include_router(puzzles.router)

    @app.get("/health", tags=["health"], summary="Health check")
    async def health() -> dict:
        return {
            "status": "ok",
            "service": "jigsawsolver",
            "version": __version__,
        }

    return app


# Module-level app instance for uvicorn
app = create_app()
