# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Error Types and Global Error Handler
Domain exceptions live here so both the core and the HTTP layer can
raise them; register_error_handlers() maps them onto JSON responses
of the form {"error": {"code", "message", "detail"?}}.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


class ImageValidationError(ValueError):
    """Raised when an image buffer or upload cannot enter the pipeline."""


class _LookupMiss(KeyError):
    def __str__(self) -> str:
        # KeyError quotes its argument; keep ids readable in messages
        return str(self.args[0]) if self.args else ""


class RunNotFoundError(_LookupMiss):
    """Raised when a run_id does not exist in the run store."""


class PuzzleNotFoundError(_LookupMiss):
    """Raised when a puzzle_id (or piece within it) has no stored pieces."""


class PipelineError(RuntimeError):
    """Raised when an analysis run cannot be scheduled or executed at all."""


@dataclass(frozen=True)
class _ErrorMapping:
    status_code: int
    code: str
    prefix: str = ""
    server_fault: bool = False


_MAPPINGS: dict[type[Exception], _ErrorMapping] = {
    ImageValidationError: _ErrorMapping(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "IMAGE_VALIDATION_ERROR"
    ),
    PuzzleNotFoundError: _ErrorMapping(
        status.HTTP_404_NOT_FOUND, "PUZZLE_NOT_FOUND", prefix="Puzzle not found: "
    ),
    RunNotFoundError: _ErrorMapping(
        status.HTTP_404_NOT_FOUND, "RUN_NOT_FOUND", prefix="Run not found: "
    ),
    PipelineError: _ErrorMapping(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "PIPELINE_ERROR", server_fault=True
    ),
}


def _error_body(code: str, message: str, detail: str | None = None) -> dict:
    body = {"error": {"code": code, "message": message}}
    if detail:
        body["error"]["detail"] = detail
    return body


def _domain_handler(mapping: _ErrorMapping):
    async def handler(req: Request, exc: Exception) -> JSONResponse:
        event = mapping.code.lower()
        if mapping.server_fault:
            log.error(event, path=str(req.url), error=str(exc))
        else:
            log.warning(event, path=str(req.url), error=str(exc))
        return JSONResponse(
            status_code=mapping.status_code,
            content=_error_body(code=mapping.code, message=f"{mapping.prefix}{exc}"),
        )

    return handler


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all global exception handlers on the FastAPI application.
    Call this in main.py after creating the app instance.
    """
    for exc_class, mapping in _MAPPINGS.items():
        app.add_exception_handler(exc_class, _domain_handler(mapping))

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> JSONResponse:
        log.error(
            "unhandled_exception",
            path=str(req.url),
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback=traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred.",
                detail=type(exc).__name__,
            ),
        )
