# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Structured Logging
structlog setup shared by the API process and the analysis worker.

Entries carry the app name and the emitting thread; inside an analysis
run the service also binds run_id and puzzle_id through contextvars.
Values coming out of numpy / OpenCV (shapes, np.float64 areas, int32
coordinates) are converted to plain Python before rendering so the JSON
renderer never chokes on them.
"""

import logging
import sys
import threading
from typing import Any

import numpy as np
import structlog
from structlog.types import EventDict, Processor

from jigsawsolver.config import get_settings

APP_NAME = "jigsawsolver"


def _add_app_info(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def _add_thread_name(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    """Distinguishes request handlers from the analysis worker thread."""
    event_dict.setdefault("thread", threading.current_thread().name)
    return event_dict


def _plain_value(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, tuple):
        return [_plain_value(v) for v in value]
    return value


def _coerce_numpy(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        event_dict[key] = _plain_value(value)
    return event_dict


def _drop_color_message_key(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    """uvicorn duplicates the message with ANSI codes under color_message."""
    event_dict.pop("color_message", None)
    return event_dict


def configure_logging() -> None:
    """
    Console renderer at DEBUG, one JSON object per line otherwise.
    Safe to call more than once (tests rebuild the app per case).
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_app_info,
        _add_thread_name,
        _coerce_numpy,
        _drop_color_message_key,
    ]

    if settings.log_level == "DEBUG":
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    # uvicorn and fastapi log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: str = APP_NAME) -> structlog.BoundLogger:
    """
    Usage:
        log = get_logger(__name__)
        log.info("contours_extracted", total=31, kept=12)
    """
    return structlog.get_logger(name)
