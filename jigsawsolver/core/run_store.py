# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Abstract RunStore
Clean interface over analysis-run state storage.

InMemoryRunStore — single-process deployments and tests
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from jigsawsolver.models.run import AnalysisResult, AnalysisRun, RunStatus
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


# ─── Abstract Interface ──────────────────────────────────────────────────────

class RunStore(ABC):
    """
    Abstract base class for run state backends.
    All methods are synchronous and must be safe to call from the
    analysis worker thread and request handlers concurrently.
    """

    @abstractmethod
    def create_run(self, puzzle_id: str, generation: int) -> AnalysisRun:
        """Create a new run with QUEUED status. Returns the run."""

    @abstractmethod
    def get_run(self, run_id: str) -> Optional[AnalysisRun]:
        """Return run by ID, or None if not found."""

    @abstractmethod
    def update_run(
        self,
        run_id: str,
        *,
        status: Optional[RunStatus] = None,
        error: Optional[str] = None,
        result: Optional[AnalysisResult] = None,
    ) -> None:
        """Partially update a run record. Only provided fields are changed."""

    @abstractmethod
    def latest_run(self) -> Optional[AnalysisRun]:
        """The run with the highest generation, or None."""

    def fail_run(self, run_id: str, error: str) -> None:
        """Mark a run as failed with an error message."""
        self.update_run(run_id, status=RunStatus.FAILED, error=error)
        log.error("run_failed", run_id=run_id, error=error)


# ─── In-Memory Implementation ────────────────────────────────────────────────

class InMemoryRunStore(RunStore):
    """
    Thread-safe in-memory run store using a dict + RLock.
    All data is lost on process restart.
    """

    def __init__(self) -> None:
        self._store: dict[str, AnalysisRun] = {}
        self._lock = threading.RLock()

    def create_run(self, puzzle_id: str, generation: int) -> AnalysisRun:
        run = AnalysisRun(
            run_id=str(uuid.uuid4()),
            puzzle_id=puzzle_id,
            generation=generation,
        )
        with self._lock:
            self._store[run.run_id] = run
        log.info("run_created", run_id=run.run_id, generation=generation)
        return run.model_copy()

    def get_run(self, run_id: str) -> Optional[AnalysisRun]:
        with self._lock:
            run = self._store.get(run_id)
            return run.model_copy() if run is not None else None

    def update_run(
        self,
        run_id: str,
        *,
        status: Optional[RunStatus] = None,
        error: Optional[str] = None,
        result: Optional[AnalysisResult] = None,
    ) -> None:
        with self._lock:
            run = self._store.get(run_id)
            if run is None:
                log.warning("update_run_not_found", run_id=run_id)
                return
            if status is not None:
                run.status = status
            if error is not None:
                run.error = error
            if result is not None:
                run.result = result
            run.updated_at = datetime.now(timezone.utc)

        log.debug(
            "run_updated",
            run_id=run_id,
            status=status.value if status else None,
        )

    def latest_run(self) -> Optional[AnalysisRun]:
        with self._lock:
            if not self._store:
                return None
            run = max(self._store.values(), key=lambda r: r.generation)
            return run.model_copy()

    def count(self) -> int:
        """Return total number of runs in store."""
        with self._lock:
            return len(self._store)
