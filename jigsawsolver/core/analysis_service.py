# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
JigsawSolver — Analysis Service
Explicit submission API around the core pipeline.

  submit(image, puzzle_id) → RunHandle   (returns immediately)
  cancel(run_id)                          (queued: dropped; running: result discarded)
  latest()                                (newest run record)

Runs execute one at a time on a single background worker, off any
request or UI thread. Every submission bumps a generation counter and
only the newest generation may publish: an older run that finishes
late is recorded as SUPERSEDED and its pieces are never persisted
(last-request-wins). Queued runs are superseded as soon as a newer
submission arrives.
"""

from __future__ import annotations

import threading
import traceback
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Optional

import numpy as np
import structlog

from jigsawsolver.api.middleware.error_handler import PipelineError, RunNotFoundError
from jigsawsolver.core.pipeline import new_puzzle_id, process_puzzle_image
from jigsawsolver.core.piece_repository import PieceRepository
from jigsawsolver.core.run_store import RunStore
from jigsawsolver.models.run import NO_PIECES_MESSAGE, AnalysisRun, RunStatus
from jigsawsolver.utils.logger import get_logger

log = get_logger(__name__)


class RunHandle:
    """Caller-side reference to one submitted run."""

    def __init__(
        self,
        run_id: str,
        puzzle_id: str,
        generation: int,
        future: Future,
        store: RunStore,
        lock: threading.Lock,
    ) -> None:
        self.run_id = run_id
        self.puzzle_id = puzzle_id
        self.generation = generation
        self._future = future
        self._store = store
        # The service's lock; status writes and future cancellation happen under it
        self._lock = lock

    def done(self) -> bool:
        return self._future.done()

    def _read(self) -> AnalysisRun:
        with self._lock:
            run = self._store.get_run(self.run_id)
        if run is None:
            raise RunNotFoundError(self.run_id)
        return run

    def status(self) -> RunStatus:
        return self._read().status

    def result(self, timeout: Optional[float] = None) -> AnalysisRun:
        """
        Block until the run reaches a terminal state and return its record.
        Raises concurrent.futures.TimeoutError if it does not finish in time.
        """
        try:
            self._future.result(timeout=timeout)
        except CancelledError:
            pass
        return self._read()

    def __repr__(self) -> str:
        return f"RunHandle(run_id={self.run_id!r}, generation={self.generation})"


class AnalysisService:
    """
    Owns the background worker, the generation counter and the
    cancellation set. The repository is optional; without one, pieces
    live only in the run record.
    """

    def __init__(
        self,
        store: RunStore,
        repository: Optional[PieceRepository] = None,
    ) -> None:
        self._store = store
        self._repository = repository
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="analysis"
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._futures: dict[str, Future] = {}
        self._cancelled: set[str] = set()
        self._closed = False

    @property
    def store(self) -> RunStore:
        return self._store

    @property
    def repository(self) -> Optional[PieceRepository]:
        return self._repository

    @property
    def current_generation(self) -> int:
        with self._lock:
            return self._generation

    # ─── Submission ──────────────────────────────────────────────────────────

    def submit(
        self,
        image: np.ndarray,
        puzzle_id: Optional[str] = None,
        min_confidence: Optional[float] = None,
    ) -> RunHandle:
        """
        Queue an analysis of image. Supersedes every earlier run.
        Raises PipelineError once the service has been shut down.
        """
        if puzzle_id is None:
            puzzle_id = new_puzzle_id()

        with self._lock:
            if self._closed:
                raise PipelineError("Analysis worker has been shut down.")
            self._generation += 1
            generation = self._generation
            run = self._store.create_run(puzzle_id, generation)

            # Queued runs are dropped now; a running one is discarded when it finishes
            for old_run_id, old_future in list(self._futures.items()):
                if old_future.cancel():
                    self._futures.pop(old_run_id, None)
                    self._store.update_run(old_run_id, status=RunStatus.SUPERSEDED)
                    log.info("run_superseded", run_id=old_run_id, state="queued")

            future = self._executor.submit(
                self._execute, run.run_id, generation, image, puzzle_id, min_confidence
            )
            self._futures[run.run_id] = future

        log.info(
            "run_submitted",
            run_id=run.run_id,
            puzzle_id=puzzle_id,
            generation=generation,
        )
        return RunHandle(
            run.run_id, puzzle_id, generation, future, self._store, self._lock
        )

    def cancel(self, run_id: str) -> bool:
        """
        Cancel a run. Returns False if it had already finished.
        Raises RunNotFoundError for an unknown run_id.
        """
        run = self._store.get_run(run_id)
        if run is None:
            raise RunNotFoundError(run_id)
        if run.is_terminal:
            return False

        with self._lock:
            # The worker may have published since the snapshot above
            run = self._store.get_run(run_id)
            if run is None or run.is_terminal:
                return False

            future = self._futures.get(run_id)
            if future is not None and future.cancel():
                # Never started, so the worker will not clean up after it
                self._futures.pop(run_id, None)
                state = "queued"
            elif future is not None:
                self._cancelled.add(run_id)
                state = "running"
            else:
                state = "idle"
            self._store.update_run(run_id, status=RunStatus.CANCELLED)

        log.info("run_cancelled", run_id=run_id, state=state)
        return True

    def latest(self) -> Optional[AnalysisRun]:
        return self._store.latest_run()

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting submissions and cancel every queued run.
        A run already on the worker is left to finish.
        """
        with self._lock:
            self._closed = True
            for run_id, future in list(self._futures.items()):
                if future.cancel():
                    self._futures.pop(run_id, None)
                    self._store.update_run(run_id, status=RunStatus.CANCELLED)
                    log.info("run_cancelled", run_id=run_id, state="queued",
                             reason="shutdown")
        self._executor.shutdown(wait=wait, cancel_futures=True)

    # ─── Worker ──────────────────────────────────────────────────────────────

    def _is_stale(self, run_id: str, generation: int) -> bool:
        """Caller must hold self._lock."""
        return run_id in self._cancelled or generation != self._generation

    def _discard(self, run_id: str) -> None:
        """Caller must hold self._lock."""
        if run_id not in self._cancelled:
            self._store.update_run(run_id, status=RunStatus.SUPERSEDED)
            log.info("run_superseded", run_id=run_id)

    def _execute(
        self,
        run_id: str,
        generation: int,
        image: np.ndarray,
        puzzle_id: str,
        min_confidence: Optional[float],
    ) -> None:
        structlog.contextvars.bind_contextvars(run_id=run_id, puzzle_id=puzzle_id)
        try:
            with self._lock:
                if self._is_stale(run_id, generation):
                    self._discard(run_id)
                    return
                self._store.update_run(run_id, status=RunStatus.ANALYZING)

            log.info("run_start", generation=generation)
            result = process_puzzle_image(image, puzzle_id, min_confidence)
            del image

            with self._lock:
                if self._is_stale(run_id, generation):
                    self._discard(run_id)
                    return

                if result.is_empty:
                    self._store.update_run(
                        run_id,
                        status=RunStatus.NO_PIECES,
                        error=NO_PIECES_MESSAGE,
                        result=result,
                    )
                else:
                    if self._repository is not None:
                        self._repository.insert_pieces(result.pieces)
                    self._store.update_run(
                        run_id, status=RunStatus.SUCCESS, result=result
                    )

            log.info(
                "run_complete",
                status=result.status.value,
                pieces=len(result.pieces),
                matches=len(result.matches),
            )

        except Exception as exc:
            err_msg = f"{type(exc).__name__}: {exc}"
            log.error(
                "run_fatal_error",
                error=err_msg,
                traceback=traceback.format_exc(),
            )
            with self._lock:
                if self._is_stale(run_id, generation):
                    self._discard(run_id)
                else:
                    self._store.fail_run(run_id, err_msg)
        finally:
            with self._lock:
                self._futures.pop(run_id, None)
                self._cancelled.discard(run_id)
            structlog.contextvars.clear_contextvars()
