"""At most one engine execution in flight; the newest waiting job wins."""

from __future__ import annotations

import threading
from typing import Callable

from .magick import EngineError, EngineJob, EngineResult


class EngineDispatcher:
    """Runs jobs on a background thread, one at a time.

    A job submitted while another is executing replaces whatever job was
    waiting before it. Running jobs are never cancelled.
    """

    def __init__(
        self,
        execute: Callable[[EngineJob], EngineResult],
        on_done: Callable[[EngineJob, EngineResult], None] | None = None,
        on_error: Callable[[EngineJob, EngineError], None] | None = None,
    ) -> None:
        self._execute = execute
        self._on_done = on_done
        self._on_error = on_error
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._running = False
        self._pending: EngineJob | None = None
        self.last_error: EngineError | None = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._running

    @property
    def pending(self) -> EngineJob | None:
        with self._lock:
            return self._pending

    def submit(self, job: EngineJob, queue_if_busy: bool = True) -> bool:
        """Returns False only when the job was dropped (busy and not queueing)."""
        with self._lock:
            if self._running:
                if not queue_if_busy:
                    return False
                self._pending = job
                return True
            self._running = True
        thread = threading.Thread(target=self._drain, args=(job,), daemon=True)
        thread.start()
        return True

    def wait_idle(self, timeout: float | None = None) -> bool:
        with self._idle:
            return self._idle.wait_for(lambda: not self._running, timeout=timeout)

    def _drain(self, job: EngineJob) -> None:
        current: EngineJob | None = job
        try:
            while current is not None:
                self._run_one(current)
                with self._lock:
                    current = self._pending
                    self._pending = None
                    if current is None:
                        self._running = False
                        self._idle.notify_all()
        finally:
            # only reached with a job in hand when the loop was interrupted
            if current is not None:
                with self._lock:
                    self._pending = None
                    self._running = False
                    self._idle.notify_all()

    def _run_one(self, job: EngineJob) -> None:
        try:
            result = self._execute(job)
        except EngineError as exc:
            self._report(job, exc)
            return
        except Exception as exc:
            self._report(job, _wrap(exc))
            return
        if self._on_done:
            try:
                self._on_done(job, result)
            except Exception as exc:
                self._report(job, _wrap(exc))

    def _report(self, job: EngineJob, error: EngineError) -> None:
        self.last_error = error
        if self._on_error:
            try:
                self._on_error(job, error)
            except Exception as exc:
                self.last_error = _wrap(exc)


def _wrap(exc: Exception) -> EngineError:
    error = EngineError(str(exc))
    error.__cause__ = exc
    return error
