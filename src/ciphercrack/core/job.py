from __future__ import annotations

import itertools
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, Optional

from .results import CrackResult, CrackState

if TYPE_CHECKING:
    from .directives import Directives

logger = logging.getLogger(__name__)

# Search loops call job.check() once per this many candidates
POLL_INTERVAL = 200

_ids = itertools.count(1)


class CrackCancelled(Exception):
    """Raised inside a search loop when its job has been cancelled."""


_ALLOWED = {
    # a job rejected before it runs goes straight to COMPLETE
    CrackState.QUEUED: {CrackState.RUNNING, CrackState.COMPLETE, CrackState.CANCELLED},
    CrackState.RUNNING: {CrackState.COMPLETE, CrackState.CANCELLED},
    CrackState.COMPLETE: set(),
    CrackState.CANCELLED: set(),
}


class CrackJob:
    """
    Handle for one crack run: cancellation flag plus advisory progress.

    The flag is a threading.Event so another thread can cancel; progress fields
    are written by the search and only read by observers.
    """

    def __init__(self, job_id: Optional[int] = None):
        self.id = job_id if job_id is not None else next(_ids)
        self._cancel = threading.Event()
        self._lock = threading.Lock()
        self.state = CrackState.QUEUED
        self.percent = 0
        self.message = ""
        self.started_at: Optional[float] = None
        # search outcomes of this run, kept current so a cancelled run can report them
        self.outcomes: list = []

    def cancel(self) -> None:
        self._cancel.set()

    def is_cancelled(self) -> bool:
        return self._cancel.is_set()

    def check(self) -> None:
        if self._cancel.is_set():
            raise CrackCancelled(f"crack job {self.id} cancelled")

    def update(self, percent: Optional[int] = None, message: Optional[str] = None) -> None:
        if percent is not None:
            self.percent = max(0, min(100, int(percent)))
        if message is not None:
            self.message = message

    def track(self, outcome):
        self.outcomes.append(outcome)
        return outcome

    def best_so_far(self) -> tuple[Any, Optional[str], str]:
        """Key and plain text of the latest outcome holding one, and all activity so far."""
        key, plain = None, None
        for outcome in reversed(self.outcomes):
            if outcome.key is not None:
                key, plain = outcome.key, outcome.plain_text or None
                break
        return key, plain, "".join(outcome.explain for outcome in self.outcomes)

    def transition(self, new_state: CrackState) -> None:
        with self._lock:
            if new_state not in _ALLOWED[self.state]:
                raise ValueError(f"Crack job {self.id} cannot move from {self.state} to {new_state}")
            self.state = new_state
            if new_state is CrackState.RUNNING:
                self.started_at = time.perf_counter()

    def elapsed_ms(self) -> int:
        if self.started_at is None:
            return 0
        return int((time.perf_counter() - self.started_at) * 1000)


class CrackService:
    """Runs crack jobs on a thread pool and keeps them addressable by id."""

    def __init__(self, max_workers: int = 2):
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="crack")
        self._jobs: dict[int, CrackJob] = {}
        self._futures: dict[int, Future] = {}

    def submit(self, run: Callable[[CrackJob], CrackResult]) -> CrackJob:
        job = CrackJob()
        self._jobs[job.id] = job
        self._futures[job.id] = self._pool.submit(run, job)
        logger.info("queued crack job %s", job.id)
        return job

    def crack(self, cipher_name: str, text: str, dirs: "Directives") -> CrackJob:
        """Queue registry.run_crack for a cipher; the returned job can be cancelled."""
        from .registry import run_crack

        return self.submit(lambda job: run_crack(cipher_name, text, dirs, job))

    def job(self, job_id: int) -> Optional[CrackJob]:
        return self._jobs.get(job_id)

    def cancel(self, job_id: int) -> bool:
        job = self._jobs.get(job_id)
        if job is None:
            return False
        job.cancel()
        logger.info("cancel requested for crack job %s", job_id)
        return True

    def progress(self, job_id: int) -> tuple[int, str]:
        job = self._jobs[job_id]
        return job.percent, job.message

    def result(self, job_id: int, timeout: Optional[float] = None) -> CrackResult:
        """Wait for the job's result. Once returned, the service forgets the job."""
        result = self._futures[job_id].result(timeout=timeout)
        self._futures.pop(job_id, None)
        self._jobs.pop(job_id, None)
        return result

    def shutdown(self, cancel_running: bool = True) -> None:
        if cancel_running:
            for job in list(self._jobs.values()):
                job.cancel()
        self._pool.shutdown(wait=True)

    def __enter__(self) -> "CrackService":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
