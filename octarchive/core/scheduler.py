"""Bounded-concurrency clone scheduling."""

from __future__ import annotations

import logging
import shutil
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Protocol

from .errors import CloneError, EmptyRepositoryError
from .models import CloneJob
from .types import JobState

log = logging.getLogger(__name__)


class Cloner(Protocol):
    def clone(self, source, destination, *, username, token=None, shallow=False) -> None: ...


@dataclass
class ScheduleReport:
    completed: list[CloneJob] = field(default_factory=list)
    skipped: list[CloneJob] = field(default_factory=list)
    failed: list[CloneJob] = field(default_factory=list)
    first_error: CloneError | None = None

    @property
    def settled(self) -> int:
        return len(self.completed) + len(self.skipped) + len(self.failed)


class CloneScheduler:
    """Run one clone per job with at most ``concurrency`` jobs in flight.

    A job is admitted by acquiring a slot before it is submitted and gives
    the slot back once it reaches a terminal state. The first fatal error is
    kept and stops further admission; jobs already admitted run to the end.
    ``run`` returns once every admitted job has settled.
    """

    def __init__(
        self,
        cloner: Cloner,
        *,
        concurrency: int,
        username: str,
        token: str | None = None,
        shallow: bool = False,
        cancel_event: threading.Event | None = None,
        on_advance: Callable[[CloneJob, JobState], None] | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.cloner = cloner
        self.concurrency = concurrency
        self.username = username
        self.token = token
        self.shallow = shallow
        self.cancel_event = cancel_event or threading.Event()
        self.on_advance = on_advance
        self.states: dict[CloneJob, JobState] = {}

        self._slots = threading.BoundedSemaphore(concurrency)
        self._lock = threading.Lock()
        self.report = ScheduleReport()

    def run(self, jobs: Iterable[CloneJob]) -> ScheduleReport:
        jobs = list(jobs)
        for job in jobs:
            self.states[job] = JobState.pending

        futures: list[Future] = []
        with ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="clone") as pool:
            try:
                for job in jobs:
                    if self.cancel_event.is_set():
                        break
                    self._slots.acquire()
                    # a failing sibling may have released the slot we just got
                    if self.cancel_event.is_set():
                        self._slots.release()
                        break
                    futures.append(pool.submit(self._run_job, job))
            except KeyboardInterrupt:
                self.cancel_event.set()
                wait(futures)
                raise

        for future in futures:
            future.result()

        not_admitted = len(jobs) - len(futures)
        if not_admitted:
            log.info("Stopped admitting clone jobs not_admitted=%d", not_admitted)

        if self.report.first_error is not None:
            raise self.report.first_error
        return self.report

    def _set_state(self, job: CloneJob, state: JobState) -> None:
        with self._lock:
            self.states[job] = state

    def _run_job(self, job: CloneJob) -> JobState:
        try:
            state = self._clone(job)
        finally:
            self._slots.release()
        if self.on_advance is not None:
            self.on_advance(job, state)
        return state

    def _clone(self, job: CloneJob) -> JobState:
        try:
            self._set_state(job, JobState.preparing)
            try:
                if job.destination.exists():
                    shutil.rmtree(job.destination)
                job.destination.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CloneError(job.source, job.destination, f"cannot prepare destination: {e}") from e

            self._set_state(job, JobState.cloning)
            log.info("Cloning repo clone_url=%s path=%s", job.source, job.destination)
            self.cloner.clone(
                job.source,
                job.destination,
                username=self.username,
                token=self.token,
                shallow=self.shallow,
            )
        except EmptyRepositoryError:
            log.info("Skipped empty repo clone_url=%s path=%s", job.source, job.destination)
            return self._finish(job, JobState.skipped_empty)
        except CloneError as e:
            log.error("Failed to clone repo clone_url=%s path=%s: %s", job.source, job.destination, e.message)
            return self._finish(job, JobState.failed, e)
        except Exception as e:
            log.error("Failed to clone repo clone_url=%s path=%s: %r", job.source, job.destination, e)
            return self._finish(job, JobState.failed, CloneError(job.source, job.destination, repr(e)))

        log.info("Cloned repo clone_url=%s path=%s", job.source, job.destination)
        return self._finish(job, JobState.completed)

    def _finish(self, job: CloneJob, state: JobState, error: CloneError | None = None) -> JobState:
        with self._lock:
            self.states[job] = state
            if state is JobState.completed:
                self.report.completed.append(job)
            elif state is JobState.skipped_empty:
                self.report.skipped.append(job)
            else:
                self.report.failed.append(job)
                if self.report.first_error is None:
                    self.report.first_error = error
        if error is not None:
            self.cancel_event.set()
        return state
