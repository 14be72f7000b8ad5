"""Queue-backed background job pipeline with a bounded worker pool."""

import asyncio
import itertools
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional

from common.logging_config import get_logger
from files_manager.config import DEAD_LETTER_LIMIT, JOB_TIMEOUT_SECONDS

logger = get_logger(__name__)

JobHandler = Callable[[Dict[str, Any]], Awaitable[str]]


class JobState(str, Enum):
    ENQUEUED = "enqueued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


@dataclass
class Job:
    id: int
    pipeline: str
    payload: Dict[str, Any]
    state: JobState = JobState.ENQUEUED
    result: Optional[str] = None
    error: Optional[str] = None
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class JobEvent:
    """
    One state transition of a job, as seen by subscribers.
    """
    job_id: int
    pipeline: str
    state: JobState
    payload: Dict[str, Any]
    result: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class DeadLetter:
    job_id: int
    payload: Dict[str, Any]
    error: str
    failed_at: datetime


class JobPipeline:
    """
    Drains a job queue with at most `concurrency` jobs in flight.

    Jobs are enqueued fire-and-forget. Each job ends Completed or Failed;
    failures are terminal and are kept in a bounded dead-letter list.
    Subscribers receive every state transition as a JobEvent.
    """

    def __init__(
        self,
        name: str,
        handler: JobHandler,
        concurrency: int,
        job_timeout: float = JOB_TIMEOUT_SECONDS,
        dead_letter_limit: int = DEAD_LETTER_LIMIT,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        self.name = name
        self.handler = handler
        self.concurrency = concurrency
        self.job_timeout = job_timeout
        self.dead_letters: Deque[DeadLetter] = deque(maxlen=dead_letter_limit)

        self._queue: "asyncio.Queue[Job]" = asyncio.Queue()
        self._subscribers: List["asyncio.Queue[JobEvent]"] = []
        self._workers: List[asyncio.Task] = []
        self._ids = itertools.count(1)
        self._in_flight = 0
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self) -> None:
        """Start the worker pool."""
        if self._running:
            logger.warning(f"Pipeline '{self.name}' already running")
            return

        self._running = True
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"{self.name}-worker-{index}")
            for index in range(self.concurrency)
        ]
        logger.info(f"Started pipeline '{self.name}' (concurrency: {self.concurrency}, timeout: {self.job_timeout}s)")

    async def stop(self) -> None:
        """Stop the worker pool. Jobs still queued are dropped."""
        if not self._running:
            return

        self._running = False
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

        if self._queue.qsize():
            logger.warning(f"Pipeline '{self.name}' stopped with {self._queue.qsize()} unprocessed jobs")
        logger.info(f"Stopped pipeline '{self.name}'")

    def enqueue(self, payload: Dict[str, Any]) -> Job:
        job = Job(id=next(self._ids), pipeline=self.name, payload=dict(payload))
        self._queue.put_nowait(job)
        logger.debug(f"Job #{job.id} enqueued on '{self.name}'")
        self._publish(job)
        return job

    def subscribe(self) -> "asyncio.Queue[JobEvent]":
        events: "asyncio.Queue[JobEvent]" = asyncio.Queue()
        self._subscribers.append(events)
        return events

    def unsubscribe(self, events: "asyncio.Queue[JobEvent]") -> None:
        if events in self._subscribers:
            self._subscribers.remove(events)

    async def join(self) -> None:
        """Wait until every enqueued job has reached a terminal state."""
        await self._queue.join()

    async def _worker(self, index: int) -> None:
        while True:
            job = await self._queue.get()
            self._in_flight += 1
            try:
                await self._process(job)
            finally:
                self._in_flight -= 1
                self._queue.task_done()

    async def _process(self, job: Job) -> None:
        job.state = JobState.PROCESSING
        self._publish(job)

        try:
            job.result = await asyncio.wait_for(self.handler(job.payload), timeout=self.job_timeout)
            job.state = JobState.COMPLETED
        except asyncio.TimeoutError:
            job.error = f"timed out after {self.job_timeout}s"
            job.state = JobState.FAILED
        except asyncio.CancelledError:
            raise
        except Exception as e:
            job.error = str(e) or e.__class__.__name__
            job.state = JobState.FAILED
            logger.debug(f"Job #{job.id} on '{self.name}' raised", exc_info=True)

        if job.state is JobState.FAILED:
            self.dead_letters.append(DeadLetter(
                job_id=job.id,
                payload=job.payload,
                error=job.error,
                failed_at=datetime.now(timezone.utc),
            ))

        self._publish(job)

    def _publish(self, job: Job) -> None:
        if job.state is JobState.COMPLETED:
            logger.info(f"Job #{job.id} on '{self.name}' completed: {job.result}")
        elif job.state is JobState.FAILED:
            logger.error(f"Job #{job.id} on '{self.name}' failed: {job.error}")

        event = JobEvent(
            job_id=job.id,
            pipeline=self.name,
            state=job.state,
            payload=job.payload,
            result=job.result,
            error=job.error,
        )
        for events in self._subscribers:
            events.put_nowait(event)
