"""
Rate-Limited Dispatcher - Serializes outbound provider calls.

============================================================
RESPONSIBILITY
============================================================
Guarantees that provider calls submitted through it never start
less than a fixed minimum interval apart (12s for 5 calls/minute),
no matter how many callers submit concurrently or in bursts.

- submit(job) returns a future carrying exactly that job's outcome
- Strict FIFO: jobs run in submission order
- One drain loop at a time, guarded by the draining flag
- A failing job fails only its own future; the loop continues
- A job that raises CancelledError itself cancels only its own
  future; cancelling the drain task stops the loop
- No retries here; retrying is the caller's decision

============================================================
CONCURRENCY MODEL
============================================================
Single event loop, no locks. Queue inspection and mutation happen
between suspension points (awaiting a job, awaiting the interval),
so they are atomic with respect to other tasks.

One instance per process: the limit is global, not per symbol.

============================================================
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Deque, Optional, TypeVar

from core.clock import ClockProtocol, SystemClock
from core.constants import MIN_REQUEST_INTERVAL_SECONDS
from data_sources.exceptions import DispatchTimeoutError


logger = logging.getLogger(__name__)

T = TypeVar("T")

Job = Callable[[], Awaitable[T]]


@dataclass
class QueuedJob:
    """A deferred unit of work and the future that reports its outcome."""
    job: Job
    future: asyncio.Future
    sequence: int


class RateLimitedDispatcher:
    """
    Single-flight, interval-throttled FIFO queue.

    Drain algorithm:
        1. pop the head job and run it
        2. resolve/fail that job's future with its outcome
        3. if more jobs are waiting, sleep min_interval, then repeat
        4. when the queue is empty, clear the draining flag

    The first job of an idle queue starts immediately, unless the
    previous job finished less than min_interval ago, in which case
    only the remainder is waited.

    Usage:
        dispatcher = RateLimitedDispatcher(min_interval=12.0)
        payload = await dispatcher.submit(lambda: source.fetch_daily_series("AAPL"))
    """

    def __init__(
        self,
        min_interval: float = MIN_REQUEST_INTERVAL_SECONDS,
        clock: Optional[ClockProtocol] = None,
        job_timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            min_interval: Seconds between the end of one job and the
                start of the next
            clock: Time source; MockClock makes waits instantaneous in tests
            job_timeout: Optional per-job limit. A job that exceeds it
                fails with DispatchTimeoutError and the queue advances.
                Without it, a hung provider call stalls every job behind it.
        """
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self._min_interval = min_interval
        self._clock = clock or SystemClock()
        self._job_timeout = job_timeout

        self._queue: Deque[QueuedJob] = deque()
        self._draining = False
        self._drain_task: Optional[asyncio.Task] = None
        self._last_finished: Optional[float] = None
        self._sequence = 0

        self._completed_count = 0
        self._failed_count = 0

    # =========================================================
    # PUBLIC API
    # =========================================================

    def submit(self, job: Job) -> "asyncio.Future[T]":
        """
        Enqueue a zero-argument coroutine function.

        Must be called from within the running event loop.

        Returns:
            Future resolved with the job's result or failed with its exception
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        self._sequence += 1
        self._queue.append(QueuedJob(job=job, future=future, sequence=self._sequence))
        logger.debug(f"Job #{self._sequence} queued (pending={len(self._queue)})")

        if not self._draining:
            self._draining = True
            self._drain_task = loop.create_task(self._drain())

        return future

    @property
    def pending(self) -> int:
        """Jobs waiting to start."""
        return len(self._queue)

    @property
    def is_draining(self) -> bool:
        return self._draining

    @property
    def min_interval(self) -> float:
        return self._min_interval

    def get_stats(self) -> dict[str, Any]:
        """Snapshot of queue state for health reporting."""
        return {
            "pending": self.pending,
            "draining": self._draining,
            "min_interval_seconds": self._min_interval,
            "completed": self._completed_count,
            "failed": self._failed_count,
        }

    async def aclose(self) -> None:
        """Stop draining and cancel every job that has not started."""
        task = self._drain_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        while self._queue:
            queued = self._queue.popleft()
            if not queued.future.done():
                queued.future.cancel()
        logger.info("Dispatcher closed")

    # =========================================================
    # DRAIN LOOP
    # =========================================================

    async def _drain(self) -> None:
        try:
            await self._wait_since_last_job()

            while self._queue:
                queued = self._queue.popleft()

                if queued.future.cancelled():
                    logger.debug(f"Job #{queued.sequence} cancelled before start, skipping")
                    continue

                await self._run(queued)
                self._last_finished = self._clock.monotonic()

                if self._queue:
                    logger.debug(
                        f"Waiting {self._min_interval}s before next job "
                        f"(pending={len(self._queue)})"
                    )
                    await self._clock.sleep(self._min_interval)
        finally:
            self._draining = False
            self._drain_task = None

    async def _wait_since_last_job(self) -> None:
        if self._last_finished is None:
            return
        elapsed = self._clock.monotonic() - self._last_finished
        remaining = self._min_interval - elapsed
        if remaining > 0:
            logger.debug(f"Queue restarted {elapsed:.2f}s after last job, waiting {remaining:.2f}s")
            await self._clock.sleep(remaining)

    async def _run(self, queued: QueuedJob) -> None:
        future = queued.future
        try:
            if self._job_timeout is not None:
                try:
                    result = await asyncio.wait_for(queued.job(), timeout=self._job_timeout)
                except asyncio.TimeoutError as e:
                    raise DispatchTimeoutError(self._job_timeout) from e
            else:
                result = await queued.job()
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            # The job cancelled itself; only its own future is affected
            self._failed_count += 1
            logger.warning(f"Job #{queued.sequence} was cancelled from within")
            return
        except Exception as e:
            self._failed_count += 1
            logger.debug(f"Job #{queued.sequence} failed: {e}")
            if not future.done():
                future.set_exception(e)
            return

        self._completed_count += 1
        if not future.done():
            future.set_result(result)
