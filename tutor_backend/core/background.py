"""
Bounded background job runner.

Runs fire-and-forget coroutines (assistant turn writes, lesson indexing)
outside the request/response cycle. Concurrency is capped by a semaphore,
every task is tracked so shutdown can drain it, and failures are logged
with structured context instead of disappearing.

Dependencies: asyncio, tutor_backend.observability
System role: Background work executor for the assistant
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from tutor_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """
    Tracked, concurrency-limited executor for async jobs.

    Jobs are started with asyncio.create_task, so they inherit the caller's
    contextvars (correlation ID) and keep running if the request that
    scheduled them is cancelled.
    """

    def __init__(self, max_concurrency: int = 8) -> None:
        """
        Initialize runner.

        Args:
            max_concurrency: Jobs allowed to run at the same time
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._tasks: set[asyncio.Task] = set()
        self._failures = 0

    @property
    def pending(self) -> int:
        """Number of jobs not yet finished."""
        return len(self._tasks)

    @property
    def failures(self) -> int:
        """Number of jobs that raised since the runner was created."""
        return self._failures

    def submit(
        self,
        job: Callable[..., Awaitable[Any]],
        *args: Any,
        description: str = "background job",
        **kwargs: Any,
    ) -> asyncio.Task:
        """
        Schedule a coroutine function for background execution.

        Must be called from a running event loop.

        Args:
            job: Coroutine function to run
            *args: Positional arguments for job
            description: Label used in logs
            **kwargs: Keyword arguments for job

        Returns:
            asyncio.Task: Handle of the scheduled job
        """
        task = asyncio.create_task(self._run(job, args, kwargs, description))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"{__name__}:submit - Scheduled {description}, pending={self.pending}")
        return task

    async def _run(
        self,
        job: Callable[..., Awaitable[Any]],
        args: tuple,
        kwargs: dict,
        description: str,
    ) -> None:
        async with self._semaphore:
            try:
                await job(*args, **kwargs)
            except asyncio.CancelledError:
                logger.warning(f"{__name__}:_run - Cancelled {description}")
                raise
            except Exception as e:
                self._failures += 1
                log_exception_with_context(
                    logger,
                    f"{__name__}:_run - Background job failed: {description}",
                    e,
                    job=description,
                )

    async def drain(self, timeout: float | None = None) -> bool:
        """
        Wait for all currently scheduled jobs.

        Args:
            timeout: Seconds to wait (None = no limit)

        Returns:
            bool: True if every job finished within the timeout
        """
        if not self._tasks:
            return True
        _, still_running = await asyncio.wait(set(self._tasks), timeout=timeout)
        return not still_running

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Drain jobs, cancelling whatever is still running after timeout."""
        finished = await self.drain(timeout)
        if finished:
            return
        logger.warning(
            f"{__name__}:shutdown - Cancelling {self.pending} unfinished background jobs"
        )
        remaining = set(self._tasks)
        for task in remaining:
            task.cancel()
        await asyncio.gather(*remaining, return_exceptions=True)
