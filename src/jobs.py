"""In-process background job coordinator.

Guarantees at most one running job per ``(job_type, subject_id)`` key within
this process. Jobs are fire-and-forget from the caller's point of view: a
duplicate request while a job is running is dropped, not queued, and job
failures are logged rather than propagated.
"""

import asyncio
import time
from typing import Awaitable, Callable

import structlog

logger = structlog.get_logger().bind(source="jobs")

JobFactory = Callable[[], Awaitable[object]]


def job_key(job_type: str, subject_id: str) -> str:
    return f"{job_type}:{subject_id}"


class JobCoordinator:
    """Registry of running job keys plus the tasks that own them."""

    def __init__(self):
        self._active: dict[str, asyncio.Task] = {}

    @property
    def active_jobs(self) -> list[str]:
        return sorted(self._active)

    def is_running(self, job_type: str, subject_id: str) -> bool:
        return job_key(job_type, subject_id) in self._active

    def run(self, job_type: str, subject_id: str, task: JobFactory) -> asyncio.Task | None:
        """Schedule ``task()`` unless a job with the same key is already running.

        Must be called from inside a running event loop. Returns the scheduled
        task, or None when the call was a no-op.
        """
        key = job_key(job_type, subject_id)
        if key in self._active:
            logger.warning("jobs.skipped_duplicate", job=key)
            return None

        # create_task only schedules; _execute cannot release the key before it is stored
        scheduled = asyncio.create_task(self._execute(key, task), name=key)
        self._active[key] = scheduled
        return scheduled

    async def _execute(self, key: str, task: JobFactory) -> None:
        start = time.monotonic()
        logger.info("jobs.started", job=key)
        try:
            await task()
            logger.info("jobs.completed", job=key, duration_ms=int((time.monotonic() - start) * 1000))
        except asyncio.CancelledError:
            logger.warning("jobs.cancelled", job=key)
            raise
        except Exception as e:
            logger.error(
                "jobs.failed",
                job=key,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        finally:
            self._active.pop(key, None)

    async def shutdown(self, timeout: float = 10.0) -> None:
        """Wait up to ``timeout`` seconds for running jobs, then cancel the rest."""
        tasks = list(self._active.values())
        if not tasks:
            return
        logger.info("jobs.shutdown_waiting", count=len(tasks), timeout=timeout)
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("jobs.shutdown_cancelled", count=len(pending))


job_coordinator = JobCoordinator()
