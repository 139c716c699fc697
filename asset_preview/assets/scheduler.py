"""Periodic background refresh of remote asset mappings."""

from collections.abc import Awaitable, Callable
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from asset_preview.core.logger.logger import get_logger

logger = get_logger(__name__)

AUTO_REFRESH_JOB_ID = "auto_refresh_mappings"


class AutoRefreshScheduler:
    """Run a refresh coroutine on a fixed interval.

    Wraps an ``AsyncIOScheduler`` so it has to be started from inside a
    running event loop.
    """

    def __init__(self, job: Callable[[], Awaitable[Any]]) -> None:
        """Initialize the scheduler.

        Args:
            job: Coroutine function run on every tick.
        """
        self.job = job
        self.scheduler: AsyncIOScheduler | None = None
        self.interval_ms = 0

    def start(self, interval_ms: int) -> bool:
        """Start the periodic job.

        Args:
            interval_ms: Interval in milliseconds; ``<= 0`` leaves it stopped.

        Returns:
            True if the job was scheduled.
        """
        if self.is_running:
            logger.warning("Auto refresh already running")
            return True

        if interval_ms <= 0:
            logger.debug("Auto refresh disabled")
            return False

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.job,
            IntervalTrigger(seconds=interval_ms / 1000),
            id=AUTO_REFRESH_JOB_ID,
            name="Refresh Asset Mappings",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        self.interval_ms = interval_ms
        logger.info(f"Auto refresh started (every {interval_ms}ms)")
        return True

    def stop(self) -> None:
        """Stop the periodic job."""
        if self.scheduler is not None:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.scheduler = None
            self.interval_ms = 0
            logger.info("Auto refresh stopped")

    def restart(self, interval_ms: int) -> bool:
        """Stop and start again with a new interval.

        Args:
            interval_ms: Interval in milliseconds.

        Returns:
            True if the job is scheduled after the restart.
        """
        self.stop()
        return self.start(interval_ms)

    def get_jobs(self) -> list[dict[str, Any]]:
        """Get list of scheduled jobs.

        Returns:
            List of job info dictionaries.
        """
        if self.scheduler is None:
            return []
        jobs = []
        for job in self.scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger),
            })
        return jobs

    @property
    def is_running(self) -> bool:
        """Check if the scheduler is running."""
        return self.scheduler is not None and self.scheduler.running
