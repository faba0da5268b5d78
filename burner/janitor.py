"""
Job Janitor

Periodically removes job records older than the retention window together
with their rendered output, so completed artifacts do not accumulate.
"""

import asyncio
import logging
from contextlib import suppress
from datetime import datetime, timedelta
from typing import List, Optional

from burner.jobs import JobRegistry

logger = logging.getLogger(__name__)


class Janitor:
    """
    Background sweeper over a JobRegistry.

    Records of any state are eligible once created_at is older than the
    retention window. A record reaped while its pipeline still runs only
    loses its registry entry; the pipeline cleans up its own files.
    """

    def __init__(self, registry: JobRegistry, interval: float = 3600, retention: float = 3600):
        """
        Initialize janitor.

        Args:
            registry: Registry to sweep
            interval: Seconds between sweeps
            retention: Age in seconds after which a record is removed
        """
        self.registry = registry
        self.interval = interval
        self.retention = retention
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self, now: Optional[datetime] = None) -> List[str]:
        """
        Remove expired records and their output files.

        Args:
            now: Reference time (defaults to datetime.now())

        Returns:
            Ids of removed jobs
        """
        cutoff = (now or datetime.now()) - timedelta(seconds=self.retention)
        reaped = []

        for job_id, job in self.registry.items():
            if job.created_at >= cutoff:
                continue
            if self.registry.delete(job_id) is None:
                continue
            reaped.append(job_id)

            if job.output_path is not None:
                try:
                    job.output_path.unlink(missing_ok=True)
                except OSError as e:
                    logger.warning(f"Failed to remove output {job.output_path} for job {job_id}: {e}")

        if reaped:
            logger.info(
                f"Janitor removed {len(reaped)} expired jobs",
                extra={"metadata": {"reaped": reaped, "remaining": len(self.registry)}},
            )
        return reaped

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Janitor sweep failed: {e}", exc_info=True)

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name="janitor")
        logger.info(f"Janitor started (interval={self.interval:g}s, retention={self.retention:g}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Janitor stopped")
