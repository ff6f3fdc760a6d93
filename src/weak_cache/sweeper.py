"""APScheduler-based cleanup sweeper."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = structlog.get_logger()


class CleanupSweeper:
    """Recurring job that runs a cleanup pass every ``interval`` seconds.

    The job runs on the scheduler's daemon thread. ``max_instances=1`` and
    ``coalesce=True`` keep a slow sweep from stacking up behind itself.
    """

    def __init__(self, sweep: Callable[[], int], interval: float) -> None:
        if interval <= 0:
            raise ValueError("cleanup interval must be positive")
        self._sweep = sweep
        self._interval = interval
        self._scheduler = BackgroundScheduler(daemon=True)
        self._stopped = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def _run_sweep(self) -> None:
        try:
            self._sweep()
        except Exception as e:
            logger.error("Cleanup sweep failed", error=str(e))

    def start(self) -> None:
        if self._stopped or self._scheduler.running:
            return

        self._scheduler.add_job(
            self._run_sweep,
            IntervalTrigger(seconds=self._interval),
            id="weak_cache_cleanup",
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info("Cleanup sweeper started", interval=self._interval)

    def stop(self) -> None:
        self._stopped = True
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Cleanup sweeper stopped")
