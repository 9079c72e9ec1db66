from __future__ import annotations

import logging
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

JOB_ID = "sweep_expired_files"


class ExpirySweeper:
    """Runs ``sweep`` every ``interval`` seconds on a background scheduler.

    ``stop()`` shuts the scheduler down at once; a sweep already running is
    left to finish its transaction.
    """

    def __init__(self, sweep: Callable[[], int], interval: float = 60.0):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.sweep = sweep
        self.interval = interval
        self._scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if self.running:
            return
        self._scheduler = BackgroundScheduler(daemon=True)
        self._scheduler.add_job(
            func=self.run_once,
            trigger="interval",
            seconds=self.interval,
            id=JOB_ID,
            name="Clean up expired files",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("Expiry sweeper started, interval=%ss", self.interval)

    def stop(self, wait: bool = True) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("Expiry sweeper stopped")
        self._scheduler = None

    def run_once(self) -> int | None:
        try:
            return self.sweep()
        except Exception:
            logger.exception("Expiry sweep failed")
            return None
