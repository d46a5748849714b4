"""Cleanup Scheduler 서비스 레이어입니다. 고정된 UTC 시각에 매일 고아 파일 정리를 실행합니다."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from backoffice.config import settings
from backoffice.services.cleanup_service import CleanupService, cleanup_service
from backoffice.utils.background import spawn_background

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CleanupScheduler:
    """Daily trigger for ``CleanupService.perform_cleanup``.

    The fire time is a fixed UTC wall-clock instant, so no timezone-aware cron
    support is needed. Overlapping runs are prevented by the service's run-lock,
    not here.
    """

    def __init__(
        self,
        service: CleanupService,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.service = service
        self.hour = settings.CLEANUP_SCHEDULE_HOUR_UTC if hour is None else hour
        self.minute = settings.CLEANUP_SCHEDULE_MINUTE_UTC if minute is None else minute
        self.clock = clock
        self.next_run: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def next_run_at(self, after: Optional[datetime] = None) -> datetime:
        after = after or self.clock()
        candidate = after.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= after:
            candidate += timedelta(days=1)
        return candidate

    def start(self) -> datetime:
        """Register the daily trigger, replacing any existing one. Needs a running loop."""
        if self.is_active:
            logger.info("[cleanup] scheduler already active, replacing existing trigger")
        self.stop()
        self.next_run = self.next_run_at()
        self._task = asyncio.get_running_loop().create_task(self._run(), name="cleanup-scheduler")
        logger.info("[cleanup] scheduler started, next run at %s", self.next_run.isoformat())
        return self.next_run

    def stop(self) -> bool:
        task, self._task = self._task, None
        self.next_run = None
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("[cleanup] scheduler stopped")
        return True

    async def _run(self) -> None:
        target = self.next_run or self.next_run_at()
        while True:
            delay = (target - self.clock()).total_seconds()
            await asyncio.sleep(max(delay, 0))
            logger.info("[cleanup] scheduled cleanup triggered")
            spawn_background(self.service.perform_cleanup(), name="scheduled-cleanup")
            target = self.next_run_at(target)
            self.next_run = target


cleanup_scheduler = CleanupScheduler(cleanup_service)


def get_cleanup_scheduler() -> CleanupScheduler:
    return cleanup_scheduler
