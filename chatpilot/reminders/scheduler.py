"""ReminderScheduler — APScheduler poller that fires due reminders."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from chatpilot.config import settings
from chatpilot.models import ReminderStatus

if TYPE_CHECKING:
    from chatpilot.models import Reminder
    from chatpilot.notifications.router import NotificationRouter
    from chatpilot.reminders.store import ReminderStore

logger = logging.getLogger(__name__)

POLL_JOB_ID = "reminder-poller"


class ReminderScheduler:
    """Polls the reminder store on a fixed interval and delivers due reminders.

    Each due reminder goes through the notification router and moves from
    ``pending`` to ``sent``, or to ``failed`` when no channel delivered it.

    Args:
        store: ReminderStore for reading and updating reminders.
        router: NotificationRouter used to deliver alerts.
        interval_seconds: Polling interval (default from settings).
    """

    def __init__(
        self,
        store: ReminderStore,
        router: NotificationRouter,
        interval_seconds: int | None = None,
    ) -> None:
        self._store = store
        self._router = router
        self._interval = interval_seconds or settings.reminder_poll_seconds
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    @property
    def interval(self) -> int:
        return self._interval

    # -- Lifecycle -------------------------------------------------------------

    async def start(self) -> None:
        """Start the polling job. A second call while running is a no-op."""
        if self._scheduler is not None:
            return
        scheduler = AsyncIOScheduler(timezone=UTC)
        scheduler.add_job(
            self.check_due,
            trigger=IntervalTrigger(seconds=self._interval),
            id=POLL_JOB_ID,
            name="Reminder poller",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Reminder poller started (every %ds)", self._interval)

    async def ensure_started(self) -> None:
        """Start the poller on first use."""
        if self._scheduler is None:
            await self.start()

    async def stop(self) -> None:
        """Shut down the polling job."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Reminder poller stopped")

    # -- Polling ---------------------------------------------------------------

    async def schedule(self, task: str, remind_at: datetime, email: str | None = None) -> Reminder:
        """Persist a new pending reminder and make sure the poller is running."""
        reminder = await self._store.add(task, remind_at, email=email)
        await self.ensure_started()
        return reminder

    async def check_due(self, now: datetime | None = None) -> list[Reminder]:
        """Deliver every pending reminder whose time has arrived.

        Returns the reminders that were processed, with their new status.
        """
        now = now or datetime.now(UTC)
        due = [r for r in await self._store.pending() if r.is_due(now)]
        for reminder in due:
            try:
                await self._fire(reminder)
            except Exception:
                logger.exception("Failed to process reminder %s", reminder.id)
        if due:
            logger.info("Processed %d due reminder(s)", len(due))
        return due

    async def _fire(self, reminder: Reminder) -> None:
        logger.info("Sending reminder: '%s' (%s)", reminder.task, reminder.id)
        delivered = await self._router.notify(reminder)
        reminder.status = ReminderStatus.SENT if delivered else ReminderStatus.FAILED
        await self._store.update_status(reminder.id, reminder.status)
