"""ReminderStore — CRUD over the persisted ``reminders`` collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatpilot.models import Reminder, ReminderList, ReminderStatus
from chatpilot.storage import REMINDERS_KEY

if TYPE_CHECKING:
    from datetime import datetime

    from chatpilot.storage import KeyValueStore

logger = logging.getLogger(__name__)


class ReminderStore:
    """Reads and rewrites the full reminder list on every operation.

    There is no locking: a concurrent read-modify-write from the poller and
    a user action resolves as last write wins.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def get_all(self) -> list[Reminder]:
        """Return all reminders in creation order."""
        return await self._kv.load_list(REMINDERS_KEY, ReminderList)

    async def _save(self, reminders: list[Reminder]) -> None:
        await self._kv.save_list(REMINDERS_KEY, ReminderList, reminders)

    async def get(self, reminder_id: str) -> Reminder | None:
        """Fetch a reminder by ID, or None if not found."""
        for reminder in await self.get_all():
            if reminder.id == reminder_id:
                return reminder
        return None

    async def pending(self) -> list[Reminder]:
        return [r for r in await self.get_all() if r.is_pending]

    async def add(self, task: str, remind_at: datetime, email: str | None = None) -> Reminder:
        """Create and persist a pending reminder."""
        reminder = Reminder(task=task, remind_at=remind_at, email=email)
        reminders = await self.get_all()
        reminders.append(reminder)
        await self._save(reminders)
        logger.info("Added reminder: %s (%s)", reminder.task, reminder.id)
        return reminder

    async def update_status(self, reminder_id: str, status: ReminderStatus) -> bool:
        """Set a reminder's status. Returns False if it no longer exists."""
        reminders = await self.get_all()
        for reminder in reminders:
            if reminder.id == reminder_id:
                reminder.status = status
                await self._save(reminders)
                logger.info("Reminder %s → %s", reminder_id, status)
                return True
        logger.info("Reminder %s vanished before status update to %s", reminder_id, status)
        return False

    async def delete(self, reminder_id: str) -> bool:
        """Delete a reminder. Returns True if it existed."""
        reminders = await self.get_all()
        remaining = [r for r in reminders if r.id != reminder_id]
        if len(remaining) == len(reminders):
            return False
        await self._save(remaining)
        logger.info("Deleted reminder: %s", reminder_id)
        return True

    async def clear(self) -> int:
        """Delete every reminder. Returns the count removed."""
        count = len(await self.get_all())
        await self._kv.delete(REMINDERS_KEY)
        logger.info("Cleared %d reminder(s)", count)
        return count
