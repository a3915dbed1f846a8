"""AssistantApp — wires storage, memory, reminders, notifications, and routing."""

from __future__ import annotations

import logging

from chatpilot.config import settings
from chatpilot.conversation import Conversation
from chatpilot.memory.store import VectorStore
from chatpilot.notifications.console_channel import ConsoleChannel
from chatpilot.notifications.inbox_channel import InboxChannel
from chatpilot.notifications.router import NotificationRouter
from chatpilot.reminders.scheduler import ReminderScheduler
from chatpilot.reminders.store import ReminderStore
from chatpilot.router.pipeline import ResponseRouter
from chatpilot.storage import KeyValueStore

logger = logging.getLogger(__name__)


class AssistantApp:
    """Composition root. Owns every long-lived component of a session.

    Args:
        kv: Durable storage (default: the shared KeyValueStore).
        notifications: Router for reminder alerts (default: a fresh router
            with the inbox channel, plus the console channel when
            ``CONSOLE_NOTIFICATIONS`` is on).
        memory: VectorStore override (default: built on *kv*).
    """

    def __init__(
        self,
        kv: KeyValueStore | None = None,
        notifications: NotificationRouter | None = None,
        memory: VectorStore | None = None,
    ) -> None:
        self.kv = kv or KeyValueStore.get()
        self.inbox = InboxChannel()
        if notifications is None:
            notifications = NotificationRouter()
            notifications.register_channel(self.inbox)
            if settings.console_notifications:
                notifications.register_channel(ConsoleChannel())
        self.notifications = notifications
        self.reminders = ReminderStore(self.kv)
        self.scheduler = ReminderScheduler(self.reminders, self.notifications)
        self.memory = memory or VectorStore(self.kv)
        self.router = ResponseRouter(self.memory, self.scheduler)
        self.conversation = Conversation(self.router)

    async def start(self) -> None:
        """Resume polling when pending reminders survive from an earlier run."""
        pending = await self.reminders.pending()
        if pending:
            logger.info("Found %d pending reminder(s) from storage", len(pending))
            await self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()
