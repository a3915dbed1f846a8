"""NotificationRouter — fans reminder alerts out to every registered channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatpilot.models import Reminder
    from chatpilot.notifications.channels import NotificationChannel

logger = logging.getLogger(__name__)


class NotificationRouter:
    """Delivers alerts to all channels.

    Built explicitly by the application and handed to the reminder scheduler.
    """

    def __init__(self) -> None:
        self._channels: dict[str, NotificationChannel] = {}

    def register_channel(self, channel: NotificationChannel) -> None:
        """Register a notification channel. Raises ValueError on duplicate name."""
        if channel.name in self._channels:
            msg = f"Channel '{channel.name}' is already registered"
            raise ValueError(msg)
        self._channels[channel.name] = channel

    def list_channels(self) -> list[str]:
        """Return names of all registered channels."""
        return list(self._channels.keys())

    async def notify(self, reminder: Reminder) -> bool:
        """Send *reminder* to every channel. True if at least one delivered it."""
        if not self._channels:
            logger.warning("No notification channels registered for reminder %s", reminder.id)
            return False

        delivered = False
        for channel in self._channels.values():
            try:
                ok = await channel.notify(reminder)
            except Exception:
                logger.exception("Channel %s raised for reminder %s", channel.name, reminder.id)
                continue
            if not ok:
                logger.warning("Channel %s did not deliver reminder %s", channel.name, reminder.id)
            delivered = delivered or ok
        return delivered
