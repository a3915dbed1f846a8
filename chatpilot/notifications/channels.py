"""NotificationChannel protocol — interface for all reminder delivery channels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chatpilot.models import Reminder

ALERT_TITLE = "⏰ Reminder Alert"


def alert_body(reminder: Reminder) -> str:
    return f"Time to: {reminder.task}"


@runtime_checkable
class NotificationChannel(Protocol):
    """Protocol that all notification channels must satisfy."""

    @property
    def name(self) -> str:
        """Unique channel identifier (e.g. 'console', 'inbox')."""
        ...

    async def notify(self, reminder: Reminder) -> bool:
        """Deliver a due reminder. Returns True on success."""
        ...
