"""Inbox channel — queues alerts for the HTTP client to poll."""

from __future__ import annotations

import logging
from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from chatpilot.notifications.channels import ALERT_TITLE, alert_body

if TYPE_CHECKING:
    from chatpilot.models import Reminder

logger = logging.getLogger(__name__)

MAX_QUEUED_ALERTS = 100


class InboxChannel:
    """Holds fired alerts in memory until ``drain()`` hands them to a client."""

    def __init__(self, maxlen: int = MAX_QUEUED_ALERTS) -> None:
        self._alerts: deque[dict[str, Any]] = deque(maxlen=maxlen)

    @property
    def name(self) -> str:
        return "inbox"

    def __len__(self) -> int:
        return len(self._alerts)

    async def notify(self, reminder: Reminder) -> bool:
        self._alerts.append({
            "reminder_id": reminder.id,
            "title": ALERT_TITLE,
            "body": alert_body(reminder),
            "task": reminder.task,
            "remind_at": reminder.remind_at.isoformat(),
            "fired_at": datetime.now(UTC).isoformat(),
        })
        logger.debug("Queued inbox alert for reminder %s", reminder.id)
        return True

    def drain(self) -> list[dict[str, Any]]:
        """Return and forget every queued alert."""
        alerts = list(self._alerts)
        self._alerts.clear()
        return alerts
