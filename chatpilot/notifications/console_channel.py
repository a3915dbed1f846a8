"""Console implementation of the NotificationChannel protocol."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

from chatpilot.notifications.channels import ALERT_TITLE, alert_body

if TYPE_CHECKING:
    from chatpilot.models import Reminder

logger = logging.getLogger(__name__)

BELL = "\a"


class ConsoleChannel:
    """Prints the alert to a terminal stream and rings the bell."""

    def __init__(self, stream: TextIO | None = None, *, bell: bool = True) -> None:
        self._stream = stream
        self._bell = bell

    @property
    def name(self) -> str:
        return "console"

    async def notify(self, reminder: Reminder) -> bool:
        stream = self._stream or sys.stderr
        prefix = BELL if self._bell else ""
        try:
            stream.write(f"{prefix}{ALERT_TITLE}: {alert_body(reminder)}\n")
            stream.flush()
        except OSError:
            logger.exception("ConsoleChannel.notify failed for reminder %s", reminder.id)
            return False
        logger.info("Console alert for reminder %s", reminder.id)
        return True
