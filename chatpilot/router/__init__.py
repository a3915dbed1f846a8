"""Response routing — intent classification and per-intent handlers."""

from chatpilot.router.attachments import Attachment
from chatpilot.router.intents import (
    ChatIntent,
    FileIntent,
    ImageIntent,
    Intent,
    ReminderIntent,
    classify,
)
from chatpilot.router.pipeline import ResponseRouter

__all__ = [
    "Attachment",
    "ChatIntent",
    "FileIntent",
    "ImageIntent",
    "Intent",
    "ReminderIntent",
    "ResponseRouter",
    "classify",
]
