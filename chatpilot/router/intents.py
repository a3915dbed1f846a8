"""Intent classification — one pass that decides how a user turn is handled.

The classifiers run in a fixed order and the first match wins: reminder
request, image request, attached files, plain chat.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

from chatpilot.reminders.parser import ParsedReminder, parse_reminder
from chatpilot.router.attachments import Attachment, partition

logger = logging.getLogger(__name__)

IMAGE_REQUEST_PATTERN = re.compile(
    r"\b(generate|create|draw|imagine|make|show me)\s+(an?|some)?\s*images?\s+of\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ReminderIntent:
    task: str
    remind_at: datetime


@dataclass(frozen=True)
class ImageIntent:
    subject: str


@dataclass(frozen=True)
class FileIntent:
    images: list[Attachment] = field(default_factory=list)
    documents: list[Attachment] = field(default_factory=list)


@dataclass(frozen=True)
class ChatIntent:
    pass


Intent = ReminderIntent | ImageIntent | FileIntent | ChatIntent


def extract_image_subject(text: str) -> str | None:
    """Return what the user wants drawn, or None if *text* is not an image request.

    The first trigger phrase is removed and whitespace collapsed, so
    ``"generate an image of a red fox"`` yields ``"a red fox"``. A request
    with nothing left after the trigger is not treated as an image request.
    """
    if not IMAGE_REQUEST_PATTERN.search(text):
        return None
    subject = " ".join(IMAGE_REQUEST_PATTERN.sub("", text, count=1).split())
    return subject or None


async def classify(
    prompt: str,
    attachments: list[Attachment] | None = None,
    *,
    reminder_parser: Callable[[str], Awaitable[ParsedReminder | None]] | None = None,
) -> Intent:
    """Decide which pipeline handles this turn."""
    if prompt.strip():
        reminder = await (reminder_parser or parse_reminder)(prompt)
        if reminder is not None:
            return ReminderIntent(task=reminder.task, remind_at=reminder.remind_at)

        subject = extract_image_subject(prompt)
        if subject is not None:
            return ImageIntent(subject=subject)

    if attachments:
        images, documents = partition(list(attachments))
        logger.info("Attachments: %d image(s), %d document(s)", len(images), len(documents))
        return FileIntent(images=images, documents=documents)

    return ChatIntent()
