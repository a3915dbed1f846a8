"""ResponseRouter — turns one user message (plus files) into a bot reply.

Flow for each turn:
1. Classify once (reminder → image request → files → plain chat).
2. Dispatch to the matching handler.
3. File and chat turns are written to conversation memory.

Every remote failure degrades to a fixed message; ``respond`` never raises.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatpilot.config import settings
from chatpilot.llm.client import SUPPORTED_IMAGE_TYPES, ImagePart, complete_prompt
from chatpilot.llm.prompt import build_chat_prompt, build_file_prompt, format_context
from chatpilot.models import BotReply
from chatpilot.router.attachments import extract_text
from chatpilot.router.images import generate_image
from chatpilot.router.intents import FileIntent, ImageIntent, ReminderIntent, classify

if TYPE_CHECKING:
    from datetime import datetime

    from chatpilot.memory.store import VectorStore
    from chatpilot.reminders.scheduler import ReminderScheduler
    from chatpilot.router.attachments import Attachment

logger = logging.getLogger(__name__)

CHAT_ERROR = "⚠️ Sorry, I couldn't generate a response."
FILE_ERROR = "⚠️ Error processing files. Please try again."
REMINDER_ERROR = "⚠️ Sorry, I couldn't save that reminder. Please try again."
UNSUPPORTED_IMAGE_ERROR = "⚠️ Unsupported image format. Please use JPEG, PNG, GIF, or WebP."

DEFAULT_IMAGE_PROMPT = "Describe this image in detail. What do you see?"
DEFAULT_FILE_PROMPT = "Summarize the attached file contents."


def format_when(value: datetime) -> str:
    """Render a reminder time in the configured timezone."""
    return value.astimezone(settings.get_timezone()).strftime("%Y-%m-%d %H:%M %Z")


def reminder_confirmation(task: str, remind_at: datetime) -> str:
    return (
        "✅ Reminder set!\n\n"
        f"📋 Task: {task}\n"
        f"⏰ Time: {format_when(remind_at)}\n\n"
        "I'll notify you when it's time! 🔔"
    )


class ResponseRouter:
    """Routes user turns to reminders, image generation, file analysis, or chat.

    Args:
        memory: VectorStore for context retrieval and exchange storage.
        reminders: ReminderScheduler that persists reminders and runs the poller.
    """

    def __init__(self, memory: VectorStore, reminders: ReminderScheduler) -> None:
        self._memory = memory
        self._reminders = reminders

    async def respond(self, prompt: str, attachments: list[Attachment] | None = None) -> BotReply:
        """Produce the reply for one user turn."""
        intent = await classify(prompt, attachments)
        logger.info("Routing turn as %s", type(intent).__name__)

        if isinstance(intent, ReminderIntent):
            return await self._handle_reminder(intent)
        if isinstance(intent, ImageIntent):
            return await generate_image(intent.subject)
        if isinstance(intent, FileIntent):
            return await self._handle_files(prompt, intent)
        return await self._handle_chat(prompt)

    # -- Handlers --------------------------------------------------------------

    async def _handle_reminder(self, intent: ReminderIntent) -> BotReply:
        try:
            reminder = await self._reminders.schedule(intent.task, intent.remind_at)
        except Exception:
            logger.exception("Failed to schedule reminder %r", intent.task)
            return BotReply(text=REMINDER_ERROR)
        return BotReply(text=reminder_confirmation(reminder.task, reminder.remind_at))

    async def _handle_files(self, prompt: str, intent: FileIntent) -> BotReply:
        """Send images and extracted document text to the model in one call.

        Images in a format the model cannot read are skipped with a warning.
        """
        images = []
        for attachment in intent.images:
            if attachment.content_type in SUPPORTED_IMAGE_TYPES:
                images.append(ImagePart(data=attachment.data, media_type=attachment.content_type))
            else:
                logger.warning(
                    "Skipping unsupported image %s (%s)",
                    attachment.filename,
                    attachment.content_type,
                )
        if not images and not intent.documents:
            return BotReply(text=UNSUPPORTED_IMAGE_ERROR)

        if not prompt.strip():
            only_images = images and not intent.documents
            prompt = DEFAULT_IMAGE_PROMPT if only_images else DEFAULT_FILE_PROMPT

        try:
            contents = []
            for document in intent.documents:
                text = await extract_text(document)
                if text:
                    contents.append(text)
            response = await complete_prompt(build_file_prompt(prompt, contents), images)
        except Exception:
            logger.exception(
                "File processing failed (%d image(s), %d document(s))",
                len(images),
                len(intent.documents),
            )
            return BotReply(text=FILE_ERROR)

        await self._remember(prompt, response)
        return BotReply(text=response)

    async def _handle_chat(self, prompt: str) -> BotReply:
        """Answer with the most similar past exchanges as context."""
        try:
            similar = await self._memory.query(prompt, settings.memory_context_size)
        except Exception:
            logger.exception("Memory retrieval failed")
            similar = []

        context = format_context(similar) if similar else None
        try:
            response = await complete_prompt(build_chat_prompt(prompt, context))
        except Exception:
            logger.exception("Text generation failed")
            response = CHAT_ERROR

        await self._remember(prompt, response)
        return BotReply(text=response)

    async def _remember(self, prompt: str, response: str) -> None:
        try:
            await self._memory.add(prompt, response)
        except Exception:
            logger.exception("Failed to store conversation memory")
