"""Prompt assembly for reminder parsing, file analysis, and context-augmented chat."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from chatpilot.models import ConversationMemory

REMINDER_PROMPT = """You are a smart reminder parsing assistant. Analyze the following text \
and determine if it's a reminder request.

User message: "{text}"

Current date and time: {now}

If this is a reminder request, extract:
1. The task/what to remind
2. The date and time

Respond ONLY with valid JSON in this exact format (no markdown, no extra text):
{{
  "isReminder": true or false,
  "task": "the task description",
  "datetime": "ISO 8601 date string (YYYY-MM-DDTHH:mm:ss)"
}}

Examples of valid reminders:
- "remind me to call mom tomorrow at 3pm"
- "set a reminder for my meeting on Dec 25 at 10:00"
- "don't forget to buy groceries on Friday 5pm"
- "remind me in 2 hours to take medicine"

If it's NOT a reminder request, set isReminder to false."""

IMAGE_PROMPT = "A high-quality, detailed image of {subject}"


def build_reminder_prompt(text: str, now: datetime) -> str:
    """Ask the model to classify *text* as a reminder, relative to *now* (local time)."""
    return REMINDER_PROMPT.format(text=text, now=now.strftime("%A, %Y-%m-%d %H:%M:%S"))


def format_context(memories: list[ConversationMemory]) -> str:
    """Render retrieved exchanges as ``User:``/``Bot:`` pairs."""
    return "\n\n".join(f"User: {m.user_message}\nBot: {m.bot_response}" for m in memories)


def build_chat_prompt(prompt: str, context: str | None = None) -> str:
    """Prefix *prompt* with retrieved conversation context, if any."""
    if not context:
        return prompt
    return f"Based on our previous conversations:\n{context}\n\nCurrent question: {prompt}"


def build_file_prompt(prompt: str, contents: list[str]) -> str:
    """Append extracted file text to the user's prompt."""
    if not contents:
        return prompt
    return f"{prompt}\n\nFile contents:\n" + "\n\n".join(contents)


def build_image_prompt(subject: str) -> str:
    return IMAGE_PROMPT.format(subject=subject)
