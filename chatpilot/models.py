"""Data models for the transcript, reminders, and conversation memory."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from chatpilot.config import settings


def make_id() -> str:
    """Generate a new record ID."""
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Attach the configured timezone to a naive datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=settings.get_timezone())
    return value


class Message(BaseModel):
    """A single transcript entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=make_id)
    sender: Literal["bot", "user"]
    text: str
    image_url: str | None = None
    files: list[str] | None = None


class ReminderStatus(StrEnum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class Reminder(BaseModel):
    """A task the user asked to be reminded about.

    Attributes:
        id: Unique identifier (UUID hex).
        task: What to remind the user of.
        remind_at: When the reminder is due. Always timezone-aware; naive
            values are interpreted in the configured ``TIMEZONE``.
        status: ``pending`` until the scheduler delivers it, then ``sent``,
            or ``failed`` when no notification channel accepted it.
        email: Optional notification address.
        created_at: When the reminder was created.
    """

    id: str = Field(default_factory=make_id)
    task: str
    remind_at: datetime
    status: ReminderStatus = ReminderStatus.PENDING
    email: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("remind_at", "created_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @property
    def is_pending(self) -> bool:
        return self.status == ReminderStatus.PENDING

    def is_due(self, now: datetime) -> bool:
        return self.is_pending and self.remind_at <= now


class ConversationMemory(BaseModel):
    """One past exchange, optionally with an embedding of the user message."""

    id: str = Field(default_factory=make_id)
    user_message: str
    bot_response: str
    timestamp: datetime = Field(default_factory=_utcnow)
    embedding: list[float] | None = None

    @field_validator("timestamp")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)


class BotReply(BaseModel):
    """What the response router hands back for one user turn."""

    text: str
    image_url: str | None = None


ReminderList = TypeAdapter(list[Reminder])
MemoryList = TypeAdapter(list[ConversationMemory])
