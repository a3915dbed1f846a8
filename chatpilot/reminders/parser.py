"""Reminder intent extraction — Claude first, regex plus dateutil as fallback."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from dateutil import parser as date_parser

from chatpilot.config import settings
from chatpilot.llm.client import complete_text
from chatpilot.llm.prompt import build_reminder_prompt
from chatpilot.models import ensure_aware

logger = logging.getLogger(__name__)

FALLBACK_PATTERN = re.compile(r"remind me to (.+?) (?:on|at|in) (.+)", re.IGNORECASE)
_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
# dateutil reads "2 hours" as 02:00, so relative offsets are handled first
_RELATIVE_RE = re.compile(r"^(\d+)\s*(minute|min|hour|hr|day|week)s?$", re.IGNORECASE)
_RELATIVE_UNITS = {
    "minute": "minutes",
    "min": "minutes",
    "hour": "hours",
    "hr": "hours",
    "day": "days",
    "week": "weeks",
}


@dataclass(frozen=True)
class ParsedReminder:
    """A reminder request extracted from a user message."""

    task: str
    remind_at: datetime


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model sometimes wraps JSON in."""
    return _FENCE_RE.sub("", text).strip()


def parse_model_reply(raw: str) -> ParsedReminder | None:
    """Interpret the model's JSON verdict.

    Returns None when the model says the message is not a reminder.

    Raises:
        ValueError: if the reply is not the expected JSON shape or the
            datetime is invalid.
    """
    data = json.loads(strip_code_fences(raw))
    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    if not data.get("isReminder"):
        return None

    task = data.get("task")
    if not isinstance(task, str) or not task.strip():
        msg = f"Missing task in reminder reply: {data!r}"
        raise ValueError(msg)

    when = data.get("datetime")
    if not isinstance(when, str):
        msg = f"Missing datetime in reminder reply: {data!r}"
        raise ValueError(msg)
    return ParsedReminder(task=task.strip(), remind_at=ensure_aware(datetime.fromisoformat(when)))


def parse_reminder_fallback(text: str, now: datetime | None = None) -> ParsedReminder | None:
    """Match ``remind me to <task> (on|at|in) <when>`` and parse ``<when>``.

    ``<when>`` is either a relative offset (``"2 hours"``) or anything
    dateutil understands. Missing date fields default to today in the
    configured timezone and missing time fields to midnight. A result with
    no explicit date that has already passed moves to its next occurrence.
    """
    match = FALLBACK_PATTERN.search(text)
    if not match:
        return None

    task = match.group(1).strip()
    when = match.group(2).strip().rstrip(".!?")
    now = now or datetime.now(settings.get_timezone())

    relative = _RELATIVE_RE.match(when)
    if relative:
        unit = _RELATIVE_UNITS[relative.group(2).lower()]
        offset = timedelta(**{unit: int(relative.group(1))})
        return ParsedReminder(task=task, remind_at=now + offset)

    default = now.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
    try:
        remind_at = date_parser.parse(when, default=default)
        # differs from remind_at only when *when* names no calendar date
        next_day = date_parser.parse(when, default=default + timedelta(days=1))
    except (ValueError, OverflowError):
        logger.info("Fallback parser could not read a date from %r", when)
        return None

    tz = now.tzinfo or settings.get_timezone()
    if remind_at.tzinfo is None:
        remind_at = remind_at.replace(tzinfo=tz)
        next_day = next_day.replace(tzinfo=tz)
    if remind_at <= now and next_day != remind_at:
        logger.info("Time %r already passed today; using %s", when, next_day.isoformat())
        remind_at = next_day
    return ParsedReminder(task=task, remind_at=remind_at)


async def parse_reminder(text: str, now: datetime | None = None) -> ParsedReminder | None:
    """Classify *text* as a reminder request.

    The model's verdict wins when it is well formed. A failed call, an
    unparseable reply, or an invalid datetime falls back to the regex parser.
    """
    now = now or datetime.now(settings.get_timezone())
    try:
        raw = await complete_text(
            [{"role": "user", "content": build_reminder_prompt(text, now)}],
            max_tokens=256,
        )
    except Exception:
        logger.exception("Reminder classification call failed; using fallback parser")
        return parse_reminder_fallback(text, now)

    try:
        parsed = parse_model_reply(raw)
    except ValueError:
        logger.warning("Unusable reminder reply %r; using fallback parser", raw[:200])
        return parse_reminder_fallback(text, now)

    if parsed:
        logger.info("Reminder detected: %r at %s", parsed.task, parsed.remind_at.isoformat())
    return parsed
