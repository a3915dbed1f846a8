"""Reminders — intent parsing, persistence, and the delivery poller."""

from chatpilot.reminders.parser import ParsedReminder, parse_reminder, parse_reminder_fallback
from chatpilot.reminders.scheduler import ReminderScheduler
from chatpilot.reminders.store import ReminderStore

__all__ = [
    "ParsedReminder",
    "ReminderScheduler",
    "ReminderStore",
    "parse_reminder",
    "parse_reminder_fallback",
]
