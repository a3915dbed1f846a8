"""Reminder alert delivery — channel protocol, channels, and router."""

from chatpilot.notifications.channels import NotificationChannel
from chatpilot.notifications.console_channel import ConsoleChannel
from chatpilot.notifications.inbox_channel import InboxChannel
from chatpilot.notifications.router import NotificationRouter

__all__ = ["ConsoleChannel", "InboxChannel", "NotificationChannel", "NotificationRouter"]
