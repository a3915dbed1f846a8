"""Tests for AssistantApp wiring and startup."""

from datetime import UTC, datetime, timedelta

from chatpilot.app import AssistantApp
from chatpilot.models import ReminderStatus
from chatpilot.notifications.router import NotificationRouter
from chatpilot.storage import KeyValueStore


def test_default_channels(kv: KeyValueStore, monkeypatch) -> None:
    monkeypatch.setattr("chatpilot.config.settings.console_notifications", True)
    app = AssistantApp(kv=kv)
    assert app.notifications.list_channels() == ["inbox", "console"]


def test_console_channel_optional(kv: KeyValueStore, monkeypatch) -> None:
    monkeypatch.setattr("chatpilot.config.settings.console_notifications", False)
    app = AssistantApp(kv=kv)
    assert app.notifications.list_channels() == ["inbox"]


def test_custom_notification_router(kv: KeyValueStore) -> None:
    router = NotificationRouter()
    app = AssistantApp(kv=kv, notifications=router)
    assert app.notifications is router
    assert router.list_channels() == []


async def test_start_without_pending_leaves_poller_off(kv: KeyValueStore) -> None:
    app = AssistantApp(kv=kv)
    await app.start()
    assert app.scheduler.running is False


async def test_start_resumes_pending_reminders(kv: KeyValueStore, monkeypatch) -> None:
    monkeypatch.setattr("chatpilot.config.settings.console_notifications", False)
    first = AssistantApp(kv=kv)
    reminder = await first.reminders.add("call mom", datetime.now(UTC) + timedelta(hours=1))

    second = AssistantApp(kv=KeyValueStore(db_path=kv.path))
    try:
        await second.start()
        assert second.scheduler.running is True
    finally:
        await second.stop()
    assert second.scheduler.running is False

    fetched = await second.reminders.get(reminder.id)
    assert fetched is not None
    assert fetched.status == ReminderStatus.PENDING


async def test_fired_reminder_reaches_inbox(kv: KeyValueStore, monkeypatch) -> None:
    monkeypatch.setattr("chatpilot.config.settings.console_notifications", False)
    app = AssistantApp(kv=kv)
    await app.reminders.add("stretch", datetime.now(UTC) - timedelta(seconds=1))

    await app.scheduler.check_due()

    assert [a["task"] for a in app.inbox.drain()] == ["stretch"]
