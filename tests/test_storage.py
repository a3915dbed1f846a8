"""Tests for KeyValueStore — aiosqlite persistence."""

from datetime import UTC, datetime

from chatpilot.models import ConversationMemory, MemoryList, Reminder, ReminderList
from chatpilot.storage import MEMORY_KEY, REMINDERS_KEY, KeyValueStore


async def test_get_missing_value(kv: KeyValueStore) -> None:
    assert await kv.get_value("nothing") is None


async def test_set_and_get_value(kv: KeyValueStore) -> None:
    await kv.set_value("k", "v1")
    assert await kv.get_value("k") == "v1"


async def test_set_overwrites(kv: KeyValueStore) -> None:
    await kv.set_value("k", "v1")
    await kv.set_value("k", "v2")
    assert await kv.get_value("k") == "v2"


async def test_delete(kv: KeyValueStore) -> None:
    await kv.set_value("k", "v1")
    assert await kv.delete("k") is True
    assert await kv.get_value("k") is None
    assert await kv.delete("k") is False


async def test_keys_are_independent(kv: KeyValueStore) -> None:
    await kv.set_value(REMINDERS_KEY, "[]")
    await kv.set_value(MEMORY_KEY, "[]")
    await kv.delete(REMINDERS_KEY)
    assert await kv.get_value(MEMORY_KEY) == "[]"


async def test_load_list_missing_is_empty(kv: KeyValueStore) -> None:
    assert await kv.load_list(REMINDERS_KEY, ReminderList) == []


async def test_load_list_corrupt_blob_is_empty(kv: KeyValueStore) -> None:
    await kv.set_value(REMINDERS_KEY, "{not json")
    assert await kv.load_list(REMINDERS_KEY, ReminderList) == []


async def test_load_list_wrong_shape_is_empty(kv: KeyValueStore) -> None:
    await kv.set_value(MEMORY_KEY, '[{"unexpected": true}]')
    assert await kv.load_list(MEMORY_KEY, MemoryList) == []


async def test_reminders_round_trip(kv: KeyValueStore) -> None:
    original = [Reminder(task="call mom", remind_at=datetime(2030, 1, 5, 15, 0, tzinfo=UTC))]
    await kv.save_list(REMINDERS_KEY, ReminderList, original)

    restored = await kv.load_list(REMINDERS_KEY, ReminderList)

    assert restored == original
    assert restored[0].remind_at == datetime(2030, 1, 5, 15, 0, tzinfo=UTC)


async def test_memories_round_trip(kv: KeyValueStore) -> None:
    original = [
        ConversationMemory(user_message="hi", bot_response="hello", embedding=[0.5, 0.25]),
        ConversationMemory(user_message="bye", bot_response="see you"),
    ]
    await kv.save_list(MEMORY_KEY, MemoryList, original)

    restored = await kv.load_list(MEMORY_KEY, MemoryList)

    assert restored == original
    assert restored[0].timestamp == original[0].timestamp
    assert restored[1].embedding is None


async def test_persists_across_instances(kv: KeyValueStore) -> None:
    await kv.set_value("k", "v")
    other = KeyValueStore(db_path=kv.path)
    assert await other.get_value("k") == "v"


def test_singleton_get() -> None:
    KeyValueStore._reset()
    try:
        a = KeyValueStore.get()
        b = KeyValueStore.get()
        assert a is b
    finally:
        KeyValueStore._reset()
