"""KeyValueStore — aiosqlite-backed durable storage for serialized collections.

Each logical table (``reminders``, ``conversation_memory``) lives in a single
row as one JSON blob and is rewritten in full on every mutation.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiosqlite
from pydantic import ValidationError

from chatpilot.config import settings

if TYPE_CHECKING:
    from pathlib import Path

    from pydantic import TypeAdapter

logger = logging.getLogger(__name__)

REMINDERS_KEY = "reminders"
MEMORY_KEY = "conversation_memory"

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class KeyValueStore:
    """Persists string values by key in SQLite.

    Singleton accessed via ``KeyValueStore.get()``.  Pass an explicit
    *db_path* for test isolation (e.g. ``tmp_path / "test.db"``).
    """

    _instance: KeyValueStore | None = None

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or settings.database_path
        self._initialised = False

    @classmethod
    def get(cls) -> KeyValueStore:
        """Return the shared KeyValueStore instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    @property
    def path(self) -> Path:
        return self._db_path

    # -- Internal helpers ------------------------------------------------------

    async def _connect(self) -> aiosqlite.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        db = await aiosqlite.connect(str(self._db_path))
        if not self._initialised:
            await db.execute(_CREATE_TABLE)
            await db.commit()
            self._initialised = True
        return db

    # -- Raw values ------------------------------------------------------------

    async def get_value(self, key: str) -> str | None:
        """Fetch the raw value stored under *key*, or None."""
        db = await self._connect()
        try:
            cursor = await db.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return row[0] if row else None
        finally:
            await db.close()

    async def set_value(self, key: str, value: str) -> None:
        """Insert or replace the value stored under *key*."""
        db = await self._connect()
        try:
            await db.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )
            await db.commit()
        finally:
            await db.close()

    async def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if a row was deleted."""
        db = await self._connect()
        try:
            cursor = await db.execute("DELETE FROM kv WHERE key = ?", (key,))
            await db.commit()
            return cursor.rowcount > 0
        finally:
            await db.close()

    # -- Typed collections -----------------------------------------------------

    async def load_list(self, key: str, adapter: TypeAdapter[list[Any]]) -> list[Any]:
        """Deserialize the collection under *key*.

        A missing key yields an empty list. So does a corrupt blob, which is
        logged and otherwise ignored.
        """
        raw = await self.get_value(key)
        if raw is None:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError:
            logger.exception("Discarding unreadable '%s' blob (%d bytes)", key, len(raw))
            return []

    async def save_list(
        self, key: str, adapter: TypeAdapter[list[Any]], items: list[Any]
    ) -> None:
        """Serialize and store the full collection under *key*."""
        await self.set_value(key, adapter.dump_json(items).decode())
        logger.debug("Saved %d item(s) under '%s'", len(items), key)
