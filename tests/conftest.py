"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from chatpilot.storage import KeyValueStore


class FakeEmbedder:
    """Async embedding stub that looks vectors up by exact text."""

    def __init__(self, vectors: dict[str, list[float]] | None = None) -> None:
        self.vectors = dict(vectors or {})
        self.calls: list[str] = []

    async def __call__(self, text: str) -> list[float]:
        self.calls.append(text)
        return list(self.vectors.get(text, []))


@pytest.fixture(autouse=True)
def _utc(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the configured timezone so rendered times are deterministic."""
    monkeypatch.setattr("chatpilot.config.settings.timezone", "UTC")


@pytest.fixture
def kv(tmp_path: Path) -> KeyValueStore:
    """Create a KeyValueStore backed by a temp database."""
    return KeyValueStore(db_path=tmp_path / "test.db")


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()
