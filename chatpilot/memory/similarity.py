"""Cosine similarity and top-K ranking over stored embeddings."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chatpilot.models import ConversationMemory


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return dot(a, b) / (|a| * |b|).

    Empty vectors, vectors of different lengths, and zero-magnitude vectors
    all score 0.0.
    """
    if not a or not b or len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    mag_a = math.sqrt(sum(x * x for x in a))
    mag_b = math.sqrt(sum(x * x for x in b))
    if mag_a == 0 or mag_b == 0:
        return 0.0
    return dot / (mag_a * mag_b)


def rank(
    query: Sequence[float],
    memories: Sequence[ConversationMemory],
    k: int,
) -> list[tuple[ConversationMemory, float]]:
    """Score every memory that has an embedding and return the best *k*.

    Results are ordered by descending score; ties keep insertion order.
    """
    if k <= 0 or not query:
        return []
    scored = [
        (memory, cosine_similarity(query, memory.embedding))
        for memory in memories
        if memory.has_embedding
    ]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:k]
