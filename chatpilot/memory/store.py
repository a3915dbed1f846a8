"""VectorStore — bounded conversation memory with embedding similarity search.

Every past exchange is kept with an embedding of the user message. The
collection holds at most ``memory_limit`` entries (oldest evicted first) and
is rewritten to storage in full after each mutation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatpilot.config import settings
from chatpilot.llm import huggingface
from chatpilot.memory.similarity import rank
from chatpilot.models import ConversationMemory, MemoryList
from chatpilot.storage import MEMORY_KEY

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from chatpilot.storage import KeyValueStore

logger = logging.getLogger(__name__)


class VectorStore:
    """Stores exchanges with embeddings and retrieves the most similar ones.

    Args:
        kv: Durable storage for the serialized collection.
        embed: Async callable returning an embedding for a string (empty list
            on failure). Defaults to the Hugging Face feature-extraction call.
        limit: Maximum number of stored memories.
        dimension: Expected embedding length. Vectors of any other length
            are discarded.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        embed: Callable[[str], Awaitable[list[float]]] | None = None,
        limit: int | None = None,
        dimension: int | None = None,
    ) -> None:
        self._kv = kv
        self._embed = embed or huggingface.feature_extraction
        self._limit = limit or settings.memory_limit
        self._dimension = dimension or settings.embedding_dimension

    @property
    def limit(self) -> int:
        return self._limit

    async def _embedding(self, text: str) -> list[float] | None:
        vector = await self._embed(text)
        if not vector:
            return None
        if len(vector) != self._dimension:
            logger.warning(
                "Discarding embedding with %d dimensions (expected %d)",
                len(vector),
                self._dimension,
            )
            return None
        return vector

    # -- Read ------------------------------------------------------------------

    async def get_all(self) -> list[ConversationMemory]:
        """Return all stored memories, oldest first."""
        return await self._kv.load_list(MEMORY_KEY, MemoryList)

    async def query(self, text: str, k: int | None = None) -> list[ConversationMemory]:
        """Return up to *k* memories most similar to *text*, best first.

        Memories without an embedding are never returned. If *text* cannot
        be embedded the result is empty.
        """
        k = settings.memory_context_size if k is None else k
        memories = await self.get_all()
        if not memories:
            return []

        query_vector = await self._embedding(text)
        if query_vector is None:
            logger.info("No query embedding; skipping memory retrieval")
            return []

        ranked = rank(query_vector, memories, k)
        logger.debug(
            "Memory query matched %d of %d: %s",
            len(ranked),
            len(memories),
            ", ".join(f"{score:.3f}" for _, score in ranked),
        )
        return [memory for memory, _ in ranked]

    # -- Write -----------------------------------------------------------------

    async def add(self, user_message: str, bot_response: str) -> ConversationMemory:
        """Embed *user_message*, append the exchange, and evict past the limit."""
        embedding = await self._embedding(user_message)
        memory = ConversationMemory(
            user_message=user_message,
            bot_response=bot_response,
            embedding=embedding,
        )

        memories = await self.get_all()
        memories.append(memory)
        evicted = len(memories) - self._limit
        if evicted > 0:
            memories = memories[evicted:]
            logger.debug("Evicted %d oldest memories", evicted)

        await self._kv.save_list(MEMORY_KEY, MemoryList, memories)
        logger.info(
            "Stored memory %s (embedding=%s, total=%d)",
            memory.id,
            "yes" if embedding else "no",
            len(memories),
        )
        return memory

    async def clear(self) -> int:
        """Delete all memories. Returns the count removed."""
        count = len(await self.get_all())
        await self._kv.delete(MEMORY_KEY)
        logger.info("Cleared %d memories", count)
        return count
