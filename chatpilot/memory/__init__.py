"""Conversation memory — vector store and similarity search."""

from chatpilot.memory.similarity import cosine_similarity, rank
from chatpilot.memory.store import VectorStore

__all__ = ["VectorStore", "cosine_similarity", "rank"]
