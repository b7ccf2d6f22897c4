"""Knowledge retrieval and chat."""

from __future__ import annotations

from lightpoint.knowledge.chat import KnowledgeChat, conversation_summary, conversation_title
from lightpoint.knowledge.store import InMemoryKnowledgeStore, KnowledgeStore, cosine_similarity

__all__ = [
    "InMemoryKnowledgeStore",
    "KnowledgeChat",
    "KnowledgeStore",
    "conversation_summary",
    "conversation_title",
    "cosine_similarity",
]
