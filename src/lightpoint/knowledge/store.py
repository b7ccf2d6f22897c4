"""Knowledge store protocol and an in-memory implementation."""

from __future__ import annotations

import math
from typing import NamedTuple, Protocol, Sequence, runtime_checkable

from lightpoint.models import KnowledgeChunk


@runtime_checkable
class KnowledgeStore(Protocol):
    """Similarity search over the knowledge corpus. Read-only from the core."""

    async def search(
        self,
        embedding: Sequence[float],
        *,
        threshold: float,
        limit: int,
    ) -> list[KnowledgeChunk]:
        """Chunks with similarity >= ``threshold``, best first, at most ``limit``."""
        ...


class _Entry(NamedTuple):
    id: str
    title: str
    category: str
    content: str
    embedding: tuple[float, ...]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise ValueError(f"Embedding dimensions differ: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0.0:
        return 0.0
    return dot / norm


class InMemoryKnowledgeStore:
    """Brute-force cosine search. Fine for tests and small local corpora."""

    def __init__(self) -> None:
        self._entries: list[_Entry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(
        self,
        id: str,
        title: str,
        category: str,
        content: str,
        embedding: Sequence[float],
    ) -> None:
        self._entries.append(_Entry(id, title, category, content, tuple(embedding)))

    async def search(
        self,
        embedding: Sequence[float],
        *,
        threshold: float,
        limit: int,
    ) -> list[KnowledgeChunk]:
        scored = []
        for entry in self._entries:
            # Negative cosine is clamped so similarity stays in [0, 1]
            sim = max(0.0, min(1.0, cosine_similarity(embedding, entry.embedding)))
            if sim >= threshold:
                scored.append((sim, entry))
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [
            KnowledgeChunk(
                id=entry.id,
                title=entry.title,
                category=entry.category,
                content=entry.content,
                similarity=sim,
            )
            for sim, entry in scored[:limit]
        ]
