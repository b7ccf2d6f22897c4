"""Retrieval-augmented chat over the HMRC guidance knowledge base."""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from lightpoint.core.config import RetrievalConfig
from lightpoint.exceptions import ProviderError, RetrievalError
from lightpoint.hooks.run_tracker import track_stage
from lightpoint.knowledge.store import KnowledgeStore
from lightpoint.models import ChatMessage, ChatResponse, ChatSource, KnowledgeChunk
from lightpoint.prompts.registry import get_prompt
from lightpoint.providers import Completer, Embedder

log = logging.getLogger(__name__)

_EXCERPT_CHARS = 200
_TITLE_CHARS = 50


class KnowledgeChat:
    """Embed the question, retrieve similar chunks, answer with one LLM call."""

    def __init__(
        self,
        client: Completer,
        embedder: Embedder,
        store: KnowledgeStore,
        config: RetrievalConfig | None = None,
    ) -> None:
        self._client = client
        self._embedder = embedder
        self._store = store
        self._config = config or RetrievalConfig()

    async def ask(
        self,
        question: str,
        history: Optional[Sequence[ChatMessage]] = None,
    ) -> ChatResponse:
        """Answer ``question`` using the knowledge base.

        Retrieval returning nothing is not an error: the model is told no
        entries matched and still answers.

        Raises:
            RetrievalError: embedding or store lookup failed.
            ProviderError: the chat completion failed.
        """
        started = time.monotonic()
        chunks = await self.retrieve(question)
        context = self.build_context(chunks)

        system_prompt = get_prompt("knowledge", "chat", "CHAT_SYSTEM").format(context=context)
        chat_history = [{"role": m.role, "content": m.content} for m in history or ()]
        with track_stage("knowledge_chat"):
            answer = await self._client.complete(
                question,
                system_prompt=system_prompt,
                model=self._config.chat_model or None,
                chat_history=chat_history,
                temperature=self._config.chat_temperature,
                max_tokens=self._config.chat_max_tokens,
            )

        elapsed_ms = (time.monotonic() - started) * 1000
        log.info("Knowledge chat answered in %.0fms (%d chunks)", elapsed_ms, len(chunks))
        return ChatResponse(
            answer=answer,
            sources=self.sources(chunks),
            chunks=chunks,
            metadata={"processing_ms": round(elapsed_ms, 1), "match_count": len(chunks)},
        )

    async def retrieve(self, question: str) -> list[KnowledgeChunk]:
        with track_stage("knowledge_retrieval"):
            try:
                embedding = await self._embedder.embed(question)
                return await self._store.search(
                    embedding,
                    threshold=self._config.similarity_threshold,
                    limit=self._config.match_limit,
                )
            except ProviderError as e:
                raise RetrievalError(f"Embedding failed: {e}") from e

    def build_context(self, chunks: Sequence[KnowledgeChunk]) -> str:
        if not chunks:
            return get_prompt("knowledge", "chat", "NO_RESULTS_NOTE")
        template = get_prompt("knowledge", "chat", "CHUNK_TEMPLATE")
        limit = self._config.chunk_preview_chars
        blocks = []
        for index, chunk in enumerate(chunks, start=1):
            content = chunk.content[:limit] + ("..." if len(chunk.content) > limit else "")
            blocks.append(
                template.format(
                    index=index,
                    title=chunk.title,
                    category=chunk.category,
                    content=content,
                    relevance=round(chunk.similarity * 100),
                )
            )
        return "\n\n".join(blocks)

    def sources(self, chunks: Sequence[KnowledgeChunk]) -> list[ChatSource]:
        """Top matches by similarity, whether or not the answer cites them."""
        ranked = sorted(chunks, key=lambda c: c.similarity, reverse=True)
        return [
            ChatSource(
                title=c.title,
                category=c.category,
                excerpt=c.content[:_EXCERPT_CHARS] + "...",
                relevance=round(c.similarity * 100),
            )
            for c in ranked[: self._config.source_count]
        ]


def conversation_title(first_message: str) -> str:
    text = first_message.strip()
    if len(text) > _TITLE_CHARS:
        return text[: _TITLE_CHARS - 3] + "..."
    return text


def conversation_summary(messages: Sequence[ChatMessage]) -> str:
    """One-line summary built from the user's turns."""
    if not messages:
        return ""
    topics = "; ".join(m.content[:100] for m in messages if m.role == "user")
    return f"Discussion about: {topics[:200]}{'...' if len(topics) > 200 else ''}"
