"""Knowledge base chat endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from lightpoint.api.deps import get_completer, get_embedder, get_knowledge_store, get_settings
from lightpoint.core.config import AppSettings
from lightpoint.knowledge import KnowledgeChat, KnowledgeStore, conversation_title
from lightpoint.models import ChatMessage, ChatResponse
from lightpoint.providers import Completer, Embedder

router = APIRouter(tags=["knowledge"])


class AskRequest(BaseModel):
    question: str = Field(min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)


class AskResponse(ChatResponse):
    title: str = ""


@router.post("/knowledge/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    settings: AppSettings = Depends(get_settings),
    client: Completer = Depends(get_completer),
    embedder: Embedder = Depends(get_embedder),
    store: KnowledgeStore = Depends(get_knowledge_store),
) -> AskResponse:
    chat = KnowledgeChat(client, embedder, store, settings.retrieval)
    response = await chat.ask(request.question, request.history)
    # A conversation is titled from its first user message
    first = next((m.content for m in request.history if m.role == "user"), request.question)
    return AskResponse(**response.model_dump(), title=conversation_title(first))
