"""Request-scoped access to the services built at startup.

Routes depend on these functions rather than on ``app.state`` directly so
tests can swap any of them via ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Request

from lightpoint.core.config import AppSettings
from lightpoint.knowledge.store import KnowledgeStore
from lightpoint.providers import Completer, Embedder, ImageGenerator


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_completer(request: Request) -> Completer:
    return request.app.state.llm_client


def get_embedder(request: Request) -> Embedder:
    return request.app.state.embedder


def get_image_generator(request: Request) -> ImageGenerator:
    return request.app.state.image_generator


def get_knowledge_store(request: Request) -> KnowledgeStore:
    return request.app.state.knowledge_store
