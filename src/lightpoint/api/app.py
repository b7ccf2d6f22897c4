"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from lightpoint.api.middleware.error_handler import register_error_handlers
from lightpoint.api.routes import classify, extract, health, knowledge, letters
from lightpoint.core.config import APIConfig, AppSettings
from lightpoint.core.startup_checks import validate_settings
from lightpoint.hooks import setup_logging
from lightpoint.knowledge import InMemoryKnowledgeStore
from lightpoint.prompts import configure as configure_prompts
from lightpoint.providers import LiteLLMEmbedder, LiteLLMImageGenerator, LLMClient


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("lightpoint-core")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup/shutdown lifecycle."""
    settings = AppSettings()
    validate_settings(settings)
    setup_logging(settings.observability)
    configure_prompts()

    client = LLMClient(settings.llm)
    app.state.settings = settings
    app.state.llm_client = client
    app.state.embedder = LiteLLMEmbedder(settings.llm)
    app.state.image_generator = LiteLLMImageGenerator(settings.llm)
    # Populated by whoever owns the corpus; empty means every chat gets the no-results note
    app.state.knowledge_store = InMemoryKnowledgeStore()
    yield
    await client.close()


_api_config = APIConfig()

app = FastAPI(
    title=_api_config.title,
    description=_api_config.description,
    version=_get_version(),
    lifespan=lifespan,
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(extract.router, prefix="/api")
app.include_router(classify.router, prefix="/api")
app.include_router(letters.router, prefix="/api")
app.include_router(knowledge.router, prefix="/api")
