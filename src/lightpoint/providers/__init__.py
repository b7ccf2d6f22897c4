"""External capabilities: LLM completion, embeddings and image generation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lightpoint.providers.client import LLMClient
from lightpoint.providers.embeddings import LiteLLMEmbedder
from lightpoint.providers.images import LiteLLMImageGenerator, build_image_prompt


@runtime_checkable
class Completer(Protocol):
    """Anything with ``LLMClient.complete``'s signature (tests use fakes)."""

    async def complete(self, prompt: str, *, system_prompt: str | None = None, **kwargs) -> str: ...


@runtime_checkable
class Embedder(Protocol):
    async def embed(self, text: str) -> list[float]: ...


@runtime_checkable
class ImageGenerator(Protocol):
    """Returns an image URL for a prompt, raising ``ImageGenerationError`` on failure."""

    async def generate(self, prompt: str) -> str: ...


__all__ = [
    "Completer",
    "Embedder",
    "ImageGenerator",
    "LLMClient",
    "LiteLLMEmbedder",
    "LiteLLMImageGenerator",
    "build_image_prompt",
]
