"""Text embedding via ``litellm.aembedding``."""

from __future__ import annotations

import logging

from lightpoint.core.config import LLMConfig
from lightpoint.exceptions import ProviderError
from lightpoint.providers.client import to_provider_error

log = logging.getLogger(__name__)


class LiteLLMEmbedder:
    """Embeds a single text with the configured embedding model."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    async def embed(self, text: str) -> list[float]:
        from litellm import aembedding

        kwargs = {"timeout": self._config.timeout}
        if self._config.api_key not in ("", "no-key"):
            kwargs["api_key"] = self._config.api_key
        try:
            response = await aembedding(model=self._config.embedding_model, input=[text], **kwargs)
        except Exception as e:
            log.warning("Embedding call failed: %s", e)
            raise to_provider_error(e) from e

        if not response.data:
            raise ProviderError("Embedding response contained no vectors")
        return list(response.data[0]["embedding"])
