"""Async LLM client routed through LiteLLM for multi-provider support.

Every text-generation call in lightpoint (letter stages, knowledge chat) goes
through ``LLMClient.complete``. Model ids carry LiteLLM prefixes
(``openrouter/``, ``anthropic/``, ``openai/``, ``ollama/``) so one client
serves every provider.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from lightpoint.core.config import LLMConfig
from lightpoint.exceptions import NonRetryableError, ProviderError, RetryableError

log = logging.getLogger(__name__)


class LLMClient:
    """Async LLM client using LiteLLM.

    Transport-level retries are bounded by ``LLMConfig.max_retries``
    (default 1, meaning a single attempt). Callers above this layer never
    retry: a failure surfaces as ``ProviderError``.
    """

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable: everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import AuthenticationError, BadRequestError, NotFoundError

        return not isinstance(exc, (AuthenticationError, BadRequestError, NotFoundError))

    def _request_kwargs(self, model: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"timeout": self._config.timeout}
        if self._config.api_key not in ("", "no-key"):
            kwargs["api_key"] = self._config.api_key
        # OpenRouter model ids are routed by LiteLLM itself; a base_url only
        # applies to OpenAI-compatible gateways.
        if self._config.provider == "litellm" and self._config.base_url:
            kwargs["api_base"] = self._config.base_url
        return kwargs

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        model: str | None = None,
        chat_history: list[dict[str, Any]] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Single completion, returns content string.

        Args:
            prompt: User message content.
            system_prompt: Optional system message.
            model: Override model ID. Supports LiteLLM prefixes.
            chat_history: Prior conversation messages, inserted between the
                system message and ``prompt``.
            temperature: Override temperature.
            max_tokens: Override the completion token cap.

        Raises:
            NonRetryableError: auth / bad-request style failures.
            RetryableError: transient failures once attempts are exhausted.
        """
        from litellm import acompletion

        effective_model = model or self._config.model
        messages: list[dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        if chat_history:
            messages.extend(chat_history)
        messages.append({"role": "user", "content": prompt})

        attempts = max(1, self._config.max_retries)
        last_error: Exception | None = None
        for attempt in range(attempts):
            try:
                response = await acompletion(
                    model=effective_model,
                    messages=messages,
                    temperature=temperature if temperature is not None else self._config.temperature,
                    max_tokens=max_tokens or self._config.max_tokens,
                    **self._request_kwargs(effective_model),
                )
                return response.choices[0].message.content or ""

            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(
                        f"Non-retryable LLM error: {e}",
                        status_code=getattr(e, "status_code", None),
                    ) from e

                wait = min(2 ** attempt, 30.0) + random.uniform(0, 0.5)
                log.warning("LLM attempt %d/%d failed: %s", attempt + 1, attempts, e)
                if attempt < attempts - 1:
                    await asyncio.sleep(wait)

        raise RetryableError(
            f"LLM API failed after {attempts} attempt(s): {last_error}",
            status_code=getattr(last_error, "status_code", None),
        ) from last_error

    async def close(self) -> None:
        """No-op: LiteLLM manages its own connection pooling."""


def to_provider_error(exc: Exception) -> ProviderError:
    """Wrap an arbitrary transport exception as a ``ProviderError``."""
    if isinstance(exc, ProviderError):
        return exc
    return ProviderError(str(exc), status_code=getattr(exc, "status_code", None))
