"""Exception hierarchy for lightpoint."""

from __future__ import annotations


class LightpointError(Exception):
    """Base exception for all lightpoint errors."""


class ProviderError(LightpointError):
    """Raised when an external LLM / embedding / image API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableError(ProviderError):
    """Rate limits, timeouts, 5xx."""


class NonRetryableError(ProviderError):
    """Auth errors, bad requests, 4xx other than 429. Never retried."""


class PreconditionError(LightpointError):
    """Required input is missing; raised before any external call is made."""


class GenerationError(LightpointError):
    """A named letter-pipeline stage failed.

    ``stage`` is one of ``stage1``, ``stage2``, ``stage3``. ``cause`` is the
    underlying exception (provider error, invalid output, timeout).
    """

    def __init__(self, stage: str, cause: BaseException | str) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")


class InvalidStageOutputError(LightpointError):
    """LLM output for a stage was empty or shorter than the minimum length."""


class ImageGenerationError(LightpointError):
    """Image generation failed for a single component (never fatal)."""


class RetrievalError(LightpointError):
    """Raised when knowledge retrieval fails."""


class SessionStateError(LightpointError):
    """Illegal transition on a letter generation session."""


class GenerationCancelled(LightpointError):
    """The subscriber went away; the pipeline stopped at a stage boundary."""
