"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lightpoint.core.config import AppSettings

log = logging.getLogger(__name__)

# Providers that use local auth and do not require an API key
_NO_KEY_PROVIDERS = frozenset({"ollama"})


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ValueError on fatal misconfig."""
    _check_api_key(settings)
    _check_letter_budget(settings)
    _check_retrieval(settings)


def _check_api_key(settings: AppSettings) -> None:
    """Reject placeholder API keys for providers that need real ones."""
    if settings.llm.provider not in _NO_KEY_PROVIDERS:
        if settings.llm.api_key in ("no-key", ""):
            raise ValueError(
                f"LIGHTPOINT_LLM_API_KEY is required for provider '{settings.llm.provider}'. "
                f"Set it via environment variable or secrets manager."
            )


def _check_letter_budget(settings: AppSettings) -> None:
    """A per-stage timeout longer than the whole budget can never be reached."""
    letter = settings.letter
    if letter.stage_timeout_seconds > letter.total_budget_seconds:
        log.warning(
            "LIGHTPOINT_LETTER_STAGE_TIMEOUT_SECONDS (%.0fs) exceeds the total budget (%.0fs); "
            "the total budget will cut stages short.",
            letter.stage_timeout_seconds,
            letter.total_budget_seconds,
        )


def _check_retrieval(settings: AppSettings) -> None:
    """Sources are drawn from the matches, so there can never be more sources than matches."""
    retrieval = settings.retrieval
    if retrieval.source_count > retrieval.match_limit:
        raise ValueError(
            f"LIGHTPOINT_RETRIEVAL_SOURCE_COUNT ({retrieval.source_count}) must not exceed "
            f"LIGHTPOINT_RETRIEVAL_MATCH_LIMIT ({retrieval.match_limit})."
        )
