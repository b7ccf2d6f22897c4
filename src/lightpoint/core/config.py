"""Nested pydantic-settings configuration for the application.

Each sub-config reads its own ``LIGHTPOINT_<GROUP>_*`` env vars and is passed
explicitly into the component that needs it::

    settings = AppSettings()
    extractor = PatternExtractor(settings.extraction)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """LLM backend configuration.

    Env vars use ``LIGHTPOINT_LLM_`` prefix::

        export LIGHTPOINT_LLM_PROVIDER=openrouter
        export LIGHTPOINT_LLM_API_KEY=sk-or-...
    """

    model_config = {"env_prefix": "LIGHTPOINT_LLM_"}

    provider: Literal["openrouter", "openai", "anthropic", "ollama", "litellm"] = "openrouter"
    base_url: str = "https://openrouter.ai/api/v1"
    api_key: str = "no-key"
    model: str = "openrouter/anthropic/claude-sonnet-4.5"
    temperature: float = 0.3
    max_tokens: int = 2000
    timeout: float = 120.0
    # Transport-level attempts per call. The pipelines themselves never retry.
    max_retries: int = 1
    embedding_model: str = "text-embedding-3-small"
    image_model: str = "openrouter/google/gemini-3-pro-image-preview"


class StageModelConfig(BaseModel):
    """Model parameters for one letter-pipeline stage."""

    model: str = ""
    temperature: float = 0.2
    max_tokens: int = 2500


class LetterConfig(BaseSettings):
    """Three-stage letter generation configuration.

    Env vars use ``LIGHTPOINT_LETTER_`` prefix.
    """

    model_config = {"env_prefix": "LIGHTPOINT_LETTER_"}

    stage1: StageModelConfig = StageModelConfig(
        model="openrouter/anthropic/claude-sonnet-4.5", temperature=0.2, max_tokens=2500,
    )
    stage2: StageModelConfig = StageModelConfig(
        model="openrouter/anthropic/claude-opus-4.1", temperature=0.2, max_tokens=2500,
    )
    stage3: StageModelConfig = StageModelConfig(
        model="openrouter/anthropic/claude-opus-4.1", temperature=0.3, max_tokens=3500,
    )
    min_stage_chars: int = Field(default=50, ge=1)
    stage_timeout_seconds: float = Field(default=180.0, gt=0.0)
    total_budget_seconds: float = Field(default=300.0, gt=0.0)
    currency_symbol: str = "£"
    # How often the streaming gateway polls for a departed subscriber
    disconnect_poll_seconds: float = Field(default=0.5, gt=0.0)


class ExtractionConfig(BaseSettings):
    """Pattern extraction configuration.

    Env vars use ``LIGHTPOINT_EXTRACTION_`` prefix.
    """

    model_config = {"env_prefix": "LIGHTPOINT_EXTRACTION_"}

    label_window: int = Field(default=4, ge=1, le=12)
    min_quote_chars: int = Field(default=12, ge=1)
    min_bare_integer: int = 1000
    context_chars: int = 60


class ClassificationConfig(BaseSettings):
    """Classification thresholds and the tunable signal weight table.

    ``weight_overrides`` maps signal names (see ``classification.signals``)
    to replacement weights, so the table can be calibrated against labelled
    cases without code changes.
    """

    model_config = {"env_prefix": "LIGHTPOINT_CLASSIFICATION_"}

    signal_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    low_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    saturation: float = Field(default=3.0, gt=0.0)
    weight_overrides: dict[str, float] = Field(default_factory=dict)
    appeal_window_days: int = 30


class LayoutConfig(BaseSettings):
    """Layout mapping configuration.

    Env vars use ``LIGHTPOINT_LAYOUT_`` prefix.
    """

    model_config = {"env_prefix": "LIGHTPOINT_LAYOUT_"}

    theme: str = "lightpoint"
    stats_per_grid: int = Field(default=4, ge=1)
    max_list_items: int = Field(default=6, ge=1)
    components_per_section: int = Field(default=3, ge=1)
    max_image_sections: int = Field(default=3, ge=0)
    image_concurrency: int = Field(default=3, ge=1)
    image_timeout_seconds: float = 60.0


class RetrievalConfig(BaseSettings):
    """Knowledge retrieval configuration.

    Env vars use ``LIGHTPOINT_RETRIEVAL_`` prefix.
    """

    model_config = {"env_prefix": "LIGHTPOINT_RETRIEVAL_"}

    similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    match_limit: int = Field(default=10, ge=1)
    source_count: int = Field(default=5, ge=1)
    chunk_preview_chars: int = 800
    chat_model: str = "openrouter/anthropic/claude-opus-4.1"
    chat_temperature: float = 0.7
    chat_max_tokens: int = 2000


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    Env vars use ``LIGHTPOINT_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "LIGHTPOINT_OBSERVABILITY_"}

    service_name: str = "lightpoint-core"
    log_level: str = "INFO"
    json_logs: bool | None = None


class APIConfig(BaseSettings):
    """HTTP surface configuration."""

    model_config = {"env_prefix": "LIGHTPOINT_API_"}

    title: str = "Lightpoint Core"
    description: str = "HMRC complaint extraction, classification and letter generation"
    port: int = 8080


class AppSettings(BaseSettings):
    """Top-level application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "LIGHTPOINT_"}

    llm: LLMConfig = Field(default_factory=LLMConfig)
    letter: LetterConfig = Field(default_factory=LetterConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    api: APIConfig = Field(default_factory=APIConfig)
