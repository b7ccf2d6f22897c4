"""lightpoint: HMRC complaint content extraction, classification and letter generation.

Deterministic components work offline::

    from lightpoint import PatternExtractor, CaseClassifier, LayoutMapper

    extraction = PatternExtractor().extract(article_text)
    classification = CaseClassifier().classify(narrative)

LLM-backed components take a client built from ``AppSettings``::

    from lightpoint import AppSettings, LLMClient, ThreeStageLetterGenerator

    settings = AppSettings()
    generator = ThreeStageLetterGenerator(LLMClient(settings.llm), settings.letter)
"""

from __future__ import annotations

from lightpoint.classification import CaseClassifier
from lightpoint.core.config import AppSettings
from lightpoint.exceptions import (
    GenerationError,
    LightpointError,
    PreconditionError,
    ProviderError,
    RetrievalError,
)
from lightpoint.extraction import PatternExtractor
from lightpoint.knowledge import InMemoryKnowledgeStore, KnowledgeChat
from lightpoint.layout import LayoutMapper
from lightpoint.letters import ThreeStageLetterGenerator
from lightpoint.models import (
    CaseMetadata,
    Classification,
    ExtractionResult,
    Layout,
    Letter,
    LetterRequest,
)
from lightpoint.providers import LLMClient
from lightpoint.streaming import ProgressStreamingGateway

__all__ = [
    "AppSettings",
    "CaseClassifier",
    "CaseMetadata",
    "Classification",
    "ExtractionResult",
    "GenerationError",
    "InMemoryKnowledgeStore",
    "KnowledgeChat",
    "LLMClient",
    "Layout",
    "LayoutMapper",
    "Letter",
    "LetterRequest",
    "LightpointError",
    "PatternExtractor",
    "PreconditionError",
    "ProgressStreamingGateway",
    "ProviderError",
    "RetrievalError",
    "ThreeStageLetterGenerator",
]
