"""Pydantic data models for lightpoint.

Extraction and knowledge models are frozen: once produced they are read-only
projections. Layout content is a tagged union discriminated on ``kind`` so the
mapper boundary never passes untyped dicts downstream.
"""

from __future__ import annotations

import datetime as dt
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from lightpoint.exceptions import SessionStateError

# ── Extraction models ────────────────────────────────────────────────


class Stat(BaseModel):
    """A numeric statistic with its unit and the label phrase preceding it."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: float
    unit: Optional[str] = None
    raw: str = ""
    position: int = 0


class Quote(BaseModel):
    """Quoted or block-quoted text with optional attribution."""

    model_config = ConfigDict(frozen=True)

    text: str
    attribution: Optional[str] = None
    position: int = 0


class ListItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    marker: str = "-"


class ListGroup(BaseModel):
    """A run of consecutive list lines."""

    model_config = ConfigDict(frozen=True)

    style: Literal["bullet", "numbered"] = "bullet"
    items: tuple[ListItem, ...] = ()
    position: int = 0


class TimelineEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    description: str
    raw_date: str = ""
    position: int = 0


class Comparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    left: str
    right: str
    connective: str = "vs"
    position: int = 0


class KeyPercentage(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    context: str = ""
    position: int = 0


class ExtractionResult(BaseModel):
    """All entities pulled from one text, each sequence in source order.

    ``timeline`` is the exception: it is sorted chronologically
    (non-decreasing, stable for equal dates).
    """

    model_config = ConfigDict(frozen=True)

    stats: tuple[Stat, ...] = ()
    quotes: tuple[Quote, ...] = ()
    lists: tuple[ListGroup, ...] = ()
    timeline: tuple[TimelineEntry, ...] = ()
    comparisons: tuple[Comparison, ...] = ()
    key_percentages: tuple[KeyPercentage, ...] = ()

    def is_empty(self) -> bool:
        return not (
            self.stats
            or self.quotes
            or self.lists
            or self.timeline
            or self.comparisons
            or self.key_percentages
        )


# ── Classification models ────────────────────────────────────────────


class CaseType(str, Enum):
    """Case types an HMRC matter can be routed as."""

    COMPLAINT = "complaint"
    PENALTY_APPEAL = "penalty_appeal"
    MIXED = "mixed"
    STATUTORY_REVIEW = "statutory_review"
    TRIBUNAL_APPEAL = "tribunal_appeal"


class PenaltyDetails(BaseModel):
    """Penalty metadata. Fields stay ``None`` unless a signal supports them."""

    penalty_type: Optional[str] = None
    regime: Optional[str] = None
    amount: Optional[float] = None
    tax_years: list[str] = Field(default_factory=list)
    appeal_deadline: Optional[date] = None
    statute: Optional[str] = None


class Routing(BaseModel):
    primary_letter_type: str
    secondary_letter_type: Optional[str] = None
    recipient_team: str
    pipeline: Literal["complaint", "penalty_appeal"] = "complaint"


class Classification(BaseModel):
    """Outcome of one ``classify`` call.

    ``override`` produces a new instance; ``signals`` and ``confidence`` are
    kept from the original for audit.
    """

    primary_type: CaseType
    secondary_type: Optional[CaseType] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    signals: list[str] = Field(default_factory=list)
    scores: dict[str, float] = Field(default_factory=dict)
    penalty_details: Optional[PenaltyDetails] = None
    routing: Routing
    low_confidence: bool = False
    overridden: bool = False
    original_primary_type: Optional[CaseType] = None


class DocumentAnalysis(BaseModel):
    """Structured facts pulled from a single uploaded document."""

    dates: list[dict[str, str]] = Field(default_factory=list)
    amounts: list[dict[str, str]] = Field(default_factory=list)
    references: list[dict[str, str]] = Field(default_factory=list)
    correspondence: list[dict[str, str]] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    hmrc_quotes: list[str] = Field(default_factory=list)
    deadlines: list[dict[str, str]] = Field(default_factory=list)
    charter_violations: list[str] = Field(default_factory=list)
    summary: str = ""


# ── Letter generation models ─────────────────────────────────────────


class CaseMetadata(BaseModel):
    """Caller-supplied case details used to render the letter."""

    case_reference: str = ""
    department: str = ""
    practice_letterhead: str = ""
    charge_out_rate: Optional[float] = Field(default=None, ge=0.0)
    user_name: str = ""
    user_title: str = ""
    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    additional_context: str = ""
    letter_type: Optional[Literal["complaint", "penalty_appeal"]] = None
    letter_date: Optional[date] = None


class Letter(BaseModel):
    content: str
    pipeline: str = "complaint"
    case_reference: str = ""
    stage_durations_ms: dict[str, float] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LetterRequest(BaseModel):
    """Everything one streamed generation needs."""

    analysis: Union[str, dict[str, Any]]
    metadata: CaseMetadata
    pipeline: Optional[Literal["complaint", "penalty_appeal"]] = None
    classification: Optional[Classification] = None

    def resolved_pipeline(self) -> str:
        """Explicit pipeline, else the metadata letter type, else the classification's routing."""
        if self.pipeline:
            return self.pipeline
        if self.metadata.letter_type:
            return self.metadata.letter_type
        if self.classification is not None:
            return self.classification.routing.pipeline
        return "complaint"


SessionStage = Literal["starting", "stage1", "stage2", "stage3", "complete", "error"]

_STAGE_ORDER: dict[str, int] = {
    "starting": 0,
    "stage1": 1,
    "stage2": 2,
    "stage3": 3,
    "complete": 4,
}


class LetterGenerationSession(BaseModel):
    """State of one letter generation.

    Stages only move forward. ``complete`` and ``error`` are terminal, and
    ``error`` is reachable from any non-terminal stage.
    """

    session_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    stage: SessionStage = "starting"
    outputs: dict[str, str] = Field(default_factory=dict)
    cancelled: bool = False

    @property
    def terminal(self) -> bool:
        return self.stage in ("complete", "error")

    def advance(self, stage: SessionStage) -> None:
        if stage == self.stage:
            return
        if self.terminal:
            raise SessionStateError(f"session {self.session_id} already {self.stage}")
        if stage != "error" and _STAGE_ORDER[stage] < _STAGE_ORDER[self.stage]:
            raise SessionStateError(f"cannot move session from {self.stage} back to {stage}")
        self.stage = stage

    def fail(self) -> None:
        """Enter ``error`` and drop partial outputs."""
        self.advance("error")
        self.outputs.clear()

    def cancel(self) -> None:
        self.cancelled = True


class StreamEvent(BaseModel):
    """One server-sent event: ``progress``, ``complete`` or ``error``."""

    event: Literal["progress", "complete", "error"]
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.event != "progress"


class StageMetrics(BaseModel):
    """Timing for one tracked stage of a run."""

    stage: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: float = 0.0
    success: bool = True


class RunAnalytics(BaseModel):
    run_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    status: str = "running"
    stages: list[StageMetrics] = Field(default_factory=list)
    total_duration_ms: float = 0.0

    def finalize(self) -> None:
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            self.total_duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000
        if self.status == "running":
            self.status = "failed" if any(not s.success for s in self.stages) else "completed"


# ── Layout models ────────────────────────────────────────────────────


class ComponentType(str, Enum):
    HERO = "hero"
    STATS_GRID = "stats_grid"
    QUOTE_BLOCK = "quote_block"
    BULLET_LIST = "bullet_list"
    NUMBERED_STEPS = "numbered_steps"
    TIMELINE = "timeline"
    COMPARISON_CARDS = "comparison_cards"
    KEY_PERCENTAGE = "key_percentage"


class HeroContent(BaseModel):
    kind: Literal["hero"] = "hero"
    headline: str
    subheadline: str = ""


class StatItem(BaseModel):
    metric: str
    label: str
    unit: Optional[str] = None


class StatsGridContent(BaseModel):
    kind: Literal["stats_grid"] = "stats_grid"
    stats: list[StatItem]


class QuoteBlockContent(BaseModel):
    kind: Literal["quote_block"] = "quote_block"
    text: str
    attribution: Optional[str] = None


class BulletListContent(BaseModel):
    kind: Literal["bullet_list"] = "bullet_list"
    items: list[str]


class NumberedStepsContent(BaseModel):
    kind: Literal["numbered_steps"] = "numbered_steps"
    steps: list[str]
    start: int = 1


class TimelineEventItem(BaseModel):
    date: dt.date
    description: str


class TimelineContent(BaseModel):
    kind: Literal["timeline"] = "timeline"
    events: list[TimelineEventItem]


class ComparisonCardsContent(BaseModel):
    kind: Literal["comparison_cards"] = "comparison_cards"
    left: str
    right: str
    connective: str = "vs"


class KeyPercentageContent(BaseModel):
    kind: Literal["key_percentage"] = "key_percentage"
    value: float
    context: str = ""


ComponentContent = Annotated[
    Union[
        HeroContent,
        StatsGridContent,
        QuoteBlockContent,
        BulletListContent,
        NumberedStepsContent,
        TimelineContent,
        ComparisonCardsContent,
        KeyPercentageContent,
    ],
    Field(discriminator="kind"),
]


class ComponentStyle(BaseModel):
    background: str
    text_color: str
    columns: int = 1


class ComponentDescriptor(BaseModel):
    """One visual block of a generated layout."""

    type: ComponentType
    content: ComponentContent
    style: Optional[ComponentStyle] = None
    image_url: Optional[str] = None
    section: int = 0
    source_position: int = 0


class LayoutOptions(BaseModel):
    title: str = ""
    excerpt: str = ""
    enable_images: bool = False
    # Optional source text; when given, stats separated by a blank line are not grouped
    source_text: str = ""
    theme: Optional[str] = None


class Layout(BaseModel):
    theme: str = "lightpoint"
    components: list[ComponentDescriptor] = Field(default_factory=list)


# ── Knowledge models ─────────────────────────────────────────────────


class KnowledgeChunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: str
    content: str
    similarity: float = Field(default=0.0, ge=0.0, le=1.0)


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatSource(BaseModel):
    title: str
    category: str
    excerpt: str
    relevance: int


class ChatResponse(BaseModel):
    answer: str
    sources: list[ChatSource] = Field(default_factory=list)
    chunks: list[KnowledgeChunk] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
