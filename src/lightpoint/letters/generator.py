"""Three-stage letter generation: facts, structure, tone.

Each stage is exactly one ``complete`` call whose output is validated before
it becomes the next stage's input. Any failure stops the pipeline with a
stage-tagged ``GenerationError``; nothing is retried here and no partial
letter is returned.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel

from lightpoint.core.config import LetterConfig, StageModelConfig
from lightpoint.core.types import ProgressCallback
from lightpoint.exceptions import (
    GenerationCancelled,
    GenerationError,
    InvalidStageOutputError,
    PreconditionError,
)
from lightpoint.hooks.run_tracker import end_run, start_run, track_stage
from lightpoint.models import CaseMetadata, Letter, LetterGenerationSession
from lightpoint.prompts.registry import get_prompt
from lightpoint.providers import Completer

log = logging.getLogger(__name__)

PIPELINES = ("complaint", "penalty_appeal")

# stage -> (start percent, end percent, start message, end message)
MILESTONES: dict[str, tuple[int, int, str, str]] = {
    "stage1": (5, 33, "Extracting key facts from analysis...", "Facts extracted successfully"),
    "stage2": (38, 66, "Organising facts into professional letter structure...", "Letter structure complete"),
    "stage3": (71, 95, "Adding measured professional tone...", "Professional tone applied"),
}

Analysis = Union[str, dict[str, Any], BaseModel]


def render_analysis(analysis: Analysis) -> str:
    if isinstance(analysis, BaseModel):
        return analysis.model_dump_json(indent=2)
    if isinstance(analysis, str):
        return analysis
    return json.dumps(analysis, indent=2, default=str)


def format_letter_date(value: date) -> str:
    """``15 November 2025`` style, without a leading zero on the day."""
    return f"{value.day} {value:%B %Y}"


class ThreeStageLetterGenerator:
    """Runs the stage1 → stage2 → stage3 pipeline for one letter at a time."""

    def __init__(self, client: Completer, config: LetterConfig | None = None) -> None:
        self._client = client
        self._config = config or LetterConfig()

    # ── Public API ───────────────────────────────────────────────────

    def check_preconditions(self, analysis: Analysis, metadata: CaseMetadata) -> None:
        """Raise ``PreconditionError`` before any LLM call when required input is missing."""
        missing = []
        if not render_analysis(analysis).strip():
            missing.append("analysis")
        if not metadata.case_reference.strip():
            missing.append("case_reference")
        if not metadata.department.strip():
            missing.append("department")
        if missing:
            raise PreconditionError(f"Missing required fields: {', '.join(missing)}")

    async def generate(
        self,
        analysis: Analysis,
        metadata: CaseMetadata,
        on_progress: Optional[ProgressCallback] = None,
        *,
        pipeline: Optional[str] = None,
        session: Optional[LetterGenerationSession] = None,
    ) -> Letter:
        self.check_preconditions(analysis, metadata)
        pipeline = pipeline or metadata.letter_type or "complaint"
        if pipeline not in PIPELINES:
            raise PreconditionError(f"Unknown letter pipeline: {pipeline!r}")

        session = session or LetterGenerationSession()
        notify = on_progress or _noop_progress
        deadline = time.monotonic() + self._config.total_budget_seconds
        durations: dict[str, float] = {}

        start_run(run_id=session.session_id)
        notify("starting", 0, "Initialising letter generation...")
        try:
            facts = await self._run_stage(
                "stage1", pipeline, session, notify, deadline, durations,
                user_vars={
                    "analysis": render_analysis(analysis),
                    "case_reference": metadata.case_reference,
                    "department": metadata.department,
                    "additional_context": _additional_context(metadata),
                },
                system_vars={},
            )
            structured = await self._run_stage(
                "stage2", pipeline, session, notify, deadline, durations,
                user_vars={"fact_sheet": facts},
                system_vars={
                    "letterhead": metadata.practice_letterhead.strip() or "[Firm Name]\n[Address]\n[Contact details]",
                    "letter_date": format_letter_date(metadata.letter_date or date.today()),
                    "case_reference": metadata.case_reference,
                    "cost_instruction": self.cost_instruction(pipeline, metadata.charge_out_rate),
                    "signature": _signature(metadata),
                },
            )
            final = await self._run_stage(
                "stage3", pipeline, session, notify, deadline, durations,
                user_vars={"structured_letter": structured},
                system_vars={
                    "user_name": metadata.user_name or "as given in the letter",
                    "user_title": metadata.user_title or "as given in the letter",
                },
            )
        except BaseException:
            if not session.terminal:
                session.fail()
            end_run(status="failed")
            raise

        session.advance("complete")
        end_run(status="completed")
        notify("complete", 100, "Letter generation complete")
        log.info(
            "Generated %s letter for %s (%d chars)",
            pipeline,
            metadata.case_reference,
            len(final),
        )
        return Letter(
            content=final,
            pipeline=pipeline,
            case_reference=metadata.case_reference,
            stage_durations_ms=durations,
        )

    def cost_instruction(self, pipeline: str, charge_out_rate: Optional[float]) -> str:
        """The only place a currency value enters a prompt."""
        if pipeline == "penalty_appeal":
            return "Do not include any professional costs or compensation claim."
        if charge_out_rate is None:
            return (
                "No charge-out rate has been supplied. Do not state an hourly rate or any "
                "professional cost figure; say only that a detailed invoice will be submitted "
                "once the complaint is upheld."
            )
        rate = f"{self._config.currency_symbol}{charge_out_rate:,.2f}"
        return (
            f"Per CRG5225, our client is entitled to reimbursement of professional fees directly "
            f"attributable to HMRC's errors. State our standard charge-out rate as exactly {rate} "
            f"per hour and use no other hourly rate."
        )

    # ── Internal ─────────────────────────────────────────────────────

    async def _run_stage(
        self,
        stage: str,
        pipeline: str,
        session: LetterGenerationSession,
        notify: ProgressCallback,
        deadline: float,
        durations: dict[str, float],
        *,
        user_vars: dict[str, str],
        system_vars: dict[str, str],
    ) -> str:
        if session.cancelled:
            log.info("Session %s cancelled before %s", session.session_id, stage)
            raise GenerationCancelled(f"cancelled before {stage}")

        start_pct, end_pct, start_msg, end_msg = MILESTONES[stage]
        params: StageModelConfig = getattr(self._config, stage)
        stage_key = stage.upper()
        system_prompt = get_prompt(pipeline, "letter", f"{stage_key}_SYSTEM").format(**system_vars)
        prompt = get_prompt(pipeline, "letter", f"{stage_key}_USER").format(**user_vars)

        session.advance(stage)
        notify(stage, start_pct, start_msg)

        remaining = deadline - time.monotonic()
        timeout = min(self._config.stage_timeout_seconds, remaining)
        with track_stage(stage) as metrics:
            try:
                if timeout <= 0:
                    raise asyncio.TimeoutError()
                output = await asyncio.wait_for(
                    self._client.complete(
                        prompt,
                        system_prompt=system_prompt,
                        model=params.model or None,
                        temperature=params.temperature,
                        max_tokens=params.max_tokens,
                    ),
                    timeout=timeout,
                )
                output = self._validate(stage, output)
            except asyncio.TimeoutError as e:
                cause = TimeoutError(f"{stage} exceeded {max(timeout, 0):.0f}s")
                log.warning("Letter %s timed out", stage)
                raise GenerationError(stage, cause) from e
            except Exception as e:
                log.warning("Letter %s failed: %s", stage, e)
                raise GenerationError(stage, e) from e

        durations[stage] = metrics.duration_ms
        session.outputs[stage] = output
        notify(stage, end_pct, end_msg)
        return output

    def _validate(self, stage: str, output: Optional[str]) -> str:
        text = (output or "").strip()
        if not text:
            raise InvalidStageOutputError(f"{stage} returned empty output")
        if len(text) < self._config.min_stage_chars:
            raise InvalidStageOutputError(
                f"{stage} output too short ({len(text)} < {self._config.min_stage_chars} chars)"
            )
        return text


def _noop_progress(stage: str, percent: int, message: str) -> None:
    return None


def _additional_context(metadata: CaseMetadata) -> str:
    if not metadata.additional_context.strip():
        return ""
    return f"\nADDITIONAL CONTEXT FROM THE PRACTITIONER:\n{metadata.additional_context.strip()}\n"


def _signature(metadata: CaseMetadata) -> str:
    firm = metadata.practice_letterhead.strip().splitlines()[0] if metadata.practice_letterhead.strip() else "[Firm Name]"
    lines = [metadata.user_name or "[Name]", metadata.user_title or "[Title]", firm]
    if metadata.user_email:
        lines.append(f"Email: {metadata.user_email}")
    if metadata.user_phone:
        lines.append(f"Tel: {metadata.user_phone}")
    return "\n".join(lines)
