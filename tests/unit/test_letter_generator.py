"""Tests for the three-stage letter pipeline."""

from __future__ import annotations

from datetime import date

import pytest

from lightpoint.core.config import LetterConfig
from lightpoint.exceptions import (
    GenerationCancelled,
    GenerationError,
    InvalidStageOutputError,
    NonRetryableError,
    PreconditionError,
)
from lightpoint.letters import ThreeStageLetterGenerator, format_letter_date
from lightpoint.models import CaseMetadata, LetterGenerationSession
from tests.fakes.fake_llm import FakeLLMClient

FACTS = "FACT SHEET: amendment submitted 12 January 2024, no reply for 14 months."
STRUCTURED = "STRUCTURED LETTER: Dear Sir or Madam, we write to make a formal complaint..."
FINAL = "FINAL LETTER: Dear Sir or Madam, we write on behalf of our client to complain..."


class _Recorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, int, str]] = []

    def __call__(self, stage: str, percent: int, message: str) -> None:
        self.events.append((stage, percent, message))

    @property
    def stages(self) -> list[str]:
        return [e[0] for e in self.events]

    @property
    def percents(self) -> list[int]:
        return [e[1] for e in self.events]


class TestGenerate:
    @pytest.mark.asyncio
    async def test_three_stages_in_order(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient([FACTS, STRUCTURED, FINAL])
        recorder = _Recorder()
        session = LetterGenerationSession()

        letter = await ThreeStageLetterGenerator(client, letter_config).generate(
            complaint_analysis, metadata, recorder, session=session
        )

        assert letter.content == FINAL
        assert letter.pipeline == "complaint"
        assert letter.case_reference == "LP-2025-0042"
        assert set(letter.stage_durations_ms) == {"stage1", "stage2", "stage3"}
        assert len(client.calls) == 3
        assert session.stage == "complete"
        assert session.outputs == {"stage1": FACTS, "stage2": STRUCTURED, "stage3": FINAL}

    @pytest.mark.asyncio
    async def test_each_stage_feeds_the_next(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient([FACTS, STRUCTURED, FINAL])
        await ThreeStageLetterGenerator(client, letter_config).generate(complaint_analysis, metadata)

        assert "14 months" in client.calls[0]["prompt"]
        assert "LP-2025-0042" in client.calls[0]["prompt"]
        assert FACTS in client.calls[1]["prompt"]
        assert STRUCTURED in client.calls[2]["prompt"]

    @pytest.mark.asyncio
    async def test_stage_model_parameters(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient([FACTS, STRUCTURED, FINAL])
        await ThreeStageLetterGenerator(client, letter_config).generate(complaint_analysis, metadata)

        assert [c["model"] for c in client.calls] == ["test/facts", "test/structure", "test/tone"]
        assert [c["temperature"] for c in client.calls] == [0.3, 0.2, 0.4]
        assert client.calls[0]["max_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_structure_stage_receives_letter_details(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient([FACTS, STRUCTURED, FINAL])
        await ThreeStageLetterGenerator(client, letter_config).generate(complaint_analysis, metadata)

        system = client.calls[1]["system_prompt"]
        assert "15 November 2025" in system
        assert "£185.00" in system
        assert "Harper & Cole Chartered Accountants" in system
        assert "Email: jane@harpercole.co.uk" in system
        assert "Jane Harper" in client.calls[2]["system_prompt"]

    @pytest.mark.asyncio
    async def test_progress_is_monotonic(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        recorder = _Recorder()
        await ThreeStageLetterGenerator(FakeLLMClient(), letter_config).generate(
            complaint_analysis, metadata, recorder
        )

        assert recorder.percents == [0, 5, 33, 38, 66, 71, 95, 100]
        assert recorder.stages[0] == "starting"
        assert recorder.stages[-1] == "complete"
        assert recorder.percents == sorted(recorder.percents)

    @pytest.mark.asyncio
    async def test_penalty_pipeline_uses_its_own_prompts(
        self, letter_config: LetterConfig, metadata: CaseMetadata
    ) -> None:
        client = FakeLLMClient()
        metadata = metadata.model_copy(update={"letter_type": "penalty_appeal"})
        letter = await ThreeStageLetterGenerator(client, letter_config).generate("Late filing penalty.", metadata)

        assert letter.pipeline == "penalty_appeal"
        assert "penalty appeal" in client.calls[0]["system_prompt"].lower()
        assert "£185.00" not in client.calls[1]["system_prompt"]

    @pytest.mark.asyncio
    async def test_explicit_pipeline_wins(self, letter_config: LetterConfig, metadata: CaseMetadata) -> None:
        metadata = metadata.model_copy(update={"letter_type": "complaint"})
        letter = await ThreeStageLetterGenerator(FakeLLMClient(), letter_config).generate(
            "analysis", metadata, pipeline="penalty_appeal"
        )
        assert letter.pipeline == "penalty_appeal"


class TestFailures:
    @pytest.mark.asyncio
    async def test_empty_stage2_stops_before_stage3(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient([FACTS, "", FINAL])
        recorder = _Recorder()
        session = LetterGenerationSession()

        with pytest.raises(GenerationError) as exc_info:
            await ThreeStageLetterGenerator(client, letter_config).generate(
                complaint_analysis, metadata, recorder, session=session
            )

        assert exc_info.value.stage == "stage2"
        assert isinstance(exc_info.value.cause, InvalidStageOutputError)
        assert len(client.calls) == 2
        assert "stage3" not in recorder.stages
        assert "complete" not in recorder.stages
        assert session.stage == "error"
        assert session.outputs == {}

    @pytest.mark.asyncio
    async def test_short_output_is_rejected(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient(["too short"])
        with pytest.raises(GenerationError) as exc_info:
            await ThreeStageLetterGenerator(client, letter_config).generate(complaint_analysis, metadata)
        assert exc_info.value.stage == "stage1"
        assert "too short" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_provider_error_is_tagged_with_stage(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        cause = NonRetryableError("invalid api key", status_code=401)
        client = FakeLLMClient([FACTS, STRUCTURED, cause])

        with pytest.raises(GenerationError) as exc_info:
            await ThreeStageLetterGenerator(client, letter_config).generate(complaint_analysis, metadata)

        assert exc_info.value.stage == "stage3"
        assert exc_info.value.cause is cause
        assert len(client.calls) == 3

    @pytest.mark.asyncio
    async def test_stage_timeout(self, metadata: CaseMetadata, complaint_analysis: dict) -> None:
        config = LetterConfig(stage_timeout_seconds=0.05, min_stage_chars=1)
        client = FakeLLMClient(delay=1.0)

        with pytest.raises(GenerationError) as exc_info:
            await ThreeStageLetterGenerator(client, config).generate(complaint_analysis, metadata)

        assert exc_info.value.stage == "stage1"
        assert isinstance(exc_info.value.cause, TimeoutError)

    @pytest.mark.asyncio
    async def test_total_budget_spans_stages(self, metadata: CaseMetadata, complaint_analysis: dict) -> None:
        # Each call fits the per-stage limit, but stage2 outruns what is left of the budget
        config = LetterConfig(stage_timeout_seconds=5.0, total_budget_seconds=0.3, min_stage_chars=1)
        client = FakeLLMClient(delay=0.2)

        with pytest.raises(GenerationError) as exc_info:
            await ThreeStageLetterGenerator(client, config).generate(complaint_analysis, metadata)

        assert exc_info.value.stage == "stage2"
        assert isinstance(exc_info.value.cause, TimeoutError)
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_missing_fields_fail_before_any_call(
        self, letter_config: LetterConfig, complaint_analysis: dict
    ) -> None:
        client = FakeLLMClient()
        recorder = _Recorder()
        metadata = CaseMetadata(case_reference="", department="  ")

        with pytest.raises(PreconditionError, match="case_reference, department"):
            await ThreeStageLetterGenerator(client, letter_config).generate(
                complaint_analysis, metadata, recorder
            )

        assert client.calls == []
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_empty_analysis_is_a_precondition_failure(
        self, letter_config: LetterConfig, metadata: CaseMetadata
    ) -> None:
        with pytest.raises(PreconditionError, match="analysis"):
            await ThreeStageLetterGenerator(FakeLLMClient(), letter_config).generate("   ", metadata)

    @pytest.mark.asyncio
    async def test_unknown_pipeline(self, letter_config: LetterConfig, metadata: CaseMetadata) -> None:
        with pytest.raises(PreconditionError, match="Unknown letter pipeline"):
            await ThreeStageLetterGenerator(FakeLLMClient(), letter_config).generate(
                "analysis", metadata, pipeline="tribunal"
            )


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_between_stages(
        self, letter_config: LetterConfig, metadata: CaseMetadata, complaint_analysis: dict
    ) -> None:
        session = LetterGenerationSession()
        client = FakeLLMClient(on_call=lambda index: session.cancel())

        with pytest.raises(GenerationCancelled):
            await ThreeStageLetterGenerator(client, letter_config).generate(
                complaint_analysis, metadata, session=session
            )

        # The in-flight stage1 call finishes; stage2 never starts
        assert len(client.calls) == 1
        assert session.stage == "error"


class TestHelpers:
    def test_cost_instruction_with_rate(self, letter_config: LetterConfig) -> None:
        generator = ThreeStageLetterGenerator(FakeLLMClient(), letter_config)
        assert "exactly £1,250.50 per hour" in generator.cost_instruction("complaint", 1250.5)

    def test_cost_instruction_without_rate(self, letter_config: LetterConfig) -> None:
        text = ThreeStageLetterGenerator(FakeLLMClient(), letter_config).cost_instruction("complaint", None)
        assert "Do not state an hourly rate" in text
        assert "£" not in text

    def test_penalty_appeals_claim_no_costs(self, letter_config: LetterConfig) -> None:
        text = ThreeStageLetterGenerator(FakeLLMClient(), letter_config).cost_instruction("penalty_appeal", 185.0)
        assert "£" not in text

    def test_letter_date_format(self) -> None:
        assert format_letter_date(date(2025, 11, 5)) == "5 November 2025"
