"""Shared fixtures for lightpoint tests."""

from __future__ import annotations

from datetime import date

import pytest

from lightpoint.core.config import LetterConfig, StageModelConfig
from lightpoint.hooks.run_tracker import end_run, get_current_run
from lightpoint.models import CaseMetadata
from lightpoint.prompts import reset as reset_prompts


@pytest.fixture(autouse=True)
def _clean_state():
    """Each test starts with a fresh prompt registry and no active run."""
    reset_prompts()
    yield
    reset_prompts()
    if get_current_run() is not None:
        end_run()


@pytest.fixture
def letter_config() -> LetterConfig:
    """Fast budgets, short minimum output, explicit stage models."""
    return LetterConfig(
        stage1=StageModelConfig(model="test/facts", temperature=0.3, max_tokens=1000),
        stage2=StageModelConfig(model="test/structure", temperature=0.2, max_tokens=2000),
        stage3=StageModelConfig(model="test/tone", temperature=0.4, max_tokens=2000),
        min_stage_chars=20,
        stage_timeout_seconds=5,
        total_budget_seconds=15,
        disconnect_poll_seconds=0.01,
    )


@pytest.fixture
def metadata() -> CaseMetadata:
    return CaseMetadata(
        case_reference="LP-2025-0042",
        department="HMRC Self Assessment",
        practice_letterhead="Harper & Cole Chartered Accountants\n1 King Street\nLeeds LS1 2HL",
        charge_out_rate=185.0,
        user_name="Jane Harper",
        user_title="Senior Tax Manager",
        user_email="jane@harpercole.co.uk",
        letter_date=date(2025, 11, 15),
    )


@pytest.fixture
def complaint_analysis() -> dict:
    return {
        "summary": "HMRC failed to process the SA amendment for 14 months.",
        "violations": ["Charter: being responsive", "CRG4025 unreasonable delay"],
        "timeline": ["12 January 2024: amendment submitted", "3 March 2025: chaser ignored"],
    }


@pytest.fixture
def stat_article() -> str:
    return "HMRC upheld 41% of complaints in 2023-24, with 92,000 complaints received."


@pytest.fixture
def mixed_narrative() -> str:
    return (
        "We wish to make a formal complaint about HMRC's handling of this matter. "
        "There has been an unreasonable delay of eight months, breaching the Charter. "
        "Separately, our client received a late filing penalty of £1,600 under Schedule 55 "
        "and we intend to appeal on the basis of reasonable excuse."
    )
