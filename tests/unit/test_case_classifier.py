"""Tests for rule-based case classification, routing and override."""

from __future__ import annotations

from datetime import date

import pytest

from lightpoint.classification import CaseClassifier, combine_documents, route
from lightpoint.core.config import ClassificationConfig
from lightpoint.models import CaseType, DocumentAnalysis

MIXED_TEXT = (
    "We are raising a formal complaint about Charter breach. "
    "Separately we appeal under paragraph 20, Schedule 56."
)

PENALTY_TEXT = (
    "Our client received a late filing penalty of £1,600 for 2022-23. "
    "The penalty notice dated 3 March 2025 cites Schedule 55. "
    "We appeal on the grounds of reasonable excuse."
)


@pytest.fixture
def classifier() -> CaseClassifier:
    return CaseClassifier()


class TestClassify:
    def test_complaint_and_penalty_signals_make_mixed(self, classifier: CaseClassifier) -> None:
        result = classifier.classify(MIXED_TEXT)

        assert result.primary_type == CaseType.MIXED
        # complaint 2.6 / 3.0 beats penalty 1.8 / 3.0
        assert result.secondary_type == CaseType.COMPLAINT
        assert result.scores["complaint"] == pytest.approx(0.8667, abs=1e-4)
        assert result.scores["penalty_appeal"] == pytest.approx(0.6)
        assert result.confidence == pytest.approx(0.7333, abs=1e-3)
        assert result.routing.pipeline == "complaint"
        assert result.routing.secondary_letter_type == "penalty_appeal"
        assert not result.low_confidence

    def test_mixed_tie_goes_to_complaint(self, classifier: CaseClassifier, mixed_narrative: str) -> None:
        result = classifier.classify(mixed_narrative)
        assert result.scores["complaint"] == result.scores["penalty_appeal"] == 1.0
        assert result.primary_type == CaseType.MIXED
        assert result.secondary_type == CaseType.COMPLAINT

    def test_penalty_side_stronger(self, classifier: CaseClassifier) -> None:
        result = classifier.classify("I complain about the Charter breach. " + PENALTY_TEXT)
        assert result.primary_type == CaseType.MIXED
        assert result.secondary_type == CaseType.PENALTY_APPEAL
        assert result.routing.pipeline == "penalty_appeal"
        assert result.routing.recipient_team == "HMRC Penalty Appeals Team"

    def test_no_signals_is_low_confidence_complaint(self, classifier: CaseClassifier) -> None:
        result = classifier.classify("Please could you help with my tax affairs.")
        assert result.primary_type == CaseType.COMPLAINT
        assert result.confidence == 0.0
        assert result.low_confidence
        assert result.signals == []
        assert result.penalty_details is None

    def test_signals_carry_matched_text(self, classifier: CaseClassifier) -> None:
        result = classifier.classify(MIXED_TEXT)
        assert 'formal_complaint: "formal complaint"' in result.signals
        assert 'penalty_schedule: "Schedule 56"' in result.signals

    def test_repeated_phrases_do_not_inflate_score(self, classifier: CaseClassifier) -> None:
        once = classifier.classify("This is a complaint.")
        many = classifier.classify("This is a complaint. Complaint! complaint, complaint.")
        assert once.scores == many.scores

    def test_confidence_is_clipped(self, classifier: CaseClassifier) -> None:
        result = classifier.classify(MIXED_TEXT * 5 + PENALTY_TEXT)
        assert 0.0 <= result.confidence <= 1.0
        assert all(0.0 <= s <= 1.0 for s in result.scores.values())

    def test_documents_are_scored_with_the_narrative(self, classifier: CaseClassifier) -> None:
        result = classifier.classify("Please see the attached.", documents=["A formal complaint about delays."])
        assert result.primary_type == CaseType.COMPLAINT
        assert result.scores["complaint"] > 0

    def test_weight_overrides(self) -> None:
        base = CaseClassifier().classify("A formal complaint.")
        tuned = CaseClassifier(ClassificationConfig(weight_overrides={"formal_complaint": 0.0})).classify(
            "A formal complaint."
        )
        assert tuned.scores["complaint"] < base.scores["complaint"]

    def test_deterministic(self, classifier: CaseClassifier) -> None:
        assert classifier.classify(MIXED_TEXT) == classifier.classify(MIXED_TEXT)


class TestEscalation:
    def test_tribunal_beats_penalty(self, classifier: CaseClassifier) -> None:
        text = (
            "We will notify the tribunal and lodge a notice of appeal with the "
            "First-tier Tribunal against the penalty."
        )
        result = classifier.classify(text)
        assert result.primary_type == CaseType.TRIBUNAL_APPEAL
        assert result.secondary_type is None
        assert result.routing.recipient_team == "First-tier Tribunal (Tax Chamber)"

    def test_statutory_review_keeps_complaint_as_secondary(self, classifier: CaseClassifier) -> None:
        text = (
            "We request a statutory review of the decision and also wish to complain "
            "about the delay, which breached the Charter."
        )
        result = classifier.classify(text)
        assert result.primary_type == CaseType.STATUTORY_REVIEW
        assert result.secondary_type == CaseType.COMPLAINT
        assert result.routing.recipient_team == "HMRC Statutory Review Team"
        assert result.routing.pipeline == "penalty_appeal"


class TestPenaltyDetails:
    def test_fields_from_text(self, classifier: CaseClassifier) -> None:
        result = classifier.classify(PENALTY_TEXT)
        assert result.primary_type == CaseType.PENALTY_APPEAL
        details = result.penalty_details
        assert details is not None
        assert details.penalty_type == "late_filing"
        assert details.amount == 1600.0
        assert details.tax_years == ["2022-23"]
        assert details.statute == "FA 2009 Sch 55"
        assert details.appeal_deadline == date(2025, 4, 2)

    def test_unsupported_fields_stay_unset(self, classifier: CaseClassifier) -> None:
        details = classifier.classify(PENALTY_TEXT).penalty_details
        assert details.regime is None

    def test_non_consecutive_tax_years_ignored(self, classifier: CaseClassifier) -> None:
        assert classifier.penalty_details("penalty for 2019-22 and 2020/21").tax_years == ["2020-21"]

    def test_complaint_only_has_no_penalty_details(self, classifier: CaseClassifier) -> None:
        assert classifier.classify("A formal complaint under the Charter.").penalty_details is None

    def test_generic_appeal_wording_has_no_penalty_details(self, classifier: CaseClassifier) -> None:
        result = classifier.classify(
            "We raised a formal complaint about HMRC's delay under the Charter. "
            "As set out in paragraph 4 of our letter, we will appeal to the Adjudicator "
            "about the tax return handling."
        )

        assert result.primary_type == CaseType.COMPLAINT
        assert any(s.startswith("appeal_keyword") for s in result.signals)
        assert any(s.startswith("penalty_paragraph") for s in result.signals)
        assert result.penalty_details is None


class TestOverride:
    def test_override_to_single_type(self, classifier: CaseClassifier) -> None:
        original = classifier.classify(MIXED_TEXT)
        overridden = classifier.override(original, CaseType.PENALTY_APPEAL)

        assert overridden.primary_type == CaseType.PENALTY_APPEAL
        assert overridden.secondary_type is None
        assert overridden.routing == route(CaseType.PENALTY_APPEAL)
        assert overridden.overridden
        assert overridden.original_primary_type == CaseType.MIXED
        # Audit trail survives
        assert overridden.signals == original.signals
        assert overridden.confidence == original.confidence
        # The original is untouched
        assert original.primary_type == CaseType.MIXED
        assert not original.overridden

    def test_override_to_mixed_uses_stronger_side(self, classifier: CaseClassifier) -> None:
        original = classifier.classify("I complain about the Charter breach. " + PENALTY_TEXT)
        first = classifier.override(original, CaseType.PENALTY_APPEAL)
        second = classifier.override(first, CaseType.MIXED)
        assert second.secondary_type == CaseType.PENALTY_APPEAL
        assert second.original_primary_type == CaseType.MIXED

    def test_override_clears_low_confidence(self, classifier: CaseClassifier) -> None:
        original = classifier.classify("Nothing relevant here.")
        assert original.low_confidence
        assert not classifier.override(original, CaseType.COMPLAINT).low_confidence


class TestRouting:
    @pytest.mark.parametrize(
        ("primary", "secondary", "pipeline"),
        [
            (CaseType.COMPLAINT, None, "complaint"),
            (CaseType.PENALTY_APPEAL, None, "penalty_appeal"),
            (CaseType.MIXED, CaseType.COMPLAINT, "complaint"),
            (CaseType.MIXED, CaseType.PENALTY_APPEAL, "penalty_appeal"),
            (CaseType.STATUTORY_REVIEW, None, "penalty_appeal"),
            (CaseType.TRIBUNAL_APPEAL, None, "penalty_appeal"),
        ],
    )
    def test_pipeline(self, primary: CaseType, secondary: CaseType | None, pipeline: str) -> None:
        assert route(primary, secondary).pipeline == pipeline

    def test_unknown_pair_falls_back(self) -> None:
        assert route(CaseType.COMPLAINT, CaseType.PENALTY_APPEAL) == route(CaseType.COMPLAINT)
        assert route(CaseType.MIXED) == route(CaseType.MIXED, CaseType.COMPLAINT)

    def test_returned_routing_is_a_copy(self) -> None:
        routing = route(CaseType.COMPLAINT)
        routing.recipient_team = "changed"
        assert route(CaseType.COMPLAINT).recipient_team == "HMRC Complaints Team (Tier 1)"


class TestCombineDocuments:
    def test_sections_and_dedup(self) -> None:
        analyses = [
            DocumentAnalysis(
                dates=[{"date": "2024-01-12", "context": "Amendment submitted"}],
                issues=["Unreasonable delay"],
                charter_violations=["Being responsive"],
                hmrc_quotes=["We aim to reply within 15 working days"],
                summary="SA amendment cover letter",
            ),
            DocumentAnalysis(
                issues=["Unreasonable delay", "No response to chaser"],
                charter_violations=["Being responsive"],
                summary="Chaser letter",
            ),
        ]
        combined = combine_documents(analyses, "Client waited 14 months.")

        assert combined.startswith("COMPLAINT CONTEXT:\nClient waited 14 months.")
        assert "2024-01-12: Amendment submitted" in combined
        assert "1. Unreasonable delay\n2. No response to chaser" in combined
        assert combined.count("Being responsive") == 1
        assert '"We aim to reply within 15 working days"' in combined
        assert "Document 2: Chaser letter" in combined
