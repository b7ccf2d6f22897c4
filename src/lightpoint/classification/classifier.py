"""Rule-based case classification: weighted signals, no LLM calls.

Scores every category, resolves the primary/secondary type with a fixed
tie-break policy, attaches penalty metadata when penalty signals fire and
looks up routing. ``override`` is the only way a classification changes after
the fact.
"""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import Optional

from lightpoint.classification.routing import route
from lightpoint.classification.signals import (
    NOTICE_DATE,
    PENALTY_AMOUNT,
    PENALTY_SPECIFIC_SIGNALS,
    PENALTY_TYPES,
    REGIMES,
    STATUTES,
    TAX_YEAR,
    signals_for,
)
from lightpoint.core.config import ClassificationConfig
from lightpoint.extraction.patterns import MONTHS
from lightpoint.models import CaseType, Classification, PenaltyDetails

log = logging.getLogger(__name__)

SCORED_CATEGORIES: tuple[CaseType, ...] = (
    CaseType.COMPLAINT,
    CaseType.PENALTY_APPEAL,
    CaseType.STATUTORY_REVIEW,
    CaseType.TRIBUNAL_APPEAL,
)


class CaseClassifier:
    """Classifies complaint narratives into HMRC case types."""

    def __init__(self, config: ClassificationConfig | None = None) -> None:
        self._config = config or ClassificationConfig()

    def score(self, text: str) -> tuple[dict[str, float], list[str]]:
        """Normalized category scores in [0, 1] and the evidence signals that fired."""
        scores: dict[str, float] = {}
        evidence: list[str] = []
        for category in SCORED_CATEGORIES:
            raw = 0.0
            for signal in signals_for(category, self._config.weight_overrides):
                m = signal.pattern.search(text)
                if m is None:
                    continue
                raw += signal.weight
                evidence.append(f'{signal.name}: "{" ".join(m.group(0).split())}"')
            scores[category.value] = round(min(1.0, max(0.0, raw / self._config.saturation)), 4)
        return scores, evidence

    def classify(self, narrative: str, documents: Optional[list[str]] = None) -> Classification:
        text = "\n\n".join([narrative or "", *(documents or [])])
        scores, evidence = self.score(text)
        threshold = self._config.signal_threshold

        complaint = scores[CaseType.COMPLAINT.value]
        penalty = scores[CaseType.PENALTY_APPEAL.value]
        complaint_hit = complaint >= threshold
        penalty_hit = penalty >= threshold

        escalation = self._escalation(scores, penalty)
        secondary: Optional[CaseType] = None
        forced_low = False

        if escalation is not None:
            primary = escalation
            confidence = scores[escalation.value]
            if complaint_hit:
                secondary = CaseType.COMPLAINT
        elif complaint_hit and penalty_hit:
            primary = CaseType.MIXED
            # Complaint wins an exact tie
            secondary = CaseType.COMPLAINT if complaint >= penalty else CaseType.PENALTY_APPEAL
            confidence = (complaint + penalty) / 2
        elif complaint_hit:
            primary, confidence = CaseType.COMPLAINT, complaint
        elif penalty_hit:
            primary, confidence = CaseType.PENALTY_APPEAL, penalty
        else:
            primary, confidence = CaseType.COMPLAINT, complaint
            forced_low = True

        penalty_fired = any(e.split(":", 1)[0] in PENALTY_SPECIFIC_SIGNALS for e in evidence)
        classification = Classification(
            primary_type=primary,
            secondary_type=secondary,
            confidence=round(confidence, 4),
            signals=evidence,
            scores=scores,
            penalty_details=self.penalty_details(text) if penalty_fired else None,
            routing=route(primary, secondary),
            low_confidence=forced_low or confidence < self._config.low_confidence_threshold,
        )
        log.info(
            "Classified case as %s (secondary=%s, confidence=%.2f, signals=%d)",
            primary.value,
            secondary.value if secondary else None,
            classification.confidence,
            len(evidence),
        )
        return classification

    def _escalation(self, scores: dict[str, float], penalty: float) -> Optional[CaseType]:
        """Statutory review or tribunal appeal, when it clears threshold and beats the penalty score."""
        best: Optional[CaseType] = None
        best_score = penalty
        for category in (CaseType.TRIBUNAL_APPEAL, CaseType.STATUTORY_REVIEW):
            value = scores[category.value]
            if value >= self._config.signal_threshold and value > best_score:
                best, best_score = category, value
        return best

    def override(self, classification: Classification, new_type: CaseType) -> Classification:
        """Explicit human override.

        Replaces the primary type and recomputes routing. The secondary type
        survives only when the new type is ``mixed``. Signals, scores and
        confidence are kept for audit.
        """
        new_type = CaseType(new_type)
        secondary: Optional[CaseType] = None
        if new_type == CaseType.MIXED:
            secondary = classification.secondary_type or self._stronger_side(classification.scores)

        log.info(
            "Classification overridden: %s -> %s",
            classification.primary_type.value,
            new_type.value,
        )
        return classification.model_copy(
            update={
                "primary_type": new_type,
                "secondary_type": secondary,
                "routing": route(new_type, secondary),
                "overridden": True,
                "low_confidence": False,
                "original_primary_type": classification.original_primary_type or classification.primary_type,
            }
        )

    @staticmethod
    def _stronger_side(scores: dict[str, float]) -> CaseType:
        complaint = scores.get(CaseType.COMPLAINT.value, 0.0)
        penalty = scores.get(CaseType.PENALTY_APPEAL.value, 0.0)
        return CaseType.COMPLAINT if complaint >= penalty else CaseType.PENALTY_APPEAL

    def penalty_details(self, text: str) -> PenaltyDetails:
        """Penalty metadata; each field stays ``None`` unless its own pattern matches."""
        details = PenaltyDetails(
            penalty_type=_first_label(PENALTY_TYPES, text),
            regime=_first_label(REGIMES, text),
            statute=_first_label(STATUTES, text),
            amount=_penalty_amount(text),
            tax_years=_tax_years(text),
        )
        notice = _notice_date(text)
        if notice is not None:
            details.appeal_deadline = notice + timedelta(days=self._config.appeal_window_days)
        return details


def _first_label(table: list[tuple[str, re.Pattern[str]]], text: str) -> Optional[str]:
    for label, pattern in table:
        if pattern.search(text):
            return label
    return None


def _penalty_amount(text: str) -> Optional[float]:
    m = PENALTY_AMOUNT.search(text)
    if not m:
        return None
    raw = m.group("pre") or m.group("post")
    return float(raw.replace(",", ""))


def _tax_years(text: str) -> list[str]:
    years: list[str] = []
    for m in TAX_YEAR.finditer(text):
        start = int(m.group("start"))
        end = m.group("end")
        end_short = int(end[-2:])
        if end_short != (start + 1) % 100:
            continue
        label = f"{start}-{end_short:02d}"
        if label not in years:
            years.append(label)
    return years


def _notice_date(text: str) -> Optional[date]:
    m = NOTICE_DATE.search(text)
    if not m:
        return None
    month = MONTHS.get(m.group("month").lower())
    if month is None:
        return None
    try:
        return date(int(m.group("year")), month, int(m.group("day")))
    except ValueError:
        return None
