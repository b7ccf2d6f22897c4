"""Weighted signal tables for HMRC case classification.

Each category holds ``Signal`` rows: a unique name, a compiled pattern and a
weight. A category's raw score is the sum of weights of its *distinct*
matching signals, so repeating a phrase never inflates the score. Weights are
starting values; ``ClassificationConfig.weight_overrides`` replaces any of
them by name.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Pattern

from lightpoint.models import CaseType


class Signal(NamedTuple):
    name: str
    pattern: Pattern[str]
    weight: float


def _sig(name: str, pattern: str, weight: float, flags: int = re.IGNORECASE) -> Signal:
    return Signal(name, re.compile(pattern, flags), weight)


SIGNAL_TABLE: dict[CaseType, list[Signal]] = {
    CaseType.COMPLAINT: [
        _sig("formal_complaint", r"\bformal\s+complaint\b", 1.2),
        _sig("complaint_keyword", r"\bcomplain(?:t|ts|ed|ing)?\b", 0.6),
        _sig("charter_reference", r"\b(?:taxpayers['’]?\s+)?charter\b", 0.8),
        _sig(
            "charter_standard",
            r"\b(?:being\s+responsive|getting\s+things\s+right|treat(?:ing)?\s+you\s+fairly"
            r"|making\s+things\s+easy|respecting\s+you)\b",
            0.6,
        ),
        _sig("crg_code", r"\bCRG\s?\d{3,4}\b", 0.8, 0),
        _sig("chg_code", r"\bCHG\s?\d{3,4}\b", 0.6, 0),
        _sig("complaint_tier", r"\btier\s*(?:1|2|one|two)\b", 0.6),
        _sig("adjudicator", r"\badjudicator['’]?s?\b", 0.6),
        _sig("unreasonable_delay", r"\b(?:unreasonable|excessive|unacceptable)\s+delays?\b", 0.7),
        _sig("delay_keyword", r"\bdelay(?:s|ed)?\b", 0.3),
        _sig("redress", r"\b(?:compensation|reimburse(?:ment)?|redress|worry\s+and\s+distress)\b", 0.5),
        _sig("service_failure", r"\b(?:poor\s+service|lost\s+(?:post|correspondence)|misdirect(?:ed|ion)|incorrect\s+advice)\b", 0.5),
    ],
    CaseType.PENALTY_APPEAL: [
        _sig("penalty_keyword", r"\bpenalt(?:y|ies)\b", 0.6),
        _sig("appeal_keyword", r"\bappeal(?:s|ed|ing)?\b", 0.5),
        _sig("reasonable_excuse", r"\breasonable\s+excuse\b", 0.9),
        _sig("special_circumstances", r"\bspecial\s+(?:circumstances|reduction)\b", 0.5),
        _sig("penalty_schedule", r"\bSch(?:edule|\.)?\s?(?:55|56|24|41)\b", 1.0),
        _sig("penalty_paragraph", r"\bpara(?:graph)?\.?\s?\d{1,2}\b", 0.3),
        _sig("finance_act", r"\b(?:FA|Finance\s+Act)\s+(?:2007|2008|2009)\b", 0.8),
        _sig("tma_1970", r"\bTMA\s*1970\b|\bs\.?\s?118\b", 0.6),
        _sig("vata_1994", r"\bVATA\s*1994\b", 0.6),
        _sig("late_submission", r"\blate\s+(?:filing|payment|submission|return)\b", 0.7),
        _sig(
            "penalty_amount",
            r"\b(?:penalt(?:y|ies)|surcharge)\b[^.\n]{0,40}[£$€]\s?\d|[£$€]\s?\d[\d,.]*\s+(?:late\s+\w+\s+)?(?:penalty|surcharge)",
            0.6,
        ),
    ],
    CaseType.STATUTORY_REVIEW: [
        _sig("statutory_review", r"\bstatutory\s+review\b", 1.5),
        _sig("independent_review", r"\b(?:independent|internal)\s+review\b", 0.6),
        _sig("review_request", r"\b(?:request|ask(?:ing)?|accept)\s+(?:for\s+)?(?:an?\s+)?(?:HMRC\s+)?review\b", 0.5),
        _sig("tma_s49", r"\bs(?:ection)?\.?\s?49[A-I]?\b", 0.8),
        _sig("review_officer", r"\breview\s+officer\b", 0.5),
    ],
    CaseType.TRIBUNAL_APPEAL: [
        _sig("tribunal_keyword", r"\btribunal\b", 1.0),
        _sig("first_tier", r"\b(?:first[-\s]tier|FTT|upper\s+tribunal)\b", 1.0),
        _sig("notice_of_appeal", r"\bnotice\s+of\s+appeal\b|\bnotify\s+the\s+tribunal\b", 0.6),
        _sig("tribunal_reference", r"\bHMCTS\b|\bTC/\d{4}/\d+\b", 0.6),
    ],
}

SIGNAL_NAMES: frozenset[str] = frozenset(s.name for rows in SIGNAL_TABLE.values() for s in rows)


def signals_for(category: CaseType, overrides: dict[str, float] | None = None) -> list[Signal]:
    """The signal rows for a category with ``overrides`` applied by name."""
    rows = SIGNAL_TABLE.get(category, [])
    if not overrides:
        return rows
    return [s._replace(weight=overrides.get(s.name, s.weight)) for s in rows]


# Penalty signals that only occur in penalty matters. Generic ones such as
# "appeal" or "paragraph 4" also turn up in plain complaints.
PENALTY_SPECIFIC_SIGNALS: frozenset[str] = frozenset(
    {
        "penalty_keyword",
        "reasonable_excuse",
        "special_circumstances",
        "penalty_schedule",
        "finance_act",
        "tma_1970",
        "vata_1994",
        "late_submission",
        "penalty_amount",
    }
)


# ── Penalty metadata patterns ────────────────────────────────────────

PENALTY_TYPES: list[tuple[str, Pattern[str]]] = [
    ("late_filing", re.compile(r"\blate\s+(?:filing|submission|return)\b", re.IGNORECASE)),
    ("late_payment", re.compile(r"\blate\s+payment\b", re.IGNORECASE)),
    ("inaccuracy", re.compile(r"\binaccura(?:cy|te)\b|\bcareless(?:ness)?\b|\bdeliberate\b", re.IGNORECASE)),
    ("failure_to_notify", re.compile(r"\bfail(?:ure|ed)?\s+to\s+notify\b", re.IGNORECASE)),
]

REGIMES: list[tuple[str, Pattern[str]]] = [
    ("self_assessment", re.compile(r"\bself[-\s]assessment\b|\bSA\s?100\b|\btax\s+return\b", re.IGNORECASE)),
    ("vat", re.compile(r"\bVAT\b|\bVATA\b")),
    ("paye", re.compile(r"\bPAYE\b|\bRTI\b")),
    ("corporation_tax", re.compile(r"\bcorporation\s+tax\b|\bCT600\b", re.IGNORECASE)),
    ("cis", re.compile(r"\bCIS\b|\bconstruction\s+industry\s+scheme\b", re.IGNORECASE)),
]

STATUTES: list[tuple[str, Pattern[str]]] = [
    ("FA 2009 Sch 55", re.compile(r"\bSch(?:edule|\.)?\s?55\b", re.IGNORECASE)),
    ("FA 2009 Sch 56", re.compile(r"\bSch(?:edule|\.)?\s?56\b", re.IGNORECASE)),
    ("FA 2007 Sch 24", re.compile(r"\bSch(?:edule|\.)?\s?24\b", re.IGNORECASE)),
    ("FA 2008 Sch 41", re.compile(r"\bSch(?:edule|\.)?\s?41\b", re.IGNORECASE)),
    ("TMA 1970 s118", re.compile(r"\bTMA\s*1970\b|\bs\.?\s?118\b", re.IGNORECASE)),
    ("VATA 1994", re.compile(r"\bVATA\s*1994\b", re.IGNORECASE)),
]

PENALTY_AMOUNT = re.compile(
    r"\b(?:penalt(?:y|ies)|surcharge)\b[^.\n£$€]{0,40}[£$€]\s?(?P<pre>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
    r"|[£$€]\s?(?P<post>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)\s+(?:late\s+\w+\s+)?(?:penalty|surcharge)",
    re.IGNORECASE,
)

TAX_YEAR = re.compile(r"(?<![\d/])(?P<start>20\d{2})\s?[-/–]\s?(?P<end>20\d{2}|\d{2})(?![\d/])")

NOTICE_DATE = re.compile(
    r"\b(?:penalty\s+)?(?:notice|assessment|letter|decision)\s+(?:was\s+)?(?:dated|issued(?:\s+on)?|of)\s+"
    r"(?P<day>\d{1,2})(?:st|nd|rd|th)?\s+(?P<month>[A-Za-z]+)\.?,?\s+(?P<year>\d{4})",
    re.IGNORECASE,
)
