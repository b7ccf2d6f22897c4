"""Merging per-document analyses into one grounding context for letter generation."""

from __future__ import annotations

import logging

from lightpoint.models import DocumentAnalysis

log = logging.getLogger(__name__)


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def combine_documents(analyses: list[DocumentAnalysis], complaint_context: str) -> str:
    """Flatten every analysis into labelled sections.

    Dates, amounts, references, correspondence, quotes and deadlines are kept
    in document order; issues and Charter violations are de-duplicated.
    """
    dates = [d for a in analyses for d in a.dates]
    amounts = [x for a in analyses for x in a.amounts]
    references = [r for a in analyses for r in a.references]
    correspondence = [c for a in analyses for c in a.correspondence]
    issues = _unique([i for a in analyses for i in a.issues])
    quotes = [q for a in analyses for q in a.hmrc_quotes]
    deadlines = [d for a in analyses for d in a.deadlines]
    violations = _unique([v for a in analyses for v in a.charter_violations])

    sections = [
        ("COMPLAINT CONTEXT", [complaint_context.strip()]),
        ("CHRONOLOGICAL TIMELINE", [f"{d.get('date', '')}: {d.get('context', '')}" for d in dates]),
        ("FINANCIAL DETAILS", [f"{x.get('amount', '')} - {x.get('context', '')}" for x in amounts]),
        ("REFERENCE NUMBERS", [f"{r.get('type', '')}: {r.get('value', '')}" for r in references]),
        (
            "CORRESPONDENCE HISTORY",
            [
                f"{c.get('date', '')}: {c.get('from', '')} to {c.get('to', '')} - {c.get('summary', '')}"
                for c in correspondence
            ],
        ),
        ("IDENTIFIED ISSUES", [f"{n}. {issue}" for n, issue in enumerate(issues, 1)]),
        ("HMRC'S EXACT WORDS (Direct Quotes)", [f'"{q}"' for q in quotes]),
        ("DEADLINES AND TIMEFRAMES", [f"{d.get('date', '')}: {d.get('description', '')}" for d in deadlines]),
        ("CHARTER VIOLATIONS", [f"{n}. {v}" for n, v in enumerate(violations, 1)]),
        ("DOCUMENT SUMMARIES", [f"Document {n}: {a.summary}" for n, a in enumerate(analyses, 1)]),
    ]
    combined = "\n\n".join(f"{title}:\n" + "\n".join(lines) for title, lines in sections).strip()
    log.info("Combined %d document analyses into %d chars", len(analyses), len(combined))
    return combined
