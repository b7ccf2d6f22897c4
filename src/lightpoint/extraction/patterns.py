"""Compiled patterns for deterministic content extraction.

Used by ``PatternExtractor``. Every numeric pattern is boundary-aware: a
number glued to letters (``CRG5275``, ``s118``) never matches.
"""

from __future__ import annotations

import re
from typing import Pattern

# 1,234,567.89 or 1234.5 or 41
NUMBER = r"\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?"

_LEFT_EDGE = r"(?<![\w.,£$€])"

MAGNITUDES: dict[str, float] = {
    "k": 1e3,
    "m": 1e6,
    "million": 1e6,
    "bn": 1e9,
    "billion": 1e9,
}

# (name, pattern). Each pattern exposes ``num`` and optionally ``unit`` / ``mag`` groups.
STAT_PATTERNS: list[tuple[str, Pattern[str]]] = [
    (
        "currency",
        re.compile(
            rf"(?<![\w])(?P<unit>[£$€])\s?(?P<num>{NUMBER})(?:\s?(?P<mag>k|m|bn|million|billion)\b)?",
            re.IGNORECASE,
        ),
    ),
    (
        "percentage",
        re.compile(rf"{_LEFT_EDGE}(?P<num>{NUMBER})\s?(?P<unit>%|per\s?cent\b)", re.IGNORECASE),
    ),
    (
        "duration",
        re.compile(
            rf"{_LEFT_EDGE}(?P<num>{NUMBER})(?:\s+|-)"
            r"(?P<unit>working\s+days?|days?|weeks?|months?|years?|hours?|minutes?)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "magnitude",
        re.compile(rf"{_LEFT_EDGE}(?P<num>{NUMBER})\s?(?P<mag>million|billion|bn)\b", re.IGNORECASE),
    ),
    (
        "bare",
        re.compile(rf"{_LEFT_EDGE}(?P<num>\d{{1,3}}(?:,\d{{3}})+|\d{{4,}})(?![\w%]|[.,]\d)"),
    ),
]

YEAR_LIKE = re.compile(r"^(?:19|20)\d{2}$")

# Splits a sentence into clauses when looking for a stat's label phrase
CLAUSE_BREAK = re.compile(r"[,;:()\[\]\n]|[.!?](?=\s|$)")

WORD = re.compile(r"[A-Za-z£$€%][\w'’%-]*|\d[\d,.-]*")

LABEL_STOPWORDS = frozenset({
    "a", "an", "and", "the", "of", "in", "on", "at", "to", "for", "with", "by",
    "from", "or", "as", "is", "are", "was", "were", "be", "been", "that", "this",
    "which", "who", "it", "its", "than", "over", "nearly", "almost", "around",
    "about", "some", "only", "just", "up", "per", "into", "while",
    "compared", "versus", "vs", "whereas",
})

# ── Quotes ───────────────────────────────────────────────────────────

INLINE_QUOTE = re.compile(r"[\"“](?P<text>[^\"“”\n]+)[\"”]")

BLOCK_QUOTE_LINE = re.compile(r"^[ \t]*>[ \t]?(?P<text>.*)$")

_NAME = r"[A-Z][\w'’.&-]*(?:\s+(?:of\s+|the\s+)?[A-Z0-9][\w'’.&-]*){0,5}"

TRAILING_ATTRIBUTION: list[Pattern[str]] = [
    re.compile(rf"^\s*[,.]?\s*(?:—|–|--?)\s*(?P<name>{_NAME})"),
    re.compile(rf"^\s*[,.]?\s*said\s+(?P<name>{_NAME})"),
    re.compile(rf"^\s*[,.]?\s*according\s+to\s+(?P<name>{_NAME})"),
]

# "... text — Name" at the end of a block quote line
INLINE_DASH_ATTRIBUTION = re.compile(rf"\s+(?:—|–|--)\s*(?P<name>{_NAME})\s*$")

# ── Lists ────────────────────────────────────────────────────────────

BULLET_LINE = re.compile(r"^[ \t]*(?P<marker>[-*•+])[ \t]+(?P<text>\S.*)$")
ORDINAL_LINE = re.compile(r"^[ \t]*(?P<marker>\d{1,3}[.)])[ \t]+(?P<text>\S.*)$")

# ── Timeline ─────────────────────────────────────────────────────────

TIMELINE_LINE = re.compile(
    r"^[ \t]*(?:[-*•+][ \t]+)?"
    r"(?P<day>\d{1,2})(?:st|nd|rd|th)?[ \t]+(?P<month>[A-Za-z]+)\.?,?[ \t]+(?P<year>\d{4})"
    r"[ \t]*(?::|[–—])[ \t]*(?P<description>\S.*)$",
    re.IGNORECASE,
)

MONTHS: dict[str, int] = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

# ── Comparisons ──────────────────────────────────────────────────────

COMPARISON_CONNECTIVE = re.compile(
    r"(?:^|\s)(?P<connective>vs\.?|versus|compared\s+(?:to|with)|whereas)(?=\s)",
    re.IGNORECASE,
)

# Sentence end: terminal punctuation followed by whitespace, but not "vs."
SENTENCE_END = re.compile(r"(?<!\bvs\.)(?<=[.!?])\s+|\n+")

SIDE_PUNCTUATION = " \t\"'“”‘’.,;:!?()[]-–—"
