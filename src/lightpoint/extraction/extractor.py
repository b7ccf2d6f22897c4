"""Deterministic structured-content extraction from article text.

No LLM calls: every entity comes from the compiled rules in
``extraction.patterns``. The extractor is a total function: text with nothing
recognisable yields an empty ``ExtractionResult``, and a malformed line only
drops that one entity.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional

from lightpoint.core.config import ExtractionConfig
from lightpoint.extraction.patterns import (
    BLOCK_QUOTE_LINE,
    BULLET_LINE,
    CLAUSE_BREAK,
    COMPARISON_CONNECTIVE,
    INLINE_DASH_ATTRIBUTION,
    INLINE_QUOTE,
    LABEL_STOPWORDS,
    MAGNITUDES,
    MONTHS,
    ORDINAL_LINE,
    SENTENCE_END,
    SIDE_PUNCTUATION,
    STAT_PATTERNS,
    TIMELINE_LINE,
    TRAILING_ATTRIBUTION,
    WORD,
    YEAR_LIKE,
)
from lightpoint.models import (
    Comparison,
    ExtractionResult,
    KeyPercentage,
    ListGroup,
    ListItem,
    Quote,
    Stat,
    TimelineEntry,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _NumericMatch:
    start: int
    end: int
    kind: str
    value: float
    unit: Optional[str]
    raw: str


@dataclass(frozen=True)
class _Line:
    start: int
    text: str


class PatternExtractor:
    """Pulls stats, quotes, lists, timeline entries, comparisons and key
    percentages out of raw text.

    Calling ``extract`` twice on the same text returns equal results: there is
    no hidden state between calls.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self._config = config or ExtractionConfig()

    def extract(self, text: str) -> ExtractionResult:
        if not text or not text.strip():
            return ExtractionResult()

        lines = list(_split_lines(text))
        numeric = self._numeric_matches(text)

        result = ExtractionResult(
            stats=tuple(self._stats(text, numeric)),
            quotes=tuple(self._quotes(text, lines)),
            lists=tuple(self._lists(lines)),
            timeline=tuple(self._timeline(lines)),
            comparisons=tuple(self._comparisons(text)),
            key_percentages=tuple(self._key_percentages(text, numeric)),
        )
        log.debug(
            "Extracted %d stats, %d quotes, %d lists, %d timeline entries, %d comparisons",
            len(result.stats),
            len(result.quotes),
            len(result.lists),
            len(result.timeline),
            len(result.comparisons),
        )
        return result

    # ── Statistics ───────────────────────────────────────────────────

    def _numeric_matches(self, text: str) -> list[_NumericMatch]:
        """All numeric candidates, overlaps resolved longest-leftmost."""
        candidates: list[_NumericMatch] = []
        for kind, pattern in STAT_PATTERNS:
            for m in pattern.finditer(text):
                parsed = self._parse_numeric(kind, m)
                if parsed is not None:
                    candidates.append(parsed)

        candidates.sort(key=lambda c: (c.start, -(c.end - c.start)))
        selected: list[_NumericMatch] = []
        last_end = -1
        for cand in candidates:
            if cand.start < last_end:
                continue
            selected.append(cand)
            last_end = cand.end
        return selected

    def _parse_numeric(self, kind: str, m: re.Match[str]) -> _NumericMatch | None:
        raw_num = m.group("num")
        try:
            value = float(raw_num.replace(",", ""))
        except ValueError:
            return None

        groups = m.groupdict()
        mag = groups.get("mag")
        if mag:
            value *= MAGNITUDES[mag.lower()]

        unit = groups.get("unit")
        if kind == "percentage":
            unit = "%"
        elif kind == "duration" and unit:
            unit = _normalize_duration_unit(unit)
        elif kind == "bare":
            if YEAR_LIKE.match(raw_num) or value < self._config.min_bare_integer:
                return None

        return _NumericMatch(
            start=m.start(),
            end=m.end(),
            kind=kind,
            value=value,
            unit=unit,
            raw=m.group(0).strip(),
        )

    def _stats(self, text: str, numeric: list[_NumericMatch]) -> Iterator[Stat]:
        previous_end = 0
        for match in numeric:
            yield Stat(
                label=self._label_for(text, match, previous_end),
                value=match.value,
                unit=match.unit,
                raw=match.raw,
                position=match.start,
            )
            previous_end = match.end

    def _label_for(self, text: str, match: _NumericMatch, floor: int = 0) -> str:
        """Nearest preceding phrase in the same clause, else the following one.

        The preceding phrase never reaches back past ``floor``, the end of the
        previous numeric match.
        """
        window = self._config.label_window
        before = _clause_before(text, match.start, floor)
        words = [w for w in _words(before) if not _is_numeric_word(w)]
        words = _trim_stopwords(words[-window:])
        if words:
            return " ".join(words)

        after = _clause_after(text, match.end)
        following: list[str] = []
        for word in _words(after):
            if _is_numeric_word(word):
                break
            following.append(word)
            if len(following) >= window:
                break
        words = _trim_stopwords(following)
        return " ".join(words) if words else "Statistic"

    def _key_percentages(self, text: str, numeric: list[_NumericMatch]) -> Iterator[KeyPercentage]:
        seen: set[tuple[float, str]] = set()
        for match in numeric:
            if match.kind != "percentage":
                continue
            context = self._context_for(text, match)
            key = (match.value, _normalize_context(context))
            if key in seen:
                continue
            seen.add(key)
            yield KeyPercentage(value=match.value, context=context, position=match.start)

    def _context_for(self, text: str, match: _NumericMatch) -> str:
        context = (
            _clause_before(text, match.start) + text[match.start:match.end] + _clause_after(text, match.end)
        )
        context = " ".join(context.split())
        limit = self._config.context_chars
        if len(context) > limit:
            context = context[:limit].rsplit(" ", 1)[0]
        return context

    # ── Quotes ───────────────────────────────────────────────────────

    def _quotes(self, text: str, lines: list[_Line]) -> Iterator[Quote]:
        found: list[Quote] = []
        block_spans: list[tuple[int, int]] = []

        for start, end, body in _block_quotes(lines):
            block_spans.append((start, end))
            attribution = None
            m = INLINE_DASH_ATTRIBUTION.search(body)
            if m:
                attribution = _clean_name(m.group("name"))
                body = body[: m.start()]
            body = body.strip().strip("\"“”").strip()
            if len(body) >= self._config.min_quote_chars:
                found.append(Quote(text=body, attribution=attribution, position=start))

        for m in INLINE_QUOTE.finditer(text):
            if any(s <= m.start() < e for s, e in block_spans):
                continue
            body = m.group("text").strip()
            if len(body) < self._config.min_quote_chars:
                continue
            found.append(
                Quote(
                    text=body.rstrip(","),
                    attribution=_trailing_attribution(text, m.end()),
                    position=m.start(),
                )
            )

        found.sort(key=lambda q: q.position)
        return iter(found)

    # ── Lists ────────────────────────────────────────────────────────

    def _lists(self, lines: list[_Line]) -> Iterator[ListGroup]:
        group: list[ListItem] = []
        style = "bullet"
        group_start = 0

        for line in lines:
            item = _list_item(line.text)
            if item is None or TIMELINE_LINE.match(line.text):
                if group:
                    yield ListGroup(style=style, items=tuple(group), position=group_start)
                    group = []
                continue
            if not group:
                group_start = line.start
                style = "numbered" if item.marker[0].isdigit() else "bullet"
            group.append(item)

        if group:
            yield ListGroup(style=style, items=tuple(group), position=group_start)

    # ── Timeline ─────────────────────────────────────────────────────

    def _timeline(self, lines: list[_Line]) -> list[TimelineEntry]:
        entries: list[TimelineEntry] = []
        for line in lines:
            m = TIMELINE_LINE.match(line.text)
            if not m:
                continue
            parsed = _parse_date(m.group("day"), m.group("month"), m.group("year"))
            if parsed is None:
                log.debug("Skipping timeline line with invalid date: %r", line.text[:80])
                continue
            raw_date = line.text[m.start("day"):m.end("year")]
            entries.append(
                TimelineEntry(
                    date=parsed,
                    description=m.group("description").strip(),
                    raw_date=raw_date,
                    position=line.start,
                )
            )
        # sorted() is stable, so same-day entries keep source order
        return sorted(entries, key=lambda e: e.date)

    # ── Comparisons ──────────────────────────────────────────────────

    def _comparisons(self, text: str) -> Iterator[Comparison]:
        for start, sentence in _sentences(text):
            m = COMPARISON_CONNECTIVE.search(sentence)
            if not m:
                continue
            connective = " ".join(m.group("connective").lower().rstrip(".").split())
            left = sentence[: m.start("connective")].strip(SIDE_PUNCTUATION)
            right = sentence[m.end("connective"):].strip(SIDE_PUNCTUATION)

            # "Whereas A, B" puts both sides after the connective
            if not left and connective == "whereas" and "," in right:
                left, right = (part.strip(SIDE_PUNCTUATION) for part in right.split(",", 1))

            if left and right:
                yield Comparison(left=left, right=right, connective=connective, position=start)


# ── Module helpers ───────────────────────────────────────────────────


def _split_lines(text: str) -> Iterator[_Line]:
    offset = 0
    for raw in text.splitlines(keepends=True):
        yield _Line(start=offset, text=raw.rstrip("\r\n"))
        offset += len(raw)


def _sentences(text: str) -> Iterator[tuple[int, str]]:
    pos = 0
    for m in SENTENCE_END.finditer(text):
        chunk = text[pos:m.start()]
        if chunk.strip():
            yield pos, chunk
        pos = m.end()
    if text[pos:].strip():
        yield pos, text[pos:]


def _block_quotes(lines: list[_Line]) -> Iterator[tuple[int, int, str]]:
    """Runs of ``>`` lines, joined into one quote body."""
    run: list[_Line] = []
    for line in lines + [_Line(start=-1, text="")]:
        m = BLOCK_QUOTE_LINE.match(line.text) if line.start >= 0 else None
        if m:
            run.append(line)
            continue
        if run:
            body = " ".join(BLOCK_QUOTE_LINE.match(r.text).group("text").strip() for r in run)
            end = run[-1].start + len(run[-1].text)
            yield run[0].start, end, body
            run = []


def _trailing_attribution(text: str, end: int) -> Optional[str]:
    tail = text[end:end + 120].split("\n", 1)[0]
    for pattern in TRAILING_ATTRIBUTION:
        m = pattern.match(tail)
        if m:
            return _clean_name(m.group("name"))
    return None


def _clean_name(name: str) -> str:
    return name.strip().rstrip(".,;:")


def _list_item(line: str) -> Optional[ListItem]:
    m = ORDINAL_LINE.match(line) or BULLET_LINE.match(line)
    if not m:
        return None
    return ListItem(text=m.group("text").strip(), marker=m.group("marker"))


def _parse_date(day: str, month: str, year: str) -> Optional[date]:
    month_num = MONTHS.get(month.lower())
    if month_num is None:
        return None
    try:
        return date(int(year), month_num, int(day))
    except ValueError:
        return None


def _normalize_duration_unit(unit: str) -> str:
    unit = " ".join(unit.lower().split())
    return unit if unit.endswith("s") else unit + "s"


def _clause_before(text: str, index: int, floor: int = 0) -> str:
    head = text[max(floor, index - 200):index]
    breaks = list(CLAUSE_BREAK.finditer(head))
    return head[breaks[-1].end():] if breaks else head


def _clause_after(text: str, index: int) -> str:
    tail = text[index:index + 200]
    m = CLAUSE_BREAK.search(tail)
    return tail[: m.start()] if m else tail


def _words(fragment: str) -> list[str]:
    return WORD.findall(fragment)


def _is_numeric_word(word: str) -> bool:
    core = word.lstrip("£$€")
    return not core or core[0].isdigit() or "%" in word


def _trim_stopwords(words: list[str]) -> list[str]:
    start, end = 0, len(words)
    while start < end and words[start].lower() in LABEL_STOPWORDS:
        start += 1
    while end > start and words[end - 1].lower() in LABEL_STOPWORDS:
        end -= 1
    return words[start:end]


def _normalize_context(context: str) -> str:
    return re.sub(r"[^a-z0-9%]+", " ", context.lower()).strip()
