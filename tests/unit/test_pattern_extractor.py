"""Tests for the deterministic pattern extractor."""

from __future__ import annotations

from datetime import date

from lightpoint.core.config import ExtractionConfig
from lightpoint.extraction import PatternExtractor
from lightpoint.models import ExtractionResult


def _extract(text: str, **config) -> ExtractionResult:
    return PatternExtractor(ExtractionConfig(**config)).extract(text)


class TestStats:
    def test_upheld_complaints_scenario(self, stat_article: str) -> None:
        result = _extract(stat_article)

        by_value = {s.value: s for s in result.stats}
        assert by_value[41.0].unit == "%"
        assert by_value[41.0].label == "HMRC upheld"
        assert by_value[92000.0].unit is None
        assert by_value[92000.0].label == "complaints received"

    def test_year_is_not_a_stat(self, stat_article: str) -> None:
        result = _extract(stat_article)
        assert 2023.0 not in {s.value for s in result.stats}

    def test_currency_with_magnitude(self) -> None:
        result = _extract("Taxpayers were overcharged £1.5m last year.")
        assert len(result.stats) == 1
        stat = result.stats[0]
        assert stat.value == 1_500_000
        assert stat.unit == "£"
        assert stat.raw == "£1.5m"

    def test_duration_unit_is_pluralised(self) -> None:
        result = _extract("HMRC promises to reply within 1 month; it took 14 months.")
        units = [s.unit for s in result.stats]
        assert units == ["months", "months"]

    def test_small_bare_integers_are_ignored(self) -> None:
        result = _extract("Only 12 officers and 450 letters were involved.")
        assert result.stats == ()

    def test_bare_threshold_is_configurable(self) -> None:
        text = "Only 1,450 letters were involved."
        assert [s.value for s in _extract(text).stats] == [1450.0]
        assert _extract(text, min_bare_integer=5000).stats == ()

    def test_label_falls_back_to_following_words(self) -> None:
        result = _extract("85% of callers waited over ten minutes.")
        assert result.stats[0].label == "callers waited"

    def test_labels_stop_at_the_previous_stat(self) -> None:
        result = _extract("Tier 1 cost £1.5 million compared to £900k at Tier 2.")

        assert [s.value for s in result.stats] == [1.5e6, 900e3]
        assert [s.label for s in result.stats] == ["Tier cost", "Tier"]

    def test_labels_never_carry_numbers(self) -> None:
        result = _extract("Upheld rates moved from 10% to 20% compared to 10% last year.")

        assert [s.value for s in result.stats] == [10.0, 20.0, 10.0]
        for stat in result.stats:
            assert not any(ch.isdigit() for ch in stat.label)
            assert "%" not in stat.label

    def test_stats_are_in_source_order(self) -> None:
        result = _extract("Costs rose to £2,400. Delays hit 30%. Refunds totalled 15,000.")
        positions = [s.position for s in result.stats]
        assert positions == sorted(positions)
        assert [s.value for s in result.stats] == [2400.0, 30.0, 15000.0]


class TestKeyPercentages:
    def test_duplicate_mentions_collapse(self) -> None:
        text = "Around 41% of complaints were upheld. Around 41% of complaints were upheld."
        result = _extract(text)
        assert len(result.key_percentages) == 1
        assert result.key_percentages[0].value == 41.0

    def test_context_is_capped(self) -> None:
        text = "In a year of record demand the department said that " + "very " * 30 + "many 12% cases"
        result = _extract(text, context_chars=40)
        assert len(result.key_percentages[0].context) <= 40


class TestQuotes:
    def test_inline_quote_with_dash_attribution(self) -> None:
        text = 'The adjudicator wrote "this delay was wholly unacceptable" — Adjudicator\'s Office.'
        result = _extract(text)
        assert len(result.quotes) == 1
        assert result.quotes[0].text == "this delay was wholly unacceptable"
        assert result.quotes[0].attribution == "Adjudicator's Office"

    def test_said_attribution(self) -> None:
        text = '"We will review our processes in full," said Jim Harra.'
        result = _extract(text)
        assert result.quotes[0].attribution == "Jim Harra"

    def test_short_quotes_are_skipped(self) -> None:
        result = _extract('The so-called "fix" did nothing.')
        assert result.quotes == ()

    def test_block_quote_run_is_one_quote(self) -> None:
        text = "Intro line.\n> HMRC accepts that the repayment\n> was delayed for too long — HMRC Complaints Team\nAfter."
        result = _extract(text)
        assert len(result.quotes) == 1
        quote = result.quotes[0]
        assert quote.text == "HMRC accepts that the repayment was delayed for too long"
        assert quote.attribution == "HMRC Complaints Team"
        assert quote.position == len("Intro line.\n")


class TestLists:
    def test_bullets_group_until_a_plain_line(self) -> None:
        text = "Steps:\n- Gather evidence\n- Cite the Charter\nThen wait.\n- Escalate to Tier 2"
        result = _extract(text)
        assert [len(g.items) for g in result.lists] == [2, 1]
        assert all(g.style == "bullet" for g in result.lists)
        assert result.lists[0].items[1].text == "Cite the Charter"

    def test_numbered_list_style(self) -> None:
        text = "1. Write to HMRC\n2. Wait 15 working days\n3) Escalate"
        result = _extract(text)
        assert len(result.lists) == 1
        assert result.lists[0].style == "numbered"
        assert [i.marker for i in result.lists[0].items] == ["1.", "2.", "3)"]


class TestTimeline:
    def test_entries_are_sorted_chronologically(self) -> None:
        text = (
            "3 March 2025: Chaser ignored\n"
            "12 January 2024: Amendment submitted\n"
            "1st February 2024 – Acknowledgement received"
        )
        result = _extract(text)
        assert [e.date for e in result.timeline] == [
            date(2024, 1, 12),
            date(2024, 2, 1),
            date(2025, 3, 3),
        ]
        assert result.timeline[0].description == "Amendment submitted"

    def test_same_day_entries_keep_source_order(self) -> None:
        text = "5 May 2024: First call\n5 May 2024: Second call"
        result = _extract(text)
        assert [e.description for e in result.timeline] == ["First call", "Second call"]

    def test_invalid_dates_are_skipped(self) -> None:
        text = "31 February 2024: Impossible\n4 Smarch 2024: Not a month\n2 April 2024: Real entry"
        result = _extract(text)
        assert [e.description for e in result.timeline] == ["Real entry"]

    def test_timeline_bullets_are_not_lists(self) -> None:
        text = "- 2 April 2024: Letter sent\n- 9 April 2024: Reply received"
        result = _extract(text)
        assert result.lists == ()
        assert len(result.timeline) == 2


class TestComparisons:
    def test_versus(self) -> None:
        result = _extract("Phone wait times vs. online response times.")
        comparison = result.comparisons[0]
        assert comparison.left == "Phone wait times"
        assert comparison.right == "online response times"
        assert comparison.connective == "vs"

    def test_leading_whereas_is_split_at_comma(self) -> None:
        result = _extract("Whereas HMRC took 14 months, the Charter target is 15 working days.")
        comparison = result.comparisons[0]
        assert comparison.connective == "whereas"
        assert comparison.left == "HMRC took 14 months"
        assert comparison.right == "the Charter target is 15 working days"

    def test_compared_to(self) -> None:
        result = _extract("Postal replies took 14 weeks compared to 3 weeks online.")
        comparison = result.comparisons[0]
        assert comparison.connective == "compared to"
        assert comparison.left == "Postal replies took 14 weeks"
        assert comparison.right == "3 weeks online"

    def test_compared_with(self) -> None:
        result = _extract("Tier 1 outcomes compared with Adjudicator outcomes.")
        comparison = result.comparisons[0]
        assert comparison.connective == "compared with"
        assert comparison.left == "Tier 1 outcomes"
        assert comparison.right == "Adjudicator outcomes"


class TestWholeResult:
    def test_empty_text(self) -> None:
        assert _extract("").is_empty()
        assert _extract("   \n ").is_empty()

    def test_plain_prose_has_no_entities(self) -> None:
        assert _extract("Nothing measurable happens in this sentence.").is_empty()

    def test_extract_is_idempotent(self, stat_article: str) -> None:
        extractor = PatternExtractor()
        text = stat_article + '\n> "A quoted remark for the record" — Officer\n- one\n- two'
        assert extractor.extract(text) == extractor.extract(text)
