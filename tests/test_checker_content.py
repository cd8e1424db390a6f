# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the content depth, LLM-readability and score-booster checkers."""

from __future__ import annotations

import pytest

from pageaudit import Severity
from pageaudit.checkers.boosters import recommend_components
from pageaudit.checkers.content import ContentDepth, check_content, classify_depth
from pageaudit.checkers.readability import ReadabilityFacts, check_readability, readability_score
from pageaudit.checkers.schema import check_schema
from tests._pages import GOOD_PAGE, json_ld, page, paragraphs

# ── Content ─────────────────────────────────────────────────────────


class TestContentDepth:
    @pytest.mark.parametrize(
        "words,depth",
        [(0, ContentDepth.THIN), (199, ContentDepth.THIN), (200, ContentDepth.ADEQUATE), (499, ContentDepth.ADEQUATE)],
    )
    def test_thresholds(self, words, depth):
        assert classify_depth(words) is depth

    def test_comprehensive(self):
        assert classify_depth(500) is ContentDepth.COMPREHENSIVE


class TestCheckContent:
    def test_thin_page(self):
        facts = check_content(page("<p>Just a few words here.</p>"))
        assert facts.word_count == 5
        assert facts.content_depth is ContentDepth.THIN
        assert facts.estimated_read_time == 1
        issues = [f.issue for f in facts.findings]
        assert issues == ["Thin content (5 words)", "Few paragraphs (1)", "No lists found"]

    def test_rich_page(self):
        facts = check_content(page(paragraphs(6) + "<ol><li>one</li></ol>"))
        assert facts.word_count == 6 * 90 + 1
        assert facts.paragraph_count == 6
        assert facts.has_lists
        assert facts.content_depth is ContentDepth.COMPREHENSIVE
        assert facts.findings == []

    def test_empty_document(self):
        facts = check_content("")
        assert facts.word_count == 0
        assert facts.estimated_read_time == 0


# ── LLM readability ─────────────────────────────────────────────────


class TestReadabilityScore:
    def test_maximum(self):
        facts = ReadabilityFacts(
            has_article=True, section_count=3, json_ld_count=2, text_ratio=0.5, heading_count=3, clean_hierarchy=True
        )
        assert readability_score(facts) == 100

    def test_minimum_is_clean_hierarchy_credit(self):
        assert readability_score(ReadabilityFacts()) == 10

    def test_broken_hierarchy(self):
        facts = ReadabilityFacts(clean_hierarchy=False, text_ratio=0.2, json_ld_count=1)
        assert readability_score(facts) == 8 + 10


class TestCheckReadability:
    def test_no_semantic_sections_finding(self):
        facts = check_readability(page("<div><p>Some text that is long enough to matter.</p></div>"))
        issue = next(f for f in facts.findings if f.issue == "Content not wrapped in semantic sections")
        assert issue.severity is Severity.MEDIUM
        assert issue.category == "llm-readability"

    def test_low_ratio_finding(self):
        markup = "<div><span></span></div>" * 200 + "<p>x</p>"
        facts = check_readability(page(markup))
        assert facts.text_ratio <= 0.15
        assert any(f.issue == "Low content-to-markup ratio" for f in facts.findings)

    def test_good_page(self):
        facts = check_readability(GOOD_PAGE)
        assert facts.json_ld_count == 2
        assert facts.section_count == 2
        assert facts.clean_hierarchy
        assert facts.findings == []
        assert facts.score == 15 + 20 + 15 + 20


# ── Score boosters ──────────────────────────────────────────────────


class TestRecommendComponents:
    def _recs(self, html: str, page_type: str | None = None) -> list[str]:
        return [
            r.fix_type for r in recommend_components(html, check_content(html), check_schema(html), page_type)
        ]

    def test_bare_page_gets_all_three(self):
        assert self._recs(page("<p>hi</p>")) == [
            "add_component_faq",
            "add_component_testimonial",
            "add_component_features",
        ]

    def test_faq_content_suppresses_faq(self):
        assert "add_component_faq" not in self._recs(page("<details><summary>Q</summary>A</details>"))

    def test_faq_schema_suppresses_faq(self):
        html = page(head=json_ld({"@type": "FAQPage"}))
        assert "add_component_faq" not in self._recs(html)

    def test_page_type_gates_faq(self):
        assert "add_component_faq" not in self._recs(page("<p>hi</p>"), page_type="blog")
        assert "add_component_faq" in self._recs(page("<p>hi</p>"), page_type="landing")

    def test_testimonial_content(self):
        assert "add_component_testimonial" not in self._recs(page("<h2>What our customers say</h2>"))

    def test_recommendations_are_informational(self):
        recs = recommend_components(page("<p>hi</p>"), check_content("<p>hi</p>"), check_schema("<p>hi</p>"))
        assert all(r.severity is Severity.INFO and r.fix_method is None for r in recs)
