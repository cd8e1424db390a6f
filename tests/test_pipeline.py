# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""End-to-end tests for the full audit pipeline."""

from __future__ import annotations

import pytest

from pageaudit import FixMethod, Severity
from pageaudit.document import Document
from pageaudit.errors import MissingDocumentError
from pageaudit.pipeline import audit_document, audit_html
from pageaudit.scoring import CATEGORIES, FULL_REPORT_LADDER, PAGE_AUDIT_LADDER, ReportProfile
from pageaudit.serializer import to_json
from tests._pages import page

# ── Reference pages ─────────────────────────────────────────────────


class TestBarePage:
    def test_low_score(self, bare_html):
        result = audit_html(bare_html)
        assert result.overall_score <= 50
        assert result.grade == "F"
        assert result.grade == FULL_REPORT_LADDER.grade(result.overall_score)

    def test_status_matches_score(self, bare_html):
        result = audit_html(bare_html)
        expected = "poor" if result.overall_score < 40 else "needs_improvement"
        assert result.status == expected

    def test_top_issues(self, bare_html):
        result = audit_html(bare_html)
        assert result.top_issues[0].issue == "Missing page title"
        assert result.top_issues[0].severity is Severity.CRITICAL
        assert "Missing meta description" in [f.issue for f in result.top_issues]
        assert len(result.top_issues) <= 5

    def test_only_exact_generic_h1_flagged(self, bare_html):
        result = audit_html(bare_html)
        assert not any(f.issue.startswith("Generic H1") for f in result.all_findings)
        assert result.facts["headings"].h1_text == "Welcome to our website"

    def test_findings_classified(self, bare_html):
        result = audit_html(bare_html)
        by_issue = {f.issue: f for f in result.all_findings}
        assert by_issue["Missing viewport meta tag"].fix_method is FixMethod.CLIENT
        assert by_issue["Missing page title"].fix_method is FixMethod.AI
        assert by_issue["No structured data (JSON-LD) found"].fix_method is FixMethod.GENERATED

    def test_all_findings_sorted_by_severity(self, bare_html):
        ranks = [Severity(f.severity).rank for f in audit_html(bare_html).all_findings]
        assert ranks == sorted(ranks)


class TestGoodPage:
    def test_near_perfect(self, good_html):
        result = audit_html(good_html)
        assert result.overall_score == 99
        assert result.grade == "A+"
        assert result.status == "excellent"

    def test_no_findings(self, good_html):
        result = audit_html(good_html)
        assert result.top_issues == []
        assert result.all_findings == []
        assert result.finding_count == 0

    def test_every_category_scored(self, good_html):
        result = audit_html(good_html)
        assert tuple(result.scores) == CATEGORIES
        assert set(result.breakdowns) == set(CATEGORIES)
        assert all(0 <= s <= 100 for s in result.scores.values())


# ── Scenarios ───────────────────────────────────────────────────────


class TestImageScenario:
    def test_missing_alt_and_lazy(self):
        html = page('<img src="a.jpg"><img src="b.jpg"><img src="c.jpg">')
        result = audit_html(html)
        by_issue = {f.issue: f for f in result.all_findings}
        alt = by_issue["3 image(s) missing alt text"]
        assert alt.fix_type == "generate_alt_text"
        assert alt.fix_method is FixMethod.AI
        lazy = by_issue["Images missing lazy loading"]
        assert lazy.fix_type == "add_lazy_loading"
        assert lazy in result.quick_wins
        assert alt not in result.quick_wins

    def test_image_score_drops(self):
        result = audit_html(page('<img src="a.jpg"><img src="b.jpg">'))
        assert result.scores["images"] == 0


class TestPipelineContract:
    def test_none_rejected(self):
        with pytest.raises(MissingDocumentError):
            audit_html(None)

    def test_empty_string_is_a_document(self):
        result = audit_html("")
        assert 0 <= result.overall_score <= 100
        assert result.top_issues

    def test_deterministic(self, bare_html):
        assert to_json(audit_html(bare_html)) == to_json(audit_html(bare_html))

    def test_audit_document_matches_audit_html(self, good_html):
        assert to_json(audit_document(Document(good_html))) == to_json(audit_html(good_html))

    def test_facts_and_readability(self, good_html):
        result = audit_html(good_html)
        assert set(result.facts) == {*CATEGORIES, "llm_readability"}
        assert result.llm_readability_score == result.facts["llm_readability"].score

    def test_custom_profile(self, bare_html):
        profile = ReportProfile("meta_only", {"meta": 1.0}, PAGE_AUDIT_LADDER)
        result = audit_html(bare_html, profile=profile)
        assert result.overall_score == result.scores["meta"]
        assert result.grade == PAGE_AUDIT_LADDER.grade(result.overall_score)

    def test_page_type_gates_boosters(self, bare_html):
        blog = audit_html(bare_html, page_type="blog")
        landing = audit_html(bare_html, page_type="landing")
        assert "add_component_faq" not in [r.fix_type for r in blog.component_recommendations]
        assert "add_component_faq" in [r.fix_type for r in landing.component_recommendations]
