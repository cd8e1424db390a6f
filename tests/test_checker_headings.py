# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the headings checker."""

from __future__ import annotations

from pageaudit import Severity
from pageaudit.checkers.headings import check_headings, hierarchy_skips
from tests._pages import page


class TestHierarchySkips:
    def test_no_skips(self):
        assert hierarchy_skips([1, 2, 3, 2, 3]) == []

    def test_skip_detected_in_document_order(self):
        assert hierarchy_skips([1, 3, 2, 4]) == [(1, 3), (2, 4)]

    def test_going_up_is_never_a_skip(self):
        assert hierarchy_skips([1, 2, 3, 4, 1]) == []

    def test_empty(self):
        assert hierarchy_skips([]) == []


class TestCheckHeadings:
    def test_missing_h1_is_critical(self):
        facts = check_headings(page("<h2>Section</h2>"))
        assert not facts.has_h1
        assert facts.findings[0].issue == "Missing H1 heading"
        assert facts.findings[0].severity is Severity.CRITICAL

    def test_multiple_h1(self):
        facts = check_headings(page("<h1>First heading here</h1><h1>Second heading here</h1>"))
        assert facts.h1_count == 2
        assert facts.h1_text == "First heading here"
        assert any(f.issue == "Multiple H1 tags (2 found)" and f.severity is Severity.HIGH for f in facts.findings)

    def test_generic_h1(self):
        facts = check_headings(page("<h1>Welcome</h1>"))
        assert "generic" in facts.h1_issues
        assert any(f.issue == 'Generic H1: "Welcome"' for f in facts.findings)

    def test_skipped_level_breaks_hierarchy(self):
        facts = check_headings(page("<h1>Main page heading</h1><h3>Deep</h3>"))
        assert not facts.has_proper_hierarchy
        assert "Skipped level: H1 → H3" in facts.hierarchy_issues
        finding = next(f for f in facts.findings if f.issue == "Heading hierarchy issues")
        assert finding.severity is Severity.MEDIUM

    def test_first_heading_not_h1_is_recorded_only(self):
        facts = check_headings(page("<h2>Intro</h2><h1>Main page heading</h1>"))
        assert facts.has_proper_hierarchy
        assert "First heading is H2, not H1" in facts.hierarchy_issues
        assert not any(f.issue == "Heading hierarchy issues" for f in facts.findings)

    def test_no_h2(self):
        facts = check_headings(page("<h1>Main page heading</h1>"))
        assert any(f.issue == "No H2 headings" for f in facts.findings)

    def test_distribution(self):
        facts = check_headings(page("<h1>Main page heading</h1><h2>A</h2><h2>B</h2><h3>C</h3>"))
        assert facts.distribution == {"h1": 1, "h2": 2, "h3": 1, "h4": 0, "h5": 0, "h6": 0}
        assert facts.total_headings == 4

    def test_no_headings_only_reports_missing_h1(self):
        facts = check_headings(page("<p>text</p>"))
        assert [f.issue for f in facts.findings] == ["Missing H1 heading"]
