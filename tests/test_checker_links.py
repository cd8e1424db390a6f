# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the link checker."""

from __future__ import annotations

import pytest

from pageaudit import Severity
from pageaudit.checkers.links import GENERIC_TEXTS, check_links, classify_href
from tests._pages import page


class TestClassifyHref:
    @pytest.mark.parametrize(
        "href,kind",
        [
            ("https://example.com", "external"),
            ("http://example.com", "external"),
            ("//cdn.example.com/x", "external"),
            ("/about", "internal"),
            ("contact.html", "internal"),
            ("", "internal"),
            ("#top", "other"),
            ("mailto:a@b.c", "other"),
            ("tel:555", "other"),
        ],
    )
    def test_kinds(self, href, kind):
        assert classify_href(href) == kind


class TestCheckLinks:
    def test_anchor_without_href_ignored(self):
        facts = check_links(page("<a name='x'>anchor</a>"))
        assert facts.total_links == 0

    def test_counts(self):
        body = '<a href="/a">A page</a><a href="/b">B page</a><a href="https://x.example">X</a><a href="#top">Top</a>'
        facts = check_links(page(body))
        assert facts.total_links == 4
        assert facts.internal_links == 2
        assert facts.external_links == 1

    def test_generic_text_closed_list(self):
        body = (
            '<a href="/a">Click here</a><a href="/b"> READ MORE </a>'
            '<a href="/c">Click here to read more</a><a href="/d">More</a>'
        )
        facts = check_links(page(body))
        assert facts.links_with_generic_text == 2
        assert facts.generic_text_list == ["click here", "read more"]
        finding = next(f for f in facts.findings if "generic" in f.issue)
        assert finding.issue == "2 link(s) with generic text"

    def test_generic_list_is_exact(self):
        assert GENERIC_TEXTS == {"click here", "read more", "learn more", "here", "link", "this"}

    def test_new_tab_without_noopener(self):
        body = (
            '<a href="https://a.example" target="_blank">A</a>'
            '<a href="https://b.example" target="_blank" rel="noopener noreferrer">B</a>'
        )
        facts = check_links(page(body))
        assert facts.links_new_tab == 2
        assert facts.links_no_opener == 1
        finding = next(f for f in facts.findings if "noopener" in f.issue)
        assert finding.issue == '1 external link(s) missing rel="noopener"'
        assert finding.severity is Severity.MEDIUM

    def test_no_internal_links(self):
        facts = check_links(page('<a href="https://a.example">A</a>'))
        assert any(f.issue == "No internal links found" and f.severity is Severity.LOW for f in facts.findings)
