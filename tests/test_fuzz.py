# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Property-based fuzz tests using Hypothesis.

Verifies invariants hold for arbitrary inputs across the audit pipeline,
page audit, type matcher, hours parser and error sanitizer.
"""

from __future__ import annotations

try:
    from hypothesis import HealthCheck, example, given, settings
    from hypothesis import strategies as st
except ImportError:
    import pytest

    pytest.skip("hypothesis not installed", allow_module_level=True)

import pytest

from pageaudit.page_audit import audit_page
from pageaudit.pipeline import audit_html
from pageaudit.problem_details import MAX_DETAIL_LENGTH, sanitize_detail
from pageaudit.scoring import CATEGORIES, FULL_REPORT_LADDER, PAGE_AUDIT_LADDER
from pageaudit.structured_data.builder import build_json_ld, parse_opening_hours
from pageaudit.structured_data.matcher import recommend_type
from pageaudit.structured_data.registry import default_registry

# ---------------------------------------------------------------------------
# Module-level strategies
# ---------------------------------------------------------------------------

GENERAL_TEXT = st.text(min_size=0, max_size=2000)

HTML_LIKE = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N", "P", "Z"),
        whitelist_characters="<>/=\"'&;#!.- \n\t",
    ),
    min_size=0,
    max_size=2000,
)

TAG_SOUP = st.lists(
    st.sampled_from(
        [
            "<h1>Title</h1>",
            "<h3>Skip</h3>",
            "<title>x</title>",
            '<meta name="description" content="d">',
            '<img src="a.png">',
            '<a href="https://x.example" target="_blank">x</a>',
            '<a href="/about">About</a>',
            "<main>",
            "</main>",
            "<nav>",
            '<script type="application/ld+json">{"@type": "FAQPage"}</script>',
            '<script type="application/ld+json">{broken</script>',
            "<details><summary>Q?</summary>A.</details>",
            "<p>Some words here.</p>",
            "<table><tr><td>1</td></tr></table>",
        ]
    ),
    max_size=40,
).map("".join)

HOURS_TEXT = st.text(
    alphabet=st.sampled_from(list("MonTuesWdhFriSatSu0123456789apm:-, ")),
    max_size=80,
)

# ---------------------------------------------------------------------------
# Shared settings
# ---------------------------------------------------------------------------

_fuzz_settings = settings(
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

_FULL_GRADES = {label for _, label in FULL_REPORT_LADDER.steps} | {FULL_REPORT_LADDER.floor}
_PAGE_GRADES = {label for _, label in PAGE_AUDIT_LADDER.steps} | {PAGE_AUDIT_LADDER.floor}


# ---------------------------------------------------------------------------
# TestFuzzAudit
# ---------------------------------------------------------------------------


@pytest.mark.fuzz
class TestFuzzAudit:
    """Arbitrary markup never breaks the report shape."""

    @_fuzz_settings
    @given(html=st.one_of(HTML_LIKE, TAG_SOUP))
    @example("")
    @example("<html")
    @example("\x00<h1>\x00</h1>")
    def test_audit_html_scores_in_range(self, html: str) -> None:
        result = audit_html(html)
        assert 0 <= result.overall_score <= 100
        assert set(result.scores) == set(CATEGORIES)
        assert all(0 <= s <= 100 for s in result.scores.values())
        assert result.grade in _FULL_GRADES
        assert len(result.top_issues) <= 5
        assert len(result.quick_wins) <= 5

    @_fuzz_settings
    @given(html=TAG_SOUP)
    def test_audit_html_deterministic(self, html: str) -> None:
        assert audit_html(html) == audit_html(html)

    @_fuzz_settings
    @given(html=st.one_of(HTML_LIKE, TAG_SOUP), page_type=st.sampled_from(["landing", "blog", "custom"]))
    def test_audit_page_scores_in_range(self, html: str, page_type: str) -> None:
        result = audit_page(html, page_type)
        assert 0 <= result.score <= 100
        assert result.grade in _PAGE_GRADES
        weights = [i.weight for i in result.issues]
        assert weights == sorted(weights, reverse=True)


# ---------------------------------------------------------------------------
# TestFuzzSchema
# ---------------------------------------------------------------------------


@pytest.mark.fuzz
class TestFuzzSchema:
    """Matcher and hours parser are total functions."""

    @_fuzz_settings
    @given(description=GENERAL_TEXT)
    @example("")
    @example("   ")
    @example("restaurant")
    def test_recommend_type_always_registered(self, description: str) -> None:
        assert recommend_type(description) in default_registry()

    @_fuzz_settings
    @given(
        schema_type=st.sampled_from([n for n in default_registry().names() if default_registry().required_properties(n)]),
        value=st.one_of(st.text(min_size=1, max_size=50).filter(str.strip), st.integers(), st.floats(allow_nan=False)),
    )
    def test_required_properties_survive_build(self, schema_type: str, value) -> None:
        required = default_registry().required_properties(schema_type)
        result = build_json_ld(schema_type, {prop: value for prop in required})
        for prop in required:
            assert result[prop] == value

    @_fuzz_settings
    @given(hours=st.one_of(st.none(), HOURS_TEXT, GENERAL_TEXT))
    @example("Mon-Fri 9am-5pm")
    @example("Sun-Sat 12am-12pm")
    def test_parse_opening_hours_never_empty(self, hours) -> None:
        entries = parse_opening_hours(hours)
        assert entries
        for entry in entries:
            assert entry["@type"] == "OpeningHoursSpecification"
            assert entry["dayOfWeek"]
            assert ":" in entry["opens"]
            assert ":" in entry["closes"]


# ---------------------------------------------------------------------------
# TestFuzzSanitizer
# ---------------------------------------------------------------------------


@pytest.mark.fuzz
class TestFuzzSanitizer:
    """Property-based tests for error detail scrubbing."""

    @_fuzz_settings
    @given(text=GENERAL_TEXT)
    def test_sanitize_detail_bounded(self, text: str) -> None:
        assert len(sanitize_detail(text)) <= MAX_DETAIL_LENGTH + 3

    @_fuzz_settings
    @given(prefix=st.text(max_size=50), key=st.from_regex(r"[a-zA-Z0-9]{12,30}", fullmatch=True))
    def test_api_keys_never_leak(self, prefix: str, key: str) -> None:
        assert f"sk-{key}" not in sanitize_detail(f"{prefix} sk-{key} failed")
