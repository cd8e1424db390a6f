# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for category point tables, grade ladders and report profiles."""

from __future__ import annotations

import pytest

from pageaudit.checkers import (
    ContentDepth,
    ContentFacts,
    HeadingFacts,
    ImageFacts,
    LinkFacts,
    MetaFacts,
    SchemaFacts,
    SemanticFacts,
    check_schema,
)
from pageaudit.scoring import (
    CATEGORIES,
    DEFAULT_WEIGHTS,
    FULL_REPORT_LADDER,
    FULL_REPORT_PROFILE,
    PAGE_AUDIT_LADDER,
    STATUS_LADDER,
    GradeLadder,
    ReportProfile,
    content_breakdown,
    content_score,
    heading_breakdown,
    heading_score,
    image_breakdown,
    image_score,
    link_breakdown,
    link_score,
    meta_breakdown,
    meta_score,
    round_half_up,
    schema_breakdown,
    schema_score,
    semantic_breakdown,
    semantic_score,
)

# ── Fully credited facts per category ───────────────────────────────


def _full_meta() -> MetaFacts:
    return MetaFacts(
        has_title=True,
        title="A descriptive page title",
        has_description=True,
        description_length=130,
        has_og_tags=True,
        og_image="/og.jpg",
        has_twitter_tags=True,
        has_canonical=True,
        has_viewport=True,
    )


def _full_headings() -> HeadingFacts:
    facts = HeadingFacts(has_h1=True, h1_text="Main page heading", h1_count=1, has_single_h1=True, total_headings=4)
    facts.distribution.update({"h1": 1, "h2": 3})
    return facts


def _full_schema() -> SchemaFacts:
    return SchemaFacts(has_schema=True, schema_count=2, schema_types=["Organization", "WebSite"])


def _full_semantic() -> SemanticFacts:
    return SemanticFacts(
        has_main=True, has_header=True, has_nav=True, has_footer=True, has_section=True, aria_labels=2, roles=1
    )


def _full_links() -> LinkFacts:
    return LinkFacts(total_links=6, internal_links=3, external_links=2)


def _full_content() -> ContentFacts:
    return ContentFacts(
        word_count=800, paragraph_count=6, list_count=1, content_depth=ContentDepth.COMPREHENSIVE
    )


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (84.5, 85), (84.49, 84), (0, 0)])
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected


# ── Point tables ────────────────────────────────────────────────────


class TestPointTables:
    """Every table sums to exactly 100 at full credit."""

    @pytest.mark.parametrize(
        "breakdown,facts",
        [
            (meta_breakdown, _full_meta),
            (heading_breakdown, _full_headings),
            (semantic_breakdown, _full_semantic),
            (link_breakdown, _full_links),
            (content_breakdown, _full_content),
        ],
    )
    def test_tables_sum_to_100(self, breakdown, facts):
        result = breakdown(facts())
        assert sum(i.points for i in result.items) == 100
        assert all(i.earned for i in result.items)

    def test_schema_table_points(self):
        items = schema_breakdown(_full_schema()).items
        assert [i.points for i in items] == [40, 15, 15, 20]

    def test_full_scores(self):
        assert meta_score(_full_meta()) == 100
        assert heading_score(_full_headings()) == 100
        assert schema_score(_full_schema()) == 90
        assert semantic_score(_full_semantic()) == 100
        assert link_score(_full_links()) == 100
        assert content_score(_full_content()) == 100


class TestSchemaScore:
    def test_floor_credit_without_structured_data(self):
        facts = check_schema("<p>plain</p>")
        # floor 10 + valid 15 + one high-priority gap 10
        assert schema_score(facts) == 35

    def test_single_block(self):
        assert schema_score(SchemaFacts(has_schema=True, schema_count=1)) == 40 + 10 + 15 + 20

    def test_invalid_blocks_lose_validity_credit(self):
        facts = SchemaFacts(has_schema=True, schema_count=1, validation_issues=["Invalid JSON-LD syntax"])
        assert schema_score(facts) == 40 + 10 + 20


class TestImageScore:
    def test_no_images_is_100(self):
        assert image_score(ImageFacts()) == 100
        assert image_breakdown(ImageFacts()).items[0].points == 100

    def test_empty_alt_is_credited(self):
        facts = ImageFacts(total_images=2, images_with_alt=1, images_empty_alt=1)
        assert image_score(facts) == 100

    def test_single_image_gets_lazy_credit(self):
        facts = ImageFacts(total_images=1, images_missing_alt=1)
        assert image_score(facts) == 30

    def test_partial(self):
        # 2/3 alt -> 46.67 -> 47; 1 of 2 eligible lazy -> 15
        facts = ImageFacts(total_images=3, images_with_alt=2, images_missing_alt=1, images_without_lazy=1)
        assert image_score(facts) == 47 + 15


class TestPartialScores:
    def test_heading_single_h2(self):
        facts = _full_headings()
        facts.distribution["h2"] = 1
        assert heading_score(facts) == 95

    def test_links_minimum(self):
        assert link_score(LinkFacts()) == 20 + 20 + 5

    def test_links_partial(self):
        facts = LinkFacts(total_links=3, internal_links=1, external_links=1, links_with_generic_text=2)
        assert link_score(facts) == 20 + 15 + 10 + 10 + 5

    def test_content_adequate(self):
        facts = ContentFacts(word_count=300, paragraph_count=3, content_depth=ContentDepth.ADEQUATE)
        assert content_score(facts) == 25 + 15 + 10

    def test_meta_empty(self):
        assert meta_score(MetaFacts()) == 0


# ── Ladders and profiles ────────────────────────────────────────────


class TestGradeLadders:
    @pytest.mark.parametrize(
        "score,grade",
        [(100, "A+"), (90, "A+"), (89, "A"), (85, "A"), (84, "B+"), (80, "B+"), (70, "B"), (60, "C"), (50, "D"), (49, "F")],
    )
    def test_full_report(self, score, grade):
        assert FULL_REPORT_LADDER.grade(score) == grade

    @pytest.mark.parametrize(
        "score,grade", [(95, "A"), (90, "A"), (85, "B"), (75, "C"), (65, "D"), (60, "D"), (59, "F"), (0, "F")]
    )
    def test_page_audit(self, score, grade):
        assert PAGE_AUDIT_LADDER.grade(score) == grade

    def test_ladders_differ_at_55(self):
        assert FULL_REPORT_LADDER.grade(55) == "D"
        assert PAGE_AUDIT_LADDER.grade(55) == "F"

    @pytest.mark.parametrize(
        "score,status", [(80, "excellent"), (79, "good"), (60, "good"), (40, "needs_improvement"), (39, "poor")]
    )
    def test_status(self, score, status):
        assert STATUS_LADDER.grade(score) == status

    def test_labels(self):
        assert PAGE_AUDIT_LADDER.labels() == ["A", "B", "C", "D", "F"]

    def test_non_descending_thresholds_rejected(self):
        with pytest.raises(ValueError, match="descending"):
            GradeLadder(steps=((50, "D"), (90, "A")), floor="F")

    def test_duplicate_thresholds_rejected(self):
        with pytest.raises(ValueError):
            GradeLadder(steps=((90, "A"), (90, "B")), floor="F")


class TestReportProfile:
    def test_default_weights(self):
        assert tuple(DEFAULT_WEIGHTS) == CATEGORIES
        assert FULL_REPORT_PROFILE.weights["content"] == 0.25

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum"):
            ReportProfile("broken", {"meta": 0.5, "content": 0.4}, FULL_REPORT_LADDER)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            ReportProfile("broken", {"meta": 1.5, "content": -0.5}, FULL_REPORT_LADDER)

    def test_overall_all_100(self):
        assert FULL_REPORT_PROFILE.overall(dict.fromkeys(CATEGORIES, 100)) == 100

    def test_overall_rounds_half_up(self):
        scores = dict.fromkeys(CATEGORIES, 100)
        scores["schema"] = 90
        # 100 - 0.15 * 10 = 98.5
        assert FULL_REPORT_PROFILE.overall(scores) == 99

    def test_overall_missing_categories_count_as_zero(self):
        assert FULL_REPORT_PROFILE.overall({"content": 100}) == 25

    def test_custom_profile(self):
        profile = ReportProfile("content_only", {"content": 1.0}, PAGE_AUDIT_LADDER)
        assert profile.overall({"content": 72, "meta": 0}) == 72
        assert profile.ladder.grade(72) == "C"
