# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Category scores, score breakdowns, and report profiles.

Each category is an additive point table that sums to exactly 100 at full
credit.  The overall score is the weighted sum, rounded half-up.

Two grade ladders exist on purpose and are kept as separate profiles:
the full report (A+ .. F, F below 50) and the lightweight page audit
(A .. F, F below 60).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType

from pageaudit import BreakdownItem, CategoryBreakdown
from pageaudit.checkers import (
    ContentDepth,
    ContentFacts,
    HeadingFacts,
    ImageFacts,
    LinkFacts,
    MetaFacts,
    SchemaFacts,
    SemanticFacts,
)

CATEGORIES = ("meta", "headings", "schema", "semantic", "images", "links", "content")


def round_half_up(value: float | Decimal) -> int:
    """Round .5 away from zero for non-negative inputs (``Math.round`` semantics)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Grade ladders and profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GradeLadder:
    """Non-overlapping threshold ladder: first ``score >= threshold`` wins."""

    steps: tuple[tuple[int, str], ...]
    floor: str

    def __post_init__(self) -> None:
        thresholds = [t for t, _ in self.steps]
        if thresholds != sorted(thresholds, reverse=True) or len(set(thresholds)) != len(thresholds):
            raise ValueError("grade thresholds must be strictly descending")

    def grade(self, score: float) -> str:
        for threshold, label in self.steps:
            if score >= threshold:
                return label
        return self.floor

    def labels(self) -> list[str]:
        return [label for _, label in self.steps] + [self.floor]


FULL_REPORT_LADDER = GradeLadder(
    steps=((90, "A+"), (85, "A"), (80, "B+"), (70, "B"), (60, "C"), (50, "D")),
    floor="F",
)

PAGE_AUDIT_LADDER = GradeLadder(
    steps=((90, "A"), (80, "B"), (70, "C"), (60, "D")),
    floor="F",
)

STATUS_LADDER = GradeLadder(
    steps=((80, "excellent"), (60, "good"), (40, "needs_improvement")),
    floor="poor",
)

DEFAULT_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "meta": 0.20,
        "headings": 0.12,
        "schema": 0.15,
        "semantic": 0.10,
        "images": 0.10,
        "links": 0.08,
        "content": 0.25,
    }
)


@dataclass(frozen=True, slots=True)
class ReportProfile:
    """Weights + grade ladder + status ladder for one kind of report."""

    name: str
    weights: Mapping[str, float]
    ladder: GradeLadder
    status_ladder: GradeLadder = STATUS_LADDER

    def __post_init__(self) -> None:
        total = sum(Decimal(str(w)) for w in self.weights.values())
        if total != Decimal(1):
            raise ValueError(f"profile {self.name!r}: category weights sum to {total}, expected 1.0")
        if any(w < 0 for w in self.weights.values()):
            raise ValueError(f"profile {self.name!r}: negative category weight")

    def overall(self, scores: Mapping[str, int]) -> int:
        total = sum(Decimal(scores.get(cat, 0)) * Decimal(str(w)) for cat, w in self.weights.items())
        return max(0, min(100, round_half_up(total)))


FULL_REPORT_PROFILE = ReportProfile("full_report", DEFAULT_WEIGHTS, FULL_REPORT_LADDER)


# ---------------------------------------------------------------------------
# Category point tables and their explanations
# ---------------------------------------------------------------------------


def _sum_earned(items: tuple[BreakdownItem, ...]) -> int:
    return min(100, sum(i.points for i in items if i.earned))


def meta_breakdown(f: MetaFacts) -> CategoryBreakdown:
    items = (
        BreakdownItem("Has title tag", 15, f.has_title, f'"{f.title}"' if f.has_title else None),
        BreakdownItem(
            "Title well-formed",
            10,
            f.has_title and not f.title_issues,
            ", ".join(f.title_issues) or None,
        ),
        BreakdownItem(
            "Has meta description",
            15,
            f.has_description,
            f"{f.description_length} chars" if f.has_description else None,
        ),
        BreakdownItem(
            "Description well-formed",
            10,
            f.has_description and not f.description_issues,
            ", ".join(f.description_issues) or None,
        ),
        BreakdownItem("Open Graph tags", 20, f.has_og_tags),
        BreakdownItem("OG image", 5, bool(f.og_image)),
        BreakdownItem("Twitter card tags", 5, f.has_twitter_tags),
        BreakdownItem("Canonical URL", 10, f.has_canonical),
        BreakdownItem("Viewport meta", 10, f.has_viewport),
    )
    return CategoryBreakdown("Page metadata for search engines and social sharing", items)


def heading_breakdown(f: HeadingFacts) -> CategoryBreakdown:
    h2 = f.distribution["h2"]
    items = (
        BreakdownItem("Has H1", 25, f.has_h1, f'"{f.h1_text}"' if f.has_h1 else None),
        BreakdownItem(
            "Single H1",
            15,
            f.has_single_h1,
            f"{f.h1_count} found" if not f.has_single_h1 and f.h1_count > 1 else None,
        ),
        BreakdownItem("H1 well-formed", 10, f.has_h1 and not f.h1_issues, ", ".join(f.h1_issues) or None),
        BreakdownItem(
            "Proper hierarchy",
            25,
            f.has_proper_hierarchy,
            f.hierarchy_issues[0] if f.hierarchy_issues else None,
        ),
        BreakdownItem("2+ H2 subheadings", 15, h2 >= 2, f"{h2} H2s found"),
        BreakdownItem("3-15 total headings", 10, 3 <= f.total_headings <= 15, f"{f.total_headings} total"),
    )
    return CategoryBreakdown("Heading structure for accessibility and SEO", items)


def heading_score(f: HeadingFacts) -> int:
    score = 0
    if f.has_h1:
        score += 25
    if f.has_single_h1:
        score += 15
    if f.has_h1 and not f.h1_issues:
        score += 10
    if f.has_proper_hierarchy:
        score += 25
    h2 = f.distribution["h2"]
    if h2 >= 2:
        score += 15
    elif h2 == 1:
        score += 10
    if 3 <= f.total_headings <= 15:
        score += 10
    return min(100, score)


def schema_breakdown(f: SchemaFacts) -> CategoryBreakdown:
    high = f.high_priority_missed
    items = (
        BreakdownItem("Has schema markup", 40, f.has_schema, ", ".join(f.schema_types) if f.has_schema else None),
        BreakdownItem("2+ schema types", 15, f.schema_count >= 2, f"{f.schema_count} found"),
        BreakdownItem(
            "Valid JSON-LD",
            15,
            not f.validation_issues,
            f.validation_issues[0] if f.validation_issues else None,
        ),
        BreakdownItem(
            "No high-priority gaps",
            20,
            not high,
            f"{len(high)} missing: {', '.join(o.type for o in high)}" if high else None,
        ),
    )
    return CategoryBreakdown("Structured data (JSON-LD) for rich search results", items)


def schema_score(f: SchemaFacts) -> int:
    score = 40 if f.has_schema else 10
    if f.schema_count >= 2:
        score += 15
    elif f.schema_count == 1:
        score += 10
    if not f.validation_issues:
        score += 15
    missed = len(f.high_priority_missed)
    if missed == 0:
        score += 20
    elif missed == 1:
        score += 10
    return min(100, score)


def semantic_breakdown(f: SemanticFacts) -> CategoryBreakdown:
    items = (
        BreakdownItem("<main> landmark", 20, f.has_main),
        BreakdownItem("<header> element", 15, f.has_header),
        BreakdownItem("<nav> element", 15, f.has_nav),
        BreakdownItem("<footer> element", 15, f.has_footer),
        BreakdownItem("<article> or <section>", 10, f.has_article or f.has_section),
        BreakdownItem("ARIA labels", 15, f.aria_labels > 0, f"{f.aria_labels} found"),
        BreakdownItem("ARIA roles", 10, f.roles > 0, f"{f.roles} found"),
    )
    return CategoryBreakdown("HTML5 semantic structure and accessibility", items)


def image_breakdown(f: ImageFacts) -> CategoryBreakdown:
    description = "Image accessibility and performance"
    if f.total_images == 0:
        return CategoryBreakdown(description, (BreakdownItem("No images on page", 100, True),))
    credited = f.images_with_alt + f.images_empty_alt
    alt_percent = round_half_up(credited / f.total_images * 100)
    eligible = f.lazy_eligible
    lazy_done = eligible - f.images_without_lazy if eligible > 0 else 0
    items = (
        BreakdownItem(
            "All images have alt text",
            70,
            f.images_missing_alt == 0,
            f"{credited}/{f.total_images} ({alt_percent}%)",
        ),
        BreakdownItem(
            "Lazy loading on below-fold images",
            30,
            f.images_without_lazy == 0,
            f"{lazy_done}/{eligible} lazy" if eligible > 0 else "only 1 image (above fold)",
        ),
    )
    return CategoryBreakdown(description, items)


def image_score(f: ImageFacts) -> int:
    if f.total_images == 0:
        return 100
    alt_ratio = (f.images_with_alt + f.images_empty_alt) / f.total_images
    score = round_half_up(alt_ratio * 70)
    eligible = f.lazy_eligible
    if eligible == 0:
        score += 30
    else:
        lazy_ratio = max(0, eligible - f.images_without_lazy) / eligible
        score += round_half_up(lazy_ratio * 30)
    return min(100, score)


def link_breakdown(f: LinkFacts) -> CategoryBreakdown:
    generic_detail = None
    if f.links_with_generic_text:
        quoted = ", ".join(f'"{t}"' for t in f.generic_text_list[:3])
        generic_detail = f"{f.links_with_generic_text} generic ({quoted})"
    items = (
        BreakdownItem("Base score", 20, True),
        BreakdownItem("3+ internal links", 30, f.internal_links >= 3, f"{f.internal_links} found"),
        BreakdownItem("2+ external links", 15, f.external_links >= 2, f"{f.external_links} found"),
        BreakdownItem("No generic link text", 20, f.links_with_generic_text == 0, generic_detail),
        BreakdownItem("External links have noopener", 5, f.links_new_tab == f.links_no_opener),
        BreakdownItem("5+ total links", 10, f.total_links >= 5, f"{f.total_links} total"),
    )
    return CategoryBreakdown("Internal/external linking and link quality", items)


def link_score(f: LinkFacts) -> int:
    score = 20
    if f.internal_links >= 3:
        score += 30
    elif f.internal_links >= 1:
        score += 15
    if f.external_links >= 2:
        score += 15
    elif f.external_links >= 1:
        score += 10
    if f.links_with_generic_text == 0:
        score += 20
    elif f.links_with_generic_text <= 2:
        score += 10
    if f.links_new_tab == f.links_no_opener:
        score += 5
    if f.total_links >= 5:
        score += 10
    return min(100, score)


def content_breakdown(f: ContentFacts) -> CategoryBreakdown:
    items = (
        BreakdownItem("300+ words", 25, f.word_count >= 300, f"{f.word_count} words"),
        BreakdownItem(
            "500+ words",
            15,
            f.word_count >= 500,
            f"need {500 - f.word_count} more" if f.word_count < 500 else None,
        ),
        BreakdownItem("5+ paragraphs", 20, f.paragraph_count >= 5, f"{f.paragraph_count} found"),
        BreakdownItem("Has lists", 15, f.has_lists, f"{f.list_count} list(s)" if f.has_lists else None),
        BreakdownItem(
            "Comprehensive depth",
            25,
            f.content_depth is ContentDepth.COMPREHENSIVE,
            str(f.content_depth),
        ),
    )
    return CategoryBreakdown("Content depth and structure for SEO", items)


def content_score(f: ContentFacts) -> int:
    score = 0
    if f.word_count >= 300:
        score += 25
    elif f.word_count >= 100:
        score += 10
    if f.word_count >= 500:
        score += 15
    if f.paragraph_count >= 5:
        score += 20
    elif f.paragraph_count >= 3:
        score += 15
    elif f.paragraph_count >= 1:
        score += 5
    if f.has_lists:
        score += 15
    if f.content_depth is ContentDepth.COMPREHENSIVE:
        score += 25
    elif f.content_depth is ContentDepth.ADEQUATE:
        score += 10
    return min(100, score)


def meta_score(f: MetaFacts) -> int:
    return _sum_earned(meta_breakdown(f).items)


def semantic_score(f: SemanticFacts) -> int:
    return _sum_earned(semantic_breakdown(f).items)


@dataclass(frozen=True, slots=True)
class CategoryScores:
    scores: dict[str, int]
    breakdowns: dict[str, CategoryBreakdown]


def score_categories(
    *,
    meta: MetaFacts,
    headings: HeadingFacts,
    schema: SchemaFacts,
    semantic: SemanticFacts,
    images: ImageFacts,
    links: LinkFacts,
    content: ContentFacts,
) -> CategoryScores:
    """All seven weighted category scores plus their explanations."""
    scores = {
        "meta": meta_score(meta),
        "headings": heading_score(headings),
        "schema": schema_score(schema),
        "semantic": semantic_score(semantic),
        "images": image_score(images),
        "links": link_score(links),
        "content": content_score(content),
    }
    breakdowns = {
        "meta": meta_breakdown(meta),
        "headings": heading_breakdown(headings),
        "schema": schema_breakdown(schema),
        "semantic": semantic_breakdown(semantic),
        "images": image_breakdown(images),
        "links": link_breakdown(links),
        "content": content_breakdown(content),
    }
    return CategoryScores(scores, breakdowns)
