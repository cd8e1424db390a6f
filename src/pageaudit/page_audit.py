# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Lightweight page audit: weighted pass/fail rules for live editor feedback.

Independent of the full report.  Rules that do not apply to the page type
are left out of both the earned and the total weight.  Graded with its own
ladder (``scoring.PAGE_AUDIT_LADDER``).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from pageaudit.checkers.headings import hierarchy_skips
from pageaudit.checkers.schema import collect_types
from pageaudit.document import Document, as_document
from pageaudit.page_types import requires_faq
from pageaudit.scoring import PAGE_AUDIT_LADDER, GradeLadder, round_half_up

logger = logging.getLogger(__name__)

WORDS_MIN = 300
WORDS_MAX = 2500
TITLE_MIN = 30
TITLE_MAX = 60
DESCRIPTION_MIN = 120
DESCRIPTION_MAX = 160
INTERNAL_LINKS_MIN = 2

_HIDDEN_TEXT_TAGS = frozenset({"script", "style", "noscript"})
_UNLABELLED_INPUT_TYPES = frozenset({"hidden", "submit", "button"})

# (threshold, colour), first match wins
SCORE_COLORS: tuple[tuple[int, str], ...] = (
    (90, "#22c55e"),
    (70, "#eab308"),
    (50, "#f97316"),
)
FLOOR_COLOR = "#ef4444"


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    passed: bool
    message: str
    value: int | bool


@dataclass(frozen=True, slots=True)
class AuditIssue:
    rule_id: str
    message: str
    weight: int


@dataclass(frozen=True, slots=True)
class AuditPassed:
    rule_id: str
    message: str


@dataclass
class PageAuditResult:
    score: int
    grade: str
    color: str
    page_type: str
    issues: list[AuditIssue] = field(default_factory=list)
    passed: list[AuditPassed] = field(default_factory=list)
    metrics: dict[str, int | bool] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PageInput:
    doc: Document
    page_type: str
    meta_title: str
    meta_description: str


# A rule returns None when it does not apply to the page.
RuleCheck = Callable[[PageInput], RuleOutcome | None]


@dataclass(frozen=True, slots=True)
class AuditRule:
    id: str
    weight: int
    check: RuleCheck


# ---------------------------------------------------------------------------
# Document helpers
# ---------------------------------------------------------------------------


def body_text(doc: Document) -> str:
    """Text of <body>, excluding script/style/noscript content."""
    body = doc.first("body")
    if body is None:
        return ""
    parts: list[str] = []

    def walk(el) -> None:
        tag = el.tag.lower() if isinstance(el.tag, str) else ""
        if tag and tag not in _HIDDEN_TEXT_TAGS:
            if el.text:
                parts.append(el.text)
            for child in el:
                walk(child)
        if el is not body and el.tail:
            parts.append(el.tail)

    walk(body)
    return " ".join(parts)


def is_internal_href(href: str) -> bool:
    if href.startswith("/"):
        return True
    return "://" not in href and not href.startswith(("#", "mailto:", "tel:"))


def has_faq_section(doc: Document) -> bool:
    if doc.has("details"):
        return True
    for el in doc.root.iter():
        classes = (el.get("class") or "").split() if isinstance(el.tag, str) else []
        if "accordion" in classes or "accordion-item" in classes:
            return True
    for body in doc.json_ld_bodies():
        try:
            data = json.loads(body)
        except (ValueError, RecursionError):
            continue
        if "FAQPage" in collect_types(data):
            return True
    return False


def count_missing_aria(doc: Document) -> int:
    missing = 0
    for nav in doc.iter_tag("nav"):
        if not nav.get("aria-label") and not nav.get("aria-labelledby"):
            missing += 1

    labelled_ids = {label.get("for") for label in doc.iter_tag("label") if label.get("for")}
    for inp in doc.iter_tag("input"):
        if (inp.get("type") or "").strip().lower() in _UNLABELLED_INPUT_TYPES:
            continue
        input_id = inp.get("id")
        has_label = bool(input_id) and input_id in labelled_ids
        has_aria = bool(inp.get("aria-label") or inp.get("aria-labelledby"))
        if not has_label and not has_aria:
            missing += 1
    return missing


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _word_count(page: PageInput) -> RuleOutcome:
    count = len(body_text(page.doc).split())
    if count < WORDS_MIN:
        return RuleOutcome(False, f"Add more content ({count}/{WORDS_MIN} words minimum)", count)
    if count > WORDS_MAX:
        return RuleOutcome(False, f"Consider splitting into multiple pages ({count} words)", count)
    return RuleOutcome(True, f"Good word count ({count} words)", count)


def _missing_alt_text(page: PageInput) -> RuleOutcome:
    count = sum(1 for img in page.doc.iter_tag("img") if not (img.get("alt") or "").strip())
    if count > 0:
        return RuleOutcome(False, f"{count} image(s) missing alt text", count)
    return RuleOutcome(True, "All images have alt text", count)


def _meta_title(page: PageInput) -> RuleOutcome:
    length = len(page.meta_title)
    if not length:
        return RuleOutcome(False, "Missing meta title", length)
    if length < TITLE_MIN:
        return RuleOutcome(False, f"Meta title too short ({length}/{TITLE_MIN} chars)", length)
    if length > TITLE_MAX:
        return RuleOutcome(False, f"Meta title too long ({length}/{TITLE_MAX} chars)", length)
    return RuleOutcome(True, "Meta title length good", length)


def _meta_description(page: PageInput) -> RuleOutcome:
    length = len(page.meta_description)
    if not length:
        return RuleOutcome(False, "Missing meta description", length)
    if length < DESCRIPTION_MIN:
        return RuleOutcome(False, f"Meta description too short ({length}/{DESCRIPTION_MIN} chars)", length)
    if length > DESCRIPTION_MAX:
        return RuleOutcome(False, f"Meta description may be truncated ({length}/{DESCRIPTION_MAX} chars)", length)
    return RuleOutcome(True, "Meta description length good", length)


def _heading_structure(page: PageInput) -> RuleOutcome:
    h1_count = page.doc.count("h1")
    if h1_count == 0:
        return RuleOutcome(False, "Missing H1 heading", h1_count)
    if h1_count > 1:
        return RuleOutcome(False, f"Multiple H1 headings found ({h1_count}) - should have exactly 1", h1_count)
    return RuleOutcome(True, "Heading structure good", h1_count)


def _heading_hierarchy(page: PageInput) -> RuleOutcome:
    skips = hierarchy_skips([level for level, _ in page.doc.headings()])
    if skips:
        prev, level = skips[0]
        return RuleOutcome(False, f"Skipped heading level: h{prev} to h{level}", len(skips))
    return RuleOutcome(True, "Heading hierarchy valid", 0)


def _has_schema(page: PageInput) -> RuleOutcome:
    present = bool(page.doc.json_ld_bodies())
    if not present:
        return RuleOutcome(False, "Add schema markup for better SEO", present)
    return RuleOutcome(True, "Schema markup present", present)


def _has_faq(page: PageInput) -> RuleOutcome | None:
    if not requires_faq(page.page_type):
        return None
    present = has_faq_section(page.doc)
    if not present:
        return RuleOutcome(False, "Consider adding FAQ section for this page type", present)
    return RuleOutcome(True, "FAQ section present", present)


def _internal_links(page: PageInput) -> RuleOutcome:
    count = sum(1 for a in page.doc.iter_tag("a") if a.get("href") is not None and is_internal_href(a.get("href")))
    if count < INTERNAL_LINKS_MIN:
        return RuleOutcome(False, f"Add more internal links ({count}/{INTERNAL_LINKS_MIN} minimum)", count)
    return RuleOutcome(True, f"Good internal linking ({count} links)", count)


def _aria_labels(page: PageInput) -> RuleOutcome:
    missing = count_missing_aria(page.doc)
    if missing > 0:
        return RuleOutcome(False, f"{missing} element(s) missing ARIA labels", missing)
    return RuleOutcome(True, "ARIA labels present", missing)


PAGE_AUDIT_RULES: tuple[AuditRule, ...] = (
    AuditRule("wordCount", 15, _word_count),
    AuditRule("missingAltText", 20, _missing_alt_text),
    AuditRule("metaTitle", 15, _meta_title),
    AuditRule("metaDescription", 15, _meta_description),
    AuditRule("headingStructure", 10, _heading_structure),
    AuditRule("headingHierarchy", 5, _heading_hierarchy),
    AuditRule("hasSchema", 10, _has_schema),
    AuditRule("hasFAQ", 10, _has_faq),
    AuditRule("internalLinks", 5, _internal_links),
    AuditRule("ariaLabels", 5, _aria_labels),
)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def score_color(score: int) -> str:
    for threshold, color in SCORE_COLORS:
        if score >= threshold:
            return color
    return FLOOR_COLOR


def calculate_page_score(
    page: PageInput,
    rules: tuple[AuditRule, ...] = PAGE_AUDIT_RULES,
    ladder: GradeLadder = PAGE_AUDIT_LADDER,
) -> PageAuditResult:
    total_weight = 0
    earned_weight = 0
    result = PageAuditResult(score=0, grade="", color="", page_type=page.page_type)

    for rule in rules:
        outcome = rule.check(page)
        if outcome is None:
            continue
        total_weight += rule.weight
        result.metrics[rule.id] = outcome.value
        if outcome.passed:
            earned_weight += rule.weight
            result.passed.append(AuditPassed(rule.id, outcome.message))
        else:
            result.issues.append(AuditIssue(rule.id, outcome.message, rule.weight))

    result.issues.sort(key=lambda i: -i.weight)
    result.score = round_half_up(earned_weight / total_weight * 100) if total_weight > 0 else 100
    result.grade = ladder.grade(result.score)
    result.color = score_color(result.score)
    return result


def audit_page(
    source: Document | str | None,
    page_type: str = "custom",
    ladder: GradeLadder = PAGE_AUDIT_LADDER,
) -> PageAuditResult:
    """Quick audit reading the title and meta description from the markup."""
    doc = as_document(source)
    title_el = doc.first("title")
    meta_title = (title_el.text_content() or "") if title_el is not None else ""
    meta_description = doc.meta_content(name="description") or ""
    result = calculate_page_score(PageInput(doc, page_type, meta_title, meta_description), ladder=ladder)
    logger.debug("page audit complete: page_type=%s score=%d issues=%d", page_type, result.score, len(result.issues))
    return result
