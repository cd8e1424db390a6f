# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Headings checker: H1 presence/quality, level distribution, hierarchy in document order."""

from __future__ import annotations

from dataclasses import dataclass, field

from pageaudit import Finding, Severity
from pageaudit.checkers.meta import GENERIC_TITLE_RE
from pageaudit.document import Document, as_document

CATEGORY = "headings"

H1_MIN = 10
H1_MAX = 70


@dataclass
class HeadingFacts:
    has_h1: bool = False
    h1_text: str | None = None
    h1_count: int = 0
    has_single_h1: bool = False
    h1_issues: list[str] = field(default_factory=list)
    has_proper_hierarchy: bool = True
    hierarchy_issues: list[str] = field(default_factory=list)
    distribution: dict[str, int] = field(default_factory=lambda: {f"h{i}": 0 for i in range(1, 7)})
    total_headings: int = 0
    findings: list[Finding] = field(default_factory=list)


def hierarchy_skips(levels: list[int]) -> list[tuple[int, int]]:
    """(previous, current) pairs where a level jump skips at least one level."""
    skips = []
    prev = 0
    for level in levels:
        if prev > 0 and level > prev + 1:
            skips.append((prev, level))
        prev = level
    return skips


def check_headings(source: Document | str | None) -> HeadingFacts:
    doc = as_document(source)
    facts = HeadingFacts()
    headings = doc.headings()

    for level, text in headings:
        facts.distribution[f"h{level}"] += 1
        if level == 1 and facts.h1_text is None:
            facts.h1_text = text
            if len(text) < H1_MIN:
                facts.h1_issues.append("too_short")
            elif len(text) > H1_MAX:
                facts.h1_issues.append("too_long")
            if GENERIC_TITLE_RE.match(text):
                facts.h1_issues.append("generic")

    for prev, level in hierarchy_skips([lvl for lvl, _ in headings]):
        facts.hierarchy_issues.append(f"Skipped level: H{prev} → H{level}")
        facts.has_proper_hierarchy = False

    # Recorded for explanation only; does not by itself break the hierarchy.
    if headings and headings[0][0] != 1:
        facts.hierarchy_issues.append(f"First heading is H{headings[0][0]}, not H1")

    facts.h1_count = facts.distribution["h1"]
    facts.has_h1 = facts.h1_count > 0
    facts.has_single_h1 = facts.h1_count == 1
    facts.total_headings = len(headings)
    facts.findings = _findings(facts)
    return facts


def _findings(f: HeadingFacts) -> list[Finding]:
    out: list[Finding] = []

    if not f.has_h1:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.CRITICAL,
                issue="Missing H1 heading",
                impact="Every page should have exactly one H1. Critical for SEO and accessibility.",
                fix="<h1>Descriptive Page Title That Summarizes Main Topic</h1>",
                location="<body>, before main content",
                time_estimate="2 minutes",
            )
        )
    elif not f.has_single_h1:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue=f"Multiple H1 tags ({f.h1_count} found)",
                impact="Should have exactly one H1 per page. Convert extras to H2.",
                fix=f"Keep one H1, change others to H2:\n<h1>{f.h1_text}</h1>\n<!-- Convert other H1s to H2 -->",
                time_estimate="2 minutes",
            )
        )

    if "generic" in f.h1_issues:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue=f'Generic H1: "{f.h1_text}"',
                impact="Generic titles hurt SEO. Use descriptive text with keywords.",
                fix="<h1>Specific, Descriptive Title About Your Main Topic</h1>",
                current_code=f"<h1>{f.h1_text}</h1>",
                time_estimate="5 minutes",
            )
        )

    if not f.has_proper_hierarchy and f.hierarchy_issues:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Heading hierarchy issues",
                impact="; ".join(f.hierarchy_issues),
                fix="Add missing heading levels or restructure existing headings",
                time_estimate="15 minutes",
            )
        )

    if f.distribution["h2"] == 0 and f.total_headings > 0:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="No H2 headings",
                impact="Use H2s to break content into logical sections",
                fix="<h2>Section Title</h2>",
                time_estimate="10 minutes",
            )
        )

    return out
