# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""LLM-readability checker.

Scores how easily a language model can extract meaning from the page:
semantic sectioning, embedded structured data, text-to-markup ratio and
a clean heading hierarchy.  The score is reported separately from the
weighted overall score.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pageaudit import Finding, Severity
from pageaudit.checkers.headings import hierarchy_skips
from pageaudit.document import Document, as_document

CATEGORY = "llm-readability"

RATIO_GOOD = 0.3
RATIO_FAIR = 0.15


@dataclass
class ReadabilityFacts:
    has_article: bool = False
    section_count: int = 0
    json_ld_count: int = 0
    text_ratio: float = 0.0
    heading_count: int = 0
    clean_hierarchy: bool = True
    score: int = 0
    findings: list[Finding] = field(default_factory=list)

    @property
    def has_section(self) -> bool:
        return self.section_count > 0


def readability_score(f: ReadabilityFacts) -> int:
    score = 0
    if f.has_article:
        score += 20
    if f.has_section:
        score += 15
    if f.section_count >= 3:
        score += 10
    if f.json_ld_count >= 2:
        score += 20
    elif f.json_ld_count == 1:
        score += 10
    if f.text_ratio > RATIO_GOOD:
        score += 15
    elif f.text_ratio > RATIO_FAIR:
        score += 8
    if f.clean_hierarchy and f.heading_count >= 3:
        score += 20
    elif f.clean_hierarchy:
        score += 10
    return min(100, score)


def check_readability(source: Document | str | None) -> ReadabilityFacts:
    doc = as_document(source)
    levels = [level for level, _ in doc.headings()]
    facts = ReadabilityFacts(
        has_article=doc.has("article"),
        section_count=doc.count("section"),
        json_ld_count=len(doc.json_ld_bodies()),
        text_ratio=len(doc.flat_text) / (len(doc.html) or 1),
        heading_count=len(levels),
        clean_hierarchy=not hierarchy_skips(levels),
    )
    facts.score = readability_score(facts)
    facts.findings = _findings(facts)
    return facts


def _findings(f: ReadabilityFacts) -> list[Finding]:
    out: list[Finding] = []
    if not f.has_article and not f.has_section:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Content not wrapped in semantic sections",
                impact=(
                    "LLMs and search engines better understand content structured "
                    "with <article> and <section> elements"
                ),
                fix="Restructure content into semantic sections with proper headings",
                time_estimate="2 minutes",
            )
        )
    if f.text_ratio <= RATIO_FAIR:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.LOW,
                issue="Low content-to-markup ratio",
                impact="High markup density makes it harder for LLMs to extract meaningful content",
                fix="Add more text content or reduce unnecessary markup",
                time_estimate="15 minutes",
            )
        )
    return out
