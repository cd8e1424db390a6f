# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Content depth checker: word, paragraph and list counts."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum

from pageaudit import Finding, Severity
from pageaudit.document import Document, as_document

CATEGORY = "content"

WORDS_PER_MINUTE = 200


class ContentDepth(StrEnum):
    THIN = "thin"
    ADEQUATE = "adequate"
    COMPREHENSIVE = "comprehensive"


def classify_depth(word_count: int) -> ContentDepth:
    if word_count < 200:
        return ContentDepth.THIN
    if word_count < 500:
        return ContentDepth.ADEQUATE
    return ContentDepth.COMPREHENSIVE


@dataclass
class ContentFacts:
    word_count: int = 0
    paragraph_count: int = 0
    list_count: int = 0
    content_depth: ContentDepth = ContentDepth.THIN
    estimated_read_time: int = 0
    findings: list[Finding] = field(default_factory=list)

    @property
    def has_lists(self) -> bool:
        return self.list_count > 0


def check_content(source: Document | str | None) -> ContentFacts:
    doc = as_document(source)
    word_count = len(doc.words)
    facts = ContentFacts(
        word_count=word_count,
        paragraph_count=doc.count("p"),
        list_count=doc.count("ul", "ol"),
        content_depth=classify_depth(word_count),
        estimated_read_time=math.ceil(word_count / WORDS_PER_MINUTE),
    )
    facts.findings = _findings(facts)
    return facts


def _findings(f: ContentFacts) -> list[Finding]:
    out: list[Finding] = []

    if f.word_count < 300:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue=f"Thin content ({f.word_count} words)",
                impact="Pages with more content tend to rank better. Aim for 300+ words.",
                fix="Add 2-3 relevant paragraphs to your page",
                time_estimate="2 minutes",
            )
        )
    if f.paragraph_count < 3:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.LOW,
                issue=f"Few paragraphs ({f.paragraph_count})",
                impact="Break content into structured sections for better readability and SEO",
                fix="Add structured content sections with headings",
                time_estimate="2 minutes",
            )
        )
    if not f.has_lists:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.LOW,
                issue="No lists found",
                impact="Lists improve scannability and can earn featured snippets",
                fix="Add <ul> or <ol> lists to organize information",
                time_estimate="10 minutes",
            )
        )

    return out
