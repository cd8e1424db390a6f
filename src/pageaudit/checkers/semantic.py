# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Semantic landmark and ARIA checker."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pageaudit import Finding, Severity
from pageaudit.document import Document, as_document

CATEGORY = "semantic"

LANDMARK_TAGS = ("main", "header", "nav", "footer", "article", "section", "aside")
_SKIP_LINK_RE = re.compile(r"^#(main|content|main-content)", re.IGNORECASE)


@dataclass
class SemanticFacts:
    has_main: bool = False
    has_header: bool = False
    has_nav: bool = False
    has_footer: bool = False
    has_article: bool = False
    has_section: bool = False
    has_aside: bool = False
    aria_labels: int = 0
    aria_labelledby: int = 0
    roles: int = 0
    landmark_count: int = 0
    has_skip_link: bool = False
    findings: list[Finding] = field(default_factory=list)


def check_semantic(source: Document | str | None) -> SemanticFacts:
    doc = as_document(source)
    facts = SemanticFacts(
        has_main=doc.has("main"),
        has_header=doc.has("header"),
        has_nav=doc.has("nav"),
        has_footer=doc.has("footer"),
        has_article=doc.has("article"),
        has_section=doc.has("section"),
        has_aside=doc.has("aside"),
        aria_labels=doc.count_attr("aria-label"),
        aria_labelledby=doc.count_attr("aria-labelledby"),
        roles=doc.count_attr("role"),
        landmark_count=doc.count(*LANDMARK_TAGS),
        has_skip_link=any(_SKIP_LINK_RE.match(el.get("href") or "") for el in doc.iter_tag("a")),
    )
    facts.findings = _findings(facts)
    return facts


def _findings(f: SemanticFacts) -> list[Finding]:
    out: list[Finding] = []

    if not f.has_main:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="Missing <main> landmark",
                impact="Screen readers use <main> to skip to main content",
                fix="<main>\n  <!-- Your main content here -->\n</main>",
                time_estimate="5 minutes",
            )
        )
    if not f.has_header:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Missing <header> element",
                impact="Use <header> for site/page header content",
                fix="<header>\n  <!-- Logo, navigation, etc. -->\n</header>",
                time_estimate="5 minutes",
            )
        )
    if not f.has_nav:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Missing <nav> element",
                impact="Use <nav> for navigation links",
                fix='<nav aria-label="Main navigation">\n  <!-- Navigation links -->\n</nav>',
                time_estimate="5 minutes",
            )
        )
    if not f.has_footer:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.LOW,
                issue="Missing <footer> element",
                impact="Use <footer> for footer content",
                fix="<footer>\n  <!-- Footer content -->\n</footer>",
                time_estimate="5 minutes",
            )
        )
    # Without a <main> there is nothing to skip to.
    if not f.has_skip_link and f.has_main:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Missing skip navigation link",
                impact="Skip links help keyboard users bypass navigation",
                fix='<a href="#main" class="skip-link">Skip to content</a>',
                time_estimate="2 minutes",
            )
        )
    if f.aria_labels == 0 and f.aria_labelledby == 0:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="No ARIA labels found",
                impact="ARIA labels improve accessibility for screen readers",
                fix="Add aria-label or aria-labelledby to interactive elements and landmarks",
                time_estimate="15 minutes",
            )
        )

    return out
