# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Link checker: internal/external split, generic anchor text, new-tab safety."""

from __future__ import annotations

from dataclasses import dataclass, field

from pageaudit import Finding, Severity
from pageaudit.document import Document, as_document, element_text

CATEGORY = "links"

# Closed list: only these exact (lowercased, stripped) anchor texts count as generic.
GENERIC_TEXTS = frozenset({"click here", "read more", "learn more", "here", "link", "this"})

_EXTERNAL_PREFIXES = ("http://", "https://", "//")
_NON_PAGE_PREFIXES = ("#", "mailto:", "tel:")
MAX_LISTED = 5


@dataclass
class LinkFacts:
    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    links_with_generic_text: int = 0
    generic_text_list: list[str] = field(default_factory=list)
    links_new_tab: int = 0
    links_no_opener: int = 0
    findings: list[Finding] = field(default_factory=list)


def classify_href(href: str) -> str:
    """Return "external", "internal", or "other" (fragment, mailto:, tel:)."""
    if href.startswith(_EXTERNAL_PREFIXES):
        return "external"
    if href.startswith(_NON_PAGE_PREFIXES):
        return "other"
    return "internal"


def check_links(source: Document | str | None) -> LinkFacts:
    doc = as_document(source)
    facts = LinkFacts()

    for a in doc.iter_tag("a"):
        href = a.get("href")
        if href is None:
            continue
        facts.total_links += 1

        kind = classify_href(href)
        if kind == "external":
            facts.external_links += 1
        elif kind == "internal":
            facts.internal_links += 1

        text = element_text(a).lower()
        if text in GENERIC_TEXTS:
            facts.links_with_generic_text += 1
            if len(facts.generic_text_list) < MAX_LISTED:
                facts.generic_text_list.append(text)

        if (a.get("target") or "").strip().lower() == "_blank":
            facts.links_new_tab += 1
            if "noopener" in (a.get("rel") or "").lower():
                facts.links_no_opener += 1

    facts.findings = _findings(facts)
    return facts


def _findings(f: LinkFacts) -> list[Finding]:
    out: list[Finding] = []

    if f.links_with_generic_text > 0:
        examples = "\n".join(f'"{t}" → "View our pricing plans"' for t in f.generic_text_list)
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue=f"{f.links_with_generic_text} link(s) with generic text",
                impact='Generic link text ("click here") hurts SEO and accessibility',
                fix=f"Replace generic text with descriptive text:\n{examples}",
                time_estimate="10 minutes",
            )
        )

    if f.links_new_tab > f.links_no_opener:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue=f'{f.links_new_tab - f.links_no_opener} external link(s) missing rel="noopener"',
                impact='Security: external links with target="_blank" should have rel="noopener"',
                fix='<a href="..." target="_blank" rel="noopener">Link</a>',
                time_estimate="5 minutes",
            )
        )

    if f.internal_links == 0:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.LOW,
                issue="No internal links found",
                impact="Internal links help search engines discover content and improve navigation",
                fix="Add links to other pages on your site",
                time_estimate="15 minutes",
            )
        )

    return out
