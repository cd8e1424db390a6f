# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Remediation tier classification: issue text -> (fix_type, fix_method).

Static decision table:
1. exact lookup of the canonical issue text;
2. first matching ordered pattern rule (issue texts with embedded counts);
3. otherwise the finding stays unclassified (informational only).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from pageaudit import Finding, FixMethod


@dataclass(frozen=True, slots=True)
class FixMapping:
    fix_type: str
    fix_method: FixMethod


def _client(fix_type: str) -> FixMapping:
    return FixMapping(fix_type, FixMethod.CLIENT)


def _generated(fix_type: str) -> FixMapping:
    return FixMapping(fix_type, FixMethod.GENERATED)


def _ai(fix_type: str) -> FixMapping:
    return FixMapping(fix_type, FixMethod.AI)


EXACT_FIXES: dict[str, FixMapping] = {
    # client: deterministic markup patch
    "Missing viewport meta tag": _client("add_viewport"),
    "Missing charset declaration": _client("add_charset"),
    "Missing lang attribute": _client("add_lang"),
    "Missing canonical URL": _client("add_canonical"),
    "Missing <main> landmark": _client("add_main"),
    "Missing <header> element": _client("add_header"),
    "Missing <footer> element": _client("add_footer"),
    "Missing <nav> element": _client("add_nav"),
    "Missing skip navigation link": _client("add_skip_link"),
    "Images missing lazy loading": _client("add_lazy_loading"),
    "No ARIA labels found": _client("add_aria_labels"),
    # generated: templated JSON-LD
    "No structured data (JSON-LD) found": _generated("generate_schema_auto"),
    "Missing LocalBusiness schema": _generated("generate_schema_localbusiness"),
    "Missing Article schema": _generated("generate_schema_article"),
    "Missing FAQPage schema": _generated("generate_schema_faq"),
    "Missing Product schema": _generated("generate_schema_product"),
    "Missing Organization schema": _generated("generate_schema_organization"),
    "Missing WebSite/Organization schema": _generated("generate_schema_organization"),
    "Missing AboutPage schema": _generated("generate_schema_aboutpage"),
    # ai: LLM-backed content
    "Missing meta description": _ai("generate_meta_description"),
    "Missing page title": _ai("generate_title"),
    "Missing Open Graph tags": _ai("generate_og_tags"),
    "Missing og:image": _ai("generate_og_tags"),
    "Content not wrapped in semantic sections": _ai("improve_llm_readability"),
}

# Order matters: first match wins.
PATTERN_FIXES: tuple[tuple[re.Pattern[str], FixMapping], ...] = (
    (re.compile(r"Multiple H1"), _client("fix_multiple_h1")),
    (re.compile(r"missing rel.*noopener", re.IGNORECASE), _client("add_noopener")),
    (re.compile(r"missing alt text", re.IGNORECASE), _ai("generate_alt_text")),
    (re.compile(r"Description too short", re.IGNORECASE), _ai("generate_meta_description")),
    (re.compile(r"Title too (?:short|long)", re.IGNORECASE), _ai("generate_title")),
    (re.compile(r"Missing.*schema", re.IGNORECASE), _generated("generate_schema_auto")),
    (re.compile(r"not wrapped in semantic", re.IGNORECASE), _ai("improve_llm_readability")),
    (re.compile(r"^Thin content"), _ai("expand_content")),
    (re.compile(r"^Few paragraphs"), _ai("add_content_sections")),
)


def lookup(issue: str) -> FixMapping | None:
    """Remediation mapping for an issue text, or None when unclassified."""
    mapping = EXACT_FIXES.get(issue)
    if mapping is not None:
        return mapping
    for pattern, candidate in PATTERN_FIXES:
        if pattern.search(issue):
            return candidate
    return None


def classify(finding: Finding) -> Finding:
    """Attach ``fix_type``/``fix_method`` in place when the issue is classifiable."""
    mapping = lookup(finding.issue)
    if mapping is not None:
        finding.classify(mapping.fix_type, mapping.fix_method)
    return finding


def classify_all(findings: Iterable[Finding]) -> list[Finding]:
    return [classify(f) for f in findings]


def fix_types_for(method: FixMethod) -> frozenset[str]:
    """Every fix type the table can produce for one tier."""
    mappings = list(EXACT_FIXES.values()) + [m for _, m in PATTERN_FIXES]
    return frozenset(m.fix_type for m in mappings if m.fix_method is method)
