# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Score boosters: informational component recommendations.

These are not findings.  They never affect scores or the ranked issue
lists and are reported alongside the audit.
"""

from __future__ import annotations

import re

from pageaudit import Finding, Severity
from pageaudit.checkers.content import ContentFacts
from pageaudit.checkers.schema import SchemaFacts
from pageaudit.document import Document, as_document
from pageaudit.page_types import requires_faq

CATEGORY = "score-booster"

_FAQ_CONTENT_RE = re.compile(r"faq|frequently\s+asked")
_TESTIMONIAL_RE = re.compile(r"testimonial|review|what\s+(our\s+)?(clients?|customers?)\s+say")


def recommend_components(
    source: Document | str | None,
    content: ContentFacts,
    schema: SchemaFacts,
    page_type: str | None = None,
) -> list[Finding]:
    """FAQ / testimonials / features suggestions.

    When *page_type* is given, the FAQ suggestion only applies to page
    types that expect one (see ``page_types.requires_faq``).
    """
    doc = as_document(source)
    lower = doc.lower
    recs: list[Finding] = []

    has_faq_content = _FAQ_CONTENT_RE.search(lower) is not None or doc.has("details")
    has_faq_schema = any("faq" in t.lower() for t in schema.schema_types)
    faq_applies = page_type is None or requires_faq(page_type)
    if faq_applies and not has_faq_content and not has_faq_schema:
        recs.append(
            Finding(
                category=CATEGORY,
                severity=Severity.INFO,
                issue="No FAQ section found",
                impact="Adding an FAQ section boosts schema, content depth, and heading scores (+5-15 points)",
                fix="Add an FAQ section with common questions about your business or service",
                time_estimate="5 minutes",
                fix_type="add_component_faq",
            )
        )

    if content.word_count < 500 and not _TESTIMONIAL_RE.search(lower):
        recs.append(
            Finding(
                category=CATEGORY,
                severity=Severity.INFO,
                issue="No testimonials or social proof section",
                impact="Adding testimonials increases content depth and builds trust (+5-10 points)",
                fix="Add a testimonials or reviews section to build credibility",
                time_estimate="5 minutes",
                fix_type="add_component_testimonial",
            )
        )

    if not content.has_lists and content.word_count < 600:
        recs.append(
            Finding(
                category=CATEGORY,
                severity=Severity.INFO,
                issue="No features or benefits list",
                impact="Adding a features section with lists improves content scannability and SEO (+5-10 points)",
                fix="Add a features, benefits, or pricing section with structured lists",
                time_estimate="5 minutes",
                fix_type="add_component_features",
            )
        )

    return recs
