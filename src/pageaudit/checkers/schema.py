# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structured-data checker: JSON-LD presence/validity and schema opportunities.

Content-type detection is keyword/pattern based over the lowercased raw
markup.  About pages (by content or by page name) never get an Article
opportunity.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from pageaudit import Finding, Severity
from pageaudit.document import Document, as_document

logger = logging.getLogger(__name__)

CATEGORY = "schema"

_FAQ_RE = re.compile(r"faq|frequently\s+asked")
_HOWTO_RE = re.compile(r"step\s+\d+|how\s+to\s+|instructions")
_ECOMMERCE_RE = re.compile(r"add\s+to\s+cart|buy\s+now|checkout|shopping\s+cart")
_PRICE_RE = re.compile(r"\$\d+|€\d+|£\d+|price")
_MENU_OR_LOCAL_RE = re.compile(r"menu|appetizer|entree|dessert|cuisine|reservation|hours|location|directions")
_VIDEO_RE = re.compile(r"youtube\.com|vimeo\.com|<video")
_LOCAL_RE = re.compile(r"address|contact\s+us|hours|location|directions")
_ABOUT_RE = re.compile(
    r"about\s+us|our\s+story|our\s+team|our\s+mission|who\s+we\s+are|company\s+overview|meet\s+the\s+team"
)
_ABOUT_PAGE_NAME_RE = re.compile(r"^(about|team|company|our-story|our-team|who-we-are)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Opportunity:
    type: str
    reason: str
    impact: str
    priority: str  # "high" | "medium"


OPPORTUNITIES: dict[str, Opportunity] = {
    "faq": Opportunity("FAQPage", "FAQ content detected", "Can earn FAQ rich snippets in search", "high"),
    "howto": Opportunity("HowTo", "Step-by-step content detected", "Can show steps in search results", "high"),
    "product": Opportunity("Product", "Product info detected", "Can show price/availability in search", "high"),
    "article": Opportunity("Article", "Article content detected", "Improves article appearance in search", "medium"),
    "video": Opportunity("VideoObject", "Video content detected", "Can show video thumbnail in search", "medium"),
    "local_business": Opportunity(
        "LocalBusiness", "Local business info detected", "Can appear in local search and Maps", "high"
    ),
    "about": Opportunity(
        "AboutPage", "About page content detected", "Helps search engines understand your organization page", "medium"
    ),
}

SITE_IDENTITY = Opportunity(
    "WebSite/Organization",
    "No structured data found",
    "Basic schema establishes site identity for search engines",
    "high",
)


@dataclass
class SchemaFacts:
    has_schema: bool = False
    schema_count: int = 0
    schema_types: list[str] = field(default_factory=list)
    validation_issues: list[str] = field(default_factory=list)
    opportunities: list[Opportunity] = field(default_factory=list)
    detected_content_types: list[str] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)

    @property
    def high_priority_missed(self) -> list[Opportunity]:
        return [o for o in self.opportunities if o.priority == "high"]


def _type_names(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def collect_types(data: Any) -> list[str]:
    """``@type`` names of a parsed JSON-LD block (``@graph`` and top-level arrays included)."""
    if isinstance(data, list):
        types: list[str] = []
        for item in data:
            types.extend(collect_types(item))
        return types
    if not isinstance(data, dict):
        return []
    graph = data.get("@graph")
    if isinstance(graph, list):
        types = []
        for item in graph:
            if isinstance(item, dict):
                types.extend(_type_names(item.get("@type")))
        return types
    return _type_names(data.get("@type"))


def detect_content_types(doc: Document, page_name: str | None = None) -> list[str]:
    lower = doc.lower
    detected: list[str] = []

    if _FAQ_RE.search(lower) or doc.has("details") or doc.has("dt"):
        detected.append("faq")
    if _HOWTO_RE.search(lower):
        detected.append("howto")
    has_price = _PRICE_RE.search(lower) is not None
    if _ECOMMERCE_RE.search(lower) or (has_price and not _MENU_OR_LOCAL_RE.search(lower)):
        detected.append("product")
    if doc.has("article") or any(el.get("datetime") is not None for el in doc.iter_tag("time")):
        detected.append("article")
    if _VIDEO_RE.search(lower):
        detected.append("video")
    if _LOCAL_RE.search(lower):
        detected.append("local_business")

    about_by_content = _ABOUT_RE.search(lower) is not None
    about_by_name = bool(page_name) and _ABOUT_PAGE_NAME_RE.match(page_name) is not None
    if about_by_content or about_by_name:
        detected.append("about")
        if "article" in detected:
            detected.remove("article")

    return detected


def check_schema(source: Document | str | None, page_name: str | None = None) -> SchemaFacts:
    doc = as_document(source)
    facts = SchemaFacts()

    for body in doc.json_ld_bodies():
        try:
            data = json.loads(body)
        except (ValueError, RecursionError):
            facts.validation_issues.append("Invalid JSON-LD syntax")
            continue
        facts.schema_count += 1
        facts.schema_types.extend(collect_types(data))

    facts.has_schema = facts.schema_count > 0
    facts.detected_content_types = detect_content_types(doc, page_name)

    existing = {t.lower() for t in facts.schema_types}
    for content_type in facts.detected_content_types:
        opp = OPPORTUNITIES[content_type]
        if opp.type.lower() not in existing:
            facts.opportunities.append(opp)

    if not facts.has_schema:
        facts.opportunities.insert(0, SITE_IDENTITY)

    if facts.validation_issues:
        logger.debug("%d invalid JSON-LD block(s)", len(facts.validation_issues))

    facts.findings = _findings(facts)
    return facts


def _findings(f: SchemaFacts) -> list[Finding]:
    out: list[Finding] = []

    if not f.has_schema:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="No structured data (JSON-LD) found",
                impact="Add schema to help search engines understand your content",
                fix="Auto-generate JSON-LD structured data",
                location="<head>",
                time_estimate="2 minutes",
            )
        )

    for opp in f.opportunities[:3]:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH if opp.priority == "high" else Severity.MEDIUM,
                issue=f"Missing {opp.type} schema",
                impact=f"{opp.reason}. {opp.impact}",
                fix=f"Auto-generate {opp.type} schema",
                time_estimate="2 minutes",
            )
        )

    for issue in f.validation_issues:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="Invalid JSON-LD",
                impact=issue,
                fix="Fix JSON syntax errors in your structured data",
                time_estimate="10 minutes",
            )
        )

    return out
