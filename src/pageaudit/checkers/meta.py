# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Meta checker: title, description, Open Graph, canonical, viewport, charset, lang."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pageaudit import Finding, Severity
from pageaudit.document import Document, as_document, element_text

CATEGORY = "meta"

TITLE_MIN = 20
TITLE_MAX = 60
DESCRIPTION_MIN = 50
DESCRIPTION_MAX = 160

GENERIC_TITLE_RE = re.compile(r"^(home|homepage|welcome|untitled)$", re.IGNORECASE)
_CHARSET_IN_CONTENT_RE = re.compile(r"charset\s*=", re.IGNORECASE)


@dataclass
class MetaFacts:
    has_title: bool = False
    title: str | None = None
    title_length: int = 0
    title_issues: list[str] = field(default_factory=list)
    has_description: bool = False
    description: str | None = None
    description_length: int = 0
    description_issues: list[str] = field(default_factory=list)
    has_og_tags: bool = False
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    has_twitter_tags: bool = False
    has_canonical: bool = False
    canonical: str | None = None
    has_viewport: bool = False
    has_charset: bool = False
    has_lang: bool = False
    findings: list[Finding] = field(default_factory=list)


def _length_issues(length: int, low: int, high: int) -> list[str]:
    if length < low:
        return ["too_short"]
    if length > high:
        return ["too_long"]
    return []


def _has_charset(doc: Document) -> bool:
    for el in doc.iter_tag("meta"):
        if el.get("charset") is not None:
            return True
        if (el.get("http-equiv") or "").lower() == "content-type" and _CHARSET_IN_CONTENT_RE.search(
            el.get("content") or ""
        ):
            return True
    return False


def check_meta(source: Document | str | None) -> MetaFacts:
    doc = as_document(source)
    facts = MetaFacts()

    title_el = doc.first("title")
    title = element_text(title_el) if title_el is not None else ""
    if title:
        facts.has_title = True
        facts.title = title
        facts.title_length = len(title)
        facts.title_issues = _length_issues(len(title), TITLE_MIN, TITLE_MAX)
        if GENERIC_TITLE_RE.match(title):
            facts.title_issues.append("generic")

    description = doc.meta_content(name="description")
    if description:
        facts.has_description = True
        facts.description = description
        facts.description_length = len(description)
        facts.description_issues = _length_issues(len(description), DESCRIPTION_MIN, DESCRIPTION_MAX)

    facts.og_title = doc.meta_content(prop="og:title")
    facts.og_description = doc.meta_content(prop="og:description")
    facts.og_image = doc.meta_content(prop="og:image")
    facts.has_og_tags = bool(facts.og_title or facts.og_description or facts.og_image)
    facts.has_twitter_tags = doc.meta_content(name="twitter:card") is not None

    facts.canonical = doc.link_href("canonical")
    facts.has_canonical = facts.canonical is not None
    facts.has_viewport = any((el.get("name") or "").lower() == "viewport" for el in doc.iter_tag("meta"))
    facts.has_charset = _has_charset(doc)
    facts.has_lang = bool((doc.root.get("lang") or "").strip())

    facts.findings = _findings(facts)
    return facts


def _findings(f: MetaFacts) -> list[Finding]:
    out: list[Finding] = []

    if not f.has_title:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.CRITICAL,
                issue="Missing page title",
                impact="Title is critical for SEO and appears in search results and browser tabs",
                fix="<title>Descriptive Page Title - Brand Name</title>",
                location="<head>",
                time_estimate="2 minutes",
            )
        )
    elif "too_short" in f.title_issues:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue=f"Title too short ({f.title_length} chars)",
                impact="Short titles miss SEO opportunities. Aim for 30-55 characters.",
                fix=f"<title>{f.title} - Add More Keywords | Brand</title>",
                current_code=f"<title>{f.title}</title>",
                time_estimate="5 minutes",
            )
        )
    elif "too_long" in f.title_issues:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.LOW,
                issue=f"Title too long ({f.title_length} chars)",
                impact="Will be truncated in search results. Keep under 60 chars.",
                fix=f"<title>{(f.title or '')[:55]}...</title>",
                time_estimate="5 minutes",
            )
        )

    if not f.has_description:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="Missing meta description",
                impact="Descriptions appear in search results and improve click-through rates",
                fix='<meta name="description" content="Write a 120-155 character description summarizing this page.">',
                location="<head>",
                time_estimate="5 minutes",
            )
        )
    elif "too_short" in f.description_issues:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue=f"Description too short ({f.description_length} chars)",
                impact="Expand to 120-155 characters to maximize search result space",
                fix="Generate an optimized 120-155 character description",
                time_estimate="5 minutes",
            )
        )

    if not f.has_og_tags:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="Missing Open Graph tags",
                impact="Content will look poor when shared on social media",
                fix=(
                    '<meta property="og:title" content="Page Title">\n'
                    '<meta property="og:description" content="Page description">\n'
                    '<meta property="og:image" content="https://example.com/image.jpg">\n'
                    '<meta property="og:type" content="website">'
                ),
                location="<head>",
                time_estimate="10 minutes",
            )
        )
    elif not f.og_image:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Missing og:image",
                impact="Social shares will lack a preview image",
                fix='<meta property="og:image" content="https://example.com/social-image.jpg">',
                time_estimate="5 minutes",
            )
        )

    if not f.has_canonical:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Missing canonical URL",
                impact="Helps prevent duplicate content issues",
                fix='<link rel="canonical" href="https://example.com/current-page">',
                location="<head>",
                time_estimate="2 minutes",
            )
        )

    if not f.has_viewport:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="Missing viewport meta tag",
                impact="Page may not be mobile-friendly",
                fix='<meta name="viewport" content="width=device-width, initial-scale=1">',
                location="<head>",
                time_estimate="2 minutes",
            )
        )

    if not f.has_charset:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.HIGH,
                issue="Missing charset declaration",
                impact="Browser may misinterpret characters. Always declare charset.",
                fix='<meta charset="UTF-8">',
                location="<head>",
                time_estimate="2 minutes",
            )
        )

    if not f.has_lang:
        out.append(
            Finding(
                category=CATEGORY,
                severity=Severity.MEDIUM,
                issue="Missing lang attribute",
                impact="Screen readers and search engines use lang to identify page language",
                fix='<html lang="en">',
                time_estimate="2 minutes",
            )
        )

    return out
