# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Full audit pipeline: Checkers -> Scorer -> FixMapper -> Ranker.

Pure and synchronous.  The document is parsed once and shared read-only
by every checker; identical input always produces an identical result.
"""

from __future__ import annotations

import logging

from pageaudit import AuditResult
from pageaudit.checkers import (
    check_content,
    check_headings,
    check_images,
    check_links,
    check_meta,
    check_readability,
    check_schema,
    check_semantic,
    recommend_components,
)
from pageaudit.document import Document
from pageaudit.errors import MissingDocumentError
from pageaudit.fix_mapper import classify_all
from pageaudit.ranker import rank
from pageaudit.scoring import FULL_REPORT_PROFILE, ReportProfile, score_categories

logger = logging.getLogger(__name__)


def audit_document(
    doc: Document,
    page_type: str | None = None,
    page_name: str | None = None,
    profile: ReportProfile = FULL_REPORT_PROFILE,
) -> AuditResult:
    """Audit an already parsed document."""
    meta = check_meta(doc)
    headings = check_headings(doc)
    schema = check_schema(doc, page_name)
    semantic = check_semantic(doc)
    images = check_images(doc)
    links = check_links(doc)
    content = check_content(doc)
    readability = check_readability(doc)
    boosters = recommend_components(doc, content, schema, page_type)

    categories = score_categories(
        meta=meta,
        headings=headings,
        schema=schema,
        semantic=semantic,
        images=images,
        links=links,
        content=content,
    )
    overall = profile.overall(categories.scores)

    findings = classify_all(
        [
            *meta.findings,
            *headings.findings,
            *schema.findings,
            *semantic.findings,
            *images.findings,
            *links.findings,
            *content.findings,
            *readability.findings,
        ]
    )
    ranked = rank(findings)

    logger.debug(
        "audit complete: profile=%s score=%d findings=%d",
        profile.name,
        overall,
        len(ranked.all_findings),
    )

    return AuditResult(
        overall_score=overall,
        grade=profile.ladder.grade(overall),
        status=profile.status_ladder.grade(overall),
        scores=categories.scores,
        breakdowns=categories.breakdowns,
        top_issues=ranked.top_issues,
        quick_wins=ranked.quick_wins,
        all_findings=ranked.all_findings,
        facts={
            "meta": meta,
            "headings": headings,
            "schema": schema,
            "semantic": semantic,
            "images": images,
            "links": links,
            "content": content,
            "llm_readability": readability,
        },
        component_recommendations=boosters,
        llm_readability_score=readability.score,
    )


def audit_html(
    html: str | None,
    page_type: str | None = None,
    page_name: str | None = None,
    profile: ReportProfile = FULL_REPORT_PROFILE,
) -> AuditResult:
    """Audit one HTML document.

    Args:
        html: Complete document text.  An empty string is a valid (empty)
            document; ``None`` means no document was supplied.
        page_type: Optional page type id (``landing``, ``blog``, ...),
            gates page-type specific recommendations.
        page_name: Optional route/page name, e.g. ``about``.
        profile: Weights and ladders used for the overall score.

    Raises:
        MissingDocumentError: html is None.
    """
    if html is None:
        raise MissingDocumentError("No HTML document supplied")
    return audit_document(Document(html), page_type, page_name, profile)
