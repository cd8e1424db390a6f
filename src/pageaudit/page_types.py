# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page type catalogue: suggested components, default schema, rule gating."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SCHEMA = "WebPage"


@dataclass(frozen=True, slots=True)
class PageType:
    id: str
    name: str
    description: str
    suggested_components: tuple[str, ...]
    default_schema: str


PAGE_TYPES: tuple[PageType, ...] = (
    PageType(
        "landing",
        "Landing Page",
        "Main conversion-focused pages",
        ("hero", "features", "testimonials", "cta", "pricing", "faq"),
        "WebPage",
    ),
    PageType(
        "blog",
        "Blog Post",
        "Article or blog content",
        ("blog-header", "rich-text", "author-bio", "related-posts", "comments"),
        "Article",
    ),
    PageType(
        "pricing",
        "Pricing Page",
        "Product/service pricing",
        ("pricing-header", "pricing-grid", "pricing-comparison", "faq", "cta"),
        "Product",
    ),
    PageType(
        "about",
        "About Page",
        "Company/team information",
        ("about-hero", "team-grid", "timeline", "values", "stats"),
        "AboutPage",
    ),
    PageType(
        "contact",
        "Contact Page",
        "Contact information and forms",
        ("contact-hero", "contact-form", "map", "office-locations", "faq"),
        "ContactPage",
    ),
    PageType(
        "product",
        "Product Page",
        "Individual product details",
        ("product-gallery", "product-info", "reviews", "related-products", "faq"),
        "Product",
    ),
    PageType(
        "service",
        "Service Page",
        "Service offering details",
        ("service-hero", "service-features", "process", "testimonials", "cta", "faq"),
        "Service",
    ),
    PageType(
        "portfolio",
        "Portfolio Page",
        "Showcase work and projects",
        ("portfolio-hero", "portfolio-grid", "case-study", "testimonials", "cta"),
        "WebPage",
    ),
    PageType(
        "faq",
        "FAQ Page",
        "Frequently asked questions",
        ("faq-hero", "faq-accordion", "faq-categories", "contact-cta"),
        "FAQPage",
    ),
    PageType("custom", "Custom Page", "No predefined structure", (), "WebPage"),
)

_BY_ID: dict[str, PageType] = {pt.id: pt for pt in PAGE_TYPES}

FAQ_PAGE_TYPES = frozenset({"landing", "product", "service", "pricing"})


def get_page_type(page_type_id: str | None) -> PageType | None:
    if page_type_id is None:
        return None
    return _BY_ID.get(page_type_id)


def suggested_components(page_type_id: str | None) -> tuple[str, ...]:
    pt = get_page_type(page_type_id)
    return pt.suggested_components if pt else ()


def default_schema(page_type_id: str | None) -> str:
    pt = get_page_type(page_type_id)
    return pt.default_schema if pt else DEFAULT_SCHEMA


def requires_faq(page_type_id: str | None) -> bool:
    """Whether an FAQ section is expected on this page type."""
    return page_type_id in FAQ_PAGE_TYPES
