# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Read and rewrite the JSON-LD blocks of an existing page.

``regenerate_schemas`` drops every ``application/ld+json`` script and
rebuilds the blocks from what the page currently shows: a primary page
block (type inferred from microdata), FAQPage from ``<details>`` or
accordion markup, and BreadcrumbList from microdata breadcrumbs.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import lxml.html

from pageaudit.document import JSON_LD_TYPE, Document, as_document, element_text, parse_html
from pageaudit.structured_data.builder import SCHEMA_CONTEXT

logger = logging.getLogger(__name__)

# (marker in lowercased markup, type); first match wins
_MICRODATA_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (('itemprop="blogpost"', 'itemtype="https://schema.org/blogposting"'), "BlogPosting"),
    (('itemtype="https://schema.org/product"',), "Product"),
    (('itemtype="https://schema.org/faqpage"',), "FAQPage"),
    (('itemtype="https://schema.org/restaurant"',), "Restaurant"),
    (('itemtype="https://schema.org/aboutpage"',), "AboutPage"),
    (('itemtype="https://schema.org/contactpage"',), "ContactPage"),
)
DEFAULT_PAGE_TYPE = "WebPage"


@dataclass(frozen=True, slots=True)
class FaqItem:
    question: str
    answer: str


@dataclass(frozen=True, slots=True)
class Crumb:
    name: str
    url: str


@dataclass
class PageContent:
    title: str = ""
    description: str = ""
    canonical: str = ""
    og_image: str = ""
    h1: str = ""
    faq_items: list[FaqItem] = field(default_factory=list)
    breadcrumbs: list[Crumb] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Markup helpers shared with remediation
# ---------------------------------------------------------------------------


def has_class(el, name: str) -> bool:
    return isinstance(el.tag, str) and name in (el.get("class") or "").split()


def ensure_head(root: lxml.html.HtmlElement) -> lxml.html.HtmlElement:
    """The document's <head>, created as the first child of <html> if missing."""
    head = root.find("head")
    if head is None:
        head = lxml.html.Element("head")
        root.insert(0, head)
    return head


def serialize_html(root: lxml.html.HtmlElement) -> str:
    doctype = root.getroottree().docinfo.doctype
    if doctype:
        return lxml.html.tostring(root, encoding="unicode", doctype=doctype)
    return lxml.html.tostring(root, encoding="unicode")


def remove_json_ld(root: lxml.html.HtmlElement) -> int:
    removed = 0
    for script in list(root.iter("script")):
        if (script.get("type") or "").strip().lower() == JSON_LD_TYPE:
            script.drop_tree()
            removed += 1
    return removed


def inject_json_ld(root: lxml.html.HtmlElement, schemas: list[dict[str, Any]]) -> None:
    """Append one ld+json script per schema to <head>."""
    head = ensure_head(root)
    for schema in schemas:
        script = lxml.html.Element("script", type=JSON_LD_TYPE)
        script.text = json.dumps(schema, indent=2, ensure_ascii=False)
        head.append(script)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_schemas(source: Document | str | None) -> list[Any]:
    """Parsed JSON-LD blocks; malformed blocks are skipped."""
    schemas = []
    for body in as_document(source).json_ld_bodies():
        try:
            schemas.append(json.loads(body))
        except (ValueError, RecursionError):
            logger.debug("Skipping malformed JSON-LD block")
    return schemas


def infer_page_type(html: str | None) -> str:
    """Primary schema type from microdata markers, WebPage by default."""
    lower = (html or "").lower()
    for markers, schema_type in _MICRODATA_TYPES:
        if any(m in lower for m in markers):
            return schema_type
    return DEFAULT_PAGE_TYPE


def _faq_items(root: lxml.html.HtmlElement) -> list[FaqItem]:
    items = []
    for details in root.iter("details"):
        summary = details.find(".//summary")
        question = element_text(summary) if summary is not None else ""
        if question:
            answer = (details.text_content() or "").replace(question, "", 1).strip()
            items.append(FaqItem(question, answer))

    for button in root.iter():
        if not has_class(button, "accordion-button"):
            continue
        question = element_text(button)
        if not question:
            continue
        container = button if has_class(button, "accordion-item") else None
        if container is None:
            container = next((a for a in button.iterancestors() if has_class(a, "accordion-item")), None)
        body = None
        if container is not None:
            body = next((el for el in container.iter() if has_class(el, "accordion-body")), None)
        items.append(FaqItem(question, element_text(body) if body is not None else ""))
    return items


def _breadcrumbs(root: lxml.html.HtmlElement) -> list[Crumb]:
    crumbs = []
    for item in root.xpath('//*[contains(@itemtype, "BreadcrumbList")]//*[@itemprop="itemListElement"]'):
        name = item.xpath('.//*[@itemprop="name"]')
        link = item.xpath('.//*[@itemprop="item"]')
        crumbs.append(
            Crumb(
                name=element_text(name[0]) if name else "",
                url=(link[0].get("href") or "") if link else "",
            )
        )
    return crumbs


def extract_page_content(source: Document | str | None) -> PageContent:
    doc = as_document(source)
    title_el = doc.first("title")
    title = (title_el.text_content() or "") if title_el is not None else ""
    h1_el = doc.first("h1")
    h1 = element_text(h1_el) if h1_el is not None else ""
    return PageContent(
        title=title,
        description=doc.meta_content(name="description") or "",
        canonical=doc.link_href("canonical") or "",
        og_image=doc.meta_content(prop="og:image") or "",
        h1=h1 or title,
        faq_items=_faq_items(doc.root),
        breadcrumbs=_breadcrumbs(doc.root),
    )


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------


def build_page_block(content: PageContent, schema_type: str = DEFAULT_PAGE_TYPE) -> dict[str, Any]:
    block: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type,
    }
    if content.h1 or content.title:
        block["name"] = content.h1 or content.title
    if content.description:
        block["description"] = content.description
    if content.canonical:
        block["url"] = content.canonical
    if content.og_image:
        block["image"] = content.og_image
    return block


def build_faq_block(content: PageContent) -> dict[str, Any] | None:
    if not content.faq_items:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {"@type": "Answer", "text": item.answer},
            }
            for item in content.faq_items
        ],
    }


def build_breadcrumb_block(content: PageContent) -> dict[str, Any] | None:
    if not content.breadcrumbs:
        return None
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i + 1, "name": crumb.name, "item": crumb.url}
            for i, crumb in enumerate(content.breadcrumbs)
        ],
    }


def schemas_from_content(content: PageContent, primary_type: str) -> list[dict[str, Any]]:
    """Primary block first, then FAQPage and BreadcrumbList when the page has them.

    A FAQPage primary carries the questions itself; no second FAQPage block
    is emitted.
    """
    primary = build_page_block(content, primary_type)
    faq = build_faq_block(content)
    if faq is not None and primary_type == "FAQPage":
        primary["mainEntity"] = faq["mainEntity"]
        faq = None
    return [primary] + [b for b in (faq, build_breadcrumb_block(content)) if b is not None]


def regenerate_schemas(html: str | None, primary_type: str | None = None) -> str:
    """Replace every JSON-LD block with blocks rebuilt from page content.

    Args:
        html: Page markup.
        primary_type: Type of the primary block; inferred from microdata when None.
    """
    html = html or ""
    content = extract_page_content(Document(html))
    schemas = schemas_from_content(content, primary_type or infer_page_type(html))

    root = parse_html(html)
    removed = remove_json_ld(root)
    inject_json_ld(root, schemas)
    logger.debug("Regenerated JSON-LD: removed=%d added=%d", removed, len(schemas))
    return serialize_html(root)
