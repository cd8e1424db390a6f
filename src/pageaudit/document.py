# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Read-only view over an HTML document.

Parses once with lxml (recover mode) and exposes the handful of queries
the checkers need.  Empty or unparseable markup becomes an empty tree,
never an exception.  Callers must not mutate ``root``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from functools import cached_property

import lxml.html
from lxml import etree

logger = logging.getLogger(__name__)

_NON_VISIBLE_TAGS = frozenset({"script", "style"})
_HEADING_RE = re.compile(r"^h([1-6])$")
_WS_RE = re.compile(r"\s+")

JSON_LD_TYPE = "application/ld+json"


def _empty_root() -> lxml.html.HtmlElement:
    return lxml.html.document_fromstring("<html><head></head><body></body></html>")


def parse_html(html: str) -> lxml.html.HtmlElement:
    """Parse *html* into an lxml document root, tolerating garbage."""
    if not html or not html.strip():
        return _empty_root()
    try:
        parser = lxml.html.HTMLParser(recover=True, encoding="utf-8")
        return lxml.html.document_fromstring(html.encode("utf-8", "replace"), parser=parser)
    except (etree.LxmlError, ValueError) as e:
        logger.debug("HTML parse failed, using empty document: %s", e)
        return _empty_root()


def _tag(el) -> str:
    """Lowercased tag name, or "" for comments and processing instructions."""
    return el.tag.lower() if isinstance(el.tag, str) else ""


class Document:
    """Immutable query surface over one HTML string."""

    def __init__(self, html: str | None) -> None:
        self.html = html or ""
        self.root = parse_html(self.html)

    @cached_property
    def lower(self) -> str:
        return self.html.lower()

    # -- element queries --

    def iter_tag(self, *tags: str) -> Iterator[lxml.html.HtmlElement]:
        """Elements with any of *tags*, in document order."""
        wanted = {t.lower() for t in tags}
        for el in self.root.iter():
            if _tag(el) in wanted:
                yield el

    def find_all(self, *tags: str) -> list[lxml.html.HtmlElement]:
        return list(self.iter_tag(*tags))

    def first(self, tag: str) -> lxml.html.HtmlElement | None:
        return next(self.iter_tag(tag), None)

    def count(self, *tags: str) -> int:
        return sum(1 for _ in self.iter_tag(*tags))

    def has(self, tag: str) -> bool:
        return self.first(tag) is not None

    def count_attr(self, attr: str) -> int:
        """Number of elements carrying *attr* (any value)."""
        return sum(1 for el in self.root.iter() if _tag(el) and el.get(attr) is not None)

    def meta_content(self, *, name: str | None = None, prop: str | None = None) -> str | None:
        """``content`` of the first ``<meta name=..>`` / ``<meta property=..>`` match.

        Empty content counts as absent.
        """
        for el in self.iter_tag("meta"):
            if name is not None and (el.get("name") or "").strip().lower() != name:
                continue
            if prop is not None and (el.get("property") or "").strip().lower() != prop:
                continue
            content = el.get("content")
            if content:
                return content
        return None

    def link_href(self, rel: str) -> str | None:
        for el in self.iter_tag("link"):
            rels = (el.get("rel") or "").lower().split()
            if rel in rels:
                href = el.get("href")
                if href:
                    return href
        return None

    def headings(self) -> list[tuple[int, str]]:
        """(level, text) for every h1-h6, in document order."""
        result: list[tuple[int, str]] = []
        for el in self.root.iter():
            m = _HEADING_RE.match(_tag(el))
            if m:
                result.append((int(m.group(1)), element_text(el)))
        return result

    def json_ld_bodies(self) -> list[str]:
        """Raw text of every ``<script type="application/ld+json">``."""
        bodies = []
        for el in self.iter_tag("script"):
            if (el.get("type") or "").strip().lower() == JSON_LD_TYPE:
                bodies.append(el.text or "")
        return bodies

    # -- text --

    def text_chunks(self) -> Iterator[str]:
        """Text nodes outside script/style, in document order."""
        for el in self.root.iter():
            tag = _tag(el)
            if tag and tag not in _NON_VISIBLE_TAGS and el.text:
                yield el.text
            if el is not self.root and el.tail:
                yield el.tail

    @cached_property
    def visible_text(self) -> str:
        """Text with element boundaries as spaces and whitespace collapsed."""
        return _WS_RE.sub(" ", " ".join(self.text_chunks())).strip()

    @cached_property
    def flat_text(self) -> str:
        """Text with element boundaries removed (used for text-to-markup ratio)."""
        return _WS_RE.sub(" ", "".join(self.text_chunks())).strip()

    @cached_property
    def words(self) -> list[str]:
        return self.visible_text.split()


def element_text(el: lxml.html.HtmlElement) -> str:
    """Stripped text content of an element."""
    return (el.text_content() or "").strip()


def as_document(source: Document | str | None) -> Document:
    """Accept either a parsed Document or raw HTML."""
    if isinstance(source, Document):
        return source
    return Document(source)
