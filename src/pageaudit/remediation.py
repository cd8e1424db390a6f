# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Fix execution for the ``client`` and ``generated`` tiers.

client     deterministic lxml markup patches, one per fix type
generated  JSON-LD regeneration from page content or a business context
ai         not executed here (LLM-backed, external); raises UnsupportedFixError

Client patches are idempotent: applying one to already fixed markup
returns the input untouched with ``FixResult.changed`` False.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import lxml.html

from pageaudit import FixMethod
from pageaudit.checkers.semantic import LANDMARK_TAGS
from pageaudit.document import parse_html
from pageaudit.errors import UnsupportedFixError
from pageaudit.fix_mapper import fix_types_for
from pageaudit.structured_data.builder import build_schema_from_context
from pageaudit.structured_data.context import BusinessContext
from pageaudit.structured_data.editor import (
    ensure_head,
    extract_page_content,
    infer_page_type,
    inject_json_ld,
    remove_json_ld,
    schemas_from_content,
    serialize_html,
)
from pageaudit.structured_data.matcher import recommend_type

logger = logging.getLogger(__name__)

VIEWPORT_CONTENT = "width=device-width, initial-scale=1"
DEFAULT_LANG = "en"
SKIP_LINK_TARGETS = ("main", "content", "main-content")
_UNLABELLED_INPUT_TYPES = frozenset({"hidden", "submit", "button"})

# generate_schema_<suffix> -> primary type; None means infer it
GENERATED_SCHEMA_TYPES: dict[str, str | None] = {
    "generate_schema_auto": None,
    "generate_schema_localbusiness": "LocalBusiness",
    "generate_schema_article": "Article",
    "generate_schema_faq": "FAQPage",
    "generate_schema_product": "Product",
    "generate_schema_organization": "Organization",
    "generate_schema_aboutpage": "AboutPage",
}


@dataclass(frozen=True, slots=True)
class FixOptions:
    page_url: str | None = None
    lang: str = DEFAULT_LANG
    context: BusinessContext | None = None


@dataclass(frozen=True, slots=True)
class FixResult:
    fix_type: str
    fix_method: FixMethod
    html: str
    changed: bool


def _tag(el) -> str:
    return el.tag.lower() if isinstance(el.tag, str) else ""


def _body(root: lxml.html.HtmlElement) -> lxml.html.HtmlElement:
    body = root.find("body")
    if body is None:
        body = lxml.html.Element("body")
        root.append(body)
    return body


def _first(root: lxml.html.HtmlElement, tag: str) -> lxml.html.HtmlElement | None:
    return next(root.iter(tag), None)


def _meta_named(root: lxml.html.HtmlElement, name: str) -> lxml.html.HtmlElement | None:
    for meta in root.iter("meta"):
        if (meta.get("name") or "").strip().lower() == name:
            return meta
    return None


# ---------------------------------------------------------------------------
# client tier
# ---------------------------------------------------------------------------


def add_viewport(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    if _meta_named(root, "viewport") is not None:
        return False
    ensure_head(root).append(lxml.html.Element("meta", name="viewport", content=VIEWPORT_CONTENT))
    return True


def add_charset(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    for meta in root.iter("meta"):
        if meta.get("charset") is not None:
            return False
        if (meta.get("http-equiv") or "").lower() == "content-type" and "charset=" in (meta.get("content") or "").lower():
            return False
    ensure_head(root).insert(0, lxml.html.Element("meta", charset="utf-8"))
    return True


def add_lang(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    if root.get("lang"):
        return False
    root.set("lang", opts.lang or DEFAULT_LANG)
    return True


def add_canonical(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    for link in root.iter("link"):
        if "canonical" in (link.get("rel") or "").lower().split():
            return False
    if not opts.page_url:
        raise UnsupportedFixError(
            "add_canonical needs the page URL", fix_type="add_canonical", fix_method=FixMethod.CLIENT
        )
    ensure_head(root).append(lxml.html.Element("link", rel="canonical", href=opts.page_url))
    return True


def add_main(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    """Wrap the body's content (everything but header/nav/footer/scripts) in <main>."""
    if _first(root, "main") is not None:
        return False
    body = _body(root)
    main = lxml.html.Element("main", id="main")
    movable = [el for el in body if _tag(el) not in {"header", "nav", "footer", "script", "noscript"}]
    index = body.index(movable[0]) if movable else len(body)
    if body.text and body.text.strip():
        main.text, body.text = body.text, None
    for el in movable:
        main.append(el)
    body.insert(index, main)
    return True


def add_header(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    """Insert <header> at the top of the body, moving a top-level <nav> into it."""
    if _first(root, "header") is not None:
        return False
    body = _body(root)
    header = lxml.html.Element("header")
    nav = next((el for el in body if _tag(el) == "nav"), None)
    if nav is not None:
        header.append(nav)
    body.insert(0, header)
    return True


def add_footer(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    if _first(root, "footer") is not None:
        return False
    _body(root).append(lxml.html.Element("footer"))
    return True


def add_nav(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    """Add a labelled primary <nav> with a home link, inside <header> when present."""
    if _first(root, "nav") is not None:
        return False
    nav = lxml.html.Element("nav", **{"aria-label": "Main navigation"})
    home = lxml.html.Element("a", href="/")
    home.text = "Home"
    nav.append(home)
    header = _first(root, "header")
    if header is not None:
        header.append(nav)
    else:
        _body(root).insert(0, nav)
    return True


def add_skip_link(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    main = _first(root, "main")
    if main is None:
        return False
    for a in root.iter("a"):
        href = (a.get("href") or "").lower()
        if any(href.startswith(f"#{target}") for target in SKIP_LINK_TARGETS):
            return False
    if not main.get("id"):
        main.set("id", "main")
    link = lxml.html.Element("a", href=f"#{main.get('id')}", **{"class": "skip-link"})
    link.text = "Skip to main content"
    _body(root).insert(0, link)
    return True


def add_lazy_loading(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    """loading="lazy" on every image but the first (above the fold)."""
    changed = False
    for idx, img in enumerate(root.iter("img")):
        if idx == 0:
            continue
        if (img.get("loading") or "").lower() != "lazy":
            img.set("loading", "lazy")
            changed = True
    return changed


def add_noopener(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    changed = False
    for a in root.iter("a"):
        if (a.get("target") or "").strip().lower() != "_blank":
            continue
        rel = (a.get("rel") or "").split()
        if "noopener" in [r.lower() for r in rel]:
            continue
        rel.append("noopener")
        if "noreferrer" not in [r.lower() for r in rel]:
            rel.append("noreferrer")
        a.set("rel", " ".join(rel))
        changed = True
    return changed


def fix_multiple_h1(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    """Demote every <h1> after the first to <h2>."""
    extra = list(root.iter("h1"))[1:]
    for h1 in extra:
        h1.tag = "h2"
    return bool(extra)


def add_aria_labels(root: lxml.html.HtmlElement, opts: FixOptions) -> bool:
    """Label unlabelled navigation landmarks and form inputs."""
    changed = False
    for i, nav in enumerate(root.iter("nav")):
        if nav.get("aria-label") or nav.get("aria-labelledby"):
            continue
        nav.set("aria-label", "Main navigation" if i == 0 else f"Navigation {i + 1}")
        changed = True

    labelled_ids = {label.get("for") for label in root.iter("label") if label.get("for")}
    for inp in root.iter("input"):
        if (inp.get("type") or "").strip().lower() in _UNLABELLED_INPUT_TYPES:
            continue
        if inp.get("aria-label") or inp.get("aria-labelledby"):
            continue
        if inp.get("id") and inp.get("id") in labelled_ids:
            continue
        inp.set("aria-label", inp.get("placeholder") or inp.get("name") or "Input")
        changed = True

    if not changed and not any(el.get("aria-label") for el in root.iter() if isinstance(el.tag, str)):
        landmark = next((el for el in root.iter(*LANDMARK_TAGS)), None)
        if landmark is not None:
            landmark.set("aria-label", f"{_tag(landmark).capitalize()} content")
            changed = True
    return changed


ClientPatch = Callable[[lxml.html.HtmlElement, FixOptions], bool]

CLIENT_PATCHES: dict[str, ClientPatch] = {
    "add_viewport": add_viewport,
    "add_charset": add_charset,
    "add_lang": add_lang,
    "add_canonical": add_canonical,
    "add_main": add_main,
    "add_header": add_header,
    "add_footer": add_footer,
    "add_nav": add_nav,
    "add_skip_link": add_skip_link,
    "add_lazy_loading": add_lazy_loading,
    "add_noopener": add_noopener,
    "fix_multiple_h1": fix_multiple_h1,
    "add_aria_labels": add_aria_labels,
}


# ---------------------------------------------------------------------------
# generated tier
# ---------------------------------------------------------------------------


def _generated_type(fix_type: str, html: str, context: BusinessContext | None) -> str:
    schema_type = GENERATED_SCHEMA_TYPES[fix_type]
    if schema_type is not None:
        return schema_type
    if context is not None and context.business_type:
        return recommend_type(context.business_type)
    return infer_page_type(html)


def regenerate_structured_data(root: lxml.html.HtmlElement, html: str, fix_type: str, opts: FixOptions) -> bool:
    schema_type = _generated_type(fix_type, html, opts.context)
    content = extract_page_content(html)
    schemas = schemas_from_content(content, schema_type)
    if opts.context is not None:
        primary = build_schema_from_context(schema_type, opts.context, opts.page_url or content.canonical or None)
        if "mainEntity" in schemas[0]:
            primary.setdefault("mainEntity", schemas[0]["mainEntity"])
        schemas[0] = primary
    remove_json_ld(root)
    inject_json_ld(root, schemas)
    return True


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def fix_method_of(fix_type: str) -> FixMethod | None:
    if fix_type in CLIENT_PATCHES:
        return FixMethod.CLIENT
    if fix_type in GENERATED_SCHEMA_TYPES:
        return FixMethod.GENERATED
    if fix_type in fix_types_for(FixMethod.AI):
        return FixMethod.AI
    return None


def apply_fix(
    html: str | None,
    fix_type: str,
    *,
    page_url: str | None = None,
    lang: str = DEFAULT_LANG,
    context: BusinessContext | None = None,
) -> FixResult:
    """Apply one client or generated fix and return the patched markup.

    Raises:
        UnsupportedFixError: unknown fix type, an ``ai`` tier fix, or a
            patch that lacks the input it needs (``add_canonical`` without
            ``page_url``).
    """
    method = fix_method_of(fix_type)
    if method is None:
        raise UnsupportedFixError(f"Unknown fix type: {fix_type}", fix_type=fix_type)
    if method is FixMethod.AI:
        raise UnsupportedFixError(
            f"{fix_type} requires AI content generation, which is not performed locally",
            fix_type=fix_type,
            fix_method=method,
        )

    html = html or ""
    opts = FixOptions(page_url=page_url, lang=lang, context=context)
    root = parse_html(html)
    if method is FixMethod.CLIENT:
        changed = CLIENT_PATCHES[fix_type](root, opts)
    else:
        changed = regenerate_structured_data(root, html, fix_type, opts)

    result_html = serialize_html(root) if changed else html
    logger.debug("Applied %s (%s): changed=%s", fix_type, method, changed)
    return FixResult(fix_type=fix_type, fix_method=method, html=result_html, changed=changed)
