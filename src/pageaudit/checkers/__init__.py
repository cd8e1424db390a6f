# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Per-category checkers.

Each checker is a pure function ``(document | html) -> <Category>Facts``.
Facts carry the derived findings in ``findings``.  Checkers are total:
malformed or partial markup resolves to defaults, never an exception.
Checkers leave ``fix_type``/``fix_method`` unset; ``fix_mapper`` assigns them.
"""

from pageaudit.checkers.boosters import recommend_components
from pageaudit.checkers.content import ContentDepth, ContentFacts, check_content
from pageaudit.checkers.headings import HeadingFacts, check_headings
from pageaudit.checkers.images import ImageFacts, check_images
from pageaudit.checkers.links import GENERIC_TEXTS, LinkFacts, check_links
from pageaudit.checkers.meta import MetaFacts, check_meta
from pageaudit.checkers.readability import ReadabilityFacts, check_readability
from pageaudit.checkers.schema import Opportunity, SchemaFacts, check_schema
from pageaudit.checkers.semantic import SemanticFacts, check_semantic

__all__ = [
    "GENERIC_TEXTS",
    "ContentDepth",
    "ContentFacts",
    "HeadingFacts",
    "ImageFacts",
    "LinkFacts",
    "MetaFacts",
    "Opportunity",
    "ReadabilityFacts",
    "SchemaFacts",
    "SemanticFacts",
    "check_content",
    "check_headings",
    "check_images",
    "check_links",
    "check_meta",
    "check_readability",
    "check_schema",
    "check_semantic",
    "recommend_components",
]
