# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Free-text business description -> schema.org type.

Keyword scoring per type (best keyword wins):
    100  description equals the keyword
     50  description contains the keyword
     40  keyword contains the description
     20  per description word (len > 2) sharing a substring with a keyword word

Candidates rank by (score desc, depth desc, registry order).  The top
candidate is accepted at score >= 20; otherwise the fallback type is
returned, so matching always yields a registered type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pageaudit.errors import RegistryError
from pageaudit.structured_data.registry import TypeRegistry, default_registry

logger = logging.getLogger(__name__)

EXACT_SCORE = 100
CONTAINS_KEYWORD_SCORE = 50
CONTAINED_IN_KEYWORD_SCORE = 40
WORD_SCORE = 20
ACCEPT_THRESHOLD = 20
MIN_QUERY_WORD = 3
FALLBACK_TYPE = "LocalBusiness"


@dataclass(frozen=True, slots=True)
class TypeCandidate:
    type: str
    score: int
    depth: int


def keyword_score(query: str, keywords: tuple[str, ...] | list[str]) -> int:
    """Best score of *query* against any of *keywords*."""
    q = query.lower().strip()
    q_words = [w for w in q.split() if len(w) >= MIN_QUERY_WORD]
    best = 0
    for keyword in keywords:
        k = keyword.lower().strip()
        if not k:
            continue
        if q == k:
            score = EXACT_SCORE
        elif k in q:
            score = CONTAINS_KEYWORD_SCORE
        elif q and q in k:
            score = CONTAINED_IN_KEYWORD_SCORE
        else:
            k_words = k.split()
            matches = sum(1 for qw in q_words if any(kw in qw or qw in kw for kw in k_words))
            score = matches * WORD_SCORE
        best = max(best, score)
    return best


def rank_candidates(description: str, registry: TypeRegistry | None = None) -> list[TypeCandidate]:
    """Every type with a positive score, best first."""
    reg = registry or default_registry()
    candidates = []
    for definition in reg:
        if not definition.matchable:
            continue
        score = keyword_score(description, definition.keywords)
        if score > 0:
            candidates.append(TypeCandidate(definition.name, score, reg.depth(definition.name)))
    # Stable sort keeps registry order as the last tie-breaker.
    candidates.sort(key=lambda c: (-c.score, -c.depth))
    return candidates


def recommend_type(
    description: str | None,
    registry: TypeRegistry | None = None,
    fallback: str = FALLBACK_TYPE,
) -> str:
    """Best matching registered type for a business description.

    Raises:
        RegistryError: *fallback* is not a registered type.
    """
    reg = registry or default_registry()
    if fallback not in reg:
        raise RegistryError(f"Fallback schema type {fallback} is not registered")
    if description and description.strip():
        candidates = rank_candidates(description, reg)
        if candidates and candidates[0].score >= ACCEPT_THRESHOLD:
            logger.debug(
                "Matched %r -> %s (score=%d depth=%d)",
                description,
                candidates[0].type,
                candidates[0].score,
                candidates[0].depth,
            )
            return candidates[0].type
    return fallback
