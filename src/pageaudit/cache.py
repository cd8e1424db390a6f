# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Audit result memoization keyed by a hash of the input document.

Audits are deterministic, so identical (html, page_type, page_name) input
can reuse a previous AuditResult.  Returned results are shared: callers
must treat them as read-only.

NOTE: This class is NOT thread-safe.  Use one instance per worker.
"""

from __future__ import annotations

import hashlib
import logging
from collections import OrderedDict
from dataclasses import dataclass

from pageaudit import AuditResult
from pageaudit.errors import MissingDocumentError
from pageaudit.pipeline import audit_html
from pageaudit.scoring import FULL_REPORT_PROFILE, ReportProfile

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 128


def audit_key(html: str, page_type: str | None = None, page_name: str | None = None) -> str:
    """SHA-256 hex digest identifying one audit input."""
    h = hashlib.sha256()
    for part in (html, page_type or "", page_name or ""):
        encoded = part.encode("utf-8", "surrogatepass")
        h.update(len(encoded).to_bytes(8, "big"))
        h.update(encoded)
    return h.hexdigest()


@dataclass
class CacheStats:
    """Counters for cache behaviour, used for logging."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class AuditCache:
    """LRU of AuditResults for one report profile."""

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        profile: ReportProfile = FULL_REPORT_PROFILE,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._max_entries = max_entries
        self._profile = profile
        self._entries: OrderedDict[str, AuditResult] = OrderedDict()
        self._stats = CacheStats()

    def lookup(self, key: str) -> AuditResult | None:
        result = self._entries.get(key)
        if result is None:
            return None
        self._entries.move_to_end(key)
        return result

    def store(self, key: str, result: AuditResult) -> None:
        self._entries[key] = result
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted_key, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("Audit cache eviction: %s", evicted_key[:12])

    def audit(
        self,
        html: str | None,
        page_type: str | None = None,
        page_name: str | None = None,
    ) -> AuditResult:
        """Cached ``audit_html``."""
        if html is None:
            raise MissingDocumentError("No HTML document supplied")
        key = audit_key(html, page_type, page_name)
        cached = self.lookup(key)
        if cached is not None:
            self._stats.hits += 1
            logger.debug("Audit cache hit: %s", key[:12])
            return cached
        self._stats.misses += 1
        result = audit_html(html, page_type, page_name, self._profile)
        self.store(key, result)
        return result

    def clear(self) -> None:
        self._entries.clear()

    # -- Introspection --

    @property
    def stats(self) -> CacheStats:
        return self._stats

    @property
    def size(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
