# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page Audit: content quality scoring and schema.org recommendations for HTML pages.

Two independent, side-effect-free pipelines:
- audit: checkers -> scorer -> fix mapper -> ranker (``pageaudit.pipeline``)
- schema: type matcher -> JSON-LD builder (``pageaudit.structured_data.pipeline``)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Severity(StrEnum):
    """Finding severity.  Declaration order is the sort order."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {s: i for i, s in enumerate(Severity)}


class FixMethod(StrEnum):
    """Remediation tier for a finding."""

    CLIENT = "client"  # deterministic markup patch
    GENERATED = "generated"  # templated structured-data generation
    AI = "ai"  # LLM-backed content generation (external)


@dataclass
class Finding:
    """A single detected issue plus remediation metadata."""

    category: str
    severity: Severity
    issue: str
    impact: str
    fix: str
    location: str | None = None
    current_code: str | None = None
    time_estimate: str | None = None
    fix_type: str | None = None
    fix_method: FixMethod | None = None

    def classify(self, fix_type: str, fix_method: FixMethod) -> None:
        """Attach a remediation tier.  A tier, once assigned, is never reassigned."""
        if self.fix_method is not None:
            if self.fix_method != fix_method or self.fix_type != fix_type:
                raise ValueError(f"finding {self.issue!r} already classified as {self.fix_method}")
            return
        self.fix_type = fix_type
        self.fix_method = fix_method


@dataclass(frozen=True, slots=True)
class BreakdownItem:
    """One line of a category score explanation (UI only, not scoring math)."""

    label: str
    points: int
    earned: bool
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    description: str
    items: tuple[BreakdownItem, ...]


@dataclass
class AuditResult:
    """Full report for one document."""

    overall_score: int
    grade: str
    status: str
    scores: dict[str, int]
    breakdowns: dict[str, CategoryBreakdown]
    top_issues: list[Finding]
    quick_wins: list[Finding]
    all_findings: list[Finding]
    facts: dict[str, Any] = field(default_factory=dict)
    component_recommendations: list[Finding] = field(default_factory=list)
    llm_readability_score: int = 0

    @property
    def finding_count(self) -> int:
        return len(self.all_findings)
