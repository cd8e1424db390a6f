# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Finding ordering and the top-issues / quick-wins views."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from pageaudit import Finding, Severity

MAX_TOP_ISSUES = 5
MAX_QUICK_WINS = 5

_TOP_SEVERITIES = frozenset({Severity.CRITICAL, Severity.HIGH})
# Whole numbers only: "12 minutes" is not a quick win.
_QUICK_WIN_RE = re.compile(r"(?<!\d)[25] min")


@dataclass(frozen=True, slots=True)
class RankedFindings:
    all_findings: list[Finding]
    top_issues: list[Finding]
    quick_wins: list[Finding]


def sort_by_severity(findings: Iterable[Finding]) -> list[Finding]:
    """Stable sort, critical first; ties keep discovery order."""
    return sorted(findings, key=lambda f: Severity(f.severity).rank)


def is_quick_win(finding: Finding) -> bool:
    return bool(finding.time_estimate) and _QUICK_WIN_RE.search(finding.time_estimate) is not None


def rank(findings: Iterable[Finding]) -> RankedFindings:
    ordered = sort_by_severity(findings)
    top = [f for f in ordered if f.severity in _TOP_SEVERITIES][:MAX_TOP_ISSUES]
    quick = [f for f in ordered if is_quick_win(f)][:MAX_QUICK_WINS]
    return RankedFindings(ordered, top, quick)
