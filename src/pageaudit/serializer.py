# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Wire serialization: camelCase JSON for audit and schema results.

Output is deterministic: identical results serialize to identical bytes
(dict insertion order is fixed here, never ``sort_keys`` dependent).
"""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any

from pageaudit import AuditResult, CategoryBreakdown, Finding
from pageaudit.page_audit import PageAuditResult
from pageaudit.structured_data.pipeline import PageSchemaResult


def camel(name: str) -> str:
    """snake_case -> camelCase (``llm_readability`` -> ``llmReadability``)."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _plain(value: Any) -> Any:
    """Dataclasses/enums/containers -> JSON-ready values with camelCase keys."""
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            camel(f.name): _plain(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.name != "findings"
        }
    if isinstance(value, dict):
        return {camel(k) if isinstance(k, str) else k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def finding_to_dict(f: Finding) -> dict[str, Any]:
    return {
        "category": f.category,
        "severity": str(f.severity),
        "issue": f.issue,
        "impact": f.impact,
        "fix": f.fix,
        **({"location": f.location} if f.location else {}),
        **({"currentCode": f.current_code} if f.current_code else {}),
        **({"timeEstimate": f.time_estimate} if f.time_estimate else {}),
        **({"fixType": f.fix_type} if f.fix_type else {}),
        **({"fixMethod": str(f.fix_method)} if f.fix_method else {}),
    }


def breakdown_to_dict(b: CategoryBreakdown) -> dict[str, Any]:
    return {
        "description": b.description,
        "items": [
            {
                "label": i.label,
                "points": i.points,
                "earned": i.earned,
                **({"detail": i.detail} if i.detail else {}),
            }
            for i in b.items
        ],
    }


def audit_to_dict(result: AuditResult, include_facts: bool = True) -> dict[str, Any]:
    """Serialize an AuditResult to the camelCase wire shape."""
    return {
        "summary": {
            "overallScore": result.overall_score,
            "grade": result.grade,
            "status": result.status,
        },
        "scores": dict(result.scores),
        "scoreBreakdowns": {k: breakdown_to_dict(v) for k, v in result.breakdowns.items()},
        "topIssues": [finding_to_dict(f) for f in result.top_issues],
        "quickWins": [finding_to_dict(f) for f in result.quick_wins],
        "allFindings": [finding_to_dict(f) for f in result.all_findings],
        "findingCount": result.finding_count,
        **({"detailedFindings": _plain(result.facts)} if include_facts and result.facts else {}),
        "componentRecommendations": [finding_to_dict(f) for f in result.component_recommendations],
        "llmReadabilityScore": result.llm_readability_score,
    }


def page_audit_to_dict(result: PageAuditResult) -> dict[str, Any]:
    return {
        "score": result.score,
        "grade": result.grade,
        "color": result.color,
        "pageType": result.page_type,
        "issues": [{"ruleId": i.rule_id, "message": i.message, "weight": i.weight} for i in result.issues],
        "passed": [{"ruleId": p.rule_id, "message": p.message} for p in result.passed],
        "metrics": dict(result.metrics),
    }


def page_schemas_to_dict(result: PageSchemaResult) -> dict[str, Any]:
    return {
        "schemaType": result.schema_type,
        "primary": result.primary,
        "breadcrumb": result.breadcrumb,
        "reviews": list(result.reviews),
        "additional": list(result.additional),
        "all": result.all,
    }


def to_dict(result: AuditResult | PageAuditResult | PageSchemaResult) -> dict[str, Any]:
    """Serialize any result type to a dictionary."""
    if isinstance(result, AuditResult):
        return audit_to_dict(result)
    if isinstance(result, PageAuditResult):
        return page_audit_to_dict(result)
    if isinstance(result, PageSchemaResult):
        return page_schemas_to_dict(result)
    raise TypeError(f"Cannot serialize {type(result).__name__}")


def to_json(result: AuditResult | PageAuditResult | PageSchemaResult, indent: int | None = 2) -> str:
    """Serialize any result type to a JSON string.

    Args:
        result: Result to serialize
        indent: JSON indentation level (None for compact output)

    Returns:
        JSON string
    """
    return json.dumps(to_dict(result), ensure_ascii=False, indent=indent)
