# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""schema.org recommendations: type registry, keyword matcher, JSON-LD builder."""

from pageaudit.structured_data.builder import build_json_ld, build_schema_from_context, validate_content
from pageaudit.structured_data.context import BusinessContext
from pageaudit.structured_data.matcher import recommend_type
from pageaudit.structured_data.pipeline import PageSchemaResult, build_page_schemas
from pageaudit.structured_data.registry import (
    SchemaProperty,
    SchemaTypeDefinition,
    TypeRegistry,
    default_registry,
    load_registry,
)

__all__ = [
    "BusinessContext",
    "PageSchemaResult",
    "SchemaProperty",
    "SchemaTypeDefinition",
    "TypeRegistry",
    "build_json_ld",
    "build_page_schemas",
    "build_schema_from_context",
    "default_registry",
    "load_registry",
    "recommend_type",
    "validate_content",
]
