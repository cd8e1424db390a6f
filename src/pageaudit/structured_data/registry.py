# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Immutable schema.org type registry.

A flat forest of named nodes with parent pointers.  Property inheritance
is resolved by walking to the root: the first definition of a property
name wins, so a child shadows its ancestors.  Built once from
``schema_types.yaml`` and shared read-only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from pageaudit.errors import RegistryError

logger = logging.getLogger(__name__)

REGISTRY_PATH = Path(__file__).parent / "schema_types.yaml"
WILDCARD_KEYWORD = "any"


@dataclass(frozen=True, slots=True)
class SchemaProperty:
    name: str
    type: str = "text"
    required: bool = False
    description: str = ""


@dataclass(frozen=True, slots=True)
class SchemaTypeDefinition:
    name: str
    parent: str | None
    description: str
    properties: tuple[SchemaProperty, ...]
    keywords: tuple[str, ...] = ()

    @property
    def matchable(self) -> bool:
        """Whether the keyword matcher considers this type at all."""
        return bool(self.keywords) and WILDCARD_KEYWORD not in self.keywords


class TypeRegistry:
    """Read-only collection of type definitions, in declaration order."""

    def __init__(
        self,
        definitions: Iterable[SchemaTypeDefinition],
        categories: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        types: dict[str, SchemaTypeDefinition] = {}
        for definition in definitions:
            if definition.name in types:
                raise RegistryError(f"Duplicate schema type: {definition.name}")
            types[definition.name] = definition
        self._types = MappingProxyType(types)
        self._categories = MappingProxyType({k: tuple(v) for k, v in (categories or {}).items()})

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[SchemaTypeDefinition]:
        return iter(self._types.values())

    def get(self, name: str) -> SchemaTypeDefinition | None:
        return self._types.get(name)

    def names(self) -> list[str]:
        return list(self._types)

    def categories(self) -> dict[str, list[str]]:
        """Display grouping of type names (UI pickers)."""
        return {k: list(v) for k, v in self._categories.items()}

    def ancestors(self, name: str) -> list[str]:
        """Parent chain from nearest parent to root.

        Unknown parents end the chain.  A parent that would revisit an
        already seen node is treated as absent.
        """
        chain: list[str] = []
        seen = {name}
        current = self._types.get(name)
        while current is not None and current.parent is not None:
            parent = current.parent
            if parent in seen or parent not in self._types:
                break
            chain.append(parent)
            seen.add(parent)
            current = self._types[parent]
        return chain

    def depth(self, name: str) -> int:
        """Number of parent hops to the nearest root (0 for roots and unknown types)."""
        return len(self.ancestors(name))

    def inherited_properties(self, name: str) -> tuple[SchemaProperty, ...] | None:
        """Own properties followed by ancestors' properties not already defined.

        Returns None for unknown types.
        """
        definition = self._types.get(name)
        if definition is None:
            return None
        merged: dict[str, SchemaProperty] = {}
        for type_name in [name, *self.ancestors(name)]:
            for prop in self._types[type_name].properties:
                merged.setdefault(prop.name, prop)
        return tuple(merged.values())

    def required_properties(self, name: str) -> list[str]:
        props = self.inherited_properties(name) or ()
        return [p.name for p in props if p.required]

    def validate(self, name: str, content: Mapping[str, Any]) -> list[str]:
        """Missing required property errors.  Unknown types accept anything."""
        errors = []
        for prop_name in self.required_properties(name):
            if not content.get(prop_name):
                errors.append(f"Missing required property: {prop_name}")
        return errors

    # -- construction --

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TypeRegistry:
        """Build from the ``{types: [...], categories: {...}}`` document shape."""
        if not isinstance(data, Mapping) or not isinstance(data.get("types"), list):
            raise RegistryError("Registry data must be a mapping with a 'types' list")
        definitions = [_parse_type(entry) for entry in data["types"]]
        categories = data.get("categories") or {}
        if not isinstance(categories, Mapping):
            raise RegistryError("'categories' must be a mapping of name -> type list")
        registry = cls(definitions, categories)
        for definition in registry:
            if definition.parent is not None and definition.parent not in registry:
                logger.warning("Schema type %s has unknown parent %s", definition.name, definition.parent)
        return registry


def _parse_property(raw: Any, owner: str) -> SchemaProperty:
    if not isinstance(raw, Mapping) or not raw.get("name"):
        raise RegistryError(f"Schema type {owner}: property entries need a 'name'")
    return SchemaProperty(
        name=str(raw["name"]),
        type=str(raw.get("type", "text")),
        required=bool(raw.get("required", False)),
        description=str(raw.get("description", "")),
    )


def _parse_type(raw: Any) -> SchemaTypeDefinition:
    if not isinstance(raw, Mapping) or not raw.get("name"):
        raise RegistryError("Schema type entries need a 'name'")
    name = str(raw["name"])
    keywords = raw.get("keywords") or []
    properties = raw.get("properties") or []
    if not isinstance(keywords, list) or not isinstance(properties, list):
        raise RegistryError(f"Schema type {name}: 'keywords' and 'properties' must be lists")
    parent = raw.get("parent")
    return SchemaTypeDefinition(
        name=name,
        parent=str(parent) if parent else None,
        description=str(raw.get("description", "")),
        properties=tuple(_parse_property(p, name) for p in properties),
        keywords=tuple(str(k).strip().lower() for k in keywords if str(k).strip()),
    )


def load_registry(path: Path | str | None = None) -> TypeRegistry:
    """Load a registry from YAML (the packaged ``schema_types.yaml`` by default)."""
    registry_path = Path(path) if path is not None else REGISTRY_PATH
    try:
        with open(registry_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise RegistryError(f"Cannot read schema registry {registry_path.name}: {e.strerror}") from e
    except yaml.YAMLError as e:
        raise RegistryError(f"Malformed schema registry {registry_path.name}: {e}") from e
    registry = TypeRegistry.from_mapping(data)
    logger.debug("Loaded %d schema types from %s", len(registry), registry_path.name)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> TypeRegistry:
    """Process-wide packaged registry, loaded on first use."""
    return load_registry()
