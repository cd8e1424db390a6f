# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Runtime configuration: report profiles, cache size, log level.

Optional YAML file (``--config`` or ``PAGEAUDIT_CONFIG``)::

    report:
      weights: {meta: 0.20, headings: 0.12, schema: 0.15, semantic: 0.10,
                images: 0.10, links: 0.08, content: 0.25}
      grades: {"A+": 90, A: 85, "B+": 80, B: 70, C: 60, D: 50}
      floor: F
    page_audit:
      grades: {A: 90, B: 80, C: 70, D: 60}
      floor: F
    cache:
      max_entries: 128
    log_level: INFO

Every section is optional; omitted values keep the built-in profiles.
``PAGEAUDIT_LOG_LEVEL`` overrides ``log_level``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field

from pageaudit.cache import DEFAULT_MAX_ENTRIES
from pageaudit.errors import ConfigError
from pageaudit.scoring import (
    CATEGORIES,
    FULL_REPORT_PROFILE,
    PAGE_AUDIT_LADDER,
    GradeLadder,
    ReportProfile,
)

logger = logging.getLogger(__name__)

CONFIG_ENV = "PAGEAUDIT_CONFIG"
LOG_LEVEL_ENV = "PAGEAUDIT_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# File schema
# ---------------------------------------------------------------------------


class _LadderSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    grades: dict[str, int] | None = Field(None, description="grade label -> minimum score")
    floor: str | None = None


class _ReportSection(_LadderSection):
    weights: dict[str, float] | None = None


class _CacheSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_entries: int = Field(DEFAULT_MAX_ENTRIES, ge=1)


class _ConfigFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    report: _ReportSection = Field(default_factory=_ReportSection)
    page_audit: _LadderSection = Field(default_factory=_LadderSection)
    cache: _CacheSection = Field(default_factory=_CacheSection)
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Resolved configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AuditConfig:
    profile: ReportProfile = FULL_REPORT_PROFILE
    page_audit_ladder: GradeLadder = PAGE_AUDIT_LADDER
    cache_size: int = DEFAULT_MAX_ENTRIES
    log_level: str = "INFO"


def _ladder(section: _LadderSection, default: GradeLadder) -> GradeLadder:
    if section.grades is None and section.floor is None:
        return default
    steps = default.steps
    if section.grades is not None:
        steps = tuple(sorted(((score, label) for label, score in section.grades.items()), reverse=True))
    return GradeLadder(steps=steps, floor=section.floor or default.floor)


def _weights(raw: dict[str, float] | None) -> Mapping[str, float]:
    if raw is None:
        return FULL_REPORT_PROFILE.weights
    unknown = sorted(set(raw) - set(CATEGORIES))
    if unknown:
        raise ConfigError(f"Unknown score categories in weights: {', '.join(unknown)}")
    return MappingProxyType(dict(raw))


def _log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level {value!r}; expected one of {', '.join(LOG_LEVELS)}")
    return level


def config_from_mapping(data: Mapping | None) -> AuditConfig:
    """Validate a parsed config document and build the resolved config."""
    try:
        parsed = _ConfigFile.model_validate(data or {})
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise ConfigError(f"Invalid config at {loc or '<root>'}: {first.get('msg')}") from e

    try:
        profile = ReportProfile(
            name="full_report",
            weights=_weights(parsed.report.weights),
            ladder=_ladder(parsed.report, FULL_REPORT_PROFILE.ladder),
        )
        page_ladder = _ladder(parsed.page_audit, PAGE_AUDIT_LADDER)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    return AuditConfig(
        profile=profile,
        page_audit_ladder=page_ladder,
        cache_size=parsed.cache.max_entries,
        log_level=_log_level(parsed.log_level),
    )


def load_config(
    path: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> AuditConfig:
    """Load configuration from *path*, ``$PAGEAUDIT_CONFIG``, or built-in defaults.

    Raises:
        ConfigError: unreadable file, malformed YAML, or invalid values.
    """
    env = os.environ if env is None else env
    config_path = path or env.get(CONFIG_ENV) or None

    data = None
    if config_path:
        config_path = Path(config_path)
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_path.name}: {e.strerror}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML in {config_path.name}: {e}") from e
        if data is not None and not isinstance(data, Mapping):
            raise ConfigError(f"Config file {config_path.name} must contain a mapping")
        logger.debug("Loaded config from %s", config_path.name)

    config = config_from_mapping(data)

    override = env.get(LOG_LEVEL_ENV)
    if override:
        config = replace(config, log_level=_log_level(override))
    return config
