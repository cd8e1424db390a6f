# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""structlog + stdlib bridge for audit runs.

Terminal output goes through ConsoleRenderer, machine consumers get JSON
lines.  Leaf module, no pageaudit imports.  Library modules only ever call
``logging.getLogger(__name__)``; the CLI (or an embedding service) calls
``configure()`` once at startup.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog

DEFAULT_LEVEL = logging.INFO


def resolve_level(level: str | int | None) -> int:
    """Numeric level for a name such as ``"debug"``; unknown names give INFO."""
    if isinstance(level, int):
        return level
    value = getattr(logging, (level or "").upper(), None)
    return value if isinstance(value, int) else DEFAULT_LEVEL


def configure(
    *,
    json_output: bool = False,
    level: str | int = "INFO",
    context: Mapping[str, Any] | None = None,
) -> None:
    """Configure structlog with stdlib bridge.

    Args:
        json_output: True for JSON lines, False for human-readable console output.
        level: Root logger level (default INFO).  Unknown names fall back to INFO.
        context: Fields bound to every log line of this run (e.g. the CLI
            command), replacing any previously bound ones.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level))

    structlog.contextvars.clear_contextvars()
    if context:
        structlog.contextvars.bind_contextvars(**context)
