# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""RFC 9457 Problem Details for the audit boundary.

Maps pageaudit exceptions to problem detail objects that a request handler
can return as ``application/problem+json`` and the CLI prints as text.
Near-leaf dependency (stdlib + pydantic + errors.py).

Each ``ProblemType`` carries its HTTP status, label and CLI hint.  Every
string that leaves this module passes through ``sanitize_detail()`` first.

Type URI namespace: ``https://www.retio.ai/pageaudit/errors/{slug}``
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NamedTuple

import pydantic

from pageaudit.errors import (
    ConfigError,
    MissingDocumentError,
    PageAuditError,
    RegistryError,
    UnsupportedFixError,
)

_ERROR_BASE = "https://www.retio.ai/pageaudit/errors"

MAX_DETAIL_LENGTH = 200

BLANK_TYPE = "about:blank"


class _Meta(NamedTuple):
    status: int
    title: str
    hint: str = ""


# ── ProblemType taxonomy ─────────────────────────────────────────────


class ProblemType(StrEnum):
    """Error taxonomy for pageaudit."""

    # Caller input
    MISSING_DOCUMENT = "missing-document"
    INPUT_UNREADABLE = "input-unreadable"
    VALIDATION_ERROR = "validation-error"
    UNSUPPORTED_FIX = "unsupported-fix"

    # Packaged data / environment
    REGISTRY_ERROR = "registry-error"
    CONFIG_ERROR = "config-error"

    @property
    def uri(self) -> str:
        """Full type URI for the RFC 9457 ``type`` field."""
        return f"{_ERROR_BASE}/{self.value}"

    @property
    def status(self) -> int:
        return _PROBLEMS[self].status

    @property
    def label(self) -> str:
        """Short human-readable summary (RFC 9457 ``title``)."""
        return _PROBLEMS[self].title

    @property
    def hint(self) -> str:
        """One-line recovery suggestion for terminal users."""
        return _PROBLEMS[self].hint

    @classmethod
    def from_uri(cls, uri: str) -> ProblemType | None:
        prefix = f"{_ERROR_BASE}/"
        if not uri.startswith(prefix):
            return None
        try:
            return cls(uri[len(prefix) :])
        except ValueError:
            return None


_PROBLEMS: dict[ProblemType, _Meta] = {
    ProblemType.MISSING_DOCUMENT: _Meta(
        400, "Missing Document", "Pass an HTML file, or '-' to read the document from stdin."
    ),
    ProblemType.INPUT_UNREADABLE: _Meta(400, "Input Unreadable", "Check that the file exists and is readable."),
    ProblemType.VALIDATION_ERROR: _Meta(422, "Validation Error", "Check the input file against the expected fields."),
    ProblemType.UNSUPPORTED_FIX: _Meta(422, "Unsupported Fix", "Only client and generated tier fixes run locally."),
    ProblemType.REGISTRY_ERROR: _Meta(500, "Schema Registry Error"),
    ProblemType.CONFIG_ERROR: _Meta(500, "Configuration Error", "Fix the config file or unset PAGEAUDIT_CONFIG."),
}

# ── Scrubbing ────────────────────────────────────────────────────────

# Audited pages and business contexts carry URLs; signed links and
# credentials in them must not reach logs or responses.
_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?<=://)[^/@\s]+@"), "<redacted>@"),
    (re.compile(r"([?&](?:token|key|api_key|apikey|sig|signature|password|secret)=)[^&#\s]+", re.I), r"\1<redacted>"),
    (re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9._~+/=-]{6,}"), r"\1 <redacted>"),
    (re.compile(r"\bsk-[\w-]{8,}"), "<redacted>"),
    (re.compile(r"(?<![?&])\b(?:api_key|secret|token|password|credential)\s*[=:]\s*\S+", re.I), "<redacted>"),
    (
        re.compile(
            r"/(?:Users|home|tmp|var|etc|opt|root|srv|proc|sys|usr|Library|Applications"
            r"|private|snap|mnt|media|nix)/[\w./-]+"
            r"|[A-Z]:\\[\w.\\-]+"
        ),
        "<path>",
    ),
)


def sanitize_detail(text: str) -> str:
    """Scrub credentials and filesystem paths, then cap at ``MAX_DETAIL_LENGTH``."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text if len(text) <= MAX_DETAIL_LENGTH else text[:MAX_DETAIL_LENGTH] + "..."


def _scrub_values(extensions: dict[str, Any]) -> dict[str, Any]:
    return {k: sanitize_detail(v) if isinstance(v, str) else v for k, v in extensions.items()}


# ── ProblemDetail ────────────────────────────────────────────────────

_STANDARD_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})


@dataclass(frozen=True, slots=True)
class ProblemDetail:
    """RFC 9457 Problem Detail object."""

    type: str = BLANK_TYPE
    title: str = ""
    status: int = 500
    detail: str = ""
    instance: str = ""
    extensions: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        problem_type: ProblemType,
        detail: str,
        *,
        instance: str = "",
        extensions: dict[str, Any] | None = None,
    ) -> ProblemDetail:
        """Problem of a known type; detail and string extensions are scrubbed."""
        return cls(
            type=problem_type.uri,
            title=problem_type.label,
            status=problem_type.status,
            detail=sanitize_detail(detail),
            instance=instance,
            extensions=_scrub_values(extensions or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire dict: empty optional members dropped, extensions flattened in.

        Extensions never override the standard members.
        """
        d: dict[str, Any] = {"type": self.type, "status": self.status}
        d.update((k, v) for k, v in (("title", self.title), ("detail", self.detail), ("instance", self.instance)) if v)
        d.update((k, v) for k, v in self.extensions.items() if k not in _STANDARD_FIELDS)
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_cli_text(self) -> str:
        """``Error: <detail>`` plus a ``Hint:`` line when the type has one."""
        problem_type = ProblemType.from_uri(self.type)
        text = f"Error: {self.detail}"
        if problem_type is not None and problem_type.hint:
            text += f"\nHint: {problem_type.hint}"
        return text


# ── Factories ────────────────────────────────────────────────────────

_EXCEPTION_TYPES: tuple[tuple[type[PageAuditError], ProblemType], ...] = (
    (MissingDocumentError, ProblemType.MISSING_DOCUMENT),
    (UnsupportedFixError, ProblemType.UNSUPPORTED_FIX),
    (RegistryError, ProblemType.REGISTRY_ERROR),
    (ConfigError, ProblemType.CONFIG_ERROR),
)


def _validation_summary(exc: pydantic.ValidationError) -> str:
    parts = []
    for error in exc.errors()[:3]:
        loc = ".".join(str(p) for p in error.get("loc", ()))
        msg = error.get("msg", "invalid")
        parts.append(f"{loc}: {msg}" if loc else str(msg))
    return "; ".join(parts) or "Invalid input"


def _classify(exc: Exception, ext: dict[str, Any]) -> tuple[ProblemType, str] | None:
    for exc_type, problem_type in _EXCEPTION_TYPES:
        if isinstance(exc, exc_type):
            if isinstance(exc, UnsupportedFixError):
                if exc.fix_type:
                    ext.setdefault("fix_type", exc.fix_type)
                if exc.fix_method:
                    ext.setdefault("fix_method", str(exc.fix_method))
            return problem_type, str(exc)
    if isinstance(exc, pydantic.ValidationError):
        return ProblemType.VALIDATION_ERROR, _validation_summary(exc)
    if isinstance(exc, json.JSONDecodeError):
        return ProblemType.VALIDATION_ERROR, f"Malformed JSON: {exc.msg}"
    if isinstance(exc, OSError):
        return ProblemType.INPUT_UNREADABLE, f"Cannot read input: {exc.strerror or exc}"
    return None


def from_exception(
    exc: Exception,
    *,
    instance: str = "",
    extensions: dict[str, Any] | None = None,
) -> ProblemDetail:
    """Build a ProblemDetail from an exception.

    pageaudit errors map to their own types, pydantic failures and malformed
    JSON to 422, unreadable files to 400.  Other PageAuditError subclasses
    keep their message under ``about:blank``; anything else reports only the
    exception class name.
    """
    ext = dict(extensions or {})
    classified = _classify(exc, ext)
    if classified is not None:
        problem_type, detail = classified
        return ProblemDetail.of(problem_type, detail, instance=instance, extensions=ext)

    detail = str(exc) if isinstance(exc, PageAuditError) else f"Internal error ({type(exc).__name__})"
    return ProblemDetail(
        detail=sanitize_detail(detail),
        instance=instance,
        extensions=_scrub_values(ext),
    )


def from_validation(detail: str, *, field_name: str = "", instance: str = "") -> ProblemDetail:
    """422 problem for a rejected argument, optionally naming the field."""
    ext = {"field": field_name} if field_name else {}
    return ProblemDetail.of(ProblemType.VALIDATION_ERROR, detail, instance=instance, extensions=ext)
