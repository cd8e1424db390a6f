# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the RFC 9457 problem_details module.

Covers:
- Core ProblemDetail dataclass behaviour
- Secret/path sanitization (including hypothesis property-based)
- Factory functions
- Taxonomy completeness
"""

from __future__ import annotations

import json

import pydantic
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pageaudit import FixMethod
from pageaudit.errors import (
    ConfigError,
    MissingDocumentError,
    PageAuditError,
    RegistryError,
    UnsupportedFixError,
)
from pageaudit.problem_details import (
    _ERROR_BASE,
    MAX_DETAIL_LENGTH,
    ProblemDetail,
    ProblemType,
    from_exception,
    from_validation,
    sanitize_detail,
)
from pageaudit.structured_data import BusinessContext

# ── ProblemDetail dataclass ──────────────────────────────────────────


class TestProblemDetail:
    def test_to_dict_omits_empty_fields(self):
        assert ProblemDetail().to_dict() == {"type": "about:blank", "status": 500}

    def test_extensions_merged_but_never_shadow(self):
        problem = ProblemDetail(type="t", status=400, extensions={"field": "x", "status": 999})
        d = problem.to_dict()
        assert d["field"] == "x"
        assert d["status"] == 400

    def test_to_json_keeps_unicode(self):
        problem = ProblemDetail(detail="Ünïcode")
        assert "Ünïcode" in problem.to_json()
        assert json.loads(problem.to_json())["detail"] == "Ünïcode"

    def test_cli_text_with_hint(self):
        text = from_exception(MissingDocumentError("No HTML document supplied")).to_cli_text()
        assert text.splitlines()[0] == "Error: No HTML document supplied"
        assert text.splitlines()[1].startswith("Hint: ")

    def test_cli_text_without_hint(self):
        assert ProblemDetail(detail="boom").to_cli_text() == "Error: boom"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ProblemDetail().status = 1  # type: ignore[misc]


# ── Sanitization ─────────────────────────────────────────────────────


class TestSanitizeDetail:
    @pytest.mark.parametrize(
        "text,leak",
        [
            ("key sk-abcdefghijklmnop failed", "sk-abcdefghijklmnop"),
            ("Authorization: Bearer abc.def.ghi", "abc.def.ghi"),
            ("API_KEY=supersecret", "supersecret"),
            ("password: hunter22", "hunter22"),
            ("https://user:pw@host.example/x", "user:pw"),
            ("fetch https://cdn.example/og.jpg?sig=abc123&w=2 failed", "abc123"),
            ("Cannot read /home/alice/site/index.html", "/home/alice"),
            (r"Cannot read C:\Users\alice\index.html", "alice"),
        ],
    )
    def test_secrets_removed(self, text, leak):
        assert leak not in sanitize_detail(text)

    def test_query_redaction_keeps_other_params(self):
        assert sanitize_detail("https://a.example/?token=xyz&page=2") == "https://a.example/?token=<redacted>&page=2"

    def test_truncation(self):
        result = sanitize_detail("x" * 300)
        assert len(result) == MAX_DETAIL_LENGTH + 3
        assert result.endswith("...")

    @settings(max_examples=200)
    @given(st.text(max_size=500))
    def test_never_longer_than_limit(self, text):
        assert len(sanitize_detail(text)) <= MAX_DETAIL_LENGTH + 3

    @settings(max_examples=100)
    @given(st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=8, max_size=40))
    def test_sk_keys_always_redacted(self, suffix):
        assert f"sk-{suffix}" not in sanitize_detail(f"token sk-{suffix} rejected")


# ── Factory functions ────────────────────────────────────────────────


class TestFromException:
    @pytest.mark.parametrize(
        "exc,problem_type",
        [
            (MissingDocumentError("none"), ProblemType.MISSING_DOCUMENT),
            (UnsupportedFixError("nope"), ProblemType.UNSUPPORTED_FIX),
            (RegistryError("dup"), ProblemType.REGISTRY_ERROR),
            (ConfigError("bad"), ProblemType.CONFIG_ERROR),
        ],
    )
    def test_known_exceptions(self, exc, problem_type):
        problem = from_exception(exc, instance="audit")
        assert problem.type == problem_type.uri
        assert problem.status == problem_type.status
        assert problem.title == problem_type.label
        assert problem.instance == "audit"

    def test_unsupported_fix_extensions(self):
        exc = UnsupportedFixError("ai tier", fix_type="generate_title", fix_method=FixMethod.AI)
        d = from_exception(exc).to_dict()
        assert d["fix_type"] == "generate_title"
        assert d["fix_method"] == "ai"

    def test_pydantic_validation(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            BusinessContext.model_validate({"rating": {"count": 3}})
        problem = from_exception(exc_info.value)
        assert problem.status == 422
        assert "rating.value" in problem.detail

    def test_malformed_json(self):
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads("{nope")
        problem = from_exception(exc_info.value)
        assert problem.type == ProblemType.VALIDATION_ERROR.uri
        assert problem.detail.startswith("Malformed JSON")

    def test_os_error(self):
        problem = from_exception(FileNotFoundError(2, "No such file or directory", "/root/x.html"))
        assert problem.type == ProblemType.INPUT_UNREADABLE.uri
        assert problem.detail == "Cannot read input: No such file or directory"

    def test_unexpected_exception_hides_message(self):
        problem = from_exception(RuntimeError("secret internals"))
        assert problem.type == "about:blank"
        assert problem.detail == "Internal error (RuntimeError)"

    def test_generic_pageaudit_error_keeps_message(self):
        assert from_exception(PageAuditError("plain")).detail == "plain"

    def test_extension_values_sanitized(self):
        problem = from_exception(MissingDocumentError("x"), extensions={"path": "/home/alice/a.html"})
        assert "/home/alice" not in problem.extensions["path"]


class TestFromValidation:
    def test_field(self):
        d = from_validation("must be one of: landing, blog", field_name="page_type").to_dict()
        assert d["status"] == 422
        assert d["field"] == "page_type"


# ── Taxonomy ─────────────────────────────────────────────────────────


class TestTaxonomy:
    @pytest.mark.parametrize("problem_type", list(ProblemType))
    def test_every_type_has_metadata(self, problem_type):
        assert 400 <= problem_type.status < 600
        assert problem_type.label

    @pytest.mark.parametrize("problem_type", list(ProblemType))
    def test_uri_round_trip(self, problem_type):
        assert ProblemType.from_uri(problem_type.uri) is problem_type

    @pytest.mark.parametrize("uri", ["about:blank", f"{_ERROR_BASE}/nope", "https://example.com/errors/config-error"])
    def test_foreign_uri(self, uri):
        assert ProblemType.from_uri(uri) is None

    def test_registry_error_has_no_hint(self):
        problem = from_exception(RegistryError("duplicate type Bakery"))
        assert problem.to_cli_text() == "Error: duplicate type Bakery"

    def test_uri_namespace(self):
        assert ProblemType.CONFIG_ERROR.uri == f"{_ERROR_BASE}/config-error"
