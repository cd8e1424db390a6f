# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page Audit exception hierarchy.

All pageaudit-specific errors inherit from PageAuditError, allowing callers
to catch the base class for any failure or specific subclasses for
targeted handling.  Checkers, the type matcher and the JSON-LD builder
never raise on malformed input; these errors are for the boundaries.
"""

from __future__ import annotations


class PageAuditError(Exception):
    """Base exception for all pageaudit errors."""


class MissingDocumentError(PageAuditError):
    """No input document was supplied at all."""


class RegistryError(PageAuditError):
    """Schema type registry data is malformed (duplicate names, bad fields)."""


class ConfigError(PageAuditError):
    """Configuration file could not be read or failed validation."""


class UnsupportedFixError(PageAuditError):
    """Fix type is unknown or belongs to a tier this engine does not execute."""

    def __init__(self, message: str, *, fix_type: str = "", fix_method: str = "") -> None:
        super().__init__(message)
        self.fix_type = fix_type
        self.fix_method = fix_method
