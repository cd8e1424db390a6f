# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import pageaudit  # noqa: F401
except ImportError:
    raise ImportError("pageaudit is not installed. Run: pip install -e '.[dev]'") from None

import logging

import pytest
import structlog

from tests._pages import BARE_PAGE, GOOD_PAGE


@pytest.fixture
def good_html() -> str:
    """Well-formed page that earns near-full credit in every category."""
    return GOOD_PAGE


@pytest.fixture
def bare_html() -> str:
    """No title, no description, a single H1 and no structured data."""
    return BARE_PAGE


@pytest.fixture
def restore_logging():
    """Undo ``logging_config.configure()`` side effects on the root logger."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


@pytest.fixture
def context_data() -> dict:
    """Business context as stored by site settings (camelCase keys)."""
    return {
        "businessName": "Hop & Barrel",
        "businessType": "craft brewery downtown",
        "description": "Small-batch ales brewed on site.",
        "email": "hello@hopbarrel.example",
        "phone": "555-0100",
        "address": "12 Mill St, Portland, OR 97201",
        "hours": "Mon-Fri 9am-5pm, Sat 10am-2pm",
        "priceRange": "$$",
        "rating": {"value": 4.7, "count": 58},
        "testimonials": [
            {"quote": "Best stout in town.", "author": "Dana"},
            {"quote": "Great patio.", "author": ""},
        ],
        "services": ["Flights", "Growler fills"],
        "pricing": [{"name": "Flight", "price": "$12"}, {"name": "Growler", "price": "$18.50"}],
        "siteUrl": "https://hopbarrel.example",
        "socialImage": "https://hopbarrel.example/og.jpg",
    }
