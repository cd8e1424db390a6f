# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Business context record consumed by the JSON-LD builder.

Flat identity/contact fields plus optional nested lists.  Accepts both
snake_case field names and the camelCase keys site settings are stored
with (``businessName``, ``menuItems``, ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ContextModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Testimonial(_ContextModel):
    quote: str = Field("", description="Review text")
    author: str = Field("", description="Reviewer name; blank falls back to 'Customer N'")
    role: str | None = Field(None, description="Reviewer role or company")


class PricingItem(_ContextModel):
    name: str = Field("", description="Plan or product name")
    price: str = Field("", description="Display price, e.g. '$29/mo'")
    description: str = Field("", description="Short description")


class MenuItem(_ContextModel):
    name: str = Field("", description="Dish name")
    description: str = Field("", description="Dish description")
    price: str | float | None = Field(None, description="Display price")


class Rating(_ContextModel):
    value: float = Field(..., description="Average rating (1-5)")
    count: int = Field(0, description="Number of reviews")


class GeoPoint(_ContextModel):
    latitude: float
    longitude: float


class BusinessContext(_ContextModel):
    """Identity, contact and catalogue data for one site."""

    business_name: str = Field("", description="Display name of the business")
    business_type: str = Field("", description="Free-text description matched against the type registry")
    description: str = Field("", description="One-paragraph business description")
    email: str | None = None
    phone: str | None = None
    address: str | None = Field(None, description="Combined free-text address, 'street, city, ST 12345'")
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    geo: GeoPoint | None = None
    hours: str | None = Field(None, description="Compact hours, e.g. 'Mon-Fri 9am-5pm, Sat 10am-2pm'")
    price_range: str | None = None
    rating: Rating | None = None
    testimonials: list[Testimonial] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)
    pricing: list[PricingItem] = Field(default_factory=list)
    menu_items: list[MenuItem] | None = None
    site_url: str | None = None
    social_image: str | None = None
