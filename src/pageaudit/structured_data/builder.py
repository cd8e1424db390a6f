# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""JSON-LD assembly from a matched type and a business context.

Two layers:
1. registry-aware flat mapping (``build_json_ld``): only properties the
   type (or an ancestor) declares are copied, empty values skipped;
2. nested structures the flat step cannot express (PostalAddress,
   GeoCoordinates, OpeningHoursSpecification, AggregateRating, reviews).

Pure and deterministic: no clock, no I/O, never raises on partial input.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pageaudit.structured_data.context import BusinessContext, MenuItem
from pageaudit.structured_data.registry import TypeRegistry, default_registry

SCHEMA_CONTEXT = "https://schema.org"
DEFAULT_COUNTRY = "US"
DEFAULT_CURRENCY = "USD"
DEFAULT_MENU_PRICE = "15"
DEFAULT_MENU_PRICE_RANGE = "$12-$25"
BEST_RATING = 5
WORST_RATING = 1

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_DAY_ABBREVIATIONS = {day[:3].lower(): day for day in WEEKDAYS}

_TIME = r"\d{1,2}(?::\d{2})?\s*(?:am|pm)?"
# "Mon-Fri 9am-5pm" or a single day, "Sat 10am-2pm"
_HOURS_FRAGMENT_RE = re.compile(
    rf"^(\w+)(?:\s*-\s*(\w+))?\s+({_TIME})\s*-\s*({_TIME})",
    re.IGNORECASE,
)
_TIME_RE = re.compile(r"(\d+)(?::(\d+))?\s*(am|pm)?", re.IGNORECASE)
_POSTAL_RE = re.compile(r"\d{5}")
_NON_PRICE_RE = re.compile(r"[^0-9.]")


def _compact(obj: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in obj.items() if v is not None}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def clean_price(price: str | float | None) -> str:
    """Numeric part of a display price ("$29/mo" -> "29"), "" when none."""
    if price is None:
        return ""
    if isinstance(price, str):
        return _NON_PRICE_RE.sub("", price)
    return str(price)


# ---------------------------------------------------------------------------
# Registry-aware flat mapping
# ---------------------------------------------------------------------------


def build_json_ld(
    schema_type: str,
    content: Mapping[str, Any],
    base_url: str | None = None,
    registry: TypeRegistry | None = None,
) -> dict[str, Any]:
    """Flat JSON-LD object for *schema_type*.

    Known types copy only declared (own or inherited) properties with a
    non-empty value.  Unknown types pass *content* through unchanged.
    """
    reg = registry or default_registry()
    properties = reg.inherited_properties(schema_type)
    if properties is None:
        return {"@context": SCHEMA_CONTEXT, "@type": schema_type, **content}

    json_ld: dict[str, Any] = {"@context": SCHEMA_CONTEXT, "@type": schema_type}
    if base_url:
        json_ld["url"] = base_url
    for prop in properties:
        value = content.get(prop.name)
        if not _is_empty(value):
            json_ld[prop.name] = value
    return json_ld


def validate_content(
    schema_type: str,
    content: Mapping[str, Any],
    registry: TypeRegistry | None = None,
) -> list[str]:
    """Missing-required-property errors; empty when valid or the type is unknown."""
    reg = registry or default_registry()
    return reg.validate(schema_type, content)


# ---------------------------------------------------------------------------
# Address and opening hours
# ---------------------------------------------------------------------------


def parse_address(context: BusinessContext) -> dict[str, Any] | None:
    """PostalAddress from explicit fields, falling back to the combined address.

    The combined form is split on commas: street, city, "ST 12345".
    """
    if not context.address and not context.street_address:
        return None
    parts = [p.strip() for p in (context.address or "").split(",")]

    def part(i: int) -> str | None:
        return parts[i] if i < len(parts) and parts[i] else None

    region = part(2)
    if region is not None:
        region = region.split(" ")[0] or None
    postal = _POSTAL_RE.search(context.address or "")

    return _compact(
        {
            "@type": "PostalAddress",
            "streetAddress": context.street_address or part(0),
            "addressLocality": context.city or part(1),
            "addressRegion": context.state or region,
            "postalCode": context.postal_code or (postal.group(0) if postal else None),
            "addressCountry": context.country or DEFAULT_COUNTRY,
        }
    )


def to_24_hour(time: str) -> str:
    """'9am' -> '09:00', '5:30pm' -> '17:30', '12am' -> '00:00'."""
    m = _TIME_RE.search(time)
    if not m:
        return "09:00"
    hours = int(m.group(1))
    minutes = m.group(2) or "00"
    period = (m.group(3) or "").lower()
    if period == "pm" and hours != 12:
        hours += 12
    if period == "am" and hours == 12:
        hours = 0
    return f"{hours:02d}:{minutes}"


def day_range(start: str, end: str) -> list[str]:
    """Inclusive weekday range; wraps past Sunday ("Fri-Mon")."""
    if start not in WEEKDAYS or end not in WEEKDAYS:
        return list(WEEKDAYS[:5])
    i, j = WEEKDAYS.index(start), WEEKDAYS.index(end)
    if i <= j:
        return list(WEEKDAYS[i : j + 1])
    return list(WEEKDAYS[i:]) + list(WEEKDAYS[: j + 1])


def _hours_spec(days: list[str], opens: str, closes: str) -> dict[str, Any]:
    return {"@type": "OpeningHoursSpecification", "dayOfWeek": days, "opens": opens, "closes": closes}


def parse_opening_hours(hours: str | None) -> list[dict[str, Any]]:
    """OpeningHoursSpecification list from "Mon-Fri 9am-5pm, Sat 10am-2pm".

    Fragments with unknown day names are skipped.  When nothing parses the
    result is the Mon-Fri 09:00-17:00 default.
    """
    specs = []
    for fragment in (hours or "").split(","):
        m = _HOURS_FRAGMENT_RE.match(fragment.strip())
        if not m:
            continue
        start = _DAY_ABBREVIATIONS.get(m.group(1)[:3].lower())
        end = _DAY_ABBREVIATIONS.get((m.group(2) or m.group(1))[:3].lower())
        if start and end:
            specs.append(_hours_spec(day_range(start, end), to_24_hour(m.group(3)), to_24_hour(m.group(4))))
    return specs or [_hours_spec(list(WEEKDAYS[:5]), "09:00", "17:00")]


# ---------------------------------------------------------------------------
# Primary schema
# ---------------------------------------------------------------------------


def _aggregate_rating(context: BusinessContext, *, with_worst: bool = True) -> dict[str, Any] | None:
    if context.rating is None:
        return None
    rating: dict[str, Any] = {
        "@type": "AggregateRating",
        "ratingValue": context.rating.value,
        "bestRating": BEST_RATING,
    }
    if with_worst:
        rating["worstRating"] = WORST_RATING
    rating["reviewCount"] = context.rating.count
    return rating


def _review_rating() -> dict[str, Any]:
    return {"@type": "Rating", "ratingValue": BEST_RATING, "bestRating": BEST_RATING, "worstRating": WORST_RATING}


def _reviewer(author: str, index: int) -> dict[str, Any]:
    return {"@type": "Person", "name": author or f"Customer {index + 1}"}


def build_schema_from_context(
    schema_type: str,
    context: BusinessContext,
    page_url: str | None = None,
    registry: TypeRegistry | None = None,
) -> dict[str, Any]:
    """Primary business/page JSON-LD object."""
    flat: dict[str, Any] = {
        "name": context.business_name,
        "description": context.description,
        "image": context.social_image or "",
    }
    if context.email:
        flat["email"] = context.email
    if context.phone:
        flat["telephone"] = context.phone
    if context.price_range:
        flat["priceRange"] = context.price_range

    schema = build_json_ld(schema_type, flat, page_url, registry)

    address = parse_address(context)
    if address is not None:
        schema["address"] = address

    if context.geo is not None:
        schema["geo"] = {
            "@type": "GeoCoordinates",
            "latitude": context.geo.latitude,
            "longitude": context.geo.longitude,
        }

    if context.hours:
        schema["openingHoursSpecification"] = parse_opening_hours(context.hours)

    rating = _aggregate_rating(context)
    if rating is not None:
        schema["aggregateRating"] = rating

    if context.city or context.state:
        parts = [p.strip() for p in (context.address or "").split(",")]
        fallback_city = parts[1] if len(parts) > 1 and parts[1] else None
        schema["areaServed"] = _compact({"@type": "City", "name": context.city or fallback_city})

    if schema_type == "AboutPage":
        schema["mainEntity"] = _compact(
            {
                "@type": "Organization",
                "name": context.business_name,
                "description": context.description,
                "url": context.site_url or None,
                "telephone": context.phone or None,
                "email": context.email or None,
            }
        )

    if context.testimonials:
        schema["review"] = [
            {
                "@type": "Review",
                "author": _reviewer(t.author, i),
                "reviewBody": t.quote,
                "reviewRating": _review_rating(),
            }
            for i, t in enumerate(context.testimonials)
        ]

    return schema


# ---------------------------------------------------------------------------
# Companion schemas
# ---------------------------------------------------------------------------


def build_breadcrumb(page_name: str, page_url: str | None, site_url: str | None) -> dict[str, Any]:
    items: list[dict[str, Any]] = [{"@type": "ListItem", "position": 1, "name": "Home", "item": site_url or "/"}]
    if page_name.lower() != "homepage":
        items.append({"@type": "ListItem", "position": 2, "name": page_name, "item": page_url})
    return {"@context": SCHEMA_CONTEXT, "@type": "BreadcrumbList", "itemListElement": items}


def build_review_schemas(
    context: BusinessContext,
    schema_type: str,
    date_published: str | None = None,
) -> list[dict[str, Any]]:
    """Standalone Review blocks, one per testimonial."""
    reviews = []
    for i, t in enumerate(context.testimonials):
        review: dict[str, Any] = {
            "@context": SCHEMA_CONTEXT,
            "@type": "Review",
            "itemReviewed": {"@type": schema_type, "name": context.business_name},
            "author": _reviewer(t.author, i),
            "reviewBody": t.quote,
            "reviewRating": _review_rating(),
        }
        if date_published:
            review["datePublished"] = date_published
        reviews.append(review)
    return reviews


def _menu_items(context: BusinessContext) -> list[MenuItem]:
    if context.menu_items is not None:
        return list(context.menu_items)
    items = []
    for i, service in enumerate(context.services):
        price = context.pricing[i].price if i < len(context.pricing) else ""
        items.append(
            MenuItem(name=service, description=f"Delicious {service.lower()}", price=price or DEFAULT_MENU_PRICE_RANGE)
        )
    return items


def build_menu_schema(context: BusinessContext) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Menu",
        "name": f"{context.business_name} Menu",
        "description": f"Full menu for {context.business_name}",
        "hasMenuSection": [
            {
                "@type": "MenuSection",
                "name": "Main Menu",
                "hasMenuItem": [
                    {
                        "@type": "MenuItem",
                        "name": item.name,
                        "description": item.description,
                        "offers": {
                            "@type": "Offer",
                            "price": clean_price(item.price) or DEFAULT_MENU_PRICE,
                            "priceCurrency": DEFAULT_CURRENCY,
                        },
                    }
                    for item in _menu_items(context)
                ],
            }
        ],
    }


def build_reservation_schema(context: BusinessContext, schema_type: str) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FoodEstablishmentReservation",
        "reservationFor": _compact(
            {
                "@type": schema_type,
                "name": context.business_name,
                "address": context.address,
                "telephone": context.phone,
            }
        ),
        "provider": {"@type": "Organization", "name": context.business_name},
        "potentialAction": {
            "@type": "ReserveAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{context.site_url or ''}/reservations",
                "actionPlatform": [
                    "http://schema.org/DesktopWebPlatform",
                    "http://schema.org/MobileWebPlatform",
                ],
            },
            "result": {"@type": "FoodEstablishmentReservation", "name": "Table Reservation"},
        },
    }


def build_product_schemas(context: BusinessContext) -> list[dict[str, Any]]:
    return [
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Product",
            "name": item.name,
            "description": item.description,
            "offers": {
                "@type": "Offer",
                "price": clean_price(item.price) or "0",
                "priceCurrency": DEFAULT_CURRENCY,
                "availability": "https://schema.org/InStock",
            },
        }
        for item in context.pricing
    ]


def build_service_schemas(context: BusinessContext) -> list[dict[str, Any]]:
    return [
        _compact(
            {
                "@context": SCHEMA_CONTEXT,
                "@type": "Service",
                "name": service,
                "provider": {"@type": "Organization", "name": context.business_name},
                "areaServed": {"@type": "City", "name": context.city} if context.city else None,
            }
        )
        for service in context.services
    ]


def build_software_schema(context: BusinessContext) -> dict[str, Any]:
    offers = None
    if context.pricing:
        offers = {
            "@type": "AggregateOffer",
            "lowPrice": clean_price(context.pricing[0].price) or "0",
            "highPrice": clean_price(context.pricing[-1].price) or "0",
            "priceCurrency": DEFAULT_CURRENCY,
            "offerCount": len(context.pricing),
        }
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "SoftwareApplication",
            "name": context.business_name,
            "description": context.description,
            "applicationCategory": "BusinessApplication",
            "operatingSystem": "Web",
            "offers": offers,
            "aggregateRating": _aggregate_rating(context, with_worst=False),
        }
    )
