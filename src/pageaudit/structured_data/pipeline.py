# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Schema pipeline: type matcher -> JSON-LD builder, for one page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pageaudit.structured_data.builder import (
    build_breadcrumb,
    build_menu_schema,
    build_product_schemas,
    build_reservation_schema,
    build_review_schemas,
    build_schema_from_context,
    build_service_schemas,
    build_software_schema,
)
from pageaudit.structured_data.context import BusinessContext
from pageaudit.structured_data.matcher import recommend_type
from pageaudit.structured_data.registry import TypeRegistry, default_registry

logger = logging.getLogger(__name__)

FOOD_ESTABLISHMENT_TYPES = frozenset(
    {
        "Restaurant",
        "FoodEstablishment",
        "Bakery",
        "CafeOrCoffeeShop",
        "Brewery",
        "Winery",
        "BarOrPub",
        "FastFoodRestaurant",
        "IceCreamShop",
    }
)

STORE_TYPES = frozenset(
    {
        "Store",
        "AutoPartsStore",
        "BikeStore",
        "BookStore",
        "ClothingStore",
        "ComputerStore",
        "ConvenienceStore",
        "DepartmentStore",
        "ElectronicsStore",
        "Florist",
        "FurnitureStore",
        "GardenStore",
        "GroceryStore",
        "HardwareStore",
        "HobbyShop",
        "HomeGoodsStore",
        "JewelryStore",
        "LiquorStore",
        "MensClothingStore",
        "MobilePhoneStore",
        "MovieRentalStore",
        "MusicStore",
        "OfficeEquipmentStore",
        "OutletStore",
        "PawnShop",
        "PetStore",
        "ShoeStore",
        "SportingGoodsStore",
        "TireShop",
        "ToyStore",
        "WholesaleStore",
    }
)

PROFESSIONAL_SERVICE_TYPES = frozenset(
    {
        "LegalService",
        "AccountingService",
        "FinancialService",
        "InsuranceAgency",
        "RealEstateAgent",
        "TravelAgency",
        "EmploymentAgency",
    }
)

SOFTWARE_TYPES = frozenset({"SoftwareApplication", "WebApplication", "MobileApplication"})

# page filename -> which category extras it carries
MENU_PAGES = frozenset({"menu.html"})
RESERVATION_PAGES = frozenset({"reservations.html"})
PRODUCT_PAGES = frozenset({"products.html", "index.html"})
SERVICE_PAGES = frozenset({"services.html", "index.html"})
SOFTWARE_PAGES = frozenset({"index.html", "pricing.html"})


@dataclass
class PageSchemaResult:
    """All JSON-LD blocks for one page; ``all`` is the injection order."""

    schema_type: str
    primary: dict[str, Any]
    breadcrumb: dict[str, Any]
    reviews: list[dict[str, Any]] = field(default_factory=list)
    additional: list[dict[str, Any]] = field(default_factory=list)

    @property
    def all(self) -> list[dict[str, Any]]:
        return [self.primary, self.breadcrumb, *self.reviews, *self.additional]


def category_extras(schema_type: str, context: BusinessContext, page_filename: str) -> list[dict[str, Any]]:
    """Menu/Reservation, Product, Service or SoftwareApplication blocks gated by type and page."""
    extras: list[dict[str, Any]] = []
    if schema_type in FOOD_ESTABLISHMENT_TYPES:
        if page_filename in MENU_PAGES:
            extras.append(build_menu_schema(context))
        if page_filename in RESERVATION_PAGES:
            extras.append(build_reservation_schema(context, schema_type))
    if schema_type in STORE_TYPES and page_filename in PRODUCT_PAGES:
        extras.extend(build_product_schemas(context))
    if schema_type in PROFESSIONAL_SERVICE_TYPES and page_filename in SERVICE_PAGES:
        extras.extend(build_service_schemas(context))
    if schema_type in SOFTWARE_TYPES and page_filename in SOFTWARE_PAGES:
        extras.append(build_software_schema(context))
    return extras


def build_page_schemas(
    context: BusinessContext,
    page_name: str,
    page_url: str | None,
    page_filename: str,
    *,
    registry: TypeRegistry | None = None,
    review_date: str | None = None,
) -> PageSchemaResult:
    """Every JSON-LD block for one page of a business site.

    Args:
        context: Business identity and catalogue data.
        page_name: Human page name (breadcrumb label); "homepage" gets no second crumb.
        page_url: Absolute URL of the page.
        page_filename: Output file name, gates category extras (``menu.html`` ...).
        registry: Type registry (the packaged one by default).
        review_date: ISO date stamped on standalone reviews; omitted when None.
    """
    reg = registry or default_registry()
    schema_type = recommend_type(context.business_type, reg)

    result = PageSchemaResult(
        schema_type=schema_type,
        primary=build_schema_from_context(schema_type, context, page_url, reg),
        breadcrumb=build_breadcrumb(page_name, page_url, context.site_url),
        reviews=build_review_schemas(context, schema_type, review_date),
        additional=category_extras(schema_type, context, page_filename),
    )
    logger.debug(
        "Built %d schema block(s) for %s as %s",
        len(result.all),
        page_filename,
        schema_type,
    )
    return result
