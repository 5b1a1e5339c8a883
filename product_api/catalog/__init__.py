"""
==============================================================================
Catalog Package - Product Management
==============================================================================

In-memory product catalog with filtering, pagination, search and stats.

Classes:
--------
- Product: Pydantic model for products
- ProductCatalog: Catalog owning the ordered product sequence

==============================================================================
"""

from .models import (
    CatalogStats,
    PageInfo,
    PriceStats,
    Product,
    ProductCreate,
    ProductFilters,
    ProductPage,
    ProductUpdate,
)
from .catalog import DEFAULT_PRODUCTS, ProductCatalog

__all__ = [
    "CatalogStats",
    "PageInfo",
    "PriceStats",
    "Product",
    "ProductCreate",
    "ProductFilters",
    "ProductPage",
    "ProductUpdate",
    "DEFAULT_PRODUCTS",
    "ProductCatalog",
]
