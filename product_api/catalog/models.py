"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog records, query inputs and query results.

All models serialize with camelCase aliases (``inStock``, ``createdAt``)
and accept either spelling on input.

==============================================================================
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Product(CamelModel):
    """
    Product record held by the catalog.

    Attributes:
        id: Catalog-assigned identifier, immutable
        name: Display name
        description: Free text, may be empty
        price: Non-negative price
        category: Grouping label (no fixed enumeration)
        in_stock: Availability flag
        created_at: Creation time (UTC), immutable
        updated_at: Last successful mutation time (UTC)
    """

    id: str
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)
    in_stock: bool = False
    created_at: datetime
    updated_at: datetime


class ProductFilters(CamelModel):
    """
    List filters; every supplied filter must match (logical AND).

    Each filter is an independent per-record predicate, so the order in
    which they are applied never changes the result.
    """

    category: Optional[str] = None
    in_stock: Optional[bool] = None
    search: Optional[str] = None

    def predicates(self) -> List:
        """Build one predicate per supplied filter."""
        checks = []

        if self.category:
            category = self.category.lower()
            checks.append(lambda p: p.category.lower() == category)

        if self.in_stock is not None:
            in_stock = self.in_stock
            checks.append(lambda p: p.in_stock == in_stock)

        if self.search and self.search.strip():
            term = self.search.strip().lower()
            checks.append(lambda p: matches_text(p, term))

        return checks

    def describe(self) -> Dict[str, object]:
        """Echo of the applied filters for list responses."""
        return {
            "category": self.category or "all",
            "inStock": "all" if self.in_stock is None else self.in_stock,
            "search": self.search or "none",
        }


def matches_text(product: Product, term: str) -> bool:
    """Case-insensitive substring match on name or description."""
    term = term.lower()
    return term in product.name.lower() or term in product.description.lower()


class PageInfo(CamelModel):
    """Pagination metadata for a list result."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool

    @classmethod
    def create(cls, page: int, limit: int, total: int) -> "PageInfo":
        """Factory computing derived page counts."""
        start = (page - 1) * limit
        return cls(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_items=total,
            items_per_page=limit,
            has_next=start + limit < total,
            has_prev=start > 0,
        )


class ProductPage(CamelModel):
    """One page of filtered products."""

    items: List[Product]
    total_matching: int
    page_info: PageInfo


class PriceStats(CamelModel):
    """Price aggregates; all None when the catalog is empty."""

    lowest: Optional[float] = None
    highest: Optional[float] = None
    average: Optional[float] = None


class CatalogStats(CamelModel):
    """Catalog-wide counts and price aggregates."""

    total_count: int = 0
    in_stock_count: int = 0
    out_of_stock_count: int = 0
    categories: Dict[str, int] = Field(default_factory=dict)
    price_stats: PriceStats = Field(default_factory=PriceStats)


# =============================================================================
# MUTATION PAYLOADS
# =============================================================================

class ProductCreate(CamelModel):
    """
    Fields accepted when creating a product.

    Strict typing: numbers must be JSON numbers and ``inStock`` a JSON
    boolean. Unknown keys, including server-assigned ones, are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    category: str = Field(..., min_length=1, max_length=100)
    in_stock: bool = False


class ProductUpdate(CamelModel):
    """Partial update; only the supplied fields are merged."""

    model_config = ConfigDict(strict=True, extra="ignore", str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    in_stock: Optional[bool] = None

    @field_validator("name", "description", "price", "category", "in_stock", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value

    def changes(self) -> Dict[str, object]:
        """Supplied fields only, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
