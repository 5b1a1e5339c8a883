"""
==============================================================================
Product Catalog Module
==============================================================================

In-memory product catalog with filtering, pagination, search, stats and
CRUD operations.

Features:
---------
- Ordered storage: insertion order is the iteration and pagination order
- Fast id lookup index
- Category / stock / text filters combined with logical AND
- Single lock around every read and write

The catalog owns its state; the application creates one instance at
startup and hands it to request handlers through dependency injection.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from product_api.core import exceptions
from product_api.core.exceptions import describe_validation_errors
from .models import (
    CatalogStats,
    PageInfo,
    PriceStats,
    Product,
    ProductCreate,
    ProductFilters,
    ProductPage,
    ProductUpdate,
    matches_text,
)


# Module logger
logger = logging.getLogger(__name__)


DEFAULT_PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "Laptop",
        "description": "High-performance laptop for developers",
        "price": 1299.99,
        "category": "Electronics",
        "inStock": True,
    },
    {
        "name": "Coffee Mug",
        "description": "Ceramic mug for your morning coffee",
        "price": 12.99,
        "category": "Kitchen",
        "inStock": True,
    },
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductCatalog:
    """
    In-memory product catalog.

    Attributes:
        products: Ordered copy of all products

    Example:
        >>> catalog = ProductCatalog(DEFAULT_PRODUCTS)
        >>> page = catalog.list_products(ProductFilters(category="kitchen"))
        >>> page.total_matching
        1
        >>> [p.name for p in catalog.search("lap")]
        ['Laptop']
    """

    def __init__(self, seed: Optional[Iterable[Mapping[str, Any]]] = None) -> None:
        """
        Initialize the catalog.

        Args:
            seed: Optional product payloads created in order at startup
        """
        self._products: List[Product] = []
        self._by_id: Dict[str, Product] = {}
        self._lock = threading.RLock()

        for fields in seed or ():
            self.create(fields)

        if self._products:
            logger.info(f"✅ Seeded catalog with {len(self._products)} products")

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def products(self) -> List[Product]:
        """Get all products in catalog order."""
        with self._lock:
            return self._products.copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        with self._lock:
            return product_id in self._by_id

    # =========================================================================
    # QUERY METHODS
    # =========================================================================

    def list_products(
        self,
        filters: Optional[ProductFilters] = None,
        page: int = 1,
        limit: int = 10
    ) -> ProductPage:
        """
        Filter and paginate the catalog.

        Args:
            filters: Category / stock / text filters (all optional)
            page: 1-based page number
            limit: Page size

        Returns:
            ProductPage with the sliced items, the match count and page info.
            Pages past the end are empty rather than an error.

        Raises:
            AppException: INVALID_ARGUMENT if page or limit is below 1
        """
        if page < 1:
            raise exceptions.invalid_argument("page must be a positive integer", {"page": page})
        if limit < 1:
            raise exceptions.invalid_argument("limit must be a positive integer", {"limit": limit})

        predicates = (filters or ProductFilters()).predicates()

        with self._lock:
            matched = [
                product for product in self._products
                if all(check(product) for check in predicates)
            ]

        start = (page - 1) * limit
        return ProductPage(
            items=matched[start:start + limit],
            total_matching=len(matched),
            page_info=PageInfo.create(page, limit, len(matched)),
        )

    def get_product(self, product_id: str) -> Product:
        """
        Get product by id.

        Raises:
            AppException: NOT_FOUND if no product has that id
        """
        with self._lock:
            product = self._by_id.get(product_id)

        if product is None:
            logger.debug(f"Product not found: {product_id}")
            raise exceptions.product_not_found(product_id)

        return product

    def search(self, term: Optional[str]) -> List[Product]:
        """
        Case-insensitive substring search on name and description.

        A missing or blank term never matches everything; it is rejected.

        Raises:
            AppException: INVALID_ARGUMENT if the term is missing or blank
        """
        if term is None or not term.strip():
            raise exceptions.invalid_argument("Search term must not be empty")

        term = term.strip().lower()
        with self._lock:
            return [product for product in self._products if matches_text(product, term)]

    def stats(self) -> CatalogStats:
        """Counts per stock state and category plus price aggregates."""
        stats = CatalogStats()
        lowest: Optional[float] = None
        highest: Optional[float] = None
        total_price = 0.0

        with self._lock:
            for product in self._products:
                stats.total_count += 1
                if product.in_stock:
                    stats.in_stock_count += 1
                else:
                    stats.out_of_stock_count += 1

                stats.categories[product.category] = stats.categories.get(product.category, 0) + 1

                total_price += product.price
                lowest = product.price if lowest is None else min(lowest, product.price)
                highest = product.price if highest is None else max(highest, product.price)

        if stats.total_count:
            stats.price_stats = PriceStats(
                lowest=lowest,
                highest=highest,
                average=total_price / stats.total_count,
            )

        return stats

    # =========================================================================
    # MUTATION METHODS
    # =========================================================================

    def create(self, fields: Mapping[str, Any]) -> Product:
        """
        Create a product and append it to the catalog.

        Args:
            fields: name, price, category (required); description, inStock

        Returns:
            Created Product with generated id and timestamps

        Raises:
            AppException: VALIDATION_ERROR listing every invalid field
        """
        data = self._validate(ProductCreate, fields)
        now = _utcnow()

        with self._lock:
            product = Product(
                id=self._new_id(),
                created_at=now,
                updated_at=now,
                **data.model_dump(),
            )
            self._products.append(product)
            self._by_id[product.id] = product

        logger.info(f"✅ Product created: {product.id} ({product.name})")
        return product

    def update(self, product_id: str, fields: Mapping[str, Any]) -> Product:
        """
        Merge supplied fields over an existing product.

        Unspecified fields are left untouched; id and createdAt never change.

        Raises:
            AppException: NOT_FOUND if the id is unknown,
                VALIDATION_ERROR if a supplied field is invalid
        """
        self.get_product(product_id)
        changes = self._validate(ProductUpdate, fields).changes()

        with self._lock:
            current = self._by_id.get(product_id)
            if current is None:
                raise exceptions.product_not_found(product_id)

            updated = current.model_copy(
                update={**changes, "updated_at": max(_utcnow(), current.created_at)}
            )
            self._products[self._products.index(current)] = updated
            self._by_id[product_id] = updated

        logger.info(f"Product updated: {product_id} (fields: {', '.join(sorted(changes)) or 'none'})")
        return updated

    def delete(self, product_id: str) -> Product:
        """
        Remove a product and return it.

        Raises:
            AppException: NOT_FOUND if the id is unknown (including repeats)
        """
        with self._lock:
            product = self._by_id.pop(product_id, None)
            if product is None:
                raise exceptions.product_not_found(product_id)
            self._products.remove(product)

        logger.info(f"🗑️ Product deleted: {product_id}")
        return product

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _new_id(self) -> str:
        product_id = str(uuid.uuid4())
        while product_id in self._by_id:
            product_id = str(uuid.uuid4())
        return product_id

    @staticmethod
    def _validate(schema, fields: Mapping[str, Any]):
        try:
            return schema.model_validate(fields)
        except ValidationError as exc:
            problems = describe_validation_errors(exc.errors())
            logger.debug(f"Product validation failed: {problems}")
            raise exceptions.validation_failed(problems) from exc
