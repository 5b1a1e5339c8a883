"""
==============================================================================
Product Catalog Endpoints
==============================================================================

CRUD, search and stats endpoints for the products resource. Every route
requires the x-api-key header.

==============================================================================
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from product_api.catalog import CatalogStats, ProductCatalog, ProductFilters
from product_api.core import exceptions
from product_api.core.dependencies import (
    PaginationParams,
    get_catalog,
    get_pagination,
    require_api_key,
)
from product_api.schemas.product import (
    ProductListResponse,
    ProductMessageResponse,
    ProductResponse,
    SearchResponse,
)


router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(require_api_key)],
)


class ProductController:
    """Controller translating HTTP input into catalog calls."""

    def __init__(self, catalog: ProductCatalog):
        self._catalog = catalog

    def list_products(self, filters: ProductFilters, pagination: PaginationParams) -> ProductListResponse:
        """List products with filters and pagination."""
        page = self._catalog.list_products(filters, page=pagination.page, limit=pagination.limit)
        return ProductListResponse.from_page(page, filters.describe())

    def search(self, term: Optional[str]) -> SearchResponse:
        """Search products by name or description."""
        if term is None or not term.strip():
            raise exceptions.missing_query_parameter("q")

        results = self._catalog.search(term)
        return SearchResponse(data=results, search_term=term, total_results=len(results))

    def get_stats(self) -> CatalogStats:
        """Get catalog statistics."""
        return self._catalog.stats()

    def get(self, product_id: str) -> ProductResponse:
        """Get product by id."""
        return ProductResponse(data=self._catalog.get_product(product_id))

    def create(self, payload: Dict[str, Any]) -> ProductMessageResponse:
        """Create a product."""
        product = self._catalog.create(payload)
        return ProductMessageResponse(message="Product created successfully", data=product)

    def update(self, product_id: str, payload: Dict[str, Any]) -> ProductMessageResponse:
        """Partially update a product."""
        product = self._catalog.update(product_id, payload)
        return ProductMessageResponse(message="Product updated successfully", data=product)

    def delete(self, product_id: str) -> ProductMessageResponse:
        """Delete a product."""
        product = self._catalog.delete(product_id)
        return ProductMessageResponse(message="Product deleted successfully", data=product)


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = Query(None, description="Exact category, case-insensitive"),
    in_stock: Optional[bool] = Query(None, alias="inStock"),
    search: Optional[str] = Query(None, description="Text in name or description"),
    name: Optional[str] = Query(None, description="Alias of search"),
    pagination: PaginationParams = Depends(get_pagination),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """List products with optional filters and pagination."""
    filters = ProductFilters(category=category, in_stock=in_stock, search=search or name)
    return ProductController(catalog).list_products(filters, pagination)


@router.get("/search", response_model=SearchResponse)
async def search_products(
    q: Optional[str] = Query(None, description="Search term"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Search products by name or description."""
    return ProductController(catalog).search(q)


@router.get("/stats", response_model=CatalogStats)
async def get_product_stats(catalog: ProductCatalog = Depends(get_catalog)):
    """Get catalog statistics."""
    return ProductController(catalog).get_stats()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Get a product by id."""
    return ProductController(catalog).get(product_id)


@router.post("", status_code=201, response_model=ProductMessageResponse)
async def create_product(
    payload: Dict[str, Any] = Body(...),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Create a product."""
    return ProductController(catalog).create(payload)


@router.put("/{product_id}", response_model=ProductMessageResponse)
async def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Partially update a product."""
    return ProductController(catalog).update(product_id, payload)


@router.delete("/{product_id}", response_model=ProductMessageResponse)
async def delete_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    """Delete a product."""
    return ProductController(catalog).delete(product_id)
