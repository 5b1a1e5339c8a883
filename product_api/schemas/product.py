"""
==============================================================================
Product Schemas Module
==============================================================================

Response envelopes for the products API.

==============================================================================
"""

from typing import Any, Dict, List

from product_api.catalog.models import CamelModel, PageInfo, Product, ProductPage


class ProductResponse(CamelModel):
    """Single product response."""
    data: Product


class ProductMessageResponse(ProductResponse):
    """Single product with a confirmation message (create/update/delete)."""
    message: str


class ProductListResponse(CamelModel):
    """Paginated product list with the filters that produced it."""
    data: List[Product]
    pagination: PageInfo
    filters: Dict[str, Any]

    @classmethod
    def from_page(cls, page: ProductPage, filters: Dict[str, Any]) -> "ProductListResponse":
        return cls(data=page.items, pagination=page.page_info, filters=filters)


class SearchResponse(CamelModel):
    """Unpaginated search results."""
    data: List[Product]
    search_term: str
    total_results: int
