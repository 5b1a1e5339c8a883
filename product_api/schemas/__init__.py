"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Response schemas for the HTTP layer. Mutation payload models live with
the catalog (product_api.catalog.models).

==============================================================================
"""

from .product import (
    ProductListResponse,
    ProductMessageResponse,
    ProductResponse,
    SearchResponse,
)

__all__ = [
    "ProductListResponse",
    "ProductMessageResponse",
    "ProductResponse",
    "SearchResponse",
]
