"""
==============================================================================
API Endpoints
==============================================================================

Routers:
--------
- health: Health check endpoints
- products: Product catalog CRUD, search and stats

==============================================================================
"""

from . import health, products

__all__ = ["health", "products"]
