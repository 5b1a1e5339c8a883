"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the API-key gate, the catalog and pagination.

This module implements:
- ApiKeyAuthenticator: shared-secret check of the x-api-key header
- require_api_key: FastAPI dependency protecting the products routes
- get_catalog: hands the application's ProductCatalog to handlers
- PaginationParams: page / limit query parameters

Dependency Hierarchy:
--------------------
                    ┌─────────────────┐
                    │ get_settings()  │
                    └────────┬────────┘
                             │
                    ┌────────▼────────┐
                    │ require_api_key │
                    └────────┬────────┘
                             │
                    ┌────────▼────────┐
                    │  get_catalog    │
                    └─────────────────┘

Usage Examples:
--------------
    router = APIRouter(dependencies=[Depends(require_api_key)])

    @router.get("/products")
    async def list_products(catalog: ProductCatalog = Depends(get_catalog)):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import APIKeyHeader

from product_api.config import Settings, get_settings
from product_api.core import exceptions


# Module logger
logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"

# Header scheme for Swagger UI; missing keys are reported by the authenticator
api_key_scheme = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


class ApiKeyAuthenticator:
    """
    Validates the static shared-secret header.

    Attributes:
        _expected_key: The configured API key

    Example:
        >>> auth = ApiKeyAuthenticator("s3cret")
        >>> auth.authenticate("s3cret")
        >>> auth.authenticate(None)
        Traceback (most recent call last):
        ...
        AppException: ...
    """

    def __init__(self, expected_key: str) -> None:
        self._expected_key = expected_key

    def authenticate(self, provided_key: Optional[str]) -> None:
        """
        Check a provided key against the configured one.

        Args:
            provided_key: Raw header value (None when absent)

        Raises:
            AppException: UNAUTHORIZED if no key was sent,
                FORBIDDEN if the key does not match
        """
        if not provided_key:
            logger.debug("No API key provided")
            raise exceptions.missing_api_key()

        if not secrets.compare_digest(provided_key.encode(), self._expected_key.encode()):
            logger.debug("API key mismatch")
            raise exceptions.invalid_api_key()


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def require_api_key(
    api_key: Optional[str] = Depends(api_key_scheme),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """
    FastAPI dependency enforcing the x-api-key header.

    Raises:
        AppException: If the key is missing (401) or wrong (403)
    """
    ApiKeyAuthenticator(settings.api_key).authenticate(api_key)


def get_catalog(request: Request):
    """
    FastAPI dependency returning the application's catalog instance.

    Raises:
        AppException: INTERNAL if the application was started without one
    """
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise exceptions.internal_error("Product catalog not initialized")
    return catalog


class PaginationParams:
    """
    Page / limit query parameters.

    Attributes:
        page: 1-based page number
        limit: Items per page
    """

    def __init__(self, page: int, limit: int) -> None:
        self.page = page
        self.limit = limit

    def __repr__(self) -> str:
        return f"PaginationParams(page={self.page}, limit={self.limit})"


def get_pagination(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    settings: Settings = Depends(get_app_settings),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    The page size defaults to ``default_page_limit`` and is capped by
    ``max_page_limit``.

    Raises:
        AppException: INVALID_ARGUMENT if limit exceeds the configured cap
    """
    if limit is None:
        limit = settings.default_page_limit
    elif limit > settings.max_page_limit:
        raise exceptions.invalid_argument(
            f"limit cannot exceed {settings.max_page_limit}",
            {"limit": limit}
        )
    return PaginationParams(page=page, limit=limit)
