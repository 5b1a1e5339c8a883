"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides isolated settings, catalog, client and header fixtures. Every test
gets its own catalog instance; no state is shared between tests.

==============================================================================
"""

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient

from product_api.catalog import DEFAULT_PRODUCTS, ProductCatalog
from product_api.config import Settings
from product_api.main import Application


TEST_API_KEY = "test-api-key-0123456789"


# ============================================================================
# SETTINGS & CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    """Test settings independent of the process environment and .env."""
    return Settings(
        _env_file=None,
        app_env="test",
        api_key=TEST_API_KEY,
        port=3000,
        api_prefix="/api",
        default_page_limit=10,
        max_page_limit=100,
        seed_products=False,
    )


@pytest.fixture
def catalog() -> ProductCatalog:
    """Catalog seeded with the Laptop and Coffee Mug sample products."""
    return ProductCatalog(DEFAULT_PRODUCTS)


@pytest.fixture
def empty_catalog() -> ProductCatalog:
    """Catalog with no products."""
    return ProductCatalog()


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def client(settings: Settings, catalog: ProductCatalog) -> Generator[TestClient, None, None]:
    """Test client bound to a fresh application and the seeded catalog."""
    application = Application(settings=settings, catalog=catalog)
    with TestClient(application.app) as test_client:
        yield test_client


@pytest.fixture
def empty_client(settings: Settings, empty_catalog: ProductCatalog) -> Generator[TestClient, None, None]:
    """Test client bound to an empty catalog."""
    application = Application(settings=settings, catalog=empty_catalog)
    with TestClient(application.app) as test_client:
        yield test_client


# ============================================================================
# HEADER FIXTURES
# ============================================================================

@pytest.fixture
def api_headers() -> Dict[str, str]:
    """Headers carrying the valid API key."""
    return {"x-api-key": TEST_API_KEY}


@pytest.fixture
def wrong_key_headers() -> Dict[str, str]:
    """Headers carrying an invalid API key."""
    return {"x-api-key": "not-the-right-key"}
