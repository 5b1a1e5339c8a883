"""
==============================================================================
Product Catalog Tests
==============================================================================

Unit tests for ProductCatalog query and mutation behaviour.

==============================================================================
"""

import itertools

import pytest

from product_api.catalog import ProductCatalog, ProductFilters
from product_api.core.exceptions import AppException, ErrorKind


def _product(name, price=10.0, category="General", in_stock=False, description=""):
    return {
        "name": name,
        "price": price,
        "category": category,
        "inStock": in_stock,
        "description": description,
    }


@pytest.fixture
def mixed_catalog() -> ProductCatalog:
    """23 products across three categories with alternating stock."""
    categories = ["Books", "Garden", "Toys"]
    return ProductCatalog(
        _product(
            f"Item {i:02d}",
            price=float(i),
            category=categories[i % 3],
            in_stock=i % 2 == 0,
            description="blue widget" if i % 4 == 0 else "plain",
        )
        for i in range(23)
    )


class TestListProducts:
    """Tests for filtering and pagination."""

    def test_category_filter(self, catalog: ProductCatalog):
        """Test category filter returns only the mug."""
        page = catalog.list_products(ProductFilters(category="Kitchen"))
        assert page.total_matching == 1
        assert [p.name for p in page.items] == ["Coffee Mug"]

    def test_category_filter_is_case_insensitive(self, catalog: ProductCatalog):
        """Test category matching ignores case."""
        page = catalog.list_products(ProductFilters(category="kitchen"))
        assert [p.name for p in page.items] == ["Coffee Mug"]

    def test_no_filters_preserves_insertion_order(self, catalog: ProductCatalog):
        """Test unfiltered listing keeps catalog order."""
        page = catalog.list_products()
        assert [p.name for p in page.items] == ["Laptop", "Coffee Mug"]

    def test_in_stock_filter(self, mixed_catalog: ProductCatalog):
        """Test stock filter."""
        page = mixed_catalog.list_products(ProductFilters(in_stock=False), limit=100)
        assert page.total_matching == 11
        assert all(not p.in_stock for p in page.items)

    def test_search_filter_matches_description(self, mixed_catalog: ProductCatalog):
        """Test search filter looks at descriptions too."""
        page = mixed_catalog.list_products(ProductFilters(search="BLUE"), limit=100)
        assert [p.name for p in page.items] == ["Item 00", "Item 04", "Item 08", "Item 12", "Item 16", "Item 20"]

    def test_blank_search_filter_is_ignored(self, catalog: ProductCatalog):
        """Test a blank search string does not filter."""
        page = catalog.list_products(ProductFilters(search="   "))
        assert page.total_matching == 2

    def test_pages_reconstruct_filtered_sequence(self, mixed_catalog: ProductCatalog):
        """Test concatenated pages equal the full filtered sequence."""
        filters = ProductFilters(in_stock=True)
        everything = mixed_catalog.list_products(filters, limit=1000).items

        collected = []
        page_number = 1
        while True:
            page = mixed_catalog.list_products(filters, page=page_number, limit=5)
            assert len(page.items) <= 5
            if not page.items:
                break
            collected.extend(page.items)
            page_number += 1

        assert [p.id for p in collected] == [p.id for p in everything]
        assert len({p.id for p in collected}) == len(collected)

    def test_page_info(self, mixed_catalog: ProductCatalog):
        """Test page metadata."""
        page = mixed_catalog.list_products(page=2, limit=5)
        info = page.page_info
        assert info.current_page == 2
        assert info.total_pages == 5
        assert info.total_items == 23
        assert info.items_per_page == 5
        assert info.has_next is True
        assert info.has_prev is True

        last = mixed_catalog.list_products(page=5, limit=5)
        assert len(last.items) == 3
        assert last.page_info.has_next is False

    def test_out_of_range_page_is_empty(self, catalog: ProductCatalog):
        """Test pages past the end yield no items instead of failing."""
        page = catalog.list_products(page=9, limit=10)
        assert page.items == []
        assert page.total_matching == 2
        assert page.page_info.total_pages == 1

    def test_empty_catalog_has_zero_pages(self, empty_catalog: ProductCatalog):
        """Test empty catalog page metadata."""
        page = empty_catalog.list_products()
        assert page.page_info.total_pages == 0
        assert page.page_info.has_next is False
        assert page.page_info.has_prev is False

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5)])
    def test_invalid_page_or_limit(self, catalog: ProductCatalog, page: int, limit: int):
        """Test non-positive page/limit are rejected."""
        with pytest.raises(AppException) as exc_info:
            catalog.list_products(page=page, limit=limit)
        assert exc_info.value.kind is ErrorKind.INVALID_ARGUMENT

    def test_filters_commute(self, mixed_catalog: ProductCatalog):
        """Test applying the filters in any order gives the same result."""
        filters = ProductFilters(category="books", in_stock=True, search="item")
        expected = [p.id for p in mixed_catalog.list_products(filters, limit=1000).items]
        assert expected

        for ordering in itertools.permutations(filters.predicates()):
            remaining = mixed_catalog.products
            for check in ordering:
                remaining = [p for p in remaining if check(p)]
            assert [p.id for p in remaining] == expected


class TestSearch:
    """Tests for text search."""

    def test_search_by_name(self, catalog: ProductCatalog):
        """Test partial, case-insensitive name match."""
        assert [p.name for p in catalog.search("lap")] == ["Laptop"]
        assert [p.name for p in catalog.search("MUG")] == ["Coffee Mug"]

    def test_search_by_description(self, catalog: ProductCatalog):
        """Test description match."""
        assert [p.name for p in catalog.search("ceramic")] == ["Coffee Mug"]

    def test_search_without_matches(self, catalog: ProductCatalog):
        """Test search returning nothing."""
        assert catalog.search("bicycle") == []

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_blank_term_is_rejected(self, catalog: ProductCatalog, term):
        """Test blank terms never match everything."""
        with pytest.raises(AppException) as exc_info:
            catalog.search(term)
        assert exc_info.value.kind is ErrorKind.INVALID_ARGUMENT


class TestStats:
    """Tests for catalog statistics."""

    def test_seeded_stats(self, catalog: ProductCatalog):
        """Test stats over the sample products."""
        stats = catalog.stats()
        assert stats.total_count == 2
        assert stats.in_stock_count == 2
        assert stats.out_of_stock_count == 0
        assert stats.categories == {"Electronics": 1, "Kitchen": 1}
        assert stats.price_stats.lowest == 12.99
        assert stats.price_stats.highest == 1299.99
        assert stats.price_stats.average == pytest.approx((1299.99 + 12.99) / 2)

    def test_empty_stats_have_no_prices(self, empty_catalog: ProductCatalog):
        """Test empty catalog reports null price stats."""
        stats = empty_catalog.stats()
        assert stats.total_count == 0
        assert stats.categories == {}
        assert stats.price_stats.lowest is None
        assert stats.price_stats.highest is None
        assert stats.price_stats.average is None

    def test_categories_group_case_sensitively(self, empty_catalog: ProductCatalog):
        """Test category counts use the literal label."""
        empty_catalog.create(_product("A", category="Kitchen"))
        empty_catalog.create(_product("B", category="kitchen"))
        assert empty_catalog.stats().categories == {"Kitchen": 1, "kitchen": 1}

    def test_counts_are_consistent(self, mixed_catalog: ProductCatalog):
        """Test stock and category counts add up to the total."""
        stats = mixed_catalog.stats()
        assert stats.in_stock_count + stats.out_of_stock_count == stats.total_count
        assert sum(stats.categories.values()) == stats.total_count


class TestCreate:
    """Tests for product creation."""

    def test_create_and_get_round_trip(self, empty_catalog: ProductCatalog):
        """Test created product is retrievable unchanged."""
        created = empty_catalog.create(_product("Desk", price=150, category="Office", in_stock=True))
        fetched = empty_catalog.get_product(created.id)

        assert fetched == created
        assert fetched.name == "Desk"
        assert fetched.price == 150.0
        assert fetched.category == "Office"
        assert fetched.in_stock is True
        assert fetched.created_at == fetched.updated_at

    def test_create_appends_to_end(self, catalog: ProductCatalog):
        """Test new products go to the end of the sequence."""
        catalog.create(_product("Desk"))
        assert [p.name for p in catalog.products] == ["Laptop", "Coffee Mug", "Desk"]

    def test_optional_field_defaults(self, empty_catalog: ProductCatalog):
        """Test description and inStock defaults."""
        product = empty_catalog.create({"name": "Lamp", "price": 20, "category": "Home"})
        assert product.description == ""
        assert product.in_stock is False

    def test_missing_required_fields(self, empty_catalog: ProductCatalog):
        """Test every missing required field is reported."""
        with pytest.raises(AppException) as exc_info:
            empty_catalog.create({"name": "Desk"})

        exc = exc_info.value
        assert exc.kind is ErrorKind.VALIDATION_ERROR
        assert exc.status_code == 400
        assert {problem["field"] for problem in exc.details} == {"price", "category"}
        assert len(empty_catalog) == 0

    @pytest.mark.parametrize("fields,bad_field", [
        ({"name": "Desk", "price": -1, "category": "Office"}, "price"),
        ({"name": "Desk", "price": "12", "category": "Office"}, "price"),
        ({"name": "   ", "price": 1, "category": "Office"}, "name"),
        ({"name": "Desk", "price": 1, "category": ""}, "category"),
        ({"name": "Desk", "price": 1, "category": "Office", "inStock": "true"}, "inStock"),
    ])
    def test_invalid_fields(self, empty_catalog: ProductCatalog, fields, bad_field):
        """Test type and range checks."""
        with pytest.raises(AppException) as exc_info:
            empty_catalog.create(fields)
        assert [problem["field"] for problem in exc_info.value.details] == [bad_field]

    def test_server_assigned_fields_are_ignored(self, empty_catalog: ProductCatalog):
        """Test clients cannot choose id or timestamps."""
        product = empty_catalog.create({
            "id": "mine",
            "createdAt": "2000-01-01T00:00:00Z",
            "name": "Desk",
            "price": 1,
            "category": "Office",
        })
        assert product.id != "mine"
        assert product.created_at.year != 2000

    def test_ids_are_unique(self, empty_catalog: ProductCatalog):
        """Test ids stay unique across creates and deletes."""
        seen = set()
        for i in range(50):
            product = empty_catalog.create(_product(f"P{i}"))
            assert product.id not in seen
            seen.add(product.id)
            if i % 3 == 0:
                empty_catalog.delete(product.id)

        live = [p.id for p in empty_catalog.products]
        assert len(live) == len(set(live))


class TestUpdate:
    """Tests for partial updates."""

    def test_partial_update(self, catalog: ProductCatalog):
        """Test only supplied fields change."""
        laptop = catalog.products[0]
        updated = catalog.update(laptop.id, {"price": 999.0, "inStock": False})

        assert updated.price == 999.0
        assert updated.in_stock is False
        assert updated.name == laptop.name
        assert updated.description == laptop.description
        assert updated.id == laptop.id
        assert updated.created_at == laptop.created_at
        assert updated.updated_at >= laptop.updated_at
        assert updated.updated_at >= updated.created_at
        assert catalog.get_product(laptop.id) == updated

    def test_update_keeps_position(self, catalog: ProductCatalog):
        """Test updates do not reorder the catalog."""
        laptop = catalog.products[0]
        catalog.update(laptop.id, {"name": "Gaming Laptop"})
        assert [p.name for p in catalog.products] == ["Gaming Laptop", "Coffee Mug"]

    def test_immutable_fields_are_ignored(self, catalog: ProductCatalog):
        """Test id and createdAt cannot be changed."""
        laptop = catalog.products[0]
        updated = catalog.update(laptop.id, {"id": "other", "createdAt": "2000-01-01T00:00:00Z"})
        assert updated.id == laptop.id
        assert updated.created_at == laptop.created_at

    def test_update_unknown_id(self, catalog: ProductCatalog):
        """Test updating a missing product fails with NotFound."""
        with pytest.raises(AppException) as exc_info:
            catalog.update("nonexistent-id", {"price": 5})
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_update_rejects_invalid_values(self, catalog: ProductCatalog):
        """Test invalid and null values are rejected without changes."""
        laptop = catalog.products[0]
        with pytest.raises(AppException) as exc_info:
            catalog.update(laptop.id, {"price": -5, "name": None})

        assert exc_info.value.kind is ErrorKind.VALIDATION_ERROR
        assert {problem["field"] for problem in exc_info.value.details} == {"price", "name"}
        assert catalog.get_product(laptop.id) == laptop


class TestDelete:
    """Tests for deletion."""

    def test_delete_returns_removed_product(self, catalog: ProductCatalog):
        """Test delete removes and returns the record."""
        mug = catalog.products[1]
        deleted = catalog.delete(mug.id)
        assert deleted == mug
        assert mug.id not in catalog
        assert len(catalog) == 1

    def test_delete_twice(self, catalog: ProductCatalog):
        """Test second delete of the same id fails with NotFound."""
        mug = catalog.products[1]
        catalog.delete(mug.id)
        with pytest.raises(AppException) as exc_info:
            catalog.delete(mug.id)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_get_after_delete(self, catalog: ProductCatalog):
        """Test deleted products are absent."""
        mug = catalog.products[1]
        catalog.delete(mug.id)
        with pytest.raises(AppException):
            catalog.get_product(mug.id)
