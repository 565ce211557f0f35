"""
Unit tests for the catalog and EAN aliases.
"""

import pytest

from shopdb.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from shopdb.models import Price
from shopdb.services.alias_service import (
    ean_alias_add,
    ean_alias_get,
    ean_alias_list,
    get_product_aliases,
)
from shopdb.services.catalog_service import (
    add_category,
    get_category_list,
    get_product_amount_with_container_size,
    get_product_category,
    get_product_deprecated,
    get_product_for_ean,
    get_product_name,
    get_productlist,
    get_products,
    new_product,
    product_deprecate,
    product_metadata_get,
    product_metadata_set,
    products_search,
)

EAN13 = 4006381333931
EAN8 = 96385074


class TestAliasResolution:
    """Tests for single-hop alias resolution."""

    def test_resolve_alias_and_canonical(self, session, product):
        """Test an alias resolves to its product and a product to itself."""
        ean_alias_add(session, 4002, product)

        assert ean_alias_get(session, 4002) == 4001
        assert ean_alias_get(session, 4001) == 4001

    def test_resolve_is_idempotent(self, session, product):
        """Test resolving a resolved code changes nothing."""
        ean_alias_add(session, 4002, product)

        once = ean_alias_get(session, 4002)
        assert ean_alias_get(session, once) == once

    def test_unknown_code_resolves_to_itself(self, session):
        """Test a code without alias entry is canonical."""
        assert ean_alias_get(session, 123456) == 123456

    def test_lookups_use_alias(self, session, product):
        """Test product lookups go through the alias table."""
        ean_alias_add(session, 4002, product)

        assert get_product_name(session, 4002) == 'Club Mate'
        assert get_product_for_ean(session, 4002)['ean'] == product


class TestAliasAdd:
    """Tests for the write-boundary checks of ean_alias_add."""

    def test_add_aliases(self, session, product):
        """Test EAN-13, EAN-8 and short in-house codes are accepted."""
        ean_alias_add(session, EAN13, product)
        ean_alias_add(session, EAN8, product)
        ean_alias_add(session, 4002, product)

        assert get_product_aliases(session, product) == [4002, EAN8, EAN13]
        assert ean_alias_list(session) == [
            {'ean': 4002, 'real_ean': product},
            {'ean': EAN8, 'real_ean': product},
            {'ean': EAN13, 'real_ean': product},
        ]

    def test_unknown_target(self, session, product):
        """Test the target product must exist."""
        with pytest.raises(NotFoundError):
            ean_alias_add(session, EAN13, 9999)

    def test_duplicate_alias(self, session, product):
        """Test an alias cannot be registered twice."""
        ean_alias_add(session, EAN13, product)

        with pytest.raises(ConflictError):
            ean_alias_add(session, EAN13, product)

    def test_alias_equal_to_product(self, session, product, category):
        """Test an existing product code cannot become an alias."""
        new_product(session, EAN8, 'Gum', category, 50, 60)

        with pytest.raises(ConflictError):
            ean_alias_add(session, EAN8, product)


class TestProducts:
    """Tests for product creation and lookup."""

    def test_new_product_has_initial_price(self, session, product):
        """Test a new product starts with a price valid from 0."""
        price = session.get(Price, (product, 0))

        assert (price.memberprice, price.guestprice) == (100, 120)

    def test_new_product_duplicate(self, session, product, category):
        """Test creating an existing product is a Conflict."""
        with pytest.raises(ConflictError):
            new_product(session, product, 'Again', category, 1, 1)

    def test_new_product_over_alias(self, session, product, category):
        """Test a code in use as alias cannot become a product."""
        ean_alias_add(session, 4002, product)

        with pytest.raises(ConflictError):
            new_product(session, 4002, 'Shadow', category, 1, 1)

    def test_new_product_unknown_category(self, session):
        """Test the category must exist."""
        with pytest.raises(NotFoundError):
            new_product(session, 4010, 'Orphan', 99, 1, 1)

    def test_product_details(self, session, product):
        """Test the current product view."""
        assert get_product_for_ean(session, product) == {
            'ean': product,
            'name': 'Club Mate',
            'category': 'Drinks',
            'amount': 10,
            'memberprice': 100,
            'guestprice': 120,
        }
        assert get_product_category(session, product) == 'Drinks'

    def test_unknown_product(self, session):
        """Test lookups of missing products are NotFound."""
        with pytest.raises(NotFoundError):
            get_product_name(session, 1234)

    def test_products_and_search(self, session, product, category):
        """Test listing and substring search."""
        new_product(session, 4003, 'Mate 100% Tea', category, 90, 110)

        assert get_products(session) == {4001: 'Club Mate', 4003: 'Mate 100% Tea'}
        assert products_search(session, '100%') == [{'ean': 4003, 'name': 'Mate 100% Tea'}]
        assert len(products_search(session, 'Mate')) == 2

    def test_productlist(self, session, product):
        """Test the full product list carries aliases and prices."""
        ean_alias_add(session, 4002, product)

        entry = get_productlist(session)[0]

        assert entry['aliases'] == [4002]
        assert entry['deprecated'] is False
        assert entry['guestprice'] == 120

    def test_deprecate(self, session, product):
        """Test deprecation can be toggled."""
        product_deprecate(session, product, True)
        assert get_product_deprecated(session, product) is True

        product_deprecate(session, product, False)
        assert get_product_deprecated(session, product) is False


class TestProductMetadata:
    """Tests for product metadata."""

    def test_no_metadata(self, session, product):
        """Test missing metadata is NotFound and container size reads 0."""
        with pytest.raises(NotFoundError):
            product_metadata_get(session, product)
        assert get_product_amount_with_container_size(session, product) == [10, 0]

    def test_set_replaces_metadata(self, session, product):
        """Test setting metadata replaces every field."""
        product_metadata_set(session, product, {'container_size': 20, 'calories': 66})
        product_metadata_set(session, product, {'container_size': 24})

        metadata = product_metadata_get(session, product)
        assert metadata['container_size'] == 24
        assert metadata['calories'] == 0
        assert get_product_amount_with_container_size(session, product) == [10, 24]

    def test_unknown_field(self, session, product):
        """Test unknown metadata fields are rejected."""
        with pytest.raises(InvalidArgumentError):
            product_metadata_set(session, product, {'colour': 'green'})


class TestCategories:
    """Tests for categories."""

    def test_add_category_is_idempotent(self, session):
        """Test adding an existing name returns the existing id."""
        first = add_category(session, 'Snacks')

        assert add_category(session, 'Snacks') == first
        assert get_category_list(session) == [{'id': first, 'name': 'Snacks'}]
