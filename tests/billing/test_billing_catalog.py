# ===============================================================================
# PRODUCT CATALOG TESTS
# ===============================================================================

from decimal import Decimal

import pytest

from invoicedesk.billing.catalog import (
    CAKE,
    DEFAULT_CATALOG,
    ICE_CREAM,
    PRODUCT_PRICES,
    Product,
    ProductCatalog,
    price_from_label,
)
from invoicedesk.billing.totals import LineItem
from invoicedesk.common.exceptions import ScenarioSetupError


class TestProductCatalog:
    """Explicit label → unit price mapping"""

    def test_default_prices(self):
        assert DEFAULT_CATALOG.unit_price(ICE_CREAM) == Decimal("1200.00")
        assert DEFAULT_CATALOG.unit_price(CAKE) == Decimal("875.74")

    def test_labels_and_membership(self):
        assert DEFAULT_CATALOG.labels == (ICE_CREAM, CAKE)
        assert ICE_CREAM in DEFAULT_CATALOG
        assert "Tea - Rs 10.00" not in DEFAULT_CATALOG
        assert len(DEFAULT_CATALOG) == 2

    def test_unknown_product_is_a_setup_failure(self):
        with pytest.raises(ScenarioSetupError) as exc_info:
            DEFAULT_CATALOG.get("Tea - Rs 10.00")

        assert exc_info.value.step == "resolve_product"
        assert "Tea - Rs 10.00" in str(exc_info.value)

    def test_line_item_uses_held_price(self):
        item = DEFAULT_CATALOG.line_item(CAKE, 3)
        assert item == LineItem(Decimal("875.74"), 3, "Cake")

    def test_product_name(self):
        assert Product(ICE_CREAM, Decimal("1200.00")).name == "Ice Cream"

    def test_duplicate_labels_rejected(self):
        with pytest.raises(ValueError, match="Duplicate product label"):
            ProductCatalog([Product(CAKE, Decimal("1")), Product(CAKE, Decimal("2"))])

    def test_from_prices_rounds_to_cents(self):
        catalog = ProductCatalog.from_prices({"Tea - Rs 10.00": "10"})
        assert catalog.unit_price("Tea - Rs 10.00") == Decimal("10.00")

    def test_prices_mapping_is_read_only(self):
        with pytest.raises(TypeError):
            PRODUCT_PRICES["Tea"] = Decimal("1")  # type: ignore[index]


class TestLabelCrossCheck:
    """The price suffix is informational and only cross-checked"""

    def test_price_from_label(self):
        assert price_from_label(CAKE).unwrap() == Decimal("875.74")
        assert price_from_label("Cake").is_err()

    def test_default_catalog_labels_agree(self):
        assert DEFAULT_CATALOG.verify_labels() == []

    def test_disagreeing_label_reported(self):
        catalog = ProductCatalog.from_prices({"Tea - Rs 10.00": "12.00", "Coffee": "3"})
        problems = catalog.verify_labels()

        assert len(problems) == 2
        assert "catalog holds 12.00" in problems[0]
        assert "no price suffix" in problems[1]
