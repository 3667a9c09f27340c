"""
Product and customer catalog for the InvoiceDesk test organisation.

Option labels embed the price as a readable suffix ("Cake - Rs 875.74"), but
the unit price is held explicitly here and never re-derived from the label.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from invoicedesk.billing.totals import LineItem, round_money
from invoicedesk.common.exceptions import ScenarioSetupError
from invoicedesk.common.types import CustomerLabel, Err, Ok, ProductLabel, Result

logger = logging.getLogger(__name__)

_LABEL_PRICE_PATTERN = re.compile(r"^(?P<name>.+?)\s+-\s+Rs\s+(?P<price>\d+(?:\.\d+)?)$")


@dataclass(frozen=True)
class Product:
    """A product option in the invoice item dropdown"""

    label: ProductLabel
    unit_price: Decimal

    @property
    def name(self) -> str:
        return self.label.split(" - ", 1)[0]


def price_from_label(label: str) -> Result[Decimal, str]:
    """Read the "Rs 875.74" suffix of a product label."""
    match = _LABEL_PRICE_PATTERN.match(label.strip())
    if not match:
        return Err(f"Label has no price suffix: {label!r}")
    return Ok(Decimal(match.group("price")))


class ProductCatalog:
    """Explicit label -> unit price mapping used to compute expected totals."""

    def __init__(self, products: Iterable[Product]):
        self._products: dict[ProductLabel, Product] = {}
        for product in products:
            if product.label in self._products:
                raise ValueError(f"Duplicate product label: {product.label!r}")
            self._products[product.label] = product

    @classmethod
    def from_prices(cls, prices: Mapping[ProductLabel, Decimal | str | int | float]) -> ProductCatalog:
        return cls(Product(label, round_money(price)) for label, price in prices.items())

    def __contains__(self, label: object) -> bool:
        return label in self._products

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)

    @property
    def labels(self) -> tuple[ProductLabel, ...]:
        return tuple(self._products)

    def get(self, label: ProductLabel) -> Product:
        """
        Look up a product by its full option label.

        Raises:
            ScenarioSetupError: if the catalog has no such product
        """
        try:
            return self._products[label]
        except KeyError:
            known = ", ".join(repr(known_label) for known_label in self._products)
            raise ScenarioSetupError(
                "resolve_product", f"Unknown product {label!r} (catalog has: {known})"
            ) from None

    def unit_price(self, label: ProductLabel) -> Decimal:
        return self.get(label).unit_price

    def line_item(self, label: ProductLabel, quantity: int) -> LineItem:
        product = self.get(label)
        return LineItem(product.unit_price, quantity, product.name)

    def verify_labels(self) -> list[str]:
        """Return a problem description for every label whose suffix disagrees with its price."""
        problems = []
        for product in self:
            result = price_from_label(product.label)
            if result.is_err():
                problems.append(result.unwrap_err())
            elif round_money(result.unwrap()) != product.unit_price:
                problems.append(
                    f"{product.label!r}: label says {result.unwrap()}, catalog holds {product.unit_price}"
                )
        for problem in problems:
            logger.warning(f"⚠️ [Catalog] {problem}")
        return problems


# ===============================================================================
# TEST ORGANISATION DATA
# ===============================================================================

ICE_CREAM: ProductLabel = "Ice Cream - Rs 1200.00"
CAKE: ProductLabel = "Cake - Rs 875.74"

PRODUCT_PRICES: Mapping[ProductLabel, Decimal] = MappingProxyType({
    ICE_CREAM: Decimal("1200.00"),
    CAKE: Decimal("875.74"),
})

SHIHARA: CustomerLabel = "Shihara Wickramasinghe (LKR)"
DEFAULT_CUSTOMER: CustomerLabel = SHIHARA

DEFAULT_CATALOG = ProductCatalog.from_prices(PRODUCT_PRICES)
