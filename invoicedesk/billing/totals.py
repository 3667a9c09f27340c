"""
Invoice Totals Engine for InvoiceDesk E2E

Single source of truth for subtotal / discount / VAT / grand total arithmetic
and for the "Rs 0.00" display format the application renders.

All amounts are carried at full precision and rounded to two decimals only
at the end, each figure independently, with ROUND_HALF_UP.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from invoicedesk.common.exceptions import InvalidInputError
from invoicedesk.common.types import DisplayAmount, Err, Ok, Result

logger = logging.getLogger(__name__)

CURRENCY_PREFIX = "Rs "
CENTS = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")

_AMOUNT_PATTERN = re.compile(r"^\s*(?:Rs\.?)?\s*(-?[\d,]*\.?\d+)\s*$")

Number = Decimal | int | float | str


def to_decimal(value: Number, field: str = "value") -> Decimal:
    """Convert to Decimal, going through str() so 875.74 stays 875.74."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidInputError(field, f"expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidInputError(field, f"not a number: {value!r}") from e


def round_money(value: Number) -> Decimal:
    """Round to 2 decimals, halves away from zero."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Number) -> DisplayAmount:
    """Render an amount the way the invoice form shows it: ``Rs 1416.00``."""
    return f"{CURRENCY_PREFIX}{round_money(amount):.2f}"


def parse_currency(text: str) -> Result[Decimal, str]:
    """Parse ``Rs 1,416.00`` (or a bare number) back into a Decimal."""
    if not text:
        return Err("Empty amount")

    match = _AMOUNT_PATTERN.match(text)
    if not match:
        return Err(f"Not a currency amount: {text!r}")

    try:
        return Ok(Decimal(match.group(1).replace(",", "")))
    except InvalidOperation:
        return Err(f"Not a currency amount: {text!r}")


@dataclass(frozen=True)
class LineItem:
    """One product/quantity row on an invoice"""

    unit_price: Decimal
    quantity: int
    description: str = ""

    @classmethod
    def of(cls, unit_price: Number, quantity: int, description: str = "") -> LineItem:
        return cls(to_decimal(unit_price, "unit_price"), quantity, description)

    @property
    def amount(self) -> Decimal:
        return to_decimal(self.unit_price, "unit_price") * self.quantity


@dataclass(frozen=True)
class InvoiceTotals:
    """Derived invoice figures, already rounded for display"""

    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    grand_total: Decimal

    @property
    def taxable_base(self) -> Decimal:
        """
        Displayed base: rounded subtotal minus rounded discount.

        VAT is computed on the unrounded base, so with a discount this can be
        0.01 away from the amount ``tax_amount`` was derived from.
        """
        return self.subtotal - self.discount_amount

    def formatted(self) -> dict[str, DisplayAmount]:
        return {
            "subtotal": format_currency(self.subtotal),
            "discount": format_currency(self.discount_amount),
            "tax": format_currency(self.tax_amount),
            "grand_total": format_currency(self.grand_total),
        }


def _validate_items(items: list[LineItem]) -> None:
    for index, item in enumerate(items):
        price = to_decimal(item.unit_price, f"items[{index}].unit_price")
        if price < ZERO:
            raise InvalidInputError(f"items[{index}].unit_price", f"must be non-negative, got {price}")
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
            raise InvalidInputError(f"items[{index}].quantity", f"must be an integer, got {item.quantity!r}")
        if item.quantity < 0:
            raise InvalidInputError(f"items[{index}].quantity", f"must be non-negative, got {item.quantity}")


def compute_totals(
    items: Iterable[LineItem],
    tax_rate_percent: Number,
    discount_percent: Number = 0,
) -> InvoiceTotals:
    """
    Compute invoice totals from line items.

    Args:
        items: Line items (may be empty)
        tax_rate_percent: VAT rate as a percentage, e.g. 18 or 8.5
        discount_percent: Discount as a percentage of the subtotal

    Returns:
        InvoiceTotals with each amount rounded independently to 2 decimals

    Raises:
        InvalidInputError: on a negative price, quantity or rate
    """
    items = list(items)
    _validate_items(items)

    tax_rate = to_decimal(tax_rate_percent, "tax_rate_percent")
    discount = to_decimal(discount_percent, "discount_percent")
    if tax_rate < ZERO:
        raise InvalidInputError("tax_rate_percent", f"must be non-negative, got {tax_rate}")
    if discount < ZERO:
        raise InvalidInputError("discount_percent", f"must be non-negative, got {discount}")

    subtotal = sum((item.amount for item in items), ZERO)
    discount_amount = subtotal * discount / HUNDRED
    taxable_base = subtotal - discount_amount
    tax_amount = taxable_base * tax_rate / HUNDRED
    grand_total = taxable_base + tax_amount

    totals = InvoiceTotals(
        subtotal=round_money(subtotal),
        tax_rate=tax_rate,
        tax_amount=round_money(tax_amount),
        discount_percentage=discount,
        discount_amount=round_money(discount_amount),
        grand_total=round_money(grand_total),
    )
    logger.debug(
        f"💰 [Totals] {len(items)} items @ {tax_rate}% VAT, {discount}% discount → "
        f"subtotal={totals.subtotal} tax={totals.tax_amount} total={totals.grand_total}"
    )
    return totals
