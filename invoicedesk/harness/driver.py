"""
UI collaborator contract for the verification harness.

The harness only ever talks to the invoice form through this protocol, so
scenario logic can be exercised against a fake in unit tests and against a
real browser in the e2e suite.

Totals are recalculated asynchronously after a field loses focus, so the
harness calls ``settle_totals`` with what it expects before reading anything
back; the reads then only describe the final state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable

from invoicedesk.common.types import CustomerLabel, DisplayAmount, ProductLabel


@runtime_checkable
class UIDriver(Protocol):
    """Operations the invoice creation form exposes to the harness"""

    def select_customer(self, name: CustomerLabel) -> None: ...

    def add_item(self, product_label: ProductLabel, quantity: int) -> None: ...

    def set_tax_rate(self, percent: Decimal | int | float) -> None: ...

    def settle_totals(self, expected: Mapping[str, DisplayAmount], tax_hidden: bool) -> bool:
        """Wait until the totals show ``expected`` (or the wait runs out); True when they do."""
        ...

    def get_displayed_subtotal(self) -> DisplayAmount: ...

    def get_displayed_tax(self) -> DisplayAmount: ...

    def get_displayed_grand_total(self) -> DisplayAmount: ...

    def is_tax_visible(self) -> bool: ...

    def save(self) -> None: ...


@dataclass(frozen=True)
class DisplayPolicy:
    """
    How the form renders totals.

    ``hide_zero_tax``: the VAT line is omitted when VAT is zero, so a
    "Rs 0.00" expectation is checked as "tax line not visible".
    """

    hide_zero_tax: bool = True
    zero_amount: DisplayAmount = "Rs 0.00"

    def expects_hidden_tax(self, expected_tax: DisplayAmount) -> bool:
        return self.hide_zero_tax and expected_tax == self.zero_amount
