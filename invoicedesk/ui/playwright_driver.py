"""
Playwright implementation of the invoice form driver.

Wraps the /invoices/create page. Every Playwright error and failed wait is
translated into the suite's error taxonomy here and nowhere else, so the
harness never sees a raw Playwright exception.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page, expect
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from invoicedesk.common.exceptions import (
    InvoiceDeskError,
    ScenarioSetupError,
    UICollaboratorError,
    UICollaboratorTimeoutError,
)
from invoicedesk.common.types import CustomerLabel, DisplayAmount, ProductLabel

if TYPE_CHECKING:
    from config.settings import E2ESettings

logger = logging.getLogger(__name__)

CREATE_INVOICE_PATH = "/invoices/create"
INVOICES_PATH = "/invoices"

DEFAULT_TIMEOUT_MS = 10_000


class PlaywrightInvoiceDriver:
    """UIDriver for the live "Create Invoice" form"""

    def __init__(self, page: Page, base_url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self.page = page
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms

        self.heading = page.get_by_role("heading", name="Create Invoice", level=1)
        self.customer_dropdown = page.get_by_role("combobox").first
        self.invoice_number_input = page.get_by_placeholder("INV-0001")
        self.issue_date_input = page.locator("div.form-group", has_text="Issue Date").locator('input[type="date"]')
        self.due_date_input = page.locator("div.form-group", has_text="Due Date").locator('input[type="date"]')
        self.add_item_button = page.get_by_role("button", name="Add Item")
        self.items_table_body = page.locator("table tbody")
        self.vat_rate_input = page.get_by_role("spinbutton").first

        self.totals_section = page.get_by_role("heading", name="Totals Summary").locator("..")
        self.subtotal_value = self.totals_section.locator("span.total-value").nth(0)
        self.vat_value = self.totals_section.locator('//div[2]/span[@class="total-value"]')
        self.grand_total_value = self.totals_section.locator('//span[@class="grand-total-value"]')

        self.save_button = page.get_by_role("button", name="Save Invoice")
        self.cancel_button = page.get_by_role("button", name="Cancel")

    @classmethod
    def from_settings(cls, page: Page, settings: E2ESettings) -> PlaywrightInvoiceDriver:
        return cls(page, settings.base_url, timeout_ms=settings.default_timeout_ms)

    # ===============================================================================
    # NAVIGATION
    # ===============================================================================

    def goto(self) -> None:
        with self._step("goto"):
            logger.info(f"🔗 [InvoiceForm] Opening {self.base_url}{CREATE_INVOICE_PATH}")
            self.page.goto(f"{self.base_url}{CREATE_INVOICE_PATH}")

    def wait_for_page_load(self) -> None:
        with self._step("wait_for_page_load"):
            expect(self.heading).to_be_visible(timeout=self.timeout_ms)

    def open(self) -> PlaywrightInvoiceDriver:
        """Navigate to the form and wait until it is ready."""
        self.goto()
        self.wait_for_page_load()
        return self

    # ===============================================================================
    # UIDriver OPERATIONS
    # ===============================================================================

    def select_customer(self, name: CustomerLabel) -> None:
        with self._step("select_customer"):
            self._require_option(self.customer_dropdown, name, "select_customer", "customer")
            self.customer_dropdown.select_option(label=name)
            expect(self.add_item_button).to_be_enabled(timeout=self.timeout_ms)

    def add_item(self, product_label: ProductLabel, quantity: int = 1) -> None:
        with self._step("add_item"):
            self.add_item_button.click()
            row = self.items_table_body.get_by_role("row").last
            product_dropdown = row.get_by_role("combobox")
            self._require_option(product_dropdown, product_label, "add_item", "product")
            product_dropdown.select_option(label=product_label)
            if quantity != 1:
                self._fill_and_blur(row.get_by_role("spinbutton"), quantity)

    def set_tax_rate(self, percent: Decimal | int | float) -> None:
        with self._step("set_tax_rate"):
            self._fill_and_blur(self.vat_rate_input, percent)

    def settle_totals(self, expected: Mapping[str, DisplayAmount], tax_hidden: bool) -> bool:
        """
        Wait for the recalculated totals to show the expected strings.

        An expectation that never comes true is not an error here; the reads
        that follow report what the form ended up showing.
        """
        with self._step("read_totals"):
            try:
                expect(self.subtotal_value).to_have_text(expected["subtotal"], timeout=self.timeout_ms)
                if tax_hidden:
                    expect(self.vat_value).not_to_be_visible(timeout=self.timeout_ms)
                else:
                    expect(self.vat_value).to_have_text(expected["tax"], timeout=self.timeout_ms)
                expect(self.grand_total_value).to_have_text(expected["grand_total"], timeout=self.timeout_ms)
            except AssertionError as e:
                logger.info(f"🔎 [InvoiceForm] Totals did not settle on {dict(expected)}: {str(e).splitlines()[0]}")
                return False
        return True

    def get_displayed_subtotal(self) -> DisplayAmount:
        return self._read("read_totals", self.subtotal_value)

    def get_displayed_tax(self) -> DisplayAmount:
        return self._read("read_totals", self.vat_value)

    def get_displayed_grand_total(self) -> DisplayAmount:
        return self._read("read_totals", self.grand_total_value)

    def is_tax_visible(self) -> bool:
        with self._step("read_totals"):
            return self.vat_value.is_visible()

    def save(self) -> None:
        with self._step("save"):
            expect(self.save_button).to_be_enabled(timeout=self.timeout_ms)
            self.save_button.click()
            self.page.wait_for_url(f"**{INVOICES_PATH}", timeout=self.timeout_ms)
            logger.info(f"💾 [InvoiceForm] Invoice saved, now at {self.page.url}")

    # ===============================================================================
    # FORM HELPERS
    # ===============================================================================

    def cancel(self) -> None:
        with self._step("cancel"):
            self.cancel_button.click()

    def remove_item(self, row_index: int) -> None:
        with self._step("remove_item"):
            self._row(row_index).get_by_role("button", name="Remove item").click()

    def update_item_quantity(self, row_index: int, quantity: int) -> None:
        with self._step("update_item_quantity"):
            self._fill_and_blur(self._row(row_index).get_by_role("spinbutton"), quantity)

    def set_invoice_number(self, value: str) -> None:
        with self._step("set_invoice_number"):
            self.invoice_number_input.fill(value)

    def invoice_number(self) -> str:
        """The pre-filled (or typed) invoice number, once the form has generated one."""
        with self._step("invoice_number"):
            expect(self.invoice_number_input).not_to_have_value("", timeout=self.timeout_ms)
            return self.invoice_number_input.input_value()

    def item_row_count(self) -> int:
        return self.items_table_body.get_by_role("row").count()

    def snapshot(self) -> dict[str, Any]:
        """Best-effort view of where the form is, attached to collaborator errors."""
        state: dict[str, Any] = {"url": self.page.url}
        try:
            state["item_rows"] = self.item_row_count()
        except PlaywrightError:
            state["item_rows"] = None
        return state

    # ===============================================================================
    # INTERNALS
    # ===============================================================================

    def _row(self, row_index: int) -> Locator:
        return self.items_table_body.get_by_role("row").nth(row_index)

    def _fill_and_blur(self, field: Locator, value: Any) -> None:
        # Totals recalculate on blur
        field.fill(str(value))
        field.press("Tab")

    def _read(self, step: str, locator: Locator) -> DisplayAmount:
        with self._step(step):
            locator.wait_for(state="visible", timeout=self.timeout_ms)
            return locator.inner_text().strip()

    def _require_option(self, dropdown: Locator, label: str, step: str, kind: str) -> None:
        option = dropdown.locator("option", has_text=label).first
        try:
            option.wait_for(state="attached", timeout=self.timeout_ms)
        except PlaywrightTimeoutError:
            available = [text.strip() for text in dropdown.locator("option").all_inner_texts()]
            raise ScenarioSetupError(step, f"No {kind} option {label!r} (available: {available})") from None

    @contextmanager
    def _step(self, step: str) -> Iterator[None]:
        try:
            yield
        except InvoiceDeskError:
            raise
        except (PlaywrightTimeoutError, AssertionError) as e:
            # expect() reports an unmet wait as AssertionError
            message = _first_line(e)
            logger.warning(f"⏱️ [InvoiceForm] {step} timed out: {message[:100]}")
            raise UICollaboratorTimeoutError(step, message, self.snapshot()) from e
        except PlaywrightError as e:
            message = _first_line(e)
            logger.warning(f"🔥 [InvoiceForm] {step} failed: {message[:100]}")
            raise UICollaboratorError(step, message, self.snapshot()) from e


def _first_line(error: Exception) -> str:
    text = str(error)
    return text.splitlines()[0] if text else type(error).__name__
