# ===============================================================================
# PLAYWRIGHT INVOICE DRIVER TESTS
# ===============================================================================
"""
Error translation at the browser seam, checked against a mocked Page: whatever
Playwright raises, the harness only ever sees the suite's own exceptions.
"""

from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from invoicedesk.billing.catalog import SHIHARA
from invoicedesk.billing.scenarios import VALID_INVOICE_SCENARIOS
from invoicedesk.common.exceptions import UICollaboratorError, UICollaboratorTimeoutError
from invoicedesk.harness.driver import UIDriver
from invoicedesk.harness.runner import ScenarioRunner
from invoicedesk.ui.playwright_driver import PlaywrightInvoiceDriver


@pytest.fixture
def driver():
    page = MagicMock()
    page.url = "https://invoicedesk.test/invoices/create"
    return PlaywrightInvoiceDriver(page, "https://invoicedesk.test/")


def test_driver_satisfies_protocol(driver):
    assert isinstance(driver, UIDriver)
    assert driver.base_url == "https://invoicedesk.test"


class TestErrorTranslation:
    """Raw Playwright errors become taxonomy errors carrying a snapshot"""

    def test_strict_mode_violation(self, driver):
        driver.customer_dropdown.select_option.side_effect = PlaywrightError("strict mode violation")

        with pytest.raises(UICollaboratorError) as exc_info:
            driver.select_customer(SHIHARA)

        assert not isinstance(exc_info.value, UICollaboratorTimeoutError)
        assert exc_info.value.step == "select_customer"
        assert exc_info.value.last_state["url"] == "https://invoicedesk.test/invoices/create"

    def test_timeout(self, driver):
        driver.customer_dropdown.select_option.side_effect = PlaywrightTimeoutError("Timeout 10000ms exceeded.")

        with pytest.raises(UICollaboratorTimeoutError) as exc_info:
            driver.select_customer(SHIHARA)

        assert exc_info.value.message == "Timeout 10000ms exceeded."

    def test_closed_page_while_checking_tax_line(self, driver):
        driver.vat_value = MagicMock()
        driver.vat_value.is_visible.side_effect = PlaywrightError("Target page, context or browser has been closed")

        with pytest.raises(UICollaboratorError) as exc_info:
            driver.is_tax_visible()

        assert exc_info.value.step == "read_totals"

    def test_snapshot_survives_a_dead_page(self, driver):
        driver.items_table_body = MagicMock()
        driver.items_table_body.get_by_role.return_value.count.side_effect = PlaywrightError("page closed")

        assert driver.snapshot() == {"url": "https://invoicedesk.test/invoices/create", "item_rows": None}


def test_suite_keeps_running_after_browser_error(driver):
    driver.customer_dropdown.select_option.side_effect = PlaywrightError("strict mode violation")

    report = ScenarioRunner(driver).run_suite(VALID_INVOICE_SCENARIOS[:2])

    assert len(report.results) == 2
    for result in report.results:
        assert result.failed_step == "select_customer"
        assert isinstance(result.failures[0].error, UICollaboratorError)
        assert result.last_state["url"] == "https://invoicedesk.test/invoices/create"
