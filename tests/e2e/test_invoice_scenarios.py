"""
Invoice Totals E2E Tests for InvoiceDesk

Every scenario in VALID_INVOICE_SCENARIOS is driven through the live
"Create Invoice" form by the verification harness; the rendered subtotal,
VAT and grand total must match the locally computed display strings.
"""

import pytest

from config.settings import E2ESettings
from invoicedesk.billing.scenarios import VALID_INVOICE_SCENARIOS, InvoiceScenario
from invoicedesk.harness.runner import ScenarioRunner
from invoicedesk.ui.playwright_driver import PlaywrightInvoiceDriver

pytestmark = pytest.mark.serial


@pytest.mark.parametrize("scenario", VALID_INVOICE_SCENARIOS, ids=lambda s: s.name)
def test_displayed_totals_match(
    invoice_form: PlaywrightInvoiceDriver, e2e_settings: E2ESettings, scenario: InvoiceScenario
) -> None:
    runner = ScenarioRunner(invoice_form, scenario_timeout=e2e_settings.scenario_timeout_s)

    result = runner.run_scenario(scenario)

    assert result.passed, result.diff()


def test_scenario_saves_and_redirects(invoice_form: PlaywrightInvoiceDriver, e2e_settings: E2ESettings) -> None:
    scenario = VALID_INVOICE_SCENARIOS[0].with_save()
    runner = ScenarioRunner(invoice_form, scenario_timeout=e2e_settings.scenario_timeout_s)

    result = runner.run_scenario(scenario)

    assert result.passed, result.diff()
    assert result.last_state.get("saved") is True
    assert invoice_form.page.url.rstrip("/").endswith("/invoices")
