"""
Data tables for invoice tests.

Scenario rows drive the verification harness against the live form; the
sample invoice documents and payload lists feed the browser suites.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Literal

from invoicedesk.billing.catalog import CAKE, ICE_CREAM, SHIHARA
from invoicedesk.billing.totals import InvoiceTotals, LineItem, Number, compute_totals
from invoicedesk.common.types import CustomerLabel, DisplayAmount, ProductLabel

# ===============================================================================
# HARNESS SCENARIOS
# ===============================================================================


@dataclass(frozen=True)
class ScenarioItem:
    product: ProductLabel
    quantity: int = 1


@dataclass(frozen=True)
class InvoiceScenario:
    """A named, data-driven invoice case with optional pinned display strings"""

    name: str
    customer: CustomerLabel
    vat_rate: Number
    items: tuple[ScenarioItem, ...]
    discount: Number = 0
    expected_subtotal: DisplayAmount | None = None
    expected_vat: DisplayAmount | None = None
    expected_grand_total: DisplayAmount | None = None
    save: bool = False

    @property
    def pinned(self) -> dict[str, DisplayAmount]:
        """Literal expectations keyed like InvoiceTotals.formatted()."""
        pinned = {
            "subtotal": self.expected_subtotal,
            "tax": self.expected_vat,
            "grand_total": self.expected_grand_total,
        }
        return {key: value for key, value in pinned.items() if value is not None}

    def with_save(self) -> InvoiceScenario:
        return replace(self, save=True)


VALID_INVOICE_SCENARIOS: tuple[InvoiceScenario, ...] = (
    # 1 × 1200 = 1200; VAT 18% = 216; total = 1416
    InvoiceScenario(
        name="Single item with default 18% VAT",
        customer=SHIHARA,
        vat_rate=18,
        items=(ScenarioItem(ICE_CREAM, 1),),
        expected_subtotal="Rs 1200.00",
        expected_vat="Rs 216.00",
        expected_grand_total="Rs 1416.00",
    ),
    # 2×1200 + 1×875.74 = 3275.74; VAT = 589.63; total = 3865.37
    InvoiceScenario(
        name="Multiple items with default 18% VAT",
        customer=SHIHARA,
        vat_rate=18,
        items=(ScenarioItem(ICE_CREAM, 2), ScenarioItem(CAKE, 1)),
        expected_subtotal="Rs 3275.74",
        expected_vat="Rs 589.63",
        expected_grand_total="Rs 3865.37",
    ),
    # 3×1200 = 3600; VAT 10% = 360; total = 3960
    InvoiceScenario(
        name="Single item with custom 10% VAT rate",
        customer=SHIHARA,
        vat_rate=10,
        items=(ScenarioItem(ICE_CREAM, 3),),
        expected_subtotal="Rs 3600.00",
        expected_vat="Rs 360.00",
        expected_grand_total="Rs 3960.00",
    ),
    # 5×1200 + 2×875.74 = 7751.48; VAT 18% = 1395.27; total = 9146.75
    InvoiceScenario(
        name="High-quantity multi-item default VAT",
        customer=SHIHARA,
        vat_rate=18,
        items=(ScenarioItem(ICE_CREAM, 5), ScenarioItem(CAKE, 2)),
        expected_subtotal="Rs 7751.48",
        expected_vat="Rs 1395.27",
        expected_grand_total="Rs 9146.75",
    ),
    # VAT line is hidden at 0%
    InvoiceScenario(
        name="Single item with 0% VAT (tax-exempt)",
        customer=SHIHARA,
        vat_rate=0,
        items=(ScenarioItem(CAKE, 1),),
        expected_subtotal="Rs 875.74",
        expected_vat="Rs 0.00",
        expected_grand_total="Rs 875.74",
    ),
    InvoiceScenario(
        name="Decimal 8.5% VAT rate",
        customer=SHIHARA,
        vat_rate=Decimal("8.5"),
        items=(ScenarioItem(ICE_CREAM, 1),),
        expected_subtotal="Rs 1200.00",
        expected_vat="Rs 102.00",
        expected_grand_total="Rs 1302.00",
    ),
    InvoiceScenario(
        name="Maximum 100% VAT rate",
        customer=SHIHARA,
        vat_rate=100,
        items=(ScenarioItem(ICE_CREAM, 1),),
        expected_subtotal="Rs 1200.00",
        expected_vat="Rs 1200.00",
        expected_grand_total="Rs 2400.00",
    ),
)

DEFAULT_VAT_RATE = 18

# Rates the VAT spinbutton must accept as typed
EDGE_CASE_VAT_RATES: tuple[float, ...] = (0, 0.1, 5, 15, 25, 50, 99.9)
MAX_VAT_RATE = 100

XSS_PAYLOADS: tuple[str, ...] = (
    "<script>alert('xss')</script>",
    "javascript:alert(1)",
    "<img src=x onerror=alert(1)>",
    '"><script>alert("XSS")</script>',
)
SQL_INJECTION_PAYLOADS: tuple[str, ...] = (
    "'; DROP TABLE invoices; --",
    "1' OR '1'='1",
)
LOGIN_INJECTION_PAYLOADS: tuple[str, ...] = (
    "' OR '1'='1",
    "<script>alert(1)</script>",
)

# ===============================================================================
# SAMPLE INVOICE DOCUMENTS
# ===============================================================================

InvoiceStatus = Literal["Draft", "Sent", "Paid", "Overdue", "Cancelled"]

DEFAULT_PAYMENT_TERMS_DAYS = 30


@dataclass(frozen=True)
class CustomerData:
    name: str
    email: str
    address: str
    phone: str | None = None
    tax_id: str | None = None


@dataclass(frozen=True)
class InvoiceDraft:
    """A full invoice document as a user would fill it in"""

    customer: CustomerData
    issue_date: date
    due_date: date
    items: tuple[LineItem, ...]
    notes: str = ""
    terms: str = ""
    discount_percentage: Number = 0
    tax_percentage: Number = 0
    status: InvoiceStatus = "Draft"
    invoice_number: str | None = None


SAMPLE_CUSTOMERS: tuple[CustomerData, ...] = (
    CustomerData(
        name="ABC Corporation",
        email="billing@abccorp.com",
        address="123 Business St, Suite 100, New York, NY 10001",
        phone="+1 (555) 123-4567",
        tax_id="TAX-ABC-001",
    ),
    CustomerData(
        name="XYZ Enterprises",
        email="accounts@xyzenterprises.com",
        address="456 Commerce Ave, Los Angeles, CA 90210",
        phone="+1 (555) 987-6543",
        tax_id="TAX-XYZ-002",
    ),
    CustomerData(
        name="Individual Client",
        email="john.doe@email.com",
        address="789 Residential Rd, Chicago, IL 60601",
        phone="+1 (555) 456-7890",
    ),
)

SAMPLE_INVOICE_ITEMS: tuple[LineItem, ...] = (
    LineItem(Decimal("75.00"), 40, "Web Development Services"),
    LineItem(Decimal("150.00"), 5, "Design Consultation"),
    LineItem(Decimal("85.00"), 20, "Project Management"),
    LineItem(Decimal("500.00"), 1, "Software License (Annual)"),
)


def create_sample_invoice(today: date | None = None, **overrides) -> InvoiceDraft:
    """Two-item draft for the first sample customer, 10% tax, due in 30 days."""
    issue_date = today or date.today()
    draft = InvoiceDraft(
        customer=SAMPLE_CUSTOMERS[0],
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=DEFAULT_PAYMENT_TERMS_DAYS),
        items=SAMPLE_INVOICE_ITEMS[:2],
        notes="Thank you for your business!",
        terms="Payment due within 30 days",
        discount_percentage=0,
        tax_percentage=10,
    )
    return replace(draft, **overrides)


def create_complex_invoice(today: date | None = None) -> InvoiceDraft:
    return create_sample_invoice(
        today,
        customer=SAMPLE_CUSTOMERS[1],
        items=SAMPLE_INVOICE_ITEMS[:3],
        discount_percentage=5,
        tax_percentage=Decimal("8.5"),
        notes="Multi-item invoice with discount and custom tax rate",
        terms="Net 15 payment terms",
    )


def create_minimal_invoice(today: date | None = None) -> InvoiceDraft:
    return create_sample_invoice(
        today,
        customer=CustomerData(name="Quick Customer", email="quick@example.com", address="123 Quick St"),
        items=(LineItem(Decimal("100.00"), 1, "Basic Service"),),
        notes="",
        terms="",
    )


def summarize_invoice(draft: InvoiceDraft) -> InvoiceTotals:
    return compute_totals(draft.items, draft.tax_percentage, draft.discount_percentage)
