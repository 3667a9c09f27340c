"""
Billing domain: totals arithmetic, product catalog and scenario data.

    from invoicedesk.billing import compute_totals, format_currency
"""

from invoicedesk.billing.catalog import DEFAULT_CATALOG, Product, ProductCatalog
from invoicedesk.billing.totals import (
    InvoiceTotals,
    LineItem,
    compute_totals,
    format_currency,
    parse_currency,
    round_money,
)

__all__ = [
    "DEFAULT_CATALOG",
    "InvoiceTotals",
    "LineItem",
    "Product",
    "ProductCatalog",
    "compute_totals",
    "format_currency",
    "parse_currency",
    "round_money",
]
