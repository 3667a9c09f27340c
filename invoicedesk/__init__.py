"""
InvoiceDesk E2E

Browser-driven end-to-end suite for the InvoiceDesk invoicing app: the
invoice totals engine, the data-driven verification harness and the
Playwright driver for the invoice creation form.
"""

__version__ = "1.0.0"
