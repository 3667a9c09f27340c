"""
Browser end-to-end tests for InvoiceDesk.
pytest-playwright (sync API) against the deployment named by BASE_URL.
"""
