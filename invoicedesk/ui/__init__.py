"""Browser-backed drivers (Playwright)."""
