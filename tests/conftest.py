# ===============================================================================
# PYTEST CONFIGURATION FOR INVOICEDESK E2E
# ===============================================================================
"""
Global test configuration.

Test Structure:
- tests/{package}/ mirrors invoicedesk/ for unit tests (no browser)
- tests/e2e/ for browser tests against a live deployment
- Naming convention: test_{package}_{feature}.py

Run unit tests only:  pytest -m "not e2e"
Run browser tests:    E2E_ENABLED=1 pytest tests/e2e
"""

import logging

import pytest

from config.settings import E2ESettings, load_settings


@pytest.fixture(scope="session")
def e2e_settings() -> E2ESettings:
    """Suite settings, read from the environment once per session"""
    return load_settings()


@pytest.fixture(scope="session", autouse=True)
def _suite_log_level(e2e_settings: E2ESettings) -> None:
    # pytest owns the handlers (log_cli); E2E_LOG_LEVEL only sets how chatty the harness is
    logging.getLogger("invoicedesk").setLevel(e2e_settings.log_level)
