"""
E2E Test Helpers Package

Re-exports the public helpers. Import from here or from individual modules:

    from tests.e2e.helpers import login_user, PageMonitor
    from tests.e2e.helpers.google_oauth import sign_in_with_google
"""

# Authentication
from tests.e2e.helpers.auth import (
    email_input,
    expect_dashboard,
    is_dashboard_visible,
    login_user,
    open_login_page,
    password_input,
    sign_in_button,
    submit_login,
    wait_for_server_ready,
)

# Constants
from tests.e2e.helpers.constants import (
    LOGIN_URL,
    is_login_url,
)

# Google OAuth
from tests.e2e.helpers.google_oauth import (
    complete_google_login,
    google_sign_in_button,
    sign_in_with_google,
    start_google_sign_in,
)

# Monitoring
from tests.e2e.helpers.monitoring import PageMonitor, assert_no_console_errors

__all__ = [
    "LOGIN_URL",
    "PageMonitor",
    "assert_no_console_errors",
    "complete_google_login",
    "email_input",
    "expect_dashboard",
    "google_sign_in_button",
    "is_dashboard_visible",
    "is_login_url",
    "login_user",
    "open_login_page",
    "password_input",
    "sign_in_button",
    "sign_in_with_google",
    "start_google_sign_in",
    "submit_login",
    "wait_for_server_ready",
]
