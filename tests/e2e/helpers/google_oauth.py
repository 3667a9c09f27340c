"""
E2E Google Sign-In Utilities: start OAuth from the login page, complete it on Google.

The app may open Google in a popup or redirect the current tab; both are handled.
"""

from playwright.sync_api import Locator, Page, expect
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from config.settings import E2ESettings, GoogleUser
from invoicedesk.common.exceptions import AuthenticationError
from tests.e2e.helpers.auth import is_dashboard_visible, open_login_page
from tests.e2e.helpers.constants import (
    APP_AFTER_OAUTH_URL,
    GOOGLE_ACCOUNTS_URL,
    GOOGLE_BUTTON_NAME,
    GOOGLE_EMAIL_INPUT,
    GOOGLE_NEXT_BUTTON_NAME,
    GOOGLE_PASSWORD_INPUT,
    GOOGLE_SIGN_IN_HEADING,
    is_login_url,
)

# Google swaps the email step for the password step with an animation
PASSWORD_STEP_SETTLE_MS = 3000


def google_sign_in_button(page: Page) -> Locator:
    return page.get_by_role("button", name=GOOGLE_BUTTON_NAME)


def start_google_sign_in(page: Page, settings: E2ESettings) -> Page:
    """
    Click "Continue with Google" and return the page showing Google's form.

    Returns:
        Page: the popup if one opened, otherwise the original page
    """
    print("🔑 Initiating Google Sign-In")
    open_login_page(page, settings)

    button = google_sign_in_button(page)
    expect(button).to_be_visible(timeout=5000)
    expect(button).to_be_enabled()

    try:
        with page.expect_popup(timeout=3000) as popup_info:
            button.click()
        popup = popup_info.value
        print("  ✅ Google OAuth opened in popup")
        return popup
    except PlaywrightTimeoutError:
        expect(page).to_have_url(GOOGLE_ACCOUNTS_URL, timeout=settings.default_timeout_ms)
        print("  ✅ Google OAuth redirected in same tab")
        return page


def complete_google_login(google_page: Page, user: GoogleUser) -> None:
    """Fill Google's email and password steps."""
    print(f"🔐 Completing Google login for {user.email}")
    expect(google_page.get_by_role("heading", name=GOOGLE_SIGN_IN_HEADING)).to_be_visible(timeout=15000)

    email = google_page.locator(GOOGLE_EMAIL_INPUT).first
    expect(email).to_be_visible(timeout=5000)
    email.fill(user.email)
    google_page.get_by_role("button", name=GOOGLE_NEXT_BUTTON_NAME).first.click()

    google_page.wait_for_timeout(PASSWORD_STEP_SETTLE_MS)

    password = google_page.locator(GOOGLE_PASSWORD_INPUT).first
    expect(password).to_be_visible(timeout=10000)
    password.fill(user.password)
    google_page.get_by_role("button", name=GOOGLE_NEXT_BUTTON_NAME).first.click()


def sign_in_with_google(page: Page, settings: E2ESettings, user: GoogleUser) -> None:
    """
    Full Google sign-in ending on an authenticated InvoiceDesk page.

    Raises:
        AuthenticationError: If the browser is still on the login page afterwards
    """
    google_page = start_google_sign_in(page, settings)
    complete_google_login(google_page, user)

    if google_page is not page:
        google_page.wait_for_event("close", timeout=15000)
    else:
        expect(page).to_have_url(APP_AFTER_OAUTH_URL, timeout=20000)

    if not is_dashboard_visible(page, timeout=settings.default_timeout_ms) and is_login_url(page.url):
        raise AuthenticationError(f"Still on login page after Google OAuth for {user.email}")
    print(f"✅ Google sign-in completed for {user.email}")
