"""
Error taxonomy for the InvoiceDesk E2E suite.

Every failure the harness can report maps to one of these classes, so a
scenario result always says which kind of problem stopped it and where.
"""

from __future__ import annotations

from typing import Any


class InvoiceDeskError(Exception):
    """Base exception for suite errors"""


class InvalidInputError(InvoiceDeskError):
    """Negative price, quantity or rate handed to the totals engine"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class AssertionMismatchError(InvoiceDeskError, AssertionError):
    """Computed and displayed values differ"""

    def __init__(self, step: str, field: str, expected: str, actual: str):
        self.step = step
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"[{step}] {field}: expected {expected!r}, got {actual!r}")


class UICollaboratorError(InvoiceDeskError):
    """The browser refused a step (strict-mode violation, closed page, detached element)"""

    def __init__(self, step: str, message: str, last_state: dict[str, Any] | None = None):
        self.step = step
        self.message = message
        self.last_state = dict(last_state or {})
        super().__init__(f"[{step}] {message}")


class UICollaboratorTimeoutError(UICollaboratorError):
    """The browser never reached the state a step was waiting for"""


class ScenarioSetupError(InvoiceDeskError):
    """A scenario could not be set up (unknown product, missing customer option)"""

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(f"[{step}] {message}")


class ConfigurationError(InvoiceDeskError):
    """Required configuration or credentials are missing or unreadable"""


class AuthenticationError(InvoiceDeskError):
    """Login did not land on an authenticated page"""
