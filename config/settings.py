"""
E2E settings for InvoiceDesk
Environment-first configuration, read once per test session.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from invoicedesk.common.exceptions import ConfigurationError
from invoicedesk.common.retry import RetryPolicy

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent

DEFAULT_BASE_URL = "https://invoicedesk.siyothsoft.com"
DEFAULT_CREDENTIALS_FILE = CONFIG_DIR / "credentials.local.json"
DEFAULT_GOOGLE_USERS_FILE = CONFIG_DIR / "googleUsers.json"
DEFAULT_INVOICE_USERS_FILE = CONFIG_DIR / "invoiceUsers.json"

CREDENTIALS_HELP = (
    "Test credentials not found. Set TEST_USER_EMAIL and TEST_USER_PASSWORD environment variables, "
    'or create config/credentials.local.json with {"default": {"email":"...","password":"..."}}'
)

# ===============================================================================
# SETTINGS
# ===============================================================================


@dataclass(frozen=True)
class E2ESettings:
    """Immutable suite configuration passed explicitly to fixtures and drivers"""

    base_url: str = DEFAULT_BASE_URL
    default_timeout_ms: int = 10_000
    navigation_timeout_ms: int = 30_000
    scenario_timeout_s: float = 120.0
    retry_attempts: int = 2
    retry_backoff_s: float = 1.0
    artifacts_dir: Path = Path("test-results")
    log_level: str = "INFO"
    e2e_enabled: bool = False
    credentials_file: Path = DEFAULT_CREDENTIALS_FILE
    google_users_file: Path = DEFAULT_GOOGLE_USERS_FILE
    invoice_users_file: Path = DEFAULT_INVOICE_USERS_FILE
    environ: Mapping[str, str] = field(default_factory=dict, repr=False, compare=False)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(attempts=self.retry_attempts, backoff_seconds=self.retry_backoff_s)

    def has_credentials(self) -> bool:
        try:
            load_credentials(settings=self)
        except ConfigurationError:
            return False
        return True


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def load_settings(environ: Mapping[str, str] | None = None) -> E2ESettings:
    """Build settings from the environment (``os.environ`` unless given)."""
    env = dict(os.environ if environ is None else environ)

    base_url = (env.get("BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    settings = E2ESettings(
        base_url=base_url,
        default_timeout_ms=_env_int(env, "E2E_DEFAULT_TIMEOUT_MS", 10_000),
        navigation_timeout_ms=_env_int(env, "E2E_NAVIGATION_TIMEOUT_MS", 30_000),
        scenario_timeout_s=_env_float(env, "E2E_SCENARIO_TIMEOUT_S", 120.0),
        retry_attempts=_env_int(env, "E2E_RETRY_ATTEMPTS", 2),
        retry_backoff_s=_env_float(env, "E2E_RETRY_BACKOFF_S", 1.0),
        artifacts_dir=Path(env.get("E2E_ARTIFACTS_DIR") or "test-results"),
        log_level=(env.get("E2E_LOG_LEVEL") or "INFO").upper(),
        e2e_enabled=env.get("E2E_ENABLED", "").lower() in ("1", "true", "yes"),
        credentials_file=Path(env.get("E2E_CREDENTIALS_FILE") or DEFAULT_CREDENTIALS_FILE),
        google_users_file=Path(env.get("E2E_GOOGLE_USERS_FILE") or DEFAULT_GOOGLE_USERS_FILE),
        invoice_users_file=Path(env.get("E2E_INVOICE_USERS_FILE") or DEFAULT_INVOICE_USERS_FILE),
        environ=env,
    )
    if settings.retry_attempts < 1:
        raise ConfigurationError(f"E2E_RETRY_ATTEMPTS must be >= 1, got {settings.retry_attempts}")
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ConfigurationError(f"E2E_LOG_LEVEL must be a logging level name, got {settings.log_level!r}")
    logger.debug(f"⚙️ [Settings] base_url={settings.base_url} timeout={settings.default_timeout_ms}ms")
    return settings


# ===============================================================================
# CREDENTIALS & USER FILES
# ===============================================================================


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class GoogleUser:
    email: str
    password: str = field(repr=False)
    display_name: str = ""
    domain: str = ""


@dataclass(frozen=True)
class InvoiceUser:
    email: str
    password: str = field(repr=False)
    display_name: str = ""
    company: str = ""
    role: str = ""
    permissions: tuple[str, ...] = ()

    def can(self, permission: str) -> bool:
        return permission in self.permissions


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read or parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def load_credentials(user_key: str = "default", settings: E2ESettings | None = None) -> Credentials:
    """
    Resolve login credentials.

    TEST_USER_EMAIL / TEST_USER_PASSWORD win; otherwise the ``user_key`` entry
    of the local credentials file is used.

    Raises:
        ConfigurationError: if the file is unreadable or nothing is configured
    """
    settings = settings or load_settings()
    env = settings.environ

    email, password = env.get("TEST_USER_EMAIL"), env.get("TEST_USER_PASSWORD")
    if email and password:
        return Credentials(email, password)

    path = settings.credentials_file
    if path.exists():
        user = _read_json(path).get(user_key)
        if isinstance(user, dict) and user.get("email") and user.get("password"):
            return Credentials(user["email"], user["password"])

    raise ConfigurationError(CREDENTIALS_HELP)


def _user_entry(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    entry = data.get(key)
    if not isinstance(entry, dict) or not entry.get("email"):
        raise ConfigurationError(f"{path} has no usable {key!r} entry")
    return entry


def load_google_users(settings: E2ESettings | None = None) -> dict[str, GoogleUser]:
    """Load ``activeUser`` / ``testUser`` / ``invalidUser`` from the Google users file."""
    settings = settings or load_settings()
    path = settings.google_users_file
    if not path.exists():
        raise ConfigurationError(f"Google users configuration not found. Please ensure {path} exists.")

    data = _read_json(path)
    users = {}
    for key in ("activeUser", "testUser", "invalidUser"):
        entry = _user_entry(data, key, path)
        users[key] = GoogleUser(
            email=entry["email"],
            password=entry.get("password", ""),
            display_name=entry.get("displayName", ""),
            domain=entry.get("domain", ""),
        )
    return users


def load_invoice_users(settings: E2ESettings | None = None) -> dict[str, InvoiceUser]:
    """Load ``primaryUser`` / ``testUser`` / ``viewOnlyUser`` from the invoice users file."""
    settings = settings or load_settings()
    path = settings.invoice_users_file
    if not path.exists():
        raise ConfigurationError(f"Invoice users configuration not found. Please ensure {path} exists.")

    data = _read_json(path)
    users = {}
    for key in ("primaryUser", "testUser", "viewOnlyUser"):
        entry = _user_entry(data, key, path)
        users[key] = InvoiceUser(
            email=entry["email"],
            password=entry.get("password", ""),
            display_name=entry.get("displayName", ""),
            company=entry.get("company", ""),
            role=entry.get("role", ""),
            permissions=tuple(entry.get("permissions", ())),
        )
    return users
