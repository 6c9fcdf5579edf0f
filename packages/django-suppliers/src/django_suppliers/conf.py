"""Django Suppliers configuration.

All settings can be overridden in your Django settings.py.

Example:
    # settings.py
    SUPPLIERS_API_KEYS = {'dataxpress': '...', 'codecraft': '...'}
    SUPPLIERS_DEFAULT_ACTIVE = {'fastnet': 'hubnet'}
    SUPPLIERS_SETTINGS_CACHE_SECONDS = 30
"""

import os

from django.conf import settings


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_BASE_URLS = {
    "dataxpress": "https://api.dataxpress.com.gh/v1",
    "hubnet": "https://console.hubnet.app/live/api/context/business/transaction",
    "dakazina": "https://reseller.dakazinabusinessconsult.com/api/v1",
    "codecraft": "https://api.codecraftnetwork.com/api",
    "sykesofficial": "https://sykesofficial.net",
}

# Environment variables consulted when SUPPLIERS_API_KEYS has no entry
API_KEY_ENV_VARS = {
    "dataxpress": "DATAXPRESS_API_KEY",
    "hubnet": "HUBNET_API_KEY",
    "dakazina": "DAKAZINA_API_KEY",
    "codecraft": "CODECRAFT_API_KEY",
    "sykesofficial": "SYKESOFFICIAL_API_KEY",
}

# Service category -> supplier used when no SupplierSetting row exists
DEFAULT_ACTIVE_SUPPLIERS = {
    "fastnet": "dataxpress",
    "datagod": "sykesofficial",
    "at": "codecraft",
    "telecel": "codecraft",
}

DEFAULT_HTTP_TIMEOUT = 30.0


def get_setting(name: str, default=None):
    """Get a setting with SUPPLIERS_ prefix."""
    return getattr(settings, f"SUPPLIERS_{name}", default)


def get_api_key(supplier: str) -> str:
    """Return the API key for a supplier.

    The precedence is:
        1. SUPPLIERS_API_KEYS[supplier] (if not blank)
        2. Environment variable from API_KEY_ENV_VARS
        3. Empty string (adapter reports itself as not configured)
    """
    configured = (get_setting("API_KEYS", {}) or {}).get(supplier)
    if configured:
        return configured

    env_var = API_KEY_ENV_VARS.get(supplier)
    if env_var:
        return os.environ.get(env_var, "")

    return ""


def get_base_url(supplier: str) -> str:
    """Return the API base URL for a supplier, without trailing slash."""
    overrides = get_setting("BASE_URLS", {}) or {}
    return overrides.get(supplier, DEFAULT_BASE_URLS.get(supplier, "")).rstrip("/")


def get_http_timeout() -> float:
    return float(get_setting("HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT))


def get_default_supplier(category: str) -> str:
    """Hardcoded fallback supplier for a category."""
    defaults = {**DEFAULT_ACTIVE_SUPPLIERS, **(get_setting("DEFAULT_ACTIVE", {}) or {})}
    return defaults.get(category, get_setting("FALLBACK_SUPPLIER", "dataxpress"))


def get_settings_cache_seconds() -> float:
    return float(get_setting("SETTINGS_CACHE_SECONDS", 0))


def get_hubnet_webhook_url() -> str:
    return get_setting("HUBNET_WEBHOOK_URL", "") or ""


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# SUPPLIERS_API_KEYS = {}  # supplier name -> API key (env vars used when missing)
# SUPPLIERS_BASE_URLS = {}  # supplier name -> base URL override
# SUPPLIERS_HTTP_TIMEOUT = 30  # seconds per outbound supplier call
# SUPPLIERS_DEFAULT_ACTIVE = {}  # category -> supplier, merged over the built-in defaults
# SUPPLIERS_FALLBACK_SUPPLIER = 'dataxpress'  # for categories with no default
# SUPPLIERS_SETTINGS_CACHE_SECONDS = 0  # active-supplier cache TTL, 0 disables
# SUPPLIERS_HUBNET_WEBHOOK_URL = ''  # callback URL sent with Hubnet orders
