"""Django Bundle Orders configuration.

All settings can be overridden in your Django settings.py.

Example:
    # settings.py
    BUNDLE_ORDERS_POLL_INTERVAL_SECONDS = 300
    BUNDLE_ORDERS_SMS_BACKEND = 'arkesel'
    BUNDLE_ORDERS_SMS_NOTIFY_PHONES = ['0241234567']
"""

import os

from django.conf import settings


DEFAULT_POLL_INTERVAL_SECONDS = 10 * 60
DEFAULT_POLL_BATCH_SIZE = 50


def get_setting(name: str, default=None):
    """Get a setting with BUNDLE_ORDERS_ prefix."""
    return getattr(settings, f"BUNDLE_ORDERS_{name}", default)


def get_poll_interval() -> float:
    return float(get_setting("POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS))


def get_poll_batch_size() -> int:
    return int(get_setting("POLL_BATCH_SIZE", DEFAULT_POLL_BATCH_SIZE))


def get_sms_backend() -> str:
    return get_setting("SMS_BACKEND", "console")


def get_sms_notify_phones() -> list:
    return list(get_setting("SMS_NOTIFY_PHONES", []) or [])


def get_sms_api_key() -> str:
    return get_setting("SMS_API_KEY", "") or os.environ.get("ARKESEL_API_KEY", "")


def get_sms_sender_id() -> str:
    return get_setting("SMS_SENDER_ID", "WTData")


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# BUNDLE_ORDERS_POLL_INTERVAL_SECONDS = 600  # reconciliation tick period
# BUNDLE_ORDERS_POLL_BATCH_SIZE = 50  # PROCESSING orders checked per category per tick
# BUNDLE_ORDERS_SMS_BACKEND = 'console'  # 'console' or 'arkesel'
# BUNDLE_ORDERS_SMS_NOTIFY_PHONES = []  # admin phones told about new orders
# BUNDLE_ORDERS_SMS_API_KEY = ''  # Arkesel key (ARKESEL_API_KEY env fallback)
# BUNDLE_ORDERS_SMS_SENDER_ID = 'WTData'
