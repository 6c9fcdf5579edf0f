"""SMS notification of new orders.

Fire-and-forget: a notifier failure is logged and swallowed, never raised
into order processing.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from . import conf

logger = logging.getLogger(__name__)

ARKESEL_API_URL = "https://sms.arkesel.com/sms/api"

# Arkesel answers a send with a body whose status token is "OK"
ARKESEL_OK_TOKEN = re.compile(r"\bOK\b")


@dataclass
class SMSResult:
    """Result of a send operation."""

    success: bool
    message: str
    data: Optional[str] = None


def to_international(phone: str) -> str:
    """Format a Ghanaian number with the 233 country code."""
    digits = re.sub(r"\D", "", phone or "")
    if digits.startswith("0"):
        return "233" + digits[1:]
    if not digits.startswith("233"):
        return "233" + digits
    return digits


def format_order_notification(category: str, order_id: str, customer_phone: str, package_details: str) -> str:
    return (
        f"New {category.upper()} Order!\n"
        f"ID: {order_id}\n"
        f"Phone: {customer_phone}\n"
        f"Package: {package_details}"
    )


class BaseSMSNotifier(ABC):
    """Abstract base class for SMS backends."""

    backend_name: str = "base"

    @abstractmethod
    def send(self, to: str, message: str) -> SMSResult:
        raise NotImplementedError


class ConsoleSMSNotifier(BaseSMSNotifier):
    """Logs SMS instead of sending them (development default)."""

    backend_name = "console"

    def send(self, to: str, message: str) -> SMSResult:
        logger.info("CONSOLE SMS (not actually sent) to %s:\n%s", to_international(to), message)
        return SMSResult(success=True, message="SMS logged to console")


class ArkeselSMSNotifier(BaseSMSNotifier):
    """Arkesel HTTP SMS API."""

    backend_name = "arkesel"

    def __init__(self, api_key: Optional[str] = None, sender_id: Optional[str] = None, timeout: float = 10.0):
        self.api_key = api_key if api_key is not None else conf.get_sms_api_key()
        self.sender_id = sender_id or conf.get_sms_sender_id()
        self.client = httpx.Client(timeout=timeout)

    def send(self, to: str, message: str) -> SMSResult:
        if not self.api_key:
            return SMSResult(success=False, message="SMS API key not configured")

        params = {
            "action": "send-sms",
            "api_key": self.api_key,
            "to": to_international(to),
            "from": self.sender_id,
            "sms": message,
        }
        logger.info("Sending SMS to %s from %s", params["to"], self.sender_id)

        try:
            response = self.client.get(ARKESEL_API_URL, params=params)
        except httpx.HTTPError as e:
            logger.error("SMS sending error: %s", e)
            return SMSResult(success=False, message=str(e) or "SMS sending failed")

        body = response.text
        if 200 <= response.status_code < 300 or ARKESEL_OK_TOKEN.search(body):
            return SMSResult(success=True, message="SMS sent successfully", data=body)

        logger.error("SMS failed [%s]: %s", response.status_code, body)
        return SMSResult(success=False, message=body or "Failed to send SMS")


def get_notifier(backend: Optional[str] = None) -> BaseSMSNotifier:
    """Build the configured SMS backend.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = backend or conf.get_sms_backend()
    if backend == "console":
        return ConsoleSMSNotifier()
    if backend == "arkesel":
        return ArkeselSMSNotifier()
    raise ValueError(f"Unknown SMS backend: {backend}")


def notify_new_order(order, notifier: Optional[BaseSMSNotifier] = None) -> int:
    """Tell every configured admin phone about a new order.

    Returns the number of messages sent successfully. Never raises.
    """
    phones = conf.get_sms_notify_phones()
    if not phones:
        return 0

    message = format_order_notification(order.category, order.short_id, order.customer_phone, order.package_details)
    sent = 0
    try:
        notifier = notifier or get_notifier()
    except ValueError:
        logger.exception("SMS notifier misconfigured; skipping notification for %s", order.short_id)
        return 0

    for phone in phones:
        try:
            result = notifier.send(phone, message)
        except Exception:
            logger.exception("SMS notification to %s for order %s failed", phone, order.short_id)
            continue
        if result.success:
            sent += 1
        else:
            logger.warning("SMS notification to %s for order %s failed: %s", phone, order.short_id, result.message)
    return sent
