"""Order status normalization and the forward-only transition table."""

import logging
from typing import Optional

from django.utils import timezone

from .exceptions import InvalidStatusTransitionError
from .models import BundleOrder, OrderStatus

logger = logging.getLogger(__name__)

# Checked first: phrases that contain a success keyword but mean the opposite
NEGATED_SUCCESS = ("unsuccessful", "undelivered", "not delivered")
STILL_PENDING = ("incomplete",)

SUCCESS_KEYWORDS = ("delivered", "successful", "fulfilled", "complete")
FAILURE_KEYWORDS = ("failed", "error", "cancelled", "canceled", "rejected")

ALLOWED_TRANSITIONS = {
    OrderStatus.PAID: {OrderStatus.PROCESSING, OrderStatus.FAILED},
    OrderStatus.PROCESSING: {OrderStatus.FULFILLED, OrderStatus.FAILED},
    OrderStatus.FAILED: set(),
    OrderStatus.FULFILLED: set(),
}

# Only reachable through an explicit manual retry
RETRY_TRANSITIONS = {
    OrderStatus.FAILED: {OrderStatus.PROCESSING},
}


def normalize_status(supplier_status: Optional[str]) -> str:
    """Map a supplier's free-text status onto FULFILLED, PROCESSING or FAILED.

    Case-insensitive substring matching. Anything unrecognized stays
    PROCESSING so an ambiguous answer never fails a live order.
    """
    status = (supplier_status or "").lower()

    if any(phrase in status for phrase in NEGATED_SUCCESS):
        return OrderStatus.FAILED.value
    if any(phrase in status for phrase in STILL_PENDING):
        return OrderStatus.PROCESSING.value
    if any(keyword in status for keyword in SUCCESS_KEYWORDS):
        return OrderStatus.FULFILLED.value
    if any(keyword in status for keyword in FAILURE_KEYWORDS):
        return OrderStatus.FAILED.value
    return OrderStatus.PROCESSING.value


def can_transition(current: str, target: str, retry: bool = False) -> bool:
    current, target = OrderStatus(current), OrderStatus(target)
    if target in ALLOWED_TRANSITIONS[current]:
        return True
    return retry and target in RETRY_TRANSITIONS.get(current, set())


def ensure_transition(current: str, target: str, retry: bool = False) -> None:
    """Raise InvalidStatusTransitionError unless current -> target is allowed."""
    if not can_transition(current, target, retry=retry):
        raise InvalidStatusTransitionError(current, target)


def transition_order(order: BundleOrder, target: str, retry: bool = False, **fields) -> bool:
    """Move an order to ``target`` and save ``fields`` alongside the status.

    The write is a compare-and-set on the status the caller last saw, so two
    processes reconciling the same order cannot both apply a transition.

    Returns:
        True if this call changed the row, False if the stored status had
        already moved on (``order`` is refreshed from the database).

    Raises:
        InvalidStatusTransitionError: If current -> target is not allowed.
    """
    current = order.status
    ensure_transition(current, target, retry=retry)

    fields["updated_at"] = timezone.now()
    updated = BundleOrder.objects.filter(pk=order.pk, status=current).update(status=target, **fields)
    if not updated:
        logger.warning("Order %s changed concurrently; %s -> %s skipped", order.short_id, current, target)
        order.refresh_from_db()
        return False

    for name, value in fields.items():
        setattr(order, name, value)
    order.status = target
    logger.info("Order %s: %s -> %s", order.short_id, current, target)
    return True
