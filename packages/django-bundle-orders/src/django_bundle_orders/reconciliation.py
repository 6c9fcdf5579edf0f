"""Reconciliation of in-flight orders against their supplier.

Suppliers accept an order synchronously but report delivery later. Orders
in PROCESSING are re-checked here, by the background poller and by the
admin refresh endpoints, which all share ``StatusReconciler.reconcile_order``.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional

from django_suppliers.routing import SupplierRouter

from . import conf
from .exceptions import OrderNotFoundError, WebhookNotAcceptedError
from .models import BundleOrder, OrderStatus, ServiceCategory
from .status import can_transition, normalize_status, transition_order

logger = logging.getLogger(__name__)


@dataclass
class ReconcileOutcome:
    """What happened to one order during a status check."""

    order_id: int
    short_id: str
    success: bool
    previous_status: str
    normalized_status: Optional[str] = None
    supplier_status: Optional[str] = None
    was_updated: bool = False
    message: str = ""
    error: Optional[str] = None

    @property
    def current_status(self) -> str:
        return self.normalized_status if self.was_updated else self.previous_status

    def as_dict(self) -> dict:
        return asdict(self)


class StatusReconciler:
    """Checks orders against their supplier and advances their status.

    Usage:
        reconciler = StatusReconciler()
        reconciler.reconcile_category("fastnet")   # one bounded batch
        reconciler.poll_all()                     # every category
    """

    def __init__(self, router: Optional[SupplierRouter] = None, batch_size: Optional[int] = None):
        self.router = router or SupplierRouter()
        self.batch_size = conf.get_poll_batch_size() if batch_size is None else batch_size

    def adapter_for_order(self, order: BundleOrder):
        """The supplier that took the order; the category's active one if none is recorded."""
        if order.supplier_used:
            return self.router.adapter_for(order.supplier_used)
        return self.router.route(order.category)

    def reconcile_order(self, order: BundleOrder) -> ReconcileOutcome:
        """Fetch the supplier status for one order and apply it.

        Writes only when the normalized status differs from the stored one and
        the transition is allowed.
        """
        outcome = ReconcileOutcome(
            order_id=order.pk,
            short_id=order.short_id,
            success=False,
            previous_status=order.status,
        )
        if order.status == OrderStatus.PAID:
            outcome.message = "Order has not been submitted to a supplier yet"
            return outcome

        adapter = self.adapter_for_order(order)
        lookup_key = adapter.status_reference(order.short_id, order.supplier_response_data)
        result = adapter.check_status(lookup_key)
        if not result.success or not result.status:
            outcome.message = result.message or "Failed to fetch status from supplier"
            return outcome

        outcome.success = True
        outcome.supplier_status = result.status
        return self._apply(order, outcome)

    def _apply(self, order: BundleOrder, outcome: ReconcileOutcome) -> ReconcileOutcome:
        normalized = normalize_status(outcome.supplier_status)
        outcome.normalized_status = normalized

        if normalized == order.status:
            outcome.message = f"Order status: {normalized}"
            return outcome

        if not can_transition(order.status, normalized):
            logger.info(
                "Order %s: supplier says %r (%s) but %s is final for reconciliation",
                order.short_id, outcome.supplier_status, normalized, order.status,
            )
            outcome.message = f"Order status: {order.status}"
            return outcome

        outcome.was_updated = transition_order(order, normalized)
        outcome.message = f"Order updated to {normalized}" if outcome.was_updated else f"Order status: {order.status}"
        return outcome

    def pollable_orders(self, category: str):
        webhook_only = self.router.registry.webhook_only()
        return list(
            BundleOrder.objects.for_category(category).pollable(webhook_only)[: self.batch_size]
        )

    def reconcile_category(self, category: str) -> List[ReconcileOutcome]:
        """Check one bounded batch of PROCESSING orders, sequentially.

        An error on one order is logged and recorded; the rest of the batch
        still runs.
        """
        orders = self.pollable_orders(category)
        if not orders:
            return []

        logger.info("Checking %d PROCESSING %s orders", len(orders), category.upper())
        outcomes = []
        for order in orders:
            try:
                outcome = self.reconcile_order(order)
            except Exception as e:
                logger.exception("Error checking order %s", order.short_id)
                outcome = ReconcileOutcome(
                    order_id=order.pk,
                    short_id=order.short_id,
                    success=False,
                    previous_status=order.status,
                    error=str(e) or type(e).__name__,
                )
            outcomes.append(outcome)
        return outcomes

    def poll_all(self) -> Dict[str, List[ReconcileOutcome]]:
        """One reconciliation tick over every service category."""
        results = {}
        for category in ServiceCategory.values:
            try:
                results[category] = self.reconcile_category(category)
            except Exception:
                logger.exception("Error checking %s orders", category)
                results[category] = []
        return results

    def apply_webhook_status(self, supplier_name: str, reference: str, status_text: str) -> ReconcileOutcome:
        """Apply a status pushed by a webhook-only supplier.

        ``reference`` may be our short id or the supplier's own reference.

        Raises:
            WebhookNotAcceptedError: If the supplier can be polled.
            OrderNotFoundError: If no order from this supplier matches.
        """
        adapter = self.router.adapter_for(supplier_name)
        if adapter.supports_polling:
            logger.warning("Rejected webhook for pollable supplier %s (ref %s)", adapter.name, reference)
            raise WebhookNotAcceptedError(adapter.name)
        supplier = adapter.name
        order = (
            BundleOrder.objects.filter(supplier_used=supplier, short_id=reference).first()
            or BundleOrder.objects.filter(supplier_used=supplier, supplier_reference=reference).first()
        )
        if order is None:
            raise OrderNotFoundError(reference)

        logger.info("Webhook from %s for order %s: %r", supplier, order.short_id, status_text)
        outcome = ReconcileOutcome(
            order_id=order.pk,
            short_id=order.short_id,
            success=True,
            previous_status=order.status,
            supplier_status=status_text,
        )
        return self._apply(order, outcome)


def poll_order_statuses(router: Optional[SupplierRouter] = None) -> Dict[str, List[ReconcileOutcome]]:
    """Background poller tick. Never raises."""
    try:
        return StatusReconciler(router=router).poll_all()
    except Exception:
        logger.exception("Error during order status polling")
        return {}
