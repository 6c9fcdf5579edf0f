"""Order lifecycle: idempotent intake, the single fulfillment attempt, retries.

The order row is written in PAID before the supplier is called, so a paid
purchase is never lost even if the supplier call raises or times out.
"""

import json
import logging
import secrets
import time
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import IntegrityError, transaction
from django.utils import timezone

from django_suppliers.providers.base import PurchaseResult
from django_suppliers.routing import SupplierRouter

from .exceptions import InvalidStatusTransitionError, OrderNotFoundError, UnknownCategoryError
from .ledger import credit_markup
from .models import CATEGORY_PREFIXES, BundleOrder, BundlePackage, OrderStatus, ServiceCategory, ShopAccount
from .notifications import notify_new_order
from .reconciliation import ReconcileOutcome, StatusReconciler
from .status import transition_order

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

_router = None


def get_router() -> SupplierRouter:
    """Process-wide router, built on first use."""
    global _router
    if _router is None:
        _router = SupplierRouter()
    return _router


@dataclass
class OrderIntakeResult:
    """Outcome of a purchase intake or a manual retry."""

    order: BundleOrder
    created: bool
    message: str
    supplier_data: dict = field(default_factory=dict)

    @property
    def fulfilled(self) -> bool:
        return self.order.status in (OrderStatus.PROCESSING, OrderStatus.FULFILLED)

    def as_response(self) -> dict:
        """Body of the purchase endpoint.

        ``success`` reports fulfillment, not intake: the payment has already
        been taken, so the order exists whatever the supplier said.
        """
        return {
            "success": self.fulfilled,
            "message": self.message,
            "orderId": self.order.short_id,
            "status": self.order.status,
            "fulfilled": self.fulfilled,
            "data": self.supplier_data,
        }


def resolve_category(category: str) -> str:
    try:
        return ServiceCategory((category or "").strip().lower()).value
    except ValueError:
        raise UnknownCategoryError(category)


def generate_short_id(category: str) -> str:
    """Human-facing order id, e.g. ``FN-1718000000000-3FA9C2``."""
    prefix = CATEGORY_PREFIXES[ServiceCategory(category)]
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(3).upper()}"


def to_price(value) -> Decimal:
    try:
        price = Decimal(str(value)).quantize(CENTS)
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid price: {value}")
    if price < 0:
        raise ValueError(f"Invalid price: {value}")
    return price


def resolve_supplier_cost(category: str, data_amount: str, price: Decimal) -> Decimal:
    """Wholesale price of the matching enabled package, else the sale price."""
    package = BundlePackage.objects.filter(
        category=category,
        data_amount__iexact=data_amount,
        is_enabled=True,
    ).first()
    return package.wholesale_price if package is not None else price


def _resolve_shop(shop_id) -> Optional[ShopAccount]:
    if shop_id in (None, ""):
        return None
    if str(shop_id).isdigit():
        shop = ShopAccount.objects.filter(pk=int(shop_id)).first()
    else:
        shop = ShopAccount.objects.filter(slug=shop_id).first()
    if shop is None:
        logger.warning("Unknown shop %r on purchase; order will not be linked to a shop", shop_id)
    return shop


def _persist_paid_order(category, phone, data_amount, price, reference, shop, shop_markup):
    """Insert the PAID order, or return the one already recorded for this payment.

    Returns:
        (order, created)
    """
    dedup = dict(
        category=category,
        payment_reference=reference,
        customer_phone=phone,
        package_details=data_amount,
        package_price=price,
    )
    if reference:
        existing = BundleOrder.objects.matching_payment(**dedup).first()
        if existing is not None:
            return existing, False

    try:
        with transaction.atomic():
            order = BundleOrder.objects.create(
                short_id=generate_short_id(category),
                shop=shop,
                shop_markup=shop_markup,
                status=OrderStatus.PAID,
                **dedup,
            )
            credit_markup(order)
    except IntegrityError:
        # A concurrent request for the same payment won the insert
        existing = BundleOrder.objects.matching_payment(**dedup).first() if reference else None
        if existing is None:
            raise
        return existing, False

    logger.info(
        "Created %s order %s: phone=%s package=%s price=%s ref=%s",
        category.upper(), order.short_id, phone, data_amount, price, reference,
    )
    return order, True


def _record_outcome(order: BundleOrder, supplier_name: str, result: PurchaseResult, retry: bool = False) -> None:
    if result.success:
        transition_order(
            order,
            OrderStatus.PROCESSING,
            retry=retry,
            supplier_used=supplier_name,
            supplier_reference=result.supplier_reference or "",
            supplier_response=json.dumps(result.data or {}, cls=DjangoJSONEncoder),
            failure_reason="",
        )
        return

    fields = {
        "supplier_used": supplier_name,
        "supplier_response": result.message,
        "failure_reason": result.message,
    }
    if order.status == OrderStatus.FAILED:
        # Failed retry: the order stays FAILED, only the reason changes
        fields["updated_at"] = timezone.now()
        BundleOrder.objects.filter(pk=order.pk).update(**fields)
        for name, value in fields.items():
            setattr(order, name, value)
    else:
        transition_order(order, OrderStatus.FAILED, **fields)


def _attempt_fulfillment(order: BundleOrder, router: SupplierRouter, retry: bool = False) -> PurchaseResult:
    """Call the active supplier exactly once and record the outcome on the order.

    Never raises on supplier problems: anything the adapter throws ends with
    the order FAILED and the error kept as its failure reason.
    """
    supplier_name = ""
    try:
        adapter = router.route(order.category)
        supplier_name = adapter.name
        cost = resolve_supplier_cost(order.category, order.package_details, order.package_price)
        logger.info("Fulfilling order %s via %s", order.short_id, supplier_name.upper())
        result = adapter.purchase(
            order.customer_phone,
            order.package_details,
            cost,
            order.short_id,
            network=order.network,
        )
    except Exception as e:
        logger.exception("Supplier call for order %s raised", order.short_id)
        result = PurchaseResult.fail(str(e) or type(e).__name__, error_code=type(e).__name__)

    _record_outcome(order, supplier_name, result, retry=retry)
    return result


def create_order(
    category: str,
    phone: str,
    data_amount: str,
    price,
    reference: Optional[str] = None,
    shop_id=None,
    shop_markup=None,
    router: Optional[SupplierRouter] = None,
    notifier=None,
) -> OrderIntakeResult:
    """
    Take in a paid purchase and make the one synchronous fulfillment attempt.

    A second request for the same (reference, phone, package, price) returns
    the existing order untouched: no new row, no supplier call, no second
    shop credit.

    Args:
        category: Service category (ServiceCategory value)
        phone: Recipient phone number
        data_amount: Bundle size string, e.g. "5GB"
        price: Price the customer paid
        reference: Payment reference; orders without one are never deduplicated
        shop_id: Reseller shop pk or slug, optional
        shop_markup: Reseller margin credited to the shop

    Returns:
        OrderIntakeResult

    Raises:
        UnknownCategoryError: If category is not a ServiceCategory
        ValueError: If price or shop_markup is not a valid amount
    """
    category = resolve_category(category)
    price = to_price(price)
    if reference is not None:
        reference = str(reference).strip() or None
    shop = _resolve_shop(shop_id)
    markup = to_price(shop_markup) if shop_markup not in (None, "") else None

    order, created = _persist_paid_order(
        category, phone, data_amount, price, reference, shop, markup
    )
    if not created:
        logger.info("Duplicate purchase for payment %s; returning order %s", reference, order.short_id)
        return OrderIntakeResult(order=order, created=False, message="Order already exists")

    result = _attempt_fulfillment(order, router or get_router())
    notify_new_order(order, notifier=notifier)

    if result.success:
        message = "Order placed successfully"
    else:
        message = f"Payment received but fulfillment failed: {result.message}"
    return OrderIntakeResult(order=order, created=True, message=message, supplier_data=result.data or {})


def retry_order(order: BundleOrder, router: Optional[SupplierRouter] = None) -> OrderIntakeResult:
    """Manually re-drive a FAILED order through the active supplier.

    Raises:
        InvalidStatusTransitionError: If the order is not FAILED
    """
    if order.status != OrderStatus.FAILED:
        raise InvalidStatusTransitionError(order.status, OrderStatus.PROCESSING)

    logger.info("Retrying failed order %s", order.short_id)
    result = _attempt_fulfillment(order, router or get_router(), retry=True)
    message = "Order resubmitted successfully" if result.success else f"Retry failed: {result.message}"
    return OrderIntakeResult(order=order, created=False, message=message, supplier_data=result.data or {})


def get_order_by_short_id(short_id: str, category: Optional[str] = None) -> BundleOrder:
    """
    Raises:
        OrderNotFoundError: If no order has this short id
    """
    orders = BundleOrder.objects.all()
    if category:
        orders = orders.for_category(resolve_category(category))
    order = orders.filter(short_id=short_id).first()
    if order is None:
        raise OrderNotFoundError(short_id)
    return order


def get_order(order_id, category: Optional[str] = None) -> BundleOrder:
    """Look an order up by primary key, falling back to its short id."""
    if str(order_id).isdigit():
        orders = BundleOrder.objects.all()
        if category:
            orders = orders.for_category(resolve_category(category))
        order = orders.filter(pk=int(order_id)).first()
        if order is not None:
            return order
    return get_order_by_short_id(str(order_id), category=category)


def check_order_status(order: BundleOrder, router: Optional[SupplierRouter] = None) -> ReconcileOutcome:
    """Manual single-order refresh through the poller's path."""
    return StatusReconciler(router=router or get_router()).reconcile_order(order)


def refresh_processing_orders(category: str, router: Optional[SupplierRouter] = None) -> List[ReconcileOutcome]:
    """Manual bulk refresh of one category's PROCESSING orders."""
    return StatusReconciler(router=router or get_router()).reconcile_category(resolve_category(category))


def apply_webhook_status(
    supplier_name: str,
    reference: str,
    status_text: str,
    router: Optional[SupplierRouter] = None,
) -> ReconcileOutcome:
    return StatusReconciler(router=router or get_router()).apply_webhook_status(supplier_name, reference, status_text)
