"""Shop ledger: reseller markup credits and withdrawal debits."""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, Sum

from .exceptions import InsufficientBalanceError
from .models import BundleOrder, ShopAccount, ShopLedgerEntry

logger = logging.getLogger(__name__)


@transaction.atomic
def credit_markup(order: BundleOrder):
    """
    Credit an order's shop markup to the shop balance.

    Idempotent per order: a second call for the same order finds the existing
    ledger entry and changes nothing. The credit stands whatever the
    fulfillment outcome.

    Args:
        order: The newly created order (shop and shop_markup set).

    Returns:
        The ShopLedgerEntry, or None if the order has no shop or no markup.

    Usage:
        with transaction.atomic():
            order = BundleOrder.objects.create(..., shop=shop, shop_markup=Decimal("1.50"))
            credit_markup(order)
    """
    if order.shop_id is None or not order.shop_markup:
        return None

    existing = ShopLedgerEntry.objects.filter(order=order).first()
    if existing is not None:
        return existing

    try:
        with transaction.atomic():
            entry = ShopLedgerEntry.objects.create(
                shop_id=order.shop_id,
                order=order,
                entry_type=ShopLedgerEntry.EntryType.CREDIT,
                amount=order.shop_markup,
                description=f"Markup on order {order.short_id}",
            )
    except IntegrityError:
        # Another request credited this order first
        return ShopLedgerEntry.objects.get(order=order)

    ShopAccount.objects.filter(pk=order.shop_id).update(
        total_earnings=F("total_earnings") + order.shop_markup,
        available_balance=F("available_balance") + order.shop_markup,
    )
    logger.info("Credited shop %s with %s for order %s", order.shop_id, order.shop_markup, order.short_id)
    return entry


@transaction.atomic
def record_withdrawal(shop: ShopAccount, amount: Decimal, description: str = "") -> ShopLedgerEntry:
    """
    Debit an approved withdrawal from a shop's available balance.

    total_earnings is lifetime income and is never reduced.

    Raises:
        ValueError: If amount is not positive.
        InsufficientBalanceError: If amount exceeds available_balance.
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise ValueError("Withdrawal amount must be positive")

    updated = ShopAccount.objects.filter(pk=shop.pk, available_balance__gte=amount).update(
        available_balance=F("available_balance") - amount,
    )
    if not updated:
        raise InsufficientBalanceError(
            f"Withdrawal of {amount} exceeds available balance of shop {shop.pk}"
        )

    entry = ShopLedgerEntry.objects.create(
        shop=shop,
        entry_type=ShopLedgerEntry.EntryType.DEBIT,
        amount=amount,
        description=description or "Withdrawal",
    )
    shop.refresh_from_db(fields=["total_earnings", "available_balance"])
    return entry


def get_shop_earnings(shop: ShopAccount) -> Decimal:
    """Sum of markup credits recorded for a shop."""
    total = ShopLedgerEntry.objects.filter(
        shop=shop,
        entry_type=ShopLedgerEntry.EntryType.CREDIT,
    ).aggregate(total=Sum("amount"))["total"]
    return total or Decimal("0")
