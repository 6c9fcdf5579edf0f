"""Order, catalog and shop ledger models for data-bundle sales."""

import json
from decimal import Decimal

from django.db import models

from django_suppliers.choices import Network


class ServiceCategory(models.TextChoices):
    """Storefront categories; each has its own active supplier."""

    FASTNET = "fastnet", "FastNet"
    DATAGOD = "datagod", "DataGod"
    AT = "at", "AT iShare"
    TELECEL = "telecel", "Telecel"


CATEGORY_NETWORKS = {
    ServiceCategory.FASTNET: Network.MTN,
    ServiceCategory.DATAGOD: Network.MTN,
    ServiceCategory.AT: Network.AT,
    ServiceCategory.TELECEL: Network.TELECEL,
}

CATEGORY_PREFIXES = {
    ServiceCategory.FASTNET: "FN",
    ServiceCategory.DATAGOD: "DG",
    ServiceCategory.AT: "AT",
    ServiceCategory.TELECEL: "TC",
}


class OrderStatus(models.TextChoices):
    """Forward-only order lifecycle: PAID -> PROCESSING -> FULFILLED | FAILED."""

    PAID = "PAID", "Paid"
    PROCESSING = "PROCESSING", "Processing"
    FULFILLED = "FULFILLED", "Fulfilled"
    FAILED = "FAILED", "Failed"


class BundlePackage(models.Model):
    """
    Catalog entry for a data bundle.

    Read-only input to fulfillment: the wholesale price is what the supplier
    is told the order costs.
    """

    category = models.CharField(max_length=20, choices=ServiceCategory.choices)
    data_amount = models.CharField(max_length=20, help_text='Bundle size, e.g. "5GB"')
    wholesale_price = models.DecimalField(max_digits=10, decimal_places=2)
    resale_price = models.DecimalField(max_digits=10, decimal_places=2)
    is_enabled = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "django_bundle_orders"
        ordering = ["category", "resale_price"]
        constraints = [
            models.UniqueConstraint(
                fields=["category", "data_amount"],
                name="bundlepackage_unique_category_amount",
            ),
        ]

    def __str__(self):
        return f"{self.get_category_display()} {self.data_amount} ({self.resale_price})"


class ShopAccount(models.Model):
    """
    Reseller balance.

    Both totals rise by the shop markup when an order referencing the shop is
    created. Only the withdrawal process lowers available_balance.
    """

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    total_earnings = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    available_balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "django_bundle_orders"
        ordering = ["name"]

    def __str__(self):
        return self.name


class BundleOrderQuerySet(models.QuerySet):
    """Custom queryset for BundleOrder."""

    def for_category(self, category):
        return self.filter(category=category)

    def processing(self):
        return self.filter(status=OrderStatus.PROCESSING)

    def pollable(self, webhook_only_suppliers=()):
        """PROCESSING orders whose supplier can be polled, newest first."""
        return (
            self.processing()
            .exclude(supplier_used__in=list(webhook_only_suppliers))
            .order_by("-created_at", "-pk")
        )

    def matching_payment(self, category, payment_reference, customer_phone, package_details, package_price):
        """Orders sharing the dedup tuple."""
        return self.filter(
            category=category,
            payment_reference=payment_reference,
            customer_phone=customer_phone,
            package_details=package_details,
            package_price=package_price,
        )


class BundleOrder(models.Model):
    """
    One data-bundle sale.

    Created exactly once at purchase time, in status PAID, before any supplier
    call. Never deleted.

    Usage:
        from django_bundle_orders.services import create_order

        result = create_order("fastnet", "0541112222", "5GB", Decimal("10"), "REF1")
        result.order.status  # "PROCESSING" if the supplier accepted it
    """

    category = models.CharField(max_length=20, choices=ServiceCategory.choices, db_index=True)
    short_id = models.CharField(max_length=50, unique=True, editable=False)
    customer_phone = models.CharField(max_length=20)
    package_details = models.CharField(max_length=50, help_text='Bundle size, e.g. "5GB"')
    package_price = models.DecimalField(max_digits=10, decimal_places=2)
    payment_reference = models.CharField(max_length=100, null=True, blank=True)

    supplier_used = models.CharField(max_length=50, blank=True, default="")
    supplier_reference = models.CharField(max_length=100, blank=True, default="")
    supplier_response = models.TextField(blank=True, default="", help_text="Raw supplier payload for audit")
    failure_reason = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PAID,
        db_index=True,
    )

    shop = models.ForeignKey(
        ShopAccount,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
    )
    shop_markup = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BundleOrderQuerySet.as_manager()

    class Meta:
        app_label = "django_bundle_orders"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["category", "payment_reference", "customer_phone", "package_details", "package_price"],
                name="bundleorder_unique_payment_item",
            ),
        ]
        indexes = [
            models.Index(fields=["category", "status"]),
        ]

    def __str__(self):
        return f"{self.short_id} ({self.status})"

    @property
    def network(self) -> str:
        return CATEGORY_NETWORKS[ServiceCategory(self.category)].value

    @property
    def supplier_response_data(self):
        """Stored supplier response parsed as JSON, or None for plain-text failures."""
        if not self.supplier_response:
            return None
        try:
            return json.loads(self.supplier_response)
        except ValueError:
            return None


class ShopLedgerEntry(models.Model):
    """
    Audit line for every change to a shop balance.

    At most one entry per order, which is what keeps a deduplicated purchase
    from crediting twice.
    """

    class EntryType(models.TextChoices):
        CREDIT = "credit", "Credit"
        DEBIT = "debit", "Debit"

    shop = models.ForeignKey(ShopAccount, on_delete=models.PROTECT, related_name="ledger_entries")
    order = models.OneToOneField(
        BundleOrder,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="ledger_entry",
    )
    entry_type = models.CharField(max_length=10, choices=EntryType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "django_bundle_orders"
        ordering = ["-created_at"]
        verbose_name_plural = "shop ledger entries"

    def __str__(self):
        return f"{self.entry_type} {self.amount} ({self.shop})"
