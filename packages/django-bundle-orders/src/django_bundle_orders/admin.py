"""Django admin configuration for bundle orders."""

from django.contrib import admin, messages

from .exceptions import InvalidStatusTransitionError
from .models import BundleOrder, BundlePackage, OrderStatus, ShopAccount, ShopLedgerEntry
from .services import check_order_status, retry_order


@admin.register(BundlePackage)
class BundlePackageAdmin(admin.ModelAdmin):
    list_display = ["category", "data_amount", "wholesale_price", "resale_price", "is_enabled"]
    list_filter = ["category", "is_enabled"]
    list_editable = ["is_enabled"]


@admin.register(BundleOrder)
class BundleOrderAdmin(admin.ModelAdmin):
    """Orders are never edited by hand; status moves through the actions only."""

    list_display = ["short_id", "category", "customer_phone", "package_details", "package_price", "status", "supplier_used", "created_at"]
    list_filter = ["category", "status", "supplier_used"]
    search_fields = ["short_id", "customer_phone", "payment_reference", "supplier_reference"]
    readonly_fields = [field.name for field in BundleOrder._meta.fields]
    actions = ["recheck_status", "retry_failed"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description="Re-check status with supplier")
    def recheck_status(self, request, queryset):
        updated = 0
        for order in queryset.filter(status=OrderStatus.PROCESSING):
            if check_order_status(order).was_updated:
                updated += 1
        self.message_user(request, f"{updated} order(s) updated")

    @admin.action(description="Retry failed orders")
    def retry_failed(self, request, queryset):
        for order in queryset:
            try:
                result = retry_order(order)
            except InvalidStatusTransitionError as e:
                self.message_user(request, f"{order.short_id}: {e}", level=messages.WARNING)
                continue
            level = messages.SUCCESS if result.fulfilled else messages.ERROR
            self.message_user(request, f"{order.short_id}: {result.message}", level=level)


class ShopLedgerEntryInline(admin.TabularInline):
    model = ShopLedgerEntry
    extra = 0
    can_delete = False
    readonly_fields = ["entry_type", "amount", "order", "description", "created_at"]


@admin.register(ShopAccount)
class ShopAccountAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "total_earnings", "available_balance"]
    search_fields = ["name", "slug"]
    readonly_fields = ["total_earnings", "available_balance", "created_at", "updated_at"]
    inlines = [ShopLedgerEntryInline]
