"""Django admin configuration for suppliers."""

from django.contrib import admin

from .models import SupplierSetting


@admin.register(SupplierSetting)
class SupplierSettingAdmin(admin.ModelAdmin):
    """Admin for SupplierSetting model."""

    list_display = ["key", "value", "updated_at"]
    search_fields = ["key", "value"]
    readonly_fields = ["created_at", "updated_at"]
