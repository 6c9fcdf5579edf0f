"""Models for django-suppliers."""

from django.db import models


class SupplierSetting(models.Model):
    """
    Persisted key/value configuration for supplier routing.

    Holds the active supplier per service category under keys such as
    "fastnetActiveSupplier". Read-mostly and hot-swappable: a new value is
    picked up on the next routed call without a restart.

    Usage:
        from django_suppliers.settings_provider import SupplierSettingsProvider

        provider = SupplierSettingsProvider()
        provider.set("fastnetActiveSupplier", "hubnet")
    """

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "django_suppliers"
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value}"
