"""Django app configuration for django-bundle-orders."""

from django.apps import AppConfig


class DjangoBundleOrdersConfig(AppConfig):
    """App configuration for django-bundle-orders."""

    name = "django_bundle_orders"
    verbose_name = "Bundle Orders"
    default_auto_field = "django.db.models.BigAutoField"
