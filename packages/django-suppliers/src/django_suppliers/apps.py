"""Django app configuration for django-suppliers."""

from django.apps import AppConfig


class DjangoSuppliersConfig(AppConfig):
    """App configuration for django-suppliers."""

    name = "django_suppliers"
    verbose_name = "Suppliers"
    default_auto_field = "django.db.models.BigAutoField"
