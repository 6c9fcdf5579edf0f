"""Django Bundle Orders - Data-bundle order intake, fulfillment and reconciliation.

Provides:
- BundleOrder: Durable order record with a forward-only status lifecycle
- create_order: Idempotent purchase intake plus one synchronous supplier attempt
- StatusReconciler: Advances PROCESSING orders from supplier status reports
- StatusPoller: Cancellable background ticker for reconciliation
- Shop ledger: Reseller markup credits

Usage:
    INSTALLED_APPS = [
        ...
        'django_suppliers',
        'django_bundle_orders',
    ]

    from django_bundle_orders.services import create_order

    result = create_order("fastnet", "0541112222", "5GB", 10, reference="REF1")
    result.order.status  # "PROCESSING" once the supplier accepts

See conf.py for all configuration options.
"""

__version__ = "0.1.0"

__all__ = [
    "BundleOrder",
    "BundlePackage",
    "ShopAccount",
    "ShopLedgerEntry",
    "OrderStatus",
    "ServiceCategory",
    "create_order",
    "retry_order",
    "StatusReconciler",
    "StatusPoller",
    "normalize_status",
    "OrderError",
    "OrderNotFoundError",
    "InvalidStatusTransitionError",
    "UnknownCategoryError",
    "InsufficientBalanceError",
    "WebhookNotAcceptedError",
]


def __getattr__(name: str):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("BundleOrder", "BundlePackage", "ShopAccount", "ShopLedgerEntry", "OrderStatus", "ServiceCategory"):
        from . import models

        return getattr(models, name)
    if name in ("create_order", "retry_order"):
        from . import services

        return getattr(services, name)
    if name == "StatusReconciler":
        from .reconciliation import StatusReconciler

        return StatusReconciler
    if name == "StatusPoller":
        from .scheduler import StatusPoller

        return StatusPoller
    if name == "normalize_status":
        from .status import normalize_status

        return normalize_status
    if name in (
        "OrderError",
        "OrderNotFoundError",
        "InvalidStatusTransitionError",
        "UnknownCategoryError",
        "InsufficientBalanceError",
        "WebhookNotAcceptedError",
    ):
        from . import exceptions

        return getattr(exceptions, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
