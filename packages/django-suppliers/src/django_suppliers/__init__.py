"""Django Suppliers - Interchangeable data-bundle supplier adapters.

Provides:
- BaseSupplier: Uniform capability interface (purchase, status, balance)
- SupplierRegistry: Adapters keyed by the closed SupplierName enum
- SupplierSetting: Persisted key/value configuration (active supplier)
- SupplierRouter: Resolves the active adapter per service category

Usage:
    INSTALLED_APPS = [
        ...
        'django_suppliers',
    ]

    from django_suppliers.routing import SupplierRouter

    router = SupplierRouter()
    result = router.route("fastnet").purchase("0541112222", "5GB", 10, "REF1")

See conf.py for all configuration options.
"""

__version__ = "0.1.0"

__all__ = [
    "SupplierName",
    "Network",
    "SupplierSetting",
    "SupplierRouter",
    "registry",
    "SupplierError",
    "ConfigurationError",
    "SupplierRejection",
    "TransportError",
    "UnsupportedFormat",
    "UnknownSupplierError",
]


def __getattr__(name: str):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("SupplierName", "Network"):
        from . import choices

        return getattr(choices, name)
    if name == "SupplierSetting":
        from .models import SupplierSetting

        return SupplierSetting
    if name == "SupplierRouter":
        from .routing import SupplierRouter

        return SupplierRouter
    if name == "registry":
        from .registry import registry

        return registry
    if name in (
        "SupplierError",
        "ConfigurationError",
        "SupplierRejection",
        "TransportError",
        "UnsupportedFormat",
        "UnknownSupplierError",
    ):
        from . import exceptions

        return getattr(exceptions, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
