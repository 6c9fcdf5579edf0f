"""Registry of supplier adapters keyed by SupplierName."""

import threading
from typing import Dict, List

from .choices import SupplierName
from .exceptions import UnknownSupplierError
from .providers.base import BaseSupplier


def _coerce_name(name) -> SupplierName:
    try:
        return SupplierName((str(name) if name is not None else "").strip().lower())
    except ValueError:
        raise UnknownSupplierError(str(name))


class SupplierRegistry:
    """Holds one adapter instance per supplier.

    Built-in adapters are created lazily on first lookup, so settings and
    credentials are read after Django is configured. Tests may ``register``
    a stub under any SupplierName to replace a built-in.
    """

    def __init__(self) -> None:
        self._adapters: Dict[SupplierName, BaseSupplier] = {}
        self._defaults_loaded = False
        self._lock = threading.Lock()

    def _ensure_defaults_loaded(self) -> None:
        if self._defaults_loaded:
            return

        with self._lock:
            if self._defaults_loaded:
                return
            self._load_defaults()
            self._defaults_loaded = True

    def _load_defaults(self) -> None:
        from .providers import (
            CodeCraftSupplier,
            DataKazinaSupplier,
            DataXpressSupplier,
            HubnetSupplier,
            SykesOfficialSupplier,
        )

        for adapter_class in (
            DataXpressSupplier,
            HubnetSupplier,
            DataKazinaSupplier,
            CodeCraftSupplier,
            SykesOfficialSupplier,
        ):
            self._adapters.setdefault(SupplierName(adapter_class.name), adapter_class())

    def register(self, name, adapter: BaseSupplier) -> None:
        key = _coerce_name(name)
        with self._lock:
            self._adapters[key] = adapter

    def get(self, name) -> BaseSupplier:
        """Return the adapter for a supplier name.

        Raises:
            UnknownSupplierError: If the name is not a SupplierName
        """
        self._ensure_defaults_loaded()
        return self._adapters[_coerce_name(name)]

    def names(self) -> List[str]:
        self._ensure_defaults_loaded()
        return [name.value for name in SupplierName if name in self._adapters]

    def webhook_only(self) -> List[str]:
        """Suppliers that cannot be polled for status."""
        self._ensure_defaults_loaded()
        return [name.value for name, adapter in self._adapters.items() if not adapter.supports_polling]

    def reset(self) -> None:
        """Drop registered adapters; built-ins are rebuilt on next lookup."""
        with self._lock:
            self._adapters = {}
            self._defaults_loaded = False


registry = SupplierRegistry()
