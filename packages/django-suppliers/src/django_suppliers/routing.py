"""Routing of service categories to the active supplier adapter."""

import logging
from typing import Dict, Optional

from . import conf
from .exceptions import SupplierError, UnknownSupplierError, UnsupportedNetworkError
from .providers.base import BalanceResult, BaseSupplier
from .registry import SupplierRegistry, registry as default_registry
from .settings_provider import SupplierSettingsProvider

logger = logging.getLogger(__name__)


def setting_key(category: str) -> str:
    """Settings key holding a category's active supplier ("fastnetActiveSupplier")."""
    return f"{category}ActiveSupplier"


class SupplierRouter:
    """Resolves which adapter is active for a service category.

    Holds no state of its own beyond the settings provider. Calls made on the
    returned adapter pass through unchanged; retry and timeout policy belong
    to the caller.

    Usage:
        router = SupplierRouter()
        adapter = router.route("fastnet")
        adapter.purchase("0541112222", "5GB", 10, "REF1")

        router.set_active("fastnet", "hubnet")
    """

    def __init__(
        self,
        settings_provider: Optional[SupplierSettingsProvider] = None,
        registry: Optional[SupplierRegistry] = None,
    ):
        self.settings_provider = settings_provider or SupplierSettingsProvider()
        self.registry = registry or default_registry

    def active_supplier(self, category: str) -> str:
        """Name of the active supplier for a category.

        Falls back to the configured default when no setting exists, the
        stored value is not a known supplier, or the settings store fails.
        """
        default = conf.get_default_supplier(category)
        try:
            value = self.settings_provider.get(setting_key(category))
        except Exception:
            logger.exception("Failed to read active supplier for %s, defaulting to %s", category, default)
            return default

        if not value:
            return default

        try:
            self.registry.get(value)
        except UnknownSupplierError:
            logger.warning("Stored supplier %r for %s is unknown, defaulting to %s", value, category, default)
            return default
        return value

    def route(self, category: str) -> BaseSupplier:
        return self.registry.get(self.active_supplier(category))

    def adapter_for(self, name: str) -> BaseSupplier:
        return self.registry.get(name)

    def set_active(self, category: str, supplier_name: str, network: Optional[str] = None) -> str:
        """Persist the active supplier for a category. Last write wins.

        Raises:
            UnknownSupplierError: If supplier_name is not a SupplierName
            UnsupportedNetworkError: If network is given and the supplier cannot serve it
        """
        adapter = self.registry.get(supplier_name)
        if network is not None and not adapter.supports_network(network):
            raise UnsupportedNetworkError(adapter.display_name, str(network))

        self.settings_provider.set(setting_key(category), adapter.name)
        logger.info("Active supplier for %s changed to %s", category, adapter.name.upper())
        return adapter.name

    def wallet_balances(self) -> Dict[str, BalanceResult]:
        """Wallet balance of every registered supplier, keyed by name."""
        balances = {}
        for name in self.registry.names():
            try:
                balances[name] = self.registry.get(name).get_wallet_balance()
            except SupplierError as e:
                balances[name] = BalanceResult.fail(str(e))
        return balances
