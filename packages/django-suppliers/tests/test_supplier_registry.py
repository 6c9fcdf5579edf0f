"""Tests for the supplier registry."""

import threading
import time
from unittest.mock import patch

import pytest

from django_suppliers.choices import SupplierName
from django_suppliers.exceptions import UnknownSupplierError
from django_suppliers.providers import CodeCraftSupplier, HubnetSupplier
from django_suppliers.providers.base import BaseSupplier, PurchaseResult
from django_suppliers.registry import SupplierRegistry


class StubSupplier(BaseSupplier):
    name = "codecraft"
    display_name = "Stub"

    def _purchase(self, phone, data_amount, price, reference, network):
        return PurchaseResult.ok("stubbed")


class TestSupplierRegistry:
    """Tests for SupplierRegistry."""

    def test_builtins_loaded_lazily(self):
        registry = SupplierRegistry()

        assert registry.names() == [name.value for name in SupplierName]
        assert isinstance(registry.get("codecraft"), CodeCraftSupplier)

    def test_lookup_is_case_insensitive(self):
        registry = SupplierRegistry()

        assert registry.get(" HUBNET ") is registry.get(SupplierName.HUBNET)

    def test_unknown_name(self):
        registry = SupplierRegistry()

        with pytest.raises(UnknownSupplierError) as exc_info:
            registry.get("acme")
        assert str(exc_info.value) == "Unknown supplier: acme"

    def test_registered_stub_survives_default_loading(self):
        registry = SupplierRegistry()
        stub = StubSupplier(api_key="x")
        registry.register("codecraft", stub)

        assert registry.get("codecraft") is stub
        assert isinstance(registry.get("hubnet"), HubnetSupplier)

    def test_register_rejects_unknown_name(self):
        registry = SupplierRegistry()

        with pytest.raises(UnknownSupplierError):
            registry.register("acme", StubSupplier())

    def test_webhook_only(self):
        registry = SupplierRegistry()

        assert registry.webhook_only() == ["hubnet"]

    def test_reset_restores_builtins(self):
        registry = SupplierRegistry()
        registry.register("codecraft", StubSupplier())
        registry.reset()

        assert isinstance(registry.get("codecraft"), CodeCraftSupplier)

    def test_concurrent_first_lookups_see_loaded_builtins(self):
        registry = SupplierRegistry()
        original = SupplierRegistry._load_defaults

        def slow_load(self):
            time.sleep(0.05)
            original(self)

        barrier = threading.Barrier(4)
        found = []
        errors = []

        def lookup():
            barrier.wait()
            try:
                found.append(registry.get("dataxpress"))
            except Exception as e:
                errors.append(e)

        with patch.object(SupplierRegistry, "_load_defaults", slow_load):
            threads = [threading.Thread(target=lookup) for _ in range(4)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert errors == []
        assert len(found) == 4
        assert all(adapter is found[0] for adapter in found)
