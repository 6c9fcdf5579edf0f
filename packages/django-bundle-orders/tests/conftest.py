"""Pytest configuration for django-bundle-orders tests."""
from decimal import Decimal

import django
import pytest
from django.conf import settings

from django_suppliers.choices import Network
from django_suppliers.providers.base import BalanceResult, BaseSupplier, PurchaseResult, StatusResult


def pytest_configure():
    """Configure Django settings for pytest."""
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key-not-for-production',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'django.contrib.auth',
                'django.contrib.sessions',
                'django_suppliers',
                'django_bundle_orders',
            ],
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
            ],
            ROOT_URLCONF='django_bundle_orders.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
        )
    django.setup()


class StubSupplier(BaseSupplier):
    """Scriptable supplier adapter registered in place of a real one."""

    networks = (Network.MTN, Network.AT, Network.TELECEL)

    def __init__(self, name, supports_polling=True):
        super().__init__(api_key="stub-key", base_url="https://stub.test")
        self.name = name
        self.display_name = f"Stub {name}"
        self.supports_polling = supports_polling
        self.purchase_result = PurchaseResult.ok("Order accepted", data={"accepted": True})
        self.purchase_error = None
        self.statuses = {}
        self.reference_errors = {}
        self.purchases = []
        self.status_calls = []

    def _purchase(self, phone, data_amount, price, reference, network):
        from django_bundle_orders.models import BundleOrder

        stored = BundleOrder.objects.get(short_id=reference)
        self.purchases.append({
            "phone": phone,
            "data_amount": data_amount,
            "price": price,
            "reference": reference,
            "network": network,
            "stored_status": stored.status,
        })
        if self.purchase_error is not None:
            raise self.purchase_error
        return self.purchase_result

    def _check_status(self, reference):
        self.status_calls.append(reference)
        status = self.statuses.get(reference, "Processing")
        if isinstance(status, Exception):
            raise status
        return StatusResult.ok(status=status)

    def _get_wallet_balance(self):
        return BalanceResult.ok("50.00")

    def status_reference(self, short_id, supplier_response=None):
        if short_id in self.reference_errors:
            raise self.reference_errors[short_id]
        return short_id


@pytest.fixture(autouse=True)
def reset_registry():
    """Every test starts from the built-in adapters."""
    from django_suppliers.registry import registry

    registry.reset()
    yield
    registry.reset()


@pytest.fixture
def stub_supplier():
    """Stub registered as DataXpress, the default FastNet supplier."""
    from django_suppliers.registry import registry

    stub = StubSupplier("dataxpress")
    registry.register("dataxpress", stub)
    return stub


@pytest.fixture
def webhook_supplier():
    """Stub registered as Hubnet, which cannot be polled."""
    from django_suppliers.registry import registry

    stub = StubSupplier("hubnet", supports_polling=False)
    registry.register("hubnet", stub)
    return stub


@pytest.fixture
def shop(db):
    from django_bundle_orders.models import ShopAccount

    return ShopAccount.objects.create(name="Kofi Data Hub", slug="kofi-data-hub")


@pytest.fixture
def make_order(db):
    """Create an order directly, bypassing intake."""
    from django_bundle_orders.models import BundleOrder, OrderStatus

    counter = {"n": 0}

    def _make(**kwargs):
        counter["n"] += 1
        fields = {
            "category": "fastnet",
            "short_id": f"FN-TEST-{counter['n']}",
            "customer_phone": "0541112222",
            "package_details": "5GB",
            "package_price": Decimal("10.00"),
            "payment_reference": f"PAY-{counter['n']}",
            "supplier_used": "dataxpress",
            "status": OrderStatus.PROCESSING,
        }
        fields.update(kwargs)
        return BundleOrder.objects.create(**fields)

    return _make
