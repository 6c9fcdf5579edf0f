"""Pytest configuration for django-suppliers tests."""
from unittest.mock import MagicMock

import django
import pytest
from django.conf import settings


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


@pytest.fixture
def fake_response():
    """Build a stand-in for httpx.Response."""

    def _make(status_code=200, json_data=None, text=""):
        response = MagicMock()
        response.status_code = status_code
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data if json_data is not None else {}
        response.text = text
        return response

    return _make


@pytest.fixture(autouse=True)
def reset_registry():
    """Every test starts from the built-in adapters."""
    from django_suppliers.registry import registry

    registry.reset()
    yield
    registry.reset()
