"""URL configuration for django-bundle-orders.

Example usage in project urls.py:

    from django.urls import include, path

    urlpatterns = [
        path("api/", include("django_bundle_orders.urls")),
    ]
"""

from django.urls import path

from . import views

app_name = "django_bundle_orders"

urlpatterns = [
    path("balances", views.balances, name="balances"),
    path("webhooks/<str:supplier>", views.supplier_webhook, name="supplier-webhook"),
    path("<str:category>/purchase", views.purchase, name="purchase"),
    path("<str:category>/orders/status/<str:short_id>", views.order_status, name="order-status"),
    path("<str:category>/orders/refresh-all-statuses", views.refresh_all_statuses, name="refresh-all-statuses"),
    path("<str:category>/orders/<str:order_id>/check-status", views.check_status, name="check-status"),
    path("<str:category>/orders/<str:order_id>/retry", views.retry, name="retry"),
    path("<str:category>/supplier", views.active_supplier, name="active-supplier"),
]
