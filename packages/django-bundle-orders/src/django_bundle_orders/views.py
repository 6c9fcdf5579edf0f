"""JSON endpoints for purchase intake, order status and admin reconciliation."""

import json
import logging
from dataclasses import asdict
from functools import wraps

from django.db import DatabaseError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from django_suppliers.exceptions import UnknownSupplierError, UnsupportedNetworkError

from . import services
from .exceptions import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    UnknownCategoryError,
    WebhookNotAcceptedError,
)
from .models import CATEGORY_NETWORKS, ServiceCategory

logger = logging.getLogger(__name__)

PURCHASE_REQUIRED_FIELDS = ("phoneNumber", "dataAmount", "price")


def staff_required(view):
    """Reject non-staff users with a JSON 403 instead of a login redirect."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        user = request.user
        if not (user.is_authenticated and (user.is_staff or user.is_superuser)):
            return JsonResponse({"success": False, "message": "Admin access required"}, status=403)
        return view(request, *args, **kwargs)

    return wrapper


def _json_body(request) -> dict:
    if not request.body:
        return {}
    body = json.loads(request.body)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


# =============================================================================
# Public API
# =============================================================================


@csrf_exempt
@require_POST
def purchase(request, category):
    """API: Record a paid purchase and attempt fulfillment.

    Answers 200 whenever the order was recorded; whether the supplier took
    it is reported in ``status`` and ``fulfilled``.
    """
    try:
        body = _json_body(request)
    except ValueError:
        return JsonResponse({"success": False, "message": "Invalid JSON body"}, status=400)

    missing = [name for name in PURCHASE_REQUIRED_FIELDS if body.get(name) in (None, "")]
    if missing:
        return JsonResponse(
            {"success": False, "message": f"Missing required fields: {', '.join(missing)}"},
            status=400,
        )

    try:
        result = services.create_order(
            category,
            phone=str(body["phoneNumber"]).strip(),
            data_amount=str(body["dataAmount"]).strip(),
            price=body["price"],
            reference=body.get("reference"),
            shop_id=body.get("shopId"),
            shop_markup=body.get("shopMarkup"),
        )
    except (UnknownCategoryError, ValueError) as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)
    except DatabaseError:
        logger.exception("Failed to record %s purchase for %s", category, body.get("reference"))
        return JsonResponse({"success": False, "message": "Failed to process order"}, status=500)

    return JsonResponse(result.as_response())


@require_GET
def order_status(request, category, short_id):
    """API: Public order lookup by short id."""
    try:
        order = services.get_order_by_short_id(short_id, category=category)
    except UnknownCategoryError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)
    except OrderNotFoundError:
        return JsonResponse({"success": False, "message": "Order not found"}, status=404)

    return JsonResponse({
        "shortId": order.short_id,
        "status": order.status,
        "packageDetails": order.package_details,
        "createdAt": order.created_at.isoformat(),
    })


@csrf_exempt
@require_POST
def supplier_webhook(request, supplier):
    """API: Status push from a supplier that cannot be polled."""
    try:
        body = _json_body(request)
    except ValueError:
        return JsonResponse({"success": False, "message": "Invalid JSON body"}, status=400)

    reference = body.get("reference")
    status_text = body.get("status")
    if not reference or not status_text:
        return JsonResponse({"success": False, "message": "reference and status are required"}, status=400)

    try:
        outcome = services.apply_webhook_status(supplier, str(reference), str(status_text))
    except (UnknownSupplierError, WebhookNotAcceptedError) as e:
        return JsonResponse({"success": False, "message": str(e)}, status=404)
    except OrderNotFoundError:
        return JsonResponse({"success": False, "message": "Order not found"}, status=404)

    return JsonResponse({
        "success": True,
        "status": outcome.current_status,
        "message": outcome.message,
    })


# =============================================================================
# Admin API
# =============================================================================


@csrf_exempt
@require_POST
@staff_required
def check_status(request, category, order_id):
    """API: Re-check one order against its supplier."""
    try:
        order = services.get_order(order_id, category=category)
    except UnknownCategoryError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)
    except OrderNotFoundError:
        return JsonResponse({"success": False, "message": "Order not found"}, status=404)

    outcome = services.check_order_status(order)
    return JsonResponse({
        "success": outcome.success,
        "status": outcome.current_status,
        "supplierStatus": outcome.supplier_status,
        "updated": outcome.was_updated,
        "message": outcome.message,
    })


@csrf_exempt
@require_POST
@staff_required
def refresh_all_statuses(request, category):
    """API: Re-check every PROCESSING order in a category."""
    try:
        outcomes = services.refresh_processing_orders(category)
    except UnknownCategoryError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)

    updated = [o for o in outcomes if o.was_updated]
    return JsonResponse({
        "success": True,
        "message": f"Checked {len(outcomes)} orders, updated {len(updated)}",
        "checked": len(outcomes),
        "updated": len(updated),
        "results": [o.as_dict() for o in outcomes],
    })


@csrf_exempt
@require_POST
@staff_required
def retry(request, category, order_id):
    """API: Re-drive a FAILED order through the active supplier."""
    try:
        order = services.get_order(order_id, category=category)
        result = services.retry_order(order)
    except UnknownCategoryError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)
    except OrderNotFoundError:
        return JsonResponse({"success": False, "message": "Order not found"}, status=404)
    except InvalidStatusTransitionError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)

    return JsonResponse(result.as_response())


@csrf_exempt
@require_http_methods(["GET", "POST"])
@staff_required
def active_supplier(request, category):
    """API: Read or switch the active supplier of a category."""
    try:
        category = services.resolve_category(category)
    except UnknownCategoryError as e:
        return JsonResponse({"success": False, "message": str(e)}, status=400)

    router = services.get_router()

    if request.method == "POST":
        try:
            body = _json_body(request)
        except ValueError:
            return JsonResponse({"success": False, "message": "Invalid JSON body"}, status=400)

        network = CATEGORY_NETWORKS[ServiceCategory(category)]
        try:
            name = router.set_active(category, body.get("supplier"), network=network)
        except (UnknownSupplierError, UnsupportedNetworkError) as e:
            return JsonResponse({"success": False, "message": str(e)}, status=400)
        return JsonResponse({
            "success": True,
            "message": f"{category} supplier updated to {name.upper()}",
            "supplier": name,
        })

    return JsonResponse({
        "success": True,
        "category": category,
        "supplier": router.active_supplier(category),
        "available": router.registry.names(),
    })


@require_GET
@staff_required
def balances(request):
    """API: Wallet balance of every supplier."""
    router = services.get_router()
    return JsonResponse({
        "success": True,
        "balances": {name: asdict(result) for name, result in router.wallet_balances().items()},
    })
