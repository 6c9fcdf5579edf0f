"""SykesOfficial API integration (used for DataGod auto-fulfillment)."""

import json
import logging

from ..choices import Network, SupplierName
from ..exceptions import SupplierRejection
from ..units import normalize_phone, whole_gigabytes
from .base import BalanceResult, BaseSupplier, PurchaseResult, StatusResult

logger = logging.getLogger(__name__)

NETWORK_NAMES = {
    Network.MTN.value: "MTN",
    Network.TELECEL.value: "Telecel",
    Network.AT.value: "AirtelTigo",
}

# Orders scanned per status lookup; SykesOfficial has no single-order endpoint
HISTORY_PAGE_SIZE = 100


class SykesOfficialSupplier(BaseSupplier):
    """SykesOfficial reseller API.

    The supplier assigns a numeric order_id, which is the only handle for
    status lookups.
    """

    name = SupplierName.SYKESOFFICIAL.value
    display_name = "SykesOfficial"
    networks = (Network.MTN, Network.TELECEL, Network.AT)

    def _headers(self) -> dict:
        return {
            **super()._headers(),
            "X-API-KEY": self.api_key,
        }

    def _purchase(self, phone, data_amount, price, reference, network) -> PurchaseResult:
        payload = {
            "recipient_phone": normalize_phone(phone),
            "network": NETWORK_NAMES[network],
            "size_gb": whole_gigabytes(data_amount),
        }
        logger.info(
            "Sending data order to SykesOfficial: phone=%s size=%sGB cost=%s ref=%s",
            payload["recipient_phone"], payload["size_gb"], price, reference,
        )

        response = self._post("/api/orders", payload)
        body = self._json(response)

        if not self._is_ok(response) or not body.get("success"):
            raise SupplierRejection(
                self.display_name,
                body.get("message") or f"API request failed with status {response.status_code}",
                code=response.status_code,
            )

        order_id = str(body.get("order_id") or "")
        return PurchaseResult.ok(
            message=body.get("message") or "Order placed",
            data={"order_id": body.get("order_id"), "supplier_reference": order_id},
            supplier_reference=order_id,
        )

    def _check_status(self, reference) -> StatusResult:
        response = self._get("/api/orders", params={"limit": HISTORY_PAGE_SIZE, "offset": 0})
        body = self._json(response)

        if not self._is_ok(response) or not body.get("success"):
            return StatusResult.fail(body.get("message") or "Failed to fetch order history")

        for order in body.get("orders") or []:
            if str(order.get("id", order.get("order_id"))) == str(reference):
                return StatusResult.ok(status=str(order.get("status") or "Unknown"), data=order)

        return StatusResult.fail(f"Order {reference} not found in SykesOfficial history")

    def _get_wallet_balance(self) -> BalanceResult:
        response = self._get("/api/balance")
        body = self._json(response)

        if not self._is_ok(response) or not body.get("success"):
            return BalanceResult.fail(body.get("message") or "Failed to fetch wallet balance")

        balance = body.get("balance")
        return BalanceResult.ok(balance if balance is not None else "0")

    def status_reference(self, short_id, supplier_response=None) -> str:
        if isinstance(supplier_response, str):
            try:
                supplier_response = json.loads(supplier_response)
            except ValueError:
                supplier_response = None
        if isinstance(supplier_response, dict):
            order_id = supplier_response.get("order_id") or supplier_response.get("supplier_reference")
            if order_id:
                return str(order_id)
        return short_id
