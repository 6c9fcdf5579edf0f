"""Hubnet API integration.

Hubnet confirms delivery only through its inbound webhook; there is no
endpoint to poll, so ``check_status`` answers locally.
"""

import logging

from .. import conf
from ..choices import Network, SupplierName
from ..exceptions import SupplierRejection
from ..units import parse_megabytes
from .base import BalanceResult, BaseSupplier, PurchaseResult

logger = logging.getLogger(__name__)

# Hubnet path segment per network
NETWORK_PATHS = {
    Network.MTN.value: "mtn",
    Network.AT.value: "at",
}


class HubnetSupplier(BaseSupplier):
    """Hubnet business API (volumes in MB, webhook-only status)."""

    name = SupplierName.HUBNET.value
    display_name = "Hubnet"
    supports_polling = False
    networks = (Network.MTN, Network.AT)

    def _headers(self) -> dict:
        return {
            **super()._headers(),
            "token": f"Bearer {self.api_key}",
        }

    def _purchase(self, phone, data_amount, price, reference, network) -> PurchaseResult:
        volume = parse_megabytes(data_amount, mb_per_gb=1000)
        payload = {
            "phone": phone,
            "volume": volume,
            "reference": reference,
            "referrer": phone,
        }
        webhook = conf.get_hubnet_webhook_url()
        if webhook:
            payload["webhook"] = webhook

        logger.info(
            "Sending data order to Hubnet: phone=%s volume=%sMB network=%s cost=%s ref=%s",
            phone, volume, network, price, reference,
        )

        response = self._post(f"/{NETWORK_PATHS[network]}-new-transaction", payload)
        body = self._json(response)

        if self._is_ok(response) and body.get("status") is True:
            transaction_id = str(body.get("transaction_id") or "")
            return PurchaseResult.ok(
                message=body.get("message") or body.get("reason") or "Order submitted successfully",
                data={**(body.get("data") or {}), "transaction_id": transaction_id, "code": body.get("code")},
                supplier_reference=transaction_id,
            )

        raise SupplierRejection(
            self.display_name,
            body.get("reason") or body.get("message") or f"API request failed with status {response.status_code}",
            code=body.get("code"),
        )

    def _get_wallet_balance(self) -> BalanceResult:
        response = self._get("/check_balance")
        body = self._json(response)

        if not self._is_ok(response) or body.get("status") is False:
            return BalanceResult.fail(body.get("message") or f"Failed to fetch wallet balance: {response.status_code}")

        data = body.get("data") or {}
        balance = data.get("wallet_balance", data.get("balance", body.get("balance")))
        if balance is None:
            return BalanceResult.fail("Unexpected response format from Hubnet")
        return BalanceResult.ok(balance)
