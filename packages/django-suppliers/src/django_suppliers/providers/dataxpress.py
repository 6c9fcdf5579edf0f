"""DataXpress API integration (MTN bundles, bearer-token JSON API)."""

import logging
from decimal import Decimal, InvalidOperation

from ..choices import Network, SupplierName
from ..exceptions import SupplierError
from ..units import format_gigabytes, parse_gigabytes
from .base import BalanceResult, BaseSupplier, CostPriceResult, PurchaseResult, StatusResult

logger = logging.getLogger(__name__)


class DataXpressSupplier(BaseSupplier):
    """DataXpress reseller API.

    Orders are keyed by our own short id, so no supplier transaction id is
    needed for status lookups.
    """

    name = SupplierName.DATAXPRESS.value
    display_name = "DataXpress"
    networks = (Network.MTN,)

    def _headers(self) -> dict:
        return {
            **super()._headers(),
            "Authorization": f"Bearer {self.api_key}",
        }

    def _purchase(self, phone, data_amount, price, reference, network) -> PurchaseResult:
        package = format_gigabytes(parse_gigabytes(data_amount))
        payload = {
            "phone": phone,
            "package": package,
            "network": network,
            "reference": reference,
        }
        logger.info(
            "Sending data order to DataXpress: phone=%s package=%sGB cost=%s ref=%s",
            phone, package, price, reference,
        )

        response = self._post("/buy-data", payload)
        body = self._json(response)

        if self._is_ok(response) and body.get("success"):
            return PurchaseResult.ok(
                message=body.get("message") or "Order submitted successfully",
                data=body.get("data") or {},
            )

        return PurchaseResult.fail(
            body.get("message") or f"API request failed with status {response.status_code}",
            data=body,
        )

    def _check_status(self, reference) -> StatusResult:
        response = self._get(f"/orders/{reference}")
        body = self._json(response)

        if not self._is_ok(response) or not body.get("success"):
            return StatusResult.fail(body.get("message") or "Failed to retrieve order status", data=body)

        data = body.get("data") or {}
        return StatusResult.ok(status=str(data.get("status") or "Unknown"), data=data)

    def _get_wallet_balance(self) -> BalanceResult:
        response = self._get("/wallet/balance")
        body = self._json(response)

        if not self._is_ok(response) or not body.get("success"):
            return BalanceResult.fail(body.get("message") or f"Failed to fetch wallet balance: {response.status_code}")

        data = body.get("data") or {}
        balance = data.get("balance", body.get("balance"))
        if balance is None:
            return BalanceResult.fail("Unexpected response format from DataXpress")
        return BalanceResult.ok(balance, currency=data.get("currency", "GHS"))

    def get_cost_price(self, data_amount: str) -> CostPriceResult:
        if not self.is_configured():
            return CostPriceResult(success=False, message=self.not_configured_message)

        try:
            package = format_gigabytes(parse_gigabytes(data_amount))
            response = self._get("/packages/cost", params={"package": package})
            body = self._json(response)
        except SupplierError as e:
            return CostPriceResult(success=False, message=str(e))

        if not self._is_ok(response) or not body.get("success"):
            return CostPriceResult(success=False, message=body.get("message") or "Failed to fetch cost price")

        try:
            cost = Decimal(str((body.get("data") or {}).get("cost")))
        except (InvalidOperation, TypeError):
            return CostPriceResult(success=False, message="Unexpected response format from DataXpress")
        return CostPriceResult(success=True, cost_price=cost)
