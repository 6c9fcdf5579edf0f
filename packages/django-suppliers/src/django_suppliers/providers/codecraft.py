"""Code Craft Network API integration (MTN, AT iShare, Telecel).

Code Craft reports business failures as numeric codes rather than messages;
each code maps to a fixed message in CODE_MESSAGES.
"""

import logging

from ..choices import Network, SupplierName
from ..exceptions import SupplierRejection
from ..units import format_gigabytes, parse_gigabytes
from .base import BalanceResult, BaseSupplier, PurchaseResult, StatusResult

logger = logging.getLogger(__name__)

CODE_MESSAGES = {
    100: "Admin has low wallet balance",
    101: "Account is out of stock",
    102: "Agent not found",
    103: "Price not found",
    555: "Network not found",
}


def _response_code(response, body: dict) -> int:
    """Code Craft puts its code in the body; fall back to the HTTP status."""
    try:
        return int(body.get("http_code", response.status_code))
    except (TypeError, ValueError):
        return response.status_code


class CodeCraftSupplier(BaseSupplier):
    """Code Craft Network agent API."""

    name = SupplierName.CODECRAFT.value
    display_name = "Code Craft"
    networks = (Network.MTN, Network.AT, Network.TELECEL)

    def _purchase(self, phone, data_amount, price, reference, network) -> PurchaseResult:
        gig = format_gigabytes(parse_gigabytes(data_amount))
        payload = {
            "agent_api": self.api_key,
            "recipient_number": phone,
            "network": network,
            "gig": gig,
            "reference_id": reference,
        }
        logger.info(
            "Sending %s order to Code Craft: phone=%s gig=%s cost=%s ref=%s",
            network, phone, gig, price, reference,
        )

        response = self._post("/initiate.php", payload)
        body = self._json(response)
        code = _response_code(response, body)

        if code == 200 and str(body.get("status", "")).lower() == "successful":
            return PurchaseResult.ok(message=body.get("message") or "Order submitted successfully", data=body)

        if code in CODE_MESSAGES:
            raise SupplierRejection(self.display_name, CODE_MESSAGES[code], code=code)

        raise SupplierRejection(
            self.display_name,
            body.get("message") or f"Order failed with code {code}",
            code=code,
        )

    def _check_status(self, reference) -> StatusResult:
        response = self._post(
            "/response_regular.php",
            {"reference_id": reference, "agent_api": self.api_key},
        )
        body = self._json(response)

        if str(body.get("status", "")).lower() == "success" and str(body.get("code")) == "200":
            details = body.get("order_details") or {}
            return StatusResult.ok(status=details.get("order_status") or "Unknown", data=details)

        return StatusResult.fail(body.get("message") or "Failed to retrieve order status", data=body)

    def get_wallet_balance(self) -> BalanceResult:
        # No balance endpoint in the Code Craft agent API
        return BalanceResult.fail("Wallet balance check not available for Code Craft Network")
