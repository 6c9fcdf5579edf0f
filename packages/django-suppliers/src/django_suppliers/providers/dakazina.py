"""DataKazina API integration.

Authentication is an x-api-key header. Bundles are addressed by
shared_bundle id, and DataKazina assigns its own transaction_id which must
be used for status lookups.
"""

import json
import logging
from typing import Optional

from ..choices import Network, SupplierName
from ..exceptions import SupplierRejection, UnsupportedFormat
from ..units import whole_gigabytes
from .base import BalanceResult, BaseSupplier, PurchaseResult, StatusResult

logger = logging.getLogger(__name__)

# network_id values from DataKazina's documentation
NETWORK_IDS = {
    Network.MTN.value: 3,
}

# Bundle sizes (GB) DataKazina sells as shared bundles; the id is the size
SHARED_BUNDLE_SIZES = (1, 2, 3, 4, 5, 6, 7, 8, 10, 15, 20, 25, 30, 40, 50, 75, 100)


def get_shared_bundle_id(data_amount: str) -> int:
    """Map "5GB" to its shared_bundle id.

    Raises:
        UnsupportedFormat: If the size is not in SHARED_BUNDLE_SIZES
    """
    size = whole_gigabytes(data_amount)
    if size not in SHARED_BUNDLE_SIZES:
        available = ", ".join(f"{s}GB" for s in SHARED_BUNDLE_SIZES)
        raise UnsupportedFormat(data_amount, expected=f"one of {available}")
    return size


def extract_transaction_id(supplier_response) -> Optional[str]:
    """Find DataKazina's transaction id in a stored supplier response."""
    if isinstance(supplier_response, str):
        try:
            supplier_response = json.loads(supplier_response)
        except ValueError:
            return None
    if not isinstance(supplier_response, dict):
        return None

    nested = supplier_response.get("data")
    txn_id = (
        supplier_response.get("transaction_id")
        or (nested.get("transaction_id") if isinstance(nested, dict) else None)
        or supplier_response.get("transactionId")
    )
    return str(txn_id) if txn_id else None


class DataKazinaSupplier(BaseSupplier):
    """DataKazina reseller API."""

    name = SupplierName.DAKAZINA.value
    display_name = "DataKazina"
    networks = (Network.MTN,)

    def _headers(self) -> dict:
        return {
            **super()._headers(),
            "x-api-key": self.api_key,
        }

    def _purchase(self, phone, data_amount, price, reference, network) -> PurchaseResult:
        payload = {
            "recipient_msisdn": phone,
            "network_id": NETWORK_IDS[network],
            "shared_bundle": get_shared_bundle_id(data_amount),
            "incoming_api_ref": reference,
        }
        logger.info(
            "Sending data order to DataKazina: phone=%s bundle=%s cost=%s ref=%s",
            phone, payload["shared_bundle"], price, reference,
        )

        response = self._post("/buy-data-package", payload)
        body = self._json(response)

        if not self._is_ok(response):
            raise SupplierRejection(
                self.display_name,
                body.get("message") or f"API request failed with status {response.status_code}",
                code=response.status_code,
            )

        if not body.get("status"):
            raise SupplierRejection(self.display_name, body.get("message") or "Purchase failed")

        transaction_id = str(body.get("transaction_id") or "")
        extra = body.get("data") if isinstance(body.get("data"), dict) else {}
        return PurchaseResult.ok(
            message=body.get("message") or "Data purchase successful",
            data={"transaction_id": transaction_id, **extra},
            supplier_reference=transaction_id,
        )

    def _check_status(self, reference) -> StatusResult:
        response = self._post("/fetch-single-transaction", {"transaction_id": reference})
        if not self._is_ok(response):
            return StatusResult.fail(f"Failed to check transaction: {response.status_code}")

        body = self._json(response)
        status = body.get("status")
        data = body.get("data")
        transaction = body.get("transaction")
        if isinstance(data, dict) and data.get("status"):
            status = data["status"]
        elif isinstance(transaction, dict) and transaction.get("status"):
            status = transaction["status"]
        elif body.get("transaction_status"):
            status = body["transaction_status"]

        logger.debug("DataKazina transaction %s status: %r", reference, status)
        if status is None or status == "":
            return StatusResult.fail("No status in DataKazina response", data=body)
        return StatusResult.ok(status=str(status), data=body)

    def _get_wallet_balance(self) -> BalanceResult:
        response = self._get("/check-console-balance")
        if not self._is_ok(response):
            return BalanceResult.fail(f"Failed to fetch wallet balance: {response.status_code}")

        body = self._json(response)
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        balance = body.get("Wallet Balance")
        if balance is None:
            balance = body.get("balance")
        if balance is None:
            balance = data.get("balance", data.get("wallet_balance"))

        if balance is not None:
            return BalanceResult.ok(balance)
        if body.get("status") in ("Failed", False):
            return BalanceResult.fail(body.get("message") or "Failed to retrieve balance")
        return BalanceResult.fail("Unexpected response format from DataKazina")

    def status_reference(self, short_id, supplier_response=None) -> str:
        return extract_transaction_id(supplier_response) or short_id
