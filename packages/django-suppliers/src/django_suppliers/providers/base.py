"""Base supplier interface shared by every data-bundle supplier."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

import httpx

from .. import conf
from ..choices import Network
from ..exceptions import SupplierError, SupplierRejection, TransportError, UnsupportedNetworkError

logger = logging.getLogger(__name__)


@dataclass
class PurchaseResult:
    """Uniform outcome of a purchase call."""

    success: bool
    message: str
    data: dict = field(default_factory=dict)
    supplier_reference: str = ""
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Optional[dict] = None, supplier_reference: str = "") -> "PurchaseResult":
        return cls(success=True, message=message, data=data or {}, supplier_reference=supplier_reference)

    @classmethod
    def fail(cls, message: str, error_code: Optional[str] = None, data: Optional[dict] = None) -> "PurchaseResult":
        return cls(success=False, message=message, data=data or {}, error_code=error_code)


@dataclass
class StatusResult:
    """Raw supplier status; normalization happens in the reconciler."""

    success: bool
    status: Optional[str] = None
    message: str = ""
    data: Any = None

    @classmethod
    def ok(cls, status: str, data: Any = None, message: str = "Status retrieved successfully") -> "StatusResult":
        return cls(success=True, status=status, message=message, data=data)

    @classmethod
    def fail(cls, message: str, data: Any = None) -> "StatusResult":
        return cls(success=False, message=message, data=data)


@dataclass
class BalanceResult:
    """Wallet balance, best effort."""

    success: bool
    balance: Optional[str] = None
    currency: str = "GHS"
    message: str = ""

    @classmethod
    def ok(cls, balance, currency: str = "GHS") -> "BalanceResult":
        return cls(success=True, balance=str(balance), currency=currency)

    @classmethod
    def fail(cls, message: str) -> "BalanceResult":
        return cls(success=False, message=message)


@dataclass
class CostPriceResult:
    """Supplier cost for a bundle, where the supplier exposes it."""

    success: bool
    cost_price: Optional[Decimal] = None
    message: str = ""


class BaseSupplier(ABC):
    """Abstract base class for data-bundle suppliers.

    Subclasses implement the supplier's wire format in ``_purchase`` and
    ``_check_status``. The public methods never raise: missing credentials,
    rejections, unparseable amounts, transport failures and malformed
    supplier bodies all come back as ``success=False`` results so the
    caller can persist the outcome.
    """

    name: str = "base"
    display_name: str = "Supplier"
    supports_polling: bool = True
    networks: tuple = (Network.MTN,)

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    def api_key(self) -> str:
        if self._api_key is not None:
            return self._api_key
        return conf.get_api_key(self.name)

    @property
    def base_url(self) -> str:
        if self._base_url is not None:
            return self._base_url.rstrip("/")
        return conf.get_base_url(self.name)

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            timeout = self._timeout if self._timeout is not None else conf.get_http_timeout()
            self._client = httpx.Client(timeout=timeout)
        return self._client

    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def not_configured_message(self) -> str:
        return f"{self.display_name} API key not configured"

    def supports_network(self, network: str) -> bool:
        return str(network).upper() in {str(n) for n in self.networks}

    # -------------------------------------------------------------------------
    # Capability interface
    # -------------------------------------------------------------------------

    def purchase(
        self,
        phone: str,
        data_amount: str,
        price,
        reference: str,
        network: str = Network.MTN,
    ) -> PurchaseResult:
        """Submit a bundle order. Acceptance is not delivery."""
        if not self.is_configured():
            logger.error("%s: cannot fulfill order %s", self.not_configured_message, reference)
            return PurchaseResult.fail(self.not_configured_message, error_code="ConfigurationError")

        try:
            if not self.supports_network(network):
                raise UnsupportedNetworkError(self.display_name, str(network))
            result = self._purchase(phone, data_amount, price, reference, str(network).upper())
        except SupplierRejection as e:
            logger.warning("%s rejected order %s: %s", self.display_name, reference, e)
            return PurchaseResult.fail(str(e), error_code="SupplierRejection", data={"code": e.code})
        except SupplierError as e:
            logger.warning("%s order %s failed: %s", self.display_name, reference, e)
            return PurchaseResult.fail(str(e), error_code=type(e).__name__)
        except Exception as e:
            logger.exception("Unexpected error from %s for order %s", self.display_name, reference)
            return PurchaseResult.fail(
                f"Unexpected response from {self.display_name}: {e}", error_code=type(e).__name__
            )

        if result.success:
            logger.info("%s accepted order %s", self.display_name, reference)
        else:
            logger.warning("%s order %s failed: %s", self.display_name, reference, result.message)
        return result

    def check_status(self, reference: str) -> StatusResult:
        """Return the supplier's raw status string for an order."""
        if not self.supports_polling:
            return self.webhook_only_result()

        if not self.is_configured():
            return StatusResult.fail(self.not_configured_message)

        try:
            return self._check_status(reference)
        except SupplierError as e:
            logger.warning("%s status check for %s failed: %s", self.display_name, reference, e)
            return StatusResult.fail(str(e))
        except Exception as e:
            logger.exception("Unexpected error checking %s status for %s", self.display_name, reference)
            return StatusResult.fail(f"Unexpected response from {self.display_name}: {e}")

    def get_wallet_balance(self) -> BalanceResult:
        if not self.is_configured():
            return BalanceResult.fail(self.not_configured_message)

        try:
            return self._get_wallet_balance()
        except SupplierError as e:
            logger.error("Failed to fetch %s wallet balance: %s", self.display_name, e)
            return BalanceResult.fail(str(e))
        except Exception as e:
            logger.exception("Unexpected error fetching %s wallet balance", self.display_name)
            return BalanceResult.fail(f"Unexpected response from {self.display_name}: {e}")

    def get_cost_price(self, data_amount: str) -> CostPriceResult:
        return CostPriceResult(
            success=False,
            message=f"Cost price lookup not available for {self.display_name}",
        )

    def status_reference(self, short_id: str, supplier_response: Optional[dict] = None) -> str:
        """Key used to look the order up at the supplier. Defaults to our short id."""
        return short_id

    def webhook_only_result(self) -> StatusResult:
        return StatusResult.fail(
            f"{self.display_name} does not support status polling. "
            "Status updates are received via webhook.",
            data={"webhook_only": True, "supplier": self.name},
        )

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def _purchase(self, phone: str, data_amount: str, price, reference: str, network: str) -> PurchaseResult:
        raise NotImplementedError

    def _check_status(self, reference: str) -> StatusResult:
        raise NotImplementedError

    def _get_wallet_balance(self) -> BalanceResult:
        return BalanceResult.fail(f"Wallet balance check not available for {self.display_name}")

    # -------------------------------------------------------------------------
    # HTTP helpers
    # -------------------------------------------------------------------------

    def _headers(self) -> dict:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def _post(self, path: str, payload: dict) -> httpx.Response:
        try:
            return self.client.post(f"{self.base_url}{path}", json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(self.display_name, str(e) or type(e).__name__, original_error=e) from e

    def _get(self, path: str, params: Optional[dict] = None) -> httpx.Response:
        try:
            return self.client.get(f"{self.base_url}{path}", params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise TransportError(self.display_name, str(e) or type(e).__name__, original_error=e) from e

    def _json(self, response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                self.display_name,
                f"Invalid JSON response (HTTP {response.status_code})",
                original_error=e,
            ) from e
        return body if isinstance(body, dict) else {"data": body}

    @staticmethod
    def _is_ok(response: httpx.Response) -> bool:
        return 200 <= response.status_code < 300
