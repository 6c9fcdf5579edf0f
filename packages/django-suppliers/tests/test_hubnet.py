"""Tests for the Hubnet adapter."""

from unittest.mock import patch

import httpx
import pytest

from django_suppliers.choices import Network
from django_suppliers.providers.hubnet import HubnetSupplier


@pytest.fixture
def hubnet():
    return HubnetSupplier(api_key="hub-key", base_url="https://hubnet.test")


class TestHubnetPurchase:
    """Tests for HubnetSupplier.purchase."""

    def test_mtn_order(self, hubnet, fake_response, settings):
        settings.SUPPLIERS_HUBNET_WEBHOOK_URL = "https://shop.test/api/webhooks/hubnet"
        response = fake_response(200, {
            "status": True,
            "reason": "Transaction successful",
            "code": "0000",
            "transaction_id": "HN-778",
        })
        with patch.object(httpx.Client, "post", return_value=response) as mock_post:
            result = hubnet.purchase("0541112222", "5GB", 10, "FN-1-ABC")

        assert result.success is True
        assert result.supplier_reference == "HN-778"
        assert result.data["transaction_id"] == "HN-778"
        assert mock_post.call_args.args[0] == "https://hubnet.test/mtn-new-transaction"
        assert mock_post.call_args.kwargs["json"] == {
            "phone": "0541112222",
            "volume": 5000,
            "reference": "FN-1-ABC",
            "referrer": "0541112222",
            "webhook": "https://shop.test/api/webhooks/hubnet",
        }
        assert mock_post.call_args.kwargs["headers"]["token"] == "Bearer hub-key"

    def test_at_order_uses_at_endpoint(self, hubnet, fake_response):
        response = fake_response(200, {"status": True, "transaction_id": "1"})
        with patch.object(httpx.Client, "post", return_value=response) as mock_post:
            hubnet.purchase("0271112222", "500MB", 3, "AT-1", network=Network.AT)

        assert mock_post.call_args.args[0] == "https://hubnet.test/at-new-transaction"
        assert mock_post.call_args.kwargs["json"]["volume"] == 500

    def test_rejection_uses_reason(self, hubnet, fake_response):
        response = fake_response(200, {"status": False, "reason": "Insufficient balance", "code": "1001"})
        with patch.object(httpx.Client, "post", return_value=response):
            result = hubnet.purchase("0541112222", "5GB", 10, "REF")

        assert result.success is False
        assert result.message == "Insufficient balance"
        assert result.data == {"code": "1001"}

    def test_malformed_success_body_becomes_failed_result(self, hubnet, fake_response):
        response = fake_response(200, {"status": True, "transaction_id": "HN-1", "data": ["unexpected"]})
        with patch.object(httpx.Client, "post", return_value=response):
            result = hubnet.purchase("0541112222", "5GB", 10, "REF")

        assert result.success is False
        assert result.error_code == "TypeError"
        assert result.message.startswith("Unexpected response from Hubnet")

    def test_telecel_not_supported(self, hubnet):
        with patch.object(httpx.Client, "post") as mock_post:
            result = hubnet.purchase("0201112222", "5GB", 10, "REF", network=Network.TELECEL)

        assert result.success is False
        assert result.error_code == "UnsupportedNetworkError"
        mock_post.assert_not_called()


class TestHubnetStatus:
    """Hubnet only reports status through its webhook."""

    def test_check_status_is_webhook_only_without_network_call(self, hubnet):
        with patch.object(httpx.Client, "post") as mock_post, patch.object(httpx.Client, "get") as mock_get:
            result = hubnet.check_status("FN-1-ABC")

        assert result.success is False
        assert result.message == (
            "Hubnet does not support status polling. Status updates are received via webhook."
        )
        assert result.data == {"webhook_only": True, "supplier": "hubnet"}
        mock_post.assert_not_called()
        mock_get.assert_not_called()

    def test_webhook_only_even_without_api_key(self):
        result = HubnetSupplier(api_key="").check_status("REF")

        assert result.data["webhook_only"] is True

    def test_wallet_balance(self, hubnet, fake_response):
        response = fake_response(200, {"status": True, "data": {"wallet_balance": "152.40"}})
        with patch.object(httpx.Client, "get", return_value=response) as mock_get:
            result = hubnet.get_wallet_balance()

        assert result.success is True
        assert result.balance == "152.40"
        assert mock_get.call_args.args[0] == "https://hubnet.test/check_balance"
