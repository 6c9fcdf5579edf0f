"""Tests for the DataKazina adapter."""

from unittest.mock import patch

import httpx
import pytest

from django_suppliers.exceptions import UnsupportedFormat
from django_suppliers.providers.dakazina import (
    DataKazinaSupplier,
    extract_transaction_id,
    get_shared_bundle_id,
)


@pytest.fixture
def dakazina():
    return DataKazinaSupplier(api_key="dk-key", base_url="https://dakazina.test/api/v1")


class TestHelpers:
    """Tests for bundle id and transaction id helpers."""

    def test_shared_bundle_id(self):
        assert get_shared_bundle_id("5GB") == 5

    def test_unsold_size_rejected(self):
        with pytest.raises(UnsupportedFormat):
            get_shared_bundle_id("9GB")

    def test_transaction_id_from_top_level(self):
        assert extract_transaction_id({"transaction_id": "TX1"}) == "TX1"

    def test_transaction_id_nested(self):
        assert extract_transaction_id({"data": {"transaction_id": 42}}) == "42"

    def test_transaction_id_camel_case(self):
        assert extract_transaction_id('{"transactionId": "TX9"}') == "TX9"

    def test_plain_text_response(self):
        assert extract_transaction_id("Supplier timed out") is None


class TestDataKazinaSupplier:
    """Tests for DataKazinaSupplier."""

    def test_purchase(self, dakazina, fake_response):
        response = fake_response(200, {"status": True, "message": "Order queued", "transaction_id": "TX-55"})
        with patch.object(httpx.Client, "post", return_value=response) as mock_post:
            result = dakazina.purchase("0541112222", "10GB", 40, "FN-1-ABC")

        assert result.success is True
        assert result.supplier_reference == "TX-55"
        assert result.data == {"transaction_id": "TX-55"}
        assert mock_post.call_args.kwargs["json"] == {
            "recipient_msisdn": "0541112222",
            "network_id": 3,
            "shared_bundle": 10,
            "incoming_api_ref": "FN-1-ABC",
        }
        assert mock_post.call_args.kwargs["headers"]["x-api-key"] == "dk-key"

    def test_purchase_rejected(self, dakazina, fake_response):
        response = fake_response(200, {"status": False, "message": "Insufficient wallet balance"})
        with patch.object(httpx.Client, "post", return_value=response):
            result = dakazina.purchase("0541112222", "5GB", 20, "REF")

        assert result.success is False
        assert result.message == "Insufficient wallet balance"

    def test_http_error_status(self, dakazina, fake_response):
        response = fake_response(500, {})
        with patch.object(httpx.Client, "post", return_value=response):
            result = dakazina.purchase("0541112222", "5GB", 20, "REF")

        assert result.success is False
        assert result.message == "API request failed with status 500"

    def test_status_reference_prefers_transaction_id(self, dakazina):
        assert dakazina.status_reference("FN-1", {"transaction_id": "TX-55"}) == "TX-55"
        assert dakazina.status_reference("FN-1", None) == "FN-1"

    def test_check_status_reads_nested_status(self, dakazina, fake_response):
        response = fake_response(200, {"status": True, "data": {"status": "Delivered"}})
        with patch.object(httpx.Client, "post", return_value=response) as mock_post:
            result = dakazina.check_status("TX-55")

        assert result.success is True
        assert result.status == "Delivered"
        assert mock_post.call_args.kwargs["json"] == {"transaction_id": "TX-55"}

    def test_wallet_balance(self, dakazina, fake_response):
        response = fake_response(200, {"Wallet Balance": 88.5})
        with patch.object(httpx.Client, "get", return_value=response):
            result = dakazina.get_wallet_balance()

        assert result.success is True
        assert result.balance == "88.5"
