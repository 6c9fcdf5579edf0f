"""Tests for admin SMS notifications."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from django_bundle_orders.notifications import (
    ArkeselSMSNotifier,
    BaseSMSNotifier,
    ConsoleSMSNotifier,
    SMSResult,
    format_order_notification,
    get_notifier,
    notify_new_order,
    to_international,
)
from django_bundle_orders.services import create_order


class RecordingNotifier(BaseSMSNotifier):
    backend_name = "recording"

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = fail_for

    def send(self, to, message):
        if to in self.fail_for:
            raise RuntimeError("gateway unreachable")
        self.sent.append((to, message))
        return SMSResult(success=True, message="sent")


class TestFormatting:
    """Tests for message formatting helpers."""

    def test_order_message(self):
        message = format_order_notification("fastnet", "FN-1-ABC", "0541112222", "5GB")

        assert message == "New FASTNET Order!\nID: FN-1-ABC\nPhone: 0541112222\nPackage: 5GB"

    @pytest.mark.parametrize(
        "phone, expected",
        [
            ("0541112222", "233541112222"),
            ("+233 54 111 2222", "233541112222"),
            ("541112222", "233541112222"),
        ],
    )
    def test_to_international(self, phone, expected):
        assert to_international(phone) == expected


class TestNotifiers:
    """Tests for SMS backends."""

    def test_console_backend(self):
        assert ConsoleSMSNotifier().send("0541112222", "hi").success is True

    def test_get_notifier(self, settings):
        settings.BUNDLE_ORDERS_SMS_BACKEND = "console"

        assert isinstance(get_notifier(), ConsoleSMSNotifier)
        assert isinstance(get_notifier("arkesel"), ArkeselSMSNotifier)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_notifier("pigeon")

    def test_arkesel_send(self):
        notifier = ArkeselSMSNotifier(api_key="ark-key", sender_id="WTData")
        response = MagicMock(status_code=200, text='{"code":"ok"}')

        with patch.object(httpx.Client, "get", return_value=response) as mock_get:
            result = notifier.send("0541112222", "hello")

        assert result.success is True
        params = mock_get.call_args.kwargs["params"]
        assert params["to"] == "233541112222"
        assert params["from"] == "WTData"
        assert params["sms"] == "hello"
        assert params["api_key"] == "ark-key"

    def test_arkesel_error_body_mentioning_token_fails(self):
        notifier = ArkeselSMSNotifier(api_key="bad-key")
        response = MagicMock(status_code=401, text="Invalid API TOKEN")

        with patch.object(httpx.Client, "get", return_value=response):
            result = notifier.send("0541112222", "hello")

        assert result.success is False
        assert result.message == "Invalid API TOKEN"

    def test_arkesel_without_key(self, monkeypatch):
        monkeypatch.delenv("ARKESEL_API_KEY", raising=False)
        notifier = ArkeselSMSNotifier(api_key="")

        with patch.object(httpx.Client, "get") as mock_get:
            result = notifier.send("0541112222", "hello")

        assert result.success is False
        mock_get.assert_not_called()

    def test_arkesel_transport_error(self):
        notifier = ArkeselSMSNotifier(api_key="ark-key")

        with patch.object(httpx.Client, "get", side_effect=httpx.ConnectError("refused")):
            result = notifier.send("0541112222", "hello")

        assert result.success is False
        assert result.message == "refused"


@pytest.mark.django_db
class TestNotifyNewOrder:
    """Tests for notify_new_order."""

    def test_every_admin_phone_notified(self, settings, make_order):
        settings.BUNDLE_ORDERS_SMS_NOTIFY_PHONES = ["0241111111", "0242222222"]
        notifier = RecordingNotifier()
        order = make_order()

        assert notify_new_order(order, notifier=notifier) == 2
        assert [to for to, _ in notifier.sent] == ["0241111111", "0242222222"]

    def test_no_phones_configured(self, settings, make_order):
        settings.BUNDLE_ORDERS_SMS_NOTIFY_PHONES = []

        assert notify_new_order(make_order(), notifier=RecordingNotifier()) == 0

    def test_failures_are_swallowed(self, settings, make_order):
        settings.BUNDLE_ORDERS_SMS_NOTIFY_PHONES = ["0241111111", "0242222222"]
        notifier = RecordingNotifier(fail_for=("0241111111",))

        assert notify_new_order(make_order(), notifier=notifier) == 1

    def test_sent_once_per_new_order(self, settings, stub_supplier):
        settings.BUNDLE_ORDERS_SMS_NOTIFY_PHONES = ["0241111111"]
        notifier = RecordingNotifier()

        create_order("fastnet", "0541112222", "5GB", 10, reference="REF1", notifier=notifier)
        create_order("fastnet", "0541112222", "5GB", 10, reference="REF1", notifier=notifier)

        assert len(notifier.sent) == 1
        assert notifier.sent[0][1].startswith("New FASTNET Order!")

    def test_notifier_failure_does_not_block_order(self, settings, stub_supplier):
        settings.BUNDLE_ORDERS_SMS_NOTIFY_PHONES = ["0241111111"]

        result = create_order(
            "fastnet", "0541112222", "5GB", 10, reference="REF1",
            notifier=RecordingNotifier(fail_for=("0241111111",)),
        )

        assert result.order.status == "PROCESSING"
