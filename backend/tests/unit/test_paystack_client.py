"""
Unit tests for the Paystack client.

``requests.request`` is patched; no test reaches the network.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from myskin.core.exceptions import PaymentGatewayError
from myskin.services.paystack_service import PaystackClient, generate_reference


def _response(status_code=200, body=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def client():
    return PaystackClient(secret_key="sk_test_123", base_url="https://api.paystack.test/")


@pytest.mark.payments
class TestPaystackClient:
    def test_generate_reference_format(self):
        reference = generate_reference()
        prefix, millis, suffix = reference.split("_")
        assert prefix == "myskin"
        assert millis.isdigit()
        assert len(suffix) == 9
        assert generate_reference() != reference

    @patch("myskin.services.paystack_service.requests.request")
    def test_initialize_posts_payload_and_returns_data(self, mock_request, client):
        mock_request.return_value = _response(
            body={"status": True, "data": {"authorization_url": "https://pay", "reference": "r1"}}
        )

        data = client.initialize_transaction(
            email="ada@example.com",
            amount_kobo=500000,
            reference="r1",
            metadata={"cart_items": []},
            callback_url="http://localhost:3000/payment/callback",
        )

        assert data["authorization_url"] == "https://pay"
        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://api.paystack.test/transaction/initialize")
        assert kwargs["headers"]["Authorization"] == "Bearer sk_test_123"
        assert kwargs["json"]["amount"] == 500000

    @patch("myskin.services.paystack_service.requests.request")
    def test_verify_uses_reference_in_path(self, mock_request, client):
        mock_request.return_value = _response(body={"status": True, "data": {"status": "success"}})
        assert client.verify_transaction("abc")["status"] == "success"
        assert mock_request.call_args[0] == ("GET", "https://api.paystack.test/transaction/verify/abc")

    @patch("myskin.services.paystack_service.requests.request")
    def test_verify_escapes_reference(self, mock_request, client):
        mock_request.return_value = _response(body={"status": True, "data": {"status": "success"}})
        client.verify_transaction("abc?x#y/../z")
        assert mock_request.call_args[0] == (
            "GET",
            "https://api.paystack.test/transaction/verify/abc%3Fx%23y%2F..%2Fz",
        )

    @patch("myskin.services.paystack_service.requests.request")
    def test_http_error_carries_gateway_message(self, mock_request, client):
        mock_request.return_value = _response(400, {"status": False, "message": "Invalid key"})
        with pytest.raises(PaymentGatewayError) as exc_info:
            client.verify_transaction("abc")
        assert exc_info.value.message == "Payment verification failed"
        assert exc_info.value.details == "Invalid key"

    @patch("myskin.services.paystack_service.requests.request")
    def test_status_false_raises(self, mock_request, client):
        mock_request.return_value = _response(body={"status": False, "message": "Duplicate reference"})
        with pytest.raises(PaymentGatewayError) as exc_info:
            client.initialize_transaction("a@b.co", 100, "r", {}, "http://cb")
        assert exc_info.value.details == "Duplicate reference"

    @patch("myskin.services.paystack_service.requests.request")
    def test_network_error_raises(self, mock_request, client):
        mock_request.side_effect = requests.exceptions.ConnectionError("boom")
        with pytest.raises(PaymentGatewayError):
            client.verify_transaction("abc")

    def test_missing_secret_key(self):
        with pytest.raises(PaymentGatewayError) as exc_info:
            PaystackClient(secret_key="").verify_transaction("abc")
        assert exc_info.value.message == "Payment gateway is not configured"
