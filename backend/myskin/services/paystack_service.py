"""
Paystack REST integration.

Only the two calls checkout needs are wrapped: ``/transaction/initialize``
and ``/transaction/verify/<reference>``. Both return the ``data`` object of
the Paystack envelope or raise ``PaymentGatewayError``.
"""

import logging
import secrets
import string
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from myskin.core.config import (
    PAYSTACK_TIMEOUT_SECONDS,
    get_paystack_base_url,
    get_paystack_secret_key,
)
from myskin.core.exceptions import PaymentGatewayError
from myskin.domain.interfaces import IPaymentGateway

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def generate_reference(prefix: str = "myskin") -> str:
    """Build a unique transaction reference, e.g. ``myskin_1718000000000_k3j9x0a1b``."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{millis}_{suffix}"


class PaystackClient(IPaymentGateway):
    """Paystack API client implementing IPaymentGateway."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: int = PAYSTACK_TIMEOUT_SECONDS,
    ):
        self.secret_key = secret_key if secret_key is not None else get_paystack_secret_key()
        self.base_url = (base_url or get_paystack_base_url()).rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        if not self.secret_key:
            raise PaymentGatewayError(
                "Payment gateway is not configured", "PAYSTACK_SECRET_KEY is not set"
            )
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, failure_message: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = self._headers()
        try:
            response = requests.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.HTTPError as e:
            details = _gateway_message(e.response) or str(e)
            logger.error(
                failure_message,
                extra={
                    "context": {
                        "path": path,
                        "status_code": e.response.status_code if e.response is not None else None,
                        "details": details,
                    }
                },
            )
            raise PaymentGatewayError(failure_message, details) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                failure_message,
                extra={"context": {"path": path, "error": str(e)}},
                exc_info=True,
            )
            raise PaymentGatewayError(failure_message, str(e)) from e
        except ValueError as e:
            logger.error(
                "Payment gateway returned invalid JSON",
                extra={"context": {"path": path}},
            )
            raise PaymentGatewayError(failure_message, "Invalid response from gateway") from e

        if not body.get("status"):
            details = body.get("message") or "Gateway reported failure"
            logger.warning(
                failure_message,
                extra={"context": {"path": path, "details": details}},
            )
            raise PaymentGatewayError(failure_message, details)

        return body.get("data") or {}

    def initialize_transaction(
        self,
        email: str,
        amount_kobo: int,
        reference: str,
        metadata: Dict[str, Any],
        callback_url: str,
    ) -> Dict[str, Any]:
        payload = {
            "email": email,
            "amount": amount_kobo,
            "reference": reference,
            "metadata": metadata,
            "callback_url": callback_url,
        }
        logger.info(
            "Initializing Paystack transaction",
            extra={"context": {"reference": reference, "amount_kobo": amount_kobo}},
        )
        return self._request(
            "POST", "/transaction/initialize", "Payment initialization failed", json=payload
        )

    def verify_transaction(self, reference: str) -> Dict[str, Any]:
        logger.info(
            "Verifying Paystack transaction",
            extra={"context": {"reference": reference}},
        )
        return self._request(
            "GET",
            f"/transaction/verify/{quote(reference, safe='')}",
            "Payment verification failed",
        )


def _gateway_message(response) -> Optional[str]:
    if response is None:
        return None
    try:
        return response.json().get("message")
    except ValueError:
        return response.text or None
