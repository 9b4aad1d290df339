# storefront/services/payment_client.py
import hashlib
import hmac
import secrets
import time

import requests
from requests import RequestException

from storefront.domain.errors import ExternalServiceError
from storefront.utils.retry import http_retry
from storefront.utils.settings import RAZORPAY_API_URL, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentClient:
    """
    Razorpay order creation and signature checks.

    Without API keys, orders are mocked locally. Signature verification
    always needs the key secret; with no secret every signature fails.
    """

    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        base_url: str | None = None,
        timeout: int = 5,
    ):
        self.key_id = RAZORPAY_KEY_ID if key_id is None else key_id
        self.key_secret = RAZORPAY_KEY_SECRET if key_secret is None else key_secret
        self.base_url = (base_url or RAZORPAY_API_URL).rstrip("/")
        self.timeout = timeout

    @property
    def live(self) -> bool:
        return bool(self.key_id and self.key_secret)

    def create_order(self, amount: int, currency: str, receipt: str, user_id: int) -> dict:
        """amount is in minor units (paisa)."""
        if not self.live:
            order = {
                "id": f"order_{int(time.time() * 1000)}_{user_id}_{secrets.token_hex(3)}",
                "entity": "order",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
                "status": "created",
            }
            logger.info(f"Mock payment order {order['id']} for user {user_id}")
            return order

        try:
            return self._post_order(
                {
                    "amount": amount,
                    "currency": currency,
                    "receipt": receipt,
                    "notes": {"userId": str(user_id)},
                }
            )
        except RequestException as e:
            logger.error(f"Payment provider order creation failed: {e}")
            raise ExternalServiceError("Payment provider is unavailable.") from e

    @http_retry()
    def _post_order(self, payload: dict) -> dict:
        url = f"{self.base_url}/orders"
        logger.info(f"PaymentClient POST {url}")

        resp = requests.post(url, json=payload, auth=(self.key_id, self.key_secret), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        message = f"{order_id}|{payment_id}".encode()
        return hmac.new(self.key_secret.encode(), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not self.key_secret:
            logger.error("RAZORPAY_KEY_SECRET is not configured, rejecting payment signature")
            return False

        return hmac.compare_digest(self.expected_signature(order_id, payment_id).encode(), signature.encode())
