# expressmart/services/paystack_client.py
from urllib.parse import quote

import requests

from expressmart.domain.errors import PaystackError
from expressmart.utils.retry import http_retry
from expressmart.utils.logging import get_logger

logger = get_logger(__name__)


class PaystackClient:
    def __init__(self, secret_key: str, base_url: str = "https://api.paystack.co", timeout: int = 10):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.info(f"PaystackClient GET {url}")
        return requests.get(
            url,
            headers={"Authorization": f"Bearer {self.secret_key}"},
            timeout=self.timeout,
        )

    def verify_transaction(self, reference: str) -> dict:
        """
        Zwraca pole `data` potwierdzonej transakcji.
        PaystackError gdy bramka odrzuca weryfikację albo status != success.
        """
        resp = self._get(f"transaction/verify/{quote(reference, safe='')}")

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if not resp.ok or payload.get("status") is not True:
            logger.warning(f"Paystack verify {reference} rejected: HTTP {resp.status_code}")
            raise PaystackError("Payment verification failed", payload)

        data = payload.get("data")
        if not isinstance(data, dict):
            data = {}
        if data.get("status") != "success":
            raise PaystackError(f"Payment status is {data.get('status')}", payload)

        return data
