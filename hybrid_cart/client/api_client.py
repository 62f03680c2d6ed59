# hybrid_cart/client/api_client.py
from typing import Dict, List

import requests

from hybrid_cart.utils.retry import http_retry
from hybrid_cart.utils.settings import API_BASE_URL
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Odpowiedz != 2xx albo brak polaczenia; message z pola `error` serwera."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def cart_items(cart: Dict[int, int]) -> List[dict]:
    return [
        {"product_id": int(product_id), "quantity": quantity}
        for product_id, quantity in cart.items()
        if quantity > 0
    ]


class ShopApiClient:
    """
    Klient HTTP do API sklepu.
    -fetch_products z retry (tylko odczyt)
    -sync_cart i checkout bez retry, nastepna edycja koszyka i tak wysle sync
    """

    def __init__(self, base_url: str | None = None, timeout: int = 2, session: requests.Session | None = None):
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @http_retry()
    def fetch_products(self) -> List[dict]:
        url = f"{self.base_url}/products"
        logger.info(f"ShopApiClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def sync_cart(self, user_id: int, cart: Dict[int, int]) -> dict:
        return self._post("/cart/sync", {"user_id": user_id, "items": cart_items(cart)})

    def checkout(self, user_id: int, cart: Dict[int, int]) -> dict:
        return self._post("/checkout", {"user_id": user_id, "items": cart_items(cart)})

    def _post(self, path: str, body: dict) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"ShopApiClient POST {url}")

        try:
            resp = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(str(e)) from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if resp.status_code >= 400:
            raise ApiError(data.get("error") or f"HTTP {resp.status_code}", resp.status_code)
        return data
