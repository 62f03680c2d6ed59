# hybrid_cart/client/__init__.py
from hybrid_cart.client.api_client import ShopApiClient, ApiError
from hybrid_cart.client.cart_controller import CartController, CheckoutInProgress, CheckoutOutcome
from hybrid_cart.client.debounce import Debouncer
from hybrid_cart.client.local_store import LocalCartStore

__all__ = [
    "ShopApiClient",
    "ApiError",
    "CartController",
    "CheckoutInProgress",
    "CheckoutOutcome",
    "Debouncer",
    "LocalCartStore",
]
