# hybrid_cart/client/cart_controller.py
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

import requests

from hybrid_cart.client.api_client import ShopApiClient, ApiError
from hybrid_cart.client.debounce import Debouncer
from hybrid_cart.client.local_store import LocalCartStore
from hybrid_cart.utils.settings import SYNC_DEBOUNCE_SECONDS
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)

SYNCING = "Syncing..."
SYNCED = "Synced"
SYNC_FAILED = "Sync failed"


class CheckoutInProgress(RuntimeError):
    """Koszyk zablokowany do czasu odpowiedzi na checkout."""


@dataclass
class CheckoutOutcome:
    success: bool
    message: str
    order_id: int | None = None


class CartController:
    """
    Lokalny koszyk klienta (optymistyczny).

    -add/remove zmieniaja mape od razu, od razu zapis na dysk
    -sync do backendu przez debounce (1s ciszy), zawsze pelny koszyk
    -checkout od razu, bez debounce; w trakcie koszyk jest zablokowany
    -blad synca nie rusza lokalnego koszyka, kolejna edycja wysle sync jeszcze raz
    """

    def __init__(
        self,
        api: ShopApiClient,
        store: LocalCartStore,
        user_id: int = 1,
        debounce_seconds: float = SYNC_DEBOUNCE_SECONDS,
    ):
        self.api = api
        self.store = store
        self.user_id = user_id
        self.cart: Dict[int, int] = store.load()
        self.products: Dict[int, dict] = {}
        self.sync_status = ""
        self.last_message = ""
        self.checkout_in_progress = False
        self._lock = threading.Lock()
        self._debouncer = Debouncer(debounce_seconds, self._sync)

    # =====================================================
    # QUERY
    # =====================================================
    @property
    def count(self) -> int:
        return sum(self.cart.values())

    @property
    def total(self) -> Decimal:
        total = Decimal("0.00")
        for product_id, quantity in self.cart.items():
            product = self.products.get(product_id)
            if product:
                total += Decimal(str(product["price"])) * quantity
        return total.quantize(Decimal("0.01"))

    @property
    def sync_pending(self) -> bool:
        return self._debouncer.pending

    def refresh_products(self) -> List[dict]:
        try:
            products = self.api.fetch_products()
        except requests.RequestException as e:
            logger.error(f"Error fetching products: {e}")
            self.last_message = "Error loading products"
            return list(self.products.values())

        self.products = {p["id"]: p for p in products}
        return products

    # =====================================================
    # COMMANDS
    # =====================================================
    def add(self, product_id: int) -> Dict[int, int]:
        with self._lock:
            self._ensure_editable()
            self.cart[product_id] = self.cart.get(product_id, 0) + 1
            snapshot = self._persist()
        self._debouncer.schedule(snapshot)
        self.last_message = "Item added to cart!"
        return snapshot

    def remove(self, product_id: int) -> Dict[int, int]:
        with self._lock:
            self._ensure_editable()
            if self.cart.get(product_id, 0) > 1:
                self.cart[product_id] -= 1
            else:
                self.cart.pop(product_id, None)
            snapshot = self._persist()
        self._debouncer.schedule(snapshot)
        self.last_message = "Item removed from cart"
        return snapshot

    def checkout(self) -> CheckoutOutcome:
        with self._lock:
            if self.checkout_in_progress:
                raise CheckoutInProgress("Checkout already in progress")
            if not any(q > 0 for q in self.cart.values()):
                self.last_message = "Cart is empty"
                return CheckoutOutcome(success=False, message=self.last_message)

            #checkout wysyla caly koszyk i czysci serwerowy, sync po udanym checkoucie by go odtworzyl
            self._debouncer.cancel()
            self.checkout_in_progress = True
            snapshot = dict(self.cart)

        try:
            result = self.api.checkout(self.user_id, snapshot)
        except ApiError as e:
            logger.warning(f"Checkout failed for user {self.user_id}: {e.message}")
            self.last_message = e.message or "Checkout failed"
            #serwerowy koszyk nie zostal wyczyszczony, dosylamy anulowany sync
            self._debouncer.schedule(dict(self.cart))
            return CheckoutOutcome(success=False, message=self.last_message)
        finally:
            with self._lock:
                self.checkout_in_progress = False

        with self._lock:
            self.cart = {}
            self.store.clear()
        self.last_message = "Order placed successfully!"
        logger.info(f"Order {result.get('order_id')} placed for user {self.user_id}")

        #stany magazynowe sie zmienily
        self.refresh_products()
        return CheckoutOutcome(success=True, message=self.last_message, order_id=result.get("order_id"))

    def close(self) -> None:
        """Wysyla czekajacy sync przed zamknieciem."""
        self._debouncer.flush()

    # =====================================================
    # INTERNALS
    # =====================================================
    def _ensure_editable(self):
        if self.checkout_in_progress:
            raise CheckoutInProgress("Cart is locked while checkout is in progress")

    def _persist(self) -> Dict[int, int]:
        self.store.save(self.cart)
        return dict(self.cart)

    def _sync(self, snapshot: Dict[int, int]) -> None:
        self.sync_status = SYNCING
        try:
            self.api.sync_cart(self.user_id, snapshot)
        except ApiError as e:
            logger.error(f"Sync error: {e.message}")
            self.sync_status = SYNC_FAILED
            return
        self.sync_status = SYNCED
