"""CheckoutService state machine and store failure handling."""
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError

from hybrid_cart.data.database import SessionLocal
from hybrid_cart.domain.errors import InsufficientStock, NotFound, StoreError, ValidationError
from hybrid_cart.domain.schemas import ItemIn
from hybrid_cart.repos.order_repo import OrderRepo
from hybrid_cart.services.cache import MemoryCacheBackend, ProductCache, product_key
from hybrid_cart.services.checkout_service import CheckoutService, CheckoutState
from hybrid_cart.services.product_service import ProductService


class ExplodingNotifier:
    def send_order_notification(self, user_id, order_id, total_amount, items):
        raise ConnectionError("broker down")


class ReadDuringCheckoutCache(ProductCache):
    """Po pierwszym usunieciu klucza wpisuje go z powrotem, jak rownolegly odczyt sprzed commitu."""

    def __init__(self, backend):
        super().__init__(backend)
        self.stale = {}

    def delete(self, key):
        super().delete(key)
        if key in self.stale:
            self.set(key, self.stale.pop(key))


class DownRedisBackend(MemoryCacheBackend):
    def get(self, key):
        raise RedisConnectionError("Connection refused")


@pytest.fixture()
def service(db, cache, notifier):
    return CheckoutService(db, cache, notifier)


class TestCheckoutStates:
    def test_committed(self, service, make_product, stock_of):
        product_id = make_product(stock=5)

        result = service.checkout(1, [ItemIn(product_id=product_id, quantity=2)])

        assert result.ok
        assert result.state is CheckoutState.COMMITTED
        assert result.order_id is not None
        assert result.error is None
        assert stock_of(product_id) == 3

    def test_rolled_back_on_validation(self, service, make_product):
        product_id = make_product(stock=1)

        result = service.checkout(1, [ItemIn(product_id=product_id, quantity=2)])

        assert not result.ok
        assert result.state is CheckoutState.ROLLED_BACK
        assert isinstance(result.error, InsufficientStock)

    def test_not_found(self, service):
        result = service.checkout(1, [ItemIn(product_id=404, quantity=1)])

        assert isinstance(result.error, NotFound)
        assert result.error.message == "Product 404 not found"

    def test_empty_items(self, service):
        result = service.checkout(1, [])

        assert result.state is CheckoutState.ROLLED_BACK
        assert isinstance(result.error, ValidationError)


class TestStoreFailure:
    def test_failure_after_decrement_rolls_back_stock(self, service, make_product, stock_of, monkeypatch):
        product_id = make_product(stock=5)

        def _boom(self, order):
            raise OperationalError("INSERT INTO orders", {}, Exception("database is gone"))

        monkeypatch.setattr(OrderRepo, "create_order", _boom)

        result = service.checkout(1, [ItemIn(product_id=product_id, quantity=2)])

        assert result.state is CheckoutState.ROLLED_BACK
        assert isinstance(result.error, StoreError)
        assert result.error.message == "database is gone"
        assert stock_of(product_id) == 5

    def test_broker_failure_keeps_order(self, db, cache, make_product, stock_of):
        product_id = make_product(stock=5)
        service = CheckoutService(db, cache, ExplodingNotifier())

        result = service.checkout(1, [ItemIn(product_id=product_id, quantity=1)])

        assert result.ok
        assert stock_of(product_id) == 4


class TestCacheUse:
    def test_resolves_products_through_cache(self, service, cache, make_product):
        product_id = make_product(stock=5)

        service.checkout(1, [ItemIn(product_id=product_id, quantity=1)])

        # produkt trafil do cache przy walidacji i zostal usuniety po update
        assert cache.misses == 1
        assert cache.get(f"product:{product_id}") is None

    def test_entry_refilled_before_commit_is_dropped_after_commit(self, db, clock, make_product, stock_of):
        product_id = make_product(stock=5)
        cache = ReadDuringCheckoutCache(MemoryCacheBackend(ttl=60, clock=clock))
        key = product_key(product_id)
        cache.stale[key] = ProductService(db, cache).get_product(product_id)

        result = CheckoutService(db, cache).checkout(1, [ItemIn(product_id=product_id, quantity=2)])

        assert result.ok
        assert cache.stale == {}
        with SessionLocal() as session:
            cached = ProductService(session, cache).get_product(product_id)
        assert cached["stock"] == stock_of(product_id) == 3

    def test_cache_outage_rolls_back(self, db, clock, make_product, stock_of):
        product_id = make_product(stock=5)
        cache = ProductCache(DownRedisBackend(ttl=60, clock=clock))

        result = CheckoutService(db, cache).checkout(1, [ItemIn(product_id=product_id, quantity=2)])

        assert result.state is CheckoutState.ROLLED_BACK
        assert isinstance(result.error, StoreError)
        assert result.error.message == "Cache unavailable: Connection refused"
        assert stock_of(product_id) == 5
