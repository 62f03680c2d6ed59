import os

# ustawione przed importem hybrid_cart - settings czytane przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event

import hybrid_cart.data.models  # noqa: F401
from hybrid_cart.data.database import Base, SessionLocal, engine
from hybrid_cart.data.models.product import ProductModel
from hybrid_cart.main import create_app
from hybrid_cart.services.cache import MemoryCacheBackend, ProductCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id: int, order_id: int, total_amount: str, items: list):
        self.sent.append((user_id, order_id, total_amount, items))


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    return ProductCache(MemoryCacheBackend(ttl=60, clock=clock))


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def client(cache, notifier):
    app = create_app(cache=cache, notifier=notifier, init_database=False)
    return TestClient(app)


@pytest.fixture()
def make_product():
    def _make(name="Keyboard", price="89.99", stock=5) -> int:
        with SessionLocal() as session:
            product = ProductModel(name=name, price=Decimal(price), stock=stock)
            session.add(product)
            session.commit()
            return product.id

    return _make


@pytest.fixture()
def stock_of():
    def _stock(product_id: int) -> int:
        with SessionLocal() as session:
            return session.get(ProductModel, product_id).stock

    return _stock


@pytest.fixture()
def product_selects():
    """Liczy SELECT-y na tabeli products wyslane do bazy."""
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT") and "FROM products" in statement:
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine, "before_cursor_execute", _record)
