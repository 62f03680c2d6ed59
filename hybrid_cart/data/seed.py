# hybrid_cart/data/seed.py
from decimal import Decimal

from hybrid_cart.data.database import SessionLocal
from hybrid_cart.data.models.product import ProductModel
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    ("Wireless Headphones", "99.99", 50),
    ("Smartphone Case", "24.99", 100),
    ("Bluetooth Speaker", "79.99", 30),
    ("Laptop Stand", "45.99", 25),
    ("USB-C Cable", "19.99", 75),
    ("Wireless Mouse", "34.99", 40),
    ("Keyboard", "89.99", 20),
    ("Monitor", "299.99", 15),
    ("Webcam", "69.99", 35),
    ("Power Bank", "39.99", 60),
]


def seed(session_factory=SessionLocal) -> int:
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return 0
        db.add_all(
            ProductModel(name=name, price=Decimal(price), stock=stock)
            for name, price, stock in DEMO_PRODUCTS
        )
        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} demo products")
        return len(DEMO_PRODUCTS)
    finally:
        db.close()
