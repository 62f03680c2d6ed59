# hybrid_cart/services/product_service.py
import time
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from hybrid_cart.data.models.product import ProductModel
from hybrid_cart.domain.errors import CacheMiss, NotFound
from hybrid_cart.domain.schemas import ProductOut
from hybrid_cart.repos.product_repo import ProductRepo
from hybrid_cart.services.cache import ProductCache, ALL_PRODUCTS_KEY, product_key
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_product(product: ProductModel) -> Dict[str, Any]:
    #w cache trzymamy json-owalny dict (price jako string), tak samo dla redisa i pamieci
    return ProductOut.model_validate(product).model_dump(mode="json")


class ProductService:
    """
    Odczyty katalogu: najpierw cache, przy missie baza i zapis do cache.
    """

    def __init__(self, db: Session, cache: ProductCache):
        self.repo = ProductRepo(db)
        self.cache = cache

    def list_products(self) -> List[Dict[str, Any]]:
        try:
            products = self.cache.lookup(ALL_PRODUCTS_KEY)
            logger.info("Cache hit - returning cached products")
            return products
        except CacheMiss:
            logger.info("Cache miss - fetching products from database")

        products = [serialize_product(p) for p in self.repo.list_products()]
        self.cache.set(ALL_PRODUCTS_KEY, products)
        logger.info(f"Cached {len(products)} products")
        return products

    def get_product(self, product_id: int) -> Dict[str, Any]:
        product = self.find_product(product_id)
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        return product

    def find_product(self, product_id: int) -> Dict[str, Any] | None:
        key = product_key(product_id)
        try:
            return self.cache.lookup(key)
        except CacheMiss:
            logger.info(f"Cache miss - fetching product {product_id} from database")

        row = self.repo.get_product(product_id)
        if row is None:
            return None

        product = serialize_product(row)
        self.cache.set(key, product)
        logger.info(f"Cached product {product_id}: {row.name}")
        return product

    def timed_lookup(self, product_id: int) -> Dict[str, Any]:
        """
        Pomiar czasu odczytu produktu - pokazuje roznice cache vs baza.
        """
        started = time.perf_counter()
        key = product_key(product_id)

        product = self.cache.get(key)
        from_cache = product is not None
        if not from_cache:
            row = self.repo.get_product(product_id)
            if row is not None:
                product = serialize_product(row)
                self.cache.set(key, product)

        return {
            "product": product,
            "responseTime": (time.perf_counter() - started) * 1000,
            "fromCache": from_cache,
            "timestamp": datetime.now(timezone.utc),
        }
