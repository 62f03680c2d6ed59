# hybrid_cart/repos/product_repo.py
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from hybrid_cart.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[ProductModel]:
        return list(self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all())

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        #UPDATE products SET stock = stock - q WHERE id = ? AND stock >= q
        #rowcount 0 = ktos nas wyprzedzil i stanu juz nie ma
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
        )
        return result.rowcount
