# hybrid_cart/data/models/product.py
from sqlalchemy import Column, Integer, String, DateTime, Numeric, CheckConstraint
from sqlalchemy.sql import func

from hybrid_cart.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    #stan magazynu nigdy nie spada ponizej zera
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),)
