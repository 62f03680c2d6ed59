# hybrid_cart/data/models/order.py
from sqlalchemy import Column, Integer, DateTime, Numeric, JSON
from datetime import datetime, timezone

from hybrid_cart.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)

    #lista {product_id, quantity} w kolejnosci z requestu
    items = Column(JSON, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
