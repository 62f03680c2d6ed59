# hybrid_cart/repos/order_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from hybrid_cart.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        #flush zamiast commit - zamowienie jest czescia transakcji checkoutu
        self.db.add(order)
        self.db.flush()
        return order

    def list_orders(self, user_id: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).where(OrderModel.user_id == user_id).order_by(OrderModel.id)
            ).scalars().all()
        )
