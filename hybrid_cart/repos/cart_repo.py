# hybrid_cart/repos/cart_repo.py
from typing import Iterable, List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from hybrid_cart.data.models.cart import CartLineModel


class CartRepo:
    """Repo nie commituje - o granicy transakcji decyduje serwis."""

    def __init__(self, db: Session):
        self.db = db

    def get_lines(self, user_id: int) -> List[CartLineModel]:
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(CartLineModel.user_id == user_id)
                .order_by(CartLineModel.id)
            ).scalars().all()
        )

    def clear(self, user_id: int) -> int:
        result = self.db.execute(delete(CartLineModel).where(CartLineModel.user_id == user_id))
        return result.rowcount

    def add_lines(self, user_id: int, items: Iterable) -> None:
        self.db.add_all(
            CartLineModel(user_id=user_id, product_id=i.product_id, quantity=i.quantity)
            for i in items
        )
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
