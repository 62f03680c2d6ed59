# hybrid_cart/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hybrid_cart.data.database import get_db
from hybrid_cart.domain.schemas import OrderOut
from hybrid_cart.repos.order_repo import OrderRepo

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/{user_id}", response_model=List[OrderOut])
def list_orders(user_id: int, db: Session = Depends(get_db)):
    """
    Historia zamówień użytkownika, najstarsze pierwsze.
    """
    return OrderRepo(db).list_orders(user_id)
