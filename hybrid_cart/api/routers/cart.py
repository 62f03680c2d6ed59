# hybrid_cart/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hybrid_cart.data.database import get_db
from hybrid_cart.domain.errors import StoreError
from hybrid_cart.domain.schemas import CartSyncIn, CartOut, SyncOut
from hybrid_cart.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("/sync", response_model=SyncOut)
def sync_cart(payload: CartSyncIn, db: Session = Depends(get_db)):
    """
    Nadpisuje serwerowy koszyk pelnym snapshotem od klienta.
    """
    svc = get_service(db)
    try:
        svc.sync_cart(payload.user_id, payload.items)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"success": True, "message": "Cart synced successfully"}


@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    return svc.get_cart(user_id)
