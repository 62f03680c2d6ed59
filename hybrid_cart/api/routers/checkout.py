# hybrid_cart/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hybrid_cart.api.deps import get_cache, get_notifier
from hybrid_cart.data.database import get_db
from hybrid_cart.domain.schemas import CheckoutIn, CheckoutOut
from hybrid_cart.services.cache import ProductCache
from hybrid_cart.services.checkout_service import CheckoutService
from hybrid_cart.services.notification_service import NotificationService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("", response_model=CheckoutOut)
def checkout(
    payload: CheckoutIn,
    db: Session = Depends(get_db),
    cache: ProductCache = Depends(get_cache),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Walidacja stanow, zmniejszenie stanow, zamowienie i czyszczenie koszyka
    w jednej transakcji. Kazdy blad = 400 z powodem.
    """
    svc = CheckoutService(db, cache, notifier)
    result = svc.checkout(payload.user_id, payload.items)

    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error.message)

    return {
        "success": True,
        "message": "Order placed successfully",
        "order_id": result.order_id,
    }
