# hybrid_cart/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hybrid_cart.api.deps import get_cache
from hybrid_cart.data.database import get_db
from hybrid_cart.domain.errors import NotFound
from hybrid_cart.domain.schemas import ProductOut, TimingOut
from hybrid_cart.services.cache import ProductCache
from hybrid_cart.services.product_service import ProductService
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session, cache: ProductCache):
    return ProductService(db, cache)


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db), cache: ProductCache = Depends(get_cache)):
    svc = get_service(db, cache)
    try:
        return svc.list_products()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    cache: ProductCache = Depends(get_cache),
):
    svc = get_service(db, cache)
    try:
        return svc.get_product(product_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    except SQLAlchemyError as e:
        logger.error(f"Error fetching product {product_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")


@router.get("/{product_id}/timing", response_model=TimingOut)
def time_product_lookup(
    product_id: int,
    db: Session = Depends(get_db),
    cache: ProductCache = Depends(get_cache),
):
    """
    Czas odczytu produktu i czy przyszedl z cache.
    """
    svc = get_service(db, cache)
    try:
        return svc.timed_lookup(product_id)
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=str(e))
