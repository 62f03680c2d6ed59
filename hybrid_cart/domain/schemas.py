# hybrid_cart/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


class ItemIn(BaseModel):
    """Pozycja koszyka/zamowienia w requescie."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class CartSyncIn(BaseModel):
    """Pelny snapshot koszyka od klienta, pusta lista = pusty koszyk."""

    user_id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    items: List[ItemIn]


class CheckoutIn(BaseModel):
    user_id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    items: List[ItemIn] = Field(..., min_length=1)


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    stock: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartLineOut(BaseModel):
    product_id: int
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    user_id: int
    items: List[CartLineOut]


class SyncOut(BaseModel):
    success: bool
    message: str


class CheckoutOut(BaseModel):
    success: bool
    message: str
    order_id: int


class TimingOut(BaseModel):
    """Wynik pomiaru odczytu produktu (cache vs baza)."""

    product: ProductOut | None
    responseTime: float
    fromCache: bool
    timestamp: datetime


class CacheStatsOut(BaseModel):
    keys: int
    hits: int
    misses: int
    hitRate: str


class HealthOut(BaseModel):
    status: str
    database: str
    cache: CacheStatsOut
    environment: str
    uptime: float


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    user_id: int
    items: List[CartLineOut]
    total_amount: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
