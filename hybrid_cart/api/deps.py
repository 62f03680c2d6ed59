# hybrid_cart/api/deps.py
from fastapi import Request

from hybrid_cart.services.cache import ProductCache
from hybrid_cart.services.notification_service import NotificationService


def get_cache(request: Request) -> ProductCache:
    #cache nalezy do aplikacji (app.state), testy podmieniaja go przez create_app(cache=...)
    return request.app.state.product_cache


def get_notifier(request: Request) -> NotificationService:
    return request.app.state.notifier
