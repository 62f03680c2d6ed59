# hybrid_cart/main.py
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hybrid_cart.api.routers import products, cart, checkout, orders, health
from hybrid_cart.data.database import Base, engine
from hybrid_cart.data.seed import seed
from hybrid_cart.services.cache import ProductCache, build_cache
from hybrid_cart.services.notification_service import NotificationService
from hybrid_cart.utils.settings import PORT, CACHE_TTL, APP_ENV
from hybrid_cart.utils.logging import get_logger

# IMPORT WSZYSTKICH MODELI PRZED CREATE_ALL
import hybrid_cart.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    seed()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Environment: {APP_ENV}, cache TTL: {CACHE_TTL} seconds")
    yield
    engine.dispose()
    logger.info("Database connection closed")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    #niepoprawne body to 400 a nie domyslne 422
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request data"})


def create_app(
    cache: ProductCache | None = None,
    notifier: NotificationService | None = None,
    init_database: bool = True,
) -> FastAPI:
    app = FastAPI(
        title="Hybrid Cart",
        version="1.0.0",
        lifespan=lifespan if init_database else None,
    )

    app.state.product_cache = cache or build_cache()
    app.state.notifier = notifier or NotificationService()
    app.state.started_at = time.monotonic()

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
