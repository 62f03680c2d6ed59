# hybrid_cart/api/routers/health.py
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hybrid_cart.api.deps import get_cache
from hybrid_cart.data.database import get_db
from hybrid_cart.domain.schemas import HealthOut
from hybrid_cart.services.cache import ProductCache
from hybrid_cart.utils.settings import APP_ENV
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(
    request: Request,
    db: Session = Depends(get_db),
    cache: ProductCache = Depends(get_cache),
):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "error": str(e)},
        )

    return {
        "status": "healthy",
        "database": "connected",
        "cache": cache.stats(),
        "environment": APP_ENV,
        "uptime": time.monotonic() - request.app.state.started_at,
    }
