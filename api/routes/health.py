"""Health check routes"""

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
import logging

from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("lunchledger.api.health")


@router.get("/health-check")
def health_check(request: Request):
    """Basic health check endpoint, reports whether the store answers"""
    engine = getattr(request.app.state, "engine", None)
    store = "not configured"
    if engine is not None:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            store = "ok"
        except DBAPIError as e:
            logger.warning("Store health probe failed: %s", e)
            store = "unavailable"
    return {"status": "ok", "service": settings.app_name, "store": store}
