"""Simple health and readiness endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from catalog.api.dependencies.uploads import get_media_store
from catalog.core.errors import MediaStoreError
from catalog.db.session import check_connection

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "product-catalog-api"


@router.get("/live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """Indicates the API process is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/ready", summary="Readiness probe")
async def ready(request: Request, media_store: Any = Depends(get_media_store)) -> Any:
    """Check the database and the media host.

    Only the database decides readiness; a media host outage is reported
    but, as at startup, does not take the service out of rotation.
    """
    checks: dict[str, Any] = {
        "status": "ok",
        "service": SERVICE_NAME,
        "checks": {},
    }

    try:
        check_connection(request.app.state.engine)
        checks["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        checks["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
        }
        checks["status"] = "unhealthy"

    try:
        await media_store.ping()
        checks["checks"]["media"] = {
            "status": "healthy",
            "message": "Media host connection successful",
        }
    except MediaStoreError as e:
        logger.warning(f"Media host health check failed: {e}")
        checks["checks"]["media"] = {
            "status": "unhealthy",
            "message": f"Media host connection failed: {str(e)}",
        }

    if checks["status"] != "ok":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=checks,
        )

    return checks
