"""FastAPI application factory, startup checks and router wiring."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from catalog.api.routers import health, pages, products
from catalog.api.routers.pages import NOT_FOUND_PAGE, STATIC_DIR
from catalog.core.config import Settings, get_settings
from catalog.core.errors import (
    CatalogError,
    MediaStoreError,
    catalog_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_error_handler,
)
from catalog.db.session import build_engine, build_session_factory, check_connection, init_schema
from catalog.storage.media_store import CloudinaryMediaStore

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
        )
        return response


async def not_found_or_http_error(request: Request, exc: StarletteHTTPException):
    """Unmatched paths get the 404 page; other HTTP errors stay JSON."""
    if exc.status_code == 404:
        return FileResponse(NOT_FOUND_PAGE, status_code=404, media_type="text/html")
    return await http_error_handler(request, exc)


def build_lifespan(engine: Engine, media_store: Any):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A broken media host only disables uploads, so it does not stop startup
        try:
            await media_store.ping()
            logger.info("Cloudinary connected successfully")
        except MediaStoreError as e:
            logger.error(f"Cloudinary connection failed: {e}")
            logger.error("Please check your Cloudinary credentials in the .env file")

        try:
            check_connection(engine)
            init_schema(engine)
            logger.info("Database connected")
        except SQLAlchemyError as e:
            logger.error(f"Database connection error: {e}")
            raise

        yield

        aclose = getattr(media_store, "aclose", None)
        if aclose is not None:
            await aclose()
        engine.dispose()

    return lifespan


def create_app(
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    media_store: Any = None,
) -> FastAPI:
    """Instantiate the FastAPI app with its collaborators.

    Tests pass their own engine and media store; in production both are
    built from the settings.
    """
    settings = settings or get_settings()
    engine = engine or build_engine(settings)
    media_store = media_store or CloudinaryMediaStore(settings)

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        lifespan=build_lifespan(engine, media_store),
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.media_store = media_store

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_or_http_error)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router)
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(pages.router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    return app
