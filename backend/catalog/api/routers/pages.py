"""Storefront and admin HTML pages."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

PUBLIC_DIR = Path(__file__).resolve().parent.parent.parent / "public"
STATIC_DIR = PUBLIC_DIR / "static"
NOT_FOUND_PAGE = PUBLIC_DIR / "404.html"

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def storefront() -> FileResponse:
    return FileResponse(PUBLIC_DIR / "index.html", media_type="text/html")


@router.get("/admin", include_in_schema=False)
async def admin_panel() -> FileResponse:
    return FileResponse(PUBLIC_DIR / "admin.html", media_type="text/html")
