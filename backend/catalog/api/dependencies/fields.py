"""Product field parsing shared by the create and update endpoints."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Form, Request

from catalog.api.schemas.product import ProductFields
from catalog.core.errors import ValidationError

JSON_KEYS = ("name", "price", "category", "description", "inStock")


def is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


def as_form_value(value: Any) -> str | None:
    """Render a JSON value the way the same field would arrive from a form."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


async def read_json_fields(request: Request) -> list[str | None]:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return [as_form_value(payload.get(key)) for key in JSON_KEYS]


async def product_fields(
    request: Request,
    name: str | None = Form(None),
    price: str | None = Form(None),
    category: str | None = Form(None),
    description: str | None = Form(None),
    in_stock: str | None = Form(None, alias="inStock"),
) -> ProductFields:
    """Validated product fields from a multipart, urlencoded or JSON body.

    Form parsing leaves every field empty for JSON requests, so those are
    read from the body object instead.
    """
    if is_json(request):
        name, price, category, description, in_stock = await read_json_fields(request)
    return ProductFields.from_form(name, price, category, description, in_stock)
