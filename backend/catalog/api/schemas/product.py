"""Pydantic models describing Product payloads."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.core.errors import ValidationError

REQUIRED_FIELDS_MESSAGE = "Name, price, and category are required"


class ProductRead(BaseModel):
    """Product as returned by the API (camelCase keys)."""

    id: str
    name: str
    price: float
    category: str
    description: str = ""
    image_url: str
    public_id: str | None = None
    in_stock: bool = True
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_model(cls, product: Any) -> "ProductRead":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            category=product.category,
            description=product.description or "",
            image_url=product.image_url,
            public_id=product.public_id,
            in_stock=product.in_stock,
            created_at=product.created_at,
        )


class ProductFields(BaseModel):
    """Mutable product fields after form validation.

    Create and update both require the full set; there is no partial update.
    """

    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    description: str = ""
    in_stock: bool = False

    @classmethod
    def from_form(
        cls,
        name: str | None,
        price: str | None,
        category: str | None,
        description: str | None = None,
        in_stock: str | None = None,
    ) -> "ProductFields":
        """Validate raw form strings, raising ValidationError on bad input."""
        name = (name or "").strip()
        category = (category or "").strip()
        raw_price = (price or "").strip()
        if not name or not raw_price or not category:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        try:
            parsed_price = float(raw_price)
        except ValueError as e:
            raise ValidationError(f"Price must be a number, got '{raw_price}'") from e
        if not math.isfinite(parsed_price) or parsed_price < 0:
            raise ValidationError("Price must be a non-negative number")

        return cls(
            name=name,
            price=parsed_price,
            category=category,
            description=description or "",
            # Form checkboxes arrive as text; only the literal "true" counts
            in_stock=in_stock == "true",
        )


class MessageResponse(BaseModel):
    message: str
