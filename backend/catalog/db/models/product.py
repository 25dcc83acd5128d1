"""SQLAlchemy model for product records."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Float, Index, String, Text
from sqlalchemy.types import DateTime

from catalog.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_product_id() -> str:
    return uuid.uuid4().hex


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_product_id)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(Text, nullable=False)
    # Hosted image reference, kept only so the image can be deleted later
    public_id = Column(String(255), nullable=True)
    in_stock = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("ix_products_category_created_at", "category", "created_at"),
    )
