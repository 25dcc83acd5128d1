"""CRUD + category filtering endpoints for the product catalog."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.api.dependencies.config import get_app_settings
from catalog.api.dependencies.db import get_session
from catalog.api.dependencies.fields import product_fields
from catalog.api.dependencies.uploads import accept_image, get_media_store
from catalog.api.schemas.product import MessageResponse, ProductFields, ProductRead
from catalog.core.config import Settings
from catalog.core.errors import CatalogError, NotFoundError, UnexpectedError
from catalog.db.models.product import Product
from catalog.services.image_cleanup import discard_image
from catalog.storage.media_store import HostedImage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    summary="List all products, newest first",
    response_model=list[ProductRead],
)
def list_products(db: Session = Depends(get_session)) -> list[ProductRead]:
    try:
        products = db.scalars(select(Product).order_by(Product.created_at.desc())).all()
        return [ProductRead.from_model(p) for p in products]
    except SQLAlchemyError as e:
        logger.error(f"Error fetching products: {e}", exc_info=True)
        raise UnexpectedError("Failed to fetch products") from e


@router.get(
    "/category/{category}",
    summary="List products in one category",
    response_model=list[ProductRead],
)
def list_products_by_category(
    category: str,
    db: Session = Depends(get_session),
) -> list[ProductRead]:
    """Exact, case-sensitive match on the category; unknown categories yield []."""
    try:
        query = (
            select(Product)
            .where(Product.category == category)
            .order_by(Product.created_at.desc())
        )
        return [ProductRead.from_model(p) for p in db.scalars(query).all()]
    except SQLAlchemyError as e:
        logger.error(f"Error fetching products by category {category!r}: {e}", exc_info=True)
        raise UnexpectedError("Failed to fetch products by category") from e


@router.get(
    "/{product_id}",
    summary="Fetch a single product",
    response_model=ProductRead,
)
def get_product(
    product_id: str,
    db: Session = Depends(get_session),
) -> ProductRead:
    try:
        product = db.get(Product, product_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching product {product_id}: {e}", exc_info=True)
        raise UnexpectedError("Failed to fetch product") from e
    if not product:
        raise NotFoundError()
    return ProductRead.from_model(product)


@router.post(
    "",
    summary="Create a product",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductRead,
)
def create_product(
    image: HostedImage | None = Depends(accept_image),
    fields: ProductFields = Depends(product_fields),
    db: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> ProductRead:
    """Persist a product from the admin form or a JSON body.

    Without an uploaded image the product points at the shared placeholder
    and carries no publicId.
    """
    try:
        product = Product(
            name=fields.name,
            price=fields.price,
            category=fields.category,
            description=fields.description,
            in_stock=fields.in_stock,
            image_url=image.url if image else settings.default_image_url,
            public_id=image.public_id if image else None,
        )
        db.add(product)
        db.commit()
        db.refresh(product)

        logger.info(f"Created product {product.id} in category {product.category!r}")
        return ProductRead.from_model(product)

    except CatalogError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating product: {e}", exc_info=True)
        raise UnexpectedError(f"Failed to create product: {e}") from e


@router.put(
    "/{product_id}",
    summary="Replace a product's fields",
    response_model=ProductRead,
)
async def update_product(
    product_id: str,
    image: HostedImage | None = Depends(accept_image),
    fields: ProductFields = Depends(product_fields),
    db: Session = Depends(get_session),
    media_store: Any = Depends(get_media_store),
) -> ProductRead:
    """Full replace of the mutable fields; all of name/price/category are required.

    The image only changes when a new file is uploaded. The previous hosted
    image is removed after the new one has been committed.
    """
    try:
        product = db.get(Product, product_id)
        if not product:
            raise NotFoundError()

        previous_public_id = product.public_id

        product.name = fields.name
        product.price = fields.price
        product.category = fields.category
        product.description = fields.description
        product.in_stock = fields.in_stock
        if image:
            product.image_url = image.url
            product.public_id = image.public_id

        db.commit()
        db.refresh(product)
        logger.info(f"Updated product {product_id}")

    except CatalogError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
        raise UnexpectedError(f"Failed to update product: {e}") from e

    if image and previous_public_id and previous_public_id != image.public_id:
        await discard_image(media_store, previous_public_id)

    return ProductRead.from_model(product)


@router.delete(
    "/{product_id}",
    summary="Delete a product and its hosted image",
    response_model=MessageResponse,
)
async def delete_product(
    product_id: str,
    db: Session = Depends(get_session),
    media_store: Any = Depends(get_media_store),
) -> MessageResponse:
    """Remove the record; the hosted image is cleaned up on a best-effort basis."""
    try:
        product = db.get(Product, product_id)
        if not product:
            raise NotFoundError()

        await discard_image(media_store, product.public_id)

        db.delete(product)
        db.commit()

        logger.info(f"Deleted product {product_id}")
        return MessageResponse(message="Product deleted successfully")

    except CatalogError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
        raise UnexpectedError("Failed to delete product") from e
