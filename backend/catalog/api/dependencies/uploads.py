"""Image upload dependency shared by the create and update endpoints."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from fastapi import Depends, File, Request, UploadFile

from catalog.core.config import MAX_IMAGE_BYTES
from catalog.core.errors import (
    MediaCredentialsError,
    MediaStoreError,
    PayloadTooLarge,
    UnexpectedError,
    UnsupportedMediaType,
    UpstreamConfigError,
)
from catalog.storage.media_store import HostedImage

logger = logging.getLogger(__name__)

IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif")


def get_media_store(request: Request) -> Any:
    return request.app.state.media_store


def check_image(filename: str, content_type: str | None) -> None:
    """Both the extension and the declared content type must look like an image."""
    extension = Path(filename).suffix.lower()
    if not IMAGE_TYPES.search(extension) or not IMAGE_TYPES.search(content_type or ""):
        raise UnsupportedMediaType()


async def accept_image(
    image: UploadFile | None = File(None, description="Optional product image"),
    media_store: Any = Depends(get_media_store),
) -> HostedImage | None:
    """Validate the optional ``image`` part and push it to the media host.

    Returns None when the request carries no file, so handlers can fall back
    to the placeholder (create) or keep the current image (update).
    """
    if image is None or not image.filename:
        return None

    check_image(image.filename, image.content_type)

    content = await image.read(MAX_IMAGE_BYTES + 1)
    if len(content) > MAX_IMAGE_BYTES:
        logger.info(f"Rejected {image.filename}: larger than {MAX_IMAGE_BYTES} bytes")
        raise PayloadTooLarge()

    try:
        return await media_store.upload(content, image.filename, image.content_type)
    except MediaCredentialsError as e:
        logger.error(f"Image upload configuration error: {e}")
        raise UpstreamConfigError() from e
    except MediaStoreError as e:
        logger.error(f"Image upload failed for {image.filename}: {e}", exc_info=True)
        raise UnexpectedError(str(e)) from e
