"""Best-effort removal of hosted product images."""

from __future__ import annotations

import logging
from typing import Any

from catalog.core.errors import MediaStoreError

logger = logging.getLogger(__name__)


async def discard_image(media_store: Any, public_id: str | None) -> dict[str, Any]:
    """Ask the media host to delete ``public_id`` and report what happened.

    Failures are logged and returned, never raised: a stale image left on
    the media host must not fail the request that replaced or deleted it.

    Returns:
        Dictionary with:
            - public_id: The identifier that was targeted (or None)
            - attempted: False when there was nothing to delete
            - success: True if the media host confirmed the deletion
            - error: Error message if failed
    """
    result: dict[str, Any] = {
        "public_id": public_id,
        "attempted": False,
        "success": False,
        "error": None,
    }
    if not public_id:
        return result

    result["attempted"] = True
    try:
        await media_store.destroy(public_id)
        result["success"] = True
    except MediaStoreError as e:
        result["error"] = str(e)
        logger.error(f"Error deleting hosted image {public_id}: {e}")
    except Exception as e:
        result["error"] = f"Unexpected error: {e}"
        logger.error(f"Unexpected error deleting hosted image {public_id}: {e}", exc_info=True)

    return result
