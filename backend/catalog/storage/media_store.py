"""Hosted image storage backed by the Cloudinary upload API."""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from catalog.core.config import ALLOWED_IMAGE_FORMATS, IMAGE_FOLDER, Settings
from catalog.core.errors import MediaCredentialsError, MediaStoreError

logger = logging.getLogger(__name__)

# Parameters Cloudinary leaves out of the signature
UNSIGNED_PARAMS = {"file", "cloud_name", "resource_type", "api_key"}


@dataclass(frozen=True)
class HostedImage:
    url: str
    public_id: str


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: sha1 over the sorted ``k=v`` pairs plus secret."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryMediaStore:
    """Upload, delete and ping against one Cloudinary account."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.cloud_name = settings.cloudinary_cloud_name
        self._api_key = settings.cloudinary_api_key
        self._api_secret = settings.cloudinary_api_secret
        self._base_url = f"{settings.cloudinary_api_base.rstrip('/')}/{self.cloud_name}"
        self._client = client or httpx.AsyncClient()

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, self._api_secret)
        params["api_key"] = self._api_key
        return params

    def _raise_for_status(self, response: httpx.Response, action: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code in (401, 403):
            logger.error(
                f"Cloudinary rejected credentials during {action}: "
                f"HTTP {response.status_code} {response.text[:200]}"
            )
            raise MediaCredentialsError(f"Cloudinary {action} unauthorized")
        if response.status_code >= 400:
            message = (body.get("error") or {}).get("message") or response.text[:200]
            if "api_key" in message.lower():
                raise MediaCredentialsError(message)
            raise MediaStoreError(f"Cloudinary {action} failed: {message}")
        return body

    async def upload(self, content: bytes, filename: str, content_type: str) -> HostedImage:
        """Store image bytes under the product folder and return its hosted URL."""
        params = self._signed(
            {"folder": IMAGE_FOLDER, "allowed_formats": ",".join(ALLOWED_IMAGE_FORMATS)}
        )
        try:
            response = await self._client.post(
                f"{self._base_url}/image/upload",
                data=params,
                files={"file": (filename, content, content_type)},
            )
        except httpx.RequestError as e:
            raise MediaStoreError(f"Cloudinary upload request failed: {e}") from e

        body = self._raise_for_status(response, "upload")
        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            raise MediaStoreError("Cloudinary upload response missing url or public_id")

        logger.info(f"Uploaded {filename} ({len(content)} bytes) as {public_id}")
        return HostedImage(url=url, public_id=public_id)

    async def destroy(self, public_id: str) -> None:
        """Delete a hosted image; raises MediaStoreError unless Cloudinary says ok."""
        params = self._signed({"public_id": public_id})
        try:
            response = await self._client.post(f"{self._base_url}/image/destroy", data=params)
        except httpx.RequestError as e:
            raise MediaStoreError(f"Cloudinary destroy request failed: {e}") from e

        body = self._raise_for_status(response, "destroy")
        result = body.get("result")
        if result != "ok":
            raise MediaStoreError(f"Cloudinary destroy of {public_id} returned {result!r}")
        logger.info(f"Deleted hosted image {public_id}")

    async def ping(self) -> None:
        """Verify the account is reachable with the configured credentials."""
        try:
            response = await self._client.get(
                f"{self._base_url}/ping", auth=(self._api_key, self._api_secret)
            )
        except httpx.RequestError as e:
            raise MediaStoreError(f"Cloudinary ping failed: {e}") from e
        self._raise_for_status(response, "ping")

    async def aclose(self) -> None:
        await self._client.aclose()
