"""Client for the remote media host (Cloudinary-compatible upload API)."""

import hashlib
import logging
import time
from pathlib import Path
from typing import Any

import aiofiles
import httpx
from pydantic import BaseModel

from vidtube.config import Settings

logger = logging.getLogger(__name__)


class MediaHostError(Exception):
    """Raised when an upload to the media host does not succeed."""


class MediaAsset(BaseModel):
    """Reference to an asset stored on the media host."""

    public_id: str
    url: str
    resource_type: str = "image"
    duration: float | None = None


class MediaHostClient:
    """Uploads local files to the media host and deletes remote assets.

    One instance is created per process and handed to the handlers that need
    it, instead of configuring an SDK globally.
    """

    def __init__(self, settings: Settings):
        """Initialize the client from application settings."""
        self.cloud_name = settings.media_cloud_name
        self.api_key = settings.media_api_key
        self.api_secret = settings.media_api_secret
        self.base_url = f"{settings.media_api_base.rstrip('/')}/{self.cloud_name}"

    def is_configured(self) -> bool:
        """Check if credentials for the media host are present."""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: dict[str, Any]) -> str:
        """Sign request parameters: SHA-1 of the sorted query string plus secret."""
        to_sign = "&".join(
            f"{key}={value}"
            for key, value in sorted(params.items())
            if value not in (None, "")
        )
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def _signed_form(self, **params: Any) -> dict[str, Any]:
        params["timestamp"] = int(time.time())
        return {**params, "api_key": self.api_key, "signature": self.sign(params)}

    async def upload(self, local_path: str | Path, resource_type: str = "auto") -> MediaAsset:
        """
        Upload a local file and remove it from disk afterwards.

        The local file is deleted whether the upload succeeds or fails.

        Args:
            local_path: Path of the staged temp file
            resource_type: "image", "video" or "auto" to let the host decide

        Returns:
            Reference to the stored asset

        Raises:
            MediaHostError: If the host is unreachable or rejects the file
        """
        path = Path(local_path)
        try:
            if not self.is_configured():
                raise MediaHostError("Media host is not configured")

            async with aiofiles.open(path, "rb") as f:
                content = await f.read()

            async with httpx.AsyncClient(timeout=120.0) as client:
                response = await client.post(
                    f"{self.base_url}/{resource_type}/upload",
                    data=self._signed_form(),
                    files={"file": (path.name, content)},
                )

            if response.status_code != 200:
                logger.error(
                    f"Media upload failed. Status: {response.status_code}, "
                    f"Response: {response.text}"
                )
                raise MediaHostError(f"Upload rejected with status {response.status_code}")

            body = response.json()
            asset = MediaAsset(
                public_id=body["public_id"],
                url=body.get("secure_url") or body["url"],
                resource_type=body.get("resource_type", "image"),
                duration=body.get("duration"),
            )
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"Media upload error for {path.name}: {e}", exc_info=True)
            raise MediaHostError("Upload failed") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed upload response for {path.name}: {e}")
            raise MediaHostError("Upload response was malformed") from e
        finally:
            path.unlink(missing_ok=True)

        logger.info(f"Uploaded media asset {asset.public_id}")
        return asset

    async def delete(self, public_id: str | None, resource_type: str = "image") -> bool:
        """
        Delete a remote asset.

        Failures are logged and reported, never raised: by the time an asset is
        deleted the database already points elsewhere.

        Returns:
            True if the host confirmed the deletion, False otherwise
        """
        if not public_id:
            return False
        if not self.is_configured():
            logger.warning(f"Media host not configured; cannot delete {public_id}")
            return False

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(
                    f"{self.base_url}/{resource_type}/destroy",
                    data=self._signed_form(public_id=public_id),
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error deleting media asset {public_id}: {e}", exc_info=True)
            return False

        if response.status_code != 200:
            logger.error(
                f"Failed to delete media asset {public_id}. "
                f"Status: {response.status_code}, Response: {response.text}"
            )
            return False

        try:
            deleted = response.json().get("result") == "ok"
        except ValueError:
            logger.error(f"Malformed delete response for media asset {public_id}")
            return False
        if deleted:
            logger.info(f"Deleted media asset {public_id}")
        else:
            logger.warning(f"Media host did not delete {public_id}")
        return deleted
