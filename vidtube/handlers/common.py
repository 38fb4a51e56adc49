"""Helpers shared by the mutation handlers."""

import logging
from pathlib import Path

from vidtube.errors import Forbidden, UnexpectedError
from vidtube.media.client import MediaAsset, MediaHostClient, MediaHostError

logger = logging.getLogger(__name__)


def ensure_owner(owner_id: str, caller_id: str, action: str) -> None:
    """Reject a mutation by anyone other than the owner."""
    if owner_id != caller_id:
        raise Forbidden(f"Only the owner can {action}")


async def upload_or_fail(
    media: MediaHostClient, path: Path, label: str, resource_type: str = "image"
) -> MediaAsset:
    """Upload a staged file, turning media host failures into a 500."""
    try:
        return await media.upload(path, resource_type)
    except MediaHostError:
        raise UnexpectedError(f"Failed to upload {label}")


async def discard_assets(media: MediaHostClient, *assets: MediaAsset | None) -> None:
    """Best-effort removal of freshly uploaded assets after a failed write."""
    for asset in assets:
        if asset is not None:
            await media.delete(asset.public_id, asset.resource_type)
