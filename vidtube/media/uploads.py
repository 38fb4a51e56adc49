"""Staging of multipart uploads as local temp files."""

import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
from fastapi import UploadFile

from vidtube.errors import BadRequest

CHUNK_SIZE = 1024 * 1024


async def save_upload(
    upload: UploadFile | None, tmp_dir: str, max_bytes: int | None = None
) -> Path | None:
    """
    Write an uploaded file into the temp directory under a random name.

    Args:
        upload: The multipart file, or None when the field was omitted
        tmp_dir: Directory for staged uploads
        max_bytes: Optional size cap

    Returns:
        Path of the staged file, or None if nothing was uploaded

    Raises:
        BadRequest: If the file exceeds ``max_bytes``
    """
    if upload is None or not upload.filename:
        return None

    base = Path(tmp_dir)
    base.mkdir(parents=True, exist_ok=True)
    dest = base / f"{secrets.token_hex(12)}{Path(upload.filename).suffix.lower()}"

    written = 0
    too_large = False
    async with aiofiles.open(dest, "wb") as out:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if max_bytes is not None and written > max_bytes:
                too_large = True
                break
            await out.write(chunk)

    if too_large:
        dest.unlink(missing_ok=True)
        raise BadRequest(f"{upload.filename} is too large")

    if written == 0:
        dest.unlink(missing_ok=True)
        return None
    return dest


@asynccontextmanager
async def staged_uploads(
    uploads: dict[str, UploadFile | None], tmp_dir: str, max_bytes: int | None = None
) -> AsyncIterator[dict[str, Path | None]]:
    """Stage several uploads and remove whatever is left on disk afterwards.

    The media client deletes files it uploads; this catches files that never
    reach it because the request failed validation first.
    """
    staged: dict[str, Path | None] = {}
    try:
        for field, upload in uploads.items():
            staged[field] = await save_upload(upload, tmp_dir, max_bytes)
        yield staged
    finally:
        for path in staged.values():
            if path is not None:
                path.unlink(missing_ok=True)
