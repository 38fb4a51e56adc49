"""Video endpoints for the VidTube API."""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import (
    get_media_host,
    limiter,
    max_upload_bytes,
    pagination,
)
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import optional_viewer, require_user
from vidtube.config import get_settings
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers import videos as video_handlers
from vidtube.media import MediaHostClient, staged_uploads
from vidtube.readmodel import videos as video_reads

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


@router.get("")
@limiter.limit("120/minute")
async def list_videos(
    request: Request,
    paging: tuple[int, int] = Depends(pagination),
    query: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_type: str | None = Query(None, alias="sortType"),
    user_id: str | None = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_session),
):
    """
    List published videos.

    Query parameters:
        page, limit: Pagination
        query: Text searched in title and description
        sortBy: createdAt (default), views, duration or title
        sortType: asc or desc (default)
        userId: Only videos from this channel
    """
    page, limit = paging
    result = await video_reads.list_videos(
        db, page, limit, query=query, sort_by=sort_by, sort_type=sort_type, user_id=user_id
    )
    return api_response(result, "Videos fetched successfully")


@router.post("")
@limiter.limit("20/minute")
async def publish_video(
    request: Request,
    title: str | None = Form(None),
    description: str | None = Form(None),
    video_file: UploadFile | None = File(None, alias="videoFile"),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
    media: MediaHostClient = Depends(get_media_host),
):
    """
    Upload a new video.

    Multipart form with title, description, videoFile and thumbnail. The video
    is created unpublished.
    """
    async with staged_uploads(
        {"videoFile": video_file, "thumbnail": thumbnail},
        get_settings().upload_tmp_dir,
        max_upload_bytes(),
    ) as staged:
        video = await video_handlers.publish_video(
            db,
            media,
            user,
            title,
            description,
            staged["videoFile"],
            staged["thumbnail"],
        )
    return api_response(video, "Video uploaded successfully", 201)


@router.get("/{video_id}")
@limiter.limit("120/minute")
async def get_video(
    request: Request,
    video_id: str,
    viewer: User | None = Depends(optional_viewer),
    db: AsyncSession = Depends(get_session),
):
    """Video detail; counts as a view and lands in the viewer's watch history."""
    video = await video_reads.get_video_detail(db, video_id, viewer.id if viewer else None)
    return api_response(video, "Video fetched successfully")


@router.patch("/{video_id}")
@limiter.limit("20/minute")
async def update_video(
    request: Request,
    video_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
    media: MediaHostClient = Depends(get_media_host),
):
    async with staged_uploads(
        {"thumbnail": thumbnail}, get_settings().upload_tmp_dir, max_upload_bytes()
    ) as staged:
        video = await video_handlers.update_video(
            db, media, user, video_id, title, description, staged["thumbnail"]
        )
    return api_response(video, "Video updated successfully")


@router.delete("/{video_id}")
@limiter.limit("20/minute")
async def delete_video(
    request: Request,
    video_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
    media: MediaHostClient = Depends(get_media_host),
):
    """Delete a video with its comments, likes and playlist entries."""
    await video_handlers.delete_video(db, media, user, video_id)
    return api_response({}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
@limiter.limit("30/minute")
async def toggle_publish_status(
    request: Request,
    video_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    state = await video_handlers.toggle_publish_status(db, user, video_id)
    return api_response(state, "Publish status toggled successfully")
