"""Video mutations: publish, edit, delete, toggle publish status."""

import logging
from pathlib import Path

from sqlalchemy import not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import (
    Comment,
    Like,
    PlaylistVideo,
    User,
    Video,
    WatchHistoryEntry,
)
from vidtube.errors import BadRequest
from vidtube.handlers.common import discard_assets, ensure_owner, upload_or_fail
from vidtube.media.client import MediaHostClient
from vidtube.schemas import PublishState, VideoOut

logger = logging.getLogger(__name__)


async def publish_video(
    db: AsyncSession,
    media: MediaHostClient,
    owner: User,
    title: str | None,
    description: str | None,
    video_path: Path | None,
    thumbnail_path: Path | None,
) -> VideoOut:
    """
    Upload a video file and thumbnail and create the video as a draft.

    The duration comes from the media host. New videos start unpublished;
    the owner makes them public with the publish toggle.
    """
    fields = crud.require_text(title=title, description=description)
    if video_path is None:
        raise BadRequest("videoFile is required")
    if thumbnail_path is None:
        raise BadRequest("thumbnail is required")

    video_asset = await upload_or_fail(media, video_path, "video file", "video")
    try:
        thumbnail = await upload_or_fail(media, thumbnail_path, "thumbnail")
    except Exception:
        await discard_assets(media, video_asset)
        raise

    video = Video(
        title=fields["title"],
        description=fields["description"],
        duration=video_asset.duration or 0,
        is_published=False,
        video_file_public_id=video_asset.public_id,
        video_file_url=video_asset.url,
        thumbnail_public_id=thumbnail.public_id,
        thumbnail_url=thumbnail.url,
        owner_id=owner.id,
    )
    db.add(video)
    try:
        await crud.commit_or_fail(db, "save the video")
    except Exception:
        await discard_assets(media, video_asset, thumbnail)
        raise

    logger.info(
        f"Video uploaded: video_id={video.id}, owner_id={owner.id}",
        extra={"video_id": video.id, "user_id": owner.id},
    )
    return VideoOut.model_validate(video)


async def update_video(
    db: AsyncSession,
    media: MediaHostClient,
    caller: User,
    video_id: str,
    title: str | None,
    description: str | None,
    thumbnail_path: Path | None = None,
) -> VideoOut:
    """Edit title and description, optionally replacing the thumbnail."""
    vid = crud.parse_id(video_id, "videoId")
    fields = crud.require_text(title=title, description=description)
    video = await crud.get_or_404(db, Video, vid, "Video")
    ensure_owner(video.owner_id, caller.id, "update this video")

    previous_thumbnail = None
    thumbnail = None
    if thumbnail_path is not None:
        thumbnail = await upload_or_fail(media, thumbnail_path, "thumbnail")
        previous_thumbnail = video.thumbnail_public_id
        video.thumbnail_public_id = thumbnail.public_id
        video.thumbnail_url = thumbnail.url

    video.title = fields["title"]
    video.description = fields["description"]
    try:
        await crud.commit_or_fail(db, "update the video")
    except Exception:
        await discard_assets(media, thumbnail)
        raise

    if previous_thumbnail:
        await media.delete(previous_thumbnail)
    return VideoOut.model_validate(video)


async def delete_video(
    db: AsyncSession, media: MediaHostClient, caller: User, video_id: str
) -> None:
    """
    Delete a video and everything that references it.

    Likes on the video and on its comments, the comments, playlist entries
    and watch-history entries go in the same transaction; the remote files are
    removed once that has committed.
    """
    vid = crud.parse_id(video_id, "videoId")
    video = await crud.get_or_404(db, Video, vid, "Video")
    ensure_owner(video.owner_id, caller.id, "delete this video")
    thumbnail_id, video_file_id = video.thumbnail_public_id, video.video_file_public_id

    comment_ids = select(Comment.id).where(Comment.video_id == vid)
    await crud.delete_where(
        db, Like, or_(Like.video_id == vid, Like.comment_id.in_(comment_ids))
    )
    await crud.delete_where(db, Comment, Comment.video_id == vid)
    await crud.delete_where(db, PlaylistVideo, PlaylistVideo.video_id == vid)
    await crud.delete_where(db, WatchHistoryEntry, WatchHistoryEntry.video_id == vid)
    await crud.delete_where(db, Video, Video.id == vid)
    await crud.commit_or_fail(db, "delete the video")

    logger.info(
        f"Video deleted: video_id={vid}, owner_id={caller.id}",
        extra={"video_id": vid, "user_id": caller.id},
    )
    await media.delete(thumbnail_id)
    await media.delete(video_file_id, "video")


async def toggle_publish_status(
    db: AsyncSession, caller: User, video_id: str
) -> PublishState:
    """Flip the published flag in place and return the new value."""
    vid = crud.parse_id(video_id, "videoId")
    video = await crud.get_or_404(db, Video, vid, "Video")
    ensure_owner(video.owner_id, caller.id, "change the publish status")

    await db.execute(
        update(Video)
        .where(Video.id == vid)
        .values(is_published=not_(Video.is_published))
        .execution_options(synchronize_session=False)
    )
    await crud.commit_or_fail(db, "toggle the publish status")
    await db.refresh(video)
    return PublishState(is_published=video.is_published)
