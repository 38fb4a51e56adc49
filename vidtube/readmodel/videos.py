"""Video listings and the video detail view."""

import logging

from sqlalchemy import asc, desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import User, Video
from vidtube.errors import BadRequest, NotFound
from vidtube.readmodel.common import (
    OWNER_COLUMNS,
    VIDEO_COLUMNS,
    is_liked,
    is_subscribed,
    likes_count,
    owner_from_row,
    subscribers_count,
    video_fields,
)
from vidtube.readmodel.pagination import Page, paginate
from vidtube.schemas import ChannelOwner, VideoDetail, VideoListItem

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "createdAt": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


def _list_item(row) -> VideoListItem:
    return VideoListItem(**video_fields(row), owner=owner_from_row(row))


async def list_videos(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    query: str | None = None,
    sort_by: str | None = None,
    sort_type: str | None = None,
    user_id: str | None = None,
) -> Page[VideoListItem]:
    """
    List published videos with optional search, owner filter and sorting.

    Args:
        db: Database session
        page: 1-based page number
        limit: Page size
        query: Case-insensitive text matched against title or description
        sort_by: One of createdAt, views, duration, title (default createdAt)
        sort_type: "asc" or "desc" (default desc)
        user_id: Restrict to videos owned by this user

    Raises:
        BadRequest: If user_id is malformed or the sort options are unknown
    """
    stmt = (
        select(*VIDEO_COLUMNS, *OWNER_COLUMNS)
        .select_from(Video)
        .join(User, User.id == Video.owner_id)
        .where(Video.is_published.is_(True))
    )

    if query and query.strip():
        term = query.strip()
        stmt = stmt.where(
            or_(
                Video.title.icontains(term, autoescape=True),
                Video.description.icontains(term, autoescape=True),
            )
        )

    if user_id:
        stmt = stmt.where(Video.owner_id == crud.parse_id(user_id, "userId"))

    sort_column = SORT_FIELDS.get(sort_by or "createdAt")
    if sort_column is None:
        raise BadRequest(f"sortBy must be one of: {', '.join(SORT_FIELDS)}")
    direction = (sort_type or "desc").lower()
    if direction not in ("asc", "desc"):
        raise BadRequest("sortType must be asc or desc")
    order = asc if direction == "asc" else desc
    stmt = stmt.order_by(order(sort_column), order(Video.id))

    return await paginate(db, stmt, page, limit, _list_item)


async def get_video_detail(
    db: AsyncSession, video_id: str, viewer_id: str | None = None
) -> VideoDetail:
    """
    Fetch one video with its like count, the viewer's like, and channel info.

    Each call counts as a view: the counter is incremented atomically and the
    video is added to the viewer's watch history (at most once). Unpublished
    videos are only visible to their owner.

    Raises:
        BadRequest: If video_id is malformed
        NotFound: If the video does not exist or is not visible to the viewer
    """
    vid = crud.parse_id(video_id, "videoId")

    visible = Video.is_published.is_(True)
    if viewer_id is not None:
        visible = or_(visible, Video.owner_id == viewer_id)

    # The guarded increment doubles as the existence and visibility check
    if not await crud.increment_views(db, vid, visible):
        await db.rollback()
        raise NotFound("Video not found")

    if viewer_id is not None:
        await crud.add_to_watch_history(db, viewer_id, vid)
    await crud.commit_or_fail(db, "record the view")

    stmt = (
        select(
            *VIDEO_COLUMNS,
            likes_count("video_id", Video.id).label("likes_count"),
            is_liked("video_id", Video.id, viewer_id).label("is_liked"),
            *OWNER_COLUMNS,
            subscribers_count(User.id).label("owner_subscribers_count"),
            is_subscribed(User.id, viewer_id).label("owner_is_subscribed"),
        )
        .select_from(Video)
        .join(User, User.id == Video.owner_id)
        .where(Video.id == vid)
    )
    row = (await db.execute(stmt)).one_or_none()
    if row is None:
        # Deleted between the view update and the read
        raise NotFound("Video not found")

    owner = owner_from_row(row)
    return VideoDetail(
        id=row.id,
        title=row.title,
        description=row.description,
        duration=row.duration,
        views=row.views,
        is_published=row.is_published,
        video_file_url=row.video_file_url,
        thumbnail_url=row.thumbnail_url,
        created_at=row.created_at,
        likes_count=row.likes_count,
        is_liked=row.is_liked,
        owner=ChannelOwner(
            **owner.model_dump(),
            subscribers_count=row.owner_subscribers_count,
            is_subscribed=row.owner_is_subscribed,
        ),
    )
