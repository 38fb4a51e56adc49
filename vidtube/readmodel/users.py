"""Channel profile and watch history views."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.models import User, Video, WatchHistoryEntry
from vidtube.errors import BadRequest, NotFound
from vidtube.readmodel.common import (
    OWNER_COLUMNS,
    VIDEO_COLUMNS,
    is_subscribed,
    owner_from_row,
    subscribers_count,
    subscriptions_count,
    video_fields,
)
from vidtube.schemas import ChannelProfile, WatchedVideoItem


async def get_channel_profile(
    db: AsyncSession, username: str, viewer_id: str | None = None
) -> ChannelProfile:
    """
    Public channel page for a username.

    Raises:
        BadRequest: If the username is blank
        NotFound: If no user has that username
    """
    if not username or not username.strip():
        raise BadRequest("username is required")

    stmt = select(
        User.id,
        User.username,
        User.full_name,
        User.email,
        User.avatar_url,
        User.cover_image_url,
        subscribers_count(User.id).label("subscribers_count"),
        subscriptions_count(User.id).label("channels_subscribed_to_count"),
        is_subscribed(User.id, viewer_id).label("is_subscribed"),
    ).where(User.username == username.strip().lower())

    row = (await db.execute(stmt)).one_or_none()
    if row is None:
        raise NotFound("Channel not found")
    return ChannelProfile(**row._mapping)


async def get_watch_history(db: AsyncSession, viewer_id: str) -> list[WatchedVideoItem]:
    """Videos the viewer has watched, most recently first-watched first."""
    stmt = (
        select(
            *VIDEO_COLUMNS,
            *OWNER_COLUMNS,
            WatchHistoryEntry.created_at.label("watched_at"),
        )
        .select_from(WatchHistoryEntry)
        .join(Video, Video.id == WatchHistoryEntry.video_id)
        .join(User, User.id == Video.owner_id)
        .where(
            WatchHistoryEntry.user_id == viewer_id,
            or_(Video.is_published.is_(True), Video.owner_id == viewer_id),
        )
        .order_by(WatchHistoryEntry.created_at.desc(), WatchHistoryEntry.id.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [
        WatchedVideoItem(
            **video_fields(row), owner=owner_from_row(row), watched_at=row.watched_at
        )
        for row in rows
    ]
