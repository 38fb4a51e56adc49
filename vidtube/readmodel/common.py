"""Column builders shared by the read models.

Counts are correlated COUNT subqueries and viewer flags are correlated EXISTS
subqueries, so each listing stays a single statement. Inner tables are always
aliased so they never correlate with the same table in the outer query.
"""

from sqlalchemy import ColumnElement, exists, false, func, select
from sqlalchemy.orm import aliased

from vidtube.db.models import Like, PlaylistVideo, Subscription, User, Video
from vidtube.schemas import OwnerSnippet


def likes_count(target: str, target_id) -> ColumnElement[int]:
    """Number of likes on a video, comment or tweet (``target`` is the FK column)."""
    like = aliased(Like)
    return (
        select(func.count(like.id))
        .where(getattr(like, target) == target_id)
        .scalar_subquery()
    )


def is_liked(target: str, target_id, viewer_id: str | None) -> ColumnElement[bool]:
    """Whether the viewer liked the target; always false for anonymous viewers."""
    if viewer_id is None:
        return false()
    like = aliased(Like)
    return exists().where(getattr(like, target) == target_id, like.liked_by_id == viewer_id)


def subscribers_count(channel_id) -> ColumnElement[int]:
    sub = aliased(Subscription)
    return select(func.count(sub.id)).where(sub.channel_id == channel_id).scalar_subquery()


def subscriptions_count(subscriber_id) -> ColumnElement[int]:
    sub = aliased(Subscription)
    return (
        select(func.count(sub.id)).where(sub.subscriber_id == subscriber_id).scalar_subquery()
    )


def is_subscribed(channel_id, viewer_id: str | None) -> ColumnElement[bool]:
    """Whether the viewer follows the channel."""
    if viewer_id is None:
        return false()
    sub = aliased(Subscription)
    return exists().where(sub.channel_id == channel_id, sub.subscriber_id == viewer_id)


def playlist_totals(playlist_id) -> tuple[ColumnElement[int], ColumnElement[int]]:
    """Published video count and summed views of a playlist."""
    member = aliased(PlaylistVideo)
    video = aliased(Video)

    def over_published(*columns):
        return (
            select(*columns)
            .select_from(member)
            .join(video, video.id == member.video_id)
            .where(member.playlist_id == playlist_id, video.is_published.is_(True))
            .scalar_subquery()
        )

    total_videos = over_published(func.count(member.id))
    total_views = over_published(func.coalesce(func.sum(video.views), 0))
    return total_videos, total_views


VIDEO_COLUMNS = (
    Video.id,
    Video.title,
    Video.description,
    Video.duration,
    Video.views,
    Video.is_published,
    Video.video_file_url,
    Video.thumbnail_url,
    Video.owner_id,
    Video.created_at,
    Video.updated_at,
)

OWNER_COLUMNS = (
    User.username.label("owner_username"),
    User.full_name.label("owner_full_name"),
    User.avatar_url.label("owner_avatar_url"),
)


def owner_from_row(row) -> OwnerSnippet:
    return OwnerSnippet(
        id=row.owner_id,
        username=row.owner_username,
        full_name=row.owner_full_name,
        avatar_url=row.owner_avatar_url,
    )


def video_fields(row) -> dict:
    return {column.key: getattr(row, column.key) for column in VIDEO_COLUMNS}
