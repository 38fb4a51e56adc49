"""Videos liked by the viewer."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.models import Like, User, Video
from vidtube.readmodel.common import OWNER_COLUMNS, VIDEO_COLUMNS, owner_from_row, video_fields
from vidtube.schemas import LikedVideoItem


async def list_liked_videos(db: AsyncSession, viewer_id: str) -> list[LikedVideoItem]:
    """Videos the viewer liked, most recently liked first.

    Unpublished videos are left out unless the viewer owns them.
    """
    stmt = (
        select(*VIDEO_COLUMNS, *OWNER_COLUMNS, Like.created_at.label("liked_at"))
        .select_from(Like)
        .join(Video, Video.id == Like.video_id)
        .join(User, User.id == Video.owner_id)
        .where(
            Like.liked_by_id == viewer_id,
            or_(Video.is_published.is_(True), Video.owner_id == viewer_id),
        )
        .order_by(Like.created_at.desc(), Like.id.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [
        LikedVideoItem(**video_fields(row), owner=owner_from_row(row), liked_at=row.liked_at)
        for row in rows
    ]
