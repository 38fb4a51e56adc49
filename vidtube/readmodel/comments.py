"""Comment listing for a video."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Comment, User, Video
from vidtube.readmodel.common import OWNER_COLUMNS, is_liked, likes_count, owner_from_row
from vidtube.readmodel.pagination import Page, paginate
from vidtube.schemas import CommentItem


def _item(row) -> CommentItem:
    return CommentItem(
        id=row.id,
        content=row.content,
        created_at=row.created_at,
        updated_at=row.updated_at,
        likes_count=row.likes_count,
        is_liked=row.is_liked,
        owner=owner_from_row(row),
    )


async def list_video_comments(
    db: AsyncSession,
    video_id: str,
    page: int = 1,
    limit: int = 10,
    viewer_id: str | None = None,
) -> Page[CommentItem]:
    """Newest-first comments on a video with author, like count and the viewer's like."""
    vid = crud.parse_id(video_id, "videoId")
    await crud.get_or_404(db, Video, vid, "Video")

    stmt = (
        select(
            Comment.id,
            Comment.content,
            Comment.created_at,
            Comment.updated_at,
            Comment.owner_id,
            likes_count("comment_id", Comment.id).label("likes_count"),
            is_liked("comment_id", Comment.id, viewer_id).label("is_liked"),
            *OWNER_COLUMNS,
        )
        .select_from(Comment)
        .join(User, User.id == Comment.owner_id)
        .where(Comment.video_id == vid)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return await paginate(db, stmt, page, limit, _item)
