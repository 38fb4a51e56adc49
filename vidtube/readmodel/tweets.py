"""Tweet listing for a user."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Tweet, User
from vidtube.readmodel.common import OWNER_COLUMNS, is_liked, likes_count, owner_from_row
from vidtube.schemas import TweetItem


async def list_user_tweets(
    db: AsyncSession, user_id: str, viewer_id: str | None = None
) -> list[TweetItem]:
    """All tweets of a user, newest first, with like count and the viewer's like."""
    uid = crud.parse_id(user_id, "userId")
    await crud.get_or_404(db, User, uid, "User")

    stmt = (
        select(
            Tweet.id,
            Tweet.content,
            Tweet.created_at,
            Tweet.updated_at,
            Tweet.owner_id,
            likes_count("tweet_id", Tweet.id).label("likes_count"),
            is_liked("tweet_id", Tweet.id, viewer_id).label("is_liked"),
            *OWNER_COLUMNS,
        )
        .select_from(Tweet)
        .join(User, User.id == Tweet.owner_id)
        .where(Tweet.owner_id == uid)
        .order_by(Tweet.created_at.desc(), Tweet.id.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [
        TweetItem(
            id=row.id,
            content=row.content,
            created_at=row.created_at,
            updated_at=row.updated_at,
            likes_count=row.likes_count,
            is_liked=row.is_liked,
            owner=owner_from_row(row),
        )
        for row in rows
    ]
