"""Like toggles on videos, comments and tweets."""

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Comment, Like, Tweet, User, Video
from vidtube.schemas import LikeState

TARGETS = {
    "video_id": (Video, "videoId", "Video"),
    "comment_id": (Comment, "commentId", "Comment"),
    "tweet_id": (Tweet, "tweetId", "Tweet"),
}


async def _toggle(db: AsyncSession, caller: User, target: str, target_id: str) -> LikeState:
    model, param, label = TARGETS[target]
    tid = crud.parse_id(target_id, param)
    await crud.get_or_404(db, model, tid, label)

    liked = await crud.toggle_row(db, Like, **{target: tid, "liked_by_id": caller.id})
    await crud.commit_or_fail(db, "toggle the like")
    return LikeState(is_liked=liked)


async def toggle_video_like(db: AsyncSession, caller: User, video_id: str) -> LikeState:
    return await _toggle(db, caller, "video_id", video_id)


async def toggle_comment_like(db: AsyncSession, caller: User, comment_id: str) -> LikeState:
    return await _toggle(db, caller, "comment_id", comment_id)


async def toggle_tweet_like(db: AsyncSession, caller: User, tweet_id: str) -> LikeState:
    return await _toggle(db, caller, "tweet_id", tweet_id)
