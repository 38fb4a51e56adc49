"""Comment mutations."""

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Comment, Like, User, Video
from vidtube.handlers.common import ensure_owner
from vidtube.schemas import CommentOut


async def add_comment(
    db: AsyncSession, caller: User, video_id: str, content: str | None
) -> CommentOut:
    fields = crud.require_text(content=content)
    vid = crud.parse_id(video_id, "videoId")
    await crud.get_or_404(db, Video, vid, "Video")

    comment = Comment(content=fields["content"], video_id=vid, owner_id=caller.id)
    db.add(comment)
    await crud.commit_or_fail(db, "add the comment")
    return CommentOut.model_validate(comment)


async def update_comment(
    db: AsyncSession, caller: User, comment_id: str, content: str | None
) -> CommentOut:
    fields = crud.require_text(content=content)
    cid = crud.parse_id(comment_id, "commentId")
    comment = await crud.get_or_404(db, Comment, cid, "Comment")
    ensure_owner(comment.owner_id, caller.id, "edit this comment")

    comment.content = fields["content"]
    await crud.commit_or_fail(db, "update the comment")
    return CommentOut.model_validate(comment)


async def delete_comment(db: AsyncSession, caller: User, comment_id: str) -> str:
    """Delete a comment together with every like on it; returns its id."""
    cid = crud.parse_id(comment_id, "commentId")
    comment = await crud.get_or_404(db, Comment, cid, "Comment")
    ensure_owner(comment.owner_id, caller.id, "delete this comment")

    await crud.delete_where(db, Like, Like.comment_id == cid)
    await crud.delete_where(db, Comment, Comment.id == cid)
    await crud.commit_or_fail(db, "delete the comment")
    return cid
