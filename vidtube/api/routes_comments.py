"""Comment endpoints for the VidTube API."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import limiter, pagination
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import optional_viewer, require_user
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers import comments as comment_handlers
from vidtube.readmodel.comments import list_video_comments
from vidtube.schemas import ContentRequest

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.get("/{video_id}")
@limiter.limit("120/minute")
async def get_video_comments(
    request: Request,
    video_id: str,
    paging: tuple[int, int] = Depends(pagination),
    viewer: User | None = Depends(optional_viewer),
    db: AsyncSession = Depends(get_session),
):
    page, limit = paging
    comments = await list_video_comments(
        db, video_id, page, limit, viewer.id if viewer else None
    )
    return api_response(comments, "Comments fetched successfully")


@router.post("/{video_id}")
@limiter.limit("30/minute")
async def add_comment(
    request: Request,
    video_id: str,
    body: ContentRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    comment = await comment_handlers.add_comment(db, user, video_id, body.content)
    return api_response(comment, "Comment added successfully", 201)


@router.patch("/c/{comment_id}")
@limiter.limit("30/minute")
async def update_comment(
    request: Request,
    comment_id: str,
    body: ContentRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    comment = await comment_handlers.update_comment(db, user, comment_id, body.content)
    return api_response(comment, "Comment updated successfully")


@router.delete("/c/{comment_id}")
@limiter.limit("30/minute")
async def delete_comment(
    request: Request,
    comment_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    deleted_id = await comment_handlers.delete_comment(db, user, comment_id)
    return api_response({"commentId": deleted_id}, "Comment deleted successfully")
