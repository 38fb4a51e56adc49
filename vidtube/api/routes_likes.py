"""Like endpoints for the VidTube API."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import limiter
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import require_user
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers import likes as like_handlers
from vidtube.readmodel.likes import list_liked_videos

router = APIRouter(prefix="/api/v1/likes", tags=["likes"])


@router.post("/toggle/v/{video_id}")
@limiter.limit("60/minute")
async def toggle_video_like(
    request: Request,
    video_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    state = await like_handlers.toggle_video_like(db, user, video_id)
    return api_response(state, "Video like toggled successfully")


@router.post("/toggle/c/{comment_id}")
@limiter.limit("60/minute")
async def toggle_comment_like(
    request: Request,
    comment_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    state = await like_handlers.toggle_comment_like(db, user, comment_id)
    return api_response(state, "Comment like toggled successfully")


@router.post("/toggle/t/{tweet_id}")
@limiter.limit("60/minute")
async def toggle_tweet_like(
    request: Request,
    tweet_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    state = await like_handlers.toggle_tweet_like(db, user, tweet_id)
    return api_response(state, "Tweet like toggled successfully")


@router.get("/videos")
@limiter.limit("60/minute")
async def get_liked_videos(
    request: Request,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    """Videos the current user liked, most recent like first."""
    videos = await list_liked_videos(db, user.id)
    return api_response(videos, "Liked videos fetched successfully")
