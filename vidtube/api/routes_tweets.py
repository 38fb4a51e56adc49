"""Tweet endpoints for the VidTube API."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import limiter
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import optional_viewer, require_user
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers import tweets as tweet_handlers
from vidtube.readmodel.tweets import list_user_tweets
from vidtube.schemas import ContentRequest

router = APIRouter(prefix="/api/v1/tweets", tags=["tweets"])


@router.post("")
@limiter.limit("30/minute")
async def create_tweet(
    request: Request,
    body: ContentRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    tweet = await tweet_handlers.create_tweet(db, user, body.content)
    return api_response(tweet, "Tweet created successfully", 201)


@router.get("/user/{user_id}")
@limiter.limit("120/minute")
async def get_user_tweets(
    request: Request,
    user_id: str,
    viewer: User | None = Depends(optional_viewer),
    db: AsyncSession = Depends(get_session),
):
    tweets = await list_user_tweets(db, user_id, viewer.id if viewer else None)
    return api_response(tweets, "Tweets fetched successfully")


@router.patch("/{tweet_id}")
@limiter.limit("30/minute")
async def update_tweet(
    request: Request,
    tweet_id: str,
    body: ContentRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    tweet = await tweet_handlers.update_tweet(db, user, tweet_id, body.content)
    return api_response(tweet, "Tweet updated successfully")


@router.delete("/{tweet_id}")
@limiter.limit("30/minute")
async def delete_tweet(
    request: Request,
    tweet_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    deleted_id = await tweet_handlers.delete_tweet(db, user, tweet_id)
    return api_response({"tweetId": deleted_id}, "Tweet deleted successfully")
