"""Subscription endpoints for the VidTube API."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import limiter
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import optional_viewer, require_user
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers.subscriptions import toggle_subscription
from vidtube.readmodel import subscriptions as subscription_reads

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
@limiter.limit("60/minute")
async def toggle_channel_subscription(
    request: Request,
    channel_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    """Subscribe to a channel, or unsubscribe if already subscribed."""
    state = await toggle_subscription(db, user, channel_id)
    return api_response(state, "Subscription toggled successfully")


@router.get("/c/{channel_id}")
@limiter.limit("120/minute")
async def get_channel_subscribers(
    request: Request,
    channel_id: str,
    viewer: User | None = Depends(optional_viewer),
    db: AsyncSession = Depends(get_session),
):
    subscribers = await subscription_reads.list_channel_subscribers(
        db, channel_id, viewer.id if viewer else None
    )
    return api_response(subscribers, "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}")
@limiter.limit("120/minute")
async def get_subscribed_channels(
    request: Request,
    subscriber_id: str,
    viewer: User | None = Depends(optional_viewer),
    db: AsyncSession = Depends(get_session),
):
    channels = await subscription_reads.list_subscribed_channels(
        db, subscriber_id, viewer.id if viewer else None
    )
    return api_response(channels, "Subscribed channels fetched successfully")
