"""Subscription toggle."""

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Subscription, User
from vidtube.errors import BadRequest
from vidtube.schemas import SubscriptionState


async def toggle_subscription(
    db: AsyncSession, caller: User, channel_id: str
) -> SubscriptionState:
    """Follow the channel if not yet followed, otherwise unfollow it."""
    cid = crud.parse_id(channel_id, "channelId")
    if cid == caller.id:
        raise BadRequest("You cannot subscribe to your own channel")
    await crud.get_or_404(db, User, cid, "Channel")

    subscribed = await crud.toggle_row(
        db, Subscription, subscriber_id=caller.id, channel_id=cid
    )
    await crud.commit_or_fail(db, "toggle the subscription")
    return SubscriptionState(is_subscribed=subscribed)
