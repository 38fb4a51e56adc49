"""Subscriber and subscription listings."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Subscription, User
from vidtube.readmodel.common import is_subscribed, subscribers_count
from vidtube.schemas import ChannelItem


def _listing(join_on, filter_on, user_id: str, viewer_id: str | None):
    return (
        select(
            User.id,
            User.username,
            User.full_name,
            User.avatar_url,
            subscribers_count(User.id).label("subscribers_count"),
            is_subscribed(User.id, viewer_id).label("is_subscribed"),
            Subscription.created_at.label("subscribed_at"),
        )
        .select_from(Subscription)
        .join(User, User.id == join_on)
        .where(filter_on == user_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
    )


async def list_channel_subscribers(
    db: AsyncSession, channel_id: str, viewer_id: str | None = None
) -> list[ChannelItem]:
    """Users following a channel; ``isSubscribed`` says whether the viewer follows each."""
    cid = crud.parse_id(channel_id, "channelId")
    await crud.get_or_404(db, User, cid, "Channel")
    stmt = _listing(Subscription.subscriber_id, Subscription.channel_id, cid, viewer_id)
    return [ChannelItem(**row._mapping) for row in (await db.execute(stmt)).all()]


async def list_subscribed_channels(
    db: AsyncSession, subscriber_id: str, viewer_id: str | None = None
) -> list[ChannelItem]:
    """Channels a user follows."""
    sid = crud.parse_id(subscriber_id, "subscriberId")
    await crud.get_or_404(db, User, sid, "User")
    stmt = _listing(Subscription.channel_id, Subscription.subscriber_id, sid, viewer_id)
    return [ChannelItem(**row._mapping) for row in (await db.execute(stmt)).all()]
