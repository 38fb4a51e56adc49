"""Tweet mutations."""

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Like, Tweet, User
from vidtube.handlers.common import ensure_owner
from vidtube.schemas import TweetOut


async def create_tweet(db: AsyncSession, caller: User, content: str | None) -> TweetOut:
    fields = crud.require_text(content=content)
    tweet = Tweet(content=fields["content"], owner_id=caller.id)
    db.add(tweet)
    await crud.commit_or_fail(db, "create the tweet")
    return TweetOut.model_validate(tweet)


async def update_tweet(
    db: AsyncSession, caller: User, tweet_id: str, content: str | None
) -> TweetOut:
    fields = crud.require_text(content=content)
    tid = crud.parse_id(tweet_id, "tweetId")
    tweet = await crud.get_or_404(db, Tweet, tid, "Tweet")
    ensure_owner(tweet.owner_id, caller.id, "edit this tweet")

    tweet.content = fields["content"]
    await crud.commit_or_fail(db, "update the tweet")
    return TweetOut.model_validate(tweet)


async def delete_tweet(db: AsyncSession, caller: User, tweet_id: str) -> str:
    """Delete a tweet and its likes; returns its id."""
    tid = crud.parse_id(tweet_id, "tweetId")
    tweet = await crud.get_or_404(db, Tweet, tid, "Tweet")
    ensure_owner(tweet.owner_id, caller.id, "delete this tweet")

    await crud.delete_where(db, Like, Like.tweet_id == tid)
    await crud.delete_where(db, Tweet, Tweet.id == tid)
    await crud.commit_or_fail(db, "delete the tweet")
    return tid
