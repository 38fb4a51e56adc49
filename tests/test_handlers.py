"""Tests for the mutation handlers."""

import uuid

import pytest
from sqlalchemy import func, select

from vidtube.auth.security import verify_password
from vidtube.db.models import (
    Comment,
    Like,
    Playlist,
    PlaylistVideo,
    Subscription,
    Tweet,
    User,
    Video,
    WatchHistoryEntry,
)
from vidtube.errors import BadRequest, Conflict, Forbidden, NotFound, UnexpectedError
from vidtube.handlers import comments, likes, playlists, subscriptions, tweets, users, videos

from conftest import PASSWORD


@pytest.fixture
def staged(tmp_path):
    """Create a fake staged upload on disk."""

    def _staged(name: str):
        path = tmp_path / name
        path.write_bytes(b"data")
        return path

    return _staged


async def count(db, column, *criteria) -> int:
    return await db.scalar(select(func.count(column)).where(*criteria))


# Users


@pytest.mark.asyncio
async def test_register_user(db, media, staged):
    user = await users.register_user(
        db,
        media,
        username=" Ana ",
        email="A@X.com",
        full_name="Ana",
        password="p",
        avatar_path=staged("avatar.png"),
    )

    assert user.username == "ana"
    assert user.email == "a@x.com"
    assert user.avatar_url == "https://media.test/asset-1"
    assert user.cover_image_url is None
    stored = await db.get(User, user.id)
    assert stored.password != "p"
    assert verify_password(stored, "p")


@pytest.mark.asyncio
async def test_register_user_requires_avatar(db, media):
    with pytest.raises(BadRequest, match="avatar is required"):
        await users.register_user(db, media, "ana", "a@x.com", "Ana", "p", None)
    assert media.uploads == []


@pytest.mark.asyncio
async def test_register_user_rejects_bad_email(db, media, staged):
    with pytest.raises(BadRequest, match="email is invalid"):
        await users.register_user(
            db, media, "ana", "not-an-email", "Ana", "p", staged("a.png"), staged("c.png")
        )
    assert media.uploads == []
    assert media.deleted == []


@pytest.mark.asyncio
async def test_register_duplicate_discards_uploads(db, media, staged, make_user):
    await make_user("ana")

    with pytest.raises(Conflict):
        await users.register_user(
            db,
            media,
            "ana",
            "other@example.com",
            "Ana Two",
            "p",
            staged("avatar.png"),
            staged("cover.png"),
        )

    assert [public_id for public_id, _ in media.deleted] == ["asset-1", "asset-2"]
    assert await count(db, User.id) == 1


@pytest.mark.asyncio
async def test_register_upload_failure_is_unexpected(db, media, staged):
    media.fail_uploads = True
    with pytest.raises(UnexpectedError):
        await users.register_user(db, media, "ana", "a@x.com", "Ana", "p", staged("a.png"))
    assert await count(db, User.id) == 0


@pytest.mark.asyncio
async def test_change_password(db, make_user):
    created = await make_user("ana")
    user = await db.get(User, created.id)

    with pytest.raises(BadRequest, match="Incorrect password"):
        await users.change_password(db, user, "wrong", "new-pass")

    await users.change_password(db, user, PASSWORD, "new-pass")
    assert verify_password(user, "new-pass")
    assert not verify_password(user, PASSWORD)


@pytest.mark.asyncio
async def test_update_account_details_conflict(db, make_user):
    await make_user("ben")
    created = await make_user("ana")
    user = await db.get(User, created.id)

    updated = await users.update_account_details(db, user, " Ana Maria ", "ANA.M@example.com")
    assert updated.full_name == "Ana Maria"
    assert updated.email == "ana.m@example.com"

    user = await db.get(User, created.id)
    with pytest.raises(Conflict):
        await users.update_account_details(db, user, "Ana", "ben@example.com")


@pytest.mark.asyncio
async def test_update_avatar_deletes_previous_after_commit(db, media, staged, make_user):
    created = await make_user("ana")
    user = await db.get(User, created.id)

    updated = await users.update_avatar(db, media, user, staged("new.png"))

    assert updated.avatar_url == "https://media.test/asset-1"
    assert media.deleted == [("avatar-ana", "image")]


@pytest.mark.asyncio
async def test_update_cover_image_requires_file(db, media, make_user):
    created = await make_user("ana")
    user = await db.get(User, created.id)

    with pytest.raises(BadRequest, match="cover image file is required"):
        await users.update_cover_image(db, media, user, None)


# Videos


@pytest.mark.asyncio
async def test_publish_video_starts_unpublished(db, media, staged, make_user):
    owner = await make_user("ana")

    video = await videos.publish_video(
        db, media, owner, " Title ", "Desc", staged("clip.mp4"), staged("thumb.png")
    )

    assert video.title == "Title"
    assert video.is_published is False
    assert video.duration == 12.5
    assert video.views == 0
    assert video.owner_id == owner.id
    assert [kind for _, kind in media.uploads] == ["video", "image"]


@pytest.mark.asyncio
async def test_publish_video_requires_files(db, media, staged, make_user):
    owner = await make_user("ana")

    with pytest.raises(BadRequest, match="thumbnail is required"):
        await videos.publish_video(db, media, owner, "T", "D", staged("clip.mp4"), None)
    with pytest.raises(BadRequest, match="title is required"):
        await videos.publish_video(db, media, owner, " ", "D", staged("c.mp4"), staged("t.png"))
    assert media.uploads == []


@pytest.mark.asyncio
async def test_update_video_by_non_owner_is_forbidden(db, media, make_user, make_video):
    owner = await make_user("ana")
    intruder = await make_user("ben")
    video = await make_video(owner, title="Original")

    with pytest.raises(Forbidden):
        await videos.update_video(db, media, intruder, video.id, "Hacked", "Hacked")

    stored = await db.get(Video, video.id)
    assert stored.title == "Original"


@pytest.mark.asyncio
async def test_update_video_replaces_thumbnail(db, media, staged, make_user, make_video):
    owner = await make_user("ana")
    video = await make_video(owner, title="Original")

    updated = await videos.update_video(
        db, media, owner, video.id, "New title", "New description", staged("t.png")
    )

    assert updated.title == "New title"
    assert updated.thumbnail_url == "https://media.test/asset-1"
    assert media.deleted == [("thumb-Original", "image")]


@pytest.mark.asyncio
async def test_delete_video_cascades(db, media, make_user, make_video):
    owner = await make_user("ana")
    fan = await make_user("ben")
    video = await make_video(owner, title="Doomed")
    keeper = await make_video(owner, title="Keeper")
    comment = Comment(content="nice", video_id=video.id, owner_id=fan.id)
    playlist = Playlist(name="Mix", description="d", owner_id=fan.id)
    db.add_all([comment, playlist])
    await db.commit()
    db.add_all(
        [
            Like(video_id=video.id, liked_by_id=fan.id),
            Like(comment_id=comment.id, liked_by_id=owner.id),
            Like(video_id=keeper.id, liked_by_id=fan.id),
            PlaylistVideo(playlist_id=playlist.id, video_id=video.id),
            WatchHistoryEntry(user_id=fan.id, video_id=video.id),
        ]
    )
    await db.commit()

    await videos.delete_video(db, media, owner, video.id)

    assert await db.get(Video, video.id) is None
    assert await count(db, Comment.id) == 0
    assert await count(db, Like.id) == 1
    assert await count(db, PlaylistVideo.id) == 0
    assert await count(db, WatchHistoryEntry.id) == 0
    assert ("thumb-Doomed", "image") in media.deleted
    assert ("file-Doomed", "video") in media.deleted


@pytest.mark.asyncio
async def test_delete_video_by_non_owner_leaves_everything(db, media, make_user, make_video):
    owner = await make_user("ana")
    intruder = await make_user("ben")
    video = await make_video(owner)

    with pytest.raises(Forbidden):
        await videos.delete_video(db, media, intruder, video.id)

    assert await db.get(Video, video.id) is not None
    assert media.deleted == []


@pytest.mark.asyncio
async def test_toggle_publish_status(db, make_user, make_video):
    owner = await make_user("ana")
    video = await make_video(owner)

    assert (await videos.toggle_publish_status(db, owner, video.id)).is_published is False
    assert (await videos.toggle_publish_status(db, owner, video.id)).is_published is True

    with pytest.raises(NotFound):
        await videos.toggle_publish_status(db, owner, str(uuid.uuid4()))


# Comments


@pytest.mark.asyncio
async def test_comment_lifecycle(db, make_user, make_video):
    owner = await make_user("ana")
    other = await make_user("ben")
    video = await make_video(owner)

    comment = await comments.add_comment(db, other, video.id, "  great video ")
    assert comment.content == "great video"

    with pytest.raises(Forbidden):
        await comments.update_comment(db, owner, comment.id, "edited by owner of video")
    assert (await db.get(Comment, comment.id)).content == "great video"

    edited = await comments.update_comment(db, other, comment.id, "edited")
    assert edited.content == "edited"

    await likes.toggle_comment_like(db, owner, comment.id)
    assert await comments.delete_comment(db, other, comment.id) == comment.id
    assert await count(db, Comment.id) == 0
    assert await count(db, Like.id) == 0


@pytest.mark.asyncio
async def test_add_comment_validation(db, make_user):
    user = await make_user("ana")

    with pytest.raises(BadRequest, match="content is required"):
        await comments.add_comment(db, user, str(uuid.uuid4()), "   ")
    with pytest.raises(NotFound, match="Video not found"):
        await comments.add_comment(db, user, str(uuid.uuid4()), "hello")


# Likes


@pytest.mark.asyncio
async def test_toggle_like_twice_restores_state(db, make_user, make_video):
    user = await make_user("ana")
    video = await make_video(user)

    assert (await likes.toggle_video_like(db, user, video.id)).is_liked is True
    assert (await likes.toggle_video_like(db, user, video.id)).is_liked is False
    assert await count(db, Like.id) == 0


@pytest.mark.asyncio
async def test_toggle_tweet_like_and_missing_target(db, make_user):
    user = await make_user("ana")
    tweet = await tweets.create_tweet(db, user, "hi")

    assert (await likes.toggle_tweet_like(db, user, tweet.id)).is_liked is True
    assert await count(db, Like.id, Like.tweet_id == tweet.id) == 1

    with pytest.raises(NotFound, match="Comment not found"):
        await likes.toggle_comment_like(db, user, str(uuid.uuid4()))
    with pytest.raises(BadRequest, match="videoId is invalid"):
        await likes.toggle_video_like(db, user, "bad-id")


# Tweets


@pytest.mark.asyncio
async def test_tweet_lifecycle(db, make_user):
    author = await make_user("ana")
    other = await make_user("ben")

    tweet = await tweets.create_tweet(db, author, "first post")
    await likes.toggle_tweet_like(db, other, tweet.id)

    with pytest.raises(Forbidden):
        await tweets.delete_tweet(db, other, tweet.id)
    assert await db.get(Tweet, tweet.id) is not None

    assert (await tweets.update_tweet(db, author, tweet.id, "edited")).content == "edited"
    assert await tweets.delete_tweet(db, author, tweet.id) == tweet.id
    assert await count(db, Tweet.id) == 0
    assert await count(db, Like.id) == 0


# Playlists


@pytest.mark.asyncio
async def test_playlist_membership_is_a_set(db, make_user, make_video):
    owner = await make_user("ana")
    first = await make_video(owner, title="First")
    second = await make_video(owner, title="Second")

    playlist = await playlists.create_playlist(db, owner, "Mix", "Favourites")
    assert playlist.videos == []

    await playlists.add_video_to_playlist(db, owner, first.id, playlist.id)
    await playlists.add_video_to_playlist(db, owner, second.id, playlist.id)
    again = await playlists.add_video_to_playlist(db, owner, first.id, playlist.id)
    assert again.videos == [first.id, second.id]

    removed = await playlists.remove_video_from_playlist(db, owner, first.id, playlist.id)
    assert removed.videos == [second.id]
    removed_again = await playlists.remove_video_from_playlist(db, owner, first.id, playlist.id)
    assert removed_again.videos == [second.id]


@pytest.mark.asyncio
async def test_playlist_owner_only(db, make_user, make_video):
    owner = await make_user("ana")
    intruder = await make_user("ben")
    video = await make_video(intruder)
    playlist = await playlists.create_playlist(db, owner, "Mix", "Favourites")

    with pytest.raises(Forbidden):
        await playlists.add_video_to_playlist(db, intruder, video.id, playlist.id)
    with pytest.raises(Forbidden):
        await playlists.update_playlist(db, intruder, playlist.id, "Mine", "Now")
    with pytest.raises(Forbidden):
        await playlists.delete_playlist(db, intruder, playlist.id)

    stored = await db.get(Playlist, playlist.id)
    assert stored.name == "Mix"
    assert await count(db, PlaylistVideo.id) == 0


@pytest.mark.asyncio
async def test_playlist_update_and_delete(db, make_user, make_video):
    owner = await make_user("ana")
    video = await make_video(owner)
    playlist = await playlists.create_playlist(db, owner, "Mix", "Favourites")
    await playlists.add_video_to_playlist(db, owner, video.id, playlist.id)

    updated = await playlists.update_playlist(db, owner, playlist.id, "Renamed", "Still good")
    assert updated.name == "Renamed"
    assert updated.videos == [video.id]

    assert await playlists.delete_playlist(db, owner, playlist.id) == playlist.id
    assert await count(db, Playlist.id) == 0
    assert await count(db, PlaylistVideo.id) == 0


@pytest.mark.asyncio
async def test_add_missing_video_to_playlist(db, make_user):
    owner = await make_user("ana")
    playlist = await playlists.create_playlist(db, owner, "Mix", "Favourites")

    with pytest.raises(NotFound, match="Video not found"):
        await playlists.add_video_to_playlist(db, owner, str(uuid.uuid4()), playlist.id)


@pytest.mark.asyncio
async def test_create_playlist_requires_fields(db, make_user):
    owner = await make_user("ana")
    with pytest.raises(BadRequest, match="description is required"):
        await playlists.create_playlist(db, owner, "Mix", "")


# Subscriptions


@pytest.mark.asyncio
async def test_toggle_subscription(db, make_user):
    ana = await make_user("ana")
    ben = await make_user("ben")

    assert (await subscriptions.toggle_subscription(db, ana, ben.id)).is_subscribed is True
    assert await count(db, Subscription.id) == 1
    assert (await subscriptions.toggle_subscription(db, ana, ben.id)).is_subscribed is False
    assert await count(db, Subscription.id) == 0


@pytest.mark.asyncio
async def test_toggle_subscription_rejects_self_and_unknown(db, make_user):
    ana = await make_user("ana")

    with pytest.raises(BadRequest):
        await subscriptions.toggle_subscription(db, ana, ana.id)
    with pytest.raises(NotFound):
        await subscriptions.toggle_subscription(db, ana, str(uuid.uuid4()))
