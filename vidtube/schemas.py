"""Pydantic models for request bodies and projected responses.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Request bodies


class LoginRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str | None = None
    new_password: str | None = None


class AccountUpdateRequest(CamelModel):
    full_name: str | None = None
    email: str | None = None


class ContentRequest(CamelModel):
    """Body for comments and tweets."""

    content: str | None = None


class PlaylistRequest(CamelModel):
    name: str | None = None
    description: str | None = None


# Users


class UserOut(CamelModel):
    """Public account fields; password and refresh token are never included."""

    id: str
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class OwnerSnippet(CamelModel):
    id: str
    username: str
    full_name: str | None = None
    avatar_url: str | None = None


class ChannelOwner(OwnerSnippet):
    subscribers_count: int
    is_subscribed: bool


class ChannelProfile(CamelModel):
    id: str
    username: str
    full_name: str
    email: str
    avatar_url: str
    cover_image_url: str | None = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class ChannelItem(CamelModel):
    """A user in a subscriber/subscription listing."""

    id: str
    username: str
    full_name: str
    avatar_url: str
    subscribers_count: int
    is_subscribed: bool
    subscribed_at: datetime


class LoginResult(CamelModel):
    user: UserOut
    access_token: str
    refresh_token: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


# Videos


class VideoOut(CamelModel):
    id: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    video_file_url: str
    thumbnail_url: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class VideoListItem(VideoOut):
    owner: OwnerSnippet


class VideoDetail(CamelModel):
    id: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    video_file_url: str
    thumbnail_url: str
    created_at: datetime
    likes_count: int
    is_liked: bool
    owner: ChannelOwner


class LikedVideoItem(VideoListItem):
    liked_at: datetime


class WatchedVideoItem(VideoListItem):
    watched_at: datetime


class PublishState(CamelModel):
    is_published: bool


# Comments, tweets, likes


class CommentOut(CamelModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CommentItem(CamelModel):
    id: str
    content: str
    created_at: datetime
    updated_at: datetime
    likes_count: int
    is_liked: bool
    owner: OwnerSnippet


class TweetOut(CamelModel):
    id: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class TweetItem(CommentItem):
    pass


class LikeState(CamelModel):
    is_liked: bool


class SubscriptionState(CamelModel):
    is_subscribed: bool


# Playlists


class PlaylistOut(CamelModel):
    id: str
    name: str
    description: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    videos: list[str] = []


class PlaylistSummary(CamelModel):
    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    total_videos: int
    total_views: int


class PlaylistVideoItem(CamelModel):
    id: str
    title: str
    description: str
    duration: float
    views: int
    video_file_url: str
    thumbnail_url: str
    created_at: datetime


class PlaylistDetail(PlaylistSummary):
    owner: OwnerSnippet
    videos: list[PlaylistVideoItem]
