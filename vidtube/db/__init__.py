"""Database module for VidTube."""

from vidtube.db.models import (
    Base,
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
from vidtube.db.session import get_engine, get_session, get_sessionmaker, init_db

__all__ = [
    "Base",
    "Comment",
    "Like",
    "Playlist",
    "PlaylistVideo",
    "Subscription",
    "Tweet",
    "User",
    "Video",
    "WatchHistoryEntry",
    "get_session",
    "get_engine",
    "get_sessionmaker",
    "init_db",
]
