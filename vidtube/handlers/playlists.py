"""Playlist mutations. Every operation is restricted to the playlist owner."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Playlist, PlaylistVideo, User, Video
from vidtube.handlers.common import ensure_owner
from vidtube.schemas import PlaylistOut

logger = logging.getLogger(__name__)


async def _playlist_out(db: AsyncSession, playlist: Playlist) -> PlaylistOut:
    """Playlist fields plus member video ids in insertion order."""
    result = await db.execute(
        select(PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id == playlist.id)
        .order_by(PlaylistVideo.created_at, PlaylistVideo.id)
    )
    return PlaylistOut(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner_id=playlist.owner_id,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        videos=list(result.scalars()),
    )


async def _owned_playlist(
    db: AsyncSession, caller: User, playlist_id: str, action: str
) -> Playlist:
    pid = crud.parse_id(playlist_id, "playlistId")
    playlist = await crud.get_or_404(db, Playlist, pid, "Playlist")
    ensure_owner(playlist.owner_id, caller.id, action)
    return playlist


async def create_playlist(
    db: AsyncSession, caller: User, name: str | None, description: str | None
) -> PlaylistOut:
    fields = crud.require_text(name=name, description=description)
    playlist = Playlist(
        name=fields["name"], description=fields["description"], owner_id=caller.id
    )
    db.add(playlist)
    await crud.commit_or_fail(db, "create the playlist")
    return PlaylistOut.model_validate(playlist)


async def update_playlist(
    db: AsyncSession,
    caller: User,
    playlist_id: str,
    name: str | None,
    description: str | None,
) -> PlaylistOut:
    fields = crud.require_text(name=name, description=description)
    playlist = await _owned_playlist(db, caller, playlist_id, "update this playlist")

    playlist.name = fields["name"]
    playlist.description = fields["description"]
    await crud.commit_or_fail(db, "update the playlist")
    return await _playlist_out(db, playlist)


async def delete_playlist(db: AsyncSession, caller: User, playlist_id: str) -> str:
    playlist = await _owned_playlist(db, caller, playlist_id, "delete this playlist")

    await crud.delete_where(db, PlaylistVideo, PlaylistVideo.playlist_id == playlist.id)
    await crud.delete_where(db, Playlist, Playlist.id == playlist.id)
    await crud.commit_or_fail(db, "delete the playlist")
    return playlist.id


async def add_video_to_playlist(
    db: AsyncSession, caller: User, video_id: str, playlist_id: str
) -> PlaylistOut:
    """Add a video to a playlist; adding one that is already there is a no-op."""
    vid = crud.parse_id(video_id, "videoId")
    playlist = await _owned_playlist(db, caller, playlist_id, "add videos to this playlist")
    await crud.get_or_404(db, Video, vid, "Video")

    await crud.insert_if_absent(db, PlaylistVideo, playlist_id=playlist.id, video_id=vid)
    await crud.commit_or_fail(db, "add the video to the playlist")
    return await _playlist_out(db, playlist)


async def remove_video_from_playlist(
    db: AsyncSession, caller: User, video_id: str, playlist_id: str
) -> PlaylistOut:
    """Remove a video from a playlist; removing one that is absent is a no-op."""
    vid = crud.parse_id(video_id, "videoId")
    playlist = await _owned_playlist(
        db, caller, playlist_id, "remove videos from this playlist"
    )

    await crud.delete_where(
        db,
        PlaylistVideo,
        PlaylistVideo.playlist_id == playlist.id,
        PlaylistVideo.video_id == vid,
    )
    await crud.commit_or_fail(db, "remove the video from the playlist")
    return await _playlist_out(db, playlist)
