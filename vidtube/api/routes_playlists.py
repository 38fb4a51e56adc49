"""Playlist endpoints for the VidTube API."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import limiter
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import require_user
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers import playlists as playlist_handlers
from vidtube.readmodel import playlists as playlist_reads
from vidtube.schemas import PlaylistRequest

router = APIRouter(prefix="/api/v1/playlist", tags=["playlists"])


@router.post("")
@limiter.limit("30/minute")
async def create_playlist(
    request: Request,
    body: PlaylistRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await playlist_handlers.create_playlist(db, user, body.name, body.description)
    return api_response(playlist, "Playlist created successfully", 201)


@router.get("/user/{user_id}")
@limiter.limit("120/minute")
async def get_user_playlists(
    request: Request,
    user_id: str,
    db: AsyncSession = Depends(get_session),
):
    playlists = await playlist_reads.list_user_playlists(db, user_id)
    return api_response(playlists, "Playlists fetched successfully")


@router.get("/{playlist_id}")
@limiter.limit("120/minute")
async def get_playlist(
    request: Request,
    playlist_id: str,
    db: AsyncSession = Depends(get_session),
):
    playlist = await playlist_reads.get_playlist_detail(db, playlist_id)
    return api_response(playlist, "Playlist fetched successfully")


@router.patch("/{playlist_id}")
@limiter.limit("30/minute")
async def update_playlist(
    request: Request,
    playlist_id: str,
    body: PlaylistRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await playlist_handlers.update_playlist(
        db, user, playlist_id, body.name, body.description
    )
    return api_response(playlist, "Playlist updated successfully")


@router.delete("/{playlist_id}")
@limiter.limit("30/minute")
async def delete_playlist(
    request: Request,
    playlist_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    deleted_id = await playlist_handlers.delete_playlist(db, user, playlist_id)
    return api_response({"playlistId": deleted_id}, "Playlist deleted successfully")


@router.patch("/add/{video_id}/{playlist_id}")
@limiter.limit("60/minute")
async def add_video_to_playlist(
    request: Request,
    video_id: str,
    playlist_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await playlist_handlers.add_video_to_playlist(db, user, video_id, playlist_id)
    return api_response(playlist, "Video added to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}")
@limiter.limit("60/minute")
async def remove_video_from_playlist(
    request: Request,
    video_id: str,
    playlist_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    playlist = await playlist_handlers.remove_video_from_playlist(
        db, user, video_id, playlist_id
    )
    return api_response(playlist, "Video removed from playlist successfully")
