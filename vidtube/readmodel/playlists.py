"""Playlist summaries and the playlist detail view.

Only published videos count towards totals or appear in a playlist.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db import crud
from vidtube.db.models import Playlist, PlaylistVideo, User, Video
from vidtube.errors import NotFound
from vidtube.readmodel.common import OWNER_COLUMNS, owner_from_row, playlist_totals
from vidtube.schemas import PlaylistDetail, PlaylistSummary, PlaylistVideoItem

PLAYLIST_COLUMNS = (
    Playlist.id,
    Playlist.name,
    Playlist.description,
    Playlist.created_at,
    Playlist.updated_at,
)


def _summary_fields(row) -> dict:
    fields = {column.key: getattr(row, column.key) for column in PLAYLIST_COLUMNS}
    fields["total_videos"] = row.total_videos
    fields["total_views"] = row.total_views
    return fields


async def list_user_playlists(db: AsyncSession, user_id: str) -> list[PlaylistSummary]:
    """A user's playlists, newest first, with video and view totals."""
    uid = crud.parse_id(user_id, "userId")
    await crud.get_or_404(db, User, uid, "User")

    total_videos, total_views = playlist_totals(Playlist.id)
    stmt = (
        select(
            *PLAYLIST_COLUMNS,
            total_videos.label("total_videos"),
            total_views.label("total_views"),
        )
        .where(Playlist.owner_id == uid)
        .order_by(Playlist.created_at.desc(), Playlist.id.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [PlaylistSummary(**_summary_fields(row)) for row in rows]


async def get_playlist_detail(db: AsyncSession, playlist_id: str) -> PlaylistDetail:
    """
    A playlist with its owner, totals and videos in the order they were added.

    One statement loads the header (with totals and owner) and one loads the
    member videos.

    Raises:
        BadRequest: If playlist_id is malformed
        NotFound: If the playlist does not exist
    """
    pid = crud.parse_id(playlist_id, "playlistId")

    total_videos, total_views = playlist_totals(Playlist.id)
    header_stmt = (
        select(
            *PLAYLIST_COLUMNS,
            Playlist.owner_id,
            total_videos.label("total_videos"),
            total_views.label("total_views"),
            *OWNER_COLUMNS,
        )
        .select_from(Playlist)
        .join(User, User.id == Playlist.owner_id)
        .where(Playlist.id == pid)
    )
    header = (await db.execute(header_stmt)).one_or_none()
    if header is None:
        raise NotFound("Playlist not found")

    videos_stmt = (
        select(
            Video.id,
            Video.title,
            Video.description,
            Video.duration,
            Video.views,
            Video.video_file_url,
            Video.thumbnail_url,
            Video.created_at,
        )
        .select_from(PlaylistVideo)
        .join(Video, Video.id == PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id == pid, Video.is_published.is_(True))
        .order_by(PlaylistVideo.created_at, PlaylistVideo.id)
    )
    videos = [
        PlaylistVideoItem(**row._mapping)
        for row in (await db.execute(videos_stmt)).all()
    ]

    return PlaylistDetail(
        **_summary_fields(header),
        owner=owner_from_row(header),
        videos=videos,
    )
