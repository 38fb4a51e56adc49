"""Account and channel endpoints for the VidTube API."""

import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.dependencies import get_media_host, limiter, max_upload_bytes
from vidtube.api.responses import api_response
from vidtube.auth.dependencies import optional_viewer, require_user
from vidtube.config import get_settings
from vidtube.db.models import User
from vidtube.db.session import get_session
from vidtube.handlers import users as user_handlers
from vidtube.media import MediaHostClient, staged_uploads
from vidtube.readmodel import users as user_reads
from vidtube.schemas import AccountUpdateRequest, ChangePasswordRequest, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/change-password")
@limiter.limit("10/minute")
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    """Change the password after verifying the current one."""
    await user_handlers.change_password(db, user, body.old_password, body.new_password)
    return api_response({}, "Password changed successfully")


@router.get("/current-user")
@limiter.limit("60/minute")
async def get_current_user(request: Request, user: User = Depends(require_user)):
    """Get the current authenticated user's profile."""
    return api_response(UserOut.model_validate(user), "Current user fetched successfully")


@router.patch("/update-account")
@limiter.limit("20/minute")
async def update_account(
    request: Request,
    body: AccountUpdateRequest,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    updated = await user_handlers.update_account_details(db, user, body.full_name, body.email)
    return api_response(updated, "Account details updated successfully")


@router.patch("/avatar")
@limiter.limit("20/minute")
async def update_avatar(
    request: Request,
    avatar: UploadFile | None = File(None),
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
    media: MediaHostClient = Depends(get_media_host),
):
    """Replace the avatar; the previous image is removed from the media host."""
    async with staged_uploads(
        {"avatar": avatar}, get_settings().upload_tmp_dir, max_upload_bytes()
    ) as staged:
        updated = await user_handlers.update_avatar(db, media, user, staged["avatar"])
    return api_response(updated, "Avatar updated successfully")


@router.patch("/cover-image")
@limiter.limit("20/minute")
async def update_cover_image(
    request: Request,
    cover_image: UploadFile | None = File(None, alias="coverImage"),
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
    media: MediaHostClient = Depends(get_media_host),
):
    """Replace the cover image; the previous image is removed from the media host."""
    async with staged_uploads(
        {"coverImage": cover_image}, get_settings().upload_tmp_dir, max_upload_bytes()
    ) as staged:
        updated = await user_handlers.update_cover_image(
            db, media, user, staged["coverImage"]
        )
    return api_response(updated, "Cover image updated successfully")


@router.get("/c/{username}")
@limiter.limit("60/minute")
async def get_channel_profile(
    request: Request,
    username: str,
    viewer: User | None = Depends(optional_viewer),
    db: AsyncSession = Depends(get_session),
):
    """Public channel profile with subscriber counts and the viewer's subscription."""
    profile = await user_reads.get_channel_profile(
        db, username, viewer.id if viewer else None
    )
    return api_response(profile, "Channel fetched successfully")


@router.get("/history")
@limiter.limit("60/minute")
async def get_watch_history(
    request: Request,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_session),
):
    history = await user_reads.get_watch_history(db, user.id)
    return api_response(history, "Watch history fetched successfully")
