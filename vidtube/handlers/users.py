"""Account mutations: registration, password, profile details and images."""

import logging
from pathlib import Path

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.auth.security import hash_password, verify_password
from vidtube.db import crud
from vidtube.db.models import User
from vidtube.errors import BadRequest, Conflict
from vidtube.handlers.common import discard_assets, upload_or_fail
from vidtube.media.client import MediaAsset, MediaHostClient
from vidtube.schemas import UserOut

logger = logging.getLogger(__name__)


def _check_email(email: str) -> str:
    email = email.lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise BadRequest("email is invalid")
    return email


async def register_user(
    db: AsyncSession,
    media: MediaHostClient,
    username: str | None,
    email: str | None,
    full_name: str | None,
    password: str | None,
    avatar_path: Path | None,
    cover_image_path: Path | None = None,
) -> UserOut:
    """
    Create an account with an avatar and an optional cover image.

    Uniqueness of username and email is decided by the database constraint,
    not by a prior lookup; a clash removes the freshly uploaded images.

    Raises:
        BadRequest: If a field is blank or the avatar is missing
        Conflict: If the username or email is taken
        UnexpectedError: If an upload or the insert fails
    """
    fields = crud.require_text(
        username=username, email=email, fullName=full_name, password=password
    )
    email = _check_email(fields["email"])
    if avatar_path is None:
        raise BadRequest("avatar is required")

    avatar = await upload_or_fail(media, avatar_path, "avatar")
    cover: MediaAsset | None = None
    if cover_image_path is not None:
        try:
            cover = await upload_or_fail(media, cover_image_path, "cover image")
        except Exception:
            await discard_assets(media, avatar)
            raise

    user = User(
        username=fields["username"].lower(),
        email=email,
        full_name=fields["fullName"],
        password=hash_password(fields["password"]),
        avatar_public_id=avatar.public_id,
        avatar_url=avatar.url,
        cover_image_public_id=cover.public_id if cover else None,
        cover_image_url=cover.url if cover else None,
    )
    db.add(user)
    try:
        await crud.commit_or_fail(db, "create the user")
    except IntegrityError:
        await discard_assets(media, avatar, cover)
        raise Conflict("User with this username or email already exists")
    except Exception:
        await discard_assets(media, avatar, cover)
        raise

    logger.info(f"User registered: user_id={user.id}, username={user.username}")
    return UserOut.model_validate(user)


async def change_password(
    db: AsyncSession, user: User, old_password: str | None, new_password: str | None
) -> None:
    """Replace the password after the current one has been verified."""
    if not verify_password(user, old_password):
        raise BadRequest("Incorrect password")
    fields = crud.require_text(newPassword=new_password)

    user.password = hash_password(fields["newPassword"])
    await crud.commit_or_fail(db, "change the password")
    logger.info(f"Password changed: user_id={user.id}")


async def update_account_details(
    db: AsyncSession, user: User, full_name: str | None, email: str | None
) -> UserOut:
    fields = crud.require_text(fullName=full_name, email=email)

    user.full_name = fields["fullName"]
    user.email = _check_email(fields["email"])
    try:
        await crud.commit_or_fail(db, "update the account")
    except IntegrityError:
        raise Conflict("Email is already in use")
    return UserOut.model_validate(user)


async def _replace_image(
    db: AsyncSession,
    media: MediaHostClient,
    user: User,
    path: Path | None,
    field: str,
    label: str,
) -> UserOut:
    """Upload a new profile image, store it, then drop the previous remote copy."""
    if path is None:
        raise BadRequest(f"{label} file is required")

    asset = await upload_or_fail(media, path, label)
    previous = getattr(user, f"{field}_public_id")

    setattr(user, f"{field}_public_id", asset.public_id)
    setattr(user, f"{field}_url", asset.url)
    try:
        await crud.commit_or_fail(db, f"update the {label}")
    except Exception:
        await discard_assets(media, asset)
        raise

    # Only after the row points at the new asset
    if previous:
        await media.delete(previous)
    return UserOut.model_validate(user)


async def update_avatar(
    db: AsyncSession, media: MediaHostClient, user: User, path: Path | None
) -> UserOut:
    return await _replace_image(db, media, user, path, "avatar", "avatar")


async def update_cover_image(
    db: AsyncSession, media: MediaHostClient, user: User, path: Path | None
) -> UserOut:
    return await _replace_image(db, media, user, path, "cover_image", "cover image")
