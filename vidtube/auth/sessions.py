"""Session lifecycle: login, logout and refresh-token rotation."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.auth.security import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    load_encryption_key,
    matches_stored_refresh_token,
    seal_refresh_token,
    verify_password,
)
from vidtube.config import Settings
from vidtube.db import crud
from vidtube.db.models import User
from vidtube.errors import BadRequest, NotFound, Unauthorized, UnexpectedError
from vidtube.schemas import LoginResult, TokenPair, UserOut

logger = logging.getLogger(__name__)


def _sealing_key(settings: Settings) -> bytes:
    try:
        return load_encryption_key(settings.token_enc_key)
    except ValueError:
        logger.error("Invalid encryption key configuration", exc_info=True)
        raise UnexpectedError("Service configuration error")


async def issue_token_pair(db: AsyncSession, settings: Settings, user: User) -> TokenPair:
    """Create a fresh access/refresh pair and store the sealed refresh token.

    Storing the new refresh token replaces the previous one, so any token
    issued before this call can no longer be exchanged.
    """
    key = _sealing_key(settings)
    access_token = create_access_token(
        user, settings.access_token_secret, settings.access_token_expiry_minutes
    )
    refresh_token = create_refresh_token(
        user, settings.refresh_token_secret, settings.refresh_token_expiry_days
    )

    user.refresh_token_enc = seal_refresh_token(key, refresh_token)
    await crud.commit_or_fail(db, "start the session")
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


async def login(
    db: AsyncSession,
    settings: Settings,
    username: str | None,
    email: str | None,
    password: str | None,
) -> LoginResult:
    """
    Verify credentials and open a session.

    Args:
        db: Database session
        settings: Application settings (secrets and expiry)
        username: Login name; either this or email must be given
        email: Login email
        password: Plaintext password

    Returns:
        The user and both tokens

    Raises:
        BadRequest: If neither username nor email is given
        NotFound: If no user matches
        Unauthorized: If the password is wrong
    """
    if not (username and username.strip()) and not (email and email.strip()):
        raise BadRequest("username or email is required")

    user = await crud.get_user_by_login(db, username, email)
    if user is None:
        raise NotFound("User does not exist")

    if not verify_password(user, password):
        logger.warning(f"Failed login attempt: user_id={user.id}")
        raise Unauthorized("Invalid user credentials")

    pair = await issue_token_pair(db, settings, user)
    logger.info(f"User logged in: user_id={user.id}")
    return LoginResult(
        user=UserOut.model_validate(user),
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
    )


async def logout(db: AsyncSession, user: User) -> None:
    """Forget the stored refresh token so it can no longer be exchanged."""
    user.refresh_token_enc = None
    await crud.commit_or_fail(db, "log out")
    logger.info(f"User logged out: user_id={user.id}")


async def refresh_session(
    db: AsyncSession, settings: Settings, token: str | None
) -> TokenPair:
    """
    Exchange a refresh token for a new pair (rotation).

    The token must verify, belong to an existing user, and equal the copy
    stored for that user; a token that was already rotated out is rejected.

    Raises:
        Unauthorized: If any of the checks fail
    """
    if not token:
        raise Unauthorized("Unauthorized request")

    user_id = decode_token(token, settings.refresh_token_secret, REFRESH)
    if not user_id:
        logger.info("Refresh rejected: invalid or expired token")
        raise Unauthorized("Invalid refresh token")

    user = await crud.get_user_by_id(db, user_id)
    if user is None:
        logger.info(f"Refresh rejected: unknown user_id={user_id}")
        raise Unauthorized("Invalid refresh token")

    if not matches_stored_refresh_token(_sealing_key(settings), user, token):
        logger.warning(f"Refresh rejected: token reuse for user_id={user.id}")
        raise Unauthorized("Refresh token is expired or used")

    return await issue_token_pair(db, settings, user)
